#!/usr/bin/env python

"Project meta information"


__version__ = "0.1.0"
__license__ = "LGPL 3"


name = "ninjasvg"
version = __version__
description = "Render parameterized SVG templates with inlined CSS."
long_description = """\
`ninjasvg` renders SVG templates kept in a storage backend. Each template's
embedded stylesheet is converted into presentation attributes on the
elements using its classes, ``%%STnn%%`` placeholders are replaced with
configured values and the result is wrapped in a fixed
``viewBox="0 0 1000 1000"`` envelope, ready to be embedded into HTML.


Features
++++++++

- inline class-based CSS rules as SVG attributes
- substitute ``%%ST1%%``-style placeholders
- read templates from the file system or from memory
- convert rendered templates to ReportLab drawings and PDF files
- install a Python command-line script named ``ninjasvg``


Examples
++++++++

    >>> from ninjasvg.components import SvgComponent
    >>> from ninjasvg.storage import FileSystemStorage
    >>>
    >>> component = SvgComponent("badge", {"ST1": "Alice"}, FileSystemStorage("assets"))
    >>> component.render()

From the command-line::

    $ ninjasvg -r assets -s ST1=Alice badge
    $ ninjasvg -r assets -f pdf -o "%(id)s.pdf" badge
"""
license = __license__
platforms = ["Posix", "Windows"]
keywords = ["svg", "css", "template", "reportlab", "PDF"]
package_dir = {"": "src"}
packages = ["ninjasvg"]
python_requires = ">=3.8"
entry_points = {"console_scripts": ["ninjasvg = ninjasvg:main"]}
extras_require = {"test": ["pytest"]}
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Text Processing :: Markup :: XML",
]

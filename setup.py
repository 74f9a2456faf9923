from os.path import dirname, join

from setuptools import setup

import metainfo

with open(join(dirname(__file__), "requirements.txt"), "r") as f:
    install_requires = f.read().strip().split()

setup(
    name=metainfo.name,
    version=metainfo.version,
    description=metainfo.description,
    long_description=metainfo.long_description,
    license=metainfo.license,
    platforms=metainfo.platforms,
    keywords=metainfo.keywords,
    classifiers=metainfo.classifiers,
    package_dir=metainfo.package_dir,
    packages=metainfo.packages,
    python_requires=metainfo.python_requires,
    entry_points=metainfo.entry_points,
    install_requires=install_requires,
    extras_require=metainfo.extras_require,
)

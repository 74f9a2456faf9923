"""A tool for rendering parameterized SVG templates.

This module provides high-level helpers around `ninjasvg.components` and
serves as the main entry point for the ninjasvg package.

The module includes:
- render_template(): Render one template to an SVG string.
- template2pdf(): Render one template and save it as a PDF file.
- main(): Command-line interface for rendering templates.
"""

import argparse
import logging
import sys
import textwrap
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from os.path import basename
from typing import Any, Dict, List, Mapping, Optional

from reportlab.graphics import renderPDF

from ninjasvg import components
from ninjasvg.storage import FileSystemStorage, TemplateStorage, default_storage

try:
    __version__ = version("ninjasvg")
except PackageNotFoundError:
    __version__ = "unknown"

FORMATS = ("svg", "pdf")


def make_component(
    inscription_id: str,
    config: Optional[Mapping[str, Any]] = None,
    storage: Optional[TemplateStorage] = None,
    module: bool = False,
) -> components.BaseSvgComponent:
    "Create a module renderer if `module` is set, else a component renderer."
    if module:
        return components.SvgModule(inscription_id, storage)
    return components.SvgComponent(inscription_id, config, storage)


def render_template(
    inscription_id: str,
    config: Optional[Mapping[str, Any]] = None,
    storage: Optional[TemplateStorage] = None,
    module: bool = False,
    background: bool = False,
) -> str:
    """Render a stored template to an SVG document.

    Examples:
        >>> render_template("badge", {"ST1": "Alice"})  # doctest: +SKIP
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 1000 1000">...'
    """
    component = make_component(inscription_id, config, storage, module)
    return component.render(background)


def template2pdf(
    inscription_id: str,
    output_path: str,
    config: Optional[Mapping[str, Any]] = None,
    storage: Optional[TemplateStorage] = None,
    module: bool = False,
    background: bool = False,
) -> bool:
    """Render a stored template and save it as a PDF file.

    Args:
        inscription_id: Name of the template, without the ``.svg`` suffix.
        output_path: Path of the PDF file to write. Existing files are
            overwritten.
        config: Placeholder values under ``STnn`` keys.
        storage: Where to read the template from.
        module: Use the module renderer instead of the component renderer.
        background: Put the background rectangle behind the template.

    Returns:
        True if a PDF was written, False if the rendered SVG could not be
        converted to a drawing.
    """
    component = make_component(inscription_id, config, storage, module)
    drawing = component.to_drawing(background)
    if drawing is None:
        return False
    renderPDF.drawToFile(drawing, output_path, showBoundary=0)
    return True


def output_path_for(inscription_id: str, pattern: str, format: str) -> str:
    """Expand an output path pattern for one template.

    Supports the placeholders ``id``, ``format`` and ``now`` in both the
    ``%(name)s`` and the ``{name}`` notation.
    """
    file_info = {"id": inscription_id, "format": format, "now": datetime.now()}
    out_path = pattern % file_info
    return out_path.format(**file_info)


def parse_settings(values: List[str]) -> Dict[str, str]:
    """Turn ``KEY=VALUE`` strings into a dict.

    Raises:
        ValueError: If a value has no ``=`` or an empty key.
    """
    config: Dict[str, str] = {}
    for value in values:
        key, sep, setting = value.partition("=")
        if not sep or not key:
            raise ValueError(f"expected KEY=VALUE, got {value!r}")
        config[key] = setting
    return config


# command-line usage stuff
def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    prog = basename(sys.argv[0])
    desc = f"{prog} v. {__version__}\n"
    desc += "Render parameterized SVG templates to SVG or PDF\n"
    epilog = textwrap.dedent(
        """\
        examples:
          # print the rendered component ROOT/ninja_components/badge.svg
          {prog} -r ROOT badge

          # fill in the placeholders %%ST1%% and %%ST2%%
          {prog} -s ST1=Alice -s ST2=Bob badge

          # render the module ROOT/ninja_modules/frame.svg to frame.pdf
          {prog} -m -f pdf frame

          # write badge.svg and logo.svg into out/
          {prog} -o "out/%(id)s.%(format)s" badge logo
        """.format(prog=prog)
    )
    p = argparse.ArgumentParser(
        description=desc,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    p.add_argument(
        "-v", "--version", help="Print version number and exit.", action="store_true"
    )

    p.add_argument(
        "--verbose", help="Log what happens while rendering.", action="store_true"
    )

    p.add_argument(
        "-r",
        "--root",
        metavar="DIR",
        help="Storage root holding the ninja_components/ and ninja_modules/ "
        "directories (default: $NINJASVG_STORAGE_ROOT or the current directory).",
    )

    p.add_argument(
        "-m",
        "--module",
        help="Render from ninja_modules/ without CSS inlining or placeholders.",
        action="store_true",
    )

    p.add_argument(
        "-b",
        "--background",
        help="Put the background rectangle behind the template.",
        action="store_true",
    )

    p.add_argument(
        "-s",
        "--set",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Placeholder value, e.g. ST1=Alice. May be given multiple times.",
    )

    p.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default="svg",
        help="Output format (default: svg).",
    )

    p.add_argument(
        "-o",
        "--output",
        metavar="PATH_PAT",
        help="Set output path (incl. the placeholders: id, format, now) in both, "
        "%%(name)s and {name} notations. SVG goes to stdout if not given.",
    )

    p.add_argument(
        "input",
        metavar="ID",
        nargs="*",
        help="Inscription id of a template, i.e. its file name without .svg.",
    )

    args = p.parse_args(argv)

    if args.version:
        print(__version__)
        sys.exit()

    if not args.input:
        p.print_usage()
        sys.exit()

    try:
        config = parse_settings(args.set)
    except ValueError as exc:
        p.error(str(exc))

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    storage = FileSystemStorage(args.root) if args.root else default_storage()
    out_pattern = args.output
    if out_pattern is None and args.format == "pdf":
        out_pattern = "%(id)s.%(format)s"

    for inscription_id in args.input:
        if args.format == "pdf":
            out_path = output_path_for(inscription_id, out_pattern, args.format)
            if not template2pdf(
                inscription_id,
                out_path,
                config,
                storage,
                module=args.module,
                background=args.background,
            ):
                print(f"Rendering {inscription_id} failed.", file=sys.stderr)
            continue

        svg = render_template(
            inscription_id,
            config,
            storage,
            module=args.module,
            background=args.background,
        )
        if out_pattern is None:
            print(svg)
        else:
            out_path = output_path_for(inscription_id, out_pattern, args.format)
            with open(out_path, "w", encoding="utf-8") as f:
                f.write(svg)

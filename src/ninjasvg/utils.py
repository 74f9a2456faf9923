"""Text passes for turning a stored SVG template into inline-styled markup.

This module provides the low-level, side-effect free functions used by the
components in this package. Every pass takes a string and returns a string
(or a string plus whatever it extracted), so a template is rendered by
applying them one after the other.

The module includes:
- Envelope stripping for the outer ``<svg>`` tags
- Extraction of the embedded ``<style type="text/css">`` element
- A minimal class-selector CSS rule parser
- Inlining of CSS declarations as presentation attributes
- ``%%STnn%%`` placeholder substitution and class attribute cleanup

None of the passes validate their input. Malformed markup or CSS is passed
through or dropped, never reported as an error.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

STYLE_OPEN_TAG = '<style type="text/css">'
STYLE_CLOSE_TAG = "</style>"

SVG_OPEN_TAG_PATTERN = re.compile(r"<svg[^>]*>")
SVG_CLOSE_TAG_PATTERN = re.compile(r"</svg>")
STYLE_ELEMENT_PATTERN = re.compile(
    r'<style\s+type="text/css">(.*?)</style>', re.DOTALL | re.IGNORECASE
)
# Written by some editors into every exported stylesheet, not a valid
# presentation attribute.
DEPRECATED_CSS_PATTERN = re.compile(r"enable-background:\s*new\s*;")
SELF_CLOSING_PATH_PATTERN = re.compile(r"<path[^>]*/>", re.DOTALL)
DECLARATION_SEPARATOR_PATTERN = re.compile(r"\s*;\s*")
PLACEHOLDER_KEY_PATTERN = re.compile(r"ST\d+")
CLASS_ATTRIBUTE_PATTERN = re.compile(r' class="st\d+"', re.IGNORECASE)
UNRESOLVED_PLACEHOLDER_PATTERN = re.compile(r"%%ST\d+%%")

CssRules = Dict[str, Dict[str, str]]


def strip_envelope(content: str) -> str:
    """Remove the outer ``<svg ...>`` open tag and ``</svg>`` close tag.

    Only the first occurrence of each tag is removed. Missing tags are
    tolerated, in which case the content is returned as it is.

    Examples:
        >>> strip_envelope('<svg viewBox="0 0 10 10"><rect/></svg>')
        '<rect/>'
    """
    content = SVG_OPEN_TAG_PATTERN.sub("", content, count=1)
    return SVG_CLOSE_TAG_PATTERN.sub("", content, count=1)


def extract_style_element(markup: str) -> Tuple[str, str]:
    """Cut the embedded stylesheet out of the inner markup.

    Every ``<style type="text/css">`` element is removed from the markup.
    The tag match is case-insensitive and may span several lines.

    Args:
        markup: Inner SVG markup, usually the output of `strip_envelope`.

    Returns:
        A tuple ``(markup, style_element)``. The markup is trimmed. The style
        element is the full text of the last matched element, tags
        included, with deprecated declarations removed, or an empty string
        when the markup has no stylesheet.
    """
    found: List[str] = []

    def _capture(match: "re.Match[str]") -> str:
        found.append(match.group(0))
        return ""

    markup = STYLE_ELEMENT_PATTERN.sub(_capture, markup).strip()
    if len(found) > 1:
        logger.debug(
            "Found %d style elements, keeping only the last one.", len(found)
        )
    style_element = found[-1] if found else ""
    return markup, remove_deprecated_css(style_element)


def remove_deprecated_css(style: str) -> str:
    "Drop ``enable-background: new;`` declarations from a stylesheet."
    return DEPRECATED_CSS_PATTERN.sub("", style)


def _between(subject: str, start: str, end: str) -> str:
    # Text after the first `start` and before the last `end`. A missing
    # marker leaves that side of the subject as it is.
    if start in subject:
        subject = subject.split(start, 1)[1]
    if end in subject:
        subject = subject[: subject.rindex(end)]
    return subject


def style_sheet_body(style_element: str) -> str:
    """Return the CSS text between the ``<style>`` tags of a style element."""
    return _between(style_element, STYLE_OPEN_TAG, STYLE_CLOSE_TAG).strip()


def parse_declarations(properties: str) -> Dict[str, str]:
    """Parse the body of a CSS rule into a property/value mapping.

    Declarations are separated by ``;`` and split once on the first ``:``.
    Neither names nor values are trimmed beyond the whitespace that
    surrounds the ``;`` separators. Declarations without a ``:`` are
    dropped. A property declared twice keeps its last value.
    """
    declarations: Dict[str, str] = {}
    for declaration in DECLARATION_SEPARATOR_PATTERN.split(properties):
        if not declaration.strip():
            continue
        parts = declaration.split(":", 1)
        if len(parts) != 2:
            logger.debug("Dropping malformed CSS declaration: %r", declaration)
            continue
        name, value = parts
        declarations[name] = value
    return declarations


def parse_css_rules(style_element: str) -> CssRules:
    """Parse the stylesheet of a style element into rules keyed by selector.

    The parser understands one rule form only, a class selector followed by
    a declaration block, e.g. ``.st0{fill:#FFFFFF;}``. Selector names are
    the selector text with leading dots stripped; anything else in the
    selector (combinators, pseudo-classes, ...) stays part of the name.

    Args:
        style_element: A full ``<style type="text/css">...</style>`` element
            as returned by `extract_style_element`.

    Returns:
        A dict mapping selector names to declaration dicts. Blocks without a
        ``{`` are dropped. A selector occurring in several rules keeps the
        declarations of the last rule only.

    Examples:
        >>> parse_css_rules('<style type="text/css">.foo{fill:#fff;}</style>')
        {'foo': {'fill': '#fff'}}
    """
    rules: CssRules = {}
    for block in style_sheet_body(style_element).split("}"):
        block = block.strip()
        if not block:
            continue
        rule_parts = block.split("{", 1)
        if len(rule_parts) != 2:
            logger.debug("Dropping CSS rule without a declaration block: %r", block)
            continue
        selector, properties = rule_parts
        rules[selector.lstrip(".")] = parse_declarations(properties)
    return rules


def css_rules_to_attribute_strings(rules: CssRules) -> Dict[str, str]:
    """Render each rule's declarations as an SVG attribute string.

    Examples:
        >>> css_rules_to_attribute_strings({"st0": {"fill": "red", "opacity": "0.5"}})
        {'st0': 'fill="red" opacity="0.5"'}
    """
    return {
        selector: " ".join(f'{name}="{value}"' for name, value in declarations.items())
        for selector, declarations in rules.items()
    }


def remove_newlines_from_paths(markup: str) -> str:
    """Join multi-line self-closing ``<path .../>`` elements onto one line.

    Line breaks of any flavour inside a path element become a single space.
    Line breaks outside path elements are kept.
    """

    def _flatten(match: "re.Match[str]") -> str:
        path = match.group(0)
        for newline in ("\r\n", "\n", "\r"):
            path = path.replace(newline, " ")
        return path

    return SELF_CLOSING_PATH_PATTERN.sub(_flatten, markup)


def inline_css_rules(markup: str, rules: CssRules) -> str:
    """Copy CSS declarations onto the elements that reference their class.

    For every element with an exact ``class="<selector>"`` attribute the
    declarations of that selector are inserted right after the class
    attribute. The class attribute itself is kept. Classes without a rule
    are left alone.

    Examples:
        >>> inline_css_rules('<path class="foo" d="M0 0"/>', {"foo": {"fill": "red"}})
        '<path class="foo" fill="red" d="M0 0"/>'
    """
    for selector, attributes in css_rules_to_attribute_strings(rules).items():
        pattern = re.compile('class="%s"([^>]*)' % re.escape(selector))
        head = f'class="{selector}" {attributes}'
        markup = pattern.sub(lambda match: head + match.group(1), markup)
    return markup


def parse_placeholders(config: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Map ``%%KEY%%`` tokens to their values for all ``STnn`` config keys.

    Keys not matching ``ST`` followed by digits are ignored.

    Examples:
        >>> parse_placeholders({"ST1": "Alice", "OTHER": "ignored"})
        {'%%ST1%%': 'Alice'}
    """
    if not config:
        return {}
    return {
        f"%%{key}%%": str(value)
        for key, value in config.items()
        if PLACEHOLDER_KEY_PATTERN.fullmatch(str(key))
    }


def replace_placeholders(markup: str, placeholders: Mapping[str, str]) -> str:
    """Substitute every placeholder token in the markup with its value.

    Values are inserted verbatim, without any escaping. Tokens without a
    configured value remain in the markup.
    """
    for placeholder, value in placeholders.items():
        markup = markup.replace(placeholder, value)
    return markup


def find_unresolved_placeholders(markup: str) -> List[str]:
    "Return the ``%%STnn%%`` tokens still present in the markup, in order."
    return UNRESOLVED_PLACEHOLDER_PATTERN.findall(markup)


def remove_class_attributes(markup: str) -> str:
    """Remove ``class="stNN"`` attributes, matched case-insensitively.

    Only class names of the ``st`` plus digits form are removed; elements
    with other class names keep their class attribute.
    """
    return CLASS_ATTRIBUTE_PATTERN.sub("", markup)

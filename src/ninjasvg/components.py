"""Renderable SVG components built from stored templates.

This module loads an SVG template from a storage backend, runs it through
the passes in `ninjasvg.utils` and wraps the result in a fixed envelope:

    <svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 1000 1000">...</svg>

Two renderers are provided. `SvgComponent` inlines the template's CSS
classes as attributes and substitutes ``%%STnn%%`` placeholders from a
config mapping. `SvgModule` only replaces the envelope.

Example:
    Rendering a component from templates below ``./assets``::

        from ninjasvg.components import SvgComponent
        from ninjasvg.storage import FileSystemStorage

        storage = FileSystemStorage("assets")
        svg = SvgComponent("badge", {"ST1": "Alice"}, storage).render()

All work happens when a renderer is constructed. Rendering afterwards is a
pure read, so a renderer can be rendered any number of times.
"""

import io
import logging
from typing import Any, Dict, Mapping, NamedTuple, Optional

from lxml import etree
from reportlab.graphics.shapes import Drawing
from svglib.svglib import svg2rlg

from . import utils
from .storage import (
    COMPONENTS_NAMESPACE,
    MODULES_NAMESPACE,
    TemplateStorage,
    default_storage,
)

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
VIEWBOX = "0 0 1000 1000"
BACKGROUND_FILL = "#FF5400"

OPEN_TAG = f'<svg xmlns="{SVG_NAMESPACE}" viewBox="{VIEWBOX}">'
CLOSE_TAG = "</svg>"
BACKGROUND_RECTANGLE = (
    f'<rect x="0" y="0" width="1000" height="1000" fill="{BACKGROUND_FILL}"/>'
)


class RenderedTemplate(NamedTuple):
    """The result of running a template through the component pipeline."""

    inner_svg: str
    style_element: str
    css_rules: Dict[str, Dict[str, str]]
    placeholders: Dict[str, str]


def load_template(
    storage: TemplateStorage, namespace: str, inscription_id: str
) -> str:
    """Read the template ``<inscription_id>.svg`` from a storage namespace.

    Returns:
        The decoded template, or an empty string if the template is missing
        or cannot be read. Errors are logged, never raised.
    """
    key = f"{inscription_id}.svg"
    try:
        data = storage.read(namespace, key)
        if data is None:
            logger.warning("No template %r in namespace %r.", key, namespace)
            return ""
        return data.decode("utf-8")
    except Exception as exc:
        logger.error("Failed to load template %r from %r! (%s)", key, namespace, exc)
        return ""


def clean_template(content: str) -> str:
    "Remove all tab characters and surrounding whitespace."
    return content.replace("\t", "").strip()


def build_template(
    content: str, config: Optional[Mapping[str, Any]] = None
) -> RenderedTemplate:
    """Run the full component pipeline over a template.

    The passes are applied in this order: envelope stripping, stylesheet
    extraction, path flattening, CSS rule parsing, inlining, placeholder
    substitution and finally removal of the ``class="stNN"`` attributes.
    Inlining must run before the class attributes are removed, since the
    classes are what the CSS rules are matched against.

    Args:
        content: The raw template text.
        config: Mapping whose ``STnn`` keys provide placeholder values.

    Returns:
        A `RenderedTemplate` with the transformed inner markup and the
        intermediate results, kept for inspection.
    """
    markup = utils.strip_envelope(content)
    markup, style_element = utils.extract_style_element(markup)
    markup = utils.remove_newlines_from_paths(markup)

    css_rules = utils.parse_css_rules(style_element)
    placeholders = utils.parse_placeholders(config)

    markup = utils.inline_css_rules(markup, css_rules)
    markup = utils.replace_placeholders(markup, placeholders)
    markup = utils.remove_class_attributes(markup)

    unresolved = utils.find_unresolved_placeholders(markup)
    if unresolved:
        logger.debug("Unresolved placeholders: %s", ", ".join(unresolved))

    return RenderedTemplate(markup, style_element, css_rules, placeholders)


class BaseSvgComponent:
    """An abstract renderer wrapping inner markup in the fixed SVG envelope."""

    namespace = ""

    def __init__(
        self, inscription_id: str, storage: Optional[TemplateStorage] = None
    ) -> None:
        self.inscription_id = inscription_id
        self.storage = storage if storage is not None else default_storage()

    def read_template(self) -> str:
        return load_template(self.storage, self.namespace, self.inscription_id)

    def inner_svg_content(self) -> str:
        raise NotImplementedError

    def open_tag(self) -> str:
        return OPEN_TAG

    def close_tag(self) -> str:
        return CLOSE_TAG

    def background_rectangle(self) -> str:
        return BACKGROUND_RECTANGLE

    def render(self, background: bool = False) -> str:
        """Return the complete SVG document.

        Args:
            background: Put the background rectangle in front of the inner
                markup.
        """
        parts = [self.open_tag()]
        if background:
            parts.append(self.background_rectangle())
        parts.append(self.inner_svg_content())
        parts.append(self.close_tag())
        return "".join(parts)

    def to_html(self) -> str:
        return self.render()

    def __html__(self) -> str:
        # Lets template engines embed the output without escaping it.
        return self.to_html()

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.inscription_id!r})"

    def to_element(self, background: bool = False) -> Optional[Any]:
        """Parse the rendered document and return the root lxml node.

        Returns:
            The ``<svg>`` root element, or None if the output cannot be
            parsed even in recovery mode.
        """
        parser = etree.XMLParser(remove_comments=True, recover=True)
        try:
            root = etree.fromstring(self.render(background).encode("utf-8"), parser)
        except etree.XMLSyntaxError as exc:
            logger.error("Failed to parse rendered %r! (%s)", self, exc)
            return None
        if root is None:
            logger.error("Failed to parse rendered %r!", self)
        return root

    def to_drawing(self, background: bool = False) -> Optional[Drawing]:
        "Convert the rendered document to a ReportLab Drawing."
        return svg2rlg(io.StringIO(self.render(background)))


class SvgComponent(BaseSvgComponent):
    """An SVG template with its CSS inlined and its placeholders filled in.

    The template ``<inscription_id>.svg`` is read from the
    ``ninja_components`` namespace. Tabs and surrounding whitespace are
    removed before the template runs through `build_template`. A missing
    template renders as an empty envelope.

    Args:
        inscription_id: Name of the template, without the ``.svg`` suffix.
        config: Mapping providing placeholder values under ``STnn`` keys;
            other keys are ignored.
        storage: Where to read the template from, `default_storage()` if
            not given.
    """

    namespace = COMPONENTS_NAMESPACE

    def __init__(
        self,
        inscription_id: str,
        config: Optional[Mapping[str, Any]] = None,
        storage: Optional[TemplateStorage] = None,
    ) -> None:
        super().__init__(inscription_id, storage)
        self.config = dict(config or {})
        content = clean_template(self.read_template())
        self._template = build_template(content, self.config)

    @property
    def template(self) -> RenderedTemplate:
        return self._template

    @property
    def css_rules(self) -> Dict[str, Dict[str, str]]:
        return self._template.css_rules

    @property
    def placeholders(self) -> Dict[str, str]:
        return self._template.placeholders

    def inner_svg_content(self) -> str:
        return self._template.inner_svg

    def style_element(self) -> str:
        return self._template.style_element

    def open_tag(self) -> str:
        return OPEN_TAG + "\n"

    def close_tag(self) -> str:
        return "\n" + CLOSE_TAG

    def background_rectangle(self) -> str:
        return BACKGROUND_RECTANGLE + "\n"


class SvgModule(BaseSvgComponent):
    """An SVG template from the ``ninja_modules`` namespace, re-enveloped.

    Only the outer ``<svg>`` tags are replaced; the template is otherwise
    used as stored.
    """

    namespace = MODULES_NAMESPACE

    def __init__(
        self, inscription_id: str, storage: Optional[TemplateStorage] = None
    ) -> None:
        super().__init__(inscription_id, storage)
        self._inner_svg = utils.strip_envelope(self.read_template())

    def inner_svg_content(self) -> str:
        return self._inner_svg

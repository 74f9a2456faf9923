"""Testsuite for ninjasvg.

This module tests rendering whole templates through the components. Run
with one of these lines from inside the project directory:

    $ pytest -v tests/test_components.py
"""

import logging

import pytest
from reportlab.graphics.shapes import Drawing

from ninjasvg import components
from ninjasvg.storage import COMPONENTS_NAMESPACE, InMemoryStorage, TemplateStorage
from tests.utils import SAMPLE_INNER_SVG, SAMPLE_MODULE, SAMPLE_TEMPLATE, storage_with

SVG_TAG = "{http://www.w3.org/2000/svg}svg"
OPEN_TAG = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 1000 1000">'


class FailingStorage(TemplateStorage):
    def read(self, namespace, key):
        raise OSError("disk on fire")


class TestBuildTemplate:
    def test_sample_template(self):
        template = components.build_template(
            components.clean_template(SAMPLE_TEMPLATE), {"ST1": "Alice"}
        )
        assert template.inner_svg == SAMPLE_INNER_SVG
        assert template.css_rules == {
            "st0": {"fill": "#FFFFFF"},
            "st1": {"fill": "none", "stroke": "#000000", "stroke-width": "4"},
            "st2": {"font-family": "'Arial'"},
        }
        assert template.placeholders == {"%%ST1%%": "Alice"}
        assert "enable-background" not in template.style_element
        assert template.style_element.startswith('<style type="text/css">')

    def test_empty_template(self):
        template = components.build_template("", {"ST1": "Alice"})
        assert template == components.RenderedTemplate(
            "", "", {}, {"%%ST1%%": "Alice"}
        )

    def test_placeholders_inside_css_values(self):
        template = components.build_template(
            '<svg><style type="text/css">.st0{fill:%%ST2%%;}</style>'
            '<rect class="st0"/></svg>',
            {"ST2": "#00FF00"},
        )
        assert template.inner_svg == '<rect fill="#00FF00"/>'

    def test_non_numbered_class_is_kept(self):
        template = components.build_template(
            '<svg><style type="text/css">.foo{fill:red;}</style>'
            '<path class="foo" d="M0 0"/></svg>'
        )
        assert template.inner_svg == '<path class="foo" fill="red" d="M0 0"/>'

    def test_unmatched_placeholders_stay(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="ninjasvg.components"):
            template = components.build_template(
                "<text>%%ST1%% %%ST99%% %%OTHER%%</text>",
                {"ST1": "Alice", "OTHER": "ignored"},
            )
        assert template.inner_svg == "<text>Alice %%ST99%% %%OTHER%%</text>"
        assert "%%ST99%%" in caplog.text


class TestLoadTemplate:
    def test_load_template(self):
        storage = storage_with(components={"badge": "<svg/>"})
        assert components.load_template(storage, COMPONENTS_NAMESPACE, "badge") == (
            "<svg/>"
        )

    def test_missing_template(self, caplog):
        with caplog.at_level(logging.WARNING, logger="ninjasvg.components"):
            content = components.load_template(
                InMemoryStorage(), COMPONENTS_NAMESPACE, "missing"
            )
        assert content == ""
        assert "missing.svg" in caplog.text

    def test_failing_storage(self, caplog):
        with caplog.at_level(logging.ERROR, logger="ninjasvg.components"):
            content = components.load_template(
                FailingStorage(), COMPONENTS_NAMESPACE, "badge"
            )
        assert content == ""
        assert "disk on fire" in caplog.text

    def test_undecodable_template(self):
        storage = InMemoryStorage({(COMPONENTS_NAMESPACE, "bad.svg"): b"\xff\xfe<"})
        assert components.load_template(storage, COMPONENTS_NAMESPACE, "bad") == ""

    def test_clean_template(self):
        assert components.clean_template("\n\t<svg>\n\t\t<g/>\t</svg>  \n") == (
            "<svg>\n<g/></svg>"
        )


class TestSvgComponent:
    def test_render(self):
        storage = storage_with(components={"badge": SAMPLE_TEMPLATE})
        component = components.SvgComponent("badge", {"ST1": "Alice"}, storage)
        assert component.render() == OPEN_TAG + "\n" + SAMPLE_INNER_SVG + "\n</svg>"
        assert component.inner_svg_content() == SAMPLE_INNER_SVG
        assert component.css_rules["st0"] == {"fill": "#FFFFFF"}
        assert component.placeholders == {"%%ST1%%": "Alice"}

    def test_missing_template_renders_empty_envelope(self):
        component = components.SvgComponent("missing", {}, InMemoryStorage())
        assert component.render() == component.open_tag() + component.close_tag()
        assert component.render() == OPEN_TAG + "\n\n</svg>"
        assert component.style_element() == ""
        assert component.css_rules == {}

    def test_failing_storage_renders_empty_envelope(self):
        component = components.SvgComponent("badge", {}, FailingStorage())
        assert component.render() == component.open_tag() + component.close_tag()

    def test_render_with_background(self):
        storage = storage_with(components={"dot": "<svg><circle r='1'/></svg>"})
        component = components.SvgComponent("dot", storage=storage)
        assert component.render(background=True) == (
            OPEN_TAG
            + "\n"
            + '<rect x="0" y="0" width="1000" height="1000" fill="#FF5400"/>\n'
            + "<circle r='1'/>"
            + "\n</svg>"
        )

    def test_rendering_is_repeatable(self):
        storage = storage_with(components={"badge": SAMPLE_TEMPLATE})
        config = {"ST1": "Alice", "ST2": "Bob"}
        first = components.SvgComponent("badge", config, storage)
        second = components.SvgComponent("badge", config, storage)
        assert first.render() == second.render()
        assert first.render() == first.render()
        assert str(first) == first.to_html() == first.__html__() == first.render()

    def test_config_is_copied(self):
        storage = storage_with(components={"badge": SAMPLE_TEMPLATE})
        config = {"ST1": "Alice"}
        component = components.SvgComponent("badge", config, storage)
        config["ST1"] = "Bob"
        assert "Alice" in component.render()
        assert component.config == {"ST1": "Alice"}

    def test_default_storage(self, tmp_path, monkeypatch):
        (tmp_path / "ninja_components").mkdir()
        (tmp_path / "ninja_components" / "badge.svg").write_text(
            SAMPLE_TEMPLATE, encoding="utf-8"
        )
        monkeypatch.setenv("NINJASVG_STORAGE_ROOT", str(tmp_path))
        component = components.SvgComponent("badge", {"ST1": "Alice"})
        assert component.inner_svg_content() == SAMPLE_INNER_SVG

    def test_to_element(self):
        storage = storage_with(components={"badge": SAMPLE_TEMPLATE})
        component = components.SvgComponent("badge", {"ST1": "Alice"}, storage)
        root = component.to_element()
        assert root.tag == SVG_TAG
        assert root.get("viewBox") == "0 0 1000 1000"
        assert [child.get("fill") for child in root] == ["#FFFFFF", "none", None]
        assert root[2].text == "Alice"

    def test_to_element_with_background(self):
        component = components.SvgComponent("missing", {}, InMemoryStorage())
        root = component.to_element(background=True)
        assert len(root) == 1
        assert root[0].get("fill") == "#FF5400"

    def test_to_drawing(self):
        storage = storage_with(components={"badge": SAMPLE_TEMPLATE})
        drawing = components.SvgComponent("badge", {"ST1": "Alice"}, storage).to_drawing()
        assert isinstance(drawing, Drawing)


class TestSvgModule:
    def test_render(self):
        storage = storage_with(modules={"frame": SAMPLE_MODULE})
        module = components.SvgModule("frame", storage)
        assert module.render() == (
            OPEN_TAG + '<rect class="st0" x="0" y="0" width="10" height="10"/></svg>'
        )

    def test_reads_modules_namespace(self):
        storage = storage_with(components={"frame": SAMPLE_MODULE})
        assert components.SvgModule("frame", storage).render() == OPEN_TAG + "</svg>"

    def test_content_is_used_as_stored(self):
        storage = storage_with(modules={"frame": "<svg>\n\t<g/>\n</svg>"})
        module = components.SvgModule("frame", storage)
        assert module.inner_svg_content() == "\n\t<g/>\n"

    def test_background_rectangle(self):
        module = components.SvgModule("missing", InMemoryStorage())
        assert module.background_rectangle() == (
            '<rect x="0" y="0" width="1000" height="1000" fill="#FF5400"/>'
        )
        assert module.render(background=True) == (
            OPEN_TAG + module.background_rectangle() + "</svg>"
        )

    @pytest.mark.parametrize("background", [False, True])
    def test_to_drawing(self, background):
        storage = storage_with(modules={"frame": SAMPLE_MODULE})
        drawing = components.SvgModule("frame", storage).to_drawing(background)
        assert isinstance(drawing, Drawing)

"""
Tests for translating a RenderConfig into Playwright options.

The browser itself is not started here.
"""
import pytest

from browser2pdf.config import RenderConfig, merge_config
from browser2pdf.pdf_generator import context_options, launch_options, pdf_options


def config(**options):
    return merge_config(RenderConfig(), options)


class TestPdfOptions:

    def test_defaults(self):
        options = pdf_options(RenderConfig())

        assert options["format"] == "A4"
        assert options["landscape"] is False
        assert options["print_background"] is True
        assert options["scale"] == 1.0
        assert options["margin"]["top"] == "0.3937in"
        assert "width" not in options

    def test_explicit_dimensions_replace_format(self):
        options = pdf_options(config(page_width=8.5, page_height=11.0))

        assert options["width"] == "8.5000in"
        assert options["height"] == "11.0000in"
        assert "format" not in options

    def test_width_alone_keeps_format(self):
        assert pdf_options(config(page_width=8.5))["format"] == "A4"

    def test_landscape_and_background(self):
        options = pdf_options(config(orientation="Landscape", background=False))

        assert options["landscape"] is True
        assert options["print_background"] is False

    @pytest.mark.parametrize("zoom, scale", [(0.01, 0.1), (5.0, 2.0), (1.25, 1.25)])
    def test_zoom_is_clamped_to_supported_scale(self, zoom, scale):
        assert pdf_options(config(zoom=zoom))["scale"] == scale


class TestContextOptions:

    def test_headers_viewport_and_javascript(self):
        options = context_options(config(
            custom_headers=[["X-A", "1"]],
            viewport=(800, 600),
            enable_javascript=False,
        ))

        assert options == {
            "java_script_enabled": False,
            "viewport": {"width": 800, "height": 600},
            "extra_http_headers": {"X-A": "1"},
        }

    def test_minimal(self):
        assert context_options(RenderConfig()) == {"java_script_enabled": True}


class TestLaunchOptions:

    def test_no_proxy(self):
        assert launch_options(RenderConfig()) == {"headless": True}

    def test_proxy_with_bypass_list(self):
        options = launch_options(config(proxy="http://proxy:3128", proxy_bypass=["localhost", "*.internal"]))

        assert options["proxy"] == {"server": "http://proxy:3128", "bypass": "localhost,*.internal"}

"""
Unit tests for browser2pdf.stylesheet.
"""
import lxml.html
import pytest

from browser2pdf.errors import FilesystemError, TransformError
from browser2pdf.outline import OutlineItem, build_outline
from browser2pdf.stylesheet import (
    CACHE_DIR_ENV,
    DEFAULT_TOC_XSL,
    StylesheetCache,
    default_cache_dir,
    read_stylesheet,
)

COUNT_XSL = """<xsl:stylesheet version="1.0"
    xmlns:xsl="http://www.w3.org/1999/XSL/Transform"
    xmlns:o="http://wkhtmltopdf.org/outline">
  <xsl:output method="html"/>
  <xsl:template match="/"><p><xsl:value-of select="count(//o:item/o:item)"/> entries</p></xsl:template>
</xsl:stylesheet>
"""

MARKER_XSL = """<xsl:stylesheet version="1.0" xmlns:xsl="http://www.w3.org/1999/XSL/Transform">
  <xsl:output method="html"/>
  <xsl:template match="/"><p>from-cache</p></xsl:template>
</xsl:stylesheet>
"""


def sample_outline():
    return build_outline([
        OutlineItem("intro.html", "file:///docs/intro.html", 2),
        OutlineItem("R&D <notes>", "https://example.com/?a=1&b=2", 5),
    ])


class TestDefaultStylesheet:

    def test_lists_titles_pages_and_links(self, stylesheet_cache):
        html = stylesheet_cache.render(DEFAULT_TOC_XSL, sample_outline())
        doc = lxml.html.document_fromstring(html)

        titles = [span.text_content().strip() for span in doc.xpath('//span[@class="title"]')]
        pages = [span.text_content().strip() for span in doc.xpath('//span[@class="page"]')]
        links = doc.xpath("//li/a/@href")

        assert titles == ["intro.html", "R&D <notes>"]
        assert pages == ["2", "5"]
        assert links == ["file:///docs/intro.html", "https://example.com/?a=1&b=2"]

    def test_has_heading(self, stylesheet_cache):
        html = stylesheet_cache.render(DEFAULT_TOC_XSL, sample_outline())

        assert "Table of Contents" in html


class TestStylesheetCache:

    def test_custom_stylesheet_is_applied(self, stylesheet_cache):
        html = stylesheet_cache.render(COUNT_XSL, sample_outline())

        assert "2 entries" in html

    def test_compiled_entry_is_written_under_content_hash(self, stylesheet_cache):
        stylesheet_cache.compile(COUNT_XSL)

        entry = stylesheet_cache.entry_path(COUNT_XSL)
        assert entry.exists()
        assert entry.read_text(encoding="utf-8") == COUNT_XSL
        assert list(stylesheet_cache.cache_dir.glob("*.tmp")) == []

    def test_compile_is_memoised_in_process(self, stylesheet_cache):
        assert stylesheet_cache.compile(COUNT_XSL) is stylesheet_cache.compile(COUNT_XSL)

    def test_existing_entry_is_reused_without_revalidation(self, tmp_path):
        first = StylesheetCache(tmp_path)
        entry = first.entry_path(COUNT_XSL)
        entry.parent.mkdir(parents=True, exist_ok=True)
        entry.write_text(MARKER_XSL, encoding="utf-8")

        html = StylesheetCache(tmp_path).render(COUNT_XSL, sample_outline())

        assert "from-cache" in html

    def test_unwritable_cache_dir_still_compiles(self, tmp_path, caplog):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        cache = StylesheetCache(blocker / "xslt")

        html = cache.render(COUNT_XSL, sample_outline())

        assert "2 entries" in html
        assert "Cannot write stylesheet cache" in caplog.text

    def test_unreadable_entry_falls_back_to_source(self, stylesheet_cache, caplog):
        entry = stylesheet_cache.entry_path(COUNT_XSL)
        entry.mkdir(parents=True)

        html = stylesheet_cache.render(COUNT_XSL, sample_outline())

        assert "2 entries" in html
        assert "unreadable stylesheet cache entry" in caplog.text
        assert list(stylesheet_cache.cache_dir.glob("*.tmp")) == []

    def test_invalid_stylesheet_raises_and_is_not_cached(self, stylesheet_cache):
        broken = "<xsl:stylesheet"

        with pytest.raises(TransformError):
            stylesheet_cache.compile(broken)
        assert not stylesheet_cache.entry_path(broken).exists()

    def test_non_xslt_document_raises(self, stylesheet_cache):
        with pytest.raises(TransformError):
            stylesheet_cache.compile("<html><body/></html>")

    def test_malformed_source_xml_raises(self, stylesheet_cache):
        compiled = stylesheet_cache.compile(COUNT_XSL)

        with pytest.raises(TransformError):
            stylesheet_cache.transform(compiled, "<outline>")


def test_cache_dir_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv(CACHE_DIR_ENV, str(tmp_path / "custom"))

    assert default_cache_dir() == tmp_path / "custom"
    assert StylesheetCache().cache_dir == tmp_path / "custom"


def test_read_stylesheet_missing_file(tmp_path):
    with pytest.raises(FilesystemError):
        read_stylesheet(tmp_path / "missing.xsl")

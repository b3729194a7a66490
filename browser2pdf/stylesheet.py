"""XSLT compilation with an on-disk cache keyed by stylesheet content."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

from lxml import etree

from browser2pdf.errors import FilesystemError, TransformError
from browser2pdf.logger import get_logger
from browser2pdf.utils import calculate_content_hash

LOGGER = get_logger(__name__)

CACHE_DIR_ENV = "BROWSER2PDF_CACHE_DIR"

DEFAULT_TOC_XSL = """<?xml version="1.0" encoding="UTF-8"?>
<xsl:stylesheet version="1.0"
                xmlns:xsl="http://www.w3.org/1999/XSL/Transform"
                xmlns:outline="http://wkhtmltopdf.org/outline"
                exclude-result-prefixes="outline">
  <xsl:output method="html" encoding="UTF-8" indent="yes"/>
  <xsl:template match="outline:outline">
    <html>
      <head>
        <meta charset="UTF-8"/>
        <title>Table of Contents</title>
        <style>
          body {
            font-family: -apple-system, BlinkMacSystemFont, "Helvetica Neue", Arial, sans-serif;
            color: #1d1d1f;
            margin: 0;
          }
          h1 {
            font-size: 32px;
            font-weight: 600;
            margin: 0 0 32px;
          }
          ul {
            list-style: none;
            padding: 0;
            margin: 0;
          }
          li {
            border-bottom: 1px solid #d2d2d7;
            page-break-inside: avoid;
            break-inside: avoid;
          }
          a {
            text-decoration: none;
            color: inherit;
            padding: 10px 0;
            display: flex;
            justify-content: space-between;
            align-items: baseline;
          }
          .title { font-size: 15px; overflow-wrap: anywhere; padding-right: 24px; }
          .page { color: #86868b; font-size: 14px; }
        </style>
      </head>
      <body>
        <h1>Table of Contents</h1>
        <ul>
          <xsl:apply-templates select="outline:item/outline:item"/>
        </ul>
      </body>
    </html>
  </xsl:template>
  <xsl:template match="outline:item">
    <li>
      <a href="{@link}">
        <span class="title"><xsl:value-of select="@title"/></span>
        <span class="page"><xsl:value-of select="@page"/></span>
      </a>
      <xsl:if test="outline:item">
        <ul>
          <xsl:apply-templates select="outline:item"/>
        </ul>
      </xsl:if>
    </li>
  </xsl:template>
</xsl:stylesheet>
"""


def default_cache_dir() -> Path:
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".cache" / "browser2pdf" / "xslt"


def read_stylesheet(path: Union[str, Path]) -> str:
    """Read a user supplied stylesheet from disk."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Cannot read stylesheet {path}: {e}") from e


class StylesheetCache:
    """Compile stylesheets once per content hash and apply them to outlines.

    A compiled stylesheet is persisted as ``<sha256>.xsl`` after it has been
    parsed and accepted by libxslt.  Entries are written whole and never
    revalidated, so two processes racing on the same key at worst do the
    work twice.
    """

    def __init__(self, cache_dir: Optional[Union[str, Path]] = None) -> None:
        self._cache_dir = Path(cache_dir) if cache_dir is not None else default_cache_dir()
        self._compiled: Dict[str, etree.XSLT] = {}

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def entry_path(self, stylesheet_text: str) -> Path:
        return self._cache_dir / f"{calculate_content_hash(stylesheet_text)}.xsl"

    def compile(self, stylesheet_text: str) -> etree.XSLT:
        key = calculate_content_hash(stylesheet_text)
        if key in self._compiled:
            return self._compiled[key]

        entry = self._cache_dir / f"{key}.xsl"
        cached = self._load(entry)
        if cached is not None:
            LOGGER.debug("Stylesheet cache hit: %s", entry.name)
            compiled = self._build(cached)
        else:
            compiled = self._build(stylesheet_text.encode("utf-8"))
            self._store(entry, stylesheet_text)

        self._compiled[key] = compiled
        return compiled

    def transform(self, compiled: etree.XSLT, source_xml: str) -> str:
        """Apply ``compiled`` to ``source_xml`` and return serialised output."""
        try:
            document = etree.fromstring(source_xml.encode("utf-8"))
            result = compiled(document)
        except (etree.XMLSyntaxError, etree.XSLTApplyError) as e:
            raise TransformError(f"Failed to apply TOC stylesheet: {e}") from e
        return str(result)

    def render(self, stylesheet_text: str, source_xml: str) -> str:
        return self.transform(self.compile(stylesheet_text), source_xml)

    @staticmethod
    def _build(stylesheet_bytes: bytes) -> etree.XSLT:
        try:
            return etree.XSLT(etree.fromstring(stylesheet_bytes))
        except (etree.XMLSyntaxError, etree.XSLTParseError) as e:
            raise TransformError(f"Invalid XSL stylesheet: {e}") from e

    @staticmethod
    def _load(entry: Path) -> Optional[bytes]:
        if not entry.exists():
            return None
        try:
            return entry.read_bytes()
        except OSError as e:
            LOGGER.warning("Ignoring unreadable stylesheet cache entry %s: %s", entry, e)
            return None

    def _store(self, entry: Path, stylesheet_text: str) -> None:
        # Write failures are logged, never raised
        tmp_path = None
        try:
            entry.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=entry.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(stylesheet_text)
            os.replace(tmp_path, entry)
        except OSError as e:
            LOGGER.warning("Cannot write stylesheet cache %s: %s", entry, e)
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            return
        LOGGER.debug("Cached compiled stylesheet %s", entry.name)

"""wkhtmltopdf flags that are accepted for compatibility but have no effect.

Each entry maps a flag to the number of argument tokens that follow it.
"""
from __future__ import annotations

from typing import Iterable, List, Tuple

from browser2pdf.logger import get_logger

LOGGER = get_logger(__name__)

IGNORED_FLAGS = {
    # Global options
    "--collate": 0,
    "--no-collate": 0,
    "--cookie-jar": 1,
    "--copies": 1,
    "-d": 1,
    "--dpi": 1,
    "-g": 0,
    "--grayscale": 0,
    "--image-dpi": 1,
    "--image-quality": 1,
    "-l": 0,
    "--lowquality": 0,
    "--no-pdf-compression": 0,
    "--outline-depth": 1,
    "--dump-outline": 1,
    "--dump-default-toc-xsl": 0,
    "--use-xserver": 0,
    # Page options
    "--allow": 1,
    "--bypass-proxy-for-all": 0,
    "--cache-dir": 1,
    "--checkbox-checked-svg": 1,
    "--checkbox-svg": 1,
    "--radiobutton-checked-svg": 1,
    "--radiobutton-svg": 1,
    "--custom-header-propagation": 0,
    "--no-custom-header-propagation": 0,
    "--debug-javascript": 0,
    "--no-debug-javascript": 0,
    "--default-header": 0,
    "--encoding": 1,
    "--disable-external-links": 0,
    "--enable-external-links": 0,
    "--disable-forms": 0,
    "--enable-forms": 0,
    "--images": 0,
    "--no-images": 0,
    "--disable-internal-links": 0,
    "--enable-internal-links": 0,
    "--keep-relative-links": 0,
    "--resolve-relative-links": 0,
    "--load-error-handling": 1,
    "--load-media-error-handling": 1,
    "--disable-local-file-access": 0,
    "--enable-local-file-access": 0,
    "--minimum-font-size": 1,
    "--exclude-from-outline": 0,
    "--include-in-outline": 0,
    "--page-offset": 1,
    "--password": 1,
    "--disable-plugins": 0,
    "--enable-plugins": 0,
    "--post": 2,
    "--post-file": 2,
    "--disable-smart-shrinking": 0,
    "--enable-smart-shrinking": 0,
    "--ssl-crt-path": 1,
    "--ssl-key-password": 1,
    "--ssl-key-path": 1,
    "--username": 1,
    # Headers and footers
    "--footer-center": 1,
    "--footer-font-name": 1,
    "--footer-font-size": 1,
    "--footer-html": 1,
    "--footer-left": 1,
    "--footer-line": 0,
    "--no-footer-line": 0,
    "--footer-right": 1,
    "--footer-spacing": 1,
    "--header-center": 1,
    "--header-font-name": 1,
    "--header-font-size": 1,
    "--header-html": 1,
    "--header-left": 1,
    "--header-line": 0,
    "--no-header-line": 0,
    "--header-right": 1,
    "--header-spacing": 1,
    "--replace": 2,
    # TOC options
    "--disable-dotted-lines": 0,
    "--toc-header-text": 1,
    "--toc-level-indentation": 1,
    "--disable-toc-links": 0,
    "--toc-text-size-shrink": 1,
    "--disable-toc-back-links": 0,
    "--enable-toc-back-links": 0,
}


def strip_ignored_flags(argv: Iterable[str]) -> Tuple[List[str], List[str]]:
    """Remove ignored flags and their arguments from ``argv``.

    Returns the remaining tokens and the names of the flags that were dropped.
    A flag written as ``--flag=value`` carries its single argument inline.
    """
    tokens = list(argv)
    kept: List[str] = []
    dropped: List[str] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        name, has_inline, _ = token.partition("=")
        if name in IGNORED_FLAGS:
            consumed = IGNORED_FLAGS[name]
            if has_inline:
                consumed = max(consumed - 1, 0)
            dropped.append(name)
            index += 1 + consumed
            continue
        kept.append(token)
        index += 1

    if dropped:
        LOGGER.info("Ignoring unsupported option(s): %s", ", ".join(dropped))
    return kept, dropped

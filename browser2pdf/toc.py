"""Table-of-contents pagination.

The page numbers a TOC prints depend on how many pages the TOC itself takes,
and that in turn depends on the rendered length of those numbers.  Layout is
only known after the browser prints, so the page count is found by
iteration: assume a one-page TOC, render it, and re-render with the observed
count until the prediction holds or the iteration budget runs out.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from browser2pdf.config import RenderConfig
from browser2pdf.logger import get_logger
from browser2pdf.outline import OutlineItem, build_outline
from browser2pdf.pdf_generator import PageRenderer
from browser2pdf.stylesheet import DEFAULT_TOC_XSL, StylesheetCache
from browser2pdf.utils import html_data_uri

LOGGER = get_logger(__name__)

MAX_TOC_ITERATIONS = 3


@dataclass(frozen=True)
class TocResult:
    pdf: bytes
    page_count: int
    iterations: int
    converged: bool


def outline_items(
    entries: Sequence[Tuple[str, str]],
    page_counts: Sequence[int],
    toc_pages: int,
) -> List[OutlineItem]:
    """Compute each input's first page in the merged document.

    ``entries`` holds ``(title, link)`` pairs in input order.
    """
    items = []
    page = toc_pages + 1
    for (title, link), count in zip(entries, page_counts):
        items.append(OutlineItem(title=title, link=link, page=page))
        page += count
    return items


def toc_render_config(config: RenderConfig) -> RenderConfig:
    """The job's page geometry without anything aimed at the input pages."""
    return replace(config, run_scripts=(), window_status=None, javascript_delay=0)


async def paginate_toc(
    entries: Sequence[Tuple[str, str]],
    page_counts: Sequence[int],
    renderer: PageRenderer,
    config: RenderConfig,
    transformer: StylesheetCache,
    stylesheet: Optional[str] = None,
    max_iterations: int = MAX_TOC_ITERATIONS,
) -> TocResult:
    """Render a TOC whose listed page numbers account for its own length.

    Transform and render errors propagate; failing to converge within
    ``max_iterations`` is not an error and the last rendering is used.
    """
    if len(entries) != len(page_counts):
        raise ValueError("entries and page_counts must have the same length")
    if max_iterations < 1:
        raise ValueError("max_iterations must be at least 1")

    compiled = transformer.compile(stylesheet if stylesheet is not None else DEFAULT_TOC_XSL)
    toc_config = toc_render_config(config)
    toc_pages = 1
    rendered = None

    for iteration in range(1, max_iterations + 1):
        items = outline_items(entries, page_counts, toc_pages)
        html = transformer.transform(compiled, build_outline(items))
        rendered = await renderer.render(html_data_uri(html), toc_config)
        LOGGER.info(
            "TOC pass %d: assumed %d page(s), rendered %d",
            iteration,
            toc_pages,
            rendered.page_count,
        )
        if rendered.page_count == toc_pages:
            return TocResult(rendered.pdf, rendered.page_count, iteration, True)
        toc_pages = rendered.page_count

    LOGGER.warning(
        "TOC page count did not settle after %d passes; page numbers may be off",
        max_iterations,
    )
    return TocResult(rendered.pdf, rendered.page_count, max_iterations, False)

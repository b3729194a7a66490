"""Drive one conversion job from inputs to the merged output file."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from browser2pdf.config import RenderJob
from browser2pdf.errors import FilesystemError
from browser2pdf.logger import get_logger
from browser2pdf.pdf_generator import PageRenderer, PlaywrightRenderer
from browser2pdf.pdf_merger import merge_pdfs, set_title
from browser2pdf.stylesheet import StylesheetCache, read_stylesheet
from browser2pdf.toc import paginate_toc
from browser2pdf.utils import normalize_url

LOGGER = get_logger(__name__)


async def render_job(
    job: RenderJob,
    renderer: PageRenderer,
    transformer: StylesheetCache,
    cwd: Optional[str] = None,
) -> bytes:
    """Render every input in order and assemble the final PDF buffer."""
    config = job.config
    urls = [normalize_url(descriptor, cwd) for descriptor in job.inputs]

    # The custom stylesheet is read before any rendering so a bad path fails fast
    stylesheet = read_stylesheet(config.xsl_style_sheet) if config.toc and config.xsl_style_sheet else None

    rendered = []
    for idx, url in enumerate(urls, 1):
        page = await renderer.render(url, config)
        LOGGER.info("Rendered (%d/%d): %s - %d pages", idx, len(urls), job.inputs[idx - 1], page.page_count)
        rendered.append(page)

    bookmarks = list(job.inputs) if config.outline else None
    content = merge_pdfs([page.pdf for page in rendered], bookmarks=bookmarks)

    if config.toc:
        toc = await paginate_toc(
            entries=list(zip(job.inputs, urls)),
            page_counts=[page.page_count for page in rendered],
            renderer=renderer,
            config=config,
            transformer=transformer,
            stylesheet=stylesheet,
        )
        content = merge_pdfs([toc.pdf, content])

    if config.title:
        content = set_title(content, config.title)
    return content


def write_output(pdf_bytes: bytes, output: str) -> Path:
    """Write the final document, creating parent directories as needed."""
    out_path = Path(output).resolve()
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(pdf_bytes)
    except OSError as e:
        raise FilesystemError(f"Cannot write {out_path}: {e}") from e
    return out_path


async def convert(job: RenderJob, transformer: Optional[StylesheetCache] = None) -> Path:
    """Run ``job`` end to end with a Chromium renderer and write its output."""
    transformer = transformer or StylesheetCache()
    async with PlaywrightRenderer(job.config) as renderer:
        pdf_bytes = await render_job(job, renderer, transformer)
    out_path = write_output(pdf_bytes, job.output)
    LOGGER.info("Wrote %s", out_path)
    return out_path

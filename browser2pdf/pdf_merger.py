import io

from PyPDF2 import PdfMerger
from PyPDF2.errors import PdfReadError

from browser2pdf.errors import AssemblyError
from browser2pdf.logger import get_logger
from browser2pdf.utils import get_pdf_page_count

LOGGER = get_logger(__name__)


def merge_pdfs(buffers, bookmarks=None):
    """Merge rendered PDF buffers into one document, preserving page order.

    ``bookmarks`` optionally holds one outline title per buffer (``None`` to
    skip that buffer); each bookmark points at the buffer's first page.
    A single buffer is returned as-is.
    """
    buffers = list(buffers)
    if not buffers:
        raise AssemblyError("No PDFs to merge")
    if len(buffers) == 1:
        return buffers[0]
    if bookmarks is not None and len(bookmarks) != len(buffers):
        raise ValueError("bookmarks must match buffers one to one")

    merger = PdfMerger()
    try:
        current_page = 0
        for idx, buffer in enumerate(buffers):
            page_count = get_pdf_page_count(buffer)
            title = bookmarks[idx] if bookmarks is not None else None
            # The merger only resolves bookmark pages given at append time
            merger.append(io.BytesIO(buffer), outline_item=title or None)
            current_page += page_count

        out = io.BytesIO()
        merger.write(out)
    except (PdfReadError, ValueError) as e:
        raise AssemblyError(f"Error during PDF merge: {e}") from e
    finally:
        merger.close()

    LOGGER.info("Merged %d documents into %d pages", len(buffers), current_page)
    return out.getvalue()


def set_title(buffer, title):
    """Return ``buffer`` re-serialised with its document title set."""
    merger = PdfMerger()
    try:
        merger.append(io.BytesIO(buffer))
        merger.add_metadata({"/Title": title})
        out = io.BytesIO()
        merger.write(out)
    except (PdfReadError, ValueError) as e:
        raise AssemblyError(f"Could not set document title: {e}") from e
    finally:
        merger.close()
    return out.getvalue()

import base64
import hashlib
import io
import os
from pathlib import Path
from urllib.parse import urlparse

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from browser2pdf.errors import AssemblyError


def normalize_url(descriptor, cwd=None):
    """Turn an input descriptor into something the browser can navigate to.

    Absolute URLs (including data: URIs) pass through unchanged; anything
    else is treated as a local path relative to ``cwd``.
    """
    scheme = urlparse(descriptor).scheme
    # Single-letter schemes are Windows drive letters, not URLs
    if len(scheme) > 1:
        return descriptor
    base = Path(cwd) if cwd is not None else Path(os.getcwd())
    return (base / descriptor).resolve().as_uri()


def html_data_uri(html):
    """Encode an HTML document as a self-contained data URI."""
    payload = base64.b64encode(html.encode("utf-8")).decode("ascii")
    return f"data:text/html;charset=utf-8;base64,{payload}"


def calculate_content_hash(text):
    """Hash text content for cache keys"""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def get_pdf_page_count(pdf_bytes):
    """Get the number of pages in a PDF buffer"""
    try:
        return len(PdfReader(io.BytesIO(pdf_bytes)).pages)
    except (PdfReadError, ValueError) as e:
        raise AssemblyError(f"Could not read rendered PDF: {e}") from e

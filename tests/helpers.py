"""
Helpers for building synthetic PDFs and a fake page renderer.

PDFs are made of blank pages whose widths act as fingerprints, so a merged
document can be checked page by page without a browser.
"""
import base64
import io

from PyPDF2 import PdfReader, PdfWriter

from browser2pdf.pdf_generator import RenderedPage

TOC_PAGE_WIDTH = 900


def make_pdf(widths, height=200):
    writer = PdfWriter()
    for width in widths:
        writer.add_blank_page(width=width, height=height)
    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()


def page_widths(pdf_bytes):
    return [float(page.mediabox.width) for page in PdfReader(io.BytesIO(pdf_bytes)).pages]


def decode_data_uri(url):
    return base64.b64decode(url.split(",", 1)[1]).decode("utf-8")


class FakeRenderer:
    """PageRenderer stand-in.

    Regular URLs render to the page widths registered in ``pages_by_url``;
    the TOC data URI renders to ``toc_pages(html)`` pages of width 900+.
    """

    def __init__(self, pages_by_url=None, toc_pages=None):
        self.pages_by_url = pages_by_url or {}
        self.toc_pages = toc_pages or (lambda html: 1)
        self.calls = []
        self.toc_html = []
        self.outputs = []

    async def render(self, url, config):
        self.calls.append((url, config))
        if url.startswith("data:"):
            html = decode_data_uri(url)
            self.toc_html.append(html)
            widths = [TOC_PAGE_WIDTH + idx for idx in range(self.toc_pages(html))]
        else:
            widths = self.pages_by_url[url]
            if isinstance(widths, Exception):
                raise widths
        pdf = make_pdf(widths)
        self.outputs.append(pdf)
        return RenderedPage(pdf=pdf, page_count=len(widths))



"""Exception hierarchy shared by the conversion pipeline."""


class Browser2PdfError(Exception):
    """Base class for every error raised by browser2pdf."""


class UsageError(Browser2PdfError):
    """Malformed or incomplete command-line (or batch line) arguments."""


class RenderError(Browser2PdfError):
    """The browser failed to load or print a page."""


class TransformError(Browser2PdfError):
    """An XSLT stylesheet could not be compiled or applied."""


class AssemblyError(Browser2PdfError):
    """A rendered PDF buffer could not be loaded or re-serialised."""


class FilesystemError(Browser2PdfError):
    """Reading a resource or writing the output failed."""


class BatchLineError(Browser2PdfError):
    """A batch control line could not be split into arguments."""

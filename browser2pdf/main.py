"""Command-line entry point: ``browser2pdf [OPTIONS] <input>... [toc] <output>``."""
from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Dict, List, Optional, Sequence, Tuple

from browser2pdf import __version__
from browser2pdf.batch import run_batch
from browser2pdf.config import RenderConfig, RenderJob, merge_config, parse_orientation, parse_page_size
from browser2pdf.errors import Browser2PdfError, UsageError
from browser2pdf.legacy_flags import strip_ignored_flags
from browser2pdf.logger import LOG_LEVELS, get_logger, set_level
from browser2pdf.orchestrator import convert
from browser2pdf.stylesheet import StylesheetCache
from browser2pdf.units import parse_viewport_size, unit_real_to_inches

LOGGER = get_logger(__name__)

TOC_TOKEN = "toc"

# Flags that print and exit; meaningless on a batch line
EXITING_FLAGS = frozenset({"-h", "--help", "-V", "--version"})

EPILOG = """\
The literal word "toc" among the inputs prepends a generated table of
contents. Many wkhtmltopdf options (headers, footers, --dpi, --grayscale,
...) are accepted and ignored.
"""


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting on bad arguments."""

    def error(self, message):
        raise UsageError(message)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise ValueError(value)
    return number


def _viewport(value: str) -> Tuple[int, int]:
    size = parse_viewport_size(value)
    return size["width"], size["height"]


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="browser2pdf",
        description="Render HTML pages and URLs into a single PDF using headless Chromium.",
        epilog=EPILOG,
        argument_default=argparse.SUPPRESS,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("paths", nargs="*", default=[], metavar="input... output",
                        help="input URLs or files followed by the output PDF path")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-q", "--quiet", action="store_true", help="only report errors")
    parser.add_argument("--log-level", choices=sorted(LOG_LEVELS), help="logging verbosity (default: info)")
    parser.add_argument("--read-args-from-stdin", action="store_true",
                        help="read one set of arguments per line from standard input")

    page = parser.add_argument_group("page options")
    page.add_argument("-O", "--orientation", type=parse_orientation, help="Portrait or Landscape")
    page.add_argument("-s", "--page-size", type=parse_page_size, help="paper format, e.g. A4 or Letter")
    page.add_argument("--page-width", type=unit_real_to_inches, help="page width, e.g. 210mm")
    page.add_argument("--page-height", type=unit_real_to_inches, help="page height, e.g. 297mm")
    page.add_argument("-T", "--margin-top", type=unit_real_to_inches, help="top margin (default 10mm)")
    page.add_argument("-B", "--margin-bottom", type=unit_real_to_inches, help="bottom margin (default 10mm)")
    page.add_argument("-L", "--margin-left", type=unit_real_to_inches, help="left margin (default 10mm)")
    page.add_argument("-R", "--margin-right", type=unit_real_to_inches, help="right margin (default 10mm)")
    page.add_argument("--background", dest="background", action="store_const", const=True,
                      help="print background colours and images (default)")
    page.add_argument("--no-background", dest="background", action="store_const", const=False,
                      help="do not print backgrounds")
    page.add_argument("--viewport-size", dest="viewport", type=_viewport, metavar="WxH",
                      help="browser viewport, e.g. 1280x720")
    page.add_argument("--zoom", type=float, help="scale factor between 0.1 and 2 (default 1)")
    page.add_argument("--print-media-type", dest="print_media_type", action="store_const", const=True,
                      help="use print media CSS instead of screen")
    page.add_argument("--no-print-media-type", dest="print_media_type", action="store_const", const=False,
                      help="use screen media CSS (default)")
    page.add_argument("--user-style-sheet", metavar="PATH", help="stylesheet injected into every page")
    page.add_argument("--title", help="document title stored in the PDF metadata")
    page.add_argument("--outline", dest="outline", action="store_const", const=True,
                      help="add one PDF bookmark per input (default)")
    page.add_argument("--no-outline", dest="outline", action="store_const", const=False,
                      help="do not add PDF bookmarks")

    script = parser.add_argument_group("javascript options")
    script.add_argument("--enable-javascript", dest="enable_javascript", action="store_const", const=True,
                        help="run page JavaScript (default)")
    script.add_argument("-n", "--disable-javascript", dest="enable_javascript", action="store_const", const=False,
                        help="do not run page JavaScript")
    script.add_argument("--javascript-delay", type=_positive_int, metavar="MSEC",
                        help="wait after load before printing (default 200)")
    script.add_argument("--run-script", dest="run_scripts", action="append", metavar="JS",
                        help="run this script after the page loads (repeatable)")
    script.add_argument("--window-status", metavar="STATUS",
                        help="wait until window.status equals STATUS (at most 30s)")
    script.add_argument("--stop-slow-scripts", dest="stop_slow_scripts", action="store_const", const=True,
                        help="stop scripts that keep the page busy (default)")
    script.add_argument("--no-stop-slow-scripts", dest="stop_slow_scripts", action="store_const", const=False,
                        help="let slow scripts run")

    network = parser.add_argument_group("network options")
    network.add_argument("-p", "--proxy", help="proxy server, e.g. http://host:3128")
    network.add_argument("--bypass-proxy-for", dest="proxy_bypass", action="append", metavar="HOST",
                         help="do not use the proxy for HOST (repeatable)")
    network.add_argument("--custom-header", dest="custom_headers", action="append", nargs=2,
                         metavar=("NAME", "VALUE"), help="extra HTTP request header (repeatable)")
    network.add_argument("--cookie", dest="cookies", action="append", nargs=2,
                         metavar=("NAME", "VALUE"), help="cookie sent with http(s) inputs (repeatable)")

    toc = parser.add_argument_group("table of contents options")
    toc.add_argument("--xsl-style-sheet", metavar="PATH",
                     help="XSLT stylesheet applied to the outline to build the TOC")
    return parser


def parse_arguments(parser: ArgumentParser, argv: Sequence[str]) -> Tuple[Dict[str, object], List[str], argparse.Namespace]:
    """Split parsed arguments into render options, paths and control flags."""
    tokens, _ = strip_ignored_flags(argv)
    namespace = parser.parse_intermixed_args(tokens)
    parsed = vars(namespace)
    paths = list(parsed.pop("paths", []))
    control = argparse.Namespace(
        quiet=parsed.pop("quiet", False),
        log_level=parsed.pop("log_level", None),
        read_args_from_stdin=parsed.pop("read_args_from_stdin", False),
    )
    return parsed, paths, control


def build_job(paths: Sequence[str], config: RenderConfig) -> RenderJob:
    """Turn positional paths into a job; ``toc`` anywhere requests a TOC."""
    wants_toc = TOC_TOKEN in paths
    paths = [path for path in paths if path != TOC_TOKEN]
    if len(paths) < 2:
        raise UsageError("at least one input and an output path are required")
    if wants_toc:
        config = merge_config(config, {"toc": True})
    return RenderJob(inputs=tuple(paths[:-1]), output=paths[-1], config=config)


def _configure_logging(control: argparse.Namespace) -> None:
    if control.log_level:
        set_level(control.log_level)
    elif control.quiet:
        set_level("none")


async def _run_stdin_batch(parser: ArgumentParser, base_config: RenderConfig) -> int:
    transformer = StylesheetCache()

    def parse_line(tokens):
        exiting = EXITING_FLAGS.intersection(tokens)
        if exiting:
            raise UsageError(f"{sorted(exiting)[0]} is not allowed on a batch line")
        options, paths, _ = parse_arguments(parser, tokens)
        return build_job(paths, merge_config(base_config, options))

    async def runner(job):
        return await convert(job, transformer)

    result = await run_batch(sys.stdin, parse_line, runner)
    return result.exit_code


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    parser = build_parser()

    try:
        options, paths, control = parse_arguments(parser, argv)
        _configure_logging(control)
        base_config = merge_config(RenderConfig(), options)

        if control.read_args_from_stdin:
            if paths:
                LOGGER.warning("Ignoring positional arguments in --read-args-from-stdin mode")
            return asyncio.run(_run_stdin_batch(parser, base_config))

        job = build_job(paths, base_config)
        asyncio.run(convert(job))
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return 2
    except Browser2PdfError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    cli()

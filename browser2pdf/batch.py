"""Run one conversion per line of a control stream."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, List

from browser2pdf.config import RenderJob
from browser2pdf.errors import BatchLineError, Browser2PdfError
from browser2pdf.logger import get_logger

LOGGER = get_logger(__name__)

_QUOTES = ("'", '"')


def tokenize_line(line: str) -> List[str]:
    """Split a control line into arguments.

    Whitespace separates tokens except inside single or double quotes, and a
    backslash takes the next character literally, quotes included.
    """
    tokens: List[str] = []
    current: List[str] = []
    in_token = False
    quote = None
    chars = iter(line)
    for char in chars:
        if char == "\\":
            escaped = next(chars, None)
            if escaped is None:
                raise BatchLineError("trailing backslash")
            current.append(escaped)
            in_token = True
        elif quote is not None:
            if char == quote:
                quote = None
            else:
                current.append(char)
        elif char in _QUOTES:
            quote = char
            in_token = True
        elif char.isspace():
            if in_token:
                tokens.append("".join(current))
                current = []
                in_token = False
        else:
            current.append(char)
            in_token = True

    if quote is not None:
        raise BatchLineError(f"unterminated {quote} quote")
    if in_token:
        tokens.append("".join(current))
    return tokens


@dataclass
class BatchResult:
    succeeded: int = 0
    failed: int = 0

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0


async def run_batch(
    lines: Iterable[str],
    parse_line: Callable[[List[str]], RenderJob],
    runner: Callable[[RenderJob], Awaitable[object]],
) -> BatchResult:
    """Convert each non-blank line independently.

    ``parse_line`` turns a token list into a job and raises ``UsageError`` on
    bad arguments, which stops the stream.  Any other failure is logged and
    counted against that line only.
    """
    result = BatchResult()
    for lineno, line in enumerate(lines, 1):
        if not line.strip():
            continue
        try:
            job = parse_line(tokenize_line(line))
        except BatchLineError as e:
            LOGGER.error("Line %d: %s", lineno, e)
            result.failed += 1
            continue

        try:
            await runner(job)
        except Browser2PdfError as e:
            LOGGER.error("Line %d failed: %s", lineno, e)
            result.failed += 1
            continue
        result.succeeded += 1

    LOGGER.info("Batch finished: %d succeeded, %d failed", result.succeeded, result.failed)
    return result

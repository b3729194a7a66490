"""Render pages to PDF buffers with headless Chromium."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import urlparse

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from browser2pdf.config import RenderConfig
from browser2pdf.errors import FilesystemError, RenderError
from browser2pdf.logger import get_logger
from browser2pdf.units import inches_css
from browser2pdf.utils import get_pdf_page_count

LOGGER = get_logger(__name__)

NAVIGATION_TIMEOUT_MS = 60000
WINDOW_STATUS_TIMEOUT_MS = 30000
WINDOW_STATUS_POLL_MS = 100
SLOW_SCRIPT_TIMEOUT = 10.0
MIN_ZOOM, MAX_ZOOM = 0.1, 2.0

IDLE_SCRIPT = "() => new Promise(resolve => requestIdleCallback(() => resolve(true)))"
STOP_SCRIPT = "() => window.stop()"


@dataclass(frozen=True)
class RenderedPage:
    pdf: bytes
    page_count: int


class PageRenderer(Protocol):
    async def render(self, url: str, config: RenderConfig) -> RenderedPage:
        ...


def pdf_options(config: RenderConfig) -> dict:
    """Translate a RenderConfig into keyword arguments for ``page.pdf``."""
    options = {
        "landscape": config.landscape,
        "print_background": config.background,
        "margin": {side: inches_css(value) for side, value in config.margins.items()},
        "scale": zoom_scale(config.zoom),
        "display_header_footer": False,
    }
    if config.page_width is not None and config.page_height is not None:
        options["width"] = inches_css(config.page_width)
        options["height"] = inches_css(config.page_height)
    else:
        options["format"] = config.page_size
    return options


def zoom_scale(zoom: float) -> float:
    clamped = min(max(zoom, MIN_ZOOM), MAX_ZOOM)
    if clamped != zoom:
        LOGGER.warning("Zoom %s outside supported range, using %s", zoom, clamped)
    return clamped


def context_options(config: RenderConfig) -> dict:
    options = {"java_script_enabled": config.enable_javascript}
    if config.viewport:
        width, height = config.viewport
        options["viewport"] = {"width": width, "height": height}
    if config.custom_headers:
        options["extra_http_headers"] = dict(config.custom_headers)
    return options


def launch_options(config: RenderConfig) -> dict:
    options = {"headless": True}
    if config.proxy:
        proxy = {"server": config.proxy}
        if config.proxy_bypass:
            proxy["bypass"] = ",".join(config.proxy_bypass)
        options["proxy"] = proxy
    return options


class PlaywrightRenderer:
    """PageRenderer backed by one Chromium instance.

    Use as an async context manager; every ``render`` call gets its own
    browser context so headers, cookies and viewport never leak between
    inputs.
    """

    def __init__(self, config: Optional[RenderConfig] = None) -> None:
        self._launch_config = config or RenderConfig()
        self._playwright = None
        self._browser = None

    async def __aenter__(self) -> "PlaywrightRenderer":
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(**launch_options(self._launch_config))
        except PlaywrightError as e:
            await self._playwright.stop()
            raise RenderError(f"Could not launch Chromium: {e}") from e
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()

    async def render(self, url: str, config: RenderConfig) -> RenderedPage:
        if self._browser is None:
            raise RuntimeError("PlaywrightRenderer must be entered before rendering")

        user_css = _read_user_style_sheet(config.user_style_sheet)
        context = await self._browser.new_context(**context_options(config))
        try:
            if config.cookies and urlparse(url).scheme in ("http", "https"):
                await context.add_cookies(
                    [{"name": name, "value": value, "url": url} for name, value in config.cookies]
                )
            page = await context.new_page()
            await page.emulate_media(media="print" if config.print_media_type else "screen")
            await page.goto(url, wait_until="load", timeout=NAVIGATION_TIMEOUT_MS)

            if user_css:
                await page.add_style_tag(content=user_css)
            if config.enable_javascript:
                for script in config.run_scripts:
                    await page.evaluate(script)
                await self._wait_for_idle(page, config)
                if config.javascript_delay:
                    await page.wait_for_timeout(config.javascript_delay)
                if config.window_status is not None:
                    await self._wait_for_window_status(page, config.window_status)

            pdf_bytes = await page.pdf(**pdf_options(config))
        except PlaywrightError as e:
            raise RenderError(f"Failed to render {_describe(url)}: {e}") from e
        finally:
            await context.close()

        return RenderedPage(pdf=pdf_bytes, page_count=get_pdf_page_count(pdf_bytes))

    async def _wait_for_idle(self, page, config: RenderConfig) -> None:
        try:
            await asyncio.wait_for(page.evaluate(IDLE_SCRIPT), timeout=SLOW_SCRIPT_TIMEOUT)
            return
        except asyncio.TimeoutError:
            pass

        if not config.stop_slow_scripts:
            LOGGER.warning("Page scripts still busy after %.0fs; continuing", SLOW_SCRIPT_TIMEOUT)
            return
        LOGGER.warning("Page scripts still busy after %.0fs; stopping them", SLOW_SCRIPT_TIMEOUT)
        try:
            await asyncio.wait_for(page.evaluate(STOP_SCRIPT), timeout=1.0)
        except (asyncio.TimeoutError, PlaywrightError) as e:
            LOGGER.warning("Could not stop slow script: %s", e)

    async def _wait_for_window_status(self, page, status: str) -> None:
        try:
            await page.wait_for_function(
                "status => window.status === status",
                arg=status,
                polling=WINDOW_STATUS_POLL_MS,
                timeout=WINDOW_STATUS_TIMEOUT_MS,
            )
        except PlaywrightTimeoutError:
            LOGGER.warning("window.status never became %r; printing anyway", status)


def _read_user_style_sheet(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Cannot read user style sheet {path}: {e}") from e


def _describe(url: str) -> str:
    return "generated table of contents" if url.startswith("data:") else url

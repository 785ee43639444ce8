from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from playwright.async_api import Browser, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from mirrormd.domain.errors import RenderError
from mirrormd.domain.interfaces import IRenderEngine

log = logging.getLogger(__name__)

# Sandboxing is disabled so Chromium starts inside containers without extra privileges.
DEFAULT_LAUNCH_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
)


@dataclass(frozen=True)
class PageOptions:
    """Page geometry for PDF rasterisation (A4, 20mm margins, backgrounds on)."""

    format: str = "A4"
    margin_top: str = "20mm"
    margin_right: str = "20mm"
    margin_bottom: str = "20mm"
    margin_left: str = "20mm"
    print_background: bool = True

    def to_playwright(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "margin": {
                "top": self.margin_top,
                "right": self.margin_right,
                "bottom": self.margin_bottom,
                "left": self.margin_left,
            },
            "print_background": self.print_background,
        }


class HeadlessRenderEngine(IRenderEngine):
    """
    One shared headless Chromium for the whole process.

      - acquire(): lazy, idempotent launch; concurrent first callers share a single launch
      - render_to_pdf(): every call gets its own page (and browser context), always closed
      - shutdown(): idempotent teardown, safe to call from the app lifespan on SIGINT/SIGTERM
    """

    def __init__(
        self,
        *,
        executable_path: str | None = None,
        timeout_ms: int = 30000,
        launch_args: Sequence[str] = DEFAULT_LAUNCH_ARGS,
        playwright_factory: Callable[[], Any] = async_playwright,
    ) -> None:
        self._executable_path = executable_path
        self._timeout_ms = timeout_ms
        self._launch_args = list(launch_args)
        self._factory = playwright_factory
        self._lock = asyncio.Lock()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self.launch_count = 0

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    # ---------- lifecycle ----------

    async def acquire(self) -> Browser:
        if self.is_running:
            return self._browser  # type: ignore[return-value]

        async with self._lock:
            # another caller may have launched while we waited
            if self.is_running:
                return self._browser  # type: ignore[return-value]
            await self._close_locked()
            self._browser = await self._launch()
            return self._browser

    async def _launch(self) -> Browser:
        log.info("Launching headless Chromium")
        pw = None
        try:
            pw = await self._factory().start()
            browser = await pw.chromium.launch(
                headless=True,
                args=self._launch_args,
                executable_path=self._executable_path,
                timeout=self._timeout_ms,
            )
        except Exception as e:
            # driver start-up can fail with OSError or NotImplementedError, not only PlaywrightError
            log.error("Failed to launch headless Chromium: %s", e)
            if pw is not None:
                try:
                    await pw.stop()
                except Exception as stop_err:
                    log.warning("Playwright driver did not stop cleanly: %s", stop_err)
            raise RenderError("Render engine could not be started") from e

        self._playwright = pw
        self.launch_count += 1
        log.info("Headless Chromium ready (launch #%d)", self.launch_count)
        return browser

    async def shutdown(self) -> None:
        async with self._lock:
            await self._close_locked()

    async def _close_locked(self) -> None:
        browser, pw = self._browser, self._playwright
        self._browser = None
        self._playwright = None
        if browser is None and pw is None:
            return
        log.info("Shutting down headless Chromium")
        try:
            if browser is not None:
                await browser.close()
        except PlaywrightError as e:
            log.warning("Browser did not close cleanly: %s", e)
        finally:
            if pw is not None:
                await pw.stop()

    # ---------- rendering ----------

    async def render_to_pdf(self, html: str, options: PageOptions | None = None) -> bytes:
        opts = options or PageOptions()
        browser = await self.acquire()
        try:
            page = await browser.new_page()
        except PlaywrightError as e:
            raise RenderError("Could not open a render page") from e

        try:
            page.set_default_timeout(self._timeout_ms)
            await page.set_content(html, wait_until="networkidle", timeout=self._timeout_ms)
            await page.emulate_media(media="print")
            return await page.pdf(**opts.to_playwright())
        except PlaywrightError as e:
            raise RenderError(f"PDF rendering failed: {e}") from e
        finally:
            try:
                await page.close()
            except PlaywrightError as e:
                log.warning("Render page did not close cleanly: %s", e)

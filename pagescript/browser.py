import logging
from typing import Any, Optional

from playwright.async_api import BrowserContext, Page, Playwright, async_playwright

from pagescript.errors import LaunchError, NavigationError

logger = logging.getLogger(__name__)


def wrap_function_body(script: str) -> str:
    return f"(function () {{\n{script}\n}})"


class BrowserSession:

    def __init__(self, playwright: Playwright, context: BrowserContext, page: Page, user_data_dir: str):
        self.playwright = playwright
        self.context = context
        self.page = page
        self.user_data_dir = user_data_dir
        self.closed_by_user = False
        self._stopped = False

    @classmethod
    async def launch(cls, user_data_dir: str, *, headless: bool = True, browser: str = "chromium") -> "BrowserSession":
        playwright = await async_playwright().start()
        try:
            browser_type = getattr(playwright, browser)
            context = await browser_type.launch_persistent_context(user_data_dir, headless=headless)
            page = context.pages[0] if context.pages else await context.new_page()
        except Exception as e:
            await playwright.stop()
            raise LaunchError(f"Failed to launch {browser}: {e}") from e

        logger.info(f"Launched {browser} (headless={headless}) with user data dir {user_data_dir}")
        return cls(playwright, context, page, user_data_dir)

    async def goto(self, url: str, timeout: Optional[float] = None) -> None:
        try:
            await self.page.goto(url, wait_until="networkidle", timeout=timeout)
        except Exception as e:
            raise NavigationError(f"Failed to navigate to {url}: {e}") from e
        logger.info(f"Navigated to {url}")

    async def evaluate(self, script: str) -> Any:
        return await self.page.evaluate(wrap_function_body(script))

    async def screenshot(self, path: str) -> None:
        await self.page.screenshot(path=path, full_page=True)

    async def wait_for_close(self) -> None:
        await self.context.wait_for_event("close", timeout=0)
        self.closed_by_user = True

    async def close(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        try:
            if not self.closed_by_user:
                await self.context.close()
        finally:
            await self.playwright.stop()
        logger.debug("Browser session closed")

from playwright.async_api import Page


async def run(page: Page) -> str:
    return await page.title()

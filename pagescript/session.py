"""Drives one browser session from launch to cleanup.

Steps run strictly in this order: launch, navigate, page scripts (concurrent
among themselves), host script, screenshot, visual diff, interactive hold,
close, cleanup. Launch and navigation failures are fatal; a failing script,
diff or cleanup is reported and the run carries on.
"""

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from pagescript.browser import BrowserSession
from pagescript.config import Settings
from pagescript.errors import CleanupError, EvaluationError, VisualDiffError
from pagescript.models import EvaluationResult, RunConfiguration, RunOutcome, ScreenshotSpec, ScriptSource
from pagescript.scripts import load_host_script, run_host_script
from pagescript.status import StatusReporter
from pagescript.visual_diff import compare_images

logger = logging.getLogger(__name__)

Launcher = Callable[..., Awaitable[BrowserSession]]

INTERACTIVE_NOTICE = (
    "Interactive mode enabled. Please handle any interactions manually. "
    "(any script output will be printed afterwards)"
)


class SessionController:

    def __init__(
        self,
        reporter: StatusReporter,
        settings: Settings,
        launcher: Optional[Launcher] = None,
    ):
        self.reporter = reporter
        self.settings = settings
        self.launcher = launcher or BrowserSession.launch

    async def run(self, config: RunConfiguration, payload: List[ScriptSource]) -> RunOutcome:
        host_module = load_host_script(config.internal_script) if config.internal_script else None

        session = await self._launch(headless=not config.interactive)
        try:
            await self._navigate(session, config.url)

            results = await self.evaluate_all(session, payload)
            if host_module is not None:
                results.append(await self._run_host(session, host_module, config.internal_script))

            if config.screenshot is not None:
                await self._screenshot(session, config.screenshot)

            if config.interactive:
                await self._hold(session)
        finally:
            await self._close(session)

        if config.cleanup:
            self.cleanup(session.user_data_dir)

        return RunOutcome(results=results, closed_by_user=session.closed_by_user)

    async def _launch(self, headless: bool) -> BrowserSession:
        self.reporter.start("Launching browser...")
        session = await self.launcher(
            self.settings.user_data_dir,
            headless=headless,
            browser=self.settings.browser,
        )
        self.reporter.succeed("Browser launched.")
        return session

    async def _navigate(self, session: BrowserSession, url: str) -> None:
        self.reporter.start(f"Navigating to {url}...")
        await session.goto(url, timeout=self.settings.navigation_timeout_ms)
        self.reporter.succeed(f"Navigated to {url}.")

    async def evaluate_one(self, session: BrowserSession, source: ScriptSource) -> EvaluationResult:
        if not source.text:
            return EvaluationResult(source=source.label)
        try:
            value = await session.evaluate(source.text)
        except Exception as e:
            error = EvaluationError(source.label, str(e))
            logger.error(f"Script evaluation failed: {error}")
            return EvaluationResult(source=source.label, error=error.message)
        return EvaluationResult(source=source.label, value=value)

    async def evaluate_all(self, session: BrowserSession, payload: List[ScriptSource]) -> List[EvaluationResult]:
        if not payload:
            return []

        self.reporter.start("Evaluating scripts on the page...")
        results = list(await asyncio.gather(*(self.evaluate_one(session, source) for source in payload)))

        failed = [result for result in results if not result.ok]
        if failed:
            self.reporter.fail(f"{len(failed)} of {len(results)} script(s) failed.")
        else:
            self.reporter.succeed("Script evaluated." if len(results) == 1 else f"{len(results)} scripts evaluated.")
        return results

    async def _run_host(self, session: BrowserSession, module, label: str) -> EvaluationResult:
        self.reporter.start(f"Running internal script {label}...")
        try:
            value = await run_host_script(module, session.page, label)
        except EvaluationError as e:
            logger.error(f"Internal script failed: {e}")
            self.reporter.fail(f"Internal script {label} failed.")
            return EvaluationResult(source=label, error=e.message)
        self.reporter.succeed(f"Internal script {label} finished.")
        return EvaluationResult(source=label, value=value)

    async def _screenshot(self, session: BrowserSession, spec: ScreenshotSpec) -> None:
        self.reporter.start("Taking screenshot...")
        await session.screenshot(spec.output)
        self.reporter.succeed(f"Screenshot saved to {spec.output}.")

        if spec.compare:
            await self._diff(spec)

    async def _diff(self, spec: ScreenshotSpec) -> None:
        self.reporter.start(f"Comparing screenshot with {spec.compare}...")
        try:
            result = await asyncio.to_thread(compare_images, spec.output, spec.compare, spec.diff)
        except VisualDiffError as e:
            logger.error(f"Visual diff failed: {e}")
            self.reporter.fail(f"Visual diff failed: {e}")
            return

        if result.identical:
            self.reporter.succeed(f"Screenshot matches {spec.compare}.")
        else:
            self.reporter.fail(
                f"Screenshot differs from {spec.compare}: {result.mismatched_pixels} pixels "
                f"({result.mismatch_ratio:.2%})."
            )
        if result.diff_path:
            self.reporter.info(f"Diff image saved to {result.diff_path}.")

    async def _hold(self, session: BrowserSession) -> None:
        self.reporter.info(INTERACTIVE_NOTICE)
        self.reporter.start("Waiting for user to finish their business and close the browser window...")
        await session.wait_for_close()
        self.reporter.succeed("Browser window closed.")

    async def _close(self, session: BrowserSession) -> None:
        try:
            await session.close()
        except Exception as e:
            logger.warning(f"Error while closing browser: {e}")

    def cleanup(self, user_data_dir: str) -> bool:
        self.reporter.start("Cleaning up user data directory...")
        try:
            remove_user_data_dir(user_data_dir)
        except CleanupError as e:
            logger.warning(str(e))
            self.reporter.fail("Could not clean up user data directory.")
            return False
        self.reporter.succeed("User data directory cleaned up.")
        return True


def remove_user_data_dir(user_data_dir: str) -> None:
    path = Path(user_data_dir)
    if not path.exists():
        return
    try:
        shutil.rmtree(path)
    except OSError as e:
        raise CleanupError(f"Failed to remove user data directory {user_data_dir}: {e}") from e

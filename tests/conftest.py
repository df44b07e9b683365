import asyncio
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pytest
from PIL import Image

from pagescript.browser import BrowserSession
from pagescript.config import Settings


class RecordingReporter:

    def __init__(self):
        self.events: List[Tuple[str, str]] = []

    def start(self, label: str) -> None:
        self.events.append(("start", label))

    def succeed(self, label: str) -> None:
        self.events.append(("succeed", label))

    def fail(self, label: str) -> None:
        self.events.append(("fail", label))

    def info(self, label: str) -> None:
        self.events.append(("info", label))

    def labels(self, kind: str) -> List[str]:
        return [label for event, label in self.events if event == kind]


class FakePage:

    def __init__(self, scripts: Dict[str, Tuple[float, Any]] = None, fail_urls: List[str] = None):
        # script body -> (delay seconds, value or exception)
        self.scripts = scripts or {}
        self.fail_urls = fail_urls or []
        self.visited: List[str] = []
        self.evaluated: List[str] = []
        self.finished: List[str] = []
        self.screenshots: List[str] = []
        self.title_text = "Fake Title"

    async def goto(self, url: str, wait_until: str = None, timeout: float = None):
        if url in self.fail_urls:
            raise Exception(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        self.visited.append(url)

    async def evaluate(self, expression: str):
        self.evaluated.append(expression)
        for body, (delay, outcome) in self.scripts.items():
            if body in expression:
                await asyncio.sleep(delay)
                self.finished.append(body)
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        return None

    async def screenshot(self, path: str, full_page: bool = False):
        Image.new("RGBA", (20, 10), (255, 255, 255, 255)).save(path)
        self.screenshots.append(path)

    async def title(self) -> str:
        return self.title_text


class FakeContext:

    def __init__(self):
        self.closed = False
        self.close_calls = 0
        self._user_closed = asyncio.Event()

    def simulate_user_close(self):
        self.closed = True
        self._user_closed.set()

    async def wait_for_event(self, event: str, timeout: float = None):
        assert event == "close"
        assert timeout == 0
        await self._user_closed.wait()

    async def close(self):
        self.close_calls += 1
        self.closed = True


class FakePlaywright:

    def __init__(self):
        self.stopped = False

    async def stop(self):
        self.stopped = True


class FakeLauncher:

    def __init__(self, page_factory=None):
        self.page_factory = page_factory or FakePage
        self.calls: List[Dict[str, Any]] = []
        self.sessions: List[BrowserSession] = []

    async def __call__(self, user_data_dir: str, *, headless: bool = True, browser: str = "chromium"):
        self.calls.append({"user_data_dir": user_data_dir, "headless": headless, "browser": browser})
        Path(user_data_dir).mkdir(parents=True, exist_ok=True)
        (Path(user_data_dir) / "Preferences").write_text("{}", encoding="utf-8")
        session = BrowserSession(FakePlaywright(), FakeContext(), self.page_factory(), user_data_dir)
        self.sessions.append(session)
        return session


@pytest.fixture(name="reporter")
def reporter_fixture():
    return RecordingReporter()


@pytest.fixture(name="settings")
def settings_fixture(tmp_path: Path):
    return Settings(user_data_dir=str(tmp_path / "profile"), navigation_timeout_ms=1000)


@pytest.fixture(name="launcher")
def launcher_fixture():
    return FakeLauncher()


def write_script(directory: Path, name: str, body: str) -> str:
    path = directory / name
    path.write_text(body, encoding="utf-8")
    return str(path)

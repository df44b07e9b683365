"""Progress output for a run.

The console reporter draws a transient spinner while a step is in flight and
leaves a one-line verdict behind once it settles. Everything goes to stderr so
stdout carries only script output.
"""

from typing import Optional, Protocol

from rich.console import Console
from rich.markup import escape
from rich.status import Status


class StatusReporter(Protocol):

    def start(self, label: str) -> None: ...

    def succeed(self, label: str) -> None: ...

    def fail(self, label: str) -> None: ...

    def info(self, label: str) -> None: ...


class ConsoleStatusReporter:

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self._status: Optional[Status] = None

    def _stop(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def start(self, label: str) -> None:
        self._stop()
        self._status = self.console.status(f"[blue]{escape(label)}[/blue]")
        self._status.start()

    def succeed(self, label: str) -> None:
        self._stop()
        self.console.print(f"[green]✔ {escape(label)}[/green]")

    def fail(self, label: str) -> None:
        self._stop()
        self.console.print(f"[red]✖ {escape(label)}[/red]")

    def info(self, label: str) -> None:
        self._stop()
        self.console.print(f"[blue]ℹ {escape(label)}[/blue]")


class QuietStatusReporter:

    def start(self, label: str) -> None:
        pass

    def succeed(self, label: str) -> None:
        pass

    def fail(self, label: str) -> None:
        pass

    def info(self, label: str) -> None:
        pass


def make_reporter(quiet: bool, console: Optional[Console] = None) -> StatusReporter:
    if quiet:
        return QuietStatusReporter()
    return ConsoleStatusReporter(console)

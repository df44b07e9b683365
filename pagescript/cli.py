import asyncio
import logging
import sys
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape

from pagescript.config import Settings, load_settings
from pagescript.errors import PageScriptError
from pagescript.options import USAGE_EXIT_CODE, parse_options
from pagescript.scripts import load_scripts
from pagescript.session import Launcher, SessionController
from pagescript.status import StatusReporter, make_reporter

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("pagescript").setLevel(level)


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    reporter: Optional[StatusReporter] = None,
    settings: Optional[Settings] = None,
    launcher: Optional[Launcher] = None,
) -> int:
    config = parse_options(argv)
    err_console = Console(stderr=True)

    try:
        settings = settings or load_settings()
    except PageScriptError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        return USAGE_EXIT_CODE

    configure_logging("DEBUG" if config.verbose else settings.log_level)
    reporter = reporter or make_reporter(config.quiet)

    try:
        payload = load_scripts(config.script_files, strict=config.strict, inline_script=config.inline_script)
        controller = SessionController(reporter, settings, launcher=launcher)
        outcome = asyncio.run(controller.run(config, payload))
    except Exception as e:
        logger.debug("Run failed", exc_info=True)
        reporter.fail("An error occurred.")
        err_console.print(f"[red]{escape(str(e))}[/red]")
        return 1

    if outcome.has_output:
        print(outcome.output)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()

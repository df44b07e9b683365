import argparse
import sys
from typing import List, Optional, Sequence

from pagescript import __version__
from pagescript.models import RunConfiguration, ScreenshotSpec

PROG = "pagescript"
USAGE_EXIT_CODE = 1


class _ArgumentParser(argparse.ArgumentParser):

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(USAGE_EXIT_CODE, f"{self.prog}: error: {message}\n")


def split_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def parse_screenshot(raw: str) -> ScreenshotSpec:
    parts = [part.strip() for part in raw.split(",")]
    if len(parts) > 3:
        raise ValueError(f"expected <path>[,<comparePath>[,<diffPath>]], got {len(parts)} entries")
    if not parts[0]:
        raise ValueError("screenshot output path must not be empty")

    compare = parts[1] if len(parts) > 1 and parts[1] else None
    diff = parts[2] if len(parts) > 2 and parts[2] else None
    if diff and not compare:
        raise ValueError("a diff output path requires a compare path")
    return ScreenshotSpec(output=parts[0], compare=compare, diff=diff)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        description="Evaluate JavaScript on a webpage using a Playwright-driven browser.",
    )
    parser.add_argument("url", help="URL of the page to open.")
    parser.add_argument(
        "-f",
        "--scriptFiles",
        "--scriptFile",
        dest="script_files",
        metavar="PATHS",
        help="Comma separated list of .js files to evaluate in the page context.",
    )
    parser.add_argument(
        "-s",
        "--script",
        dest="inline_script",
        metavar="TEXT",
        help="Inline script body to evaluate in the page context (cannot be combined with --scriptFiles).",
    )
    parser.add_argument(
        "-is",
        "--internal-script",
        dest="internal_script",
        metavar="PATH",
        help="Python file exposing run(page), executed in this process against the loaded page.",
    )
    parser.add_argument(
        "-o",
        "--screenshot",
        metavar="PATH[,COMPARE[,DIFF]]",
        help="Save a full-page screenshot, optionally diffing it against COMPARE and writing DIFF.",
    )
    parser.add_argument(
        "-i", "--interactive", action="store_true", help="Open a visible browser and wait until it is closed."
    )
    parser.add_argument(
        "-c", "--cleanup", action="store_true", help="Delete the user data directory after the run."
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress progress output.")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Abort before launching the browser when a script file is missing.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_options(argv: Optional[Sequence[str]] = None) -> RunConfiguration:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.script_files is not None and args.inline_script is not None:
        parser.error("--scriptFiles and --script are mutually exclusive")

    screenshot = None
    if args.screenshot is not None:
        try:
            screenshot = parse_screenshot(args.screenshot)
        except ValueError as e:
            parser.error(f"invalid --screenshot value: {e}")

    config = RunConfiguration(
        url=args.url,
        script_files=split_list(args.script_files),
        inline_script=args.inline_script,
        internal_script=args.internal_script,
        screenshot=screenshot,
        interactive=args.interactive,
        cleanup=args.cleanup,
        quiet=args.quiet,
        strict=args.strict,
        verbose=args.verbose,
    )

    if not config.has_work:
        parser.error(
            "one (or more) of --scriptFiles, --script, --internal-script, --interactive "
            "or --screenshot must be provided"
        )
    return config

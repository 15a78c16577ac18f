from __future__ import annotations

import argparse
import logging
import sys
from typing import IO, Callable, List, Optional

from core import (
    PrizeSettings,
    load_settings,
    resolve_students,
    summarize,
    validate_settings,
)
from logging_config import setup_logging
from report import render_json, render_report

logger = logging.getLogger("prizepicker.main")

BANNER = "=== SCIMS $1000 Prize - GPA Priority Queue ==="
MENU = (
    "Load students from:\n"
    "  1) Built-in sample (hardcoded)\n"
    "  2) Pick a CSV/TXT file (name,gpa) via file dialog"
)
FILE_CHOICE = "2"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="prizepicker",
        description="Pick GPA prize winners from the built-in sample or a CSV/TXT file.",
    )
    src = p.add_mutually_exclusive_group()
    src.add_argument("--file", help="load students from this CSV/TXT file (no prompt)")
    src.add_argument("--sample", action="store_true", help="use the built-in sample (no prompt)")
    src.add_argument("--gui", action="store_true", help="open the results window")
    p.add_argument("--config", help="JSON settings file (created with defaults if missing)")
    p.add_argument("--max-recipients", type=int, help="number of winners to pick")
    p.add_argument("--threshold", type=float, help="GPA must be strictly above this")
    p.add_argument("--json", metavar="PATH", help="also write a JSON report ('-' for stdout)")
    p.add_argument("--plot", action="store_true", help="show a bar chart of the result")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--log-file", help="also write the log to this file")
    return p


def resolve_settings(args: argparse.Namespace) -> PrizeSettings:
    settings = load_settings(args.config) if args.config else PrizeSettings()
    return validate_settings(
        settings.gpa_threshold if args.threshold is None else args.threshold,
        settings.max_recipients if args.max_recipients is None else args.max_recipients,
    )


def prompt_choice(read_line: Optional[Callable[[], str]] = None, out: Optional[IO[str]] = None) -> str:
    """Show the menu and read one line; EOF reads as ''."""
    read_line = read_line if read_line is not None else sys.stdin.readline
    out = out if out is not None else sys.stdout
    print(BANNER, file=out)
    print(MENU, file=out)
    print("Choose [1/2]: ", end="", file=out, flush=True)
    return read_line().strip()


def interactive_picker() -> Callable[[], Optional[str]]:
    try:
        from gui import select_input_source
    except ImportError as e:
        # no tkinter: same as a cancelled dialog
        logger.warning("File dialog unavailable: %s", e)
        return lambda: None
    return select_input_source


def main(argv: Optional[List[str]] = None, select_path: Optional[Callable[[], Optional[str]]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # with JSON on stdout, everything else goes to stderr
    json_to_stdout = args.json == "-"
    out = sys.stderr if json_to_stdout else sys.stdout
    setup_logging(getattr(logging, args.log_level), args.log_file, stream=out)

    try:
        settings = resolve_settings(args)
    except (OSError, ValueError) as e:
        parser.error(f"bad settings: {e}")

    if args.gui:
        try:
            from gui import PrizeApp
        except ImportError as e:
            parser.error(f"--gui needs tkinter: {e}")

        app = PrizeApp(settings)
        app.mainloop()
        return 0

    if args.file:
        use_file, picker = True, (lambda: args.file)
    elif args.sample:
        use_file, picker = False, None
    else:
        use_file = prompt_choice(out=out) == FILE_CHOICE
        if select_path is None and use_file:
            select_path = interactive_picker()
        picker = select_path

    result = resolve_students(use_file, picker)
    for notice in result.notices:
        print(notice, file=out)
        print(file=out)

    summary = summarize(result.students, settings)

    if json_to_stdout:
        print(render_json(summary))
    else:
        print()
        print(render_report(summary))
        if args.json:
            with open(args.json, "w", encoding="utf-8") as f:
                f.write(render_json(summary) + "\n")

    if args.plot:
        from viz import plot_summary

        plot_summary(summary)

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Command-line entry point: an interactive command loop, or the HTTP server.

Usage:
  rollbook                 # interactive command loop
  rollbook --serve         # run the API with uvicorn
"""

import argparse
import sys
from typing import List, Optional, TextIO

from rollbook.core.config import get_config
from rollbook.core.exceptions import RollbookError
from rollbook.core.logging import get_logger, setup_logging
from rollbook.logic.messages import format_people
from rollbook.logic.parser import command_words
from rollbook.services.roster_service import RosterService, get_roster_service

EXIT_WORDS = ("exit", "quit")
PROMPT = "rollbook> "

logger = get_logger("cli")


def _show(service: RosterService, word: str, out: TextIO) -> None:
    """Print the list a listing command selected."""
    with service.reading() as store:
        if word == "list_consult":
            lines = [f"{i}. {c}" for i, c in enumerate(store.filtered_consultations(), start=1)]
            text = "\n".join(lines)
        elif word in ("list", "find", "find_group", "mark_all_attendance"):
            text = format_people(store.filtered_persons())
        else:
            return
    if text:
        print(text, file=out)


def run_repl(service: RosterService, lines: TextIO = sys.stdin, out: TextIO = sys.stdout) -> int:
    """Read commands line by line until EOF or an exit word."""
    interactive = lines.isatty()
    while True:
        if interactive:
            print(PROMPT, end="", file=out, flush=True)
        line = lines.readline()
        if not line:
            break
        text = line.strip()
        if not text:
            continue
        if text in EXIT_WORDS:
            break
        if text == "help":
            print("Commands: " + ", ".join(command_words()), file=out)
            continue
        try:
            result = service.execute(text)
        except RollbookError as e:
            print(e.message, file=out)
            continue
        print(result.feedback, file=out)
        _show(service, text.split()[0], out)
    return 0


def serve() -> int:
    """Run the HTTP API with the configured host and port."""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "rollbook.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="rollbook", description="Teaching assistant roster.")
    parser.add_argument("--serve", action="store_true", help="run the HTTP API instead of the command loop")
    parser.add_argument("--data-file", help="roster JSON file (defaults to the configured data file)")
    args = parser.parse_args(argv)

    setup_logging()
    if args.serve:
        return serve()

    try:
        service = RosterService(args.data_file) if args.data_file else get_roster_service()
    except RollbookError as e:
        logger.error("Could not load roster: %s", e.message)
        print(e.message, file=sys.stderr)
        return 1
    return run_repl(service)


if __name__ == "__main__":
    sys.exit(main())

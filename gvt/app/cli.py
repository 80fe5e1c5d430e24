"""gvt CLI.

Commands:
    init
    add <file> [-m <message>]
    detach <file> [-m <message>]
    commit <file> [-m <message>]
    checkout <version>
    version [<version>]
    history [-last <n>]
    status

Every outcome is printed (success to stdout, failures to stderr) and the
exit status is the code of the failure kind, 0 on success.
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from .. import __version__
from ..core.controller import NOT_INITIALIZED_MESSAGE, GvtController
from ..core.types import ErrorKind, OperationResult
from ..utils.env import get_project_root_override, log_debug


COMMANDS = ("init", "add", "detach", "commit", "checkout", "version", "history", "status")

MISSING_FILE = {
    "add": (ErrorKind.MISSING_ADD_ARG, "Please specify file to add."),
    "detach": (ErrorKind.MISSING_DETACH_ARG, "Please specify file to detach."),
    "commit": (ErrorKind.MISSING_COMMIT_ARG, "Please specify file to commit."),
}


@dataclass(frozen=True, slots=True)
class CommandInput:
    """Target file and optional message of a mutating command."""
    file: str | None
    message: str | None = None

    @classmethod
    def parse(cls, params: list[str]) -> CommandInput:
        """First parameter is the file; `-m <msg>` must be the last pair."""
        if len(params) >= 2 and params[-2] == "-m":
            return cls(file=params[0], message=params[-1])
        if params:
            return cls(file=params[0])
        return cls(file=None)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gvt",
        description="gvt - linear version tracking for the current directory",
        epilog="commands: " + ", ".join(COMMANDS),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )
    # One positional plus raw params: missing and unknown commands carry their
    # own exit codes, and `-m` / `-last` only count in fixed positions.
    parser.add_argument("command", nargs="?", help="Command to run")
    parser.add_argument("params", nargs=argparse.REMAINDER, help="Command arguments")
    return parser


def main(args: list[str] | None = None) -> int:
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.debug:
        os.environ["GVT_DEBUG"] = "1"

    controller = GvtController(project_root=_determine_project_root())
    result = run_command(controller, parsed.command, list(parsed.params))
    return report(result)


def run_command(controller: GvtController, command: str | None, params: list[str]) -> OperationResult:
    """Dispatch one request to the controller."""
    if not command:
        return OperationResult.fail(ErrorKind.MISSING_COMMAND, "Please specify command.")

    if command not in COMMANDS:
        return OperationResult.fail(ErrorKind.UNKNOWN_COMMAND, f"Unknown command {command}.")

    if command != "init" and not controller.is_initialized():
        return OperationResult.fail(ErrorKind.NOT_INITIALIZED, NOT_INITIALIZED_MESSAGE)

    log_debug(f"Running {command} with {params!r}")

    if command == "init":
        return controller.init()
    if command in MISSING_FILE:
        return cmd_mutate(controller, command, params)
    if command == "checkout":
        return cmd_checkout(controller, params)
    if command == "version":
        return controller.version_info(params[0] if params else None)
    if command == "history":
        return controller.history(parse_history_limit(params))
    return controller.status()


def cmd_mutate(controller: GvtController, command: str, params: list[str]) -> OperationResult:
    request = CommandInput.parse(params)
    if not request.file:
        kind, message = MISSING_FILE[command]
        return OperationResult.fail(kind, message)

    if command == "add":
        return controller.add(request.file, request.message)
    if command == "detach":
        return controller.detach(request.file, request.message)
    return controller.commit(request.file, request.message)


def cmd_checkout(controller: GvtController, params: list[str]) -> OperationResult:
    if not params:
        return OperationResult.fail(ErrorKind.INVALID_VERSION, "Invalid version number: ")
    return controller.checkout(params[0])


def parse_history_limit(params: list[str]) -> int | None:
    """`-last <n>` with a positive n; anything else lists everything."""
    if len(params) == 2 and params[0] == "-last":
        try:
            limit = int(params[1])
        except ValueError:
            return None
        return limit if limit > 0 else None
    return None


def report(result: OperationResult) -> int:
    """Print the outcome and return the exit status."""
    if result.success:
        if result.message:
            print(_printable(result.message))
        return 0

    stream = sys.stderr
    if result.kind in (ErrorKind.ALREADY_TRACKED, ErrorKind.NOT_TRACKED):
        stream = sys.stdout
    print(_printable(result.message), file=stream)
    if result.detail:
        print(_printable(result.detail), file=sys.stderr)
    return result.exit_code


def _printable(text: str) -> str:
    # Undecodable file-name bytes show up as lone surrogates; print them as U+FFFD
    return text.encode("utf-8", "surrogatepass").decode("utf-8", "replace")


def _determine_project_root() -> Path:
    return get_project_root_override() or Path.cwd()


if __name__ == "__main__":
    sys.exit(main())

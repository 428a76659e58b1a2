"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from cli.commands import COMMAND_HANDLERS
from cli.completer import GatewayCompleter
from cli.constants import (
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.parser import ParseError, parse_command


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    os.system("cls" if sys.platform == "win32" else "clear")


def show_welcome() -> None:
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def dispatch_command(cmd_obj) -> str:
    """Dispatch parsed command to the handler registered for its type."""
    handler = COMMAND_HANDLERS.get(type(cmd_obj))
    if handler is None:
        return f"Unknown command type: {type(cmd_obj)}"
    return handler(cmd_obj)


def run_line(line: str) -> str:
    """
    Parse and execute one command line.

    Returns:
        Handler output, or an error message when the line does not parse
    """
    try:
        return dispatch_command(parse_command(line))
    except ParseError as e:
        return f"Error: {e}"


def _redraw() -> None:
    clear_screen()
    show_welcome()


BUILTINS = {
    "help": lambda: print(HELP_TEXT),
    "clear": _redraw,
}


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    session: PromptSession = PromptSession(
        completer=GatewayCompleter(), history=InMemoryHistory(), style=STYLE
    )

    _redraw()

    while True:
        try:
            command = session.prompt([("class:prompt", PROMPT_TEXT)]).strip()
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break

        if not command:
            continue
        if command == "exit":
            print("Goodbye!")
            break
        if command in BUILTINS:
            BUILTINS[command]()
            continue

        print(run_line(command))

"""Tab completion for the File Gateway CLI."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, DOWNLOADS_DIR, UPLOADS_DIR


def _placeholder(message: str) -> Completion:
    return Completion("", start_position=0, display=message)


def complete_upload_source(partial: str) -> Iterable[Completion]:
    """
    Local files in uploads/, offered as 'uploads/<name>'.

    Shows a placeholder entry when there is nothing to offer.
    """
    uploads_path = Path.cwd() / UPLOADS_DIR

    if not uploads_path.is_dir():
        if not partial or UPLOADS_DIR.startswith(partial):
            yield _placeholder("(no files found - uploads/ directory missing)")
        return

    available_files = sorted(
        f"{UPLOADS_DIR}/{item.name}" for item in uploads_path.iterdir() if item.is_file()
    )

    if not available_files:
        if not partial or partial.startswith(UPLOADS_DIR) or UPLOADS_DIR.startswith(partial):
            yield _placeholder("(no files found in uploads/)")
        return

    partial_lower = partial.lower()
    for file_path in available_files:
        if file_path.lower().startswith(partial_lower):
            yield Completion(file_path, start_position=-len(partial))


def complete_download_target(partial: str) -> Iterable[Completion]:
    """
    Directories in the working directory, downloads/ first.
    """
    cwd = Path.cwd()
    directories = sorted(f"{item.name}/" for item in cwd.iterdir() if item.is_dir() and not item.name.startswith("."))
    default = f"{DOWNLOADS_DIR}/"
    if default in directories:
        directories.remove(default)
    directories.insert(0, default)

    for directory in directories:
        if directory.startswith(partial):
            yield Completion(directory, start_position=-len(partial))


# (command, argument position) -> completer for that argument
ARGUMENT_COMPLETERS = {
    ("upload", 1): complete_upload_source,
    ("download", 2): complete_download_target,
}


class GatewayCompleter(Completer):
    """
    Completes command names, local upload sources and download targets.
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()
        starting_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not starting_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        position = len(tokens) if starting_new_token else len(tokens) - 1
        completer = ARGUMENT_COMPLETERS.get((tokens[0].lower(), position))
        if completer is None:
            return

        yield from completer("" if starting_new_token else tokens[-1])

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

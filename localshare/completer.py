"""Custom completer for the LocalShare shell with remote file name completion."""

import shlex
from typing import Callable, Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from localshare.constants import COMMANDS, REMOTE_FILE_COMMANDS


class LocalShareCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Remote file name completion for 'download' and 'delete'
    """

    def __init__(self, remote_names: Callable[[], list[str]]):
        """
        Args:
            remote_names: Returns the names in the current listing
        """
        self.remote_names = remote_names

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        if command not in REMOTE_FILE_COMMANDS:
            return

        # Only the first argument names a remote file.
        argument_index = len(tokens) if is_typing_new_token else len(tokens) - 1
        if argument_index != 1:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        yield from self._complete_remote_files(current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_remote_files(self, partial: str) -> Iterable[Completion]:
        """Complete names from the listing, quoting those that need it."""
        needle = partial.lstrip("'\"").lower()
        for name in self.remote_names():
            if name.lower().startswith(needle):
                yield Completion(
                    shlex.quote(name),
                    start_position=-len(partial),
                    display=name,
                )

"""
Roster service: owns the single RosterStore and its storage.

Both adapters (the HTTP API and the command-line REPL) go through this
service, which serialises store access with one lock and saves the roster
after every successful change.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from rollbook.core.config import get_data_file_path
from rollbook.core.logging import get_logger
from rollbook.logic.commands import CommandResult
from rollbook.logic.parser import parse_command
from rollbook.storage.json_storage import JsonRosterStorage
from rollbook.store.roster import RosterStore

logger = get_logger("service")


class RosterService:
    """Serialised access to the roster store with save-on-success."""

    def __init__(self, data_file: Optional[Union[str, Path]] = None):
        self.storage = JsonRosterStorage(data_file or get_data_file_path())
        self._lock = threading.RLock()
        self.store = self._load()

    def _load(self) -> RosterStore:
        store = self.storage.read_roster()
        if store is None:
            logger.info("Starting with an empty roster at %s", self.storage.path)
            return RosterStore()
        return store

    @contextmanager
    def reading(self) -> Iterator[RosterStore]:
        """Yield the store under the lock without saving."""
        with self._lock:
            yield self.store

    @contextmanager
    def mutation(self) -> Iterator[RosterStore]:
        """
        Yield the store under the lock and save it if the block succeeds.

        Errors raised inside the block propagate and nothing is written.
        """
        with self._lock:
            yield self.store
            self.storage.save_roster(self.store)

    def execute(self, command_text: str) -> CommandResult:
        """
        Parse and run one text command, saving the roster if it changed data.

        Raises:
            RollbookError: If parsing or the store operation fails.
        """
        command = parse_command(command_text)
        with self._lock:
            try:
                result = command.execute(self.store)
            except Exception as e:
                logger.warning("Command %r rejected: %s", command_text, e)
                raise
            if command.MUTATES:
                self.storage.save_roster(self.store)
        logger.info("Command %r executed", command.COMMAND_WORD)
        return result


# Global roster service instance
_roster_service: Optional[RosterService] = None


def get_roster_service() -> RosterService:
    """Get the global roster service instance."""
    global _roster_service
    if _roster_service is None:
        _roster_service = RosterService()
    return _roster_service


def reset_roster_service() -> None:
    """Reset the global roster service (useful for testing)."""
    global _roster_service
    _roster_service = None

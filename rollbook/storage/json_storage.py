"""
JSON file storage for the roster.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from rollbook.core.exceptions import DataLoadingError
from rollbook.core.logging import get_logger
from rollbook.models.group import Group
from rollbook.schemas.storage import (
    StoredConsultation,
    StoredGroup,
    StoredPerson,
    StoredRoster,
)
from rollbook.store.roster import RosterStore

logger = get_logger("storage")


def roster_to_stored(store: RosterStore) -> StoredRoster:
    """Convert the store into its serialisable form."""
    return StoredRoster(
        persons=[StoredPerson.from_model(person) for person in store.persons],
        consultations=[StoredConsultation.from_model(c) for c in store.consultations],
        groups=[
            StoredGroup(
                group_id=group.group_id,
                nusnetids=[member.nusnetid for member in group.members],
            )
            for group in store.groups
        ],
    )


def stored_to_roster(stored: StoredRoster) -> RosterStore:
    """
    Build a RosterStore from stored data.

    Persons are added first, creating their groups from their own group ids.
    Stored groups are then recreated if still missing, so empty groups
    survive a round trip; their member lists are ignored. Consultations are
    restored last under the duplicate and overlap rules.

    Raises:
        DataLoadingError: If a field violates its constraints.
        DuplicateEntityError: If persons or consultations repeat.
        OverlappingConsultationError: If stored consultations overlap.
    """
    store = RosterStore()
    try:
        persons = [entry.to_model() for entry in stored.persons]
        group_ids = [Group(group_id=entry.group_id).group_id for entry in stored.groups]
        consultations = [entry.to_model() for entry in stored.consultations]
    except (ValidationError, ValueError) as e:
        raise DataLoadingError(f"Data file contains invalid values: {e}") from e

    for person in persons:
        store.add_person(person)
    for group_id in group_ids:
        if not store.has_group(group_id):
            store.add_group(group_id)
    for consultation in consultations:
        store.restore_consultation(consultation)
    return store


class JsonRosterStorage:
    """Reads and writes the roster as a pretty-printed JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read_roster(self) -> Optional[RosterStore]:
        """
        Load the roster from disk.

        Returns:
            The loaded store, or None if the file does not exist.

        Raises:
            DataLoadingError: If the file is unreadable or malformed.
        """
        if not self.path.exists():
            logger.info("Data file %s not found", self.path)
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to read data file %s: %s", self.path, e)
            raise DataLoadingError(f"Could not read data file {self.path}: {e}") from e

        try:
            stored = StoredRoster.model_validate(raw)
        except ValidationError as e:
            logger.warning("Data file %s has an invalid structure", self.path)
            raise DataLoadingError(f"Data file {self.path} has an invalid structure: {e}") from e

        store = stored_to_roster(stored)
        logger.info(
            "Loaded %d student(s) and %d consultation(s) from %s",
            len(store.persons),
            len(store.consultations),
            self.path,
        )
        return store

    def save_roster(self, store: RosterStore) -> None:
        """Write the roster atomically: a temporary file is renamed over the target."""
        payload = roster_to_stored(store).model_dump(by_alias=True)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise
        logger.debug("Saved roster to %s", self.path)

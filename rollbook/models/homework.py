"""
Homework records and the per-student homework tracker.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator

from rollbook.core.exceptions import EntityNotFoundError, InvalidRangeError, InvalidStatusError

MIN_ASSIGNMENT_ID = 1
MAX_ASSIGNMENT_ID = 13
NOT_MARKED = "not marked"


class HomeworkStatus(str, Enum):
    """Completion status of one homework assignment."""

    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    LATE = "late"

    @classmethod
    def parse(cls, value: Union["HomeworkStatus", str, None]) -> "HomeworkStatus":
        """Parse a status case-insensitively, raising InvalidStatusError."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidStatusError(value, [status.value for status in cls])


def check_assignment_id(assignment_id: int) -> int:
    """Return assignment_id, or raise InvalidRangeError if it is outside 1-13."""
    if not is_valid_assignment_id(assignment_id):
        raise InvalidRangeError("Homework id", assignment_id, MIN_ASSIGNMENT_ID, MAX_ASSIGNMENT_ID)
    return assignment_id


def is_valid_assignment_id(assignment_id: int) -> bool:
    return MIN_ASSIGNMENT_ID <= assignment_id <= MAX_ASSIGNMENT_ID


class Homework(BaseModel):
    """A single assignment and its status."""

    model_config = ConfigDict(frozen=True)

    assignment_id: int
    status: HomeworkStatus = HomeworkStatus.INCOMPLETE

    @field_validator("assignment_id")
    @classmethod
    def _check_range(cls, value: int) -> int:
        if not is_valid_assignment_id(value):
            raise ValueError(
                f"Homework id must be between {MIN_ASSIGNMENT_ID} and {MAX_ASSIGNMENT_ID}."
            )
        return value

    def __str__(self) -> str:
        return f"{self.assignment_id}: {self.status.value}"


class HomeworkTracker(BaseModel):
    """
    Immutable map from assignment id to Homework.

    Every operation returns a new tracker; entries are kept sorted by id so
    two trackers with the same assignments compare equal.
    """

    model_config = ConfigDict(frozen=True)

    homework: Tuple[Homework, ...] = ()

    @field_validator("homework")
    @classmethod
    def _unique_and_sorted(cls, value: Tuple[Homework, ...]) -> Tuple[Homework, ...]:
        ids = [hw.assignment_id for hw in value]
        if len(set(ids)) != len(ids):
            raise ValueError("Homework tracker contains duplicate assignment ids.")
        return tuple(sorted(value, key=lambda hw: hw.assignment_id))

    def as_map(self) -> Mapping[int, Homework]:
        """Read-only view keyed by assignment id."""
        return MappingProxyType({hw.assignment_id: hw for hw in self.homework})

    def contains(self, assignment_id: int) -> bool:
        return any(hw.assignment_id == assignment_id for hw in self.homework)

    def get(self, assignment_id: int) -> Optional[Homework]:
        for hw in self.homework:
            if hw.assignment_id == assignment_id:
                return hw
        return None

    def get_status(self, assignment_id: int) -> str:
        hw = self.get(assignment_id)
        return hw.status.value if hw else NOT_MARKED

    def add(self, assignment_id: int) -> "HomeworkTracker":
        """
        Assign homework with the default incomplete status.

        Adding an id that is already tracked returns this tracker unchanged.

        Raises:
            InvalidRangeError: If assignment_id is outside 1-13.
        """
        check_assignment_id(assignment_id)
        if self.contains(assignment_id):
            return self
        return HomeworkTracker(homework=self.homework + (Homework(assignment_id=assignment_id),))

    def remove(self, assignment_id: int) -> "HomeworkTracker":
        if not self.contains(assignment_id):
            raise EntityNotFoundError("Homework", assignment_id)
        return HomeworkTracker(
            homework=tuple(hw for hw in self.homework if hw.assignment_id != assignment_id)
        )

    def update_status(
        self, assignment_id: int, status: Union[HomeworkStatus, str]
    ) -> "HomeworkTracker":
        """
        Set the status of an assigned homework.

        Raises:
            EntityNotFoundError: If the assignment has not been added.
            InvalidStatusError: If status is not complete/incomplete/late.
        """
        if not self.contains(assignment_id):
            raise EntityNotFoundError("Homework", assignment_id)
        new_status = HomeworkStatus.parse(status)
        return HomeworkTracker(
            homework=tuple(
                Homework(assignment_id=assignment_id, status=new_status)
                if hw.assignment_id == assignment_id
                else hw
                for hw in self.homework
            )
        )

    def __str__(self) -> str:
        if not self.homework:
            return "no homework"
        return ", ".join(str(hw) for hw in self.homework)

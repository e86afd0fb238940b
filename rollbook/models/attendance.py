"""
Weekly attendance records and the per-student attendance sheet.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator

from rollbook.core.exceptions import InvalidRangeError, InvalidStatusError

MIN_WEEK = 2
MAX_WEEK = 13
NOT_MARKED = "not marked"


class AttendanceStatus(str, Enum):
    """Attendance outcome for one tutorial week."""

    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"

    @classmethod
    def parse(cls, value: Union["AttendanceStatus", str, None]) -> "AttendanceStatus":
        """Parse a status case-insensitively, raising InvalidStatusError."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidStatusError(value, [status.value for status in cls])


def is_valid_week(week: int) -> bool:
    return MIN_WEEK <= week <= MAX_WEEK


def check_week(week: int) -> int:
    """Return week, or raise InvalidRangeError if it is outside 2-13."""
    if not is_valid_week(week):
        raise InvalidRangeError("Week", week, MIN_WEEK, MAX_WEEK)
    return week


class Attendance(BaseModel):
    """Attendance of one student in one week."""

    model_config = ConfigDict(frozen=True)

    week: int
    status: AttendanceStatus

    @field_validator("week")
    @classmethod
    def _check_week(cls, value: int) -> int:
        if not is_valid_week(value):
            raise ValueError(f"Week must be between {MIN_WEEK} and {MAX_WEEK}.")
        return value

    def __str__(self) -> str:
        return f"W{self.week}: {self.status.value}"


class AttendanceSheet(BaseModel):
    """Immutable map from week number to Attendance, sorted by week."""

    model_config = ConfigDict(frozen=True)

    records: Tuple[Attendance, ...] = ()

    @field_validator("records")
    @classmethod
    def _unique_and_sorted(cls, value: Tuple[Attendance, ...]) -> Tuple[Attendance, ...]:
        weeks = [record.week for record in value]
        if len(set(weeks)) != len(weeks):
            raise ValueError("Attendance sheet contains duplicate weeks.")
        return tuple(sorted(value, key=lambda record: record.week))

    def as_map(self) -> Mapping[int, Attendance]:
        return MappingProxyType({record.week: record for record in self.records})

    def contains(self, week: int) -> bool:
        return any(record.week == week for record in self.records)

    def get(self, week: int) -> Optional[Attendance]:
        for record in self.records:
            if record.week == week:
                return record
        return None

    def get_status(self, week: int) -> str:
        record = self.get(week)
        return record.status.value if record else NOT_MARKED

    def mark(self, week: int, status: Union[AttendanceStatus, str]) -> "AttendanceSheet":
        """
        Record attendance for a week, overwriting any earlier mark.

        Raises:
            InvalidRangeError: If week is outside 2-13.
            InvalidStatusError: If status is not present/absent/excused.
        """
        check_week(week)
        new_status = AttendanceStatus.parse(status)
        others = tuple(record for record in self.records if record.week != week)
        return AttendanceSheet(records=others + (Attendance(week=week, status=new_status),))

    def __str__(self) -> str:
        if not self.records:
            return "no attendance"
        return ", ".join(str(record) for record in self.records)

"""
Student record.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from rollbook.models.attendance import AttendanceSheet, AttendanceStatus
from rollbook.models.consultation import Consultation
from rollbook.models.fields import (
    validate_email,
    validate_group_id,
    validate_name,
    validate_nusnetid,
    validate_phone,
    validate_telegram,
)
from rollbook.models.homework import HomeworkStatus, HomeworkTracker


class Person(BaseModel):
    """
    Immutable student record, identified by nusnetid.

    Editing never mutates a Person: every with_* helper returns a new value
    which the roster store swaps in by identity.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    nusnetid: str
    telegram: str
    group_id: str
    phone: Optional[str] = None
    email: Optional[str] = None
    homework_tracker: HomeworkTracker = Field(default_factory=HomeworkTracker)
    attendance_sheet: AttendanceSheet = Field(default_factory=AttendanceSheet)
    consultation: Optional[Consultation] = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return validate_name(value)

    @field_validator("nusnetid")
    @classmethod
    def _check_nusnetid(cls, value: str) -> str:
        return validate_nusnetid(value)

    @field_validator("telegram")
    @classmethod
    def _check_telegram(cls, value: str) -> str:
        return validate_telegram(value)

    @field_validator("group_id")
    @classmethod
    def _check_group_id(cls, value: str) -> str:
        return validate_group_id(value)

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else validate_phone(value)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else validate_email(value)

    @model_validator(mode="after")
    def _consultation_belongs_to_person(self) -> "Person":
        if self.consultation is not None and self.consultation.nusnetid != self.nusnetid:
            raise ValueError("A student's consultation must be booked under their own NUSNET ID.")
        return self

    def is_same_person(self, other: Optional["Person"]) -> bool:
        """True if other has the same identity (nusnetid)."""
        return other is not None and other.nusnetid == self.nusnetid

    def updated(self, **changes: Any) -> "Person":
        """
        Return a validated copy with the given fields replaced.

        A changed nusnetid carries the booked consultation over to the new id.
        """
        data = dict(self)
        data.update(changes)
        if "nusnetid" in changes and "consultation" not in changes and self.consultation:
            data["consultation"] = self.consultation.with_nusnetid(changes["nusnetid"])
        return Person.model_validate(data)

    def with_group(self, group_id: str) -> "Person":
        return self.updated(group_id=group_id)

    def with_added_homework(self, assignment_id: int) -> "Person":
        return self.updated(homework_tracker=self.homework_tracker.add(assignment_id))

    def with_deleted_homework(self, assignment_id: int) -> "Person":
        return self.updated(homework_tracker=self.homework_tracker.remove(assignment_id))

    def with_homework_status(
        self, assignment_id: int, status: Union[HomeworkStatus, str]
    ) -> "Person":
        return self.updated(
            homework_tracker=self.homework_tracker.update_status(assignment_id, status)
        )

    def with_attendance(self, week: int, status: Union[AttendanceStatus, str]) -> "Person":
        return self.updated(attendance_sheet=self.attendance_sheet.mark(week, status))

    def with_consultation(self, consultation: Optional[Consultation]) -> "Person":
        return self.updated(consultation=consultation)

    def __str__(self) -> str:
        return f"{self.name} ({self.nusnetid})"

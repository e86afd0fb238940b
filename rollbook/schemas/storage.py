"""
Pydantic schemas for the JSON data file.

These mirror the domain models field for field but stay plain: values are
checked against the domain rules only when converted with to_model().
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from rollbook.models.attendance import Attendance, AttendanceSheet
from rollbook.models.consultation import DISPLAY_FORMAT, Consultation
from rollbook.models.homework import Homework, HomeworkTracker
from rollbook.models.person import Person


class StoredHomework(BaseModel):
    """One homework entry of a stored student."""

    id: int
    status: str


class StoredAttendance(BaseModel):
    """One attendance entry of a stored student."""

    week: int
    status: str


class StoredPerson(BaseModel):
    """Stored student record."""

    name: str
    nusnetid: str
    telegram: str
    group_id: str
    phone: Optional[str] = None
    email: Optional[str] = None
    homework: List[StoredHomework] = []
    attendance: List[StoredAttendance] = []

    @classmethod
    def from_model(cls, person: Person) -> "StoredPerson":
        return cls(
            name=person.name,
            nusnetid=person.nusnetid,
            telegram=person.telegram,
            group_id=person.group_id,
            phone=person.phone,
            email=person.email,
            homework=[
                StoredHomework(id=hw.assignment_id, status=hw.status.value)
                for hw in person.homework_tracker.homework
            ],
            attendance=[
                StoredAttendance(week=record.week, status=record.status.value)
                for record in person.attendance_sheet.records
            ],
        )

    def to_model(self) -> Person:
        """Build the domain Person; consultations are attached by the store."""
        return Person(
            name=self.name,
            nusnetid=self.nusnetid,
            telegram=self.telegram,
            group_id=self.group_id,
            phone=self.phone,
            email=self.email,
            homework_tracker=HomeworkTracker(
                homework=tuple(
                    Homework(assignment_id=hw.id, status=hw.status.lower())
                    for hw in self.homework
                )
            ),
            attendance_sheet=AttendanceSheet(
                records=tuple(
                    Attendance(week=record.week, status=record.status.lower())
                    for record in self.attendance
                )
            ),
        )


def _format_time(value: datetime) -> str:
    # Whole minutes keep the command-line format; finer times are kept exactly
    if value.second or value.microsecond:
        return value.isoformat(sep=" ")
    return value.strftime(DISPLAY_FORMAT)


class StoredConsultation(BaseModel):
    """Stored consultation; times use the command-line format unless they carry seconds."""

    nusnetid: str
    start: str = Field(..., alias="from")
    end: str = Field(..., alias="to")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_model(cls, consultation: Consultation) -> "StoredConsultation":
        return cls(
            nusnetid=consultation.nusnetid,
            start=_format_time(consultation.start),
            end=_format_time(consultation.end),
        )

    def to_model(self) -> Consultation:
        return Consultation(
            nusnetid=self.nusnetid,
            start=datetime.fromisoformat(self.start),
            end=datetime.fromisoformat(self.end),
        )


class StoredGroup(BaseModel):
    """Stored group; the member list is informational only."""

    group_id: str
    nusnetids: List[str] = []


class StoredRoster(BaseModel):
    """Root of the data file."""

    persons: List[StoredPerson] = []
    consultations: List[StoredConsultation] = []
    groups: List[StoredGroup] = []

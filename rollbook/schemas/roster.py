"""
Pydantic schemas for the Student, Group and Consultation API.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from rollbook.models.consultation import Consultation
from rollbook.models.group import Group
from rollbook.models.person import Person


class ConsultationCreate(BaseModel):
    """Schema for booking a consultation."""

    nusnetid: str
    start: datetime
    end: datetime


class ConsultationResponse(BaseModel):
    """Consultation response schema."""

    nusnetid: str
    start: datetime
    end: datetime

    @classmethod
    def from_model(cls, consultation: Consultation) -> "ConsultationResponse":
        return cls(nusnetid=consultation.nusnetid, start=consultation.start, end=consultation.end)


class OverlapCheckResponse(BaseModel):
    """Result of an overlap query against booked consultations."""

    overlaps: bool
    conflict: Optional[ConsultationResponse] = None


class StudentBase(BaseModel):
    """Base student schema."""

    name: str = Field(..., min_length=1, max_length=70)
    nusnetid: str
    telegram: str
    group_id: str
    phone: Optional[str] = None
    email: Optional[str] = None


class StudentCreate(StudentBase):
    """Schema for creating a student."""

    pass


class StudentUpdate(BaseModel):
    """Schema for editing a student; group changes go through the group endpoint."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=70)
    nusnetid: Optional[str] = None
    telegram: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class StudentResponse(StudentBase):
    """Student response schema."""

    homework: Dict[int, str] = {}
    attendance: Dict[int, str] = {}
    consultation: Optional[ConsultationResponse] = None

    @classmethod
    def from_model(cls, person: Person) -> "StudentResponse":
        return cls(
            name=person.name,
            nusnetid=person.nusnetid,
            telegram=person.telegram,
            group_id=person.group_id,
            phone=person.phone,
            email=person.email,
            homework={hw.assignment_id: hw.status.value for hw in person.homework_tracker.homework},
            attendance={
                record.week: record.status.value for record in person.attendance_sheet.records
            },
            consultation=(
                ConsultationResponse.from_model(person.consultation)
                if person.consultation
                else None
            ),
        )


class GroupMoveRequest(BaseModel):
    """Schema for moving a student to another group."""

    group_id: str


class GroupCreate(BaseModel):
    """Schema for creating an empty group."""

    group_id: str


class GroupResponse(BaseModel):
    """Group response schema."""

    group_id: str
    size: int
    members: List[str] = []

    @classmethod
    def from_model(cls, group: Group) -> "GroupResponse":
        return cls(
            group_id=group.group_id,
            size=group.size,
            members=[member.nusnetid for member in group.members],
        )


class GroupWithStudentsResponse(GroupResponse):
    """Group with the full records of its members."""

    students: List[StudentResponse] = []


class HomeworkRequest(BaseModel):
    """Schema for adding or deleting homework."""

    assignment_id: int


class HomeworkStatusRequest(BaseModel):
    """Schema for marking homework."""

    status: str


class AttendanceRequest(BaseModel):
    """Schema for marking attendance of one student or a whole group."""

    week: int
    status: str


class BatchResponse(BaseModel):
    """Students changed by a batch operation."""

    updated: List[StudentResponse] = []
    count: int = 0


class CommandRequest(BaseModel):
    """A single text command."""

    command: str = Field(..., min_length=1)


class CommandResponse(BaseModel):
    """Feedback from a text command."""

    feedback: str


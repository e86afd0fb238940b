"""
Schemas package initialization.
"""

from rollbook.schemas.roster import (
    AttendanceRequest,
    BatchResponse,
    CommandRequest,
    CommandResponse,
    ConsultationCreate,
    ConsultationResponse,
    GroupCreate,
    GroupMoveRequest,
    GroupResponse,
    GroupWithStudentsResponse,
    HomeworkRequest,
    HomeworkStatusRequest,
    OverlapCheckResponse,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)
from rollbook.schemas.storage import (
    StoredAttendance,
    StoredConsultation,
    StoredGroup,
    StoredHomework,
    StoredPerson,
    StoredRoster,
)

__all__ = [
    # Roster API
    "AttendanceRequest",
    "BatchResponse",
    "CommandRequest",
    "CommandResponse",
    "ConsultationCreate",
    "ConsultationResponse",
    "GroupCreate",
    "GroupMoveRequest",
    "GroupResponse",
    "GroupWithStudentsResponse",
    "HomeworkRequest",
    "HomeworkStatusRequest",
    "OverlapCheckResponse",
    "StudentCreate",
    "StudentResponse",
    "StudentUpdate",
    # Storage
    "StoredAttendance",
    "StoredConsultation",
    "StoredGroup",
    "StoredHomework",
    "StoredPerson",
    "StoredRoster",
]

"""
Models package initialization.
"""

from rollbook.models.attendance import Attendance, AttendanceSheet, AttendanceStatus
from rollbook.models.consultation import Consultation
from rollbook.models.group import Group
from rollbook.models.homework import Homework, HomeworkStatus, HomeworkTracker
from rollbook.models.person import Person

__all__ = [
    "Attendance",
    "AttendanceSheet",
    "AttendanceStatus",
    "Consultation",
    "Group",
    "Homework",
    "HomeworkStatus",
    "HomeworkTracker",
    "Person",
]

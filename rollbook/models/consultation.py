"""
Consultation slots booked by students.
"""

from datetime import datetime
from typing import Tuple

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from rollbook.models.fields import validate_nusnetid

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"


class Consultation(BaseModel):
    """
    A half-open time interval [start, end) booked by one student.

    The whole value is the identity: two consultations are the same slot
    only when owner, start and end all match.
    """

    model_config = ConfigDict(frozen=True)

    nusnetid: str
    start: datetime
    end: datetime

    @field_validator("nusnetid")
    @classmethod
    def _check_nusnetid(cls, value: str) -> str:
        return validate_nusnetid(value)

    @field_validator("start", "end")
    @classmethod
    def _wall_clock(cls, value: datetime) -> datetime:
        # Aware values are converted to naive local time so every slot compares
        if value.tzinfo is not None:
            value = value.astimezone().replace(tzinfo=None)
        return value

    @model_validator(mode="after")
    def _check_order(self) -> "Consultation":
        if self.start >= self.end:
            raise ValueError("Consultation start time must be before its end time.")
        return self

    @property
    def identity(self) -> Tuple[str, datetime, datetime]:
        return (self.nusnetid, self.start, self.end)

    def overlaps(self, other: "Consultation") -> bool:
        """True if the two intervals share any instant; touching ends do not count."""
        return self.start < other.end and other.start < self.end

    def with_nusnetid(self, nusnetid: str) -> "Consultation":
        return Consultation(nusnetid=nusnetid, start=self.start, end=self.end)

    def __str__(self) -> str:
        if self.start.date() == self.end.date():
            until = self.end.strftime("%H:%M")
        else:
            until = self.end.strftime(DISPLAY_FORMAT)
        return f"{self.nusnetid} {self.start.strftime(DISPLAY_FORMAT)}-{until}"

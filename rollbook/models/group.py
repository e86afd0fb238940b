"""
Tutorial group model.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from rollbook.models.fields import validate_group_id
from rollbook.models.person import Person


class Group(BaseModel):
    """
    Tutorial group.

    Stores the group id and its members in the order they joined. Like every
    other entity it is immutable; membership changes return a new Group.
    """

    model_config = ConfigDict(frozen=True)

    group_id: str
    members: Tuple[Person, ...] = ()

    @field_validator("group_id")
    @classmethod
    def _check_group_id(cls, value: str) -> str:
        return validate_group_id(value)

    @model_validator(mode="after")
    def _check_members(self) -> "Group":
        ids = [member.nusnetid for member in self.members]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Group {self.group_id} lists the same student twice.")
        for member in self.members:
            if member.group_id != self.group_id:
                raise ValueError(
                    f"Student {member.nusnetid} belongs to group {member.group_id}, "
                    f"not {self.group_id}."
                )
        return self

    @property
    def size(self) -> int:
        return len(self.members)

    def is_empty(self) -> bool:
        return not self.members

    def has_student(self, nusnetid: str) -> bool:
        return any(member.nusnetid == nusnetid for member in self.members)

    def find_student(self, nusnetid: str) -> Optional[Person]:
        for member in self.members:
            if member.nusnetid == nusnetid:
                return member
        return None

    def with_student(self, person: Person) -> "Group":
        """Append person, or refresh their entry if already a member."""
        if self.has_student(person.nusnetid):
            return self.with_replaced_student(person.nusnetid, person)
        return Group(group_id=self.group_id, members=self.members + (person,))

    def without_student(self, nusnetid: str) -> "Group":
        """Drop the member with this nusnetid; a no-op if absent."""
        if not self.has_student(nusnetid):
            return self
        return Group(
            group_id=self.group_id,
            members=tuple(member for member in self.members if member.nusnetid != nusnetid),
        )

    def with_replaced_student(self, nusnetid: str, person: Person) -> "Group":
        """Swap the entry for nusnetid with person, keeping its position."""
        return Group(
            group_id=self.group_id,
            members=tuple(
                person if member.nusnetid == nusnetid else member for member in self.members
            ),
        )

    def __str__(self) -> str:
        return self.group_id

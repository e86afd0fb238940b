"""
User-facing message templates and formatters for text commands.
"""

from typing import List

from rollbook.models.consultation import Consultation
from rollbook.models.person import Person

MESSAGE_INVALID_COMMAND_FORMAT = "Invalid command format!\n{usage}"
MESSAGE_UNKNOWN_COMMAND = "Unknown command"
MESSAGE_INVALID_PERSON_DISPLAYED_INDEX = "The student index provided is invalid"
MESSAGE_NOT_EDITED = "At least one field to edit must be provided."
MESSAGE_PERSONS_LISTED = "{count} student(s) listed!"


def invalid_format(usage: str) -> str:
    return MESSAGE_INVALID_COMMAND_FORMAT.format(usage=usage)


def format_person(person: Person) -> str:
    """One-line summary of a student, omitting unset optional fields."""
    parts = [person.name, f"NUSNET ID: {person.nusnetid}", f"Telegram: {person.telegram}"]
    if person.phone:
        parts.append(f"Phone: {person.phone}")
    if person.email:
        parts.append(f"Email: {person.email}")
    parts.append(f"Group: {person.group_id}")
    return "; ".join(parts)


def format_consultation(consultation: Consultation) -> str:
    return str(consultation)


def format_people(persons: List[Person]) -> str:
    return "\n".join(f"{i}. {format_person(p)}" for i, p in enumerate(persons, start=1))

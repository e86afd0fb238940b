"""
Executable commands.

Every command is an immutable value built by the parser. execute() calls
into the RosterStore and turns the outcome into user feedback; store errors
propagate unchanged as RollbookError subclasses.
"""

from typing import ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from rollbook.core.exceptions import EntityNotFoundError
from rollbook.core.logging import get_logger
from rollbook.logic.messages import (
    MESSAGE_INVALID_PERSON_DISPLAYED_INDEX,
    MESSAGE_PERSONS_LISTED,
    format_consultation,
    format_person,
)
from rollbook.models.consultation import Consultation
from rollbook.models.person import Person
from rollbook.store.roster import RosterStore
from rollbook.store.views import in_group, name_contains_any, show_all

logger = get_logger("commands")


class CommandResult(BaseModel):
    """Feedback shown to the user after a command runs."""

    model_config = ConfigDict(frozen=True)

    feedback: str


class Command(BaseModel):
    """Base class for all commands."""

    model_config = ConfigDict(frozen=True)

    COMMAND_WORD: ClassVar[str] = ""
    USAGE: ClassVar[str] = ""
    MUTATES: ClassVar[bool] = True

    def execute(self, store: RosterStore) -> CommandResult:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Students
# ---------------------------------------------------------------------------


class AddStudentCommand(Command):
    COMMAND_WORD: ClassVar[str] = "add_student"
    USAGE: ClassVar[str] = (
        "add_student: Adds a student to the roster.\n"
        "Parameters: n/NAME i/NUSNETID t/TELEGRAM g/GROUP_ID [p/PHONE] [e/EMAIL]\n"
        "Example: add_student n/John Doe i/E1234567 t/@john_doe g/T01 p/98765432"
    )

    person: Person

    def execute(self, store: RosterStore) -> CommandResult:
        store.add_person(self.person)
        return CommandResult(feedback=f"New student added: {format_person(self.person)}")


class EditStudentCommand(Command):
    """Edit the student at a 1-based position of the displayed list."""

    COMMAND_WORD: ClassVar[str] = "edit_student"
    USAGE: ClassVar[str] = (
        "edit_student: Edits the student identified by the index number in the displayed list. "
        "Existing values will be overwritten by the input values.\n"
        "Parameters: INDEX (must be a positive integer) [n/NAME] [i/NUSNETID] [t/TELEGRAM] "
        "[p/PHONE] [e/EMAIL]\n"
        "Example: edit_student 1 p/91234567 e/johndoe@u.nus.edu"
    )

    index: int
    changes: Dict[str, str]

    def execute(self, store: RosterStore) -> CommandResult:
        shown = store.filtered_persons()
        if self.index < 1 or self.index > len(shown):
            raise EntityNotFoundError("Person", self.index, MESSAGE_INVALID_PERSON_DISPLAYED_INDEX)

        target = shown[self.index - 1]
        edited = store.replace_person(target, target.updated(**self.changes))
        store.update_person_filter(show_all)
        return CommandResult(feedback=f"Edited Student: {format_person(edited)}")


class DeleteStudentCommand(Command):
    COMMAND_WORD: ClassVar[str] = "delete_student"
    USAGE: ClassVar[str] = (
        "delete_student: Deletes the student with the given NUSNET ID.\n"
        "Parameters: i/NUSNETID\n"
        "Example: delete_student i/E1234567"
    )

    nusnetid: str

    def execute(self, store: RosterStore) -> CommandResult:
        person = store.get_person(self.nusnetid)
        store.remove_person(person)
        return CommandResult(feedback=f"Deleted Student: {format_person(person)}")


class ListCommand(Command):
    COMMAND_WORD: ClassVar[str] = "list"
    USAGE: ClassVar[str] = "list: Lists all students."
    MUTATES: ClassVar[bool] = False

    def execute(self, store: RosterStore) -> CommandResult:
        store.update_person_filter(show_all)
        return CommandResult(feedback="Listed all students")


class FindCommand(Command):
    COMMAND_WORD: ClassVar[str] = "find"
    USAGE: ClassVar[str] = (
        "find: Finds all students whose names contain any of the given keywords "
        "(case-insensitive) and displays them as a list.\n"
        "Parameters: KEYWORD [MORE_KEYWORDS]...\n"
        "Example: find alice bob charlie"
    )
    MUTATES: ClassVar[bool] = False

    keywords: Tuple[str, ...]

    def execute(self, store: RosterStore) -> CommandResult:
        store.update_person_filter(name_contains_any(self.keywords))
        count = len(store.filtered_persons())
        return CommandResult(feedback=MESSAGE_PERSONS_LISTED.format(count=count))


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


class CreateGroupCommand(Command):
    COMMAND_WORD: ClassVar[str] = "create_group"
    USAGE: ClassVar[str] = (
        "create_group: Creates a new empty tutorial group.\n"
        "Parameters: g/GROUP_ID\n"
        "Example: create_group g/T01"
    )

    group_id: str

    def execute(self, store: RosterStore) -> CommandResult:
        group = store.add_group(self.group_id)
        return CommandResult(feedback=f"New group created: {group.group_id}")


class AddToGroupCommand(Command):
    COMMAND_WORD: ClassVar[str] = "add_to_group"
    USAGE: ClassVar[str] = (
        "add_to_group: Moves a student to a tutorial group, creating the group if needed.\n"
        "Parameters: i/NUSNETID g/GROUP_ID\n"
        "Example: add_to_group i/E1234567 g/T02"
    )

    nusnetid: str
    group_id: str

    def execute(self, store: RosterStore) -> CommandResult:
        student = store.get_person(self.nusnetid)
        moved = store.move_student_to_new_group(student, self.group_id)
        return CommandResult(feedback=f"Moved {moved.name} to group {moved.group_id}.")


class FindGroupCommand(Command):
    COMMAND_WORD: ClassVar[str] = "find_group"
    USAGE: ClassVar[str] = (
        "find_group: Lists the students of a tutorial group.\n"
        "Parameters: g/GROUP_ID\n"
        "Example: find_group g/T01"
    )
    MUTATES: ClassVar[bool] = False

    group_id: str

    def execute(self, store: RosterStore) -> CommandResult:
        group = store.get_group(self.group_id)
        store.update_person_filter(in_group(group.group_id))
        return CommandResult(
            feedback=f"Group {group.group_id}: {group.size} student(s) listed."
        )


# ---------------------------------------------------------------------------
# Homework
# ---------------------------------------------------------------------------


class AddHomeworkCommand(Command):
    """Add homework to one student, or to all students when nusnetid is None."""

    COMMAND_WORD: ClassVar[str] = "add_hw"
    USAGE: ClassVar[str] = (
        "add_hw: Adds a homework to a student or to all students.\n"
        "Parameters: i/NUSNETID or i/all a/ASSIGNMENT_ID\n"
        "Example (single): add_hw i/E1234567 a/1\n"
        "Example (all): add_hw i/all a/1"
    )

    nusnetid: Optional[str] = None
    assignment_id: int

    def execute(self, store: RosterStore) -> CommandResult:
        updated = store.add_homework(self.assignment_id, self.nusnetid)
        if self.nusnetid is None:
            return CommandResult(
                feedback=f"Added assignment {self.assignment_id} for all students "
                f"(default incomplete). {len(updated)} student(s) updated."
            )
        return CommandResult(
            feedback=f"Added assignment {self.assignment_id} for {updated[0].name} "
            "(default incomplete)."
        )


class DeleteHomeworkCommand(Command):
    COMMAND_WORD: ClassVar[str] = "delete_hw"
    USAGE: ClassVar[str] = (
        "delete_hw: Deletes a homework from a student or from all students.\n"
        "Parameters: i/NUSNETID or i/all a/ASSIGNMENT_ID\n"
        "Example: delete_hw i/E1234567 a/1"
    )

    nusnetid: Optional[str] = None
    assignment_id: int

    def execute(self, store: RosterStore) -> CommandResult:
        updated = store.delete_homework(self.assignment_id, self.nusnetid)
        if self.nusnetid is None:
            return CommandResult(
                feedback=f"Deleted assignment {self.assignment_id} for all students. "
                f"{len(updated)} student(s) updated."
            )
        return CommandResult(
            feedback=f"Deleted assignment {self.assignment_id} for {updated[0].name}."
        )


class MarkHomeworkCommand(Command):
    COMMAND_WORD: ClassVar[str] = "mark_hw"
    USAGE: ClassVar[str] = (
        "mark_hw: Marks the status of a student's homework.\n"
        "Parameters: i/NUSNETID a/ASSIGNMENT_ID status/STATUS (complete/incomplete/late)\n"
        "Example: mark_hw i/E1234567 a/1 status/complete"
    )

    nusnetid: str
    assignment_id: int
    status: str

    def execute(self, store: RosterStore) -> CommandResult:
        person = store.mark_homework(self.nusnetid, self.assignment_id, self.status)
        status = person.homework_tracker.get_status(self.assignment_id)
        return CommandResult(
            feedback=f"Marked assignment {self.assignment_id} as {status} for {person.name}."
        )


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------


class MarkAttendanceCommand(Command):
    COMMAND_WORD: ClassVar[str] = "mark_attendance"
    USAGE: ClassVar[str] = (
        "mark_attendance: Marks the attendance of a student for a week.\n"
        "Parameters: i/NUSNETID w/WEEK (2-13) status/STATUS (present/absent/excused)\n"
        "Example: mark_attendance i/E1234567 w/3 status/present"
    )

    nusnetid: str
    week: int
    status: str

    def execute(self, store: RosterStore) -> CommandResult:
        person = store.mark_attendance(self.nusnetid, self.week, self.status)
        status = person.attendance_sheet.get_status(self.week)
        return CommandResult(feedback=f"Marked {person.name} as {status} for week {self.week}.")


class MarkAllAttendanceCommand(Command):
    COMMAND_WORD: ClassVar[str] = "mark_all_attendance"
    USAGE: ClassVar[str] = (
        "mark_all_attendance: Marks the attendance of every student in a group for a week.\n"
        "Parameters: g/GROUP_ID w/WEEK (2-13) status/STATUS (present/absent/excused)\n"
        "Example: mark_all_attendance g/T01 w/3 status/present"
    )

    group_id: str
    week: int
    status: str

    def execute(self, store: RosterStore) -> CommandResult:
        updated = store.mark_all_attendance(self.group_id, self.week, self.status)
        group_id = self.group_id.upper()
        store.update_person_filter(in_group(group_id))
        status = updated[0].attendance_sheet.get_status(self.week)
        return CommandResult(
            feedback=f"Marked all {len(updated)} student(s) in group {group_id} as {status} "
            f"for week {self.week}."
        )


# ---------------------------------------------------------------------------
# Consultations
# ---------------------------------------------------------------------------


class AddConsultationCommand(Command):
    COMMAND_WORD: ClassVar[str] = "add_consult"
    USAGE: ClassVar[str] = (
        "add_consult: Books a consultation for a student.\n"
        "Parameters: i/NUSNETID from/YYYY-MM-DD HH:MM to/YYYY-MM-DD HH:MM\n"
        "Example: add_consult i/E1234567 from/2024-10-19 14:00 to/2024-10-19 15:00"
    )

    consultation: Consultation

    def execute(self, store: RosterStore) -> CommandResult:
        store.add_consultation(self.consultation)
        return CommandResult(
            feedback=f"New consultation added: {format_consultation(self.consultation)}"
        )


class DeleteConsultationCommand(Command):
    COMMAND_WORD: ClassVar[str] = "delete_consult"
    USAGE: ClassVar[str] = (
        "delete_consult: Cancels the consultation of a student.\n"
        "Parameters: i/NUSNETID\n"
        "Example: delete_consult i/E1234567"
    )

    nusnetid: str

    def execute(self, store: RosterStore) -> CommandResult:
        consultation = store.find_consultation_of(self.nusnetid)
        if consultation is None:
            raise EntityNotFoundError(
                "Consultation",
                self.nusnetid,
                f"No consultation found for student {self.nusnetid}.",
            )
        store.remove_consultation(consultation)
        return CommandResult(
            feedback=f"Deleted consultation: {format_consultation(consultation)}"
        )


class ListConsultationCommand(Command):
    COMMAND_WORD: ClassVar[str] = "list_consult"
    USAGE: ClassVar[str] = "list_consult: Lists all consultations, earliest first."
    MUTATES: ClassVar[bool] = False

    def execute(self, store: RosterStore) -> CommandResult:
        store.update_consultation_filter(show_all)
        count = len(store.filtered_consultations())
        return CommandResult(feedback=f"Listed all consultations ({count}).")


ALL_COMMANDS = (
    AddStudentCommand,
    EditStudentCommand,
    DeleteStudentCommand,
    ListCommand,
    FindCommand,
    CreateGroupCommand,
    AddToGroupCommand,
    FindGroupCommand,
    AddHomeworkCommand,
    DeleteHomeworkCommand,
    MarkHomeworkCommand,
    MarkAttendanceCommand,
    MarkAllAttendanceCommand,
    AddConsultationCommand,
    DeleteConsultationCommand,
    ListConsultationCommand,
)

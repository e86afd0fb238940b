"""
Text command parser.

parse_command() maps a command line such as ``add_hw i/all a/3`` to an
immutable Command value. Field values are checked here so that every
invalid field of a command is reported in a single ParseError.
"""

import re
from datetime import datetime
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from rollbook.core.exceptions import ParseError
from rollbook.logic.commands import (
    AddConsultationCommand,
    AddHomeworkCommand,
    AddStudentCommand,
    AddToGroupCommand,
    Command,
    CreateGroupCommand,
    DeleteConsultationCommand,
    DeleteHomeworkCommand,
    DeleteStudentCommand,
    EditStudentCommand,
    FindCommand,
    FindGroupCommand,
    ListCommand,
    ListConsultationCommand,
    MarkAllAttendanceCommand,
    MarkAttendanceCommand,
    MarkHomeworkCommand,
)
from rollbook.logic.messages import MESSAGE_NOT_EDITED, MESSAGE_UNKNOWN_COMMAND, invalid_format
from rollbook.logic.tokenizer import (
    PREFIX_ASSIGNMENT,
    PREFIX_EMAIL,
    PREFIX_FROM,
    PREFIX_GROUP,
    PREFIX_NAME,
    PREFIX_NUSNETID,
    PREFIX_PHONE,
    PREFIX_STATUS,
    PREFIX_TELEGRAM,
    PREFIX_TO,
    PREFIX_WEEK,
    ArgumentMultimap,
    tokenize,
)
from rollbook.models.consultation import DISPLAY_FORMAT, Consultation
from rollbook.models.fields import (
    validate_email,
    validate_group_id,
    validate_name,
    validate_nusnetid,
    validate_phone,
    validate_telegram,
)
from rollbook.models.person import Person

ALL_TARGET = "all"

_COMMAND_FORMAT = re.compile(r"^(?P<word>\S+)(?P<arguments>.*)$", re.DOTALL)

_FIELD_VALIDATORS: Dict[str, Callable[[str], str]] = {
    PREFIX_NAME: validate_name,
    PREFIX_NUSNETID: validate_nusnetid,
    PREFIX_TELEGRAM: validate_telegram,
    PREFIX_GROUP: validate_group_id,
    PREFIX_PHONE: validate_phone,
    PREFIX_EMAIL: validate_email,
}

_EDITABLE_FIELDS = {
    PREFIX_NAME: "name",
    PREFIX_NUSNETID: "nusnetid",
    PREFIX_TELEGRAM: "telegram",
    PREFIX_PHONE: "phone",
    PREFIX_EMAIL: "email",
}


class _FieldErrors:
    """Collects per-field problems so they can be reported together."""

    def __init__(self):
        self.messages: List[str] = []

    def check(self, prefix: str, raw: str) -> Optional[str]:
        try:
            return _FIELD_VALIDATORS[prefix](raw)
        except ValueError as e:
            self.messages.append(str(e))
            return None

    def raise_if_any(self) -> None:
        if self.messages:
            raise ParseError("\n".join(self.messages))


def _require(
    args: str, usage: str, prefixes: List[str], optional: List[str] = (), preamble: bool = False
) -> ArgumentMultimap:
    """Tokenize args, requiring every prefix in ``prefixes`` exactly once."""
    multimap = tokenize(args, list(prefixes) + list(optional))
    missing = [p for p in prefixes if multimap.get_value(p) is None]
    if missing or (multimap.preamble and not preamble):
        raise ParseError(invalid_format(usage))
    multimap.verify_no_duplicate_prefixes(*prefixes, *optional)
    return multimap


def _parse_int(raw: str, label: str) -> int:
    if not re.fullmatch(r"\d+", raw.strip()):
        raise ParseError(f"{label} must be a positive integer.")
    return int(raw)


def _parse_datetime(raw: str, label: str) -> datetime:
    try:
        return datetime.strptime(raw.strip(), DISPLAY_FORMAT)
    except ValueError:
        raise ParseError(f"Invalid {label} time. Use the format YYYY-MM-DD HH:MM.") from None


def _parse_target(raw: str) -> Optional[str]:
    """Return None for the 'all' keyword, else a validated nusnetid."""
    if raw.strip().lower() == ALL_TARGET:
        return None
    errors = _FieldErrors()
    nusnetid = errors.check(PREFIX_NUSNETID, raw.strip())
    errors.raise_if_any()
    return nusnetid


def _single_field(args: str, usage: str, prefix: str) -> str:
    multimap = _require(args, usage, [prefix])
    errors = _FieldErrors()
    value = errors.check(prefix, multimap.get_value(prefix))
    errors.raise_if_any()
    return value


# ---------------------------------------------------------------------------
# Per-command parsers
# ---------------------------------------------------------------------------


def _parse_add_student(args: str) -> Command:
    multimap = _require(
        args,
        AddStudentCommand.USAGE,
        [PREFIX_NAME, PREFIX_NUSNETID, PREFIX_TELEGRAM, PREFIX_GROUP],
        [PREFIX_PHONE, PREFIX_EMAIL],
    )
    errors = _FieldErrors()
    values = {}
    for prefix in (PREFIX_NAME, PREFIX_NUSNETID, PREFIX_TELEGRAM, PREFIX_GROUP, PREFIX_PHONE, PREFIX_EMAIL):
        raw = multimap.get_value(prefix)
        if raw is not None:
            values[prefix] = errors.check(prefix, raw)
    errors.raise_if_any()

    person = Person(
        name=values[PREFIX_NAME],
        nusnetid=values[PREFIX_NUSNETID],
        telegram=values[PREFIX_TELEGRAM],
        group_id=values[PREFIX_GROUP],
        phone=values.get(PREFIX_PHONE),
        email=values.get(PREFIX_EMAIL),
    )
    return AddStudentCommand(person=person)


def _parse_edit_student(args: str) -> Command:
    usage = EditStudentCommand.USAGE
    multimap = tokenize(args, list(_EDITABLE_FIELDS))
    if not multimap.preamble:
        raise ParseError(invalid_format(usage))
    try:
        index = _parse_int(multimap.preamble, "Index")
    except ParseError:
        raise ParseError(invalid_format(usage)) from None
    if index < 1:
        raise ParseError(invalid_format(usage))
    multimap.verify_no_duplicate_prefixes(*_EDITABLE_FIELDS)

    errors = _FieldErrors()
    changes = {}
    for prefix, field in _EDITABLE_FIELDS.items():
        raw = multimap.get_value(prefix)
        if raw is not None:
            changes[field] = errors.check(prefix, raw)
    errors.raise_if_any()
    if not changes:
        raise ParseError(MESSAGE_NOT_EDITED)
    return EditStudentCommand(index=index, changes=changes)


def _parse_delete_student(args: str) -> Command:
    nusnetid = _single_field(args, DeleteStudentCommand.USAGE, PREFIX_NUSNETID)
    return DeleteStudentCommand(nusnetid=nusnetid)


def _parse_list(args: str) -> Command:
    return ListCommand()


def _parse_find(args: str) -> Command:
    keywords = args.split()
    if not keywords:
        raise ParseError(invalid_format(FindCommand.USAGE))
    return FindCommand(keywords=tuple(keywords))


def _parse_create_group(args: str) -> Command:
    group_id = _single_field(args, CreateGroupCommand.USAGE, PREFIX_GROUP)
    return CreateGroupCommand(group_id=group_id)


def _parse_add_to_group(args: str) -> Command:
    multimap = _require(args, AddToGroupCommand.USAGE, [PREFIX_NUSNETID, PREFIX_GROUP])
    errors = _FieldErrors()
    nusnetid = errors.check(PREFIX_NUSNETID, multimap.get_value(PREFIX_NUSNETID))
    group_id = errors.check(PREFIX_GROUP, multimap.get_value(PREFIX_GROUP))
    errors.raise_if_any()
    return AddToGroupCommand(nusnetid=nusnetid, group_id=group_id)


def _parse_find_group(args: str) -> Command:
    group_id = _single_field(args, FindGroupCommand.USAGE, PREFIX_GROUP)
    return FindGroupCommand(group_id=group_id)


def _parse_homework_target(args: str, usage: str):
    multimap = _require(args, usage, [PREFIX_NUSNETID, PREFIX_ASSIGNMENT])
    try:
        assignment_id = _parse_int(multimap.get_value(PREFIX_ASSIGNMENT), "Homework id")
    except ParseError:
        raise ParseError(invalid_format(usage)) from None
    return _parse_target(multimap.get_value(PREFIX_NUSNETID)), assignment_id


def _parse_add_hw(args: str) -> Command:
    nusnetid, assignment_id = _parse_homework_target(args, AddHomeworkCommand.USAGE)
    return AddHomeworkCommand(nusnetid=nusnetid, assignment_id=assignment_id)


def _parse_delete_hw(args: str) -> Command:
    nusnetid, assignment_id = _parse_homework_target(args, DeleteHomeworkCommand.USAGE)
    return DeleteHomeworkCommand(nusnetid=nusnetid, assignment_id=assignment_id)


def _parse_mark_hw(args: str) -> Command:
    multimap = _require(
        args, MarkHomeworkCommand.USAGE, [PREFIX_NUSNETID, PREFIX_ASSIGNMENT, PREFIX_STATUS]
    )
    errors = _FieldErrors()
    nusnetid = errors.check(PREFIX_NUSNETID, multimap.get_value(PREFIX_NUSNETID))
    errors.raise_if_any()
    assignment_id = _parse_int(multimap.get_value(PREFIX_ASSIGNMENT), "Homework id")
    return MarkHomeworkCommand(
        nusnetid=nusnetid,
        assignment_id=assignment_id,
        status=multimap.get_value(PREFIX_STATUS),
    )


def _parse_mark_attendance(args: str) -> Command:
    multimap = _require(
        args, MarkAttendanceCommand.USAGE, [PREFIX_NUSNETID, PREFIX_WEEK, PREFIX_STATUS]
    )
    errors = _FieldErrors()
    nusnetid = errors.check(PREFIX_NUSNETID, multimap.get_value(PREFIX_NUSNETID))
    errors.raise_if_any()
    week = _parse_int(multimap.get_value(PREFIX_WEEK), "Week")
    return MarkAttendanceCommand(
        nusnetid=nusnetid, week=week, status=multimap.get_value(PREFIX_STATUS)
    )


def _parse_mark_all_attendance(args: str) -> Command:
    multimap = _require(
        args, MarkAllAttendanceCommand.USAGE, [PREFIX_GROUP, PREFIX_WEEK, PREFIX_STATUS]
    )
    errors = _FieldErrors()
    group_id = errors.check(PREFIX_GROUP, multimap.get_value(PREFIX_GROUP))
    errors.raise_if_any()
    week = _parse_int(multimap.get_value(PREFIX_WEEK), "Week")
    return MarkAllAttendanceCommand(
        group_id=group_id, week=week, status=multimap.get_value(PREFIX_STATUS)
    )


def _parse_add_consult(args: str) -> Command:
    multimap = _require(
        args, AddConsultationCommand.USAGE, [PREFIX_NUSNETID, PREFIX_FROM, PREFIX_TO]
    )
    errors = _FieldErrors()
    nusnetid = errors.check(PREFIX_NUSNETID, multimap.get_value(PREFIX_NUSNETID))
    errors.raise_if_any()
    start = _parse_datetime(multimap.get_value(PREFIX_FROM), "start")
    end = _parse_datetime(multimap.get_value(PREFIX_TO), "end")
    try:
        consultation = Consultation(nusnetid=nusnetid, start=start, end=end)
    except ValidationError:
        raise ParseError("Consultation start time must be before its end time.") from None
    return AddConsultationCommand(consultation=consultation)


def _parse_delete_consult(args: str) -> Command:
    nusnetid = _single_field(args, DeleteConsultationCommand.USAGE, PREFIX_NUSNETID)
    return DeleteConsultationCommand(nusnetid=nusnetid)


def _parse_list_consult(args: str) -> Command:
    return ListConsultationCommand()


_PARSERS: Dict[str, Callable[[str], Command]] = {
    AddStudentCommand.COMMAND_WORD: _parse_add_student,
    EditStudentCommand.COMMAND_WORD: _parse_edit_student,
    DeleteStudentCommand.COMMAND_WORD: _parse_delete_student,
    ListCommand.COMMAND_WORD: _parse_list,
    FindCommand.COMMAND_WORD: _parse_find,
    CreateGroupCommand.COMMAND_WORD: _parse_create_group,
    AddToGroupCommand.COMMAND_WORD: _parse_add_to_group,
    FindGroupCommand.COMMAND_WORD: _parse_find_group,
    AddHomeworkCommand.COMMAND_WORD: _parse_add_hw,
    DeleteHomeworkCommand.COMMAND_WORD: _parse_delete_hw,
    MarkHomeworkCommand.COMMAND_WORD: _parse_mark_hw,
    MarkAttendanceCommand.COMMAND_WORD: _parse_mark_attendance,
    MarkAllAttendanceCommand.COMMAND_WORD: _parse_mark_all_attendance,
    AddConsultationCommand.COMMAND_WORD: _parse_add_consult,
    DeleteConsultationCommand.COMMAND_WORD: _parse_delete_consult,
    ListConsultationCommand.COMMAND_WORD: _parse_list_consult,
}


def command_words() -> List[str]:
    return list(_PARSERS)


def parse_command(text: str) -> Command:
    """
    Parse one line of user input.

    Raises:
        ParseError: If the command word is unknown or its arguments are invalid.
    """
    match = _COMMAND_FORMAT.match(text.strip())
    if not match:
        raise ParseError(MESSAGE_UNKNOWN_COMMAND)
    parser = _PARSERS.get(match.group("word"))
    if parser is None:
        raise ParseError(MESSAGE_UNKNOWN_COMMAND)
    return parser(match.group("arguments"))

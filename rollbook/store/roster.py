"""
Roster store: persons, groups and consultations kept mutually consistent.

The store owns three EntityCollections and is the only place where one
operation touches more than one of them. Every public operation checks its
preconditions before the first mutation, so a raised RollbookError leaves
the store exactly as it was. The one designed exception is the
"all students" homework batch, which skips students it does not apply to.
"""

from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from rollbook.core.exceptions import (
    BatchRejectedError,
    DuplicateEntityError,
    EmptyGroupError,
    EntityNotFoundError,
    OverlappingConsultationError,
    RollbookError,
    SameGroupError,
)
from rollbook.core.logging import get_logger
from rollbook.models.attendance import AttendanceStatus, check_week
from rollbook.models.consultation import Consultation
from rollbook.models.group import Group
from rollbook.models.homework import HomeworkStatus, check_assignment_id
from rollbook.models.person import Person
from rollbook.store.collection import EntityCollection
from rollbook.store.consultation_index import find_overlapping
from rollbook.store.views import (
    Predicate,
    consultation_start,
    filter_entities,
    show_all,
    sort_entities,
)

logger = get_logger("store")


class EditStep(str, Enum):
    """Progress of an identity-changing edit, in execution order."""

    REQUESTED = "requested"
    DETACHED = "detached"
    VALIDATED = "validated"
    REPLACED = "replaced"
    CONSULTATIONS_REWRITTEN = "consultations_rewritten"
    ATTACHED = "attached"


class RosterStore:
    """In-memory roster of students, tutorial groups and consultations."""

    def __init__(self):
        self._persons: EntityCollection[Person] = EntityCollection(
            "Person", lambda person: person.nusnetid
        )
        self._groups: EntityCollection[Group] = EntityCollection(
            "Group", lambda group: group.group_id
        )
        self._consultations: EntityCollection[Consultation] = EntityCollection(
            "Consultation", lambda consultation: consultation.identity
        )
        self._person_filter: Predicate = show_all
        self._consultation_filter: Predicate = show_all

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def persons(self) -> List[Person]:
        return self._persons.as_list()

    @property
    def groups(self) -> List[Group]:
        return self._groups.as_list()

    @property
    def consultations(self) -> List[Consultation]:
        return self._consultations.as_list()

    def has_person(self, nusnetid: str) -> bool:
        return self._persons.contains(nusnetid.upper())

    def find_person(self, nusnetid: str) -> Optional[Person]:
        return self._persons.find(nusnetid.upper())

    def get_person(self, nusnetid: str) -> Person:
        person = self.find_person(nusnetid)
        if person is None:
            raise EntityNotFoundError("Person", nusnetid, f"Student {nusnetid} not found.")
        return person

    def has_group(self, group_id: str) -> bool:
        return self._groups.contains(group_id.upper())

    def find_group(self, group_id: str) -> Optional[Group]:
        return self._groups.find(group_id.upper())

    def get_group(self, group_id: str) -> Group:
        group = self.find_group(group_id)
        if group is None:
            raise EntityNotFoundError("Group", group_id, f"Group {group_id} not found.")
        return group

    def has_consultation(self, consultation: Consultation) -> bool:
        return self._consultations.contains(consultation.identity)

    def find_consultation_of(self, nusnetid: str) -> Optional[Consultation]:
        """First stored consultation booked under nusnetid, or None."""
        wanted = nusnetid.upper()
        for consultation in self._consultations:
            if consultation.nusnetid == wanted:
                return consultation
        return None

    def consultation_overlaps(self, consultation: Consultation) -> bool:
        return find_overlapping(self._consultations, consultation) is not None

    # ------------------------------------------------------------------
    # Person <-> group synchronisation
    # ------------------------------------------------------------------

    def _detach(self, person: Person) -> None:
        group = self._groups.find(person.group_id)
        if group is not None:
            self._groups.replace(group, group.without_student(person.nusnetid))

    def _attach(self, person: Person) -> None:
        group = self._groups.find(person.group_id)
        if group is None:
            self._groups.add(Group(group_id=person.group_id, members=(person,)))
            logger.info("Created group %s for student %s", person.group_id, person.nusnetid)
        else:
            self._groups.replace(group, group.with_student(person))

    def _set_person(self, target: Person, updated: Person) -> None:
        """Replace a person whose identity and group are unchanged, refreshing the group entry."""
        self._persons.replace(target, updated)
        group = self._groups.find(updated.group_id)
        if group is not None:
            self._groups.replace(group, group.with_replaced_student(target.nusnetid, updated))

    # ------------------------------------------------------------------
    # Persons
    # ------------------------------------------------------------------

    def add_person(self, person: Person) -> None:
        """
        Add a student, creating their group first if it does not exist.

        Raises:
            DuplicateEntityError: If a student with the same nusnetid exists.
        """
        if self._persons.contains(person.nusnetid):
            raise DuplicateEntityError(
                "Person", person.nusnetid, "This student already exists in the roster."
            )
        self._attach(person)
        self._persons.add(person)
        logger.info("Added student %s to group %s", person.nusnetid, person.group_id)

    def replace_person(self, target: Person, edited: Person) -> Person:
        """
        Replace target with edited, propagating a nusnetid change.

        Runs the edit as an explicit sequence: detach the old entry from its
        group, validate the new identity, replace the person, rebind stored
        consultations to the new nusnetid, then attach to the resulting
        group (created if missing). A failure before the replacement undoes
        the detach, so the store is unchanged when an error is raised.

        Raises:
            EntityNotFoundError: If target is not stored.
            DuplicateEntityError: If edited takes another student's nusnetid.
            OverlappingConsultationError: If a rebound consultation would clash.

        Returns:
            The stored edited person.
        """
        step = EditStep.REQUESTED
        current = self.find_person(target.nusnetid)
        if current is None:
            raise EntityNotFoundError("Person", target.nusnetid, f"Student {target.nusnetid} not found.")
        id_changed = current.nusnetid != edited.nusnetid

        group_before = self._groups.find(current.group_id)
        self._detach(current)
        step = EditStep.DETACHED
        logger.debug("Edit %s -> %s: %s", current.nusnetid, edited.nusnetid, step.value)

        try:
            if id_changed and self._persons.contains(edited.nusnetid):
                raise DuplicateEntityError(
                    "Person", edited.nusnetid, "This student already exists in the roster."
                )
            rewrites = (
                self._plan_consultation_rewrites(current.nusnetid, edited.nusnetid)
                if id_changed
                else []
            )
            step = EditStep.VALIDATED
            self._persons.replace(current, edited)
            step = EditStep.REPLACED
        except RollbookError:
            if group_before is not None:
                self._groups.replace(group_before, group_before)
            logger.debug(
                "Edit %s -> %s aborted at step %s", current.nusnetid, edited.nusnetid, step.value
            )
            raise

        if id_changed:
            logger.info(
                "NUSNET ID changed: %s -> %s. Updating %d consultation(s).",
                current.nusnetid,
                edited.nusnetid,
                len(rewrites),
            )
            for old, new in rewrites:
                self._consultations.replace(old, new)
        step = EditStep.CONSULTATIONS_REWRITTEN

        self._attach(edited)
        step = EditStep.ATTACHED
        logger.debug("Edit %s -> %s: %s", current.nusnetid, edited.nusnetid, step.value)
        return edited

    def _plan_consultation_rewrites(
        self, old_id: str, new_id: str
    ) -> List[Tuple[Consultation, Consultation]]:
        plan = []
        for consultation in self._consultations:
            if consultation.nusnetid != old_id:
                continue
            rebound = consultation.with_nusnetid(new_id)
            if self._consultations.contains(rebound.identity):
                raise DuplicateEntityError("Consultation", rebound.identity)
            others = (c for c in self._consultations if c != consultation)
            clash = find_overlapping(others, rebound)
            if clash is not None:
                raise OverlappingConsultationError(rebound, clash)
            plan.append((consultation, rebound))
        return plan

    def remove_person(self, person: Person) -> None:
        """
        Delete a student, their group membership and their consultations.

        The group itself is kept even if it becomes empty.
        """
        current = self.find_person(person.nusnetid)
        if current is None:
            raise EntityNotFoundError("Person", person.nusnetid, f"Student {person.nusnetid} not found.")
        self._persons.remove(current)
        self._detach(current)
        for consultation in [c for c in self._consultations if c.nusnetid == current.nusnetid]:
            self._consultations.remove(consultation)
        logger.info("Removed student %s", current.nusnetid)

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def add_group(self, group_id: str) -> Group:
        """
        Create an empty group; students join through add_person or a move.

        Raises:
            DuplicateEntityError: If the group already exists.
        """
        group = Group(group_id=group_id)
        if self._groups.contains(group.group_id):
            raise DuplicateEntityError("Group", group.group_id, f"Group {group.group_id} already exists!")
        self._groups.add(group)
        logger.info("Created group %s", group.group_id)
        return group

    def move_student_to_new_group(self, student: Person, new_group_id: str) -> Person:
        """
        Move a student to another group, creating it if needed.

        Raises:
            EntityNotFoundError: If the student is not stored.
            SameGroupError: If the student is already in new_group_id.

        Returns:
            The stored, moved person.
        """
        current = self.find_person(student.nusnetid)
        if current is None:
            raise EntityNotFoundError("Person", student.nusnetid, f"Student {student.nusnetid} not found.")
        if current.group_id == new_group_id.upper():
            raise SameGroupError(current.nusnetid, current.group_id)
        moved = current.with_group(new_group_id)

        self._detach(current)
        self._persons.replace(current, moved)
        self._attach(moved)
        logger.info(
            "Moved student %s from group %s to %s", moved.nusnetid, current.group_id, moved.group_id
        )
        return moved

    # ------------------------------------------------------------------
    # Consultations
    # ------------------------------------------------------------------

    def add_consultation(self, consultation: Consultation) -> None:
        """
        Book a consultation for an existing student.

        Raises:
            EntityNotFoundError: If no student has the consultation's nusnetid.
            DuplicateEntityError: If the slot is already booked, or the
                student already holds a consultation.
            OverlappingConsultationError: If it clashes with any booked slot.
        """
        owner = self.get_person(consultation.nusnetid)
        if self._consultations.contains(consultation.identity):
            raise DuplicateEntityError(
                "Consultation", consultation.identity, "This consultation already exists."
            )
        if owner.consultation is not None:
            raise DuplicateEntityError(
                "Consultation",
                owner.consultation.identity,
                f"Student {owner.nusnetid} already has a consultation: {owner.consultation}.",
            )
        clash = find_overlapping(self._consultations, consultation)
        if clash is not None:
            raise OverlappingConsultationError(consultation, clash)

        self._consultations.add(consultation)
        self._set_person(owner, owner.with_consultation(consultation))
        logger.info("Booked consultation %s", consultation)

    def remove_consultation(self, consultation: Consultation) -> None:
        if not self._consultations.contains(consultation.identity):
            raise EntityNotFoundError("Consultation", consultation.identity)
        self._consultations.remove(consultation)
        owner = self.find_person(consultation.nusnetid)
        if owner is not None and owner.consultation == consultation:
            self._set_person(owner, owner.with_consultation(None))
        logger.info("Cancelled consultation %s", consultation)

    def restore_consultation(self, consultation: Consultation) -> None:
        """
        Re-add a consultation read from storage, under the duplicate and overlap rules.

        The consultation is attached to its owner when the owner is stored and
        holds no other consultation.
        """
        if self._consultations.contains(consultation.identity):
            raise DuplicateEntityError(
                "Consultation",
                consultation.identity,
                "Consultations list contains duplicate consultation(s).",
            )
        clash = find_overlapping(self._consultations, consultation)
        if clash is not None:
            raise OverlappingConsultationError(consultation, clash)
        self._consultations.add(consultation)
        owner = self.find_person(consultation.nusnetid)
        if owner is not None and owner.consultation is None:
            self._set_person(owner, owner.with_consultation(consultation))

    # ------------------------------------------------------------------
    # Homework
    # ------------------------------------------------------------------

    def add_homework(self, assignment_id: int, nusnetid: Optional[str] = None) -> List[Person]:
        """
        Assign homework to one student, or to every student when nusnetid is None.

        In all-students mode, students who already have the assignment are
        skipped; the batch is rejected only if nobody would change.

        Raises:
            InvalidRangeError: If assignment_id is outside 1-13.
            EntityNotFoundError: If the named student does not exist.
            DuplicateEntityError: If the named student already has it.
            BatchRejectedError: If every student already has it.
        """
        check_assignment_id(assignment_id)

        if nusnetid is None:
            everyone = self._persons.as_list()
            targets = [p for p in everyone if not p.homework_tracker.contains(assignment_id)]
            if not targets:
                raise BatchRejectedError(
                    f"All students already have homework {assignment_id}."
                    if everyone
                    else "There are no students in the roster."
                )
            return self._apply_to_each(targets, lambda p: p.with_added_homework(assignment_id))

        person = self.get_person(nusnetid)
        if person.homework_tracker.contains(assignment_id):
            raise DuplicateEntityError(
                "Homework",
                assignment_id,
                f"Homework {assignment_id} already exists for {person.name}.",
            )
        updated = person.with_added_homework(assignment_id)
        self._set_person(person, updated)
        return [updated]

    def delete_homework(self, assignment_id: int, nusnetid: Optional[str] = None) -> List[Person]:
        """
        Remove homework from one student, or from every student who has it.

        Raises:
            InvalidRangeError: If assignment_id is outside 1-13.
            EntityNotFoundError: If the named student, or their homework, does not exist.
            BatchRejectedError: If no student has the assignment.
        """
        check_assignment_id(assignment_id)

        if nusnetid is None:
            targets = [p for p in self._persons if p.homework_tracker.contains(assignment_id)]
            if not targets:
                raise BatchRejectedError(f"No student has homework {assignment_id}.")
            return self._apply_to_each(targets, lambda p: p.with_deleted_homework(assignment_id))

        person = self.get_person(nusnetid)
        if not person.homework_tracker.contains(assignment_id):
            raise EntityNotFoundError(
                "Homework",
                assignment_id,
                f"Homework {assignment_id} not found for {person.name}.",
            )
        updated = person.with_deleted_homework(assignment_id)
        self._set_person(person, updated)
        return [updated]

    def mark_homework(
        self, nusnetid: str, assignment_id: int, status: Union[HomeworkStatus, str]
    ) -> Person:
        """
        Set a student's status for an assignment they were given.

        Raises:
            EntityNotFoundError: If the student does not exist or was never
                given the assignment.
            InvalidRangeError: If assignment_id is outside 1-13.
            InvalidStatusError: If status is not complete/incomplete/late.
        """
        person = self.get_person(nusnetid)
        check_assignment_id(assignment_id)
        new_status = HomeworkStatus.parse(status)
        if not person.homework_tracker.contains(assignment_id):
            raise EntityNotFoundError(
                "Homework",
                assignment_id,
                f"Homework {assignment_id} not found for {person.name}. "
                "Add it first using 'add_hw'.",
            )
        updated = person.with_homework_status(assignment_id, new_status)
        self._set_person(person, updated)
        return updated

    def _apply_to_each(self, targets: Iterable[Person], change) -> List[Person]:
        updated = []
        for person in targets:
            new_person = change(person)
            self._set_person(person, new_person)
            updated.append(new_person)
        return updated

    # ------------------------------------------------------------------
    # Attendance
    # ------------------------------------------------------------------

    def mark_attendance(
        self, nusnetid: str, week: int, status: Union[AttendanceStatus, str]
    ) -> Person:
        """Record (or overwrite) one student's attendance for a week."""
        check_week(week)
        new_status = AttendanceStatus.parse(status)
        person = self.get_person(nusnetid)
        updated = person.with_attendance(week, new_status)
        self._set_person(person, updated)
        return updated

    def mark_all_attendance(
        self, group_id: str, week: int, status: Union[AttendanceStatus, str]
    ) -> List[Person]:
        """
        Record the same attendance for every member of a group.

        Raises:
            InvalidRangeError: If week is outside 2-13.
            InvalidStatusError: If status is not present/absent/excused.
            EntityNotFoundError: If the group does not exist.
            EmptyGroupError: If the group has no members.
        """
        check_week(week)
        new_status = AttendanceStatus.parse(status)
        group = self.get_group(group_id)
        if group.is_empty():
            raise EmptyGroupError(group.group_id)
        members = [self._persons.find(member.nusnetid) for member in group.members]
        return self._apply_to_each(members, lambda p: p.with_attendance(week, new_status))

    # ------------------------------------------------------------------
    # Filtered views
    # ------------------------------------------------------------------

    def update_person_filter(self, predicate: Predicate = show_all) -> None:
        self._person_filter = predicate

    def update_consultation_filter(self, predicate: Predicate = show_all) -> None:
        self._consultation_filter = predicate

    def filtered_persons(self) -> List[Person]:
        return filter_entities(self._persons, self._person_filter)

    def filtered_consultations(self) -> List[Consultation]:
        """Consultations passing the active filter, earliest first."""
        return sort_entities(
            filter_entities(self._consultations, self._consultation_filter),
            key=consultation_start,
        )

    # ------------------------------------------------------------------
    # Whole-store operations
    # ------------------------------------------------------------------

    def reset_data(self, other: "RosterStore") -> None:
        """Replace all contents with those of other."""
        self._persons.set_all(other.persons)
        self._groups.set_all(other.groups)
        self._consultations.set_all(other.consultations)
        self._person_filter = show_all
        self._consultation_filter = show_all

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RosterStore):
            return NotImplemented
        return (
            self.persons == other.persons
            and self.consultations == other.consultations
            and self._membership() == other._membership()
        )

    def _membership(self):
        # Group and member order depend on edit history, not content
        return {
            group.group_id: frozenset(member.nusnetid for member in group.members)
            for group in self._groups
        }

    def __repr__(self) -> str:
        return (
            f"<RosterStore(persons={len(self._persons)}, groups={len(self._groups)}, "
            f"consultations={len(self._consultations)})>"
        )

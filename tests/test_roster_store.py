"""
Tests for RosterStore: cross-entity invariants, edits and batch operations
"""

import pytest

from rollbook.core.exceptions import (
    BatchRejectedError,
    DuplicateEntityError,
    EmptyGroupError,
    EntityNotFoundError,
    InvalidRangeError,
    InvalidStatusError,
    OverlappingConsultationError,
    SameGroupError,
)
from rollbook.store.views import in_group, name_contains_any


def assert_consistent(store):
    """Check the invariants that must hold after every operation."""
    ids = [p.nusnetid for p in store.persons]
    assert len(ids) == len(set(ids))
    for person in store.persons:
        group = store.find_group(person.group_id)
        assert group is not None
        assert group.find_student(person.nusnetid) == person
    for group in store.groups:
        for member in group.members:
            assert store.find_person(member.nusnetid) == member
    consultations = store.consultations
    for i, first in enumerate(consultations):
        for second in consultations[i + 1:]:
            assert not first.overlaps(second)


class TestAcceptanceScenarios:
    """End-to-end behaviour of the store."""

    def test_add_homework_to_all(self, store, alice, bob):
        store.add_person(alice)
        store.add_person(bob)
        store.add_homework(1)
        for person in store.persons:
            assert person.homework_tracker.get_status(1) == "incomplete"
        assert_consistent(store)

    def test_mark_unassigned_homework(self, populated_store):
        with pytest.raises(EntityNotFoundError) as exc_info:
            populated_store.mark_homework("E1234567", 2, "complete")
        assert "Add it first" in exc_info.value.message

    def test_move_to_same_group_changes_nothing(self, populated_store, alice):
        persons_before = populated_store.persons
        groups_before = populated_store.groups
        with pytest.raises(SameGroupError):
            populated_store.move_student_to_new_group(alice, "T01")
        assert populated_store.persons == persons_before
        assert populated_store.groups == groups_before

    def test_nusnetid_edit_rebinds_consultation(self, populated_store, alice, slot):
        populated_store.add_consultation(slot("E1234567", "14:00", "15:00"))
        current = populated_store.get_person("E1234567")

        populated_store.replace_person(current, current.updated(nusnetid="E2222222"))

        consultations = populated_store.consultations
        assert len(consultations) == 1
        assert consultations[0].identity == slot("E2222222", "14:00", "15:00").identity
        assert populated_store.find_consultation_of("E1234567") is None
        assert populated_store.get_person("E2222222").consultation == consultations[0]
        assert_consistent(populated_store)

    def test_mark_all_attendance_on_empty_group(self, populated_store):
        populated_store.add_group("T09")
        persons_before = populated_store.persons
        with pytest.raises(EmptyGroupError):
            populated_store.mark_all_attendance("T09", 3, "present")
        assert populated_store.persons == persons_before


class TestPersons:
    """Test adding, editing and removing students."""

    def test_add_person_creates_group(self, store, alice):
        store.add_person(alice)
        assert store.get_group("T01").members == (alice,)
        assert_consistent(store)

    def test_add_duplicate_person(self, populated_store, make_person):
        with pytest.raises(DuplicateEntityError):
            populated_store.add_person(make_person(name="Someone Else"))
        assert len(populated_store.persons) == 3

    def test_lookup_is_case_insensitive(self, populated_store, alice):
        assert populated_store.find_person("e1234567") == alice
        assert populated_store.find_person("E0000000") is None

    def test_get_missing_person(self, store):
        with pytest.raises(EntityNotFoundError):
            store.get_person("E0000000")

    def test_edit_refreshes_group_member(self, populated_store, alice):
        edited = populated_store.replace_person(alice, alice.updated(phone="88888888"))
        assert populated_store.get_group("T01").find_student("E1234567").phone == "88888888"
        assert [m.nusnetid for m in populated_store.get_group("T01").members] == [
            "E7654321",
            "E1234567",
        ]
        assert edited.phone == "88888888"
        assert_consistent(populated_store)

    def test_edit_onto_existing_id_leaves_store_unchanged(self, populated_store, alice):
        groups_before = populated_store.groups
        persons_before = populated_store.persons
        with pytest.raises(DuplicateEntityError):
            populated_store.replace_person(alice, alice.updated(nusnetid="E7654321"))
        assert populated_store.groups == groups_before
        assert populated_store.persons == persons_before

    def test_edit_missing_person(self, populated_store, make_person):
        ghost = make_person(nusnetid="E0000000")
        with pytest.raises(EntityNotFoundError):
            populated_store.replace_person(ghost, ghost.updated(name="Ghost"))

    def test_nusnetid_edit_without_consultation(self, populated_store, alice):
        populated_store.replace_person(alice, alice.updated(nusnetid="E3333333"))
        assert populated_store.find_person("E1234567") is None
        assert populated_store.get_group("T01").has_student("E3333333")
        assert_consistent(populated_store)

    def test_remove_person_keeps_group_and_drops_consultation(self, populated_store, charlie, slot):
        populated_store.add_consultation(slot("E1111111", "10:00", "11:00"))
        populated_store.remove_person(populated_store.get_person("E1111111"))
        assert populated_store.find_person("E1111111") is None
        assert populated_store.get_group("T02").is_empty()
        assert populated_store.consultations == []
        assert_consistent(populated_store)

    def test_remove_missing_person(self, store, alice):
        with pytest.raises(EntityNotFoundError):
            store.remove_person(alice)


class TestGroups:
    """Test group creation and moves."""

    def test_add_group(self, store):
        group = store.add_group("t05")
        assert group.group_id == "T05"
        assert store.has_group("T05")

    def test_added_group_starts_empty(self, store, alice):
        group = store.add_group("T01")
        assert group.members == ()
        store.add_person(alice)
        assert [m.nusnetid for m in store.get_group("T01").members] == ["E1234567"]

    def test_add_duplicate_group(self, populated_store):
        with pytest.raises(DuplicateEntityError) as exc_info:
            populated_store.add_group("T01")
        assert exc_info.value.message == "Group T01 already exists!"

    def test_get_missing_group(self, store):
        assert store.find_group("T01") is None
        with pytest.raises(EntityNotFoundError):
            store.get_group("T01")

    def test_move_creates_target_group(self, populated_store, alice):
        moved = populated_store.move_student_to_new_group(alice, "B02")
        assert moved.group_id == "B02"
        assert populated_store.get_group("B02").members == (moved,)
        assert not populated_store.get_group("T01").has_student("E1234567")
        assert_consistent(populated_store)

    def test_move_into_existing_group(self, populated_store, alice):
        populated_store.move_student_to_new_group(alice, "T02")
        assert [m.nusnetid for m in populated_store.get_group("T02").members] == [
            "E1111111",
            "E1234567",
        ]
        assert_consistent(populated_store)

    def test_move_missing_student(self, populated_store, make_person):
        with pytest.raises(EntityNotFoundError):
            populated_store.move_student_to_new_group(make_person(nusnetid="E0000000"), "T02")

    def test_groups_are_never_removed_implicitly(self, populated_store, charlie):
        populated_store.move_student_to_new_group(charlie, "T01")
        assert populated_store.has_group("T02")
        assert populated_store.get_group("T02").is_empty()


class TestConsultations:
    """Test booking and cancelling consultations."""

    def test_add_consultation_attaches_to_owner(self, populated_store, slot):
        c = slot("E1234567", "14:00", "15:00")
        populated_store.add_consultation(c)
        assert populated_store.get_person("E1234567").consultation == c
        assert populated_store.has_consultation(c)
        assert_consistent(populated_store)

    def test_owner_must_exist(self, populated_store, slot):
        with pytest.raises(EntityNotFoundError):
            populated_store.add_consultation(slot("E0000000", "14:00", "15:00"))

    def test_overlap_is_global(self, populated_store, slot):
        populated_store.add_consultation(slot("E1234567", "14:00", "15:00"))
        with pytest.raises(OverlappingConsultationError):
            populated_store.add_consultation(slot("E7654321", "14:30", "15:30"))
        assert len(populated_store.consultations) == 1

    def test_touching_slots_are_allowed(self, populated_store, slot):
        populated_store.add_consultation(slot("E1234567", "14:00", "15:00"))
        populated_store.add_consultation(slot("E7654321", "15:00", "16:00"))
        assert len(populated_store.consultations) == 2

    def test_identical_consultation_is_duplicate(self, populated_store, slot):
        populated_store.add_consultation(slot("E1234567", "14:00", "15:00"))
        with pytest.raises(DuplicateEntityError):
            populated_store.add_consultation(slot("E1234567", "14:00", "15:00"))

    def test_one_consultation_per_student(self, populated_store, slot):
        populated_store.add_consultation(slot("E1234567", "14:00", "15:00"))
        with pytest.raises(DuplicateEntityError):
            populated_store.add_consultation(slot("E1234567", "16:00", "17:00"))

    def test_remove_consultation(self, populated_store, slot):
        c = slot("E1234567", "14:00", "15:00")
        populated_store.add_consultation(c)
        populated_store.remove_consultation(c)
        assert populated_store.consultations == []
        assert populated_store.get_person("E1234567").consultation is None
        with pytest.raises(EntityNotFoundError):
            populated_store.remove_consultation(c)

    def test_consultation_overlaps_query(self, populated_store, slot):
        populated_store.add_consultation(slot("E1234567", "14:00", "15:00"))
        assert populated_store.consultation_overlaps(slot("E7654321", "14:59", "15:30"))
        assert not populated_store.consultation_overlaps(slot("E7654321", "15:00", "15:30"))


class TestHomework:
    """Test single-student and all-students homework operations."""

    def test_add_homework_to_one_student(self, populated_store):
        updated = populated_store.add_homework(3, "E1234567")
        assert updated[0].homework_tracker.contains(3)
        assert not populated_store.get_person("E7654321").homework_tracker.contains(3)
        assert_consistent(populated_store)

    def test_add_existing_homework_to_one_student(self, populated_store):
        populated_store.add_homework(3, "E1234567")
        with pytest.raises(DuplicateEntityError) as exc_info:
            populated_store.add_homework(3, "E1234567")
        assert exc_info.value.message == "Homework 3 already exists for Alice Tan."

    def test_add_to_all_skips_students_who_have_it(self, populated_store):
        populated_store.add_homework(4, "E1234567")
        populated_store.mark_homework("E1234567", 4, "complete")
        updated = populated_store.add_homework(4)
        assert sorted(p.nusnetid for p in updated) == ["E1111111", "E7654321"]
        assert populated_store.get_person("E1234567").homework_tracker.get_status(4) == "complete"

    def test_add_to_all_rejected_when_everyone_has_it(self, populated_store):
        populated_store.add_homework(4)
        before = populated_store.persons
        with pytest.raises(BatchRejectedError):
            populated_store.add_homework(4)
        assert populated_store.persons == before

    def test_add_to_all_on_empty_roster(self, store):
        with pytest.raises(BatchRejectedError):
            store.add_homework(1)

    @pytest.mark.parametrize("assignment_id", [0, 14])
    def test_homework_id_range(self, populated_store, assignment_id):
        with pytest.raises(InvalidRangeError):
            populated_store.add_homework(assignment_id)
        with pytest.raises(InvalidRangeError):
            populated_store.delete_homework(assignment_id, "E1234567")

    def test_delete_homework(self, populated_store):
        populated_store.add_homework(5)
        populated_store.delete_homework(5, "E1234567")
        assert not populated_store.get_person("E1234567").homework_tracker.contains(5)
        assert populated_store.get_person("E7654321").homework_tracker.contains(5)

    def test_delete_missing_homework_from_one_student(self, populated_store):
        with pytest.raises(EntityNotFoundError):
            populated_store.delete_homework(5, "E1234567")

    def test_delete_from_all(self, populated_store):
        populated_store.add_homework(6, "E7654321")
        updated = populated_store.delete_homework(6)
        assert [p.nusnetid for p in updated] == ["E7654321"]
        with pytest.raises(BatchRejectedError):
            populated_store.delete_homework(6)

    def test_mark_homework(self, populated_store):
        populated_store.add_homework(1, "E1234567")
        person = populated_store.mark_homework("e1234567", 1, "Late")
        assert person.homework_tracker.get_status(1) == "late"
        assert populated_store.get_group("T01").find_student("E1234567") == person

    def test_mark_homework_invalid_status(self, populated_store):
        populated_store.add_homework(1, "E1234567")
        with pytest.raises(InvalidStatusError):
            populated_store.mark_homework("E1234567", 1, "finished")

    def test_mark_homework_missing_student(self, populated_store):
        with pytest.raises(EntityNotFoundError):
            populated_store.mark_homework("E0000000", 1, "complete")


class TestAttendance:
    """Test attendance marking."""

    def test_mark_attendance(self, populated_store):
        person = populated_store.mark_attendance("E1234567", 3, "present")
        assert person.attendance_sheet.get_status(3) == "present"
        assert_consistent(populated_store)

    @pytest.mark.parametrize("week", [1, 14])
    def test_week_range(self, populated_store, week):
        with pytest.raises(InvalidRangeError):
            populated_store.mark_attendance("E1234567", week, "present")

    def test_mark_all_attendance(self, populated_store):
        updated = populated_store.mark_all_attendance("t01", 4, "excused")
        assert sorted(p.nusnetid for p in updated) == ["E1234567", "E7654321"]
        assert populated_store.get_person("E1111111").attendance_sheet.get_status(4) == "not marked"
        assert_consistent(populated_store)

    def test_mark_all_attendance_missing_group(self, populated_store):
        with pytest.raises(EntityNotFoundError):
            populated_store.mark_all_attendance("T09", 3, "present")

    def test_mark_all_attendance_checks_status_first(self, populated_store):
        with pytest.raises(InvalidStatusError):
            populated_store.mark_all_attendance("T09", 3, "here")


class TestFilteredViews:
    """Test the derived person and consultation lists."""

    def test_default_shows_everyone(self, populated_store):
        assert len(populated_store.filtered_persons()) == 3

    def test_group_filter(self, populated_store):
        populated_store.update_person_filter(in_group("T02"))
        assert [p.nusnetid for p in populated_store.filtered_persons()] == ["E1111111"]

    def test_keyword_filter_matches_whole_words(self, populated_store):
        populated_store.update_person_filter(name_contains_any(["alice", "NG"]))
        assert [p.name for p in populated_store.filtered_persons()] == ["Alice Tan", "Charlie Ng"]
        populated_store.update_person_filter(name_contains_any(["ali"]))
        assert populated_store.filtered_persons() == []

    def test_filter_reflects_later_changes(self, populated_store, make_person):
        populated_store.update_person_filter(in_group("T02"))
        populated_store.add_person(make_person(name="Dana Koh", nusnetid="E4444444", group_id="T02"))
        assert len(populated_store.filtered_persons()) == 2

    def test_consultations_sorted_by_start(self, populated_store, slot):
        populated_store.add_consultation(slot("E1234567", "16:00", "17:00"))
        populated_store.add_consultation(slot("E7654321", "09:00", "10:00"))
        starts = [c.start.hour for c in populated_store.filtered_consultations()]
        assert starts == [9, 16]

    def test_reset_data(self, populated_store, store):
        store.reset_data(populated_store)
        assert store == populated_store
        store.add_group("T09")
        assert not populated_store.has_group("T09")

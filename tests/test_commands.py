"""
Tests for command execution and the roster service
"""

import io
import json

import pytest

from rollbook.cli import run_repl
from rollbook.core.exceptions import (
    BatchRejectedError,
    DuplicateEntityError,
    EmptyGroupError,
    EntityNotFoundError,
    ParseError,
)
from rollbook.logic.parser import parse_command
from rollbook.services.roster_service import RosterService, get_roster_service

ADD_ALICE = "add_student n/Alice Tan i/E1234567 t/@alice_tan g/T01"
ADD_BOB = "add_student n/Bob Lim i/E7654321 t/@bob_lim g/T01"
ADD_CHARLIE = "add_student n/Charlie Ng i/E1111111 t/@charlie_ng g/T02"


def run(store, text):
    return parse_command(text).execute(store).feedback


class TestStudentCommands:
    """Test student commands against a store."""

    def test_add_student(self, store):
        feedback = run(store, ADD_ALICE)
        assert feedback.startswith("New student added: Alice Tan")
        assert store.has_group("T01")

    def test_edit_uses_displayed_index(self, populated_store):
        run(populated_store, "find_group g/T02")
        feedback = run(populated_store, "edit_student 1 n/Charlie Tan")
        assert "Charlie Tan" in feedback
        assert populated_store.get_person("E1111111").name == "Charlie Tan"
        assert len(populated_store.filtered_persons()) == 3

    def test_edit_index_out_of_range(self, populated_store):
        with pytest.raises(EntityNotFoundError):
            run(populated_store, "edit_student 4 n/Nobody")

    def test_edit_nusnetid_carries_consultation(self, populated_store):
        run(populated_store, "add_consult i/E1234567 from/2024-10-19 14:00 to/2024-10-19 15:00")
        run(populated_store, "edit_student 1 i/E2222222")
        assert populated_store.find_consultation_of("E2222222") is not None
        assert populated_store.find_consultation_of("E1234567") is None

    def test_delete_student(self, populated_store):
        assert run(populated_store, "delete_student i/E7654321").startswith("Deleted Student: Bob Lim")
        assert populated_store.find_person("E7654321") is None

    def test_find(self, populated_store):
        assert run(populated_store, "find bob charlie") == "2 student(s) listed!"
        assert run(populated_store, "list") == "Listed all students"
        assert len(populated_store.filtered_persons()) == 3


class TestGroupCommands:
    """Test group commands."""

    def test_create_group_twice(self, store):
        assert run(store, "create_group g/T03") == "New group created: T03"
        with pytest.raises(DuplicateEntityError):
            run(store, "create_group g/T03")

    def test_add_to_group(self, populated_store):
        assert run(populated_store, "add_to_group i/E1234567 g/T02") == "Moved Alice Tan to group T02."

    def test_find_missing_group(self, populated_store):
        with pytest.raises(EntityNotFoundError):
            run(populated_store, "find_group g/T09")


class TestHomeworkAndAttendanceCommands:
    """Test homework and attendance commands."""

    def test_homework_flow(self, populated_store):
        feedback = run(populated_store, "add_hw i/all a/1")
        assert "3 student(s) updated" in feedback
        assert run(populated_store, "mark_hw i/E1234567 a/1 status/complete") == (
            "Marked assignment 1 as complete for Alice Tan."
        )
        with pytest.raises(BatchRejectedError):
            run(populated_store, "add_hw i/all a/1")
        assert run(populated_store, "delete_hw i/E1234567 a/1") == "Deleted assignment 1 for Alice Tan."

    def test_mark_all_attendance_filters_to_group(self, populated_store):
        feedback = run(populated_store, "mark_all_attendance g/T01 w/3 status/present")
        assert feedback == "Marked all 2 student(s) in group T01 as present for week 3."
        assert [p.group_id for p in populated_store.filtered_persons()] == ["T01", "T01"]

    def test_mark_all_attendance_empty_group(self, populated_store):
        run(populated_store, "create_group g/T05")
        with pytest.raises(EmptyGroupError):
            run(populated_store, "mark_all_attendance g/T05 w/3 status/present")

    def test_mark_attendance(self, populated_store):
        assert run(populated_store, "mark_attendance i/E1111111 w/13 status/EXCUSED") == (
            "Marked Charlie Ng as excused for week 13."
        )


class TestConsultationCommands:
    """Test consultation commands."""

    def test_delete_consult(self, populated_store):
        run(populated_store, "add_consult i/E1234567 from/2024-10-19 14:00 to/2024-10-19 15:00")
        assert run(populated_store, "delete_consult i/E1234567").startswith("Deleted consultation")
        with pytest.raises(EntityNotFoundError):
            run(populated_store, "delete_consult i/E1234567")

    def test_list_consult(self, populated_store):
        run(populated_store, "add_consult i/E1234567 from/2024-10-19 14:00 to/2024-10-19 15:00")
        assert run(populated_store, "list_consult") == "Listed all consultations (1)."


class TestRosterService:
    """Test command execution with persistence."""

    def test_execute_saves_changes(self, tmp_path):
        data_file = tmp_path / "roster.json"
        service = RosterService(data_file)
        service.execute(ADD_ALICE)
        saved = json.loads(data_file.read_text(encoding="utf-8"))
        assert [p["nusnetid"] for p in saved["persons"]] == ["E1234567"]

        reloaded = RosterService(data_file)
        assert reloaded.store.find_person("E1234567") is not None

    def test_failed_command_does_not_save(self, tmp_path):
        data_file = tmp_path / "roster.json"
        service = RosterService(data_file)
        with pytest.raises(ParseError):
            service.execute("add_student n/Alice")
        assert not data_file.exists()

    def test_listing_commands_do_not_save(self, tmp_path):
        data_file = tmp_path / "roster.json"
        RosterService(data_file).execute("list")
        assert not data_file.exists()

    def test_mutation_context_saves_on_success(self, tmp_path, alice):
        data_file = tmp_path / "roster.json"
        service = RosterService(data_file)
        with service.mutation() as store:
            store.add_person(alice)
        assert RosterService(data_file).store.find_person("E1234567") == alice

    def test_default_service_uses_configured_data_dir(self, isolated_environment):
        service = get_roster_service()
        assert service.storage.path == (isolated_environment / "data" / "rollbook.json").resolve()
        assert get_roster_service() is service


class TestRepl:
    """Test the interactive command loop."""

    def test_repl_runs_until_exit(self, tmp_path):
        service = RosterService(tmp_path / "roster.json")
        lines = io.StringIO("\n".join([ADD_ALICE, ADD_BOB, "bogus", "list", "exit", ADD_CHARLIE]) + "\n")
        out = io.StringIO()

        assert run_repl(service, lines, out) == 0

        output = out.getvalue()
        assert "Unknown command" in output
        assert "1. Alice Tan" in output
        assert service.store.find_person("E1111111") is None


class TestCli:
    """Test the console entry point."""

    def test_serve_runs_configured_app(self, monkeypatch):
        import uvicorn

        from rollbook.cli import main

        calls = []
        monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

        assert main(["--serve"]) == 0
        assert calls == [("rollbook.main:app", {"host": "127.0.0.1", "port": 8090, "reload": False})]

    def test_unreadable_data_file_exits_with_error(self, tmp_path, capsys):
        from rollbook.cli import main

        data_file = tmp_path / "roster.json"
        data_file.write_bytes(b'{"persons": ["\xff\xfe"]}')

        assert main(["--data-file", str(data_file)]) == 1
        assert "Could not read data file" in capsys.readouterr().err

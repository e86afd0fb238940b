"""
API routes for students (CRUD, group moves, homework and attendance).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from rollbook.models.person import Person
from rollbook.schemas.roster import (
    AttendanceRequest,
    GroupMoveRequest,
    HomeworkRequest,
    HomeworkStatusRequest,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)
from rollbook.services.roster_service import RosterService, get_roster_service
from rollbook.store.views import filter_entities, in_group

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("", response_model=List[StudentResponse])
def list_students(
    group_id: Optional[str] = Query(None, description="Filter by group ID"),
    service: RosterService = Depends(get_roster_service),
):
    """List all students, optionally filtered by group."""
    with service.reading() as store:
        persons = store.persons
    if group_id is not None:
        persons = filter_entities(persons, in_group(group_id))
    return [StudentResponse.from_model(p) for p in persons]


@router.get("/{nusnetid}", response_model=StudentResponse)
def get_student(nusnetid: str, service: RosterService = Depends(get_roster_service)):
    """Get a student by NUSNET ID."""
    with service.reading() as store:
        person = store.find_person(nusnetid)
    if person is None:
        raise HTTPException(status_code=404, detail="Student not found")
    return StudentResponse.from_model(person)


@router.post("", response_model=StudentResponse, status_code=201)
def create_student(payload: StudentCreate, service: RosterService = Depends(get_roster_service)):
    """Create a new student, creating their group if needed."""
    person = Person(**payload.model_dump())
    with service.mutation() as store:
        store.add_person(person)
    return StudentResponse.from_model(person)


@router.patch("/{nusnetid}", response_model=StudentResponse)
def update_student(
    nusnetid: str,
    payload: StudentUpdate,
    service: RosterService = Depends(get_roster_service),
):
    """Edit a student's details; a new NUSNET ID is carried into their consultation."""
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="At least one field to edit must be provided.")
    with service.mutation() as store:
        current = store.get_person(nusnetid)
        edited = store.replace_person(current, current.updated(**changes))
    return StudentResponse.from_model(edited)


@router.delete("/{nusnetid}", status_code=204)
def delete_student(nusnetid: str, service: RosterService = Depends(get_roster_service)):
    """Delete a student together with their consultation."""
    with service.mutation() as store:
        store.remove_person(store.get_person(nusnetid))
    return None


@router.put("/{nusnetid}/group", response_model=StudentResponse)
def move_student(
    nusnetid: str,
    payload: GroupMoveRequest,
    service: RosterService = Depends(get_roster_service),
):
    """Move a student to another group, creating the group if it does not exist."""
    with service.mutation() as store:
        moved = store.move_student_to_new_group(store.get_person(nusnetid), payload.group_id)
    return StudentResponse.from_model(moved)


@router.post("/{nusnetid}/homework", response_model=StudentResponse, status_code=201)
def add_homework(
    nusnetid: str,
    payload: HomeworkRequest,
    service: RosterService = Depends(get_roster_service),
):
    """Assign homework to one student."""
    with service.mutation() as store:
        updated = store.add_homework(payload.assignment_id, nusnetid)
    return StudentResponse.from_model(updated[0])


@router.delete("/{nusnetid}/homework/{assignment_id}", response_model=StudentResponse)
def delete_homework(
    nusnetid: str,
    assignment_id: int,
    service: RosterService = Depends(get_roster_service),
):
    """Remove homework from one student."""
    with service.mutation() as store:
        updated = store.delete_homework(assignment_id, nusnetid)
    return StudentResponse.from_model(updated[0])


@router.put("/{nusnetid}/homework/{assignment_id}", response_model=StudentResponse)
def mark_homework(
    nusnetid: str,
    assignment_id: int,
    payload: HomeworkStatusRequest,
    service: RosterService = Depends(get_roster_service),
):
    """Set the status of an assigned homework."""
    with service.mutation() as store:
        person = store.mark_homework(nusnetid, assignment_id, payload.status)
    return StudentResponse.from_model(person)


@router.put("/{nusnetid}/attendance", response_model=StudentResponse)
def mark_attendance(
    nusnetid: str,
    payload: AttendanceRequest,
    service: RosterService = Depends(get_roster_service),
):
    """Record a student's attendance for one week."""
    with service.mutation() as store:
        person = store.mark_attendance(nusnetid, payload.week, payload.status)
    return StudentResponse.from_model(person)

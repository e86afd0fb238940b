"""
API routes for tutorial groups and group-wide operations.
"""

from typing import List

from fastapi import APIRouter, Depends

from rollbook.schemas.roster import (
    AttendanceRequest,
    BatchResponse,
    GroupCreate,
    GroupResponse,
    GroupWithStudentsResponse,
    HomeworkRequest,
    StudentResponse,
)
from rollbook.services.roster_service import RosterService, get_roster_service

router = APIRouter(prefix="/groups", tags=["Groups"])


def _batch(persons) -> BatchResponse:
    return BatchResponse(
        updated=[StudentResponse.from_model(p) for p in persons], count=len(persons)
    )


@router.get("", response_model=List[GroupResponse])
def list_groups(service: RosterService = Depends(get_roster_service)):
    """List all groups."""
    with service.reading() as store:
        groups = store.groups
    return [GroupResponse.from_model(g) for g in sorted(groups, key=lambda g: g.group_id)]


@router.post("/homework", response_model=BatchResponse, status_code=201)
def add_homework_to_all(
    payload: HomeworkRequest, service: RosterService = Depends(get_roster_service)
):
    """Assign homework to every student who does not have it yet."""
    with service.mutation() as store:
        updated = store.add_homework(payload.assignment_id)
    return _batch(updated)


@router.delete("/homework/{assignment_id}", response_model=BatchResponse)
def delete_homework_from_all(
    assignment_id: int, service: RosterService = Depends(get_roster_service)
):
    """Remove homework from every student who has it."""
    with service.mutation() as store:
        updated = store.delete_homework(assignment_id)
    return _batch(updated)


@router.get("/{group_id}", response_model=GroupWithStudentsResponse)
def get_group(group_id: str, service: RosterService = Depends(get_roster_service)):
    """Get a group with its students."""
    with service.reading() as store:
        group = store.get_group(group_id)
    summary = GroupResponse.from_model(group)
    return GroupWithStudentsResponse(
        **summary.model_dump(),
        students=[StudentResponse.from_model(member) for member in group.members],
    )


@router.post("", response_model=GroupResponse, status_code=201)
def create_group(payload: GroupCreate, service: RosterService = Depends(get_roster_service)):
    """Create a new, empty group."""
    with service.mutation() as store:
        group = store.add_group(payload.group_id)
    return GroupResponse.from_model(group)


@router.post("/{group_id}/attendance", response_model=BatchResponse)
def mark_group_attendance(
    group_id: str,
    payload: AttendanceRequest,
    service: RosterService = Depends(get_roster_service),
):
    """Record the same attendance for every member of a group."""
    with service.mutation() as store:
        updated = store.mark_all_attendance(group_id, payload.week, payload.status)
    return _batch(updated)

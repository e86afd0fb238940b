"""
API routes for consultations.
"""

from typing import List

from fastapi import APIRouter, Depends

from rollbook.core.exceptions import EntityNotFoundError
from rollbook.models.consultation import Consultation
from rollbook.schemas.roster import (
    ConsultationCreate,
    ConsultationResponse,
    OverlapCheckResponse,
)
from rollbook.services.roster_service import RosterService, get_roster_service
from rollbook.store.consultation_index import find_overlapping
from rollbook.store.views import consultation_start, sort_entities

router = APIRouter(prefix="/consultations", tags=["Consultations"])


@router.get("", response_model=List[ConsultationResponse])
def list_consultations(service: RosterService = Depends(get_roster_service)):
    """List all consultations, earliest first."""
    with service.reading() as store:
        consultations = sort_entities(store.consultations, key=consultation_start)
    return [ConsultationResponse.from_model(c) for c in consultations]


@router.post("", response_model=ConsultationResponse, status_code=201)
def create_consultation(
    payload: ConsultationCreate, service: RosterService = Depends(get_roster_service)
):
    """Book a consultation for an existing student."""
    consultation = Consultation(**payload.model_dump())
    with service.mutation() as store:
        store.add_consultation(consultation)
    return ConsultationResponse.from_model(consultation)


@router.delete("/{nusnetid}", status_code=204)
def delete_consultation(nusnetid: str, service: RosterService = Depends(get_roster_service)):
    """Cancel the consultation booked by a student."""
    with service.mutation() as store:
        consultation = store.find_consultation_of(nusnetid)
        if consultation is None:
            raise EntityNotFoundError(
                "Consultation", nusnetid, f"No consultation found for student {nusnetid}."
            )
        store.remove_consultation(consultation)
    return None


@router.post("/check", response_model=OverlapCheckResponse)
def check_overlap(
    payload: ConsultationCreate, service: RosterService = Depends(get_roster_service)
):
    """Report whether a slot would clash with any booked consultation."""
    candidate = Consultation(**payload.model_dump())
    with service.reading() as store:
        conflict = find_overlapping(store.consultations, candidate)
    return OverlapCheckResponse(
        overlaps=conflict is not None,
        conflict=ConsultationResponse.from_model(conflict) if conflict else None,
    )

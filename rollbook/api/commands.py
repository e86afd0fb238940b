"""
API route for running text commands.
"""

from fastapi import APIRouter, Depends

from rollbook.schemas.roster import CommandRequest, CommandResponse
from rollbook.services.roster_service import RosterService, get_roster_service

router = APIRouter(prefix="/commands", tags=["Commands"])


@router.post("", response_model=CommandResponse)
def run_command(payload: CommandRequest, service: RosterService = Depends(get_roster_service)):
    """Run one text command, e.g. ``add_hw i/all a/3``."""
    result = service.execute(payload.command)
    return CommandResponse(feedback=result.feedback)

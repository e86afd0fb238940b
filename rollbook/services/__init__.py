"""
Services package initialization.
"""

from rollbook.services.roster_service import (
    RosterService,
    get_roster_service,
    reset_roster_service,
)

__all__ = ["RosterService", "get_roster_service", "reset_roster_service"]

"""
Storage package initialization.
"""

from rollbook.storage.json_storage import JsonRosterStorage, roster_to_stored, stored_to_roster

__all__ = ["JsonRosterStorage", "roster_to_stored", "stored_to_roster"]

"""
Overlap checks across every booked consultation.

The counselling slot is a single shared resource, so a candidate conflicts
with any stored consultation regardless of which student owns it.
"""

from typing import Iterable, Optional

from rollbook.models.consultation import Consultation


def find_overlapping(
    consultations: Iterable[Consultation], candidate: Consultation
) -> Optional[Consultation]:
    """Return the first stored consultation sharing time with candidate, if any."""
    for existing in consultations:
        if candidate.start < existing.end and existing.start < candidate.end:
            return existing
    return None


def overlaps(consultations: Iterable[Consultation], candidate: Consultation) -> bool:
    return find_overlapping(consultations, candidate) is not None

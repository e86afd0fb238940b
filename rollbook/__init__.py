"""
Rollbook: roster of students, tutorial groups, homework, attendance and consultations.
"""

__version__ = "0.1.0"

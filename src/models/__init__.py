"""Database model type definitions."""

from src.models.tracker import (
    Cohort,
    Invitation,
    InvitationCreate,
    InvitationStatus,
    Region,
    SalesRep,
)

__all__ = [
    "Cohort",
    "Invitation",
    "InvitationCreate",
    "InvitationStatus",
    "Region",
    "SalesRep",
]

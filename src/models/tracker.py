"""Tracker model type definitions for record store rows."""

from enum import Enum
from typing import TypedDict


class InvitationStatus(str, Enum):
    """Pipeline status of an invitation, in selector order."""

    TO_BE_CONTACTED = "To be contacted"
    INVITED = "Invited"
    CONFIRMED = "Confirmed"
    CANT_ATTEND = "Can't attend"
    RESCHEDULED = "Rescheduled"


class Region(str, Enum):
    """Sales regions a cohort runs in."""

    EMEA = "EMEA"
    NAMER = "NAMER"


DEFAULT_STATUS = InvitationStatus.TO_BE_CONTACTED


class Invitation(TypedDict, total=False):
    """Invitation table row representation.

    An invitation belongs to the cohort with the same course, region and
    date; there is no cohort foreign key.
    """

    id: int
    company: str
    name: str
    role: str | None
    email: str | None
    linkedin: str | None
    sales_rep: str
    course: str | None
    region: str | None
    cohort_date: str | None
    status: str
    notes: str | None
    created_at: str


class SalesRep(TypedDict):
    """Sales representative table row representation."""

    id: int
    name: str


class Cohort(TypedDict):
    """Cohort table row representation.

    A scheduled course offering in a region on a date, with a seat capacity.
    """

    id: int
    name: str
    course: str
    region: str
    date: str
    seats: int


class InvitationCreate(TypedDict):
    """Data required to insert an invitation."""

    company: str
    name: str
    role: str | None
    email: str | None
    linkedin: str | None
    sales_rep: str
    course: str | None
    region: str | None
    cohort_date: str | None
    status: str
    notes: str | None

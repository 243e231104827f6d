"""Dashboard Pydantic schemas for screen view models and requests."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.models.tracker import InvitationStatus, Region
from src.services.aggregation import FillTier, LeaderboardSortKey
from src.services.dashboard_state import FormMode, Tab


# Overview


class GoalProgress(BaseModel):
    """Goal card on the overview screen."""

    model_config = ConfigDict(from_attributes=True)

    title: str = Field(description="Goal headline")
    confirmed: int = Field(description="Confirmed invitations in the goal year")
    invited: int = Field(description="Invited invitations in the goal year")
    to_contact: int = Field(description="Invitations still to be contacted in the goal year")
    goal: int = Field(description="Confirmed executives targeted")
    percent_complete: float = Field(description="Confirmed / goal * 100, not capped at 100")
    percent_label: str = Field(description="Percent complete formatted to one decimal place")
    progress_width: float = Field(description="Progress bar width in percent, not capped at 100")


class StatTile(BaseModel):
    """One status count tile."""

    label: str
    value: int
    color: str


class Gauge(BaseModel):
    """Semicircle gauge for one active cohort."""

    label: str = Field(description="Cohort name")
    value: int = Field(description="Confirmed invitations")
    max: int = Field(description="Seat capacity")
    percent: float = Field(description="Fill percentage clamped to 0-100")
    percent_label: str = Field(description="Rounded fill text")
    color: str = Field(description="Gauge color hex code")
    rotation: float = Field(description="Fill arc in degrees (0-180)")


class CohortRow(BaseModel):
    """Row of the cohort details table."""

    id: Any = None
    name: str | None = None
    course: str | None = None
    region: str | None = None
    region_badge: str = Field(default="", description="CSS badge class for the region")
    date: str | None = None
    seats: int = 0
    confirmed: int = 0
    invited: int = 0
    to_contact: int = 0
    fill_percent: float = Field(default=0, description="Confirmed / seats * 100, 0 without seats")
    fill_label: str = Field(default="0%", description="Fill percentage rounded to an integer")
    tier: FillTier = FillTier.LOW


class OverviewView(BaseModel):
    """Overview / dashboard screen."""

    goal: GoalProgress
    stats: list[StatTile]
    gauges: list[Gauge]
    cohorts: list[CohortRow]
    gauges_empty_message: str | None = None
    cohorts_empty_message: str | None = None


# Invitation list


class StatusStyle(BaseModel):
    bg: str
    text: str
    border: str


class SelectOption(BaseModel):
    value: str
    label: str


class InvitationRow(BaseModel):
    """Row of the invitation table."""

    id: Any
    company: str | None = None
    name: str | None = None
    sales_rep: str | None = None
    course: str | None = None
    cohort: str | None = Field(default=None, description="Cohort name, or the raw date when unknown")
    cohort_date: str | None = None
    region: str | None = None
    region_badge: str = ""
    status: str
    style: StatusStyle


class FilterOptions(BaseModel):
    sales_reps: list[SelectOption]
    statuses: list[SelectOption]
    courses: list[SelectOption]
    cohorts: list[SelectOption]


class InvitationFiltersView(BaseModel):
    sales_rep: str = ""
    status: str = ""
    course: str = ""
    cohort_date: str = ""


class InvitationDraftView(BaseModel):
    company: str = ""
    name: str = ""
    role: str = ""
    email: str = ""
    linkedin: str = ""
    sales_rep: str = ""
    course: str = ""
    region: str = ""
    cohort_date: str = ""
    status: str = InvitationStatus.TO_BE_CONTACTED.value
    notes: str = ""


class AddFormOptions(BaseModel):
    sales_reps: list[SelectOption]
    courses: list[SelectOption]
    regions: list[SelectOption]
    cohorts: list[SelectOption]
    statuses: list[SelectOption]


class AddFormView(BaseModel):
    """Add-invitation modal."""

    mode: FormMode
    visible: bool
    draft: InvitationDraftView
    options: AddFormOptions
    error: str | None = None


class InvitationListView(BaseModel):
    """Invitation list screen."""

    rows: list[InvitationRow]
    filters: InvitationFiltersView
    filter_options: FilterOptions
    show_clear_filters: bool
    footer: str
    empty_message: str | None = None
    add_form: AddFormView


# Leaderboards


class LeaderboardEntry(BaseModel):
    rank: int
    name: str | None
    confirmed: int
    contacted: int
    top_three: bool


class LeaderboardView(BaseModel):
    key: str
    title: str
    color: str
    sort_by: LeaderboardSortKey
    descending: bool
    sort_options: list[SelectOption]
    rows: list[LeaderboardEntry]
    empty_message: str | None = None


class LeaderboardsView(BaseModel):
    """Leaderboards screen."""

    leaderboards: list[LeaderboardView]


# Shell


class NavTab(BaseModel):
    key: Tab
    label: str
    active: bool


class DashboardScreen(BaseModel):
    """Whole-page response: navigation plus the active screen."""

    loading: bool
    active_tab: Tab
    tabs: list[NavTab]
    notice: str | None = None
    overview: OverviewView | None = None
    invitations: InvitationListView | None = None
    leaderboards: LeaderboardsView | None = None


# Requests


class TabSelect(BaseModel):
    """Schema for switching tabs."""

    tab: Tab = Field(..., description="Tab to show")


class FilterUpdate(BaseModel):
    """Schema for setting invitation filters; omitted fields are unchanged."""

    sales_rep: str | None = None
    status: InvitationStatus | Literal[""] | None = None
    course: str | None = None
    cohort_date: str | None = None


class DraftUpdate(BaseModel):
    """Schema for editing the add-invitation draft; omitted fields are unchanged."""

    company: str | None = Field(default=None, max_length=255)
    name: str | None = Field(default=None, max_length=255)
    role: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    linkedin: str | None = Field(default=None, max_length=500)
    sales_rep: str | None = None
    course: str | None = None
    region: Region | Literal[""] | None = None
    cohort_date: str | None = None
    status: InvitationStatus | None = None
    notes: str | None = None


class StatusUpdate(BaseModel):
    """Schema for changing an invitation's status."""

    status: InvitationStatus = Field(..., description="New pipeline status")


class LeaderboardSortUpdate(BaseModel):
    """Schema for changing a leaderboard's ranking."""

    key: LeaderboardSortKey = Field(default=LeaderboardSortKey.CONFIRMED, description="Column to rank by")
    descending: bool = Field(default=True, description="Highest first")

"""Immutable dashboard state and the reducer that advances it.

A dashboard session holds one ``DashboardState``. Handlers never mutate it;
they build an action and call ``reduce`` to get the next state, which keeps
every transition testable on its own.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from enum import Enum
from typing import Any, Union

from src.models.tracker import (
    DEFAULT_STATUS,
    Cohort,
    Invitation,
    InvitationCreate,
    InvitationStatus,
    SalesRep,
)
from src.services.aggregation import (
    FILTER_FIELDS,
    LEADERBOARDS,
    LeaderboardSortKey,
    find_cohort_by_date,
)

MISSING_FIELDS_MESSAGE = "Please fill in Company, Name, and Sales Rep"
DRAFT_FIELDS = (
    "company",
    "name",
    "role",
    "email",
    "linkedin",
    "sales_rep",
    "course",
    "region",
    "cohort_date",
    "status",
    "notes",
)


class Tab(str, Enum):
    """Top-level navigation tabs."""

    DASHBOARD = "dashboard"
    INVITATIONS = "invitations"
    LEADERBOARD = "leaderboard"


class FormMode(str, Enum):
    """Add-invitation modal state."""

    CLOSED = "closed"
    EDITING = "editing"


@dataclass(frozen=True)
class InvitationFilters:
    """Invitation list filters; empty string means no constraint."""

    sales_rep: str = ""
    status: str = ""
    course: str = ""
    cohort_date: str = ""

    def as_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in FILTER_FIELDS}

    @property
    def any_active(self) -> bool:
        return any(self.as_dict().values())


@dataclass(frozen=True)
class InvitationDraft:
    """Unsaved values of the add-invitation form."""

    company: str = ""
    name: str = ""
    role: str = ""
    email: str = ""
    linkedin: str = ""
    sales_rep: str = ""
    course: str = ""
    region: str = ""
    cohort_date: str = ""
    status: str = DEFAULT_STATUS.value
    notes: str = ""

    def as_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in DRAFT_FIELDS}

    def to_record(self) -> InvitationCreate:
        """Row to insert; blank optional text is stored as null."""
        values = {name: value.strip() or None for name, value in self.as_dict().items()}
        values["status"] = values["status"] or DEFAULT_STATUS.value
        return InvitationCreate(**values)


@dataclass(frozen=True)
class AddFormState:
    mode: FormMode = FormMode.CLOSED
    draft: InvitationDraft = field(default_factory=InvitationDraft)
    error: str | None = None

    @property
    def is_open(self) -> bool:
        return self.mode is FormMode.EDITING


@dataclass(frozen=True)
class LeaderboardSort:
    key: LeaderboardSortKey = LeaderboardSortKey.CONFIRMED
    descending: bool = True


def _default_sorts() -> Mapping[str, LeaderboardSort]:
    return MappingProxyType({spec.key: LeaderboardSort() for spec in LEADERBOARDS})


@dataclass(frozen=True)
class DashboardState:
    """Everything one dashboard session shows and edits."""

    loading: bool = True
    invitations: tuple[Invitation, ...] = ()
    sales_reps: tuple[SalesRep, ...] = ()
    cohorts: tuple[Cohort, ...] = ()
    active_tab: Tab = Tab.DASHBOARD
    filters: InvitationFilters = field(default_factory=InvitationFilters)
    add_form: AddFormState = field(default_factory=AddFormState)
    leaderboard_sorts: Mapping[str, LeaderboardSort] = field(default_factory=_default_sorts)
    notice: str | None = None

    def sort_for(self, board: str) -> LeaderboardSort:
        return self.leaderboard_sorts.get(board, LeaderboardSort())


# Actions


@dataclass(frozen=True)
class LoadStarted:
    pass


@dataclass(frozen=True)
class LoadFinished:
    invitations: tuple[Invitation, ...] = ()
    sales_reps: tuple[SalesRep, ...] = ()
    cohorts: tuple[Cohort, ...] = ()


@dataclass(frozen=True)
class SelectTab:
    tab: Tab


@dataclass(frozen=True)
class SetFilter:
    field_name: str
    value: str


@dataclass(frozen=True)
class ClearFilters:
    pass


@dataclass(frozen=True)
class OpenAddForm:
    pass


@dataclass(frozen=True)
class CancelAddForm:
    pass


@dataclass(frozen=True)
class EditDraft:
    changes: tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class SelectDraftCohort:
    cohort_date: str


@dataclass(frozen=True)
class SubmitRejected:
    """Client-side validation blocked the submit."""

    message: str = MISSING_FIELDS_MESSAGE


@dataclass(frozen=True)
class SubmitFailed:
    """The store refused the insert."""

    message: str


@dataclass(frozen=True)
class SubmitSucceeded:
    pass


@dataclass(frozen=True)
class StatusChanged:
    invitation_id: Any
    status: InvitationStatus


@dataclass(frozen=True)
class InvitationDeleted:
    invitation_id: Any


@dataclass(frozen=True)
class SetLeaderboardSort:
    board: str
    key: LeaderboardSortKey
    descending: bool = True


@dataclass(frozen=True)
class DismissNotice:
    pass


Action = Union[
    LoadStarted,
    LoadFinished,
    SelectTab,
    SetFilter,
    ClearFilters,
    OpenAddForm,
    CancelAddForm,
    EditDraft,
    SelectDraftCohort,
    SubmitRejected,
    SubmitFailed,
    SubmitSucceeded,
    StatusChanged,
    InvitationDeleted,
    SetLeaderboardSort,
    DismissNotice,
]


def validate_draft(draft: InvitationDraft) -> str | None:
    """Return the blocking message when a required field is empty."""
    if not draft.company.strip() or not draft.name.strip() or not draft.sales_rep.strip():
        return MISSING_FIELDS_MESSAGE
    return None


def _same_id(row: Invitation, record_id: Any) -> bool:
    # Path parameters arrive as strings while stored ids may be integers.
    return str(row.get("id")) == str(record_id)


def _edit_form(state: DashboardState, **changes: Any) -> DashboardState:
    return replace(state, add_form=replace(state.add_form, **changes))


def _select_cohort(state: DashboardState, cohort_date: str) -> DashboardState:
    draft = state.add_form.draft
    cohort = find_cohort_by_date(state.cohorts, cohort_date) or {}
    updated = replace(
        draft,
        cohort_date=cohort_date,
        course=draft.course or cohort.get("course") or "",
        region=draft.region or cohort.get("region") or "",
    )
    return _edit_form(state, draft=updated)


def reduce(state: DashboardState, action: Action) -> DashboardState:
    """Compute the state that follows ``action``.

    Args:
        state: Current state.
        action: The event to apply.

    Returns:
        DashboardState: The next state. ``state`` itself is left untouched.

    Raises:
        ValueError: For a filter or draft field that does not exist, or a
            status outside ``InvitationStatus``.
        TypeError: For an unknown action type.
    """
    if isinstance(action, LoadStarted):
        return replace(state, loading=True)

    if isinstance(action, LoadFinished):
        return replace(
            state,
            loading=False,
            invitations=tuple(action.invitations),
            sales_reps=tuple(action.sales_reps),
            cohorts=tuple(action.cohorts),
        )

    if isinstance(action, SelectTab):
        return replace(state, active_tab=Tab(action.tab))

    if isinstance(action, SetFilter):
        if action.field_name not in FILTER_FIELDS:
            raise ValueError(f"Unknown filter: {action.field_name}")
        filters = replace(state.filters, **{action.field_name: action.value or ""})
        return replace(state, filters=filters)

    if isinstance(action, ClearFilters):
        return replace(state, filters=InvitationFilters())

    if isinstance(action, OpenAddForm):
        return replace(_edit_form(state, mode=FormMode.EDITING, error=None), notice=None)

    if isinstance(action, CancelAddForm):
        return replace(_edit_form(state, mode=FormMode.CLOSED, error=None), notice=None)

    if isinstance(action, EditDraft):
        changes = dict(action.changes)
        unknown = set(changes) - set(DRAFT_FIELDS)
        if unknown:
            raise ValueError(f"Unknown draft fields: {', '.join(sorted(unknown))}")
        if "status" in changes:
            changes["status"] = InvitationStatus(changes["status"]).value
        return _edit_form(state, draft=replace(state.add_form.draft, **changes))

    if isinstance(action, SelectDraftCohort):
        return _select_cohort(state, action.cohort_date)

    if isinstance(action, (SubmitRejected, SubmitFailed)):
        next_state = _edit_form(state, mode=FormMode.EDITING, error=action.message)
        return replace(next_state, notice=action.message)

    if isinstance(action, SubmitSucceeded):
        return replace(state, add_form=AddFormState(), notice=None)

    if isinstance(action, StatusChanged):
        status = InvitationStatus(action.status).value
        invitations = tuple(
            {**inv, "status": status} if _same_id(inv, action.invitation_id) else inv
            for inv in state.invitations
        )
        return replace(state, invitations=invitations)

    if isinstance(action, InvitationDeleted):
        invitations = tuple(inv for inv in state.invitations if not _same_id(inv, action.invitation_id))
        return replace(state, invitations=invitations)

    if isinstance(action, SetLeaderboardSort):
        if action.board not in state.leaderboard_sorts:
            raise ValueError(f"Unknown leaderboard: {action.board}")
        sorts = dict(state.leaderboard_sorts)
        sorts[action.board] = LeaderboardSort(key=LeaderboardSortKey(action.key), descending=action.descending)
        return replace(state, leaderboard_sorts=MappingProxyType(sorts))

    if isinstance(action, DismissNotice):
        return replace(state, notice=None)

    raise TypeError(f"Unsupported action: {type(action).__name__}")

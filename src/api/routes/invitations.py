"""Invitation API routes: list, filters, add form and per-row actions."""

from enum import Enum

from fastapi import APIRouter, Query, status

from src.api.deps import CurrentSession, Dashboard
from src.schemas.dashboard import DraftUpdate, FilterUpdate, InvitationListView, StatusUpdate
from src.services.dashboard_state import (
    CancelAddForm,
    ClearFilters,
    EditDraft,
    OpenAddForm,
    SelectDraftCohort,
    SetFilter,
)
from src.services.views import render_invitation_list

router = APIRouter(prefix="/invitations", tags=["invitations"])


def _text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


@router.get(
    "",
    response_model=InvitationListView,
    summary="List invitations",
    description="Returns the invitation table filtered by the session's active filters.",
)
async def list_invitations(session: CurrentSession) -> InvitationListView:
    return render_invitation_list(session.state)


@router.put(
    "/filters",
    response_model=InvitationListView,
    summary="Set filters",
    description="Sets rep, status, course and cohort filters. An empty string removes a filter.",
)
async def set_filters(data: FilterUpdate, session: CurrentSession) -> InvitationListView:
    """Apply filter changes; fields left out of the body are unchanged.

    Args:
        data: Filter values to set.
        session: The caller's dashboard session.

    Returns:
        InvitationListView: The filtered list.
    """
    for field_name, value in data.model_dump(exclude_unset=True).items():
        session.dispatch(SetFilter(field_name=field_name, value=_text(value)))
    return render_invitation_list(session.state)


@router.delete(
    "/filters",
    response_model=InvitationListView,
    summary="Clear filters",
)
async def clear_filters(session: CurrentSession) -> InvitationListView:
    return render_invitation_list(session.dispatch(ClearFilters()))


@router.post(
    "/form",
    response_model=InvitationListView,
    summary="Open add form",
)
async def open_add_form(session: CurrentSession) -> InvitationListView:
    return render_invitation_list(session.dispatch(OpenAddForm()))


@router.patch(
    "/form",
    response_model=InvitationListView,
    summary="Edit add form draft",
    description=(
        "Updates draft fields. Choosing a cohort fills in its course and region "
        "when those are still empty."
    ),
)
async def edit_add_form(data: DraftUpdate, session: CurrentSession) -> InvitationListView:
    """Apply draft edits, then any cohort selection.

    Args:
        data: Draft fields to change.
        session: The caller's dashboard session.

    Returns:
        InvitationListView: The list with the updated form.
    """
    changes = {
        name: _text(value)
        for name, value in data.model_dump(exclude_unset=True).items()
        if value is not None or name != "status"
    }
    cohort_date = changes.pop("cohort_date", None)

    if changes:
        session.dispatch(EditDraft(changes=tuple(changes.items())))
    if cohort_date is not None:
        session.dispatch(SelectDraftCohort(cohort_date=cohort_date))

    return render_invitation_list(session.state)


@router.delete(
    "/form",
    response_model=InvitationListView,
    summary="Cancel add form",
)
async def cancel_add_form(session: CurrentSession) -> InvitationListView:
    return render_invitation_list(session.dispatch(CancelAddForm()))


@router.post(
    "",
    response_model=InvitationListView,
    status_code=status.HTTP_201_CREATED,
    summary="Add invitation",
    description="Submits the add form draft. Company, name and sales rep are required.",
    responses={
        422: {"description": "Required fields missing; the form stays open"},
        502: {"description": "Record store rejected the insert; the form stays open"},
    },
)
async def add_invitation(session: CurrentSession, service: Dashboard) -> InvitationListView:
    """Insert the drafted invitation and reload all data.

    Args:
        session: The caller's dashboard session.
        service: Dashboard service performing the insert.

    Returns:
        InvitationListView: The list after the reload, with the form closed.
    """
    state = await service.submit_invitation(session)
    return render_invitation_list(state)


@router.patch(
    "/{invitation_id}/status",
    response_model=InvitationListView,
    summary="Change status",
    description="Updates the pipeline status. A rejected update leaves the list unchanged.",
)
async def change_status(
    invitation_id: str,
    data: StatusUpdate,
    session: CurrentSession,
    service: Dashboard,
) -> InvitationListView:
    state = await service.change_status(session, invitation_id, data.status)
    return render_invitation_list(state)


@router.delete(
    "/{invitation_id}",
    response_model=InvitationListView,
    summary="Delete invitation",
    description="Deletes an invitation. Requires confirm=true.",
    responses={400: {"description": "Deletion was not confirmed"}},
)
async def delete_invitation(
    invitation_id: str,
    session: CurrentSession,
    service: Dashboard,
    confirm: bool = Query(default=False, description="Explicit confirmation of the delete"),
) -> InvitationListView:
    """Delete an invitation once the user has confirmed.

    Args:
        invitation_id: The invitation's id.
        session: The caller's dashboard session.
        service: Dashboard service performing the delete.
        confirm: Must be true for the delete to be sent.

    Returns:
        InvitationListView: The list after the delete.
    """
    state = await service.delete_invitation(session, invitation_id, confirmed=confirm)
    return render_invitation_list(state)

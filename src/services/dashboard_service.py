"""Dashboard business logic: loading collections and invitation mutations."""

import asyncio
import logging
from typing import Any

from src.api.middleware.error_handler import ConfirmationRequiredError, StoreError, ValidationError
from src.models.tracker import InvitationStatus
from src.services.dashboard_state import (
    DashboardState,
    InvitationDeleted,
    LoadFinished,
    LoadStarted,
    StatusChanged,
    SubmitFailed,
    SubmitRejected,
    SubmitSucceeded,
    validate_draft,
)
from src.services.record_store import (
    COHORTS_TABLE,
    INVITATIONS_TABLE,
    SALES_REPS_TABLE,
    RecordStore,
)
from src.services.session_registry import DashboardSession

logger = logging.getLogger(__name__)

ADD_FORM_CLOSED_MESSAGE = "Open the add invitation form before submitting"


class DashboardService:
    """Service driving one dashboard session against the record store."""

    def __init__(self, store: RecordStore | None = None) -> None:
        """Initialize dashboard service.

        Args:
            store: Record store gateway; a Supabase-backed one by default.
        """
        self.store = store or RecordStore()

    async def load(self, session: DashboardSession) -> DashboardState:
        """Fetch all three collections and replace the session's copy.

        The fetches run concurrently. A collection that fails to load is
        left empty; the others are still shown and the user is not told.

        Args:
            session: The dashboard session to refresh.

        Returns:
            DashboardState: State after the load.
        """
        session.dispatch(LoadStarted())

        invitations, sales_reps, cohorts = await asyncio.gather(
            self.store.fetch_all(INVITATIONS_TABLE, "created_at", descending=True),
            self.store.fetch_all(SALES_REPS_TABLE, "name"),
            self.store.fetch_all(COHORTS_TABLE, "date"),
        )

        for table, result in (
            (INVITATIONS_TABLE, invitations),
            (SALES_REPS_TABLE, sales_reps),
            (COHORTS_TABLE, cohorts),
        ):
            if not result.ok:
                logger.warning("Loaded dashboard without %s: %s", table, result.error)

        session.loaded = True
        return session.dispatch(
            LoadFinished(
                invitations=tuple(invitations.data),
                sales_reps=tuple(sales_reps.data),
                cohorts=tuple(cohorts.data),
            )
        )

    async def ensure_loaded(self, session: DashboardSession) -> DashboardState:
        """Load a session on first use."""
        if not session.loaded:
            return await self.load(session)
        return session.state

    async def submit_invitation(self, session: DashboardSession) -> DashboardState:
        """Insert the add-form draft as a new invitation.

        Args:
            session: Session whose draft is submitted.

        Returns:
            DashboardState: State after the insert and re-fetch.

        Raises:
            ValidationError: If the add form is closed, or company, name or
                sales rep is empty. The store is not contacted.
            StoreError: If the store rejects the insert. The form stays
                open with the draft intact.
        """
        if not session.state.add_form.is_open:
            raise ValidationError(ADD_FORM_CLOSED_MESSAGE)

        draft = session.state.add_form.draft

        message = validate_draft(draft)
        if message:
            session.dispatch(SubmitRejected(message))
            raise ValidationError(message)

        result = await self.store.insert(INVITATIONS_TABLE, draft.to_record())
        if not result.ok:
            message = f"Error adding invitation: {result.error}"
            session.dispatch(SubmitFailed(message))
            raise StoreError(message)

        logger.info("Added invitation for %s at %s", draft.name, draft.company)
        session.dispatch(SubmitSucceeded())
        return await self.load(session)

    async def change_status(
        self,
        session: DashboardSession,
        invitation_id: Any,
        status: InvitationStatus,
    ) -> DashboardState:
        """Update one invitation's status.

        Local state is patched only after the store accepts the update;
        a rejected update leaves everything as it was.
        """
        status = InvitationStatus(status)
        result = await self.store.update_field(INVITATIONS_TABLE, invitation_id, "status", status.value)
        if not result.ok:
            logger.warning("Status change for invitation %s not applied: %s", invitation_id, result.error)
            return session.state

        return session.dispatch(StatusChanged(invitation_id=invitation_id, status=status))

    async def delete_invitation(
        self,
        session: DashboardSession,
        invitation_id: Any,
        confirmed: bool = False,
    ) -> DashboardState:
        """Delete an invitation after explicit confirmation.

        Raises:
            ConfirmationRequiredError: If ``confirmed`` is false. The store
                is not contacted.
        """
        if not confirmed:
            raise ConfirmationRequiredError("Are you sure you want to delete this invitation?")

        result = await self.store.delete(INVITATIONS_TABLE, invitation_id)
        if not result.ok:
            logger.warning("Delete of invitation %s not applied: %s", invitation_id, result.error)
            return session.state

        return session.dispatch(InvitationDeleted(invitation_id=invitation_id))

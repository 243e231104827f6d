"""Dashboard API routes: navigation, overview, leaderboards and refresh."""

from fastapi import APIRouter

from src.api.deps import CurrentSession, Dashboard
from src.api.middleware.error_handler import NotFoundError
from src.core.config import get_settings
from src.schemas.dashboard import (
    DashboardScreen,
    LeaderboardSortUpdate,
    LeaderboardsView,
    OverviewView,
    TabSelect,
)
from src.services.aggregation import LEADERBOARDS, today_iso
from src.services.dashboard_state import DashboardState, DismissNotice, SelectTab, SetLeaderboardSort
from src.services.views import render_leaderboards, render_overview, render_screen

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _screen(state: DashboardState) -> DashboardScreen:
    settings = get_settings()
    return render_screen(
        state,
        today_iso(),
        goal=settings.enrollment_goal,
        year=settings.goal_year,
        limit=settings.leaderboard_limit,
    )


@router.get(
    "",
    response_model=DashboardScreen,
    summary="Current screen",
    description="Returns the navigation state and the screen for the active tab.",
)
async def get_dashboard(session: CurrentSession) -> DashboardScreen:
    """Render the session's active tab."""
    return _screen(session.state)


@router.put(
    "/tab",
    response_model=DashboardScreen,
    summary="Switch tab",
)
async def select_tab(data: TabSelect, session: CurrentSession) -> DashboardScreen:
    """Switch to another tab and render it.

    Args:
        data: The tab to show.
        session: The caller's dashboard session.

    Returns:
        DashboardScreen: The newly active screen.
    """
    return _screen(session.dispatch(SelectTab(tab=data.tab)))


@router.post(
    "/refresh",
    response_model=DashboardScreen,
    summary="Reload data",
    description="Re-fetches invitations, sales reps and cohorts from the record store.",
)
async def refresh_dashboard(session: CurrentSession, service: Dashboard) -> DashboardScreen:
    """Reload all three collections and render the active tab."""
    state = await service.load(session)
    return _screen(state)


@router.delete(
    "/notice",
    response_model=DashboardScreen,
    summary="Dismiss notice",
    description="Clears the message left by a rejected or failed submit.",
)
async def dismiss_notice(session: CurrentSession) -> DashboardScreen:
    return _screen(session.dispatch(DismissNotice()))


@router.get(
    "/overview",
    response_model=OverviewView,
    summary="Overview screen",
    description="Goal progress and fill status of active and upcoming cohorts.",
)
async def get_overview(session: CurrentSession) -> OverviewView:
    settings = get_settings()
    return render_overview(
        session.state,
        today_iso(),
        goal=settings.enrollment_goal,
        year=settings.goal_year,
    )


@router.get(
    "/leaderboards",
    response_model=LeaderboardsView,
    summary="Leaderboards screen",
)
async def get_leaderboards(session: CurrentSession) -> LeaderboardsView:
    settings = get_settings()
    return render_leaderboards(session.state, year=settings.goal_year, limit=settings.leaderboard_limit)


@router.put(
    "/leaderboards/{board}/sort",
    response_model=LeaderboardsView,
    summary="Sort a leaderboard",
    description="Changes the ranking column of one leaderboard; the others keep theirs.",
)
async def sort_leaderboard(
    board: str,
    data: LeaderboardSortUpdate,
    session: CurrentSession,
) -> LeaderboardsView:
    """Set the ranking of one leaderboard.

    Args:
        board: Leaderboard key (year, global, emea, namer).
        data: Column and direction to rank by.
        session: The caller's dashboard session.

    Returns:
        LeaderboardsView: All leaderboards after the change.

    Raises:
        NotFoundError: If the leaderboard key is unknown.
    """
    if board not in {spec.key for spec in LEADERBOARDS}:
        raise NotFoundError(f"Unknown leaderboard: {board}")

    settings = get_settings()
    state = session.dispatch(SetLeaderboardSort(board=board, key=data.key, descending=data.descending))
    return render_leaderboards(state, year=settings.goal_year, limit=settings.leaderboard_limit)

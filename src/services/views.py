"""Render dashboard state into the three screen view models."""

from decimal import ROUND_HALF_UP, Decimal

from src.models.tracker import InvitationStatus, Region
from src.schemas.dashboard import (
    AddFormOptions,
    AddFormView,
    CohortRow,
    DashboardScreen,
    FilterOptions,
    Gauge,
    GoalProgress,
    InvitationDraftView,
    InvitationFiltersView,
    InvitationListView,
    InvitationRow,
    LeaderboardEntry,
    LeaderboardsView,
    LeaderboardView,
    NavTab,
    OverviewView,
    SelectOption,
    StatTile,
    StatusStyle,
)
from src.services import aggregation
from src.services.aggregation import LeaderboardSortKey
from src.services.dashboard_state import DashboardState, Tab

GAUGE_COLORS = {
    aggregation.FillTier.GOOD: "#22c55e",
    aggregation.FillTier.WARN: "#eab308",
    aggregation.FillTier.LOW: "#ef4444",
}

STATUS_STYLES = {
    InvitationStatus.CONFIRMED.value: StatusStyle(bg="#dcfce7", text="#166534", border="#86efac"),
    InvitationStatus.INVITED.value: StatusStyle(bg="#fef9c3", text="#854d0e", border="#fde047"),
    InvitationStatus.TO_BE_CONTACTED.value: StatusStyle(bg="#dbeafe", text="#1e40af", border="#93c5fd"),
    InvitationStatus.CANT_ATTEND.value: StatusStyle(bg="#fee2e2", text="#991b1b", border="#fca5a5"),
    InvitationStatus.RESCHEDULED.value: StatusStyle(bg="#f3f4f6", text="#374151", border="#d1d5db"),
}

TAB_LABELS = {
    Tab.DASHBOARD: "Dashboard",
    Tab.INVITATIONS: "Invitations",
    Tab.LEADERBOARD: "Leaderboards",
}

SORT_OPTIONS = [
    SelectOption(value=LeaderboardSortKey.CONFIRMED.value, label="By Confirmed"),
    SelectOption(value=LeaderboardSortKey.CONTACTED.value, label="By Contacted"),
]

NO_UPCOMING_GAUGES = "No upcoming cohorts. Add cohorts in the Admin panel."
NO_UPCOMING_COHORTS = "No upcoming cohorts to display."
NO_INVITATIONS = 'No invitations found. Click "Add New Invitation" to get started!'
NO_LEADERBOARD_DATA = "No data yet"


def format_fixed(value: float, places: int) -> str:
    """Format with ``places`` decimals, rounding exact halves up.

    The float is taken at its exact binary value, so 12.5 gives "13" while
    1.005 (stored just below) gives "1.00".
    """
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def _badge(region: str | None) -> str:
    return region.lower() if region else ""


def _status_options() -> list[SelectOption]:
    return [SelectOption(value=s.value, label=s.value) for s in InvitationStatus]


def _rep_options(state: DashboardState) -> list[SelectOption]:
    return [SelectOption(value=rep["name"], label=rep["name"]) for rep in state.sales_reps if rep.get("name")]


def _course_options(state: DashboardState) -> list[SelectOption]:
    return [SelectOption(value=c, label=c) for c in aggregation.course_options(state.cohorts)]


def render_gauge(value: int, maximum: int, label: str) -> Gauge:
    """Gauge for one cohort; the percentage is clamped for display."""
    percent = aggregation.gauge_percentage(value, maximum)
    return Gauge(
        label=label,
        value=value,
        max=maximum,
        percent=percent,
        percent_label=f"{format_fixed(percent, 0)}% filled",
        color=GAUGE_COLORS[aggregation.fill_tier(percent)],
        rotation=percent / 100 * 180,
    )


def render_overview(
    state: DashboardState,
    today: str,
    goal: int = aggregation.DEFAULT_GOAL,
    year: str = aggregation.DEFAULT_GOAL_YEAR,
) -> OverviewView:
    """Goal progress, status tiles, cohort gauges and the cohort table.

    Only cohorts dated ``today`` or later appear in gauges and the table.
    """
    metrics = aggregation.goal_metrics(state.invitations, goal=goal, year=year)
    percent = metrics.percent_complete

    stats = aggregation.cohort_fill_stats(state.cohorts, state.invitations, today)

    gauges = [render_gauge(s.confirmed, s.seats, s.cohort.get("name") or "") for s in stats]
    rows = [
        CohortRow(
            id=s.cohort.get("id"),
            name=s.cohort.get("name"),
            course=s.cohort.get("course"),
            region=s.cohort.get("region"),
            region_badge=_badge(s.cohort.get("region")),
            date=s.cohort.get("date"),
            seats=s.seats,
            confirmed=s.confirmed,
            invited=s.invited,
            to_contact=s.to_contact,
            fill_percent=s.fill_percent,
            fill_label=f"{format_fixed(s.fill_percent, 0)}%",
            tier=s.tier,
        )
        for s in stats
    ]

    return OverviewView(
        goal=GoalProgress(
            title=f"{year} Goal: {goal} Executives Engaged",
            confirmed=metrics.confirmed,
            invited=metrics.invited,
            to_contact=metrics.to_contact,
            goal=goal,
            percent_complete=percent,
            percent_label=f"{format_fixed(percent, 1)}% complete",
            progress_width=percent,
        ),
        stats=[
            StatTile(label="Confirmed", value=metrics.confirmed, color="green"),
            StatTile(label="Invited", value=metrics.invited, color="yellow"),
            StatTile(label="To Contact", value=metrics.to_contact, color="blue"),
        ],
        gauges=gauges,
        cohorts=rows,
        gauges_empty_message=None if gauges else NO_UPCOMING_GAUGES,
        cohorts_empty_message=None if rows else NO_UPCOMING_COHORTS,
    )


def render_add_form(state: DashboardState) -> AddFormView:
    form = state.add_form
    return AddFormView(
        mode=form.mode,
        visible=form.is_open,
        draft=InvitationDraftView(**form.draft.as_dict()),
        options=AddFormOptions(
            sales_reps=_rep_options(state),
            courses=_course_options(state),
            regions=[SelectOption(value=r.value, label=r.value) for r in Region],
            cohorts=[
                SelectOption(value=c["date"], label=f"{c.get('name')} ({c['date']})")
                for c in state.cohorts
                if c.get("date")
            ],
            statuses=_status_options(),
        ),
        error=form.error,
    )


def render_invitation_list(state: DashboardState) -> InvitationListView:
    """Filtered invitation table with its filter bar and add form."""
    filtered = aggregation.filter_invitations(state.invitations, state.filters.as_dict())

    rows = []
    for inv in filtered:
        status = inv.get("status") or InvitationStatus.TO_BE_CONTACTED.value
        rows.append(
            InvitationRow(
                id=inv.get("id"),
                company=inv.get("company"),
                name=inv.get("name"),
                sales_rep=inv.get("sales_rep"),
                course=inv.get("course"),
                cohort=aggregation.cohort_label(state.cohorts, inv.get("cohort_date")),
                cohort_date=inv.get("cohort_date"),
                region=inv.get("region"),
                region_badge=_badge(inv.get("region")),
                status=status,
                style=STATUS_STYLES.get(status, STATUS_STYLES[InvitationStatus.TO_BE_CONTACTED.value]),
            )
        )

    return InvitationListView(
        rows=rows,
        filters=InvitationFiltersView(**state.filters.as_dict()),
        filter_options=FilterOptions(
            sales_reps=_rep_options(state),
            statuses=_status_options(),
            courses=_course_options(state),
            cohorts=[
                SelectOption(value=c["date"], label=c.get("name") or c["date"])
                for c in state.cohorts
                if c.get("date")
            ],
        ),
        show_clear_filters=state.filters.any_active,
        footer=f"Showing {len(rows)} of {len(state.invitations)} invitations",
        empty_message=None if rows else NO_INVITATIONS,
        add_form=render_add_form(state),
    )


def render_leaderboards(
    state: DashboardState,
    year: str = aggregation.DEFAULT_GOAL_YEAR,
    limit: int = aggregation.DEFAULT_LEADERBOARD_LIMIT,
) -> LeaderboardsView:
    """All four leaderboards, each ranked by its own sort choice."""
    boards = []
    for spec in aggregation.LEADERBOARDS:
        sort = state.sort_for(spec.key)
        rows = aggregation.leaderboard_for(spec, state.sales_reps, state.invitations, year=year)
        ranked = aggregation.sort_leaderboard(rows, key=sort.key, descending=sort.descending, limit=limit)
        entries = [
            LeaderboardEntry(
                rank=idx + 1,
                name=row.name,
                confirmed=row.confirmed,
                contacted=row.contacted,
                top_three=idx < 3,
            )
            for idx, row in enumerate(ranked)
        ]
        boards.append(
            LeaderboardView(
                key=spec.key,
                title=spec.title.format(year=year),
                color=spec.color,
                sort_by=sort.key,
                descending=sort.descending,
                sort_options=SORT_OPTIONS,
                rows=entries,
                empty_message=None if entries else NO_LEADERBOARD_DATA,
            )
        )
    return LeaderboardsView(leaderboards=boards)


def render_screen(
    state: DashboardState,
    today: str,
    goal: int = aggregation.DEFAULT_GOAL,
    year: str = aggregation.DEFAULT_GOAL_YEAR,
    limit: int = aggregation.DEFAULT_LEADERBOARD_LIMIT,
) -> DashboardScreen:
    """Navigation plus whichever screen the active tab selects.

    While a load is in flight only the loading flag is returned.
    """
    tabs = [NavTab(key=tab, label=TAB_LABELS[tab], active=tab is state.active_tab) for tab in Tab]
    screen = DashboardScreen(
        loading=state.loading,
        active_tab=state.active_tab,
        tabs=tabs,
        notice=state.notice,
    )
    if state.loading:
        return screen

    if state.active_tab is Tab.DASHBOARD:
        screen.overview = render_overview(state, today, goal=goal, year=year)
    elif state.active_tab is Tab.INVITATIONS:
        screen.invitations = render_invitation_list(state)
    else:
        screen.leaderboards = render_leaderboards(state, year=year, limit=limit)
    return screen

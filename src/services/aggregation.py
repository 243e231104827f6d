"""Reporting calculations behind the overview and leaderboard screens.

Every function here is pure: results depend only on the arguments, so the
dashboard can recompute them after any fetch or filter change and get the
same answer for the same inputs.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from src.models.tracker import Cohort, Invitation, InvitationStatus, Region, SalesRep

DEFAULT_GOAL = 200
DEFAULT_GOAL_YEAR = "2026"
DEFAULT_LEADERBOARD_LIMIT = 10

GOOD_FILL_THRESHOLD = 80
WARN_FILL_THRESHOLD = 50


class FillTier(str, Enum):
    """Fill level buckets used to color gauges and table cells."""

    GOOD = "good"
    WARN = "warn"
    LOW = "low"


class LeaderboardSortKey(str, Enum):
    """Columns a leaderboard can be ranked by."""

    CONFIRMED = "confirmed"
    CONTACTED = "contacted"


@dataclass(frozen=True)
class GoalMetrics:
    """Progress towards the yearly confirmed-executives goal."""

    confirmed: int
    invited: int
    to_contact: int
    goal: int
    year: str

    @property
    def percent_complete(self) -> float:
        """Confirmed share of the goal, unclamped."""
        if self.goal <= 0:
            return 0.0
        return self.confirmed / self.goal * 100


@dataclass(frozen=True)
class CohortStats:
    """Status counts for one active cohort."""

    cohort: Cohort
    confirmed: int
    invited: int
    to_contact: int

    @property
    def seats(self) -> int:
        return int(self.cohort.get("seats") or 0)

    @property
    def fill_percent(self) -> float:
        return fill_percentage(self.confirmed, self.seats)

    @property
    def tier(self) -> FillTier:
        return fill_tier(self.fill_percent)


@dataclass(frozen=True)
class LeaderboardRow:
    """Per-representative counts for a leaderboard."""

    name: str
    confirmed: int
    contacted: int


@dataclass(frozen=True)
class LeaderboardSpec:
    """Scope of one leaderboard variant."""

    key: str
    title: str
    color: str
    region: str | None = None
    current_year_only: bool = False


LEADERBOARDS: tuple[LeaderboardSpec, ...] = (
    LeaderboardSpec(key="year", title="{year} Performance", color="green", current_year_only=True),
    LeaderboardSpec(key="global", title="Global - All Time", color="purple"),
    LeaderboardSpec(
        key="emea", title="EMEA {year}", color="blue", region=Region.EMEA.value, current_year_only=True
    ),
    LeaderboardSpec(
        key="namer", title="NAMER {year}", color="orange", region=Region.NAMER.value, current_year_only=True
    ),
)

FILTER_FIELDS = ("sales_rep", "status", "course", "cohort_date")


def today_iso() -> str:
    """Return the current UTC date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


def _in_year(invitation: Invitation, year: str) -> bool:
    cohort_date = invitation.get("cohort_date")
    return bool(cohort_date) and str(cohort_date).startswith(year)


def _count_status(invitations: Iterable[Invitation], status: InvitationStatus) -> int:
    return sum(1 for inv in invitations if inv.get("status") == status.value)


def goal_metrics(
    invitations: Sequence[Invitation],
    goal: int = DEFAULT_GOAL,
    year: str = DEFAULT_GOAL_YEAR,
) -> GoalMetrics:
    """Count goal-year invitations by status.

    Args:
        invitations: All invitations.
        goal: Confirmed executives targeted.
        year: Cohort date prefix that counts towards the goal.

    Returns:
        GoalMetrics: Confirmed, invited and to-contact counts for the year.
    """
    in_year = [inv for inv in invitations if _in_year(inv, year)]
    return GoalMetrics(
        confirmed=_count_status(in_year, InvitationStatus.CONFIRMED),
        invited=_count_status(in_year, InvitationStatus.INVITED),
        to_contact=_count_status(in_year, InvitationStatus.TO_BE_CONTACTED),
        goal=goal,
        year=year,
    )


def active_cohorts(cohorts: Sequence[Cohort], today: str) -> list[Cohort]:
    """Keep cohorts dated today or later.

    Dates are ISO strings, so lexical comparison orders them correctly.
    """
    return [c for c in cohorts if c.get("date") and str(c["date"]) >= today]


def cohort_invitations(cohort: Cohort, invitations: Iterable[Invitation]) -> list[Invitation]:
    """Invitations matching the cohort's course, region and date."""
    return [
        inv
        for inv in invitations
        if inv.get("course") == cohort.get("course")
        and inv.get("region") == cohort.get("region")
        and inv.get("cohort_date") == cohort.get("date")
    ]


def cohort_fill_stats(
    cohorts: Sequence[Cohort],
    invitations: Sequence[Invitation],
    today: str,
) -> list[CohortStats]:
    """Status counts for every active cohort, in cohort order."""
    stats = []
    for cohort in active_cohorts(cohorts, today):
        joined = cohort_invitations(cohort, invitations)
        stats.append(
            CohortStats(
                cohort=cohort,
                confirmed=_count_status(joined, InvitationStatus.CONFIRMED),
                invited=_count_status(joined, InvitationStatus.INVITED),
                to_contact=_count_status(joined, InvitationStatus.TO_BE_CONTACTED),
            )
        )
    return stats


def fill_percentage(confirmed: int, seats: int) -> float:
    """Confirmed share of seats; 0 for a cohort without seats."""
    if seats <= 0:
        return 0.0
    return confirmed / seats * 100


def fill_tier(percent: float) -> FillTier:
    if percent >= GOOD_FILL_THRESHOLD:
        return FillTier.GOOD
    if percent >= WARN_FILL_THRESHOLD:
        return FillTier.WARN
    return FillTier.LOW


def gauge_percentage(value: int, maximum: int) -> float:
    """Gauge fill clamped to [0, 100]."""
    if maximum <= 0:
        return 0.0
    return max(0.0, min(value / maximum * 100, 100.0))


def leaderboard_rows(
    sales_reps: Sequence[SalesRep],
    invitations: Sequence[Invitation],
    region: str | None = None,
    year: str | None = None,
) -> list[LeaderboardRow]:
    """Confirmed and total invitation counts per representative.

    Args:
        sales_reps: Representatives in store order.
        invitations: All invitations.
        region: Only count invitations for this region.
        year: Only count invitations whose cohort date starts with this year.

    Returns:
        list[LeaderboardRow]: One row per representative, in input order.
    """
    rows = []
    for rep in sales_reps:
        name = rep.get("name")
        matched = [
            inv
            for inv in invitations
            if inv.get("sales_rep") == name
            and (region is None or inv.get("region") == region)
            and (year is None or _in_year(inv, year))
        ]
        rows.append(
            LeaderboardRow(
                name=name,
                confirmed=_count_status(matched, InvitationStatus.CONFIRMED),
                contacted=len(matched),
            )
        )
    return rows


def leaderboard_for(
    spec: LeaderboardSpec,
    sales_reps: Sequence[SalesRep],
    invitations: Sequence[Invitation],
    year: str = DEFAULT_GOAL_YEAR,
) -> list[LeaderboardRow]:
    """Unsorted rows for one leaderboard variant."""
    return leaderboard_rows(
        sales_reps,
        invitations,
        region=spec.region,
        year=year if spec.current_year_only else None,
    )


def sort_leaderboard(
    rows: Sequence[LeaderboardRow],
    key: LeaderboardSortKey = LeaderboardSortKey.CONFIRMED,
    descending: bool = True,
    limit: int = DEFAULT_LEADERBOARD_LIMIT,
) -> list[LeaderboardRow]:
    """Rank rows by one column and keep the top ``limit``.

    The sort is stable, so ties keep the incoming (rep name) order.
    """
    attr = LeaderboardSortKey(key).value
    ranked = sorted(rows, key=lambda row: getattr(row, attr), reverse=descending)
    return ranked[:limit]


def filter_invitations(
    invitations: Sequence[Invitation],
    filters: Mapping[str, str | None],
) -> list[Invitation]:
    """Apply AND filters on rep, status, course and cohort date.

    An empty value leaves that dimension unconstrained.
    """
    active = {name: filters.get(name) for name in FILTER_FIELDS if filters.get(name)}
    return [inv for inv in invitations if all(inv.get(name) == value for name, value in active.items())]


def course_options(cohorts: Sequence[Cohort]) -> list[str]:
    """Distinct cohort courses in first-seen order."""
    return list(dict.fromkeys(c["course"] for c in cohorts if c.get("course")))


def find_cohort_by_date(cohorts: Sequence[Cohort], cohort_date: str | None) -> Cohort | None:
    """First cohort scheduled on the given date."""
    if not cohort_date:
        return None
    return next((c for c in cohorts if c.get("date") == cohort_date), None)


def cohort_label(cohorts: Sequence[Cohort], cohort_date: str | None) -> str | None:
    """Display name for an invitation's cohort date, falling back to the date."""
    cohort = find_cohort_by_date(cohorts, cohort_date)
    if cohort is not None:
        return cohort.get("name") or cohort_date
    return cohort_date

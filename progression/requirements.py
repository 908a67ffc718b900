"""
PROGRESSION App - Badge requirement kinds

Each requirement kind is its own frozen dataclass carrying only the fields it
needs. Kinds that can be decided from UserStats implement check() and
progress(); kinds that depend on data UserStats does not carry (route-line
history, weekly cohorts, social graph, ...) declare the data source they need
and raise NotEvaluable instead of guessing.
"""

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict

from .exceptions import NotEvaluable
from .stats import UserStats


@dataclass(frozen=True)
class Progress:
    """How far a user is toward a requirement's main target."""
    current: float
    target: float

    @property
    def fraction(self) -> float:
        if self.target <= 0:
            return 1.0
        return max(0.0, min(1.0, self.current / self.target))


class Requirement:
    """Base class of all requirement kinds."""

    kind: ClassVar[str] = ''
    evaluable: ClassVar[bool] = True

    def check(self, stats: UserStats) -> bool:
        raise NotImplementedError

    def progress(self, stats: UserStats) -> Progress:
        raise NotImplementedError

    def as_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'evaluable': self.evaluable, **asdict(self)}


# ============================================
# EVALUABLE KINDS
# ============================================

@dataclass(frozen=True)
class CompletedDeliveries(Requirement):
    count: int

    kind: ClassVar[str] = 'completedDeliveries'

    def check(self, stats):
        return stats.completed_deliveries >= self.count

    def progress(self, stats):
        return Progress(stats.completed_deliveries, self.count)


@dataclass(frozen=True)
class WeeklyDeliveries(Requirement):
    """Approximated with the rolling 30-day delivery count."""
    count: int

    kind: ClassVar[str] = 'weeklyDeliveries'

    def check(self, stats):
        return stats.recent_30_days_deliveries >= self.count

    def progress(self, stats):
        return Progress(stats.recent_30_days_deliveries, self.count)


@dataclass(frozen=True)
class ConsecutiveDeliveriesWithoutDelay(Requirement):
    count: int

    kind: ClassVar[str] = 'consecutiveDeliveriesWithoutDelay'

    def check(self, stats):
        return stats.recent_penalties == 0 and stats.completed_deliveries >= self.count

    def progress(self, stats):
        # A recent penalty breaks the streak
        current = stats.completed_deliveries if stats.recent_penalties == 0 else 0
        return Progress(current, self.count)


@dataclass(frozen=True)
class MinRating(Requirement):
    rating: float
    min_deliveries: int

    kind: ClassVar[str] = 'minRating'

    def check(self, stats):
        return stats.rating >= self.rating and stats.completed_deliveries >= self.min_deliveries

    def progress(self, stats):
        # Deliveries only count toward the badge while the rating holds
        current = stats.completed_deliveries if stats.rating >= self.rating else 0
        return Progress(current, self.min_deliveries)


@dataclass(frozen=True)
class NoShowCount(Requirement):
    completed_deliveries: int
    max_no_shows: int = 0

    kind: ClassVar[str] = 'noShowCount'

    def check(self, stats):
        return (
            stats.recent_penalties <= self.max_no_shows
            and stats.completed_deliveries >= self.completed_deliveries
        )

    def progress(self, stats):
        current = stats.completed_deliveries if stats.recent_penalties <= self.max_no_shows else 0
        return Progress(current, self.completed_deliveries)


@dataclass(frozen=True)
class DelayRate(Requirement):
    rate: float
    min_deliveries: int

    kind: ClassVar[str] = 'delayRate'

    def check(self, stats):
        return (
            stats.recent_penalties < self.rate * stats.completed_deliveries
            and stats.completed_deliveries >= self.min_deliveries
        )

    def progress(self, stats):
        within_rate = stats.recent_penalties < self.rate * max(stats.completed_deliveries, self.min_deliveries)
        current = stats.completed_deliveries if within_rate else 0
        return Progress(current, self.min_deliveries)


# ============================================
# KINDS NEEDING AN EXTERNAL DATA SOURCE
# ============================================

class ExternalDataRequirement(Requirement):
    """A kind that stays not-evaluable until its data source is wired in."""

    evaluable: ClassVar[bool] = False
    data_source: ClassVar[str] = ''

    def check(self, stats):
        raise NotEvaluable(self.kind, self.data_source)

    def progress(self, stats):
        raise NotEvaluable(self.kind, self.data_source)

    def as_dict(self):
        return {**super().as_dict(), 'dataSource': self.data_source}


@dataclass(frozen=True)
class ConsecutiveWeeks(ExternalDataRequirement):
    weeks: int
    min_weekly: int

    kind: ClassVar[str] = 'consecutiveWeeks'
    data_source: ClassVar[str] = 'weekly_delivery_cohorts'


@dataclass(frozen=True)
class UniqueLinesUsed(ExternalDataRequirement):
    lines: int

    kind: ClassVar[str] = 'uniqueLinesUsed'
    data_source: ClassVar[str] = 'route_line_history'


@dataclass(frozen=True)
class TransferDeliveries(ExternalDataRequirement):
    count: int

    kind: ClassVar[str] = 'transferDeliveries'
    data_source: ClassVar[str] = 'transfer_delivery_history'


@dataclass(frozen=True)
class MentorCount(ExternalDataRequirement):
    count: int

    kind: ClassVar[str] = 'mentorCount'
    data_source: ClassVar[str] = 'mentoring_records'


@dataclass(frozen=True)
class CommunityPosts(ExternalDataRequirement):
    count: int

    kind: ClassVar[str] = 'communityPosts'
    data_source: ClassVar[str] = 'community_posts'


@dataclass(frozen=True)
class MonthlyTopRating(ExternalDataRequirement):
    rank: int

    kind: ClassVar[str] = 'monthlyTopRating'
    data_source: ClassVar[str] = 'monthly_rating_rankings'


@dataclass(frozen=True)
class EarlySignup(ExternalDataRequirement):
    days_after_launch: int

    kind: ClassVar[str] = 'earlySignup'
    data_source: ClassVar[str] = 'service_launch_signups'

"""
PROGRESSION App - User statistics snapshot

The engine never computes statistics itself; delivery and rating subsystems
hand over a snapshot, either as a UserStats instance or as a plain mapping.
"""

from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

# Wire (camelCase) names accepted from upstream payloads
FIELD_ALIASES = {
    'completedDeliveries': 'completed_deliveries',
    'totalEarnings': 'total_earnings',
    'rating': 'rating',
    'recentPenalties': 'recent_penalties',
    'accountAgeDays': 'account_age_days',
    'recent30DaysDeliveries': 'recent_30_days_deliveries',
}

COUNT_FIELDS = (
    'completed_deliveries',
    'recent_penalties',
    'account_age_days',
    'recent_30_days_deliveries',
)

MAX_RATING = 5.0


@dataclass(frozen=True)
class UserStats:
    """
    Read-only activity snapshot for one user.

    Raises:
        ValueError: On negative counts or earnings, or a rating outside [0, 5].
    """
    completed_deliveries: int = 0
    total_earnings: Decimal = Decimal('0')
    rating: float = 0.0
    recent_penalties: int = 0
    account_age_days: int = 0
    recent_30_days_deliveries: int = 0

    def __post_init__(self):
        for name in COUNT_FIELDS:
            value = getattr(self, name)
            if int(value) != value or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
            object.__setattr__(self, name, int(value))

        try:
            earnings = Decimal(str(self.total_earnings))
        except InvalidOperation:
            raise ValueError(f"total_earnings is not a number: {self.total_earnings!r}")
        if not earnings.is_finite():
            raise ValueError(f"total_earnings must be a finite number, got {earnings}")
        if earnings < 0:
            raise ValueError(f"total_earnings must be >= 0, got {earnings}")
        object.__setattr__(self, 'total_earnings', earnings)

        rating = float(self.rating)
        if not 0.0 <= rating <= MAX_RATING:
            raise ValueError(f"rating must be within [0, {MAX_RATING}], got {rating}")
        object.__setattr__(self, 'rating', rating)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> 'UserStats':
        """
        Build a snapshot from a camelCase or snake_case mapping.

        Missing or null fields fall back to their zero value; unknown keys are
        ignored.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in (data or {}).items():
            name = FIELD_ALIASES.get(key, key)
            if name in known and value is not None:
                values[name] = value
        return cls(**values)

    def as_dict(self) -> Dict[str, Any]:
        """camelCase rendering; earnings as a string to stay JSON-safe."""
        return {
            'completedDeliveries': self.completed_deliveries,
            'totalEarnings': str(self.total_earnings),
            'rating': self.rating,
            'recentPenalties': self.recent_penalties,
            'accountAgeDays': self.account_age_days,
            'recent30DaysDeliveries': self.recent_30_days_deliveries,
        }

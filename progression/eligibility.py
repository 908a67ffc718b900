"""
PROGRESSION App - Eligibility evaluator

Pure, synchronous checks of UserStats against badge requirements.
Nothing here touches the database.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Tuple

from .catalog import CATALOG, BadgeCatalog, find_badge_by_id
from .exceptions import NotEvaluable
from .requirements import Requirement
from .stats import UserStats

logger = logging.getLogger(__name__)


def is_eligible(stats: UserStats, requirement: Requirement) -> bool:
    """
    Whether stats satisfy a requirement.

    Raises:
        NotEvaluable: If the requirement needs data UserStats does not carry.
    """
    return requirement.check(stats)


def is_badge_eligible(stats: UserStats, badge_id: str) -> bool:
    """
    Eligibility for a catalog badge.

    Raises:
        BadgeNotFound: If badge_id is not in the catalog.
        NotEvaluable: If the badge's requirement cannot be decided from stats.
    """
    return is_eligible(stats, find_badge_by_id(badge_id).requirement)


@dataclass(frozen=True)
class EligibilityReport:
    """Outcome of checking every badge a user does not own yet."""
    eligible: Tuple[str, ...] = ()
    ineligible: Tuple[str, ...] = ()
    not_evaluable: Tuple[str, ...] = ()


def evaluate_pending(
    stats: UserStats,
    owned_ids: Iterable[str],
    catalog: BadgeCatalog = CATALOG,
) -> EligibilityReport:
    """
    Check all catalog badges not in owned_ids.

    Owned badges are skipped entirely: they are never re-checked and never
    reported as ineligible.
    """
    owned = frozenset(owned_ids)
    eligible, ineligible, not_evaluable = [], [], []

    for badge in catalog:
        if badge.id in owned:
            continue
        try:
            passed = is_eligible(stats, badge.requirement)
        except NotEvaluable as e:
            logger.debug(f"[PROGRESSION] {badge.id} not evaluable: missing {e.data_source}")
            not_evaluable.append(badge.id)
            continue
        (eligible if passed else ineligible).append(badge.id)

    return EligibilityReport(
        eligible=tuple(eligible),
        ineligible=tuple(ineligible),
        not_evaluable=tuple(not_evaluable),
    )

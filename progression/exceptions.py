"""
PROGRESSION App - Exceptions
"""


class ProgressionError(Exception):
    """Base class for progression engine errors."""


class BadgeNotFound(ProgressionError, LookupError):
    """Raised when a badge id outside the fixed catalog is referenced."""

    def __init__(self, badge_id: str):
        self.badge_id = badge_id
        super().__init__(f"Badge not found: {badge_id}")


class NotEvaluable(ProgressionError):
    """
    Raised when a requirement needs data that UserStats does not carry.

    This is distinct from "ineligible": the badge stays un-awarded but no
    negative signal should be recorded for it.
    """

    def __init__(self, kind: str, data_source: str):
        self.kind = kind
        self.data_source = data_source
        super().__init__(f"Requirement '{kind}' needs data source '{data_source}'")

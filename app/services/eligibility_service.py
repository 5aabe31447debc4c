"""
Eligibility filter: decides whether one profile may be shown to a viewer.

The filter is pure. Callers assemble a ``ViewerContext`` and the set of
excluded user ids up front; nothing here touches the database.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import AbstractSet, Optional
from uuid import UUID
import logging

from app.models.profile import Profile, calculate_age
from app.models.user import UNAVAILABLE_STATUSES
from app.services.geo import distance_km

logger = logging.getLogger(__name__)

# (rule name, viewer's accepted values, candidate attribute)
CHOICE_RULES = (
    ("body_type", "body_types", "body_type"),
    ("religion", "religions", "religion"),
    ("education", "education_levels", "education"),
    ("zodiac_sign", "zodiac_signs", "zodiac_sign"),
)

# Single-choice filters where the viewer's value must equal the candidate's
LIFESTYLE_RULES = ("smoking", "drinking", "marijuana", "has_kids", "wants_kids")


def years_before(day: date, years: int) -> date:
    """Same calendar day ``years`` earlier; Feb 29 falls back to Feb 28."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


@dataclass(frozen=True)
class ViewerContext:
    """Everything the filter needs to know about the person looking."""

    user_id: UUID
    gender: Optional[str]
    looking_for: tuple[str, ...] = field(default_factory=tuple)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    max_distance_km: Optional[float] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    min_height: Optional[int] = None
    max_height: Optional[int] = None
    body_types: tuple[str, ...] = field(default_factory=tuple)
    ethnicities: tuple[str, ...] = field(default_factory=tuple)
    religions: tuple[str, ...] = field(default_factory=tuple)
    education_levels: tuple[str, ...] = field(default_factory=tuple)
    zodiac_signs: tuple[str, ...] = field(default_factory=tuple)
    smoking: Optional[str] = None
    drinking: Optional[str] = None
    marijuana: Optional[str] = None
    has_kids: Optional[str] = None
    wants_kids: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def is_complete(self) -> bool:
        """A viewer without a gender or preferences cannot be matched reciprocally."""
        return bool(self.gender) and bool(self.looking_for)


class EligibilityService:
    """
    Applies the discovery rules in a fixed order.

    Rules, first failure wins:
    1. ``excluded``: candidate is the viewer, blocked, or already acted on
    2. ``hidden``: candidate hid their profile
    3. ``not_matchable``: candidate is not allowed to start matching
    4. ``inactive``: candidate account is suspended or deleted
    5. ``gender``: viewer and candidate genders are not mutually accepted
    6. ``age``: candidate's known age lies outside the viewer's bounds
    7. ``height``: candidate's known height lies outside the viewer's bounds
    8. ``body_type``, ``religion``, ``education``, ``zodiac_sign``,
       ``ethnicity``: candidate's value is not among the accepted ones
    9. ``smoking``, ``drinking``, ``marijuana``, ``has_kids``,
       ``wants_kids``: candidate's value differs from the requested one
    10. ``distance``: candidate is farther than the viewer's max distance

    A candidate who has not shared an attribute is never excluded by the
    filter on that attribute.

    With ``reciprocal=False`` (matchmaker browsing on behalf of a client)
    only the gender rule is skipped.
    """

    def __init__(self, today: Optional[date] = None):
        self._today = today

    @property
    def today(self) -> date:
        return self._today or date.today()

    def birth_date_bounds(
        self,
        viewer: ViewerContext
    ) -> tuple[Optional[date], Optional[date]]:
        """
        Translate the viewer's age bounds into date-of-birth bounds.

        Returns:
            ``(born_after, born_on_or_before)``; a candidate born strictly
            after the first and on or before the second has an age inside
            the bounds. Either side is None when unbounded.
        """
        born_after = born_on_or_before = None
        if viewer.max_age is not None:
            born_after = years_before(self.today, viewer.max_age + 1)
        if viewer.min_age is not None:
            born_on_or_before = years_before(self.today, viewer.min_age)
        return born_after, born_on_or_before

    def explain(
        self,
        viewer: ViewerContext,
        candidate: Profile,
        excluded_ids: AbstractSet[UUID],
        *,
        reciprocal: bool = True
    ) -> Optional[str]:
        """
        Name the first rule ``candidate`` fails for ``viewer``.

        Args:
            viewer: The viewer's context
            candidate: Candidate profile with its ``user`` loaded
            excluded_ids: User ids that must never be shown
            reciprocal: Whether to enforce the mutual gender rule

        Returns:
            The failing rule name, or None if the candidate is eligible
        """
        if candidate.user_id in excluded_ids or candidate.user_id == viewer.user_id:
            return "excluded"

        if candidate.profile_hidden:
            return "hidden"

        if not candidate.can_start_matching:
            return "not_matchable"

        user = candidate.user
        if user is None or user.status in UNAVAILABLE_STATUSES:
            return "inactive"

        if reciprocal and not self._genders_match(viewer, candidate):
            return "gender"

        if not self._age_in_bounds(viewer, candidate):
            return "age"

        if not self._height_in_bounds(viewer, candidate):
            return "height"

        reason = self._failed_preference(viewer, candidate)
        if reason is not None:
            return reason

        if not self._within_distance(viewer, candidate):
            return "distance"

        return None

    def is_eligible(
        self,
        viewer: ViewerContext,
        candidate: Profile,
        excluded_ids: AbstractSet[UUID],
        *,
        reciprocal: bool = True
    ) -> bool:
        return self.explain(viewer, candidate, excluded_ids, reciprocal=reciprocal) is None

    def distance_to(self, viewer: ViewerContext, candidate: Profile) -> Optional[float]:
        """Distance in km, or None when either side has no coordinates."""
        if not viewer.has_coordinates or not candidate.has_coordinates:
            return None
        return distance_km(
            viewer.latitude, viewer.longitude,
            candidate.latitude, candidate.longitude
        )

    @staticmethod
    def _genders_match(viewer: ViewerContext, candidate: Profile) -> bool:
        candidate_wants = candidate.looking_for or []
        if viewer.gender is None or viewer.gender not in candidate_wants:
            return False
        return candidate.gender is not None and candidate.gender in viewer.looking_for

    def _age_in_bounds(self, viewer: ViewerContext, candidate: Profile) -> bool:
        if viewer.min_age is None and viewer.max_age is None:
            return True
        if candidate.date_of_birth is None:
            return True

        age = calculate_age(candidate.date_of_birth, self._today)
        if viewer.min_age is not None and age < viewer.min_age:
            return False
        if viewer.max_age is not None and age > viewer.max_age:
            return False
        return True

    @staticmethod
    def _height_in_bounds(viewer: ViewerContext, candidate: Profile) -> bool:
        height = candidate.height_inches
        if height is None:
            return True
        if viewer.min_height is not None and height < viewer.min_height:
            return False
        if viewer.max_height is not None and height > viewer.max_height:
            return False
        return True

    @staticmethod
    def _failed_preference(viewer: ViewerContext, candidate: Profile) -> Optional[str]:
        for rule, accepted_attr, candidate_attr in CHOICE_RULES:
            accepted = getattr(viewer, accepted_attr)
            value = getattr(candidate, candidate_attr)
            if accepted and value is not None and value not in accepted:
                return rule

        # A person may list several ethnicities; one shared value is enough
        ethnicity = candidate.ethnicity or []
        if viewer.ethnicities and ethnicity and not set(ethnicity) & set(viewer.ethnicities):
            return "ethnicity"

        for rule in LIFESTYLE_RULES:
            wanted = getattr(viewer, rule)
            value = getattr(candidate, rule)
            if wanted is not None and value is not None and value != wanted:
                return rule

        return None

    def _within_distance(self, viewer: ViewerContext, candidate: Profile) -> bool:
        if viewer.max_distance_km is None:
            return True
        distance = self.distance_to(viewer, candidate)
        if distance is None:
            # Unknown location never excludes
            return True
        return distance <= viewer.max_distance_km

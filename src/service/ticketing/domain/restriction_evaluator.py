"""
Event eligibility rules

Pure functions, no I/O. A restriction value names who is EXCLUDED:
"male-only" blocks male buyers, "female-only" blocks female buyers.

Age buckets: under 18 -> "under 18", 20-29 -> "20s", 30-39 -> "30s",
40 and over -> "40plus". Ages 18 and 19 fall in no bucket and are never
age-restricted.
"""

from datetime import date
from typing import Optional

from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.restriction import AgeBucket, Gender, GenderRestriction
from src.service.ticketing.domain.ticketing_errors import RestrictionViolationError


def is_gender_restricted(event: Event, user: UserEntity) -> bool:
    restriction = event.gender_restriction
    if restriction == GenderRestriction.MALE_ONLY and user.gender == Gender.MALE:
        return True
    if restriction == GenderRestriction.FEMALE_ONLY and user.gender == Gender.FEMALE:
        return True
    return False


def age_on(date_of_birth: date, today: date) -> int:
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def age_bucket(age: int) -> Optional[AgeBucket]:
    if age < 18:
        return AgeBucket.UNDER_18
    if 20 <= age < 30:
        return AgeBucket.TWENTIES
    if 30 <= age < 40:
        return AgeBucket.THIRTIES
    if age >= 40:
        return AgeBucket.FORTY_PLUS
    return None


def is_age_restricted(event: Event, user: UserEntity, today: Optional[date] = None) -> bool:
    if not event.age_restriction or user.date_of_birth is None:
        return False
    bucket = age_bucket(age_on(user.date_of_birth, today or date.today()))
    return bucket is not None and bucket.value in event.age_restriction


def check_restrictions(event: Event, user: UserEntity, today: Optional[date] = None) -> None:
    """
    Raises:
        RestrictionViolationError: When the buyer is excluded from the event
    """
    if is_gender_restricted(event, user):
        excluded = 'male' if event.gender_restriction == GenderRestriction.MALE_ONLY else 'female'
        raise RestrictionViolationError(
            f'This event restricts {excluded} attendees from participating'
        )
    if is_age_restricted(event, user, today):
        raise RestrictionViolationError(
            'You cannot purchase tickets due to age restriction for this event'
        )

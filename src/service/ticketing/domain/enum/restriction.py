from enum import StrEnum


class GenderRestriction(StrEnum):
    # The restriction names the gender that is EXCLUDED from the event
    NONE = 'none'
    MALE_ONLY = 'male-only'
    FEMALE_ONLY = 'female-only'


class Gender(StrEnum):
    MALE = 'male'
    FEMALE = 'female'
    OTHER = 'other'


class AgeBucket(StrEnum):
    UNDER_18 = 'under 18'
    TWENTIES = '20s'
    THIRTIES = '30s'
    FORTY_PLUS = '40plus'

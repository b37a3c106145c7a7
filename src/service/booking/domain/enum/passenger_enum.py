from enum import StrEnum


class PassengerTitle(StrEnum):
    MR = 'Mr'
    MRS = 'Mrs'
    MS = 'Ms'
    DR = 'Dr'


class Gender(StrEnum):
    MALE = 'male'
    FEMALE = 'female'
    OTHER = 'other'


class MealPreference(StrEnum):
    VEGETARIAN = 'vegetarian'
    NON_VEGETARIAN = 'non-vegetarian'
    VEGAN = 'vegan'
    KOSHER = 'kosher'
    HALAL = 'halal'
    NONE = 'none'


class SpecialServiceType(StrEnum):
    WHEELCHAIR = 'wheelchair'
    EXTRA_BAGGAGE = 'extra_baggage'
    PET_TRAVEL = 'pet_travel'
    UNACCOMPANIED_MINOR = 'unaccompanied_minor'
    MEAL_UPGRADE = 'meal_upgrade'

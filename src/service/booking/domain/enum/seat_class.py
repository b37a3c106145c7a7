from enum import StrEnum


class SeatClass(StrEnum):
    ECONOMY = 'economy'
    BUSINESS = 'business'
    FIRST = 'first'

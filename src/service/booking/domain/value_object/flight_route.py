from datetime import datetime, timedelta
from typing import Optional

import attrs


@attrs.define(frozen=True)
class Airline:
    name: str
    code: str


@attrs.define(frozen=True)
class Aircraft:
    model: str
    total_seats: int


@attrs.define(frozen=True)
class RouteEndpoint:
    airport_code: str = attrs.field(converter=str.upper)
    airport_name: str
    city: str
    country: str
    time: datetime
    terminal: Optional[str] = None
    gate: Optional[str] = None


@attrs.define(frozen=True)
class Route:
    departure: RouteEndpoint
    arrival: RouteEndpoint

    @property
    def duration(self) -> timedelta:
        return self.arrival.time - self.departure.time

# app/events.py
from dataclasses import dataclass

from taxi_meter.sim.event import BaseEvent


# Sensor channels; trip_id makes events from an earlier trip harmless
@dataclass(order=True)
class Tick(BaseEvent):
    trip_id: int


@dataclass(order=True)
class LocationSample(BaseEvent):
    trip_id: int
    lat: float
    lon: float
    accuracy_m: float | None = None


@dataclass(order=True)
class LocationError(BaseEvent):
    trip_id: int
    message: str


# User actions
@dataclass(order=True)
class BeginTrip(BaseEvent):
    pass


@dataclass(order=True)
class StopTrip(BaseEvent):
    pass


@dataclass(order=True)
class AdvanceToExtras(BaseEvent):
    pass


@dataclass(order=True)
class SubmitExtras(BaseEvent):
    toll_fee: str | float | None = None  # raw form text
    other_fee: str | float | None = None


@dataclass(order=True)
class SelectTip(BaseEvent):
    percent: float | str = 0.20  # or "custom"


@dataclass(order=True)
class SubmitCustomTip(BaseEvent):
    amount: str | float | None = None


@dataclass(order=True)
class Finalize(BaseEvent):
    pass


@dataclass(order=True)
class ResetTrip(BaseEvent):
    pass


# Observability
@dataclass(order=True)
class TripStarted(BaseEvent):
    trip_id: int
    rate_name: str
    base: float


@dataclass(order=True)
class TripStopped(BaseEvent):
    trip_id: int
    elapsed_s: int
    distance_km: float
    fare: float


@dataclass(order=True)
class BillReady(BaseEvent):
    trip_id: int
    meter_fare: float
    extras: float
    tip: float
    total: float

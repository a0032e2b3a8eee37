# taxi_meter/io/business_events.py

from dataclasses import dataclass


# Base type for analytics events (not scheduled in the kernel!)
@dataclass
class BizEvent:
    run_id: str
    t: float  # kernel time
    seq: int  # emission order within the run
    name: str  # stable event name


@dataclass
class TripStartedBiz(BizEvent):
    trip_id: int
    rate_name: str
    base_cents: int


@dataclass
class TripStoppedBiz(BizEvent):
    trip_id: int
    elapsed_s: int
    distance_m: int
    fare_cents: int


@dataclass
class BillFinalizedBiz(BizEvent):
    trip_id: int
    meter_cents: int
    extras_cents: int
    tip_cents: int
    total_cents: int


def cents(x: float) -> int:
    return int(round(x * 100))

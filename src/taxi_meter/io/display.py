# taxi_meter/io/display.py
from dataclasses import dataclass

from taxi_meter.app.billing import BillBreakdown, BillingSession
from taxi_meter.domain.amounts import money
from taxi_meter.domain.rates import rate_info
from taxi_meter.domain.state import TripState
from taxi_meter.sim.clock import format_elapsed


@dataclass(frozen=True)
class MeterReadout:
    fare: str  # 2 decimals
    distance: str  # 1 decimal, km
    elapsed: str  # MM:SS
    gps_status: str


@dataclass(frozen=True)
class BillReadout:
    meter_fare: str
    extras: str
    tip: str
    total: str


def meter_readout(state: TripState) -> MeterReadout:
    return MeterReadout(
        fare=money(state.fare),
        distance=f"{state.distance_km:.1f}",
        elapsed=format_elapsed(state.elapsed_seconds),
        gps_status=state.gps_status,
    )


def bill_readout(bill: BillBreakdown) -> BillReadout:
    return BillReadout(
        meter_fare=money(bill.meter_fare),
        extras=money(bill.extras),
        tip=money(bill.tip),
        total=money(bill.total),
    )


def tip_labels(session: BillingSession, currency: str = "¥") -> dict[str, str]:
    """Preset buttons, e.g. {"20%": "¥4.2"}."""
    return {f"{p:.0%}": f"{currency}{amt:.1f}" for p, amt in session.tip_options().items()}


def rate_label(session: BillingSession) -> str:
    return rate_info(session.current_rate())

# taxi_meter/domain/state.py
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from taxi_meter.domain.geo import Position


class MeterPhase(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPED = "stopped"


class BillingStage(Enum):
    IDLE = "idle"
    METERING = "metering"
    EXTRAS_ENTRY = "extras_entry"
    TIP_SELECTION = "tip_selection"
    FINAL_BILL = "final_bill"


GPS_IDLE = "GPS: Idle"


@dataclass
class TripState:
    trip_id: int = 0  # bumped on every start so stale ticks/samples are harmless
    running: bool = False
    started_at: datetime | None = None
    elapsed_seconds: int = 0
    distance_km: float = 0.0
    fare: float = 0.0
    last_position: Position | None = None
    toll_fee: float = 0.0
    other_fee: float = 0.0
    tip_fee: float = 0.0
    gps_status: str = GPS_IDLE

    def clear(self, *, fare: float = 0.0) -> None:
        """Zero every field except the trip counter."""
        self.running = False
        self.started_at = None
        self.elapsed_seconds = 0
        self.distance_km = 0.0
        self.fare = fare
        self.last_position = None
        self.toll_fee = 0.0
        self.other_fee = 0.0
        self.tip_fee = 0.0
        self.gps_status = GPS_IDLE

    @property
    def extras(self) -> float:
        return self.toll_fee + self.other_fee

    @property
    def subtotal(self) -> float:
        """Fare plus accessory fees, the base a tip percentage applies to."""
        return self.fare + self.toll_fee + self.other_fee

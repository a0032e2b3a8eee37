# taxi_meter/domain/fare.py
from datetime import datetime

from taxi_meter.domain.errors import PreconditionError
from taxi_meter.domain.geo import EARTH_RADIUS_KM, Position, haversine_km
from taxi_meter.domain.rates import RateProfile
from taxi_meter.domain.state import MeterPhase, TripState

GPS_NOISE_KM = 0.010


def tiered_fare(distance_km: float, rate: RateProfile) -> float:
    """
    Fare for a distance under the three-tier model:
      [0, base_km]          flat base fare
      (base_km, empty_km]   + per_km
      (empty_km, ...)       + per_km * empty_rate
    Continuous at both boundaries and non-decreasing in distance.
    """
    fare = rate.base
    if distance_km <= rate.base_km:
        return fare
    if distance_km <= rate.empty_km:
        return fare + (distance_km - rate.base_km) * rate.per_km
    fare += (rate.empty_km - rate.base_km) * rate.per_km
    fare += (distance_km - rate.empty_km) * rate.per_km * rate.empty_rate
    return fare


class FareEngine:
    """
    Accumulates distance and fare for one trip at a time.

    The rate profile is snapshotted at start(); samples that do not pass an
    explicit rate are priced with that snapshot, so catalog edits made
    mid-trip only affect the next trip.
    """

    def __init__(
        self,
        state: TripState,
        *,
        noise_km: float = GPS_NOISE_KM,
        radius_km: float = EARTH_RADIUS_KM,
    ):
        self.state = state
        self.noise_km = noise_km
        self.radius_km = radius_km
        self.phase = MeterPhase.NOT_STARTED
        self.rate: RateProfile | None = None

    @property
    def running(self) -> bool:
        return self.phase is MeterPhase.RUNNING

    def start(self, rate: RateProfile, started_at: datetime | None = None) -> None:
        if self.phase is MeterPhase.RUNNING:
            raise PreconditionError("start", self.phase, "NOT_STARTED or STOPPED")
        s = self.state
        s.trip_id += 1
        s.distance_km = 0.0
        s.elapsed_seconds = 0
        s.fare = rate.base
        s.last_position = None
        s.started_at = started_at
        s.running = True
        s.gps_status = "GPS: Connecting..."
        self.rate = rate
        self.phase = MeterPhase.RUNNING

    def tick(self) -> bool:
        # ticks racing a stop are dropped
        if not self.running:
            return False
        self.state.elapsed_seconds += 1
        return True

    def on_location_sample(
        self,
        lat: float,
        lon: float,
        rate: RateProfile | None = None,
        *,
        accuracy_m: float | None = None,
    ) -> float:
        """Feed one sample; returns the kilometers accrued (0.0 if none)."""
        if not self.running:
            return 0.0
        s = self.state
        if accuracy_m is not None:
            s.gps_status = f"GPS: OK (±{round(accuracy_m)}m)"

        if s.last_position is None:
            # first fix only anchors the reference point
            s.last_position = Position(lat, lon)
            return 0.0

        prev = s.last_position
        d = haversine_km(prev.lat, prev.lon, lat, lon, radius_km=self.radius_km)
        if d < self.noise_km:
            return 0.0

        s.distance_km += d
        s.last_position = Position(lat, lon)
        self.recalculate(rate if rate is not None else self.rate)
        return d

    def on_location_error(self, message: str) -> None:
        # metering continues from the last good sample
        if self.running:
            self.state.gps_status = f"GPS Error: {message}"

    def recalculate(self, rate: RateProfile) -> float:
        self.state.fare = tiered_fare(self.state.distance_km, rate)
        return self.state.fare

    def stop(self) -> None:
        if self.phase is not MeterPhase.RUNNING:
            raise PreconditionError("stop", self.phase, "RUNNING")
        self.phase = MeterPhase.STOPPED
        self.state.running = False
        self.state.gps_status = "GPS: Stopped"

    def reset(self, rate: RateProfile) -> None:
        self.state.clear(fare=rate.base)
        self.rate = None
        self.phase = MeterPhase.NOT_STARTED

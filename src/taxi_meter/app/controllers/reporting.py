# taxi_meter/app/controllers/reporting.py
from taxi_meter.app.events import BillReady, TripStarted, TripStopped
from taxi_meter.io.business_events import (
    BillFinalizedBiz,
    TripStartedBiz,
    TripStoppedBiz,
    cents,
)
from taxi_meter.io.recorder import Recorder


class ReportingHandler:
    """Turns observability events into analytics records. Never schedules anything."""

    def __init__(self, recorder: Recorder, run_id: str = "local"):
        self.recorder = recorder
        self.run_id = run_id

    def _head(self, ev, name: str) -> dict:
        return {"run_id": self.run_id, "t": ev.t, "seq": self.recorder.next_seq(), "name": name}

    def on_trip_started(self, ev: TripStarted):
        self.recorder.emit(
            TripStartedBiz(
                **self._head(ev, "trip_started"),
                trip_id=ev.trip_id,
                rate_name=ev.rate_name,
                base_cents=cents(ev.base),
            )
        )
        return []

    def on_trip_stopped(self, ev: TripStopped):
        self.recorder.emit(
            TripStoppedBiz(
                **self._head(ev, "trip_stopped"),
                trip_id=ev.trip_id,
                elapsed_s=ev.elapsed_s,
                distance_m=int(round(ev.distance_km * 1000)),
                fare_cents=cents(ev.fare),
            )
        )
        return []

    def on_bill_ready(self, ev: BillReady):
        self.recorder.emit(
            BillFinalizedBiz(
                **self._head(ev, "bill_finalized"),
                trip_id=ev.trip_id,
                meter_cents=cents(ev.meter_fare),
                extras_cents=cents(ev.extras),
                tip_cents=cents(ev.tip),
                total_cents=cents(ev.total),
            )
        )
        return []

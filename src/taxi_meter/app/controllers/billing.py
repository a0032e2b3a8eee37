# taxi_meter/app/controllers/billing.py
from taxi_meter.app.billing import BillingSession
from taxi_meter.app.controllers.meter import MeterHandler
from taxi_meter.app.events import (
    AdvanceToExtras,
    BeginTrip,
    BillReady,
    Finalize,
    ResetTrip,
    SelectTip,
    StopTrip,
    SubmitCustomTip,
    SubmitExtras,
    TripStarted,
    TripStopped,
)
from taxi_meter.sim.clock import SimClock


class BillingHandler:
    """Translates user-action events into BillingSession transitions."""

    def __init__(self, session: BillingSession, meter: MeterHandler, clock: SimClock):
        self.session = session
        self.meter = meter
        self.clock = clock

    def on_begin_trip(self, ev: BeginTrip):
        rate = self.session.begin(started_at=self.clock.to_wall(ev.t))
        trip_id = self.session.state.trip_id
        started = TripStarted(t=ev.t, trip_id=trip_id, rate_name=rate.name, base=rate.base)
        return [started, *self.meter.arm(trip_id, ev.t)]

    def on_stop_trip(self, ev: StopTrip):
        self.session.stop()
        self.meter.disarm()
        s = self.session.state
        return [
            TripStopped(
                t=ev.t,
                trip_id=s.trip_id,
                elapsed_s=s.elapsed_seconds,
                distance_km=s.distance_km,
                fare=s.fare,
            )
        ]

    def on_advance_to_extras(self, ev: AdvanceToExtras):
        self.session.advance_to_extras()
        return []

    def on_submit_extras(self, ev: SubmitExtras):
        self.session.submit_extras(ev.toll_fee, ev.other_fee)
        return []

    def on_select_tip(self, ev: SelectTip):
        self.session.select_tip(ev.percent)
        return []

    def on_submit_custom_tip(self, ev: SubmitCustomTip):
        self.session.submit_custom_tip(ev.amount)
        return []

    def on_finalize(self, ev: Finalize):
        bill = self.session.finalize()
        return [
            BillReady(
                t=ev.t,
                trip_id=self.session.state.trip_id,
                meter_fare=bill.meter_fare,
                extras=bill.extras,
                tip=bill.tip,
                total=bill.total,
            )
        ]

    def on_reset(self, ev: ResetTrip):
        self.meter.disarm()
        self.session.reset()
        return []

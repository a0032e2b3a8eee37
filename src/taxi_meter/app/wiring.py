# taxi_meter/app/wiring.py
from taxi_meter.app.controllers.billing import BillingHandler
from taxi_meter.app.controllers.meter import MeterHandler
from taxi_meter.app.controllers.reporting import ReportingHandler
from taxi_meter.app.events import (
    AdvanceToExtras,
    BeginTrip,
    BillReady,
    Finalize,
    LocationError,
    LocationSample,
    ResetTrip,
    SelectTip,
    StopTrip,
    SubmitCustomTip,
    SubmitExtras,
    Tick,
    TripStarted,
    TripStopped,
)
from taxi_meter.sim.kernel import Kernel


def wire(
    kernel: Kernel,
    *,
    meter: MeterHandler,
    billing: BillingHandler,
    reporting: ReportingHandler | None = None,
) -> None:
    k = kernel

    # sensor channels
    k.on(Tick, meter.on_tick)
    k.on(LocationSample, meter.on_location_sample)
    k.on(LocationError, meter.on_location_error)

    # user actions
    k.on(BeginTrip, billing.on_begin_trip)
    k.on(StopTrip, billing.on_stop_trip)  # also cancels both sensor channels
    k.on(AdvanceToExtras, billing.on_advance_to_extras)
    k.on(SubmitExtras, billing.on_submit_extras)
    k.on(SelectTip, billing.on_select_tip)
    k.on(SubmitCustomTip, billing.on_submit_custom_tip)
    k.on(Finalize, billing.on_finalize)
    k.on(ResetTrip, billing.on_reset)

    # analytics
    if reporting:
        k.on(TripStarted, reporting.on_trip_started)
        k.on(TripStopped, reporting.on_trip_stopped)
        k.on(BillReady, reporting.on_bill_ready)

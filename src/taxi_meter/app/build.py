# taxi_meter/app/build.py
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from taxi_meter.app.billing import BillingSession
from taxi_meter.app.controllers.billing import BillingHandler
from taxi_meter.app.controllers.meter import MeterHandler
from taxi_meter.app.controllers.reporting import ReportingHandler
from taxi_meter.app.events import AdvanceToExtras, BeginTrip, Finalize, StopTrip, SubmitExtras
from taxi_meter.app.wiring import wire
from taxi_meter.config.models import MeterConfig
from taxi_meter.domain.fare import FareEngine
from taxi_meter.domain.rates import RateCatalog
from taxi_meter.domain.state import TripState
from taxi_meter.io.kernel_logging import KernelLogging  # JSON logs
from taxi_meter.io.recorder import JsonlSink, Recorder, Sink
from taxi_meter.runtime.sources import LocationFeed, make_feed
from taxi_meter.sim.clock import SEC, SimClock
from taxi_meter.sim.hooks import NoopHooks
from taxi_meter.sim.kernel import Kernel
from taxi_meter.sim.rng import RNGRegistry


@dataclass
class App:
    kernel: Kernel
    clock: SimClock
    rng: RNGRegistry
    catalog: RateCatalog
    session: BillingSession
    meter: MeterHandler
    billing: BillingHandler
    recorder: Recorder


def build(
    cfg: MeterConfig | Mapping | None = None,
    *,
    use_logging: bool = True,
    sinks: Sequence[Sink] | None = None,
    feed: LocationFeed | None = None,
) -> App:
    # 0) Validate config
    if cfg is None:
        model = MeterConfig()
    else:
        model = cfg if isinstance(cfg, MeterConfig) else MeterConfig.model_validate(cfg)

    # 1) Clock & RNG
    clock = SimClock.utc_epoch(*model.sim.epoch) if model.sim.epoch else SimClock.now_utc()
    rng_registry = RNGRegistry(model.sim.seed, run=model.run_id)

    # 2) Kernel (with hooks)
    recorder = Recorder(*(sinks if sinks is not None else [JsonlSink()]))
    hooks = (
        KernelLogging(
            run_id=model.run_id,
            clock=clock,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )
    kernel = Kernel(hooks=hooks)

    # 3) Rates & session
    catalog = RateCatalog(cities=model.rates.cities, custom=model.rates.custom)
    engine = FareEngine(
        TripState(), noise_km=model.gps.noise_km, radius_km=model.gps.earth_radius_km
    )
    session = BillingSession(
        catalog,
        model.rates.selector,
        engine=engine,
        tip_presets=model.tips.presets,
        default_tip=model.tips.default,
    )

    # 4) Handlers (inject deps explicitly)
    feed = feed if feed is not None else make_feed(model.feed, rng_registry=rng_registry)
    meter = MeterHandler(session, feed)
    billing = BillingHandler(session, meter, clock)
    reporting = ReportingHandler(recorder, run_id=model.run_id)

    # 5) Wiring
    wire(kernel, meter=meter, billing=billing, reporting=reporting)

    return App(kernel, clock, rng_registry, catalog, session, meter, billing, recorder)


def schedule_trip(app: App, duration: float, *, toll_fee: str = "", other_fee: str = "") -> float:
    """
    Queue one whole trip: begin at t=0, then stop and settle the bill.

    The stop lands one tick after `duration` so the tick at t=duration is
    counted first and the meter shows the full duration. Returns the time at
    which the bill is final.
    """
    k = app.kernel
    end = duration + SEC
    k.schedule(BeginTrip(t=0.0))
    k.schedule(StopTrip(t=end))
    k.schedule(AdvanceToExtras(t=end))
    k.schedule(SubmitExtras(t=end, toll_fee=toll_fee, other_fee=other_fee))
    k.schedule(Finalize(t=end))
    return end

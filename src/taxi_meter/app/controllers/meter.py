# taxi_meter/app/controllers/meter.py
from collections.abc import Iterator

from taxi_meter.app.billing import BillingSession
from taxi_meter.app.events import LocationError, LocationSample, Tick
from taxi_meter.runtime.sources import FeedEvent, LocationFeed
from taxi_meter.sim.clock import SEC


class MeterHandler:
    """
    Owns the two sensor channels of a running trip.

    Both channels are self-scheduling: each tick/sample handled while the
    meter runs pulls the next one. disarm() drops the feed, and the phase
    check drops anything already queued, so nothing reaches the fare after
    stop.
    """

    def __init__(
        self,
        session: BillingSession,
        feed: LocationFeed | None = None,
        tick_s: float = SEC,
    ):
        self.session = session
        self.feed = feed
        self.tick_s = tick_s
        self._samples: Iterator[FeedEvent] | None = None

    def _live(self, trip_id: int) -> bool:
        return self.session.engine.running and trip_id == self.session.state.trip_id

    def _next_sample(self) -> list[FeedEvent]:
        if self._samples is None:
            return []
        nxt = next(self._samples, None)
        if nxt is None:
            self._samples = None
            return []
        return [nxt]

    # ------------ channel control --------------

    def arm(self, trip_id: int, t: float) -> list:
        """First tick and first location callback of a freshly started trip."""
        out: list = [Tick(t=t + self.tick_s, trip_id=trip_id)]
        if self.feed is not None:
            self._samples = iter(self.feed.events(trip_id, t))
            out.extend(self._next_sample())
        return out

    def disarm(self) -> None:
        self._samples = None

    # ------------ sensor handlers --------------

    def on_tick(self, ev: Tick):
        if not self._live(ev.trip_id):
            return []
        self.session.engine.tick()
        return [Tick(t=ev.t + self.tick_s, trip_id=ev.trip_id)]

    def on_location_sample(self, ev: LocationSample):
        if not self._live(ev.trip_id):
            return []
        self.session.engine.on_location_sample(ev.lat, ev.lon, accuracy_m=ev.accuracy_m)
        return self._next_sample()

    def on_location_error(self, ev: LocationError):
        if not self._live(ev.trip_id):
            return []
        self.session.engine.on_location_error(ev.message)
        return self._next_sample()

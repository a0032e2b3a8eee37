# runtime/sources.py
import math
from collections.abc import Callable, Iterator
from typing import Protocol

import numpy as np

from taxi_meter.app.events import LocationError, LocationSample
from taxi_meter.config.models import FeedJitterModel, FeedPoint, FeedReplayModel, FeedUnion
from taxi_meter.sim.rng import RNGRegistry

FeedEvent = LocationSample | LocationError

# ~1 / 111,320 degrees of latitude per meter
_LAT_DEGREES_PER_METER = 1.0 / 111_320


class LocationFeed(Protocol):
    """
    Stand-in for a positioning collaborator. events() yields the callbacks a
    positioning source would deliver for one trip, starting after t0.
    """

    def events(self, trip_id: int, t0: float) -> Iterator[FeedEvent]: ...


class ReplayFeed:
    def __init__(
        self,
        points: list[FeedPoint],
        *,
        interval_s: float = 1.0,
        accuracy_m: float | None = None,
    ):
        self.points, self.interval_s, self.accuracy_m = list(points), interval_s, accuracy_m

    def _position(self, trip_id: int, lat: float, lon: float) -> tuple[float, float]:
        return lat, lon

    def events(self, trip_id: int, t0: float) -> Iterator[FeedEvent]:
        for i, p in enumerate(self.points, start=1):
            t = t0 + i * self.interval_s
            if isinstance(p, str):
                yield LocationError(t=t, trip_id=trip_id, message=p)
                continue
            lat, lon = self._position(trip_id, *p)
            yield LocationSample(t=t, trip_id=trip_id, lat=lat, lon=lon, accuracy_m=self.accuracy_m)


class JitterFeed(ReplayFeed):
    """Replay with clamped gaussian noise, one deterministic stream per trip."""

    def __init__(
        self,
        points: list[FeedPoint],
        *,
        rng_registry: RNGRegistry,
        noise_m: float = 5.0,
        max_noise_m: float = 15.0,
        interval_s: float = 1.0,
        accuracy_m: float | None = None,
    ):
        super().__init__(points, interval_s=interval_s, accuracy_m=accuracy_m)
        self.rng_registry = rng_registry
        self.noise_m, self.max_noise_m = noise_m, max_noise_m

    def _position(self, trip_id: int, lat: float, lon: float) -> tuple[float, float]:
        if self.noise_m == 0:
            return lat, lon
        g = self.rng_registry.substream("gps", trip_id)
        n_lat, n_lon = np.clip(g.normal(0.0, self.noise_m, 2), -self.max_noise_m, self.max_noise_m)
        lat_off = float(n_lat) * _LAT_DEGREES_PER_METER
        lon_off = float(n_lon) * _LAT_DEGREES_PER_METER / math.cos(math.radians(lat))
        return lat + lat_off, lon + lon_off


# ------------------- Feed registry ---------------------------

FeedFactory = Callable[[FeedUnion, dict], LocationFeed]

_feed_registry: dict[str, FeedFactory] = {}


def register_feed(kind: str):
    def deco(fn: FeedFactory):
        _feed_registry[kind] = fn
        return fn

    return deco


def make_feed(cfg: FeedUnion, *, rng_registry: RNGRegistry) -> LocationFeed:
    try:
        factory = _feed_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown feed kind {cfg.kind!r}") from None
    return factory(cfg, {"rng_registry": rng_registry})


@register_feed("replay")
def _make_replay(cfg: FeedReplayModel, deps):
    return ReplayFeed(cfg.points, interval_s=cfg.interval_s, accuracy_m=cfg.accuracy_m)


@register_feed("jitter")
def _make_jitter(cfg: FeedJitterModel, deps):
    return JitterFeed(
        cfg.points,
        rng_registry=deps["rng_registry"],
        noise_m=cfg.noise_m,
        max_noise_m=cfg.max_noise_m,
        interval_s=cfg.interval_s,
        accuracy_m=cfg.accuracy_m,
    )

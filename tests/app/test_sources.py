# tests/app/test_sources.py
import pytest

from taxi_meter.app.events import LocationError, LocationSample
from taxi_meter.config.models import FeedJitterModel, FeedReplayModel
from taxi_meter.domain.geo import haversine_km
from taxi_meter.runtime.sources import JitterFeed, ReplayFeed, make_feed
from taxi_meter.sim.rng import RNGRegistry

POINTS = [(31.0, 121.0), "no fix", (31.01, 121.0)]


def test_replay_feed_timing_and_errors():
    evs = list(ReplayFeed(POINTS, interval_s=2.0, accuracy_m=4.0).events(trip_id=3, t0=10.0))
    assert [type(e) for e in evs] == [LocationSample, LocationError, LocationSample]
    assert [e.t for e in evs] == [12.0, 14.0, 16.0]
    assert all(e.trip_id == 3 for e in evs)
    assert evs[1].message == "no fix"
    assert (evs[2].lat, evs[2].lon, evs[2].accuracy_m) == (31.01, 121.0, 4.0)


def test_jitter_feed_is_deterministic_and_bounded():
    def run(seed):
        feed = JitterFeed(POINTS, rng_registry=RNGRegistry(seed), noise_m=5.0, max_noise_m=15.0)
        return [(e.lat, e.lon) for e in feed.events(trip_id=1, t0=0.0) if isinstance(e, LocationSample)]

    a, b = run(7), run(7)
    assert a == b
    assert a != run(8)
    for (lat, lon), (lat0, lon0) in zip(a, [POINTS[0], POINTS[2]]):
        # two clamped 15 m offsets stay within ~22 m
        assert haversine_km(lat, lon, lat0, lon0) < 0.022


def test_zero_noise_jitter_is_replay():
    feed = JitterFeed(POINTS, rng_registry=RNGRegistry(1), noise_m=0.0)
    assert [(e.lat, e.lon) for e in feed.events(1, 0.0) if isinstance(e, LocationSample)] == [
        POINTS[0],
        POINTS[2],
    ]


def test_make_feed_by_kind():
    reg = RNGRegistry(1)
    assert type(make_feed(FeedReplayModel(points=POINTS), rng_registry=reg)) is ReplayFeed
    assert isinstance(make_feed(FeedJitterModel(points=POINTS), rng_registry=reg), JitterFeed)


def test_unknown_feed_kind():
    class Bogus:
        kind = "bogus"

    with pytest.raises(ValueError):
        make_feed(Bogus(), rng_registry=RNGRegistry(1))

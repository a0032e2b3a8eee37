from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from taxi_meter.domain.fare import GPS_NOISE_KM
from taxi_meter.domain.geo import EARTH_RADIUS_KM
from taxi_meter.domain.rates import BUILTIN_CITIES, BuiltinRate, RateProfile, RateSelector


class SimModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    epoch: tuple[int, int, int, int, int, int] | None = None  # None => wall clock at build
    seed: int = 0
    duration: int = 3600  # seconds


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 1


# ----------------- RATES ---------------------


class RatesModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    selector: RateSelector = Field(default_factory=BuiltinRate)
    cities: dict[str, RateProfile] = Field(default_factory=lambda: dict(BUILTIN_CITIES))
    custom: RateProfile | None = None

    @model_validator(mode="after")
    def _check_selector(self):
        # a custom selector with no profile anywhere is a ConfigError at resolve
        # time; an unknown city is caught here since the table is fixed
        sel = self.selector
        if sel.kind == "builtin" and sel.city not in self.cities:
            raise ValueError(f"selector city {sel.city!r} not in {sorted(self.cities)}")
        return self


class GpsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    noise_km: float = GPS_NOISE_KM
    earth_radius_km: float = EARTH_RADIUS_KM

    @field_validator("noise_km", "earth_radius_km")
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v


class TipsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    presets: tuple[float, ...] = (0.15, 0.20, 0.25)
    default: float | None = 0.20

    @model_validator(mode="after")
    def _default_is_preset(self):
        if any(p < 0 for p in self.presets):
            raise ValueError("tip presets must be >= 0")
        if self.default is not None and self.default not in self.presets:
            raise ValueError(f"default tip {self.default} is not one of {self.presets}")
        return self


# --------------------- LOCATION FEEDS -------------------------

# a point is (lat, lon) or a string standing in for a positioning error
FeedPoint = tuple[float, float] | str


class FeedReplayModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["replay"] = "replay"
    points: list[FeedPoint] = Field(default_factory=list)
    interval_s: float = 1.0
    accuracy_m: float | None = 5.0

    @field_validator("interval_s")
    def _interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("interval_s must be > 0")
        return v


class FeedJitterModel(FeedReplayModel):
    kind: Literal["jitter"] = "jitter"
    noise_m: float = 5.0
    max_noise_m: float = 15.0


FeedUnion = Annotated[FeedReplayModel | FeedJitterModel, Field(discriminator="kind")]


# ------------------------------------------------------------------


class MeterConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "taxi-meter"
    run_id: str = "local"
    sim: SimModel = SimModel()
    log: LogModel = LogModel()
    rates: RatesModel = Field(default_factory=RatesModel)
    gps: GpsModel = GpsModel()
    tips: TipsModel = TipsModel()
    feed: FeedUnion = Field(default_factory=FeedReplayModel)

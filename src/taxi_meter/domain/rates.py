# taxi_meter/domain/rates.py
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from taxi_meter.domain.amounts import parse_amount
from taxi_meter.domain.errors import ConfigError

DEFAULT_EMPTY_KM = 15.0
DEFAULT_EMPTY_RATE = 1.5
CUSTOM_NAME = "Custom"


class RateProfile(BaseModel):
    """
    One fare profile. Distances in km, money in local currency units.

    Accepts both snake_case and the camelCase keys a settings form stores
    (``baseKm``, ``perKm``, ``emptyKm``, ``emptyRate``).
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        allow_inf_nan=False,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    base: float = Field(ge=0)
    base_km: float = Field(ge=0)
    per_km: float = Field(ge=0)
    empty_km: float = Field(default=DEFAULT_EMPTY_KM, ge=0)
    empty_rate: float = Field(default=DEFAULT_EMPTY_RATE, ge=0)
    name: str = CUSTOM_NAME

    @model_validator(mode="after")
    def _check_tiers(self):
        # surcharge tier must start at or after the base-fare distance
        if self.base_km > self.empty_km:
            raise ValueError(
                f"base_km ({self.base_km}) must not exceed empty_km ({self.empty_km})"
            )
        return self


BUILTIN_CITIES: dict[str, RateProfile] = {
    "shanghai": RateProfile(
        name="Shanghai", base=16, base_km=3, per_km=2.7, empty_km=15, empty_rate=1.5
    ),
    "guangzhou": RateProfile(
        name="Guangzhou", base=12, base_km=3, per_km=2.6, empty_km=25, empty_rate=1.5
    ),
    "nanjing": RateProfile(
        name="Nanjing", base=11, base_km=3, per_km=2.5, empty_km=20, empty_rate=1.5
    ),
}


# ----------------- Selectors ---------------------


class BuiltinRate(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    kind: Literal["builtin"] = "builtin"
    city: str = "shanghai"


class CustomRate(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    kind: Literal["custom"] = "custom"
    profile: RateProfile | None = None  # None => the catalog's stored custom profile


RateSelector = Annotated[BuiltinRate | CustomRate, Field(discriminator="kind")]


def selector_for(key: str) -> BuiltinRate | CustomRate:
    """Map a city-select value ("shanghai", ..., "custom") to a selector."""
    return CustomRate() if key == "custom" else BuiltinRate(city=key)


# ----------------- Catalog ---------------------


class RateCatalog:
    def __init__(
        self,
        cities: Mapping[str, RateProfile] | None = None,
        custom: RateProfile | None = None,
    ):
        self._cities = dict(BUILTIN_CITIES if cities is None else cities)
        self._custom = custom

    @property
    def custom(self) -> RateProfile | None:
        return self._custom

    def cities(self) -> list[str]:
        return list(self._cities)

    def set_custom(self, profile: RateProfile | None) -> None:
        self._custom = profile

    def resolve(self, selector: BuiltinRate | CustomRate) -> RateProfile:
        if isinstance(selector, BuiltinRate):
            try:
                return self._cities[selector.city]
            except KeyError:
                raise ConfigError(f"unknown city {selector.city!r}") from None
        if isinstance(selector, CustomRate):
            profile = selector.profile or self._custom
            if profile is None:
                raise ConfigError("custom rate selected but no custom profile is set")
            return profile
        raise TypeError(selector)


# ----------------- Settings form helpers ---------------------


def custom_profile_from_form(fields: Mapping[str, Any]) -> RateProfile:
    """
    Build the custom profile from raw settings-form entries.

    Unparsable entries read as 0. An empty_km or empty_rate that reads as 0
    (missing, blank, unparsable or zero) falls back to the default. An entry
    set whose base_km lands beyond empty_km is rejected by RateProfile
    validation.
    """

    def pick(*keys):
        for k in keys:
            if k in fields:
                return fields[k]
        return None

    return RateProfile(
        base=parse_amount(pick("base")),
        base_km=parse_amount(pick("base_km", "baseKm")),
        per_km=parse_amount(pick("per_km", "perKm")),
        empty_km=parse_amount(pick("empty_km", "emptyKm")) or DEFAULT_EMPTY_KM,
        empty_rate=parse_amount(pick("empty_rate", "emptyRate")) or DEFAULT_EMPTY_RATE,
        name=str(pick("name") or CUSTOM_NAME),
    )


def rate_info(profile: RateProfile) -> str:
    return f"{profile.name} ({profile.base:g}/{profile.base_km:g}km)"

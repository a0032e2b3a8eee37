# taxi_meter/app/billing.py
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from math import isclose
from typing import Any, Final

from taxi_meter.domain.amounts import parse_amount
from taxi_meter.domain.errors import PreconditionError
from taxi_meter.domain.fare import FareEngine
from taxi_meter.domain.rates import BuiltinRate, CustomRate, RateCatalog, RateProfile
from taxi_meter.domain.state import BillingStage, MeterPhase, TripState

CUSTOM_TIP: Final = "custom"
DEFAULT_TIP_PRESETS = (0.15, 0.20, 0.25)
DEFAULT_TIP = 0.20


@dataclass(frozen=True)
class BillBreakdown:
    meter_fare: float
    extras: float
    tip: float
    total: float


class BillingSession:
    """
    Walks one trip through IDLE -> METERING -> EXTRAS_ENTRY -> TIP_SELECTION
    -> FINAL_BILL and back to IDLE on reset(). No backward transitions.

    Owns the TripState; the FareEngine mutates it while metering, this
    class mutates the accessory fees once the meter has stopped.
    """

    def __init__(
        self,
        catalog: RateCatalog,
        selector: BuiltinRate | CustomRate | None = None,
        *,
        engine: FareEngine | None = None,
        tip_presets: Sequence[float] = DEFAULT_TIP_PRESETS,
        default_tip: float | None = DEFAULT_TIP,
    ):
        self.catalog = catalog
        self.selector = selector or BuiltinRate()
        self.engine = engine or FareEngine(TripState())
        self.tip_presets = tuple(tip_presets)
        self.default_tip = default_tip
        self.stage = BillingStage.IDLE
        self.tip_choice: float | str | None = None
        self.reset()

    @property
    def state(self) -> TripState:
        return self.engine.state

    def current_rate(self) -> RateProfile:
        return self.catalog.resolve(self.selector)

    def _require(self, op: str, *stages: BillingStage) -> None:
        if self.stage not in stages:
            raise PreconditionError(op, self.stage, " or ".join(s.name for s in stages))

    # ------------- settings --------------------

    def select_rate(self, selector: BuiltinRate | CustomRate) -> RateProfile:
        """Switch the rate used by the next trip. A running trip keeps its snapshot."""
        rate = self.catalog.resolve(selector)
        self.selector = selector
        if self.stage is BillingStage.IDLE:
            self.state.fare = rate.base
        return rate

    # ------------- trip lifecycle --------------------

    def begin(self, started_at: datetime | None = None) -> RateProfile:
        self._require("begin", BillingStage.IDLE)
        rate = self.current_rate()
        self.engine.start(rate, started_at)
        self.stage = BillingStage.METERING
        return rate

    def stop(self) -> None:
        self._require("stop", BillingStage.METERING)
        self.engine.stop()

    def advance_to_extras(self) -> None:
        self._require("advance_to_extras", BillingStage.METERING)
        if self.engine.phase is not MeterPhase.STOPPED:
            raise PreconditionError("advance_to_extras", self.engine.phase, "a stopped trip")
        self.stage = BillingStage.EXTRAS_ENTRY

    def submit_extras(self, toll_fee: Any, other_fee: Any) -> None:
        self._require("submit_extras", BillingStage.EXTRAS_ENTRY)
        self.state.toll_fee = parse_amount(toll_fee)
        self.state.other_fee = parse_amount(other_fee)
        self.stage = BillingStage.TIP_SELECTION
        if self.default_tip is not None:
            self.select_tip(self.default_tip)

    # ------------- tips --------------------

    def tip_options(self) -> dict[float, float]:
        """Preset percent -> tip amount on the current fare and extras."""
        base = self.state.subtotal
        return {p: base * p for p in self.tip_presets}

    def select_tip(self, percent: float | str) -> float:
        self._require("select_tip", BillingStage.TIP_SELECTION)
        if percent == CUSTOM_TIP:
            # amount arrives later through submit_custom_tip()
            self.tip_choice = CUSTOM_TIP
            self.state.tip_fee = 0.0
            return 0.0
        preset = None
        if isinstance(percent, (int, float)):
            preset = next((p for p in self.tip_presets if isclose(p, percent)), None)
        if preset is None:
            raise ValueError(f"unsupported tip percent {percent!r}; presets: {self.tip_presets}")
        self.tip_choice = preset
        self.state.tip_fee = self.state.subtotal * preset
        return self.state.tip_fee

    def submit_custom_tip(self, amount: Any) -> float:
        self._require("submit_custom_tip", BillingStage.TIP_SELECTION, BillingStage.FINAL_BILL)
        if self.tip_choice != CUSTOM_TIP:
            raise PreconditionError("submit_custom_tip", self.tip_choice, "custom tip selected")
        self.state.tip_fee = parse_amount(amount)
        return self.state.tip_fee

    # ------------- bill --------------------

    def finalize(self) -> BillBreakdown:
        # FINAL_BILL re-entry recomputes after a custom tip correction
        self._require("finalize", BillingStage.TIP_SELECTION, BillingStage.FINAL_BILL)
        self.stage = BillingStage.FINAL_BILL
        return self.bill

    @property
    def bill(self) -> BillBreakdown:
        self._require("bill", BillingStage.FINAL_BILL)
        s = self.state
        return BillBreakdown(
            meter_fare=s.fare,
            extras=s.extras,
            tip=s.tip_fee,
            total=s.fare + s.toll_fee + s.other_fee + s.tip_fee,
        )

    def reset(self) -> None:
        rate = self.current_rate()
        self.engine.reset(rate)
        self.tip_choice = None
        self.stage = BillingStage.IDLE

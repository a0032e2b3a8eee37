# tests/app/test_config.py
import json

import pytest
from pydantic import ValidationError

from taxi_meter.app.build import build
from taxi_meter.config.models import MeterConfig
from taxi_meter.domain.errors import ConfigError
from taxi_meter.domain.rates import CustomRate
from taxi_meter.io.config import load_config


def test_defaults():
    cfg = MeterConfig()
    assert cfg.rates.selector.kind == "builtin"
    assert cfg.rates.selector.city == "shanghai"
    assert cfg.gps.noise_km == 0.010
    assert cfg.gps.earth_radius_km == 6371
    assert cfg.tips.presets == (0.15, 0.20, 0.25)
    assert cfg.feed.kind == "replay"


def test_custom_selector_with_camel_case_profile():
    cfg = MeterConfig.model_validate(
        {
            "rates": {
                "selector": {"kind": "custom"},
                "custom": {"base": 13, "baseKm": 3, "perKm": 2.3, "emptyRate": 1.5},
            }
        }
    )
    assert isinstance(cfg.rates.selector, CustomRate)
    app = build(cfg, use_logging=False, sinks=[])
    assert app.session.state.fare == 13
    assert app.session.current_rate().empty_km == 15


def test_custom_selector_without_profile_fails_at_build():
    cfg = MeterConfig.model_validate({"rates": {"selector": {"kind": "custom"}}})
    with pytest.raises(ConfigError):
        build(cfg, use_logging=False, sinks=[])


@pytest.mark.parametrize(
    "bad",
    [
        {"rates": {"selector": {"kind": "builtin", "city": "atlantis"}}},
        {"rates": {"selector": {"kind": "metered"}}},
        {"rates": {"custom": {"base": 10, "base_km": 20, "per_km": 1, "empty_km": 5}}},
        {"tips": {"presets": [0.1, 0.2], "default": 0.3}},
        {"gps": {"noise_km": 0}},
        {"feed": {"kind": "replay", "interval_s": 0}},
        {"unknown": 1},
    ],
)
def test_invalid_configs(bad):
    with pytest.raises(ValidationError):
        MeterConfig.model_validate(bad)


def test_custom_city_table_and_tip_presets():
    cfg = {
        "rates": {
            "selector": {"kind": "builtin", "city": "hangzhou"},
            "cities": {
                "hangzhou": {"name": "Hangzhou", "base": 13, "base_km": 3, "per_km": 2.5, "empty_km": 10}
            },
        },
        "tips": {"presets": [0.1, 0.2], "default": None},
    }
    app = build(cfg, use_logging=False, sinks=[])
    assert app.catalog.cities() == ["hangzhou"]
    assert app.session.state.fare == 13
    assert app.session.tip_presets == (0.1, 0.2)


def test_load_config(tmp_path):
    path = tmp_path / "meter.json"
    path.write_text(json.dumps({"run_id": "from-file", "log": {"level": "DEBUG"}}), encoding="utf-8")
    cfg = load_config(path)
    assert cfg.run_id == "from-file"
    assert cfg.log.level == "DEBUG"

# taxi_meter/io/config.py
import json
from pathlib import Path

from taxi_meter.config.models import MeterConfig


def load_config(path: str | Path) -> MeterConfig:
    """Read a JSON config file; validation errors surface as pydantic.ValidationError."""
    with open(path, encoding="utf-8") as fp:
        return MeterConfig.model_validate(json.load(fp))

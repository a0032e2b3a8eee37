import math

import pytest

from taxi_meter.domain.amounts import money, parse_amount


@pytest.mark.parametrize(
    "raw, expected",
    [
        (5, 5.0),
        (2.5, 2.5),
        ("12", 12.0),
        (" 7.5 ", 7.5),
        ("12元", 12.0),
        (".5", 0.5),
        ("1e2", 100.0),
        ("", 0.0),
        ("abc", 0.0),
        (None, 0.0),
        ("-3", 0.0),
        (-3, 0.0),
        (math.nan, 0.0),
        (math.inf, 0.0),
        (True, 0.0),
        ([1], 0.0),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_money():
    assert money(68.65) == "68.65"
    assert money(0) == "0.00"

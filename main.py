# main.py
import sys

from taxi_meter.app.build import build, schedule_trip
from taxi_meter.io.config import load_config
from taxi_meter.io.display import bill_readout, meter_readout


def run(config_path: str | None = None, toll_fee: str = "", other_fee: str = ""):
    """Replay one trip from a config's location feed and print the bill."""
    cfg = load_config(config_path) if config_path else None
    app = build(cfg)

    duration = float(cfg.sim.duration) if cfg else 3600.0
    end = schedule_trip(app, duration, toll_fee=toll_fee, other_fee=other_fee)
    app.kernel.run(until=end)

    print(meter_readout(app.session.state))
    print(bill_readout(app.session.bill))


if __name__ == "__main__":
    run(*sys.argv[1:4])

# taxi_meter/domain/errors.py


class MeterError(Exception):
    """Base class for workflow errors raised by the meter core."""


class ConfigError(MeterError, ValueError):
    """The selected rate profile cannot be resolved."""


class PreconditionError(MeterError, RuntimeError):
    """An operation was invoked in a state that forbids it."""

    def __init__(self, op: str, state: object, expected: str | None = None):
        self.op, self.state, self.expected = op, state, expected
        msg = f"{op}() not allowed in state {state}"
        if expected:
            msg += f" (requires {expected})"
        super().__init__(msg)

"""Exceptions raised on the configuration path."""
import numbers


class InvalidParameterError(ValueError):
    """A demo parameter (depth, base, digit set, layout name, ...) is out of range.

    The change that triggered it is rejected and the previous state is kept.
    """

    def __init__(self, name: str, value: object, reason: str) -> None:
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {name}={value!r}: {reason}")


def require_int(name: str, value: object) -> int:
    """Return ``value`` as an int; bools, floats and strings are rejected."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterError(name, value, "must be an integer")
    return int(value)

"""
Error Taxonomy
==============
  - ValidationError       bad or out-of-range input; the run never starts
  - DegenerateScaleError  zero / non-finite trajectory extent; recovered
                          by falling back to the default scale
  - TickComputationError  arithmetic failure mid-run; the run fails
  - ExtremeValueWarning   valid but very large input; needs confirmation
"""


class SimulationError(Exception):
    """Base class for all errors raised by trajectory_sim."""


class ValidationError(SimulationError, ValueError):
    """An input value is missing, non-finite or outside its allowed range."""

    def __init__(self, field: str, value, message: str):
        self.field = field
        self.value = value
        super().__init__(f"{field}={value!r}: {message}")


class DegenerateScaleError(SimulationError, ArithmeticError):
    """The projected range or height cannot produce a finite positive scale."""


class TickComputationError(SimulationError, ArithmeticError):
    """A simulation tick could not compute a valid surface point."""


class ExtremeValueWarning(UserWarning):
    """A launch value is valid but large enough to deserve confirmation."""

    def __init__(self, field: str, value: float, limit: float):
        self.field = field
        self.value = value
        self.limit = limit
        super().__init__(f"{field} = {value:g} exceeds {limit:g}; continue?")

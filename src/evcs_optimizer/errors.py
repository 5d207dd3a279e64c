"""Input errors raised before any simulation work starts.

Runtime numeric edge cases (empty months, single replicate, zero stalls)
are handled locally by the engine and never surface here.
"""

from __future__ import annotations


class SimulationInputError(ValueError):
    """Base class for rejected optimizer inputs.

    ``problems`` keeps every individual violation; the exception message
    joins them into one descriptive line for the caller.
    """

    kind = "input"

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__(f"Invalid {self.kind}: " + "; ".join(self.problems))


class ConfigurationError(SimulationInputError):
    """Malformed grid bounds, steps, replicate count or constraint thresholds."""

    kind = "grid search configuration"


class ParameterError(SimulationInputError):
    """Station parameters violating domain constraints."""

    kind = "station parameters"

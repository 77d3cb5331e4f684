"""
Error and warning types for the DVR simulator.

Malformed input fails fast with ValidationError. Hitting the round cap is
not an error: it is reported through the ConvergenceCapped warning.
"""

from typing import Optional


class ValidationError(ValueError):
    """
    Raised when topology or failure input is malformed.

    The offending input is named in `field` (e.g. "edges[2].dest").
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class SimulationStateError(RuntimeError):
    """Raised when a simulation step is called in the wrong phase."""


class ConvergenceCapped(UserWarning):
    """
    Emitted when a convergence run stops at the round cap.

    Callers may treat this as a hint of count-to-infinity and keep reading
    the (possibly still-changing) table.
    """

    def __init__(self, rounds: int, message: Optional[str] = None) -> None:
        super().__init__(
            message
            or f"stopped after {rounds} rounds - possible count-to-infinity problem"
        )
        self.rounds = rounds

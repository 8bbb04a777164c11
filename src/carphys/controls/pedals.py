"""
Pedal controls - Normalized throttle/brake input.

Provides:
- PedalInput: normalized pedal pair handed to the integrator
- PedalRamp: turns digital presses (keys, buttons) into ramped pedals
- PedalSource protocol and a scripted source for tests and demos

Input backends (keyboard, gamepad, pointer) live outside this package
and only need to produce PedalCommand values or analog PedalInputs.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Protocol, Sequence, Tuple

from carphys.config import clamp_unit


class PedalCommand(Enum):
    """Digital pedal request for one frame."""
    ACCELERATE = "accelerate"
    BRAKE = "brake"
    ROLL = "roll"


@dataclass(frozen=True)
class PedalInput:
    """Throttle and brake positions, each clamped into [0, 1]."""
    throttle: float = 0.0
    brake: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "throttle", clamp_unit(self.throttle))
        object.__setattr__(self, "brake", clamp_unit(self.brake))


class PedalSource(Protocol):
    """Anything that can be sampled for pedal positions once per frame."""

    def sample(self, dt: float) -> PedalInput:
        ...


class PedalRamp:
    """Ramp digital pedal presses into analog positions.

    Holding ACCELERATE raises the throttle at rate_per_s and releases
    the brake at once; BRAKE does the opposite. ROLL releases both.
    """

    def __init__(self, rate_per_s: float = 1.0):
        """Initialize ramp.

        Args:
            rate_per_s: Pedal travel per second of holding (1.0 = full in one second)
        """
        if rate_per_s <= 0.0:
            raise ValueError(f"rate_per_s must be positive, got {rate_per_s}")
        self.rate_per_s = rate_per_s
        self._current = PedalInput()

    @property
    def current(self) -> PedalInput:
        """Pedal positions after the last update."""
        return self._current

    def update(self, command: PedalCommand, dt: float) -> PedalInput:
        """Apply one frame's command.

        Args:
            command: Pedal requested this frame
            dt: Frame time in seconds

        Returns:
            New pedal positions
        """
        step = max(dt, 0.0) * self.rate_per_s
        if command is PedalCommand.ACCELERATE:
            self._current = PedalInput(throttle=self._current.throttle + step)
        elif command is PedalCommand.BRAKE:
            self._current = PedalInput(brake=self._current.brake + step)
        else:
            self._current = PedalInput()
        return self._current

    def reset(self) -> None:
        """Release both pedals."""
        self._current = PedalInput()


class ScriptedPedalSource:
    """Plays back fixed pedal positions for set durations.

    After the script runs out the last segment's pedals are held.

    Usage:
        source = ScriptedPedalSource([(5.0, PedalInput(throttle=1.0)),
                                      (3.0, PedalInput(brake=1.0))])
    """

    def __init__(self, segments: Sequence[Tuple[float, PedalInput]]):
        if not segments:
            raise ValueError("script needs at least one segment")
        self._segments: List[Tuple[float, PedalInput]] = list(segments)
        self._time: float = 0.0

    @property
    def duration(self) -> float:
        """Total scripted time in seconds."""
        return sum(duration for duration, _ in self._segments)

    def sample(self, dt: float) -> PedalInput:
        """Pedals at the current script time, then advance by dt."""
        pedals = self._segments[-1][1]
        start = 0.0
        for duration, segment_pedals in self._segments:
            if self._time < start + duration:
                pedals = segment_pedals
                break
            start += duration
        self._time += max(dt, 0.0)
        return pedals

    def reset(self) -> None:
        """Restart the script from the beginning."""
        self._time = 0.0

"""
Telemetry channel - Fixed-capacity time series of one vehicle quantity.

Samples live in a preallocated numpy ring buffer, so recording is O(1)
and memory stays bounded however long the simulation runs.
"""

from dataclasses import dataclass
import numpy as np

from carphys.config import require


@dataclass(frozen=True)
class ChannelSpec:
    """Static description of a telemetry channel."""
    name: str
    unit: str = ""

    # Recorded values are clipped into [lower, upper]
    lower: float = -np.inf
    upper: float = np.inf

    decimals: int = 3       # Rounding used in summaries
    capacity: int = 36000   # 10 minutes at 60 Hz

    def __post_init__(self):
        require(self.capacity >= 1, f"capacity must be >= 1, got {self.capacity}")
        require(self.lower <= self.upper,
                f"channel {self.name}: lower {self.lower} above upper {self.upper}")


class TelemetryChannel:
    """Ring buffer of (time, value) samples.

    Once full, each new sample overwrites the oldest one. The mean
    covers the samples still held; lowest/highest cover everything
    recorded since the last clear().
    """

    def __init__(self, spec: ChannelSpec):
        self.spec = spec

        # Column 0 is time, column 1 is value
        self._samples = np.zeros((spec.capacity, 2))
        self._next = 0
        self._size = 0
        self._recorded = 0

        self._lowest = np.inf
        self._highest = -np.inf
        self._sum = 0.0

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def count(self) -> int:
        """Number of samples held."""
        return self._size

    @property
    def recorded(self) -> int:
        """Number of samples recorded, including overwritten ones."""
        return self._recorded

    @property
    def lowest(self) -> float | None:
        return float(self._lowest) if self._recorded else None

    @property
    def highest(self) -> float | None:
        return float(self._highest) if self._recorded else None

    @property
    def mean(self) -> float | None:
        return self._sum / self._size if self._size else None

    @property
    def latest(self) -> float | None:
        """Most recent value, None before the first sample."""
        if not self._size:
            return None
        return float(self._samples[self._next - 1, 1])

    def record(self, time: float, value: float) -> None:
        """Append a sample, overwriting the oldest when full.

        Args:
            time: Simulation time in seconds
            value: Value to record (clipped to the channel range)
        """
        value = float(np.clip(value, self.spec.lower, self.spec.upper))

        if self._size == self.spec.capacity:
            self._sum -= self._samples[self._next, 1]
        else:
            self._size += 1

        self._samples[self._next] = (time, value)
        self._next = (self._next + 1) % self.spec.capacity
        self._recorded += 1

        self._sum += value
        self._lowest = min(self._lowest, value)
        self._highest = max(self._highest, value)

    def samples(self) -> np.ndarray:
        """Held samples, oldest first, as an (n, 2) array of (time, value)."""
        if self._size < self.spec.capacity:
            return self._samples[:self._size].copy()
        return np.roll(self._samples, -self._next, axis=0)

    @property
    def times(self) -> np.ndarray:
        return self.samples()[:, 0]

    @property
    def values(self) -> np.ndarray:
        return self.samples()[:, 1]

    def window(self, start_time: float, end_time: float) -> tuple[np.ndarray, np.ndarray]:
        """Get samples with start_time <= time <= end_time.

        Returns:
            Tuple of (times, values) arrays
        """
        data = self.samples()
        mask = (data[:, 0] >= start_time) & (data[:, 0] <= end_time)
        return data[mask, 0], data[mask, 1]

    def clear(self) -> None:
        """Drop all samples and statistics."""
        self._next = 0
        self._size = 0
        self._recorded = 0
        self._lowest = np.inf
        self._highest = -np.inf
        self._sum = 0.0

    def summary(self) -> dict:
        """Get channel statistics, rounded for display (None when empty)."""
        def rounded(value):
            return None if value is None else round(value, self.spec.decimals)

        return {
            "name": self.spec.name,
            "unit": self.spec.unit,
            "count": self._size,
            "recorded": self._recorded,
            "lowest": rounded(self.lowest),
            "highest": rounded(self.highest),
            "mean": rounded(self.mean),
            "latest": rounded(self.latest),
        }

"""
Telemetry recorder - Records vehicle snapshots over time.

Provides:
- Standard longitudinal channels (speed, RPM, gear, pedals)
- Sample-rate limiting
- Gear-change log
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from carphys.simulation.state import VehicleStateSnapshot
from carphys.telemetry.channel import TelemetryChannel, ChannelSpec


STANDARD_CHANNELS = {
    "speed_kph": ChannelSpec("speed_kph", "km/h", lower=0.0, upper=500.0, decimals=2),
    "rpm": ChannelSpec("rpm", "rpm", lower=0.0, upper=20000.0, decimals=0),
    "gear": ChannelSpec("gear", "", lower=1.0, upper=12.0, decimals=0),
    "throttle": ChannelSpec("throttle", "", lower=0.0, upper=1.0),
    "brake": ChannelSpec("brake", "", lower=0.0, upper=1.0),
    "acceleration": ChannelSpec("acceleration", "m/s^2", lower=-50.0, upper=50.0),
}


@dataclass
class RecorderConfig:
    """Recorder configuration."""
    sample_rate_hz: float = 60.0            # Recording frequency (0 = every snapshot)
    channels: List[str] | None = None       # Channels to record (None = all)
    capacity: int = 36000                   # Samples held per channel


class TelemetryRecorder:
    """Records vehicle snapshots into channels.

    Usage:
        recorder = TelemetryRecorder()
        simulator.add_post_step_callback(recorder.on_step)
    """

    def __init__(self, config: RecorderConfig | None = None):
        """Initialize recorder.

        Args:
            config: Recorder configuration
        """
        self.config = config or RecorderConfig()

        self._channels: Dict[str, TelemetryChannel] = {}
        self._setup_channels()

        self._last_sample_time: Optional[float] = None
        self._sample_interval: float = (
            1.0 / self.config.sample_rate_hz if self.config.sample_rate_hz > 0 else 0.0
        )

        # (time, from_gear, to_gear), 1-based gears
        self._gear_changes: List[Tuple[float, int, int]] = []
        self._last_gear: Optional[int] = None

    def _setup_channels(self) -> None:
        """Set up telemetry channels."""
        channel_names = self.config.channels or list(STANDARD_CHANNELS.keys())

        for name in channel_names:
            if name not in STANDARD_CHANNELS:
                raise ValueError(f"Unknown telemetry channel: {name}")
            spec = replace(STANDARD_CHANNELS[name], capacity=self.config.capacity)
            self._channels[name] = TelemetryChannel(spec)

    @property
    def channels(self) -> Dict[str, TelemetryChannel]:
        """Get all channels."""
        return self._channels

    @property
    def gear_changes(self) -> List[Tuple[float, int, int]]:
        """Gear changes seen so far as (time, from_gear, to_gear)."""
        return list(self._gear_changes)

    def get_channel(self, name: str) -> Optional[TelemetryChannel]:
        """Get channel by name."""
        return self._channels.get(name)

    def record(self, snapshot: VehicleStateSnapshot) -> bool:
        """Record a snapshot at its simulation time.

        Gear changes are always logged; channel samples respect the
        sample rate.

        Args:
            snapshot: Vehicle state to record

        Returns:
            True if channel samples were recorded
        """
        time = snapshot.elapsed

        if self._last_gear is not None and snapshot.gear_number != self._last_gear:
            self._gear_changes.append((time, self._last_gear, snapshot.gear_number))
        self._last_gear = snapshot.gear_number

        if (
            self._last_sample_time is not None
            and time - self._last_sample_time < self._sample_interval
        ):
            return False
        self._last_sample_time = time

        values = snapshot.to_dict()
        for name, channel in self._channels.items():
            channel.record(time, values[name])
        return True

    def on_step(self, simulator, snapshot: VehicleStateSnapshot) -> None:
        """Post-step callback for Simulator."""
        self.record(snapshot)

    def clear(self) -> None:
        """Clear all recorded data."""
        for channel in self._channels.values():
            channel.clear()
        self._gear_changes.clear()
        self._last_gear = None
        self._last_sample_time = None

    def get_summary(self) -> Dict[str, dict]:
        """Get per-channel statistics."""
        return {name: channel.summary() for name, channel in self._channels.items()}

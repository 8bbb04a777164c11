"""
Telemetry module - In-memory vehicle data collection.

This module contains:
- TelemetryRecorder: Records vehicle snapshots over time
- TelemetryChannel: Fixed-capacity ring buffer for one quantity
"""

from carphys.telemetry.recorder import TelemetryRecorder, RecorderConfig
from carphys.telemetry.channel import TelemetryChannel, ChannelSpec

__all__ = [
    "TelemetryRecorder",
    "RecorderConfig",
    "TelemetryChannel",
    "ChannelSpec",
]

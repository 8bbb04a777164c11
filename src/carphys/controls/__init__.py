"""
Controls module - Normalized pedal input.

This module contains:
- PedalInput: Throttle/brake pair fed to the integrator
- PedalRamp: Digital press to analog pedal ramping
- ScriptedPedalSource: Timed pedal playback
"""

from carphys.controls.pedals import (
    PedalCommand,
    PedalInput,
    PedalRamp,
    PedalSource,
    ScriptedPedalSource,
)

__all__ = [
    "PedalCommand",
    "PedalInput",
    "PedalRamp",
    "PedalSource",
    "ScriptedPedalSource",
]

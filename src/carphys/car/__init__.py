"""
Car module - Longitudinal vehicle model.

This module contains the vehicle components:
- Engine: Torque curve, idle/redline limits
- Transmission: Gear ratios, final drive, shift decisions
- Resistance: Aerodynamic drag and rolling resistance
- Vehicle: Complete calibration and presets
"""

from carphys.car.engine import EngineModel, EngineSpec
from carphys.car.transmission import Transmission, TransmissionSpec, ShiftDecision
from carphys.car.resistance import ResistanceModel, VehicleBodySpec
from carphys.car.vehicle import VehicleSpec, CORVETTE_C5

__all__ = [
    "EngineModel",
    "EngineSpec",
    "Transmission",
    "TransmissionSpec",
    "ShiftDecision",
    "ResistanceModel",
    "VehicleBodySpec",
    "VehicleSpec",
    "CORVETTE_C5",
]

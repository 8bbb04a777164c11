"""
carphys - Real-time longitudinal vehicle dynamics.

This package simulates a single vehicle driven by throttle and brake
pedals:
- Engine torque curve bounded by idle and redline
- Automatic gearbox with RPM shift points
- Aerodynamic drag and rolling resistance
- Fixed-step integration of speed, RPM and gear
- Pedal ramping and in-memory telemetry for a presentation layer
"""

__version__ = "0.1.0"

from carphys.config import ConfigurationError
from carphys.car.vehicle import VehicleSpec, CORVETTE_C5
from carphys.simulation.integrator import DynamicsIntegrator
from carphys.simulation.simulator import Simulator
from carphys.simulation.state import VehicleStateSnapshot

__all__ = [
    "ConfigurationError",
    "VehicleSpec",
    "CORVETTE_C5",
    "DynamicsIntegrator",
    "Simulator",
    "VehicleStateSnapshot",
    "__version__",
]

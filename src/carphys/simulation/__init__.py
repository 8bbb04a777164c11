"""
Simulation module - Longitudinal dynamics loop.

This module contains:
- VehicleState / VehicleStateSnapshot: Vehicle state and its read-only view
- DynamicsIntegrator: Per-tick force and speed integration
- Simulator: Fixed-rate loop with exclusive access per tick
"""

from carphys.simulation.state import VehicleState, VehicleStateSnapshot
from carphys.simulation.integrator import DynamicsIntegrator
from carphys.simulation.simulator import Simulator, SimulatorConfig

__all__ = [
    "VehicleState",
    "VehicleStateSnapshot",
    "DynamicsIntegrator",
    "Simulator",
    "SimulatorConfig",
]

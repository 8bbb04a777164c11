"""
Vehicle state - Authoritative per-vehicle simulation state.

VehicleState is mutated only by DynamicsIntegrator. Everything handed
to the presentation layer is a frozen VehicleStateSnapshot copy.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class VehicleState:
    """Current vehicle state for integration."""
    speed: float = 0.0          # m/s, >= 0
    engine_rpm: float = 0.0     # rev/min, within [idle, redline]
    current_gear: int = 0       # Index into gear ratios (0 = first)

    # Pedals applied on the last tick (0.0 to 1.0)
    throttle: float = 0.0
    brake: float = 0.0

    # Derived values from the last tick
    acceleration: float = 0.0   # m/s^2
    drive_force: float = 0.0    # N
    elapsed: float = 0.0        # Simulated seconds

    def snapshot(self) -> "VehicleStateSnapshot":
        """Copy the current state into an immutable snapshot."""
        return VehicleStateSnapshot(**asdict(self))


@dataclass(frozen=True)
class VehicleStateSnapshot:
    """Read-only view of VehicleState for display."""
    speed: float
    engine_rpm: float
    current_gear: int
    throttle: float
    brake: float
    acceleration: float = 0.0
    drive_force: float = 0.0
    elapsed: float = 0.0

    @property
    def speed_kph(self) -> float:
        """Speed in km/h."""
        return self.speed * 3.6

    @property
    def gear_number(self) -> int:
        """1-based gear number as shown on a dashboard."""
        return self.current_gear + 1

    def to_dict(self) -> Dict[str, Any]:
        """Get snapshot values for telemetry."""
        return {
            "speed_mps": self.speed,
            "speed_kph": self.speed_kph,
            "rpm": self.engine_rpm,
            "gear": self.gear_number,
            "throttle": self.throttle,
            "brake": self.brake,
            "acceleration": self.acceleration,
            "drive_force_n": self.drive_force,
            "time": self.elapsed,
        }

    def format_dashboard(self) -> str:
        """Format speed, gear and RPM as a one-line readout."""
        return (
            f"{self.speed_kph:.2f} KM/H | Gear {self.gear_number} | "
            f"{self.engine_rpm:.0f} RPM"
        )

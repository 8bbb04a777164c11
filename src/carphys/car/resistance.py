"""
Resistance component - Forces opposing forward motion.

Simulates:
- Aerodynamic drag (quadratic in speed)
- Rolling resistance (speed independent while moving)
"""

from dataclasses import dataclass
import numpy as np

from carphys.config import GRAVITY, require


@dataclass(frozen=True)
class VehicleBodySpec:
    """Body and brake calibration.

    Default values give the Corvette C5 lumped drag constant
    (0.5 * 1.29 * 0.30 * 2.2 = 0.4257).
    """
    mass_kg: float = 1500.0

    # Aerodynamics
    drag_coefficient: float = 0.30        # Cd
    frontal_area_m2: float = 2.2
    air_density_kg_m3: float = 1.29

    # Tyre/road
    rolling_resistance_coefficient: float = 0.015

    # Brake force at full pedal (N)
    max_brake_force_n: float = 12000.0

    def __post_init__(self):
        require(np.isfinite(self.mass_kg) and self.mass_kg > 0.0,
                f"mass_kg must be positive, got {self.mass_kg}")
        require(self.drag_coefficient >= 0.0,
                f"drag_coefficient must be >= 0, got {self.drag_coefficient}")
        require(self.frontal_area_m2 >= 0.0,
                f"frontal_area_m2 must be >= 0, got {self.frontal_area_m2}")
        require(self.air_density_kg_m3 >= 0.0,
                f"air_density_kg_m3 must be >= 0, got {self.air_density_kg_m3}")
        require(self.rolling_resistance_coefficient >= 0.0,
                f"rolling_resistance_coefficient must be >= 0, "
                f"got {self.rolling_resistance_coefficient}")
        require(self.max_brake_force_n >= 0.0,
                f"max_brake_force_n must be >= 0, got {self.max_brake_force_n}")


class ResistanceModel:
    """Drag and rolling resistance for a VehicleBodySpec.

    All forces are magnitudes (>= 0) acting against forward motion.
    """

    def __init__(self, spec: VehicleBodySpec | None = None):
        self.spec = spec or VehicleBodySpec()

    @property
    def drag_constant(self) -> float:
        """Lumped drag constant 0.5 * rho * Cd * A (kg/m)."""
        return (
            0.5
            * self.spec.air_density_kg_m3
            * self.spec.drag_coefficient
            * self.spec.frontal_area_m2
        )

    def drag(self, speed: float) -> float:
        """Aerodynamic drag in N (absolute value of speed used)."""
        speed = abs(speed)
        return self.drag_constant * speed * speed

    def rolling_resistance(self, speed: float) -> float:
        """Rolling resistance in N; zero when stationary."""
        if speed <= 0.0:
            return 0.0
        return self.spec.rolling_resistance_coefficient * self.spec.mass_kg * GRAVITY

    def resisting_force(self, speed: float) -> float:
        """Total force opposing motion at given speed.

        Args:
            speed: Vehicle speed in m/s

        Returns:
            Resisting force in N (never negative)
        """
        return self.drag(speed) + self.rolling_resistance(speed)

    def get_state(self, speed: float) -> dict:
        """Get resistance values at a speed for telemetry."""
        return {
            "drag_n": self.drag(speed),
            "rolling_resistance_n": self.rolling_resistance(speed),
            "resisting_force_n": self.resisting_force(speed),
        }

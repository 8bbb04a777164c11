"""
Engine component - Torque delivery for the simulated vehicle.

Simulates:
- RPM-based torque curve (linear interpolation between samples)
- Idle and redline limits
- Torque lookup at RPM clamped to idle/redline
- Power output calculations
"""

from dataclasses import dataclass, field
from typing import Tuple
import logging
import numpy as np

from carphys.config import require

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineSpec:
    """Calibration data for the engine.

    Default values describe a Corvette C5 small-block V8.
    """
    # Torque curve as (rpm, torque_nm) samples, ordered by rpm
    torque_curve: Tuple[Tuple[float, float], ...] = field(default_factory=lambda: (
        (1000.0, 450.0),
        (1500.0, 480.0),
        (3000.0, 490.0),
        (5000.0, 500.0),  # Peak torque
        (5800.0, 450.0),
    ))

    # RPM limits
    idle_rpm: float = 1000.0
    redline_rpm: float = 5800.0

    # Rotating-mass allowance, as a fraction of vehicle mass
    inertia_mass_factor: float = 0.0

    def __post_init__(self):
        curve = tuple((float(rpm), float(torque)) for rpm, torque in self.torque_curve)
        object.__setattr__(self, "torque_curve", curve)

        require(len(curve) >= 2,
                f"torque curve needs at least two samples, got {len(curve)}")
        require(all(np.isfinite(v) for point in curve for v in point),
                "torque curve contains non-finite values")
        rpms = [rpm for rpm, _ in curve]
        require(all(b > a for a, b in zip(rpms, rpms[1:])),
                f"torque curve must be strictly increasing in rpm: {rpms}")
        require(all(torque >= 0.0 for _, torque in curve),
                "torque curve contains negative torque")
        require(0.0 < self.idle_rpm < self.redline_rpm,
                f"need 0 < idle_rpm < redline_rpm, got "
                f"{self.idle_rpm} / {self.redline_rpm}")
        require(self.inertia_mass_factor >= 0.0,
                f"inertia_mass_factor must be >= 0, got {self.inertia_mass_factor}")

        if self.redline_rpm > rpms[-1] or self.idle_rpm < rpms[0]:
            logger.warning(
                "Torque curve %.0f-%.0f rpm does not cover idle-redline %.0f-%.0f rpm; "
                "boundary torque will be held outside the sampled range",
                rpms[0], rpms[-1], self.idle_rpm, self.redline_rpm,
            )


class EngineModel:
    """Stateless torque lookup for an EngineSpec.

    Every method is a pure function of its arguments; the authoritative
    RPM lives in VehicleState.
    """

    def __init__(self, spec: EngineSpec | None = None):
        """Initialize engine model.

        Args:
            spec: Engine calibration. Uses Corvette C5 defaults if None.
        """
        self.spec = spec or EngineSpec()

        # Pre-compute curve arrays for np.interp
        self._curve_rpms = np.array([p[0] for p in self.spec.torque_curve])
        self._curve_torques = np.array([p[1] for p in self.spec.torque_curve])

    @property
    def idle_rpm(self) -> float:
        """Idle RPM (lower display/lookup bound)."""
        return self.spec.idle_rpm

    @property
    def redline_rpm(self) -> float:
        """Redline RPM (upper display/lookup bound)."""
        return self.spec.redline_rpm

    @property
    def min_curve_rpm(self) -> float:
        """Lowest sampled RPM on the torque curve."""
        return float(self._curve_rpms[0])

    @property
    def peak_torque_rpm(self) -> float:
        """RPM of the highest torque sample (first one on ties)."""
        return float(self._curve_rpms[int(np.argmax(self._curve_torques))])

    @property
    def peak_torque(self) -> float:
        """Highest sampled torque in Nm."""
        return float(self._curve_torques.max())

    def clamp_rpm(self, rpm: float) -> float:
        """Clamp RPM into [idle_rpm, redline_rpm]."""
        return float(np.clip(rpm, self.spec.idle_rpm, self.spec.redline_rpm))

    def torque_at(self, rpm: float) -> float:
        """Get full-throttle torque at given RPM from the torque curve.

        Outside the sampled range the boundary torque is held.

        Args:
            rpm: Engine RPM to query

        Returns:
            Torque in Nm
        """
        return float(np.interp(rpm, self._curve_rpms, self._curve_torques))

    def drive_torque(self, unclamped_rpm: float, throttle: float) -> float:
        """Get torque delivered to the gearbox.

        The lookup uses RPM clamped into [idle, redline], so above
        redline the torque at redline is delivered.

        Args:
            unclamped_rpm: Engine RPM implied by road speed, before clamping
            throttle: Throttle position (0.0 to 1.0)

        Returns:
            Torque in Nm
        """
        return self.torque_at(self.clamp_rpm(unclamped_rpm)) * throttle

    def power_kw(self, rpm: float, throttle: float = 1.0) -> float:
        """Get power output in kW.

        Args:
            rpm: Engine RPM
            throttle: Throttle position (0.0 to 1.0)

        Returns:
            Power in kW
        """
        rpm = self.clamp_rpm(rpm)
        # Power (kW) = Torque (Nm) * RPM / 9549
        return self.torque_at(rpm) * throttle * rpm / 9549.0

    def get_state(self, rpm: float, throttle: float) -> dict:
        """Get engine values at an RPM for telemetry."""
        return {
            "rpm": rpm,
            "throttle": throttle,
            "torque_nm": self.drive_torque(rpm, throttle),
            "power_kw": self.power_kw(rpm, throttle),
        }

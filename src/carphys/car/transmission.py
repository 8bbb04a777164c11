"""
Transmission component - Gearbox and drivetrain simulation.

Simulates:
- Forward gears with a final drive ratio
- Road speed <-> engine RPM conversion
- Automatic shift decisions from RPM thresholds
- Drivetrain efficiency
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple
import logging
import numpy as np

from carphys.config import require
from carphys.car.engine import EngineModel

logger = logging.getLogger(__name__)

# rad/s -> rev/min
RAD_S_TO_RPM = 60.0 / (2.0 * np.pi)


class ShiftDecision(Enum):
    """Outcome of a shift evaluation."""
    HOLD = 0
    UPSHIFT = 1
    DOWNSHIFT = -1


@dataclass(frozen=True)
class TransmissionSpec:
    """Configuration for an automatic gearbox.

    Index 0 of gear_ratios is first gear. Default values are the
    Corvette C5 six-speed.
    """
    gear_ratios: Tuple[float, ...] = field(default_factory=lambda: (
        2.66,   # 1st
        1.78,   # 2nd
        1.30,   # 3rd
        1.00,   # 4th
        0.74,   # 5th
        0.50,   # 6th
    ))

    # Differential
    final_drive_ratio: float = 3.42

    # Shift points, compared against unclamped engine RPM
    upshift_rpm: float = 5000.0
    downshift_rpm: float = 2000.0

    wheel_radius_m: float = 0.33

    # Fraction of engine torque reaching the wheels
    transmission_efficiency: float = 1.0

    def __post_init__(self):
        ratios = tuple(float(r) for r in self.gear_ratios)
        object.__setattr__(self, "gear_ratios", ratios)

        require(len(ratios) > 0, "gear_ratios must contain at least one gear")
        require(all(np.isfinite(r) and r > 0.0 for r in ratios),
                f"gear ratios must be positive, got {ratios}")
        require(self.final_drive_ratio > 0.0,
                f"final_drive_ratio must be positive, got {self.final_drive_ratio}")
        require(self.wheel_radius_m > 0.0,
                f"wheel_radius_m must be positive, got {self.wheel_radius_m}")
        require(0.0 < self.transmission_efficiency <= 1.0,
                f"transmission_efficiency must be in (0, 1], "
                f"got {self.transmission_efficiency}")
        require(self.upshift_rpm > 0.0 and self.downshift_rpm >= 0.0,
                f"shift points must be positive, got "
                f"{self.upshift_rpm} / {self.downshift_rpm}")

        if self.downshift_rpm >= self.upshift_rpm:
            logger.warning(
                "Shift points cross (downshift %.0f >= upshift %.0f rpm); "
                "upshifts will take precedence",
                self.downshift_rpm, self.upshift_rpm,
            )

    @property
    def num_gears(self) -> int:
        """Number of forward gears."""
        return len(self.gear_ratios)


class Transmission:
    """Automatic gearbox for longitudinal simulation.

    Converts between road speed and engine RPM and decides gear
    changes. Holds no state of its own: the current gear belongs to
    VehicleState and is passed in explicitly.

    Usage:
        trans = Transmission(TransmissionSpec(), EngineModel())
        rpm = trans.unclamped_rpm_for(speed, gear)
        gear = trans.decide_shift(gear, rpm, throttle)
    """

    def __init__(
        self,
        spec: TransmissionSpec | None = None,
        engine: EngineModel | None = None,
    ):
        """Initialize transmission.

        Args:
            spec: Gearbox configuration. Uses Corvette C5 defaults if None.
            engine: Engine whose idle/redline bound the reported RPM
        """
        self.spec = spec or TransmissionSpec()
        self.engine = engine or EngineModel()

    @property
    def first_gear(self) -> int:
        """Index of the lowest forward gear."""
        return 0

    @property
    def top_gear(self) -> int:
        """Index of the highest forward gear."""
        return self.spec.num_gears - 1

    def is_valid_gear(self, gear: int) -> bool:
        """Check that gear indexes the gear ratio table."""
        return 0 <= gear < self.spec.num_gears

    def gear_ratio(self, gear: int) -> float:
        """Get ratio of the given gear.

        Raises:
            IndexError: If gear is not a valid index
        """
        if not self.is_valid_gear(gear):
            raise IndexError(f"gear {gear} out of range 0..{self.top_gear}")
        return self.spec.gear_ratios[gear]

    def total_ratio(self, gear: int) -> float:
        """Get total drive ratio (gear ratio * final drive)."""
        return self.gear_ratio(gear) * self.spec.final_drive_ratio

    def wheel_angular_speed(self, speed: float) -> float:
        """Wheel angular speed in rad/s for a road speed in m/s."""
        return speed / self.spec.wheel_radius_m

    def unclamped_rpm_for(self, speed: float, gear: int) -> float:
        """Engine RPM implied by road speed, without idle/redline clamping.

        Args:
            speed: Vehicle speed in m/s
            gear: Gear index

        Returns:
            Engine RPM (0.0 at standstill)
        """
        engine_rad_s = self.wheel_angular_speed(speed) * self.total_ratio(gear)
        return engine_rad_s * RAD_S_TO_RPM

    def engine_rpm_for(self, speed: float, gear: int) -> float:
        """Engine RPM for display and torque lookup.

        Same as unclamped_rpm_for but clamped into [idle, redline].
        """
        return self.engine.clamp_rpm(self.unclamped_rpm_for(speed, gear))

    def speed_for_rpm(self, rpm: float, gear: int) -> float:
        """Road speed in m/s at which the engine turns at rpm in gear."""
        wheel_rad_s = rpm / RAD_S_TO_RPM / self.total_ratio(gear)
        return wheel_rad_s * self.spec.wheel_radius_m

    def wheel_force(self, engine_torque: float, gear: int) -> float:
        """Tractive force at the tyre contact patch.

        Args:
            engine_torque: Engine output torque in Nm
            gear: Gear index

        Returns:
            Force in N
        """
        return (
            engine_torque
            * self.total_ratio(gear)
            * self.spec.transmission_efficiency
            / self.spec.wheel_radius_m
        )

    def classify_shift(
        self,
        current_gear: int,
        unclamped_rpm: float,
        moving: bool = True,
    ) -> ShiftDecision:
        """Evaluate the shift points for one tick.

        Upshift wins when both thresholds are met, which only happens
        with crossed shift points.
        """
        if unclamped_rpm >= self.spec.upshift_rpm and current_gear < self.top_gear:
            return ShiftDecision.UPSHIFT
        if (
            moving
            and unclamped_rpm <= self.spec.downshift_rpm
            and current_gear > self.first_gear
        ):
            return ShiftDecision.DOWNSHIFT
        return ShiftDecision.HOLD

    def decide_shift(
        self,
        current_gear: int,
        unclamped_rpm: float,
        throttle: float = 0.0,
        moving: bool = True,
    ) -> int:
        """Decide the gear for the next tick.

        Moves at most one gear per call. Neutral is never selected and
        first gear is the floor. Shift points do not depend on throttle;
        it is accepted so callers can pass the full pedal state.

        Args:
            current_gear: Current gear index
            unclamped_rpm: Engine RPM implied by road speed
            throttle: Throttle position (0.0 to 1.0)
            moving: Whether the vehicle is rolling forward

        Returns:
            New gear index
        """
        decision = self.classify_shift(current_gear, unclamped_rpm, moving)
        new_gear = current_gear + decision.value
        if decision is not ShiftDecision.HOLD:
            logger.debug(
                "%s %d -> %d at %.0f rpm (throttle %.2f)",
                decision.name.lower(), current_gear, new_gear, unclamped_rpm, throttle,
            )
        return new_gear

    def get_state(self, gear: int) -> dict:
        """Get transmission values for telemetry.

        Returns:
            Dictionary containing transmission state values
        """
        return {
            "gear": gear,
            "gear_ratio": self.gear_ratio(gear),
            "total_ratio": self.total_ratio(gear),
        }

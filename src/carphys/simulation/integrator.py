"""
Dynamics integrator - Fixed-step longitudinal vehicle update.

Each tick:
1. Clamp pedal inputs and the time step
2. Look up engine torque at the current speed and gear
3. Sum drive, brake and resisting forces
4. Integrate speed (explicit Euler, floored at zero)
5. Recompute RPM and let the transmission pick the next gear
"""

import logging
from typing import Any, Dict

import numpy as np

from carphys.config import MIN_DT, MAX_DT, clamp_unit
from carphys.car.vehicle import VehicleSpec
from carphys.simulation.state import VehicleState, VehicleStateSnapshot

logger = logging.getLogger(__name__)


class DynamicsIntegrator:
    """Longitudinal dynamics for one vehicle calibration.

    The integrator owns a VehicleState and advances it with tick().
    advance() applies the same update to any explicitly passed state,
    so one integrator can drive several independent vehicles that
    share a calibration.

    Usage:
        sim = DynamicsIntegrator(CORVETTE_C5)
        snapshot = sim.tick(dt=0.016, throttle=1.0, brake=0.0)
        print(snapshot.speed_kph, snapshot.engine_rpm, snapshot.gear_number)
    """

    def __init__(
        self,
        spec: VehicleSpec | None = None,
        state: VehicleState | None = None,
        max_dt: float = MAX_DT,
    ):
        """Initialize integrator.

        Args:
            spec: Vehicle calibration. Uses Corvette C5 defaults if None.
            state: Initial state. A vehicle at rest in first gear if None.
            max_dt: Largest time step integrated in a single tick
        """
        self.spec = spec or VehicleSpec()
        self.engine, self.transmission, self.resistance = self.spec.build_models()
        self.max_dt = max(max_dt, MIN_DT)

        self._state = state if state is not None else self.initial_state()
        self._check_state(self._state)

        logger.debug(
            "Integrator ready for %s: %d gears, %.0f kg",
            self.spec.name, self.spec.transmission.num_gears, self.spec.body.mass_kg,
        )

    @property
    def state(self) -> VehicleState:
        """The owned state (mutated by tick)."""
        return self._state

    def initial_state(self) -> VehicleState:
        """State at simulation start: stopped, idling, first gear."""
        return VehicleState(
            speed=0.0,
            engine_rpm=self.engine.idle_rpm,
            current_gear=self.transmission.first_gear,
        )

    def reset(self) -> VehicleStateSnapshot:
        """Reset the owned state to the initial state."""
        self._state = self.initial_state()
        return self._state.snapshot()

    def current_state(self) -> VehicleStateSnapshot:
        """Get a read-only snapshot of the owned state."""
        return self._state.snapshot()

    def tick(self, dt: float, throttle: float, brake: float) -> VehicleStateSnapshot:
        """Advance the owned state by one step.

        Args:
            dt: Elapsed time in seconds
            throttle: Throttle pedal (0.0 to 1.0, clamped)
            brake: Brake pedal (0.0 to 1.0, clamped)

        Returns:
            Snapshot of the updated state
        """
        self.advance(self._state, dt, throttle, brake)
        return self._state.snapshot()

    def get_telemetry(self) -> Dict[str, Any]:
        """Get complete telemetry for the owned state.

        Returns:
            Dictionary containing state, engine, transmission and
            resistance values
        """
        snapshot = self._state.snapshot()
        return {
            "vehicle": self.spec.name,
            "state": snapshot.to_dict(),
            "engine": self.engine.get_state(snapshot.engine_rpm, snapshot.throttle),
            "transmission": self.transmission.get_state(snapshot.current_gear),
            "resistance": self.resistance.get_state(snapshot.speed),
        }

    def clamp_dt(self, dt: float) -> float:
        """Bring a time step into the range the integrator accepts.

        Zero stays zero. Negative or NaN steps become MIN_DT and long
        steps are capped at max_dt.
        """
        if dt == 0.0:
            return 0.0
        if np.isnan(dt) or dt < 0.0:
            return MIN_DT
        return float(min(max(dt, MIN_DT), self.max_dt))

    def drive_force(self, state: VehicleState, throttle: float) -> float:
        """Tractive force in N for the state's speed and gear."""
        unclamped_rpm = self.transmission.unclamped_rpm_for(state.speed, state.current_gear)
        torque = self.engine.drive_torque(unclamped_rpm, throttle)
        return self.transmission.wheel_force(torque, state.current_gear)

    def brake_force(self, speed: float, brake: float, drive_force: float) -> float:
        """Brake force in N opposing motion.

        At standstill the brakes can hold against the drive force but
        never push the vehicle backwards.
        """
        force = self.spec.body.max_brake_force_n * brake
        if speed <= 0.0:
            force = min(force, drive_force)
        return force

    def advance(
        self,
        state: VehicleState,
        dt: float,
        throttle: float,
        brake: float,
    ) -> VehicleState:
        """Advance an explicitly passed state by one step.

        Args:
            state: State to update in place
            dt: Elapsed time in seconds
            throttle: Throttle pedal (0.0 to 1.0, clamped)
            brake: Brake pedal (0.0 to 1.0, clamped)

        Returns:
            The same state object, updated
        """
        throttle = clamp_unit(throttle)
        brake = clamp_unit(brake)
        state.throttle = throttle
        state.brake = brake

        dt = self.clamp_dt(dt)
        if dt == 0.0:
            return state

        speed = state.speed
        gear = state.current_gear

        # Forces
        drive = self.drive_force(state, throttle)
        braking = self.brake_force(speed, brake, drive)
        resisting = self.resistance.resisting_force(speed)
        net_force = drive - braking - resisting

        # Integrate
        acceleration = net_force / self.spec.effective_mass_kg
        new_speed = max(0.0, speed + acceleration * dt)

        # Gear selection on the new speed
        unclamped_rpm = self.transmission.unclamped_rpm_for(new_speed, gear)
        new_gear = self.transmission.decide_shift(
            gear, unclamped_rpm, throttle, moving=new_speed > 0.0
        )
        if new_speed == 0.0:
            # Stopped: next launch starts in first gear
            new_gear = self.transmission.first_gear

        state.speed = new_speed
        state.current_gear = new_gear
        state.engine_rpm = self.transmission.engine_rpm_for(new_speed, new_gear)
        state.acceleration = (new_speed - speed) / dt
        state.drive_force = drive
        state.elapsed += dt
        return state

    def _check_state(self, state: VehicleState) -> None:
        if not self.transmission.is_valid_gear(state.current_gear):
            raise ValueError(
                f"gear {state.current_gear} is not valid for {self.spec.name}"
            )
        if state.speed < 0.0:
            raise ValueError(f"speed must be >= 0, got {state.speed}")
        state.engine_rpm = self.transmission.engine_rpm_for(state.speed, state.current_gear)

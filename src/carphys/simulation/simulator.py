"""
Simulator - Fixed-rate loop around the dynamics integrator.

Provides:
- Fixed time-step ticking from variable frame times
- Exclusive access per tick for multi-threaded hosts
- Real-time or as-fast-as-possible runs from a pedal source
- Step callbacks (telemetry, HUD)
"""

from dataclasses import dataclass
from typing import Callable, List
import logging
import threading
import time

from carphys.car.vehicle import VehicleSpec
from carphys.controls.pedals import PedalSource
from carphys.simulation.integrator import DynamicsIntegrator
from carphys.simulation.state import VehicleStateSnapshot

logger = logging.getLogger(__name__)

StepCallback = Callable[["Simulator", VehicleStateSnapshot], None]


@dataclass
class SimulatorConfig:
    """Simulator configuration."""
    # Time stepping
    fixed_dt: float = 1.0 / 60.0     # Physics time step (60 Hz)
    max_frame_dt: float = 0.25       # Longer frames are truncated
    real_time: bool = False          # Sleep to match wall-clock time in run()

    def __post_init__(self):
        if self.fixed_dt <= 0.0:
            raise ValueError(f"fixed_dt must be positive, got {self.fixed_dt}")
        if self.max_frame_dt < self.fixed_dt:
            raise ValueError(
                f"max_frame_dt ({self.max_frame_dt}) must be >= fixed_dt ({self.fixed_dt})"
            )


class Simulator:
    """Fixed-step simulation of one vehicle.

    Frame times from the host are accumulated and consumed in whole
    fixed_dt ticks; leftover time carries into the next frame. All
    access to the vehicle state goes through one lock, so a renderer
    on another thread only ever sees completed ticks.

    Usage:
        sim = Simulator(CORVETTE_C5)
        while window_open:
            snapshot = sim.advance(frame_time, throttle, brake)
            draw(snapshot)
    """

    def __init__(
        self,
        spec: VehicleSpec | None = None,
        config: SimulatorConfig | None = None,
    ):
        """Initialize simulator.

        Args:
            spec: Vehicle calibration. Uses Corvette C5 defaults if None.
            config: Simulator configuration. Uses defaults if None.
        """
        self.config = config or SimulatorConfig()
        self.integrator = DynamicsIntegrator(spec)

        self._lock = threading.Lock()
        self._accumulator: float = 0.0
        self._ticks: int = 0
        self._running: bool = False

        self._post_step_callbacks: List[StepCallback] = []

    @property
    def spec(self) -> VehicleSpec:
        """Vehicle calibration."""
        return self.integrator.spec

    @property
    def time(self) -> float:
        """Simulated time in seconds."""
        with self._lock:
            return self.integrator.state.elapsed

    @property
    def ticks(self) -> int:
        """Number of fixed steps taken."""
        with self._lock:
            return self._ticks

    @property
    def alpha(self) -> float:
        """Fraction of a tick left in the accumulator (for render interpolation)."""
        with self._lock:
            return self._accumulator / self.config.fixed_dt

    @property
    def is_running(self) -> bool:
        """Check if run() is in progress."""
        return self._running

    def add_post_step_callback(self, callback: StepCallback) -> None:
        """Add callback called after each fixed step.

        Args:
            callback: Function taking (simulator, snapshot) arguments
        """
        self._post_step_callbacks.append(callback)

    def current_state(self) -> VehicleStateSnapshot:
        """Get a snapshot of the vehicle state."""
        with self._lock:
            return self.integrator.current_state()

    def get_telemetry(self) -> dict:
        """Get integrator telemetry for the current state."""
        with self._lock:
            return self.integrator.get_telemetry()

    def step(
        self,
        throttle: float,
        brake: float,
        dt: float | None = None,
    ) -> VehicleStateSnapshot:
        """Advance by exactly one tick.

        Args:
            throttle: Throttle pedal (0.0 to 1.0)
            brake: Brake pedal (0.0 to 1.0)
            dt: Time step (uses fixed_dt if None)

        Returns:
            Snapshot after the tick
        """
        dt = self.config.fixed_dt if dt is None else dt
        with self._lock:
            snapshot = self.integrator.tick(dt, throttle, brake)
            self._ticks += 1
        self._notify(snapshot)
        return snapshot

    def advance(self, frame_dt: float, throttle: float, brake: float) -> VehicleStateSnapshot:
        """Consume one frame of wall-clock time in fixed ticks.

        Args:
            frame_dt: Time since the previous frame in seconds
            throttle: Throttle pedal for this frame (0.0 to 1.0)
            brake: Brake pedal for this frame (0.0 to 1.0)

        Returns:
            Snapshot after the last tick (or the current state if the
            frame was too short to complete one)
        """
        if not frame_dt > 0.0:
            frame_dt = 0.0
        if frame_dt > self.config.max_frame_dt:
            logger.debug("Frame of %.3fs truncated to %.3fs", frame_dt, self.config.max_frame_dt)
            frame_dt = self.config.max_frame_dt

        snapshots = []
        with self._lock:
            self._accumulator += frame_dt
            while self._accumulator >= self.config.fixed_dt:
                snapshots.append(
                    self.integrator.tick(self.config.fixed_dt, throttle, brake)
                )
                self._accumulator -= self.config.fixed_dt
                self._ticks += 1
            if not snapshots:
                # Keep the displayed pedals current
                snapshot = self.integrator.tick(0.0, throttle, brake)
            else:
                snapshot = snapshots[-1]

        for tick_snapshot in snapshots:
            self._notify(tick_snapshot)
        return snapshot

    def run(
        self,
        duration: float,
        source: PedalSource,
        frame_dt: float | None = None,
    ) -> VehicleStateSnapshot:
        """Run the simulation for a span of simulated time.

        Args:
            duration: Simulated seconds to run
            source: Pedal source sampled once per frame
            frame_dt: Frame length (uses fixed_dt if None)

        Returns:
            Final snapshot
        """
        frame_dt = frame_dt or self.config.fixed_dt
        frames = int(round(duration / frame_dt))

        logger.info(
            "Running %s for %.1fs (%d frames of %.4fs)",
            self.spec.name, duration, frames, frame_dt,
        )

        self._running = True
        last_real_time = time.time()
        snapshot = self.current_state()
        try:
            for _ in range(frames):
                if not self._running:
                    break
                pedals = source.sample(frame_dt)
                snapshot = self.advance(frame_dt, pedals.throttle, pedals.brake)

                if self.config.real_time:
                    elapsed = time.time() - last_real_time
                    if elapsed < frame_dt:
                        time.sleep(frame_dt - elapsed)
                    last_real_time = time.time()
        finally:
            self._running = False

        logger.info("Finished at %s", snapshot.format_dashboard())
        return snapshot

    def stop(self) -> None:
        """Stop a run() in progress after the current frame."""
        self._running = False

    def reset(self) -> VehicleStateSnapshot:
        """Reset the vehicle to rest and clear the accumulator."""
        with self._lock:
            self._accumulator = 0.0
            self._ticks = 0
            return self.integrator.reset()

    def _notify(self, snapshot: VehicleStateSnapshot) -> None:
        for callback in self._post_step_callbacks:
            callback(self, snapshot)

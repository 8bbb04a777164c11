"""Integration tests for longitudinal vehicle dynamics."""

import dataclasses

import pytest

from carphys.config import MIN_DT, MAX_DT
from carphys.car.engine import EngineSpec
from carphys.car.transmission import TransmissionSpec
from carphys.car.vehicle import VehicleSpec, CORVETTE_C5
from carphys.simulation.integrator import DynamicsIntegrator
from carphys.simulation.state import VehicleState


def _cruising(speed: float = 30.0, gear: int = 3) -> DynamicsIntegrator:
    return DynamicsIntegrator(
        CORVETTE_C5, state=VehicleState(speed=speed, current_gear=gear)
    )


class TestIntegratorBasics:
    """Test integrator setup and input handling."""

    def test_initial_state(self):
        """Test vehicle starts at rest, idling, in first gear."""
        sim = DynamicsIntegrator(CORVETTE_C5)
        state = sim.current_state()

        assert state.speed == 0.0
        assert state.engine_rpm == CORVETTE_C5.engine.idle_rpm
        assert state.current_gear == 0
        assert state.throttle == 0.0
        assert state.brake == 0.0

    def test_snapshot_is_read_only(self):
        """Test snapshots cannot be modified."""
        snapshot = DynamicsIntegrator().current_state()

        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.speed = 10.0

    def test_pedals_clamped(self):
        """Test out-of-range pedal values are clamped."""
        sim = DynamicsIntegrator()

        state = sim.tick(0.016, 2.0, -1.0)
        assert state.throttle == 1.0
        assert state.brake == 0.0

        state = sim.tick(0.016, float("nan"), 0.5)
        assert state.throttle == 0.0
        assert state.brake == 0.5

    def test_negative_dt_floored(self):
        """Test negative time step integrates the minimum step."""
        sim = DynamicsIntegrator()

        state = sim.tick(-1.0, 1.0, 0.0)
        assert state.elapsed == pytest.approx(MIN_DT)
        assert state.speed > 0.0

    def test_long_dt_capped(self):
        """Test long time steps are capped."""
        sim = DynamicsIntegrator()

        state = sim.tick(5.0, 1.0, 0.0)
        assert state.elapsed == pytest.approx(MAX_DT)

    def test_zero_dt_only_updates_pedals(self):
        """Test a zero-length tick leaves motion state untouched."""
        sim = DynamicsIntegrator(CORVETTE_C5)
        for _ in range(200):
            sim.tick(0.016, 1.0, 0.0)
        before = sim.current_state()

        after = sim.tick(0.0, 0.3, 0.7)

        assert after.speed == before.speed
        assert after.engine_rpm == before.engine_rpm
        assert after.current_gear == before.current_gear
        assert after.throttle == 0.3
        assert after.brake == 0.7

    def test_invalid_initial_gear(self):
        """Test initial state with a gear outside the table is rejected."""
        with pytest.raises(ValueError):
            DynamicsIntegrator(CORVETTE_C5, state=VehicleState(current_gear=6))

    def test_initial_rpm_follows_speed(self):
        """Test a supplied state gets a consistent RPM."""
        sim = _cruising(speed=20.0, gear=1)

        expected = sim.transmission.engine_rpm_for(20.0, 1)
        assert sim.current_state().engine_rpm == pytest.approx(expected)

    def test_reset(self):
        """Test reset returns the vehicle to rest."""
        sim = DynamicsIntegrator()
        for _ in range(100):
            sim.tick(0.016, 1.0, 0.0)

        state = sim.reset()
        assert state.speed == 0.0
        assert state.current_gear == 0
        assert state.elapsed == 0.0

    def test_telemetry(self):
        """Test telemetry combines state and component values."""
        sim = _cruising(speed=20.0, gear=2)
        sim.tick(0.016, 0.5, 0.0)

        telemetry = sim.get_telemetry()
        state = sim.current_state()

        assert telemetry["vehicle"] == CORVETTE_C5.name
        assert telemetry["state"]["speed_mps"] == state.speed
        assert telemetry["state"]["gear"] == state.gear_number
        assert telemetry["engine"]["rpm"] == state.engine_rpm
        assert telemetry["transmission"]["gear"] == state.current_gear
        assert telemetry["transmission"]["gear_ratio"] == 1.30
        assert telemetry["resistance"]["resisting_force_n"] == pytest.approx(
            sim.resistance.resisting_force(state.speed)
        )


class TestIntegratorProperties:
    """Test invariants that hold on every tick."""

    def test_coasting_never_speeds_up(self):
        """Test speed is non-increasing with both pedals released."""
        sim = _cruising(speed=50.0, gear=4)

        previous = sim.current_state().speed
        for _ in range(2000):
            state = sim.tick(0.016, 0.0, 0.0)
            assert state.speed <= previous
            previous = state.speed

    def test_speed_never_negative(self):
        """Test hard braking with long steps never reverses the vehicle."""
        sim = _cruising(speed=1.0, gear=0)

        for _ in range(20):
            state = sim.tick(0.1, 0.0, 1.0)
            assert state.speed >= 0.0

    def test_rpm_within_limits(self):
        """Test RPM stays between idle and redline."""
        sim = DynamicsIntegrator(CORVETTE_C5)
        engine = CORVETTE_C5.engine

        for step in range(3000):
            throttle, brake = (1.0, 0.0) if step < 2000 else (0.0, 1.0)
            state = sim.tick(0.016, throttle, brake)
            assert engine.idle_rpm <= state.engine_rpm <= engine.redline_rpm
            assert sim.transmission.is_valid_gear(state.current_gear)

    def test_first_order_in_dt(self):
        """Test speed change scales linearly with small time steps."""
        deltas = []
        for dt in (0.001, 0.002, 0.004):
            sim = _cruising(speed=20.0, gear=2)
            state = sim.tick(dt, 0.6, 0.0)
            deltas.append(abs(state.speed - 20.0))

        assert deltas[0] > 0.0
        assert deltas[1] == pytest.approx(2.0 * deltas[0], rel=1e-6)
        assert deltas[2] == pytest.approx(4.0 * deltas[0], rel=1e-6)

    def test_rotating_mass_slows_acceleration(self):
        """Test inertia mass factor reduces acceleration."""
        heavy_spec = dataclasses.replace(
            CORVETTE_C5, engine=EngineSpec(inertia_mass_factor=1.0)
        )
        light = DynamicsIntegrator(CORVETTE_C5).tick(0.016, 1.0, 0.0)
        heavy = DynamicsIntegrator(heavy_spec).tick(0.016, 1.0, 0.0)

        assert heavy.speed == pytest.approx(light.speed / 2.0)

    def test_independent_states(self):
        """Test one integrator can advance several separate vehicles."""
        sim = DynamicsIntegrator(CORVETTE_C5)
        fast = VehicleState(engine_rpm=1000.0)
        slow = VehicleState(engine_rpm=1000.0)

        for _ in range(100):
            sim.advance(fast, 0.016, 1.0, 0.0)
            sim.advance(slow, 0.016, 0.2, 0.0)

        assert fast.speed > slow.speed > 0.0
        assert sim.current_state().speed == 0.0


class TestScenarios:
    """Test full driving scenarios."""

    def test_full_throttle_from_rest(self):
        """Test steady acceleration with upshifts exactly at the shift point."""
        sim = DynamicsIntegrator(CORVETTE_C5)
        trans = sim.transmission
        upshift_rpm = CORVETTE_C5.transmission.upshift_rpm

        previous = sim.current_state()
        upshifts = 0
        for _ in range(600):
            state = sim.tick(0.016, 1.0, 0.0)
            assert state.speed > previous.speed

            old_gear = previous.current_gear
            rpm_before = trans.unclamped_rpm_for(previous.speed, old_gear)
            rpm_after = trans.unclamped_rpm_for(state.speed, old_gear)
            if state.current_gear != old_gear:
                assert state.current_gear == old_gear + 1
                assert rpm_before < upshift_rpm <= rpm_after
                upshifts += 1
            else:
                assert rpm_after < upshift_rpm
            previous = state

        assert upshifts >= 2

    def test_reaches_terminal_velocity(self):
        """Test speed settles where drive force balances resistance."""
        sim = DynamicsIntegrator(CORVETTE_C5)

        for _ in range(4000):
            state = sim.tick(0.05, 1.0, 0.0)

        assert state.current_gear == sim.transmission.top_gear
        assert abs(state.acceleration) < 0.05
        resisting = sim.resistance.resisting_force(state.speed)
        assert state.drive_force == pytest.approx(resisting, rel=0.01)

    def test_braking_to_stop(self):
        """Test full braking stops the vehicle and keeps it stopped."""
        sim = _cruising(speed=30.0, gear=3)

        speeds = [sim.tick(0.016, 0.0, 1.0).speed for _ in range(400)]

        assert 0.0 in speeds
        stop_index = speeds.index(0.0)
        assert stop_index < 300
        assert all(speed == 0.0 for speed in speeds[stop_index:])
        assert all(a >= b for a, b in zip(speeds, speeds[1:]))

    def test_downshifts_while_braking(self):
        """Test gears step down one at a time while slowing."""
        sim = _cruising(speed=45.0, gear=4)

        gears = [sim.tick(0.016, 0.0, 1.0).current_gear for _ in range(400)]

        assert gears[-1] < 4
        assert all(a - b in (0, 1) for a, b in zip(gears, gears[1:]))

    def test_brake_holds_at_standstill(self):
        """Test full brake holds the vehicle against full throttle."""
        sim = DynamicsIntegrator(CORVETTE_C5)

        for _ in range(100):
            state = sim.tick(0.016, 1.0, 1.0)

        assert state.speed == 0.0

    def test_coasting_stops_eventually(self):
        """Test resistance alone brings the vehicle to rest."""
        sim = _cruising(speed=5.0, gear=0)

        for _ in range(3000):
            state = sim.tick(0.016, 0.0, 0.0)

        assert state.speed == 0.0

    def test_upshift_point_above_redline(self):
        """Test a shift point past redline is still reached under power."""
        spec = VehicleSpec(transmission=TransmissionSpec(upshift_rpm=6000.0))
        sim = DynamicsIntegrator(spec)
        trans = sim.transmission

        previous = sim.current_state()
        upshifts = 0
        for step in range(1500):
            state = sim.tick(0.016, 1.0, 0.0)
            if step < 600:
                assert state.speed > previous.speed
            assert state.engine_rpm <= spec.engine.redline_rpm

            if state.current_gear != previous.current_gear:
                rpm_after = trans.unclamped_rpm_for(state.speed, previous.current_gear)
                assert rpm_after >= 6000.0
                upshifts += 1
            previous = state

        assert state.current_gear > 0
        assert upshifts >= 2

    def test_stop_selects_first_gear(self):
        """Test stopping in a high gear drops straight to first gear."""
        sim = DynamicsIntegrator(
            CORVETTE_C5, state=VehicleState(speed=0.5, current_gear=4)
        )

        state = sim.tick(0.1, 0.0, 1.0)
        assert state.speed == 0.0
        assert state.current_gear == 0

        state = sim.tick(0.016, 1.0, 0.0)
        assert state.speed > 0.0
        assert state.current_gear == 0

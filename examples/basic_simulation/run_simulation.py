#!/usr/bin/env python3
"""
Basic Simulation Example

This example demonstrates how to:
1. Create a simulator for the Corvette C5 preset
2. Drive it with a scripted pedal sequence
3. Print a dashboard readout as a presentation layer would
4. Inspect recorded telemetry

Run with: python run_simulation.py
"""

import logging

from carphys import Simulator, CORVETTE_C5
from carphys.controls import PedalInput, ScriptedPedalSource
from carphys.telemetry import TelemetryRecorder


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    print("=" * 60)
    print("carphys Basic Simulation Example")
    print("=" * 60)

    # Step 1: Create simulator and recorder
    print("\n1. Setting up simulation...")
    sim = Simulator(CORVETTE_C5)
    recorder = TelemetryRecorder()
    sim.add_post_step_callback(recorder.on_step)
    print(f"   Vehicle: {sim.spec.name}")
    print(f"   Gears: {sim.spec.transmission.num_gears}")
    print(f"   Mass: {sim.spec.body.mass_kg:.0f} kg")

    # Step 2: Full throttle, coast, then brake to a stop
    source = ScriptedPedalSource([
        (12.0, PedalInput(throttle=1.0)),
        (3.0, PedalInput()),
        (8.0, PedalInput(brake=1.0)),
    ])

    print("\n2. Running scripted drive...")
    frame_dt = 1.0 / 60.0
    frames = int(round(source.duration / frame_dt))
    for frame in range(frames):
        pedals = source.sample(frame_dt)
        snapshot = sim.advance(frame_dt, pedals.throttle, pedals.brake)

        # Print status every second
        if (frame + 1) % 60 == 0:
            print(f"   t={snapshot.elapsed:5.1f}s  {snapshot.format_dashboard()}")

    telemetry = sim.get_telemetry()
    print(f"   Final gear ratio: {telemetry['transmission']['total_ratio']:.2f}")
    print(f"   Final resisting force: {telemetry['resistance']['resisting_force_n']:.0f} N")

    # Step 3: Telemetry summary
    print("\n3. Telemetry summary:")
    speed = recorder.get_channel("speed_kph")
    rpm = recorder.get_channel("rpm")
    print(f"   Top speed: {speed.highest:.1f} km/h")
    print(f"   Max RPM: {rpm.highest:.0f}")
    for time, from_gear, to_gear in recorder.gear_changes:
        print(f"   {time:6.2f}s  gear {from_gear} -> {to_gear}")

    print("\n" + "=" * 60)
    print("Simulation complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()

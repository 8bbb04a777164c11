"""
Vehicle - Complete calibration for one simulated vehicle.

Bundles the engine, gearbox and body specs and builds the models
the integrator queries each tick.
"""

from dataclasses import dataclass, field

from carphys.car.engine import EngineSpec, EngineModel
from carphys.car.transmission import TransmissionSpec, Transmission
from carphys.car.resistance import VehicleBodySpec, ResistanceModel


@dataclass(frozen=True)
class VehicleSpec:
    """Complete vehicle calibration.

    Each part validates itself on construction, so holding a
    VehicleSpec means the vehicle can be simulated.
    """
    name: str = "vehicle"
    engine: EngineSpec = field(default_factory=EngineSpec)
    transmission: TransmissionSpec = field(default_factory=TransmissionSpec)
    body: VehicleBodySpec = field(default_factory=VehicleBodySpec)

    @property
    def effective_mass_kg(self) -> float:
        """Body mass plus rotating-mass allowance."""
        return self.body.mass_kg * (1.0 + self.engine.inertia_mass_factor)

    def build_models(self) -> tuple[EngineModel, Transmission, ResistanceModel]:
        """Create the engine, transmission and resistance models."""
        engine = EngineModel(self.engine)
        return engine, Transmission(self.transmission, engine), ResistanceModel(self.body)


# Corvette C5 figures, from the "Car Physics for Games" tutorial
CORVETTE_C5 = VehicleSpec(
    name="Corvette C5",
    engine=EngineSpec(),
    transmission=TransmissionSpec(transmission_efficiency=0.7),
    body=VehicleBodySpec(),
)

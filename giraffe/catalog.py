from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal

from giraffe import typedefs as t


PriceBand = Literal["all", "low", "medium", "high"]


@dataclass(frozen=True)
class VehicleRate:
    """A rate shown to customers for one vehicle class.

    Exactly one of ``fixed_price`` and ``rate_per_km`` is set.
    """

    vehicle: str
    fixed_price: int | None = None
    rate_per_km: int | None = None

    def __post_init__(self) -> None:
        if (self.fixed_price is None) == (self.rate_per_km is None):
            raise ValueError(f"{self.vehicle}: set exactly one of fixed_price and rate_per_km")

    @property
    def display(self) -> str:
        if self.fixed_price is not None:
            return f"Fixed LKR {self.fixed_price:,}"
        return f"LKR {self.rate_per_km}/km"


@dataclass(frozen=True)
class VehicleTypeOption:
    value: str
    label: str
    price_adjustment: int = 0


@dataclass(frozen=True)
class ServiceDefinition:
    id: t.ServiceType
    name: str
    description: str
    base_price: int
    vehicle_rates: tuple[VehicleRate, ...]
    vehicle_types: tuple[VehicleTypeOption, ...]

    def vehicle_type(self, value: str | None) -> VehicleTypeOption | None:
        return next((v for v in self.vehicle_types if v.value == value), None)


WEDDING = ServiceDefinition(
    id="wedding",
    name="Wedding Service",
    description="Elegant wedding transportation with decoration and flower arrangements",
    base_price=25000,
    vehicle_rates=(
        VehicleRate("Luxury Car", fixed_price=25000),
        VehicleRate("Premium Car", fixed_price=23000),
        VehicleRate("Standard Car", fixed_price=20000),
    ),
    vehicle_types=(
        VehicleTypeOption("luxury", "Luxury Car (Audi, BMW, Benz)"),
        VehicleTypeOption("premium", "Premium Car (Premio, Allion)", -2000),
    ),
)

AIRPORT = ServiceDefinition(
    id="airport",
    name="Airport Transfer",
    description="Reliable airport pickup and drop-off service",
    base_price=2000,
    vehicle_rates=(
        VehicleRate("Van", rate_per_km=120),
        VehicleRate("Car", rate_per_km=100),
    ),
    vehicle_types=(
        VehicleTypeOption("van", "Van (8 passengers)"),
        VehicleTypeOption("car", "Car (4 passengers)"),
    ),
)

CARGO = ServiceDefinition(
    id="cargo",
    name="Cargo Transport",
    description="Safe and secure cargo transportation service",
    base_price=1500,
    vehicle_rates=(VehicleRate("All Vehicles", rate_per_km=150),),
    vehicle_types=(
        VehicleTypeOption("van", "Van"),
        VehicleTypeOption("lorry", "Lorry"),
    ),
)

DAILY = ServiceDefinition(
    id="daily",
    name="Daily Rental",
    description="Flexible daily vehicle rental service",
    base_price=3000,
    vehicle_rates=(
        VehicleRate("Van", rate_per_km=120),
        VehicleRate("Car", rate_per_km=90),
        VehicleRate("Bike", rate_per_km=50),
    ),
    vehicle_types=(
        VehicleTypeOption("bike", "Bike (Motorcycle)"),
        VehicleTypeOption("economy", "Economy Car (Wagon R, Alto)"),
        VehicleTypeOption("comfort", "Comfort Car (Axio, Prius)"),
        VehicleTypeOption("luxury", "Luxury Car (Premio, Allion)"),
        VehicleTypeOption("van", "Van (8 passengers)"),
    ),
)

SERVICES: Mapping[str, ServiceDefinition] = MappingProxyType({s.id: s for s in (WEDDING, AIRPORT, CARGO, DAILY)})


def get_service(service_type: str | None) -> ServiceDefinition | None:
    if not service_type:
        return None
    return SERVICES.get(service_type)


def _in_band(price: int, band: PriceBand) -> bool:
    if band == "low":
        return price <= 2000
    if band == "medium":
        return 2000 < price <= 5000
    if band == "high":
        return price > 5000
    return True


def filter_services(
    search: str = "",
    price_band: PriceBand = "all",
    services: Iterable[ServiceDefinition] | None = None
) -> list[ServiceDefinition]:
    """Services whose name or description contains ``search`` and whose base price is in ``price_band``."""
    needle = search.lower()
    candidates = SERVICES.values() if services is None else services
    return [s for s in candidates
            if (needle in s.name.lower() or needle in s.description.lower()) and _in_band(s.base_price, price_band)]

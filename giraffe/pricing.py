"""Estimated booking prices in LKR.

The estimate is shown to the customer while they fill in the form. Staff set
the final price once they have verified the distance.
"""
from collections.abc import Mapping
from types import MappingProxyType

from giraffe.catalog import get_service


CARGO_RATE_PER_KM = 120
DEFAULT_DAILY_RATE_PER_KM = 90
DAILY_RATES_PER_KM: Mapping[str, int] = MappingProxyType({
    "bike": 50,
    "economy": 90,
    "comfort": 120,
    "luxury": 150,
    "van": 120,
})

# Wedding vehicle types carry a price adjustment in the catalog but the
# estimate is the flat base price whichever vehicle is chosen.
FLAT_PRICED = frozenset({"wedding", "airport"})


def daily_rate(vehicle_type: str | None) -> int:
    if vehicle_type is None:
        return DEFAULT_DAILY_RATE_PER_KM
    return DAILY_RATES_PER_KM.get(vehicle_type, DEFAULT_DAILY_RATE_PER_KM)


def calculate_price(service_type: str | None, distance_km: float, vehicle_type: str | None = None) -> float:
    """Estimate the total price for a booking.

    Wedding and airport services are flat priced regardless of distance.
    Everything else is 0 until a positive distance is known.
    """
    service = get_service(service_type)
    if service is None:
        return 0

    if service.id in FLAT_PRICED:
        return service.base_price

    if not distance_km or distance_km <= 0:
        return 0

    if service.id == "cargo":
        return distance_km * CARGO_RATE_PER_KM
    if service.id == "daily":
        return distance_km * daily_rate(vehicle_type)
    return service.base_price

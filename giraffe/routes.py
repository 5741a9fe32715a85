"""Advisory distance estimates between known Sri Lankan locations.

Figures are for display only. Staff confirm the real distance and price after
a booking is submitted.
"""
import re
from collections.abc import Mapping
from types import MappingProxyType


ROUTES: Mapping[str, int] = MappingProxyType({
    "colombo-kandy": 115, "colombo-malabe": 15, "colombo-negombo": 35,
    "colombo-gampaha": 25, "colombo-kelaniya": 12, "colombo-kaduwela": 18,
    "colombo-avissawella": 45, "colombo-katunayake": 30, "colombo-bandaranaike": 30,
    "colombo-mount-lavinia": 8, "colombo-dehiwala": 10, "colombo-moratuwa": 15,
    "colombo-panadura": 25, "colombo-kalutara": 45, "colombo-galle": 115,
    "colombo-matara": 160, "colombo-anuradhapura": 200, "colombo-jaffna": 400,
    "colombo-trincomalee": 250, "colombo-batticaloa": 300, "colombo-kurunegala": 100,
    "colombo-kegalle": 80, "colombo-ratnapura": 100, "colombo-badulla": 200,
    "colombo-nuwara-eliya": 180, "kandy-malabe": 100, "kandy-negombo": 80,
    "kandy-gampaha": 90, "kandy-anuradhapura": 150, "kandy-jaffna": 350,
    "malabe-negombo": 20, "malabe-gampaha": 10, "malabe-kelaniya": 3,
    "malabe-kaduwela": 3, "malabe-avissawella": 30, "malabe-anuradhapura": 185,
    "negombo-anuradhapura": 170, "gampaha-anuradhapura": 175,
})

# Iteration order matters: the first hub giving a complete route wins.
HUBS = ("colombo", "kandy", "malabe", "negombo", "gampaha")

_WHITESPACE = re.compile(r"\s+")
_NOT_SLUG = re.compile(r"[^a-z-]")


def normalize_location(location: str) -> str:
    return _NOT_SLUG.sub("", _WHITESPACE.sub("-", location.lower()))


def _leg(origin: str, destination: str) -> int:
    return ROUTES.get(f"{origin}-{destination}") or ROUTES.get(f"{destination}-{origin}") or 0


def estimate_distance(pickup: str | None, dropoff: str | None) -> int:
    """Estimate the road distance in kilometres between two locations.

    Returns 0 when either location is empty or no route is known. Routes are
    looked up in both directions, then through each hub city in turn.
    """
    if not pickup or not dropoff:
        return 0

    origin = normalize_location(pickup)
    destination = normalize_location(dropoff)
    if origin == destination:
        return 0

    direct = _leg(origin, destination)
    if direct:
        return direct

    for hub in HUBS:
        first = _leg(origin, hub)
        second = _leg(hub, destination)
        if first and second:
            return first + second
    return 0

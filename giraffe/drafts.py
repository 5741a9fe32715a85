from dataclasses import dataclass, field
from datetime import date, time
from typing import ClassVar

from giraffe import typedefs as t
from giraffe.pricing import calculate_price


DateInput = date | str | None
TimeInput = time | str | None


def iso_value(value: date | time | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, date):
        return value.isoformat()
    return value


@dataclass
class WeddingDetails:
    service_type: ClassVar[t.ServiceType] = "wedding"

    vehicle_type: str | None = None
    days: int | None = None

    def to_payload(self) -> t.ServiceDetailsPayload:
        payload: t.ServiceDetailsPayload = {}
        if self.vehicle_type:
            payload["vehicleType"] = self.vehicle_type
        if self.days is not None:
            payload["days"] = self.days
        return payload


@dataclass
class AirportDetails:
    service_type: ClassVar[t.ServiceType] = "airport"

    vehicle_type: str | None = None
    flight_time: TimeInput = None

    def to_payload(self) -> t.ServiceDetailsPayload:
        payload: t.ServiceDetailsPayload = {}
        if self.vehicle_type:
            payload["vehicleType"] = self.vehicle_type
        if self.flight_time:
            payload["flightTime"] = t.TimeString(iso_value(self.flight_time))
        return payload


@dataclass
class CargoDetails:
    service_type: ClassVar[t.ServiceType] = "cargo"

    vehicle_type: str | None = None
    cargo_weight: int | None = None

    def to_payload(self) -> t.ServiceDetailsPayload:
        payload: t.ServiceDetailsPayload = {}
        if self.vehicle_type:
            payload["vehicleType"] = self.vehicle_type
        if self.cargo_weight is not None:
            payload["cargoWeight"] = self.cargo_weight
        return payload


@dataclass
class DailyDetails:
    service_type: ClassVar[t.ServiceType] = "daily"

    vehicle_type: str | None = None
    hours: int | None = None

    def to_payload(self) -> t.ServiceDetailsPayload:
        payload: t.ServiceDetailsPayload = {}
        if self.vehicle_type:
            payload["vehicleType"] = self.vehicle_type
        if self.hours is not None:
            payload["hours"] = self.hours
        return payload


ServiceDetails = WeddingDetails | AirportDetails | CargoDetails | DailyDetails

DETAILS_BY_SERVICE: dict[str, type[ServiceDetails]] = {
    d.service_type: d for d in (WeddingDetails, AirportDetails, CargoDetails, DailyDetails)
}


def details_for(service_type: str) -> ServiceDetails:
    """Empty details for ``service_type``."""
    try:
        return DETAILS_BY_SERVICE[service_type]()
    except KeyError:
        raise ValueError(f"Unknown service type: {service_type!r}") from None


@dataclass
class BookingDraft:
    """Booking form state as the customer edits it.

    ``total_price`` is derived. Call :meth:`refresh_price` after changing the
    service, the distance or the vehicle type.
    """

    service_details: ServiceDetails | None = None
    pickup_location: str = ""
    dropoff_location: str = ""
    pickup_date: DateInput = None
    pickup_time: TimeInput = None
    return_date: DateInput = None
    return_time: TimeInput = None
    passengers: int | None = 1
    distance: float = 0
    additional_notes: str = ""
    _total_price: float = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self.distance = max(0, self.distance or 0)
        self.refresh_price()

    @property
    def service_type(self) -> t.ServiceType | None:
        return None if self.service_details is None else self.service_details.service_type

    @property
    def vehicle_type(self) -> str | None:
        return None if self.service_details is None else self.service_details.vehicle_type

    @property
    def total_price(self) -> float:
        return self._total_price

    def refresh_price(self) -> float:
        self._total_price = calculate_price(self.service_type, self.distance, self.vehicle_type)
        return self._total_price

    def to_payload(self, status: t.BookingStatus = "pending") -> t.BookingPayload:
        payload: t.BookingPayload = {
            "serviceType": self.service_type,  # type: ignore[typeddict-item]
            "pickupLocation": self.pickup_location.strip(),
            "dropoffLocation": self.dropoff_location.strip(),
            "pickupDate": t.DateString(iso_value(self.pickup_date)),
            "pickupTime": t.TimeString(iso_value(self.pickup_time)),
            "passengers": self.passengers or 0,
            "distance": self.distance,
            "totalPrice": self._total_price,
            "additionalNotes": self.additional_notes,
            "serviceDetails": {} if self.service_details is None else self.service_details.to_payload(),
            "status": status,
        }
        if self.return_date:
            payload["returnDate"] = t.DateString(iso_value(self.return_date))
        if self.return_time:
            payload["returnTime"] = t.TimeString(iso_value(self.return_time))
        return payload


@dataclass
class RentalDraft:
    vehicle_id: t.VehicleId | None = None
    rental_type: t.RentalType | None = None
    start_date: DateInput = None
    end_date: DateInput = None
    duration: int | None = None
    purpose: str = ""
    special_requirements: str = ""

    def to_payload(self) -> t.RentalPayload:
        return {
            "vehicleId": self.vehicle_id,  # type: ignore[typeddict-item]
            "rentalType": self.rental_type,  # type: ignore[typeddict-item]
            "startDate": t.DateString(iso_value(self.start_date)),
            "endDate": t.DateString(iso_value(self.end_date)),
            "duration": self.duration or 0,
            "purpose": self.purpose.strip(),
            "specialRequirements": self.special_requirements,
        }

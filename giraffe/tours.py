"""Tour package browsing and the tour booking form."""
from collections.abc import Iterable
from dataclasses import dataclass, field

from giraffe import typedefs as t
from giraffe.drafts import DateInput, iso_value


DEFAULT_MAX_PASSENGERS = 20


@dataclass(frozen=True)
class TourFilters:
    """Package filters. Unset fields match every package."""

    category: t.TourCategory | None = None
    tour_type: t.TourType | None = None
    destination: str = ""
    min_price: float | None = None
    max_price: float | None = None
    days: int | None = None

    def matches(self, package: t.TourPackage) -> bool:
        if self.category and package["tourCategory"] != self.category:
            return False
        if self.tour_type and package["tourType"] != self.tour_type:
            return False
        if self.destination and self.destination.lower() not in package["destination"].lower():
            return False
        if self.min_price is not None and package["pricePerPerson"] < self.min_price:
            return False
        if self.max_price is not None and package["pricePerPerson"] > self.max_price:
            return False
        if self.days is not None and package["tourDays"] != self.days:
            return False
        return True


def filter_tour_packages(packages: Iterable[t.TourPackage], filters: TourFilters) -> list[t.TourPackage]:
    return [p for p in packages if filters.matches(p)]


def blank_passenger() -> t.TourPassenger:
    return {"firstName": "", "lastName": "", "age": 0}


@dataclass
class TourBookingDraft:
    """Tour booking form state for one package.

    ``passengers`` always holds ``number_of_passengers`` entries. Use
    :meth:`set_passenger_count` to change the count.
    """

    package: t.TourPackage
    booking_date: DateInput = None
    number_of_passengers: int = 1
    passengers: list[t.TourPassenger] = field(default_factory=lambda: [blank_passenger()])
    contact_person: t.ContactPerson = field(default_factory=lambda: {"name": "", "email": "", "phone": ""})
    payment_method: t.TourPaymentMethod = "full_upfront"
    special_requests: str = ""
    dietary_requirements: list[str] = field(default_factory=list)
    accessibility_needs: list[str] = field(default_factory=list)

    def set_passenger_count(self, count: int) -> int:
        """Clamp ``count`` to 1..maxPassengers and resize ``passengers``, keeping those already entered."""
        limit = self.package.get("maxPassengers") or DEFAULT_MAX_PASSENGERS
        self.number_of_passengers = max(1, min(limit, count))
        kept = self.passengers[:self.number_of_passengers]
        self.passengers = kept + [blank_passenger() for _ in range(self.number_of_passengers - len(kept))]
        return self.number_of_passengers

    @property
    def estimated_price(self) -> float:
        return self.number_of_passengers * self.package["pricePerPerson"] * self.package["tourDays"]

    def to_payload(self) -> t.TourBookingPayload:
        return {
            "tourPackageId": self.package["_id"],
            "bookingDate": t.DateString(iso_value(self.booking_date)),
            "numberOfPassengers": self.number_of_passengers,
            "passengers": self.passengers[:self.number_of_passengers],
            "contactPerson": self.contact_person,
            "paymentMethod": self.payment_method,
            "specialRequests": self.special_requests,
            "dietaryRequirements": self.dietary_requirements,
            "accessibilityNeeds": self.accessibility_needs,
        }

from collections.abc import Callable, Iterable
from datetime import date, datetime, time
from typing import Any, Generic, TypeVar

from giraffe import typedefs as t
from giraffe.drafts import BookingDraft, RentalDraft


_T = TypeVar("_T")

Rule = Callable[[_T, datetime], str | None]

MIN_LOCATION_LENGTH = 3
MAX_PASSENGERS = 50
MAX_NOTES_LENGTH = 500
MIN_PURPOSE_LENGTH = 10
MAX_RENTAL_DAYS = 730


class Validator(Generic[_T]):
    """Runs every field rule against a draft and collects the failures.

    Each rule returns a message or ``None``. All rules run on every call, and
    the clock is read once so that every rule sees the same "now".
    """

    def __init__(self, rules: Iterable[tuple[str, Rule[_T]]]):
        self._rules = tuple(rules)

    def __call__(self, draft: _T, now: datetime | None = None) -> t.ValidationErrorSet:
        if now is None:
            now = datetime.now()
        errors: t.ValidationErrorSet = {}
        for field, rule in self._rules:
            message = rule(draft, now)
            if message:
                errors[field] = message
        return errors


def parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def parse_time(value: Any) -> time | None:
    if isinstance(value, time):
        return value.replace(tzinfo=None)
    if isinstance(value, str) and value.strip():
        try:
            return time.fromisoformat(value.strip()).replace(tzinfo=None)
        except ValueError:
            return None
    return None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _too_short(value: Any, minimum: int) -> bool:
    return not isinstance(value, str) or len(value.strip()) < minimum


def _too_long(value: Any, maximum: int) -> bool:
    return isinstance(value, str) and len(value) > maximum


def _required(message: str, getter: Callable[[Any], Any]) -> Rule[Any]:
    def rule(draft: Any, now: datetime) -> str | None:
        return None if getter(draft) else message
    return rule


def _not_past(missing: str, past: str, getter: Callable[[Any], Any]) -> Rule[Any]:
    def rule(draft: Any, now: datetime) -> str | None:
        day = parse_date(getter(draft))
        if day is None:
            return missing
        if day < now.date():
            return past
        return None
    return rule


# Booking rules

def _pickup_location(draft: BookingDraft, now: datetime) -> str | None:
    if _too_short(draft.pickup_location, MIN_LOCATION_LENGTH):
        return "Please enter a valid pickup location (minimum 3 characters)"
    return None


def _dropoff_location(draft: BookingDraft, now: datetime) -> str | None:
    if _too_short(draft.dropoff_location, MIN_LOCATION_LENGTH):
        return "Please enter a valid dropoff location (minimum 3 characters)"
    return None


def _pickup_time(draft: BookingDraft, now: datetime) -> str | None:
    at = parse_time(draft.pickup_time)
    if at is None:
        return "Please select a pickup time"
    day = parse_date(draft.pickup_date)
    if day is not None and datetime.combine(day, at, now.tzinfo) <= now:
        return "Pickup time cannot be in the past"
    return None


def _return_date(draft: BookingDraft, now: datetime) -> str | None:
    returning = parse_date(draft.return_date)
    pickup = parse_date(draft.pickup_date)
    if returning is not None and pickup is not None and returning <= pickup:
        return "Return date must be after pickup date"
    return None


def _return_time(draft: BookingDraft, now: datetime) -> str | None:
    return_day, return_at = parse_date(draft.return_date), parse_time(draft.return_time)
    pickup_day, pickup_at = parse_date(draft.pickup_date), parse_time(draft.pickup_time)
    if None in (return_day, return_at, pickup_day, pickup_at):
        return None
    if datetime.combine(return_day, return_at) <= datetime.combine(pickup_day, pickup_at):  # type: ignore[arg-type]
        return "Return time must be after pickup time"
    return None


def _passengers(draft: BookingDraft, now: datetime) -> str | None:
    if not _is_int(draft.passengers) or not 1 <= draft.passengers <= MAX_PASSENGERS:  # type: ignore[operator]
        return "Number of passengers must be between 1 and 50"
    return None


def _additional_notes(draft: BookingDraft, now: datetime) -> str | None:
    if _too_long(draft.additional_notes, MAX_NOTES_LENGTH):
        return "Additional notes cannot exceed 500 characters"
    return None


validate_booking: Validator[BookingDraft] = Validator((
    ("serviceType", _required("Please select a service type", lambda d: d.service_type)),
    ("pickupLocation", _pickup_location),
    ("dropoffLocation", _dropoff_location),
    ("pickupDate", _not_past("Please select a pickup date", "Pickup date cannot be in the past",
                             lambda d: d.pickup_date)),
    ("pickupTime", _pickup_time),
    ("returnDate", _return_date),
    ("returnTime", _return_time),
    ("passengers", _passengers),
    ("additionalNotes", _additional_notes),
))


# Rental rules

def _end_date(draft: RentalDraft, now: datetime) -> str | None:
    end = parse_date(draft.end_date)
    if end is None:
        return "Please select an end date"
    start = parse_date(draft.start_date)
    if start is None:
        return None
    if (end - start).days > MAX_RENTAL_DAYS:
        return "Rental period cannot exceed 2 years"
    if end <= start:
        return "End date must be after start date"
    return None


def _duration(draft: RentalDraft, now: datetime) -> str | None:
    if not _is_int(draft.duration) or draft.duration < 1:  # type: ignore[operator]
        return "Duration must be at least 1 day"
    return None


def _purpose(draft: RentalDraft, now: datetime) -> str | None:
    if _too_short(draft.purpose, MIN_PURPOSE_LENGTH):
        return "Please provide a detailed purpose (minimum 10 characters)"
    return None


def _special_requirements(draft: RentalDraft, now: datetime) -> str | None:
    if _too_long(draft.special_requirements, MAX_NOTES_LENGTH):
        return "Special requirements cannot exceed 500 characters"
    return None


validate_rental: Validator[RentalDraft] = Validator((
    ("vehicleId", _required("Please select a vehicle", lambda d: d.vehicle_id)),
    ("rentalType", _required("Please select a rental type", lambda d: d.rental_type)),
    ("startDate", _not_past("Please select a start date", "Start date cannot be in the past",
                            lambda d: d.start_date)),
    ("endDate", _end_date),
    ("duration", _duration),
    ("purpose", _purpose),
    ("specialRequirements", _special_requirements),
))

"""Form flows that validate a draft and hand it to the backend.

Each flow keeps the state a form needs to render: field errors, a single
user-visible error message and a loading flag.
"""
import asyncio
import dataclasses
import logging
from typing import Any

from aiohttp import ClientError, ClientResponseError

from giraffe import typedefs as t
from giraffe.client import GiraffeClient
from giraffe.drafts import BookingDraft, RentalDraft, details_for
from giraffe.routes import estimate_distance
from giraffe.session import NotAuthenticated, Session
from giraffe.tours import TourBookingDraft
from giraffe.validation import validate_booking, validate_rental


logger = logging.getLogger(__name__)

BOOKING_FAILED = "Failed to submit booking request"
RENTAL_FAILED = "Rental request failed"


def error_message(exc: BaseException, fallback: str) -> str:
    if isinstance(exc, NotAuthenticated):
        return str(exc)
    if isinstance(exc, ClientResponseError) and exc.message:
        return exc.message
    return fallback


class PaymentStep:
    """The step after a booking is created, where the customer settles how to pay.

    Confirmations are applied one at a time in the order they were made, so
    the last method confirmed is the one the booking ends up with.
    """

    def __init__(self, client: GiraffeClient, session: Session, booking: t.BookingRecord):
        self.booking = booking
        self.method: t.PaymentMethod | None = None
        self.payment: t.PaymentRecord | None = None
        self._client = client
        self._session = session
        self._lock = asyncio.Lock()

    async def start_card(self) -> str:
        """Open a card payment for the booking total and return the client secret for the card form."""
        return await self._client.create_payment_intent(self._session, self.booking["_id"], self.booking["totalPrice"])

    async def confirm_cash(self) -> bool:
        """Mark the booking as paid in cash on pickup. Payment stays pending."""
        async with self._lock:
            self.method = "cash"
            return await self._update({"paymentMethod": "cash", "paymentStatus": "pending"})

    async def confirm_card(self, payment_intent_id: str) -> bool:
        """Record a completed card payment, then mark the booking as paid.

        Returns False, leaving the booking untouched, if the payment could not be recorded.
        """
        async with self._lock:
            payload: t.PaymentPayload = {
                "bookingId": self.booking["_id"],
                "amount": self.booking["totalPrice"],
                "paymentMethod": "stripe",
                "status": "completed",
                "stripePaymentIntentId": payment_intent_id,
            }
            try:
                self.payment = await self._client.create_payment(self._session, payload)
            except (ClientError, TimeoutError, NotAuthenticated):
                logger.exception("Failed to record card payment for booking %s", self.booking["_id"])
                return False
            self.method = "stripe"
            return await self._update({"paymentMethod": "stripe", "paymentStatus": "paid"})

    async def _update(self, changes: t.BookingChanges) -> bool:
        try:
            self.booking = await self._client.update_booking(self._session, self.booking["_id"], changes)
        except (ClientError, TimeoutError, NotAuthenticated):
            logger.exception("Failed to update payment method for booking %s", self.booking["_id"])
            return False
        return True


class BookingFlow:
    """Drives the service booking form.

    The editing methods recompute the estimated price themselves, so
    ``draft.total_price`` always matches the service, distance and vehicle type.
    """

    def __init__(self, client: GiraffeClient, session: Session, draft: BookingDraft | None = None):
        self.draft = draft or BookingDraft()
        self.errors: t.ValidationErrorSet = {}
        self.error = ""
        self.loading = False
        self.invoice: bytes | None = None
        self.payment: PaymentStep | None = None
        self._client = client
        self._session = session

    def select_service(self, service_type: t.ServiceType) -> float:
        self.draft.service_details = details_for(service_type)
        self.error = ""
        return self.draft.refresh_price()

    def set_locations(self, pickup: str | None = None, dropoff: str | None = None) -> float:
        """Change pickup and/or dropoff. Any distance entered so far no longer applies."""
        if pickup is not None:
            self.draft.pickup_location = pickup
        if dropoff is not None:
            self.draft.dropoff_location = dropoff
        self.draft.distance = 0
        self.error = ""
        return self.draft.refresh_price()

    def set_distance(self, distance_km: float) -> float:
        self.draft.distance = max(0, distance_km or 0)
        self.error = ""
        return self.draft.refresh_price()

    def suggested_distance(self) -> int:
        return estimate_distance(self.draft.pickup_location, self.draft.dropoff_location)

    def use_suggested_distance(self) -> float:
        return self.set_distance(self.suggested_distance())

    def set_service_details(self, **changes: Any) -> float:
        """Update fields of the selected service's details, e.g. ``vehicle_type="luxury"``."""
        if self.draft.service_details is None:
            raise ValueError("Select a service before choosing its details")
        self.draft.service_details = dataclasses.replace(self.draft.service_details, **changes)
        self.error = ""
        return self.draft.refresh_price()

    async def submit(self) -> t.BookingRecord | None:
        """Validate and create the booking.

        Returns the created booking, or None with ``errors`` or ``error`` set.
        """
        self.errors = {}
        self.error = ""

        errors = validate_booking(self.draft)
        if errors:
            logger.debug("Booking draft has errors in %s", sorted(errors))
            self.errors = errors
            return None

        self.draft.refresh_price()
        self.loading = True
        try:
            try:
                booking = await self._client.create_booking(self._session, self.draft.to_payload(status="pending"))
            except (ClientError, TimeoutError, NotAuthenticated) as e:
                logger.warning("Booking submission failed: %r", e)
                self.error = error_message(e, BOOKING_FAILED)
                return None

            self.invoice = await self._fetch_invoice(booking["_id"])
            self.payment = PaymentStep(self._client, self._session, booking)
            return booking
        finally:
            self.loading = False

    async def _fetch_invoice(self, booking_id: t.BookingId) -> bytes | None:
        try:
            return await self._client.get_invoice(self._session, booking_id)
        except (ClientError, TimeoutError, NotAuthenticated):
            logger.exception("Failed to download invoice for booking %s", booking_id)
            return None


class RentalFlow:
    """Drives the vehicle rental request form."""

    def __init__(self, client: GiraffeClient, session: Session, draft: RentalDraft | None = None):
        self.draft = draft or RentalDraft()
        self.errors: t.ValidationErrorSet = {}
        self.error = ""
        self.loading = False
        self._client = client
        self._session = session

    async def submit(self) -> t.RentalRecord | None:
        self.errors = {}
        self.error = ""

        errors = validate_rental(self.draft)
        if errors:
            self.errors = errors
            return None

        self.loading = True
        try:
            return await self._client.create_rental(self._session, self.draft.to_payload())
        except (ClientError, TimeoutError, NotAuthenticated) as e:
            logger.warning("Rental request failed: %r", e)
            self.error = error_message(e, RENTAL_FAILED)
            return None
        finally:
            self.loading = False


class TourBookingFlow:
    """Drives the booking form of one tour package."""

    def __init__(self, client: GiraffeClient, session: Session, package: t.TourPackage):
        self.draft = TourBookingDraft(package)
        self.error = ""
        self.loading = False
        self._client = client
        self._session = session

    async def submit(self) -> t.TourBookingRecord | None:
        self.error = ""
        self.loading = True
        try:
            return await self._client.create_tour_booking(self._session, self.draft.to_payload())
        except (ClientError, TimeoutError, NotAuthenticated) as e:
            logger.warning("Tour booking failed: %r", e)
            self.error = error_message(e, BOOKING_FAILED)
            return None
        finally:
            self.loading = False

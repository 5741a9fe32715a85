import json
import logging
from datetime import date, time
from functools import partial
from types import TracebackType
from typing import Any, NoReturn, Self

from aiohttp import ClientResponse, ClientResponseError, ClientSession, ClientTimeout, ContentTypeError
from yarl import URL

from giraffe import typedefs as t
from giraffe.config import Settings
from giraffe.session import Authenticated, Session, auth_headers


logger = logging.getLogger(__name__)


class CustomEncoder(json.JSONEncoder):
    def default(self, obj: object) -> Any:
        if isinstance(obj, date):
            return obj.isoformat()
        if isinstance(obj, time):
            return obj.strftime("%H:%M")

        return super().default(obj)


async def raise_error(resp: ClientResponse) -> NoReturn:
    """Raise ClientResponseError carrying the backend's message, or an empty message if it sent none."""
    try:
        result = await resp.json()
    except (ContentTypeError, ValueError):
        logger.debug("%s %s failed with body %r", resp.method, resp.url, await resp.read())
        msg = ""
    else:
        body: t.ErrorBody = result if isinstance(result, dict) else {}
        msg = body.get("message", "")
    raise ClientResponseError(resp.request_info, resp.history, status=resp.status, message=msg, headers=resp.headers)


class GiraffeClient:
    '''
    Client for the Giraffe Cabs backend.

    Use it as an async context manager. Calls that act for a customer take the
    customer's Session and fail with NotAuthenticated for an anonymous one.
    '''
    def __init__(self, settings: Settings | None = None):
        self._settings = settings or Settings()
        self._base = URL(self._settings.api_url)

    def _url(self, *segments: str) -> URL:
        url = self._base / "api"
        for segment in segments:
            url = url / segment
        return url

    async def create_booking(self, session: Session, payload: t.BookingPayload) -> t.BookingRecord:
        headers = auth_headers(session)
        async with self._client.post(self._url("bookings"), json=payload, headers=headers) as resp:
            if not resp.ok:
                await raise_error(resp)
            result: t.BookingRecord = await resp.json()
        logger.info("Created booking %s", result["_id"])
        return result

    async def get_booking(self, session: Session, booking_id: t.BookingId) -> t.BookingRecord:
        headers = auth_headers(session)
        async with self._client.get(self._url("bookings", booking_id), headers=headers) as resp:
            if not resp.ok:
                await raise_error(resp)
            return await resp.json()

    async def update_booking(self, session: Session, booking_id: t.BookingId, changes: t.BookingChanges) -> t.BookingRecord:
        headers = auth_headers(session)
        async with self._client.put(self._url("bookings", booking_id), json=changes, headers=headers) as resp:
            if not resp.ok:
                await raise_error(resp)
            return await resp.json()

    async def get_invoice(self, session: Session, booking_id: t.BookingId) -> bytes:
        headers = auth_headers(session)
        async with self._client.get(self._url("bookings", booking_id, "invoice"), headers=headers) as resp:
            if not resp.ok:
                await raise_error(resp)
            return await resp.read()

    async def create_rental(self, session: Session, payload: t.RentalPayload) -> t.RentalRecord:
        headers = auth_headers(session)
        async with self._client.post(self._url("rentals"), json=payload, headers=headers) as resp:
            if not resp.ok:
                await raise_error(resp)
            result: t.RentalRecord = await resp.json()
        logger.info("Created rental request %s", result["_id"])
        return result

    async def available_rental_vehicles(self) -> list[t.Vehicle]:
        async with self._client.get(self._url("rentals", "available-vehicles")) as resp:
            if not resp.ok:
                await raise_error(resp)
            return await resp.json()

    async def my_rentals(self, session: Session) -> list[t.RentalRecord]:
        headers = auth_headers(session)
        async with self._client.get(self._url("rentals", "my-rentals"), headers=headers) as resp:
            if not resp.ok:
                await raise_error(resp)
            return await resp.json()

    async def my_bookings(self, session: Session) -> list[t.BookingRecord]:
        headers = auth_headers(session)
        async with self._client.get(self._url("bookings", "user"), headers=headers) as resp:
            if not resp.ok:
                await raise_error(resp)
            return await resp.json()

    async def available_tour_packages(self) -> list[t.TourPackage]:
        async with self._client.get(self._url("tour-packages", "available")) as resp:
            if not resp.ok:
                await raise_error(resp)
            return await resp.json()

    async def create_tour_booking(self, session: Session, payload: t.TourBookingPayload) -> t.TourBookingRecord:
        headers = auth_headers(session)
        async with self._client.post(self._url("tour-bookings"), json=payload, headers=headers) as resp:
            if not resp.ok:
                await raise_error(resp)
            result: t.TourBookingRecord = await resp.json()
        logger.info("Created tour booking %s", result["_id"])
        return result

    async def create_payment_intent(self, session: Session, booking_id: t.BookingId, amount: float) -> str:
        """Start a card payment of ``amount`` LKR and return the processor's client secret."""
        headers = auth_headers(session)
        body = {"bookingId": booking_id, "amount": round(amount * 100), "currency": "lkr"}
        async with self._client.post(self._url("payments", "create-payment-intent"), json=body, headers=headers) as resp:
            if not resp.ok:
                await raise_error(resp)
            result = await resp.json()
        return result["clientSecret"]

    async def create_payment(self, session: Session, payload: t.PaymentPayload) -> t.PaymentRecord:
        headers = auth_headers(session)
        async with self._client.post(self._url("payments"), json=payload, headers=headers) as resp:
            if not resp.ok:
                await raise_error(resp)
            return await resp.json()

    async def login(self, credentials: t.Credentials) -> Authenticated:
        async with self._client.post(self._url("auth", "login"), json=credentials) as resp:
            if not resp.ok:
                await raise_error(resp)
            result = await resp.json()
        token = result.pop("token")
        return Authenticated(token, user=result)

    async def register(self, registration: t.Registration) -> Authenticated:
        body = {**registration, "role": "customer"}
        async with self._client.post(self._url("auth", "register"), json=body) as resp:
            if not resp.ok:
                await raise_error(resp)
            result = await resp.json()
        token = result.pop("token")
        logger.info("Registered customer %s", result["_id"])
        return Authenticated(token, user=result)

    async def provider_login(self, credentials: t.Credentials) -> Authenticated:
        async with self._client.post(self._url("vehicle-provider", "auth", "login"), json=credentials) as resp:
            if not resp.ok:
                await raise_error(resp)
            result = await resp.json()
        return Authenticated(result["token"], provider=result["vehicleProvider"])

    async def provider_register(self, registration: t.ProviderRegistration) -> Authenticated:
        async with self._client.post(self._url("vehicle-provider", "auth", "register"), json=registration) as resp:
            if not resp.ok:
                await raise_error(resp)
            result = await resp.json()
        logger.info("Registered vehicle provider %s", result["vehicleProvider"]["_id"])
        return Authenticated(result["token"], provider=result["vehicleProvider"])

    async def __aenter__(self) -> Self:
        timeout = ClientTimeout(total=self._settings.request_timeout)
        self._client = ClientSession(timeout=timeout, json_serialize=partial(json.dumps, cls=CustomEncoder))
        await self._client.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None
    ) -> None:
        await self._client.__aexit__(exc_type, exc_val, exc_tb)

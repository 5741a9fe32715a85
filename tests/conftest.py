import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from giraffe import Authenticated, GiraffeClient, Settings


TOKEN = "test-token"

PUBLIC_PATHS = ("/api/tour-packages", "/api/rentals/available-vehicles", "/api/auth", "/api/vehicle-provider/auth")

TOUR_PACKAGES = [
    {
        "_id": "tp1", "packageName": "Hill Country Escape", "description": "Kandy, Nuwara Eliya and Ella",
        "destination": "Nuwara Eliya", "tourDays": 3, "fullDistance": 420, "minPassengers": 2,
        "maxPassengers": 6, "pricePerPerson": 15000, "tourCategory": "Nature", "tourType": "Multi-day",
        "paymentType": "full_upfront",
    },
    {
        "_id": "tp2", "packageName": "Sacred City", "description": "Temple of the Tooth and the Royal Botanical Gardens",
        "destination": "Kandy", "tourDays": 1, "fullDistance": 230, "minPassengers": 1,
        "maxPassengers": 0, "pricePerPerson": 8000, "tourCategory": "Pilgrimage", "tourType": "One-day",
        "paymentType": "installment",
    },
]


class FakeBackend:
    """In-process stand-in for the REST backend, recording what it receives."""

    def __init__(self) -> None:
        self.bookings: dict[str, dict[str, Any]] = {}
        self.rentals: list[dict[str, Any]] = []
        self.tour_bookings: list[dict[str, Any]] = []
        self.payments: list[dict[str, Any]] = []
        self.users: dict[str, dict[str, Any]] = {}
        self.providers: dict[str, dict[str, Any]] = {}
        self.requests: list[tuple[str, str]] = []
        self.booking_error: tuple[int, Any] | None = None
        self.invoice_error = False
        self.update_error = False
        self.payment_error = False
        # Seconds to hold a booking update, by the payment method it sets.
        self.update_delay: dict[str, float] = {}

    def app(self) -> web.Application:
        app = web.Application(middlewares=[self._record])
        app.router.add_post("/api/auth/register", self.register)
        app.router.add_post("/api/auth/login", self.login)
        app.router.add_post("/api/vehicle-provider/auth/register", self.provider_register)
        app.router.add_post("/api/vehicle-provider/auth/login", self.provider_login)
        app.router.add_post("/api/bookings", self.create_booking)
        app.router.add_get("/api/bookings/user", self.user_bookings)
        app.router.add_get("/api/bookings/{id}", self.get_booking)
        app.router.add_put("/api/bookings/{id}", self.update_booking)
        app.router.add_get("/api/bookings/{id}/invoice", self.invoice)
        app.router.add_post("/api/payments/create-payment-intent", self.create_payment_intent)
        app.router.add_post("/api/payments", self.create_payment)
        app.router.add_post("/api/rentals", self.create_rental)
        app.router.add_get("/api/rentals/available-vehicles", self.available_vehicles)
        app.router.add_get("/api/rentals/my-rentals", self.my_rentals)
        app.router.add_get("/api/tour-packages/available", self.tour_packages)
        app.router.add_post("/api/tour-bookings", self.create_tour_booking)
        return app

    @web.middleware
    async def _record(self, request: web.Request, handler: Callable[[web.Request], Awaitable[web.StreamResponse]]) -> web.StreamResponse:
        self.requests.append((request.method, request.path))
        public = request.path.startswith(PUBLIC_PATHS)
        if not public and request.headers.get("Authorization") != f"Bearer {TOKEN}":
            return web.json_response({"message": "No token, authorization denied"}, status=401)
        return await handler(request)

    async def register(self, request: web.Request) -> web.Response:
        body = await request.json()
        if body["email"] in self.users:
            return web.json_response({"message": "User already exists"}, status=400)
        user = {k: v for k, v in body.items() if k != "password"}
        user["_id"] = f"u{len(self.users) + 1}"
        self.users[body["email"]] = {"user": user, "password": body["password"]}
        return web.json_response({**user, "token": TOKEN}, status=201)

    async def login(self, request: web.Request) -> web.Response:
        body = await request.json()
        account = self.users.get(body["email"])
        if account is None or account["password"] != body["password"]:
            return web.json_response({"message": "Invalid email or password"}, status=401)
        return web.json_response({**account["user"], "token": TOKEN})

    async def provider_register(self, request: web.Request) -> web.Response:
        body = await request.json()
        if body["email"] in self.providers:
            return web.json_response({"message": "Vehicle provider already exists with this email"}, status=400)
        provider = {
            "_id": f"vp{len(self.providers) + 1}", "firstName": body["firstName"], "lastName": body["lastName"],
            "email": body["email"], "phone": body["phone"], "businessName": body["businessName"],
            "status": "pending", "isVerified": False,
        }
        self.providers[body["email"]] = {"provider": provider, "password": body["password"]}
        return web.json_response({"message": "Vehicle provider registered successfully",
                                  "token": TOKEN, "vehicleProvider": provider}, status=201)

    async def provider_login(self, request: web.Request) -> web.Response:
        body = await request.json()
        account = self.providers.get(body["email"])
        if account is None or account["password"] != body["password"]:
            return web.json_response({"message": "Invalid credentials"}, status=400)
        return web.json_response({"message": "Login successful", "token": TOKEN,
                                  "vehicleProvider": account["provider"]})

    async def create_booking(self, request: web.Request) -> web.Response:
        if self.booking_error is not None:
            status, body = self.booking_error
            if isinstance(body, str):
                return web.Response(status=status, text=body)
            return web.json_response(body, status=status)
        body = await request.json()
        booking_id = f"bk{len(self.bookings) + 1}"
        record = {**body, "_id": booking_id, "user": "u1",
                  "createdAt": "2026-03-10T09:00:00Z", "updatedAt": "2026-03-10T09:00:00Z"}
        self.bookings[booking_id] = record
        return web.json_response(record, status=201)

    async def user_bookings(self, request: web.Request) -> web.Response:
        return web.json_response(list(self.bookings.values()))

    async def get_booking(self, request: web.Request) -> web.Response:
        booking = self.bookings.get(request.match_info["id"])
        if booking is None:
            return web.json_response({"message": "Booking not found"}, status=404)
        return web.json_response(booking)

    async def update_booking(self, request: web.Request) -> web.Response:
        if self.update_error:
            return web.json_response({"message": "Server error"}, status=500)
        changes = await request.json()
        delay = self.update_delay.get(changes.get("paymentMethod", ""))
        if delay:
            await asyncio.sleep(delay)
        booking = self.bookings[request.match_info["id"]]
        booking.update(changes)
        return web.json_response(booking)

    async def invoice(self, request: web.Request) -> web.Response:
        if self.invoice_error:
            return web.json_response({"message": "Error generating invoice"}, status=500)
        return web.Response(body=b"%PDF-1.4 invoice " + request.match_info["id"].encode(),
                            content_type="application/pdf")

    async def create_payment_intent(self, request: web.Request) -> web.Response:
        body = await request.json()
        return web.json_response({"clientSecret": f"pi_{body['bookingId']}_secret_{body['amount']}"})

    async def create_payment(self, request: web.Request) -> web.Response:
        if self.payment_error:
            return web.json_response({"message": "Payment could not be recorded"}, status=500)
        body = await request.json()
        record = {**body, "_id": f"pay{len(self.payments) + 1}", "createdAt": "2026-03-10T09:05:00Z"}
        self.payments.append(record)
        return web.json_response(record, status=201)

    async def create_rental(self, request: web.Request) -> web.Response:
        body = await request.json()
        record = {**body, "_id": f"rt{len(self.rentals) + 1}", "vehicle": body["vehicleId"], "status": "pending"}
        self.rentals.append(record)
        return web.json_response(record, status=201)

    async def available_vehicles(self, request: web.Request) -> web.Response:
        return web.json_response([{
            "_id": "v1", "vehicleNumber": "CAB-1234", "vehicleType": "car", "brand": "Toyota",
            "model": "Axio", "capacity": 4, "dailyRate": 9000, "isAvailable": True,
        }])

    async def my_rentals(self, request: web.Request) -> web.Response:
        return web.json_response(self.rentals)

    async def tour_packages(self, request: web.Request) -> web.Response:
        return web.json_response(TOUR_PACKAGES)

    async def create_tour_booking(self, request: web.Request) -> web.Response:
        body = await request.json()
        package = next((p for p in TOUR_PACKAGES if p["_id"] == body["tourPackageId"]), None)
        if package is None:
            return web.json_response({"message": "Tour package not found"}, status=404)
        self.tour_bookings.append(body)
        price = body["numberOfPassengers"] * package["pricePerPerson"] * package["tourDays"]
        record = {
            "_id": f"tb{len(self.tour_bookings)}", "user": "u1", "tourPackage": package["_id"],
            "bookingDate": body["bookingDate"], "numberOfPassengers": body["numberOfPassengers"],
            "passengers": body["passengers"], "contactPerson": body["contactPerson"],
            "pricing": {"basePrice": price, "totalPrice": price, "discountApplied": 0,
                        "finalPrice": price, "isPriceConfirmed": False},
            "payment": {"method": body["paymentMethod"], "status": "pending", "amountPaid": 0},
            "status": "pending", "specialRequests": body["specialRequests"],
        }
        return web.json_response(record, status=201)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def session() -> Authenticated:
    return Authenticated(TOKEN)


@pytest.fixture
async def client(
    aiohttp_server: Callable[[web.Application], Awaitable[TestServer]],
    backend: FakeBackend
) -> AsyncIterator[GiraffeClient]:
    server = await aiohttp_server(backend.app())
    settings = Settings(api_url=str(server.make_url("/")), request_timeout=5)
    async with GiraffeClient(settings) as client:
        yield client

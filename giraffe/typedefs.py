from typing import Any, Literal, NewType, NotRequired, TypedDict


BookingId = NewType("BookingId", str)
BookingStatus = Literal["pending", "confirmed", "in-progress", "completed", "cancelled"]
DateString = NewType("DateString", str)  # YYYY-MM-DD
PaymentId = NewType("PaymentId", str)
PaymentMethod = Literal["stripe", "cash", "bank-transfer"]
PaymentStatus = Literal["pending", "paid", "failed", "refunded"]
ProviderId = NewType("ProviderId", str)
RentalId = NewType("RentalId", str)
RentalStatus = Literal["pending", "approved", "rejected", "active", "completed", "cancelled"]
RentalType = Literal["daily", "monthly"]
ServiceType = Literal["wedding", "airport", "cargo", "daily"]
TimeString = NewType("TimeString", str)  # HH:MM, 24 hour
TourBookingId = NewType("TourBookingId", str)
TourCategory = Literal["Adventure", "Pilgrimage", "Nature", "Cultural", "Family", "Corporate"]
TourPackageId = NewType("TourPackageId", str)
TourPaymentMethod = Literal["full_upfront", "installment"]
TourType = Literal["One-day", "Multi-day", "Seasonal"]
UserId = NewType("UserId", str)
VehicleId = NewType("VehicleId", str)

ValidationErrorSet = dict[str, str]


class ErrorBody(TypedDict):
    """Error structure returned by the backend."""

    message: NotRequired[str]
    error: NotRequired[str]


class User(TypedDict):
    _id: UserId
    firstName: str
    lastName: str
    email: str
    phone: NotRequired[str]
    address: NotRequired[str]
    role: Literal["customer", "admin"]


class ServiceDetailsPayload(TypedDict, total=False):
    vehicleType: str
    days: int
    flightTime: TimeString
    cargoWeight: int
    hours: int


class BookingPayload(TypedDict):
    serviceType: ServiceType
    pickupLocation: str
    dropoffLocation: str
    pickupDate: DateString
    pickupTime: TimeString
    returnDate: NotRequired[DateString]
    returnTime: NotRequired[TimeString]
    passengers: int
    distance: float
    totalPrice: float
    additionalNotes: str
    serviceDetails: ServiceDetailsPayload
    status: BookingStatus


class BookingRecord(BookingPayload):
    _id: BookingId
    user: UserId | User
    paymentMethod: NotRequired[PaymentMethod]
    paymentStatus: NotRequired[PaymentStatus]
    createdAt: str
    updatedAt: str


class BookingChanges(TypedDict, total=False):
    paymentMethod: PaymentMethod
    paymentStatus: PaymentStatus
    status: BookingStatus
    additionalNotes: str


class RentalPayload(TypedDict):
    vehicleId: VehicleId
    rentalType: RentalType
    startDate: DateString
    endDate: DateString
    duration: int
    purpose: str
    specialRequirements: str


class RentalRecord(TypedDict):
    _id: RentalId
    vehicle: VehicleId | dict[str, Any]
    rentalType: RentalType
    startDate: str
    endDate: str
    duration: int
    purpose: str
    status: RentalStatus


class Vehicle(TypedDict):
    _id: VehicleId
    vehicleNumber: str
    vehicleType: str
    brand: str
    model: str
    capacity: int
    dailyRate: NotRequired[float]
    isAvailable: bool


class TourPackage(TypedDict):
    _id: TourPackageId
    packageName: str
    description: str
    destination: str
    tourDays: int
    fullDistance: float
    minPassengers: int
    maxPassengers: int
    pricePerPerson: float
    tourCategory: TourCategory
    tourType: TourType
    paymentType: TourPaymentMethod


class TourPassenger(TypedDict):
    firstName: str
    lastName: str
    age: int
    passportNumber: NotRequired[str]
    emergencyContact: NotRequired[str]
    specialRequirements: NotRequired[str]


class ContactPerson(TypedDict):
    name: str
    email: str
    phone: str
    address: NotRequired[str]


class TourBookingPayload(TypedDict):
    tourPackageId: TourPackageId
    bookingDate: DateString
    numberOfPassengers: int
    passengers: list[TourPassenger]
    contactPerson: ContactPerson
    paymentMethod: TourPaymentMethod
    specialRequests: str
    dietaryRequirements: list[str]
    accessibilityNeeds: list[str]


class _TourPricing(TypedDict):
    basePrice: float
    totalPrice: float
    discountApplied: float
    finalPrice: float
    isPriceConfirmed: bool


class _TourPaymentState(TypedDict):
    method: TourPaymentMethod
    status: Literal["pending", "partial", "completed", "refunded"]
    amountPaid: float


class TourBookingRecord(TypedDict):
    _id: TourBookingId
    user: UserId
    tourPackage: TourPackageId | TourPackage
    bookingDate: str
    numberOfPassengers: int
    passengers: list[TourPassenger]
    contactPerson: ContactPerson
    pricing: _TourPricing
    payment: _TourPaymentState
    status: Literal["pending", "confirmed", "rejected", "cancelled", "completed"]
    specialRequests: NotRequired[str]


class PaymentPayload(TypedDict):
    bookingId: BookingId
    amount: float
    paymentMethod: PaymentMethod
    status: Literal["pending", "completed", "failed"]
    stripePaymentIntentId: NotRequired[str]


class PaymentRecord(PaymentPayload):
    _id: PaymentId
    createdAt: str


class Credentials(TypedDict):
    email: str
    password: str


class Registration(Credentials):
    firstName: str
    lastName: str
    phone: str
    address: str


class _ProviderAddress(TypedDict):
    street: str
    city: str
    district: str
    postalCode: str


class _BankDetails(TypedDict):
    bankName: str
    accountNumber: str
    accountHolderName: str
    branch: str


class ProviderRegistration(Credentials):
    firstName: str
    lastName: str
    phone: str
    address: _ProviderAddress
    businessName: str
    businessRegistrationNumber: str
    businessType: str
    bankDetails: _BankDetails


class VehicleProvider(TypedDict):
    _id: ProviderId
    firstName: str
    lastName: str
    email: str
    phone: str
    businessName: str
    status: Literal["pending", "active", "suspended"]
    isVerified: NotRequired[bool]

from giraffe.catalog import SERVICES, ServiceDefinition, VehicleRate, VehicleTypeOption, filter_services, get_service
from giraffe.client import GiraffeClient
from giraffe.config import Settings, configure_logging
from giraffe.drafts import AirportDetails, BookingDraft, CargoDetails, DailyDetails, RentalDraft, WeddingDetails
from giraffe.flows import BookingFlow, PaymentStep, RentalFlow, TourBookingFlow
from giraffe.pricing import calculate_price
from giraffe.routes import estimate_distance
from giraffe.session import ANONYMOUS, Anonymous, Authenticated, NotAuthenticated, Session
from giraffe.tours import TourBookingDraft, TourFilters, filter_tour_packages
from giraffe.typedefs import BookingId, BookingRecord, ServiceType, TourPackage, ValidationErrorSet, VehicleId
from giraffe.validation import Validator, validate_booking, validate_rental

__version__ = "0.1.0"

__all__ = (
    "ANONYMOUS", "AirportDetails", "Anonymous", "Authenticated", "BookingDraft", "BookingFlow",
    "BookingId", "BookingRecord", "CargoDetails", "DailyDetails", "GiraffeClient", "NotAuthenticated",
    "PaymentStep", "RentalDraft", "RentalFlow", "SERVICES", "ServiceDefinition", "ServiceType",
    "Session", "Settings", "TourBookingDraft", "TourBookingFlow", "TourFilters", "TourPackage",
    "ValidationErrorSet", "Validator", "VehicleId", "VehicleRate", "VehicleTypeOption", "WeddingDetails",
    "calculate_price", "configure_logging", "estimate_distance", "filter_services", "filter_tour_packages",
    "get_service", "validate_booking", "validate_rental",
)

"""
The eight booking variants a reservation can wrap.

Each variant is described once: its table model, request/response schemas,
status enum, the status a new booking starts in and whether it is bought
from a supplier. Reservation code dispatches on ``ReservableType`` through
``get_variant`` instead of on model class names.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type

from pydantic import BaseModel as Schema

from app.db.base import BaseModel
from app.models.reservation.appointment import Appointment
from app.models.reservation.cruise import Cruise
from app.models.reservation.flight import Flight
from app.models.reservation.hotel import Hotel
from app.models.reservation.insurance import Insurance
from app.models.reservation.ticket import Ticket
from app.models.reservation.transportation import Transportation
from app.models.reservation.visa import Visa
from app.models.shared.enums import (
    AppointmentStatus, BookingStatus, InsuranceStatus, ReservableType, VisaStatus
)
from app.schemas.reservation import booking_schema as schemas


@dataclass(frozen=True)
class BookingVariant:
    type: ReservableType
    model: Type[BaseModel]
    create_schema: Type[Schema]
    update_schema: Type[Schema]
    response_schema: Type[Schema]
    status_enum: Type[Enum]
    default_status: Enum
    # When set, a new booking always starts here whatever the request says
    forced_status: Optional[Enum] = None
    has_supplier: bool = False
    # Request field name -> column name, where they differ
    column_names: Tuple[Tuple[str, str], ...] = ()

    def to_columns(self, values: Dict[str, Any]) -> Dict[str, Any]:
        renames = dict(self.column_names, booking_status="status")
        return {renames.get(field, field): value for field, value in values.items()}

    def initial_status(self, requested: Optional[Enum]) -> Enum:
        if self.forced_status is not None:
            return self.forced_status
        return requested or self.default_status


BOOKING_VARIANTS: Dict[ReservableType, BookingVariant] = {
    ReservableType.FLIGHT: BookingVariant(
        type=ReservableType.FLIGHT,
        model=Flight,
        create_schema=schemas.FlightCreate,
        update_schema=schemas.FlightUpdate,
        response_schema=schemas.FlightResponse,
        status_enum=BookingStatus,
        default_status=BookingStatus.PENDING,
        forced_status=BookingStatus.PENDING,
        has_supplier=True,
    ),
    ReservableType.HOTEL: BookingVariant(
        type=ReservableType.HOTEL,
        model=Hotel,
        create_schema=schemas.HotelCreate,
        update_schema=schemas.HotelUpdate,
        response_schema=schemas.HotelResponse,
        status_enum=BookingStatus,
        default_status=BookingStatus.PENDING,
        has_supplier=True,
        column_names=(("hotel_name", "name"),),
    ),
    ReservableType.CRUISE: BookingVariant(
        type=ReservableType.CRUISE,
        model=Cruise,
        create_schema=schemas.CruiseCreate,
        update_schema=schemas.CruiseUpdate,
        response_schema=schemas.CruiseResponse,
        status_enum=BookingStatus,
        default_status=BookingStatus.PENDING,
        has_supplier=True,
    ),
    ReservableType.VISA: BookingVariant(
        type=ReservableType.VISA,
        model=Visa,
        create_schema=schemas.VisaCreate,
        update_schema=schemas.VisaUpdate,
        response_schema=schemas.VisaResponse,
        status_enum=VisaStatus,
        default_status=VisaStatus.PENDING,
    ),
    ReservableType.INSURANCE: BookingVariant(
        type=ReservableType.INSURANCE,
        model=Insurance,
        create_schema=schemas.InsuranceCreate,
        update_schema=schemas.InsuranceUpdate,
        response_schema=schemas.InsuranceResponse,
        status_enum=InsuranceStatus,
        default_status=InsuranceStatus.ACTIVE,
    ),
    ReservableType.TICKET: BookingVariant(
        type=ReservableType.TICKET,
        model=Ticket,
        create_schema=schemas.TicketCreate,
        update_schema=schemas.TicketUpdate,
        response_schema=schemas.TicketResponse,
        status_enum=BookingStatus,
        default_status=BookingStatus.PENDING,
        forced_status=BookingStatus.PENDING,
        has_supplier=True,
    ),
    ReservableType.TRANSPORTATION: BookingVariant(
        type=ReservableType.TRANSPORTATION,
        model=Transportation,
        create_schema=schemas.TransportationCreate,
        update_schema=schemas.TransportationUpdate,
        response_schema=schemas.TransportationResponse,
        status_enum=BookingStatus,
        default_status=BookingStatus.PENDING,
        has_supplier=True,
    ),
    ReservableType.APPOINTMENT: BookingVariant(
        type=ReservableType.APPOINTMENT,
        model=Appointment,
        create_schema=schemas.AppointmentCreate,
        update_schema=schemas.AppointmentUpdate,
        response_schema=schemas.AppointmentResponse,
        status_enum=AppointmentStatus,
        default_status=AppointmentStatus.SCHEDULED,
    ),
}


def get_variant(reservable_type: ReservableType) -> BookingVariant:
    return BOOKING_VARIANTS[ReservableType(reservable_type)]

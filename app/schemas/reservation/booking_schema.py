"""
Request/response schemas for the eight booking variants.

Request fields carry the wire names the booking forms send (``flightnumber``,
``NumberOfGeust``...) as aliases; the snake_case names are accepted too.
Unknown keys are ignored so one reservation body can be validated against
the shared schema and a variant schema in turn.
"""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import Optional
from datetime import date, datetime

from app.models.shared.enums import (
    AppointmentStatus, BookingStatus, InsuranceStatus, VisaStatus
)

BOOKING_STATUS_ALIASES = {"Confimed": BookingStatus.CONFIRMED.value}

class BookingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("status", "booking_status", mode="before", check_fields=False)
    @classmethod
    def normalize_status(cls, v):
        # Older booking forms send the misspelled "Confimed"
        if isinstance(v, str):
            return BOOKING_STATUS_ALIASES.get(v, v)
        return v

class BookingResponseBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

# region Flight

class FlightCreate(BookingRequest):
    flight_number: str = Field(..., alias="flightnumber", max_length=50)
    departure_date: datetime = Field(..., alias="departureDate")
    arrival_date: datetime = Field(..., alias="arrivalDate")
    from_airport: str = Field(..., alias="from", max_length=50)
    to_airport: str = Field(..., alias="to", max_length=50)
    airline: str = Field(..., max_length=50)
    passenger_info: str = Field(..., validation_alias=AliasChoices("passangerInfo", "passengerInfo", "passenger_info"))
    status: Optional[BookingStatus] = None
    notes: Optional[str] = None

class FlightUpdate(BookingRequest):
    flight_number: Optional[str] = Field(None, alias="flightnumber", max_length=50)
    departure_date: Optional[datetime] = Field(None, alias="departureDate")
    arrival_date: Optional[datetime] = Field(None, alias="arrivalDate")
    from_airport: Optional[str] = Field(None, alias="from", max_length=50)
    to_airport: Optional[str] = Field(None, alias="to", max_length=50)
    airline: Optional[str] = Field(None, max_length=50)
    passenger_info: Optional[str] = Field(None, validation_alias=AliasChoices("passangerInfo", "passengerInfo", "passenger_info"))
    booking_status: Optional[BookingStatus] = Field(None, alias="bookingStatus")
    notes: Optional[str] = None

class FlightResponse(BookingResponseBase):
    flight_number: str
    from_airport: str
    to_airport: str
    departure_date: datetime
    arrival_date: datetime
    airline: str
    passenger_info: str
    status: BookingStatus

# endregion

# region Hotel

class HotelCreate(BookingRequest):
    hotel_name: str = Field(..., alias="hotelName", max_length=255)
    booking_number: str = Field(..., alias="BookingNumber", max_length=50)
    check_in_date: date
    check_out_date: date
    number_of_guests: int = Field(..., alias="NumberOfGeust", ge=1)
    number_of_rooms: int = Field(..., alias="NumberOfRoom", ge=1)
    room_type: str = Field(..., alias="roomType", max_length=50)
    status: Optional[BookingStatus] = None
    notes: Optional[str] = None

    @field_validator("check_out_date")
    @classmethod
    def validate_stay(cls, v, info: ValidationInfo):
        check_in = info.data.get("check_in_date")
        if check_in is not None and v <= check_in:
            raise ValueError("check_out_date must be after check_in_date")
        return v

class HotelUpdate(BookingRequest):
    hotel_name: Optional[str] = Field(None, alias="hotelName", max_length=255)
    booking_number: Optional[str] = Field(None, alias="BookingNumber", max_length=50)
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    number_of_guests: Optional[int] = Field(None, alias="NumberOfGeust", ge=1)
    number_of_rooms: Optional[int] = Field(None, alias="NumberOfRoom", ge=1)
    room_type: Optional[str] = Field(None, alias="roomType", max_length=50)
    booking_status: Optional[BookingStatus] = Field(None, alias="bookingStatus")
    notes: Optional[str] = None

class HotelResponse(BookingResponseBase):
    name: str
    booking_number: str
    number_of_guests: int
    number_of_rooms: int
    room_type: str
    check_in_date: date
    check_out_date: date
    status: BookingStatus

# endregion

# region Cruise

class CruiseCreate(BookingRequest):
    cruise_name: str = Field(..., alias="cruise", max_length=255)
    ship_name: str = Field(..., alias="ship", max_length=255)
    cabin_type: str = Field(..., alias="cabin", max_length=50)
    departure_date: datetime = Field(..., alias="departureDate")
    arrival_date: datetime = Field(..., alias="returnDate")
    departure_port: str = Field(..., alias="departureport", max_length=255)
    arrival_port: str = Field(..., alias="returnPort", max_length=255)
    cruise_line: str = Field(..., alias="cruiseLine", max_length=255)
    status: Optional[BookingStatus] = None
    notes: Optional[str] = None

class CruiseUpdate(BookingRequest):
    cruise_name: Optional[str] = Field(None, alias="cruise", max_length=255)
    ship_name: Optional[str] = Field(None, alias="ship", max_length=255)
    cabin_type: Optional[str] = Field(None, alias="cabin", max_length=50)
    departure_date: Optional[datetime] = Field(None, alias="departureDate")
    arrival_date: Optional[datetime] = Field(None, alias="returnDate")
    departure_port: Optional[str] = Field(None, alias="departureport", max_length=255)
    arrival_port: Optional[str] = Field(None, alias="returnPort", max_length=255)
    cruise_line: Optional[str] = Field(None, alias="cruiseLine", max_length=255)
    booking_status: Optional[BookingStatus] = Field(None, alias="bookingStatus")
    notes: Optional[str] = None

class CruiseResponse(BookingResponseBase):
    cruise_name: str
    ship_name: str
    cabin_type: str
    departure_date: datetime
    arrival_date: datetime
    departure_port: str
    arrival_port: str
    cruise_line: str
    status: BookingStatus

# endregion

# region Visa

class VisaCreate(BookingRequest):
    country: str = Field(..., max_length=255)
    visa_type: str = Field(..., alias="visa", max_length=50)
    application_date: date = Field(..., alias="applicationDate")
    application_details: str = Field(..., validation_alias=AliasChoices("applicationDetials", "applicationDetails", "application_details"))
    duration: int = Field(..., ge=1)
    status: Optional[VisaStatus] = None
    notes: Optional[str] = None

class VisaUpdate(BookingRequest):
    country: Optional[str] = Field(None, max_length=255)
    visa_type: Optional[str] = Field(None, alias="visa", max_length=50)
    application_date: Optional[date] = Field(None, alias="applicationDate")
    application_details: Optional[str] = Field(None, validation_alias=AliasChoices("applicationDetials", "applicationDetails", "application_details"))
    duration: Optional[int] = Field(None, ge=1)
    booking_status: Optional[VisaStatus] = Field(None, alias="bookingStatus")
    notes: Optional[str] = None

class VisaResponse(BookingResponseBase):
    country: str
    visa_type: str
    application_date: date
    application_details: str
    duration: int
    status: VisaStatus

# endregion

# region Insurance

class InsuranceCreate(BookingRequest):
    insurance_type: str = Field(..., alias="insurance", max_length=50)
    provider: str = Field(..., max_length=255)
    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")
    insured_persons: str = Field(..., alias="insuredPersons")
    status: Optional[InsuranceStatus] = None
    notes: Optional[str] = None

    @field_validator("end_date")
    @classmethod
    def validate_period(cls, v, info: ValidationInfo):
        start = info.data.get("start_date")
        if start is not None and v < start:
            raise ValueError("endDate must be on or after startDate")
        return v

class InsuranceUpdate(BookingRequest):
    insurance_type: Optional[str] = Field(None, alias="insurance", max_length=50)
    provider: Optional[str] = Field(None, max_length=255)
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    insured_persons: Optional[str] = Field(None, alias="insuredPersons")
    booking_status: Optional[InsuranceStatus] = Field(None, alias="bookingStatus")
    notes: Optional[str] = None

class InsuranceResponse(BookingResponseBase):
    insurance_type: str
    provider: str
    start_date: date
    end_date: date
    insured_persons: str
    status: InsuranceStatus

# endregion

# region Ticket

class TicketCreate(BookingRequest):
    event_name: str = Field(..., alias="event", max_length=255)
    event_date: datetime = Field(..., alias="eventDate")
    tickets_count: int = Field(..., alias="ticketCount", ge=1)
    quantity: int = Field(..., ge=1)
    seat_category: str = Field(..., alias="seatcategory", max_length=50)
    status: Optional[BookingStatus] = None
    notes: Optional[str] = None

class TicketUpdate(BookingRequest):
    event_name: Optional[str] = Field(None, alias="event", max_length=255)
    event_date: Optional[datetime] = Field(None, alias="eventDate")
    tickets_count: Optional[int] = Field(None, alias="ticketCount", ge=1)
    quantity: Optional[int] = Field(None, ge=1)
    seat_category: Optional[str] = Field(None, alias="seatcategory", max_length=50)
    booking_status: Optional[BookingStatus] = Field(None, alias="bookingStatus")
    notes: Optional[str] = None

class TicketResponse(BookingResponseBase):
    event_name: str
    event_date: datetime
    tickets_count: int
    quantity: int
    seat_category: str
    status: BookingStatus

# endregion

# region Transportation

class TransportationCreate(BookingRequest):
    transport_type: str = Field(..., max_length=50)
    transportation_date: datetime = Field(..., alias="transportationDate")
    pickup_location: str = Field(..., alias="pickupLocation", max_length=255)
    dropoff_location: str = Field(..., alias="dropoffLocation", max_length=255)
    route_from: str = Field(..., alias="routeFrom", max_length=255)
    route_to: str = Field(..., alias="routeTo", max_length=255)
    passenger_count: int = Field(..., alias="passengerCount", ge=1)
    status: Optional[BookingStatus] = None
    notes: Optional[str] = None

class TransportationUpdate(BookingRequest):
    transport_type: Optional[str] = Field(None, max_length=50)
    transportation_date: Optional[datetime] = Field(None, alias="transportationDate")
    pickup_location: Optional[str] = Field(None, alias="pickupLocation", max_length=255)
    dropoff_location: Optional[str] = Field(None, alias="dropoffLocation", max_length=255)
    route_from: Optional[str] = Field(None, alias="routeFrom", max_length=255)
    route_to: Optional[str] = Field(None, alias="routeTo", max_length=255)
    passenger_count: Optional[int] = Field(None, alias="passengerCount", ge=1)
    booking_status: Optional[BookingStatus] = Field(None, alias="bookingStatus")
    notes: Optional[str] = None

class TransportationResponse(BookingResponseBase):
    transport_type: str
    transportation_date: datetime
    pickup_location: str
    dropoff_location: str
    route_from: str
    route_to: str
    passenger_count: int
    status: BookingStatus

# endregion

# region Appointment

class AppointmentCreate(BookingRequest):
    appointment_type: str = Field(..., alias="appointment", max_length=50)
    appointment_date: datetime = Field(..., alias="applicationDate")
    location: str = Field(..., max_length=255)
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None

class AppointmentUpdate(BookingRequest):
    appointment_type: Optional[str] = Field(None, alias="appointment", max_length=50)
    appointment_date: Optional[datetime] = Field(None, alias="applicationDate")
    location: Optional[str] = Field(None, max_length=255)
    booking_status: Optional[AppointmentStatus] = Field(None, alias="bookingStatus")
    notes: Optional[str] = None

class AppointmentResponse(BookingResponseBase):
    appointment_type: str
    appointment_date: datetime
    location: str
    status: AppointmentStatus

# endregion

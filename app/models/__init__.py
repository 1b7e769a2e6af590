from app.models.organization.company import Company
from app.models.auth.user import User
from app.models.hr.shift import Shift
from app.models.hr.shift_break import Break
from app.models.hr.leave_request import LeaveRequest
from app.models.notification.notification import Notification
from app.models.reservation.customer import Customer
from app.models.reservation.supplier import Supplier
from app.models.reservation.reservation import Reservation
from app.models.reservation.flight import Flight
from app.models.reservation.hotel import Hotel
from app.models.reservation.cruise import Cruise
from app.models.reservation.visa import Visa
from app.models.reservation.insurance import Insurance
from app.models.reservation.ticket import Ticket
from app.models.reservation.transportation import Transportation
from app.models.reservation.appointment import Appointment


__all__ = [
    "Company",
    "User",
    "Shift",
    "Break",
    "LeaveRequest",
    "Notification",
    "Customer",
    "Supplier",
    "Reservation",
    "Flight",
    "Hotel",
    "Cruise",
    "Visa",
    "Insurance",
    "Ticket",
    "Transportation",
    "Appointment",
]

from enum import Enum

# Enums
class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"
    ACCOUNTANT = "accountant"

# Shift related enums
class ShiftState(str, Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    ON_BREAK = "on_break"
    ENDED = "ended"

class AttendanceDayStatus(str, Enum):
    PRESENT = "present"
    EXCUSED_ABSENCE = "excused-absence"
    UNEXCUSED_ABSENCE = "unexcused-absence"
    FUTURE = "future"

class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

# Reservation related enums
class ReservationStatus(str, Enum):
    HOLD = "Hold"
    ISSUED = "Issued"
    CANCELLED = "Cancelled"

class ReservableType(str, Enum):
    FLIGHT = "Flight"
    HOTEL = "Hotel"
    CRUISE = "Cruise"
    VISA = "Visa"
    INSURANCE = "Insurance"
    TICKET = "Ticket"
    TRANSPORTATION = "Transportation"
    APPOINTMENT = "Appointment"

class BookingStatus(str, Enum):
    """Flights, hotels, cruises, tickets and transportation"""
    CONFIRMED = "Confirmed"
    PENDING = "Pending"
    CANCELLED = "Cancelled"

class VisaStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

class InsuranceStatus(str, Enum):
    ACTIVE = "Active"
    EXPIRED = "Expired"
    CANCELLED = "Cancelled"

class AppointmentStatus(str, Enum):
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

class SupplierPaymentStatus(str, Enum):
    PAID = "Paid"
    UNPAID = "Unpaid"
    CONFIRMED = "Confirmed"
    PENDING = "Pending"
    CANCELLED = "Cancelled"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    ACTIVE = "Active"
    EXPIRED = "Expired"

class NotificationCategory(str, Enum):
    LEAVE_REQUEST = "LEAVE_REQUEST"
    LEAVE_REVIEW = "LEAVE_REVIEW"
    SHIFT = "SHIFT"
    RESERVATION = "RESERVATION"

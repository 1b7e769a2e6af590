from fastapi import APIRouter
from app.api.v1.endpoints.hr import attendance, breaks, leave_requests, shifts
from app.api.v1.endpoints.notification import notifications
from app.api.v1.endpoints.organization import company
from app.api.v1.endpoints.reservation import reservations

api_router = APIRouter()

# Organization routes
api_router.include_router(company.router, prefix="/company", tags=["Company"])

# HR routes
api_router.include_router(shifts.router, prefix="/shifts", tags=["Human Resource"])
api_router.include_router(breaks.router, prefix="/breaks", tags=["Human Resource"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["Human Resource"])
api_router.include_router(leave_requests.router, tags=["Human Resource"])

# Reservation routes
api_router.include_router(reservations.router, prefix="/reservations", tags=["Reservations"])

# Notification routes
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])

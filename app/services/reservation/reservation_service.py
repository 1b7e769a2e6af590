import logging
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime
from decimal import Decimal
from fastapi import HTTPException, status
from pydantic import BaseModel as Schema, ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from app.core.exceptions import InvalidStateTransitionError, NotFoundError, ValidationError
from app.core.logging import log_user_action
from app.db.base import BaseModel
from app.models.reservation.customer import Customer
from app.models.reservation.reservation import Reservation
from app.models.reservation.supplier import Supplier
from app.models.shared.enums import ReservableType, ReservationStatus, SupplierPaymentStatus
from app.schemas.reservation.reservation_schema import (
    CustomerResponse, ReservationCancel, ReservationCreate, ReservationResponse,
    ReservationStatusUpdate, ReservationUpdate, SupplierCreate, SupplierResponse, SupplierUpdate
)
from app.services.reservation.booking_registry import BookingVariant, get_variant
from app.utils.date_time_utils import to_naive_utc, utc_now
from app.utils.validation_errors import errors_from_pydantic

logger = logging.getLogger(__name__)

# Booking columns that may be cleared on update; every other column is NOT NULL
NULLABLE_BOOKING_FIELDS = {"notes"}


def compute_net_profit(sell_price: Decimal, cost: Decimal, fees: Optional[Decimal]) -> Decimal:
    return Decimal(sell_price) - Decimal(cost) - Decimal(fees or 0)


def _naive(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: to_naive_utc(v) if isinstance(v, datetime) else v for k, v in values.items()}


class ReservationService:
    """
    Reservations wrap exactly one booking variant plus its customer and,
    for supplier-bearing variants, a supplier. Creation and deletion touch
    several tables and always run in one transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _validate(schema: type, payload: Dict[str, Any]) -> Schema:
        try:
            return schema.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError("The given data was invalid", errors_from_pydantic(e))

    # region Loading

    async def _get_reservation(self, reservation_id: int) -> Reservation:
        result = await self.session.execute(
            select(Reservation)
            .options(selectinload(Reservation.customer), selectinload(Reservation.supplier))
            .where(Reservation.id == reservation_id, Reservation.is_deleted == False)
            .execution_options(populate_existing=True)
        )
        reservation = result.scalar_one_or_none()
        if reservation is None:
            raise NotFoundError(f"Reservation {reservation_id} not found")
        return reservation

    async def _get_booking(self, reservation: Reservation) -> Optional[BaseModel]:
        model = get_variant(reservation.reservable_type).model
        result = await self.session.execute(
            select(model)
            .where(model.id == reservation.reservable_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _get_bookings(self, reservations: List[Reservation]) -> Dict[Tuple[ReservableType, int], BaseModel]:
        """One query per variant present in ``reservations``"""
        ids_by_type: Dict[ReservableType, List[int]] = {}
        for reservation in reservations:
            ids_by_type.setdefault(reservation.reservable_type, []).append(reservation.reservable_id)

        bookings = {}
        for reservable_type, ids in ids_by_type.items():
            model = get_variant(reservable_type).model
            result = await self.session.execute(select(model).where(model.id.in_(ids)))
            for booking in result.scalars().all():
                bookings[(reservable_type, booking.id)] = booking
        return bookings

    def _serialize(self, reservation: Reservation, booking: Optional[BaseModel]) -> ReservationResponse:
        variant = get_variant(reservation.reservable_type)
        reservable = None
        if booking is not None and not booking.is_deleted:
            reservable = variant.response_schema.model_validate(booking).model_dump(mode="json")

        return ReservationResponse(
            id=reservation.id,
            user_id=reservation.user_id,
            customer=CustomerResponse.model_validate(reservation.customer) if reservation.customer else None,
            supplier=SupplierResponse.model_validate(reservation.supplier) if reservation.supplier else None,
            reservable_type=reservation.reservable_type,
            reservable_id=reservation.reservable_id,
            reservable=reservable,
            status=reservation.status,
            sell_price=reservation.sell_price,
            cost=reservation.cost,
            fees=reservation.fees,
            net_profit=reservation.net_profit,
            notes=reservation.notes,
            reason_cancelled=reservation.reason_cancelled,
            sent=reservation.sent,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )

    async def get_reservation(self, reservation_id: int) -> ReservationResponse:
        reservation = await self._get_reservation(reservation_id)
        return self._serialize(reservation, await self._get_booking(reservation))

    async def get_reservations(
        self,
        page_index: int = 1,
        page_size: int = 100,
        reservation_status: Optional[ReservationStatus] = None,
        reservable_type: Optional[ReservableType] = None,
        sent: Optional[bool] = None,
        user_id: Optional[int] = None
    ) -> Dict[str, Any]:
        """Get paginated reservations, newest first"""
        conditions = [Reservation.is_deleted == False]
        if reservation_status is not None:
            conditions.append(Reservation.status == reservation_status)
        if reservable_type is not None:
            conditions.append(Reservation.reservable_type == reservable_type)
        if sent is not None:
            conditions.append(Reservation.sent == sent)
        if user_id is not None:
            conditions.append(Reservation.user_id == user_id)

        total_count = await self.session.scalar(select(func.count(Reservation.id)).where(*conditions))

        skip = (page_index - 1) * page_size
        result = await self.session.execute(
            select(Reservation)
            .options(selectinload(Reservation.customer), selectinload(Reservation.supplier))
            .where(*conditions)
            .order_by(Reservation.id.desc())
            .offset(skip)
            .limit(page_size)
        )
        reservations = list(result.scalars().all())
        bookings = await self._get_bookings(reservations)

        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total_count or 0,
            "data": [
                self._serialize(r, bookings.get((r.reservable_type, r.reservable_id)))
                for r in reservations
            ]
        }

    # endregion

    # region Create / Update

    async def create_reservation(self, payload: Dict[str, Any], current_user_id: Optional[int] = None) -> ReservationResponse:
        """
        Create customer, booking, supplier and reservation in one transaction.

        The booking's initial status is normalized by its variant and the
        reservation always starts on ``Hold``. Any failure rolls back every
        row written so far.
        """
        try:
            shared = self._validate(ReservationCreate, payload)
            variant = get_variant(shared.type)
            creator_id = shared.user_id or current_user_id

            customer = Customer(name=shared.name, phone=shared.phone_number, created_by=creator_id)
            self.session.add(customer)
            await self.session.flush()

            booking_data = self._validate(variant.create_schema, payload)
            booking = variant.model(
                **variant.to_columns(_naive(booking_data.model_dump(exclude={"status"}))),
                status=variant.initial_status(booking_data.status),
                created_by=creator_id,
            )
            self.session.add(booking)
            await self.session.flush()

            supplier = None
            if variant.has_supplier:
                supplier_data = self._validate(SupplierCreate, payload)
                supplier = Supplier(
                    name=supplier_data.supplier_name,
                    phone=supplier_data.supplier_phone,
                    payment_status=supplier_data.payment_status,
                    created_by=creator_id,
                )
                self.session.add(supplier)
                await self.session.flush()

            details = shared.details
            fees = details.fees if details.fees is not None else Decimal("0")
            net_profit = shared.net_profit if shared.net_profit is not None else compute_net_profit(details.sell_price, details.cost, fees)

            reservation = Reservation(
                user_id=creator_id,
                customer_id=customer.id,
                supplier_id=supplier.id if supplier else None,
                reservable_type=variant.type,
                reservable_id=booking.id,
                status=ReservationStatus.HOLD,
                sell_price=details.sell_price,
                cost=details.cost,
                fees=fees,
                net_profit=net_profit,
                notes=shared.notes,
                reason_cancelled=shared.reason_cancelled,
                sent=False,
                created_by=creator_id,
            )
            self.session.add(reservation)
            await self.session.commit()

            log_user_action(creator_id, "create", f"{variant.type.value} reservation", reservation.id)
            return await self.get_reservation(reservation.id)

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating reservation: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating reservation")

    @staticmethod
    def _check_booking(variant: BookingVariant, booking: BaseModel) -> None:
        """Cross-field rules re-checked on the merged booking"""
        check_in = getattr(booking, "check_in_date", None)
        check_out = getattr(booking, "check_out_date", None)
        if check_in is not None and check_out is not None and check_out <= check_in:
            raise ValidationError.for_field("check_out_date", "check_out_date must be after check_in_date")

        if variant.type == ReservableType.INSURANCE and booking.end_date < booking.start_date:
            raise ValidationError.for_field("endDate", "endDate must be on or after startDate")

    async def update_reservation(
        self,
        reservation_id: int,
        payload: Dict[str, Any],
        current_user_id: Optional[int] = None
    ) -> ReservationResponse:
        """
        Apply a partial update. Absent fields keep their value; the booking
        type cannot change. Net profit follows the effective sell price,
        cost and fees unless ``net_profit`` is given explicitly.
        """
        try:
            reservation = await self._get_reservation(reservation_id)
            variant = get_variant(reservation.reservable_type)

            shared = self._validate(ReservationUpdate, payload)
            if shared.type is not None and shared.type != variant.type:
                raise ValidationError.for_field(
                    "type", f"Reservation is a {variant.type.value} booking; type cannot change to {shared.type.value}"
                )
            booking_changes = self._validate(variant.update_schema, payload).model_dump(exclude_unset=True)

            # Customer
            if shared.name is not None:
                reservation.customer.name = shared.name
            if shared.phone_number is not None:
                reservation.customer.phone = shared.phone_number

            # Booking
            booking = await self._get_booking(reservation)
            if booking is None:
                raise NotFoundError(f"{variant.type.value} booking for reservation {reservation_id} not found")
            for field, value in variant.to_columns(_naive(booking_changes)).items():
                if value is None and field not in NULLABLE_BOOKING_FIELDS:
                    continue
                setattr(booking, field, value)
            self._check_booking(variant, booking)
            booking.updated_by = current_user_id

            # Supplier
            if variant.has_supplier:
                supplier_changes = self._validate(SupplierUpdate, payload).model_dump(exclude_unset=True, exclude_none=True)
                if reservation.supplier is not None:
                    supplier = reservation.supplier
                    if "supplier_name" in supplier_changes:
                        supplier.name = supplier_changes["supplier_name"]
                    if "supplier_phone" in supplier_changes:
                        supplier.phone = supplier_changes["supplier_phone"]
                    if "payment_status" in supplier_changes:
                        supplier.payment_status = supplier_changes["payment_status"]
                elif "supplier_name" in supplier_changes:
                    supplier = Supplier(
                        name=supplier_changes["supplier_name"],
                        phone=supplier_changes.get("supplier_phone"),
                        payment_status=supplier_changes.get("payment_status") or SupplierPaymentStatus.UNPAID,
                        created_by=current_user_id,
                    )
                    self.session.add(supplier)
                    await self.session.flush()
                    reservation.supplier_id = supplier.id

            # Financials
            details = shared.details.model_dump(exclude_unset=True, exclude_none=True) if shared.details else {}
            for field, value in details.items():
                setattr(reservation, field, value)
            if shared.net_profit is not None:
                reservation.net_profit = shared.net_profit
            elif details:
                reservation.net_profit = compute_net_profit(reservation.sell_price, reservation.cost, reservation.fees)

            # Reservation
            changes = shared.model_dump(exclude_unset=True)
            if changes.get("status") is not None:
                reservation.status = shared.status
            for field in ("notes", "reason_cancelled"):
                if field in changes:
                    setattr(reservation, field, changes[field])
            reservation.updated_by = current_user_id

            await self.session.commit()

            log_user_action(current_user_id, "update", f"{variant.type.value} reservation", reservation.id)
            return await self.get_reservation(reservation.id)

        except HTTPException:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating reservation {reservation_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating reservation")

    # endregion

    # region Status

    async def update_status(
        self,
        reservation_id: int,
        data: ReservationStatusUpdate,
        current_user_id: Optional[int] = None
    ) -> ReservationResponse:
        try:
            reservation = await self._get_reservation(reservation_id)
            reservation.status = data.status
            reservation.updated_by = current_user_id
            await self.session.commit()

            logger.info(f"Reservation {reservation_id} status set to {data.status.value} by user {current_user_id}")
            return await self.get_reservation(reservation_id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating status of reservation {reservation_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating reservation status")

    async def cancel_reservation(
        self,
        reservation_id: int,
        data: ReservationCancel,
        current_user_id: Optional[int] = None
    ) -> ReservationResponse:
        try:
            reservation = await self._get_reservation(reservation_id)
            if reservation.status == ReservationStatus.CANCELLED:
                raise InvalidStateTransitionError(f"Reservation {reservation_id} is already cancelled")

            reservation.status = ReservationStatus.CANCELLED
            reservation.reason_cancelled = data.reason_cancelled
            reservation.updated_by = current_user_id
            await self.session.commit()

            log_user_action(current_user_id, "cancel", "reservation", reservation_id)
            return await self.get_reservation(reservation_id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error cancelling reservation {reservation_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error cancelling reservation")

    async def send_reservation(self, reservation_id: int, current_user_id: Optional[int] = None) -> ReservationResponse:
        """Hand the reservation over to accounting"""
        try:
            reservation = await self._get_reservation(reservation_id)
            if not reservation.sent:
                reservation.sent = True
                reservation.updated_by = current_user_id
                await self.session.commit()
                logger.info(f"Reservation {reservation_id} sent by user {current_user_id}")

            return await self.get_reservation(reservation_id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error sending reservation {reservation_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error sending reservation")

    # endregion

    async def delete_reservation(self, reservation_id: int, current_user_id: Optional[int] = None) -> bool:
        """Soft delete the reservation with its booking and customer"""
        try:
            reservation = await self._get_reservation(reservation_id)
            booking = await self._get_booking(reservation)
            now = utc_now()

            if booking is not None and not booking.is_deleted:
                booking.soft_delete(current_user_id, now)
            if reservation.customer is not None and not reservation.customer.is_deleted:
                reservation.customer.soft_delete(current_user_id, now)
            reservation.soft_delete(current_user_id, now)

            await self.session.commit()

            log_user_action(current_user_id, "delete", "reservation", reservation_id)
            return True

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error deleting reservation {reservation_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting reservation")

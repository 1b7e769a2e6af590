import logging
from typing import Any, Dict, List, Optional
from datetime import date
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from app.core.exceptions import InvalidStateTransitionError, NotFoundError, ValidationError
from app.core.logging import log_user_action
from app.models.hr.leave_request import LeaveRequest
from app.models.shared.enums import LeaveStatus, NotificationCategory, UserRole
from app.schemas.hr.leave_request_schema import (
    LeaveRequestCreate, LeaveRequestResponse, LeaveRequestReview
)
from app.services.auth.user_service import UserService
from app.services.notification.notification_service import NotificationService
from app.utils.date_time_utils import utc_now

logger = logging.getLogger(__name__)

REVIEWER_ROLES = (UserRole.ADMIN, UserRole.MANAGER)

class LeaveRequestService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_service = UserService(session)
        self.notification_service = NotificationService(session)

    async def _get_leave_request(self, leave_request_id: int) -> LeaveRequest:
        result = await self.session.execute(
            select(LeaveRequest)
            .options(selectinload(LeaveRequest.user))
            .where(LeaveRequest.id == leave_request_id, LeaveRequest.is_deleted == False)
            .execution_options(populate_existing=True)
        )
        leave_request = result.scalar_one_or_none()
        if leave_request is None:
            raise NotFoundError(f"Leave request {leave_request_id} not found")
        return leave_request

    async def get_leave_request(self, leave_request_id: int) -> LeaveRequestResponse:
        return LeaveRequestResponse.model_validate(await self._get_leave_request(leave_request_id))

    async def get_leave_requests(
        self,
        user_id: Optional[int] = None,
        leave_status: Optional[LeaveStatus] = None,
        page_index: int = 1,
        page_size: int = 100
    ) -> Dict[str, Any]:
        """Get paginated leave requests, newest leave date first"""
        conditions = [LeaveRequest.is_deleted == False]
        if user_id is not None:
            conditions.append(LeaveRequest.user_id == user_id)
        if leave_status is not None:
            conditions.append(LeaveRequest.status == leave_status)

        total_count = await self.session.scalar(
            select(func.count(LeaveRequest.id)).where(*conditions)
        )

        skip = (page_index - 1) * page_size
        result = await self.session.execute(
            select(LeaveRequest)
            .options(selectinload(LeaveRequest.user))
            .where(*conditions)
            .order_by(LeaveRequest.leave_date.desc(), LeaveRequest.id.desc())
            .offset(skip)
            .limit(page_size)
        )

        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total_count or 0,
            "data": [LeaveRequestResponse.model_validate(lr) for lr in result.scalars().all()]
        }

    async def create_leave_request(
        self,
        data: LeaveRequestCreate,
        current_user_id: Optional[int] = None
    ) -> LeaveRequestResponse:
        """New requests always start ``pending``; the company's admins and managers are notified"""
        try:
            user = await self.user_service.get_user_or_404(data.user_id)

            leave_request = LeaveRequest(
                user_id=user.id,
                leave_type=data.leave_type,
                leave_date=data.leave_date,
                notes=data.notes,
                status=LeaveStatus.PENDING,
                created_by=current_user_id or user.id,
            )
            self.session.add(leave_request)
            await self.session.flush()

            reviewers = await self.user_service.get_company_users_by_role(
                user.company_id, REVIEWER_ROLES, exclude_user_id=user.id
            )
            self.notification_service.notify_users(
                [reviewer.id for reviewer in reviewers],
                title="New leave request",
                message=f"{user.name} requested {data.leave_type} leave on {data.leave_date.isoformat()}",
                category=NotificationCategory.LEAVE_REQUEST,
                reference_type="leave_request",
                reference_id=leave_request.id,
            )

            await self.session.commit()

            logger.info(f"Leave request {leave_request.id} created for user {user.id}, {len(reviewers)} reviewers notified")
            return LeaveRequestResponse.model_validate(await self._get_leave_request(leave_request.id))

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating leave request: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating leave request")

    async def review_leave_request(
        self,
        leave_request_id: int,
        data: LeaveRequestReview,
        current_user_id: Optional[int] = None
    ) -> LeaveRequestResponse:
        """Approve or reject a pending request and notify its owner"""
        try:
            leave_request = await self._get_leave_request(leave_request_id)

            if leave_request.status != LeaveStatus.PENDING:
                raise InvalidStateTransitionError(
                    f"Leave request {leave_request_id} has already been {leave_request.status.value}"
                )

            reviewer_id = data.reviewed_by if data.reviewed_by is not None else current_user_id
            if reviewer_id is not None and await self.user_service.get_user(reviewer_id) is None:
                raise ValidationError.for_field("reviewed_by", f"Reviewer {reviewer_id} not found")

            leave_request.status = data.status
            leave_request.reviewed_by = reviewer_id
            leave_request.reviewed_at = utc_now()
            leave_request.updated_by = reviewer_id

            self.notification_service.add_notification(
                leave_request.user_id,
                title=f"Leave request {data.status.value}",
                message=f"Your {leave_request.leave_type} leave on {leave_request.leave_date.isoformat()} was {data.status.value}",
                category=NotificationCategory.LEAVE_REVIEW,
                reference_type="leave_request",
                reference_id=leave_request.id,
            )

            await self.session.commit()

            log_user_action(reviewer_id, data.status.value, "leave_request", leave_request.id)
            return LeaveRequestResponse.model_validate(await self._get_leave_request(leave_request.id))

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error reviewing leave request {leave_request_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error reviewing leave request")

    async def delete_leave_request(self, leave_request_id: int, current_user_id: Optional[int] = None) -> bool:
        try:
            leave_request = await self._get_leave_request(leave_request_id)
            leave_request.soft_delete(current_user_id)
            await self.session.commit()

            logger.info(f"Leave request {leave_request_id} deleted by user {current_user_id}")
            return True

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error deleting leave request {leave_request_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting leave request")

    def _approved_conditions(self, user_id: int, start_date: date, end_date: date):
        if end_date < start_date:
            raise ValidationError.for_field("end_date", "end_date must be on or after start_date")
        return [
            LeaveRequest.user_id == user_id,
            LeaveRequest.status == LeaveStatus.APPROVED,
            LeaveRequest.is_deleted == False,
            LeaveRequest.leave_date >= start_date,
            LeaveRequest.leave_date <= end_date,
        ]

    async def get_approved_leaves(self, user_id: int, start_date: date, end_date: date) -> List[LeaveRequest]:
        """Approved leaves of a user with ``leave_date`` in [start_date, end_date]"""
        result = await self.session.execute(
            select(LeaveRequest)
            .where(*self._approved_conditions(user_id, start_date, end_date))
            .order_by(LeaveRequest.leave_date)
        )
        return list(result.scalars().all())

    async def count_approved(self, user_id: int, start_date: date, end_date: date) -> int:
        count = await self.session.scalar(
            select(func.count(LeaveRequest.id)).where(*self._approved_conditions(user_id, start_date, end_date))
        )
        return count or 0

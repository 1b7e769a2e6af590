import logging
from typing import Iterable, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select, update

from app.core.exceptions import NotFoundError
from app.models.notification.notification import Notification
from app.models.shared.enums import NotificationCategory
from app.utils.date_time_utils import utc_now

logger = logging.getLogger(__name__)

class NotificationService:
    """In-app notification records. Delivery to clients happens elsewhere."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def add_notification(
        self,
        user_id: int,
        title: str,
        message: str,
        category: NotificationCategory,
        reference_type: Optional[str] = None,
        reference_id: Optional[int] = None
    ) -> Notification:
        """Stage a notification in the caller's transaction; the caller commits"""
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            category=category,
            reference_type=reference_type,
            reference_id=reference_id,
            is_read=False,
        )
        self.session.add(notification)
        return notification

    def notify_users(
        self,
        user_ids: Iterable[int],
        title: str,
        message: str,
        category: NotificationCategory,
        reference_type: Optional[str] = None,
        reference_id: Optional[int] = None
    ) -> List[Notification]:
        return [
            self.add_notification(user_id, title, message, category, reference_type, reference_id)
            for user_id in user_ids
        ]

    async def get_user_notifications(
        self,
        user_id: int,
        unread_only: bool = False,
        limit: int = 50
    ) -> List[Notification]:
        """Get user's recent notifications"""
        conditions = [
            Notification.user_id == user_id,
            Notification.is_deleted == False,
        ]
        if unread_only:
            conditions.append(Notification.is_read == False)

        result = await self.session.execute(
            select(Notification)
            .where(*conditions)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_unread_count(self, user_id: int) -> int:
        count = await self.session.scalar(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read == False,
                Notification.is_deleted == False,
            )
        )
        return count or 0

    async def mark_notification_read(self, notification_id: int, user_id: Optional[int] = None) -> Notification:
        """Mark notification as read"""
        try:
            conditions = [Notification.id == notification_id, Notification.is_deleted == False]
            if user_id is not None:
                conditions.append(Notification.user_id == user_id)

            result = await self.session.execute(select(Notification).where(*conditions))
            notification = result.scalar_one_or_none()
            if notification is None:
                raise NotFoundError("Notification not found")

            if not notification.is_read:
                notification.is_read = True
                notification.read_at = utc_now()
                await self.session.commit()
                await self.session.refresh(notification)

            return notification

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error marking notification {notification_id} as read: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating notification")

    async def mark_all_read(self, user_id: int) -> int:
        """Mark every unread notification of a user as read; returns how many changed"""
        try:
            result = await self.session.execute(
                update(Notification)
                .where(
                    Notification.user_id == user_id,
                    Notification.is_read == False,
                    Notification.is_deleted == False,
                )
                .values(is_read=True, read_at=utc_now())
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()
            logger.info(f"Marked {result.rowcount} notifications as read for user {user_id}")
            return result.rowcount or 0

        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error marking notifications as read for user {user_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating notifications")

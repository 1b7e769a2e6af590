import logging
from typing import Iterable, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.exceptions import NotFoundError
from app.models.auth.user import User
from app.models.shared.enums import UserRole

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        result = await self.session.execute(
            select(User).where(
                User.id == user_id,
                User.is_deleted == False
            )
        )
        return result.scalar_one_or_none()

    async def get_user_or_404(self, user_id: int) -> User:
        user = await self.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def get_company_users_by_role(
        self,
        company_id: Optional[int],
        roles: Iterable[UserRole],
        exclude_user_id: Optional[int] = None
    ) -> List[User]:
        """Active users of a company holding any of ``roles``"""
        if company_id is None:
            return []

        conditions = [
            User.company_id == company_id,
            User.role.in_(list(roles)),
            User.is_active == True,
            User.is_deleted == False,
        ]
        if exclude_user_id is not None:
            conditions.append(User.id != exclude_user_id)

        result = await self.session.execute(select(User).where(*conditions).order_by(User.id))
        return list(result.scalars().all())

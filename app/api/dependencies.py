from typing import Optional
from fastapi import Header
import logging

from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

async def get_current_user_id(
    x_user_id: Optional[int] = Header(None, alias="X-User-Id")
) -> Optional[int]:
    """
    Acting user as forwarded by the upstream gateway.

    Authentication happens before requests reach this service; the id is
    only used for audit columns and as a default for ``user_id`` filters.
    """
    return x_user_id

def resolve_user_id(user_id: Optional[int], current_user_id: Optional[int]) -> int:
    """Explicit ``user_id`` wins, then the acting user"""
    resolved = user_id if user_id is not None else current_user_id
    if resolved is None:
        raise ValidationError.for_field("user_id", "user_id is required")
    return resolved

"""
Shift housekeeping tasks run by Celery beat
"""
import asyncio
import logging
from app.core.celery_app import celery_app
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from app.core.config import settings

logger = logging.getLogger(__name__)

# Create async engine for background tasks
async_engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

def run_async_task(coro):
    """Helper function to run async coroutines in Celery tasks"""
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        return loop.run_until_complete(coro)
    except Exception as e:
        logger.error(f"Error in async task: {e}")
        raise
    finally:
        loop.close()

async def _auto_end_open_shifts(session_factory=async_session_maker) -> int:
    # Import inside function to avoid circular imports
    from app.services.hr.shift_service import ShiftService

    async with session_factory() as db:
        service = ShiftService(db)
        return await service.auto_end_open_shifts()

@celery_app.task
def auto_end_open_shifts():
    """Close shifts still open from a previous day at 23:59:59 of their start day"""
    ended = run_async_task(_auto_end_open_shifts())
    logger.info(f"Auto-ended {ended} open shift(s)")
    return f"Auto-ended {ended} open shift(s)"

import asyncio
import logging
from app.core.database import engine
from app.models.base import Base
# Register every model on the metadata
import app.models  # noqa: F401

logger = logging.getLogger(__name__)

async def create_tables():
    """Create all tables (local runs; deployments use Alembic)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def init_db():
    """Initialize the database"""
    try:
        logger.info("Initializing database...")
        await create_tables()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        raise

if __name__ == "__main__":
    asyncio.run(init_db())

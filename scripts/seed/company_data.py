"""
Company and Staff Seed Data (async, idempotent)
- One agency company with default shift settings
- Admin, manager, accountant and employee users
Run:  python scripts/seed/company_data.py
"""

import os, sys
import asyncio
import logging
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import async_session_maker
from app.core.logging_config import setup_logging
from app.db.init_db import create_tables
from app.models.auth.user import User
from app.models.organization.company import Company
from app.models.shared.enums import UserRole

logger = logging.getLogger("scripts.seed")

# ----------------------------------------------------------------------
# SEED DATA
# ----------------------------------------------------------------------

COMPANY_SEED = {
    "name": "Demo Travel Agency",
    "subdomain": "demo",
    "settings": {
        "shiftSettings": {"defaultShiftHours": 8, "defaultBreakMinutes": 60, "shiftsPerDay": 1},
        "general": {"timezone": "UTC", "currency": "USD"},
    },
}

USERS_SEED = [
    {"name": "Agency Admin", "email": "admin@demo.travel", "role": UserRole.ADMIN},
    {"name": "Office Manager", "email": "manager@demo.travel", "role": UserRole.MANAGER},
    {"name": "Accountant", "email": "accounts@demo.travel", "role": UserRole.ACCOUNTANT},
    {"name": "Travel Agent", "email": "agent@demo.travel", "role": UserRole.EMPLOYEE},
]

# ----------------------------------------------------------------------
# ASYNC HELPERS (idempotent upserts)
# ----------------------------------------------------------------------

async def get_or_create_company(db: AsyncSession, data: dict) -> Company:
    result = await db.execute(select(Company).where(Company.subdomain == data["subdomain"]))
    obj = result.scalar_one_or_none()
    if obj:
        return obj
    obj = Company(**data)
    db.add(obj)
    await db.flush()
    return obj

async def get_or_create_user(db: AsyncSession, data: dict, company_id: int) -> User:
    result = await db.execute(select(User).where(User.email == data["email"]))
    obj = result.scalar_one_or_none()
    if obj:
        return obj
    obj = User(company_id=company_id, **data)
    db.add(obj)
    await db.flush()
    return obj

# ----------------------------------------------------------------------
# MAIN ASYNC SEED LOGIC
# ----------------------------------------------------------------------

async def seed(db: AsyncSession):
    company = await get_or_create_company(db, COMPANY_SEED)
    users = [await get_or_create_user(db, data, company.id) for data in USERS_SEED]
    await db.commit()
    logger.info(f"Company '{company.name}' ready with {len(users)} users")

# ----------------------------------------------------------------------
# ASYNC ENTRY POINT
# ----------------------------------------------------------------------

async def main():
    setup_logging()
    # Create tables (safe if already created)
    await create_tables()

    async with async_session_maker() as db:
        try:
            await seed(db)
            logger.info("Company seed completed successfully")
        except Exception as ex:
            await db.rollback()
            logger.error(f"Seed failed: {ex}")
            raise

if __name__ == "__main__":
    asyncio.run(main())

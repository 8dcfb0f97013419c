"""
Seed script for reference data: the city directory and the admin account

Safe to run repeatedly; rows that already exist are left alone.

Usage:
    python -m flight_booking.scripts.seed_data
"""
import asyncio
import logging

from sqlalchemy import select

from flight_booking.core.config import Settings, get_settings
from flight_booking.core.database import Database
from flight_booking.core.security import hash_password
from flight_booking.models import City, User

logger = logging.getLogger(__name__)

# The 81 provinces of Turkey
CITY_NAMES = [
    'Adana', 'Adıyaman', 'Afyonkarahisar', 'Ağrı', 'Amasya',
    'Ankara', 'Antalya', 'Artvin', 'Aydın', 'Balıkesir',
    'Bilecik', 'Bingöl', 'Bitlis', 'Bolu', 'Burdur',
    'Bursa', 'Çanakkale', 'Çankırı', 'Çorum', 'Denizli',
    'Diyarbakır', 'Edirne', 'Elazığ', 'Erzincan', 'Erzurum',
    'Eskişehir', 'Gaziantep', 'Giresun', 'Gümüşhane', 'Hakkâri',
    'Hatay', 'Isparta', 'Mersin', 'İstanbul', 'İzmir',
    'Kars', 'Kastamonu', 'Kayseri', 'Kırklareli', 'Kırşehir',
    'Kocaeli', 'Konya', 'Kütahya', 'Malatya', 'Manisa',
    'Kahramanmaraş', 'Mardin', 'Muğla', 'Muş', 'Nevşehir',
    'Niğde', 'Ordu', 'Rize', 'Sakarya', 'Samsun',
    'Siirt', 'Sinop', 'Sivas', 'Tekirdağ', 'Tokat',
    'Trabzon', 'Tunceli', 'Şanlıurfa', 'Uşak', 'Van',
    'Yozgat', 'Zonguldak', 'Aksaray', 'Bayburt', 'Karaman',
    'Kırıkkale', 'Batman', 'Şırnak', 'Bartın', 'Ardahan',
    'Iğdır', 'Yalova', 'Karabük', 'Kilis', 'Osmaniye',
    'Düzce',
]


async def seed_cities(db) -> int:
    """Insert missing cities; returns how many were created"""
    result = await db.execute(select(City.name))
    existing = set(result.scalars().all())

    missing = [name for name in CITY_NAMES if name not in existing]
    db.add_all([City(name=name) for name in missing])
    await db.commit()

    logger.info(f"Seeded {len(missing)} cities ({len(existing)} already present)")
    return len(missing)


async def seed_admin(db, settings: Settings) -> bool:
    """Create the administrator account unless it already exists"""
    if await db.get(User, settings.ADMIN_EMAIL):
        logger.debug(f"Admin {settings.ADMIN_EMAIL} already exists, skipping...")
        return False

    db.add(User(
        email=settings.ADMIN_EMAIL,
        password_hash=hash_password(settings.ADMIN_PASSWORD),
        is_admin=True,
    ))
    await db.commit()

    logger.info(f"Seeded admin user {settings.ADMIN_EMAIL}", extra={'user_email': settings.ADMIN_EMAIL})
    return True


async def seed_reference_data(database: Database, settings: Settings) -> None:
    async with database.session() as db:
        try:
            await seed_cities(db)
            await seed_admin(db, settings)
        except Exception:
            logger.exception("Error during seeding")
            await db.rollback()
            raise


async def main():
    """Create tables and seed them against the configured database"""
    settings = get_settings()
    database = Database(settings.DATABASE_URL)

    print("Starting database seeding...")
    try:
        await database.create_all()
        await seed_reference_data(database, settings)
    finally:
        await database.disconnect()
    print("Seeding complete!")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    asyncio.run(main())

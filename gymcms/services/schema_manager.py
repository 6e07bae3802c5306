"""
GymCMS Backend — Schema Manager
=================================

What:  Creates missing tables and seeds the data a fresh site needs.
Why:   One canonical initialization path for every backend (embedded SQLite
       or PostgreSQL) and for both deployment shapes.
How:   initialize() runs create_all, then each seed step checks whether its
       table is empty and inserts defaults only then. Running it twice is
       a no-op the second time.

Seeds:
    users             the default administrator (role super_admin)
    settings          site identity, contact details, colours, hero, footer
    membership_plans  Basic / Premium / Elite
"""

import logging
from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gymcms.config import settings
from gymcms.database import Database
from gymcms.models import MembershipPlan, Setting, User
from gymcms.services.auth_service import hash_password

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: List[Tuple[str, str]] = [
    ("site_title", "PowerHouse Gym Chitwan"),
    ("site_tagline", "Transform Your Body, Transform Your Life"),
    ("site_description", "Premium fitness center in Chitwan offering world-class equipment and expert trainers."),
    ("contact_email", "info@powerhousegym.com"),
    ("contact_phone", "+977-9800000000"),
    ("contact_address", "Narayangadh, Chitwan, Nepal"),
    ("social_facebook", "https://facebook.com/powerhousegymchitwan"),
    ("social_instagram", "https://instagram.com/powerhousegymchitwan"),
    ("social_youtube", ""),
    ("primary_color", "#ff4d4d"),
    ("secondary_color", "#1a1a2e"),
    ("accent_color", "#f9d342"),
    ("hero_title", "BUILD YOUR BODY &\nPUSH YOUR LIMITS"),
    ("hero_subtitle", "Join the best gym in Chitwan and achieve your fitness goals with expert trainers and premium equipment."),
    ("hero_cta_text", "Start Your Journey"),
    ("hero_cta_link", "#membership"),
    ("footer_text", "© 2024 PowerHouse Gym Chitwan. All rights reserved."),
    ("opening_hours", "Mon-Sat: 5:00 AM - 10:00 PM | Sun: 6:00 AM - 8:00 PM"),
]

DEFAULT_PLANS = [
    {
        "name": "Basic",
        "price": 2000,
        "description": "Perfect for beginners",
        "features": ["Gym Access", "Locker Room", "Basic Equipment"],
        "is_featured": False,
        "sort_order": 1,
    },
    {
        "name": "Premium",
        "price": 3500,
        "description": "Most popular choice",
        "features": ["Everything in Basic", "All Equipment Access", "Group Classes", "Fitness Assessment"],
        "is_featured": True,
        "sort_order": 2,
    },
    {
        "name": "Elite",
        "price": 5000,
        "description": "For serious athletes",
        "features": [
            "Everything in Premium",
            "Personal Training (2x/month)",
            "Nutrition Consultation",
            "Priority Booking",
            "Guest Passes",
        ],
        "is_featured": False,
        "sort_order": 3,
    },
]


async def _is_empty(session: AsyncSession, model) -> bool:
    count = (await session.execute(select(func.count()).select_from(model))).scalar_one()
    return count == 0


class SchemaManager:
    def __init__(self, db: Database):
        self.db = db

    async def initialize(self) -> None:
        await self.db.create_all()
        async with self.db.session() as session:
            await self.seed_admin(session)
            await self.seed_settings(session)
            await self.seed_plans(session)
        logger.info("Schema initialized")

    async def seed_admin(self, session: AsyncSession) -> bool:
        if not await _is_empty(session, User):
            return False
        session.add(
            User(
                email=settings.admin_email.strip().lower(),
                password_hash=hash_password(settings.admin_password),
                name=settings.admin_name,
                role="super_admin",
            )
        )
        await session.flush()
        logger.info("Default admin user created: %s", settings.admin_email)
        return True

    async def seed_settings(self, session: AsyncSession) -> bool:
        if not await _is_empty(session, Setting):
            return False
        session.add_all(Setting(key=key, value=value, type="string") for key, value in DEFAULT_SETTINGS)
        await session.flush()
        logger.info("Default settings created (%d keys)", len(DEFAULT_SETTINGS))
        return True

    async def seed_plans(self, session: AsyncSession) -> bool:
        if not await _is_empty(session, MembershipPlan):
            return False
        for values in DEFAULT_PLANS:
            plan = MembershipPlan(
                name=values["name"],
                price=values["price"],
                billing_period="month",
                description=values["description"],
                is_featured=values["is_featured"],
                is_active=True,
                sort_order=values["sort_order"],
            )
            plan.features = values["features"]
            session.add(plan)
        await session.flush()
        logger.info("Default membership plans created")
        return True

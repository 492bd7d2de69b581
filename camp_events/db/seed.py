"""Hume Lake event catalogue for the 2025-2026 season."""
import logging

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from camp_events.db.schemas import EventCreate
from camp_events.services.storage import DatabaseStorage

logger = logging.getLogger(__name__)

ADULT = "Ages 18 and older"
CHILD = "Ages 8 to 17"


def _options(*pairs, description=ADULT):
    return [{"name": name, "price": price, "description": description} for name, price in pairs]


SEED_EVENTS = [
    {
        "title": "Father/Son Adventure Camp",
        "start_date": "2025-08-21",
        "end_date": "2025-08-23",
        "event_type": "Family Event",
        "description": "An adventure-packed camp experience for fathers and sons with outdoor activities, "
                       "team building, and faith-based programming.",
        "age_group": "8+",
        "gender": "Male",
        "pricing_options": _options(
            ("Event Only Adult", 329),
            ("Single Family Housing with bathroom Adult", 374),
            ("Single Family Housing without bathroom Adult", 359),
            ("Shared Family Housing Adult", 344),
            ("RV Housing Adult", 329),
        ) + _options(
            ("Event Only Child", 329),
            ("Single Family Housing with bathroom Child", 374),
            ("Single Family Housing without bathroom Child", 359),
            ("Shared Family Housing Child", 344),
            ("RV Housing Child", 329),
            description=CHILD,
        ),
    },
    {
        "title": "Rest and Renew - Pastors Retreat",
        "start_date": "2025-09-08",
        "end_date": "2025-09-10",
        "event_type": "Pastor Retreat",
        "description": "A time of spiritual renewal and rest specifically designed for pastors and ministry leaders.",
        "age_group": "18+",
        "gender": "Coed",
        "pricing_options": _options(("Rest & Renew Retreat", 269), ("Rest & Renew Retreat Event Only", 249)),
    },
    {
        "title": "Fall Women's Retreat 1",
        "start_date": "2025-09-19",
        "end_date": "2025-09-21",
        "event_type": "Women's Retreat",
        "description": "A transformative weekend retreat focused on rest, renewal, and spiritual growth for women.",
        "age_group": "18+",
        "gender": "Female",
        "pricing_options": _options(
            ("Event Only (No Housing)", 344), ("Economy Housing", 374),
            ("Standard Housing", 414), ("Deluxe Housing", 444),
        ),
    },
    {
        "title": "Fall Women's Retreat 2",
        "start_date": "2025-09-26",
        "end_date": "2025-09-28",
        "event_type": "Women's Retreat",
        "description": "A transformative weekend retreat focused on rest, renewal, and spiritual growth for women.",
        "age_group": "18+",
        "gender": "Female",
        "pricing_options": _options(
            ("Event Only (No Housing)", 344), ("Economy Housing", 374),
            ("Standard Housing", 414), ("Deluxe Housing", 444),
        ),
    },
    {
        "title": "Fall Marriage Retreat",
        "start_date": "2025-10-03",
        "end_date": "2025-10-05",
        "event_type": "Marriage Retreat",
        "description": "Strengthen your marriage with biblical teaching, fun activities, and quality time together "
                       "in a beautiful mountain setting.",
        "age_group": "18+",
        "gender": "Coed",
        "pricing_options": _options(
            ("Event Only", 459.50), ("Economy Housing", 489.50), ("Standard Housing", 529.50),
            ("Deluxe Housing", 559.50), ("RV Space", 469.50),
        ),
    },
    {
        "title": "Men's Retreat",
        "start_date": "2025-10-09",
        "end_date": "2025-10-11",
        "event_type": "Men's Retreat",
        "description": "A powerful weekend designed to challenge and encourage men in their faith journey.",
        "age_group": "18+",
        "gender": "Male",
        "pricing_options": _options(
            ("Event Only Adult", 394), ("Economy Housing Adult", 424), ("Standard Adult", 464),
            ("Deluxe Housing Adult", 494), ("RV Site Adult", 414),
        ),
    },
    {
        "title": "Creative Arts Conference",
        "start_date": "2025-10-16",
        "end_date": "2025-10-18",
        "event_type": "Creative Arts",
        "description": "Explore and develop your creative gifts through workshops, performances, and inspiration.",
        "age_group": "18+",
        "gender": "Coed",
        "pricing_options": _options(
            ("Adult Event Only", 384), ("Adult Economy Housing", 414), ("Adult Standard Housing", 454),
            ("Adult Deluxe Housing", 484), ("Adult RV Site", 404),
        ),
    },
    {
        "title": "Youth Leaders Retreat",
        "start_date": "2025-11-06",
        "end_date": "2025-11-08",
        "event_type": "Youth Leaders",
        "description": "Equipping and encouraging those who work with youth in ministry settings.",
        "age_group": "18+",
        "gender": "Coed",
        "pricing_options": _options(("Youth Leaders Retreat Adult", 209)),
    },
    {
        "title": "Young Adults Fall Retreat",
        "start_date": "2025-11-07",
        "end_date": "2025-11-09",
        "event_type": "Young Adults",
        "description": "A retreat designed specifically for young adults to grow in faith and community.",
        "age_group": "16-75",
        "gender": "Coed",
        "pricing_options": _options(("Young Adults Adult", 350), description="Ages 18 to 75")
        + _options(("Young Adults Minor", 350), description="Ages 16 to 17"),
    },
    {
        "title": "Father/Daughter Retreat",
        "start_date": "2025-11-14",
        "end_date": "2025-11-16",
        "event_type": "Family Event",
        "description": "A special retreat for fathers and daughters to strengthen their relationship and create "
                       "lasting memories.",
        "age_group": "8+",
        "gender": "Coed",
        "pricing_options": _options(
            ("Event Only Adult", 365), ("Economy Housing Adult", 395), ("Standard Housing Adult", 435),
            ("Deluxe Housing Adult", 465), ("RV Site Adult", 385),
        ) + _options(
            ("Event Only Child", 365), ("Economy Housing Child", 395), ("Standard Housing Child", 435),
            ("Deluxe Housing Child", 465), ("RV Site Child", 385),
            description=CHILD,
        ),
    },
    {
        "title": "Young Adults Winter Retreat",
        "start_date": "2026-03-06",
        "end_date": "2026-03-08",
        "event_type": "Young Adults",
        "description": "A winter retreat for young adults featuring skiing, snowboarding, and spiritual growth.",
        "age_group": "16-75",
        "gender": "Coed",
        "pricing_options": _options(
            ("Young Adults - Winter", 225), ("Young Adults Adult", 395), description="Ages 18 to 75",
        ) + _options(
            ("Young Adults Minor - Winter", 225), ("Young Adults Minor", 395), description="Ages 16 to 17",
        ),
    },
    {
        "title": "Spring Women's Retreat 1",
        "start_date": "2026-04-17",
        "end_date": "2026-04-19",
        "event_type": "Women's Retreat",
        "description": "Spring renewal retreat for women featuring inspiring speakers Megan Marshman and Paige Payne.",
        "age_group": "18+",
        "gender": "Female",
        "pricing_options": _options(
            ("Event Only", 349), ("Economy Housing", 389), ("Standard Housing", 419), ("Deluxe Housing", 479),
        ),
    },
    {
        "title": "Spring Women's Retreat 2",
        "start_date": "2026-04-24",
        "end_date": "2026-04-26",
        "event_type": "Women's Retreat",
        "description": "Spring renewal retreat for women featuring inspiring speakers and worship.",
        "age_group": "18+",
        "gender": "Female",
        "pricing_options": _options(
            ("Event Only", 349), ("Economy Housing", 389), ("Standard Housing", 419), ("Deluxe Housing", 479),
        ),
    },
]


def seed_events(storage: DatabaseStorage, location: str = None, events=None) -> int:
    """
    Insert the catalogue when the events table is empty.

    Safe to call on every startup. Returns how many events were inserted;
    a record that fails validation or insertion is logged and skipped.
    """
    if storage.count_events() > 0:
        logger.info("Events already exist in database, skipping seed")
        return 0

    logger.info("Seeding events to database...")
    inserted = 0
    for raw in SEED_EVENTS if events is None else events:
        data = dict(raw)
        if location and not data.get("location"):
            data["location"] = location
        try:
            storage.add_event(EventCreate(**data))
            inserted += 1
        except (PydanticValidationError, SQLAlchemyError) as e:
            storage.db.rollback()
            logger.error(f"Error inserting event {raw.get('title')}: {e}")
    logger.info(f"Successfully seeded {inserted} events to database")
    return inserted

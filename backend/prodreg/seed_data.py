# Overview: Demo reference data and a 13-entry registration history for local development.

from __future__ import annotations

from .extensions import db
from .models import Category, Product, Registration, User, Location, Purpose
from prodreg.time_utils import parse_iso_datetime


DEMO_USERS = [
    "Tom Peckstadt",
    "Sven De Poorter",
    "Nele Herteleer",
    "Wim Peckstadt",
    "Siegfried Weverbergh",
    "Jan Janssen",
]

DEMO_CATEGORIES = ["Smeermiddelen", "Reinigers", "Onderhoud"]

# (name, qr_code, index into DEMO_CATEGORIES)
DEMO_PRODUCTS = [
    ("Interflon Metal Clean spray 500ml", "IFLS001", 0),
    ("Interflon Grease LT2 Lube shuttle 400gr", "IFFL002", 0),
    ("Interflon Maintenance Kit", "IFD003", 1),
    ("Interflon Food Lube spray 500ml", "IFGR004", 0),
    ("Interflon Foam Cleaner spray 500ml", "IFMC005", 1),
    ("Interflon Fin Super", "IFMK006", 2),
]

DEMO_LOCATIONS = [
    "Warehouse Dematic groot boven",
    "Warehouse Interflon",
    "Warehouse Dematic klein beneden",
    "Onderhoud werkplaats",
    "Kantoor 1.1",
]

DEMO_PURPOSES = ["Presentatie", "Thuiswerken", "Reparatie", "Training", "Demonstratie"]

# (user, product, location, purpose, timestamp, qr_code)
DEMO_REGISTRATIONS = [
    ("Tom Peckstadt", "Interflon Metal Clean spray 500ml", "Warehouse Interflon", "Reparatie", "2025-06-15T05:41:00Z", "IFLS001"),
    ("Nele Herteleer", "Interflon Metal Clean spray 500ml", "Warehouse Dematic klein beneden", "Training", "2025-06-15T05:48:00Z", "IFLS001"),
    ("Tom Peckstadt", "Interflon Grease LT2 Lube shuttle 400gr", "Warehouse Dematic groot boven", "Reparatie", "2025-06-15T12:53:00Z", "IFFL002"),
    ("Tom Peckstadt", "Interflon Grease LT2 Lube shuttle 400gr", "Warehouse Dematic groot boven", "Demonstratie", "2025-06-16T20:32:00Z", "IFFL002"),
    ("Sven De Poorter", "Interflon Metal Clean spray 500ml", "Warehouse Dematic groot boven", "Presentatie", "2025-06-16T21:07:00Z", "IFLS001"),
    ("Tom Peckstadt", "Interflon Maintenance Kit", "Onderhoud werkplaats", "Reparatie", "2025-06-14T10:15:00Z", "IFD003"),
    ("Siegfried Weverbergh", "Interflon Food Lube spray 500ml", "Warehouse Interflon", "Training", "2025-06-14T14:22:00Z", "IFGR004"),
    ("Wim Peckstadt", "Interflon Foam Cleaner spray 500ml", "Warehouse Dematic klein beneden", "Demonstratie", "2025-06-13T09:30:00Z", "IFMC005"),
    ("Sven De Poorter", "Interflon Maintenance Kit", "Onderhoud werkplaats", "Reparatie", "2025-06-13T16:45:00Z", "IFD003"),
    ("Tom Peckstadt", "Interflon Metal Clean spray 500ml", "Warehouse Dematic groot boven", "Presentatie", "2025-06-12T11:20:00Z", "IFLS001"),
    ("Siegfried Weverbergh", "Interflon Grease LT2 Lube shuttle 400gr", "Warehouse Interflon", "Training", "2025-06-12T15:10:00Z", "IFFL002"),
    ("Siegfried Weverbergh", "Interflon Food Lube spray 500ml", "Warehouse Dematic klein beneden", "Demonstratie", "2025-06-11T08:55:00Z", "IFGR004"),
    ("Tom Peckstadt", "Interflon Grease LT2 Lube shuttle 400gr", "Warehouse Dematic groot boven", "Reparatie", "2025-06-10T13:40:00Z", "IFFL002"),
]


def demo_registrations() -> list[Registration]:
    """Transient (unsaved) Registration rows for the demo history."""
    rows = []
    for user, product, location, purpose, ts, qr_code in DEMO_REGISTRATIONS:
        timestamp = parse_iso_datetime(ts)
        rows.append(Registration(
            user_name=user,
            product_name=product,
            location=location,
            purpose=purpose,
            timestamp=timestamp,
            date=timestamp.strftime("%Y-%m-%d"),
            time=timestamp.strftime("%H:%M"),
            qr_code=qr_code,
        ))
    return rows


def seed_demo_data() -> dict:
    """
    Insert the demo data set. Idempotent for reference data; registrations
    are only added when the log is empty.
    """
    created = {"users": 0, "locations": 0, "purposes": 0, "categories": 0, "products": 0, "registrations": 0}

    for model, names, key in (
        (User, DEMO_USERS, "users"),
        (Location, DEMO_LOCATIONS, "locations"),
        (Purpose, DEMO_PURPOSES, "purposes"),
    ):
        for name in names:
            if not db.session.query(model).filter_by(name=name).first():
                db.session.add(model(name=name))
                created[key] += 1

    categories = []
    for name in DEMO_CATEGORIES:
        category = db.session.query(Category).filter_by(name=name).first()
        if not category:
            category = Category(name=name)
            db.session.add(category)
            created["categories"] += 1
        categories.append(category)
    db.session.flush()

    for name, qr_code, category_index in DEMO_PRODUCTS:
        if not db.session.query(Product).filter_by(name=name).first():
            db.session.add(Product(name=name, qr_code=qr_code, category_id=categories[category_index].id))
            created["products"] += 1

    if db.session.query(Registration).count() == 0:
        for registration in demo_registrations():
            db.session.add(registration)
            created["registrations"] += 1

    db.session.commit()
    return created

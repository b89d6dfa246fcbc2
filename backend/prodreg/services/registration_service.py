# Overview: Service-layer operations for the registration log; append, list and delete.

"""
Registration Service - the append-only usage log

WHY: The log is the source for history, statistics and CSV export. Rows are
never updated; date/time columns are derived once from the timestamp and
stored so filters can compare plain strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Product, Registration
from ..validation import ValidationError, clean_name
from prodreg.time_utils import split_date_time, utcnow


REQUIRED_FIELDS = ["user_name", "product_name", "location", "purpose"]


@dataclass
class AppendResult:
    ok: bool
    registration: Registration | None = None
    error: str | None = None


def list_registrations() -> list[Registration]:
    """Full log snapshot in insertion order."""
    return db.session.query(Registration).order_by(Registration.id.asc()).all()


def build_registration(
    *,
    user_name: Any,
    product_name: Any,
    location: Any,
    purpose: Any,
    timestamp: datetime | None = None,
    date: str | None = None,
    time: str | None = None,
    qr_code: str | None = None,
) -> Registration:
    """
    Build (but do not persist) a registration.

    date/time default to values derived from timestamp; the CSV import path
    passes its literal columns instead.
    """
    timestamp = timestamp or utcnow()
    derived_date, derived_time = split_date_time(timestamp)
    return Registration(
        user_name=clean_name(user_name, "user_name"),
        product_name=clean_name(product_name, "product_name"),
        location=clean_name(location, "location"),
        purpose=clean_name(purpose, "purpose"),
        timestamp=timestamp,
        date=date or derived_date,
        time=time or derived_time,
        qr_code=qr_code or None,
    )


def append_registration(record: dict) -> AppendResult:
    """
    Persist one registration; failures are reported, not raised.

    The CSV importer calls this once per row so one bad row cannot abort
    the batch.
    """
    try:
        registration = build_registration(**record)
        db.session.add(registration)
        db.session.commit()
    except (SQLAlchemyError, ValueError, TypeError) as exc:
        db.session.rollback()
        return AppendResult(ok=False, error=str(exc))
    return AppendResult(ok=True, registration=registration)


def create_registration(
    *,
    user_name: Any,
    product_name: Any,
    location: Any,
    purpose: Any,
    now: datetime | None = None,
) -> Registration:
    """
    Register product usage now.

    The product's current code is snapshotted by name (product_name is a
    string, not a foreign key).

    Raises:
        ValidationError: missing/blank field
    """
    product_name = clean_name(product_name, "product_name")
    product = db.session.query(Product).filter_by(name=product_name).first()

    registration = build_registration(
        user_name=user_name,
        product_name=product_name,
        location=location,
        purpose=purpose,
        timestamp=now or utcnow(),
        qr_code=product.qr_code if product else None,
    )
    db.session.add(registration)
    db.session.commit()
    return registration


def validate_registration_payload(payload: dict) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    missing = [f for f in REQUIRED_FIELDS if not str(payload.get(f) or "").strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    return {f: payload[f] for f in REQUIRED_FIELDS}


def delete_registration(registration_id: int) -> bool:
    registration = db.session.query(Registration).filter_by(id=registration_id).first()
    if not registration:
        return False
    db.session.delete(registration)
    db.session.commit()
    return True

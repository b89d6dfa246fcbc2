from __future__ import annotations

from ..extensions import db
from prodreg.time_utils import to_utc_z


class Registration(db.Model):
    """
    One product-usage event.

    Append-only: rows are created and deleted, never updated.

    user_name / product_name / location / purpose are denormalized strings,
    not foreign keys. Renaming a product does not rewrite history.

    date and time are derived from timestamp once, at creation, and stored
    redundantly for filtering. They are never recomputed afterwards.
    """
    __tablename__ = "registrations"
    __table_args__ = (
        db.Index("ix_registrations_date", "date"),
        db.Index("ix_registrations_user_date", "user_name", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    user_name = db.Column(db.String(255), nullable=False)
    product_name = db.Column(db.String(255), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    purpose = db.Column(db.String(255), nullable=False)

    timestamp = db.Column(db.DateTime(timezone=True), nullable=False)
    date = db.Column(db.String(10), nullable=False)  # YYYY-MM-DD
    time = db.Column(db.String(8), nullable=False)  # HH:MM or HH:MM:SS

    # Snapshot of the product's code at write time
    qr_code = db.Column(db.String(128), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return (
            f"<Registration id={self.id} user={self.user_name!r} "
            f"product={self.product_name!r} date={self.date}>"
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_name": self.user_name,
            "product_name": self.product_name,
            "location": self.location,
            "purpose": self.purpose,
            "timestamp": to_utc_z(self.timestamp),
            "date": self.date,
            "time": self.time,
            "qr_code": self.qr_code,
            "created_at": to_utc_z(self.created_at),
        }

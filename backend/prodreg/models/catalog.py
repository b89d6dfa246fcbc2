from __future__ import annotations

from ..extensions import db
from prodreg.time_utils import to_utc_z


class Category(db.Model):
    __tablename__ = "categories"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, unique=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<Category id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": to_utc_z(self.created_at),
        }


class Product(db.Model):
    """
    Catalog entry that registrations refer to by name.

    qr_code is deliberately NOT unique: labels get reprinted and scanners
    produce near-duplicates, so lookups go through the code matcher instead
    of a unique index.

    category_id is a plain column without a foreign key constraint. Deleting
    a category leaves the id behind; readers treat a failed lookup as
    "no category".
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_qr_code", "qr_code"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    qr_code = db.Column(db.String(128), nullable=True)
    category_id = db.Column(db.Integer, nullable=True, index=True)

    attachment_url = db.Column(db.String(1024), nullable=True)
    attachment_name = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} qr_code={self.qr_code!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "qr_code": self.qr_code,
            "category_id": self.category_id,
            "attachment_url": self.attachment_url,
            "attachment_name": self.attachment_name,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class _NamedEntry:
    """Shared columns for the plain name lists (users, locations, purposes)."""

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, unique=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": to_utc_z(self.created_at),
        }


class User(_NamedEntry, db.Model):
    __tablename__ = "users"


class Location(_NamedEntry, db.Model):
    __tablename__ = "locations"


class Purpose(_NamedEntry, db.Model):
    __tablename__ = "purposes"

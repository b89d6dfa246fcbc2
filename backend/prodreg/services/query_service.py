# Overview: Registration query engine; compound filter, stable sort and statistics over the log.

"""
Registration Query Engine

Pure functions over a snapshot of the log (Registration rows or any objects
with the same attributes). Nothing here queries the database; routes load
the snapshot once and pass it in, so the same snapshot and criteria always
produce the same ordering.

FILTER: every active predicate must hold (free text, user, location,
date-from, date-to). Dates compare as YYYY-MM-DD strings.

SORT: stable. String keys use an accent/case-folded collation key, the date
key uses the parsed timestamp. "newest" reverses the comparator for EVERY
key, so "newest" + "user" is reverse-alphabetical.

STATISTICS: always computed over the full log passed in. Ties for "most
frequent" keep the first value seen.
"""

from __future__ import annotations

import re
import unicodedata
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Sequence

from prodreg.time_utils import parse_iso_datetime, utcnow


ALL = "all"

SORT_DATE = "date"
SORT_KEYS = ["date", "user", "product", "location", "purpose"]

ORDER_NEWEST = "newest"
ORDER_OLDEST = "oldest"
SORT_ORDERS = [ORDER_NEWEST, ORDER_OLDEST]

DAILY_WINDOW_DAYS = 7

# sort key -> registration attribute
_SORT_ATTRS = {
    "user": "user_name",
    "product": "product_name",
    "location": "location",
    "purpose": "purpose",
}

_SEARCH_ATTRS = ["user_name", "product_name", "location", "purpose", "qr_code"]

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


class QueryError(ValueError):
    """Raised for invalid filter criteria."""


@dataclass(frozen=True)
class FilterCriteria:
    query: str = ""
    user: str = ALL
    location: str = ALL
    date_from: str = ""
    date_to: str = ""
    sort_by: str = SORT_DATE
    sort_order: str = ORDER_NEWEST

    def __post_init__(self):
        if self.sort_by not in SORT_KEYS:
            raise QueryError(f"sort_by must be one of: {', '.join(SORT_KEYS)}")
        if self.sort_order not in SORT_ORDERS:
            raise QueryError(f"sort_order must be one of: {', '.join(SORT_ORDERS)}")
        for name in ("date_from", "date_to"):
            value = getattr(self, name)
            if not value:
                continue
            # Stored dates compare as text, so only the extended form is accepted
            try:
                if not _ISO_DATE.fullmatch(value):
                    raise ValueError(value)
                date.fromisoformat(value)
            except ValueError:
                raise QueryError(f"{name} must be a YYYY-MM-DD date")

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "FilterCriteria":
        """Build criteria from request args; missing or blank values fall back to defaults."""
        def arg(name: str, default: str) -> str:
            value = args.get(name)
            if value is None:
                return default
            value = str(value).strip()
            return value or default

        return cls(
            query=arg("query", ""),
            user=arg("user", ALL),
            location=arg("location", ALL),
            date_from=arg("date_from", ""),
            date_to=arg("date_to", ""),
            sort_by=arg("sort_by", SORT_DATE),
            sort_order=arg("sort_order", ORDER_NEWEST),
        )

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "user": self.user,
            "location": self.location,
            "date_from": self.date_from,
            "date_to": self.date_to,
            "sort_by": self.sort_by,
            "sort_order": self.sort_order,
        }


def matches(registration: Any, criteria: FilterCriteria) -> bool:
    if criteria.query:
        needle = criteria.query.lower()
        haystack = (getattr(registration, attr, None) for attr in _SEARCH_ATTRS)
        if not any(value and needle in value.lower() for value in haystack):
            return False

    if criteria.user != ALL and registration.user_name != criteria.user:
        return False

    if criteria.location != ALL and registration.location != criteria.location:
        return False

    if criteria.date_from and registration.date < criteria.date_from:
        return False
    if criteria.date_to and registration.date > criteria.date_to:
        return False

    return True


def filter_registrations(registrations: Iterable[Any], criteria: FilterCriteria) -> list[Any]:
    return [r for r in registrations if matches(r, criteria)]


def collation_key(value: str | None) -> tuple[str, str]:
    """
    Locale-style ordering: accents and case are ignored first, the raw
    string breaks remaining ties.
    """
    value = value or ""
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return base, value


def timestamp_value(registration: Any) -> datetime:
    """Sortable UTC-naive timestamp; missing or unparseable values sort first."""
    ts = registration.timestamp
    if isinstance(ts, datetime):
        if ts.tzinfo is not None:
            ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
        return ts
    try:
        return parse_iso_datetime(ts) or datetime.min
    except ValueError:
        return datetime.min


def sort_registrations(registrations: Iterable[Any], criteria: FilterCriteria) -> list[Any]:
    """
    Stable sort by the selected key.

    sorted(reverse=True) keeps equal elements in input order, which is what
    the negated comparator does as well.
    """
    if criteria.sort_by == SORT_DATE:
        key = timestamp_value
    else:
        attr = _SORT_ATTRS[criteria.sort_by]
        key = lambda r: collation_key(getattr(r, attr))  # noqa: E731
    return sorted(registrations, key=key, reverse=criteria.sort_order == ORDER_NEWEST)


def query_registrations(registrations: Iterable[Any], criteria: FilterCriteria | None = None) -> list[Any]:
    """The user-visible history view: filter, then sort."""
    criteria = criteria or FilterCriteria()
    return sort_registrations(filter_registrations(registrations, criteria), criteria)


@dataclass(frozen=True)
class DailyCount:
    date: str
    count: int

    def to_dict(self) -> dict:
        return {"date": self.date, "count": self.count}


@dataclass(frozen=True)
class TopEntry:
    name: str | None
    count: int

    def to_dict(self) -> dict:
        return {"name": self.name, "count": self.count}


@dataclass(frozen=True)
class RegistrationStatistics:
    total: int
    unique_users: int
    unique_products: int
    most_active_user: TopEntry
    most_used_product: TopEntry
    most_used_location: TopEntry
    daily: list[DailyCount] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "unique_users": self.unique_users,
            "unique_products": self.unique_products,
            "most_active_user": self.most_active_user.to_dict(),
            "most_used_product": self.most_used_product.to_dict(),
            "most_used_location": self.most_used_location.to_dict(),
            "daily": [d.to_dict() for d in self.daily],
        }


def most_frequent(counts: Counter) -> TopEntry:
    """
    Highest count wins; on a tie the first-inserted key is kept.

    Counter preserves insertion order and max() returns the first maximal
    item, so a later key only wins with a strictly greater count.
    """
    if not counts:
        return TopEntry(name=None, count=0)
    name, count = max(counts.items(), key=lambda item: item[1])
    return TopEntry(name=name, count=count)


def daily_counts(registrations: Sequence[Any], today: date | None = None) -> list[DailyCount]:
    """Exactly DAILY_WINDOW_DAYS entries, oldest first, ending today."""
    today = today or utcnow().date()
    days = [
        (today - timedelta(days=offset)).isoformat()
        for offset in range(DAILY_WINDOW_DAYS - 1, -1, -1)
    ]
    per_day = Counter(r.date for r in registrations)
    return [DailyCount(date=d, count=per_day.get(d, 0)) for d in days]


def compute_statistics(registrations: Sequence[Any], today: date | None = None) -> RegistrationStatistics:
    users: Counter = Counter()
    products: Counter = Counter()
    locations: Counter = Counter()
    for r in registrations:
        users[r.user_name] += 1
        products[r.product_name] += 1
        locations[r.location] += 1

    return RegistrationStatistics(
        total=len(registrations),
        unique_users=len(users),
        unique_products=len(products),
        most_active_user=most_frequent(users),
        most_used_product=most_frequent(products),
        most_used_location=most_frequent(locations),
        daily=daily_counts(registrations, today),
    )

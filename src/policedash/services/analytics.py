"""Aggregate complaint, RTI and user data into dashboard figures."""

from __future__ import annotations

import calendar
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from policedash.store.datastore import DataStore, DataStoreError

LOGGER = logging.getLogger(__name__)

CLOSED_STATUSES = frozenset({"Closed", "closed", "Resolved", "resolved"})
TREND_MONTHS = 6
RECENT_LIMIT = 10

Row = Mapping[str, Any]


@dataclass
class Summary:
    total_users: int = 0
    total_complaints: int = 0
    open_complaints: int = 0
    closed_complaints: int = 0
    total_rti: int = 0


@dataclass
class MonthBucket:
    year: int
    month: int
    label: str
    complaints: int = 0
    rti: int = 0


@dataclass
class ActivityItem:
    kind: str
    title: str
    status: str
    created_at: Optional[datetime]


@dataclass
class AnalyticsReport:
    summary: Summary
    monthly: List[MonthBucket] = field(default_factory=list)
    categories: Dict[str, int] = field(default_factory=dict)
    statuses: Dict[str, int] = field(default_factory=dict)
    recent: List[ActivityItem] = field(default_factory=list)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Coerce a stored timestamp to an aware UTC datetime; naive values are taken as UTC."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            LOGGER.debug("Unparseable timestamp %r", value)
            return None
    else:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def trailing_months(now: datetime, count: int = TREND_MONTHS) -> List[Tuple[int, int]]:
    """``(year, month)`` pairs for the ``count`` months ending at ``now``, oldest first."""

    pairs = []
    year, month = now.year, now.month
    for _ in range(count):
        pairs.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(pairs))


def summarize(complaints: Sequence[Row], rti_requests: Sequence[Row], user_count: int) -> Summary:
    closed = sum(1 for row in complaints if row.get("status") in CLOSED_STATUSES)
    return Summary(
        total_users=user_count,
        total_complaints=len(complaints),
        open_complaints=len(complaints) - closed,
        closed_complaints=closed,
        total_rti=len(rti_requests),
    )


def monthly_trend(complaints: Iterable[Row], rti_requests: Iterable[Row], now: datetime) -> List[MonthBucket]:
    window = trailing_months(now)
    spans_years = window[0][0] != window[-1][0]
    buckets: Dict[Tuple[int, int], MonthBucket] = {}
    for year, month in window:
        label = calendar.month_abbr[month]
        if spans_years:
            label = f"{label} {year}"
        buckets[(year, month)] = MonthBucket(year=year, month=month, label=label)

    for rows, attr in ((complaints, "complaints"), (rti_requests, "rti")):
        for row in rows:
            created = parse_timestamp(row.get("created_at"))
            if created is None:
                continue
            bucket = buckets.get((created.year, created.month))
            if bucket is not None:
                setattr(bucket, attr, getattr(bucket, attr) + 1)
    return list(buckets.values())


def category_breakdown(complaints: Iterable[Row]) -> Dict[str, int]:
    return dict(Counter(row.get("complaint_type") or "Uncategorized" for row in complaints))


def status_breakdown(complaints: Iterable[Row]) -> Dict[str, int]:
    return dict(Counter(row.get("status") or "Unknown" for row in complaints))


def recent_activity(
    complaints: Iterable[Row],
    rti_requests: Iterable[Row],
    limit: int = RECENT_LIMIT,
) -> List[ActivityItem]:
    items = [
        ActivityItem(
            kind="complaint",
            title=row.get("complaint_type") or "Complaint",
            status=row.get("status") or "Unknown",
            created_at=parse_timestamp(row.get("created_at")),
        )
        for row in complaints
    ]
    items.extend(
        ActivityItem(
            kind="rti",
            title="RTI Request",
            status=row.get("status") or "Unknown",
            created_at=parse_timestamp(row.get("created_at")),
        )
        for row in rti_requests
    )
    oldest = datetime.min.replace(tzinfo=timezone.utc)
    items.sort(key=lambda item: item.created_at or oldest, reverse=True)
    return items[:limit]


def build_report(
    complaints: Sequence[Row],
    rti_requests: Sequence[Row],
    user_count: int,
    *,
    now: Optional[datetime] = None,
) -> AnalyticsReport:
    now = now or datetime.now(tz=timezone.utc)
    return AnalyticsReport(
        summary=summarize(complaints, rti_requests, user_count),
        monthly=monthly_trend(complaints, rti_requests, now),
        categories=category_breakdown(complaints),
        statuses=status_breakdown(complaints),
        recent=recent_activity(complaints, rti_requests),
    )


class Analytics:
    """Fetches the raw tables and recomputes the report from scratch on every refresh."""

    def __init__(self, store: DataStore, *, clock: Callable[[], datetime] | None = None) -> None:
        self.store = store
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))
        self.report: Optional[AnalyticsReport] = None
        self.error: Optional[str] = None

    def refresh(self) -> Optional[AnalyticsReport]:
        try:
            complaints = self.store.select("complaints", columns=("id", "complaint_type", "status", "created_at"))
            rti_requests = self.store.select("rti_requests", columns=("id", "status", "created_at"))
            user_count = self.store.count("users")
        except DataStoreError as exc:
            LOGGER.error("Error fetching analytics: %s", exc)
            self.error = str(exc)
            return self.report
        self.error = None
        self.report = build_report(complaints, rti_requests, user_count, now=self._clock())
        return self.report


__all__ = [
    "ActivityItem",
    "Analytics",
    "AnalyticsReport",
    "MonthBucket",
    "Summary",
    "build_report",
    "category_breakdown",
    "monthly_trend",
    "parse_timestamp",
    "recent_activity",
    "status_breakdown",
    "summarize",
    "trailing_months",
]

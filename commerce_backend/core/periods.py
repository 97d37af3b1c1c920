# core/periods.py

"""
REPORTING PERIODS

Half-open datetime ranges [start, end) in the active timezone.

Sources:
- month/year query params (dashboard, finances, transactions, movements)
- sales list presets: today, 7d, this_month, last_month, all
- explicit from/to dates (to is inclusive by day)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from django.db.models.functions import ExtractMonth, ExtractYear
from django.utils import timezone

from core.errors import ValidationError

SALES_PRESETS = ("today", "7d", "this_month", "last_month", "all")


@dataclass(frozen=True)
class Period:
    start: datetime | None
    end: datetime | None
    year: int | None = None
    month: int | None = None

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def filter(self, qs, field: str):
        if self.start is not None:
            qs = qs.filter(**{f"{field}__gte": self.start})
        if self.end is not None:
            qs = qs.filter(**{f"{field}__lt": self.end})
        return qs

    def previous(self) -> "Period":
        if self.year is not None and self.month is not None:
            y, m = (self.year, self.month - 1) if self.month > 1 else (self.year - 1, 12)
            return month_period(y, m)
        if self.year is not None:
            return year_period(self.year - 1)
        if self.start is None or self.end is None:
            return Period(start=None, end=None)
        span = self.end - self.start
        return Period(start=self.start - span, end=self.start)

    def as_dict(self) -> dict:
        return {
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
            "year": self.year,
            "month": self.month,
        }


def _local_midnight(d: date) -> datetime:
    return timezone.make_aware(datetime(d.year, d.month, d.day))


def month_period(year: int, month: int) -> Period:
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    start = _local_midnight(date(year, month, 1))
    nxt = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return Period(start=start, end=_local_midnight(nxt), year=year, month=month)


def year_period(year: int) -> Period:
    return Period(
        start=_local_midnight(date(year, 1, 1)),
        end=_local_midnight(date(year + 1, 1, 1)),
        year=year,
    )


def _int_param(params, name: str) -> int | None:
    raw = (params.get(name) or "").strip() if params is not None else ""
    if not raw:
        return None
    if not raw.isdigit():
        raise ValidationError(f"{name} must be an integer")
    return int(raw)


def _date_param(params, name: str) -> date | None:
    raw = (params.get(name) or "").strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be YYYY-MM-DD") from exc


def resolve_month_year(params) -> Period:
    """
    month+year -> that month
    year only  -> that year
    month only -> that month of the current year
    neither    -> current month
    """
    today = timezone.localdate()
    year = _int_param(params, "year")
    month = _int_param(params, "month")

    if year and month:
        return month_period(year, month)
    if year:
        return year_period(year)
    if month:
        return month_period(today.year, month)
    return month_period(today.year, today.month)


def resolve_sales_range(params) -> Period:
    """
    Explicit from/to wins over preset. Default preset is "all".
    """
    start_d = _date_param(params, "from")
    end_d = _date_param(params, "to")
    if start_d or end_d:
        if start_d and end_d and end_d < start_d:
            raise ValidationError("'to' must not be before 'from'")
        return Period(
            start=_local_midnight(start_d) if start_d else None,
            end=_local_midnight(end_d + timedelta(days=1)) if end_d else None,
        )

    preset = (params.get("preset") or "all").strip().lower()
    if preset not in SALES_PRESETS:
        raise ValidationError(f"preset must be one of: {', '.join(SALES_PRESETS)}")

    today = timezone.localdate()
    if preset == "today":
        return Period(start=_local_midnight(today), end=_local_midnight(today + timedelta(days=1)))
    if preset == "7d":
        return Period(
            start=_local_midnight(today - timedelta(days=6)),
            end=_local_midnight(today + timedelta(days=1)),
        )
    if preset == "this_month":
        return month_period(today.year, today.month)
    if preset == "last_month":
        return month_period(today.year, today.month).previous()
    return Period(start=None, end=None)


def today_period() -> Period:
    today = timezone.localdate()
    return Period(start=_local_midnight(today), end=_local_midnight(today + timedelta(days=1)))


def periods_for(qs, field: str) -> list[dict]:
    """
    Distinct (year, month) pairs present in qs, newest first.
    """
    rows = (
        qs.annotate(period_year=ExtractYear(field), period_month=ExtractMonth(field))
        .values("period_year", "period_month")
        .distinct()
        .order_by("-period_year", "-period_month")
    )
    return [{"year": r["period_year"], "month": r["period_month"]} for r in rows]

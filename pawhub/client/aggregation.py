"""In-memory aggregation of raw table rows for the admin analytics dashboard.

All functions are pure: they take already-fetched rows and return fresh
values. Month and day boundaries are computed in UTC.
"""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Iterable, Protocol, Sequence

from ..constants import DEFAULT_STATUS_COLOR, ORDER_STATUS_COLORS
from ..schemas.analytics import (
    AnalyticsDataset,
    AnalyticsReport,
    AppointmentRow,
    AppointmentStats,
    CategorySales,
    ClinicRow,
    ClinicStats,
    DailyTrend,
    OrderRow,
    ProductRow,
    StatusSlice,
    TopProduct,
)
from ..schemas.common import ensure_utc


class _Timestamped(Protocol):
    created_at: datetime


def _month_start(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _previous_month_start(moment: datetime) -> datetime:
    return _month_start(_month_start(moment) - timedelta(days=1))


def _day_label(moment: datetime) -> str:
    return f"{moment:%b} {moment.day}"


def sum_revenue(orders: Iterable[OrderRow]) -> float:
    return sum((order.total_amount for order in orders), 0.0)


def growth_rate(current: float, previous: float) -> float:
    """Percentage change from ``previous`` to ``current``; 0 when there is no baseline."""

    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


def orders_between(orders: Iterable[OrderRow], start: datetime, end: datetime | None = None) -> list[OrderRow]:
    """Orders created in ``[start, end)``; an open ``end`` means no upper bound.

    Naive bounds are taken as UTC, like the rows themselves.
    """

    start, end = _utc_window(start, end)
    return [order for order in orders if _in_window(order, start, end)]


def _utc_window(start: datetime, end: datetime | None) -> tuple[datetime, datetime | None]:
    return ensure_utc(start), ensure_utc(end) if end is not None else None


def _in_window(row: _Timestamped, start: datetime, end: datetime | None) -> bool:
    if row.created_at < start:
        return False
    return end is None or row.created_at < end


def _count_between(rows: Iterable[_Timestamped], start: datetime, end: datetime | None = None) -> int:
    start, end = _utc_window(start, end)
    return sum(1 for row in rows if _in_window(row, start, end))


def daily_trends(orders: Sequence[OrderRow], now: datetime, days: int = 14) -> list[DailyTrend]:
    """Per-day order counts and revenue for the last ``days`` days, oldest first."""

    today = ensure_utc(now).replace(hour=0, minute=0, second=0, microsecond=0)
    trends: list[DailyTrend] = []
    for offset in range(days - 1, -1, -1):
        day_start = today - timedelta(days=offset)
        bucket = orders_between(orders, day_start, day_start + timedelta(days=1))
        trends.append(DailyTrend(date=_day_label(day_start), orders=len(bucket), revenue=sum_revenue(bucket)))
    return trends


def status_distribution(orders: Iterable[OrderRow]) -> list[StatusSlice]:
    """Order counts per status in first-seen order."""

    counts = Counter(order.status or "pending" for order in orders)
    return [
        StatusSlice(
            name=status[:1].upper() + status[1:],
            value=value,
            color=ORDER_STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR),
        )
        for status, value in counts.items()
    ]


def _product_index(products: Iterable[ProductRow]) -> dict[str, ProductRow]:
    return {str(product.id): product for product in products}


def category_sales(
    orders: Iterable[OrderRow],
    products: Iterable[ProductRow],
    limit: int = 6,
) -> list[CategorySales]:
    """Units and revenue per product category, highest revenue first.

    Line items that do not match a known product are skipped.
    """

    catalog = _product_index(products)
    totals: dict[str, list[float]] = {}
    for order in orders:
        for item in order.items:
            product = catalog.get(item.id) if item.id is not None else None
            if product is None:
                continue
            bucket = totals.setdefault(product.category or "Other", [0, 0.0])
            bucket[0] += item.quantity
            bucket[1] += item.price * item.quantity

    ranked = [CategorySales(name=name, sales=int(sales), revenue=revenue) for name, (sales, revenue) in totals.items()]
    ranked.sort(key=lambda entry: entry.revenue, reverse=True)
    return ranked[:limit]


def top_products(
    orders: Iterable[OrderRow],
    products: Iterable[ProductRow],
    limit: int = 5,
) -> list[TopProduct]:
    catalog = _product_index(products)
    totals: dict[str, list[float]] = {}
    for order in orders:
        for item in order.items:
            if item.id is None:
                continue
            bucket = totals.setdefault(item.id, [0, 0.0])
            bucket[0] += item.quantity
            bucket[1] += item.price * item.quantity

    ranked: list[TopProduct] = []
    for product_id, (quantity, revenue) in totals.items():
        product = catalog.get(product_id)
        ranked.append(
            TopProduct(
                id=product_id,
                name=product.name if product else "Unknown Product",
                category=(product.category if product else None) or "Other",
                total_sold=int(quantity),
                revenue=revenue,
                image_url=product.image_url if product else None,
            )
        )
    ranked.sort(key=lambda entry: entry.revenue, reverse=True)
    return ranked[:limit]


def clinic_stats(clinics: Sequence[ClinicRow]) -> ClinicStats:
    return ClinicStats(
        total=len(clinics),
        verified=sum(1 for clinic in clinics if clinic.is_verified),
        pending=sum(1 for clinic in clinics if clinic.verification_status == "pending"),
        blocked=sum(1 for clinic in clinics if clinic.is_blocked),
    )


def appointment_stats(appointments: Sequence[AppointmentRow]) -> AppointmentStats:
    counts = Counter(appointment.status for appointment in appointments)
    return AppointmentStats(
        total=len(appointments),
        completed=counts["completed"],
        confirmed=counts["confirmed"],
        pending=counts["pending"],
        cancelled=counts["cancelled"],
    )


def build_report(dataset: AnalyticsDataset, now: datetime | None = None) -> AnalyticsReport:
    """Compute every dashboard figure from one dataset snapshot."""

    now = ensure_utc(now) if now is not None else datetime.now(timezone.utc)
    this_month = _month_start(now)
    last_month = _previous_month_start(now)
    orders = dataset.orders

    this_month_orders = orders_between(orders, this_month)
    last_month_orders = orders_between(orders, last_month, this_month)
    total_revenue = sum_revenue(orders)
    previous_month_revenue = sum_revenue(last_month_orders)

    new_users = _count_between(dataset.profiles, this_month)
    users_last_month = _count_between(dataset.profiles, last_month, this_month)

    return AnalyticsReport(
        total_revenue=total_revenue,
        previous_month_revenue=previous_month_revenue,
        revenue_growth=growth_rate(sum_revenue(this_month_orders), previous_month_revenue),
        total_orders=len(orders),
        previous_month_orders=len(last_month_orders),
        order_growth=growth_rate(len(this_month_orders), len(last_month_orders)),
        average_order_value=total_revenue / len(orders) if orders else 0.0,
        daily_trends=daily_trends(orders, now),
        order_status_distribution=status_distribution(orders),
        category_sales=category_sales(orders, dataset.products),
        top_products=top_products(orders, dataset.products),
        total_users=len(dataset.profiles),
        new_users_this_month=new_users,
        user_growth=growth_rate(new_users, users_last_month),
        clinic_stats=clinic_stats(dataset.clinics),
        appointment_stats=appointment_stats(dataset.appointments),
        total_posts=len(dataset.posts),
        posts_this_month=_count_between(dataset.posts, this_month),
        total_pets=dataset.total_pets,
    )


__all__ = [
    "appointment_stats",
    "build_report",
    "category_sales",
    "clinic_stats",
    "daily_trends",
    "growth_rate",
    "orders_between",
    "status_distribution",
    "sum_revenue",
    "top_products",
]

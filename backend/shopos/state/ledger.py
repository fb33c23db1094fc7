# Overview: Due arithmetic and sale ordering shared by the reducer and the dues views.

from __future__ import annotations

from datetime import datetime

from ..time_utils import parse_stored_datetime


def sale_due(sale: dict) -> float:
    return (sale.get("total") or 0) - (sale.get("paidAmount") or 0)


def sale_date(sale: dict) -> datetime:
    """Sort key for settlement: sales without a usable date come first."""
    return parse_stored_datetime(sale.get("date")) or datetime.min

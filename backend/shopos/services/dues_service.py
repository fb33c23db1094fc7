# Overview: Read-only due projections over the state tree, plus the
# collection guard applied before COLLECT_DUE is dispatched.

from __future__ import annotations

from ..state.ledger import sale_date, sale_due
from ..validation import ValidationError


# Float noise below this is not a due
DUE_EPSILON = 0.001


def customer_total_due(state: dict, customer_id: str) -> float:
    return sum(sale_due(s) for s in state.get("sales") or [] if s.get("customerId") == customer_id)


def outstanding_sales(state: dict, customer_id: str) -> list[dict]:
    """Invoices of the customer that still carry a due, oldest first."""
    sales = [
        s for s in state.get("sales") or []
        if s.get("customerId") == customer_id and sale_due(s) > DUE_EPSILON
    ]
    return sorted(sales, key=sale_date)


def customers_with_dues(state: dict) -> list[dict]:
    """Customers with at least one unpaid invoice, largest total due first."""
    totals: dict = {}
    has_due_invoice: set = set()
    for sale in state.get("sales") or []:
        customer_id = sale.get("customerId")
        due = sale_due(sale)
        totals[customer_id] = totals.get(customer_id, 0) + due
        if due > DUE_EPSILON:
            has_due_invoice.add(customer_id)

    rows = [
        {**customer, "totalDue": totals.get(customer.get("id"), 0)}
        for customer in state.get("customers") or []
        if customer.get("id") in has_due_invoice
    ]
    return sorted(rows, key=lambda row: row["totalDue"], reverse=True)


def validate_due_collection(state: dict, customer_id: str, amount) -> float:
    """
    Guard for COLLECT_DUE: the amount must be positive and may not exceed
    the customer's total due. Returns the current total due.
    """
    if not isinstance(amount, (int, float)) or isinstance(amount, bool) or amount <= 0:
        raise ValidationError("Amount must be greater than zero")

    total_due = customer_total_due(state, customer_id)
    if amount > total_due + DUE_EPSILON:
        raise ValidationError(
            "Amount exceeds the customer's total due",
            details={"amount": amount, "total_due": round(total_due, 2)},
        )
    return total_due

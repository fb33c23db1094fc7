"""
Pytest fixtures for ShopOS backend tests.

Provides a pinned reducer context, in-memory stores, and an app wired to an
in-memory SQLite database.
"""

import itertools
from datetime import datetime

import pytest

from shopos import create_app
from shopos.extensions import db, state_store
from shopos.state import (
    MemoryStorageBackend,
    ReducerContext,
    StatePersistence,
    StateStore,
    build_seed_state,
)


FIXED_NOW = datetime(2025, 6, 15, 10, 30, 0)


def make_context(now=FIXED_NOW):
    counter = itertools.count(1)
    return ReducerContext(
        clock=lambda: now,
        id_factory=lambda prefix: f"{prefix}_{next(counter)}",
        seed_factory=lambda: build_seed_state(now),
    )


@pytest.fixture
def context():
    return make_context()


@pytest.fixture
def seed_state():
    return build_seed_state(FIXED_NOW)


@pytest.fixture
def backend():
    return MemoryStorageBackend()


@pytest.fixture
def persistence(backend):
    return StatePersistence(backend)


@pytest.fixture
def store(persistence, context):
    return StateStore(persistence, context=context)


@pytest.fixture
def app():
    """Application with in-memory SQLite and SQL-backed state."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def app_store(app):
    return state_store.get_store(app)


def make_product(product_id="prod_1", stock=20, **extra):
    return {
        "id": product_id,
        "name": f"Product {product_id}",
        "categoryId": "cat_beverages",
        "price": 50,
        "purchasePrice": 30,
        "stock": stock,
        **extra,
    }


def make_sale(sale_id, customer_id, items, total, paid_amount, payment_method="cash", date="2025-06-15T10:00:00.000Z"):
    return {
        "id": sale_id,
        "customerId": customer_id,
        "items": items,
        "subtotal": total,
        "total": total,
        "paidAmount": paid_amount,
        "paymentMethod": payment_method,
        "date": date,
    }


@pytest.fixture
def memory_app():
    """Application whose state lives in an in-memory backend instead of the table."""
    memory = MemoryStorageBackend()
    app = create_app(
        {'TESTING': True, 'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:'},
        persistence_factory=lambda app: StatePersistence(memory),
    )
    app.config['MEMORY_BACKEND'] = memory
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

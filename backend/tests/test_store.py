import threading

import pytest

from shopos.state import Action, StatePersistence, StateStore
from shopos.state import actions as A
from shopos.validation import ValidationError

from conftest import make_context, make_product, make_sale


def test_store_bootstraps_from_seed(store):
    assert store.state["currentUser"] is None
    assert any(u["id"] == "Admin" for u in store.state["users"])


def test_dispatch_persists_new_state(store, persistence):
    store.dispatch(Action(A.ADD_PRODUCT, make_product("prod_1")))
    assert [p["id"] for p in persistence.load()["products"]] == ["prod_1"]


def test_session_is_not_persisted(store, persistence):
    store.dispatch(Action(A.LOGIN_WITH_PIN, {"userId": "Admin"}))
    assert store.state["currentUser"]["id"] == "Admin"
    assert "currentUser" not in persistence.load()


def test_unchanged_state_skips_persist_and_listeners(store, backend):
    calls = []
    store.subscribe(lambda state, action: calls.append(action.type))
    before = dict(backend.records)

    store.dispatch(Action("SOMETHING_UNKNOWN"))
    assert calls == []
    assert backend.records == before


def test_listeners_are_notified_and_can_unsubscribe(store):
    seen = []
    unsubscribe = store.subscribe(lambda state, action: seen.append((action.type, len(state["customers"]))))

    store.dispatch({"type": A.ADD_CUSTOMER, "payload": {"id": "cust_1", "name": "One"}})
    unsubscribe()
    store.dispatch({"type": A.ADD_CUSTOMER, "payload": {"id": "cust_2", "name": "Two"}})

    assert seen == [(A.ADD_CUSTOMER, 2)]


def test_failing_listener_does_not_break_dispatch(store):
    def broken(state, action):
        raise RuntimeError("boom")

    store.subscribe(broken)
    state = store.dispatch(Action(A.ADD_CUSTOMER, {"id": "cust_1", "name": "One"}))
    assert state["customers"][-1]["id"] == "cust_1"


def test_clear_all_data_resets_storage_to_seed(store, persistence):
    store.dispatch(Action(A.ADD_PRODUCT, make_product("prod_1")))
    store.dispatch(Action(A.CLEAR_ALL_DATA))

    assert store.state["products"] == []
    assert persistence.load()["products"] == []


def test_restart_restores_persisted_state(persistence):
    first = StateStore(persistence, context=make_context())
    first.dispatch(Action(A.ADD_PRODUCT, make_product("prod_1")))
    first.dispatch(Action(A.LOGIN_WITH_PIN, {"userId": "Admin"}))

    second = StateStore(persistence, context=make_context())
    assert [p["id"] for p in second.state["products"]] == ["prod_1"]
    assert second.state["currentUser"] is None


def test_dispatch_checked_rejects_before_reducing(store):
    def refuse(state, action):
        raise ValidationError("nope")

    before = store.state
    with pytest.raises(ValidationError):
        store.dispatch_checked(Action(A.ADD_CUSTOMER, {"id": "cust_1"}), refuse)
    assert store.state is before


def test_dispatch_many_applies_in_order(store):
    state = store.dispatch_many([
        Action(A.ADD_PRODUCT, make_product("prod_1", stock=5)),
        Action(A.EDIT_PRODUCT, make_product("prod_1", stock=9)),
    ])
    assert state["products"][0]["stock"] == 9


def test_concurrent_sales_never_lose_stock(store):
    store.dispatch(Action(A.ADD_PRODUCT, make_product("prod_1", stock=1000)))

    def sell(n):
        for i in range(25):
            sale = make_sale(f"sale_{n}_{i}", "cust_walkin", [{"productId": "prod_1", "quantity": 1, "price": 1}], 1, 1)
            store.dispatch(Action(A.CREATE_SALE, sale))

    threads = [threading.Thread(target=sell, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.state["products"][0]["stock"] == 1000 - 8 * 25
    assert len(store.state["sales"]) == 8 * 25

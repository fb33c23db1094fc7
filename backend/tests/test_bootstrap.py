from shopos.state import (
    MemoryStorageBackend,
    ObfuscationCodec,
    StatePersistence,
    bootstrap_state,
    build_seed_state,
    merge_seed_users,
)
from shopos.state.persistence import DEFAULT_STATE_KEY

from conftest import FIXED_NOW, make_product


def seed():
    return build_seed_state(FIXED_NOW)


def test_save_strips_session_fields(persistence, backend, seed_state):
    state = {**seed_state, "currentUser": seed_state["users"][0], "loginError": "x"}
    assert persistence.save(state) is True

    stored = ObfuscationCodec().decode(backend.records[DEFAULT_STATE_KEY])
    assert "currentUser" not in stored
    assert "loginError" not in stored
    assert stored["users"] == seed_state["users"]


def test_load_returns_none_when_absent_or_corrupt():
    assert StatePersistence(MemoryStorageBackend()).load() is None
    assert StatePersistence(MemoryStorageBackend({DEFAULT_STATE_KEY: "!!garbage!!"})).load() is None
    assert StatePersistence(MemoryStorageBackend({DEFAULT_STATE_KEY: "[1, 2]"})).load() is None


def test_clear_removes_record(persistence, backend, seed_state):
    persistence.save(seed_state)
    persistence.clear()
    assert DEFAULT_STATE_KEY not in backend.records
    assert persistence.load() is None


def test_bootstrap_without_persisted_state_is_seed(persistence):
    assert bootstrap_state(persistence, seed) == seed()


def test_bootstrap_overlays_persisted_data(persistence, seed_state):
    persisted = {**seed_state, "products": [make_product("prod_1")], "settings": {**seed_state["settings"], "shopName": "Mine"}}
    del persisted["networkDevices"]
    persistence.save(persisted)

    state = bootstrap_state(persistence, seed)
    assert [p["id"] for p in state["products"]] == ["prod_1"]
    assert state["settings"]["shopName"] == "Mine"
    # a collection the blob lacks comes from the seed
    assert state["networkDevices"] == seed_state["networkDevices"]
    assert state["currentUser"] is None
    assert state["loginError"] is None


def test_bootstrap_seed_credentials_win(persistence, seed_state):
    users = [
        {**u, "password": "changed", "pin": "0000", "name": "Edited"} if u["id"] == "Admin" else u
        for u in seed_state["users"]
    ]
    persistence.save({**seed_state, "users": users})

    admin = next(u for u in bootstrap_state(persistence, seed)["users"] if u["id"] == "Admin")
    assert admin["password"] == "Admin@2050"
    assert admin["pin"] == "2050"
    assert admin["name"] == "Edited"


def test_merge_seed_users_appends_missing_and_keeps_custom():
    persisted = [{"id": "custom", "name": "Custom", "password": "p", "pin": "1"}]
    seed_users = [{"id": "Admin", "password": "a", "pin": "2"}]
    merged = merge_seed_users(persisted, seed_users)
    assert [u["id"] for u in merged] == ["custom", "Admin"]
    assert merged[0]["password"] == "p"


def test_merge_seed_users_does_not_alias_inputs():
    persisted = [{"id": "Admin", "password": "old", "pin": "9"}]
    seed_users = [{"id": "Admin", "password": "new", "pin": "1"}]
    merged = merge_seed_users(persisted, seed_users)
    assert persisted[0]["password"] == "old"
    assert merged[0] is not persisted[0]

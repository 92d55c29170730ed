"""Unit tests for the verifier store and the session token store."""

from __future__ import annotations

from spotilens.auth.store import (
    ACCESS_TOKEN_KEY,
    VERIFIER_KEY,
    KeyValueStorage,
    MemoryStorage,
    SessionTokenStore,
    VerifierStore,
)


def test_memory_storage_satisfies_protocol() -> None:
    assert isinstance(MemoryStorage(), KeyValueStorage)


def test_verifier_round_trip_under_fixed_key(
    verifiers: VerifierStore, verifier_storage: MemoryStorage
) -> None:
    assert verifiers.load() is None
    verifiers.save("v1")
    assert verifier_storage.data == {VERIFIER_KEY: "v1"}
    assert verifiers.load() == "v1"


def test_second_save_replaces_previous_verifier(verifiers: VerifierStore) -> None:
    verifiers.save("first")
    verifiers.save("second")
    assert verifiers.load() == "second"


def test_verifier_clear_is_idempotent(verifiers: VerifierStore) -> None:
    verifiers.save("v1")
    verifiers.clear()
    verifiers.clear()
    assert verifiers.load() is None


def test_token_round_trip_under_fixed_key(
    tokens: SessionTokenStore, session_storage: MemoryStorage
) -> None:
    assert tokens.get() is None
    tokens.set("tok")
    assert session_storage.data == {ACCESS_TOKEN_KEY: "tok"}
    assert tokens.get() == "tok"


def test_token_clear_also_removes_verifier(
    tokens: SessionTokenStore, verifiers: VerifierStore
) -> None:
    tokens.set("tok")
    verifiers.save("lingering")
    tokens.clear()
    assert tokens.get() is None
    assert verifiers.load() is None


def test_empty_values_read_as_absent() -> None:
    storage = MemoryStorage({VERIFIER_KEY: "", ACCESS_TOKEN_KEY: ""})
    verifiers = VerifierStore(storage)
    assert verifiers.load() is None
    assert SessionTokenStore(storage, verifiers).get() is None

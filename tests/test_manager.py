"""
tests.test_manager

Mechanism dispatch, principal resolution and role enumeration.
"""

from __future__ import annotations

from typing import Any

import pytest

from xmpp_auth.auth.credentials import AnonymousCredentials, DigestCredentials, PlainCredentials
from xmpp_auth.auth.digest import non_sasl_digest, user_realm_secret_hash
from xmpp_auth.auth.manager import AuthManager
from xmpp_auth.auth.models import UserIdentifier
from xmpp_auth.config import AuthConfig
from xmpp_auth.errors import MechanismNotEnabled, StoreUnavailable, UnknownUser

from tests.conftest import CountingStore, DownStore

ALICE = UserIdentifier.parse("alice@example.com/laptop")
BOB = UserIdentifier.parse("bob@example.com")


@pytest.fixture
def manager(config: AuthConfig, store: CountingStore) -> AuthManager:
    return AuthManager(config=config, store=store)


@pytest.mark.asyncio
async def test_plain_success_carries_store_roles(manager: AuthManager) -> None:
    p = await manager.verify_plain(ALICE, "s3cret")
    assert p.authenticated is True
    assert p.roles == frozenset({"User"})
    assert p.identifier == ALICE
    assert p.identifier.resource == "laptop"


@pytest.mark.asyncio
async def test_plain_wrong_password_and_unknown_user_look_the_same(
    manager: AuthManager,
) -> None:
    wrong = await manager.verify_plain(ALICE, "wrong")
    unknown = await manager.verify_plain(BOB, "anything")
    for p in (wrong, unknown):
        assert p.authenticated is False
        assert p.roles == frozenset()
    assert (wrong.authenticated, wrong.roles) == (unknown.authenticated, unknown.roles)


@pytest.mark.asyncio
async def test_plain_accepts_string_identifier_any_case(manager: AuthManager) -> None:
    p = await manager.verify_plain("CAROL@Example.com", "hunter2")
    assert p.authenticated is True
    assert p.roles == frozenset({"User", "Administrator"})


@pytest.mark.asyncio
async def test_plain_rereads_roles_every_call(manager: AuthManager, store: CountingStore) -> None:
    assert (await manager.verify_plain(ALICE, "s3cret")).roles == frozenset({"User"})
    store.add_user(ALICE, "s3cret", roles={"User", "Moderator"})
    assert (await manager.verify_plain(ALICE, "s3cret")).roles == frozenset({"User", "Moderator"})
    assert store.calls["check_credentials"] == 2


@pytest.mark.asyncio
async def test_plain_allowed_through_legacy_flag_only(
    document: dict[str, Any], store: CountingStore
) -> None:
    document["mechanism"] = ["ANONYMOUS"]
    document["nonsaslplain"] = True
    mgr = AuthManager(config=AuthConfig.from_document(document), store=store)
    assert (await mgr.verify_plain(ALICE, "s3cret")).authenticated


@pytest.mark.asyncio
async def test_plain_not_enabled(document: dict[str, Any], store: CountingStore) -> None:
    document["mechanism"] = ["DIGEST-MD5"]
    document["nonsaslplain"] = False
    mgr = AuthManager(config=AuthConfig.from_document(document), store=store)
    with pytest.raises(MechanismNotEnabled):
        await mgr.verify_plain(ALICE, "s3cret")
    assert "check_credentials" not in store.calls


@pytest.mark.asyncio
async def test_digest_is_case_insensitive(manager: AuthManager) -> None:
    digest = non_sasl_digest("3EE948B0", "s3cret")
    lower = await manager.verify_digest(ALICE, "3EE948B0", digest.lower())
    upper = await manager.verify_digest(ALICE, "3EE948B0", digest.upper())
    assert lower == upper
    assert lower.authenticated is True
    assert lower.roles == upper.roles == frozenset({"User"})


@pytest.mark.asyncio
async def test_digest_success_does_a_role_lookup(
    manager: AuthManager, store: CountingStore
) -> None:
    await manager.verify_digest(ALICE, "n0nce", non_sasl_digest("n0nce", "s3cret"))
    assert store.calls == {"lookup_secret": 1, "lookup_roles": 1}


@pytest.mark.asyncio
async def test_digest_mismatch_and_unknown_user(manager: AuthManager, store: CountingStore) -> None:
    stale = await manager.verify_digest(ALICE, "n0nce", non_sasl_digest("other", "s3cret"))
    unknown = await manager.verify_digest(BOB, "n0nce", non_sasl_digest("n0nce", "s3cret"))
    for p in (stale, unknown):
        assert p.authenticated is False
        assert p.roles == frozenset()
    assert "lookup_roles" not in store.calls


@pytest.mark.asyncio
async def test_digest_not_enabled(document: dict[str, Any], store: CountingStore) -> None:
    document["nonsasldigest"] = False
    mgr = AuthManager(config=AuthConfig.from_document(document), store=store)
    with pytest.raises(MechanismNotEnabled):
        await mgr.verify_digest(ALICE, "n0nce", "00")


@pytest.mark.asyncio
async def test_precomputed_secret_hash(manager: AuthManager) -> None:
    expected = user_realm_secret_hash("alice", "example.com", "s3cret")
    assert await manager.build_precomputed_secret_hash("alice", "example.com") == expected
    assert await manager.build_precomputed_secret_hash(ALICE, "example.com") == expected


@pytest.mark.asyncio
async def test_precomputed_secret_hash_normalizes_username_and_realm(
    manager: AuthManager,
) -> None:
    expected = user_realm_secret_hash("alice", "example.com", "s3cret")
    assert await manager.build_precomputed_secret_hash("Alice", "Example.COM") == expected
    assert await manager.build_precomputed_secret_hash("ALICE@Example.com", "Example.com") == expected


@pytest.mark.asyncio
async def test_precomputed_secret_hash_unknown_user(manager: AuthManager) -> None:
    with pytest.raises(UnknownUser):
        await manager.build_precomputed_secret_hash("bob", "example.com")


@pytest.mark.asyncio
async def test_precomputed_secret_hash_empty_realm(
    manager: AuthManager, store: CountingStore
) -> None:
    # A bare username without a realm names nobody.
    with pytest.raises(UnknownUser):
        await manager.build_precomputed_secret_hash("bob", "")
    with pytest.raises(UnknownUser):
        await manager.build_precomputed_secret_hash("alice", "")
    assert "lookup_secret" not in store.calls

    # A full identifier supplies its own domain.
    expected = user_realm_secret_hash("alice", "example.com", "s3cret")
    assert await manager.build_precomputed_secret_hash(ALICE, "") == expected


@pytest.mark.asyncio
async def test_precomputed_secret_hash_requires_digest_md5(
    document: dict[str, Any], store: CountingStore
) -> None:
    document["mechanism"] = ["PLAIN"]
    mgr = AuthManager(config=AuthConfig.from_document(document), store=store)
    with pytest.raises(MechanismNotEnabled):
        await mgr.build_precomputed_secret_hash("alice", "example.com")


@pytest.mark.asyncio
async def test_resolve_principal_unauthenticated_skips_store(
    config: AuthConfig,
) -> None:
    mgr = AuthManager(config=config, store=DownStore())
    p = await mgr.resolve_principal(ALICE, False)
    assert p.authenticated is False
    assert p.roles == frozenset()


@pytest.mark.asyncio
async def test_resolve_principal_authenticated_does_one_role_lookup(
    manager: AuthManager, store: CountingStore
) -> None:
    p = await manager.resolve_principal("carol@example.com", True)
    assert p.authenticated is True
    assert p.roles == frozenset({"User", "Administrator"})
    assert store.calls == {"lookup_roles": 1}


@pytest.mark.asyncio
async def test_role_enumeration(manager: AuthManager, store: CountingStore) -> None:
    expected = await store.list_all_roles()
    assert expected == frozenset({"User", "Administrator", "Auditors"})
    assert await manager.list_security_roles() == expected
    assert await manager.list_distribution_roles() == expected


@pytest.mark.asyncio
async def test_anonymous(manager: AuthManager, store: CountingStore) -> None:
    a = await manager.verify_anonymous("Example.com")
    b = await manager.verify_anonymous("example.com")
    assert a.authenticated is True
    assert a.roles == frozenset()
    assert a.identifier.domain == "example.com"
    assert a.identifier != b.identifier
    assert store.calls == {}


@pytest.mark.asyncio
async def test_authenticate_dispatch(manager: AuthManager) -> None:
    plain = await manager.authenticate(PlainCredentials(identifier=ALICE, password="s3cret"))
    digest = await manager.authenticate(
        DigestCredentials(
            identifier=ALICE, session_nonce="abc", digest=non_sasl_digest("abc", "s3cret")
        )
    )
    anon = await manager.authenticate(AnonymousCredentials(domain="example.com"))
    assert plain.authenticated and digest.authenticated and anon.authenticated

    with pytest.raises(TypeError):
        await manager.authenticate(object())  # type: ignore[arg-type]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call",
    [
        lambda m: m.verify_plain(ALICE, "s3cret"),
        lambda m: m.verify_digest(ALICE, "n", "00"),
        lambda m: m.build_precomputed_secret_hash("alice", "example.com"),
        lambda m: m.resolve_principal(ALICE, True),
        lambda m: m.list_security_roles(),
        lambda m: m.list_distribution_roles(),
    ],
)
async def test_store_outage_propagates(config: AuthConfig, call) -> None:
    mgr = AuthManager(config=config, store=DownStore())
    with pytest.raises(StoreUnavailable):
        await call(mgr)


# --- Module Notes -----------------------------------------------------------
# The in-memory store stands in for the database here; `test_sql_store` covers
# the relational adapter against SQLite.

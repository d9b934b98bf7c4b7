"""Tests for BusinessIdentityResolver against the in-memory store."""

from udhyogunity.application.services.identity_resolver import BusinessIdentityResolver
from udhyogunity.infrastructure.firebase.memory_client import InMemoryFirestoreClient
from tests.factories import seed_business


async def test_email_resolves_by_direct_read(
    store: InMemoryFirestoreClient, resolver: BusinessIdentityResolver
) -> None:
    seed_business(store, "owner@shop.com")
    assert await resolver.resolve_business_key("owner@shop.com") == "owner@shop.com"


async def test_business_id_field_resolves_to_document_key(
    store: InMemoryFirestoreClient, resolver: BusinessIdentityResolver
) -> None:
    seed_business(store, "owner@shop.com", businessId="BIZ1")
    assert await resolver.resolve_business_key("BIZ1") == "owner@shop.com"


async def test_business_name_resolves_to_document_key(
    store: InMemoryFirestoreClient, resolver: BusinessIdentityResolver
) -> None:
    seed_business(store, "owner@shop.com", businessName="Chai Corner")
    assert await resolver.resolve_business_key("Chai Corner") == "owner@shop.com"


async def test_scan_matches_name_case_insensitively(
    store: InMemoryFirestoreClient, resolver: BusinessIdentityResolver
) -> None:
    """Exact-match queries miss, the full scan lowercases both sides."""
    seed_business(store, "owner@shop.com", businessName="Chai Corner", businessId="Biz-01")
    assert await resolver.resolve_business_key("chai corner") == "owner@shop.com"
    assert await resolver.resolve_business_key("BIZ-01") == "owner@shop.com"


async def test_unknown_identifier_resolves_to_none(
    store: InMemoryFirestoreClient, resolver: BusinessIdentityResolver
) -> None:
    seed_business(store, "owner@shop.com")
    assert await resolver.resolve_business_key("nobody@shop.com") is None
    assert await resolver.resolve_business_key("") is None
    assert await resolver.resolve_business_key(None) is None


async def test_storage_failures_resolve_to_none(
    store: InMemoryFirestoreClient, resolver: BusinessIdentityResolver
) -> None:
    """Every step swallows its read error; the caller falls back to the raw identifier."""
    seed_business(store, "owner@shop.com")
    store.fail_on("Businesses")
    assert await resolver.resolve_business_key("owner@shop.com") is None


async def test_resolve_identifiers_from_email(
    store: InMemoryFirestoreClient, resolver: BusinessIdentityResolver
) -> None:
    seed_business(store, "owner@shop.com", businessId="BIZ1")
    ids = await resolver.resolve_identifiers("owner@shop.com")
    assert ids.raw == "owner@shop.com"
    assert ids.business_id == "BIZ1"
    assert ids.email == "owner@shop.com"
    assert ids.distinct


async def test_resolve_identifiers_from_email_without_business_id(
    store: InMemoryFirestoreClient, resolver: BusinessIdentityResolver
) -> None:
    seed_business(store, "owner@shop.com")
    ids = await resolver.resolve_identifiers("owner@shop.com")
    assert ids.business_id == "owner@shop.com"
    assert not ids.distinct


async def test_resolve_identifiers_from_id_reads_business_email(
    store: InMemoryFirestoreClient, resolver: BusinessIdentityResolver
) -> None:
    seed_business(store, "BIZ1", email="owner@shop.com")
    ids = await resolver.resolve_identifiers("BIZ1")
    assert ids.business_id == "BIZ1"
    assert ids.email == "owner@shop.com"


async def test_resolve_identifiers_from_id_without_document(
    resolver: BusinessIdentityResolver,
) -> None:
    """Only Businesses/{identifier} is consulted; no document means both forms are equal."""
    ids = await resolver.resolve_identifiers("BIZ1")
    assert ids.business_id == ids.email == "BIZ1"


async def test_email_lookup_failure_keeps_identifier(
    store: InMemoryFirestoreClient, resolver: BusinessIdentityResolver
) -> None:
    seed_business(store, "BIZ1", email="owner@shop.com")
    store.fail_on("Businesses")
    assert await resolver.resolve_email_for_business_id("BIZ1") == "BIZ1"
    assert await resolver.resolve_business_id_for_email("owner@shop.com") == "owner@shop.com"

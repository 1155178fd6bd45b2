"""Tests for influencer verification and registration."""

import json

import pytest

from influencer_trust.domain.errors import NotAHealthInfluencer, UpstreamError, VerificationFailed
from influencer_trust.domain.ports.row_store import INFLUENCERS_TABLE
from influencer_trust.domain.services.influencer_verification_service import (
    InfluencerVerificationService,
    normalize_name,
)


def answer(**overrides) -> str:
    value = {
        "canonicalName": "Peter Attia",
        "knownAliases": ["Dr. Peter Attia", "Peter Attia MD"],
        "isHealthInfluencer": True,
        "confidence": 95,
        "platformHandles": {"twitter": "PeterAttiaMD", "instagram": "peterattiamd", "youtube": None},
        "credentials": ["MD, Stanford University"],
        "categories": ["Longevity", "Nutrition"],
        "approximateFollowers": 1200000,
    }
    value.update(overrides)
    return f"```json\n{json.dumps(value)}\n```"


@pytest.fixture
def service(seeded_store, research_client) -> InfluencerVerificationService:
    return InfluencerVerificationService(seeded_store, research_client, max_tokens=1500)


def test_normalize_name():
    """Test name normalization for matching."""
    assert normalize_name("Dr. Andrew Huberman") == "drandrewhuberman"
    assert normalize_name("  HUBERMAN_lab ") == "hubermanlab"
    assert normalize_name("Zoë") == "zo"


@pytest.mark.asyncio
async def test_existing_influencer_by_alias(service, fake_provider):
    """Test that a known alias resolves without asking the provider."""
    result = await service.verify("dr huberman")

    assert result.canonical_name == "Andrew Huberman"
    assert result.is_health_influencer
    assert result.confidence == 100
    assert result.approximate_followers == 5000000
    assert fake_provider.calls == []


@pytest.mark.asyncio
async def test_new_influencer_is_registered(service, seeded_store, fake_provider):
    """Test verification and creation of a new influencer."""
    fake_provider.handler = lambda prompt, options: answer()

    result = await service.verify("attia")

    assert result.canonical_name == "Peter Attia"
    assert result.confidence == 95

    prompt, options = fake_provider.calls[0]
    assert prompt.startswith("INFLUENCER VERIFICATION")
    assert "Person: attia" in prompt
    assert options.max_tokens == 1500

    row = await seeded_store.get_one(INFLUENCERS_TABLE, {"canonical_name": "Peter Attia"})
    assert row is not None
    assert row["id"]
    assert row["known_aliases"] == ["Peter Attia", "Dr. Peter Attia", "Peter Attia MD", "attia"]
    assert row["follower_count"] == 1200000
    assert row["trust_score"] == 0.0
    assert row["verified_claims_count"] == 0
    assert row["platform_handles"]["twitter"] == "PeterAttiaMD"


@pytest.mark.asyncio
async def test_alias_list_is_deduplicated(service, seeded_store, fake_provider):
    """Test that the query is not stored twice when it is already an alias."""
    fake_provider.handler = lambda prompt, options: answer(knownAliases=["Peter Attia MD", "Peter Attia"])

    await service.verify("Peter Attia MD")

    row = await seeded_store.get_one(INFLUENCERS_TABLE, {"canonical_name": "Peter Attia"})
    assert row["known_aliases"] == ["Peter Attia", "Peter Attia MD"]


@pytest.mark.asyncio
async def test_duplicate_found_after_verification(service, seeded_store, fake_provider):
    """Test that a new spelling resolving to a tracked person creates nothing."""
    fake_provider.handler = lambda prompt, options: answer(
        canonicalName="Andrew D. Huberman",
        knownAliases=["Andrew Huberman"],
    )

    result = await service.verify("Professor Huberman")

    assert result.canonical_name == "Andrew Huberman"
    assert len(await seeded_store.get(INFLUENCERS_TABLE)) == 1


@pytest.mark.asyncio
async def test_not_a_health_influencer(service, seeded_store, fake_provider):
    """Test rejection of people outside the health domain."""
    fake_provider.handler = lambda prompt, options: answer(canonicalName="Taylor Swift", isHealthInfluencer=False)

    with pytest.raises(NotAHealthInfluencer) as exc_info:
        await service.verify("Taylor Swift")

    assert exc_info.value.status_code == 400
    assert len(await seeded_store.get(INFLUENCERS_TABLE)) == 1


@pytest.mark.asyncio
async def test_provider_answers_are_cached(service, fake_provider):
    """Test that repeated lookups of a rejected person hit the cache."""
    fake_provider.handler = lambda prompt, options: answer(isHealthInfluencer=False)

    for query in ("Peter Attia", "peter attia", "PETER-ATTIA"):
        with pytest.raises(NotAHealthInfluencer):
            await service.verify(query)

    assert len(fake_provider.calls) == 1


@pytest.mark.asyncio
async def test_unusable_answer(service, fake_provider):
    """Test that an answer missing required fields fails verification."""
    fake_provider.handler = lambda prompt, options: '{"knownAliases": []}'

    with pytest.raises(VerificationFailed):
        await service.verify("Someone")


@pytest.mark.asyncio
async def test_upstream_error_fails_verification(service, fake_provider):
    """Test that provider errors surface as verification failures."""

    def handler(prompt, options):
        raise UpstreamError(500, "Internal Server Error")

    fake_provider.handler = handler

    with pytest.raises(VerificationFailed) as exc_info:
        await service.verify("Someone")

    assert isinstance(exc_info.value.__cause__, UpstreamError)


@pytest.mark.asyncio
async def test_missing_followers_default_to_zero(service, seeded_store, fake_provider):
    """Test registration without a follower estimate."""
    fake_provider.handler = lambda prompt, options: answer(approximateFollowers=None)

    await service.verify("Peter Attia")

    row = await seeded_store.get_one(INFLUENCERS_TABLE, {"canonical_name": "Peter Attia"})
    assert row["follower_count"] == 0


@pytest.mark.asyncio
async def test_existing_row_with_null_columns(empty_store, research_client, fake_provider):
    """Test that a stored row with null counts still resolves."""
    await empty_store.insert(INFLUENCERS_TABLE, [
        {"canonical_name": "Rhonda Patrick", "known_aliases": None, "follower_count": None, "trust_score": None},
    ])
    service = InfluencerVerificationService(empty_store, research_client)

    result = await service.verify("Rhonda Patrick")

    assert result.canonical_name == "Rhonda Patrick"
    assert result.approximate_followers == 0
    assert fake_provider.calls == []

"""Service for verifying and registering health influencers."""

import logging
import re
from typing import Iterable, List, Optional

from cachetools import TTLCache
from pydantic import ValidationError

from ..errors import InfluencerTrustError, NotAHealthInfluencer, VerificationFailed
from ..models.influencer import Influencer, VerificationResult
from ..ports.completion_provider import CompletionOptions
from ..ports.row_store import INFLUENCERS_TABLE, RowStore
from .prompts import verify_influencer_prompt
from .research_client import ResearchClient

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Lowercase a name and keep only ASCII letters and digits."""
    return re.sub(r"[^a-z0-9]", "", name.lower())


def _matches(influencer: Influencer, names: Iterable[str]) -> bool:
    known = {normalize_name(influencer.canonical_name)}
    known.update(normalize_name(alias) for alias in influencer.known_aliases)
    return any(normalize_name(name) in known for name in names)


class InfluencerVerificationService:
    """Finds tracked influencers by name or alias and registers new ones.

    Answers from the research provider are cached per normalized query so
    repeated lookups of the same person, including rejected ones, do not hit
    the provider again until the cache entry expires.
    """

    def __init__(
        self,
        store: RowStore,
        research_client: ResearchClient,
        max_tokens: int = 1500,
        cache_ttl: int = 3600,
        cache_maxsize: int = 256,
    ):
        """Initialize the service.

        Args:
            store: Row store holding influencers
            research_client: Client for the research provider
            max_tokens: Token budget of the verification request
            cache_ttl: Seconds a provider answer stays cached
            cache_maxsize: Maximum number of cached answers
        """
        self._store = store
        self._research = research_client
        self._max_tokens = max_tokens
        self._cache: TTLCache = TTLCache(maxsize=cache_maxsize, ttl=cache_ttl)

    async def verify(self, influencer_name: str) -> VerificationResult:
        """Verify a person and make sure they are tracked.

        Args:
            influencer_name: Name or alias as typed by the user

        Returns:
            Verification result for the tracked influencer

        Raises:
            NotAHealthInfluencer: The provider rejected the person
            VerificationFailed: The provider answer was unusable
        """
        logger.info(f"🔍 Checking influencer: {influencer_name}")
        influencers = await self._load_all()

        existing = self._find(influencers, [influencer_name])
        if existing:
            logger.info(f"Found existing influencer: {existing.canonical_name}")
            return VerificationResult.from_influencer(existing)

        result = await self._ask_provider(influencer_name)
        if not result.is_health_influencer:
            raise NotAHealthInfluencer()

        existing = self._find(influencers, [result.canonical_name, *result.known_aliases])
        if existing:
            logger.info(f"Found duplicate after verification: {existing.canonical_name}")
            return VerificationResult.from_influencer(existing)

        await self._register(influencer_name, result)
        return result

    async def _load_all(self) -> List[Influencer]:
        rows = await self._store.get(INFLUENCERS_TABLE)
        return [Influencer.model_validate(row) for row in rows]

    @staticmethod
    def _find(influencers: List[Influencer], names: List[str]) -> Optional[Influencer]:
        return next((influencer for influencer in influencers if _matches(influencer, names)), None)

    async def _ask_provider(self, influencer_name: str) -> VerificationResult:
        key = normalize_name(influencer_name)
        if key in self._cache:
            logger.debug(f"Verification cache hit for {influencer_name}")
            return self._cache[key]

        logger.info(f"🤖 Verifying new influencer with {self._research.provider_name}...")
        options = CompletionOptions(max_tokens=self._max_tokens, temperature=0)
        try:
            answer = await self._research.query_object(verify_influencer_prompt(influencer_name), options)
            result = VerificationResult.model_validate(answer)
        except ValidationError as e:
            raise VerificationFailed(f"Unusable verification answer: {e.error_count()} invalid fields") from e
        except InfluencerTrustError as e:
            raise VerificationFailed(f"Verification failed: {e.message}") from e

        self._cache[key] = result
        return result

    async def _register(self, influencer_name: str, result: VerificationResult) -> Influencer:
        aliases = list(dict.fromkeys([result.canonical_name, *result.known_aliases, influencer_name]))
        influencer = Influencer(
            canonical_name=result.canonical_name,
            known_aliases=aliases,
            platform_handles=result.platform_handles,
            credentials=result.credentials,
            categories=result.categories,
            follower_count=result.approximate_followers or 0,
        )
        rows = await self._store.insert(INFLUENCERS_TABLE, [influencer.to_row()])
        logger.info(f"✅ Successfully created new influencer: {result.canonical_name}")
        return Influencer.model_validate(rows[0])

"""
Search Slots

Owned per-slot request state for remote score lookups. Each search takes
a fresh in-flight token; a response is applied only if its token is still
the slot's current one, so rapid consecutive searches cannot overwrite
each other out of order.
"""

import asyncio
import itertools
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Optional

from livability_map.analysis.aggregation import aggregate
from livability_map.data.remote import RemoteScore
from livability_map.models import SubScores, WeightVector
from livability_map.utils.logging import get_logger

logger = get_logger(__name__)

ScoreFetcher = Callable[[str, WeightVector], RemoteScore]


@dataclass(frozen=True)
class SearchResult:
    """A fetched suburb score as currently displayed."""
    address: str
    overall_score: float
    breakdown: SubScores
    weights: WeightVector


class SearchSlot:
    """
    One search box's state: the in-flight token, last result and last error.
    """

    def __init__(self, name: str):
        self.name = name
        self.result: Optional[SearchResult] = None
        self.error: Optional[BaseException] = None
        self._token: Optional[int] = None
        self._tokens: Iterator[int] = itertools.count(1)

    @property
    def loading(self) -> bool:
        return self._token is not None

    def begin(self) -> int:
        """Start a request; supersedes any request already in flight."""
        self._token = next(self._tokens)
        self.error = None
        return self._token

    def is_current(self, token: int) -> bool:
        return token == self._token

    def resolve(self, token: int, result: SearchResult) -> bool:
        """Apply a result if `token` is still current. Returns whether it applied."""
        if not self.is_current(token):
            logger.debug("Discarding stale result for slot '%s'", self.name)
            return False
        self._token = None
        self.result = result
        self.error = None
        return True

    def fail(self, token: int, error: BaseException) -> bool:
        """Record a failure if `token` is still current. Returns whether it applied."""
        if not self.is_current(token):
            return False
        self._token = None
        self.error = error
        return True

    def cancel(self) -> None:
        self._token = None

    def reweight(self, weights: WeightVector) -> Optional[SearchResult]:
        """Recompute the displayed overall score locally for new weights."""
        if self.result is None:
            return None
        self.result = SearchResult(
            address=self.result.address,
            overall_score=aggregate(self.result.breakdown, weights),
            breakdown=self.result.breakdown,
            weights=weights
        )
        return self.result


class ScorePanel:
    """
    Search slots sharing one WeightVector and one score fetcher.

    Parameters
    ----------
    fetch : Callable[[str, WeightVector], RemoteScore]
        Blocking fetch capability, e.g. LivabilityServiceClient.fetch_score
    weights : WeightVector, optional
        Initial weights (default: uniform)
    """

    def __init__(self, fetch: ScoreFetcher, weights: Optional[WeightVector] = None):
        self.fetch = fetch
        self.weights = weights if weights is not None else WeightVector.uniform()
        self.slots: Dict[str, SearchSlot] = {}

    def slot(self, name: str) -> SearchSlot:
        if name not in self.slots:
            self.slots[name] = SearchSlot(name)
        return self.slots[name]

    async def search(self, slot_name: str, address: str) -> Optional[SearchResult]:
        """
        Fetch a score for `address` into a slot.

        The fetch runs in a worker thread. Returns the result if it was
        applied, or None if a newer search superseded it. Fetch errors are
        recorded on the slot and re-raised when still current.
        """
        slot = self.slot(slot_name)
        token = slot.begin()
        weights = self.weights
        try:
            remote = await asyncio.to_thread(self.fetch, address, weights)
        except Exception as exc:
            if slot.fail(token, exc):
                logger.warning("Score lookup for '%s' failed: %s", address, exc)
                raise
            return None

        result = SearchResult(
            address=address,
            overall_score=remote.overall_score,
            breakdown=remote.breakdown,
            weights=weights
        )
        if not slot.resolve(token, result):
            return None
        # Weights may have changed while the request was in flight
        if self.weights != weights:
            return slot.reweight(self.weights)
        return result

    def set_weights(self, weights: WeightVector) -> Dict[str, SearchResult]:
        """
        Replace the weights and recompute every displayed result locally.

        Returns
        -------
        Dict[str, SearchResult]
            Recomputed results keyed by slot name
        """
        self.weights = weights
        updated = {}
        for name, slot in self.slots.items():
            result = slot.reweight(weights)
            if result is not None:
                updated[name] = result
        return updated

"""
Analytics Service for root queries
Owns the per-root cache and is the only entry point presentation layers call
"""

import logging
import threading
from collections import OrderedDict
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from concurrent.futures import TimeoutError as QueryTimeoutError
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from config import AnalyticsConfig
from corpus_index import CorpusIndex, load_corpus_index
from errors import InvalidRootError, QueryCancelledError
from graph.network_builder import NetworkBuilder
from models import AnalyticsResult
from search.occurrence_locator import OccurrenceLocator
from search.root_matcher import root_key
from statistics_aggregator import StatisticsAggregator

logger = logging.getLogger(__name__)

# how often a waiting follower re-checks its own cancel event
FOLLOWER_POLL_SECONDS = 0.05


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    coalesced: int = 0
    evictions: int = 0


class AnalyticsService:
    """Memoizing, single-flight front of the root analytics engine"""

    def __init__(
        self,
        corpus: CorpusIndex,
        config: Optional[AnalyticsConfig] = None,
        locator: Optional[OccurrenceLocator] = None,
        aggregator: Optional[StatisticsAggregator] = None,
        network_builder: Optional[NetworkBuilder] = None,
    ):
        self.config = config or AnalyticsConfig()
        self.corpus = corpus
        self.locator = locator or OccurrenceLocator(corpus)
        self.aggregator = aggregator or StatisticsAggregator(corpus)
        self.network_builder = network_builder or NetworkBuilder(corpus, top_k=self.config.top_k)

        self._executor = ThreadPoolExecutor(
            max_workers=self.config.workers,
            thread_name_prefix="root-analytics",
        )
        self._lock = threading.Lock()
        self._cache: "OrderedDict[str, AnalyticsResult]" = OrderedDict()
        self._inflight: Dict[str, Future] = {}
        self._stats = CacheStats()

    @classmethod
    def from_config(cls, config: AnalyticsConfig) -> "AnalyticsService":
        """Load the corpus described by ``config`` and wrap it in a service."""
        corpus = load_corpus_index(
            corpus_path=config.corpus_path,
            corpus_url=config.corpus_url,
            chapters_path=config.chapters_path,
        )
        return cls(corpus, config)

    # ==========================================
    # Public API
    # ==========================================

    def get_root_analytics(self, root_query: str, cancel_event: Optional[threading.Event] = None) -> AnalyticsResult:
        """
        Full analytical profile of one root.

        Args:
            root_query: the root as typed; identical normalized input shares one result
            cancel_event: set it to abandon the query between phases

        Returns:
            AnalyticsResult whose center node is ``root_query`` verbatim

        Raises:
            InvalidRootError: the query folds to an empty string
            QueryCancelledError: ``cancel_event`` was set before the result was stored
        """
        key = root_key(root_query or "")
        if not key:
            raise InvalidRootError(root_query)

        while True:
            with self._lock:
                cached = self._cache.get(key)
                if cached is not None:
                    self._cache.move_to_end(key)
                    self._stats.hits += 1
                    return cached.for_query(root_query)

                pending = self._inflight.get(key)
                leader = pending is None
                if leader:
                    pending = Future()
                    self._inflight[key] = pending
                    self._stats.misses += 1
                else:
                    self._stats.coalesced += 1

            if leader:
                return self._lead(key, root_query, pending, cancel_event)

            try:
                return self._follow(key, pending, cancel_event).for_query(root_query)
            except QueryCancelledError:
                if cancel_event is not None and cancel_event.is_set():
                    raise
                # the leader was cancelled, not us: compete for leadership again
                logger.debug(f"Leader for {key} was cancelled, retrying")

    def cache_info(self) -> Dict[str, Any]:
        with self._lock:
            info = asdict(self._stats)
            info.update(size=len(self._cache), capacity=self.config.cache_size, inflight=len(self._inflight))
        return info

    def cached_roots(self) -> List[str]:
        """Normalized roots currently cached, least recently used first"""
        with self._lock:
            return list(self._cache)

    def clear_cache(self):
        with self._lock:
            self._cache.clear()

    def close(self):
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # ==========================================
    # Internals
    # ==========================================

    def _lead(self, key, root_query, pending: Future, cancel_event) -> AnalyticsResult:
        try:
            result = self._compute(key, root_query, cancel_event)
        except BaseException as e:
            with self._lock:
                self._inflight.pop(key, None)
            pending.set_exception(e)
            raise

        with self._lock:
            self._store(key, result)
            self._inflight.pop(key, None)
        pending.set_result(result)
        return result

    def _follow(self, key, pending: Future, cancel_event) -> AnalyticsResult:
        if cancel_event is None:
            return pending.result()
        while True:
            done, _ = wait([pending], timeout=FOLLOWER_POLL_SECONDS)
            if done:
                return pending.result()
            if cancel_event.is_set():
                raise QueryCancelledError(key, "join")

    def _compute(self, key, root_query, cancel_event) -> AnalyticsResult:
        self._check_cancelled(cancel_event, key, "locate")
        occurrences = self.locator.locate(root_query)

        self._check_cancelled(cancel_event, key, "aggregate")
        # both only read the same immutable OccurrenceSet
        statistics_job = self._executor.submit(self.aggregator.compute, occurrences)
        network_job = self._executor.submit(self.network_builder.build, occurrences, root_query)
        done, not_done = wait(
            [statistics_job, network_job],
            timeout=self.config.timeout_seconds,
            return_when=FIRST_EXCEPTION,
        )
        for job in done:
            if job.exception() is not None:
                raise job.exception()
        if not_done:
            for job in not_done:
                job.cancel()
            raise QueryTimeoutError(f"Analytics for {key} exceeded {self.config.timeout_seconds}s")

        self._check_cancelled(cancel_event, key, "store")
        logger.info(f"Computed analytics for {key}: {len(occurrences)} verses")
        return AnalyticsResult(
            root=root_query,
            occurrences=occurrences,
            statistics=statistics_job.result(),
            network=network_job.result(),
        )

    def _store(self, key, result):
        """Must be called with the lock held."""
        self._cache[key] = result
        self._cache.move_to_end(key)
        while len(self._cache) > self.config.cache_size:
            evicted, _ = self._cache.popitem(last=False)
            self._stats.evictions += 1
            logger.debug(f"Evicted {evicted} from analytics cache")

    @staticmethod
    def _check_cancelled(cancel_event, key, phase):
        if cancel_event is not None and cancel_event.is_set():
            raise QueryCancelledError(key, phase)

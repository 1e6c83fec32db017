import logging
import math
from collections import Counter
from typing import List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

from errors import CorpusIntegrityError
from models import MatrixCell, NetworkBlock, NetworkLink, NetworkNode, OccurrenceSet

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 12

# radius range for the force graph; values past SATURATION all get RADIUS_MAX
RADIUS_MIN = 18.0
RADIUS_MAX = 45.0
SATURATION = 400


def scale_radius(value: float) -> float:
    """sqrt then linear remap into [RADIUS_MIN, RADIUS_MAX]; monotonic and bounded."""
    ratio = min(1.0, math.sqrt(max(value, 0)) / math.sqrt(SATURATION))
    return round(RADIUS_MIN + (RADIUS_MAX - RADIUS_MIN) * ratio, 2)


def rank_co_roots(occurrences: OccurrenceSet, top_k: int) -> List[Tuple[str, str, int]]:
    """
    Tally the roots sharing a verse with the query root.

    Returns:
        up to ``top_k`` (key, display form, verse count) triples, highest count
        first, ties broken by key
    """
    tally = Counter()
    display = {}
    for av in occurrences.verses:
        for key, form in av.other_roots:
            tally[key] += 1
            display.setdefault(key, form)

    ranked = sorted(tally.items(), key=lambda item: (-item[1], item[0]))[:top_k]
    return [(key, display[key], count) for key, count in ranked]


class NetworkBuilder:
    """Co-occurrence network and relationship matrix for one root."""

    def __init__(self, corpus, top_k: int = DEFAULT_TOP_K, include_query_root: bool = False):
        self.corpus = corpus
        self.top_k = top_k
        self.include_query_root = include_query_root

    def build(self, occurrences: OccurrenceSet, root_query: str, top_k: Optional[int] = None) -> NetworkBlock:
        top_k = self.top_k if top_k is None else top_k
        ranked = rank_co_roots(occurrences, top_k)
        total = sum(av.root_count for av in occurrences.verses)

        # 1. الشبكة: الجذر في المركز وحوله الجذور المقترنة
        G = nx.Graph()
        G.add_node(root_query, group=0, radius=scale_radius(total))
        for _, form, count in ranked:
            G.add_node(form, group=1, radius=scale_radius(count))
            G.add_edge(root_query, form, value=count)

        nodes = tuple(
            NetworkNode(id=node, group=data["group"], radius=data["radius"])
            for node, data in G.nodes(data=True)
        )
        links = tuple(
            NetworkLink(source=root_query, target=target, value=data["value"])
            for _, target, data in G.edges(root_query, data=True)
        )

        # 2. مصفوفة العلاقات
        members = [(key, form) for key, form, _ in ranked]
        if self.include_query_root and members:
            members.insert(0, (occurrences.key, root_query))
        matrix = self.relationship_matrix(members)

        logger.debug(f"Network for {occurrences.key}: {len(nodes) - 1} satellites, {len(matrix)} matrix cells")
        return NetworkBlock(nodes=nodes, links=links, matrix=matrix)

    def shared_verse_counts(self, keys: Sequence[str]) -> np.ndarray:
        """
        Pairwise count of corpus verses holding both roots.

        Mᵀ·M over a verse × root incidence matrix is symmetric by construction;
        the diagonal (a root with itself) is zeroed.
        """
        postings = [self.corpus.postings(key) for key in keys]
        verse_ids = sorted(set().union(*postings)) if postings else []
        row_of = {gid: i for i, gid in enumerate(verse_ids)}

        incidence = np.zeros((len(verse_ids), len(keys)), dtype=np.int64)
        for col, ids in enumerate(postings):
            for gid in ids:
                incidence[row_of[gid], col] = 1

        shared = incidence.T @ incidence
        np.fill_diagonal(shared, 0)
        if not np.array_equal(shared, shared.T):
            raise CorpusIntegrityError(f"Relationship matrix is not symmetric for {list(keys)}")
        return shared

    def relationship_matrix(self, members: List[Tuple[str, str]]) -> Tuple[MatrixCell, ...]:
        if not members:
            return ()
        shared = self.shared_verse_counts([key for key, _ in members])
        labels = [form for _, form in members]
        return tuple(
            MatrixCell(x=labels[i], y=labels[j], value=int(shared[i, j]))
            for i in range(len(labels))
            for j in range(len(labels))
        )

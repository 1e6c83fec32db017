import logging
import math
from collections import Counter
from types import MappingProxyType
from typing import Iterable, List

from errors import CorpusIntegrityError
from models import ERAS, FormCount, OccurrenceSet, StatisticsBlock, TimelineEntry

logger = logging.getLogger(__name__)

CORPUS_ORDER = "corpus"
REVELATION_ORDER = "revelation"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rank_forms(counts) -> List[FormCount]:
    """Most frequent first; equal counts fall back to the form itself so the order never flips."""
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [FormCount(form=form, count=count) for form, count in ranked]


def order_timeline(entries: Iterable[TimelineEntry], order: str = CORPUS_ORDER) -> List[TimelineEntry]:
    """Re-order timeline entries by chapter number or by revelation order."""
    if order == CORPUS_ORDER:
        return sorted(entries, key=lambda e: e.chapter_no)
    if order == REVELATION_ORDER:
        return sorted(entries, key=lambda e: (e.revelation_order, e.chapter_no))
    raise ValueError(f"Unknown timeline order {order!r}")


class StatisticsAggregator:
    """Scalar and aggregate views over one OccurrenceSet."""

    def __init__(self, corpus):
        self.corpus = corpus

    def compute(self, occurrences: OccurrenceSet) -> StatisticsBlock:
        per_chapter = Counter()
        era = dict.fromkeys(ERAS, 0)
        forms = Counter()
        total = 0

        for av in occurrences.verses:
            hits = av.root_count
            total += hits
            chapter_no = av.verse.chapter_no
            per_chapter[chapter_no] += hits
            era[self.corpus.chapter(chapter_no).era] += hits
            for token in av.matched_tokens:
                forms[token.display_form] += 1

        verse_count = len(occurrences.verses)
        timeline = []
        distribution = {}
        for chapter_no in sorted(per_chapter):
            meta = self.corpus.chapter(chapter_no)
            distribution[meta.name] = per_chapter[chapter_no]
            timeline.append(TimelineEntry(
                chapter_no=chapter_no,
                chapter_name=meta.name,
                revelation_order=meta.revelation_order,
                count=per_chapter[chapter_no],
            ))

        if sum(distribution.values()) != total:
            raise CorpusIntegrityError(
                f"Chapter distribution for {occurrences.key} does not sum to {total}; "
                "two chapters probably share a name"
            )

        return StatisticsBlock(
            total_occurrences=total,
            total_verses=verse_count,
            unique_chapters=len(per_chapter),
            average_occurrences_per_verse=round_half_up(total / verse_count) if verse_count else 0,
            chapter_distribution=MappingProxyType(distribution),
            timeline=tuple(timeline),
            era=MappingProxyType(era),
            forms=tuple(rank_forms(forms)),
        )

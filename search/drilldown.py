"""
Drill-down over a root's occurrence list.

Narrows the annotated verses of one OccurrenceSet to a chapter, era,
section, page, word form or co-occurring root, then optionally refines the
list by a text filter and a length ordering.
"""

from typing import List, Optional, Tuple

from models import AnnotatedVerse, OccurrenceSet
from search.root_matcher import root_key
from search.text_normalizer import normalize

DRILL_KINDS = ("root", "chapter", "era", "section", "page", "form", "compare")
SORT_ORDERS = ("default", "length_asc", "length_desc")


def _matches_chapter(av, value, corpus):
    if str(value).isdigit():
        return av.verse.chapter_no == int(value)
    return corpus.chapter(av.verse.chapter_no).name == value


def drill_down(occurrences: OccurrenceSet, corpus, kind: str, value=None) -> List[AnnotatedVerse]:
    """
    Filter the verses of ``occurrences`` by one facet.

    Args:
        occurrences: result of OccurrenceLocator.locate
        corpus: CorpusIndex, used for chapter names and eras
        kind: one of DRILL_KINDS; "root" keeps everything
        value: facet value (chapter name or number, "meccan", 7, a form, a root...)
    """
    verses = occurrences.verses
    if kind == "root":
        return list(verses)
    if kind == "chapter":
        return [av for av in verses if _matches_chapter(av, value, corpus)]
    if kind == "era":
        return [av for av in verses if corpus.chapter(av.verse.chapter_no).era == value]
    if kind == "section":
        return [av for av in verses if av.verse.section == int(value)]
    if kind == "page":
        return [av for av in verses if av.verse.page == int(value)]
    if kind == "form":
        wanted = normalize(value)
        return [
            av for av in verses
            if any(normalize(t.display_form) == wanted for t in av.matched_tokens)
        ]
    if kind == "compare":
        wanted = root_key(value)
        return [av for av in verses if wanted in av.other_root_keys]
    raise ValueError(f"Unknown drill-down kind {kind!r}; expected one of {DRILL_KINDS}")


def refine(verses: List[AnnotatedVerse], text: Optional[str] = None, sort: str = "default") -> List[AnnotatedVerse]:
    """Second-level filter: substring match on folded verse text, then order by length."""
    if sort not in SORT_ORDERS:
        raise ValueError(f"Unknown sort {sort!r}")

    result = list(verses)
    needle = normalize(text or "")
    if needle:
        result = [av for av in result if needle in normalize(av.verse.text)]

    if sort == "length_asc":
        result.sort(key=lambda av: len(av.verse.text))
    elif sort == "length_desc":
        result.sort(key=lambda av: len(av.verse.text), reverse=True)
    return result


def center_of_gravity(occurrences: OccurrenceSet) -> Tuple[int, List[AnnotatedVerse]]:
    """Highest per-verse match count and every verse reaching it (corpus order)."""
    if not occurrences.verses:
        return 0, []
    peak = max(av.root_count for av in occurrences.verses)
    return peak, [av for av in occurrences.verses if av.root_count == peak]

from collections import Counter
from typing import Dict

from search.root_matcher import is_significant_root, root_key


def roots_by_length(corpus, length: int) -> Dict:
    """
    Every root of the given letter count with its token frequency.

    Returns:
        {"roots": [{"root", "count"}], "summary": {"totalOccurrences", "totalRoots"}}
    """
    if length < 1:
        raise ValueError("length must be positive")

    ranked = sorted(
        (key for key in corpus.root_keys() if len(key) == length),
        key=lambda key: (-corpus.root_frequency(key), key),
    )
    roots = [{"root": corpus.root_display(key), "count": corpus.root_frequency(key)} for key in ranked]
    return {
        "roots": roots,
        "summary": {
            "totalOccurrences": sum(r["count"] for r in roots),
            "totalRoots": len(roots),
        },
    }


def chapter_profile(corpus, chapter_no: int, top_n: int = 10) -> Dict:
    """Root profile of one chapter: its most frequent roots and the ones found nowhere else."""
    meta = corpus.chapter(chapter_no)
    verses = corpus.chapter_verses(chapter_no)

    frequency = Counter()
    display = {}
    for verse in verses:
        for token in verse.tokens:
            key = root_key(token.root or "")
            if not is_significant_root(key):
                continue
            frequency[key] += 1
            display.setdefault(key, token.root)

    chapter_ids = {v.global_id for v in verses}
    unique = sorted(key for key in frequency if corpus.postings(key) <= chapter_ids)
    top = sorted(frequency.items(), key=lambda item: (-item[1], item[0]))[:top_n]

    return {
        "number": meta.chapter_no,
        "name": meta.name,
        "era": meta.era,
        "revelationOrder": meta.revelation_order,
        "verseCount": len(verses),
        "topRoots": [{"root": display[key], "frequency": count} for key, count in top],
        "uniqueRoots": [display[key] for key in unique],
    }

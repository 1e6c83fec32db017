import json
import logging
from collections import defaultdict
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional

import requests

from chapters import load_chapter_meta
from errors import CorpusIntegrityError, CorpusUnavailableError
from models import ChapterMeta, Token, Verse
from search.root_matcher import root_key

logger = logging.getLogger(__name__)

# ==========================================
# 1. تحويل السجلات (Record parsing)
# ==========================================
# Database exports use snake_case columns (global_ayah, surah_no...),
# newer dumps use camelCase. Both are accepted.


def _pick(record: dict, *names):
    for name in names:
        if name in record and record[name] is not None:
            return record[name]
    raise KeyError(names[0])


def _token_from_record(record: dict) -> Token:
    surface = _pick(record, "surfaceForm", "token", "surface_form")
    uthmani = record.get("surfaceFormUthmani", record.get("token_uthmani"))
    return Token(
        surface_form=surface,
        surface_form_uthmani=uthmani or None,
        root=record.get("root") or None,
    )


def verse_from_record(record: dict) -> Verse:
    tokens = tuple(_token_from_record(t) for t in record.get("tokens") or [])
    return Verse(
        global_id=int(_pick(record, "globalId", "global_ayah", "global_id")),
        chapter_no=int(_pick(record, "chapterNo", "surah_no", "chapter_no")),
        verse_no=int(_pick(record, "verseNo", "ayah_no", "verse_no")),
        page=int(_pick(record, "page")),
        section=int(_pick(record, "section", "juz")),
        text=_pick(record, "text", "text_uthmani"),
        tokens=tokens,
    )


# ==========================================
# 2. CorpusIndex
# ==========================================

class CorpusIndex:
    """
    Read-only, in-memory view of every verse and its tokens.

    Built once at startup; nothing downstream may mutate it, so it is safe to
    share between query threads without locking.
    """

    def __init__(self, verses: Iterable[Verse], chapters: Dict[int, ChapterMeta]):
        ordered = sorted(verses, key=lambda v: v.global_id)
        by_id = {}
        for verse in ordered:
            if verse.global_id in by_id:
                raise CorpusUnavailableError(f"Duplicate verse id {verse.global_id}")
            if verse.chapter_no not in chapters:
                raise CorpusUnavailableError(
                    f"Verse {verse.ref} belongs to chapter {verse.chapter_no} which has no metadata"
                )
            by_id[verse.global_id] = verse

        self._verses = tuple(ordered)
        self._by_id = MappingProxyType(by_id)
        self._chapters = MappingProxyType(dict(chapters))
        self._build_root_index()

    def _build_root_index(self):
        postings = defaultdict(set)
        frequency = defaultdict(int)
        display = {}
        for verse in self._verses:
            for token in verse.tokens:
                if not token.root:
                    continue
                key = root_key(token.root)
                if not key:
                    continue
                postings[key].add(verse.global_id)
                frequency[key] += 1
                display.setdefault(key, token.root)

        self._postings = MappingProxyType({k: frozenset(ids) for k, ids in postings.items()})
        self._root_frequency = MappingProxyType(dict(frequency))
        self._root_display = MappingProxyType(display)

    # --- verses ---

    def __iter__(self) -> Iterator[Verse]:
        return iter(self._verses)

    def __len__(self):
        return len(self._verses)

    @property
    def verses(self):
        return self._verses

    def verse(self, global_id: int) -> Verse:
        return self._by_id[global_id]

    def chapter_verses(self, chapter_no: int) -> List[Verse]:
        return [v for v in self._verses if v.chapter_no == chapter_no]

    # --- chapters ---

    @property
    def chapters(self):
        return self._chapters

    def chapter(self, chapter_no: int) -> ChapterMeta:
        try:
            return self._chapters[chapter_no]
        except KeyError:
            raise CorpusIntegrityError(f"No metadata for chapter {chapter_no}") from None

    # --- roots ---

    def postings(self, key: str) -> FrozenSet[int]:
        """Ids of every verse holding at least one token of root ``key``"""
        return self._postings.get(key, frozenset())

    def root_keys(self):
        return self._postings.keys()

    def root_display(self, key: str) -> str:
        return self._root_display.get(key, key)

    def root_frequency(self, key: str) -> int:
        return self._root_frequency.get(key, 0)

    def summary(self) -> Dict[str, int]:
        return {
            "verses": len(self._verses),
            "chapters": len({v.chapter_no for v in self._verses}),
            "sections": len({v.section for v in self._verses}),
            "pages": len({v.page for v in self._verses}),
            "roots": len(self._postings),
        }


# ==========================================
# 3. التحميل (Loading)
# ==========================================

def _records_from_payload(payload) -> list:
    if isinstance(payload, dict):
        payload = payload.get("verses", payload.get("ayahs"))
    if not isinstance(payload, list):
        raise ValueError("corpus payload must be a list of verse records")
    return payload


def fetch_corpus_records(corpus_path: Optional[str] = None, corpus_url: Optional[str] = None) -> list:
    """Read raw verse records from a URL (preferred when given) or a local JSON file."""
    if corpus_url:
        logger.info(f"Downloading corpus from {corpus_url}")
        response = requests.get(corpus_url, timeout=60)
        response.raise_for_status()
        return _records_from_payload(response.json())

    if not corpus_path:
        raise FileNotFoundError("No corpus path or URL configured")
    with open(Path(corpus_path), "r", encoding="utf-8") as f:
        return _records_from_payload(json.load(f))


def load_corpus_index(
    corpus_path: Optional[str] = None,
    corpus_url: Optional[str] = None,
    chapters_path: Optional[str] = None,
) -> CorpusIndex:
    """
    Build the process-wide CorpusIndex.

    Any failure is fatal: the caller gets CorpusUnavailableError and must not
    start serving queries.
    """
    source = corpus_url or corpus_path
    chapters = load_chapter_meta(chapters_path)

    try:
        records = fetch_corpus_records(corpus_path, corpus_url)
        verses = [verse_from_record(r) for r in records]
    except requests.RequestException as e:
        logger.error(f"❌ Corpus download failed: {e}")
        raise CorpusUnavailableError(f"Corpus unreachable: {source}") from e
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"❌ Corpus could not be read: {e}")
        raise CorpusUnavailableError(f"Corpus unreadable: {source}") from e
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"❌ Malformed corpus record: {e!r}")
        raise CorpusUnavailableError(f"Corpus malformed: {source}") from e

    index = CorpusIndex(verses, chapters)
    stats = index.summary()
    logger.info(
        f"✅ Corpus loaded: {stats['verses']} verses, {stats['chapters']} chapters, "
        f"{stats['sections']} sections, {stats['pages']} pages, {stats['roots']} roots"
    )
    return index

"""
Test root occurrence lookup
"""
import pytest

from conftest import make_verse
from corpus_index import CorpusIndex
from errors import InvalidRootError
from search.occurrence_locator import OccurrenceLocator


def test_matching_verses_in_corpus_order(rahma_corpus):
    occurrences = OccurrenceLocator(rahma_corpus).locate("رحم")
    assert occurrences.key == "رحم"
    assert occurrences.root == "رحم"
    assert [av.verse.global_id for av in occurrences.verses] == [1, 8]
    assert [av.root_count for av in occurrences.verses] == [1, 1]


def test_query_keeps_its_raw_form(rahma_corpus):
    occurrences = OccurrenceLocator(rahma_corpus).locate("ر-ح-م")
    assert occurrences.root == "ر-ح-م"
    assert occurrences.key == "رحم"
    assert len(occurrences) == 2


def test_other_roots_exclude_the_query(rahma_corpus):
    first, second = OccurrenceLocator(rahma_corpus).locate("رحم").verses
    assert first.other_roots == (("اله", "أله"),)
    assert second.other_roots == (("علم", "علم"),)
    assert [t.surface_form for t in first.matched_tokens] == ["الرحمن"]


def test_other_roots_keep_first_form_and_skip_short_roots(chapter_meta):
    corpus = CorpusIndex([
        make_verse(1, 1, 1, [("الله", "أله"), ("رحمة", "رحم"), ("لله", "اله"), ("ان", "ان")]),
    ], chapter_meta)
    (av,) = OccurrenceLocator(corpus).locate("رحم").verses
    assert av.other_roots == (("اله", "أله"),)


def test_unknown_root_is_empty_not_an_error(sample_corpus):
    occurrences = OccurrenceLocator(sample_corpus).locate("زززز")
    assert len(occurrences) == 0
    assert occurrences.verses == ()


def test_alef_variants_match(sample_corpus):
    locator = OccurrenceLocator(sample_corpus)
    expected = [6222, 6225]
    assert [av.verse.global_id for av in locator.locate("أحد").verses] == expected
    assert [av.verse.global_id for av in locator.locate("احد").verses] == expected


@pytest.mark.parametrize("query", ["", "---", "  ", "َُ", None])
def test_empty_root_is_invalid(rahma_corpus, query):
    with pytest.raises(InvalidRootError):
        OccurrenceLocator(rahma_corpus).locate(query)


def test_invalid_root_is_a_value_error(rahma_corpus):
    with pytest.raises(ValueError):
        OccurrenceLocator(rahma_corpus).locate("123")

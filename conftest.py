"""
Test configuration

Small hand-built corpora over the real chapter table, plus the bundled
sample corpus.
"""
from pathlib import Path

import pytest

from chapters import builtin_chapter_meta
from corpus_index import CorpusIndex, load_corpus_index
from models import Token, Verse

SAMPLE_CORPUS = Path(__file__).parent / "data" / "sample_corpus.json"


def make_verse(global_id, chapter_no, verse_no, tokens, page=1, section=1, text=None):
    """Build a Verse from (surface form, root) pairs."""
    return Verse(
        global_id=global_id,
        chapter_no=chapter_no,
        verse_no=verse_no,
        page=page,
        section=section,
        text=text or " ".join(form for form, _ in tokens),
        tokens=tuple(Token(surface_form=form, surface_form_uthmani=None, root=root) for form, root in tokens),
    )


@pytest.fixture(scope="session")
def chapter_meta():
    return builtin_chapter_meta()


@pytest.fixture
def rahma_corpus(chapter_meta):
    """Three verses; the first and last carry one token of ر-ح-م each."""
    return CorpusIndex([
        make_verse(1, 1, 1, [("الرحمن", "ر-ح-م"), ("الله", "أله")]),
        make_verse(2, 1, 2, [("الحمد", "حمد"), ("العالمين", "علم")]),
        make_verse(8, 2, 1, [("رحيم", "ر-ح-م"), ("يعلم", "علم")], page=2),
    ], chapter_meta)


@pytest.fixture
def cooccurrence_corpus(chapter_meta):
    """رحم shares one verse with علم, which holds two علم tokens; علم appears in two more verses."""
    return CorpusIndex([
        make_verse(1, 1, 1, [("رحمة", "رحم"), ("علم", "علم"), ("يعلمون", "علم")]),
        make_verse(2, 1, 2, [("العليم", "علم")]),
        make_verse(3, 1, 3, [("تعلمون", "علم"), ("الكتاب", "كتب")]),
    ], chapter_meta)


@pytest.fixture(scope="session")
def sample_corpus():
    return load_corpus_index(corpus_path=str(SAMPLE_CORPUS))

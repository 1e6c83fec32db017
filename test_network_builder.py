"""
Test the co-occurrence network and relationship matrix
"""
from hypothesis import given, settings, strategies as st

from graph.network_builder import (
    RADIUS_MAX,
    RADIUS_MIN,
    NetworkBuilder,
    rank_co_roots,
    scale_radius,
)
from search.occurrence_locator import OccurrenceLocator


def _build(corpus, root, **kwargs):
    top_k = kwargs.pop("top_k", None)
    occurrences = OccurrenceLocator(corpus).locate(root)
    return NetworkBuilder(corpus, **kwargs).build(occurrences, root, top_k=top_k)


def _cells(network):
    return {(cell.x, cell.y): cell.value for cell in network.matrix}


def test_center_is_the_raw_query(rahma_corpus):
    network = _build(rahma_corpus, "ر-ح-م")
    assert network.center.id == "ر-ح-م"
    assert network.center.group == 0
    assert all(link.source == "ر-ح-م" for link in network.links)


def test_zero_matches_leave_only_the_center(sample_corpus):
    network = _build(sample_corpus, "زززز")
    assert len(network.nodes) == 1
    assert network.center.id == "زززز"
    assert network.center.radius == RADIUS_MIN
    assert network.links == ()
    assert network.matrix == ()


def test_links_count_shared_verses_not_tokens(cooccurrence_corpus):
    network = _build(cooccurrence_corpus, "رحم", include_query_root=True)
    assert [(l.source, l.target, l.value) for l in network.links] == [("رحم", "علم", 1)]

    cells = _cells(network)
    assert cells[("رحم", "علم")] == 1
    assert cells[("علم", "رحم")] == 1
    assert cells[("رحم", "رحم")] == 0
    assert cells[("علم", "علم")] == 0


def test_query_root_left_out_of_matrix_by_default(cooccurrence_corpus):
    network = _build(cooccurrence_corpus, "رحم")
    assert [(c.x, c.y, c.value) for c in network.matrix] == [("علم", "علم", 0)]


def test_satellites_ranked_by_count_then_key(sample_corpus):
    network = _build(sample_corpus, "أله", top_k=3)
    assert [n.id for n in network.nodes] == ["أله", "أحد", "حمد", "ربب"]
    assert [n.group for n in network.nodes] == [0, 1, 1, 1]
    assert len(network.matrix) == 9


def test_rank_co_roots(sample_corpus):
    occurrences = OccurrenceLocator(sample_corpus).locate("أحد")
    assert rank_co_roots(occurrences, 12) == [
        ("اله", "أله", 1),
        ("قول", "قول", 1),
        ("كفا", "كفأ", 1),
        ("كون", "كون", 1),
    ]
    assert rank_co_roots(occurrences, 0) == []


def test_matrix_is_symmetric_with_zero_diagonal(sample_corpus):
    for root in ("قوم", "أله", "هدي", "رحم"):
        cells = _cells(_build(sample_corpus, root, include_query_root=True))
        for (x, y), value in cells.items():
            assert cells[(y, x)] == value
            if x == y:
                assert value == 0


def test_matrix_values(sample_corpus):
    cells = _cells(_build(sample_corpus, "قوم"))
    assert cells[("هدي", "صرط")] == 1
    assert cells[("هدي", "أمن")] == 0


def test_shared_verse_counts(sample_corpus):
    shared = NetworkBuilder(sample_corpus).shared_verse_counts(["اله", "رحم", "احد"])
    assert shared.tolist() == [
        [0, 1, 1],
        [1, 0, 0],
        [1, 0, 0],
    ]


def test_radius_fixed_points():
    assert scale_radius(0) == RADIUS_MIN
    assert scale_radius(400) == RADIUS_MAX
    assert scale_radius(10_000) == RADIUS_MAX


@given(st.integers(min_value=0, max_value=100_000), st.integers(min_value=0, max_value=100_000))
@settings(max_examples=300)
def test_radius_is_monotonic_and_bounded(a, b):
    low, high = sorted((a, b))
    assert RADIUS_MIN <= scale_radius(low) <= scale_radius(high) <= RADIUS_MAX

"""
Fixed-shape records shared by the corpus index and the analytics engine.

Everything here is frozen: verses and tokens are loaded once and never
mutated, and per-query results are cached and handed to many callers.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

MECCAN = "meccan"
MEDINAN = "medinan"
ERAS = (MECCAN, MEDINAN)


@dataclass(frozen=True)
class Token:
    surface_form: str
    surface_form_uthmani: Optional[str]
    root: Optional[str]

    @property
    def display_form(self) -> str:
        """Fully diacritized form when the corpus has one, plain form otherwise"""
        return self.surface_form_uthmani or self.surface_form


@dataclass(frozen=True)
class Verse:
    global_id: int
    chapter_no: int
    verse_no: int
    page: int
    section: int
    text: str
    tokens: Tuple[Token, ...] = ()

    @property
    def ref(self) -> str:
        return f"{self.chapter_no}:{self.verse_no}"


@dataclass(frozen=True)
class ChapterMeta:
    chapter_no: int
    name: str
    era: str
    revelation_order: int


@dataclass(frozen=True)
class AnnotatedVerse:
    verse: Verse
    matched_tokens: Tuple[Token, ...]
    # (normalized key, first original form seen in the verse)
    other_roots: Tuple[Tuple[str, str], ...]

    @property
    def root_count(self) -> int:
        return len(self.matched_tokens)

    @property
    def other_root_keys(self) -> Tuple[str, ...]:
        return tuple(key for key, _ in self.other_roots)


@dataclass(frozen=True)
class OccurrenceSet:
    root: str
    key: str
    verses: Tuple[AnnotatedVerse, ...] = ()

    def __len__(self):
        return len(self.verses)


# ==========================================
# Statistics
# ==========================================

@dataclass(frozen=True)
class TimelineEntry:
    chapter_no: int
    chapter_name: str
    revelation_order: int
    count: int

    def to_dict(self) -> Dict:
        return {
            "chapterNo": self.chapter_no,
            "chapterName": self.chapter_name,
            "revelationOrder": self.revelation_order,
            "count": self.count,
        }


@dataclass(frozen=True)
class FormCount:
    form: str
    count: int

    def to_dict(self) -> Dict:
        return {"form": self.form, "count": self.count}


@dataclass(frozen=True)
class StatisticsBlock:
    total_occurrences: int = 0
    total_verses: int = 0
    unique_chapters: int = 0
    average_occurrences_per_verse: int = 0
    chapter_distribution: Dict[str, int] = field(default_factory=dict)
    timeline: Tuple[TimelineEntry, ...] = ()
    era: Dict[str, int] = field(default_factory=lambda: {MECCAN: 0, MEDINAN: 0})
    forms: Tuple[FormCount, ...] = ()


# ==========================================
# Network
# ==========================================

@dataclass(frozen=True)
class NetworkNode:
    id: str
    group: int
    radius: float

    def to_dict(self) -> Dict:
        return {"id": self.id, "group": self.group, "radius": self.radius}


@dataclass(frozen=True)
class NetworkLink:
    source: str
    target: str
    value: int

    def to_dict(self) -> Dict:
        return {"source": self.source, "target": self.target, "value": self.value}


@dataclass(frozen=True)
class MatrixCell:
    x: str
    y: str
    value: int

    def to_dict(self) -> Dict:
        return {"x": self.x, "y": self.y, "value": self.value}


@dataclass(frozen=True)
class NetworkBlock:
    nodes: Tuple[NetworkNode, ...]
    links: Tuple[NetworkLink, ...] = ()
    matrix: Tuple[MatrixCell, ...] = ()

    @property
    def center(self) -> NetworkNode:
        return self.nodes[0]

    def relabel_center(self, root: str) -> "NetworkBlock":
        """Same block with the center node, link sources and matrix labels renamed to ``root``"""
        old = self.center.id
        if old == root:
            return self
        nodes = (replace(self.center, id=root),) + self.nodes[1:]
        links = tuple(replace(link, source=root) for link in self.links)
        matrix = tuple(
            replace(cell, x=root if cell.x == old else cell.x, y=root if cell.y == old else cell.y)
            for cell in self.matrix
        )
        return replace(self, nodes=nodes, links=links, matrix=matrix)


# ==========================================
# Assembled result
# ==========================================

@dataclass(frozen=True)
class AnalyticsResult:
    root: str
    occurrences: OccurrenceSet
    statistics: StatisticsBlock
    network: NetworkBlock

    def for_query(self, root: str) -> "AnalyticsResult":
        if root == self.root:
            return self
        return replace(self, root=root, network=self.network.relabel_center(root))

    def to_dict(self, include_verses: bool = False, chapters: Optional[Dict] = None) -> Dict:
        """
        Serialize to the shape presentation layers consume.

        Args:
            include_verses: also emit the occurrence list under ``ayahs``
            chapters: chapter_no -> ChapterMeta, required with include_verses
        """
        stats = self.statistics
        data = {
            "root": self.root,
            "totalOccurrences": stats.total_occurrences,
            "totalVerses": stats.total_verses,
            "uniqueChapters": stats.unique_chapters,
            "averageOccurrencesPerVerse": stats.average_occurrences_per_verse,
            "chapterDistribution": dict(stats.chapter_distribution),
            "timeline": [entry.to_dict() for entry in stats.timeline],
            "era": dict(stats.era),
            "forms": [f.to_dict() for f in stats.forms],
            "network": {
                "nodes": [n.to_dict() for n in self.network.nodes],
                "links": [l.to_dict() for l in self.network.links],
            },
            "matrix": [cell.to_dict() for cell in self.network.matrix],
        }
        if include_verses:
            if chapters is None:
                raise ValueError("chapters lookup is required to serialize verses")
            data["ayahs"] = [_annotated_verse_dict(av, chapters) for av in self.occurrences.verses]
        return data


def _annotated_verse_dict(av: AnnotatedVerse, chapters: Dict) -> Dict:
    verse = av.verse
    meta = chapters[verse.chapter_no]
    return {
        "globalId": verse.global_id,
        "chapterNo": verse.chapter_no,
        "chapterName": meta.name,
        "verseNo": verse.verse_no,
        "page": verse.page,
        "section": verse.section,
        "era": meta.era,
        "text": verse.text,
        "rootCount": av.root_count,
        "forms": [t.display_form for t in av.matched_tokens],
        "otherRoots": [display for _, display in av.other_roots],
    }

"""
Chapter (surah) metadata: name, era and revelation order.

The built-in table follows the Tanzil metadata; a JSON file with the same
fields can replace it (see ``load_chapter_meta``).
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from errors import CorpusUnavailableError
from models import ChapterMeta, ERAS, MECCAN, MEDINAN

logger = logging.getLogger(__name__)

CHAPTER_COUNT = 114

SURAH_NAMES = [
    "الفاتحة", "البقرة", "آل عمران", "النساء", "المائدة", "الأنعام", "الأعراف", "الأنفال", "التوبة", "يونس",
    "هود", "يوسف", "الرعد", "إبراهيم", "الحجر", "النحل", "الإسراء", "الكهف", "مريم", "طه",
    "الأنبياء", "الحج", "المؤمنون", "النور", "الفرقان", "الشعراء", "النمل", "القصص", "العنكبوت", "الروم",
    "لقمان", "السجدة", "الأحزاب", "سبأ", "فاطر", "يس", "الصافات", "ص", "الزمر", "غافر",
    "فصلت", "الشورى", "الزخرف", "الدخان", "الجاثية", "الأحقاف", "محمد", "الفتح", "الحجرات", "ق",
    "الذاريات", "الطور", "النجم", "القمر", "الرحمن", "الواقعة", "الحديد", "المجادلة", "الحشر", "الممتحنة",
    "الصف", "الجمعة", "المنافقون", "التغابن", "الطلاق", "التحريم", "الملك", "القلم", "الحاقة", "المعارج",
    "نوح", "الجن", "المزمل", "المدثر", "القيامة", "الإنسان", "المرسلات", "النبأ", "النازعات", "عبس",
    "التكوير", "الانفطار", "المطففين", "الانشقاق", "البروج", "الطارق", "الأعلى", "الغاشية", "الفجر", "البلد",
    "الشمس", "الليل", "الضحى", "الشرح", "التين", "العلق", "القدر", "البينة", "الزلزلة", "العاديات",
    "القارعة", "التكاثر", "العصر", "الهمزة", "الفيل", "قريش", "الماعون", "الكوثر", "الكافرون", "النصر",
    "المسد", "الإخلاص", "الفلق", "الناس"
]

# ترتيب النزول، بترتيب المصحف
REVELATION_ORDER = [
    5, 87, 89, 92, 112, 55, 39, 88, 113, 51,
    52, 53, 96, 72, 54, 70, 50, 69, 44, 45,
    73, 103, 74, 102, 42, 47, 48, 49, 85, 84,
    57, 75, 90, 58, 43, 41, 56, 38, 59, 60,
    61, 62, 63, 64, 65, 66, 95, 111, 106, 34,
    67, 76, 23, 37, 97, 46, 94, 105, 101, 91,
    109, 110, 104, 108, 99, 107, 77, 2, 78, 79,
    71, 40, 3, 4, 31, 98, 33, 80, 81, 24,
    7, 82, 86, 83, 27, 36, 8, 68, 10, 35,
    26, 9, 11, 12, 28, 1, 25, 100, 93, 14,
    30, 16, 13, 32, 19, 29, 17, 15, 18, 114,
    6, 22, 20, 21,
]

MEDINAN_CHAPTERS = frozenset({
    2, 3, 4, 5, 8, 9, 13, 22, 24, 33, 47, 48, 49, 55,
    57, 58, 59, 60, 61, 62, 63, 64, 65, 66, 76, 98, 99, 110,
})


def builtin_chapter_meta() -> Dict[int, ChapterMeta]:
    return {
        no: ChapterMeta(
            chapter_no=no,
            name=SURAH_NAMES[no - 1],
            era=MEDINAN if no in MEDINAN_CHAPTERS else MECCAN,
            revelation_order=REVELATION_ORDER[no - 1],
        )
        for no in range(1, CHAPTER_COUNT + 1)
    }


def _meta_from_record(record: dict) -> ChapterMeta:
    era = str(record["era"]).lower()
    if era not in ERAS:
        raise ValueError(f"unknown era {record['era']!r}")
    return ChapterMeta(
        chapter_no=int(record["chapterNo"]),
        name=record["name"],
        era=era,
        revelation_order=int(record["revelationOrder"]),
    )


def load_chapter_meta(path: Optional[str] = None) -> Dict[int, ChapterMeta]:
    """
    Load chapter metadata, falling back to the built-in table.

    Args:
        path: JSON file holding a list of {chapterNo, name, era, revelationOrder}

    Returns:
        dict chapter_no -> ChapterMeta
    """
    if not path:
        return builtin_chapter_meta()

    try:
        with open(Path(path), "r", encoding="utf-8") as f:
            records = json.load(f)
        meta = {}
        for record in records:
            item = _meta_from_record(record)
            meta[item.chapter_no] = item
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        logger.error(f"❌ Failed to load chapter metadata from {path}: {e}")
        raise CorpusUnavailableError(f"Chapter metadata unavailable: {path}") from e

    logger.info(f"Loaded metadata for {len(meta)} chapters from {path}")
    return meta

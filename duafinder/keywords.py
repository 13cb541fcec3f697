"""Topic keyword bundles used to enrich catalog records before search."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Set, Tuple

from .patterns import normalize_text
from .records import Record

TOPIC_ORDER: Tuple[str, ...] = (
    "sleep",
    "morning",
    "evening",
    "travel",
    "anxiety",
    "protection",
    "forgiveness",
    "health",
    "money_rizq",
    "exam",
    "sadness",
    "anger",
    "fear",
)


@dataclass(frozen=True)
class TopicBundle:
    triggers: Tuple[str, ...]
    en: Tuple[str, ...]
    ur: Tuple[str, ...]
    roman: Tuple[str, ...]
    ar: Tuple[str, ...]
    tags: Tuple[str, ...]


@dataclass(frozen=True)
class KeywordBundle:
    keywords_en: str
    keywords_ur: str
    keywords_roman: str
    keywords_ar: str
    tags: str
    search_blob: str


def _build_topic_bundles() -> Dict[str, TopicBundle]:
    return {
        "sleep": TopicBundle(
            triggers=("sleep", "sleeping", "bed", "night", "before sleeping", "wake up", "wakeup"),
            en=("sleep dua", "before sleep", "night supplication"),
            ur=("سونے کی دعا", "نیند کی دعا"),
            roman=("sone ki dua", "neend ki dua"),
            ar=("دعاء النوم", "أذكار النوم"),
            tags=("sleep", "night"),
        ),
        "morning": TopicBundle(
            triggers=("morning", "sunrise", "fajr", "day begins"),
            en=("morning dua", "morning adhkar"),
            ur=("صبح کی دعا", "صبح کے اذکار"),
            roman=("subah ki dua", "subah azkar"),
            ar=("أذكار الصباح", "دعاء الصباح"),
            tags=("morning", "adhkar"),
        ),
        "evening": TopicBundle(
            triggers=("evening", "nightfall", "maghrib", "sunset"),
            en=("evening dua", "evening adhkar"),
            ur=("شام کی دعا", "شام کے اذکار"),
            roman=("shaam ki dua", "shaam azkar"),
            ar=("أذكار المساء", "دعاء المساء"),
            tags=("evening", "adhkar"),
        ),
        "travel": TopicBundle(
            triggers=("travel", "journey", "vehicle", "ride", "safar", "riding"),
            en=("travel dua", "journey dua", "safar dua"),
            ur=("سفر کی دعا",),
            roman=("safar ki dua", "travel dua"),
            ar=("دعاء السفر",),
            tags=("travel", "journey"),
        ),
        "anxiety": TopicBundle(
            triggers=("anxiety", "distress", "worry", "depressed", "stress", "grief"),
            en=("dua for anxiety", "dua for stress"),
            ur=("پریشانی کی دعا", "غم کی دعا"),
            roman=("pareshani ki dua", "gham ki dua"),
            ar=("دعاء الهم", "دعاء الكرب"),
            tags=("anxiety", "stress"),
        ),
        "protection": TopicBundle(
            triggers=("protection", "evil eye", "safe", "security", "danger", "harm"),
            en=("protection dua", "safety dua"),
            ur=("حفاظت کی دعا",),
            roman=("hifazat ki dua",),
            ar=("دعاء الحفظ", "دعاء الوقاية"),
            tags=("protection", "safety"),
        ),
        "forgiveness": TopicBundle(
            triggers=("forgive", "forgiveness", "repent", "repentance", "istighfar", "sin"),
            en=("dua for forgiveness", "istighfar dua"),
            ur=("استغفار", "معافی کی دعا"),
            roman=("astaghfar", "maafi ki dua"),
            ar=("دعاء الاستغفار", "التوبة"),
            tags=("forgiveness", "tawbah"),
        ),
        "health": TopicBundle(
            triggers=("health", "sick", "illness", "disease", "healing", "cure"),
            en=("dua for health", "healing dua", "shifa dua"),
            ur=("شفا کی دعا", "صحت کی دعا"),
            roman=("shifa ki dua", "sehat ki dua"),
            ar=("دعاء الشفاء", "الصحة"),
            tags=("health", "healing"),
        ),
        "money_rizq": TopicBundle(
            triggers=("rizq", "money", "wealth", "provision", "income", "job", "debt", "financial"),
            en=("rizq dua", "dua for wealth", "dua for job"),
            ur=("رزق کی دعا", "مال کی دعا"),
            roman=("rizq ki dua", "rozi ki dua"),
            ar=("دعاء الرزق",),
            tags=("rizq", "provision"),
        ),
        "exam": TopicBundle(
            triggers=("exam", "study", "knowledge", "test", "school", "university"),
            en=("dua for exam", "dua for study", "dua for knowledge"),
            ur=("امتحان کی دعا", "پڑھائی کی دعا"),
            roman=("imtihan ki dua", "parhai ki dua"),
            ar=("دعاء الامتحان", "دعاء طلب العلم"),
            tags=("exam", "study"),
        ),
        "sadness": TopicBundle(
            triggers=("sad", "sadness", "sorrow", "grief", "heartbroken"),
            en=("dua for sadness", "dua for grief"),
            ur=("اداسی کی دعا", "غم کی دعا"),
            roman=("udasi ki dua", "gham ki dua"),
            ar=("دعاء الحزن",),
            tags=("sadness", "grief"),
        ),
        "anger": TopicBundle(
            triggers=("anger", "angry", "rage", "temper"),
            en=("dua for anger", "control anger dua"),
            ur=("غصہ کم کرنے کی دعا",),
            roman=("ghussa control dua",),
            ar=("دعاء الغضب",),
            tags=("anger", "patience"),
        ),
        "fear": TopicBundle(
            triggers=("fear", "afraid", "scared", "fright", "panic"),
            en=("dua for fear", "dua for protection from fear"),
            ur=("خوف کی دعا",),
            roman=("khauf ki dua",),
            ar=("دعاء الخوف",),
            tags=("fear", "courage"),
        ),
    }


TOPIC_BUNDLES: Mapping[str, TopicBundle] = MappingProxyType(_build_topic_bundles())

CATEGORY_TO_TOPIC: Mapping[str, str] = MappingProxyType(
    {
        "morning": "morning",
        "evening": "evening",
        "sleep": "sleep",
        "travel": "travel",
    }
)

# Checked in order; first hit wins.
_CATEGORY_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Morning", ("morning",)),
    ("Evening", ("evening",)),
    ("Sleep", ("sleep", "wake up")),
    ("Travel", ("travel", "journey", "riding")),
    ("Forgiveness", ("forgiveness", "repent")),
    ("Protection", ("protection", "safety")),
    ("Health", ("sick", "illness", "healing")),
)


def infer_category(chapter_title: str = "") -> str:
    """Map a chapter title onto one of the broad reminder categories."""
    title = normalize_text(chapter_title)
    for category, needles in _CATEGORY_RULES:
        if any(needle in title for needle in needles):
            return category
    return "General"


def detect_topics(chapter_title: str = "", category: str = "", english: str = "") -> Set[str]:
    haystack = normalize_text(f"{chapter_title} {category} {english}")
    topics: Set[str] = set()
    for topic in TOPIC_ORDER:
        bundle = TOPIC_BUNDLES[topic]
        if any(normalize_text(trigger) in haystack for trigger in bundle.triggers):
            topics.add(topic)
    category_topic = CATEGORY_TO_TOPIC.get(normalize_text(category))
    if category_topic:
        topics.add(category_topic)
    return topics


def _to_csv(values: Iterable[str]) -> str:
    seen: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return ", ".join(seen)


def generate_keyword_bundle(
    chapter_title: str = "",
    category: str = "General",
    english: str = "",
    arabic: str = "",
) -> KeywordBundle:
    """Build multilingual keyword lists and a search blob for one entry."""
    topics = detect_topics(chapter_title, category, english)
    en: List[str] = []
    ur: List[str] = []
    roman: List[str] = []
    ar: List[str] = []
    tags: List[str] = []
    for topic in TOPIC_ORDER:
        if topic not in topics:
            continue
        bundle = TOPIC_BUNDLES[topic]
        en.extend(bundle.en)
        ur.extend(bundle.ur)
        roman.extend(bundle.roman)
        ar.extend(bundle.ar)
        tags.extend(bundle.tags)

    en.append(f"{category} dua")
    tags.append(normalize_text(category) or "general")

    keywords_en = _to_csv(en)
    keywords_ur = _to_csv(ur)
    keywords_roman = _to_csv(roman)
    keywords_ar = _to_csv(ar)
    tag_csv = _to_csv(tags)
    search_blob = normalize_text(
        " ".join(
            [
                chapter_title,
                category,
                english,
                arabic,
                keywords_en,
                keywords_ur,
                keywords_roman,
                keywords_ar,
                tag_csv,
            ]
        )
    )
    return KeywordBundle(
        keywords_en=keywords_en,
        keywords_ur=keywords_ur,
        keywords_roman=keywords_roman,
        keywords_ar=keywords_ar,
        tags=tag_csv,
        search_blob=search_blob,
    )


def enrich_record(record: Record, *, arabic_limit: int = 300) -> Record:
    """Fill empty category, keyword and blob fields; populated fields are kept."""
    category = record.category or infer_category(record.chapter_title_en)
    bundle = generate_keyword_bundle(
        chapter_title=record.chapter_title_en,
        category=category,
        english=record.english,
        arabic=record.arabic[:arabic_limit],
    )
    changes: Dict[str, str] = {}
    if not record.category:
        changes["category"] = category
    for name in ("keywords_en", "keywords_ur", "keywords_roman", "keywords_ar", "tags", "search_blob"):
        if not getattr(record, name):
            changes[name] = getattr(bundle, name)
    if not changes:
        return record
    return record.with_fields(**changes)

"""
Heuristic text classification: language, sophistication level, topic category.

Keyword counting only. Good enough to steer the tone of prompts and
fallback text; not a language-ID or topic model and never used for
anything correctness-critical.
"""

from models import (
    Language,
    SophisticationLevel,
    Category,
    Classification,
    DEFAULT_CATEGORY,
)


# High-frequency German function words, matched as substrings
GERMAN_MARKERS = [
    "und", "der", "die", "das", "ist", "nicht", "ein", "eine", "mit",
    "auch", "aber", "sich", "für", "wird", "sind", "oder", "wenn",
]
GERMAN_MIN_MATCHES = 2

# Stems so German and English spellings both hit
ACADEMIC_TERMS = [
    "epistemolog", "ontolog", "empiri", "phänomenolog", "phenomenolog",
    "dialekti", "dialecti", "metaphysi", "transzendent", "transcendent",
    "hermeneuti", "paradigm", "kausalität", "causality", "axiom",
    "falsifi", "kategorisch", "categorical", "teleolog", "immanen",
]
LONG_SENTENCE_WORDS = 15

# Scan order matters: first category with any hit wins
CATEGORY_KEYWORDS = [
    (Category.TECHNOLOGY, [
        "technolog", "software", "computer", "künstliche intelligenz",
        "artificial intelligence", "algorithm", "digital", "roboter", "robot",
        "internet",
    ]),
    (Category.SCIENCE, [
        "wissenschaft", "science", "physik", "physics", "biolog", "chemie",
        "chemistry", "experiment", "forschung", "research", "quanten", "quantum",
    ]),
    (Category.SOCIETY, [
        "gesellschaft", "society", "politik", "politic", "kultur", "culture",
        "gemeinschaft", "community", "demokratie", "democracy",
    ]),
    (Category.ECONOMY, [
        "wirtschaft", "economy", "economic", "markt", "market", "geld", "money",
        "unternehm", "business", "handel", "trade",
    ]),
    (Category.ETHICS, [
        "ethik", "ethic", "moral", "gerechtigkeit", "justice", "verantwortung",
        "responsibility", "freiheit", "freedom",
    ]),
    (Category.PSYCHOLOGY, [
        "psycholog", "emotion", "gefühl", "verhalten", "behavior", "behaviour",
    ]),
    (Category.ENVIRONMENT, [
        "umwelt", "environment", "klima", "climate", "natur", "nachhaltig",
        "sustainab", "ökolog", "ecolog",
    ]),
]


def detect_language(text: str) -> Language:
    """German when at least two distinct German function words occur."""
    text_lower = (text or "").lower()
    matches = sum(1 for word in GERMAN_MARKERS if word in text_lower)
    return Language.DE if matches >= GERMAN_MIN_MATCHES else Language.EN


def count_academic_terms(text: str) -> int:
    text_lower = (text or "").lower()
    return sum(text_lower.count(term) for term in ACADEMIC_TERMS)


def count_long_sentences(text: str) -> int:
    sentences = (text or "").split(".")
    return sum(1 for s in sentences if len(s.split()) > LONG_SENTENCE_WORDS)


def detect_sophistication_level(text: str) -> SophisticationLevel:
    terms = count_academic_terms(text)
    long_sentences = count_long_sentences(text)

    if terms >= 3 or long_sentences >= 2:
        return SophisticationLevel.ADVANCED
    if terms >= 1 or long_sentences >= 1:
        return SophisticationLevel.INTERMEDIATE
    return SophisticationLevel.BASIC


def categorize_idea(text: str) -> Category:
    """First category in scan order with a keyword hit; Philosophy otherwise."""
    text_lower = (text or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text_lower for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def classify(text: str) -> Classification:
    return Classification(
        language=detect_language(text),
        sophistication_level=detect_sophistication_level(text),
        category=categorize_idea(text),
    )

"""Unit tests for the text classifier."""

import pytest

from models import Language, SophisticationLevel, Category
from weitblick.classify import (
    classify,
    detect_language,
    detect_sophistication_level,
    categorize_idea,
    count_long_sentences,
)


class TestLanguage:

    def test_german_function_words(self):
        assert detect_language("und die ist aber") == Language.DE

    def test_english(self):
        assert detect_language("the cat is blue") == Language.EN

    def test_short_german_idea(self):
        # "ein" inside "Bewusstsein" plus "ist"
        assert detect_language("Bewusstsein ist relational") == Language.DE

    def test_single_marker_is_not_enough(self):
        assert detect_language("this is true und wrong") == Language.EN

    def test_empty_text(self):
        assert detect_language("") == Language.EN


class TestSophistication:

    def test_three_academic_terms_is_advanced(self):
        assert detect_sophistication_level("epistemologie, ontologie, empirisch") == SophisticationLevel.ADVANCED

    def test_one_term_is_intermediate(self):
        assert detect_sophistication_level("Eine ontologische Frage") == SophisticationLevel.INTERMEDIATE

    def test_plain_text_is_basic(self):
        assert detect_sophistication_level("Bewusstsein ist relational") == SophisticationLevel.BASIC

    def test_long_sentences(self):
        long_sentence = " ".join(["wort"] * 16)
        text = f"{long_sentence}. {long_sentence}."
        assert count_long_sentences(text) == 2
        assert detect_sophistication_level(text) == SophisticationLevel.ADVANCED

    def test_one_long_sentence_is_intermediate(self):
        text = " ".join(["wort"] * 16) + ". Kurz."
        assert detect_sophistication_level(text) == SophisticationLevel.INTERMEDIATE


class TestCategory:

    @pytest.mark.parametrize("text, expected", [
        ("Software frisst die Welt", Category.TECHNOLOGY),
        ("Quantum physics and free will", Category.SCIENCE),
        ("Demokratie braucht Streit", Category.SOCIETY),
        ("Money is a shared fiction", Category.ECONOMY),
        ("Freiheit ist Verantwortung", Category.ETHICS),
        ("Emotion shapes memory", Category.PSYCHOLOGY),
        ("Klima als Spiegel", Category.ENVIRONMENT),
    ])
    def test_keyword_categories(self, text, expected):
        assert categorize_idea(text) == expected

    def test_first_match_wins(self):
        # Technology is scanned before Society
        assert categorize_idea("Künstliche Intelligenz verändert die Gesellschaft") == Category.TECHNOLOGY

    def test_default_is_philosophy(self):
        assert categorize_idea("Bewusstsein ist relational") == Category.PHILOSOPHY
        assert categorize_idea("") == Category.PHILOSOPHY


class TestClassify:

    def test_reference_idea(self, sample_idea):
        c = classify(sample_idea)
        assert c.to_dict() == {
            "language": "de",
            "sophistication_level": "basic",
            "category": "Philosophy",
        }

    def test_deterministic(self):
        text = "Ontologie der Maschinen und die Frage nach dem Sein"
        assert classify(text) == classify(text)

    def test_total_on_empty(self):
        c = classify("")
        assert c.language == Language.EN
        assert c.sophistication_level == SophisticationLevel.BASIC
        assert c.category == Category.PHILOSOPHY

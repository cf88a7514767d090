"""Tests for Russian text processing."""

import pytest

from languages.russian.maps import ACCENTED_VOWELS, WordClass
from languages.russian.text import normalize, split_sentences, tokenize


class TestNormalize:

    @pytest.mark.parametrize("accented,plain", ACCENTED_VOWELS)
    def test_strips_each_stressed_vowel(self, accented, plain):
        assert normalize(accented) == plain

    def test_strips_inside_word(self):
        assert normalize("кни́ги") == "книги"
        assert normalize("молоко́") == "молоко"

    def test_idempotent(self):
        once = normalize("чита́ю")
        assert normalize(once) == once

    def test_plain_text_unchanged(self):
        assert normalize("ёлка дом") == "ёлка дом"


class TestTokenize:

    def test_lowercases_and_splits(self):
        assert tokenize("Я читаю КНИГУ") == ["я", "читаю", "книгу"]

    def test_non_cyrillic_separates_words(self):
        assert tokenize("дом,дома-2 house; «книга»!") == ["дом", "дома", "книга"]

    def test_keeps_yo(self):
        assert tokenize("Ёж ещё") == ["ёж", "ещё"]

    def test_stress_marks_do_not_split_words(self):
        assert tokenize("Кни́ги до́ма") == ["книги", "дома"]

    def test_empty(self):
        assert tokenize("123 abc ...") == []


class TestSplitSentences:

    def test_terminal_punctuation(self):
        text = "Я читаю книгу. Где ты? Иди сюда! Ну…"
        assert split_sentences(text) == ["Я читаю книгу.", "Где ты?", "Иди сюда!", "Ну…"]

    def test_trailing_guillemet_stays_with_sentence(self):
        assert split_sentences("«Привет.» Он ушёл.") == ["«Привет.»", "Он ушёл."]

    def test_trailing_text_without_terminator(self):
        assert split_sentences("Первое. А второе без точки") == ["Первое.", "А второе без точки"]

    def test_whitespace_collapsed(self):
        assert split_sentences("Он\n  пришёл.  ") == ["Он пришёл."]

    def test_multiple_terminators(self):
        assert split_sentences("Что?! Да.") == ["Что?!", "Да."]


class TestWordClass:

    def test_codes_are_closed_set(self):
        assert WordClass.codes() == {
            "noun", "verb", "adj", "adv", "det", "particle", "intj", "conj", "pron", "prep",
        }

    def test_lookup_by_code(self):
        assert WordClass("adj") is WordClass.ADJECTIVE

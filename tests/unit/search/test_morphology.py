"""
Tests for the Hebrew morphology expander.
"""

import pytest

from catalog_search.search.morphology import SUFFIX_RULES, SuffixRule, expand_phrase, expand_token, is_plural


class TestExpandToken:
    @pytest.mark.parametrize("token", ["כפכף", "כפכפים", "סירה", "סירות", "נעל", "אדום", "א"])
    def test_always_contains_original(self, token):
        variants = expand_token(token)
        assert token in variants
        assert all(v.strip() for v in variants)

    def test_non_hebrew_returned_unchanged(self):
        assert expand_token("sandals") == frozenset({"sandals"})
        assert expand_token("36") == frozenset({"36"})

    def test_masculine_plural_to_singular_restores_final_letter(self):
        assert "כפכף" in expand_token("כפכפים")

    def test_singular_to_masculine_plural_uses_medial_letter(self):
        assert "כפכפים" in expand_token("כפכף")
        assert "אדומים" in expand_token("אדום")

    def test_feminine_forms(self):
        assert "סירות" in expand_token("סירה")
        assert "סירה" in expand_token("סירות")

    def test_singular_ending_in_he_gets_no_masculine_plural(self):
        assert "סירהים" not in expand_token("סירה")

    def test_too_short_for_suffix_rules(self):
        assert expand_token("ים") == frozenset({"ים"})

    def test_known_irregular_forms(self):
        variants = expand_token("נעליים")
        assert {"נעל", "נעלי"} <= variants

    def test_whitespace_is_collapsed(self):
        variants = expand_token("  כפכף ")
        assert "כפכף" in variants
        assert "כפכפים" in variants

    def test_empty_token(self):
        assert expand_token("") == frozenset()


class TestSuffixRule:
    def test_min_length(self):
        rule = SuffixRule("strip", "ים", "", min_length=4, for_plural=True)
        assert rule.apply("דים") is None
        assert rule.apply("סלים") == "סל"

    def test_rules_are_split_by_number(self):
        assert any(rule.for_plural for rule in SUFFIX_RULES)
        assert any(not rule.for_plural for rule in SUFFIX_RULES)

    def test_is_plural(self):
        assert is_plural("כפכפים")
        assert is_plural("סירות")
        assert not is_plural("כפכף")


class TestExpandPhrase:
    def test_contains_phrase_itself(self):
        assert "נעלי ספורט" in expand_phrase("נעלי ספורט")

    def test_first_word_variants_keep_rest(self):
        variants = expand_phrase("נעלי ספורט")
        assert "נעל ספורט" in variants
        assert "נעליים ספורט" in variants

    def test_last_word_variants_keep_beginning(self):
        assert "נעלי סירות" in expand_phrase("נעלי סירה")

    def test_every_variant_is_a_full_phrase(self):
        for variant in expand_phrase("נעלי ספורט"):
            assert len(variant.split(" ")) == 2

    def test_latin_phrase(self):
        assert expand_phrase("Running  shoes") == frozenset({"Running shoes"})

    def test_blank_phrase(self):
        assert expand_phrase("   ") == frozenset()

"""Unit tests for output filename placeholder substitution."""

import warnings

import pytest

from docket_step.contexts.resolution.config_resolver import (
    PLACEHOLDER_PATTERN,
    PlaceholderWarning,
    process_suffix,
    substitute_placeholders,
)
from docket_step.contexts.resolution.defaults import KNOWN_TOKENS


@pytest.mark.unit
class TestProcessSuffix:
    def test_suffix_after_first_underscore(self):
        assert process_suffix("B_000123") == "000123"

    def test_only_first_underscore_splits(self):
        assert process_suffix("B_000_123") == "000_123"

    def test_no_underscore_falls_back_to_title_with_warning(self):
        with pytest.warns(PlaceholderWarning, match="B000123"):
            assert process_suffix("B000123") == "B000123"

    def test_trailing_underscore_gives_empty_suffix(self):
        assert process_suffix("B_") == ""


@pytest.mark.unit
class TestSubstitutePlaceholders:
    def test_process_token(self):
        assert substitute_placeholders("{process}.pdf", "Goethe_001") == "Goethe_001.pdf"

    def test_process_suffix_token(self):
        assert substitute_placeholders("EPN_{process_suffix}_0000.tif", "X_42") == "EPN_42_0000.tif"

    def test_suffix_without_underscore_uses_full_title(self):
        with pytest.warns(PlaceholderWarning):
            result = substitute_placeholders("{process_suffix}.pdf", "B000123")
        assert result == "B000123.pdf"

    def test_both_tokens_and_repeats(self):
        result = substitute_placeholders("{process}/{process_suffix}-{process_suffix}.pdf", "B_7")
        assert result == "B_7/7-7.pdf"

    @pytest.mark.parametrize(
        "pattern",
        [
            "{process}.pdf",
            "{process_suffix}.pdf",
            "{process}_{process_suffix}.tif",
            "docket_{process}{process}.tiff",
        ],
    )
    @pytest.mark.parametrize("title", ["B_000123", "Goethe_001", "X_42"])
    def test_no_known_token_survives(self, pattern, title):
        result = substitute_placeholders(pattern, title)
        assert "{process}" not in result
        assert "{process_suffix}" not in result

    def test_pattern_without_tokens_is_unchanged(self):
        assert substitute_placeholders("docket.pdf", "B_1") == "docket.pdf"

    def test_no_warning_when_suffix_not_used(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert substitute_placeholders("{process}.pdf", "B000123") == "B000123.pdf"

    def test_unknown_token_left_verbatim(self):
        """Unknown tokens pass through unexpanded; typos end up in the filename."""
        result = substitute_placeholders("{proces}_{process}_{shelfmark}.pdf", "B_1")
        assert result == "{proces}_B_1_{shelfmark}.pdf"

    def test_replacement_text_is_not_rescanned(self):
        # Single pass: a title containing a token is inserted literally and not expanded
        assert substitute_placeholders("{process}.pdf", "{process_suffix}") == "{process_suffix}.pdf"

    def test_every_known_token_is_substituted(self):
        assert sorted(PLACEHOLDER_PATTERN.findall("".join(KNOWN_TOKENS))) == sorted(KNOWN_TOKENS)
        result = substitute_placeholders("-".join(KNOWN_TOKENS), "B_1")
        assert not any(token in result for token in KNOWN_TOKENS)

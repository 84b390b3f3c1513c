"""Tests for escaping and unescaping of reserved markup characters."""

import pytest

from markup_builder.character import (
    ENTITY_NAMES,
    RESERVED_CHARACTERS,
    escape,
    needs_escaping,
    unescape,
)


class TestEscape:
    """Test escape() replacement of the five reserved characters."""

    @pytest.mark.parametrize(
        ("char", "entity"),
        [('"', "&quot;"), ("'", "&apos;"), ("&", "&amp;"), ("<", "&lt;"), (">", "&gt;")],
    )
    def test_each_reserved_character(self, char: str, entity: str) -> None:
        """Test every reserved character maps to its named entity."""
        assert escape(char) == entity

    def test_plain_text_unchanged(self) -> None:
        """Test text without reserved characters passes through."""
        assert escape("hello world 123") == "hello world 123"

    def test_mixed_text(self) -> None:
        """Test reserved characters are replaced in place within text."""
        assert escape('<a href="x">Tom & Jerry\'s</a>') == (
            "&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&apos;s&lt;/a&gt;"
        )

    def test_single_pass_does_not_double_escape(self) -> None:
        """Test produced entities are not escaped again within one call."""
        assert escape("&") == "&amp;"
        assert escape("&<") == "&amp;&lt;"

    def test_escaping_twice_escapes_ampersands(self) -> None:
        """Test a second call treats the first call's entities as text."""
        assert escape(escape("<")) == "&amp;lt;"

    def test_non_ascii_preserved(self) -> None:
        """Test non-ASCII characters are left alone."""
        assert escape("content内容<") == "content内容&lt;"

    def test_empty_string(self) -> None:
        """Test escaping the empty string."""
        assert escape("") == ""

    def test_non_string_raises_type_error(self) -> None:
        """Test non-string input is rejected."""
        with pytest.raises(TypeError, match="Expected str"):
            escape(42)  # type: ignore


class TestUnescape:
    """Test unescape() including its lossy fallback."""

    @pytest.mark.parametrize(
        ("entity", "char"),
        [("&quot;", '"'), ("&apos;", "'"), ("&amp;", "&"), ("&lt;", "<"), ("&gt;", ">")],
    )
    def test_each_known_entity(self, entity: str, char: str) -> None:
        """Test every known entity maps back to its character."""
        assert unescape(entity) == char

    def test_text_without_ampersand_unchanged(self) -> None:
        """Test text without entities passes through."""
        assert unescape("a < b; c") == "a < b; c"

    def test_unknown_entity_collapses_to_ampersand(self) -> None:
        """Test an unknown entity becomes a bare ampersand."""
        assert unescape("a&foo;b") == "a&b"

    def test_numeric_entity_is_unknown(self) -> None:
        """Test numeric references are not among the known names."""
        assert unescape("&#39;x") == "&x"

    def test_unterminated_entity_consumes_rest(self) -> None:
        """Test an ampersand without a following semicolon eats the remaining text."""
        assert unescape("a&b") == "a&"
        assert unescape("Tom & Jerry") == "Tom &"

    def test_empty_entity_name(self) -> None:
        """Test '&;' collapses to a bare ampersand."""
        assert unescape("x&;y") == "x&y"

    def test_consumes_only_up_to_first_semicolon(self) -> None:
        """Test the entity name ends at the first semicolon."""
        assert unescape("&lt;;&gt;") == "<;>"

    def test_adjacent_entities(self) -> None:
        """Test consecutive entities are all decoded."""
        assert unescape("&lt;&amp;&gt;") == "<&>"

    def test_non_string_raises_type_error(self) -> None:
        """Test non-string input is rejected."""
        with pytest.raises(TypeError):
            unescape(None)  # type: ignore


class TestRoundTrip:
    """Test escape/unescape symmetry."""

    @pytest.mark.parametrize(
        "text",
        ["", "plain", "a&b", "<div class=\"x\">it's</div>", "&amp;", "&&;;<<>>", "内容 & 'q'"],
    )
    def test_unescape_inverts_escape(self, text: str) -> None:
        """Test unescape(escape(x)) == x for arbitrary text."""
        assert unescape(escape(text)) == text

    def test_escape_is_injective_on_reserved_sequences(self) -> None:
        """Test distinct reserved-character strings escape to distinct results."""
        samples = ["&", "<", ">", '"', "'", "&<", "<&", "&&", "><"]
        assert len({escape(sample) for sample in samples}) == len(samples)


class TestHelpers:
    """Test module constants and helper functions."""

    def test_entity_names_cover_reserved_characters(self) -> None:
        """Test the constant tables agree."""
        assert set(ENTITY_NAMES) == RESERVED_CHARACTERS
        assert len(RESERVED_CHARACTERS) == 5

    def test_needs_escaping(self) -> None:
        """Test detection of reserved characters."""
        assert needs_escaping("a<b")
        assert needs_escaping("it's")
        assert not needs_escaping("plain text")
        assert not needs_escaping("")

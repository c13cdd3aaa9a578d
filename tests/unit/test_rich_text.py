"""Unit tests for the rich-text markup grammar."""

import pytest

from resumecloner.contexts.templating.rich_text import (
    LineKind,
    Run,
    classify_line,
    decode,
    insert_format,
    plain_text,
    split_inline,
)


@pytest.mark.unit
def test_split_inline_bold_and_italic():
    """Test that bold and italic spans split into runs in source order."""
    runs = split_inline("**Led** team of _5_")

    assert runs == [
        Run("Led", bold=True),
        Run(" team of "),
        Run("5", italic=True),
    ]


@pytest.mark.unit
def test_split_inline_preserves_whitespace():
    """Test that text outside markers keeps every character."""
    runs = split_inline("  a  **b**  c  ")
    assert "".join(run.text for run in runs) == "  a  b  c  "


@pytest.mark.unit
def test_split_inline_non_greedy():
    """Test that two bold spans on one line stay separate."""
    runs = split_inline("**one** and **two**")
    assert [run.text for run in runs if run.bold] == ["one", "two"]


@pytest.mark.unit
def test_split_inline_unmatched_marker_is_plain():
    """Test that a lone marker is kept as plain text."""
    runs = split_inline("price ** 2")
    assert runs == [Run("price ** 2")]


@pytest.mark.unit
@pytest.mark.parametrize("line", ["• Shipped X", "- Shipped X", "* Shipped X", "[ ] Shipped X", "[x] Shipped X"])
def test_bullet_markers(line):
    """Test every bullet marker form strips to the same content."""
    decoded = classify_line(line)
    assert decoded.kind == LineKind.BULLET
    assert decoded.content == "Shipped X"


@pytest.mark.unit
@pytest.mark.parametrize("line, number", [("1. Launched Y", 1), ("12) Launched Y", 12)])
def test_ordered_markers(line, number):
    """Test ordered markers with dot and parenthesis."""
    decoded = classify_line(line)
    assert decoded.kind == LineKind.ORDERED
    assert decoded.number == number
    assert decoded.content == "Launched Y"
    assert decoded.marker == f"{number}."


@pytest.mark.unit
def test_marker_requires_whitespace():
    """Test that a marker glued to text is a plain line."""
    assert classify_line("-5 degrees").kind == LineKind.PLAIN
    assert classify_line("2020.5 release").kind == LineKind.PLAIN


@pytest.mark.unit
def test_marker_only_at_line_start():
    """Test that markers in the middle of a line are not list markers."""
    decoded = classify_line("Built a - thing")
    assert decoded.kind == LineKind.PLAIN


@pytest.mark.unit
def test_decode_jane_doe_description():
    """Test the description of a worked experience item decodes into runs and list lines."""
    lines = decode("**Led** team of _5_\n• Shipped X\n1. Launched Y")

    assert len(lines) == 3

    first = lines[0]
    assert first.kind == LineKind.PLAIN
    assert first.runs == (Run("Led", bold=True), Run(" team of "), Run("5", italic=True))

    assert lines[1].kind == LineKind.BULLET
    assert "Shipped X" in lines[1].content

    assert lines[2].kind == LineKind.ORDERED
    assert lines[2].marker == "1."
    assert "Launched Y" in lines[2].content


@pytest.mark.unit
def test_decode_is_idempotent():
    """Test that decoding the same source twice gives equal structures."""
    text = "Intro _line_\n- item **one**\n\n3) third"
    assert decode(text) == decode(text)


@pytest.mark.unit
def test_decode_keeps_line_boundaries():
    """Test that empty lines survive decoding."""
    lines = decode("a\n\nb")
    assert [line.content for line in lines] == ["a", "", "b"]


@pytest.mark.unit
def test_decode_empty_text():
    """Test that empty text has no lines."""
    assert decode("") == []


@pytest.mark.unit
def test_plain_text_strips_markup():
    """Test plain-text rendering of markup."""
    assert plain_text("**Led** team\n- Shipped X\n2. Y") == "Led team\n• Shipped X\n2. Y"


@pytest.mark.unit
def test_insert_bold_wraps_selection():
    """Test bold insertion around a selection puts the cursor after the closing marker."""
    edit = insert_format("hello world", 6, 11, "bold")

    assert edit.text == "hello **world**"
    assert edit.cursor == len("hello **world**")


@pytest.mark.unit
def test_insert_italic_placeholder_for_empty_selection():
    """Test italic insertion at a bare cursor uses the placeholder."""
    edit = insert_format("ab", 1, 1, "italic")

    assert edit.text == "a_italic text_b"
    assert edit.cursor == 1 + len("_italic text_")


@pytest.mark.unit
def test_insert_bullet_at_line_start():
    """Test bullet insertion goes to the start of the line holding the cursor."""
    text = "first\nsecond"
    edit = insert_format(text, 9, 9, "bullet")

    assert edit.text == "first\n• second"
    assert edit.cursor == 11


@pytest.mark.unit
def test_insert_ordered_continues_previous_number():
    """Test ordered insertion numbers from the previous line."""
    text = "1. first\n2. second\nthird"
    edit = insert_format(text, len(text), len(text), "ordered")

    assert edit.text == "1. first\n2. second\n3. third"


@pytest.mark.unit
def test_insert_ordered_defaults_to_one():
    """Test ordered insertion without a numbered line above starts at 1."""
    assert insert_format("plain\nnext", 7, 7, "ordered").text == "plain\n1. next"
    assert insert_format("", 0, 0, "ordered").text == "1. "


@pytest.mark.unit
def test_insert_ordered_single_lookback():
    """Test that only the nearest non-blank line above is consulted."""
    text = "1. first\nplain\nlast"
    edit = insert_format(text, len(text), len(text), "ordered")
    assert edit.text.endswith("\n1. last")


@pytest.mark.unit
def test_insert_ordered_skips_blank_lines():
    """Test that blank lines above the cursor do not reset numbering."""
    edit = insert_format("1. first\n\n", 10, 10, "ordered")

    assert edit.text == "1. first\n\n2. "
    assert edit.cursor == 13
    assert insert_format("2) a\n  \n\nb", 10, 10, "ordered").text == "2) a\n  \n\n3. b"


@pytest.mark.unit
def test_insert_unknown_operation():
    """Test that unknown operations raise ValueError."""
    with pytest.raises(ValueError):
        insert_format("x", 0, 0, "underline")

# tests/test_reference_parser.py
"""
Tests for reference_parser.py - citation parsing against a chapter index.
"""

import logging

import pytest

from mybible.services.references import (
    ParseErrorKind,
    ParseState,
    Range,
    RangeWithCount,
    Reference,
    ReferenceParseError,
)

JOHN, JUDE, FIRST_JOHN = 500, 720, 690
GENESIS, MATTHEW, MARK = 10, 470, 480


def ref(book, chapter, verse):
    return Reference(book, chapter, verse)


def spans(ranges):
    return [
        ((r.start.book, r.start.chapter, r.start.verse), (r.end.book, r.end.chapter, r.end.verse))
        for r in ranges
    ]


# =============================================================================
# Data model
# =============================================================================

def test_reference_ordering_ignores_book_name():
    assert Reference(500, 3, 16, "Jn") == Reference(500, 3, 16, "John")
    assert Reference(500, 3, 16) < Reference(500, 3, 17) < Reference(500, 4, 1) < Reference(510, 1, 1)


def test_reference_rejects_zero_chapter_or_verse():
    with pytest.raises(ValueError):
        Reference(500, 0, 1)
    with pytest.raises(ValueError):
        Reference(500, 1, 0)


def test_range_rejects_start_after_end():
    with pytest.raises(ValueError):
        Range(ref(500, 3, 18), ref(500, 3, 16))
    with pytest.raises(ValueError):
        RangeWithCount(ref(510, 1, 1), ref(500, 3, 16), verse_count=1, start_offset=1)

    assert Range(ref(500, 3, 16), ref(500, 3, 16)).is_single_book


# =============================================================================
# Single ranges
# =============================================================================

def test_single_chapter_verse_range(parser):
    ranges = parser.parse("John 3:16-18")

    assert len(ranges) == 1
    assert ranges[0].start == ref(JOHN, 3, 16)
    assert ranges[0].end == ref(JOHN, 3, 18)
    assert ranges[0].verse_count == 3
    # John 1 (4) + John 2 (2) + 16
    assert ranges[0].start_offset == 22


def test_single_verse(parser):
    ranges = parser.parse("John 3:16")

    assert spans(ranges) == [((JOHN, 3, 16), (JOHN, 3, 16))]
    assert ranges[0].verse_count == 1
    assert ranges[0].start.book_name == "John"


def test_whole_chapter(parser):
    ranges = parser.parse("John 3")

    assert spans(ranges) == [((JOHN, 3, 1), (JOHN, 3, 36))]
    assert ranges[0].verse_count == 36
    assert ranges[0].start_offset == 7


def test_whole_book_single_chapter(parser):
    ranges = parser.parse("Jude")

    assert spans(ranges) == [((JUDE, 1, 1), (JUDE, 1, 25))]
    assert ranges[0].verse_count == 25
    assert ranges[0].start_offset == 1


def test_numbered_book_name_alone_is_first_chapter(parser):
    # The digit in "1 John" keeps it from being read as the whole book
    ranges = parser.parse("1 John")

    assert spans(ranges) == [((FIRST_JOHN, 1, 1), (FIRST_JOHN, 1, 10))]
    assert ranges[0].verse_count == 10


def test_name_without_digits_is_whole_book(parser):
    ranges = parser.parse("I John")

    assert spans(ranges) == [((FIRST_JOHN, 1, 1), (FIRST_JOHN, 2, 5))]
    assert ranges[0].verse_count == 15


def test_longest_book_name_wins(parser):
    # "1 John 2:3" must not resolve as book "1" or "John"
    ranges = parser.parse("1 John 2:3")
    assert spans(ranges) == [((FIRST_JOHN, 2, 3), (FIRST_JOHN, 2, 3))]


def test_names_are_case_insensitive(parser):
    assert parser.parse("jOhN 3:16") == parser.parse("John 3:16")
    assert parser.parse("JN 3:16") == parser.parse("John 3:16")


def test_chapter_range_end_raised_to_last_verse(parser):
    ranges = parser.parse("Gen 1-2")

    assert spans(ranges) == [((GENESIS, 1, 1), (GENESIS, 2, 3))]
    assert ranges[0].verse_count == 8


def test_verse_to_verse_in_next_chapter(parser):
    ranges = parser.parse("John 2:2 - 3:5")
    assert spans(ranges) == [((JOHN, 2, 2), (JOHN, 3, 5))]
    assert ranges[0].verse_count == 1 + 5


def test_bare_end_after_verse_is_a_verse(parser):
    # "1:4-2" reads as verses 4 to 2 of chapter 1, which is reversed
    assert parser.parse_result("Gen 1:4-2").error.kind == ParseErrorKind.INVERTED_RANGE


def test_cross_book_range(parser):
    ranges = parser.parse("Matt 28:18 - Mark 1:5")

    assert spans(ranges) == [((MATTHEW, 28, 18), (MARK, 1, 5))]
    # Matthew 28:18-20 (3) + Mark 1:1-5 (5)
    assert ranges[0].verse_count == 8
    # Matthew 1 (3) + 18
    assert ranges[0].start_offset == 21


def test_cross_chapter_count_includes_middle_chapters(parser):
    ranges = parser.parse("John 1:3 - 3:2")
    # John 1:3-4 (2) + John 2 (2) + John 3:1-2 (2)
    assert ranges[0].verse_count == 6


def test_dash_variants_are_accepted(parser):
    expected = parser.parse("John 3:16-18")
    assert parser.parse("John 3:16–18") == expected
    assert parser.parse("John 3:16—18") == expected
    assert parser.parse("John 3:16 - 18") == expected


def test_empty_end_is_ignored(parser):
    assert spans(parser.parse("John 3:16-")) == [((JOHN, 3, 16), (JOHN, 3, 16))]


def test_text_after_second_dash_is_ignored(parser):
    assert parser.parse("John 3:16-17-18") == parser.parse("John 3:16-17")
    assert spans(parser.parse("Jude 1:2-4-")) == [((JUDE, 1, 2), (JUDE, 1, 4))]


def test_empty_citation_gives_no_ranges(parser):
    result = parser.parse_result("  ")
    assert result.ok
    assert result.ranges == []
    assert parser.parse(", ;") == []


# =============================================================================
# Carried state across parts
# =============================================================================

def test_bare_number_after_verse_continues_as_verse(parser):
    ranges = parser.parse("John 3:16,18")

    assert spans(ranges) == [
        ((JOHN, 3, 16), (JOHN, 3, 16)),
        ((JOHN, 3, 18), (JOHN, 3, 18)),
    ]


def test_semicolon_separates_parts_too(parser):
    assert parser.parse("John 3:16; 18") == parser.parse("John 3:16, 18")


def test_bare_number_after_chapter_is_chapter(parser):
    ranges = parser.parse("John 3, 2")

    assert spans(ranges) == [
        ((JOHN, 3, 1), (JOHN, 3, 36)),
        ((JOHN, 2, 1), (JOHN, 2, 2)),
    ]


def test_carried_book_with_chapter_and_verse(parser):
    ranges = parser.parse("John 3:16, 1:2-3")
    assert spans(ranges) == [
        ((JOHN, 3, 16), (JOHN, 3, 16)),
        ((JOHN, 1, 2), (JOHN, 1, 3)),
    ]


def test_new_book_resets_verse_continuation(parser):
    ranges = parser.parse("John 3:16, Jude 1")
    # After an explicit book, a bare number is a chapter
    assert spans(ranges)[1] == ((JUDE, 1, 1), (JUDE, 1, 25))


def test_continuation_verse_is_not_range_checked(parser):
    ranges = parser.parse("Jude 1:5, 30")
    assert spans(ranges)[1] == ((JUDE, 1, 30), (JUDE, 1, 30))


def test_continuation_past_chapter_end_counts_from_next_chapter(parser):
    # John 2 has 2 verses, so 2:5 contributes nothing and only 3:1 counts
    ranges = parser.parse("John 2:1, 5-3:1")

    assert spans(ranges)[1] == ((JOHN, 2, 5), (JOHN, 3, 1))
    assert ranges[1].verse_count == 1


def test_state_does_not_leak_between_calls(parser):
    parser.parse("John 3:16")
    result = parser.parse_result("18")
    assert result.error.kind == ParseErrorKind.UNRESOLVED_BOOK


def test_parse_sub_part_threads_state(parser):
    start = ParseState()

    reference, state = parser.parse_sub_part("John 3:16", start)
    assert reference == ref(JOHN, 3, 16)
    assert state == ParseState(book=JOHN, book_token="John", chapter=3, was_verse=True)
    assert start == ParseState()

    reference, after_verse = parser.parse_sub_part("18", state)
    assert reference == ref(JOHN, 3, 18)
    assert after_verse == state

    reference, after_chapter = parser.parse_sub_part("2", ParseState(JOHN, "John", 3, False))
    assert reference == ref(JOHN, 2, 1)
    assert after_chapter.chapter == 2
    assert not after_chapter.was_verse


def test_parse_sub_part_bare_book(parser):
    reference, state = parser.parse_sub_part("Jude", ParseState())
    assert reference == ref(JUDE, 1, 1)
    assert state.chapter == 1
    assert state.was_verse is False


def test_parse_sub_part_raises_on_bad_token(parser):
    with pytest.raises(ReferenceParseError) as exc:
        parser.parse_sub_part("John 3:99", ParseState())
    assert exc.value.kind == ParseErrorKind.OUT_OF_RANGE
    assert exc.value.token == "3:99"


# =============================================================================
# Errors: all or nothing
# =============================================================================

def test_missing_chapter_fails(parser):
    result = parser.parse_result("John 99:1")

    assert not result.ok
    assert result.ranges == []
    assert result.error.kind == ParseErrorKind.OUT_OF_RANGE
    assert result.error.token == "99:1"


def test_one_bad_part_fails_whole_citation(parser):
    assert parser.parse("John 3:16, 99:1") == []

    error = parser.parse_result("John 3:16, 99:1").error
    assert error.position == 2
    assert error.part == "99:1"


def test_reversed_range_fails(parser):
    result = parser.parse_result("John 3:18-3:16")

    assert result.ranges == []
    assert result.error.kind == ParseErrorKind.INVERTED_RANGE
    assert parser.parse("John 3:18-16") == []


def test_verse_past_end_of_chapter_fails(parser):
    assert parser.parse_result("John 3:37").error.kind == ParseErrorKind.OUT_OF_RANGE
    assert parser.parse_result("John 3:0").error.kind == ParseErrorKind.OUT_OF_RANGE


def test_zero_continuation_verse_fails(parser):
    assert parser.parse_result("John 3:16, 0").error.kind == ParseErrorKind.OUT_OF_RANGE


def test_unknown_book_fails(parser):
    error = parser.parse_result("Xyz 1:1").error
    assert error.kind == ParseErrorKind.UNRESOLVED_BOOK
    assert error.token == "Xyz"

    assert parser.parse_result("3:16").error.kind == ParseErrorKind.UNRESOLVED_BOOK


def test_partial_names_do_not_match(parser):
    assert parser.parse_result("Joh 3:16").ok
    assert parser.parse_result("Jo 3:16").error.kind == ParseErrorKind.UNRESOLVED_BOOK


def test_book_missing_from_module_fails(parser):
    error = parser.parse_result("Luke 1:1").error
    assert error.kind == ParseErrorKind.BOOK_NOT_IN_MODULE
    assert error.token == "Luke"


def test_malformed_tokens_fail(parser):
    assert parser.parse_result("John 3:x").error.kind == ParseErrorKind.MALFORMED
    assert parser.parse_result("John 3:16:2").error.kind == ParseErrorKind.MALFORMED
    assert parser.parse_result("John three").error.kind == ParseErrorKind.MALFORMED
    assert parser.parse_result("John 3 16").error.kind == ParseErrorKind.MALFORMED


def test_failure_is_logged_with_token(parser, caplog):
    with caplog.at_level(logging.WARNING):
        parser.parse("John 99:1")
    assert "99" in caplog.text
    assert "John 99:1" in caplog.text


def test_error_serializes(parser):
    data = parser.parse_result("John 3:18-16").to_dict()
    assert data["ranges"] == []
    assert data["error"]["kind"] == "inverted_range"
    assert data["error"]["position"] == 1


# =============================================================================
# Properties
# =============================================================================

CITATIONS = [
    "John 3:16-18",
    "John 3:16, 18",
    "John 3, 2",
    "Jude",
    "1 John",
    "Matt 28:18 - Mark 1:5",
    "Gen 1 - Exodus",
    "John 1:3 - 3:2; Jude 1:4-6",
]


@pytest.mark.parametrize("citation", CITATIONS)
def test_parse_is_idempotent(parser, citation):
    first = parser.parse(citation)
    assert first
    assert parser.parse(citation) == first


@pytest.mark.parametrize("citation", CITATIONS)
def test_ranges_are_ordered_and_counted(parser, citation):
    for r in parser.parse(citation):
        assert r.start <= r.end
        assert r.verse_count >= 1
        assert r.start_offset >= r.start.verse
        if (r.start.book, r.start.chapter) == (r.end.book, r.end.chapter):
            assert r.verse_count == r.end.verse - r.start.verse + 1

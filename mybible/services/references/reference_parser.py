# mybible/services/references/reference_parser.py
"""
Scripture citation parser.

Turns a citation typed by a person into exact verse ranges for one module:

- "John 3:16"                 single verse
- "John 3:16-18"              verse range
- "John 3:16, 18"             verse 18 continues chapter 3
- "John 3, 5"                 chapters 3 and 5
- "Romans 8"                  whole chapter
- "Jude"                      whole book
- "Matt 28:18 - Mark 1:5"     range across books

Every book, chapter and verse is checked against the module's chapter index.
A citation is one intent: if any part of it fails, the whole parse fails and
no ranges are returned.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple

from mybible.services.cache.verse_index_cache import ChapterIndex, composite_key
from .book_mapper import BookMapper

logger = logging.getLogger(__name__)

PART_SEPARATORS = re.compile(r"[,;]")
DASHES = re.compile(r"[‒–—−]")
NUMBER = re.compile(r"\d+", re.ASCII)


@dataclass(frozen=True, order=True)
class Reference:
    """
    One verse position.

    Attributes:
        book: Canonical book number
        chapter: Chapter number (>= 1)
        verse: Verse number (>= 1)
        book_name: Book token as typed, for messages and display only.
            Not part of equality or ordering.
    """
    book: int
    chapter: int
    verse: int
    book_name: str = field(default="", compare=False)

    def __post_init__(self):
        if self.chapter < 1 or self.verse < 1:
            raise ValueError(f"Chapter and verse must be >= 1, got {self.chapter}:{self.verse}")

    def __str__(self) -> str:
        return f"{self.book_name or self.book} {self.chapter}:{self.verse}"

    def to_dict(self) -> dict:
        return {
            "book": self.book,
            "chapter": self.chapter,
            "verse": self.verse,
            "book_name": self.book_name,
        }


@dataclass(frozen=True)
class Range:
    """Inclusive span of verses. start <= end always holds."""
    start: Reference
    end: Reference

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Range start {self.start} is after end {self.end}")

    @property
    def is_single_book(self) -> bool:
        return self.start.book == self.end.book


@dataclass(frozen=True)
class RangeWithCount(Range):
    """
    A Range with its derived counts.

    Attributes:
        verse_count: Verses spanned, inclusive
        start_offset: 1-based position of start within its book, counted
            from chapter 1 verse 1
    """
    verse_count: int = 0
    start_offset: int = 0

    def to_dict(self) -> dict:
        return {
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "verse_count": self.verse_count,
            "start_offset": self.start_offset,
        }


class ParseErrorKind(Enum):
    UNRESOLVED_BOOK = "unresolved_book"
    BOOK_NOT_IN_MODULE = "book_not_in_module"
    OUT_OF_RANGE = "out_of_range"
    MALFORMED = "malformed"
    INVERTED_RANGE = "inverted_range"


@dataclass(frozen=True)
class ParseError:
    """
    Why a citation was rejected.

    Attributes:
        kind: Error category
        token: Offending token
        message: Human-readable explanation
        part: The comma/semicolon separated part the token came from
        position: 1-based index of that part in the citation
    """
    kind: ParseErrorKind
    token: str
    message: str
    part: str = ""
    position: int = 0

    def __str__(self) -> str:
        if self.position:
            return f"{self.message} (part {self.position}: '{self.part}')"
        return self.message

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "token": self.token,
            "message": self.message,
            "part": self.part,
            "position": self.position,
        }


class ReferenceParseError(ValueError):
    """Raised when a component of a citation is invalid."""

    def __init__(self, kind: ParseErrorKind, token: str, message: str, part: str = "", position: int = 0):
        super().__init__(message)
        self.kind = kind
        self.token = token
        self.message = message
        self.part = part
        self.position = position

    @classmethod
    def from_error(cls, error: ParseError) -> "ReferenceParseError":
        return cls(error.kind, error.token, error.message, error.part, error.position)

    def to_error(self, part: Optional[str] = None, position: Optional[int] = None) -> ParseError:
        return ParseError(
            self.kind,
            self.token,
            self.message,
            self.part if part is None else part,
            self.position if position is None else position,
        )


@dataclass
class ParseResult:
    """Outcome of parsing one citation: all ranges, or none and an error."""
    ranges: List[RangeWithCount] = field(default_factory=list)
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "ranges": [r.to_dict() for r in self.ranges],
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass(frozen=True)
class ParseState:
    """
    What earlier parts of a citation established.

    Carried from part to part within one parse call so that "3:16, 18"
    reads 18 as a verse and "3, 5" reads 5 as a chapter.
    """
    book: Optional[int] = None
    book_token: Optional[str] = None
    chapter: Optional[int] = None
    was_verse: bool = False


class ReferenceParser:
    """
    Parses citations against one name set and one module's chapter index.

    Usage:
        parser = ReferenceParser(book_mapper, chapter_index)

        ranges = parser.parse("John 3:16-18")
        ranges[0].verse_count        # 3

        result = parser.parse_result("John 99:1")
        result.error.kind            # ParseErrorKind.OUT_OF_RANGE
    """

    def __init__(self, book_mapper: BookMapper, chapter_index: ChapterIndex):
        self.book_mapper = book_mapper
        self.index = chapter_index

    def parse(self, raw: str) -> List[RangeWithCount]:
        """
        Parse a citation into ranges.

        Returns:
            Ranges in citation order, or [] if any part is invalid
        """
        return self.parse_result(raw).ranges

    def parse_result(self, raw: str) -> ParseResult:
        """Parse a citation, keeping the error when it fails."""
        if not raw or not raw.strip():
            return ParseResult()

        text = DASHES.sub("-", raw)
        parts = [p.strip() for p in PART_SEPARATORS.split(text) if p.strip()]

        state = ParseState()
        ranges = []
        for position, part in enumerate(parts, start=1):
            try:
                range_, state = self._parse_part(part, state)
            except ReferenceParseError as e:
                error = e.to_error(part, position)
                logger.warning(f"Cannot parse reference '{raw}': {error}")
                return ParseResult(error=error)
            ranges.append(self._with_counts(range_))
        return ParseResult(ranges)

    def _parse_part(self, part: str, state: ParseState) -> Tuple[Range, ParseState]:
        # Anything after a second dash is ignored
        pieces = part.split("-")
        start_token = pieces[0]
        end_token = pieces[1] if len(pieces) > 1 else ""
        # Only a start with no digits at all is a whole book: "Jude" but not "1 John"
        bare_book = not NUMBER.search(start_token)

        start, state = self.parse_sub_part(start_token, state)
        start_is_verse = state.was_verse

        if end_token.strip():
            end, state = self.parse_sub_part(end_token, state)
            if not state.was_verse:
                last_verse = self.index.verse_count(end.book, end.chapter) or 1
                end = replace(end, verse=last_verse)
        elif bare_book:
            chapter, verse = self.index.last_chapter_and_verse(start.book)
            end = Reference(start.book, chapter, verse, start.book_name)
        elif not start_is_verse:
            last_verse = self.index.verse_count(start.book, start.chapter) or 1
            end = replace(start, verse=last_verse)
        else:
            end = start

        if start > end:
            raise ReferenceParseError(
                ParseErrorKind.INVERTED_RANGE,
                part,
                f"Range start '{start}' is after its end '{end}'",
            )
        return Range(start, end), state

    def parse_sub_part(self, token: str, state: ParseState) -> Tuple[Reference, ParseState]:
        """
        Parse one side of a range.

        Args:
            token: e.g. "John 3:16", "3:16", "18", "Jude"
            state: What earlier parts established

        Returns:
            (reference, new state). The input state is not modified.
            A side with no chapter starts at chapter 1 verse 1.

        Raises:
            ReferenceParseError: book, chapter or verse invalid for this module
        """
        tokens = token.split()
        if not tokens:
            raise ReferenceParseError(ParseErrorKind.MALFORMED, token, "Empty reference component")

        # Longest run of leading tokens that names a book wins, so that
        # multi-word names beat a shorter alias inside them
        book = None
        book_tokens = 0
        for count in range(len(tokens), 0, -1):
            name = " ".join(tokens[:count])
            book = self.book_mapper.resolve(name)
            if book is not None:
                book_tokens = count
                state = replace(state, book=book.id, book_token=name)
                break
        book_found = book is not None

        if state.book is None:
            raise ReferenceParseError(
                ParseErrorKind.UNRESOLVED_BOOK, tokens[0], f"Book not found: '{tokens[0]}'"
            )
        if not self.index.exists_in_module(state.book):
            book_token = state.book_token if book_found else tokens[0]
            raise ReferenceParseError(
                ParseErrorKind.BOOK_NOT_IN_MODULE,
                book_token,
                f"Book '{book_token}' is not in this module",
            )

        book_id, book_name = state.book, state.book_token or ""
        remaining = tokens[book_tokens:]

        if len(remaining) > 1:
            extra = " ".join(remaining)
            raise ReferenceParseError(ParseErrorKind.MALFORMED, extra, f"Unexpected tokens: '{extra}'")

        if not remaining:
            state = replace(state, chapter=1, was_verse=False)
            return Reference(book_id, 1, 1, book_name), state

        value = remaining[0]
        if ":" in value:
            chapter_text, _, verse_text = value.partition(":")
            chapter = self._number(chapter_text, value)
            verse = self._number(verse_text, value)
            verses_in_chapter = self._require_chapter(book_id, chapter, book_name, value)
            if not 1 <= verse <= verses_in_chapter:
                raise ReferenceParseError(
                    ParseErrorKind.OUT_OF_RANGE,
                    value,
                    f"Verse {verse} not found in {book_name} {chapter} "
                    f"(chapter has {verses_in_chapter} verses)",
                )
            state = replace(state, chapter=chapter, was_verse=True)
            return Reference(book_id, chapter, verse, book_name), state

        number = self._number(value, value)
        if state.was_verse and not book_found:
            # A bare number after a verse continues in the same chapter
            if number < 1:
                raise ReferenceParseError(
                    ParseErrorKind.OUT_OF_RANGE, value, f"Verse {number} not found in {book_name}"
                )
            return Reference(book_id, state.chapter, number, book_name), state

        self._require_chapter(book_id, number, book_name, value)
        state = replace(state, chapter=number, was_verse=False)
        return Reference(book_id, number, 1, book_name), state

    def _require_chapter(self, book: int, chapter: int, book_name: str, token: str) -> int:
        verses = self.index.verse_count(book, chapter)
        if verses is None:
            raise ReferenceParseError(
                ParseErrorKind.OUT_OF_RANGE, token, f"Chapter {chapter} not found in {book_name}"
            )
        return verses

    @staticmethod
    def _number(text: str, token: str) -> int:
        if not NUMBER.fullmatch(text):
            raise ReferenceParseError(ParseErrorKind.MALFORMED, token, f"Invalid reference format: '{token}'")
        return int(text)

    # ------------------------------------------------------------------
    # Counting
    # ------------------------------------------------------------------

    def _with_counts(self, range_: Range) -> RangeWithCount:
        return RangeWithCount(
            range_.start,
            range_.end,
            verse_count=self.count_verses(range_),
            start_offset=self.book_start_offset(range_.start),
        )

    def count_verses(self, range_: Range) -> int:
        """
        Verses spanned by a range, inclusive, using the chapter index.

        A start verse past the end of its chapter (a continuation such as
        "John 2:1, 5-3:1") contributes nothing from that chapter.
        """
        start, end = range_.start, range_.end
        start_key = composite_key(start.book, start.chapter)
        end_key = composite_key(end.book, end.chapter)
        if start_key == end_key:
            return end.verse - start.verse + 1

        total = 0
        for key in self.index.keys_between(start_key, end_key):
            if key == start_key:
                total += max(self.index.get(key) - start.verse + 1, 0)
            elif key == end_key:
                total += end.verse
            else:
                total += self.index.get(key)
        return total

    def book_start_offset(self, reference: Reference) -> int:
        """1-based position of a verse within its book."""
        offset = sum(
            self.index.verse_count(reference.book, chapter) or 0
            for chapter in range(1, reference.chapter)
        )
        return offset + reference.verse

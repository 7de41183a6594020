# mybible/services/references/verse_fetcher.py
"""
Fetch verse rows for parsed ranges.

A range inside one book is a single bounded query. A range that crosses
books is split into three parts so each query stays inside one book:

    Matt 28:18 - Mark 1:5
      -> Matthew 28:18 .. end of Matthew
      -> every book strictly between (none here)
      -> Mark 1:1 .. Mark 1:5

Books in the middle are found by stepping through book numbers by the
module's numbering stride (10 for MyBible), or by reading the chapter index
when one is supplied.
"""

import logging
from typing import Iterable, List, Optional

from mybible.core import config
from mybible.services.cache.verse_index_cache import ChapterIndex
from .module_store import ModuleStore, VerseRow
from .reference_parser import Range

logger = logging.getLogger(__name__)


class VerseFetcher:
    """
    Turns ranges into verse rows.

    Usage:
        fetcher = VerseFetcher(ModuleStore(path))
        rows = fetcher.fetch(parser.parse("John 3:16-18"))

        # Enumerate middle books from the module instead of by stride
        fetcher = VerseFetcher(store, chapter_index=index)
    """

    def __init__(
        self,
        store: ModuleStore,
        stride: Optional[int] = None,
        chapter_index: Optional[ChapterIndex] = None,
    ):
        self.store = store
        self.stride = config.BOOK_STRIDE if stride is None else stride
        if self.stride < 1:
            raise ValueError(f"Book stride must be positive, got {self.stride}")
        self.chapter_index = chapter_index

    def fetch(self, ranges: Iterable[Range]) -> List[VerseRow]:
        """
        Get the verses of each range, in range order.

        Within a range rows are ascending by (book, chapter, verse).
        """
        rows = []
        for range_ in ranges:
            rows.extend(self.fetch_range(range_))
        return rows

    def fetch_range(self, range_: Range) -> List[VerseRow]:
        start, end = range_.start, range_.end

        if start.book == end.book:
            return self.store.query_verse_range(
                start.book, start.chapter, start.verse, end.chapter, end.verse
            )

        rows = self.store.query_verse_range(start.book, start.chapter, start.verse)
        for book in self.middle_books(start.book, end.book):
            rows.extend(self.store.query_verse_range(book))
        rows.extend(self.store.query_verse_range(end.book, None, None, end.chapter, end.verse))

        logger.debug(
            f"Fetched {len(rows)} verses across books {start.book}..{end.book}"
        )
        return rows

    def middle_books(self, first_book: int, last_book: int) -> List[int]:
        """Book numbers strictly between two books."""
        if self.chapter_index is not None:
            return [b for b in self.chapter_index.books() if first_book < b < last_book]
        return list(range(first_book + self.stride, last_book, self.stride))

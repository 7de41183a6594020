# tests/conftest.py
"""
Shared fixtures: a small MyBible module on disk and the objects built on it.

The test module holds a handful of books with known verse counts:

    Genesis 1 (5), 2 (3)       Exodus 1 (4)      Leviticus 1 (2)
    Matthew 1 (3), 28 (20)     Mark 1 (6)
    John 1 (4), 2 (2), 3 (36)  1 John 1 (10), 2 (5)   Jude 1 (25)

Luke and Romans are deliberately absent.
"""

import sqlite3
from pathlib import Path

import pytest

from mybible.core import config
from mybible.services.cache.verse_index_cache import ChapterIndex
from mybible.services.references import (
    BookMapper,
    ReferenceParser,
    ReferenceService,
    ReferenceStorage,
)
from mybible.services.references.abbreviations import default_mapping_data

MODULE_NAME = "TST"

VERSE_COUNTS = {
    10: {1: 5, 2: 3},
    20: {1: 4},
    30: {1: 2},
    470: {1: 3, 28: 20},
    480: {1: 6},
    500: {1: 4, 2: 2, 3: 36},
    690: {1: 10, 2: 5},
    720: {1: 25},
}

# book number -> (short_name, long_name) as the module's books table has them
MODULE_BOOKS = {
    10: ("Gen", "Genesis"),
    20: ("Exo", "Exodus"),
    30: ("Lev", "Leviticus"),
    470: ("Mat", "Matthew"),
    480: ("Mrk", "Mark"),
    500: ("Jhn", "Gospel of John"),
    690: ("1Jn", "First John"),
    720: ("Jud", "Jude"),
}

JOHN_3_16 = "For God so loved the world, that he gave his only begotten Son"


def verse_text(book: int, chapter: int, verse: int) -> str:
    if (book, chapter, verse) == (500, 3, 16):
        return JOHN_3_16
    return f"Text {book} {chapter}:{verse}"


def coordinates(verse_counts=VERSE_COUNTS):
    """Every (book, chapter, verse) triple for a verse count table."""
    for book, chapters in verse_counts.items():
        for chapter, count in chapters.items():
            for verse in range(1, count + 1):
                yield book, chapter, verse


def write_module(
    path: Path,
    verse_counts=VERSE_COUNTS,
    books=MODULE_BOOKS,
    language: str = "en",
    description: str = "Test Bible",
    info_key_column: str = "name",
) -> Path:
    """Write a MyBible-shaped SQLite module."""
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    try:
        conn.execute("CREATE TABLE verses (book_number NUMERIC, chapter NUMERIC, verse NUMERIC, text TEXT)")
        conn.execute("CREATE TABLE books (book_color TEXT, book_number NUMERIC, short_name TEXT, long_name TEXT)")
        conn.execute(f"CREATE TABLE info ({info_key_column} TEXT, value TEXT)")

        # Stored out of order: readers must not depend on row order
        rows = sorted(coordinates(verse_counts), reverse=True)
        conn.executemany(
            "INSERT INTO verses VALUES (?, ?, ?, ?)",
            [(b, c, v, verse_text(b, c, v)) for b, c, v in rows],
        )
        conn.executemany(
            "INSERT INTO books VALUES ('#ffffff', ?, ?, ?)",
            [(number, short, long) for number, (short, long) in books.items()],
        )
        conn.executemany(
            "INSERT INTO info VALUES (?, ?)",
            [("language", language), ("description", description)],
        )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def modules_dir(tmp_path) -> Path:
    return tmp_path / "modules"


@pytest.fixture
def module_path(modules_dir) -> Path:
    return write_module(modules_dir / f"{MODULE_NAME}.SQLite3")


@pytest.fixture
def storage(tmp_path, module_path, modules_dir) -> ReferenceStorage:
    return ReferenceStorage(base_path=tmp_path / "config", modules_path=modules_dir)


@pytest.fixture
def chapter_index() -> ChapterIndex:
    return ChapterIndex.from_coordinates(coordinates())


@pytest.fixture
def book_mapper() -> BookMapper:
    return BookMapper.from_mapping_data(default_mapping_data())


@pytest.fixture
def parser(book_mapper, chapter_index) -> ReferenceParser:
    return ReferenceParser(book_mapper, chapter_index)


@pytest.fixture
def service(storage) -> ReferenceService:
    return ReferenceService(storage=storage)


@pytest.fixture
def default_module(monkeypatch):
    monkeypatch.setattr(config, "DEFAULT_MODULE", MODULE_NAME)
    return MODULE_NAME

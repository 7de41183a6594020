# mybible/services/references/module_store.py
"""
Read access to MyBible SQLite modules.

A MyBible Bible module is a single SQLite file with (at least) these tables:
    verses(book_number, chapter, verse, text)
    books(book_number, short_name, long_name, ...)
    info(name, value)

ModuleStore is the verse store the chapter index and the verse fetcher
read from. It never writes to the module.
"""

import logging
import sqlite3
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from mybible.core.exceptions import BibleModuleNotFoundError, ModuleReadError
from mybible.utils.db import get_module_db

logger = logging.getLogger(__name__)

# Filename fragments of MyBible files that are not Bible texts
EXCLUDED_SUBSTRINGS = (
    "commentaries",
    "cross-references",
    "crossreferences",
    "devotions",
    "dictionaries_lookup",
    "dictionaries-lookup",
    "dictionary",
    "plan",
    "referencedata",
    "subheadings",
)

MODULE_SUFFIX = ".sqlite3"

# Open bounds for query_verse_range
LOWEST = 0
HIGHEST = 9999


@dataclass(frozen=True)
class VerseRow:
    """A single verse row as stored in a module."""
    book: int
    chapter: int
    verse: int
    text: str

    def to_dict(self) -> dict:
        return {
            "book": self.book,
            "chapter": self.chapter,
            "verse": self.verse,
            "text": self.text,
        }


@dataclass(frozen=True)
class ModuleInfo:
    """Metadata for an installed module."""
    name: str
    language: str
    description: str
    path: Path

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "language": self.language,
            "description": self.description,
            "path": str(self.path),
        }


class ModuleStore:
    """
    Verse store backed by one MyBible module file.

    Usage:
        store = ModuleStore(Path("~/modules/KJV.SQLite3").expanduser())

        for book, chapter, verse in store.stream_all_verse_coordinates():
            ...

        rows = store.query_verse_range(500, 3, 16, 3, 18)
    """

    def __init__(self, module_path: Path):
        self.module_path = Path(module_path)
        if not self.module_path.is_file():
            raise BibleModuleNotFoundError(f"Module file not found: {self.module_path}")

    def _connect(self) -> sqlite3.Connection:
        return get_module_db(self.module_path)

    def stream_all_verse_coordinates(self) -> Iterator[tuple]:
        """
        Yield every (book, chapter, verse) triple in the module.

        Rows come back in storage order; callers must not rely on ordering.
        """
        try:
            with closing(self._connect()) as conn:
                cur = conn.execute("SELECT book_number, chapter, verse FROM verses")
                for row in cur:
                    yield row["book_number"], row["chapter"], row["verse"]
        except sqlite3.Error as e:
            logger.error(f"Failed to read verses from {self.module_path}: {e}")
            raise ModuleReadError(f"Cannot read verses from {self.module_path.name}: {e}") from e

    def query_verse_range(
        self,
        book: int,
        chapter_low: Optional[int] = None,
        verse_low: Optional[int] = None,
        chapter_high: Optional[int] = None,
        verse_high: Optional[int] = None,
    ) -> List[VerseRow]:
        """
        Return verses of one book between two (chapter, verse) points, inclusive.

        A None bound is open: the low point defaults to (0, 0) and the high
        point to (9999, 9999). The two boundary groups are kept separate so
        that the first and last chapters are cut at the verse level.
        """
        chapter_low = LOWEST if chapter_low is None else chapter_low
        verse_low = LOWEST if verse_low is None else verse_low
        chapter_high = HIGHEST if chapter_high is None else chapter_high
        verse_high = HIGHEST if verse_high is None else verse_high

        sql = (
            "SELECT book_number, chapter, verse, text FROM verses WHERE book_number = ? "
            "AND (chapter > ? OR (chapter = ? AND verse >= ?)) "
            "AND (chapter < ? OR (chapter = ? AND verse <= ?)) "
            "ORDER BY book_number, chapter, verse"
        )
        params = (
            book,
            chapter_low, chapter_low, verse_low,
            chapter_high, chapter_high, verse_high,
        )
        try:
            with closing(self._connect()) as conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Verse query failed for book {book} in {self.module_path}: {e}")
            raise ModuleReadError(f"Cannot query {self.module_path.name}: {e}") from e

        return [
            VerseRow(row["book_number"], row["chapter"], row["verse"], row["text"] or "")
            for row in rows
        ]

    def read_book_names(self) -> Dict[str, List[str]]:
        """
        Read the module's own book names.

        Returns:
            {"10": ["Genesis", "Gen"], ...} keyed by book number as a string,
            each value [long_name, short_name].
        """
        try:
            with closing(self._connect()) as conn:
                rows = conn.execute(
                    "SELECT book_number, long_name, short_name FROM books"
                ).fetchall()
        except sqlite3.Error as e:
            raise ModuleReadError(f"Cannot read books from {self.module_path.name}: {e}") from e

        names = {}
        for row in rows:
            entry = [n for n in (row["long_name"], row["short_name"]) if n]
            if entry:
                names[str(row["book_number"])] = entry
        return names

    def info_field(self, field_name: str) -> Optional[str]:
        """
        Get a single value from the module's info table.

        Modules disagree on the key column name, so both 'name' and 'key'
        are tried.
        """
        with closing(self._connect()) as conn:
            for key_column in ("name", "key"):
                try:
                    row = conn.execute(
                        f"SELECT value FROM info WHERE {key_column} = ?", (field_name,)
                    ).fetchone()
                except sqlite3.Error:
                    continue
                if row:
                    return row["value"]
        return None

    def language(self) -> str:
        """Module language code, 'en' when the module does not say."""
        value = self.info_field("language")
        return value.strip() if value and value.strip() else "en"

    def describe(self) -> ModuleInfo:
        """Build the ModuleInfo for this module."""
        default_name = self.module_path.name[: -len(MODULE_SUFFIX)]
        description = (self.info_field("description") or "NA").replace("\r", "").replace("\n", " | ")
        return ModuleInfo(
            name=default_name,
            language=self.info_field("language") or "NA",
            description=description,
            path=self.module_path,
        )


def is_bible_module(path: Path) -> bool:
    """True for *.SQLite3 files that are not commentaries, dictionaries etc."""
    name = path.name.lower()
    if not name.endswith(MODULE_SUFFIX):
        return False
    return not any(fragment in name for fragment in EXCLUDED_SUBSTRINGS)


def find_modules(modules_dir: Path) -> List[ModuleInfo]:
    """
    Scan a directory for Bible modules.

    Returns:
        ModuleInfo list sorted by language, then name (case-insensitive).
        Empty if the directory does not exist.
    """
    modules_dir = Path(modules_dir)
    if not modules_dir.is_dir():
        return []

    modules = []
    for entry in modules_dir.iterdir():
        if not entry.is_file() or not is_bible_module(entry):
            continue
        try:
            modules.append(ModuleStore(entry).describe())
        except sqlite3.Error as e:
            logger.warning(f"Skipping unreadable module {entry.name}: {e}")

    modules.sort(key=lambda m: (m.language.lower(), m.name.lower()))
    return modules

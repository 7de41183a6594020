# mybible/services/references/book_mapper.py
"""
Book name resolution.

A BookMapper is one name set: canonical book numbers mapped to a full name
and an ordered list of aliases. Lookups by name are case-insensitive exact
matches; there is no fuzzy or partial matching. Several name sets can be
active at once (the default set and a module's own set) as independent
BookMapper instances.

Mapping files come in two shapes:

    Plain:           {"10": ["Genesis", "Gen", "Ge"], ...}
    Language-aware:  {"10": ["Genesis", "Gen", {"ru": ["Бытие", "Быт"]}], ...}

In the language-aware shape the bare strings are the fallback names and
each object adds names for one language.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from mybible.core.exceptions import MappingError

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK = "default"


@dataclass(frozen=True)
class CanonicalBook:
    """
    A book in one name set.

    Attributes:
        id: Canonical book number (MyBible numbering, e.g. 500 for John)
        full_name: Display name, e.g. "John"
        short_names: All names and aliases, primary first
    """
    id: int
    full_name: str
    short_names: Tuple[str, ...] = ()

    @property
    def short_name(self) -> str:
        """Primary short name, or "" when the book has none."""
        return self.short_names[0] if self.short_names else ""


def _key(name: str) -> str:
    return name.strip().casefold()


class BookMapper:
    """
    Resolves book names and numbers against one name set.

    Usage:
        mapper = BookMapper.from_abbreviations({"500": ["John", "Jn"]})
        mapper.resolve("jn")      # CanonicalBook(id=500, full_name="John", ...)
        mapper.resolve(500)       # same book
        mapper.resolve("Jo")      # None, no partial matching
    """

    def __init__(self, books: Optional[Mapping[int, Sequence[str]]] = None):
        self._by_number: Dict[int, CanonicalBook] = {}
        self._by_name: Dict[str, CanonicalBook] = {}
        # book number -> {language: [names]}, "default" holds the fallback names
        self._languages: Dict[int, Dict[str, List[str]]] = {}
        for number, names in (books or {}).items():
            self._add_book(int(number), list(names))

    def _add_book(self, number: int, names: List[str]) -> Optional[CanonicalBook]:
        names = [n.strip() for n in names if isinstance(n, str) and n.strip()]
        if not names:
            return None
        book = CanonicalBook(number, names[0], tuple(names[1:]) or (names[0],))
        self._by_number[number] = book
        self._register_names(book, names)
        return book

    def _register_names(self, book: CanonicalBook, names: Sequence[str]) -> None:
        for name in names:
            self._by_name[_key(name)] = book

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_abbreviations(cls, abbreviations: Mapping[str, Sequence[str]]) -> "BookMapper":
        """
        Build a mapper from a plain {"book number": [names...]} table.

        Entries with non-numeric keys are skipped.
        """
        mapper = cls()
        for key, names in (abbreviations or {}).items():
            try:
                number = int(key)
            except (TypeError, ValueError):
                continue
            if names:
                mapper._add_book(number, list(names))
        return mapper

    @classmethod
    def from_mapping_data(
        cls,
        data: Mapping[str, list],
        user_language: Optional[str] = None,
        module_language: Optional[str] = None,
    ) -> "BookMapper":
        """
        Build a mapper from parsed language-aware mapping data.

        Fallback names are always registered. Names for the module language
        and, when different, the user language are registered as extra
        aliases of the same book.
        """
        if not isinstance(data, Mapping):
            raise MappingError("Mapping must be a JSON object keyed by book number")

        mapper = cls()
        for key, entries in data.items():
            try:
                number = int(key)
            except (TypeError, ValueError):
                continue
            if not isinstance(entries, list):
                continue

            languages: Dict[str, List[str]] = {DEFAULT_FALLBACK: []}
            for element in entries:
                if isinstance(element, str):
                    languages[DEFAULT_FALLBACK].append(element)
                elif isinstance(element, dict):
                    for language, names in element.items():
                        if isinstance(names, list):
                            languages[language] = [n for n in names if isinstance(n, str)]

            book = mapper._add_book(number, languages[DEFAULT_FALLBACK])
            if book is None:
                continue
            mapper._languages[number] = languages

            if module_language and module_language.strip():
                mapper._register_names(book, languages.get(module_language, []))
            if user_language and user_language.strip() and user_language != module_language:
                mapper._register_names(book, languages.get(user_language, []))
        return mapper

    @classmethod
    def from_mapping_file(
        cls,
        path: Union[str, Path],
        user_language: Optional[str] = None,
        module_language: Optional[str] = None,
    ) -> "BookMapper":
        """
        Load a mapping file in either shape.

        Raises:
            MappingError: file missing, not JSON, or not an object
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise MappingError(f"Cannot load book mapping {path}: {e}") from e
        return cls.from_mapping_data(data, user_language, module_language)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, key: Union[str, int]) -> Optional[CanonicalBook]:
        """
        Resolve a book by number or by name.

        Args:
            key: Book number, or a full name / alias in any letter case

        Returns:
            CanonicalBook or None if nothing matches exactly
        """
        if isinstance(key, bool):
            return None
        if isinstance(key, int):
            return self._by_number.get(key)
        if not isinstance(key, str) or not key.strip():
            return None
        return self._by_name.get(_key(key))

    def __contains__(self, key) -> bool:
        return self.resolve(key) is not None

    def __len__(self) -> int:
        return len(self._by_number)

    def book_numbers(self) -> List[int]:
        return sorted(self._by_number)

    def names_for_language(self, book_id: int, language: str) -> List[str]:
        """Names registered for one language, [] when there are none."""
        return list(self._languages.get(book_id, {}).get(language, []))

    def resolve_localized(
        self,
        book_id: int,
        user_language: Optional[str] = None,
        module_language: Optional[str] = None,
    ) -> Optional[CanonicalBook]:
        """
        Get a book with names in the best available language.

        Priority:
        1. User-specified language
        2. Module language (if different from user language)
        3. Default fallback names
        4. English names (if neither requested language is English)
        """
        languages = self._languages.get(book_id)
        if languages is None:
            return self.resolve(book_id)

        candidates = []
        if user_language and user_language.strip():
            candidates.append(user_language)
        if module_language and module_language.strip() and module_language != user_language:
            candidates.append(module_language)
        candidates.append(DEFAULT_FALLBACK)
        if "en" not in (user_language, module_language):
            candidates.append("en")

        for language in candidates:
            names = languages.get(language)
            if names:
                return CanonicalBook(book_id, names[0], tuple(names[1:]) or (names[0],))
        return None

    def display_name(
        self,
        book_id: int,
        typed: Optional[str] = None,
        fallback: Optional["BookMapper"] = None,
        user_language: Optional[str] = None,
        module_language: Optional[str] = None,
    ) -> str:
        """
        Short name to show for a book.

        Priority:
        1. The name the user typed, when it names this book
        2. Primary short name in the best available language
           (see resolve_localized)
        3. The fallback name set's choice
        4. The bare book number
        """
        if typed and typed.strip():
            book = self.resolve(typed)
            if book is not None and book.id == book_id:
                return typed.strip()

        book = self.resolve_localized(book_id, user_language, module_language)
        if book is not None and book.short_name:
            return book.short_name
        if fallback is not None:
            return fallback.display_name(book_id, typed, None, user_language, module_language)
        return str(book_id)

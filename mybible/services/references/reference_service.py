# mybible/services/references/reference_service.py
"""
Reference service for MyBible modules.

Wires the pieces together for a named module: book names, the cached
chapter index, the parser and the verse fetcher. This is what the CLI and
the HTTP routes talk to.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from mybible.core import config
from mybible.core.exceptions import BibleModuleNotFoundError
from mybible.services.cache.verse_index_cache import ChapterIndex, VerseIndexCache
from .abbreviations import AbbreviationManager, get_book_mapper
from .book_mapper import BookMapper
from .module_store import MODULE_SUFFIX, ModuleInfo, ModuleStore, VerseRow, find_modules
from .reference_parser import ParseResult, RangeWithCount, ReferenceParseError, ReferenceParser
from .storage import ReferenceStorage
from .verse_fetcher import VerseFetcher

logger = logging.getLogger(__name__)


@dataclass
class Passage:
    """
    The verses a citation denotes in one module.

    Attributes:
        ref: Citation as given
        module: Module name
        ranges: Parsed ranges, in citation order
        verses: Verse rows for all ranges, in range order
        range_verses: Verse rows of each range, parallel to ranges
    """
    ref: str
    module: str
    ranges: List[RangeWithCount] = field(default_factory=list)
    verses: List[VerseRow] = field(default_factory=list)
    range_verses: List[List[VerseRow]] = field(default_factory=list, repr=False)

    @property
    def verse_count(self) -> int:
        return sum(r.verse_count for r in self.ranges)

    def by_range(self) -> List[Tuple[RangeWithCount, List[VerseRow]]]:
        """Each range with the verse rows it produced."""
        return list(zip(self.ranges, self.range_verses))

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "ref": self.ref,
            "module": self.module,
            "ranges": [r.to_dict() for r in self.ranges],
            "verses": [v.to_dict() for v in self.verses],
            "verse_count": self.verse_count,
        }


class ReferenceService:
    """
    Parse and look up citations against installed modules.

    Usage:
        service = ReferenceService()

        # Ranges only
        result = service.parse("John 3:16-18", module="KJV")
        if result.ok:
            print(result.ranges[0].verse_count)

        # Ranges and verse text
        passage = service.lookup("Jude", module="KJV")
        for verse in passage.verses:
            print(verse.chapter, verse.verse, verse.text)

        # Installed modules
        for info in service.list_modules():
            print(info.name, info.language)
    """

    def __init__(
        self,
        storage: Optional[ReferenceStorage] = None,
        index_cache: Optional[VerseIndexCache] = None,
        stride: Optional[int] = None,
    ):
        self.storage = storage or ReferenceStorage()
        self.index_cache = index_cache or VerseIndexCache(self.storage.moduledata_path, ModuleStore)
        self.stride = config.BOOK_STRIDE if stride is None else stride
        self.abbreviations = AbbreviationManager(self.storage)

    # ------------------------------------------------------------------
    # Modules
    # ------------------------------------------------------------------

    def resolve_module_name(self, module: Optional[str] = None) -> str:
        """
        Name of the module a request reads, MYBIBLE_DEFAULT_MODULE when none is given.

        Raises:
            BibleModuleNotFoundError: no module given and no default set
        """
        name = (module or config.DEFAULT_MODULE or "").strip()
        if not name:
            raise BibleModuleNotFoundError("No module given and MYBIBLE_DEFAULT_MODULE is not set")
        return name

    def module_path(self, module_name: str) -> Path:
        """
        Path of an installed module's SQLite file.

        The file extension is matched case-insensitively.

        Raises:
            BibleModuleNotFoundError: no such module in the modules directory
        """
        path = self.storage.module_file(module_name)
        if path.is_file():
            return path

        wanted = f"{module_name}{MODULE_SUFFIX}".lower()
        if self.storage.modules_path.is_dir():
            for entry in self.storage.modules_path.iterdir():
                if entry.name.lower() == wanted and entry.is_file():
                    return entry
        raise BibleModuleNotFoundError(f"Module '{module_name}' not found in {self.storage.modules_path}")

    def list_modules(self) -> List[ModuleInfo]:
        """Bible modules in the modules directory, sorted by language then name."""
        return find_modules(self.storage.modules_path)

    def module_language(self, module_name: str) -> str:
        """Language code from the module's info table, 'en' when unset."""
        return ModuleStore(self.module_path(module_name)).language()

    def get_index(self, module_name: str) -> ChapterIndex:
        """
        Chapter index for a module, built on first use.

        Raises:
            BibleModuleNotFoundError: module not installed
            IndexBuildError: module could not be read
        """
        return self.index_cache.get_index(module_name, self.module_path(module_name))

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def get_book_mapper(
        self,
        module_name: str,
        use_module_abbreviations: bool = False,
        prefix: Optional[str] = None,
        user_language: Optional[str] = None,
    ) -> BookMapper:
        """
        Name set to parse with for a module.

        Args:
            module_name: Installed module name
            use_module_abbreviations: Use the module's own book names instead
                of the mapping files
            prefix: Custom mapping file prefix (ignored with module names)
            user_language: Extra alias language
        """
        module_path = self.module_path(module_name)
        if use_module_abbreviations:
            return self.abbreviations.get_module_mapper(module_name, module_path)

        module_language = self.module_language(module_name)
        return get_book_mapper(self.storage, prefix, user_language, module_language)

    def default_book_mapper(self) -> BookMapper:
        """Default name set, used as the display fallback."""
        return get_book_mapper(self.storage)

    # ------------------------------------------------------------------
    # Parsing and lookup
    # ------------------------------------------------------------------

    def get_parser(
        self,
        module: Optional[str] = None,
        use_module_abbreviations: bool = False,
        prefix: Optional[str] = None,
        user_language: Optional[str] = None,
    ) -> ReferenceParser:
        module_name = self.resolve_module_name(module)
        mapper = self.get_book_mapper(module_name, use_module_abbreviations, prefix, user_language)
        return ReferenceParser(mapper, self.get_index(module_name))

    def parse(
        self,
        ref: str,
        module: Optional[str] = None,
        use_module_abbreviations: bool = False,
        prefix: Optional[str] = None,
        user_language: Optional[str] = None,
    ) -> ParseResult:
        """
        Parse a citation against a module.

        Returns:
            ParseResult with every range, or no ranges and the error

        Raises:
            BibleModuleNotFoundError: module not installed
            IndexBuildError: module could not be indexed
        """
        parser = self.get_parser(module, use_module_abbreviations, prefix, user_language)
        return parser.parse_result(ref)

    def lookup(
        self,
        ref: str,
        module: Optional[str] = None,
        use_module_abbreviations: bool = False,
        prefix: Optional[str] = None,
        user_language: Optional[str] = None,
        index_driven: bool = False,
    ) -> Passage:
        """
        Parse a citation and fetch its verses.

        Args:
            ref: Citation, e.g. "John 3:16-18; Jude"
            module: Module name, defaults to MYBIBLE_DEFAULT_MODULE
            use_module_abbreviations: Parse with the module's own book names
            prefix: Custom mapping file prefix
            user_language: Extra alias language
            index_driven: Find books inside cross-book ranges from the
                chapter index rather than by book number stride

        Returns:
            Passage with ranges and verse rows

        Raises:
            ReferenceParseError: citation is invalid (a ValueError)
            BibleModuleNotFoundError: module not installed
            IndexBuildError: module could not be indexed
        """
        module_name = self.resolve_module_name(module)
        result = self.parse(ref, module_name, use_module_abbreviations, prefix, user_language)
        if not result.ok:
            raise ReferenceParseError.from_error(result.error)

        fetcher = VerseFetcher(
            ModuleStore(self.module_path(module_name)),
            stride=self.stride,
            chapter_index=self.get_index(module_name) if index_driven else None,
        )
        range_verses = [fetcher.fetch_range(r) for r in result.ranges]
        verses = [row for rows in range_verses for row in rows]
        logger.debug(f"Looked up '{ref}' in {module_name}: {len(verses)} verses")
        return Passage(
            ref=ref,
            module=module_name,
            ranges=result.ranges,
            verses=verses,
            range_verses=range_verses,
        )

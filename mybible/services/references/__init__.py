# mybible/services/references/__init__.py
"""
Scripture reference parsing and retrieval for MyBible modules.

This package provides:
- ReferenceService: Parse and look up citations against a named module
- Passage: Ranges and verse rows for one citation
- ReferenceParser: Citation string to validated verse ranges
- BookMapper: Book name and alias resolution
- VerseFetcher: Verse rows for parsed ranges
- ModuleStore: Read access to a MyBible SQLite module
- ReferenceStorage: Config directory and module directory layout
"""

from mybible.core.exceptions import (
    BibleModuleNotFoundError,
    IndexBuildError,
    MappingError,
    ModuleReadError,
    MyBibleError,
)
from .storage import ReferenceStorage
from .book_mapper import BookMapper, CanonicalBook
from .abbreviations import AbbreviationManager, get_book_mapper
from .module_store import ModuleInfo, ModuleStore, VerseRow, find_modules
from .reference_parser import (
    ParseError,
    ParseErrorKind,
    ParseResult,
    ParseState,
    Range,
    RangeWithCount,
    Reference,
    ReferenceParseError,
    ReferenceParser,
)
from .verse_fetcher import VerseFetcher
from .reference_service import Passage, ReferenceService

__all__ = [
    # Service (primary interface)
    "ReferenceService",
    "Passage",
    # Storage
    "ReferenceStorage",
    # Names
    "BookMapper",
    "CanonicalBook",
    "AbbreviationManager",
    "get_book_mapper",
    # Modules
    "ModuleStore",
    "ModuleInfo",
    "VerseRow",
    "find_modules",
    # Parsing
    "ReferenceParser",
    "Reference",
    "Range",
    "RangeWithCount",
    "ParseState",
    "ParseResult",
    "ParseError",
    "ParseErrorKind",
    "ReferenceParseError",
    # Fetching
    "VerseFetcher",
    # Errors
    "MyBibleError",
    "BibleModuleNotFoundError",
    "ModuleReadError",
    "MappingError",
    "IndexBuildError",
]

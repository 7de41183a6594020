# mybible/services/references/abbreviations.py
"""
Loading book name sets.

Two sources:
- Mapping files in the config directory (default_mapping.json, or a
  custom <prefix>_mapping.json), seeded from the bundled default table.
- A module's own books table, extracted once to moduledata/<module>.abbr.json.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from mybible.core.exceptions import MappingError
from .book_mapper import BookMapper
from .book_names import DEFAULT_BOOK_NAMES
from .module_store import ModuleStore
from .storage import ReferenceStorage

logger = logging.getLogger(__name__)


def default_mapping_data() -> Dict[str, List[str]]:
    """The bundled default table in mapping-file shape."""
    return {str(number): list(names) for number, names in DEFAULT_BOOK_NAMES.items()}


def _write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    tmp_path.replace(path)


def get_book_mapper(
    storage: ReferenceStorage,
    prefix: Optional[str] = None,
    user_language: Optional[str] = None,
    module_language: Optional[str] = None,
) -> BookMapper:
    """
    Get the book name set to parse with.

    Tries <prefix>_mapping.json first when a prefix is given, then
    default_mapping.json (written from the bundled table if missing).
    A malformed file falls back to the bundled table.

    Args:
        storage: Where mapping files live
        prefix: Custom mapping prefix, e.g. "ru" for ru_mapping.json
        user_language: Extra alias language requested by the user
        module_language: Language of the module being read

    Returns:
        BookMapper for the chosen file
    """
    mapping_file = None
    if prefix and prefix.strip():
        custom = storage.mapping_path(prefix.strip())
        if custom.exists():
            mapping_file = custom
        else:
            logger.info(f"Custom mapping {custom.name} not found, using default mapping")

    if mapping_file is None:
        mapping_file = storage.default_mapping_path
        if not mapping_file.exists():
            _write_json(mapping_file, default_mapping_data())
            logger.info(f"Wrote default book mapping to {mapping_file}")

    try:
        return BookMapper.from_mapping_file(mapping_file, user_language, module_language)
    except MappingError as e:
        logger.warning(f"{e}; using built-in book names")
        return BookMapper.from_mapping_data(default_mapping_data(), user_language, module_language)


class AbbreviationManager:
    """
    Extracts and caches a module's own book names.

    Usage:
        manager = AbbreviationManager(storage)
        abbr_file = manager.ensure_abbreviation_file("KJV", module_path)
        mapper = BookMapper.from_abbreviations(manager.load_abbreviations(abbr_file))
    """

    def __init__(self, storage: ReferenceStorage):
        self.storage = storage

    def ensure_abbreviation_file(self, module_name: str, module_path: Path) -> Path:
        """
        Return the module's abbreviation file, extracting it if absent.

        Raises:
            BibleModuleNotFoundError: module file missing
            ModuleReadError: module has no readable books table
        """
        abbr_file = self.storage.abbreviations_path(module_name)
        if abbr_file.exists():
            return abbr_file

        logger.info(f"Extracting book names for {module_name}...")
        names = ModuleStore(module_path).read_book_names()
        _write_json(abbr_file, names)
        logger.info(f"Book names for {module_name} saved to {abbr_file}")
        return abbr_file

    def load_abbreviations(self, abbr_file: Path) -> Dict[str, List[str]]:
        """Load an abbreviation file written by ensure_abbreviation_file."""
        try:
            with open(abbr_file, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise MappingError(f"Cannot load abbreviations {abbr_file}: {e}") from e
        if not isinstance(data, dict):
            raise MappingError(f"Abbreviation file {abbr_file} is not a JSON object")
        return data

    def get_module_mapper(self, module_name: str, module_path: Path) -> BookMapper:
        """Module's own name set as a BookMapper."""
        abbr_file = self.ensure_abbreviation_file(module_name, module_path)
        return BookMapper.from_abbreviations(self.load_abbreviations(abbr_file))

"""
Verse Index Cache

Per-module chapter index: how many verses each (book, chapter) has in one
module. Built once from the module's verses table, kept in memory for the
life of the cache object and persisted as JSON so the next process can skip
the scan.
"""

import json
import logging
import os
import threading
from bisect import bisect_left, bisect_right
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from mybible.core.exceptions import IndexBuildError, MyBibleError

logger = logging.getLogger(__name__)

KEY_FACTOR = 1000


def composite_key(book: int, chapter: int) -> int:
    """Index key for a chapter: book * 1000 + chapter."""
    return book * KEY_FACTOR + chapter


def split_key(key: int) -> Tuple[int, int]:
    """Inverse of composite_key."""
    return divmod(key, KEY_FACTOR)


class ChapterIndex:
    """
    Immutable map of composite chapter key -> verses in that chapter.

    A chapter that is not in the index does not exist in the module, which
    is how books missing from a module are detected.
    """

    def __init__(self, verses_by_key: Mapping[int, int]):
        self._counts = MappingProxyType({int(k): int(v) for k, v in verses_by_key.items()})
        self._keys: List[int] = sorted(self._counts)

    @classmethod
    def from_coordinates(cls, coordinates: Iterable[Tuple[int, int, int]]) -> "ChapterIndex":
        """Build from an unordered stream of (book, chapter, verse) triples."""
        counts: Dict[int, int] = {}
        for book, chapter, verse in coordinates:
            key = composite_key(book, chapter)
            if verse > counts.get(key, 0):
                counts[key] = verse
        return cls(counts)

    def verse_count(self, book: int, chapter: int) -> Optional[int]:
        """Verses in a chapter, None if the chapter is not in this module."""
        return self._counts.get(composite_key(book, chapter))

    def _book_keys(self, book: int) -> List[int]:
        low = bisect_left(self._keys, composite_key(book, 0))
        high = bisect_left(self._keys, composite_key(book + 1, 0))
        return self._keys[low:high]

    def exists_in_module(self, book: int) -> bool:
        """True if any chapter of the book is indexed."""
        return bool(self._book_keys(book))

    def last_chapter_and_verse(self, book: int) -> Optional[Tuple[int, int]]:
        """Highest (chapter, verse) recorded for a book."""
        keys = self._book_keys(book)
        if not keys:
            return None
        last = keys[-1]
        return split_key(last)[1], self._counts[last]

    def keys_between(self, low_key: int, high_key: int) -> List[int]:
        """Indexed keys in [low_key, high_key], ascending."""
        return self._keys[bisect_left(self._keys, low_key):bisect_right(self._keys, high_key)]

    def books(self) -> List[int]:
        """Indexed book numbers, ascending."""
        return sorted({split_key(k)[0] for k in self._keys})

    def get(self, key: int, default: Optional[int] = None) -> Optional[int]:
        return self._counts.get(key, default)

    def __contains__(self, key) -> bool:
        return key in self._counts

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ChapterIndex):
            return NotImplemented
        return dict(self._counts) == dict(other._counts)

    def to_json(self) -> Dict[str, int]:
        return {str(k): self._counts[k] for k in self._keys}

    @classmethod
    def from_json(cls, data) -> "ChapterIndex":
        """
        Rebuild from to_json() output.

        Raises:
            ValueError: data is not a {key: count} object of integers
        """
        if not isinstance(data, dict):
            raise ValueError("Index artifact must be a JSON object")
        return cls({int(k): int(v) for k, v in data.items()})


class VerseIndexCache:
    """
    Builds, caches and persists chapter indexes per module.

    At most one build runs per module name: concurrent callers for the same
    module wait on that module's lock and get the finished index.

    Usage:
        cache = VerseIndexCache(storage.moduledata_path, ModuleStore)
        index = cache.get_index("KJV", storage.module_file("KJV"))
    """

    def __init__(self, moduledata_dir: Path, store_factory: Callable):
        self.moduledata_dir = Path(moduledata_dir)
        self.store_factory = store_factory
        self._indexes: Dict[str, ChapterIndex] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _artifact_path(self, module_name: str) -> Path:
        return self.moduledata_dir / f"{module_name}.allverses.json"

    def _module_lock(self, module_name: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(module_name)
            if lock is None:
                lock = self._locks[module_name] = threading.Lock()
            return lock

    def get_index(self, module_name: str, module_path: Path) -> ChapterIndex:
        """
        Get the chapter index for a module.

        Order: memory, fresh on-disk artifact, rebuild from the module.

        Raises:
            IndexBuildError: module could not be read
        """
        index = self._indexes.get(module_name)
        if index is not None:
            return index

        with self._module_lock(module_name):
            # Another caller may have finished the build while we waited
            index = self._indexes.get(module_name)
            if index is not None:
                return index

            index = self._load_artifact(module_name, Path(module_path))
            if index is None:
                index = self._build(module_name, Path(module_path))
                self._store_artifact(module_name, index)

            self._indexes[module_name] = index
            return index

    def _load_artifact(self, module_name: str, module_path: Path) -> Optional[ChapterIndex]:
        artifact = self._artifact_path(module_name)
        if not artifact.exists():
            return None

        try:
            if module_path.exists() and artifact.stat().st_mtime < module_path.stat().st_mtime:
                logger.info(f"Verse index for {module_name} is older than the module, rebuilding")
                return None
            with open(artifact, encoding="utf-8") as f:
                return ChapterIndex.from_json(json.load(f))
        except (json.JSONDecodeError, ValueError, TypeError) as e:
            logger.warning(f"Verse index cache for {module_name} is corrupt ({e}), regenerating")
            try:
                artifact.unlink()
            except OSError as delete_error:
                logger.warning(f"Failed to delete corrupt cache {artifact}: {delete_error}")
            return None
        except OSError as e:
            logger.warning(f"Failed to read verse index cache {artifact}: {e}")
            return None

    def _build(self, module_name: str, module_path: Path) -> ChapterIndex:
        logger.info(f"Generating verse index for {module_name}...")
        try:
            store = self.store_factory(module_path)
            index = ChapterIndex.from_coordinates(store.stream_all_verse_coordinates())
        except MyBibleError as e:
            raise IndexBuildError(f"Cannot build verse index for {module_name}: {e}") from e
        logger.info(f"Verse index for {module_name} complete ({len(index)} chapters)")
        return index

    def _store_artifact(self, module_name: str, index: ChapterIndex) -> None:
        artifact = self._artifact_path(module_name)
        tmp_path = artifact.with_name(f"{artifact.name}.{os.getpid()}.tmp")
        try:
            self.moduledata_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(index.to_json(), f)
            os.replace(tmp_path, artifact)
        except OSError as e:
            logger.error(f"Error saving verse index file {artifact}: {e}")

    def invalidate(self, module_name: str) -> None:
        """Forget a module's index in memory and on disk."""
        with self._module_lock(module_name):
            self._indexes.pop(module_name, None)
            try:
                self._artifact_path(module_name).unlink()
            except FileNotFoundError:
                pass

    def cached_modules(self) -> List[str]:
        """Module names with an index in memory."""
        return sorted(self._indexes)

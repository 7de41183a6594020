"""
Cache Services

Per-module chapter indexes built from MyBible modules.
"""

from .verse_index_cache import ChapterIndex, VerseIndexCache, composite_key, split_key

__all__ = ["ChapterIndex", "VerseIndexCache", "composite_key", "split_key"]

# core/exceptions.py
"""Exceptions shared by the reference and cache services."""


class MyBibleError(Exception):
    """Base exception for module, mapping and index operations."""
    pass


class BibleModuleNotFoundError(MyBibleError):
    """Raised when a module file does not exist."""
    pass


class ModuleReadError(MyBibleError):
    """Raised when a module database cannot be queried."""
    pass


class MappingError(MyBibleError):
    """Raised when a book name mapping cannot be loaded."""
    pass


class IndexBuildError(MyBibleError):
    """Raised when a chapter index cannot be built from its module."""
    pass

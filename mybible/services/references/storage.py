# mybible/services/references/storage.py
"""
Reference storage layout for MyBible modules and their derived data.

Provides directory structure management for the reference system. The
base path and modules path come from the environment (see core.config)
so they can point at a shared drive or a test directory.
"""

from pathlib import Path
from typing import Optional

from mybible.core import config


class ReferenceStorage:
    """
    Manages the reference storage directory structure.

    Directory structure:
        {MYBIBLE_CONFIG_DIR}/
        ├── default_mapping.json
        ├── <prefix>_mapping.json
        └── moduledata/
            ├── <module>.allverses.json
            └── <module>.abbr.json

        {MYBIBLE_MODULES_PATH}/
        └── <module>.SQLite3
    """

    def __init__(self, base_path: Optional[Path] = None, modules_path: Optional[Path] = None):
        self.base_path = Path(base_path) if base_path else config.CONFIG_DIR
        if modules_path:
            self._modules_path = Path(modules_path)
        elif base_path:
            self._modules_path = self.base_path / "modules"
        else:
            self._modules_path = config.MODULES_PATH
        self._ensure_structure()

    def _ensure_structure(self):
        """Create directory structure if it doesn't exist."""
        self.moduledata_path.mkdir(parents=True, exist_ok=True)

    @property
    def modules_path(self) -> Path:
        """Path to the directory holding *.SQLite3 modules."""
        return self._modules_path

    @property
    def moduledata_path(self) -> Path:
        """Path to per-module cache artifacts."""
        return self.base_path / "moduledata"

    @property
    def default_mapping_path(self) -> Path:
        """Path to the default book name mapping."""
        return self.base_path / "default_mapping.json"

    def mapping_path(self, prefix: str) -> Path:
        """Path to a custom book name mapping, e.g. 'ru' -> ru_mapping.json."""
        return self.base_path / f"{prefix}_mapping.json"

    def verse_index_path(self, module_name: str) -> Path:
        """Path to the cached chapter index for a module."""
        return self.moduledata_path / f"{module_name}.allverses.json"

    def abbreviations_path(self, module_name: str) -> Path:
        """Path to the extracted book names for a module."""
        return self.moduledata_path / f"{module_name}.abbr.json"

    def module_file(self, module_name: str) -> Path:
        """Path to a module's SQLite file."""
        return self.modules_path / f"{module_name}.SQLite3"

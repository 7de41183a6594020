import sqlite3
from pathlib import Path
from typing import Union


def get_module_db(module_path: Union[str, Path]) -> sqlite3.Connection:
    """
    Return a read-only sqlite3 connection to a MyBible module file.
    """
    uri = Path(module_path).resolve().as_uri() + "?mode=ro"
    conn = sqlite3.connect(uri, uri=True)
    conn.row_factory = sqlite3.Row
    return conn

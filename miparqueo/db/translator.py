# =============================================================================
# MIPARQUEO BACKEND - PLACEHOLDER TRANSLATOR
# =============================================================================
# File: db/translator.py
# Description: Rewrites backend-agnostic "?" markers into the dialect
#              expected by the active driver
# =============================================================================

import re
from itertools import count
from typing import Union

from miparqueo.db.base import DatabaseType


ORDINAL_MARKER = "?"

_MARKER_PATTERN = re.compile(re.escape(ORDINAL_MARKER))


def count_placeholders(sql: str) -> int:
    """Return the number of ordinal markers in ``sql``."""
    return sql.count(ORDINAL_MARKER)


def translate_placeholders(sql: str, dialect: Union[DatabaseType, str]) -> str:
    """
    Translate ordinal ``?`` markers for the given dialect.

    SQLite accepts ``?`` natively, so the query is returned unchanged.
    For PostgreSQL every marker is numbered left to right starting at 1
    (``?, ?`` -> ``$1, $2``). The query is not otherwise parsed, so marker
    count and order are always preserved.

    Args:
        sql: Query using ``?`` markers
        dialect: Target backend

    Returns:
        str: Query valid for the target backend

    Example:
        >>> translate_placeholders("SELECT * FROM users WHERE id = ?", "postgresql")
        'SELECT * FROM users WHERE id = $1'
    """
    if DatabaseType(dialect) is not DatabaseType.POSTGRESQL:
        return sql

    position = count(1)
    return _MARKER_PATTERN.sub(lambda _match: f"${next(position)}", sql)

"""SQL parameter normalization.

Compiled statements always use ``:name`` placeholders. This module converts
them to the driver's format, leaving string literals and PostgreSQL
``::typecast`` syntax alone.
"""

from __future__ import annotations

import re
from functools import lru_cache

# Matches :name but not ::typecast and not inside words
_PARAM_PATTERN = re.compile(r"(?<![:\w]):([a-zA-Z_]\w*)")

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'")


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert :name parameters to the target param style.

    Args:
        sql: SQL string with :name parameters.
        paramstyle: Target style - 'named' (no conversion) or 'pyformat' (%(name)s).

    Returns:
        SQL with parameters converted to the target style.
    """
    if paramstyle == "named":
        return sql
    return _convert_to_pyformat(sql)


@lru_cache(maxsize=256)
def _convert_to_pyformat(sql: str) -> str:
    """Convert :name params to %(name)s, preserving string literals."""
    parts: list[str] = []
    last_end = 0

    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append(_PARAM_PATTERN.sub(r"%(\1)s", sql[last_end:start]))
        parts.append(match.group())
        last_end = end

    if last_end < len(sql):
        parts.append(_PARAM_PATTERN.sub(r"%(\1)s", sql[last_end:]))

    return "".join(parts)


def escape_percent(sql: str, paramstyle: str, has_params: bool) -> str:
    """Double literal ``%`` signs for pyformat drivers.

    pyformat drivers only interpolate when parameters are passed, so the
    escaping is skipped for parameterless statements. Must run before
    placeholders are converted, otherwise the ``%`` of ``%(name)s`` would
    be doubled too.
    """
    if paramstyle == "pyformat" and has_params:
        return sql.replace("%", "%%")
    return sql

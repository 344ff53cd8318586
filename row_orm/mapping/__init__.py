"""Mapping layer - prefixing, result conversion and row objects."""

from __future__ import annotations

from row_orm.mapping.factory import RowFactory
from row_orm.mapping.prefixer import FieldPrefixer
from row_orm.mapping.protocol import RowLike
from row_orm.mapping.result import ORMResult, ResultMapper
from row_orm.mapping.row import Row

__all__ = [
    "FieldPrefixer",
    "ResultMapper",
    "ORMResult",
    "RowFactory",
    "RowLike",
    "Row",
]

"""
Foreign key cardinality inference from unique constraints
"""
from collections import Counter
from enum import Enum
from typing import Iterable

from sqlite_erd.models.schema import Column, ForeignKey, Table


class Cardinality(Enum):
    """Relationship cardinality, written as ``source:target``"""
    ONE_TO_MANY = "1:∞"
    MANY_TO_ONE = "∞:1"
    ONE_TO_ONE = "1:1"
    MANY_TO_MANY = "∞:∞"

    @property
    def tail_label(self) -> str:
        """Source side glyph"""
        return self.value.split(":")[0]

    @property
    def head_label(self) -> str:
        """Target side glyph"""
        return self.value.split(":")[1]

    @property
    def markup_symbol(self) -> str:
        return _MARKUP_SYMBOLS[self]


_MARKUP_SYMBOLS = {
    Cardinality.ONE_TO_MANY: "<",
    Cardinality.MANY_TO_ONE: ">",
    Cardinality.ONE_TO_ONE: "-",
    Cardinality.MANY_TO_MANY: "<>",
}


def is_superset(columns: Counter, other: Counter) -> bool:
    """Multiset containment: every name in ``other`` occurs at least as often in ``columns``"""
    return all(columns[name] >= count for name, count in other.items())


def is_columns_on_unique_index(table: Table, columns: Iterable[Column]) -> bool:
    """
    Check whether the columns are covered by a unique index of the table

    Uniqueness of a subset implies uniqueness of any superset, so with
    ``UNIQUE(a)`` the columns ``(a, b)`` count as unique too.
    """
    column_names = Counter(col.name for col in columns)
    for index in table.indexes:
        if not index.unique or not index.columns:
            continue
        if is_superset(column_names, Counter(index.column_names)):
            return True
    return False


def classify(foreign_key: ForeignKey) -> Cardinality:
    """Classify a resolved foreign key from the uniqueness of both sides"""
    is_target_unique = is_columns_on_unique_index(foreign_key.target, foreign_key.target_columns)
    is_source_unique = is_columns_on_unique_index(foreign_key.source, foreign_key.source_columns)

    if is_target_unique and is_source_unique:
        return Cardinality.ONE_TO_ONE
    if is_target_unique:
        return Cardinality.MANY_TO_ONE
    if is_source_unique:
        return Cardinality.ONE_TO_MANY
    return Cardinality.MANY_TO_MANY

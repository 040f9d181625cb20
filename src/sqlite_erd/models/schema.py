"""
Data models for schema representation
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ForeignKeyAction(Enum):
    """Referential actions for ON UPDATE / ON DELETE"""
    CASCADE = "CASCADE"
    RESTRICT = "RESTRICT"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"
    NO_ACTION = "NO ACTION"

    @classmethod
    def parse(cls, value: Any, default: Optional["ForeignKeyAction"]) -> Optional["ForeignKeyAction"]:
        """
        Parse a catalog action value

        Args:
            value: Raw value from the foreign key catalog
            default: Action used when the value is missing or unrecognized

        Returns:
            The matching action, or ``default``
        """
        if not isinstance(value, str):
            return default
        normalized = " ".join(value.split()).upper()
        for action in cls:
            if action.value == normalized:
                return action
        return default


@dataclass(frozen=True)
class DefaultExpression:
    """Column default kept as SQL expression text, e.g. CURRENT_TIMESTAMP"""
    text: str

    @property
    def is_null(self) -> bool:
        return self.text.strip().upper() == "NULL"


def default_kind(value: Any) -> str:
    """Classify a column default value"""
    if value is None:
        return 'null'
    if isinstance(value, DefaultExpression):
        return 'null' if value.is_null else 'expression'
    # bool before int, bool is an int subclass
    if isinstance(value, (bool, int)):
        return 'integer'
    if isinstance(value, float):
        return 'float'
    if isinstance(value, str):
        return 'text'
    if isinstance(value, (bytes, bytearray, memoryview)):
        return 'binary'
    return 'unsupported'


@dataclass(frozen=True)
class Column:
    """Column definition in a table"""
    name: str
    type: str = "ANY"
    nullable: bool = True
    default: Optional[Any] = None

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'name': self.name,
            'type': self.type,
            'nullable': self.nullable,
            'default': self.default.text if isinstance(self.default, DefaultExpression) else self.default,
            'default_kind': default_kind(self.default)
        }


@dataclass(frozen=True, eq=False)
class Index:
    """
    Index over one or more columns of a table

    Two indexes are equal when they cover the same column names in the same
    order and agree on both the unique and primary key flags.
    """
    columns: Tuple[Column, ...]
    unique: bool = False
    primary_key: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'columns', tuple(self.columns))

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(col.name for col in self.columns)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Index):
            return NotImplemented
        return (
            self.column_names == other.column_names
            and self.unique == other.unique
            and self.primary_key == other.primary_key
        )

    def __hash__(self) -> int:
        return hash((self.column_names, self.unique, self.primary_key))

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'columns': list(self.column_names),
            'unique': self.unique,
            'primary_key': self.primary_key
        }


@dataclass(frozen=True)
class PartialTable:
    """Table as extracted from the column catalog, before indexes are known"""
    name: str
    columns: Tuple[Column, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'columns', tuple(self.columns))

    def get_column(self, name: str) -> Optional[Column]:
        """Get column by name"""
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'name': self.name,
            'columns': [col.to_dict() for col in self.columns]
        }


@dataclass(frozen=True)
class Table(PartialTable):
    """Fully assembled table: columns plus deduplicated indexes"""
    indexes: Tuple[Index, ...] = field(default_factory=tuple)

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, 'indexes', tuple(self.indexes))

    @property
    def primary_key(self) -> Optional[Index]:
        """First primary key index, if any"""
        for index in self.indexes:
            if index.primary_key:
                return index
        return None

    def is_primary_key_column(self, column: Column) -> bool:
        """Check whether the column takes part in a primary key"""
        return any(
            index.primary_key and column.name in index.column_names
            for index in self.indexes
        )

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        data = super().to_dict()
        data['indexes'] = [index.to_dict() for index in self.indexes]
        return data


@dataclass(frozen=True)
class PartialForeignKey:
    """
    Foreign key as discovered in the catalog

    The target table is only known by name, and target columns by their
    names. A ``None`` target column refers to the target's primary key
    column at the same position.
    """
    source_table: str
    source_columns: Tuple[Column, ...]
    target_table: str
    target_columns: Tuple[Optional[str], ...]
    on_update: ForeignKeyAction = ForeignKeyAction.NO_ACTION
    on_delete: ForeignKeyAction = ForeignKeyAction.NO_ACTION

    def __post_init__(self):
        object.__setattr__(self, 'source_columns', tuple(self.source_columns))
        object.__setattr__(self, 'target_columns', tuple(self.target_columns))

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'source_table': self.source_table,
            'source_columns': [col.name for col in self.source_columns],
            'target_table': self.target_table,
            'target_columns': list(self.target_columns),
            'on_update': self.on_update.value,
            'on_delete': self.on_delete.value
        }


@dataclass(frozen=True)
class ForeignKey:
    """Foreign key resolved against the tables of a layout"""
    source: Table
    source_columns: Tuple[Column, ...]
    target: Table
    target_columns: Tuple[Column, ...]
    on_update: ForeignKeyAction = ForeignKeyAction.NO_ACTION
    on_delete: ForeignKeyAction = ForeignKeyAction.NO_ACTION

    def __post_init__(self):
        object.__setattr__(self, 'source_columns', tuple(self.source_columns))
        object.__setattr__(self, 'target_columns', tuple(self.target_columns))

    @property
    def source_column_names(self) -> List[str]:
        return [col.name for col in self.source_columns]

    @property
    def target_column_names(self) -> List[str]:
        return [col.name for col in self.target_columns]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'source': self.source.name,
            'source_columns': self.source_column_names,
            'target': self.target.name,
            'target_columns': self.target_column_names,
            'on_update': self.on_update.value,
            'on_delete': self.on_delete.value
        }

"""
Catalog query descriptors, result sets and typed catalog rows
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

RowModel = TypeVar('RowModel', bound='CatalogRow')


class QueryKind(Enum):
    """Structural queries issued against the metadata executor"""
    LIST_TABLES = "list_tables"
    TABLE_INFO = "table_info"
    FOREIGN_KEY_LIST = "foreign_key_list"
    INDEX_LIST = "index_list"
    INDEX_INFO = "index_info"


def quote_identifier(name: Optional[str]) -> str:
    """Quote an SQLite identifier, doubling embedded quotes"""
    if not name:
        return '""'
    return '"' + name.replace('"', '""') + '"'


@dataclass(frozen=True)
class Query:
    """Structural query descriptor"""
    kind: QueryKind
    target: Optional[str] = None

    @classmethod
    def list_tables(cls) -> "Query":
        return cls(QueryKind.LIST_TABLES)

    @classmethod
    def table_info(cls, table_name: str) -> "Query":
        return cls(QueryKind.TABLE_INFO, table_name)

    @classmethod
    def foreign_key_list(cls, table_name: str) -> "Query":
        return cls(QueryKind.FOREIGN_KEY_LIST, table_name)

    @classmethod
    def index_list(cls, table_name: str) -> "Query":
        return cls(QueryKind.INDEX_LIST, table_name)

    @classmethod
    def index_info(cls, index_name: Optional[str]) -> "Query":
        return cls(QueryKind.INDEX_INFO, index_name or "")

    @property
    def key(self) -> str:
        """Stable lookup key, e.g. ``table_info:users``"""
        if self.kind == QueryKind.LIST_TABLES:
            return self.kind.value
        return f"{self.kind.value}:{self.target or ''}"

    def to_sql(self) -> str:
        """Render the SQLite statement answering this query"""
        if self.kind == QueryKind.LIST_TABLES:
            return "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
        return f"PRAGMA {self.kind.value}({quote_identifier(self.target)})"


@dataclass
class ResultSet:
    """Rows returned by the metadata executor, with named columns"""
    columns: List[str] = field(default_factory=list)
    rows: List[List[Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ResultSet":
        """Build from a ``{columns: [...], rows: [[...]]}`` mapping"""
        if not data:
            return cls()
        return cls(
            columns=list(data.get('columns') or []),
            rows=[list(row) for row in data.get('rows') or []]
        )

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def records(self) -> Iterator[Dict[str, Any]]:
        """Bind each row's values to the column names"""
        for row in self.rows:
            if len(row) < len(self.columns):
                raise ValueError(
                    f"Row has {len(row)} values but result set declares "
                    f"{len(self.columns)} columns"
                )
            yield dict(zip(self.columns, row))

    def rows_as(self, model: Type[RowModel]) -> List[RowModel]:
        """
        Map every row to a typed catalog row

        Rows that do not fit the model are skipped with a warning.
        """
        typed = []
        for record in self.records():
            try:
                typed.append(model.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed {model.__name__} row {record}: {e}")
        return typed

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {'columns': self.columns, 'rows': self.rows}


class CatalogRow(BaseModel):
    """Base for typed catalog rows"""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)


class TableListRow(CatalogRow):
    """Row of the table list"""
    name: str


class TableInfoRow(CatalogRow):
    """Row of PRAGMA table_info"""
    cid: int
    name: str
    type: Optional[str] = None
    notnull: bool = False
    dflt_value: Optional[Any] = None
    pk: int = 0


class ForeignKeyListRow(CatalogRow):
    """Row of PRAGMA foreign_key_list"""
    id: int
    seq: int = 0
    table: str
    from_column: str = Field(alias='from')
    to: Optional[str] = None
    on_update: Optional[str] = None
    on_delete: Optional[str] = None
    match: Optional[str] = None


class IndexListRow(CatalogRow):
    """Row of PRAGMA index_list"""
    seq: int = 0
    name: Optional[str] = None
    unique: bool = False
    origin: Optional[str] = None
    partial: bool = False


class IndexInfoRow(CatalogRow):
    """Row of PRAGMA index_info"""
    seqno: int = 0
    cid: Optional[int] = None
    name: Optional[str] = None

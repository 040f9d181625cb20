"""
Schema extraction from structural catalog queries
"""
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from sqlite_erd.core.config import ExtractionConfig
from sqlite_erd.core.layout import Layout
from sqlite_erd.executors.base import MetadataExecutor
from sqlite_erd.models.catalog import (
    ForeignKeyListRow, IndexInfoRow, IndexListRow, Query, ResultSet,
    TableInfoRow, TableListRow
)
from sqlite_erd.models.schema import (
    Column, DefaultExpression, ForeignKeyAction, Index, PartialForeignKey, PartialTable
)

logger = logging.getLogger(__name__)

DEFAULT_TYPE = "ANY"
PRIMARY_KEY_ORIGIN = "pk"

_INTEGER_LITERAL = re.compile(r'^[+-]?[0-9]+$')
_HEX_LITERAL = re.compile(r'^[+-]?0[xX][0-9A-Fa-f]+$')
_REAL_LITERAL = re.compile(r'^[+-]?([0-9]+\.[0-9]*|\.[0-9]+|[0-9]+(?=[eE]))([eE][+-]?[0-9]+)?$')
_STRING_LITERAL = re.compile(r"^'((?:[^']|'')*)'$", re.DOTALL)
_BLOB_LITERAL = re.compile(r"^[xX]'((?:[0-9A-Fa-f]{2})*)'$")
_BOOLEAN_LITERALS = {'TRUE': True, 'FALSE': False}


def parse_default(value: Any) -> Any:
    """
    Turn a catalog default into a typed value

    The SQLite catalog reports defaults as the text of the DEFAULT
    expression. Literal text becomes an int, float, str or bytes value;
    anything else, NULL included, is kept as a DefaultExpression.
    Non-text values are returned unchanged.
    """
    if not isinstance(value, str):
        return value
    text = value.strip()
    if _INTEGER_LITERAL.match(text):
        return int(text)
    if _HEX_LITERAL.match(text):
        return int(text, 16)
    if _REAL_LITERAL.match(text):
        return float(text)
    match = _STRING_LITERAL.match(text)
    if match:
        return match.group(1).replace("''", "'")
    match = _BLOB_LITERAL.match(text)
    if match:
        return bytes.fromhex(match.group(1))
    if text.upper() in _BOOLEAN_LITERALS:
        return _BOOLEAN_LITERALS[text.upper()]
    return DefaultExpression(text)


def table_from_result(table_name: str, result: ResultSet) -> Tuple[PartialTable, Index]:
    """
    Build a table and its primary key from the column catalog

    Args:
        table_name: Name of the table
        result: PRAGMA table_info result

    Returns:
        The table and its primary key index. The index has no columns when
        the table declares no primary key and must not be registered then.
    """
    rows = result.rows_as(TableInfoRow)
    columns = [
        Column(
            name=row.name,
            type=row.type or DEFAULT_TYPE,
            nullable=not row.notnull,
            default=parse_default(row.dflt_value)
        )
        for row in rows
    ]

    # Primary key ordinal gives the composite key order
    pk_rows = sorted((row for row in rows if row.pk > 0), key=lambda row: row.pk)
    by_name = {col.name: col for col in columns}
    primary_key = Index(
        columns=[by_name[row.name] for row in pk_rows],
        unique=True,
        primary_key=True
    )

    return PartialTable(name=table_name, columns=columns), primary_key


def foreign_keys_from_result(table: PartialTable, result: ResultSet,
                             fallback_action: ForeignKeyAction = ForeignKeyAction.NO_ACTION
                             ) -> List[PartialForeignKey]:
    """
    Group foreign key catalog rows into partial foreign keys

    Rows sharing an id form one composite key; their order is the column order.
    """
    groups: Dict[int, List[ForeignKeyListRow]] = {}
    for row in result.rows_as(ForeignKeyListRow):
        groups.setdefault(row.id, []).append(row)

    foreign_keys = []
    for fk_id, rows in groups.items():
        first = rows[0]
        source_columns = []
        target_columns = []
        for row in rows:
            column = table.get_column(row.from_column)
            if column is None:
                logger.debug(
                    f"Foreign key {fk_id} on {table.name} names unknown column {row.from_column}"
                )
                continue
            source_columns.append(column)
            target_columns.append(row.to)

        if not source_columns:
            continue

        foreign_keys.append(PartialForeignKey(
            source_table=table.name,
            source_columns=source_columns,
            target_table=first.table,
            target_columns=target_columns,
            on_update=_parse_action(first.on_update, fallback_action, table.name),
            on_delete=_parse_action(first.on_delete, fallback_action, table.name)
        ))

    return foreign_keys


def _parse_action(value: Optional[str], fallback: ForeignKeyAction, table_name: str) -> ForeignKeyAction:
    action = ForeignKeyAction.parse(value, None)
    if action is None:
        if value:
            logger.warning(
                f"Unrecognized foreign key action {value!r} on {table_name}, using {fallback.value}"
            )
        return fallback
    return action


def indexes_from_result(table: PartialTable, index_list: List[IndexListRow],
                        index_info: Dict[str, ResultSet]) -> List[Index]:
    """
    Build indexes from the index catalog and per-index column catalogs

    Args:
        table: Table owning the indexes
        index_list: Typed PRAGMA index_list rows
        index_info: PRAGMA index_info result per index name

    Returns:
        One index per catalog row; columns not found in the table are left out.
        A partial index, or one that lost columns that way, is not unique
        over the remaining columns and is registered as non-unique.
    """
    indexes = []
    for entry in index_list:
        info = index_info.get(entry.name or "", ResultSet())
        info_rows = sorted(info.rows_as(IndexInfoRow), key=lambda row: row.seqno)
        columns = []
        for row in info_rows:
            column = table.get_column(row.name) if row.name is not None else None
            if column is not None:
                columns.append(column)

        unique = entry.unique
        if unique and (entry.partial or len(columns) < len(info_rows)):
            logger.debug(f"Index {entry.name} on {table.name} does not guarantee uniqueness")
            unique = False

        indexes.append(Index(
            columns=columns,
            unique=unique,
            primary_key=entry.origin == PRIMARY_KEY_ORIGIN
        ))
    return indexes


class SchemaExtractor:
    """Walks the table catalog of an executor and builds a Layout"""

    def __init__(self, executor: MetadataExecutor, config: Optional[ExtractionConfig] = None):
        self.executor = executor
        self.config = config or ExtractionConfig()

    def extract(self) -> Layout:
        """
        Extract every table, index and foreign key into a new Layout

        Returns:
            Populated Layout for this snapshot
        """
        layout = Layout()

        table_names = self.get_table_names()
        logger.info(f"Found {len(table_names)} tables to extract")

        for table_name in table_names:
            self._extract_table(layout, table_name)

        return layout

    def get_table_names(self) -> List[str]:
        """List tables, honouring include/exclude filters"""
        rows = self.executor.execute(Query.list_tables()).rows_as(TableListRow)
        names = [row.name for row in rows]

        if self.config.include_tables:
            names = [name for name in names if name in self.config.include_tables]
        if self.config.exclude_tables:
            names = [name for name in names if name not in self.config.exclude_tables]
        return names

    def _extract_table(self, layout: Layout, table_name: str) -> None:
        table_info = self.executor.execute(Query.table_info(table_name))
        if table_info.is_empty:
            logger.debug(f"Table {table_name} has no columns, skipping")
            return

        table, primary_key = table_from_result(table_name, table_info)
        layout.add_table(table)
        if primary_key.columns:
            layout.add_index(table_name, primary_key)

        fk_result = self.executor.execute(Query.foreign_key_list(table_name))
        for fk in foreign_keys_from_result(table, fk_result, self.config.fallback_action):
            layout.add_foreign_key(fk)

        index_list = self.executor.execute(Query.index_list(table_name)).rows_as(IndexListRow)
        index_info = {
            entry.name or "": self.executor.execute(Query.index_info(entry.name))
            for entry in index_list
        }
        for index in indexes_from_result(table, index_list, index_info):
            if not index.columns:
                logger.debug(f"Index on {table_name} covers no table columns, skipping")
                continue
            layout.add_index(table_name, index)

        logger.debug(
            f"Extracted {table_name}: {len(table.columns)} columns, "
            f"{len(index_list)} catalog indexes, {len(fk_result.rows)} foreign key rows"
        )


def build_layout(executor: MetadataExecutor, config: Optional[ExtractionConfig] = None) -> Layout:
    """Extract a Layout from an executor"""
    return SchemaExtractor(executor, config).extract()

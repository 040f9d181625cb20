"""
Relational model: registry of tables, indexes and foreign keys
"""
import logging
from typing import Dict, List, Optional

from sqlite_erd.models.schema import (
    ForeignKey, Index, PartialForeignKey, PartialTable, Table
)

logger = logging.getLogger(__name__)


class Layout:
    """
    In-memory registry of one database snapshot

    Populated during extraction through ``add_table``, ``add_index`` and
    ``add_foreign_key``; read-only afterwards. Foreign keys are kept in
    partial form and resolved against the registered tables on every read,
    so a foreign key may be added before its target table is known.
    """

    def __init__(self):
        self._tables: Dict[str, PartialTable] = {}
        self._indexes: Dict[str, List[Index]] = {}
        self._foreign_keys: List[PartialForeignKey] = []

    def add_table(self, table: PartialTable) -> None:
        """Register a table, replacing any table of the same name"""
        self._tables[table.name] = PartialTable(table.name, table.columns)

    def add_index(self, table_name: str, index: Index) -> None:
        """Register an index unless an equal one is already present"""
        indexes = self._indexes.setdefault(table_name, [])
        if index in indexes:
            logger.debug(f"Skipping duplicate index {index.column_names} on {table_name}")
            return
        indexes.append(index)

    def add_foreign_key(self, foreign_key: PartialForeignKey) -> None:
        """Queue a foreign key; it is resolved when read"""
        self._foreign_keys.append(foreign_key)

    @property
    def table_names(self) -> List[str]:
        return list(self._tables)

    def has_table(self, name: str) -> bool:
        return name in self._tables

    def get_table(self, name: str) -> Optional[Table]:
        """
        Get a fully assembled table

        Returns:
            Table with its deduplicated indexes, or None if not registered
        """
        table = self._tables.get(name)
        if table is None:
            return None
        return Table(
            name=table.name,
            columns=table.columns,
            indexes=tuple(self._indexes.get(name, ()))
        )

    def get_tables(self) -> List[Table]:
        """All tables in registration order"""
        return [self.get_table(name) for name in self._tables]

    def get_foreign_keys(self) -> List[ForeignKey]:
        """
        Resolve queued foreign keys against the registered tables

        Foreign keys whose source or target table is missing are dropped.
        Target column names that do not exist in the target table are left
        out, which may leave a foreign key without target columns.
        """
        resolved = []
        for fk in self._foreign_keys:
            source = self.get_table(fk.source_table)
            target = self.get_table(fk.target_table)
            if source is None or target is None:
                logger.debug(
                    f"Dropping foreign key {fk.source_table} -> {fk.target_table}: table not found"
                )
                continue

            target_columns = []
            for name in self._target_column_names(fk, target):
                column = target.get_column(name) if name is not None else None
                if column is None:
                    logger.debug(f"Foreign key target column {fk.target_table}.{name} not found")
                    continue
                target_columns.append(column)

            resolved.append(ForeignKey(
                source=source,
                source_columns=fk.source_columns,
                target=target,
                target_columns=target_columns,
                on_update=fk.on_update,
                on_delete=fk.on_delete
            ))
        return resolved

    @staticmethod
    def _target_column_names(fk: PartialForeignKey, target: Table) -> List[Optional[str]]:
        # A missing name refers to the target's primary key column at that position
        names = list(fk.target_columns)
        if all(name is not None for name in names):
            return names
        primary_key = target.primary_key
        pk_names = primary_key.column_names if primary_key else ()
        return [
            pk_names[position] if name is None and position < len(pk_names) else name
            for position, name in enumerate(names)
        ]

    def to_dict(self) -> dict:
        """Debug dump of the registry"""
        return {
            'tables': {name: table.to_dict() for name, table in self._tables.items()},
            'indexes': {
                name: [index.to_dict() for index in indexes]
                for name, indexes in self._indexes.items()
            },
            'foreign_keys': [fk.to_dict() for fk in self._foreign_keys]
        }

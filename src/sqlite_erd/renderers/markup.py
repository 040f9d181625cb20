"""
Schema markup renderer (DBML)
"""
import logging
import re
from typing import Any, Iterable, List, Optional

from sqlite_erd.core.cardinality import classify
from sqlite_erd.core.config import MarkupConfig
from sqlite_erd.core.layout import Layout
from sqlite_erd.models.schema import Column, ForeignKey, Index, Table, default_kind
from sqlite_erd.utils.text import indent, is_plain_word, transliterate

logger = logging.getLogger(__name__)

_TYPE_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*(\([0-9, ]*\))?$')


def quote_name(name: str) -> str:
    """Transliterate an identifier and quote it unless it is a plain word"""
    name = transliterate(name)
    if is_plain_word(name):
        return name
    return '"' + name.replace('\\', '\\\\').replace('"', '\\"') + '"'


def quote_type(column_type: str) -> str:
    column_type = transliterate(column_type)
    if _TYPE_PATTERN.match(column_type):
        return column_type
    return '"' + column_type.replace('\\', '\\\\').replace('"', '\\"') + '"'


def quote_string(value: str) -> str:
    return "'" + value.replace('\\', '\\\\').replace("'", "\\'") + "'"


class MarkupRenderer:
    """Renders a Layout as DBML table blocks and Ref lines"""

    def __init__(self, config: Optional[MarkupConfig] = None):
        self.config = config or MarkupConfig()

    def render(self, layout: Layout) -> str:
        """Render the layout to DBML source"""
        blocks = [self.render_table(table) for table in layout.get_tables()]

        refs = []
        for foreign_key in layout.get_foreign_keys():
            ref = self.render_ref(foreign_key)
            if ref is not None:
                refs.append(ref)
        if refs:
            blocks.append("\n".join(refs))

        logger.info(f"Rendered markup with {len(layout.table_names)} tables and {len(refs)} refs")
        return "\n\n".join(blocks) + "\n"

    def render_table(self, table: Table) -> str:
        """Render one ``Table name { ... }`` block"""
        primary_key = table.primary_key
        inline_pk = primary_key.column_names if primary_key and len(primary_key.columns) == 1 else ()

        lines = [
            self.render_column(column, column.name in inline_pk)
            for column in table.columns
        ]

        index_lines = []
        for index in table.indexes:
            if index.primary_key and len(index.columns) == 1:
                continue
            index_lines.append(self.render_index(index))
        if index_lines:
            lines.append("indexes {")
            lines.append(indent("\n".join(index_lines), self.config.indent))
            lines.append("}")

        body = indent("\n".join(lines), self.config.indent)
        return f"Table {quote_name(table.name)} {{\n{body}\n}}"

    def render_column(self, column: Column, is_primary_key: bool = False) -> str:
        settings = []
        if is_primary_key:
            settings.append("pk")
        settings.append("null" if column.nullable else "not null")
        if column.default is not None:
            settings.append(f"default: {self.render_default(column.default)}")
        return f"{quote_name(column.name)} {quote_type(column.type)} [{', '.join(settings)}]"

    def render_default(self, value: Any) -> str:
        """Literal for a column default value"""
        kind = default_kind(value)
        if kind == 'null':
            return "null"
        if kind == 'integer':
            if isinstance(value, bool):
                return "true" if value else "false"
            return str(value)
        if kind == 'float':
            return repr(value)
        if kind == 'text':
            return quote_string(value)
        if kind == 'expression':
            return f"`{value.text}`"
        if kind == 'binary':
            return quote_string(self.config.binary_placeholder)
        return quote_string(self.config.unsupported_placeholder)

    def render_index(self, index: Index) -> str:
        settings = []
        if index.primary_key:
            settings.append("pk")
        elif index.unique:
            settings.append("unique")
        columns = self._column_list(index.column_names, force_parens=False)
        if settings:
            return f"{columns} [{', '.join(settings)}]"
        return columns

    def render_ref(self, foreign_key: ForeignKey) -> Optional[str]:
        """
        Render a ``Ref:`` line

        Returns None when the foreign key has no resolved target columns or
        the two sides do not pair up.
        """
        if not foreign_key.target_columns:
            return None
        if len(foreign_key.source_columns) != len(foreign_key.target_columns):
            logger.debug(
                f"Skipping ref {foreign_key.source.name} -> {foreign_key.target.name}: "
                f"column counts differ"
            )
            return None

        symbol = classify(foreign_key).markup_symbol
        source = f"{quote_name(foreign_key.source.name)}.{self._column_list(foreign_key.source_column_names)}"
        target = f"{quote_name(foreign_key.target.name)}.{self._column_list(foreign_key.target_column_names)}"
        actions = (
            f"delete: {foreign_key.on_delete.value.lower()}, "
            f"update: {foreign_key.on_update.value.lower()}"
        )
        return f"Ref: {source} {symbol} {target} [{actions}]"

    @staticmethod
    def _column_list(names: Iterable[str], force_parens: bool = True) -> str:
        quoted: List[str] = [quote_name(name) for name in names]
        if len(quoted) == 1 and not force_parens:
            return quoted[0]
        return f"({', '.join(quoted)})"

"""
Graph document renderer (Graphviz DOT)
"""
import html
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from graphviz import Digraph
from graphviz.quoting import attr_list, quote

from sqlite_erd.core.cardinality import Cardinality, classify
from sqlite_erd.core.config import GraphStyleConfig
from sqlite_erd.core.layout import Layout
from sqlite_erd.models.schema import Column, ForeignKey, Table

logger = logging.getLogger(__name__)

HEADER_PORT = "f0"


@dataclass
class ColumnPort:
    """Port of a single column row"""
    column: Column
    id: str


@dataclass
class GroupPort:
    """Port of a synthetic row for a multi-column index or foreign key"""
    columns: Sequence[Column]
    column_names: Counter
    id: str
    index: bool = False
    unique: bool = False

    def matches(self, names: Counter) -> bool:
        return self.column_names == names


@dataclass
class DotTable:
    """Ports allocated for one table node"""
    name: str
    columns: List[ColumnPort] = field(default_factory=list)
    groups: List[GroupPort] = field(default_factory=list)

    def find_port(self, columns: Sequence[Column]) -> Optional[str]:
        """Port for a column selection: the column's own row, or its grouping row"""
        if not columns:
            return None
        if len(columns) == 1:
            for mapping in self.columns:
                if mapping.column.name == columns[0].name:
                    return mapping.id
            return None
        names = Counter(col.name for col in columns)
        for group in self.groups:
            if group.matches(names):
                return group.id
        return None

    def has_group(self, names: Counter) -> bool:
        return any(group.matches(names) for group in self.groups)


class GraphRenderer:
    """
    Renders a Layout as a Graphviz digraph

    One node per table with a port per column and per composite grouping,
    one edge per resolvable foreign key labelled with its cardinality.
    Port ids are allocated from a counter owned by the renderer and reset on
    every ``render`` call; ``f0`` is the table header.
    """

    def __init__(self, style: Optional[GraphStyleConfig] = None):
        self.style = style or GraphStyleConfig()
        self._port_counter = 1

    def _next_port(self) -> str:
        port = f"f{self._port_counter}"
        self._port_counter += 1
        return port

    def render(self, layout: Layout) -> str:
        """Render the layout to DOT source"""
        self._port_counter = 1
        foreign_keys = layout.get_foreign_keys()

        dot = self._new_graph()
        dot_tables: Dict[str, DotTable] = {}
        for table in layout.get_tables():
            dot_table = self._allocate_ports(table, foreign_keys)
            dot_tables[table.name] = dot_table
            dot.node(table.name, label=self._table_label(table, dot_table), id=table.name)

        edges = 0
        for foreign_key in foreign_keys:
            if self._add_edge(dot, foreign_key, dot_tables):
                edges += 1

        logger.info(f"Rendered graph with {len(dot_tables)} tables and {edges} relationships")
        return dot.source

    def _new_graph(self) -> Digraph:
        style = self.style
        return Digraph(
            name=style.name,
            graph_attr={
                'charset': 'utf-8',
                'rankdir': style.rankdir,
                'fontname': style.fontname,
                'fontsize': str(style.fontsize),
                'fontcolor': style.text_color,
                'bgcolor': style.background,
            },
            node_attr={
                'penwidth': '0',
                'margin': '0',
                'fontname': style.fontname,
                'fontsize': str(style.fontsize),
                'fontcolor': style.text_color,
                'width': '2',
                'height': '2',
            },
            edge_attr={
                'fontname': style.fontname,
                'fontsize': str(style.fontsize),
                'fontcolor': style.text_color,
                'color': style.line_color,
            },
        )

    def _allocate_ports(self, table: Table, foreign_keys: List[ForeignKey]) -> DotTable:
        dot_table = DotTable(name=table.name)
        for column in table.columns:
            dot_table.columns.append(ColumnPort(column=column, id=self._next_port()))

        for index in table.indexes:
            if index.primary_key or len(index.columns) < 2:
                continue
            names = Counter(index.column_names)
            if dot_table.has_group(names):
                continue
            dot_table.groups.append(GroupPort(
                columns=index.columns,
                column_names=names,
                id=self._next_port(),
                index=True,
                unique=index.unique
            ))

        for foreign_key in foreign_keys:
            sides = []
            if foreign_key.source.name == table.name:
                sides.append(foreign_key.source_columns)
            if foreign_key.target.name == table.name:
                sides.append(foreign_key.target_columns)
            for columns in sides:
                if len(columns) < 2:
                    continue
                names = Counter(col.name for col in columns)
                if dot_table.has_group(names):
                    continue
                dot_table.groups.append(GroupPort(
                    columns=columns,
                    column_names=names,
                    id=self._next_port()
                ))

        return dot_table

    def _table_label(self, table: Table, dot_table: DotTable) -> str:
        style = self.style
        name = html.escape(table.name)
        parts = [
            f'<<TABLE BORDER="2" COLOR="{style.border_color}" CELLBORDER="1" CELLSPACING="0" CELLPADDING="10">',
            f'<TR><TD PORT="{HEADER_PORT}" BGCOLOR="{style.header_color}">'
            f'<FONT COLOR="{style.header_text_color}"><B>{name}</B></FONT></TD></TR>',
        ]
        longest = max((len(col.name) for col in table.columns), default=0)
        for mapping in dot_table.columns:
            parts.append(self._column_row(
                mapping.column,
                mapping.id,
                table.is_primary_key_column(mapping.column),
                longest
            ))
        for group in dot_table.groups:
            flags = []
            if group.index:
                flags.append("INDEX")
            if group.unique:
                flags.append("UNIQUE")
            suffix = f" ({', '.join(flags)})" if flags else ""
            names = html.escape(", ".join(col.name for col in group.columns))
            parts.append(
                f'<TR><TD PORT="{group.id}" BGCOLOR="{style.row_color}" ALIGN="CENTER">'
                f'<FONT COLOR="{style.header_color}"><I>    {names}{suffix}    </I></FONT></TD></TR>'
            )
        parts.append("</TABLE>>")
        return "\n".join(parts)

    def _column_row(self, column: Column, port: str, is_primary_key: bool, pad_to: int) -> str:
        padding = " " * (pad_to - len(column.name) + 2)
        name = html.escape(column.name)
        if is_primary_key:
            name = f"<B>{name}</B>"
        column_type = html.escape(column.type) + (" NULL" if column.nullable else "")
        return "\n".join([
            f'<TR><TD ALIGN="LEFT" PORT="{port}" BGCOLOR="{self.style.row_color}">'
            f'<TABLE CELLPADDING="0" CELLSPACING="0" BORDER="0">',
            f'<TR><TD ALIGN="LEFT">{name}<FONT COLOR="transparent">{padding}</FONT></TD>',
            f'<TD ALIGN="RIGHT"><FONT><I>{column_type}</I></FONT></TD>',
            "</TR></TABLE></TD></TR>",
        ])

    def _labels(self, cardinality: Cardinality):
        glyphs = {"1": self.style.one_label, "∞": self.style.many_label}
        return glyphs[cardinality.tail_label], glyphs[cardinality.head_label]

    def _add_edge(self, dot: Digraph, foreign_key: ForeignKey, dot_tables: Dict[str, DotTable]) -> bool:
        source = dot_tables.get(foreign_key.source.name)
        target = dot_tables.get(foreign_key.target.name)
        if source is None or target is None:
            return False

        if not foreign_key.target_columns:
            logger.debug(
                f"Skipping edge {foreign_key.source.name} -> {foreign_key.target.name}: "
                f"no target columns"
            )
            return False

        source_port = source.find_port(foreign_key.source_columns)
        target_port = target.find_port(foreign_key.target_columns)
        if source_port is None or target_port is None:
            logger.debug(
                f"Skipping edge {foreign_key.source.name} -> {foreign_key.target.name}: "
                f"no matching port"
            )
            return False

        tail_label, head_label = self._labels(classify(foreign_key))
        style = self.style
        attributes = {
            'dir': 'forward',
            'penwidth': str(style.edge_width),
            'color': style.line_color,
            'headlabel': head_label,
            'taillabel': tail_label,
            'labeldistance': str(style.label_distance),
            'labelfontsize': str(style.label_fontsize),
            'arrowhead': style.arrowhead,
            'arrowsize': str(style.arrowsize),
        }
        # Table names are quoted whole; Digraph.edge would split them on colons
        tail = f"{quote(foreign_key.source.name)}:{source_port}"
        head = f"{quote(foreign_key.target.name)}:{target_port}"
        dot.body.append(f"\t{tail} -> {head}{attr_list(kwargs=attributes)}\n")
        return True

"""
Unit tests for data models
"""
import pytest

from sqlite_erd.models.catalog import (
    ForeignKeyListRow, IndexInfoRow, Query, QueryKind, ResultSet, TableInfoRow,
    quote_identifier
)
from sqlite_erd.models.schema import (
    Column, DefaultExpression, ForeignKeyAction, Index, PartialForeignKey, PartialTable,
    Table, default_kind
)


class TestIndex:
    """Test Index equality"""

    def test_equal_by_column_names_and_flags(self):
        """Indexes built from different Column objects with the same names are equal"""
        first = Index([Column('a', 'INTEGER'), Column('b')], unique=True, primary_key=True)
        second = Index([Column('a', 'TEXT', nullable=False), Column('b')], unique=True, primary_key=True)

        assert first == second
        assert hash(first) == hash(second)

    def test_column_order_matters(self):
        first = Index([Column('a'), Column('b')], unique=True)
        second = Index([Column('b'), Column('a')], unique=True)

        assert first != second

    def test_flags_matter(self):
        columns = [Column('a')]

        assert Index(columns, unique=True) != Index(columns, unique=False)
        assert Index(columns, unique=True, primary_key=True) != Index(columns, unique=True)

    def test_column_names(self):
        index = Index([Column('a'), Column('b')])

        assert index.column_names == ('a', 'b')
        assert index.to_dict() == {'columns': ['a', 'b'], 'unique': False, 'primary_key': False}


class TestTable:
    """Test Table helpers"""

    def test_primary_key(self):
        id_column = Column('id', 'INTEGER')
        name_column = Column('name', 'TEXT')
        table = Table(
            name='users',
            columns=[id_column, name_column],
            indexes=[Index([name_column], unique=True), Index([id_column], True, True)]
        )

        assert table.primary_key.column_names == ('id',)
        assert table.is_primary_key_column(id_column) is True
        assert table.is_primary_key_column(name_column) is False

    def test_without_primary_key(self):
        table = Table(name='log', columns=[Column('line')])

        assert table.primary_key is None
        assert table.get_column('line') == Column('line')
        assert table.get_column('missing') is None

    def test_partial_table_to_dict(self):
        table = PartialTable('t', [Column('a', 'INTEGER', False, 5)])

        assert table.to_dict() == {
            'name': 't',
            'columns': [{
                'name': 'a', 'type': 'INTEGER', 'nullable': False,
                'default': 5, 'default_kind': 'integer'
            }]
        }


class TestForeignKeyAction:
    """Test ForeignKeyAction parsing"""

    @pytest.mark.parametrize("value,expected", [
        ("CASCADE", ForeignKeyAction.CASCADE),
        ("restrict", ForeignKeyAction.RESTRICT),
        ("SET NULL", ForeignKeyAction.SET_NULL),
        ("set  default", ForeignKeyAction.SET_DEFAULT),
        (" NO ACTION ", ForeignKeyAction.NO_ACTION),
    ])
    def test_parse_known(self, value, expected):
        assert ForeignKeyAction.parse(value, ForeignKeyAction.CASCADE) is expected

    @pytest.mark.parametrize("value", [None, "", "EXPLODE", 3])
    def test_parse_unknown_uses_default(self, value):
        assert ForeignKeyAction.parse(value, ForeignKeyAction.RESTRICT) is ForeignKeyAction.RESTRICT


def test_default_kind():
    assert default_kind(None) == 'null'
    assert default_kind(3) == 'integer'
    assert default_kind(True) == 'integer'
    assert default_kind(1.5) == 'float'
    assert default_kind("x") == 'text'
    assert default_kind(b"\x00") == 'binary'
    assert default_kind(object()) == 'unsupported'
    assert default_kind(DefaultExpression("CURRENT_TIMESTAMP")) == 'expression'
    assert default_kind(DefaultExpression("NULL")) == 'null'


def test_parse_without_default_returns_none():
    assert ForeignKeyAction.parse("EXPLODE", None) is None


def test_partial_foreign_key_to_dict():
    fk = PartialForeignKey(
        source_table='posts',
        source_columns=[Column('author_id')],
        target_table='users',
        target_columns=[None],
        on_delete=ForeignKeyAction.CASCADE
    )

    assert fk.to_dict() == {
        'source_table': 'posts',
        'source_columns': ['author_id'],
        'target_table': 'users',
        'target_columns': [None],
        'on_update': 'NO ACTION',
        'on_delete': 'CASCADE'
    }


class TestQuery:
    """Test query descriptors"""

    def test_list_tables_sql(self):
        query = Query.list_tables()

        assert query.kind == QueryKind.LIST_TABLES
        assert query.key == 'list_tables'
        assert "sqlite_master" in query.to_sql()
        assert "NOT LIKE 'sqlite_%'" in query.to_sql()

    def test_pragma_sql_quotes_identifiers(self):
        assert Query.table_info('users').to_sql() == 'PRAGMA table_info("users")'
        assert Query.foreign_key_list('my "table"').to_sql() == 'PRAGMA foreign_key_list("my ""table""")'
        assert Query.index_list('t').to_sql() == 'PRAGMA index_list("t")'

    def test_unnamed_index(self):
        query = Query.index_info(None)

        assert query.to_sql() == 'PRAGMA index_info("")'
        assert query.key == 'index_info:'

    def test_key(self):
        assert Query.table_info('users').key == 'table_info:users'
        assert Query.table_info('users') == Query(QueryKind.TABLE_INFO, 'users')

    def test_quote_identifier(self):
        assert quote_identifier('a') == '"a"'
        assert quote_identifier('') == '""'


class TestResultSet:
    """Test result sets and typed rows"""

    def test_records(self):
        result = ResultSet(columns=['a', 'b'], rows=[[1, 2], [3, 4]])

        assert list(result.records()) == [{'a': 1, 'b': 2}, {'a': 3, 'b': 4}]
        assert result.is_empty is False

    def test_empty(self):
        assert ResultSet().is_empty is True
        assert ResultSet.from_dict(None).rows == []

    def test_short_row_is_an_error(self):
        result = ResultSet(columns=['a', 'b'], rows=[[1]])

        with pytest.raises(ValueError):
            list(result.records())

    def test_rows_as_table_info(self):
        result = ResultSet(
            columns=['cid', 'name', 'type', 'notnull', 'dflt_value', 'pk'],
            rows=[[0, 'id', 'INTEGER', 1, None, 1], [1, 'data', '', 0, b'\x01', 0]]
        )

        rows = result.rows_as(TableInfoRow)

        assert rows[0].notnull is True
        assert rows[0].pk == 1
        assert rows[1].type == ''
        assert rows[1].dflt_value == b'\x01'

    def test_rows_as_skips_malformed_rows(self):
        result = ResultSet(
            columns=['cid', 'name', 'type', 'notnull', 'dflt_value', 'pk'],
            rows=[[0, None, 'INTEGER', 0, None, 0], [1, 'ok', 'TEXT', 0, None, 0]]
        )

        rows = result.rows_as(TableInfoRow)

        assert [row.name for row in rows] == ['ok']

    def test_foreign_key_row_alias(self):
        result = ResultSet.from_dict({
            'columns': ['id', 'seq', 'table', 'from', 'to', 'on_update', 'on_delete', 'match'],
            'rows': [[0, 0, 'users', 'author_id', None, 'NO ACTION', 'CASCADE', 'NONE']]
        })

        row = result.rows_as(ForeignKeyListRow)[0]

        assert row.from_column == 'author_id'
        assert row.to is None
        assert row.on_delete == 'CASCADE'

    def test_index_info_expression_column(self):
        result = ResultSet(columns=['seqno', 'cid', 'name'], rows=[[0, -2, None]])

        row = result.rows_as(IndexInfoRow)[0]

        assert row.cid == -2
        assert row.name is None

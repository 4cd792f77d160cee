"""
============================================================
Dialect-specific DDL synthesis for the target warehouses.
============================================================

Each target engine is one DdlDialect implementation supplying its physical
types, bookkeeping columns (row version, update timestamp) and any extra
migration blocks. generate_ddl() and generate_enhancement_ddl() drive the
shared block layout for all of them.

Dialects:
    SnowflakeDialect: CREATE TABLE IF NOT EXISTS, INT row version, grant
    AdwDialect: CREATE TABLE, NUMBER row version, TIMESTAMP(9) update column,
        no enhancement path
    VerticaDialect: CREATE TABLE IF NOT EXISTS plus a super projection block
        and a global temporary mirror table block

Generation is all-or-nothing: the whole migration text is built in memory
and returned only when every column mapped successfully. An unsupported
native type raises UnsupportedTypeError naming the table, column and dialect.

Example:
    >>> from sql.dialects import generate_ddl, generate_enhancement_ddl
    >>> from sql.type_mapper import Dialect
    >>>
    >>> vertica_ddl = generate_ddl(schema, Dialect.VERTICA)
    >>> snowflake_alter = generate_enhancement_ddl(enhancement_schema, 'snowflake')
"""

from typing import List, Optional, Union

from core.config import config
from core.logger import get_logger
from models.column_model import ColumnDescriptor, TableSchema
from sql.ddl import (
    DdlContext,
    EnhancementNotSupportedError,
    MigrationSequence,
    alter_table_add_column,
    column_definition,
    create_global_temporary_table,
    create_projection,
    create_table,
    grant_select,
    migration_header,
    set_search_path,
)
from sql.type_mapper import Dialect, UnsupportedTypeError, physical_type, type_family

logger = get_logger(__name__)

ROW_VERSION_COLUMN = '_ROW_VERSION'
UPDATE_TIMESTAMP_COLUMN = 'ODS_UPDATE_DT_TM'


class DdlDialect:
    """Capabilities one target engine contributes to DDL synthesis.

    Subclasses override the class attributes and, where the engine needs
    more than a table and a grant, extra_blocks().
    """

    dialect: Dialect
    display_name: str = ''
    if_not_exists: bool = True
    uses_ticket: bool = True
    supports_enhancement: bool = True
    enhancement_if_not_exists: bool = False

    def physical_type(self, column: ColumnDescriptor) -> str:
        return physical_type(self.dialect, column.native_type, column.declared_length)

    def row_version_clause(self) -> str:
        raise NotImplementedError

    def timestamp_clause(self) -> str:
        raise NotImplementedError

    def extra_blocks(
        self,
        schema: TableSchema,
        sequence: MigrationSequence,
        context: DdlContext
    ) -> List[str]:
        return []

    def header(self, sequence: MigrationSequence, description: str,
               object_name: str, context: DdlContext) -> str:
        ticket = context.ticket if self.uses_ticket else None
        return migration_header(sequence.next(), description, object_name, ticket=ticket)

    def column_lines(self, schema: TableSchema) -> List[str]:
        """Typed column lines of the CREATE TABLE body, bookkeeping excluded."""
        lines = []
        for column in schema.columns:
            try:
                column_type = self.physical_type(column)
            except UnsupportedTypeError as e:
                raise e.with_context(
                    dialect=self.dialect.value,
                    table_name=schema.table_name,
                    column_name=column.name
                ) from None
            lines.append(column_definition(column.name, column_type, nullable=column.nullable))
        return lines

    def table_block(
        self,
        schema: TableSchema,
        sequence: MigrationSequence,
        context: DdlContext
    ) -> str:
        lines = self.column_lines(schema)
        lines.append(self.row_version_clause())
        lines.append(self.timestamp_clause())
        return (
            self.header(sequence, f"Adding new {self.display_name} table", schema.table_name, context)
            + create_table(schema.table_name, lines, if_not_exists=self.if_not_exists)
            + grant_select(schema.table_name, context.schema_placeholder)
        )

    def enhancement_block(
        self,
        schema: TableSchema,
        sequence: MigrationSequence,
        context: DdlContext
    ) -> str:
        if not self.supports_enhancement:
            raise EnhancementNotSupportedError(
                f"{self.display_name} has no enhancement migration path"
            )

        new_fields = list(schema.new_field_names) or list(schema.column_names)
        description = f"Adding [{', '.join(new_fields)}] columns to table"
        statements = []
        for column in schema.columns:
            try:
                type_family(column.native_type)
            except UnsupportedTypeError as e:
                raise e.with_context(
                    dialect=self.dialect.value,
                    table_name=schema.table_name,
                    column_name=column.name
                ) from None
            # Native source type is written as-is on this path
            statements.append(alter_table_add_column(
                context.schema_placeholder,
                schema.table_name,
                column.name,
                column.native_type,
                nullable=column.nullable,
                default_value=column.default_value,
                if_not_exists=self.enhancement_if_not_exists
            ))

        return (
            self.header(sequence, description, schema.table_name, context)
            + "".join(statements)
        )


class SnowflakeDialect(DdlDialect):
    dialect = Dialect.SNOWFLAKE
    display_name = 'Snowflake'

    def row_version_clause(self) -> str:
        return column_definition(ROW_VERSION_COLUMN, 'INT', nullable=False, default_value='0')

    def timestamp_clause(self) -> str:
        return column_definition(
            UPDATE_TIMESTAMP_COLUMN, 'TIMESTAMPTZ', nullable=False, default_value='SYSDATE()'
        )


class AdwDialect(DdlDialect):
    """Oracle ADW: numeric row version and the engine's native TIMESTAMP(9)."""

    dialect = Dialect.ADW
    display_name = 'Oracle ADW'
    if_not_exists = False
    uses_ticket = False
    supports_enhancement = False

    def row_version_clause(self) -> str:
        return column_definition('ROW_VERSION', 'NUMBER', nullable=False, default_value='0')

    def timestamp_clause(self) -> str:
        return column_definition(UPDATE_TIMESTAMP_COLUMN, 'TIMESTAMP(9)', default_value='SYSDATE')


class VerticaDialect(DdlDialect):
    """Vertica: table, super projection and global temporary mirror."""

    dialect = Dialect.VERTICA
    display_name = 'Vertica'
    enhancement_if_not_exists = True

    def row_version_clause(self) -> str:
        return f"    {ROW_VERSION_COLUMN} int NOT NULL DEFAULT 0"

    def timestamp_clause(self) -> str:
        return column_definition(
            UPDATE_TIMESTAMP_COLUMN, 'TIMESTAMPTZ', nullable=False, default_value='SYSDATE()'
        )

    def extra_blocks(
        self,
        schema: TableSchema,
        sequence: MigrationSequence,
        context: DdlContext
    ) -> List[str]:
        return [
            self.projection_block(schema, sequence, context),
            self.temp_table_block(schema, sequence, context),
        ]

    def projection_block(
        self,
        schema: TableSchema,
        sequence: MigrationSequence,
        context: DdlContext
    ) -> str:
        table = schema.table_name
        projection = f"{table}_SUPER"
        keys = list(schema.primary_keys)
        if not keys:
            logger.warning(
                f"⚠️  {table} has no primary key: projection ORDER BY and SEGMENTED BY "
                f"need manual replacement"
            )
        column_names = list(schema.column_names) + [ROW_VERSION_COLUMN, UPDATE_TIMESTAMP_COLUMN]
        return (
            self.header(sequence, "Adding new Vertica projection", projection, context)
            + create_projection(
                table,
                projection,
                column_names,
                order_by=keys,
                segment_by=keys[0] if keys else None
            )
        )

    def temp_table_block(
        self,
        schema: TableSchema,
        sequence: MigrationSequence,
        context: DdlContext
    ) -> str:
        temp_table = f"{schema.table_name}_TEMP"
        lines = [
            column_definition(column.name, self.physical_type(column))
            for column in schema.columns
        ]
        lines.append(column_definition(ROW_VERSION_COLUMN, 'INT'))
        lines.append(column_definition(UPDATE_TIMESTAMP_COLUMN, 'TIMESTAMPTZ'))
        return (
            self.header(sequence, "Adding new Vertica temp table", temp_table, context)
            + set_search_path('public')
            + create_global_temporary_table(temp_table, lines)
            + set_search_path(context.schema_placeholder)
        )


DIALECTS = {
    Dialect.SNOWFLAKE: SnowflakeDialect(),
    Dialect.ADW: AdwDialect(),
    Dialect.VERTICA: VerticaDialect(),
}


def get_dialect(dialect: Union[Dialect, str, DdlDialect]) -> DdlDialect:
    """Resolve a dialect name or enum member to its DdlDialect."""
    if isinstance(dialect, DdlDialect):
        return dialect
    return DIALECTS[Dialect(dialect)]


def _context(schema_placeholder: Optional[str], ticket: Optional[str]) -> DdlContext:
    return DdlContext(
        schema_placeholder=schema_placeholder or config.schema_placeholder,
        ticket=config.migration_ticket if ticket is None else ticket
    )


def generate_ddl(
    schema: TableSchema,
    dialect: Union[Dialect, str, DdlDialect],
    sequence: Optional[MigrationSequence] = None,
    schema_placeholder: Optional[str] = None,
    ticket: Optional[str] = None
) -> str:
    """Generate the new-table migration file of one dialect.

    Args:
        schema: Table schema of the generation run
        dialect: Target dialect
        sequence: Block numbering; a fresh sequence starting at 1 by default
        schema_placeholder: Override of the configured schema variable
        ticket: Override of the configured migration ticket

    Returns:
        Complete migration text

    Raises:
        UnsupportedTypeError: If any column type cannot be mapped
    """
    ddl_dialect = get_dialect(dialect)
    sequence = sequence or MigrationSequence()
    context = _context(schema_placeholder, ticket)

    blocks = [ddl_dialect.table_block(schema, sequence, context)]
    blocks.extend(ddl_dialect.extra_blocks(schema, sequence, context))

    logger.info(f"Generated {ddl_dialect.display_name} DDL for table: {schema.table_name}")
    return "".join(blocks)


def generate_enhancement_ddl(
    schema: TableSchema,
    dialect: Union[Dialect, str, DdlDialect],
    sequence: Optional[MigrationSequence] = None,
    schema_placeholder: Optional[str] = None,
    ticket: Optional[str] = None
) -> str:
    """Generate the add-columns migration file of one dialect.

    Column types are the native source types, not the mapped physical types
    used for new tables; a warning is logged each time so the difference is
    visible to the operator.

    Raises:
        EnhancementNotSupportedError: For dialects without an enhancement path
        UnsupportedTypeError: If any column type is not whitelisted
    """
    ddl_dialect = get_dialect(dialect)
    sequence = sequence or MigrationSequence()
    context = _context(schema_placeholder, ticket)

    ddl = ddl_dialect.enhancement_block(schema, sequence, context)

    logger.warning(
        f"⚠️  {ddl_dialect.display_name} enhancement DDL for {schema.table_name} "
        f"uses native source types; review before applying"
    )
    logger.info(f"Generated {ddl_dialect.display_name} enhancement DDL for table: {schema.table_name}")
    return ddl

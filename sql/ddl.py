"""
=================================================================
Data Definition Language (DDL) text builders for migration files.
=================================================================

Pure string builders shared by every target dialect. Each generated
migration file is a sequence of blocks; a block starts with a migration
header line carrying an incrementing sequence number, followed by a blank
line and the statements of the block.

Functions:
    migration_header: Header line opening a migration block
    grant_select: GRANT SELECT to the schema reader role
    column_definition: One column line of a CREATE TABLE body
    create_table: CREATE TABLE statement from prepared column lines
    create_projection: Vertica super projection with ORDER BY / SEGMENTED BY
    create_global_temporary_table: Vertica temp mirror table
    set_search_path: SET SEARCH_PATH statement
    alter_table_add_column: ALTER TABLE ... ADD COLUMN statement

Example:
    >>> from sql.ddl import MigrationSequence, migration_header, create_table
    >>>
    >>> sequence = MigrationSequence()
    >>> header = migration_header(sequence.next(), 'Adding new Snowflake table', 'PERSON',
    ...                           ticket='PHANALYTIC-123')
    >>> body = create_table('PERSON', ['    ID INT NOT NULL'], if_not_exists=True)
"""

from dataclasses import dataclass
from typing import Optional, Sequence

# Token the operator replaces by hand when a table has no primary key
PLACEHOLDER_TOKEN = 'replace'


class EnhancementNotSupportedError(Exception):
    """Exception raised when a dialect has no add-columns migration path."""
    pass


class MigrationSequence:
    """Source of migration block numbers for one migration file.

    Passed explicitly to every builder that opens blocks so numbering is
    owned by the caller rather than by module state.

    Example:
        >>> sequence = MigrationSequence()
        >>> sequence.next(), sequence.next()
        (1, 2)
    """

    def __init__(self, start: int = 1):
        self._next = start

    def next(self) -> int:
        """Return the next block number."""
        number = self._next
        self._next += 1
        return number

    @property
    def peek(self) -> int:
        """Number the next block will receive."""
        return self._next


@dataclass(frozen=True)
class DdlContext:
    """Conventions applied to every migration block of a run.

    Attributes:
        schema_placeholder: Variable the migration runner substitutes
        ticket: Ticket reference for migration headers (None omits it)
    """

    schema_placeholder: str = '${schema}'
    ticket: Optional[str] = None


def migration_header(
    sequence_number: int,
    description: str,
    object_name: str,
    ticket: Optional[str] = None
) -> str:
    """Generate the header line of a migration block.

    Args:
        sequence_number: Block number within the migration file
        description: Human readable description of the block
        object_name: Table or projection created by the block
        ticket: Optional ticket reference placed before the description

    Returns:
        Header line followed by a blank line

    Example:
        >>> migration_header(1, 'Adding new Oracle ADW table', 'PERSON')
        'migration_id=1, Adding new Oracle ADW table PERSON\\n\\n'
    """
    if ticket:
        return f"migration_id={sequence_number},{ticket}:{description} {object_name}\n\n"
    return f"migration_id={sequence_number}, {description} {object_name}\n\n"


def grant_select(table: str, schema_placeholder: str = '${schema}') -> str:
    """Generate GRANT SELECT to the reader role of the target schema."""
    return f"GRANT SELECT ON {table} TO {schema_placeholder}_reader;\n\n"


def column_definition(
    name: str,
    column_type: Optional[str] = None,
    nullable: bool = True,
    default_value: Optional[str] = None
) -> str:
    """Generate one indented column line (without trailing comma).

    Args:
        name: Column name
        column_type: DDL type; omitted for projection column lists
        nullable: When False, NOT NULL is appended
        default_value: Optional DEFAULT expression
    """
    line = f"    {name}"
    if column_type:
        line += f" {column_type}"
    if default_value is not None:
        line += f" DEFAULT {default_value}"
    if not nullable:
        line += " NOT NULL"
    return line


def create_table(
    table: str,
    column_lines: Sequence[str],
    if_not_exists: bool = True
) -> str:
    """Generate a CREATE TABLE statement.

    Args:
        table: Table name
        column_lines: Prepared column lines (see column_definition)
        if_not_exists: If True, add IF NOT EXISTS clause

    Returns:
        CREATE TABLE statement followed by a blank line
    """
    sql = "CREATE TABLE"
    if if_not_exists:
        sql += " IF NOT EXISTS"
    sql += f" {table} (\n" + ",\n".join(column_lines) + "\n);\n\n"
    return sql


def create_projection(
    table: str,
    projection: str,
    column_names: Sequence[str],
    order_by: Sequence[str],
    segment_by: Optional[str]
) -> str:
    """Generate a Vertica CREATE PROJECTION ... AS SELECT statement.

    Args:
        table: Anchor table
        projection: Projection name
        column_names: Columns listed in the projection and its SELECT
        order_by: Sort columns; the placeholder token is used when empty
        segment_by: Hash segmentation column; the placeholder token when None

    Returns:
        CREATE PROJECTION statement followed by a blank line
    """
    column_list = ",\n".join(f"    {name}" for name in column_names)
    order_list = ",\n".join(f"    {name}" for name in order_by) or f"    {PLACEHOLDER_TOKEN}"
    segment_column = segment_by or PLACEHOLDER_TOKEN

    return (
        f"CREATE PROJECTION IF NOT EXISTS {projection} (\n"
        f"{column_list}\n"
        f") AS SELECT\n"
        f"{column_list}\n"
        f"FROM {table}\n"
        f"ORDER BY\n"
        f"{order_list}\n"
        f"SEGMENTED BY HASH({segment_column}) ALL NODES KSAFE 1;\n\n"
    )


def create_global_temporary_table(table: str, column_lines: Sequence[str]) -> str:
    """Generate a CREATE GLOBAL TEMPORARY TABLE IF NOT EXISTS statement."""
    return (
        f"CREATE GLOBAL TEMPORARY TABLE IF NOT EXISTS {table} (\n"
        + ",\n".join(column_lines)
        + "\n);\n\n"
    )


def set_search_path(schema: str) -> str:
    """Generate a SET SEARCH_PATH statement."""
    return f"SET SEARCH_PATH TO {schema};\n\n"


def alter_table_add_column(
    schema: str,
    table: str,
    column_name: str,
    column_type: str,
    nullable: bool = True,
    default_value: Optional[str] = None,
    if_not_exists: bool = False
) -> str:
    """
    Generate ALTER TABLE ADD COLUMN statement.

    Args:
        schema: Schema name or placeholder
        table: Table name
        column_name: Name of the column to add
        column_type: Data type of the column
        nullable: When False, NOT NULL is added
        default_value: Default value for the column
        if_not_exists: Add IF NOT EXISTS clause

    Returns:
        SQL ALTER TABLE ADD COLUMN statement on its own line
    """
    sql = f"ALTER TABLE {schema}.{table} ADD COLUMN"

    if if_not_exists:
        sql += " IF NOT EXISTS"

    sql += f" {column_name} {column_type}"

    if not nullable:
        sql += " NOT NULL"

    if default_value is not None:
        sql += f" DEFAULT {default_value}"

    return sql + ";\n"


"""
==========================================================
Native-to-target type mapping for the supported dialects.
==========================================================

Translates a source (Oracle) column type into:
    - a dialect-neutral logical type used by the model mapping document
    - a physical DDL type for each target warehouse (Snowflake, ADW, Vertica)

The sizing policy shared by the physical types and the model mapping
``length`` attribute is defined once here (scaled_length, calculate_length)
so that the two artifact kinds cannot drift apart.

All functions are pure and memoized; they reject exactly the same set of
native types with UnsupportedTypeError.

Supported native types (case-insensitive):
    VARCHAR2, VARCHAR, CHAR          -> STRING
    NUMBER, INTEGER, INT, LONG       -> LONG
    DATE, TIMESTAMP, TIMESTAMP(n)    -> TIMESTAMP
    FLOAT, DOUBLE                    -> DOUBLE
    CLOB                             -> STRING

Example:
    >>> from sql.type_mapper import Dialect, logical_type, physical_type
    >>>
    >>> logical_type('VARCHAR2')
    <LogicalType.STRING: 'STRING'>
    >>> physical_type(Dialect.SNOWFLAKE, 'VARCHAR2', 50)
    'VARCHAR(100)'
    >>> physical_type('vertica', 'TIMESTAMP(9)', 11)
    'TIMESTAMPTZ'
"""

import re
from enum import Enum
from functools import lru_cache
from typing import Optional, Union

# Sizing policy
LENGTH_MULTIPLIER = 2
LARGE_STRING_THRESHOLD = 4000
LARGE_STRING_LENGTH = 65000

_TIMESTAMP_WITH_PRECISION = re.compile(r'^TIMESTAMP\(\d\)$')


class Dialect(str, Enum):
    """Target storage engines receiving generated DDL."""

    SNOWFLAKE = 'snowflake'
    ADW = 'adw'
    VERTICA = 'vertica'


class LogicalType(str, Enum):
    """Dialect-neutral column types written to the model mapping."""

    STRING = 'STRING'
    LONG = 'LONG'
    TIMESTAMP = 'TIMESTAMP'
    DOUBLE = 'DOUBLE'


class TypeFamily(Enum):
    """Groups of native types that map identically in every dialect."""

    VARCHAR = 'VARCHAR'
    CHAR = 'CHAR'
    INTEGER = 'INTEGER'
    FLOAT = 'FLOAT'
    TIMESTAMP = 'TIMESTAMP'
    CLOB = 'CLOB'


class UnsupportedTypeError(Exception):
    """Exception raised for a native type outside the supported whitelist.

    Fatal to the artifact being generated. Builders re-raise it through
    with_context() so the message names the table, column and dialect.

    Attributes:
        native_type: Offending source type name
        dialect: Dialect being generated, if any
        table_name: Table being generated, if known
        column_name: Column carrying the type, if known
    """

    def __init__(
        self,
        native_type: Optional[str],
        dialect: Optional[str] = None,
        table_name: Optional[str] = None,
        column_name: Optional[str] = None
    ):
        self.native_type = native_type
        self.dialect = dialect
        self.table_name = table_name
        self.column_name = column_name
        super().__init__(self._describe())

    def _describe(self) -> str:
        message = f"Unsupported native type: {self.native_type!r}"
        context = [
            f"{label}={value}"
            for label, value in (
                ('table', self.table_name),
                ('column', self.column_name),
                ('dialect', self.dialect),
            )
            if value
        ]
        if context:
            message += f" ({', '.join(context)})"
        return message

    def with_context(
        self,
        dialect: Optional[str] = None,
        table_name: Optional[str] = None,
        column_name: Optional[str] = None
    ) -> 'UnsupportedTypeError':
        """Return a copy of this error enriched with generation context."""
        return UnsupportedTypeError(
            self.native_type,
            dialect=dialect or self.dialect,
            table_name=table_name or self.table_name,
            column_name=column_name or self.column_name
        )


NATIVE_TYPE_FAMILIES = {
    'VARCHAR2': TypeFamily.VARCHAR,
    'VARCHAR': TypeFamily.VARCHAR,
    'CHAR': TypeFamily.CHAR,
    'NUMBER': TypeFamily.INTEGER,
    'INTEGER': TypeFamily.INTEGER,
    'INT': TypeFamily.INTEGER,
    'LONG': TypeFamily.INTEGER,
    'FLOAT': TypeFamily.FLOAT,
    'DOUBLE': TypeFamily.FLOAT,
    'DATE': TypeFamily.TIMESTAMP,
    'TIMESTAMP': TypeFamily.TIMESTAMP,
    'CLOB': TypeFamily.CLOB,
}

LOGICAL_TYPES = {
    TypeFamily.VARCHAR: LogicalType.STRING,
    TypeFamily.CHAR: LogicalType.STRING,
    TypeFamily.INTEGER: LogicalType.LONG,
    TypeFamily.FLOAT: LogicalType.DOUBLE,
    TypeFamily.TIMESTAMP: LogicalType.TIMESTAMP,
    TypeFamily.CLOB: LogicalType.STRING,
}

# '{length}' is replaced by scaled_length(declared_length)
PHYSICAL_TYPES = {
    Dialect.SNOWFLAKE: {
        TypeFamily.VARCHAR: 'VARCHAR({length})',
        TypeFamily.CHAR: 'CHAR({length})',
        TypeFamily.INTEGER: 'INT',
        TypeFamily.FLOAT: 'FLOAT',
        TypeFamily.TIMESTAMP: 'TIMESTAMP_LTZ',
        TypeFamily.CLOB: f'VARCHAR({LARGE_STRING_LENGTH})',
    },
    Dialect.ADW: {
        TypeFamily.VARCHAR: 'VARCHAR2({length})',
        TypeFamily.CHAR: 'CHAR({length})',
        TypeFamily.INTEGER: 'NUMBER',
        TypeFamily.FLOAT: 'FLOAT',
        TypeFamily.TIMESTAMP: 'TIMESTAMP(9)',
        TypeFamily.CLOB: 'CLOB',
    },
    Dialect.VERTICA: {
        TypeFamily.VARCHAR: 'VARCHAR({length})',
        TypeFamily.CHAR: 'CHAR({length})',
        TypeFamily.INTEGER: 'INTEGER',
        TypeFamily.FLOAT: 'FLOAT',
        TypeFamily.TIMESTAMP: 'TIMESTAMPTZ',
        TypeFamily.CLOB: f'VARCHAR({LARGE_STRING_LENGTH})',
    },
}

# Logical types whose mapping-document length is scaled from the source length
SCALED_LENGTH_TYPES = frozenset({'STRING', 'TIMESTAMP', 'FLOAT', 'DOUBLE', 'LONG'})


def scaled_length(declared_length: int) -> int:
    """Target length for a source length (multi-byte character headroom)."""
    return LENGTH_MULTIPLIER * int(declared_length or 0)


def calculate_length(logical: Union[LogicalType, str], declared_length: int) -> int:
    """Length attribute of a model mapping column.

    Args:
        logical: Logical type (enum member or its name)
        declared_length: Length reported by the source metadata

    Returns:
        65000 for large strings, the scaled length for the sized types,
        0 for every other logical type

    Example:
        >>> calculate_length('STRING', 4000)
        65000
        >>> calculate_length(LogicalType.LONG, 50)
        100
    """
    name = getattr(logical, 'value', logical)
    length = int(declared_length or 0)

    if name == LogicalType.STRING.value and length >= LARGE_STRING_THRESHOLD:
        return LARGE_STRING_LENGTH
    if name in SCALED_LENGTH_TYPES:
        return scaled_length(length)
    return 0


@lru_cache(maxsize=None)
def type_family(native_type: Optional[str]) -> TypeFamily:
    """Resolve the family of a native type.

    Raises:
        UnsupportedTypeError: If the type is not whitelisted
    """
    normalized = (native_type or '').strip().upper()

    if _TIMESTAMP_WITH_PRECISION.match(normalized):
        return TypeFamily.TIMESTAMP

    try:
        return NATIVE_TYPE_FAMILIES[normalized]
    except KeyError:
        raise UnsupportedTypeError(native_type) from None


def is_supported(native_type: Optional[str]) -> bool:
    """Check a native type against the whitelist without raising."""
    try:
        type_family(native_type)
    except UnsupportedTypeError:
        return False
    return True


def logical_type(native_type: str) -> LogicalType:
    """Map a native type to its logical type.

    Raises:
        UnsupportedTypeError: If the type is not whitelisted
    """
    return LOGICAL_TYPES[type_family(native_type)]


@lru_cache(maxsize=None)
def _physical_type(dialect: Dialect, native_type: str, declared_length: int) -> str:
    try:
        family = type_family(native_type)
    except UnsupportedTypeError as e:
        raise e.with_context(dialect=dialect.value) from None
    template = PHYSICAL_TYPES[dialect][family]
    return template.format(length=scaled_length(declared_length))


def physical_type(
    dialect: Union[Dialect, str],
    native_type: str,
    declared_length: int
) -> str:
    """Map a native type to the DDL type of one dialect.

    Args:
        dialect: Target dialect (enum member or its value)
        native_type: Source type name
        declared_length: Source length, scaled for VARCHAR/CHAR types

    Returns:
        DDL type string

    Raises:
        UnsupportedTypeError: If the type is not whitelisted
        ValueError: If the dialect is unknown
    """
    return _physical_type(Dialect(dialect), native_type, int(declared_length or 0))


def snowflake_type(native_type: str, declared_length: int) -> str:
    """Snowflake DDL type for a native type."""
    return physical_type(Dialect.SNOWFLAKE, native_type, declared_length)


def adw_type(native_type: str, declared_length: int) -> str:
    """Oracle ADW DDL type for a native type."""
    return physical_type(Dialect.ADW, native_type, declared_length)


def vertica_type(native_type: str, declared_length: int) -> str:
    """Vertica DDL type for a native type."""
    return physical_type(Dialect.VERTICA, native_type, declared_length)

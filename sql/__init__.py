"""
=====================================================
SQL generation package for warehouse migration files.
=====================================================

Translates a source table schema into migration scripts for the three
target warehouses. All functions are pure string builders with no side
effects.

The package is organized as:
    - type_mapper.py: Native -> logical / physical type mapping and sizing
    - ddl.py: Migration block text builders (headers, CREATE, ALTER, GRANT)
    - dialects.py: One DdlDialect per warehouse and the synthesis entry points

Example:
    >>> from sql import Dialect, generate_ddl
    >>>
    >>> snowflake_sql = generate_ddl(schema, Dialect.SNOWFLAKE)
    >>> adw_sql = generate_ddl(schema, Dialect.ADW)
    >>> vertica_sql = generate_ddl(schema, Dialect.VERTICA)
"""

__version__ = "1.0.0"
__all__ = [
    # Type mapping
    'Dialect', 'LogicalType', 'UnsupportedTypeError',
    'logical_type', 'physical_type', 'calculate_length',
    # DDL synthesis
    'MigrationSequence', 'EnhancementNotSupportedError',
    'generate_ddl', 'generate_enhancement_ddl', 'get_dialect',
]

from .ddl import EnhancementNotSupportedError, MigrationSequence
from .dialects import generate_ddl, generate_enhancement_ddl, get_dialect
from .type_mapper import (
    Dialect,
    LogicalType,
    UnsupportedTypeError,
    calculate_length,
    logical_type,
    physical_type,
)

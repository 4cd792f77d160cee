"""
========================================
Domain models for the mapping generator.
========================================

Immutable values describing a source table, shared by the model mapping
assembler (mapping/) and the DDL synthesizer (sql/).

Modules:
    column_model: Metadata rows, column descriptors and table schemas

Example:
    >>> from models import MetadataRow, build_table_schema
    >>>
    >>> schema = build_table_schema('PERSON', rows, primary_keys=['ID'])
"""

__version__ = "0.1.0"
__all__ = [
    'MetadataRow',
    'ColumnDescriptor',
    'TableSchema',
    'DefaultValueParseError',
    'build_column_descriptor',
    'build_table_schema',
    'normalize_default',
]

from .column_model import (
    ColumnDescriptor,
    DefaultValueParseError,
    MetadataRow,
    TableSchema,
    build_column_descriptor,
    build_table_schema,
    normalize_default,
)

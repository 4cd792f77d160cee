"""
===============================================
Target models section of the model mapping.
===============================================

Describes the columns of each target table with their usage tags, logical
type, derived length, nullability and default value. New tables get a
synthesized _ROW_VERSION column appended; enhancements do not.

Usage tags:
    - every column: DataSyndication, Vertica
    - primary key columns (when the table has keys): PrimaryKey
    - synthesized row version: Warehouse, Version

Example:
    >>> from mapping.target_models import generate_target_models
    >>>
    >>> models = generate_target_models(schema)
    >>> [c['name'] for c in models[0]['columns']]
    ['ID', 'NAME', '_ROW_VERSION']
"""

from typing import Any, Dict, List

from models.column_model import ColumnDescriptor, TableSchema
from sql.type_mapper import LogicalType, UnsupportedTypeError, calculate_length, logical_type

TARGET_SYSTEMS = ('DataSyndication', 'Vertica')
PRIMARY_KEY_TAG = 'PrimaryKey'
ROW_VERSION_COLUMN = '_ROW_VERSION'
ROW_VERSION_TAGS = ('Warehouse', 'Version')


def create_column_node(column: ColumnDescriptor, has_primary_keys: bool) -> Dict[str, Any]:
    """
    Create the node of one column.

    Args:
        column: Column descriptor
        has_primary_keys: Whether the table declares at least one key

    Returns:
        Column node dict

    Raises:
        UnsupportedTypeError: If the column type cannot be mapped
    """
    uses = list(TARGET_SYSTEMS)
    if has_primary_keys and column.is_primary_key:
        uses.append(PRIMARY_KEY_TAG)

    column_type = logical_type(column.native_type)

    node = {
        'name': column.name,
        'uses': uses,
        'type': column_type.value,
        'length': calculate_length(column_type, column.declared_length),
        'nullable': column.nullable,
    }
    if column.default_value:
        node['defaultValue'] = column.default_value
    return node


def create_row_version_node() -> Dict[str, Any]:
    """Node of the synthesized _ROW_VERSION column."""
    return {
        'name': ROW_VERSION_COLUMN,
        'uses': list(ROW_VERSION_TAGS),
        'type': LogicalType.LONG.value,
        'nullable': False,
        'defaultValue': '0',
    }


def generate_target_models(schema: TableSchema) -> List[Dict[str, Any]]:
    """
    Generate the targetModels node.

    Args:
        schema: Table schema of the generation run

    Returns:
        List holding one target model for the table

    Raises:
        UnsupportedTypeError: If any column type cannot be mapped; the
            error names the table and column
    """
    columns = []
    for column in schema.columns:
        try:
            columns.append(create_column_node(column, schema.has_primary_keys))
        except UnsupportedTypeError as e:
            raise e.with_context(table_name=schema.table_name, column_name=column.name) from None

    if not schema.is_enhancement:
        columns.append(create_row_version_node())

    return [
        {
            'name': schema.table_name,
            'uses': list(TARGET_SYSTEMS),
            'columns': columns,
        }
    ]

"""
=============================================
Record map section of the model mapping.
=============================================

Binds every source column to the record field of the same name in lower
case. One target map is produced per target table.

Example:
    >>> from mapping.record_map import generate_record_map
    >>>
    >>> record_map = generate_record_map(schema, 'com.example.person.Person')
    >>> record_map['targetMaps'][0]['columnMaps'][0]
    {'columnName': 'ID', 'fieldName': 'id', 'recordId': 'com.example.person.Person'}
"""

from typing import Any, Dict, List

from models.column_model import TableSchema


def generate_column_maps(schema: TableSchema, record_id: str) -> List[Dict[str, Any]]:
    """Column bindings in schema order."""
    return [
        {
            'columnName': column.name,
            'fieldName': column.field_name,
            'recordId': record_id,
        }
        for column in schema.columns
    ]


def generate_record_map(schema: TableSchema, record_id: str) -> Dict[str, Any]:
    """
    Generate the recordMap node.

    Args:
        schema: Table schema of the generation run
        record_id: Record identifier (namespace.recordName) shared by all bindings

    Returns:
        Dict with recordId and a single target map for the table
    """
    return {
        'recordId': record_id,
        'targetMaps': [
            {
                'targetName': schema.table_name,
                'columnMaps': generate_column_maps(schema, record_id),
            }
        ],
    }

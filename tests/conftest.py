"""
Shared pytest configuration and fixtures for all tests.

Key fixtures:
- person_rows: metadata rows of a small PERSON table
- person_schema: TableSchema of PERSON keyed on ID
- unkeyed_schema: the same table without primary keys
- enhancement_schema: PERSON enhancement adding EMAIL and JOINED_DT
- person_idl / person_avsc: interface definitions written to tmp_path
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path to enable importing project modules
# This allows tests to import from 'core', 'sql', 'mapping', etc. without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from models.column_model import MetadataRow, build_table_schema  # noqa: E402

PERSON_IDL = """@namespace("com.example.person")
protocol PersonProtocol {
    /** A person record */
    record Person {
        long id;
        union { null, string } name = null;
        @logicalType("timestamp-millis") long created_dt;
    }
}
"""

PERSON_AVSC = """{
  "type": "record",
  "name": "Person",
  "namespace": "com.example.person",
  "fields": [
    {"name": "id", "type": "long"},
    {"name": "name", "type": ["null", "string"], "default": null},
    {"name": "created_dt", "type": "long"}
  ]
}
"""


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests - isolated function-level tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interactions")
    config.addinivalue_line("markers", "smoke: Smoke tests - basic functionality checks")
    config.addinivalue_line("markers", "edge_case: Edge case tests - boundary conditions")
    config.addinivalue_line("markers", "regression: Regression tests - previously fixed bugs")
    config.addinivalue_line("markers", "system: System tests - full system behavior tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests - complete workflow tests")


@pytest.fixture
def person_rows():
    """Metadata rows of PERSON in dictionary order."""
    return [
        MetadataRow('CREATED_DT', 'DATE', True, 'SYSDATE', 7),
        MetadataRow('ID', 'NUMBER', False, None, 22),
        MetadataRow('NAME', 'VARCHAR2', True, "' '", 50),
    ]


@pytest.fixture
def person_schema(person_rows):
    return build_table_schema('PERSON', person_rows, primary_keys=['ID'])


@pytest.fixture
def unkeyed_schema(person_rows):
    return build_table_schema('PERSON', person_rows)


@pytest.fixture
def enhancement_schema():
    rows = [
        MetadataRow('EMAIL', 'VARCHAR2', True, None, 100),
        MetadataRow('JOINED_DT', 'DATE', False, "TO_DATE('01/15/2023 00:00:00','MM/DD/YYYY HH24:MI:SS')", 7),
    ]
    return build_table_schema(
        'PERSON', rows, primary_keys=['EMAIL'], is_enhancement=True,
        new_field_names=['EMAIL', 'JOINED_DT']
    )


@pytest.fixture
def person_idl(tmp_path):
    path = tmp_path / 'person.avdl'
    path.write_text(PERSON_IDL, encoding='utf-8')
    return path


@pytest.fixture
def person_avsc(tmp_path):
    path = tmp_path / 'person.avsc'
    path.write_text(PERSON_AVSC, encoding='utf-8')
    return path

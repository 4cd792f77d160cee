"""
=====================================================
Comprehensive pytest suite for models/column_model.py
=====================================================

Sections:
---------
1. Unit tests - MetadataRow, default normalisation, descriptors, schemas
2. Edge case tests - sentinels, malformed dates, enhancement keys
3. Regression tests

Available markers:
------------------
unit, edge_case, regression

How to Execute:
---------------
All tests:          python -m pytest tests/tests_models/test_column_model.py -v
By category:        python -m pytest tests/tests_models/test_column_model.py -m edge_case
Specific test:      python -m pytest tests/tests_models/test_column_model.py::test_to_date_default_is_rewritten
With coverage:      python -m pytest tests/tests_models/test_column_model.py --cov=models.column_model

Note: Use 'python -m pytest' (not just 'pytest') to ensure correct Python path resolution.
"""

import dataclasses

import pytest

from models.column_model import (
    ColumnDescriptor,
    DefaultValueParseError,
    MetadataRow,
    build_column_descriptor,
    build_table_schema,
    is_temporal_type,
    normalize_default,
    parse_to_date,
)

TO_DATE_DEFAULT = "TO_DATE('01/15/2023 00:00:00','MM/DD/YYYY HH24:MI:SS')"

# ====================
# 1. Unit tests
# ====================


@pytest.mark.unit
def test_metadata_row_from_oracle_mapping():
    """Test USER_TAB_COLUMNS style rows with Y/N flags."""
    row = MetadataRow.from_mapping({
        'COLUMN_NAME': 'NAME',
        'DATA_TYPE': 'VARCHAR2',
        'NULLABLE': 'Y',
        'DATA_DEFAULT': None,
        'DATA_LENGTH': 50,
    })
    assert row == MetadataRow('NAME', 'VARCHAR2', True, None, 50)


@pytest.mark.unit
def test_metadata_row_keys_are_case_insensitive():
    """Test lower-case keys and N flag."""
    row = MetadataRow.from_mapping({
        'column_name': 'ID', 'data_type': 'NUMBER', 'nullable': 'N',
        'data_default': float('nan'), 'data_length': '22',
    })
    assert row.nullable is False
    assert row.data_default is None
    assert row.data_length == 22


@pytest.mark.unit
def test_to_date_default_is_rewritten():
    """Test TO_DATE defaults become ISO dates."""
    assert normalize_default('DATE', TO_DATE_DEFAULT) == '2023-01-15'
    assert parse_to_date(TO_DATE_DEFAULT) == '2023-01-15'


@pytest.mark.unit
def test_quoted_space_default_becomes_space():
    """Test the quoted single space default."""
    assert normalize_default('CHAR', "' '") == ' '


@pytest.mark.unit
def test_plain_default_is_trimmed():
    """Test other defaults are trimmed and kept."""
    assert normalize_default('NUMBER', ' 0 \n') == '0'
    assert normalize_default('VARCHAR2', "'N'") == "'N'"


@pytest.mark.unit
def test_build_column_descriptor(person_rows):
    """Test descriptor fields and key tagging."""
    descriptor = build_column_descriptor(person_rows[1], primary_keys=['ID'])
    assert descriptor == ColumnDescriptor(
        name='ID', native_type='NUMBER', nullable=False,
        declared_length=22, default_value=None, is_primary_key=True
    )
    assert descriptor.field_name == 'id'


@pytest.mark.unit
def test_build_table_schema_preserves_order(person_schema):
    """Test columns keep metadata order and keys are tagged."""
    assert person_schema.column_names == ('CREATED_DT', 'ID', 'NAME')
    assert person_schema.primary_keys == ('ID',)
    assert [c.is_primary_key for c in person_schema.columns] == [False, True, False]
    assert person_schema.has_primary_keys


@pytest.mark.unit
def test_schema_is_immutable(person_schema):
    """Test descriptors and schemas cannot be modified after build."""
    with pytest.raises(dataclasses.FrozenInstanceError):
        person_schema.columns[0].name = 'OTHER'
    with pytest.raises(dataclasses.FrozenInstanceError):
        person_schema.table_name = 'OTHER'


# ====================
# 2. Edge case tests
# ====================


@pytest.mark.edge_case
@pytest.mark.parametrize("native_type", ['DATE', 'TIMESTAMP', 'TIMESTAMP(6)', 'date'])
@pytest.mark.parametrize("sentinel", ['SYSDATE', 'sysdate', 'SYS_EXTRACT_UTC(SYSTIMESTAMP)'])
def test_temporal_sentinels_are_dropped(native_type, sentinel):
    """Test temporal sentinel defaults are removed."""
    assert normalize_default(native_type, sentinel) is None


@pytest.mark.edge_case
def test_sentinel_kept_for_non_temporal_type():
    """Test sentinels only apply to temporal columns."""
    assert normalize_default('VARCHAR2', 'SYSDATE') == 'SYSDATE'


@pytest.mark.edge_case
@pytest.mark.parametrize("raw", [None, '', '   ', '\n'])
def test_blank_defaults_are_absent(raw):
    """Test blank defaults normalise to None."""
    assert normalize_default('VARCHAR2', raw) is None


@pytest.mark.edge_case
def test_unparsable_to_date_is_dropped(caplog):
    """Test malformed TO_DATE defaults are logged and dropped."""
    with caplog.at_level('WARNING'):
        value = normalize_default('DATE', "TO_DATE('2023-13-45','YYYY-MM-DD')")
    assert value is None
    assert any('Dropping default value' in record.getMessage() for record in caplog.records)


@pytest.mark.edge_case
def test_parse_to_date_raises_on_garbage():
    """Test parse_to_date raises DefaultValueParseError."""
    with pytest.raises(DefaultValueParseError):
        parse_to_date("TO_DATE(oops)")


@pytest.mark.edge_case
def test_is_temporal_type():
    """Test temporal type detection."""
    assert is_temporal_type('TIMESTAMP(9)')
    assert not is_temporal_type('TIMESTAMP WITH TIME ZONE')
    assert not is_temporal_type(None)


@pytest.mark.edge_case
def test_enhancement_columns_are_never_keys(enhancement_schema):
    """Test enhancement schemas ignore primary keys."""
    assert enhancement_schema.primary_keys == ()
    assert not any(column.is_primary_key for column in enhancement_schema.columns)
    assert enhancement_schema.new_field_names == ('EMAIL', 'JOINED_DT')


@pytest.mark.edge_case
def test_duplicate_keys_are_collapsed(person_rows):
    """Test duplicated key names keep first-seen order."""
    schema = build_table_schema('PERSON', person_rows, primary_keys=['NAME', 'ID', 'NAME'])
    assert schema.primary_keys == ('NAME', 'ID')


# ====================
# 3. Regression tests
# ====================


@pytest.mark.regression
def test_default_normalised_once(person_schema):
    """Test descriptors carry the already normalised default."""
    created, _, name = person_schema.columns
    assert created.default_value is None
    assert name.default_value == ' '

"""
==============================================================
Comprehensive pytest suite for generator/mapping_generator.py
==============================================================

Sections:
---------
1. Unit tests - GenerationResult, key resolution
2. Integration tests - new-table and enhancement runs with a mocked extractor
3. System tests - runs from CSV snapshots written to disk
4. Edge case tests - failing artifacts, missing schemas, missing inputs

Available markers:
------------------
unit, integration, system, edge_case

Mocks and helpers:
------------------
- extractor: MagicMock standing in for MetadataExtractor
- make_generator: builds a MappingGenerator writing to tmp_path

How to Execute:
---------------
All tests:          python -m pytest tests/tests_generator/test_mapping_generator.py -v
By category:        python -m pytest tests/tests_generator/test_mapping_generator.py -m integration
Specific test:      python -m pytest tests/tests_generator/test_mapping_generator.py::test_run_new_table
With coverage:      python -m pytest tests/tests_generator/test_mapping_generator.py --cov=generator

Note: Use 'python -m pytest' (not just 'pytest') to ensure correct Python path resolution.
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from generator.mapping_generator import GenerationError, GenerationResult, MappingGenerator
from mapping.schema_encoder import decode
from models.column_model import MetadataRow
from sql.dialects import generate_ddl
from sql.type_mapper import Dialect, UnsupportedTypeError
from utils.metadata_extractor import MetadataExtractionError
from utils.schema_reader import MissingSchemaError

TICKET = 'PHANALYTIC-(replace jira number)'
NEW_TABLE_ARTIFACTS = {'mapping', 'compressed_json', 'snowflake', 'adw', 'vertica'}


@pytest.fixture
def extractor(person_rows):
    mock = MagicMock()
    mock.extract_metadata.return_value = person_rows
    mock.extract_primary_keys.return_value = ['ID']
    return mock


@pytest.fixture
def make_generator(tmp_path):
    def factory(extractor=None):
        return MappingGenerator(
            extractor=extractor,
            output_dir=tmp_path / 'output',
            schema_placeholder='${schema}',
            ticket=TICKET,
            record_format='AVRO'
        )
    return factory


# ====================
# 1. Unit tests
# ====================


@pytest.mark.unit
def test_generation_result_defaults():
    """Test an empty result counts as succeeded."""
    result = GenerationResult(table_name='PERSON', stem='PERSON')
    assert result.succeeded
    assert result.mapping_id is None
    result.errors['adw'] = 'boom'
    assert not result.succeeded


@pytest.mark.unit
def test_resolve_primary_keys_explicit_wins(make_generator, extractor):
    """Test explicit keys bypass the database."""
    generator = make_generator(extractor)
    assert generator.resolve_primary_keys('PERSON', ['NAME', 'ID']) == ['NAME', 'ID']
    extractor.extract_primary_keys.assert_not_called()


@pytest.mark.unit
def test_resolve_primary_keys_snapshot_has_none(make_generator, extractor):
    """Test CSV runs without explicit keys have no keys."""
    generator = make_generator(extractor)
    assert generator.resolve_primary_keys('PERSON', None, metadata_csv='x.csv') == []
    extractor.extract_primary_keys.assert_not_called()


# ====================
# 2. Integration tests
# ====================


@pytest.mark.integration
def test_run_new_table(make_generator, extractor, person_idl):
    """Test a new-table run computes every artifact."""
    generator = make_generator(extractor)

    result = generator.run_new_table('PERSON', person_idl, '/person', mapping_id='m-1')

    extractor.extract_metadata.assert_called_once_with(
        'PERSON', interface_fields=('id', 'name', 'created_dt'), new_fields=None
    )
    assert result.succeeded
    assert set(result.artifacts) == NEW_TABLE_ARTIFACTS
    assert result.stem == 'm-1'
    assert result.mapping_id == 'm-1'

    document = result.mapping_document
    assert decode(document['recordType']['schema']) == person_idl.read_text(encoding='utf-8')
    assert document['recordMap']['recordId'] == 'com.example.person.Person'
    assert json.loads(result.artifacts['compressed_json']) == document
    assert '\n' not in result.artifacts['compressed_json']
    assert result.artifacts['vertica'].count('migration_id=') == 3


@pytest.mark.integration
def test_run_new_table_generates_mapping_id(make_generator, extractor, person_idl):
    """Test the stem is the generated mapping id."""
    result = make_generator(extractor).run_new_table('PERSON', person_idl, '/person')
    assert result.stem == result.mapping_id
    assert result.mapping_id


@pytest.mark.integration
def test_run_enhancement(make_generator):
    """Test an enhancement run produces reduced artifacts."""
    rows = [
        MetadataRow('EMAIL', 'VARCHAR2', True, None, 100),
        MetadataRow('JOINED_DT', 'DATE', False, None, 7),
    ]
    extractor = MagicMock()
    extractor.extract_metadata.return_value = rows
    generator = make_generator(extractor)

    result = generator.run_enhancement('PERSON', ['EMAIL', 'JOINED_DT'], record_id='com.example.Person')

    assert result.succeeded
    assert result.is_enhancement
    assert result.stem == 'PERSON'
    assert set(result.artifacts) == {'mapping', 'compressed_json', 'snowflake', 'vertica'}
    assert set(result.mapping_document) == {'recordMap', 'targetModels'}
    assert 'ALTER TABLE ${schema}.PERSON ADD COLUMN IF NOT EXISTS EMAIL VARCHAR2;' in result.artifacts['vertica']
    extractor.extract_primary_keys.assert_not_called()


@pytest.mark.integration
def test_run_enhancement_reads_record_id_from_definition(make_generator, person_avsc):
    """Test the record id falls back to the interface definition."""
    extractor = MagicMock()
    extractor.extract_metadata.return_value = [MetadataRow('EMAIL', 'VARCHAR2', True, None, 100)]

    result = make_generator(extractor).run_enhancement('PERSON', ['EMAIL'], schema_file=person_avsc)

    assert result.mapping_document['recordMap']['recordId'] == 'com.example.person.Person'


@pytest.mark.integration
def test_write_persists_artifacts(make_generator, extractor, person_idl, tmp_path):
    """Test write() places every artifact under its file name."""
    generator = make_generator(extractor)
    result = generator.run_new_table('PERSON', person_idl, '/person', mapping_id='m-1')

    paths = generator.write(result)

    output_dir = tmp_path / 'output'
    assert sorted(p.name for p in output_dir.iterdir()) == [
        'compressed_json.txt', 'm-1-adw.migration', 'm-1-snowflake.migration',
        'm-1.json', 'm-1.migration',
    ]
    assert paths['adw'].read_text(encoding='utf-8').startswith(
        "migration_id=1, Adding new Oracle ADW table PERSON"
    )


# ====================
# 3. System tests
# ====================


@pytest.mark.system
def test_run_new_table_from_csv_snapshot(make_generator, person_avsc, tmp_path):
    """Test a run without a database using a CSV snapshot."""
    csv_path = tmp_path / 'person.csv'
    csv_path.write_text(
        "COLUMN_NAME,DATA_TYPE,NULLABLE,DATA_DEFAULT,DATA_LENGTH\n"
        "ID,NUMBER,N,,22\n"
        "NAME,VARCHAR2,Y,,50\n"
        "INTERNAL_FLAG,CHAR,Y,,1\n",
        encoding='utf-8'
    )
    generator = make_generator()

    result = generator.run_new_table(
        'PERSON', person_avsc, '/person', metadata_csv=csv_path, primary_keys=['ID']
    )

    assert result.succeeded
    columns = result.mapping_document['targetModels'][0]['columns']
    assert [c['name'] for c in columns] == ['ID', 'NAME', '_ROW_VERSION']
    assert 'SEGMENTED BY HASH(ID)' in result.artifacts['vertica']


# ====================
# 4. Edge case tests
# ====================


@pytest.mark.edge_case
def test_missing_schema_is_fatal_before_metadata(make_generator, extractor, tmp_path):
    """Test a definition without records stops the run early."""
    schema_file = tmp_path / 'empty.avdl'
    schema_file.write_text('protocol Empty { enum E { A } }', encoding='utf-8')

    with pytest.raises(MissingSchemaError):
        make_generator(extractor).run_new_table('PERSON', schema_file, '/person')
    extractor.extract_metadata.assert_not_called()


@pytest.mark.edge_case
def test_unsupported_type_fails_every_artifact(make_generator, person_idl):
    """Test an unknown type is reported per artifact and nothing is written."""
    extractor = MagicMock()
    extractor.extract_metadata.return_value = [
        MetadataRow('ID', 'NUMBER', False, None, 22),
        MetadataRow('PHOTO', 'BLOB', True, None, 4000),
    ]
    extractor.extract_primary_keys.return_value = ['ID']
    generator = make_generator(extractor)

    result = generator.run_new_table('PERSON', person_idl, '/person')

    assert set(result.errors) == {'mapping', 'snowflake', 'adw', 'vertica'}
    assert result.artifacts == {}
    assert 'column=PHOTO' in result.errors['adw']
    with pytest.raises(GenerationError):
        generator.write(result)
    assert not generator.output_dir.exists()


@pytest.mark.edge_case
def test_one_failing_dialect_keeps_others(make_generator, extractor, person_idl):
    """Test dialects are generated independently; partial writes are opt-in."""
    def failing_vertica(schema, dialect, **kwargs):
        if dialect is Dialect.VERTICA:
            raise UnsupportedTypeError('X', dialect='vertica')
        return generate_ddl(schema, dialect, **kwargs)

    generator = make_generator(extractor)
    with patch('generator.mapping_generator.generate_ddl', side_effect=failing_vertica):
        result = generator.run_new_table('PERSON', person_idl, '/person', mapping_id='m-1')

    assert set(result.errors) == {'vertica'}
    assert set(result.artifacts) == NEW_TABLE_ARTIFACTS - {'vertica'}

    with pytest.raises(GenerationError, match='vertica'):
        generator.write(result)

    paths = generator.write(result, allow_partial=True)
    assert 'vertica' not in paths
    assert paths['snowflake'].exists()


@pytest.mark.edge_case
def test_enhancement_requires_fields(make_generator):
    """Test enhancements need new fields."""
    with pytest.raises(GenerationError, match='new field'):
        make_generator(MagicMock()).run_enhancement('PERSON', [], record_id='r')


@pytest.mark.edge_case
def test_enhancement_requires_record_id(make_generator):
    """Test enhancements need a record id or a definition."""
    with pytest.raises(GenerationError, match='record id'):
        make_generator(MagicMock()).run_enhancement('PERSON', ['EMAIL'])


@pytest.mark.edge_case
def test_csv_without_matching_columns(make_generator, person_idl, tmp_path):
    """Test snapshots with no interface fields are rejected."""
    csv_path = tmp_path / 'other.csv'
    csv_path.write_text(
        "COLUMN_NAME,DATA_TYPE,NULLABLE,DATA_DEFAULT,DATA_LENGTH\nOTHER,NUMBER,N,,22\n",
        encoding='utf-8'
    )
    with pytest.raises(GenerationError, match='No matching columns'):
        make_generator().run_new_table('PERSON', person_idl, '/person', metadata_csv=csv_path)


@pytest.mark.edge_case
def test_unreachable_source_database(make_generator, extractor, person_idl):
    """Test live runs stop when the source database is down."""
    with patch('generator.mapping_generator.verify_connection', return_value=(False, 'down')):
        with pytest.raises(MetadataExtractionError, match='down'):
            make_generator(extractor).run_new_table('PERSON', person_idl, '/person')
    extractor.extract_metadata.assert_not_called()

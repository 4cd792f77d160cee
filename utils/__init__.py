"""
==========================
Utility Functions Package.
==========================

Adapters connecting the generator to its surroundings: the source
database, interface definition files and the output directory.

Modules:
    database_utils: Oracle connectivity and health checks
    metadata_extractor: Column metadata and primary key extraction
    schema_reader: Avro interface definition reader
    artifact_writer: Atomic persistence of generated artifacts
"""

__version__ = "1.0.0"
__all__ = [
    'check_database_available',
    'create_sqlalchemy_engine',
    'verify_connection',
    'MetadataExtractor',
    'MetadataExtractionError',
    'load_metadata_csv',
    'InterfaceDefinition',
    'MissingSchemaError',
    'read_interface_definition',
    'ArtifactWriteError',
    'write_artifacts',
]

from .artifact_writer import ArtifactWriteError, write_artifacts
from .database_utils import (
    check_database_available,
    create_sqlalchemy_engine,
    verify_connection,
)
from .metadata_extractor import MetadataExtractionError, MetadataExtractor, load_metadata_csv
from .schema_reader import InterfaceDefinition, MissingSchemaError, read_interface_definition

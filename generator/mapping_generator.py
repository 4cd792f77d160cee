"""
==================================================
Mapping generator orchestrator.
==================================================

Coordinates a complete generation run for one source table:
    1. Read the interface definition (fatal if it declares no record)
    2. Load column metadata (live Oracle dictionary or CSV snapshot)
    3. Resolve primary keys (constraint, then unique indexes)
    4. Build the immutable TableSchema
    5. Compute every artifact in memory: mapping document, compacted
       document and one migration script per dialect
    6. Persist the artifacts only after all computation finished

Each dialect is generated independently from the same schema snapshot.
A failure in one artifact is recorded in the run result and does not stop
the others; by default nothing is written when any artifact failed.

Workflows:
    - new table: full mapping document plus CREATE DDL for Snowflake,
      Oracle ADW and Vertica
    - enhancement: reduced mapping document plus ALTER TABLE DDL for
      Snowflake and Vertica

Example:
    >>> from generator.mapping_generator import MappingGenerator
    >>>
    >>> generator = MappingGenerator(output_dir='output')
    >>> result = generator.run_new_table(
    ...     table_name='PERSON',
    ...     schema_file='schemas/person.avdl',
    ...     entity_type='/person'
    ... )
    >>> if result.succeeded:
    ...     generator.write(result)
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from core.config import config
from core.logger import get_logger
from mapping.model_mapping import (
    compact_json,
    generate_model_mapping,
    generate_model_mapping_for_enhancement,
    new_mapping_id,
    to_pretty_json,
)
from mapping.record_map import generate_record_map
from mapping.schema_encoder import encode
from mapping.target_models import generate_target_models
from models.column_model import MetadataRow, TableSchema, build_table_schema
from sql.ddl import EnhancementNotSupportedError
from sql.dialects import generate_ddl, generate_enhancement_ddl
from sql.type_mapper import Dialect, UnsupportedTypeError
from utils.artifact_writer import COMPACT_ARTIFACT, MAPPING_ARTIFACT, write_artifacts
from utils.database_utils import verify_connection
from utils.metadata_extractor import MetadataExtractionError, MetadataExtractor, load_metadata_csv
from utils.schema_reader import InterfaceDefinition, read_interface_definition

logger = get_logger(__name__)

NEW_TABLE_DIALECTS = (Dialect.SNOWFLAKE, Dialect.ADW, Dialect.VERTICA)
ENHANCEMENT_DIALECTS = (Dialect.SNOWFLAKE, Dialect.VERTICA)


class GenerationError(Exception):
    """Exception raised for generation run errors.

    Raised when a run cannot start (missing inputs) or when artifacts of a
    failed run are about to be written without allowing partial output.
    """
    pass


@dataclass
class GenerationResult:
    """Outcome of one generation run.

    Attributes:
        table_name: Source table name
        stem: File stem of the artifacts (mapping id or table name)
        is_enhancement: True for the add-columns workflow
        mapping_document: Mapping document, None if it failed
        artifacts: Artifact name -> generated text
        errors: Artifact name -> error message
        duration_seconds: Computation time
    """

    table_name: str
    stem: str
    is_enhancement: bool = False
    mapping_document: Optional[Dict[str, Any]] = None
    artifacts: Dict[str, str] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    duration_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return not self.errors

    @property
    def mapping_id(self) -> Optional[str]:
        if self.mapping_document is None:
            return None
        return self.mapping_document.get('mappingId')


class MappingGenerator:
    """Orchestrate mapping document and DDL generation for source tables.

    Attributes:
        output_dir: Directory receiving the artifacts
        schema_placeholder: Schema variable written into DDL
        ticket: Ticket reference of Snowflake and Vertica headers
        record_format: Serialization format tag of the source record

    Example:
        >>> generator = MappingGenerator()
        >>> result = generator.run_enhancement(
        ...     table_name='PERSON',
        ...     new_fields=['EMAIL'],
        ...     record_id='com.example.Person'
        ... )
        >>> generator.write(result)
    """

    def __init__(
        self,
        extractor: Optional[MetadataExtractor] = None,
        output_dir: Optional[Union[str, Path]] = None,
        schema_placeholder: Optional[str] = None,
        ticket: Optional[str] = None,
        record_format: Optional[str] = None
    ):
        self._extractor = extractor
        self.output_dir = Path(output_dir) if output_dir else config.project.output_dir
        self.schema_placeholder = schema_placeholder or config.schema_placeholder
        self.ticket = config.migration_ticket if ticket is None else ticket
        self.record_format = record_format or config.record_format

        logger.debug(f"Initialized MappingGenerator writing to: {self.output_dir}")

    @property
    def extractor(self) -> MetadataExtractor:
        if self._extractor is None:
            self._extractor = MetadataExtractor()
        return self._extractor

    def verify_source(self) -> None:
        """Fail fast when the source database is unreachable.

        Raises:
            MetadataExtractionError: If no connection can be made
        """
        success, message = verify_connection(self.extractor.engine)
        if not success:
            raise MetadataExtractionError(message)
        logger.info(f"✅ {message}")

    def load_metadata(
        self,
        table_name: str,
        interface_fields: Optional[Sequence[str]] = None,
        new_fields: Optional[Sequence[str]] = None,
        metadata_csv: Optional[Union[str, Path]] = None
    ) -> List[MetadataRow]:
        """Load metadata rows from a CSV snapshot or the source database."""
        if metadata_csv:
            rows = load_metadata_csv(
                metadata_csv, interface_fields=interface_fields, new_fields=new_fields
            )
            if not rows:
                raise GenerationError(
                    f"No matching columns for table {table_name} in {metadata_csv}"
                )
            return rows
        self.verify_source()
        return self.extractor.extract_metadata(
            table_name, interface_fields=interface_fields, new_fields=new_fields
        )

    def resolve_primary_keys(
        self,
        table_name: str,
        primary_keys: Optional[Sequence[str]] = None,
        metadata_csv: Optional[Union[str, Path]] = None
    ) -> List[str]:
        """Explicit keys win; CSV snapshots carry none; otherwise ask the database."""
        if primary_keys is not None:
            return list(primary_keys)
        if metadata_csv:
            logger.warning(f"⚠️  No primary keys given for snapshot of {table_name}")
            return []
        return self.extractor.extract_primary_keys(table_name)

    def _generate_dialects(
        self,
        schema: TableSchema,
        dialects: Sequence[Dialect],
        result: GenerationResult
    ) -> None:
        for dialect in dialects:
            try:
                if schema.is_enhancement:
                    ddl = generate_enhancement_ddl(
                        schema, dialect,
                        schema_placeholder=self.schema_placeholder, ticket=self.ticket
                    )
                else:
                    ddl = generate_ddl(
                        schema, dialect,
                        schema_placeholder=self.schema_placeholder, ticket=self.ticket
                    )
            except (UnsupportedTypeError, EnhancementNotSupportedError) as e:
                logger.error(f"❌ {dialect.value} DDL failed for {schema.table_name}: {e}")
                result.errors[dialect.value] = str(e)
                continue
            result.artifacts[dialect.value] = ddl

    def _store_document(self, document: Dict[str, Any], result: GenerationResult) -> None:
        result.mapping_document = document
        result.artifacts[MAPPING_ARTIFACT] = to_pretty_json(document)
        result.artifacts[COMPACT_ARTIFACT] = compact_json(document)

    def build_new_table(
        self,
        schema: TableSchema,
        definition: InterfaceDefinition,
        entity_type: str,
        mapping_id: Optional[str] = None,
        record_id: Optional[str] = None
    ) -> GenerationResult:
        """
        Compute all new-table artifacts in memory.

        Args:
            schema: Table schema built from the metadata snapshot
            definition: Interface definition of the source record
            entity_type: Entity type of the source record
            mapping_id: Mapping identifier; a fresh UUID when omitted
            record_id: Override of the definition's record identifier

        Returns:
            GenerationResult with artifacts and per-artifact errors
        """
        start_time = time.time()
        mapping_id = mapping_id or new_mapping_id()
        result = GenerationResult(table_name=schema.table_name, stem=mapping_id)

        try:
            document = generate_model_mapping(
                generate_record_map(schema, record_id or definition.record_id),
                generate_target_models(schema),
                mapping_id=mapping_id,
                entity_type=entity_type,
                schema=encode(definition.schema_text),
                record_format=self.record_format
            )
        except UnsupportedTypeError as e:
            logger.error(f"❌ Mapping document failed for {schema.table_name}: {e}")
            result.errors[MAPPING_ARTIFACT] = str(e)
        else:
            self._store_document(document, result)

        self._generate_dialects(schema, NEW_TABLE_DIALECTS, result)

        result.duration_seconds = time.time() - start_time
        self._log_summary(result)
        return result

    def build_enhancement(self, schema: TableSchema, record_id: str) -> GenerationResult:
        """Compute all enhancement artifacts in memory."""
        start_time = time.time()
        result = GenerationResult(
            table_name=schema.table_name, stem=schema.table_name, is_enhancement=True
        )

        try:
            document = generate_model_mapping_for_enhancement(
                generate_record_map(schema, record_id),
                generate_target_models(schema)
            )
        except UnsupportedTypeError as e:
            logger.error(f"❌ Mapping document failed for {schema.table_name}: {e}")
            result.errors[MAPPING_ARTIFACT] = str(e)
        else:
            self._store_document(document, result)

        self._generate_dialects(schema, ENHANCEMENT_DIALECTS, result)

        result.duration_seconds = time.time() - start_time
        self._log_summary(result)
        return result

    def run_new_table(
        self,
        table_name: str,
        schema_file: Union[str, Path],
        entity_type: str,
        mapping_id: Optional[str] = None,
        metadata_csv: Optional[Union[str, Path]] = None,
        primary_keys: Optional[Sequence[str]] = None,
        record_id: Optional[str] = None
    ) -> GenerationResult:
        """
        Run the new-table workflow up to (not including) persistence.

        Raises:
            MissingSchemaError: If the interface definition declares no record
            MetadataExtractionError: If the source metadata cannot be read
            GenerationError: If the snapshot has no matching columns
        """
        logger.info(f"🔍 Generating mapping for new table: {table_name}")
        definition = read_interface_definition(schema_file)

        rows = self.load_metadata(
            table_name, interface_fields=definition.fields, metadata_csv=metadata_csv
        )
        keys = self.resolve_primary_keys(table_name, primary_keys, metadata_csv)
        schema = build_table_schema(table_name, rows, primary_keys=keys)

        return self.build_new_table(
            schema, definition, entity_type, mapping_id=mapping_id, record_id=record_id
        )

    def run_enhancement(
        self,
        table_name: str,
        new_fields: Sequence[str],
        record_id: Optional[str] = None,
        schema_file: Optional[Union[str, Path]] = None,
        metadata_csv: Optional[Union[str, Path]] = None
    ) -> GenerationResult:
        """
        Run the enhancement workflow up to (not including) persistence.

        The record identifier comes from record_id, or from the interface
        definition when only schema_file is given.

        Raises:
            GenerationError: If no new fields or no record identifier are given
        """
        if not new_fields:
            raise GenerationError("Enhancement requires at least one new field")

        if not record_id:
            if not schema_file:
                raise GenerationError("Enhancement requires a record id or an interface definition")
            record_id = read_interface_definition(schema_file).record_id

        logger.info(f"🔍 Generating enhancement for table {table_name}: {list(new_fields)}")
        rows = self.load_metadata(table_name, new_fields=new_fields, metadata_csv=metadata_csv)
        schema = build_table_schema(
            table_name, rows, is_enhancement=True, new_field_names=new_fields
        )

        return self.build_enhancement(schema, record_id)

    def write(self, result: GenerationResult, allow_partial: bool = False) -> Dict[str, Path]:
        """
        Persist the artifacts of a run.

        Args:
            result: Completed generation result
            allow_partial: Write successful artifacts even if others failed

        Returns:
            Artifact name -> written path

        Raises:
            GenerationError: If the run has errors and allow_partial is False
            ArtifactWriteError: If a file cannot be written
        """
        if result.errors and not allow_partial:
            raise GenerationError(
                f"Not writing artifacts for {result.table_name}: "
                f"{len(result.errors)} artifact(s) failed ({', '.join(result.errors)})"
            )
        return write_artifacts(self.output_dir, result.stem, result.artifacts)

    def _log_summary(self, result: GenerationResult) -> None:
        logger.info("=" * 60)
        logger.info(f"GENERATION SUMMARY: {result.table_name}")
        logger.info("=" * 60)
        for artifact in result.artifacts:
            logger.info(f"{artifact.ljust(16)}: ✅")
        for artifact, message in result.errors.items():
            logger.info(f"{artifact.ljust(16)}: ❌ {message}")
        logger.info("-" * 60)
        logger.info(f"Computed in {result.duration_seconds:.2f}s")

"""
======================================================
Source table metadata and primary key extraction.
======================================================

Reads column metadata from the Oracle data dictionary (USER_TAB_COLUMNS)
through SQLAlchemy, or from an offline CSV snapshot through pandas, and
returns MetadataRow values ordered by column name.

Selection modes:
    - new table: keep the columns whose lower-case name is a field of the
      interface definition
    - enhancement: keep only the requested new columns

Primary keys come from the table's primary key constraint; when it has
none, the columns of its unique indexes are used instead.

Example:
    >>> from utils.metadata_extractor import MetadataExtractor
    >>>
    >>> extractor = MetadataExtractor()
    >>> rows = extractor.extract_metadata('PERSON', interface_fields=['id', 'name'])
    >>> keys = extractor.extract_primary_keys('PERSON')
"""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

import pandas as pd
from sqlalchemy import bindparam, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.config import config
from core.logger import get_logger
from models.column_model import MetadataRow
from utils.database_utils import create_sqlalchemy_engine

logger = get_logger(__name__)

METADATA_COLUMNS = ['COLUMN_NAME', 'DATA_TYPE', 'NULLABLE', 'DATA_DEFAULT', 'DATA_LENGTH']

TABLE_METADATA_SQL = text(
    "SELECT COLUMN_NAME, DATA_TYPE, NULLABLE, DATA_DEFAULT, DATA_LENGTH "
    "FROM USER_TAB_COLUMNS WHERE TABLE_NAME = :table_name ORDER BY COLUMN_NAME"
)

FIELD_METADATA_SQL = text(
    "SELECT COLUMN_NAME, DATA_TYPE, NULLABLE, DATA_DEFAULT, DATA_LENGTH "
    "FROM USER_TAB_COLUMNS WHERE TABLE_NAME = :table_name "
    "AND COLUMN_NAME IN :column_names ORDER BY COLUMN_NAME"
).bindparams(bindparam('column_names', expanding=True))


class MetadataExtractionError(Exception):
    """Exception raised when source metadata cannot be read."""
    pass


def select_rows(
    rows: Iterable[MetadataRow],
    interface_fields: Optional[Sequence[str]] = None,
    new_fields: Optional[Sequence[str]] = None
) -> List[MetadataRow]:
    """
    Apply the new-table or enhancement selection to metadata rows.

    Args:
        rows: Candidate rows
        interface_fields: Interface definition field names (new-table mode)
        new_fields: Requested new column names (enhancement mode, wins when set)

    Returns:
        Selected rows ordered by column name
    """
    if new_fields:
        wanted = {name.upper() for name in new_fields}
        selected = [row for row in rows if row.column_name.upper() in wanted]
    elif interface_fields is not None:
        wanted = {name.lower() for name in interface_fields}
        selected = [row for row in rows if row.column_name.lower() in wanted]
    else:
        selected = list(rows)
    return sorted(selected, key=lambda row: row.column_name)


def load_metadata_csv(
    csv_path: Union[str, Path],
    interface_fields: Optional[Sequence[str]] = None,
    new_fields: Optional[Sequence[str]] = None
) -> List[MetadataRow]:
    """
    Load metadata rows from a CSV export of USER_TAB_COLUMNS.

    The CSV must contain the columns COLUMN_NAME, DATA_TYPE, NULLABLE,
    DATA_DEFAULT and DATA_LENGTH (header case is ignored).

    Raises:
        MetadataExtractionError: If the file is missing required columns
    """
    logger.info(f"Loading metadata snapshot from {csv_path}")
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False, na_values=[''])
    df.columns = [str(column).upper() for column in df.columns]

    missing = [column for column in METADATA_COLUMNS if column not in df.columns]
    if missing:
        raise MetadataExtractionError(
            f"Metadata snapshot {csv_path} is missing columns: {', '.join(missing)}"
        )

    rows = [MetadataRow.from_mapping(record) for record in df[METADATA_COLUMNS].to_dict('records')]
    return select_rows(rows, interface_fields=interface_fields, new_fields=new_fields)


class MetadataExtractor:
    """
    Reads column metadata and primary keys of source tables.

    Attributes:
        engine: SQLAlchemy engine of the source database
        schema: Owner schema used for primary key lookups

    Example:
        >>> extractor = MetadataExtractor()
        >>> rows = extractor.extract_metadata('PERSON', new_fields=['EMAIL'])
    """

    def __init__(self, engine: Optional[Engine] = None, schema: Optional[str] = None):
        self._engine = engine
        self.schema = schema if schema is not None else config.db_schema

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = create_sqlalchemy_engine()
        return self._engine

    def extract_metadata(
        self,
        table_name: str,
        interface_fields: Optional[Sequence[str]] = None,
        new_fields: Optional[Sequence[str]] = None
    ) -> List[MetadataRow]:
        """
        Extract metadata rows for a new table or for enhancement columns.

        Args:
            table_name: Source table name (case-insensitive)
            interface_fields: Field allowlist for a new table
            new_fields: Column subset for an enhancement

        Returns:
            MetadataRow list ordered by column name

        Raises:
            MetadataExtractionError: If the query fails or returns no columns
        """
        params = {'table_name': table_name.upper()}
        if new_fields:
            statement = FIELD_METADATA_SQL
            params['column_names'] = [name.upper() for name in new_fields]
        else:
            statement = TABLE_METADATA_SQL

        try:
            with self.engine.connect() as conn:
                result = conn.execute(statement, params)
                rows = [MetadataRow.from_mapping(dict(row)) for row in result.mappings()]
        except SQLAlchemyError as e:
            logger.error(f"Error extracting metadata for table: {table_name}", exc_info=True)
            raise MetadataExtractionError(
                f"Error extracting metadata for table {table_name}: {e}"
            ) from e

        selected = select_rows(rows, interface_fields=interface_fields, new_fields=new_fields)
        if not selected:
            raise MetadataExtractionError(f"No matching columns found for table {table_name}")

        logger.info(f"Extracted metadata for {len(selected)} columns of table: {table_name}")
        return selected

    def extract_primary_keys(self, table_name: str) -> List[str]:
        """
        Extract the ordered primary key columns of a table.

        Falls back to unique index columns when the table has no primary key
        constraint. Returns an empty list when neither exists.

        Raises:
            MetadataExtractionError: If the data dictionary cannot be read
        """
        # The Oracle dialect reflects unquoted names in lower case
        reflected_name = table_name.lower()
        try:
            inspector = inspect(self.engine)
            constraint = inspector.get_pk_constraint(reflected_name, schema=self.schema)
            keys = list(constraint.get('constrained_columns') or [])

            if not keys:
                for index in inspector.get_indexes(reflected_name, schema=self.schema):
                    if index.get('unique'):
                        keys.extend(
                            column for column in index.get('column_names', [])
                            if column and column not in keys
                        )
        except SQLAlchemyError as e:
            logger.error(f"Error extracting primary keys for table: {table_name}", exc_info=True)
            raise MetadataExtractionError(
                f"Error extracting primary keys for table {table_name}: {e}"
            ) from e

        # Lower case marks a case-insensitive name, quoted names keep their case
        keys = [key.upper() if key.islower() else key for key in keys]
        logger.info(f"Primary keys for {table_name}: {keys or 'none'}")
        return keys

    def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

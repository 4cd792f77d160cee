"""
===========================================================
Column descriptors built from source table metadata.
===========================================================

Turns raw metadata rows (as read from USER_TAB_COLUMNS or a CSV snapshot)
into immutable ColumnDescriptor values and groups them into a TableSchema.
Both the model mapping and every DDL dialect consume the same TableSchema,
so a column's effective default is normalized exactly once.

Default value normalization:
    - blank or missing                           -> absent
    - SYSDATE / SYS_EXTRACT_UTC(SYSTIMESTAMP)    -> absent (date/timestamp columns)
    - TO_DATE('01/15/2023 00:00:00', '...')      -> '2023-01-15' (date/timestamp columns)
    - unparsable TO_DATE expression              -> absent, warning logged
    - ' ' (quoted single space)                  -> ' '
    - anything else                              -> trimmed value

Example:
    >>> from models.column_model import MetadataRow, build_table_schema
    >>>
    >>> rows = [
    ...     MetadataRow('ID', 'NUMBER', nullable=False, data_default=None, data_length=22),
    ...     MetadataRow('NAME', 'VARCHAR2', nullable=True, data_default=None, data_length=50),
    ... ]
    >>> schema = build_table_schema('PERSON', rows, primary_keys=['ID'])
    >>> [c.is_primary_key for c in schema.columns]
    [True, False]
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

from core.logger import get_logger

logger = get_logger(__name__)

SENTINEL_DEFAULTS = frozenset({'SYSDATE', 'SYS_EXTRACT_UTC(SYSTIMESTAMP)'})
QUOTED_SPACE = "' '"

TO_DATE_PATTERN = re.compile(
    r"TO_DATE\s*\(\s*'([^']*)'\s*,\s*'[^']*'\s*\)",
    re.IGNORECASE
)
TO_DATE_INPUT_FORMAT = '%m/%d/%Y %H:%M:%S'
TO_DATE_OUTPUT_FORMAT = '%Y-%m-%d'

_TEMPORAL_TYPE = re.compile(r'^(DATE|TIMESTAMP(\(\d\))?)$')


class DefaultValueParseError(Exception):
    """Exception raised when a TO_DATE default cannot be parsed.

    Never escapes normalize_default(); the default is dropped instead.
    """
    pass


@dataclass(frozen=True)
class MetadataRow:
    """One raw row of source column metadata.

    Attributes:
        column_name: Column name as stored by the source database
        data_type: Native type name (e.g. VARCHAR2, NUMBER, TIMESTAMP(9))
        nullable: Whether the column accepts NULL
        data_default: Raw default expression, if any
        data_length: Declared length in source units
    """

    column_name: str
    data_type: str
    nullable: bool
    data_default: Optional[str]
    data_length: int

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> 'MetadataRow':
        """Build a row from a dict keyed like USER_TAB_COLUMNS (any case).

        NULLABLE accepts booleans or the Oracle 'Y'/'N' flags.
        """
        values = {str(key).upper(): value for key, value in row.items()}
        data_default = values.get('DATA_DEFAULT')
        data_length = values.get('DATA_LENGTH')
        return cls(
            column_name=str(values['COLUMN_NAME']),
            data_type=str(values['DATA_TYPE']),
            nullable=_to_bool(values.get('NULLABLE', True)),
            data_default=None if _is_missing(data_default) else str(data_default),
            data_length=0 if _is_missing(data_length) else int(data_length or 0)
        )


@dataclass(frozen=True)
class ColumnDescriptor:
    """Normalized, immutable description of one physical column."""

    name: str
    native_type: str
    nullable: bool
    declared_length: int
    default_value: Optional[str] = None
    is_primary_key: bool = False

    @property
    def field_name(self) -> str:
        """Record field bound to this column."""
        return self.name.lower()


@dataclass(frozen=True)
class TableSchema:
    """Ordered columns of one table plus key and workflow information.

    Attributes:
        table_name: Target table name
        columns: Column descriptors in source metadata order
        primary_keys: Ordered primary key column names (may be empty)
        is_enhancement: True when only new columns are being added
        new_field_names: Columns requested by an enhancement
    """

    table_name: str
    columns: Tuple[ColumnDescriptor, ...]
    primary_keys: Tuple[str, ...] = ()
    is_enhancement: bool = False
    new_field_names: Tuple[str, ...] = field(default=())

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    @property
    def has_primary_keys(self) -> bool:
        return bool(self.primary_keys)


def _is_missing(value: Any) -> bool:
    # pandas hands NaN for empty CSV cells
    return value is None or (isinstance(value, float) and value != value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().upper() in ('Y', 'YES', 'TRUE', '1')
    return bool(value)


def is_temporal_type(native_type: Optional[str]) -> bool:
    """True for DATE, TIMESTAMP and TIMESTAMP(n)."""
    return bool(_TEMPORAL_TYPE.match((native_type or '').strip().upper()))


def parse_to_date(expression: str) -> str:
    """Convert a TO_DATE(...) default into an ISO date string.

    Args:
        expression: Default expression such as
            TO_DATE('01/15/2023 00:00:00','MM/DD/YYYY HH24:MI:SS')

    Returns:
        Date formatted as yyyy-MM-dd

    Raises:
        DefaultValueParseError: If the expression or its date literal is malformed
    """
    match = TO_DATE_PATTERN.search(expression)
    if not match:
        raise DefaultValueParseError(f"Not a TO_DATE expression: {expression}")

    date_string = match.group(1)
    try:
        parsed = datetime.strptime(date_string, TO_DATE_INPUT_FORMAT)
    except ValueError as e:
        raise DefaultValueParseError(f"Error parsing date: {date_string}") from e
    return parsed.strftime(TO_DATE_OUTPUT_FORMAT)


def normalize_default(native_type: str, raw_default: Optional[str]) -> Optional[str]:
    """Normalize a raw default expression (see module docstring).

    Returns:
        Effective default value, or None when the column has none
    """
    if raw_default is None or not raw_default.strip():
        return None

    value = raw_default.strip()

    if is_temporal_type(native_type):
        if value.upper() in SENTINEL_DEFAULTS:
            return None
        if value.upper().startswith('TO_DATE'):
            try:
                return parse_to_date(value)
            except DefaultValueParseError as e:
                logger.warning(f"Dropping default value: {e}")
                return None

    return ' ' if value == QUOTED_SPACE else value


def build_column_descriptor(
    row: MetadataRow,
    primary_keys: Optional[Iterable[str]] = None,
    is_enhancement: bool = False
) -> ColumnDescriptor:
    """Build the descriptor of one column.

    Args:
        row: Raw metadata row
        primary_keys: Primary key column names of the table
        is_enhancement: Enhancement columns are never tagged as keys

    Returns:
        Immutable ColumnDescriptor
    """
    keys = set(primary_keys or ())
    return ColumnDescriptor(
        name=row.column_name,
        native_type=row.data_type,
        nullable=row.nullable,
        declared_length=row.data_length,
        default_value=normalize_default(row.data_type, row.data_default),
        is_primary_key=not is_enhancement and row.column_name in keys
    )


def build_table_schema(
    table_name: str,
    rows: Iterable[MetadataRow],
    primary_keys: Optional[Sequence[str]] = None,
    is_enhancement: bool = False,
    new_field_names: Optional[Sequence[str]] = None
) -> TableSchema:
    """Build the TableSchema shared by every artifact of a generation run.

    Args:
        table_name: Target table name
        rows: Metadata rows in the order they should appear in artifacts
        primary_keys: Ordered primary key names; ignored for enhancements
        is_enhancement: True for the add-columns workflow
        new_field_names: Column names requested by an enhancement

    Returns:
        Immutable TableSchema
    """
    keys: Tuple[str, ...] = ()
    if primary_keys and not is_enhancement:
        # Preserve caller order, drop duplicates
        keys = tuple(dict.fromkeys(primary_keys))

    columns = tuple(
        build_column_descriptor(row, keys, is_enhancement) for row in rows
    )

    logger.debug(
        f"Built schema for {table_name}: {len(columns)} columns, "
        f"primary keys {list(keys) or 'none'}"
    )

    return TableSchema(
        table_name=table_name,
        columns=columns,
        primary_keys=keys,
        is_enhancement=is_enhancement,
        new_field_names=tuple(new_field_names or ())
    )

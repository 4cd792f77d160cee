"""
==================================================
Model mapping document assembly and rendering.
==================================================

Composes the record map and target models with the record type and
identifiers into the final model mapping document, and renders it as
pretty-printed JSON (the mapping file) or as a compact single line (the
payload pasted into the mapping service).

Document layout (new table):
    mappingId, version, recordType{entityType, format, schema},
    recordMap, targetModels

Enhancement documents only carry recordMap and targetModels.

Example:
    >>> from mapping.model_mapping import generate_model_mapping, compact_json
    >>>
    >>> document = generate_model_mapping(
    ...     record_map, target_models,
    ...     mapping_id=None,
    ...     entity_type='/person',
    ...     schema=encode(schema_text)
    ... )
    >>> payload = compact_json(document)
"""

import json
import uuid
from typing import Any, Dict, List, Optional

MAPPING_VERSION = '1'
ENTITY_TYPE_PREFIX = '/source:string'
DEFAULT_RECORD_FORMAT = 'AVRO'


def new_mapping_id() -> str:
    """Fresh random mapping identifier."""
    return str(uuid.uuid4())


def generate_model_mapping(
    record_map: Dict[str, Any],
    target_models: List[Dict[str, Any]],
    mapping_id: Optional[str],
    entity_type: str,
    schema: str,
    record_format: str = DEFAULT_RECORD_FORMAT
) -> Dict[str, Any]:
    """
    Generate the model mapping document of a new table.

    Args:
        record_map: recordMap node
        target_models: targetModels node
        mapping_id: Mapping identifier; a fresh UUID when None or empty
        entity_type: Entity type of the source record (appended to /source:string)
        schema: Base64 encoded interface definition
        record_format: Serialization format tag of the source record

    Returns:
        Model mapping document
    """
    return {
        'mappingId': mapping_id or new_mapping_id(),
        'version': MAPPING_VERSION,
        'recordType': {
            'entityType': f"{ENTITY_TYPE_PREFIX}{entity_type}",
            'format': record_format,
            'schema': schema,
        },
        'recordMap': record_map,
        'targetModels': target_models,
    }


def generate_model_mapping_for_enhancement(
    record_map: Dict[str, Any],
    target_models: List[Dict[str, Any]]
) -> Dict[str, Any]:
    """Generate the reduced document of an enhancement."""
    return {
        'recordMap': record_map,
        'targetModels': target_models,
    }


def to_pretty_json(document: Dict[str, Any]) -> str:
    """Render a document as indented JSON."""
    return json.dumps(document, indent=2, ensure_ascii=False)


def compact_json(document: Dict[str, Any]) -> str:
    """Render a document on a single line with no insignificant whitespace."""
    return json.dumps(document, separators=(',', ':'), ensure_ascii=False)

"""
=================================================
Model mapping package for the mapping generator.
=================================================

Builds the structured model mapping document binding a source record to
its target models.

Modules:
    record_map: Column-to-field bindings (recordMap)
    target_models: Target table column models (targetModels)
    model_mapping: Document assembly and JSON rendering
    schema_encoder: Base64 transport encoding of the interface definition

Example:
    >>> from mapping import (
    ...     generate_record_map, generate_target_models,
    ...     generate_model_mapping, to_pretty_json
    ... )
    >>>
    >>> document = generate_model_mapping(
    ...     generate_record_map(schema, record_id),
    ...     generate_target_models(schema),
    ...     mapping_id=None,
    ...     entity_type='/person',
    ...     schema=encode(schema_text)
    ... )
    >>> print(to_pretty_json(document))
"""

__version__ = "0.1.0"
__all__ = [
    'generate_record_map',
    'generate_target_models',
    'generate_model_mapping',
    'generate_model_mapping_for_enhancement',
    'to_pretty_json',
    'compact_json',
    'encode',
    'decode',
]

from .model_mapping import (
    compact_json,
    generate_model_mapping,
    generate_model_mapping_for_enhancement,
    to_pretty_json,
)
from .record_map import generate_record_map
from .schema_encoder import decode, encode
from .target_models import generate_target_models

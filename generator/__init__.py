"""
=================================
Generation Orchestration Package.
=================================

Runs the new-table and enhancement workflows end to end: metadata and
interface definition in, mapping document and migration scripts out.

Modules:
    mapping_generator: MappingGenerator orchestrator and GenerationResult
"""

__version__ = "1.0.0"
__all__ = [
    'GenerationError',
    'GenerationResult',
    'MappingGenerator',
]

from .mapping_generator import GenerationError, GenerationResult, MappingGenerator

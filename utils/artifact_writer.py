"""
=============================================
Artifact persistence for generation runs.
=============================================

Writes the generated mapping document, its compacted form and the per-dialect
migration scripts to an output directory. Each file is first written to a
hidden temporary sibling and then moved into place with os.replace, so a
reader never observes a partially written artifact.

File names (stem = mapping id, or table name for enhancements):
    mapping          -> <stem>.json
    compressed_json  -> compressed_json.txt
    snowflake        -> <stem>-snowflake.migration
    adw              -> <stem>-adw.migration
    vertica          -> <stem>.migration

Example:
    >>> from utils.artifact_writer import write_artifacts
    >>>
    >>> paths = write_artifacts('output', 'PERSON', {'mapping': '{...}'})
    >>> paths['mapping']
    PosixPath('output/PERSON.json')
"""

import os
import tempfile
from pathlib import Path
from typing import Dict, Mapping, Union

from core.logger import get_logger

logger = get_logger(__name__)

MAPPING_ARTIFACT = 'mapping'
COMPACT_ARTIFACT = 'compressed_json'
COMPACT_FILE_NAME = 'compressed_json.txt'

DIALECT_SUFFIXES = {
    'snowflake': '-snowflake.migration',
    'adw': '-adw.migration',
    'vertica': '.migration',
}


class ArtifactWriteError(Exception):
    """Exception raised when an artifact cannot be written."""
    pass


def artifact_file_name(artifact: str, stem: str) -> str:
    """
    File name of an artifact.

    Raises:
        ArtifactWriteError: If the artifact name is unknown
    """
    if artifact == MAPPING_ARTIFACT:
        return f"{stem}.json"
    if artifact == COMPACT_ARTIFACT:
        return COMPACT_FILE_NAME
    if artifact in DIALECT_SUFFIXES:
        return f"{stem}{DIALECT_SUFFIXES[artifact]}"
    raise ArtifactWriteError(f"Unknown artifact: {artifact}")


def write_text_atomic(path: Path, content: str) -> None:
    """Write text to path through a temporary file in the same directory."""
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as handle:
            handle.write(content)
        os.replace(temp_name, path)
    except BaseException:
        if os.path.exists(temp_name):
            os.remove(temp_name)
        raise


def write_artifacts(
    output_dir: Union[str, Path],
    stem: str,
    artifacts: Mapping[str, str]
) -> Dict[str, Path]:
    """
    Persist artifacts to the output directory.

    Args:
        output_dir: Destination directory (created if missing)
        stem: File stem of the run (mapping id or table name)
        artifacts: Artifact name -> text content

    Returns:
        Artifact name -> written path

    Raises:
        ArtifactWriteError: If the directory or any file cannot be written
    """
    output_dir = Path(output_dir)
    file_names = {artifact: artifact_file_name(artifact, stem) for artifact in artifacts}

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ArtifactWriteError(f"Cannot create output directory {output_dir}: {e}") from e

    written = {}
    for artifact, content in artifacts.items():
        path = output_dir / file_names[artifact]
        try:
            write_text_atomic(path, content)
        except OSError as e:
            logger.error(f"❌ Failed to write {artifact} to {path}: {e}")
            raise ArtifactWriteError(f"Cannot write {artifact} to {path}: {e}") from e
        written[artifact] = path
        logger.info(f"✅ Wrote {artifact}: {path}")

    return written

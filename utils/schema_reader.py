"""
=================================================
Interface definition (Avro schema) reader.
=================================================

Reads the Avro interface definition of the source record and exposes what
the generator needs from it:
    - the raw schema text (embedded base64-encoded in the model mapping)
    - the ordered field names (the allowlist of columns to map)
    - the record identifier namespace.recordName

Two formats are accepted:
    - .avsc / .json / .avpr: Avro JSON schema or protocol
    - .avdl: Avro IDL; the first record declared in the protocol is used

Example:
    >>> from utils.schema_reader import read_interface_definition
    >>>
    >>> definition = read_interface_definition('schemas/person.avdl')
    >>> definition.record_id
    'com.example.person.Person'
    >>> definition.fields
    ('id', 'name')
"""

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from core.logger import get_logger

logger = get_logger(__name__)

IDL_SUFFIXES = ('.avdl',)

_COMMENT_OR_STRING = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/', re.DOTALL)
_PROTOCOL_NAMESPACE = re.compile(r'@namespace\s*\(\s*"([^"]*)"\s*\)\s*protocol\b')
_RECORD_DECLARATION = re.compile(
    r'(?:@namespace\s*\(\s*"([^"]*)"\s*\)\s*)?\brecord\s+`?(\w+)`?\s*\{'
)
_ANNOTATION = re.compile(r'@[\w.\-]+\s*(\((?:[^()"]|"[^"]*")*\))?')
_IDENTIFIER = re.compile(r'`?([A-Za-z_][A-Za-z0-9_]*)`?')


class MissingSchemaError(Exception):
    """Exception raised when an interface definition declares no record type.

    Fatal to the generation run: nothing can be mapped without the record.
    """
    pass


@dataclass(frozen=True)
class InterfaceDefinition:
    """Record type declared by an interface definition.

    Attributes:
        schema_text: Raw text of the definition file
        record_name: Name of the record type
        namespace: Namespace of the record type, if any
        fields: Field names in declaration order
    """

    schema_text: str
    record_name: str
    namespace: Optional[str]
    fields: Tuple[str, ...]

    @property
    def record_id(self) -> str:
        """Record identifier used by every column binding."""
        if self.namespace:
            return f"{self.namespace}.{self.record_name}"
        return self.record_name


def _first_record(node: Any) -> Optional[Dict[str, Any]]:
    if isinstance(node, dict):
        if node.get('type') == 'record':
            return node
        # Avro protocol (.avpr)
        for declared in node.get('types', []):
            record = _first_record(declared)
            if record is not None:
                if 'namespace' not in record and node.get('namespace'):
                    record = dict(record, namespace=node['namespace'])
                return record
    elif isinstance(node, list):
        for member in node:
            record = _first_record(member)
            if record is not None:
                return record
    return None


def parse_json_schema(schema_text: str) -> InterfaceDefinition:
    """
    Parse an Avro JSON schema or protocol.

    Raises:
        MissingSchemaError: If the text is not JSON or declares no record
    """
    try:
        parsed = json.loads(schema_text)
    except json.JSONDecodeError as e:
        raise MissingSchemaError(f"Interface definition is not valid JSON: {e}") from e

    record = _first_record(parsed)
    if record is None or not record.get('name'):
        raise MissingSchemaError("No record type found in the interface definition")

    name = record['name']
    namespace = record.get('namespace')
    if '.' in name:
        namespace, name = name.rsplit('.', 1)

    fields = tuple(field['name'] for field in record.get('fields', []))
    return InterfaceDefinition(
        schema_text=schema_text,
        record_name=name,
        namespace=namespace or None,
        fields=fields
    )


def _record_body(text: str, start: int) -> str:
    """Text between the brace at start-1 and its matching closing brace."""
    depth = 1
    position = start
    while position < len(text) and depth:
        if text[position] == '{':
            depth += 1
        elif text[position] == '}':
            depth -= 1
        position += 1
    if depth:
        raise MissingSchemaError("Unterminated record declaration in interface definition")
    return text[start:position - 1]


def _strip_comments(text: str) -> str:
    """Remove comments, leaving string literals untouched."""
    def replace(match):
        token = match.group(0)
        return token if token.startswith('"') else ' '

    return _COMMENT_OR_STRING.sub(replace, text)


def _field_name(statement: str) -> Optional[str]:
    declaration = statement.split('=', 1)[0]
    identifiers = _IDENTIFIER.findall(declaration)
    return identifiers[-1] if len(identifiers) >= 2 else None


def parse_idl(schema_text: str) -> InterfaceDefinition:
    """
    Parse the first record of an Avro IDL protocol.

    Only the record name, namespace and field names are extracted; field
    types and defaults are left to the raw schema text.

    Raises:
        MissingSchemaError: If the protocol declares no record
    """
    text = _strip_comments(schema_text)

    record = _RECORD_DECLARATION.search(text)
    if record is None:
        raise MissingSchemaError("No record type found in the interface definition")

    protocol_namespace = _PROTOCOL_NAMESPACE.search(text)
    namespace = record.group(1) or (protocol_namespace.group(1) if protocol_namespace else None)

    body = _ANNOTATION.sub(' ', _record_body(text, record.end()))
    fields = []
    for statement in body.split(';'):
        if not statement.strip():
            continue
        name = _field_name(statement)
        if name:
            fields.append(name)

    return InterfaceDefinition(
        schema_text=schema_text,
        record_name=record.group(2),
        namespace=namespace or None,
        fields=tuple(fields)
    )


def read_interface_definition(path: Union[str, Path]) -> InterfaceDefinition:
    """
    Read an interface definition file.

    Args:
        path: Path to an .avdl, .avsc, .avpr or .json file

    Returns:
        InterfaceDefinition of the first record declared

    Raises:
        MissingSchemaError: If the file declares no record type
        OSError: If the file cannot be read
    """
    path = Path(path)
    logger.info(f"Reading interface definition from path: {path}")
    schema_text = path.read_text(encoding='utf-8')

    if path.suffix.lower() in IDL_SUFFIXES:
        definition = parse_idl(schema_text)
    else:
        definition = parse_json_schema(schema_text)

    logger.debug(
        f"Interface definition {definition.record_id} declares {len(definition.fields)} fields"
    )
    return definition

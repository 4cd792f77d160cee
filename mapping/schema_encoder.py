"""
===============================
Schema text transport encoding.
===============================

The model mapping embeds the raw interface definition as base64 of its
UTF-8 bytes.

Example:
    >>> from mapping.schema_encoder import decode, encode
    >>>
    >>> encode('record R {}')
    'cmVjb3JkIFIge30='
    >>> decode('cmVjb3JkIFIge30=')
    'record R {}'
"""

import base64


def encode(schema_text: str) -> str:
    """Encode schema text to a base64 string."""
    return base64.b64encode(schema_text.encode('utf-8')).decode('ascii')


def decode(encoded: str) -> str:
    """Decode a base64 string produced by encode()."""
    return base64.b64decode(encoded.encode('ascii')).decode('utf-8')

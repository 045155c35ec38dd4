"""
Canonical parameter encoding

The same bytes are fed to the signer and written to the POST body, so the
signed payload and the transmitted payload cannot diverge.

Format:
- keys sorted ascending at every nesting level
- compact separators, no whitespace
- non-ASCII characters left unescaped (UTF-8 on the wire)
- forward slashes escaped as ``\\/``, matching how the remote service
  re-encodes received parameters before checking the signature
"""

import json
from typing import Any, Mapping


def canonical_json(params: Mapping[str, Any]) -> str:
    """
    Encode request parameters into their canonical JSON text

    Args:
        params: Parameter mapping (str keys; JSON-serializable values)

    Returns:
        Canonical JSON string

    Raises:
        TypeError: If a value is not JSON-serializable
    """
    encoded = json.dumps(
        dict(params),
        ensure_ascii=False,
        sort_keys=True,
        separators=(",", ":"),
    )
    return encoded.replace("/", "\\/")


def canonical_bytes(params: Mapping[str, Any]) -> bytes:
    """UTF-8 form of :func:`canonical_json`"""
    return canonical_json(params).encode("utf-8")

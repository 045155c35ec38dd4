"""Cryptography module initialization

This module provides the request authentication primitives:
- canonical_json / canonical_bytes: shared parameter encoding
- Signer: keyed request signatures
- NonceGenerator: single-use request identifiers
"""

from open_kkt.crypto.canonical import canonical_json, canonical_bytes
from open_kkt.crypto.signer import Signer
from open_kkt.crypto.nonce import NonceGenerator

__all__ = [
    "canonical_json",
    "canonical_bytes",
    "Signer",
    "NonceGenerator",
]

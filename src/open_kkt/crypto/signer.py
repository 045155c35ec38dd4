"""
Request Signature Service
Computes the ``sign`` header required on every Open API request

The signature is a keyed MD5 digest: the canonical JSON form of the request
parameters with the integration secret appended. The remote service
recomputes it from the received parameters, so the encoding must be
deterministic and independent of the order in which parameters were added.
"""

import hmac
from typing import Any, Mapping

from cryptography.hazmat.primitives import hashes

from open_kkt.crypto.canonical import canonical_json
from open_kkt.exceptions import ValidationError


class Signer:
    """
    Signs request parameter maps with the integration secret

    Example:
        >>> signer = Signer("secret")
        >>> len(signer.sign({"app_id": "42", "nonce": "nonce_1700000000123456"}))
        32
    """

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValidationError("Signing secret is required", field="secret")
        self._secret = secret

    def sign(self, params: Mapping[str, Any]) -> str:
        """
        Generate the request signature

        Args:
            params: Request parameters to sign

        Returns:
            32-character lowercase hex digest
        """
        payload = (canonical_json(params) + self._secret).encode("utf-8")
        digest = hashes.Hash(hashes.MD5())
        digest.update(payload)
        return digest.finalize().hex()

    def verify(self, params: Mapping[str, Any], signature: str) -> bool:
        """Check a signature against the parameters (constant time)"""
        return hmac.compare_digest(self.sign(params), signature.lower())

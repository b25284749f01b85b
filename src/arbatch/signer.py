"""
Arweave wallet signer.

Wallets are RSA-4096 keys exchanged as JWK documents. The key handling and
PSS signing are PyArweave's; this adapter only loads wallets and maps
failures onto SigningError.
"""

import json
import logging
from typing import Any, Dict

from ar import Wallet
from jose.exceptions import JWKError

from .errors import SigningError

logger = logging.getLogger(__name__)

JWK_FIELDS = ("n", "e", "d", "p", "q", "dp", "dq", "qi")


class ArweaveSigner:
    """Signs records and transactions with an RSA wallet key."""

    def __init__(self, wallet: Wallet):
        self.wallet = wallet

    @classmethod
    def from_jwk(cls, jwk: Dict[str, Any]) -> "ArweaveSigner":
        missing = [name for name in JWK_FIELDS if name not in jwk]
        if missing:
            raise SigningError(f"Invalid JWK wallet: missing {', '.join(missing)}")
        try:
            return cls(Wallet.from_data(dict(jwk)))
        except (JWKError, TypeError, ValueError) as e:
            raise SigningError(f"Invalid JWK wallet: {e}") from e

    @classmethod
    def load(cls, wallet_path: str) -> "ArweaveSigner":
        """Load a JWK wallet file."""
        try:
            with open(wallet_path, "r") as f:
                jwk = json.load(f)
        except (OSError, ValueError) as e:
            raise SigningError(f"Cannot load wallet {wallet_path}: {e}") from e
        logger.debug("Loaded wallet %s", wallet_path)
        return cls.from_jwk(jwk)

    @classmethod
    def generate(cls) -> "ArweaveSigner":
        return cls(Wallet.generate())

    def to_jwk(self) -> Dict[str, str]:
        return {
            name: value
            for name, value in self.wallet.jwk_data.items()
            if name != "p2s"
        }

    @property
    def rsa(self):
        """The pycryptodome key data items are signed with."""
        return self.wallet.rsa

    @property
    def owner(self) -> bytes:
        return self.wallet.raw_owner

    @property
    def address(self) -> str:
        return self.wallet.address

    def sign(self, message: bytes) -> bytes:
        try:
            return self.wallet.sign(message)
        except (TypeError, ValueError) as e:
            raise SigningError(f"Signing failed: {e}") from e

    def verify(self, message: bytes, signature: bytes) -> bool:
        return bool(self.wallet.verify(message, signature))

"""Wallet loading and Sui transaction signing."""
from __future__ import annotations

import base64
import hashlib
import logging
import re
from dataclasses import dataclass, field

import nacl.signing
from bech32 import bech32_decode, convertbits

from .errors import MalformedKey

logger = logging.getLogger(__name__)

SUI_PRIVATE_KEY_PREFIX = "suiprivkey"
ED25519_FLAG = 0x00
# Intent scope TransactionData, version V0, app id Sui.
TRANSACTION_INTENT = bytes([0, 0, 0])

_HEX_KEY_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")


@dataclass(frozen=True)
class Wallet:
    """An Ed25519 keypair and its Sui address."""

    address: str
    signing_key: nacl.signing.SigningKey = field(repr=False, compare=False)

    @classmethod
    def from_seed(cls, seed: bytes) -> Wallet:
        signing_key = nacl.signing.SigningKey(seed)
        public_key = bytes(signing_key.verify_key)
        return cls(address=derive_address(public_key), signing_key=signing_key)

    @property
    def short_address(self) -> str:
        return short_address(self.address)

    def sign_transaction(self, tx_bytes: bytes) -> str:
        """Return the base64 serialized signature ``flag || sig || pubkey``."""
        digest = hashlib.blake2b(TRANSACTION_INTENT + tx_bytes, digest_size=32).digest()
        signature = self.signing_key.sign(digest).signature
        public_key = bytes(self.signing_key.verify_key)
        return base64.b64encode(bytes([ED25519_FLAG]) + signature + public_key).decode()


def derive_address(public_key: bytes) -> str:
    """Sui address: blake2b-256 over the scheme flag and the public key."""
    return "0x" + hashlib.blake2b(
        bytes([ED25519_FLAG]) + public_key, digest_size=32
    ).hexdigest()


def short_address(address: str) -> str:
    return f"0x...{address[-4:]}"


def _decode_bech32_key(key: str) -> bytes:
    hrp, data = bech32_decode(key)
    if hrp != SUI_PRIVATE_KEY_PREFIX or data is None:
        raise MalformedKey("Invalid bech32 private key")

    payload = convertbits(data, 5, 8, False)
    if payload is None or len(payload) != 33:
        raise MalformedKey("Invalid bech32 private key payload")

    if payload[0] != ED25519_FLAG:
        raise MalformedKey(f"Unsupported key scheme flag {payload[0]:#04x}")
    return bytes(payload[1:])


def parse_private_key(key: str) -> Wallet:
    """Parse a ``suiprivkey1...`` secret or a 64-char hex seed."""
    key = key.strip()
    if key.lower().startswith(SUI_PRIVATE_KEY_PREFIX):
        return Wallet.from_seed(_decode_bech32_key(key))
    if _HEX_KEY_RE.match(key):
        return Wallet.from_seed(bytes.fromhex(key[2:] if key.startswith("0x") else key))
    raise MalformedKey("Private key is neither bech32 nor 64 hex characters")


def load_wallets(private_keys: str | None) -> list[Wallet]:
    """Load wallets from a comma-separated key list, skipping malformed keys."""
    if not private_keys:
        logger.warning("PRIVATE_KEYS environment variable is not set. No wallets loaded.")
        return []

    wallets: list[Wallet] = []
    for key in (k.strip() for k in private_keys.split(",")):
        if not key:
            continue
        try:
            wallets.append(parse_private_key(key))
        except MalformedKey as e:
            logger.warning(
                'Failed to load wallet from private key "%s...": %s', key[:10], e
            )

    logger.info("Loaded %d wallets", len(wallets))
    return wallets

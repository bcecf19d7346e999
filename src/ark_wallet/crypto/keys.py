"""Key handling — passphrase and WIF key pairs, Base58Check, ECDSA.

Implements the key material the transaction signer needs:
- Base58 / Base58Check encoding and decoding
- Key pairs from a passphrase (private key = SHA-256 of the passphrase)
- Key pairs from a WIF string (compressed keys only)
- Deterministic (RFC 6979) ECDSA signing on secp256k1, low-S DER output
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Self

from ecdsa import SECP256k1, BadSignatureError, SigningKey, VerifyingKey
from ecdsa.util import sigdecode_der, sigencode_der_canonize

from ark_wallet.errors import SigningError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_CURVE = SECP256k1

# WIF payload: version byte + 32-byte key + compression flag
_WIF_PAYLOAD_LENGTH = 34
_WIF_COMPRESSED_FLAG = 0x01

# ---------------------------------------------------------------------------
# Hashing
# ---------------------------------------------------------------------------


def sha256(data: bytes) -> bytes:
    """Single SHA-256 hash."""
    return hashlib.sha256(data).digest()


def sha256d(data: bytes) -> bytes:
    """Double SHA-256 hash (SHA256(SHA256(data)))."""
    return sha256(sha256(data))


# ---------------------------------------------------------------------------
# Base58Check encoding / decoding
# ---------------------------------------------------------------------------

_B58_ALPHABET = b"123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def base58_encode(payload: bytes) -> str:
    """Encode raw bytes to Base58 (no checksum)."""
    n = int.from_bytes(payload, "big")
    result: list[int] = []
    while n > 0:
        n, remainder = divmod(n, 58)
        result.append(_B58_ALPHABET[remainder])
    for byte in payload:
        if byte == 0:
            result.append(_B58_ALPHABET[0])
        else:
            break
    return bytes(reversed(result)).decode("ascii")


def base58_decode(s: str) -> bytes:
    """Decode a Base58 string to raw bytes (no checksum).

    Raises:
        ValueError: If ``s`` contains characters outside the Base58 alphabet.
    """
    n = 0
    for char in s:
        n = n * 58 + _B58_ALPHABET.index(char.encode("ascii"))
    result = n.to_bytes((n.bit_length() + 7) // 8, "big") if n > 0 else b""
    pad_count = len(s) - len(s.lstrip("1"))
    return b"\x00" * pad_count + result


def base58check_encode(payload: bytes) -> str:
    """Encode bytes with a 4-byte SHA256d checksum (Base58Check)."""
    return base58_encode(payload + sha256d(payload)[:4])


def base58check_decode(s: str) -> bytes:
    """Decode a Base58Check string, verifying the checksum.

    Raises:
        ValueError: If the string is too short or the checksum is invalid.
    """
    raw = base58_decode(s)
    if len(raw) < 4:
        msg = "Base58Check string too short"
        raise ValueError(msg)
    payload, checksum = raw[:-4], raw[-4:]
    if checksum != sha256d(payload)[:4]:
        msg = "Base58Check checksum mismatch"
        raise ValueError(msg)
    return payload


# ---------------------------------------------------------------------------
# Key pair
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyPair:
    """A secp256k1 private key and its compressed public key."""

    private_key: bytes
    public_key: bytes

    @classmethod
    def from_private_key(cls, private_key: bytes) -> Self:
        """Derive the compressed public key of a 32-byte private key.

        Raises:
            SigningError: If the key is not a valid secp256k1 scalar.
        """
        try:
            sk = SigningKey.from_string(private_key, curve=_CURVE)
        except Exception as exc:  # ecdsa raises MalformedPointError and ValueError
            msg = f"Invalid private key: {exc}"
            raise SigningError(msg) from exc
        return cls(
            private_key=private_key,
            public_key=sk.get_verifying_key().to_string("compressed"),
        )

    @classmethod
    def from_passphrase(cls, passphrase: str) -> Self:
        """Key pair whose private key is SHA-256 of the UTF-8 passphrase."""
        return cls.from_private_key(sha256(passphrase.encode("utf-8")))

    @classmethod
    def from_wif(cls, wif: str) -> Self:
        """Decode a WIF string holding a compressed private key.

        Raises:
            SigningError: On bad checksum, bad length or an uncompressed key.
        """
        try:
            payload = base58check_decode(wif)
        except ValueError as exc:
            msg = f"Invalid WIF: {exc}"
            raise SigningError(msg) from exc
        if len(payload) != _WIF_PAYLOAD_LENGTH or payload[-1] != _WIF_COMPRESSED_FLAG:
            msg = "Invalid WIF: expected a compressed 32-byte private key"
            raise SigningError(msg)
        return cls.from_private_key(payload[1:33])

    def to_wif(self, version: int) -> str:
        """Encode the private key as WIF with the network's version byte."""
        return base58check_encode(
            bytes([version]) + self.private_key + bytes([_WIF_COMPRESSED_FLAG])
        )

    @property
    def public_key_hex(self) -> str:
        return self.public_key.hex()

    def sign(self, message_hash: bytes) -> bytes:
        """Sign a 32-byte hash (deterministic, low-S, DER-encoded)."""
        sk = SigningKey.from_string(self.private_key, curve=_CURVE)
        return sk.sign_digest_deterministic(
            message_hash,
            hashfunc=hashlib.sha256,
            sigencode=sigencode_der_canonize,
        )


def verify_signature(public_key: bytes, message_hash: bytes, signature: bytes) -> bool:
    """Verify a DER signature against a compressed or uncompressed public key."""
    vk = VerifyingKey.from_string(public_key, curve=_CURVE)
    try:
        return vk.verify_digest(signature, message_hash, sigdecode=sigdecode_der)
    except BadSignatureError:
        return False

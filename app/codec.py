"""Encrypted, compressed serialization of the catalog archive."""

from __future__ import annotations

import binascii
import gzip
import hashlib
import json
import os
import zlib
from dataclasses import dataclass
from typing import Any

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

IV_SIZE = 16
FRAME_SEPARATOR = ":"


def derive_key(secret: str) -> bytes:
    """Derive the 256-bit AES key from the configured secret."""

    return hashlib.sha256(secret.encode("utf-8")).digest()


@dataclass(slots=True)
class DecodeResult:
    """Outcome of decoding a stored blob."""

    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SnapshotCodec:
    """Gzip + AES-256-CBC codec producing ``ivHex:cipherHex`` blobs.

    A fresh random IV is generated on every :meth:`encode` call. Decoding
    never raises: malformed framing, a wrong key or a corrupt payload are
    reported through :class:`DecodeResult`.
    """

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("A secret is required to initialise SnapshotCodec")
        self._key = derive_key(secret)

    def encode(self, value: Any) -> str:
        text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        compressed = gzip.compress(text.encode("utf-8"), mtime=0)

        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(compressed) + padder.finalize()

        iv = os.urandom(IV_SIZE)
        encryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return f"{iv.hex()}{FRAME_SEPARATOR}{ciphertext.hex()}"

    def decode_result(self, blob: str | bytes) -> DecodeResult:
        if isinstance(blob, bytes):
            try:
                blob = blob.decode("ascii")
            except UnicodeDecodeError:
                return DecodeResult(error="blob is not ASCII text")

        iv_hex, separator, cipher_hex = blob.strip().partition(FRAME_SEPARATOR)
        if not separator:
            return DecodeResult(error="missing iv separator")
        try:
            iv = bytes.fromhex(iv_hex)
            ciphertext = bytes.fromhex(cipher_hex)
        except ValueError:
            return DecodeResult(error="invalid hex encoding")
        if len(iv) != IV_SIZE:
            return DecodeResult(error=f"expected a {IV_SIZE}-byte iv, got {len(iv)}")
        if not ciphertext:
            return DecodeResult(error="empty ciphertext")

        try:
            decryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            compressed = unpadder.update(padded) + unpadder.finalize()
        except ValueError:
            return DecodeResult(error="decryption failed (wrong key or corrupt data)")

        try:
            text = gzip.decompress(compressed).decode("utf-8")
        except (OSError, EOFError, zlib.error, binascii.Error, UnicodeDecodeError):
            return DecodeResult(error="payload is not valid gzip-compressed UTF-8")

        try:
            return DecodeResult(value=json.loads(text))
        except json.JSONDecodeError:
            return DecodeResult(error="payload is not valid JSON")

    def decode(self, blob: str | bytes) -> Any | None:
        """Return the decoded value, or ``None`` when the blob is unusable."""

        return self.decode_result(blob).value

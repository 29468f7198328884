"""SHA-256 and HMAC-SHA256 primitives.

Payloads are hashed as raw bytes. Only the short protocol strings (dates,
region, service, the string to sign) are ever encoded from text.
"""

import hashlib
import hmac
from typing import BinaryIO, Union

Message = Union[str, bytes, bytearray, memoryview]

EMPTY_SHA256 = 'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'

# Chunk size used when hashing a stream.
PAYLOAD_BUFFER = 1024 * 1024


def _to_bytes(msg: Message) -> bytes:
    if isinstance(msg, str):
        return msg.encode('utf-8')
    return bytes(msg)


def sha256(data: Message) -> bytes:
    return hashlib.sha256(_to_bytes(data)).digest()


def sha256_hex(data: Message) -> str:
    return hashlib.sha256(_to_bytes(data)).hexdigest()


def sha256_hex_stream(stream: BinaryIO) -> str:
    """Hash a readable binary stream without loading it whole.

    A seekable stream is left at the position it had on entry.
    """
    position = stream.tell() if stream.seekable() else None
    checksum = hashlib.sha256()
    for chunk in iter(lambda: stream.read(PAYLOAD_BUFFER), b''):
        checksum.update(chunk)
    if position is not None:
        stream.seek(position)
    return checksum.hexdigest()


def hmac_sha256(key: bytes, msg: Message) -> bytes:
    return hmac.new(key, _to_bytes(msg), hashlib.sha256).digest()


def hmac_sha256_hex(key: bytes, msg: Message) -> str:
    return hmac.new(key, _to_bytes(msg), hashlib.sha256).hexdigest()

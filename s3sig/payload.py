"""Payload sources: raw bytes, file paths and binary file objects.

A ``str`` handed to these helpers is a file path, not a body.
"""

import io
import os
from typing import BinaryIO, Union

from .errors import PayloadReadError

PayloadSource = Union[bytes, bytearray, memoryview, str, 'os.PathLike[str]', BinaryIO]


def _describe(source) -> str:
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    return getattr(source, 'name', None) or type(source).__name__


def read_payload(source: PayloadSource) -> bytes:
    """Return the exact bytes of ``source``."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    if isinstance(source, (str, os.PathLike)):
        try:
            with open(source, 'rb') as f:
                return f.read()
        except OSError as exc:
            raise PayloadReadError(source=_describe(source), reason=exc.strerror or exc) from exc
    if hasattr(source, 'read'):
        try:
            data = source.read()
        except OSError as exc:
            raise PayloadReadError(source=_describe(source), reason=exc.strerror or exc) from exc
        if isinstance(data, str):
            raise PayloadReadError(source=_describe(source), reason='stream is open in text mode')
        return bytes(data)
    raise TypeError(f'Unsupported payload source: {type(source).__name__}')


def payload_size(source: PayloadSource) -> int:
    """Return the size of ``source`` in bytes without reading it."""
    if isinstance(source, (bytes, bytearray)):
        return len(source)
    if isinstance(source, memoryview):
        return source.nbytes
    if isinstance(source, (str, os.PathLike)):
        try:
            return os.stat(source).st_size
        except OSError as exc:
            raise PayloadReadError(source=_describe(source), reason=exc.strerror or exc) from exc
    try:
        position = source.tell()
        end = source.seek(0, io.SEEK_END)
        source.seek(position)
    except (AttributeError, OSError) as exc:
        raise PayloadReadError(source=_describe(source), reason='stream is not seekable') from exc
    return end - position

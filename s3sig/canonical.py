"""Canonical request construction for Signature Version 4.

The canonical request is six lines joined by ``\\n``::

    METHOD
    CanonicalURI
    CanonicalQueryString
    CanonicalHeaders        (each header ends with its own newline)
    SignedHeaders
    HashedPayload

The server rebuilds the same string from what it receives, so every byte
here has to match what the transport sends.
"""

from typing import Iterable, List, Mapping, Tuple, Union
from urllib.parse import quote

from .errors import InvalidRequestDescriptorError
from .models import QueryParams, RequestDescriptor

# quote() always leaves ASCII letters and digits alone.
UNRESERVED = '-_.~'

QueryInput = Union[Mapping[str, str], QueryParams, Iterable[Tuple[str, str]]]


def uri_encode(value: str, safe: str = '') -> str:
    return quote(value, safe=UNRESERVED + safe)


def remove_dot_segments(path: str) -> str:
    # RFC 3986 section 5.2.4; empty segments are dropped too.
    if not path:
        return ''
    output = []
    for segment in path.split('/'):
        if segment and segment != '.':
            if segment == '..':
                if output:
                    output.pop()
            else:
                output.append(segment)
    first = '/' if path[0] == '/' else ''
    last = '/' if path[-1] == '/' and output else ''
    return first + '/'.join(output) + last


def canonical_uri(path: str, normalize: bool = False) -> str:
    """Encode a decoded request path.

    S3 signs the path as given, with consecutive slashes preserved. Every
    other service signs the normalized path encoded twice.
    """
    if not path:
        return '/'
    if not path.startswith('/'):
        path = '/' + path
    if not normalize:
        return '/'.join(uri_encode(segment) for segment in path.split('/'))
    path = remove_dot_segments(path)
    encoded = '/'.join(uri_encode(segment) for segment in path.split('/'))
    return uri_encode(encoded, safe='/')


def canonical_query_string(params: QueryInput) -> str:
    if isinstance(params, Mapping):
        params = params.items()
    # Sort by encoded name, then by encoded value for repeated names.
    pairs = sorted((uri_encode(str(name)), uri_encode(str(value))) for name, value in params)
    return '&'.join(f'{name}={value}' for name, value in pairs)


def normalize_header_value(value) -> str:
    # Trim both ends and squeeze internal whitespace runs to one space.
    return ' '.join(str(value).split())


def canonical_headers(headers: Mapping[str, str]) -> Tuple[str, List[str]]:
    """Return the canonical header block and the sorted signed header names.

    Names that differ only by case collapse into one entry; they must agree
    on the value once normalized.
    """
    normalized = {}
    for name, value in headers.items():
        lname = name.strip().lower()
        if not lname:
            raise InvalidRequestDescriptorError(reason='empty header name')
        lvalue = normalize_header_value(value)
        if lname in normalized and normalized[lname] != lvalue:
            raise InvalidRequestDescriptorError(
                reason=f'header {lname!r} given more than once with different values'
            )
        normalized[lname] = lvalue
    names = sorted(normalized)
    block = ''.join(f'{name}:{normalized[name]}\n' for name in names)
    return block, names


def signed_header_names(names: Iterable[str]) -> str:
    return ';'.join(sorted({name.strip().lower() for name in names}))


def canonical_method(method: str) -> str:
    method = (method or '').strip().upper()
    if not method or any(ch.isspace() for ch in method):
        raise InvalidRequestDescriptorError(reason=f'bad HTTP method {method!r}')
    return method


def build_canonical_request(
        request: RequestDescriptor,
        payload_hash: str,
        normalize_path: bool = False
) -> Tuple[str, str]:
    """Build the canonical request for ``request``.

    Every header of ``request`` is signed. Returns the canonical request and
    the SignedHeaders value.
    """
    block, names = canonical_headers(request.headers)
    signed_headers = signed_header_names(names)
    canonical_request = '\n'.join([
        canonical_method(request.method),
        canonical_uri(request.path, normalize=normalize_path),
        canonical_query_string(request.query),
        block,
        signed_headers,
        payload_hash,
    ])
    return canonical_request, signed_headers

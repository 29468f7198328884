"""Value types passed through the signing pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, Union
from urllib.parse import unquote, urlsplit

from .errors import (
    InvalidRequestDescriptorError,
    MissingCredentialError,
    UnsupportedRegionOrServiceError,
)

Headers = Dict[str, str]
QueryParams = Tuple[Tuple[str, str], ...]

SCOPE_TERMINATOR = 'aws4_request'
DEFAULT_PORTS = {'http': 80, 'https': 443}


class Service(Enum):
    S3 = 's3'
    DYNAMODB = 'dynamodb'
    LAMBDA = 'lambda'
    IAM = 'iam'
    STS = 'sts'
    EC2 = 'ec2'


def service_name(service: Union[str, Service]) -> str:
    return service.value if isinstance(service, Service) else service


def as_utc(timestamp: datetime) -> datetime:
    """Return ``timestamp`` in UTC. Naive datetimes are taken to be UTC already."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


@dataclass(frozen=True)
class Credentials:
    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)

    def validate(self) -> None:
        if not self.access_key_id:
            raise MissingCredentialError(name='access key id')
        if not self.secret_access_key:
            raise MissingCredentialError(name='secret access key')


@dataclass(frozen=True)
class Scope:
    """The date/region/service a signing key is valid for."""

    date8: str
    region: str
    service: str
    terminator: str = SCOPE_TERMINATOR

    def __post_init__(self):
        if not self.region or not self.region.strip():
            raise UnsupportedRegionOrServiceError(field='region', value=self.region)
        if not self.service or not self.service.strip():
            raise UnsupportedRegionOrServiceError(field='service', value=self.service)

    @classmethod
    def from_timestamp(cls, timestamp: datetime, region: str, service: Union[str, Service]) -> 'Scope':
        return cls(as_utc(timestamp).strftime('%Y%m%d'), region, service_name(service))

    def __str__(self) -> str:
        return '/'.join((self.date8, self.region, self.service, self.terminator))


def host_from_url(url: str) -> str:
    """Derive the Host header for ``url``.

    The result is lowercase, drops the default port for the scheme, drops any
    userinfo and keeps IPv6 literals in brackets.
    """
    parts = urlsplit(url)
    host = parts.hostname
    if not parts.scheme or not host:
        raise InvalidRequestDescriptorError(reason=f'not an absolute URL: {url!r}')
    try:
        port = parts.port
    except ValueError as exc:
        raise InvalidRequestDescriptorError(reason=f'bad port in {url!r}') from exc
    if ':' in host:
        host = f'[{host}]'
    if port is not None and port != DEFAULT_PORTS.get(parts.scheme):
        host = f'{host}:{port}'
    return host


def split_query(query: str) -> QueryParams:
    """Split a raw query string into decoded ``(name, value)`` pairs.

    ``+`` is kept literally; only percent escapes are decoded.
    """
    pairs = []
    for item in query.split('&'):
        if not item:
            continue
        name, _, value = item.partition('=')
        pairs.append((unquote(name), unquote(value)))
    return tuple(pairs)


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything about one HTTP request that goes into its signature.

    ``path`` is the decoded path; it is percent-encoded during
    canonicalization. ``payload`` is the exact body that will be sent.
    """

    method: str
    host: str
    path: str = '/'
    query: QueryParams = ()
    headers: Mapping[str, str] = field(default_factory=dict)
    payload: bytes = b''

    @classmethod
    def from_url(
            cls,
            method: str,
            url: str,
            headers: Optional[Mapping[str, str]] = None,
            payload: Union[str, bytes, None] = None
    ) -> 'RequestDescriptor':
        host = host_from_url(url)
        parts = urlsplit(url)
        if isinstance(payload, str):
            payload = payload.encode('utf-8')
        return cls(
            method=method,
            host=host,
            path=unquote(parts.path) or '/',
            query=split_query(parts.query),
            headers=dict(headers or {}),
            payload=payload or b'',
        )


@dataclass(frozen=True)
class SignedRequest:
    """Result of signing: the Authorization value and the headers to send.

    ``headers`` must reach the wire unmodified; any change after signing
    invalidates the signature.
    """

    authorization: str
    headers: Headers
    signature: str
    signed_headers: str
    scope: Scope
    canonical_request: str = field(repr=False)
    string_to_sign: str = field(repr=False)

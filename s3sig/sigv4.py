"""AWS Signature Version 4 header signing."""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Mapping, Optional, Union

from .canonical import build_canonical_request, normalize_header_value
from .digest import hmac_sha256_hex, sha256_hex
from .errors import ClockSourceError, InvalidRequestDescriptorError, UnsupportedRegionOrServiceError
from .keys import SigningKeyCache, derive_signing_key
from .models import (
    Credentials,
    Headers,
    RequestDescriptor,
    Scope,
    Service,
    SignedRequest,
    as_utc,
    service_name,
)
from .payload import PayloadSource, read_payload

logger = logging.getLogger(__name__)

ALGORITHM = 'AWS4-HMAC-SHA256'
SIGV4_TIMESTAMP = '%Y%m%dT%H%M%SZ'
UNSIGNED_PAYLOAD = 'UNSIGNED-PAYLOAD'

# Set by the transport or proxies along the way, so never signed.
UNSIGNED_HEADERS = frozenset(('expect', 'transfer-encoding', 'user-agent', 'x-amzn-trace-id'))

# Replaced on every signing pass.
GENERATED_HEADERS = frozenset(('authorization', 'x-amz-date', 'x-amz-content-sha256', 'x-amz-security-token'))


def amz_date(timestamp: datetime) -> str:
    return as_utc(timestamp).strftime(SIGV4_TIMESTAMP)


def build_string_to_sign(timestamp: datetime, scope: Scope, canonical_request: str) -> str:
    return '\n'.join([
        ALGORITHM,
        amz_date(timestamp),
        str(scope),
        sha256_hex(canonical_request),
    ])


def compute_signature(signing_key: bytes, string_to_sign: str) -> str:
    return hmac_sha256_hex(signing_key, string_to_sign)


def build_authorization(access_key_id: str, scope: Scope, signed_headers: str, signature: str) -> str:
    return (
        f'{ALGORITHM} Credential={access_key_id}/{scope}, '
        f'SignedHeaders={signed_headers}, Signature={signature}'
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SigV4Signer:
    """Signs requests for one set of credentials, region and service.

    Signing is a pure function of the request, the credentials and the
    timestamp; one signer may be used from several threads at once. Pass a
    shared ``key_cache`` to reuse signing keys across signers.
    """

    def __init__(
            self,
            access_key: str,
            secret_key: str,
            region: str,
            service: Union[str, Service] = Service.S3,
            token: Optional[str] = None,
            *,
            clock: Optional[Callable[[], datetime]] = None,
            key_cache: Optional[SigningKeyCache] = None
    ):
        self.credentials = Credentials(access_key, secret_key, token or None)
        self.credentials.validate()
        self.region = region
        self.service = service_name(service)
        if not region or not region.strip():
            raise UnsupportedRegionOrServiceError(field='region', value=region)
        if not self.service or not self.service.strip():
            raise UnsupportedRegionOrServiceError(field='service', value=self.service)
        self._clock = clock or _utcnow
        self._key_cache = key_cache

    @property
    def normalize_path(self) -> bool:
        # S3 object keys are signed as sent.
        return self.service != Service.S3.value

    @property
    def sends_content_hash(self) -> bool:
        # S3 requires X-Amz-Content-SHA256; other services only sign the hash.
        return self.service == Service.S3.value

    def now(self) -> datetime:
        try:
            timestamp = self._clock()
        except Exception as exc:
            raise ClockSourceError(reason=str(exc) or type(exc).__name__) from exc
        if not isinstance(timestamp, datetime):
            raise ClockSourceError(reason=f'clock returned {type(timestamp).__name__}, not a datetime')
        return as_utc(timestamp)

    def signing_key(self, scope: Scope) -> bytes:
        if self._key_cache is not None:
            return self._key_cache.get(self.credentials, scope)
        return derive_signing_key(
            self.credentials.secret_access_key, scope.date8, scope.region, scope.service
        )

    def _prepare_headers(self, request: RequestDescriptor, timestamp: datetime, payload_hash: str) -> Headers:
        headers: Headers = {}
        seen = {}
        for name, value in request.headers.items():
            lname = name.strip().lower()
            if lname in GENERATED_HEADERS:
                continue
            if lname in seen:
                if normalize_header_value(value) != normalize_header_value(headers[seen[lname]]):
                    raise InvalidRequestDescriptorError(
                        reason=f'header {lname!r} given more than once with different values'
                    )
                continue
            seen[lname] = name
            headers[name] = str(value)

        if 'host' not in seen:
            if not request.host or any(ch.isspace() for ch in request.host):
                raise InvalidRequestDescriptorError(reason=f'bad host {request.host!r}')
            headers['Host'] = request.host
        headers['X-Amz-Date'] = amz_date(timestamp)
        if self.sends_content_hash or payload_hash == UNSIGNED_PAYLOAD:
            headers['X-Amz-Content-SHA256'] = payload_hash
        if self.credentials.session_token:
            headers['X-Amz-Security-Token'] = self.credentials.session_token
        return headers

    def sign(
            self,
            request: RequestDescriptor,
            timestamp: Optional[datetime] = None,
            unsigned_payload: bool = False
    ) -> SignedRequest:
        """Sign ``request`` and return the Authorization value with the headers to send."""
        timestamp = self.now() if timestamp is None else as_utc(timestamp)
        scope = Scope.from_timestamp(timestamp, self.region, self.service)
        payload_hash = UNSIGNED_PAYLOAD if unsigned_payload else sha256_hex(request.payload)

        headers = self._prepare_headers(request, timestamp, payload_hash)
        headers_to_sign = {
            name: value for name, value in headers.items()
            if name.strip().lower() not in UNSIGNED_HEADERS
        }
        canonical_request, signed_headers = build_canonical_request(
            replace(request, headers=headers_to_sign),
            payload_hash,
            normalize_path=self.normalize_path,
        )
        logger.debug('CanonicalRequest:\n%s', canonical_request)
        string_to_sign = build_string_to_sign(timestamp, scope, canonical_request)
        logger.debug('StringToSign:\n%s', string_to_sign)

        signature = compute_signature(self.signing_key(scope), string_to_sign)
        authorization = build_authorization(
            self.credentials.access_key_id, scope, signed_headers, signature
        )
        headers['Authorization'] = authorization
        logger.debug('Signed %s %s with SignedHeaders=%s', request.method, request.path, signed_headers)

        return SignedRequest(
            authorization=authorization,
            headers=headers,
            signature=signature,
            signed_headers=signed_headers,
            scope=scope,
            canonical_request=canonical_request,
            string_to_sign=string_to_sign,
        )

    def create_headers(
            self,
            method: str,
            url: str,
            headers: Optional[Mapping[str, str]] = None,
            body: Union[str, bytes, None] = None
    ) -> Headers:
        """Sign a request given by URL and return the headers to send with it."""
        request = RequestDescriptor.from_url(method, url, headers, body)
        return self.sign(request).headers

    def sign_upload(
            self,
            host: str,
            key: str,
            payload: PayloadSource,
            storage_class: Optional[str] = None,
            content_type: Optional[str] = None,
            extra_headers: Optional[Mapping[str, str]] = None,
            timestamp: Optional[datetime] = None
    ) -> SignedRequest:
        """Sign a PUT of ``payload`` to ``key`` on ``host``.

        ``key`` is the decoded object path. For path-style endpoints it starts
        with the bucket name. ``payload`` is read in full before signing.
        """
        body = read_payload(payload)
        headers = dict(extra_headers or {})
        headers['Content-Length'] = str(len(body))
        if storage_class:
            headers['X-Amz-Storage-Class'] = storage_class
        if content_type:
            headers['Content-Type'] = content_type
        request = RequestDescriptor(
            method='PUT',
            host=host,
            path=key if key.startswith('/') else '/' + key,
            headers=headers,
            payload=body,
        )
        return self.sign(request, timestamp=timestamp)

"""Signing key derivation and caching."""

import logging
import threading
from typing import Dict, Tuple, Union

from .digest import hmac_sha256, sha256_hex
from .models import SCOPE_TERMINATOR, Credentials, Scope

logger = logging.getLogger(__name__)

KEY_PREFIX = 'AWS4'

CacheKey = Tuple[str, str, str, str, str]


def derive_signing_key(
        secret_key: str,
        date8: str,
        region: str,
        service: str,
        intermediate: bool = False
) -> Union[bytes, Tuple[bytes, bytes, bytes, bytes]]:
    """Run the four step HMAC chain that scopes ``secret_key``.

    Each step is keyed by the raw digest of the step before it. With
    ``intermediate`` set, returns ``(signing_key, date_key, region_key,
    service_key)`` so the chain can be compared with published vectors.
    """
    date_key = hmac_sha256((KEY_PREFIX + secret_key).encode('utf-8'), date8)
    region_key = hmac_sha256(date_key, region)
    service_key = hmac_sha256(region_key, service)
    signing_key = hmac_sha256(service_key, SCOPE_TERMINATOR)
    if intermediate:
        return signing_key, date_key, region_key, service_key
    return signing_key


class SigningKeyCache:
    """Thread safe memo of signing keys.

    A signing key depends only on the credentials and the scope, never on
    the request, so it can be shared by every request signed for that scope.
    Entries are keyed by the access key id, a fingerprint of the secret and
    the scope fields. The whole cache is dropped once ``maxsize`` is reached.
    """

    def __init__(self, maxsize: int = 100):
        self.maxsize = maxsize
        self._keys: Dict[CacheKey, bytes] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    def clear(self) -> None:
        with self._lock:
            self._keys.clear()

    def get(self, credentials: Credentials, scope: Scope) -> bytes:
        cache_key = (
            credentials.access_key_id,
            sha256_hex(credentials.secret_access_key),
            scope.date8,
            scope.region,
            scope.service,
        )
        with self._lock:
            cached = self._keys.get(cache_key)
        if cached is not None:
            logger.debug('Signing key cache hit for %s', scope)
            return cached

        signing_key = derive_signing_key(
            credentials.secret_access_key, scope.date8, scope.region, scope.service
        )
        with self._lock:
            if len(self._keys) >= self.maxsize:
                self._keys.clear()
            return self._keys.setdefault(cache_key, signing_key)

"""Signer configuration sourced from the environment."""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .keys import SigningKeyCache
from .models import Credentials, Service, host_from_url
from .sigv4 import SigV4Signer

DEFAULT_REGION = 'us-east-1'


def normalize_endpoint(url: Optional[str]) -> Optional[str]:
    """Ensure endpoint URL has a scheme."""
    if not url:
        return None
    if not url.startswith(('http://', 'https://')):
        url = f'https://{url}'
    return url.rstrip('/')


@dataclass
class SignerConfig:
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = field(default=None, repr=False)
    session_token: Optional[str] = field(default=None, repr=False)
    region: str = DEFAULT_REGION
    service: str = Service.S3.value
    endpoint: Optional[str] = None
    storage_class: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'SignerConfig':
        env = os.environ if environ is None else environ
        return cls(
            access_key_id=env.get('AWS_ACCESS_KEY_ID'),
            secret_access_key=env.get('AWS_SECRET_ACCESS_KEY'),
            session_token=env.get('AWS_SESSION_TOKEN') or None,
            region=env.get('AWS_REGION') or env.get('AWS_DEFAULT_REGION') or DEFAULT_REGION,
            endpoint=normalize_endpoint(env.get('S3_ENDPOINT')),
            storage_class=env.get('S3_STORAGE_CLASS') or None,
        )

    @property
    def credentials(self) -> Credentials:
        credentials = Credentials(
            self.access_key_id or '', self.secret_access_key or '', self.session_token
        )
        credentials.validate()
        return credentials

    @property
    def endpoint_host(self) -> Optional[str]:
        if not self.endpoint:
            return None
        return host_from_url(self.endpoint)

    def signer(self, key_cache: Optional[SigningKeyCache] = None) -> SigV4Signer:
        credentials = self.credentials
        return SigV4Signer(
            credentials.access_key_id,
            credentials.secret_access_key,
            self.region,
            self.service,
            credentials.session_token,
            key_cache=key_cache,
        )

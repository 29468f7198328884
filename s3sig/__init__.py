"""
AWS Signature Version 4 - Standalone Implementation

This package signs S3 uploads (and other AWS requests) with AWS Signature
Version 4 without depending on botocore or another vendor SDK.
"""

from .errors import (
    ClockSourceError,
    InvalidRequestDescriptorError,
    MissingCredentialError,
    PayloadReadError,
    SigningError,
    UnsupportedRegionOrServiceError,
)
from .keys import SigningKeyCache, derive_signing_key
from .models import Credentials, Headers, RequestDescriptor, Scope, Service, SignedRequest
from .sigv4 import SigV4Signer, UNSIGNED_PAYLOAD

__version__ = "0.1.0"
__all__ = [
    "SigV4Signer",
    "UNSIGNED_PAYLOAD",
    "Service",
    "Headers",
    "Credentials",
    "RequestDescriptor",
    "Scope",
    "SignedRequest",
    "SigningKeyCache",
    "derive_signing_key",
    "SigningError",
    "MissingCredentialError",
    "InvalidRequestDescriptorError",
    "PayloadReadError",
    "UnsupportedRegionOrServiceError",
    "ClockSourceError",
]

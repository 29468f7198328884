"""Error kinds raised by the signing pipeline.

Every error carries a ``stage`` naming the part of the pipeline that failed,
so callers can tell bad credentials from a badly shaped request or an I/O
failure. AWS answers all three with the same ``SignatureDoesNotMatch``.
"""


class SigningError(Exception):
    """Base class for all signing errors."""

    fmt = 'An unspecified signing error occurred'
    stage = 'signing'

    def __init__(self, **kwargs):
        msg = self.fmt.format(**kwargs)
        Exception.__init__(self, msg)
        self.kwargs = kwargs


class MissingCredentialError(SigningError):
    fmt = 'Missing credential: {name} is absent or empty'
    stage = 'credentials'


class InvalidRequestDescriptorError(SigningError):
    fmt = 'Invalid request: {reason}'
    stage = 'canonical'


class PayloadReadError(SigningError):
    fmt = 'Unable to read payload from {source}: {reason}'
    stage = 'payload'


class UnsupportedRegionOrServiceError(SigningError):
    fmt = 'Unsupported {field}: {value!r}'
    stage = 'scope'


class ClockSourceError(SigningError):
    fmt = 'Unable to determine the request time: {reason}'
    stage = 'clock'

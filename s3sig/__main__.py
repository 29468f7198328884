"""Sign a PUT upload of a file and print the headers to send.

Usage:
    python -m s3sig FILE --bucket BUCKET [options]

    # Virtual-hosted bucket on AWS
    python -m s3sig report.csv --bucket my-bucket --key reports/2021-01.csv

    # Path-style bucket on an S3-compatible endpoint
    S3_ENDPOINT=https://objects.example.com python -m s3sig report.csv --bucket my-bucket

The request is not sent. Each output line is ``Name: value``.

Environment Variables:
    AWS_ACCESS_KEY_ID      - Access key id (required)
    AWS_SECRET_ACCESS_KEY  - Secret access key (required)
    AWS_SESSION_TOKEN      - Session token for temporary credentials
    AWS_REGION             - Region (default: AWS_DEFAULT_REGION, then us-east-1)
    S3_ENDPOINT            - S3-compatible endpoint; enables path-style addressing
    S3_STORAGE_CLASS       - Default storage class
"""

import argparse
import logging
import os
import sys
from typing import Optional, Sequence, Tuple

from .config import SignerConfig
from .errors import SigningError
from .payload import payload_size

logger = logging.getLogger('s3sig')


def upload_target(config: SignerConfig, bucket: str, key: str, host: Optional[str] = None) -> Tuple[str, str]:
    """Return the ``(host, path)`` a PUT of ``key`` into ``bucket`` goes to."""
    key = key.lstrip('/')
    if host:
        return host, f'/{key}'
    if config.endpoint_host:
        return config.endpoint_host, f'/{bucket}/{key}'
    return f'{bucket}.s3.{config.region}.amazonaws.com', f'/{key}'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='s3sig',
        description='Sign an S3 PUT upload with AWS Signature Version 4.',
    )
    parser.add_argument('file', help='File to upload')
    parser.add_argument('--bucket', required=True, help='Target bucket')
    parser.add_argument('--key', help='Object key (default: the file name)')
    parser.add_argument('--host', help='Host to sign for; overrides the endpoint-derived host')
    parser.add_argument('--region', help='Region (default: from the environment)')
    parser.add_argument('--storage-class', help='Value for X-Amz-Storage-Class')
    parser.add_argument('--content-type', help='Value for Content-Type')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log the canonical request')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    config = SignerConfig.from_env()
    if args.region:
        config.region = args.region
    host, path = upload_target(config, args.bucket, args.key or os.path.basename(args.file), args.host)

    try:
        logger.info('Signing PUT of %s (%d bytes) to %s%s', args.file, payload_size(args.file), host, path)
        signed = config.signer().sign_upload(
            host,
            path,
            args.file,
            storage_class=args.storage_class or config.storage_class,
            content_type=args.content_type,
        )
    except SigningError as e:
        print(f'error ({e.stage}): {e}', file=sys.stderr)
        return 1

    for name, value in signed.headers.items():
        print(f'{name}: {value}')
    return 0


if __name__ == '__main__':
    sys.exit(main())

"""
Command-line interface for the HTTP signature SDK
Generates keys, prints signature headers for a request and verifies them
"""

import argparse
import base64
import binascii
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .config import SigningProfileManager
from .crypto import (
    generate_ec_key,
    generate_hmac_secret,
    generate_rsa_key,
    load_private_key,
    load_public_key,
    private_key_pem,
    public_key_pem,
)
from .exceptions import HttpSignatureError, KeyLoadError, ValidationError, ErrorCodes
from .signing import (
    HttpSignatureSigner,
    SignableRequest,
    SignatureAlgorithm,
    SignatureOptions,
    digest,
)
from .verification import verify_digest, verify_request


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='httpsig',
        description='HTTP signature command-line interface for signing and verifying requests'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'httpsig-sdk {__version__}'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log signing strings and parameters to stderr'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_keygen_parser(subparsers)
    setup_sign_parser(subparsers)
    setup_verify_parser(subparsers)
    setup_digest_parser(subparsers)

    return parser


def setup_keygen_parser(subparsers):
    """Setup key generation subcommand."""
    keygen_parser = subparsers.add_parser('keygen', help='Generate signing keys')
    keygen_parser.add_argument(
        '--type',
        choices=['rsa', 'ec', 'hmac'],
        default='rsa',
        help='Key type (default: rsa)'
    )
    keygen_parser.add_argument(
        '--bits',
        type=int,
        default=2048,
        help='RSA key size in bits (default: 2048)'
    )
    keygen_parser.add_argument(
        '--public-only',
        action='store_true',
        help='Output only the public key (rsa and ec)'
    )


def _add_request_arguments(command_parser):
    command_parser.add_argument('--method', default='GET', help='HTTP method (default: GET)')
    command_parser.add_argument('--path', default='/', help='Request path (default: /)')
    command_parser.add_argument('--query', default='', help='Query string without the leading ?')
    command_parser.add_argument(
        '--header',
        action='append',
        default=[],
        metavar='"NAME: VALUE"',
        help='Request header; may be repeated'
    )
    command_parser.add_argument('--body-file', help='File containing the request body')


def setup_sign_parser(subparsers):
    """Setup request signing subcommand."""
    sign_parser = subparsers.add_parser('sign', help='Print signature headers for a request')
    sign_parser.add_argument(
        '--key',
        required=True,
        help='PEM private key file, or a file with a base64 secret for hmac-sha256'
    )
    sign_parser.add_argument('--key-id', required=True, help='Key identifier (keyId)')
    _add_request_arguments(sign_parser)
    sign_parser.add_argument(
        '--algorithm',
        choices=[alg.value for alg in SignatureAlgorithm],
        help='Signature algorithm (default: hs2019 or the profile setting)'
    )
    sign_parser.add_argument('--headers', help='Space-separated (pseudo-)headers to sign')
    sign_parser.add_argument('--age', type=int, help='Shift created and Date into the past (seconds)')
    sign_parser.add_argument('--expires-in', type=int, help='Add expires this many seconds ahead')
    sign_parser.add_argument('--digest', action='store_true', help='Add a SHA-256 Digest header')
    sign_parser.add_argument('--profile-file', help='JSON signing profile file')
    sign_parser.add_argument('--profile', help='Profile name (default: the file\'s default profile)')


def setup_verify_parser(subparsers):
    """Setup signature verification subcommand."""
    verify_parser = subparsers.add_parser('verify', help='Verify a signed request')
    verify_parser.add_argument(
        '--key',
        required=True,
        help='PEM public or private key file, or a file with a base64 secret for hmac-sha256'
    )
    _add_request_arguments(verify_parser)
    verify_parser.add_argument(
        '--algorithm',
        action='append',
        choices=[alg.value for alg in SignatureAlgorithm],
        help='Accepted algorithm; may be repeated (default: all)'
    )
    verify_parser.add_argument('--max-age', type=int, help='Maximum signature age in seconds')
    verify_parser.add_argument('--check-digest', action='store_true', help='Also check the Digest header')


def setup_digest_parser(subparsers):
    """Setup digest subcommand."""
    digest_parser = subparsers.add_parser('digest', help='Print the Digest header value for a file')
    digest_parser.add_argument('file', help='File to digest')
    digest_parser.add_argument(
        '--algorithm',
        action='append',
        help='Digest algorithm (SHA-256, SHA-512, SHA); may be repeated (default: SHA-256)'
    )


def parse_header_arguments(values: List[str]) -> Dict[str, List[str]]:
    """Turn repeated "Name: value" arguments into a multi-valued header mapping."""
    headers: Dict[str, List[str]] = {}
    for item in values:
        name, sep, value = item.partition(':')
        if not sep or not name.strip():
            raise ValidationError(f"Invalid header argument: {item!r}", ErrorCodes.INVALID_OPTION)
        headers.setdefault(name.strip(), []).append(value.strip())
    return headers


def load_key_file(path: str, algorithm: Optional[str], public: bool = False) -> Any:
    """Load key material; HMAC secrets are stored base64-encoded."""
    data = Path(path).read_bytes()
    if algorithm == SignatureAlgorithm.HMAC_SHA256.value:
        try:
            return base64.b64decode(data.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise KeyLoadError(f"HMAC secret file is not valid base64: {e}")
    if public and b'PRIVATE KEY' not in data:
        return load_public_key(data)
    return load_private_key(data)


def _build_request(args) -> SignableRequest:
    body = Path(args.body_file).read_bytes() if args.body_file else None
    return SignableRequest(
        method=args.method,
        path=args.path,
        query=args.query,
        headers=parse_header_arguments(args.header),
        body=body
    )


def handle_keygen_command(args) -> int:
    """Handle key generation command."""
    if args.type == 'hmac':
        print(base64.b64encode(generate_hmac_secret()).decode('ascii'))
        return 0

    key = generate_rsa_key(args.bits) if args.type == 'rsa' else generate_ec_key()
    if not args.public_only:
        print(private_key_pem(key), end='')
    print(public_key_pem(key), end='')
    return 0


def handle_sign_command(args) -> int:
    """Handle request signing command."""
    options = SignatureOptions()
    if args.profile_file:
        options = SigningProfileManager.from_file(args.profile_file).get_profile(args.profile)

    overrides: Dict[str, Any] = {}
    if args.algorithm:
        overrides['algorithms'] = [args.algorithm]
    if args.headers:
        overrides['headers'] = args.headers
    if args.age is not None:
        overrides['age'] = args.age
    if args.expires_in is not None:
        overrides['expires_in'] = args.expires_in
    if overrides:
        options = options.merge(**overrides)

    key = load_key_file(args.key, options.algorithm)
    request = _build_request(args)

    if args.digest:
        digest_value = digest(request.body_bytes())
        request = request.with_header('digest', digest_value)
        print(f"Digest: {digest_value}")

    result = HttpSignatureSigner(options).sign(request, key, args.key_id)
    print(f"Date: {result.date}")
    print(f"Authorization: {result.authorization}")
    return 0


def handle_verify_command(args) -> int:
    """Handle signature verification command."""
    algorithms = args.algorithm or [alg.value for alg in SignatureAlgorithm]
    request = _build_request(args)
    key = load_key_file(args.key, algorithms[0], public=True)

    result = verify_request(request, key, algorithms=algorithms, max_age=args.max_age)
    if not result.valid:
        print(f"✗ Signature invalid: {result.error_message} ({result.error_code})")
        return 1

    if args.check_digest and not verify_digest(request):
        print("✗ Digest header does not match the body")
        return 1

    print(f"✓ Signature valid (keyId={result.key_id}, algorithm={result.algorithm})")
    return 0


def handle_digest_command(args) -> int:
    """Handle digest command."""
    body = Path(args.file).read_bytes()
    print(digest(body, args.algorithm or ['SHA-256']))
    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    try:
        if args.command == 'keygen':
            return handle_keygen_command(args)
        elif args.command == 'sign':
            return handle_sign_command(args)
        elif args.command == 'verify':
            return handle_verify_command(args)
        elif args.command == 'digest':
            return handle_digest_command(args)
        else:
            # No command specified, show help
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except (HttpSignatureError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())

"""
=============================================================================
HTTPREPLY CLI ENTRY POINT
=============================================================================

Render one response as CGI output on stdout. Useful as a tiny CGI script
and for eyeballing exactly what the builder emits.

=============================================================================
USAGE
=============================================================================

    # JSON body (pretty printed, charset appended)
    python -m httpreply json '{"message": "hello"}'

    # Plain text
    python -m httpreply text "Hello, World!"

    # Redirect, upgraded to https:// as if the request were secure
    python -m httpreply redirect http://example.com/login --secure

    # File download
    python -m httpreply download ./report.pdf --filename "Q3 report.pdf"

Exit status is 0 on success, 1 when the response could not be built
(invalid redirect target, missing file, ...).

=============================================================================
"""

import argparse
import json
import logging
import sys
from typing import BinaryIO, Optional

from . import __version__
from .access_log import configure_logging
from .config import ResponseConfig
from .core.transport import CGITransport
from .errors import ResponseError
from .http.request import RequestContext
from .http.response import ResponseBuilder


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="httpreply",
        description="Render a single HTTP response as CGI output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m httpreply json '{"ok": true}'
  python -m httpreply redirect /login --code 303
  python -m httpreply download ./data.csv
        """,
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: HTTPREPLY_LOG_LEVEL or INFO)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"httpreply {__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    json_cmd = commands.add_parser("json", help="JSON response")
    json_cmd.add_argument("data", help="JSON document to send")
    json_cmd.add_argument("--status", type=int, default=200, help="Status code (default: 200)")

    text_cmd = commands.add_parser("text", help="Plain text response")
    text_cmd.add_argument("text", help="Body text")

    redirect_cmd = commands.add_parser("redirect", help="Redirect response")
    redirect_cmd.add_argument("url", help="Absolute URL or path starting with /")
    redirect_cmd.add_argument("--code", type=int, default=None, help="Redirect status (default: 302)")
    redirect_cmd.add_argument("--secure", action="store_true", help="Treat the request as HTTPS")

    download_cmd = commands.add_parser("download", help="File download response")
    download_cmd.add_argument("path", help="File to send")
    download_cmd.add_argument("--filename", default=None, help="Name offered to the client")

    return parser


def main(argv=None, stdout: Optional[BinaryIO] = None) -> int:
    """
    CLI entry point.

    Args:
        argv: Arguments (default: sys.argv[1:]).
        stdout: Binary stream for the response (default: sys.stdout.buffer).

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)

    config = ResponseConfig.from_env()
    if args.log_level:
        config.log_level = args.log_level

    try:
        config.validate()
    except ValueError as e:
        print(f"httpreply: invalid configuration: {e}", file=sys.stderr)
        return 1

    # Logs go to stderr, stdout carries the response
    configure_logging(config)

    context = RequestContext(secure=getattr(args, "secure", False))
    transport = CGITransport(stdout if stdout is not None else sys.stdout.buffer)
    response = ResponseBuilder(transport, context, config)

    try:
        if args.command == "json":
            try:
                data = json.loads(args.data)
            except json.JSONDecodeError as e:
                print(f"httpreply: invalid JSON argument: {e}", file=sys.stderr)
                return 1
            response.json(data, args.status).send()

        elif args.command == "text":
            response.set_content_type("text/plain").set_content(args.text).send()

        elif args.command == "redirect":
            response.redirect(args.url, args.code)

        elif args.command == "download":
            response.download(args.path, args.filename)

        transport.close()

    except ResponseError as e:
        logger.debug("Response failed", exc_info=True)
        print(f"httpreply: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Whisker CLI — whisker serve.

Entry point for the ``whisker`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys

from whisker._errors import WhiskerError


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the whisker CLI."""
    parser = argparse.ArgumentParser(
        prog="whisker",
        description="Network diagnostic test double for load balancers and proxies.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # whisker serve
    # Options default to None so whisker.yaml values are only overridden
    # when a flag is actually given.
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the diagnostic server",
    )
    serve_parser.add_argument(
        "root", nargs="?", default=".", help="Directory holding whisker.yaml",
    )
    serve_parser.add_argument("--host", default=None, help="Bind address (default 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (default 80)")
    serve_parser.add_argument("--cert", default=None, help="TLS certificate (PEM)")
    serve_parser.add_argument("--key", default=None, help="TLS private key (PEM)")
    serve_parser.add_argument(
        "--metrics",
        action="store_true",
        default=None,
        help="Count requests and expose /debug/vars",
    )
    serve_parser.add_argument(
        "--profile-pool",
        action="store_true",
        default=None,
        help="Track borrowed buffers and expose /debug/pprof/buffer.pool",
    )
    serve_parser.add_argument(
        "--workers", type=int, default=None, help="Worker count (0=auto, default 1)",
    )
    serve_parser.add_argument(
        "--max-data-size",
        type=int,
        default=None,
        help="Reject /data requests larger than this many bytes",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from whisker import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from whisker.app import serve

    if args.command == "serve":
        try:
            serve(
                root=args.root,
                host=args.host,
                port=args.port,
                cert=args.cert,
                key=args.key,
                metrics=args.metrics,
                profile_pool=args.profile_pool,
                workers=args.workers,
                max_data_size=args.max_data_size,
            )
        except WhiskerError as exc:
            print(f"whisker: {exc}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()

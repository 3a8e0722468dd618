"""Storefront management CLI.

Creates and drops the tables of every storefront aggregate and entity in
the database named by ``STORE_DATABASE_URL``, and runs the HTTP server.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py serve      # Run the API with uvicorn
"""

import argparse
import os
import sys


def _storefront(database_url: str | None = None):
    """Initialize the domain against ``database_url`` (or the configured database)."""
    if database_url:
        os.environ["STORE_DATABASE_URL"] = database_url

    from shared.config import get_settings
    from shared.domain import storefront
    from shared.logging import configure_logging

    configure_logging(get_settings())
    storefront.init()
    return storefront


def setup_database(database_url: str | None = None) -> None:
    """Create every table that does not exist yet."""
    storefront = _storefront(database_url)
    print("Creating storefront database schema...")
    with storefront.domain_context():
        storefront.setup_database()
    print("Done.")


def drop_database(database_url: str | None = None) -> None:
    """Drop every storefront table."""
    storefront = _storefront(database_url)
    print("Dropping storefront database schema...")
    with storefront.domain_context():
        storefront.drop_database()
    print("Done.")


def serve(host: str, port: int, reload: bool = False) -> None:
    import uvicorn

    uvicorn.run("app:app", host=host, port=port, reload=reload)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("setup-db", "Create all database tables"), ("drop-db", "Drop all database tables")):
        command_parser = subparsers.add_parser(name, help=help_text)
        command_parser.add_argument(
            "--database-url",
            default=None,
            help="Database URL (default: STORE_DATABASE_URL or settings)",
        )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_database(args.database_url)
    elif args.command == "drop-db":
        drop_database(args.database_url)
    elif args.command == "serve":
        serve(args.host, args.port, reload=args.reload)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

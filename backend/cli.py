#!/usr/bin/env python3
"""
CLI for the Employee Directory API

Commands:
    init-db  - Create the employee and contact tables if missing
    run      - Start the development server
    routes   - List routes with their gate chains

Usage:
    python cli.py init-db
    python cli.py run --port 8000
    python cli.py routes
"""

import asyncio
import logging

import click

from config import Config
from db.schema import create_tables
from db.store import Store


def _open_store(database_url):
    return Store(database_url, engine_options=Config.SQLALCHEMY_ENGINE_OPTIONS).open()


@click.group()
@click.version_option(version="1.0.0", prog_name="employee-api")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Employee Directory API - database setup and local server."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


@cli.command("init-db")
@click.option("--database-url", default=None, help="Override DATABASE_URL")
def init_db(database_url):
    """Create employee_contacts and employee_data if they do not exist."""
    store = _open_store(database_url or Config.DATABASE_URL)
    try:
        asyncio.run(create_tables(store))
        click.echo("✓ Tables ready")
    finally:
        store.close()


@cli.command("run")
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=Config.PORT, show_default=True, type=int)
@click.option("--debug", is_flag=True, help="Run Flask in debug mode")
def run(host, port, debug):
    """Start the development server."""
    from app import create_app

    store = _open_store(Config.DATABASE_URL)
    try:
        app = create_app(store=store)
        click.echo(f"Listening on port {port}")
        app.run(host=host, port=port, debug=debug)
    finally:
        store.close()


@cli.command("routes")
def routes():
    """List routes with the gates that guard them."""
    from app import create_app

    store = _open_store(Config.DATABASE_URL)
    try:
        app = create_app(store=store)
        for rule in sorted(app.url_map.iter_rules(), key=lambda r: r.rule):
            view = app.view_functions[rule.endpoint]
            stages = getattr(view, "stages", None)
            if stages is None:
                continue
            methods = ",".join(sorted(rule.methods - {"HEAD", "OPTIONS"}))
            click.echo(f"{methods:<8} {rule.rule:<28} {len(stages)} gates -> {view.handler.__name__}")
    finally:
        store.close()


if __name__ == "__main__":
    cli()

"""
Command-line interface for the letter-pair lookup tool
"""

import logging
from typing import Tuple

import click
from dotenv import load_dotenv

from api.client import SheetClient
from api.models import Category, Status
from lookup.acquisition import AcquisitionController
from lookup.engine import LookupEngine, LookupResult, normalize_key
from lookup.session import LookupSession
from storage.cache import SnapshotCache, CACHE_MAX_AGE
from utils.logging_config import init_from_environment

# Load environment variables
load_dotenv('config.env')

logger = logging.getLogger(__name__)

CATEGORY_CHOICE = click.Choice([c.value for c in Category], case_sensitive=False)


def _build_components(ctx) -> Tuple[LookupSession, AcquisitionController, LookupEngine]:
    session = LookupSession()
    cache = SnapshotCache(ctx.obj['db_path'])
    controller = AcquisitionController(session, SheetClient(), cache)
    return session, controller, LookupEngine(session)


def _echo_status(report):
    if report.status in (Status.NO_DATA, Status.OFFLINE_USING_CACHE):
        click.secho(f"⚠️  {report.render()}", fg='yellow')
    else:
        click.echo(f"ℹ️  {report.render()}")


def _echo_result(result: LookupResult):
    if not result.found:
        click.echo(f"🔍 {result.key}: no {result.category.value} entry")
        return

    click.secho(f"🔤 {result.key}", bold=True)
    if result.entry.note:
        click.echo(f"   📝 {result.entry.note}")
    click.echo(f"   ➡️  {result.entry.value}")


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--db-path', envvar='CACHE_DB_PATH', default='./data/lookup.db',
              show_default=True, help='Path to the offline cache database')
@click.pass_context
def cli(ctx, debug, db_path):
    """Letter-pair lookup - find the algorithm for a two-letter pair"""

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)

    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    ctx.obj['db_path'] = db_path


@cli.command('lookup')
@click.argument('key')
@click.option('--category', '-c', type=CATEGORY_CHOICE, default=None,
              help='Sheet to search (default: corner)')
@click.pass_context
def lookup_command(ctx, key, category):
    """Look up a two-letter KEY"""

    try:
        key = normalize_key(key)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="KEY")

    try:
        session, controller, engine = _build_components(ctx)

        report = controller.initial_load()
        _echo_status(report)
        if report.status is Status.NO_DATA:
            ctx.exit(1)

        result = engine.resolve(key, Category.parse(category) if category else None)
        _echo_result(result)
        _echo_status(session.status)

        if not result.found:
            ctx.exit(1)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        click.echo(f"❌ Lookup failed: {e}", err=True)
        if ctx.obj['debug']:
            raise
        ctx.exit(1)


@cli.command()
@click.pass_context
def refresh(ctx):
    """Fetch both sheets now and update the offline cache"""

    try:
        session, controller, _ = _build_components(ctx)

        click.echo("📡 Fetching sheets...")
        report = controller.refresh()
        _echo_status(report)

        for category, parse_report in session.parse_reports.items():
            click.echo(f"   • {category.label}: {parse_report.keys:,} pairs, "
                       f"{parse_report.accepted:,} rows, {parse_report.discarded:,} discarded")

        if report.status is Status.NO_DATA:
            ctx.exit(1)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        click.echo(f"❌ Refresh failed: {e}", err=True)
        if ctx.obj['debug']:
            raise
        ctx.exit(1)


@cli.command()
@click.pass_context
def status(ctx):
    """Show what the offline cache holds"""

    stats = SnapshotCache(ctx.obj['db_path']).get_cache_stats()

    click.echo("💾 Offline cache")
    click.echo(f"   Path: {stats['path']}")

    if not stats['present']:
        click.echo("   No snapshot stored - run 'refresh' while online")
        return

    click.echo(f"   Last updated: {stats['captured_at']} ({stats['age_hours']}h ago)")
    for category in Category:
        counts = stats[category.value]
        click.echo(f"   {category.label}: {counts['keys']:,} pairs, {counts['entries']:,} entries")
    click.echo(f"   Size: {stats['size_bytes'] / 1024:.1f} KB")

    if stats['stale']:
        hours = int(CACHE_MAX_AGE.total_seconds() // 3600)
        click.secho(f"   ⚠️  Older than {hours}h - consider running 'refresh'", fg='yellow')


@cli.command()
@click.pass_context
def shell(ctx):
    """Interactive lookups (':s' switch, ':r' refresh, empty line clears, ':q' quit)"""

    session, controller, engine = _build_components(ctx)
    _echo_status(controller.initial_load())

    while True:
        raw = click.prompt(f"[{session.active.label}]", default="",
                           show_default=False, prompt_suffix=" > ")
        command = raw.strip()

        if command in (':q', ':quit'):
            break

        if not command:
            session.clear()
        elif command == ':s':
            session.switch_category()
        elif command == ':r':
            controller.refresh()
        else:
            try:
                _echo_result(engine.resolve(command))
            except ValueError as e:
                click.echo(f"❌ {e}", err=True)
                continue

        _echo_status(session.status)


@cli.command('cache-clear')
@click.confirmation_option(prompt='Delete the offline snapshot?')
@click.pass_context
def cache_clear(ctx):
    """Delete the offline snapshot"""

    if SnapshotCache(ctx.obj['db_path']).clear():
        click.echo("🗑️  Offline snapshot deleted")
    else:
        click.echo("❌ Could not delete the offline snapshot", err=True)
        ctx.exit(1)


@cli.command()
@click.option('--host', default='127.0.0.1', help='Host to bind to')
@click.option('--port', default=8000, help='Port to bind to')
@click.option('--reload', is_flag=True, help='Enable auto-reload')
@click.pass_context
def serve(ctx, host, port, reload):
    """Start the JSON web interface"""

    try:
        import uvicorn

        click.echo(f"🌐 Starting web interface at http://{host}:{port}")
        click.echo("   Press Ctrl+C to stop")

        uvicorn.run(
            "web.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level="info"
        )

    except Exception as e:
        click.echo(f"❌ Failed to start web server: {e}", err=True)
        if ctx.obj['debug']:
            raise


def main():
    """Main entry point"""
    init_from_environment()
    cli()


if __name__ == '__main__':
    main()

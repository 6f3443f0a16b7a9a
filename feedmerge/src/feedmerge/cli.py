import sys
import json
import click
import logging
from pathlib import Path
from .config import load_env_file, load_settings
from .errors import format_error
from .logging import configure_logging
from .pipeline import run_update
from .sources import default_sources, describe_sources, load_sources

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def _load_registry(sources_path):
    if sources_path:
        return load_sources(sources_path)
    # Fall back to a feeds.yaml in the working directory, then to env vars
    if Path("feeds.yaml").exists():
        return load_sources("feeds.yaml")
    return default_sources()


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.option("--env-file", default=".env", show_default=True, help="Optional .env file to load")
def cli(verbose, env_file):
    """feedmerge: merge RSS/Atom feeds into JSON and RSS documents."""
    configure_logging(logging.DEBUG if verbose else logging.INFO)
    load_env_file(env_file)


@cli.command()
@click.option("--sources", "sources_path", required=False, help="Sources YAML file (default: feeds.yaml or RSS_FEED_* env)")
@click.option("--out", default=None, help="Output directory (default: FEED_OUTPUT_DIR or ./data)")
@click.option("--max-items", default=None, type=int, help="Maximum merged items (default: MAX_ITEMS or 10)")
@click.option("--workers", default=4, show_default=True, type=int, help="Max parallel feed fetches")
@click.option("--timeout", default=None, type=float, help="Per-feed request timeout in seconds")
@click.option("--no-xml", is_flag=True, help="Skip writing the RSS document")
def update(sources_path, out, max_items, workers, timeout, no_xml):
    """
    Fetch all configured feeds, merge them and write feed.json / feed.xml.
    """
    logger.info("Starting RSS feed update process...")
    if workers < 1:
        raise click.BadParameter("--workers must be >= 1.")
    if max_items is not None and max_items < 1:
        raise click.BadParameter("--max-items must be >= 1.")
    if timeout is not None and timeout <= 0:
        raise click.BadParameter("--timeout must be > 0.")

    settings = load_settings()
    overrides = {}
    if out:
        overrides["output_dir"] = out
    if max_items is not None:
        overrides["max_items"] = max_items
    if timeout is not None:
        overrides["timeout"] = timeout
    if overrides:
        settings = settings.model_copy(update=overrides)

    sources = _load_registry(sources_path)
    result = run_update(settings, sources, max_workers=workers, write_xml=not no_xml)
    merged = result["merged"]

    logger.info("RSS feed update completed successfully!")
    _print_json({
        "json": result["json"],
        "xml": result["xml"],
        "total_items": merged.meta.total_items,
        "sources": [
            {"name": info.name, "title": info.title, "failed": info.failed}
            for info in merged.meta.sources
        ],
    })


@cli.command()
@click.option("--sources", "sources_path", required=False, help="Sources YAML file")
def sources(sources_path):
    """List the configured sources and whether each one is enabled."""
    _print_json(describe_sources(_load_registry(sources_path)))


@cli.command()
def version():
    """Print version information."""
    _print_json({"version": VERSION})


def _print_json(data):
    """Helper to print standard JSON envelope."""
    payload = {
        "ok": True,
        "data": data,
        "meta": {
            "version": 1
        }
    }
    click.echo(json.dumps(payload, indent=2))


def main():
    """Entry point for the CLI."""
    try:
        cli(standalone_mode=False)
    except Exception as e:
        if isinstance(e, click.exceptions.Exit):
             sys.exit(e.exit_code)
        if isinstance(e, click.exceptions.Abort):
             sys.exit(130)

        logger.error(f"Fatal error: {e}")
        print(format_error(e))
        sys.exit(1)

if __name__ == "__main__":
    main()

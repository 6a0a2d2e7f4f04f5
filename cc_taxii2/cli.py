"""Command-line interface for the CloudCover TAXII client."""

import click
import io
import json
import csv
import sys
import uuid
from pathlib import Path
from typing import List, Tuple
import logging
from tabulate import tabulate
from colorama import init, Fore, Style

# Initialize colorama for cross-platform colored output
init(autoreset=True)

from cc_taxii2.config import Config
from cc_taxii2.client import CCTaxiiClient
from cc_taxii2.errors import TaxiiError
from cc_taxii2.models import CCIndicator

CSV_FIELDS = ['id', 'name', 'pattern', 'pattern_type', 'valid_from', 'created', 'modified', 'description']


def _fail(message: str):
    click.echo(f"{Fore.RED}Error: {message}{Style.RESET_ALL}", err=True)
    sys.exit(1)


def _client(ctx) -> CCTaxiiClient:
    """Build the client lazily so `--help` works without credentials."""
    config = ctx.obj['config']
    username, api_key = config.get_credentials(ctx.obj.get('username'), ctx.obj.get('api_key'))
    return CCTaxiiClient(username, api_key,
                         base_url=config.get_base_url(),
                         timeout=config.get_timeout())


def _parse_matches(values: Tuple[str, ...]) -> List[Tuple[str, str]]:
    pairs = []
    for item in values:
        key, sep, value = item.partition('=')
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint='--match')
        pairs.append((key, value))
    return pairs


def _stix_bundle(indicators: List[CCIndicator]) -> dict:
    return {
        "type": "bundle",
        "id": f"bundle--{uuid.uuid4()}",
        "objects": [indicator.model_dump() for indicator in indicators],
    }


@click.group()
@click.option('--config', 'config_path', type=click.Path(exists=True), help='Path to custom config file')
@click.option('--username', envvar='TAXII_USERNAME', help='Account name (env: TAXII_USERNAME)')
@click.option('--api-key', envvar='TAXII_API_KEY', help='API key (env: TAXII_API_KEY)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, config_path, username, api_key, verbose):
    """
    CloudCover TAXII 2.1 client

    Query server discovery, list collections and pull indicators.
    """
    ctx.ensure_object(dict)
    try:
        config = Config(config_path)
    except TaxiiError as e:
        _fail(e.message)

    logging.basicConfig(
        level=logging.DEBUG if verbose else config.get('logging.level', 'INFO'),
        format=config.get('logging.format')
    )

    ctx.obj['config'] = config
    ctx.obj['username'] = username
    ctx.obj['api_key'] = api_key


@cli.command()
@click.option('--format', 'output_format', type=click.Choice(['table', 'json']), default='table',
              help='Output format (default: table)')
@click.pass_context
def discovery(ctx, output_format):
    """
    Show the server discovery document.
    """
    try:
        info = _client(ctx).get_discovery()
    except TaxiiError as e:
        _fail(e.message)

    if output_format == 'json':
        click.echo(json.dumps(info.model_dump(), indent=2))
        return

    table_data = [
        ['Title', info.title],
        ['Description', info.description],
        ['Contact', info.contact],
        ['Default root', info.default],
        ['API roots', ', '.join(info.api_roots)],
    ]
    click.echo(f"{Fore.CYAN}=== TAXII Discovery ==={Style.RESET_ALL}\n")
    click.echo(tabulate(table_data, tablefmt='grid'))


@cli.command()
@click.option('--root', help='API root to list (default: public root "api")')
@click.option('--private', is_flag=True, help="List the account's private root")
@click.pass_context
def collections(ctx, root, private):
    """
    List the collection ids of an API root.
    """
    if root is not None and private:
        raise click.UsageError("--root and --private cannot be combined")

    try:
        client = _client(ctx)
        if root is None:
            root = client.account if private else 'api'
        ids = client.get_collections(root)
    except TaxiiError as e:
        _fail(e.message)

    if not ids:
        click.echo(f"{Fore.YELLOW}No collections in root '{root}'{Style.RESET_ALL}")
        return

    click.echo(f"{Fore.GREEN}Found {len(ids)} collection(s) in root '{root}'{Style.RESET_ALL}\n")
    for collection_id in ids:
        click.echo(collection_id)


@cli.command()
@click.option('--collection', help='Collection id (default: first collection of the root)')
@click.option('--limit', type=int, help='Page size requested from the server (default: 1000)')
@click.option('--private', is_flag=True, help="Query the account's private root")
@click.option('--added-after', help='Only indicators added after this timestamp')
@click.option('--match', 'match_values', multiple=True, metavar='KEY=VALUE',
              help='Field filter, repeatable (e.g. --match type=indicator)')
@click.option('--follow-pages/--single-page', default=True, help='Follow pagination (default: follow)')
@click.option('--max-pages', type=int, help='Stop after this many pages')
@click.option('--format', 'output_format', type=click.Choice(['table', 'json', 'csv', 'stix']), default='table',
              help='Output format (default: table)')
@click.option('--output', type=click.Path(dir_okay=False), help='Write to this file instead of stdout')
@click.pass_context
def indicators(ctx, collection, limit, private, added_after, match_values, follow_pages,
               max_pages, output_format, output):
    """
    Retrieve indicators from a collection.

    Pages are followed until the server stops reporting more data.
    """
    config = ctx.obj['config']
    matches = _parse_matches(match_values)
    if limit is None:
        limit = config.get('pagination.default_limit')
    if max_pages is None:
        max_pages = config.get('pagination.max_pages')

    try:
        results = _client(ctx).get_cc_indicators(
            collection_id=collection,
            limit=limit,
            private=private,
            added_after=added_after,
            matches=matches,
            follow_pages=follow_pages,
            max_pages=max_pages
        )
    except TaxiiError as e:
        _fail(e.message)

    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', newline='') as f:
            f.write(_render_indicators(results, output_format))
        click.echo(f"{Fore.GREEN}Exported {len(results)} indicator(s) to {output_path}{Style.RESET_ALL}")
        return

    if output_format == 'table':
        click.echo(f"{Fore.GREEN}Retrieved {len(results)} indicator(s){Style.RESET_ALL}\n")
    click.echo(_render_indicators(results, output_format), nl=False)


def _render_indicators(results: List[CCIndicator], output_format: str) -> str:
    stream = io.StringIO()
    if output_format == 'json':
        json.dump([indicator.model_dump() for indicator in results], stream, indent=2)
        stream.write('\n')

    elif output_format == 'stix':
        json.dump(_stix_bundle(results), stream, indent=2)
        stream.write('\n')

    elif output_format == 'csv':
        writer = csv.DictWriter(stream, fieldnames=CSV_FIELDS, extrasaction='ignore')
        writer.writeheader()
        for indicator in results:
            writer.writerow(indicator.model_dump())

    else:  # table format
        table_data = []
        for indicator in results:
            table_data.append([
                indicator.name[:40],
                indicator.pattern[:60],
                indicator.pattern_type,
                indicator.valid_from[:19],
            ])

        headers = ['Name', 'Pattern', 'Pattern Type', 'Valid From']
        stream.write(tabulate(table_data, headers=headers, tablefmt='grid'))
        stream.write('\n')

    return stream.getvalue()


def main():
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == '__main__':
    main()

"""Main CLI entry point for csapi."""

import io
import json
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import NoReturn

import click
import httpx
from pydantic import ValidationError

from src import __version__
from src.api.core.data_models import SortField
from src.api.core.options import (
    OptionFunc,
    set_credentials,
    set_error_log,
    set_http_client,
    set_trace_log,
    set_url,
)
from src.api.host import HostClient, SearchIOCsRequest
from src.api.intel import ActorRequest, IndicatorRequest, IntelClient
from src.cli.display import show_actor_table, show_error, show_raw_json
from src.core.config.settings import Settings, get_settings
from src.core.exceptions.errors import CSAPIError
from src.core.logger.logger import get_error_log, get_trace_log, setup_logging

EXIT_ERROR = 2


@dataclass
class CLIContext:
    """State shared by all commands."""

    settings: Settings
    client_id: str
    client_key: str
    verbose: bool


def split_list(value: str | None) -> list[str]:
    """Split a comma separated option value, dropping empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_sort(value: str, ascending: bool = False) -> SortField:
    """Parse ``field`` or ``field.asc``/``field.desc`` into a SortField."""
    name, _, order = value.rpartition(".")
    if order in ("asc", "desc") and name:
        return SortField(name=name, ascending=order == "asc")
    return SortField(name=value, ascending=ascending)


def fail(title: str, err: Exception) -> NoReturn:
    """Report an error and exit with the error status."""
    show_error(title, str(err))
    sys.exit(EXIT_ERROR)


def client_options(ctx: click.Context, base_url: str) -> list[OptionFunc]:
    """Build client options from the CLI context.

    The httpx client is closed when the click context closes.
    """
    obj: CLIContext = ctx.obj
    http_client = httpx.Client(timeout=obj.settings.api.timeout_seconds)
    ctx.call_on_close(http_client.close)

    options = [
        set_error_log(get_error_log()),
        set_url(base_url),
        set_http_client(http_client),
        set_credentials(obj.client_id, obj.client_key),
    ]
    if obj.verbose or obj.settings.api.trace:
        options.append(set_trace_log(get_trace_log()))
    return options


def build_intel_client(ctx: click.Context) -> IntelClient:
    return IntelClient(*client_options(ctx, ctx.obj.settings.api.intel_url))


def build_host_client(ctx: click.Context) -> HostClient:
    return HostClient(*client_options(ctx, ctx.obj.settings.api.host_url))


@click.group()
@click.version_option(__version__, prog_name="csapi")
@click.option("--id", "-i", "client_id", envvar="CS_ID", default="", help="API id. Can be provided as CS_ID.")
@click.option("--key", "-k", "client_key", envvar="CS_KEY", default="", help="API key. Can be provided as CS_KEY.")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Trace HTTP requests and responses")
@click.pass_context
def main(ctx: click.Context, client_id: str, client_key: str, config_path: Path | None, verbose: bool) -> None:
    """Query the CrowdStrike intelligence and Falcon host APIs.

    Examples:
        csapi actors -q panda --json
        csapi indicators --param indicator --filter match --value evil.com
        csapi iocs --types domain --values evil.com --count
    """
    try:
        settings = Settings.from_yaml(config_path) if config_path else get_settings()
    except (CSAPIError, ValidationError) as e:
        fail("Configuration Error", e)
    setup_logging(settings.logging)

    ctx.obj = CLIContext(
        settings=settings,
        client_id=client_id or settings.api.id,
        client_key=client_key or settings.api.key,
        verbose=verbose,
    )


@main.command()
@click.option("-q", "query", default="", help="Search across all fields")
@click.option("--name", default="", help="Search based on name")
@click.option("--desc", default="", help="Search based on description")
@click.option("--origin", default="", help="Comma separated origins")
@click.option("--country", default="", help="Comma separated target countries")
@click.option("--industry", default="", help="Comma separated target industries")
@click.option("--motive", default="", help="Comma separated motivations")
@click.option("--limit", "-l", default=10, help="Number of actors to retrieve (default: 10)")
@click.option("--offset", "-o", default=0, help="Offset of the first actor to retrieve")
@click.option("--sort", "sort_fields", multiple=True, help="Sort field, e.g. name or last_activity_date.desc")
@click.option("--asc", is_flag=True, help="Sort ascending when a sort field has no order suffix")
@click.option("--json", "json_format", is_flag=True, help="Print the reply as JSON instead of a table")
@click.pass_context
def actors(
    ctx: click.Context,
    query: str,
    name: str,
    desc: str,
    origin: str,
    country: str,
    industry: str,
    motive: str,
    limit: int,
    offset: int,
    sort_fields: tuple[str, ...],
    asc: bool,
    json_format: bool,
) -> None:
    """Query threat actors.

    Examples:
        csapi actors -q panda
        csapi actors --origin cn --motive espionage --json
    """
    req = ActorRequest(
        q=query,
        name=name,
        description=desc,
        origins=split_list(origin),
        target_countries=split_list(country),
        target_industries=split_list(industry),
        motivations=split_list(motive),
        sort_fields=[parse_sort(s, ascending=asc) for s in sort_fields],
        limit=limit,
        offset=offset,
    )
    try:
        client = build_intel_client(ctx)
        if json_format:
            buf = io.BytesIO()
            client.actors_json(req, buf)
            show_raw_json(buf.getvalue())
        else:
            resp = client.actors(req)
            show_actor_table(resp.resources, total=resp.meta.paging.total)
    except (CSAPIError, httpx.HTTPError, json.JSONDecodeError) as e:
        fail("Actor Query Failed", e)


@main.command()
@click.option("--param", default="", help="The indicator parameter to search")
@click.option("--filter", "filter_", default="", help="The filter for the search")
@click.option("--value", default="", help="The filter value for the search")
@click.option("--page", default=1, help="The requested page - 1 based")
@click.option("--pagesize", default=10, help="How many indicators to retrieve per page")
@click.option("--sort", default="", help="Sort field")
@click.option("--asc", is_flag=True, help="Sort in ascending order")
@click.pass_context
def indicators(
    ctx: click.Context,
    param: str,
    filter_: str,
    value: str,
    page: int,
    pagesize: int,
    sort: str,
    asc: bool,
) -> None:
    """Search indicators and print the reply as JSON.

    Examples:
        csapi indicators --param indicator --filter match --value evil.com
    """
    req = IndicatorRequest(
        parameter=param,
        filter=filter_,
        value=value,
        page=page,
        per_page=pagesize,
        sort=SortField(name=sort, ascending=asc),
    )
    try:
        client = build_intel_client(ctx)
        buf = io.BytesIO()
        client.indicators_json(req, buf)
        show_raw_json(buf.getvalue())
    except (CSAPIError, httpx.HTTPError, json.JSONDecodeError) as e:
        fail("Indicator Search Failed", e)


@main.command()
@click.option("--types", default="", help="Types to filter on - sha256, sha1, md5, domain, ipv4, ipv6")
@click.option("--values", default="", help="Values to filter on")
@click.option("--policies", default="", help="Policies to filter on - detect, none")
@click.option("--share-levels", default="", help="Share levels to filter on - red")
@click.option("--sources", default="", help="Sources to filter on")
@click.option("--from", "from_", type=click.DateTime(formats=["%Y-%m-%d"]), help="From expiration date (YYYY-MM-DD)")
@click.option("--to", type=click.DateTime(formats=["%Y-%m-%d"]), help="To expiration date (YYYY-MM-DD)")
@click.option("--limit", "-l", default=100, help="Number of results to retrieve")
@click.option("--offset", "-o", default=0, help="Offset of the first result")
@click.option("--sort", default="", help="Sort field - type, value, policy, share_level, expiration_timestamp")
@click.option("--asc", is_flag=True, help="Sort in ascending order")
@click.option("--count", is_flag=True, help="Count devices for the given type and value instead of searching")
@click.option("--device", is_flag=True, help="List devices for the given type and value instead of searching")
@click.pass_context
def iocs(
    ctx: click.Context,
    types: str,
    values: str,
    policies: str,
    share_levels: str,
    sources: str,
    from_: datetime | None,
    to: datetime | None,
    limit: int,
    offset: int,
    sort: str,
    asc: bool,
    count: bool,
    device: bool,
) -> None:
    """Search IOCs on the host API and print the reply as JSON.

    Examples:
        csapi iocs --types domain --policies detect
        csapi iocs --types domain --values evil.com --count
        csapi iocs --types sha256 --values <hash> --device
    """
    try:
        client = build_host_client(ctx)
        buf = io.BytesIO()
        if count:
            client.device_count_json(types, values, buf)
        elif device:
            client.devices_ran_on_json(types, values, buf)
        else:
            req = SearchIOCsRequest(
                types=split_list(types),
                values=split_list(values),
                policies=split_list(policies),
                share_levels=split_list(share_levels),
                sources=split_list(sources),
                from_expiration_timestamp=from_,
                to_expiration_timestamp=to,
                sort=SortField(name=sort, ascending=asc) if sort else None,
                limit=limit,
                offset=offset,
            )
            client.search_iocs_json(req, buf)
        show_raw_json(buf.getvalue())
    except (CSAPIError, httpx.HTTPError, json.JSONDecodeError) as e:
        fail("IOC Query Failed", e)


if __name__ == "__main__":
    main()

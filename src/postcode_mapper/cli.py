"""
Postcode Mapper — CLI Entry Point
=================================
Installed as the ``geo-postcode-map`` command via ``pyproject.toml``.

Usage::

    # Plot every configured postcode and write an HTML map
    geo-postcode-map plot --config config.json --output output/map.html

    # Also highlight a searched postcode and export GeoJSON
    geo-postcode-map plot -c config.json -o output/map.html \\
        --search 3572RB --geojson output/postcodes.geojson

    # Check a single postcode against the configured list
    geo-postcode-map search 3572RB --config config.json --output output/search.html

    # Plot, then search / clear / reload from a prompt
    geo-postcode-map interactive --config config.json --output output/map.html
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

import click

from postcode_mapper.app import MapRenderTool, PostcodeMapper
from postcode_mapper.base_tool import configure_logging
from postcode_mapper.exceptions import PostcodeMapperError
from postcode_mapper.models import SearchOutcome
from postcode_mapper.plotter import DEFAULT_DELAY_SECONDS
from postcode_mapper.resolver import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, default_resolver
from postcode_mapper.status import StatusBoard

config_option = click.option(
    "--config", "-c", "config_path",
    default="config.json",
    show_default=True,
    envvar="POSTCODE_MAPPER_CONFIG",
    type=click.Path(dir_okay=False, path_type=Path),
    help="JSON configuration file (or set POSTCODE_MAPPER_CONFIG).",
)
output_option = click.option(
    "--output", "-o", "output_path",
    default="map.html",
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path for the output HTML map.",
)
user_agent_option = click.option(
    "--user-agent",
    default=DEFAULT_USER_AGENT,
    show_default=True,
    envvar="POSTCODE_MAPPER_USER_AGENT",
    help="User-Agent sent to Nominatim (required by its usage policy).",
)
timeout_option = click.option(
    "--timeout",
    default=DEFAULT_TIMEOUT,
    show_default=True,
    type=float,
    help="Per-request HTTP timeout in seconds.",
)
delay_option = click.option(
    "--delay",
    default=DEFAULT_DELAY_SECONDS,
    show_default=True,
    type=click.FloatRange(min=DEFAULT_DELAY_SECONDS),
    help="Seconds to wait between postcodes during a batch plot.",
)
verbose_option = click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")


def _fail(exc: PostcodeMapperError) -> NoReturn:
    click.echo(f"Error: {exc.message}", err=True)
    sys.exit(1)


def _echo_outcome(outcome: SearchOutcome) -> None:
    colour = {"matched": "red", "clear": "green"}.get(outcome.status.value, "yellow")
    click.secho(f"{outcome.postcode or '-'}: {outcome.message}", fg=colour)


@click.group(name="geo-postcode-map", help="Plot Dutch PC4 postcodes on an interactive map.")
def cli() -> None:
    pass


@cli.command(help="Plot every configured postcode and write an HTML map.")
@config_option
@output_option
@click.option(
    "--geojson", "geojson_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write the plotted postcodes as a GeoJSON FeatureCollection.",
)
@click.option(
    "--search", "searches",
    multiple=True,
    help="Postcode to highlight after plotting. Repeatable; the last one stays highlighted.",
)
@user_agent_option
@timeout_option
@delay_option
@verbose_option
def plot(
    config_path: Path,
    output_path: Path,
    geojson_path: Path | None,
    searches: tuple[str, ...],
    user_agent: str,
    timeout: float,
    delay: float,
    verbose: bool,
) -> None:
    tool = MapRenderTool(
        input_path=config_path,
        output_path=output_path,
        geojson_path=geojson_path,
        searches=searches,
        user_agent=user_agent,
        timeout=timeout,
        delay_seconds=delay,
        verbose=verbose,
    )

    try:
        tool.run()
    except PostcodeMapperError as exc:
        _fail(exc)

    for outcome in tool.outcomes:
        _echo_outcome(outcome)
    click.echo(f"\nMap written to: {output_path}")
    if geojson_path is not None:
        click.echo(f"GeoJSON written to: {geojson_path}")


@cli.command(help="Check one postcode against the configured list.")
@click.argument("postcode")
@config_option
@output_option
@user_agent_option
@timeout_option
@verbose_option
def search(
    postcode: str,
    config_path: Path,
    output_path: Path,
    user_agent: str,
    timeout: float,
    verbose: bool,
) -> None:
    configure_logging(verbose)
    try:
        mapper = PostcodeMapper.from_file(
            config_path,
            resolver=default_resolver(user_agent=user_agent, timeout=timeout),
        )
        outcome = mapper.search_zipcode(postcode)
        if outcome.rendered:
            mapper.save(output_path)
    except PostcodeMapperError as exc:
        _fail(exc)

    _echo_outcome(outcome)
    if not outcome.rendered:
        sys.exit(1)
    click.echo(f"Map written to: {output_path}")


@cli.command(help="Plot the configured postcodes, then search, clear or reload from a prompt.")
@config_option
@output_option
@user_agent_option
@timeout_option
@delay_option
@verbose_option
def interactive(
    config_path: Path,
    output_path: Path,
    user_agent: str,
    timeout: float,
    delay: float,
    verbose: bool,
) -> None:
    configure_logging(verbose)
    status = StatusBoard(listener=click.echo)
    try:
        mapper = PostcodeMapper.from_file(
            config_path,
            resolver=default_resolver(user_agent=user_agent, timeout=timeout),
            status=status,
            delay_seconds=delay,
        )
        mapper.plot_all_zipcodes()
        mapper.save(output_path)
    except PostcodeMapperError as exc:
        _fail(exc)

    click.echo(f"Map written to: {output_path}")
    click.echo("Enter a postcode to search, 'clear', 'reload' or 'quit'.")
    while True:
        command = click.prompt("postcode", default="", show_default=False).strip()
        if command.lower() in ("quit", "exit", "q"):
            break
        if not command:
            continue

        if command.lower() == "clear":
            mapper.clear_search()
        elif command.lower() == "reload":
            mapper.reload()
        else:
            mapper.search_zipcode(command)

        try:
            mapper.save(output_path)
        except PostcodeMapperError as exc:
            _fail(exc)


if __name__ == "__main__":
    cli()

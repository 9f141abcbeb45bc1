"""Export the subgraph schema for supergraph composition."""

from pathlib import Path

import click

from processed_data.cli.utils import success


@click.command()
@click.option(
    "--path",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write the SDL to this file instead of stdout",
)
def schema(path: Path | None) -> None:
    """Print the Federation 2 SDL of this subgraph."""
    from processed_data.features.graphql.schema import export_sdl

    sdl = export_sdl(path)
    if path is None:
        click.echo(sdl)
    else:
        success(f"Schema written to {path}")

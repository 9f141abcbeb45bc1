"""Main CLI entry point for processed-data."""

import click

from processed_data.cli.commands import schema, serve
from processed_data.infra.logging import setup_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="processed-data")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Processed data subgraph: ISPyB processing results over GraphQL.

    \b
    Commands:
      serve    Run the GraphQL service
      schema   Print or write the subgraph SDL

    \b
    Quick Start:
      processed-data serve --port 8080
      processed-data schema --path processed_data.graphql
    """
    ctx.ensure_object(dict)


cli.add_command(serve.serve)
cli.add_command(schema.schema)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()

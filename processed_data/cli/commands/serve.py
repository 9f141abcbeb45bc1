"""Run the GraphQL service."""

import click
import uvicorn

from processed_data.cli.utils import info
from processed_data.core.settings import get_app_settings


@click.command()
@click.option(
    "--host",
    default=None,
    help="Host to bind (default: from settings or 0.0.0.0)",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Port to bind (default: PORT / APP_PORT or 80)",
)
@click.option(
    "--reload/--no-reload",
    default=False,
    help="Enable auto-reload on code changes",
)
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Serve the GraphQL endpoint at / (GraphiQL on GET)."""
    settings = get_app_settings()
    host = host or settings.host
    port = port or settings.port

    info(f"Serving GraphQL at http://{host}:{port}/")
    info(f"Environment: {settings.environment}")

    uvicorn.run(
        "processed_data.app.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        # Logging is configured by the application lifespan
        log_config=None,
    )

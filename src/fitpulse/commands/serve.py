"""Web server command."""

import click

from .base import ensure_initialized


@click.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", "-p", default=8000, type=int, help="Port to bind to (default: 8000)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.option("--seed", type=int, help="Seed the recommendation jitter for repeatable rankings")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, reload: bool, seed: int | None):
    """Start the API server.

    Examples:

        # Start on default port (8000)
        fitpulse serve

        # Development mode with auto-reload
        fitpulse serve --reload

        # Same rankings on every run
        fitpulse serve --seed 7
    """
    ensure_initialized(ctx)
    if reload and seed is not None:
        raise click.UsageError("--seed cannot be combined with --reload")

    import uvicorn

    from ..services import SystemRandomSource
    from ..web import create_app

    click.echo()
    click.echo(click.style("Starting fitpulse API server...", fg="green"))
    click.echo(f"  Local:   http://{host}:{port}")
    click.echo(f"  Docs:    http://{host}:{port}/docs")
    click.echo()

    random_source = SystemRandomSource(seed) if seed is not None else None
    uvicorn.run(
        "fitpulse.web:create_app" if reload else create_app(random_source=random_source),
        host=host,
        port=port,
        reload=reload,
        factory=reload,
    )

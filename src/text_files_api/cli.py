# cli.py
import logging
import sys
from typing import Optional

import click

from text_files_api.errors import StartupError

# Configure logging
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for running and provisioning the Text Files API"""
    pass


@cli.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HOST setting)")
@click.option("--port", type=int, default=None, help="Port to listen on (defaults to PORT setting)")
@click.option("--reload", is_flag=True, default=False, help="Restart on code changes (development only)")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Ensure the stores exist, then serve the API with uvicorn"""
    import uvicorn

    from text_files_api.main import configure_logging, create_app, init_tag_store, load_settings

    try:
        settings = load_settings()
        configure_logging(settings.log_level)
        if reload:
            # the reloader builds the app in a worker process; only check the fatal steps here
            if settings.tags_enabled:
                init_tag_store(settings).close()
            app = None
        else:
            app = create_app(settings)
    except StartupError as e:
        configure_logging()
        logger.error(f"Failed to start the server: {e}")
        sys.exit(1)

    host = host or settings.host
    port = port or settings.port
    logger.info(f"Server is running on http://{host}:{port}")
    if app is None:
        uvicorn.run("text_files_api.main:create_app", factory=True, host=host, port=port, reload=True)
    else:
        uvicorn.run(app, host=host, port=port)


@cli.command()
def show_config():
    """Show current configuration"""
    from text_files_api.main import load_settings

    try:
        settings = load_settings()
    except StartupError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    click.echo("Current Configuration:")
    for key, value in settings.describe().items():
        click.echo(f"  {key}: {value}")


@cli.command()
def init_stores():
    """Create the bucket and the tags table if they are missing"""
    from text_files_api.main import configure_logging, init_tag_store, load_settings
    from text_files_api.s3.bucket import ensure_bucket_exists
    from text_files_api.s3.client import create_s3_client

    try:
        settings = load_settings()
        configure_logging(settings.log_level)
        bucket_ready = ensure_bucket_exists(
            settings.s3_bucket_name, create_s3_client(settings), region=settings.aws_region
        )
        if settings.tags_enabled:
            init_tag_store(settings).close()
    except StartupError as e:
        click.echo(f"Initialization failed: {e}", err=True)
        sys.exit(1)

    if not bucket_ready:
        click.echo(f"Bucket '{settings.s3_bucket_name}' could not be verified", err=True)
        sys.exit(1)
    click.echo("Stores are ready")


if __name__ == "__main__":
    cli()

"""Command-line interface for BoothCode.

This module provides the CLI commands for running the webhook server and
inspecting or back-filling the code registry.
"""

import asyncio
from typing import NoReturn

import click

from boothcode.core.config import get_settings
from boothcode.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version="0.1.0", prog_name="BoothCode")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides BOOTHCODE_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """BoothCode - seller booth codes for marketplace collections."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level


def _configured_settings(ctx: click.Context):
    settings = get_settings()
    log_level = (ctx.obj or {}).get("log_level")
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)
    return settings


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.pass_context
def serve(
    ctx: click.Context,
    host: str | None,
    port: int | None,
    workers: int | None,
    reload: bool,
) -> None:
    """Start the BoothCode webhook server."""
    import uvicorn

    settings = _configured_settings(ctx)

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    if bind_workers > 1 and settings.registry_is_process_local:
        click.echo(
            "Error: The code registry requires a single writer. "
            f"The '{settings.registry_backend}' registry backend cannot be shared "
            f"by {bind_workers} workers; use --workers 1 or a server database.",
            err=True,
        )
        raise SystemExit(1)

    logger = get_logger(__name__)
    logger.info(
        "Starting BoothCode server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "boothcode.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
def info() -> None:
    """Display BoothCode configuration."""
    settings = get_settings()

    click.echo(f"""
BoothCode v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Shop:
  Domain:       {settings.shop_domain or '(not set)'}
  API Version:  {settings.admin_api_version}
  Metafield:    {settings.metafield_namespace}.{settings.metafield_key}
  Webhook HMAC: {'enabled' if settings.webhook_secret else 'disabled'}

Registry:
  Backend:      {settings.registry_backend}
  Path:         {settings.registry_path}
  Database:     {settings.database_url}

Code Generation:
  Max Attempts: {settings.code_max_attempts}
  Step Max:     {settings.code_step_max}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


@cli.group()
def registry() -> None:
    """Inspect the code registry."""


@registry.command("list")
@click.pass_context
def registry_list(ctx: click.Context) -> None:
    """List issued codes in issuance order."""
    from boothcode.infrastructure.registry import build_code_registry

    settings = _configured_settings(ctx)

    async def run() -> list[str]:
        code_registry = build_code_registry(settings)
        try:
            await code_registry.load()
            return await code_registry.list_codes()
        finally:
            await code_registry.close()

    codes = asyncio.run(run())
    for code in codes:
        click.echo(code)
    click.echo(f"{len(codes)} code(s) issued", err=True)


@registry.command("check")
@click.argument("code")
@click.pass_context
def registry_check(ctx: click.Context, code: str) -> None:
    """Check whether CODE has been issued (exit status 1 if not)."""
    from boothcode.domain.services.seller_code_generator import SellerCodeGenerator
    from boothcode.infrastructure.registry import build_code_registry

    code = code.strip().upper()
    if not SellerCodeGenerator.validate(code):
        click.echo(f"Error: '{code}' is not a valid booth code", err=True)
        raise SystemExit(2)

    settings = _configured_settings(ctx)

    async def run() -> bool:
        code_registry = build_code_registry(settings)
        try:
            await code_registry.load()
            return await code_registry.contains(code)
        finally:
            await code_registry.close()

    if asyncio.run(run()):
        click.echo(f"{code}: issued")
        return
    click.echo(f"{code}: free")
    raise SystemExit(1)


@cli.group()
def code() -> None:
    """Derive or issue seller codes."""


@code.command("preview")
@click.argument("seller_id", type=int)
def code_preview(seller_id: int) -> None:
    """Show the primary code candidate for SELLER_ID without issuing it."""
    from boothcode.domain.exceptions import InvalidSellerIdError
    from boothcode.domain.services.seller_code_generator import SellerCodeGenerator

    try:
        base = SellerCodeGenerator.derive_base(seller_id)
    except InvalidSellerIdError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(2)

    click.echo(f"Seller ID:  {seller_id}")
    click.echo(f"Base:       {base}")
    click.echo(f"Candidate:  {SellerCodeGenerator.encode(base)}")


@code.command("issue")
@click.argument("seller_id", type=int)
@click.pass_context
def code_issue(ctx: click.Context, seller_id: int) -> None:
    """Issue a code for SELLER_ID and record it in the registry.

    Use this to back-fill collections created while the service was down;
    the code is not attached to any collection.
    """
    from boothcode.domain.exceptions import BoothCodeError
    from boothcode.infrastructure.api.app import build_code_generator
    from boothcode.infrastructure.registry import build_code_registry

    settings = _configured_settings(ctx)
    logger = get_logger(__name__)

    async def run() -> str:
        code_registry = build_code_registry(settings)
        try:
            await code_registry.load()
            generator = build_code_generator(settings, code_registry)
            return await generator.generate_unique_code(seller_id)
        finally:
            await code_registry.close()

    try:
        issued = asyncio.run(run())
    except BoothCodeError as e:
        logger.error("Code issuance failed", seller_id=seller_id, error=str(e))
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(issued)


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `boothcode` command is run
    or when using `python -m boothcode`.
    """
    cli(obj={})


if __name__ == "__main__":
    main()

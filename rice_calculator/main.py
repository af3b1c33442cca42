"""Application Entry Point (FastAPI/CLI)."""

import sys

import click
from fastapi import BackgroundTasks, FastAPI, Request, Response

from rice_calculator.adapters.ingress.favro_ingress import CALCULATOR_PATH, SIGNATURE_HEADER
from rice_calculator.config import CalculatorConfig, ConfigurationError, build_calculator_config
from rice_calculator.infrastructure.di import DIContainer, get_container, set_container
from rice_calculator.utils.logger import get_logger, setup_logging
from rice_calculator.utils.tracing import get_trace_id, setup_tracing

# Setup logging and tracing
setup_logging()
setup_tracing()

logger = get_logger(__name__)

app = FastAPI(title="Favro RICE Calculator", version="0.1.0")


@app.on_event("startup")
async def startup_event():
    """Validate configuration and log it for monitoring."""
    config = get_container().get_config()
    logger.info(
        "api_startup",
        webhook_url=config.webhook_url,
        organization_id=config.organization_id,
        dry_run=config.dry_run,
        publish_max_attempts=config.publish_max_attempts,
        serialize_per_card=config.serialize_per_card,
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post(CALCULATOR_PATH)
async def calculator_webhook(request: Request, background_tasks: BackgroundTasks):
    """Handle Favro card webhooks.

    The status code is decided before any recalculation runs: 200 for a
    valid signature, 403 otherwise. Recalculation happens in a background
    task after the response has been sent.

    Args:
        request: FastAPI request object.
        background_tasks: Task list run after the response.

    Returns:
        Empty 200 or 403 response.
    """
    container = get_container()
    ingress = container.get_webhook_ingress()

    try:
        payload = await request.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    if not ingress.verify(payload.get("payloadId"), request.headers.get(SIGNATURE_HEADER)):
        logger.warning("webhook_rejected", trace_id=get_trace_id())
        return Response(status_code=403)

    action = payload.get("action")
    if not ingress.is_relevant_action(action):
        logger.debug("webhook_ignored", action=action)
        return Response(status_code=200)

    event = ingress.parse_event(payload)
    if event is not None:
        logger.info(
            "webhook_received",
            payload_id=event.payload_id,
            action=event.action,
            card_id=event.card.card_id,
            trace_id=get_trace_id(),
        )
        background_tasks.add_task(container.get_score_handler().handle, event.card)

    return Response(status_code=200)


def load_config_or_exit() -> CalculatorConfig:
    """Build the configuration, exiting with status 1 if it is invalid."""
    try:
        return build_calculator_config()
    except ConfigurationError as e:
        for problem in e.problems:
            logger.error("configuration_error", problem=problem)
        sys.exit(1)


@click.group()
def cli():
    """Favro RICE score calculator."""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind.")
def serve(host: str):
    """Run the webhook server on the port of FAVRO_WEBHOOK_URL."""
    import uvicorn

    config = load_config_or_exit()
    set_container(DIContainer(config=config))
    logger.info("listening", webhook_url=config.webhook_url, host=host, port=config.port)
    uvicorn.run(app, host=host, port=config.port)


@cli.command("check-config")
def check_config():
    """Validate settings and field mappings without starting the server."""
    config = load_config_or_exit()
    click.echo(f"Server:        {config.server_url}")
    click.echo(f"Organization:  {config.organization_id}")
    click.echo(f"Webhook URL:   {config.webhook_url}{CALCULATOR_PATH} (port {config.port})")
    click.echo(f"Score field:   {config.score_field_id}")
    for name, mapping in config.input_mappings():
        click.echo(f"{name.capitalize():<14} {mapping.custom_field_id} ({len(mapping.items)} options)")
    click.echo("Configuration OK")


if __name__ == "__main__":
    cli()

"""Helper script to discover Favro custom field and option ids.

Step 1: ``list-fields`` prints every custom field of the organization.
Step 2: ``map-items REACH IMPACT CONFIDENCE EFFORT`` prints the option ids of
the four RICE fields with their weights, ready for field_mappings.py or
FAVRO_FIELD_MAPPING_FILE.
"""

import asyncio
import json
import sys
from pathlib import Path

import aiohttp
import click

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rice_calculator.adapters.egress.favro_egress import FavroAPIError, FavroEgressAdapter
from rice_calculator.config import CalculatorConfig, settings
from rice_calculator.discovery import build_mapping_document, is_placeholder_id
from rice_calculator.domain.schema import FieldMapping, PLACEHOLDER_ID


def _make_adapter() -> FavroEgressAdapter:
    missing = [
        name
        for name, value in (
            ("FAVRO_URL", settings.url),
            ("FAVRO_CALCULATOR_USER", settings.calculator_user),
            ("FAVRO_CALCULATOR_TOKEN", settings.calculator_token),
            ("FAVRO_ORG_ID", settings.org_id),
        )
        if not value
    ]
    if missing:
        click.echo(f"Error: {', '.join(missing)} not configured in .env file", err=True)
        sys.exit(1)

    # Mappings are not needed for read requests.
    unmapped = FieldMapping(custom_field_id=PLACEHOLDER_ID)
    config = CalculatorConfig(
        server_url=settings.url,
        user_email=settings.calculator_user,
        user_token=settings.calculator_token,
        organization_id=settings.org_id,
        webhook_url=settings.webhook_url,
        webhook_secret=settings.webhook_secret_key,
        reach=unmapped,
        impact=unmapped,
        confidence=unmapped,
        effort=unmapped,
        score_field_id=PLACEHOLDER_ID,
    )
    return FavroEgressAdapter(config)


@click.group()
def cli():
    """Discover Favro custom field ids."""
    pass


@cli.command("list-fields")
def list_fields():
    """Step 1: list custom fields (first page only)."""

    async def run():
        fields = await _make_adapter().get_custom_fields()
        if not fields:
            click.echo("No custom fields found.")
            return

        click.echo("\nFavro Custom Fields:")
        click.echo("=" * 80)
        click.echo(f"{'Name':<30} {'Type':<15} {'Custom Field ID'}")
        click.echo("-" * 80)
        for field in fields:
            click.echo(f"{field.name:<30} {field.type:<15} {field.custom_field_id}")
        click.echo("=" * 80)
        click.echo("\nPass the Reach, Impact, Confidence and Effort ids to map-items")

    try:
        asyncio.run(run())
    except (FavroAPIError, aiohttp.ClientError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command("map-items")
@click.argument("reach")
@click.argument("impact")
@click.argument("confidence")
@click.argument("effort")
@click.option("--score-field-id", default="", help="Id of the RICE Score number field.")
@click.option("--output", type=click.Path(dir_okay=False), help="Write the mapping JSON to a file.")
def map_items(reach, impact, confidence, effort, score_field_id, output):
    """Step 2: print option ids with RICE weights for the four input fields."""
    field_ids = [reach, impact, confidence, effort]
    for field_id in field_ids:
        if is_placeholder_id(field_id):
            click.echo(f"{field_id} needs to be updated with the id you got from list-fields", err=True)
            sys.exit(1)

    async def run():
        adapter = _make_adapter()
        fields = await asyncio.gather(*(adapter.get_custom_field(i) for i in field_ids))
        return build_mapping_document(list(fields), score_field_id)

    try:
        document = asyncio.run(run())
    except (ValueError, aiohttp.ClientError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    text = json.dumps(document, indent=2)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        click.echo(f"Wrote {output}; set FAVRO_FIELD_MAPPING_FILE={output}")
    else:
        click.echo(text)


if __name__ == "__main__":
    cli()

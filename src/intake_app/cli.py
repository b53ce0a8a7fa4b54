"""Command line access to the intake backend."""
import sys

import click

from shared.models import FormDraft
from .config_manager import ConfigManager
from .logging_config import setup_logging
from .services.api_service import APIError, APIService, AuthorizationError
from .services.auth_service import AdminSession, FileKeyStore
from .services.form_pipeline import FormPipeline
from .services.image_service import ImageService


class CLIContext:
    """Services shared by the commands of one invocation."""

    def __init__(self, api_url=None, key_file=None):
        overrides = {'api_base_url': api_url} if api_url else {}
        self.config = ConfigManager(**overrides)
        self.api_service = APIService.from_config(self.config)
        self.session = AdminSession(self.api_service, FileKeyStore(key_file))
        self.image_service = ImageService(self.config.thumbnail_max_size)
        self.pipeline = FormPipeline(self.api_service, self.config.max_upload_bytes)


def _fail(message):
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _admin_call(ctx, func, *args):
    try:
        return ctx.session.call(func, *args)
    except AuthorizationError as e:
        _fail(f"{e.message}. Run 'intake login API_KEY' first.")
    except APIError as e:
        _fail(e.message)


@click.group()
@click.option('--api-url', envvar='INTAKE_API_BASE_URL', help='Backend API base URL')
@click.option('--key-file', type=click.Path(dir_okay=False), help='Where the admin API key is stored')
@click.option('--log-level', default=None, help='Logging level (DEBUG, INFO, ...)')
@click.pass_context
def cli(ctx, api_url, key_file, log_level):
    """Field sales intake client."""
    setup_logging(log_level, stream=sys.stderr)
    ctx.obj = CLIContext(api_url, key_file)


@cli.command('submit')
@click.option('--salesman', 'salesman_name', default='', help='Salesman name')
@click.option('--customer-name', default='')
@click.option('--customer-address', default='')
@click.option('--customer-home-no', default='')
@click.option('--village', default='')
@click.option('--coordinates', default='', help='"lat,lon", e.g. 3.456,89.012')
@click.option('--building-type', default='')
@click.option('--operator', 'operators', multiple=True, help='Operator tag; repeat for several')
@click.option('--remarks', default='')
@click.option('--photo', 'photos', multiple=True, type=click.Path(exists=True, dir_okay=False), help='Building photo; repeat for several')
@click.pass_obj
def submit(ctx, salesman_name, customer_name, customer_address, customer_home_no, village, coordinates,
           building_type, operators, remarks, photos):
    """Validate and submit one intake form."""
    attachments, failures = ctx.image_service.load_attachments(photos)
    for path, error in failures.items():
        click.echo(f"Skipping {path}: {error}", err=True)

    draft = FormDraft(
        salesman_name=salesman_name,
        customer_name=customer_name,
        customer_address=customer_address,
        customer_home_no=customer_home_no,
        village=village,
        coordinates=coordinates,
        building_type=building_type,
        operators=list(operators),
        remarks=remarks,
        building_photos=attachments,
    )
    outcome = ctx.pipeline.submit(draft)
    if outcome.has_field_errors:
        for name, message in outcome.field_errors.items():
            click.echo(f"{name}: {message}", err=True)
        sys.exit(2)
    if not outcome.success:
        _fail(outcome.message)
    click.echo(f"Submitted. Submission ID: {outcome.submission_id}")


@cli.command('submissions')
@click.pass_obj
def submissions(ctx):
    """List all submissions (admin)."""
    items = _admin_call(ctx, ctx.api_service.get_submissions)
    if not items:
        click.echo("No submissions found")
        return
    for s in items:
        click.echo(f"{s.id}\t{s.timestamp}\t{s.salesman_name}\t{s.customer_name}\t{s.village}\t{s.building_type}")


@cli.command('submission')
@click.argument('submission_id')
@click.pass_obj
def submission(ctx, submission_id):
    """Show one submission (admin)."""
    s = _admin_call(ctx, ctx.api_service.get_submission, submission_id)
    click.echo(f"ID: {s.id}")
    click.echo(f"Date: {s.timestamp}")
    click.echo(f"Salesman: {s.salesman_name}")
    click.echo(f"Customer: {s.customer_name}")
    click.echo(f"Address: {s.customer_address}")
    click.echo(f"Home No: {s.customer_home_no or '-'}")
    click.echo(f"Village: {s.village}")
    click.echo(f"Coordinates: {s.coordinates}")
    click.echo(f"Building Type: {s.building_type}")
    click.echo(f"Operators: {', '.join(s.operators) or '-'}")
    click.echo(f"Remarks: {s.remarks or '-'}")
    for url in s.building_photos:
        click.echo(f"Photo: {url}")


@cli.command('login')
@click.argument('api_key')
@click.pass_obj
def login(ctx, api_key):
    """Verify and store the admin API key."""
    ok, error, items = ctx.session.login(api_key)
    if not ok:
        _fail(error)
    click.echo(f"API key verified successfully ({len(items)} submissions)")


@cli.command('logout')
@click.pass_obj
def logout(ctx):
    """Forget the stored admin API key."""
    ctx.session.logout()
    click.echo("Logged out")


@cli.command('add-salesman')
@click.argument('name')
@click.pass_obj
def add_salesman(ctx, name):
    """Append a salesman to the managed list (admin)."""
    if not name.strip():
        _fail("Please enter a salesman name")
    items = _admin_call(ctx, ctx.api_service.add_salesman, name.strip())
    click.echo("Salesman added successfully")
    for item in items or []:
        click.echo(f"  {item}")


@cli.command('add-building-type')
@click.argument('name')
@click.pass_obj
def add_building_type(ctx, name):
    """Append a building type to the managed list (admin)."""
    if not name.strip():
        _fail("Please enter a building type")
    items = _admin_call(ctx, ctx.api_service.add_building_type, name.strip())
    click.echo("Building type added successfully")
    for item in items or []:
        click.echo(f"  {item}")


if __name__ == '__main__':
    cli()

"""
Management Commands
flask create-admin / seed-countries / sync-rates
"""
import click
from flask.cli import with_appcontext

from dashboard.constants import ROLES, ROLE_ADMIN, get_page_keys
from dashboard.exceptions import DashboardException
from dashboard.extensions import db
from dashboard.models.user import AdminUser
from dashboard.services import currency_service
from dashboard.services.country_service import CountryService


@click.command('create-admin')
@click.option('--email', required=True)
@click.option('--name', required=True)
@click.option('--password', required=True, prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--role', type=click.Choice(ROLES), default=ROLE_ADMIN, show_default=True)
@click.option('--page', 'pages', multiple=True, type=click.Choice(get_page_keys()),
              help='Allowed page for an admin; repeat for several pages.')
@with_appcontext
def create_admin_command(email, name, password, role, pages):
    """Create a dashboard user, or reset the password of an existing one."""
    email = email.strip().lower()
    if len(password) < 6:
        raise click.BadParameter('must be at least 6 characters', param_hint='--password')

    user = AdminUser.query.filter_by(email=email).first()
    created = user is None
    if created:
        user = AdminUser(email=email)
        db.session.add(user)

    user.name = name
    user.role = role
    user.allowed_pages = list(pages)
    user.active = True
    user.set_password(password)
    db.session.commit()

    click.echo(f"{'Created' if created else 'Updated'} {role} {email}")


@click.command('seed-countries')
@with_appcontext
def seed_countries_command():
    """Insert the default countries that are missing."""
    added = CountryService.seed_default_countries()
    click.echo(f'Added {added} countries')


@click.command('sync-rates')
@with_appcontext
def sync_rates_command():
    """Refresh USD exchange rates for the currencies of active countries."""
    try:
        stored = currency_service.sync_rates(CountryService.active_currency_codes())
    except DashboardException as e:
        db.session.rollback()
        raise click.ClickException(e.message)

    for code, rate in sorted(stored.items()):
        click.echo(f'USD -> {code}: {rate}')
    click.echo(f'Synced {len(stored)} rates')


def register_commands(app):
    app.cli.add_command(create_admin_command)
    app.cli.add_command(seed_countries_command)
    app.cli.add_command(sync_rates_command)

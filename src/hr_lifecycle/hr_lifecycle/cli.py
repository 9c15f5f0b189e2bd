"""Flask CLI commands meant to be run by an external scheduler (cron, k8s CronJob)."""

from __future__ import annotations

import click
from flask import Flask, current_app
from flask.cli import with_appcontext

from .common.datetime_utils import now_in
from .container import Container

EXTENSION_KEY = "hr_lifecycle"


def get_container() -> Container:
    return current_app.extensions[EXTENSION_KEY]


@click.command("allocate-balances")
@click.option("--year", type=int, default=None, help="Benefit year; defaults to the current org-local year.")
@with_appcontext
def allocate_balances(year):
    """Create leave balance rows for every active employee."""
    container = get_container()
    year = year or now_in(container.tz).year

    employees = container.users_repo.list_active_employees()
    created = 0
    for user in employees:
        created += container.leave_ledger.allocate_year(user.user_id, year)

    click.echo(f"Allocated {created} balance row(s) for {len(employees)} employee(s), year {year}")


@click.command("auto-checkout")
@with_appcontext
def auto_checkout():
    """Close today's open attendance records whose shift ended over the grace period ago."""
    result = get_container().attendance_service.auto_checkout()
    click.echo(
        f"Auto check-out: {result.processed_count} processed, {len(result.skipped_user_ids)} skipped, "
        f"{result.error_count} error(s)"
    )


def register_commands(app: Flask) -> None:
    app.cli.add_command(allocate_balances)
    app.cli.add_command(auto_checkout)

import click
from flask import current_app
from flask.cli import with_appcontext

from extensions import db


@click.command("init-db")
@with_appcontext
def init_db():
    """Initialize the database"""
    click.echo("Initializing database...")
    db.create_all()
    click.echo("Database initialized successfully!")


@click.command("drop-db")
@with_appcontext
def drop_db():
    """Drop all database tables"""
    if click.confirm("This will delete all data. Are you sure?"):
        db.drop_all()
        click.echo("Database tables dropped.")


@click.command("list-materials")
@with_appcontext
def list_materials():
    """List all materials"""
    rows = current_app.extensions["materials"].list_materials()
    if not rows:
        click.echo("No materials found.")
        return

    for row in rows:
        image = row["image_path"] or "-"
        click.echo(
            f"{row['id']}: {row['name']} [{row['category']}] pdf={row['pdf_path']} image={image}"
        )


@click.command("prune-uploads")
@click.option("--dry-run", is_flag=True, help="Only report the files that would be removed.")
@with_appcontext
def prune_uploads(dry_run):
    """Remove uploaded files that no material refers to"""
    orphans = current_app.extensions["materials"].prune_orphans(dry_run=dry_run)
    verb = "Would remove" if dry_run else "Removed"
    for file_path in orphans:
        click.echo(f"{verb} {file_path}")
    click.echo(f"{verb} {len(orphans)} orphaned file(s).")


def register_commands(app):
    for command in (init_db, drop_db, list_materials, prune_uploads):
        app.cli.add_command(command)

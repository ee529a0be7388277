#!/usr/bin/env python3
"""
Management script for the Materials API

Usage:
    python manage.py init-db
    python manage.py list-materials
    python manage.py prune-uploads --dry-run
"""

import os
import sys

import click
from flask.cli import FlaskGroup

# Add the current directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app import create_app  # noqa: E402


@click.group(cls=FlaskGroup, create_app=create_app)
def cli():
    """Materials API CLI"""
    pass


if __name__ == "__main__":
    cli()

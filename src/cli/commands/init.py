"""Init CLI command."""

import os

import click

from cli.output import handle_errors, output_json
from cli.utils import get_components
from crumbs.storage import BreadcrumbStore


@click.command()
@click.option("-f", "--force", is_flag=True, help="Overwrite an existing breadcrumb file")
@handle_errors("INIT_FAILED")
def init(force: bool):
    """Create an empty breadcrumb file in the current directory."""
    c = get_components()
    # Unlike other commands, init never reuses a file found in a parent directory
    path = os.environ.get("BREADCRUMB_FILE") or c["cwd"] / c["config_model"].store.filename
    store = BreadcrumbStore(path)

    store.init(force=force)
    output_json({"success": True, "path": str(store.path)})

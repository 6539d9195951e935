"""Release inspection commands"""

import json
import sys

import click

from ..utils.output import console, format_release_list
from ...api import list_releases, current_release


@click.group()
def releases():
    """Inspect releases of a deploy root

    Releases are never deleted by release-deploy; these commands show
    what is on disk and which release is active.
    """
    pass


@releases.command(name='list')
@click.argument('deploy_root', type=click.Path(file_okay=False))
@click.option('--output', type=click.Choice(['table', 'json']),
              default='table', help='Output format')
@click.pass_context
def list_command(ctx, deploy_root, output):
    """List releases, oldest first

    Examples:

        release-deploy releases list /srv/web

        release-deploy releases list /srv/web --output json
    """
    try:
        infos = list_releases(deploy_root)
    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        if ctx.obj and ctx.obj.debug:
            console.print_exception()
        sys.exit(1)

    if output == 'json':
        click.echo(json.dumps([info.to_dict() for info in infos], indent=2))
        return

    if not infos:
        console.print("[yellow]No releases found[/yellow]")
        return

    format_release_list(infos, deploy_root)


@releases.command()
@click.argument('deploy_root', type=click.Path(file_okay=False))
def current(deploy_root):
    """Show the active release

    Examples:

        release-deploy releases current /srv/web
    """
    target = current_release(deploy_root)

    if target is None:
        console.print("[yellow]No active release[/yellow]")
        return

    click.echo(str(target))

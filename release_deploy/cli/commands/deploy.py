"""Deploy command implementation"""

import json
import sys

import click

from ..utils.output import console, format_deploy_result, format_deploy_error, write_ci_outputs
from ...api import Deployer
from ...api.exceptions import DeployToolError, HealthCheckFailedError
from ...services.config_service import ConfigService
from ...utils.async_utils import run_async


@click.command()
@click.option('--config', 'config_path', type=click.Path(dir_okay=False),
              help='Configuration file (default: .release-deploy.yaml)')
@click.option('--app-name', help='Application name')
@click.option('--deploy-root', help='Deploy root holding releases/ and current')
@click.option('--repo-path', help='Checked out repository (default: current directory)')
@click.option('--revision', help='Source revision (default: CI variables or git HEAD)')
@click.option('--install-cmds', help='Install commands, run in the repository')
@click.option('--build-cmds', help='Build commands, run in the repository')
@click.option('--dist-dir', help='Build output directory relative to the repository')
@click.option('--pre-deploy-cmds', help='Commands run in the release before activation')
@click.option('--post-deploy-cmds', help='Commands run in the release after activation')
@click.option('--healthcheck-url', help='URL checked after activation')
@click.option('--healthcheck-code-range', help='Accepted status codes (default: 200-299)')
@click.option('--healthcheck-timeout', type=int, help='Seconds per attempt (0 for no limit)')
@click.option('--healthcheck-retries', type=int, help='Maximum attempts')
@click.option('--healthcheck-delay', type=int, help='Seconds before the first attempt')
@click.option('--healthcheck-interval', type=int, help='Seconds between attempts')
@click.option('--output', type=click.Choice(['panel', 'json']),
              default='panel', help='Output format')
@click.option('--ci-outputs/--no-ci-outputs', default=True,
              help='Write outputs to $GITHUB_OUTPUT when set')
@click.pass_context
def deploy(ctx, config_path, app_name, deploy_root, repo_path, revision,
           install_cmds, build_cmds, dist_dir, pre_deploy_cmds, post_deploy_cmds,
           healthcheck_url, healthcheck_code_range, healthcheck_timeout,
           healthcheck_retries, healthcheck_delay, healthcheck_interval,
           output, ci_outputs):
    """Deploy a new release

    Builds a new release directory under DEPLOY_ROOT/releases, switches
    DEPLOY_ROOT/current to it and optionally verifies it over HTTP.
    Older releases are kept for rollback.

    Command options accept a single command, a JSON array of commands
    or a multiline script with one command per line.

    Examples:

        # Deploy using .release-deploy.yaml
        release-deploy deploy

        # Build with npm and deploy the dist directory
        release-deploy deploy --app-name web --deploy-root /srv/web \\
            --install-cmds "npm ci" --build-cmds "npm run build" --dist-dir dist

        # Verify the new release
        release-deploy deploy --healthcheck-url http://localhost:3000/health
    """
    overrides = {
        'app_name': app_name,
        'deploy_root': deploy_root,
        'repo_path': repo_path,
        'revision': revision,
        'install_cmds': install_cmds,
        'build_cmds': build_cmds,
        'dist_dir': dist_dir,
        'pre_deploy_cmds': pre_deploy_cmds,
        'post_deploy_cmds': post_deploy_cmds,
        'healthcheck': {
            'url': healthcheck_url,
            'code_range': healthcheck_code_range,
            'timeout': healthcheck_timeout,
            'retries': healthcheck_retries,
            'delay': healthcheck_delay,
            'interval': healthcheck_interval,
        },
    }

    try:
        config = ConfigService(config_path).build(overrides)
        result = run_async(Deployer(config).deploy_async())

    except HealthCheckFailedError as e:
        # The release stays active; expose it so the pipeline can roll back
        if ci_outputs and e.result is not None:
            write_ci_outputs(e.result.to_outputs())
        format_deploy_error(e)
        if ctx.obj and ctx.obj.debug:
            console.print_exception()
        sys.exit(1)

    except DeployToolError as e:
        format_deploy_error(e)
        if ctx.obj and ctx.obj.debug:
            console.print_exception()
        sys.exit(1)

    if ci_outputs:
        written = write_ci_outputs(result.to_outputs())
        if written and ctx.obj and ctx.obj.verbose:
            console.print(f"[dim]Outputs written to {written}[/dim]")

    if output == 'json':
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        format_deploy_result(result)

import click

from kubecfg.cli.contexts import contexts
from kubecfg.cli.view import view
from kubecfg.version import PACKAGE_NAME, PACKAGE_VERSION


@click.group(invoke_without_command=True)
@click.version_option(PACKAGE_VERSION, prog_name=PACKAGE_NAME)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Kubernetes client configuration resolver"""
    # Show help when no subcommand is provided
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(view)
cli.add_command(contexts)


if __name__ == "__main__":
    cli()

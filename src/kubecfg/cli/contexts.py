import click

from kubecfg.cli.utils import configure_logging, output_error, output_result, resolve_config


@click.command(name="contexts")
@click.option(
    "--kubeconfig",
    type=click.Path(dir_okay=False),
    help="Read only this kubeconfig file, without environment overrides",
)
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def contexts(kubeconfig: str | None, json_output: bool, debug: bool) -> None:
    """List the contexts defined in the kubeconfig.

    The current context is marked with an asterisk.

    \b
    Examples:
        kubecfg contexts                # Contexts from the default kubeconfig
        kubecfg contexts --json-output  # Output in JSON format
    """
    configure_logging(debug)

    try:
        config = resolve_config(kubeconfig, None)
        current = config.current_context_name

        if json_output:
            results = [
                {
                    "name": c.name,
                    "cluster": c.context.cluster,
                    "user": c.context.user,
                    "namespace": c.context.namespace,
                    "current": c.name == current,
                    "file": str(c.source_file) if c.source_file else None,
                }
                for c in config.contexts
            ]
            output_result(results, json_output, debug)
        else:
            if not config.contexts:
                click.echo("No contexts found")
                return
            rows = [
                f"{'*' if c.name == current else ' '} {c.name}"
                for c in sorted(config.contexts, key=lambda c: c.name)
            ]
            output_result(rows, json_output, debug)

    except Exception as e:
        output_error(e, json_output, debug)

import click
import yaml

from kubecfg.cli.utils import configure_logging, output_error, output_result, resolve_config


@click.command(name="view")
@click.option("--context", help="Kubeconfig context to select")
@click.option(
    "--kubeconfig",
    type=click.Path(dir_okay=False),
    help="Read only this kubeconfig file, without environment overrides",
)
@click.option("--show-secrets", is_flag=True, help="Do not mask tokens, passwords and keys")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def view(
    context: str | None,
    kubeconfig: str | None,
    show_secrets: bool,
    json_output: bool,
    debug: bool,
) -> None:
    """Show the resolved client configuration.

    Credentials are masked unless --show-secrets is given.

    \b
    Examples:
        kubecfg view                        # Resolve from the environment
        kubecfg view --context staging      # Select a kubeconfig context
        kubecfg view --kubeconfig ./config  # Read a single kubeconfig file
        kubecfg view --json-output          # Output in JSON format
    """
    configure_logging(debug)

    try:
        config = resolve_config(kubeconfig, context)
        data = config.to_display_dict(redact=not show_secrets)

        if json_output:
            output_result(data, json_output, debug)
        else:
            output_result(yaml.safe_dump(data, sort_keys=False).rstrip(), json_output, debug)

    except Exception as e:
        output_error(e, json_output, debug)

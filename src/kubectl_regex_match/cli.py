"""
CLI entry point for kubectl-regex-match.

Parses options and arguments into a KubeConfig, then resolves the resource
scope, selects resources by regex and either prints them (get) or hands them
to execute() (delete). Installed as kubectl-regex_match so that
`kubectl regex-match ...` finds it as a plugin.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional

import click

from . import __version__
from .config import KubeConfig
from .errors import RegexMatchError
from .executor import execute
from .scope import resolve
from .selector import compile_pattern, select

# Shown at the bottom of kubectl regex-match --help / -h
EPILOG = """
\b
Examples:

\b
  # list all pods starting with "nginx-" in current context's namespace
  kubectl regex-match get pods "^nginx-"

\b
  # list all services ending with "web" in namespace "foo"
  kubectl regex-match get services "web$" -n foo

\b
  # delete all configMaps in the "foo" namespace containing "app"
  kubectl regex-match delete configmaps "app" -n foo

\b
  # delete matching pods in every namespace without prompting
  kubectl regex-match delete pods "^tmp-" -A -y
"""

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def kube_options(func: Callable) -> Callable:
    """Namespace and connection flags shared by get and delete."""
    options = [
        click.option("-n", "--namespace", metavar="NS", help="Namespace scope for this request"),
        click.option(
            "-A",
            "--all-namespaces",
            "all_namespaces",
            is_flag=True,
            help="If present, list across all namespaces",
        ),
        click.option("--context", help="The name of the kubeconfig context to use"),
        click.option("--kubeconfig", metavar="PATH", help="Path to the kubeconfig file to use"),
        click.option("--cluster", help="The name of the kubeconfig cluster to use"),
        click.option("--user", help="The name of the kubeconfig user to use"),
        click.option("--token", help="Bearer token for authentication to the API server"),
        click.option("-s", "--server", help="The address and port of the Kubernetes API server"),
        click.option(
            "--request-timeout",
            "request_timeout",
            metavar="DURATION",
            help="Passed to kubectl (e.g. 30s); by default requests do not time out",
        ),
        click.option("--as", "as_user", metavar="USER", help="Username to impersonate for the operation"),
        click.option(
            "--as-group",
            "as_groups",
            metavar="GROUP",
            multiple=True,
            help="Group to impersonate for the operation; repeat for more groups",
        ),
        click.option("--certificate-authority", metavar="PATH", help="Path to a cert file for the certificate authority"),
        click.option("--client-certificate", metavar="PATH", help="Path to a client certificate file for TLS"),
        click.option("--client-key", metavar="PATH", help="Path to a client key file for TLS"),
        click.option(
            "--insecure-skip-tls-verify",
            is_flag=True,
            help="Do not check the server's certificate; makes HTTPS connections insecure",
        ),
        click.option("-v", "--verbose", is_flag=True, help="Log kubectl calls to stderr"),
        click.argument("args", nargs=-1, metavar="<resource> [pattern]"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _split_args(args: tuple[str, ...]) -> tuple[str, Optional[str]]:
    if len(args) == 0:
        raise click.UsageError("resource type must be specified")
    if len(args) > 2:
        raise click.UsageError("too many arguments")
    return args[0], (args[1] if len(args) > 1 else None)


def _build_config(**kwargs) -> KubeConfig:
    return KubeConfig(
        namespace=kwargs["namespace"],
        all_namespaces=kwargs["all_namespaces"],
        context=kwargs["context"],
        kubeconfig=kwargs["kubeconfig"],
        cluster=kwargs["cluster"],
        user=kwargs["user"],
        token=kwargs["token"],
        server=kwargs["server"],
        request_timeout=kwargs["request_timeout"],
        as_user=kwargs["as_user"],
        as_groups=tuple(kwargs["as_groups"]),
        certificate_authority=kwargs["certificate_authority"],
        client_certificate=kwargs["client_certificate"],
        client_key=kwargs["client_key"],
        insecure_skip_tls_verify=kwargs["insecure_skip_tls_verify"],
    )


@click.group(name="regex-match", context_settings=CONTEXT_SETTINGS, epilog=EPILOG)
@click.version_option(__version__, prog_name="kubectl regex-match")
def main() -> None:
    """Use RegEx to manage Kubernetes resources."""


@main.command(context_settings=CONTEXT_SETTINGS)
@kube_options
def get(args: tuple[str, ...], verbose: bool, **kwargs) -> None:
    """
    Get Kubernetes resources matching RegEx.

    Prints the name of every resource of the given type whose name matches
    the pattern, one per line. Omitting the pattern matches everything.
    """
    resource_type, pattern_text = _split_args(args)
    _setup_logging(verbose)
    try:
        pattern = compile_pattern(pattern_text)
        accessor = resolve(resource_type, _build_config(**kwargs))
        matched = select(accessor, pattern)
    except RegexMatchError as exc:
        raise click.ClickException(str(exc)) from exc
    for ref in matched:
        click.echo(ref.name)


@main.command(context_settings=CONTEXT_SETTINGS)
@kube_options
@click.option("-y", "--yes", "yes", is_flag=True, help="Skip confirmation prompts and delete directly")
def delete(args: tuple[str, ...], verbose: bool, yes: bool, **kwargs) -> None:
    """
    Delete Kubernetes resources matching RegEx.

    Lists the matches and asks once before deleting them. Individual delete
    failures are reported and counted; they do not stop the batch or change
    the exit status.
    """
    resource_type, pattern_text = _split_args(args)
    _setup_logging(verbose)
    try:
        pattern = compile_pattern(pattern_text)
        accessor = resolve(resource_type, _build_config(**kwargs))
        matched = select(accessor, pattern)
    except RegexMatchError as exc:
        raise click.ClickException(str(exc)) from exc
    execute(matched, accessor, skip_confirm=yes)


if __name__ == "__main__":
    sys.exit(main())

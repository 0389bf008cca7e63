"""
Constants and command configuration for kubectl-regex-match.

Defines ANSI codes for output formatting, the resource kinds that are always
treated as cluster-scoped, and KubeConfig, the per-invocation options passed
explicitly into scope resolution and listing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# ANSI escape sequences for terminal output
BOLD = "\033[1m"   # Start bold
SGR0 = "\033[0m"   # Reset (end bold)

# Namespace used when neither --namespace nor the current context sets one.
DEFAULT_NAMESPACE = "default"

# Plural resource names that never take -n or --all-namespaces, whatever
# discovery or the flags say.
ALWAYS_CLUSTER_SCOPED = frozenset({"nodes", "namespaces"})

# kubectl global flags whose values are credentials; masked in debug logs.
SECRET_FLAGS = frozenset({"--token"})

# `kubectl config view --minify` error when no context is selected.
NO_CURRENT_CONTEXT = "current-context must exist"

# Namespace of the pod's service account when running in-cluster.
SERVICE_ACCOUNT_NAMESPACE = "/var/run/secrets/kubernetes.io/serviceaccount/namespace"


@dataclass(frozen=True)
class KubeConfig:
    """
    Resolved command options for one invocation.

    Attributes:
        namespace: Explicit --namespace override; None means use the context's namespace.
        all_namespaces: List across all namespaces (--all-namespaces).
        context: kubeconfig context to use.
        kubeconfig: Path to the kubeconfig file.
        cluster: kubeconfig cluster to use.
        user: kubeconfig user to use.
        token: Bearer token for API server authentication.
        server: Address and port of the API server.
        request_timeout: Passed through to kubectl --request-timeout (e.g. "30s").
        as_user: User to impersonate (--as).
        as_groups: Groups to impersonate (--as-group, repeatable).
        certificate_authority: Path to a CA cert file.
        client_certificate: Path to a client certificate file for TLS.
        client_key: Path to a client key file for TLS.
        insecure_skip_tls_verify: Do not verify the server certificate.
    """

    namespace: Optional[str] = None
    all_namespaces: bool = False
    context: Optional[str] = None
    kubeconfig: Optional[str] = None
    cluster: Optional[str] = None
    user: Optional[str] = None
    token: Optional[str] = None
    server: Optional[str] = None
    request_timeout: Optional[str] = None
    as_user: Optional[str] = None
    as_groups: tuple[str, ...] = ()
    certificate_authority: Optional[str] = None
    client_certificate: Optional[str] = None
    client_key: Optional[str] = None
    insecure_skip_tls_verify: bool = False

    def global_args(self) -> list[str]:
        """Connection overrides rendered as kubectl global flags."""
        args: list[str] = []
        for flag, value in (
            ("--kubeconfig", self.kubeconfig),
            ("--context", self.context),
            ("--cluster", self.cluster),
            ("--user", self.user),
            ("--token", self.token),
            ("--server", self.server),
            ("--request-timeout", self.request_timeout),
            ("--as", self.as_user),
            ("--certificate-authority", self.certificate_authority),
            ("--client-certificate", self.client_certificate),
            ("--client-key", self.client_key),
        ):
            if value:
                args.append(f"{flag}={value}")
        args.extend(f"--as-group={group}" for group in self.as_groups)
        if self.insecure_skip_tls_verify:
            args.append("--insecure-skip-tls-verify=true")
        return args

"""
Kubectl invocation and Kubernetes resource JSON helpers.

All cluster access goes through subprocess kubectl calls. This module
provides a small wrapper plus helpers for discovery (api-resources), the
current context's namespace, listing as JSON and deleting by name.
"""

from __future__ import annotations

import json
import logging
import os
import shlex
import subprocess
from typing import Optional, Sequence

from .config import NO_CURRENT_CONTEXT, SECRET_FLAGS, SERVICE_ACCOUNT_NAMESPACE
from .errors import ConfigurationError, KubectlError, ListingError

logger = logging.getLogger(__name__)


def run_kubectl(
    args: list[str],
    global_args: Sequence[str] = (),
) -> subprocess.CompletedProcess:
    """
    Run kubectl with the given args, capturing stdout/stderr.

    Args:
        args: List of arguments (e.g. ["get", "pods", "-A", "-o", "json"]).
        global_args: Connection flags placed before args (see KubeConfig.global_args).

    Returns:
        CompletedProcess with returncode, stdout, stderr. No timeout is applied;
        pass --request-timeout through global_args to bound API calls.

    Raises:
        ConfigurationError: kubectl is not installed or not on PATH.
    """
    cmd = ["kubectl", *global_args, *args]
    logger.debug("running %s", shlex.join(redact(cmd)))
    try:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise ConfigurationError("kubectl not found on PATH") from exc


def redact(cmd: Sequence[str]) -> list[str]:
    """Copy of cmd with the values of credential flags replaced by ***."""
    masked = []
    for arg in cmd:
        flag, sep, _ = arg.partition("=")
        if sep and flag in SECRET_FLAGS:
            arg = f"{flag}=***"
        masked.append(arg)
    return masked


def api_resources(global_args: Sequence[str] = ()) -> list[dict]:
    """
    Discover the resource types served by the cluster.

    Parses `kubectl api-resources --no-headers`. Rows are
    NAME [SHORTNAMES] APIVERSION NAMESPACED KIND; SHORTNAMES is blank for many
    types, so a row has either five or four whitespace-separated fields.

    Returns:
        One dict per row, in kubectl's order, with keys "name", "shortnames",
        "apiversion", "namespaced" and "kind".

    Raises:
        ConfigurationError: kubectl failed and printed nothing usable.
    """
    result = run_kubectl(["api-resources", "--no-headers"], global_args)
    if result.returncode != 0:
        if not (result.stdout or "").strip():
            raise ConfigurationError(
                (result.stderr or "").strip() or "kubectl api-resources failed"
            )
        # Partial discovery (e.g. an unavailable aggregated API) still lists the rest.
        logger.warning("partial API discovery: %s", (result.stderr or "").strip())
    return parse_api_resources(result.stdout or "")


def parse_api_resources(text: str) -> list[dict]:
    """Parse `kubectl api-resources --no-headers` output; malformed rows are skipped."""
    rows = []
    for line in text.splitlines():
        fields = line.split()
        if len(fields) == 5:
            name, shortnames, apiversion, namespaced, kind = fields
        elif len(fields) == 4:
            name, apiversion, namespaced, kind = fields
            shortnames = ""
        else:
            if fields:
                logger.debug("skipping api-resources row %r", line)
            continue
        rows.append(
            {
                "name": name,
                "shortnames": [s for s in shortnames.split(",") if s],
                "apiversion": apiversion,
                "namespaced": namespaced.lower() == "true",
                "kind": kind,
            }
        )
    return rows


def current_namespace(global_args: Sequence[str] = ()) -> str:
    """
    Namespace set on the current kubeconfig context.

    With no current context (no kubeconfig, or only --server/--token given)
    this falls back to the in-cluster namespace: $POD_NAMESPACE, then the
    service account namespace file.

    Returns:
        The namespace, or "" when nothing sets one.

    Raises:
        ConfigurationError: kubectl cannot read the kubeconfig (e.g. malformed file).
    """
    result = run_kubectl(
        ["config", "view", "--minify", "-o", "jsonpath={..namespace}"], global_args
    )
    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        if NO_CURRENT_CONTEXT in stderr:
            logger.debug("no current context; using in-cluster namespace")
            return in_cluster_namespace()
        raise ConfigurationError(stderr or "could not read kubeconfig")
    return (result.stdout or "").strip()


def in_cluster_namespace() -> str:
    """$POD_NAMESPACE or the mounted service account namespace; "" outside a pod."""
    namespace = os.environ.get("POD_NAMESPACE", "").strip()
    if namespace:
        return namespace
    try:
        with open(SERVICE_ACCOUNT_NAMESPACE, encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return ""


def kubectl_get_json(
    kind: str,
    namespace: Optional[str] = None,
    all_ns: bool = False,
    global_args: Sequence[str] = (),
) -> dict:
    """
    List resources of one kind as JSON.

    Args:
        kind: Resource type as kubectl accepts it (e.g. "pods", "deployments.apps").
        namespace: Namespace to list in; ignored when all_ns is set.
        all_ns: List across all namespaces.
        global_args: Connection flags.

    Returns:
        Parsed JSON dict (List-style with "items").

    Raises:
        ListingError: kubectl failed or printed invalid JSON.
    """
    args = ["get", kind, "-o", "json"]
    if all_ns:
        args.append("--all-namespaces")
    elif namespace:
        args.extend(["-n", namespace])
    result = run_kubectl(args, global_args)
    if result.returncode != 0:
        raise ListingError(args, result.returncode, result.stderr)
    try:
        return json.loads(result.stdout or "")
    except json.JSONDecodeError as exc:
        raise ListingError(args, result.returncode, f"invalid JSON from kubectl: {exc}") from exc


def kubectl_delete(
    kind: str,
    name: str,
    namespace: Optional[str] = None,
    global_args: Sequence[str] = (),
) -> None:
    """
    Delete one resource by name without waiting for finalizers.

    Raises:
        KubectlError: kubectl exited non-zero.
    """
    args = ["delete", kind, name, "--wait=false"]
    if namespace:
        args.extend(["-n", namespace])
    result = run_kubectl(args, global_args)
    if result.returncode != 0:
        raise KubectlError(args, result.returncode, result.stderr)


def item_refs(obj: dict) -> list[tuple[str, str]]:
    """Return (namespace, name) for every item of a list response; namespace is "" for cluster-scoped items."""
    refs = []
    for item in obj.get("items") or []:
        meta = item.get("metadata", {})
        name = meta.get("name")
        if not name:
            continue
        refs.append((meta.get("namespace") or "", name))
    return refs

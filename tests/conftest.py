"""Shared fixtures: a fake kubectl that answers from an in-memory cluster."""

from __future__ import annotations

import json
import subprocess

import pytest

from kubectl_regex_match import kubectl

API_RESOURCES = """\
bindings                                        v1                        true    Binding
configmaps                        cm            v1                        true    ConfigMap
namespaces                        ns            v1                        false   Namespace
nodes                             no            v1                        false   Node
pods                              po            v1                        true    Pod
services                          svc           v1                        true    Service
events                            ev            v1                        true    Event
customresourcedefinitions         crd,crds      apiextensions.k8s.io/v1   false   CustomResourceDefinition
deployments                       deploy        apps/v1                   true    Deployment
events                            ev            events.k8s.io/v1          true    Event
"""


class FakeKubectl:
    """
    Stand-in for run_kubectl.

    objects holds (kind, namespace, name) in listing order; kind is the
    name kubectl is called with (e.g. "pods", "deployments.apps").
    """

    def __init__(self) -> None:
        self.objects: list[tuple[str, str, str]] = []
        self.context_namespace = ""
        self.fail_deletes: set[tuple[str, str]] = set()
        self.fail_list = ""
        self.fail_config = ""
        self.calls: list[list[str]] = []

    def add(self, kind: str, namespace: str, *names: str) -> None:
        for name in names:
            self.objects.append((kind, namespace, name))

    @property
    def deletes(self) -> list[list[str]]:
        return [c for c in self.calls if "delete" in c]

    def __call__(self, args, global_args=()):
        cmd = ["kubectl", *global_args, *args]
        self.calls.append(cmd)
        verb = args[0]
        if verb == "api-resources":
            return self._done(cmd, stdout=API_RESOURCES)
        if verb == "config":
            if self.fail_config:
                return self._done(cmd, returncode=1, stderr=self.fail_config)
            return self._done(cmd, stdout=self.context_namespace)
        if verb == "get":
            return self._get(cmd, args)
        if verb == "delete":
            return self._delete(cmd, args)
        raise AssertionError(f"unexpected kubectl call: {cmd}")

    def _get(self, cmd, args):
        if self.fail_list:
            return self._done(cmd, returncode=1, stderr=self.fail_list)
        kind = args[1]
        namespace = args[args.index("-n") + 1] if "-n" in args else None
        items = [
            {"metadata": {"name": name, **({"namespace": ns} if ns else {})}}
            for k, ns, name in self.objects
            if k == kind and (namespace is None or ns == namespace)
        ]
        return self._done(cmd, stdout=json.dumps({"kind": "List", "items": items}))

    def _delete(self, cmd, args):
        kind, name = args[1], args[2]
        namespace = args[args.index("-n") + 1] if "-n" in args else ""
        if (namespace, name) in self.fail_deletes:
            return self._done(
                cmd,
                returncode=1,
                stderr=f'Error from server (Forbidden): {kind} "{name}" is forbidden\n',
            )
        self.objects.remove((kind, namespace, name))
        return self._done(cmd, stdout=f'{kind} "{name}" deleted\n')

    @staticmethod
    def _done(cmd, returncode=0, stdout="", stderr=""):
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def fake_kubectl(monkeypatch):
    """Replace kubectl.run_kubectl with a FakeKubectl and return it."""
    fake = FakeKubectl()
    monkeypatch.setattr(kubectl, "run_kubectl", fake)
    return fake

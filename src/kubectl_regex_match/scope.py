"""
Scope resolution: resource type name -> scoped accessor.

resolve() looks the type up through kubectl discovery, decides whether the
command targets one namespace, all namespaces or the cluster, and returns a
ScopedAccessor that lists and deletes within that scope.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from . import kubectl
from .config import ALWAYS_CLUSTER_SCOPED, DEFAULT_NAMESPACE, KubeConfig
from .errors import UnknownResourceType


class ScopeKind(Enum):
    """What a command lists and deletes in."""

    CLUSTER = "cluster"
    NAMESPACE = "namespace"
    ALL_NAMESPACES = "all-namespaces"


@dataclass(frozen=True)
class Scope:
    """Scope decided once per invocation; namespace is set only for NAMESPACE."""

    kind: ScopeKind
    namespace: Optional[str] = None

    @classmethod
    def cluster(cls) -> "Scope":
        return cls(ScopeKind.CLUSTER)

    @classmethod
    def all_namespaces(cls) -> "Scope":
        return cls(ScopeKind.ALL_NAMESPACES)

    @classmethod
    def single(cls, namespace: str) -> "Scope":
        return cls(ScopeKind.NAMESPACE, namespace)


@dataclass(frozen=True)
class ResourceRef:
    """One resource instance; namespace is "" for cluster-scoped resources."""

    namespace: str
    name: str

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name


@dataclass(frozen=True)
class ResourceType:
    """A resource type as reported by `kubectl api-resources`."""

    name: str
    api_version: str
    namespaced: bool
    kind: str
    short_names: tuple[str, ...] = field(default=())

    @property
    def group(self) -> str:
        if "/" in self.api_version:
            return self.api_version.split("/", 1)[0]
        return ""

    @property
    def qualified_name(self) -> str:
        """Name passed back to kubectl; group-qualified so it cannot resolve elsewhere."""
        if self.group:
            return f"{self.name}.{self.group}"
        return self.name

    @property
    def cluster_scoped(self) -> bool:
        return self.name in ALWAYS_CLUSTER_SCOPED or not self.namespaced

    def matches(self, text: str) -> bool:
        """True if text names this type (plural, plural.group, short name, kind or singular)."""
        text = text.lower()
        candidates = {self.name.lower(), self.qualified_name.lower(), self.kind.lower()}
        candidates.update(s.lower() for s in self.short_names)
        return text in candidates


def find_resource_type(name: str, resources: list[ResourceType]) -> ResourceType:
    """
    Pick the first discovered type that `name` refers to.

    Raises:
        UnknownResourceType: no discovered type matches.
    """
    for resource in resources:
        if resource.matches(name):
            return resource
    raise UnknownResourceType(name, f'the server doesn\'t have a resource type "{name}"')


def discover_resource_types(config: KubeConfig) -> list[ResourceType]:
    return [
        ResourceType(
            name=row["name"],
            api_version=row["apiversion"],
            namespaced=row["namespaced"],
            kind=row["kind"],
            short_names=tuple(row["shortnames"]),
        )
        for row in kubectl.api_resources(config.global_args())
    ]


def decide_scope(
    resource: ResourceType,
    ambient_namespace: Optional[str],
    all_namespaces: bool,
) -> Scope:
    """
    Scope for one command, in precedence order: cluster-scoped types ignore
    the flags, then --all-namespaces, then the ambient namespace.
    """
    if resource.cluster_scoped:
        return Scope.cluster()
    if all_namespaces:
        return Scope.all_namespaces()
    return Scope.single(ambient_namespace or DEFAULT_NAMESPACE)


def ambient_namespace(config: KubeConfig) -> str:
    """The --namespace override, else the current context's namespace, else "default"."""
    if config.namespace:
        return config.namespace
    return kubectl.current_namespace(config.global_args()) or DEFAULT_NAMESPACE


class ScopedAccessor:
    """Lists and deletes resources of one type within one scope."""

    def __init__(self, resource: ResourceType, scope: Scope, config: KubeConfig) -> None:
        self.resource = resource
        self.scope = scope
        self.config = config

    def __repr__(self) -> str:
        return f"ScopedAccessor({self.resource.qualified_name!r}, {self.scope!r})"

    def list(self) -> list[ResourceRef]:
        """
        All resources visible in this scope, in kubectl's order.

        A single kubectl call with no pagination: very large listings are
        fetched in one response.
        """
        obj = kubectl.kubectl_get_json(
            self.resource.qualified_name,
            namespace=self.scope.namespace,
            all_ns=self.scope.kind is ScopeKind.ALL_NAMESPACES,
            global_args=self.config.global_args(),
        )
        return [ResourceRef(ns, name) for ns, name in kubectl.item_refs(obj)]

    def delete(self, name: str) -> None:
        kubectl.kubectl_delete(
            self.resource.qualified_name,
            name,
            namespace=self.scope.namespace,
            global_args=self.config.global_args(),
        )

    def for_namespace(self, namespace: str) -> "ScopedAccessor":
        """Accessor addressing one item: cluster-wide when namespace is "", else that namespace."""
        scope = Scope.single(namespace) if namespace else Scope.cluster()
        return ScopedAccessor(self.resource, scope, self.config)


def resolve(resource_type: str, config: KubeConfig) -> ScopedAccessor:
    """
    Resolve a resource type name to an accessor for this invocation's scope.

    Only read-only kubectl calls are made (discovery and, when needed, the
    current context's namespace).

    Raises:
        ConfigurationError: kubectl is missing or the cluster/kubeconfig is unusable.
        UnknownResourceType: discovery has no type by that name.
    """
    resource = find_resource_type(resource_type, discover_resource_types(config))
    namespace = None
    if not resource.cluster_scoped and not config.all_namespaces:
        namespace = ambient_namespace(config)
    scope = decide_scope(resource, namespace, config.all_namespaces)
    return ScopedAccessor(resource, scope, config)

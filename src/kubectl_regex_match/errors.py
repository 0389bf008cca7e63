"""Errors raised by scope resolution, selection and kubectl calls."""

from __future__ import annotations

from typing import Sequence


class RegexMatchError(Exception):
    """Base class for all kubectl-regex-match failures."""


class InvalidPattern(RegexMatchError):
    """The supplied pattern does not compile."""

    def __init__(self, pattern: str, cause: Exception) -> None:
        self.pattern = pattern
        self.cause = cause
        super().__init__(f"invalid pattern {pattern!r}: {cause}")


class UnknownResourceType(RegexMatchError):
    """The resource type name could not be resolved through discovery."""

    def __init__(self, resource: str, cause: str) -> None:
        self.resource = resource
        self.cause = cause
        super().__init__(f"unknown resource {resource!r}: {cause}")


class ConfigurationError(RegexMatchError):
    """kubectl is missing, or the kubeconfig / API server cannot be used."""


class KubectlError(RegexMatchError):
    """A kubectl invocation exited non-zero."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        message = self.stderr or f"kubectl {' '.join(self.command)} exited with status {returncode}"
        super().__init__(message)


class ListingError(KubectlError):
    """Listing the candidate resources failed; no partial listing is used."""

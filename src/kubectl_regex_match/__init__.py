"""
kubectl_regex_match: Select Kubernetes resources by name with a regex.

Lists resources of one type whose names match a regular expression, or
deletes them as a batch after a single confirmation prompt. Cluster access
goes through kubectl.
"""

__version__ = "0.1.0"

"""
Helper object to represent a kubernetes object that the upgrade inspects or
patches
"""

# Standard
from typing import Optional


class ManagedObject:
    """Basic struct to represent the identity of a managed kubernetes object"""

    def __init__(self, definition: dict):
        self.kind = definition.get("kind")
        self.metadata = definition.get("metadata") or {}
        self.name = self.metadata.get("name")
        self.namespace = self.metadata.get("namespace")
        self.resource_version = self.metadata.get("resourceVersion")
        self.api_version = definition.get("apiVersion")
        self.definition = definition

        assert self.kind is not None, "No kind found"
        assert self.name is not None, "No name found"

    @property
    def key(self) -> tuple:
        """The (kind, namespace, name) triple that identifies the object"""
        return (self.kind, self.namespace, self.name)

    def __str__(self):
        return object_info(self.kind, self.name, self.namespace)

    def __repr__(self):
        return str(self)

    def __hash__(self):
        return hash(self.key)

    def __eq__(self, other):
        return isinstance(other, ManagedObject) and self.key == other.key


def object_info(kind: str, name: str, namespace: Optional[str] = None) -> str:
    """Canonical string used to reference an object in log lines"""
    if namespace:
        return f"{kind} {namespace}/{name}"
    return f"{kind} {name}"

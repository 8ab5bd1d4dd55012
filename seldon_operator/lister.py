"""Read-only listing of SeldonDeployments held in an object store."""

from __future__ import annotations

from seldon_operator.client import NotFoundError, ObjectStore, Selector, labels_match
from seldon_operator.types import SeldonDeployment, resource

SELDON_DEPLOYMENT_RESOURCE = resource("seldondeployment")


class SeldonDeploymentLister:
    """Lists SeldonDeployments across all namespaces of a store."""

    def __init__(self, indexer: ObjectStore):
        self.indexer = indexer

    def list(self, selector: Selector = None) -> list[SeldonDeployment]:
        """Return every deployment whose labels match ``selector``."""
        return [
            obj
            for obj in self.indexer.items()
            if labels_match(selector, obj.metadata.labels)
        ]

    def seldon_deployments(self, namespace: str) -> "SeldonDeploymentNamespaceLister":
        """Return a lister restricted to ``namespace``."""
        return SeldonDeploymentNamespaceLister(self.indexer, namespace)


class SeldonDeploymentNamespaceLister:
    """Lists and gets SeldonDeployments within one namespace."""

    def __init__(self, indexer: ObjectStore, namespace: str):
        self.indexer = indexer
        self.namespace = namespace

    def list(self, selector: Selector = None) -> list[SeldonDeployment]:
        """Return the namespace's deployments whose labels match ``selector``."""
        return [
            obj
            for obj in self.indexer.items(self.namespace)
            if labels_match(selector, obj.metadata.labels)
        ]

    def get(self, name: str) -> SeldonDeployment:
        """Return the named deployment; raise NotFoundError if there is none."""
        obj = self.indexer.get(self.namespace, name)
        if obj is None:
            raise NotFoundError(name, SELDON_DEPLOYMENT_RESOURCE)
        return obj
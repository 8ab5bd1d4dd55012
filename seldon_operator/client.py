"""Typed client for SeldonDeployment resources, backed by an in-memory object store."""

from __future__ import annotations

import copy
import json
import re
import threading
import uuid
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from seldon_operator.types import (
    GroupResource,
    SeldonDeployment,
    SeldonDeploymentList,
    resource,
)

SELDON_DEPLOYMENTS_RESOURCE = resource("seldondeployments")

Selector = Union[None, str, Mapping[str, str]]


class NotFoundError(LookupError):
    """Raised when a named resource does not exist."""

    def __init__(self, name: str, group_resource: GroupResource = SELDON_DEPLOYMENTS_RESOURCE):
        self.name = name
        self.group_resource = group_resource
        super().__init__(
            f'{group_resource.resource}.{group_resource.group} "{name}" not found'
        )


class AlreadyExistsError(ValueError):
    """Raised when creating a resource whose name is already taken."""

    def __init__(self, name: str, group_resource: GroupResource = SELDON_DEPLOYMENTS_RESOURCE):
        self.name = name
        self.group_resource = group_resource
        super().__init__(
            f'{group_resource.resource}.{group_resource.group} "{name}" already exists'
        )


# --------------------------------------------------------------------------
# Label selectors
# --------------------------------------------------------------------------

_SET_TERM = re.compile(r"(?P<key>\S+)\s+(?P<op>in|notin)\s+\((?P<values>.*)\)")


def _split_terms(selector: str) -> list[str]:
    terms, current, depth = [], [], 0
    for char in selector:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            terms.append("".join(current))
            current = []
        else:
            current.append(char)
    terms.append("".join(current))
    return [term.strip() for term in terms if term.strip()]


def _term_matches(term: str, labels: Mapping[str, str]) -> bool:
    set_match = _SET_TERM.fullmatch(term)
    if set_match:
        key = set_match["key"]
        values = {v.strip() for v in set_match["values"].split(",") if v.strip()}
        if set_match["op"] == "in":
            return key in labels and labels[key] in values
        return key not in labels or labels[key] not in values
    if term.startswith("!"):
        return term[1:].strip() not in labels
    if "!=" in term:
        key, value = (part.strip() for part in term.split("!=", 1))
        return labels.get(key) != value
    if "==" in term:
        key, value = (part.strip() for part in term.split("==", 1))
        return key in labels and labels[key] == value
    if "=" in term:
        key, value = (part.strip() for part in term.split("=", 1))
        return key in labels and labels[key] == value
    if any(char in term for char in "()<> "):
        raise ValueError(f"invalid label selector term: {term!r}")
    return term in labels


def labels_match(selector: Selector, labels: Optional[Mapping[str, str]]) -> bool:
    """Tell whether ``labels`` satisfy ``selector``.

    The selector is either None or an empty string (matches everything), a mapping
    of required label values, or a selector string such as ``"a=b,c!=d,e in (x,y)"``.
    """
    labels = labels or {}
    if not selector:
        return True
    if isinstance(selector, Mapping):
        return all(key in labels and labels[key] == value for key, value in selector.items())
    return all(_term_matches(term, labels) for term in _split_terms(selector))


# --------------------------------------------------------------------------
# Object store
# --------------------------------------------------------------------------


class ObjectStore:
    """Thread-safe store of SeldonDeployments keyed by namespace and name."""

    def __init__(self, objects: Iterable[SeldonDeployment] = ()):
        self._objects: dict[tuple[str, str], SeldonDeployment] = {}
        self._revision = 0
        self._lock = threading.RLock()
        for obj in objects:
            self.put(obj)

    @property
    def resource_version(self) -> str:
        """The revision of the most recent write."""
        return str(self._revision)

    def get(self, namespace: str, name: str) -> Optional[SeldonDeployment]:
        """Return a copy of the stored object, or None if there is none."""
        with self._lock:
            obj = self._objects.get((namespace, name))
            return None if obj is None else obj.deep_copy()

    def put(self, obj: SeldonDeployment) -> SeldonDeployment:
        """Store a copy of ``obj``, stamping a new resource version; return that copy."""
        if not obj.metadata.name:
            raise ValueError("resource name may not be empty")
        stored = obj.deep_copy()
        with self._lock:
            self._revision += 1
            stored.metadata.resource_version = str(self._revision)
            if not stored.metadata.uid:
                stored.metadata.uid = str(uuid.uuid4())
            self._objects[(stored.metadata.namespace, stored.metadata.name)] = stored
            return stored.deep_copy()

    def remove(self, namespace: str, name: str) -> SeldonDeployment:
        """Remove and return the stored object; raise NotFoundError if absent."""
        with self._lock:
            try:
                obj = self._objects.pop((namespace, name))
            except KeyError:
                raise NotFoundError(name) from None
            self._revision += 1
            return obj

    def items(self, namespace: Optional[str] = None) -> list[SeldonDeployment]:
        """Return copies of the stored objects, all of them if ``namespace`` is empty."""
        with self._lock:
            return [
                obj.deep_copy()
                for (ns, _), obj in sorted(self._objects.items())
                if not namespace or ns == namespace
            ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)


# --------------------------------------------------------------------------
# Clients
# --------------------------------------------------------------------------


def _merge_patch(target: Any, patch: Any) -> Any:
    if not isinstance(patch, dict):
        return copy.deepcopy(patch)
    merged = dict(target) if isinstance(target, dict) else {}
    for key, value in patch.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = _merge_patch(merged.get(key), value)
    return merged


def _decode_patch(data: Union[bytes, str, Mapping[str, Any]]) -> dict[str, Any]:
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8")
    if isinstance(data, str):
        data = json.loads(data)
    if not isinstance(data, Mapping):
        raise ValueError("patch document must be a JSON object")
    return dict(data)


class SeldonDeploymentClient:
    """Create, read, update and delete SeldonDeployments in one namespace."""

    def __init__(self, store: ObjectStore, namespace: str = ""):
        self.store = store
        self.namespace = namespace

    def _namespaced(self, obj: SeldonDeployment) -> SeldonDeployment:
        obj = obj.deep_copy()
        if not obj.metadata.namespace:
            obj.metadata.namespace = self.namespace
        elif self.namespace and obj.metadata.namespace != self.namespace:
            raise ValueError(
                f"namespace {obj.metadata.namespace!r} does not match "
                f"client namespace {self.namespace!r}"
            )
        if not obj.metadata.name:
            raise ValueError("resource name may not be empty")
        return obj

    def _existing(self, name: str) -> SeldonDeployment:
        obj = self.store.get(self.namespace, name)
        if obj is None:
            raise NotFoundError(name)
        return obj

    def create(self, seldon_deployment: SeldonDeployment) -> SeldonDeployment:
        """Store a new deployment and return the stored representation."""
        obj = self._namespaced(seldon_deployment)
        if self.store.get(obj.metadata.namespace, obj.metadata.name) is not None:
            raise AlreadyExistsError(obj.metadata.name)
        obj.metadata.uid = ""
        return self.store.put(obj)

    def update(self, seldon_deployment: SeldonDeployment) -> SeldonDeployment:
        """Replace a deployment's metadata and spec; its status is left as stored."""
        obj = self._namespaced(seldon_deployment)
        existing = self.store.get(obj.metadata.namespace, obj.metadata.name)
        if existing is None:
            raise NotFoundError(obj.metadata.name)
        obj.status = existing.status
        obj.metadata.uid = existing.metadata.uid
        return self.store.put(obj)

    def update_status(self, seldon_deployment: SeldonDeployment) -> SeldonDeployment:
        """Replace only a deployment's status."""
        obj = self._namespaced(seldon_deployment)
        existing = self.store.get(obj.metadata.namespace, obj.metadata.name)
        if existing is None:
            raise NotFoundError(obj.metadata.name)
        existing.status = obj.status
        return self.store.put(existing)

    def delete(self, name: str) -> None:
        """Delete a deployment by name."""
        self.store.remove(self.namespace, name)

    def delete_collection(self, label_selector: Selector = None) -> int:
        """Delete every deployment whose labels match; return how many were deleted."""
        doomed = [
            obj
            for obj in self.store.items(self.namespace)
            if labels_match(label_selector, obj.metadata.labels)
        ]
        for obj in doomed:
            self.store.remove(obj.metadata.namespace, obj.metadata.name)
        return len(doomed)

    def get(self, name: str) -> SeldonDeployment:
        """Return the named deployment."""
        return self._existing(name)

    def list(self, label_selector: Selector = None) -> SeldonDeploymentList:
        """Return the deployments whose labels match the selector."""
        items = [
            obj
            for obj in self.store.items(self.namespace)
            if labels_match(label_selector, obj.metadata.labels)
        ]
        return SeldonDeploymentList(items=items, resource_version=self.store.resource_version)

    def patch(
        self, name: str, data: Union[bytes, str, Mapping[str, Any]], *subresources: str
    ) -> SeldonDeployment:
        """Apply a JSON merge patch to the deployment or to its ``status`` subresource."""
        if subresources not in ((), ("status",)):
            raise ValueError(f"unsupported subresource: {'/'.join(subresources)}")
        existing = self._existing(name)
        patched = SeldonDeployment.from_dict(
            _merge_patch(existing.to_dict(), _decode_patch(data))
        )
        if subresources:
            existing.status = patched.status
            return self.store.put(existing)
        patched.metadata.name = existing.metadata.name
        patched.metadata.namespace = existing.metadata.namespace
        patched.metadata.uid = existing.metadata.uid
        patched.status = existing.status
        return self.store.put(patched)


class MachinelearningV1alpha2Client:
    """Client for the machinelearning.seldon.io/v1alpha2 API group."""

    def __init__(self, store: Optional[ObjectStore] = None):
        self.store = store if store is not None else ObjectStore()

    def seldon_deployments(self, namespace: str) -> SeldonDeploymentClient:
        return SeldonDeploymentClient(self.store, namespace)


class Clientset:
    """The set of API group clients, all sharing one store."""

    def __init__(self, store: Optional[ObjectStore] = None):
        self.store = store if store is not None else ObjectStore()
        self._machinelearning_v1alpha2 = MachinelearningV1alpha2Client(self.store)

    def machinelearning_v1alpha2(self) -> MachinelearningV1alpha2Client:
        return self._machinelearning_v1alpha2
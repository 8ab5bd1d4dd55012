"""Resource model for SeldonDeployment objects and the naming rules derived from it."""

from __future__ import annotations

import copy
import enum
import hashlib
import re
from dataclasses import dataclass, field
from typing import Any, Optional

PU_PARAMETER_ENVVAR = "PREDICTIVE_UNIT_PARAMETERS"
DEFAULT_SKLEARN_SERVER_IMAGE_NAME_REST = "seldonio/sklearnserver_rest:0.1"
DEFAULT_SKLEARN_SERVER_IMAGE_NAME_GRPC = "seldonio/sklearnserver_grpc:0.1"
DEFAULT_XGBOOST_SERVER_IMAGE_NAME_REST = "seldonio/xgboostserver_rest:0.1"
DEFAULT_XGBOOST_SERVER_IMAGE_NAME_GRPC = "seldonio/xgboostserver_grpc:0.1"
DEFAULT_TF_SERVER_IMAGE_NAME_REST = "seldonio/tfserving-proxy_rest:0.3"
DEFAULT_TF_SERVER_IMAGE_NAME_GRPC = "seldonio/tfserving-proxy_grpc:0.3"
DEFAULT_MLFLOW_SERVER_IMAGE_NAME_REST = "seldonio/mlflowserver_rest:0.1"
DEFAULT_MLFLOW_SERVER_IMAGE_NAME_GRPC = "seldonio/mlflowserver_grpc:0.1"
TF_SERVING_CONTAINER_NAME = "tfserving"

LABEL_SELDON_ID = "seldon-deployment-id"
LABEL_SELDON_APP = "seldon-app"
LABEL_SVC_ORCH = "seldon-deployment-contains-svcorch"

PODINFO_VOLUME_NAME = "podinfo"
PODINFO_VOLUME_PATH = "/etc/podinfo"

ENV_PREDICTIVE_UNIT_SERVICE_PORT = "PREDICTIVE_UNIT_SERVICE_PORT"
ENV_PREDICTIVE_UNIT_PARAMETERS = "PREDICTIVE_UNIT_PARAMETERS"
ENV_PREDICTIVE_UNIT_ID = "PREDICTIVE_UNIT_ID"
ENV_PREDICTOR_ID = "PREDICTOR_ID"
ENV_SELDON_DEPLOYMENT_ID = "SELDON_DEPLOYMENT_ID"

ANNOTATION_JAVA_OPTS = "seldon.io/engine-java-opts"
ANNOTATION_SEPARATE_ENGINE = "seldon.io/engine-separate-pod"
ANNOTATION_HEADLESS_SVC = "seldon.io/headless-svc"

MAX_NAME_LENGTH = 63


# --------------------------------------------------------------------------
# Group / version / resource identifiers
# --------------------------------------------------------------------------


@dataclass(frozen=True)
class GroupResource:
    """A resource within an API group."""

    group: str
    resource: str


@dataclass(frozen=True)
class GroupVersionResource:
    """A resource within a versioned API group."""

    group: str
    version: str
    resource: str

    def group_resource(self) -> GroupResource:
        return GroupResource(self.group, self.resource)


@dataclass(frozen=True)
class GroupVersion:
    """An API group at a particular version."""

    group: str
    version: str

    def with_resource(self, resource: str) -> GroupVersionResource:
        return GroupVersionResource(self.group, self.version, resource)

    def __str__(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version


SCHEME_GROUP_VERSION = GroupVersion("machinelearning.seldon.io", "v1alpha2")


def resource(resource: str) -> GroupResource:
    """Return the group-qualified resource for this API group."""
    return SCHEME_GROUP_VERSION.with_resource(resource).group_resource()


# --------------------------------------------------------------------------
# Serialisation helpers
# --------------------------------------------------------------------------


def _omit_empty(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value}


def _enum_or_none(enum_cls: type[enum.Enum], value: Any) -> Any:
    return None if value is None else enum_cls(value)


def _enum_value(value: Optional[enum.Enum]) -> Optional[str]:
    return None if value is None else value.value


# --------------------------------------------------------------------------
# Core objects used by the resource
# --------------------------------------------------------------------------


@dataclass
class ObjectMeta:
    """Object metadata: name, namespace, labels and annotations."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    resource_version: str = ""
    uid: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def _to_dict(self) -> dict[str, Any]:
        return _omit_empty(
            {
                **self.extra,
                "name": self.name,
                "namespace": self.namespace,
                "labels": dict(self.labels),
                "annotations": dict(self.annotations),
                "resourceVersion": self.resource_version,
                "uid": self.uid,
            }
        )

    @classmethod
    def _from_dict(cls, data: Optional[dict[str, Any]]) -> "ObjectMeta":
        rest = dict(data or {})
        return cls(
            name=rest.pop("name", ""),
            namespace=rest.pop("namespace", ""),
            labels=dict(rest.pop("labels", None) or {}),
            annotations=dict(rest.pop("annotations", None) or {}),
            resource_version=rest.pop("resourceVersion", ""),
            uid=rest.pop("uid", ""),
            extra=rest,
        )


@dataclass
class Container:
    """A container; fields other than name and image are kept in ``extra``."""

    name: str = ""
    image: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def _to_dict(self) -> dict[str, Any]:
        return _omit_empty({**self.extra, "name": self.name, "image": self.image})

    @classmethod
    def _from_dict(cls, data: Optional[dict[str, Any]]) -> "Container":
        rest = dict(data or {})
        return cls(name=rest.pop("name", ""), image=rest.pop("image", ""), extra=rest)


@dataclass
class PodSpec:
    """A pod specification; fields other than containers are kept in ``extra``."""

    containers: list[Container] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def _to_dict(self) -> dict[str, Any]:
        return _omit_empty(
            {**self.extra, "containers": [c._to_dict() for c in self.containers]}
        )

    @classmethod
    def _from_dict(cls, data: Optional[dict[str, Any]]) -> "PodSpec":
        rest = dict(data or {})
        containers = [Container._from_dict(c) for c in rest.pop("containers", None) or []]
        return cls(containers=containers, extra=rest)


class PredictiveUnitType(str, enum.Enum):
    UNKNOWN_TYPE = "UNKNOWN_TYPE"
    ROUTER = "ROUTER"
    COMBINER = "COMBINER"
    MODEL = "MODEL"
    TRANSFORMER = "TRANSFORMER"
    OUTPUT_TRANSFORMER = "OUTPUT_TRANSFORMER"


class PredictiveUnitImplementation(str, enum.Enum):
    UNKNOWN_IMPLEMENTATION = "UNKNOWN_IMPLEMENTATION"
    SIMPLE_MODEL = "SIMPLE_MODEL"
    SIMPLE_ROUTER = "SIMPLE_ROUTER"
    RANDOM_ABTEST = "RANDOM_ABTEST"
    AVERAGE_COMBINER = "AVERAGE_COMBINER"
    SKLEARN_SERVER = "SKLEARN_SERVER"
    XGBOOST_SERVER = "XGBOOST_SERVER"
    TENSORFLOW_SERVER = "TENSORFLOW_SERVER"
    MLFLOW_SERVER = "MLFLOW_SERVER"


class PredictiveUnitMethod(str, enum.Enum):
    TRANSFORM_INPUT = "TRANSFORM_INPUT"
    TRANSFORM_OUTPUT = "TRANSFORM_OUTPUT"
    ROUTE = "ROUTE"
    AGGREGATE = "AGGREGATE"
    SEND_FEEDBACK = "SEND_FEEDBACK"


class EndpointType(str, enum.Enum):
    REST = "REST"
    GRPC = "GRPC"


class ParameterType(str, enum.Enum):
    INT = "INT"
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    STRING = "STRING"
    BOOL = "BOOL"


@dataclass
class Endpoint:
    """Where a predictive unit is served."""

    service_host: str = ""
    service_port: int = 0
    type: Optional[EndpointType] = None

    def _to_dict(self) -> dict[str, Any]:
        return _omit_empty(
            {
                "service_host": self.service_host,
                "service_port": self.service_port,
                "type": _enum_value(self.type),
            }
        )

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Endpoint":
        return cls(
            service_host=data.get("service_host", ""),
            service_port=int(data.get("service_port", 0)),
            type=_enum_or_none(EndpointType, data.get("type")),
        )


@dataclass
class Parameter:
    """A named, typed parameter passed to a predictive unit."""

    name: str = ""
    value: str = ""
    type: Optional[ParameterType] = None

    def _to_dict(self) -> dict[str, Any]:
        return _omit_empty(
            {"name": self.name, "value": self.value, "type": _enum_value(self.type)}
        )

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Parameter":
        return cls(
            name=data.get("name", ""),
            value=data.get("value", ""),
            type=_enum_or_none(ParameterType, data.get("type")),
        )


@dataclass
class PredictiveUnit:
    """A node of the inference graph."""

    name: str = ""
    children: list["PredictiveUnit"] = field(default_factory=list)
    type: Optional[PredictiveUnitType] = None
    implementation: Optional[PredictiveUnitImplementation] = None
    methods: Optional[list[PredictiveUnitMethod]] = None
    endpoint: Optional[Endpoint] = None
    parameters: list[Parameter] = field(default_factory=list)
    model_uri: str = ""
    service_account_name: str = ""
    env_secret_ref_name: str = ""

    def _to_dict(self) -> dict[str, Any]:
        data = _omit_empty(
            {
                "name": self.name,
                "children": [child._to_dict() for child in self.children],
                "type": _enum_value(self.type),
                "implementation": _enum_value(self.implementation),
                "endpoint": self.endpoint._to_dict() if self.endpoint else None,
                "parameters": [p._to_dict() for p in self.parameters],
                "modelUri": self.model_uri,
                "serviceAccountName": self.service_account_name,
                "envSecretRefName": self.env_secret_ref_name,
            }
        )
        if self.endpoint is not None:
            data["endpoint"] = self.endpoint._to_dict()
        if self.methods is not None:
            data["methods"] = [m.value for m in self.methods]
        return data

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "PredictiveUnit":
        methods = data.get("methods")
        endpoint = data.get("endpoint")
        return cls(
            name=data.get("name", ""),
            children=[cls._from_dict(c) for c in data.get("children") or []],
            type=_enum_or_none(PredictiveUnitType, data.get("type")),
            implementation=_enum_or_none(
                PredictiveUnitImplementation, data.get("implementation")
            ),
            methods=None if methods is None else [PredictiveUnitMethod(m) for m in methods],
            endpoint=None if endpoint is None else Endpoint._from_dict(endpoint),
            parameters=[Parameter._from_dict(p) for p in data.get("parameters") or []],
            model_uri=data.get("modelUri", ""),
            service_account_name=data.get("serviceAccountName", ""),
            env_secret_ref_name=data.get("envSecretRefName", ""),
        )


@dataclass
class SeldonHpaSpec:
    """Horizontal pod autoscaler settings for a component."""

    min_replicas: Optional[int] = None
    max_replicas: int = 0
    metrics: list[dict[str, Any]] = field(default_factory=list)

    def _to_dict(self) -> dict[str, Any]:
        data = _omit_empty(
            {"maxReplicas": self.max_replicas, "metrics": copy.deepcopy(self.metrics)}
        )
        if self.min_replicas is not None:
            data["minReplicas"] = self.min_replicas
        return data

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SeldonHpaSpec":
        min_replicas = data.get("minReplicas")
        return cls(
            min_replicas=None if min_replicas is None else int(min_replicas),
            max_replicas=int(data.get("maxReplicas", 0)),
            metrics=copy.deepcopy(list(data.get("metrics") or [])),
        )


@dataclass
class SeldonPodSpec:
    """A component's pod template plus optional autoscaling."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: PodSpec = field(default_factory=PodSpec)
    hpa_spec: Optional[SeldonHpaSpec] = None

    def _to_dict(self) -> dict[str, Any]:
        data = _omit_empty(
            {"metadata": self.metadata._to_dict(), "spec": self.spec._to_dict()}
        )
        if self.hpa_spec is not None:
            data["hpaSpec"] = self.hpa_spec._to_dict()
        return data

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SeldonPodSpec":
        hpa = data.get("hpaSpec")
        return cls(
            metadata=ObjectMeta._from_dict(data.get("metadata")),
            spec=PodSpec._from_dict(data.get("spec")),
            hpa_spec=None if hpa is None else SeldonHpaSpec._from_dict(hpa),
        )


@dataclass
class SvcOrchSpec:
    """Resources and environment for the service orchestrator."""

    resources: Optional[dict[str, Any]] = None
    env: list[dict[str, Any]] = field(default_factory=list)

    def _to_dict(self) -> dict[str, Any]:
        data = _omit_empty({"env": copy.deepcopy(self.env)})
        if self.resources is not None:
            data["resources"] = copy.deepcopy(self.resources)
        return data

    @classmethod
    def _from_dict(cls, data: Optional[dict[str, Any]]) -> "SvcOrchSpec":
        data = data or {}
        resources = data.get("resources")
        return cls(
            resources=None if resources is None else copy.deepcopy(resources),
            env=copy.deepcopy(list(data.get("env") or [])),
        )


@dataclass
class Explainer:
    """Explainer attached to a predictor."""

    type: str = ""
    model_uri: str = ""
    service_account_name: str = ""
    container_spec: Container = field(default_factory=Container)
    config: dict[str, str] = field(default_factory=dict)
    endpoint: Optional[Endpoint] = None
    env_secret_ref_name: str = ""

    def _to_dict(self) -> dict[str, Any]:
        data = _omit_empty(
            {
                "type": self.type,
                "modelUri": self.model_uri,
                "serviceAccountName": self.service_account_name,
                "containerSpec": self.container_spec._to_dict(),
                "config": dict(self.config),
                "envSecretRefName": self.env_secret_ref_name,
            }
        )
        if self.endpoint is not None:
            data["endpoint"] = self.endpoint._to_dict()
        return data

    @classmethod
    def _from_dict(cls, data: Optional[dict[str, Any]]) -> "Explainer":
        data = data or {}
        endpoint = data.get("endpoint")
        return cls(
            type=data.get("type", ""),
            model_uri=data.get("modelUri", ""),
            service_account_name=data.get("serviceAccountName", ""),
            container_spec=Container._from_dict(data.get("containerSpec")),
            config=dict(data.get("config") or {}),
            endpoint=None if endpoint is None else Endpoint._from_dict(endpoint),
            env_secret_ref_name=data.get("envSecretRefName", ""),
        )


@dataclass
class PredictorSpec:
    """One predictor of a deployment: its graph and component pods."""

    name: str = ""
    graph: Optional[PredictiveUnit] = None
    component_specs: list[SeldonPodSpec] = field(default_factory=list)
    replicas: int = 0
    annotations: dict[str, str] = field(default_factory=dict)
    engine_resources: dict[str, Any] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)
    svc_orch_spec: SvcOrchSpec = field(default_factory=SvcOrchSpec)
    traffic: int = 0
    explainer: Explainer = field(default_factory=Explainer)

    def _to_dict(self) -> dict[str, Any]:
        data = _omit_empty(
            {
                "name": self.name,
                "componentSpecs": [s._to_dict() for s in self.component_specs],
                "replicas": self.replicas,
                "annotations": dict(self.annotations),
                "engineResources": copy.deepcopy(self.engine_resources),
                "labels": dict(self.labels),
                "svcOrchSpec": self.svc_orch_spec._to_dict(),
                "traffic": self.traffic,
                "explainer": self.explainer._to_dict(),
            }
        )
        if self.graph is not None:
            data["graph"] = self.graph._to_dict()
        return data

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "PredictorSpec":
        graph = data.get("graph")
        return cls(
            name=data.get("name", ""),
            graph=None if graph is None else PredictiveUnit._from_dict(graph),
            component_specs=[
                SeldonPodSpec._from_dict(s) for s in data.get("componentSpecs") or []
            ],
            replicas=int(data.get("replicas", 0)),
            annotations=dict(data.get("annotations") or {}),
            engine_resources=copy.deepcopy(dict(data.get("engineResources") or {})),
            labels=dict(data.get("labels") or {}),
            svc_orch_spec=SvcOrchSpec._from_dict(data.get("svcOrchSpec")),
            traffic=int(data.get("traffic", 0)),
            explainer=Explainer._from_dict(data.get("explainer")),
        )


@dataclass
class SeldonDeploymentSpec:
    """Desired state of a SeldonDeployment."""

    name: str = ""
    predictors: list[PredictorSpec] = field(default_factory=list)
    oauth_key: str = ""
    oauth_secret: str = ""
    annotations: dict[str, str] = field(default_factory=dict)

    def _to_dict(self) -> dict[str, Any]:
        return _omit_empty(
            {
                "name": self.name,
                "predictors": [p._to_dict() for p in self.predictors],
                "oauth_key": self.oauth_key,
                "oauth_secret": self.oauth_secret,
                "annotations": dict(self.annotations),
            }
        )

    @classmethod
    def _from_dict(cls, data: Optional[dict[str, Any]]) -> "SeldonDeploymentSpec":
        data = data or {}
        return cls(
            name=data.get("name", ""),
            predictors=[PredictorSpec._from_dict(p) for p in data.get("predictors") or []],
            oauth_key=data.get("oauth_key", ""),
            oauth_secret=data.get("oauth_secret", ""),
            annotations=dict(data.get("annotations") or {}),
        )


@dataclass
class DeploymentStatus:
    """Observed state of one generated deployment."""

    name: str = ""
    status: str = ""
    description: str = ""
    replicas: int = 0
    available_replicas: int = 0
    explainer_for: str = ""

    def _to_dict(self) -> dict[str, Any]:
        return _omit_empty(
            {
                "name": self.name,
                "status": self.status,
                "description": self.description,
                "replicas": self.replicas,
                "availableReplicas": self.available_replicas,
                "explainerFor": self.explainer_for,
            }
        )

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "DeploymentStatus":
        return cls(
            name=data.get("name", ""),
            status=data.get("status", ""),
            description=data.get("description", ""),
            replicas=int(data.get("replicas", 0)),
            available_replicas=int(data.get("availableReplicas", 0)),
            explainer_for=data.get("explainerFor", ""),
        )


@dataclass
class ServiceStatus:
    """Observed state of one generated service."""

    svc_name: str = ""
    http_endpoint: str = ""
    grpc_endpoint: str = ""
    explainer_for: str = ""

    def _to_dict(self) -> dict[str, Any]:
        return _omit_empty(
            {
                "svcName": self.svc_name,
                "httpEndpoint": self.http_endpoint,
                "grpcEndpoint": self.grpc_endpoint,
                "explainerFor": self.explainer_for,
            }
        )

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "ServiceStatus":
        return cls(
            svc_name=data.get("svcName", ""),
            http_endpoint=data.get("httpEndpoint", ""),
            grpc_endpoint=data.get("grpcEndpoint", ""),
            explainer_for=data.get("explainerFor", ""),
        )


@dataclass
class SeldonDeploymentStatus:
    """Observed state of a SeldonDeployment."""

    state: str = ""
    description: str = ""
    deployment_status: dict[str, DeploymentStatus] = field(default_factory=dict)
    service_status: dict[str, ServiceStatus] = field(default_factory=dict)

    def _to_dict(self) -> dict[str, Any]:
        return _omit_empty(
            {
                "state": self.state,
                "description": self.description,
                "deploymentStatus": {
                    k: v._to_dict() for k, v in self.deployment_status.items()
                },
                "serviceStatus": {k: v._to_dict() for k, v in self.service_status.items()},
            }
        )

    @classmethod
    def _from_dict(cls, data: Optional[dict[str, Any]]) -> "SeldonDeploymentStatus":
        data = data or {}
        return cls(
            state=data.get("state", ""),
            description=data.get("description", ""),
            deployment_status={
                k: DeploymentStatus._from_dict(v)
                for k, v in (data.get("deploymentStatus") or {}).items()
            },
            service_status={
                k: ServiceStatus._from_dict(v)
                for k, v in (data.get("serviceStatus") or {}).items()
            },
        )


@dataclass
class SeldonDeployment:
    """The SeldonDeployment resource."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: SeldonDeploymentSpec = field(default_factory=SeldonDeploymentSpec)
    status: SeldonDeploymentStatus = field(default_factory=SeldonDeploymentStatus)
    api_version: str = str(SCHEME_GROUP_VERSION)
    kind: str = "SeldonDeployment"

    def to_dict(self) -> dict[str, Any]:
        """Return the resource as a JSON-compatible document."""
        data: dict[str, Any] = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata._to_dict(),
        }
        data.update(
            _omit_empty({"spec": self.spec._to_dict(), "status": self.status._to_dict()})
        )
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SeldonDeployment":
        """Build a resource from a JSON-compatible document."""
        return cls(
            metadata=ObjectMeta._from_dict(data.get("metadata")),
            spec=SeldonDeploymentSpec._from_dict(data.get("spec")),
            status=SeldonDeploymentStatus._from_dict(data.get("status")),
            api_version=data.get("apiVersion", str(SCHEME_GROUP_VERSION)),
            kind=data.get("kind", "SeldonDeployment"),
        )

    def deep_copy(self) -> "SeldonDeployment":
        return copy.deepcopy(self)


@dataclass
class SeldonDeploymentList:
    """A list of SeldonDeployment resources."""

    items: list[SeldonDeployment] = field(default_factory=list)
    resource_version: str = ""
    api_version: str = str(SCHEME_GROUP_VERSION)
    kind: str = "SeldonDeploymentList"


# --------------------------------------------------------------------------
# Naming rules
# --------------------------------------------------------------------------


def _hash(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def _bounded(name: str) -> str:
    return "seldon-" + _hash(name) if len(name) > MAX_NAME_LENGTH else name


def _container_hash(pod_spec: SeldonPodSpec) -> str:
    parts = [part for c in pod_spec.spec.containers for part in (c.name, c.image)]
    return _hash(":".join(parts) + ";")[:7]


def _create_predictor_hash(p: PredictorSpec) -> str:
    key = ",".join(_container_hash(spec) for spec in p.component_specs) + ","
    return _hash(key)[:7]


def get_seldon_deployment_name(ml_dep: SeldonDeployment) -> str:
    return _bounded(ml_dep.spec.name + "-" + ml_dep.metadata.name)


def get_explainer_deployment_name(sdep_name: str, predictor_spec: PredictorSpec) -> str:
    return _bounded(sdep_name + "-" + predictor_spec.name + "-explainer")


def get_deployment_name(
    ml_dep: SeldonDeployment,
    predictor_spec: PredictorSpec,
    pod_spec: Optional[SeldonPodSpec],
) -> str:
    if pod_spec is not None and pod_spec.metadata.name:
        return pod_spec.metadata.name
    name = ml_dep.spec.name + "-" + predictor_spec.name
    if pod_spec is not None:
        name = name + "-" + _container_hash(pod_spec)
    return _bounded(name)


def get_service_orchestrator_name(ml_dep: SeldonDeployment, p: PredictorSpec) -> str:
    return _bounded(
        ml_dep.spec.name + "-" + p.name + "-svc-orch-" + _create_predictor_hash(p)
    )


def get_predictor_key(ml_dep: SeldonDeployment, p: PredictorSpec) -> str:
    return _bounded(ml_dep.metadata.name + "-" + ml_dep.spec.name + "-" + p.name)


def get_predictor_service_name_key(c: Container) -> str:
    return LABEL_SELDON_APP + "-" + c.name


def get_predictive_unit(pu: PredictiveUnit, name: str) -> Optional[PredictiveUnit]:
    """Find the unit called ``name`` in the graph rooted at ``pu`` (depth first)."""
    if pu.name == name:
        return pu
    for child in pu.children:
        found = get_predictive_unit(child, name)
        if found is not None:
            return found
    return None


def get_engine_predictive_unit(pu: PredictiveUnit) -> Optional[PredictiveUnit]:
    """Find the first unit whose endpoint host is localhost, where the engine runs."""
    if pu.endpoint is not None and pu.endpoint.service_host == "localhost":
        return pu
    for child in pu.children:
        found = get_engine_predictive_unit(child)
        if found is not None:
            return found
    return None


def get_predictive_unit_list(p: PredictiveUnit) -> list[PredictiveUnit]:
    """Return every unit of the graph in depth-first pre-order."""
    units = [p]
    for child in p.children:
        units.extend(get_predictive_unit_list(child))
    return units


_INVALID_NAME_CHARS = re.compile("[^-a-z0-9]")


def clean_container_name(name: str) -> str:
    return _INVALID_NAME_CHARS.sub("-", name.lower())


def get_container_service_name(
    ml_dep: SeldonDeployment, predictor_spec: PredictorSpec, c: Container
) -> str:
    image_name = clean_container_name(c.image)
    svc_name = ml_dep.spec.name + "-" + predictor_spec.name + "-" + c.name
    if image_name:
        svc_name = svc_name + "-" + image_name
    if len(svc_name) <= MAX_NAME_LENGTH:
        return svc_name
    return _bounded("seldon-" + image_name + "-" + _hash(svc_name))
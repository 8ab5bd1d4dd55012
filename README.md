# seldon_operator

A Python model of the `SeldonDeployment` resource
(`machinelearning.seldon.io/v1alpha2`), with the rules for naming the objects
generated from it, an in-memory client and listers. It has no dependencies
beyond the standard library.

## Modules

### `seldon_operator.types`

- Dataclasses for the resource: `SeldonDeployment`, `SeldonDeploymentSpec`,
  `PredictorSpec`, `PredictiveUnit`, `SeldonPodSpec`, `SeldonHpaSpec`,
  `SvcOrchSpec`, `Explainer`, `Endpoint`, `Parameter`, the status classes
  `SeldonDeploymentStatus`, `DeploymentStatus` and `ServiceStatus`, and
  `SeldonDeploymentList`. `ObjectMeta`, `PodSpec` and `Container` model the
  fields the naming rules need and keep any other fields in `extra`.
- Enums: `PredictiveUnitType`, `PredictiveUnitImplementation`,
  `PredictiveUnitMethod`, `EndpointType`, `ParameterType`.
- `SeldonDeployment.to_dict()` and `SeldonDeployment.from_dict(data)` convert
  to and from a JSON-compatible document (empty fields are left out);
  `deep_copy()` returns an independent copy.
- `GroupVersion`, `GroupVersionResource`, `GroupResource`, and
  `resource(name)`, which qualifies a resource name with the
  `machinelearning.seldon.io` group.
- Naming rules: `get_seldon_deployment_name`, `get_explainer_deployment_name`,
  `get_deployment_name`, `get_service_orchestrator_name`, `get_predictor_key`,
  `get_predictor_service_name_key`, `get_container_service_name` and
  `clean_container_name`. A name longer than 63 characters is replaced by
  `seldon-` followed by its MD5 hex digest; deployment and orchestrator names
  include a short hash of the component containers' names and images.
- Graph helpers: `get_predictive_unit(pu, name)`,
  `get_engine_predictive_unit(pu)` (the first unit whose endpoint host is
  `localhost`) and `get_predictive_unit_list(pu)` (depth-first pre-order).
- Constants for labels, annotations, environment variable names and default
  server images.

### `seldon_operator.client`

- `ObjectStore`: a thread-safe store keyed by namespace and name. Every write
  stamps a new resource version and, if missing, a UID. Reads return copies.
- `SeldonDeploymentClient` with `create`, `get`, `list`, `update`,
  `update_status`, `patch`, `delete` and `delete_collection`. `update` leaves
  the stored status alone; `update_status` changes only the status. `patch`
  applies a JSON merge patch (bytes, string or mapping), either to the whole
  object or, with the `"status"` subresource, to the status only.
  `delete_collection` returns the number of objects deleted.
- `MachinelearningV1alpha2Client.seldon_deployments(namespace)` and
  `Clientset.machinelearning_v1alpha2()`, all sharing one store.
- `labels_match(selector, labels)`: a selector is `None` or `""` (match all),
  a mapping of required values, or a string such as
  `"app=a,tier!=b,env in (x,y),!legacy"`.
- `NotFoundError` (a `LookupError`) for missing objects and
  `AlreadyExistsError` (a `ValueError`) for duplicate creates.

### `seldon_operator.lister`

- `SeldonDeploymentLister(store).list(selector)` lists across all namespaces;
  `.seldon_deployments(namespace)` returns a `SeldonDeploymentNamespaceLister`
  whose `list(selector)` and `get(name)` are limited to that namespace.

## Installation

```
pip install .
```

Install the test extra, then run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from seldon_operator.types import (
    Container, ObjectMeta, PodSpec, PredictorSpec, SeldonDeployment,
    SeldonDeploymentSpec, SeldonPodSpec, get_deployment_name,
)
from seldon_operator.client import Clientset
from seldon_operator.lister import SeldonDeploymentLister

pod = SeldonPodSpec(spec=PodSpec(containers=[
    Container(name="classifier", image="seldonio/mock_classifier:1.0"),
]))
predictor = PredictorSpec(name="mymodel", component_specs=[pod])
sdep = SeldonDeployment(
    metadata=ObjectMeta(name="mymodel", namespace="default", labels={"app": "demo"}),
    spec=SeldonDeploymentSpec(name="mymodel", predictors=[predictor]),
)

print(get_deployment_name(sdep, predictor, pod))

clientset = Clientset()
deployments = clientset.machinelearning_v1alpha2().seldon_deployments("default")
deployments.create(sdep)
fetched = deployments.get("mymodel")
deployments.patch("mymodel", {"metadata": {"labels": {"tier": "gold"}}})

lister = SeldonDeploymentLister(clientset.store)
print([d.metadata.name for d in lister.list("app=demo")])
```

## What this package does not do

Everything is held in memory in an `ObjectStore`. The package does not talk
to a cluster's API server, does not watch for changes, and has no controller,
admission webhook or command-line program; it does not create the
deployments or services whose names it computes.
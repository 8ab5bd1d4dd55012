import re

import pytest

from seldon_operator.types import (
    Container,
    Endpoint,
    EndpointType,
    Explainer,
    GroupResource,
    GroupVersion,
    GroupVersionResource,
    ObjectMeta,
    Parameter,
    ParameterType,
    PodSpec,
    PredictiveUnit,
    PredictiveUnitImplementation,
    PredictiveUnitMethod,
    PredictiveUnitType,
    PredictorSpec,
    SeldonDeployment,
    SeldonDeploymentList,
    SeldonDeploymentSpec,
    SeldonDeploymentStatus,
    SeldonHpaSpec,
    SeldonPodSpec,
    DeploymentStatus,
    ServiceStatus,
    SvcOrchSpec,
    clean_container_name,
    get_container_service_name,
    get_deployment_name,
    get_engine_predictive_unit,
    get_explainer_deployment_name,
    get_predictive_unit,
    get_predictive_unit_list,
    get_predictor_key,
    get_predictor_service_name_key,
    get_seldon_deployment_name,
    get_service_orchestrator_name,
    resource,
)

LONG_HASH = re.compile(r"^seldon-[0-9a-f]{32}$")
HEX_DIGITS = set("0123456789abcdef")


def _pod(name="classifier", image="seldonio/mock_classifier:1.0", meta_name=""):
    return SeldonPodSpec(
        metadata=ObjectMeta(name=meta_name),
        spec=PodSpec(containers=[Container(name=name, image=image)]),
    )


def _mymodel():
    return SeldonDeployment(
        metadata=ObjectMeta(name="mymodel"),
        spec=SeldonDeploymentSpec(
            name="mymodel",
            predictors=[PredictorSpec(name="mymodel", component_specs=[_pod()])],
        ),
    )


def test_clean_image_name():
    assert clean_container_name("AB_C") == "ab-c"


def test_clean_image_name_keeps_valid_chars():
    assert clean_container_name("seldonio/mock_classifier:1.0") == "seldonio-mock-classifier-1-0"


def test_clean_deployment_name():
    ml_dep = _mymodel()
    p = ml_dep.spec.predictors[0]
    name = get_deployment_name(ml_dep, p, p.component_specs[0])
    assert re.fullmatch(r"mymodel-mymodel-[0-9a-f]{7}", name)
    assert name == get_deployment_name(ml_dep, p, p.component_specs[0])


def test_deployment_name_depends_on_containers():
    ml_dep = _mymodel()
    p = ml_dep.spec.predictors[0]
    a = get_deployment_name(ml_dep, p, _pod(image="img:1"))
    b = get_deployment_name(ml_dep, p, _pod(image="img:2"))
    assert a[:-7] == b[:-7] == "mymodel-mymodel-"
    assert a != b


def test_deployment_name_without_pod_spec():
    ml_dep = _mymodel()
    assert get_deployment_name(ml_dep, ml_dep.spec.predictors[0], None) == "mymodel-mymodel"


def test_deployment_name_uses_pod_metadata_name():
    ml_dep = _mymodel()
    pod = _pod(meta_name="custom-name")
    assert get_deployment_name(ml_dep, ml_dep.spec.predictors[0], pod) == "custom-name"


def test_deployment_name_long_is_hashed():
    ml_dep = _mymodel()
    ml_dep.spec.name = "x" * 70
    name = get_deployment_name(ml_dep, ml_dep.spec.predictors[0], None)
    assert len(name) == 39
    assert name[:7] == "seldon-"
    assert set(name[7:]) <= HEX_DIGITS
    assert name == get_deployment_name(ml_dep, ml_dep.spec.predictors[0], None)


def test_seldon_deployment_name():
    ml_dep = SeldonDeployment(
        metadata=ObjectMeta(name="dep"), spec=SeldonDeploymentSpec(name="spec")
    )
    assert get_seldon_deployment_name(ml_dep) == "spec-dep"
    ml_dep.spec.name = "a" * 63
    assert LONG_HASH.match(get_seldon_deployment_name(ml_dep))


def test_explainer_deployment_name():
    assert get_explainer_deployment_name("sdep", PredictorSpec(name="p1")) == "sdep-p1-explainer"
    assert LONG_HASH.match(get_explainer_deployment_name("s" * 60, PredictorSpec(name="p1")))


def test_service_orchestrator_name():
    ml_dep = _mymodel()
    name = get_service_orchestrator_name(ml_dep, ml_dep.spec.predictors[0])
    assert name[:-7] == "mymodel-mymodel-svc-orch-"
    assert len(name) == 32
    assert set(name[-7:]) <= HEX_DIGITS
    other = PredictorSpec(name="mymodel", component_specs=[_pod(image="other:2")])
    assert get_service_orchestrator_name(ml_dep, other) != name


def test_predictor_key():
    ml_dep = SeldonDeployment(
        metadata=ObjectMeta(name="meta"), spec=SeldonDeploymentSpec(name="spec")
    )
    assert get_predictor_key(ml_dep, PredictorSpec(name="p")) == "meta-spec-p"
    assert LONG_HASH.match(get_predictor_key(ml_dep, PredictorSpec(name="p" * 60)))


def test_predictor_service_name_key():
    assert get_predictor_service_name_key(Container(name="classifier")) == "seldon-app-classifier"


def test_container_service_name_short():
    ml_dep = _mymodel()
    c = Container(name="c", image="Img:1")
    assert get_container_service_name(ml_dep, PredictorSpec(name="p"), c) == "mymodel-p-c-img-1"


def test_container_service_name_without_image():
    ml_dep = _mymodel()
    c = Container(name="c")
    assert get_container_service_name(ml_dep, PredictorSpec(name="p"), c) == "mymodel-p-c"


def test_container_service_name_long_keeps_image():
    ml_dep = _mymodel()
    ml_dep.spec.name = "n" * 60
    c = Container(name="c", image="img:1")
    name = get_container_service_name(ml_dep, PredictorSpec(name="p"), c)
    assert name[:13] == "seldon-img-1-"
    assert len(name) == 45
    assert set(name[13:]) <= HEX_DIGITS


def _graph():
    leaf_a = PredictiveUnit(name="a")
    leaf_b = PredictiveUnit(name="b", endpoint=Endpoint(service_host="localhost"))
    mid = PredictiveUnit(name="mid", children=[leaf_a, leaf_b])
    return PredictiveUnit(name="root", children=[mid, PredictiveUnit(name="c")])


def test_get_predictive_unit():
    graph = _graph()
    assert get_predictive_unit(graph, "b").name == "b"
    assert get_predictive_unit(graph, "root") is graph
    assert get_predictive_unit(graph, "missing") is None


def test_get_engine_predictive_unit():
    graph = _graph()
    assert get_engine_predictive_unit(graph).name == "b"
    assert get_engine_predictive_unit(PredictiveUnit(name="x")) is None


def test_get_predictive_unit_list_preorder():
    names = [pu.name for pu in get_predictive_unit_list(_graph())]
    assert names == ["root", "mid", "a", "b", "c"]


def test_resource_and_group_version():
    assert resource("seldondeployment") == GroupResource(
        "machinelearning.seldon.io", "seldondeployment"
    )
    gv = GroupVersion("g", "v1")
    gvr = gv.with_resource("things")
    assert gvr == GroupVersionResource("g", "v1", "things")
    assert gvr.group_resource() == GroupResource("g", "things")


def _full_deployment():
    graph = PredictiveUnit(
        name="classifier",
        type=PredictiveUnitType.MODEL,
        implementation=PredictiveUnitImplementation.SKLEARN_SERVER,
        methods=[PredictiveUnitMethod.TRANSFORM_INPUT],
        endpoint=Endpoint(service_host="localhost", service_port=9000, type=EndpointType.REST),
        parameters=[Parameter(name="k", value="1", type=ParameterType.INT)],
        model_uri="gs://bucket/model",
        children=[PredictiveUnit(name="child")],
    )
    pod = _pod()
    pod.hpa_spec = SeldonHpaSpec(min_replicas=0, max_replicas=3, metrics=[{"type": "Resource"}])
    pod.spec.containers[0].extra = {"ports": [{"containerPort": 9000}]}
    predictor = PredictorSpec(
        name="p",
        graph=graph,
        component_specs=[pod],
        replicas=2,
        labels={"version": "v1"},
        svc_orch_spec=SvcOrchSpec(resources={"limits": {"cpu": "1"}}, env=[{"name": "A"}]),
        traffic=50,
        explainer=Explainer(type="anchor_tabular", config={"a": "b"}),
    )
    return SeldonDeployment(
        metadata=ObjectMeta(name="foo", namespace="default", labels={"hello": "world"}),
        spec=SeldonDeploymentSpec(name="dep", predictors=[predictor]),
        status=SeldonDeploymentStatus(
            state="Available",
            deployment_status={"d": DeploymentStatus(name="d", replicas=1)},
            service_status={"s": ServiceStatus(svc_name="s", http_endpoint="s:8000")},
        ),
    )


def test_round_trip():
    sdep = _full_deployment()
    data = sdep.to_dict()
    assert SeldonDeployment.from_dict(data) == sdep


def test_to_dict_shape():
    data = _full_deployment().to_dict()
    assert data["apiVersion"] == "machinelearning.seldon.io/v1alpha2"
    assert data["kind"] == "SeldonDeployment"
    assert data["metadata"] == {"name": "foo", "namespace": "default", "labels": {"hello": "world"}}
    graph = data["spec"]["predictors"][0]["graph"]
    assert graph["type"] == "MODEL"
    assert graph["endpoint"] == {"service_host": "localhost", "service_port": 9000, "type": "REST"}
    hpa = data["spec"]["predictors"][0]["componentSpecs"][0]["hpaSpec"]
    assert hpa["minReplicas"] == 0


def test_to_dict_omits_empty():
    data = SeldonDeployment(metadata=ObjectMeta(name="foo")).to_dict()
    assert data == {
        "apiVersion": "machinelearning.seldon.io/v1alpha2",
        "kind": "SeldonDeployment",
        "metadata": {"name": "foo"},
    }


def test_deep_copy_is_independent():
    sdep = _full_deployment()
    copied = sdep.deep_copy()
    assert copied == sdep
    copied.metadata.labels["hello"] = "changed"
    copied.spec.predictors[0].graph.children.append(PredictiveUnit(name="new"))
    assert sdep.metadata.labels["hello"] == "world"
    assert len(sdep.spec.predictors[0].graph.children) == 1


def test_from_dict_rejects_unknown_enum():
    data = {"metadata": {"name": "x"}, "spec": {"predictors": [{"graph": {"type": "BOGUS"}}]}}
    with pytest.raises(ValueError):
        SeldonDeployment.from_dict(data)


def test_list_defaults():
    lst = SeldonDeploymentList(items=[_mymodel()])
    assert lst.kind == "SeldonDeploymentList"
    assert [d.metadata.name for d in lst.items] == ["mymodel"]
import pytest

from core.workflow.dependencies import get_sandbox_executor
from core.workflow.sandbox import ExecutionResult, SandboxExecutionError

API = "/api/v1"


class FakeExecutor:
    def __init__(self, result=None, raises=None):
        self.result = result or ExecutionResult(output="hello\n")
        self.raises = raises
        self.calls = []

    async def execute(self, code):
        self.calls.append(code)
        if self.raises:
            raise self.raises
        return self.result


@pytest.fixture
def executor(client):
    from main import app

    fake = FakeExecutor()
    app.dependency_overrides[get_sandbox_executor] = lambda: fake
    return fake


def _create(client, payload):
    res = client.post(f"{API}/components", json=payload)
    assert res.status_code == 201, res.text
    return res.json()["component"]


def test_run_concatenates_items_in_order(client, executor, component_payload):
    component = _create(client, component_payload)

    res = client.post(f"{API}/workflow/run", json={"items": [
        {"type": "code", "value": "import pandas as pd"},
        {"type": "id", "value": component["id"]},
        {"type": "code", "value": "print('done')"},
    ]})

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Code executed successfully"
    assert body["total_items"] == 3
    assert body["concatenated_code"] == "\n\n".join([
        "import pandas as pd", component_payload["code"], "print('done')",
    ])
    assert executor.calls == [body["concatenated_code"]]
    assert [c["type"] for c in body["components"]] == ["raw_code", "component", "raw_code"]
    assert body["components"][1]["name"] == "Scale Features"
    assert body["execution"] == {"output": "hello\n", "error": None}


def test_run_failure_is_reported_in_body(client, executor):
    executor.result = ExecutionResult(output="Traceback ...", error="execution error: exit status 1")

    res = client.post(f"{API}/workflow/run", json={"items": [{"type": "code", "value": "raise SystemExit(1)"}]})

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Code execution failed"
    assert body["execution"]["error"] == "execution error: exit status 1"
    assert body["execution"]["output"] == "Traceback ..."


def test_run_when_docker_cannot_start(client, executor):
    executor.raises = SandboxExecutionError("failed to start docker: not found")

    res = client.post(f"{API}/workflow/run", json={"items": [{"type": "code", "value": "x = 1"}]})

    assert res.status_code == 200
    assert res.json()["execution"]["error"] == "failed to start docker: not found"


def test_run_unknown_component(client, executor):
    res = client.post(f"{API}/workflow/run", json={"items": [
        {"type": "code", "value": "x = 1"},
        {"type": "id", "value": "missing-id"},
    ]})

    assert res.status_code == 404
    assert res.json()["message"] == "Component not found at index 1: missing-id"
    assert executor.calls == []


@pytest.mark.parametrize("body", [
    {"items": []},
    {"items": [{"type": "file", "value": "x"}]},
    {"items": [{"type": "code", "value": ""}]},
])
def test_run_rejects_bad_requests(client, executor, body):
    assert client.post(f"{API}/workflow/run", json=body).status_code == 422


def test_generate_script_with_inline_code(client, executor):
    res = client.post(f"{API}/workflow/generate-script", json={
        "workflow": {
            "version": "1.0",
            "nodes": [
                {"id": "n1", "name": "Scale Features", "stage": 2, "variables": {"factor": 2}},
                {"id": "n2", "name": "Random Forest", "stage": 3},
            ],
        },
        "component_code": "def scale_features(df, factor=1.0):\n    return df * factor\n",
    })

    assert res.status_code == 200
    body = res.json()
    assert body["total_components"] == 2
    assert body["missing_definitions"] == ["random_forest"]
    assert "scale_features(current_data, factor=2)" in body["script"]
    assert "[STAGE 2]" in body["script"]
    assert executor.calls == []


def test_generate_script_fetches_stored_code(client, executor, component_payload):
    component = _create(client, component_payload)

    res = client.post(f"{API}/workflow/generate-script", json={
        "workflow": {"nodes": [{"id": component["id"], "name": "Scale Features", "stage": 2}]},
    })

    assert res.status_code == 200
    assert "def scale_features(df, factor=1.0):" in res.json()["script"]
    assert res.json()["missing_definitions"] == []


def test_generate_script_rejects_dict_binding(client, executor):
    res = client.post(f"{API}/workflow/generate-script", json={
        "workflow": {"nodes": [{"name": "Scale", "variables": {"params": {"a": 1}}}]},
        "component_code": "",
    })

    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "UnsupportedBindingError"
    assert body["details"]["parameter"] == "params"


def test_generate_script_rejects_empty_workflow(client, executor):
    res = client.post(f"{API}/workflow/generate-script", json={
        "workflow": {"version": "1.0", "nodes": []},
        "component_code": "",
    })

    assert res.status_code == 400
    assert res.json()["error"] == "EmptyWorkflowError"


def test_export_returns_download(client, executor, component_payload):
    scale = _create(client, component_payload)
    split = _create(client, {**component_payload, "name": "Train Test Split", "stage": "stage1"})

    res = client.post(f"{API}/workflow/export", json={"items": [
        {"id": split["id"], "variables": {"test_size": 0.2, "target_column": "label"}},
        {"id": scale["id"], "variables": {"factor": 3}},
    ]})

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/x-python")
    assert res.headers["content-disposition"] == 'attachment; filename="pipeline.py"'
    assert "x-missing-definitions" not in res.headers

    script = res.text
    assert "train_test_split(split_frame, target_column, test_size=0.200000)" in script
    assert "scale_features(current_data, factor=3)" in script
    assert script.index("[STAGE 1]") < script.index("[STAGE 2]")
    compile(script, "pipeline.py", "exec")


def test_export_reports_missing_definitions(client, executor, component_payload):
    component = _create(client, component_payload)

    res = client.post(f"{API}/workflow/export", json={"items": [
        {"id": component["id"], "function_name": "normalize"},
    ]})

    assert res.status_code == 200
    assert res.headers["x-missing-definitions"] == "normalize"


def test_export_unknown_component(client, executor):
    res = client.post(f"{API}/workflow/export", json={"items": [{"id": "missing"}]})
    assert res.status_code == 404


def test_generate_script_rejects_name_bound_by_script(client, executor):
    res = client.post(f"{API}/workflow/generate-script", json={
        "workflow": {"nodes": [
            {"name": "Fit Logistic", "stage": 3},
            {"name": "Metrics", "stage": 4},
        ]},
        "component_code": "def fit_logistic(X, y):\n    return None\n\n\ndef metrics(y_true, y_pred, y_proba=None):\n    return {}\n",
    })

    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "InvalidCallableNameError"
    assert body["details"]["callable_name"] == "metrics"


@pytest.mark.asyncio
async def test_generate_checks_definitions_once(monkeypatch):
    from core.workflow import service as service_module
    from core.workflow.service import WorkflowService
    from stagecraft.schemas import WorkflowManifest

    calls = []
    real = service_module.missing_definitions

    def counting(manifest, code):
        calls.append(code)
        return real(manifest, code)

    monkeypatch.setattr(service_module, "missing_definitions", counting)
    manifest = WorkflowManifest(nodes=[{"name": "Scale Features", "stage": 2}])

    script, missing = await WorkflowService(None, None).generate(manifest, "")

    assert missing == ["scale_features"]
    assert len(calls) == 1
    assert "result = scale_features(current_data)" in script

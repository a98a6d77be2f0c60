import pytest

API = "/api/v1"


def _create(client, payload):
    res = client.post(f"{API}/components", json=payload)
    assert res.status_code == 201, res.text
    return res.json()["component"]


def test_create_component(client, component_payload):
    res = client.post(f"{API}/components", json=component_payload)

    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Component created successfully"
    component = body["component"]
    assert component["name"] == "Scale Features"
    assert component["stage"] == "stage2"
    assert component["inputs"][1]["default_value"] == 1.0
    assert component["output"]["type"] == "DataFrame"
    assert component["id"]
    assert component["created_at"]


@pytest.mark.parametrize("change, message", [
    ({"stage": "stage5"}, "Invalid stage. Must be stage1, stage2, stage3, or stage4"),
    ({"inputs": []}, "Component must have at least one input"),
    ({"inputs": [{"name": "df", "type": "frame"}]}, "Invalid input type: frame"),
    ({"output": {"type": "void"}}, "Invalid output type: void"),
])
def test_create_rejects_invalid_component(client, component_payload, change, message):
    res = client.post(f"{API}/components", json={**component_payload, **change})

    assert res.status_code == 400
    assert res.json()["message"] == message


def test_create_requires_fields(client, component_payload):
    payload = dict(component_payload)
    del payload["code"]
    res = client.post(f"{API}/components", json=payload)

    assert res.status_code == 422
    assert res.json()["success"] is False


def test_get_component(client, component_payload):
    created = _create(client, component_payload)

    res = client.get(f"{API}/components/{created['id']}")
    assert res.status_code == 200
    assert res.json()["code"] == component_payload["code"]

    missing = client.get(f"{API}/components/does-not-exist")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Component not found"


def test_list_and_filter(client, component_payload):
    _create(client, component_payload)
    _create(client, {**component_payload, "name": "Fit Model", "stage": "stage3", "output": None})

    listing = client.get(f"{API}/components").json()
    assert listing["count"] == 2
    assert [c["name"] for c in listing["components"]] == ["Fit Model", "Scale Features"]

    by_stage = client.get(f"{API}/components", params={"stage": "stage3"}).json()
    assert [c["name"] for c in by_stage["components"]] == ["Fit Model"]

    without_output = client.get(f"{API}/components", params={"has_output": "false"}).json()
    assert [c["name"] for c in without_output["components"]] == ["Fit Model"]

    paged = client.get(f"{API}/components", params={"skip": 1, "limit": 1}).json()
    assert [c["name"] for c in paged["components"]] == ["Scale Features"]


def test_search(client, component_payload):
    _create(client, component_payload)

    found = client.get(f"{API}/components/search", params={"name": "scale"})
    assert found.status_code == 200
    assert found.json()["count"] == 1

    res = client.get(f"{API}/components/search")
    assert res.status_code == 400
    assert res.json()["message"] == "Name query parameter is required"


def test_stats(client, component_payload):
    _create(client, component_payload)
    _create(client, {**component_payload, "name": "Other"})
    _create(client, {**component_payload, "name": "Fit", "stage": "stage3"})

    res = client.get(f"{API}/components/stats")

    assert res.status_code == 200
    assert res.json()["stats"] == [
        {"stage": "stage2", "count": 2},
        {"stage": "stage3", "count": 1},
    ]


def test_by_input_and_output_type(client, component_payload):
    _create(client, component_payload)

    by_input = client.get(f"{API}/components/by-input-type", params={"type": "float"}).json()
    assert by_input["input_type"] == "float"
    assert by_input["count"] == 1

    by_output = client.get(f"{API}/components/by-output-type", params={"type": "Series"}).json()
    assert by_output["output_type"] == "Series"
    assert by_output["count"] == 0

    for path in ("by-input-type", "by-output-type"):
        res = client.get(f"{API}/components/{path}")
        assert res.status_code == 400
        assert res.json()["message"] == "Type query parameter is required"


def test_stage_route(client, component_payload):
    _create(client, component_payload)

    res = client.get(f"{API}/stages/stage2/components")
    assert res.status_code == 200
    assert res.json()["stage"] == "stage2"
    assert res.json()["count"] == 1

    assert client.get(f"{API}/stages/stage1/components").json()["count"] == 0

    bad = client.get(f"{API}/stages/stage9/components")
    assert bad.status_code == 400
    assert bad.json()["message"] == "Invalid stage. Must be stage1, stage2, stage3, or stage4"


def test_update_component(client, component_payload):
    created = _create(client, component_payload)

    res = client.put(
        f"{API}/components/{created['id']}",
        json={**component_payload, "description": "Updated"},
    )
    assert res.status_code == 200
    assert res.json() == {"message": "Component updated successfully", "id": created["id"]}
    assert client.get(f"{API}/components/{created['id']}").json()["description"] == "Updated"

    missing = client.put(f"{API}/components/nope", json=component_payload)
    assert missing.status_code == 404

    invalid = client.put(f"{API}/components/{created['id']}", json={**component_payload, "stage": "x"})
    assert invalid.status_code == 400


def test_delete_component(client, component_payload):
    created = _create(client, component_payload)

    res = client.delete(f"{API}/components/{created['id']}")
    assert res.status_code == 200
    assert res.json() == {"message": "Component deleted successfully", "id": created["id"]}

    assert client.get(f"{API}/components/{created['id']}").status_code == 404
    assert client.delete(f"{API}/components/{created['id']}").status_code == 404

import pytest

from core.database.repository import get_component_repository


def _record(name, stage="stage1", inputs=None, output=None, language="python"):
    return {
        "name": name,
        "description": f"{name} component",
        "code": f"def {name.lower().replace(' ', '_')}(df):\n    return df\n",
        "language": language,
        "stage": stage,
        "tags": [],
        "inputs": inputs if inputs is not None else [{"name": "df", "type": "DataFrame", "required": True}],
        "output": output,
    }


@pytest.mark.asyncio
async def test_create_and_get(db_session):
    repo = get_component_repository(db_session)

    created = await repo.create(_record("Drop Outliers", output={"type": "DataFrame", "description": ""}))

    assert len(created.id) == 36
    assert created.created_at is not None
    assert created.stage_number == 1
    assert created.has_output is True
    assert created.output_type() == "DataFrame"
    assert [item["name"] for item in created.required_inputs] == ["df"]

    fetched = await repo.get(created.id)
    assert fetched is not None
    assert fetched.name == "Drop Outliers"
    assert await repo.exists(created.id)


@pytest.mark.asyncio
async def test_update_and_delete(db_session):
    repo = get_component_repository(db_session)
    created = await repo.create(_record("Scale"))

    updated = await repo.update(created.id, {"description": "changed", "stage": "stage2"})
    assert updated.description == "changed"
    assert updated.stage_number == 2

    assert await repo.update("missing", {"description": "x"}) is None
    assert await repo.delete(created.id) is True
    assert await repo.delete(created.id) is False
    assert await repo.get(created.id) is None


@pytest.mark.asyncio
async def test_list_filters(db_session):
    repo = get_component_repository(db_session)
    await repo.create(_record("Impute", stage="stage1", output={"type": "DataFrame", "description": ""}))
    await repo.create(_record("Fit Forest", stage="stage3", output={"type": "object", "description": ""}))
    await repo.create(_record("Print Report", stage="stage4", language="r"))

    assert len(await repo.list_components()) == 3
    assert [c.name for c in await repo.list_components(stage="stage3")] == ["Fit Forest"]
    assert [c.name for c in await repo.list_components(language="r")] == ["Print Report"]
    assert [c.name for c in await repo.list_components(has_output=False)] == ["Print Report"]
    assert {c.name for c in await repo.list_components(has_output=True)} == {"Impute", "Fit Forest"}
    assert [c.name for c in await repo.list_components(output_type="object")] == ["Fit Forest"]
    assert len(await repo.list_components(limit=2)) == 2


@pytest.mark.asyncio
async def test_search_and_stats(db_session):
    repo = get_component_repository(db_session)
    await repo.create(_record("Remove Outliers", stage="stage1"))
    await repo.create(_record("Outlier Report", stage="stage4"))
    await repo.create(_record("Scale", stage="stage1"))

    assert [c.name for c in await repo.search_by_name("OUTLIER")] == ["Outlier Report", "Remove Outliers"]
    assert await repo.search_by_name("nothing") == []

    assert await repo.get_stage_stats() == [
        {"stage": "stage1", "count": 2},
        {"stage": "stage4", "count": 1},
    ]
    assert [c.name for c in await repo.get_by_stage_number(4)] == ["Outlier Report"]


@pytest.mark.asyncio
async def test_type_lookups(db_session):
    repo = get_component_repository(db_session)
    await repo.create(_record(
        "Fit Forest",
        stage="stage3",
        inputs=[{"name": "X", "type": "ndarray"}, {"name": "y", "type": "Series"}],
        output={"type": "object", "description": "model"},
    ))
    await repo.create(_record("Scale", output={"type": "DataFrame", "description": ""}))

    assert [c.name for c in await repo.get_by_input_type("Series")] == ["Fit Forest"]
    assert [c.name for c in await repo.get_by_input_type("DataFrame")] == ["Scale"]
    assert await repo.get_by_input_type("tensor") == []
    assert [c.name for c in await repo.get_by_output_type("DataFrame")] == ["Scale"]


@pytest.mark.asyncio
async def test_get_many_skips_unknown_ids(db_session):
    repo = get_component_repository(db_session)
    first = await repo.create(_record("A"))
    second = await repo.create(_record("B"))

    found = await repo.get_many([second.id, "missing", first.id, first.id])

    assert set(found) == {first.id, second.id}
    assert await repo.get_many([]) == {}


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(db_session):
    repo = get_component_repository(db_session)
    await repo.create(_record("drop_rows"))
    await repo.create(_record("dropXrows"))
    await repo.create(_record("Top 5% Filter"))

    assert [c.name for c in await repo.search_by_name("p_r")] == ["drop_rows"]
    assert [c.name for c in await repo.search_by_name("5%")] == ["Top 5% Filter"]
    assert [c.name for c in await repo.search_by_name("%")] == ["Top 5% Filter"]

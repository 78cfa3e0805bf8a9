import pytest

from mongoseed.core import MultiError
from mongoseed.migration import CreateIndexTask, Migrator, SeedTableTask, Task
from tests.fixtures.models import ExampleModel, ExampleModelStrID, find_by_id, find_by_num

pytestmark = [pytest.mark.asyncio, pytest.mark.integration]


async def test_seed_then_reseed(mongo_helper):
    migrator = Migrator(mongo_helper)
    tasks = {
        "num index": CreateIndexTask(collection="examples", index_name="num_1", keys={"num": 1}),
        "seed examples": SeedTableTask(
            collection="examples",
            items=[ExampleModel(label="a", num=1), ExampleModel(label="b", num=2)],
            find_filter_fn=find_by_num,
            model=ExampleModel(),
        ),
    }

    await migrator.run(tasks)
    first = await mongo_helper.find("examples", {}, ExampleModel, None)
    await migrator.run(tasks)
    second = await mongo_helper.find("examples", {}, ExampleModel, None)

    assert first.total == second.total == 2
    assert {item.get_id() for item in first.items} == {item.get_id() for item in second.items}
    assert await mongo_helper.has_index("examples", "num_1")


async def test_seed_string_ids_updates_existing(mongo_helper):
    await mongo_helper.insert_one("examples", ExampleModelStrID(id="a", num=0))

    seeded = []
    await Migrator(mongo_helper).run(
        {
            "seed": SeedTableTask(
                collection="examples",
                items=[ExampleModelStrID(id="a", num=1), ExampleModelStrID(id="b", num=2)],
                find_filter_fn=find_by_id,
                model=ExampleModelStrID(),
                callback=seeded.append,
            )
        }
    )

    assert [item.id for item in seeded] == ["a", "b"]
    documents = (await mongo_helper.find("examples", {}, dict, None)).items
    assert sorted(documents, key=lambda d: d["_id"]) == [{"_id": "a", "num": 1}, {"_id": "b", "num": 2}]


async def test_unknown_task_kind_is_reported(mongo_helper):
    with pytest.raises(MultiError) as exc_info:
        await Migrator(mongo_helper).run(
            {
                "bad": Task(collection="examples"),
                "index": CreateIndexTask(collection="examples", index_name="num_1", keys="num"),
            }
        )
    assert len(exc_info.value) == 1
    assert await mongo_helper.has_index("examples", "num_1")

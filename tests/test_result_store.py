import pytest

from resultdesk.services.result_store import (
    DuplicateResultError,
    LocalStorageBackend,
    MemoryStorageBackend,
    ResultNotFoundError,
    ResultStore,
    create_backend,
)
from resultdesk.services.result_upload import process_upload

PDF_CONTENT = b"%PDF-1.4\n%mark-sheet\n"


def _upload(roll_number="219F1A05A7", content=PDF_CONTENT):
    return process_upload(content + roll_number.encode(), f"JNTUA_Result_{roll_number}.pdf")


@pytest.mark.anyio
async def test_add_and_list_in_submission_order(store):
    first = await store.add(_upload("219F1A05A7"))
    second = await store.add(_upload("229F5A0502"))

    results = await store.all_results()

    assert [r.id for r in results] == [first.id, second.id]
    assert results[0] == first
    assert (await store.get(second.id)).aggregate.student_info.name == "KAYALA MANJUNATH"


@pytest.mark.anyio
async def test_duplicate_checksum_is_rejected(store):
    stored = await store.add(_upload())

    with pytest.raises(DuplicateResultError) as exc_info:
        await store.add(_upload())

    assert exc_info.value.existing.id == stored.id
    assert len(await store.all_results()) == 1


@pytest.mark.anyio
async def test_duplicate_returns_existing_when_allowed(store):
    stored = await store.add(_upload())

    again = await store.add(_upload(), reject_duplicates=False)

    assert again.id == stored.id
    assert len(await store.all_results()) == 1


@pytest.mark.anyio
async def test_remove_and_clear(store):
    first = await store.add(_upload("219F1A05A7"))
    await store.add(_upload("229F5A0502"))

    await store.remove(first.id)
    assert [r.aggregate.student_info.roll_number for r in await store.all_results()] == ["229F5A0502"]

    with pytest.raises(ResultNotFoundError):
        await store.remove(first.id)
    with pytest.raises(ResultNotFoundError):
        await store.get(first.id)

    assert await store.clear() == 1
    assert await store.all_results() == []


@pytest.mark.anyio
async def test_local_backend_persists_across_stores(tmp_path):
    stored = await ResultStore(LocalStorageBackend(str(tmp_path))).add(_upload())

    reloaded = await ResultStore(LocalStorageBackend(str(tmp_path))).all_results()

    assert reloaded == [stored]
    assert (tmp_path / "processed_results.json").exists()


@pytest.mark.anyio
async def test_local_backend_rejects_path_keys(tmp_path):
    backend = LocalStorageBackend(str(tmp_path))

    with pytest.raises(ValueError):
        await backend.write("../outside", [])


@pytest.mark.anyio
async def test_memory_backend_round_trips_json():
    backend = MemoryStorageBackend()
    await backend.write("key", {"a": [1, 2]})

    assert await backend.exists("key")
    assert await backend.read("key") == {"a": [1, 2]}
    await backend.delete("key")
    assert await backend.read("key") is None


def test_create_backend():
    assert isinstance(create_backend("memory"), MemoryStorageBackend)
    with pytest.raises(ValueError):
        create_backend("s3")

import httpx
import pytest

from tests.conftest import DataFactory


@pytest.mark.asyncio
async def test_toggle_chapter_like_alternates(client: httpx.AsyncClient, catalog: DataFactory):
    payload = {"user_id": 1, "chapter_id": 11}

    liked = await client.post("/likes/chapters/toggle", json=payload)
    unliked = await client.post("/likes/chapters/toggle", json=payload)

    assert liked.status_code == 200
    assert liked.json() == {
        "is_liked": True,
        "likes_count": 1,
        "message": "Chapter liked successfully",
    }
    assert unliked.json() == {
        "is_liked": False,
        "likes_count": 0,
        "message": "Chapter like removed successfully",
    }


@pytest.mark.asyncio
async def test_toggle_unknown_chapter_returns_404(client: httpx.AsyncClient, catalog: DataFactory):
    response = await client.post("/likes/chapters/toggle", json={"user_id": 1, "chapter_id": 99})

    assert response.status_code == 404
    assert response.json()["detail"] == "Chapter with id 99 not found"


@pytest.mark.asyncio
async def test_chapter_status_and_batches(client: httpx.AsyncClient, catalog: DataFactory):
    await catalog.create_chapter_like(1, 11)
    await catalog.create_chapter_like(2, 11)

    status = await client.get("/likes/chapters/11/status", params={"user_id": 2})
    statuses = await client.post(
        "/likes/chapters/status/multiple", json={"user_id": 3, "chapter_ids": [11, 12]}
    )
    counts = await client.post("/likes/chapters/count/multiple", json={"chapter_ids": [12, 11]})

    assert status.json() == {"is_liked": True, "likes_count": 2}
    assert statuses.json() == {
        "11": {"is_liked": False, "likes_count": 2},
        "12": {"is_liked": False, "likes_count": 0},
    }
    assert counts.json() == {"12": 0, "11": 2}


@pytest.mark.asyncio
async def test_multiple_status_requires_user_id(client: httpx.AsyncClient):
    response = await client.post("/likes/chapters/status/multiple", json={"chapter_ids": [1]})

    assert response.status_code == 422

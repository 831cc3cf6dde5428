"""Integration tests for Guides Router."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from tests.factories import GuideFactory

GUIDE_PAYLOAD = {
    "name": "Sunita Oraon",
    "bio": "Tribal heritage walks around Khunti and the Hundru falls.",
    "specializations": ["Tribal Culture", "Waterfalls"],
    "languages": ["Hindi", "Kurukh"],
    "experience": "6 years",
    "location": {"district": "Khunti", "state": "Jharkhand"},
    "pricing": {"halfDay": 700, "fullDay": 1200, "multiDay": 3000},
    "certifications": ["Jharkhand Tourism Certified"],
}


async def _create_guides(db, count: int, **overrides):
    base = datetime.now(UTC) - timedelta(hours=count)
    return [
        await GuideFactory.create_async(
            db, name=f"Guide {n:02d}", created_at=base + timedelta(minutes=n), **overrides
        )
        for n in range(count)
    ]


@pytest.mark.asyncio
async def test_create_guide(public_client):
    response = await public_client.post("/guides", json=GUIDE_PAYLOAD)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    guide = body["data"]
    assert guide["name"] == "Sunita Oraon"
    assert guide["specializations"] == ["Tribal Culture", "Waterfalls"]
    assert guide["pricing"]["halfDay"] == 700
    assert guide["pricing"]["multiDay"] == 3000
    assert guide["pricing"]["workshop"] is None
    assert guide["availability"] == "available"
    assert "id" in guide and "createdAt" in guide


@pytest.mark.asyncio
async def test_create_guide_validation(public_client):
    payload = {**GUIDE_PAYLOAD, "pricing": {"halfDay": -5}}
    response = await public_client.post("/guides", json=payload)

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert "pricing.halfDay" in fields
    assert "pricing.fullDay" in fields


@pytest.mark.asyncio
async def test_get_guide(db, public_client):
    guide = await GuideFactory.create_async(db, name="Birsa")

    response = await public_client.get(f"/guides/{guide.id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == str(guide.id)
    assert data["location"] == {"district": "Ranchi", "state": "Jharkhand"}
    assert data["pricing"]["fullDay"] == 1500


@pytest.mark.asyncio
async def test_get_guide_not_found(public_client):
    response = await public_client.get(f"/guides/{uuid4()}")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Guide not found"}


@pytest.mark.asyncio
async def test_get_guide_with_malformed_id(public_client):
    response = await public_client.get("/guides/not-a-uuid")

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "guide_id"


@pytest.mark.asyncio
async def test_list_guides_paginates_in_creation_order(db, public_client):
    guides = await _create_guides(db, 12)

    first = await public_client.get("/guides", params={"page": 1, "limit": 5})
    third = await public_client.get("/guides", params={"page": 3, "limit": 5})

    first_data = first.json()["data"]
    assert [g["id"] for g in first_data["guides"]] == [str(g.id) for g in guides[:5]]
    assert first_data["pagination"] == {
        "page": 1,
        "limit": 5,
        "total": 12,
        "totalPages": 3,
        "hasNextPage": True,
        "hasPrevPage": False,
    }

    third_data = third.json()["data"]
    assert [g["id"] for g in third_data["guides"]] == [str(g.id) for g in guides[10:]]
    assert third_data["pagination"]["hasNextPage"] is False
    assert third_data["pagination"]["hasPrevPage"] is True


@pytest.mark.asyncio
async def test_list_guides_defaults(db, public_client):
    await _create_guides(db, 3)

    response = await public_client.get("/guides")

    pagination = response.json()["data"]["pagination"]
    assert pagination["page"] == 1
    assert pagination["limit"] == 10
    assert pagination["total"] == 3
    assert pagination["totalPages"] == 1


@pytest.mark.asyncio
async def test_list_guides_empty(public_client):
    response = await public_client.get("/guides")

    data = response.json()["data"]
    assert data["guides"] == []
    assert data["pagination"]["total"] == 0
    assert data["pagination"]["totalPages"] == 0
    assert data["pagination"]["hasNextPage"] is False


@pytest.mark.asyncio
async def test_list_guides_filters_by_specialization_case_insensitively(db, public_client):
    trekker = await GuideFactory.create_async(db, specializations=["Trekking"])
    await GuideFactory.create_async(db, specializations=["Cooking", "Handicrafts"])

    response = await public_client.get("/guides", params={"specialization": "TREKKING"})

    data = response.json()["data"]
    assert [g["id"] for g in data["guides"]] == [str(trekker.id)]
    assert data["pagination"]["total"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}])
async def test_list_guides_rejects_out_of_range_paging(public_client, params):
    response = await public_client.get("/guides", params=params)

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


@pytest.mark.asyncio
async def test_update_guide_merges_fields(db, public_client):
    guide = await GuideFactory.create_async(db)
    created_at = guide.created_at

    response = await public_client.put(
        f"/guides/{guide.id}",
        json={"bio": "Now also leads birding trips.", "availability": "busy"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == str(guide.id)
    assert data["bio"] == "Now also leads birding trips."
    assert data["availability"] == "busy"
    assert data["name"] == guide.name
    assert data["specializations"] == ["Trekking", "Wildlife"]
    assert datetime.fromisoformat(data["createdAt"]) == created_at
    assert datetime.fromisoformat(data["updatedAt"]) >= created_at


@pytest.mark.asyncio
async def test_update_guide_replaces_specializations(db, public_client):
    guide = await GuideFactory.create_async(db)

    response = await public_client.put(
        f"/guides/{guide.id}", json={"specializations": ["Photography"]}
    )
    assert response.json()["data"]["specializations"] == ["Photography"]

    listed = await public_client.get("/guides", params={"specialization": "wildlife"})
    assert listed.json()["data"]["guides"] == []


@pytest.mark.asyncio
async def test_update_guide_not_found(public_client):
    response = await public_client.put(f"/guides/{uuid4()}", json={"name": "Nobody"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_guide(db, public_client):
    guide = await GuideFactory.create_async(db)

    response = await public_client.delete(f"/guides/{guide.id}")
    assert response.status_code == 200
    assert response.json()["message"] == "Guide profile deleted successfully"

    assert (await public_client.get(f"/guides/{guide.id}")).status_code == 404
    assert (await public_client.delete(f"/guides/{guide.id}")).status_code == 404


@pytest.mark.asyncio
async def test_update_guide_clears_certifications_with_explicit_null(db, public_client):
    guide = await GuideFactory.create_async(db, certifications=["Wildlife First Aid"])

    response = await public_client.put(
        f"/guides/{guide.id}", json={"certifications": None, "name": None}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["certifications"] is None
    assert data["name"] == guide.name

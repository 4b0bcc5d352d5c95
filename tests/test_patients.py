"""
Patient endpoint tests
"""
import pytest

from tests.conftest import image_bytes


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_seeded_patients(client):
    response = await client.get("/api/patients")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [p["name"] for p in data["patients"]] == ["Rajesh Kumar", "Priya Sharma"]
    assert "createdAt" in data["patients"][0]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_by_name_or_village(client):
    by_name = await client.get("/api/patients", params={"search": "priya"})
    assert [p["id"] for p in by_name.json()["patients"]] == [2]

    by_village = await client.get("/api/patients", params={"search": "RAMPUR"})
    assert by_village.json()["total"] == 2

    exact_village = await client.get("/api/patients", params={"village": "Mohalla"})
    assert exact_village.json()["total"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_patient(client):
    response = await client.post(
        "/api/patients",
        json={"name": "Kavita", "age": 27, "gender": "Female", "village": "Khalilabad"},
    )

    assert response.status_code == 201
    patient = response.json()["patient"]
    assert patient["id"] == 3
    assert patient["phone"] is None
    assert patient["cases"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_patient_missing_fields(client):
    response = await client.post("/api/patients", json={"name": "Kavita", "age": 27})

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields: name, age, gender, village"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_duplicate_patient(client):
    response = await client.post(
        "/api/patients",
        json={"name": "rajesh kumar", "age": 45, "gender": "Male", "village": "rampur"},
    )
    assert response.status_code == 409


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_patient(client):
    response = await client.put("/api/patients/1", json={"village": "Mohalla", "phone": None})

    assert response.status_code == 200
    patient = response.json()["patient"]
    assert patient["village"] == "Mohalla"
    assert patient["phone"] is None
    assert patient["name"] == "Rajesh Kumar"
    assert patient["updatedAt"] > patient["createdAt"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_unknown_patient(client):
    assert (await client.get("/api/patients/99")).status_code == 404
    assert (await client.put("/api/patients/99", json={"age": 3})).status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_history_comes_from_diagnoses(client):
    form = {
        "name": "Rajesh Kumar",
        "age": "45",
        "gender": "Male",
        "symptoms": "pus from a cut on the foot",
        "duration": "3-7 days",
    }
    await client.post(
        "/api/diagnosis",
        data=form,
        files={"image": ("foot.png", image_bytes(fmt="PNG"), "image/png")},
    )

    response = await client.get("/api/patients/1/history")

    assert response.status_code == 200
    data = response.json()
    assert data["patient"]["name"] == "Rajesh Kumar"
    assert len(data["history"]) == 1
    assert data["history"][0]["condition"] == "Bacterial Skin Infection"

    other = await client.get("/api/patients/2/history")
    assert other.json()["history"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_patient_stats(client):
    await client.post(
        "/api/patients",
        json={"name": "Kavita", "age": 27, "gender": "Female", "village": "Khalilabad"},
    )

    response = await client.get("/api/patients/stats/summary")

    stats = response.json()["stats"]
    assert stats["total"] == 3
    assert stats["byGender"] == {"male": 1, "female": 2}
    assert stats["byVillage"] == {"Rampur": 2, "Khalilabad": 1}
    assert stats["recentlyAdded"] == 1

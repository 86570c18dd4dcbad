"""Tests for supplier workflow endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_supplier_workflow(client: AsyncClient):
    garment_id = (await client.post("/garments", json={"name": "Parka", "category": "Outerwear"})).json()["id"]
    response = await client.post("/suppliers", json={"name": "North Mill", "contact_email": "ops@north.example"})
    assert response.status_code == 201
    supplier_id = response.json()["id"]

    response = await client.post(f"/garments/{garment_id}/suppliers", json={"supplier_id": supplier_id})
    assert response.status_code == 201
    link = response.json()
    assert link["status"] == "OFFERED"

    duplicate = await client.post(f"/garments/{garment_id}/suppliers", json={"supplier_id": supplier_id})
    assert duplicate.status_code == 409

    response = await client.patch(f"/suppliers/links/{link['id']}", json={"status": "SAMPLING"})
    assert response.json()["status"] == "SAMPLING"

    response = await client.post(
        f"/suppliers/links/{link['id']}/offers", json={"price": "24.90", "lead_time_days": 60}
    )
    assert response.status_code == 201
    assert response.json()["currency"] == "USD"

    response = await client.post(f"/suppliers/links/{link['id']}/samples", json={"notes": "first batch"})
    sample = response.json()
    assert sample["status"] == "REQUESTED"

    response = await client.patch(f"/suppliers/samples/{sample['id']}", json={"status": "PASSED"})
    assert response.json()["status"] == "PASSED"
    assert response.json()["received_at"] is not None

    listed = (await client.get(f"/garments/{garment_id}/suppliers")).json()
    assert listed[0]["supplier_name"] == "North Mill"
    assert listed[0]["status"] == "SAMPLING"
    assert len((await client.get(f"/suppliers/links/{link['id']}/offers")).json()) == 1
    assert len((await client.get(f"/suppliers/links/{link['id']}/samples")).json()) == 1

    assert (await client.delete(f"/suppliers/{supplier_id}")).status_code == 409


@pytest.mark.asyncio
async def test_missing_link_and_sample_are_404(client: AsyncClient):
    assert (await client.patch("/suppliers/links/9", json={"status": "APPROVED"})).status_code == 404
    assert (await client.patch("/suppliers/samples/9", json={"status": "PASSED"})).status_code == 404
    response = await client.post("/suppliers/links/9/offers", json={"price": 1, "lead_time_days": 1})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_supplier_and_link(client: AsyncClient):
    garment_id = (await client.post("/garments", json={"name": "Vest", "category": "Outerwear"})).json()["id"]
    supplier_id = (await client.post("/suppliers", json={"name": "South Mill"})).json()["id"]
    link_id = (
        await client.post(f"/garments/{garment_id}/suppliers", json={"supplier_id": supplier_id})
    ).json()["id"]

    response = await client.get(f"/suppliers/{supplier_id}")
    assert response.status_code == 200
    assert response.json()["name"] == "South Mill"
    assert response.json()["contact_email"] is None

    response = await client.get(f"/suppliers/links/{link_id}")
    assert response.status_code == 200
    assert response.json()["garment_id"] == garment_id
    assert response.json()["supplier_id"] == supplier_id
    assert response.json()["status"] == "OFFERED"

    assert (await client.get("/suppliers/999")).status_code == 404
    assert (await client.get("/suppliers/links/999")).status_code == 404

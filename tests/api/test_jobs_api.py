"""Job posting and completion."""

from httpx import AsyncClient


async def test_post_job(client: AsyncClient, sign_up) -> None:
    auth = await sign_up()
    response = await client.post("/api/v1/jobs", json={"title": "Proofread essay"}, headers=auth["headers"])
    assert response.status_code == 201
    data = response.json()
    assert data["price"] == 50
    assert data["status"] == "open"
    assert data["poster_uid"] == auth["uid"]


async def test_post_job_requires_sign_in(client: AsyncClient) -> None:
    response = await client.post("/api/v1/jobs", json={"title": "Gig"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Please sign in"


async def test_non_positive_price(client: AsyncClient, sign_up) -> None:
    auth = await sign_up()
    response = await client.post("/api/v1/jobs", json={"title": "Free", "price": 0}, headers=auth["headers"])
    assert response.status_code == 422


async def test_complete_job_pays_price(client: AsyncClient, sign_up) -> None:
    poster = await sign_up()
    worker = await sign_up("bob@example.com", "Bob")
    job = (await client.post("/api/v1/jobs", json={"title": "Tutor", "price": 75}, headers=poster["headers"])).json()

    response = await client.post(f"/api/v1/jobs/{job['id']}/complete", headers=worker["headers"])
    assert response.status_code == 200
    data = response.json()
    assert data["earnings_awarded"] == 75
    assert data["profile"]["earnings"] == 75
    assert data["job"]["status"] == "completed"
    assert data["job"]["completed_by"] == worker["uid"]

    listed = (await client.get("/api/v1/jobs")).json()
    assert listed[0]["status"] == "completed"


async def test_second_completion_conflicts(client: AsyncClient, sign_up) -> None:
    """A job pays out once; later completions get 409 and no credit."""
    auth = await sign_up()
    job = (await client.post("/api/v1/jobs", json={"title": "Once"}, headers=auth["headers"])).json()
    first = await client.post(f"/api/v1/jobs/{job['id']}/complete", headers=auth["headers"])
    second = await client.post(f"/api/v1/jobs/{job['id']}/complete", headers=auth["headers"])
    assert first.status_code == 200
    assert second.status_code == 409

    me = await client.get("/api/v1/profiles/me", headers=auth["headers"])
    assert me.json()["earnings"] == 50


async def test_complete_unknown_job(client: AsyncClient, sign_up) -> None:
    auth = await sign_up()
    response = await client.post("/api/v1/jobs/missing/complete", headers=auth["headers"])
    assert response.status_code == 404


async def test_non_finite_price_rejected(client: AsyncClient, sign_up) -> None:
    """Infinity and NaN are valid JSON to the parser but not valid prices."""
    auth = await sign_up()
    for raw in ("Infinity", "NaN"):
        response = await client.post(
            "/api/v1/jobs",
            content=f'{{"title": "Unbounded", "price": {raw}}}',
            headers={**auth["headers"], "Content-Type": "application/json"},
        )
        assert response.status_code == 422
    assert (await client.get("/api/v1/jobs")).json() == []

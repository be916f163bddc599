"""Sign-up, sign-in, and sign-out over HTTP."""

from httpx import AsyncClient

from conftest import TEST_PASSWORD


async def test_signup_creates_profile(client: AsyncClient) -> None:
    """A new account comes back with a token and a zeroed profile."""
    response = await client.post(
        "/api/v1/auth/signup",
        json={"email": "Alice@Example.com", "password": TEST_PASSWORD, "name": "Alice"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "alice@example.com"
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["profile"] == {
        "uid": data["uid"],
        "name": "Alice",
        "role": "Student",
        "bio": "",
        "points": 0,
        "earnings": 0,
    }


async def test_signup_without_name_uses_email(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/signup", json={"email": "bob@example.com", "password": TEST_PASSWORD})
    assert response.status_code == 201
    assert response.json()["profile"]["name"] == "bob"


async def test_duplicate_signup(client: AsyncClient, sign_up) -> None:
    """Registering the same email twice returns 409."""
    await sign_up()
    response = await client.post(
        "/api/v1/auth/signup",
        json={"email": "alice@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == 409
    assert response.json()["detail"] == "Email already registered"


async def test_weak_password(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/signup", json={"email": "c@example.com", "password": "password"})
    assert response.status_code == 422
    assert response.json()["error"] == "PasswordStrengthError"


async def test_invalid_email(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/signup", json={"email": "nope", "password": TEST_PASSWORD})
    assert response.status_code == 422
    assert response.json()["detail"] == "Validation error"


async def test_signin(client: AsyncClient, sign_up) -> None:
    created = await sign_up()
    response = await client.post("/api/v1/auth/signin", json={"email": "alice@example.com", "password": TEST_PASSWORD})
    assert response.status_code == 200
    data = response.json()
    assert data["uid"] == created["uid"]
    assert data["profile"]["name"] == "Alice"


async def test_signin_bad_credentials(client: AsyncClient, sign_up) -> None:
    """Wrong password and unknown email both return 401 with a bearer challenge."""
    await sign_up()
    wrong = await client.post("/api/v1/auth/signin", json={"email": "alice@example.com", "password": "Wrong1234"})
    unknown = await client.post("/api/v1/auth/signin", json={"email": "zed@example.com", "password": TEST_PASSWORD})
    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.json()["detail"] == unknown.json()["detail"] == "Invalid email or password"
    assert wrong.headers["www-authenticate"] == "Bearer"


async def test_signout(client: AsyncClient, sign_up) -> None:
    auth = await sign_up()
    response = await client.post("/api/v1/auth/signout", headers=auth["headers"])
    assert response.status_code == 204


async def test_signout_when_signed_out(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/signout")
    assert response.status_code == 204

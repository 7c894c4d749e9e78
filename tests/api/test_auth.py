"""Tests for sign-up and sign-in endpoints."""
import pytest
from httpx import AsyncClient

from core.config import get_settings
from core.security import decode_access_token
from models.user import User

CREDENTIALS = {"email": "duy0209@gmail.com", "password": "test1234"}


class TestSignup:
    """Tests for POST /auth/signup."""

    @pytest.mark.parametrize(
        "body",
        [
            {"password": "test1234"},
            {"email": "duy0209@gmail.com"},
            {"email": "not-an-email", "password": "test1234"},
            {"email": "duy0209@gmail.com", "password": ""},
        ],
        ids=["missing-email", "missing-password", "invalid-email", "empty-password"],
    )
    async def test_signup_rejects_invalid_body(
        self, client: AsyncClient, body: dict,
    ) -> None:
        """Missing or malformed fields are a 400."""
        response = await client.post("/auth/signup", json=body)
        assert response.status_code == 400
        assert isinstance(response.json()["detail"], list)

    async def test_signup_rejects_missing_body(self, client: AsyncClient) -> None:
        """No body at all is a 400."""
        response = await client.post("/auth/signup")
        assert response.status_code == 400

    async def test_signup_returns_token(self, client: AsyncClient) -> None:
        """Signup creates the account and returns a usable token."""
        response = await client.post("/auth/signup", json=CREDENTIALS)
        assert response.status_code == 201

        data = response.json()
        assert data["token_type"] == "bearer"
        user_id = decode_access_token(data["access_token"], get_settings())

        me = await client.get(
            "/users/me",
            headers={"Authorization": f"Bearer {data['access_token']}"},
        )
        assert me.status_code == 200
        assert me.json()["id"] == user_id
        assert me.json()["email"] == CREDENTIALS["email"]

    async def test_signup_normalizes_email(self, client: AsyncClient) -> None:
        """Emails are stored lowercased."""
        response = await client.post(
            "/auth/signup",
            json={"email": "Duy0209@Gmail.com", "password": "test1234"},
        )
        assert response.status_code == 201

        signin = await client.post("/auth/signin", json=CREDENTIALS)
        assert signin.status_code == 200

    async def test_signup_duplicate_email(self, client: AsyncClient) -> None:
        """Registering an email twice is rejected with 403."""
        first = await client.post("/auth/signup", json=CREDENTIALS)
        assert first.status_code == 201

        second = await client.post("/auth/signup", json=CREDENTIALS)
        assert second.status_code == 403
        assert second.json()["detail"] == "Credentials taken"


class TestSignin:
    """Tests for POST /auth/signin."""

    @pytest.mark.parametrize(
        "body",
        [{"password": "test1234"}, {"email": "duy0209@gmail.com"}],
        ids=["missing-email", "missing-password"],
    )
    async def test_signin_rejects_invalid_body(
        self, client: AsyncClient, body: dict,
    ) -> None:
        """Missing fields are a 400."""
        response = await client.post("/auth/signin", json=body)
        assert response.status_code == 400

    async def test_signin_rejects_missing_body(self, client: AsyncClient) -> None:
        """No body at all is a 400."""
        response = await client.post("/auth/signin")
        assert response.status_code == 400

    async def test_signin_returns_token(self, client: AsyncClient, user: User) -> None:
        """Correct credentials yield a token for that user."""
        response = await client.post("/auth/signin", json=CREDENTIALS)
        assert response.status_code == 200

        token = response.json()["access_token"]
        assert decode_access_token(token, get_settings()) == user.id

    async def test_signin_wrong_password(
        self, client: AsyncClient, user: User,  # noqa: ARG002
    ) -> None:
        """Wrong password is a 403."""
        response = await client.post(
            "/auth/signin",
            json={"email": CREDENTIALS["email"], "password": "wrong-password"},
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Credentials incorrect"

    async def test_signin_unknown_email(self, client: AsyncClient) -> None:
        """Unknown email gets the same response as a wrong password."""
        response = await client.post(
            "/auth/signin",
            json={"email": "nobody@gmail.com", "password": "test1234"},
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Credentials incorrect"

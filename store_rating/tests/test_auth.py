import pytest
from sqlalchemy.future import select

from store_rating.core.security import create_access_token
from store_rating.core.enums import UserRole
from store_rating.models.user import User
from store_rating.models.audit import Audit


@pytest.mark.auth
class TestRegistration:

    @pytest.mark.asyncio
    async def test_register_and_login(self, test_client, db_session, valid_account_data):
        response = await test_client.post("/api/auth/register", json=valid_account_data)
        assert response.status_code == 201
        assert response.json()["message"] == "User registered successfully"

        res = await db_session.execute(select(User).where(User.email == valid_account_data["email"]))
        user = res.scalars().first()
        assert user.role == UserRole.USER
        assert user.password_hash != valid_account_data["password"]
        assert user.password_hash.startswith("$argon2")

        response = await test_client.post("/api/auth/login", json={
            "email": valid_account_data["email"],
            "password": valid_account_data["password"],
        })
        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        assert "accessToken" not in data
        assert data["tokenType"] == "bearer"
        assert data["user"]["role"] == "user"
        assert data["user"]["name"] == valid_account_data["name"]

    @pytest.mark.asyncio
    async def test_login_with_wrong_password(self, test_client, valid_account_data):
        await test_client.post("/api/auth/register", json=valid_account_data)

        response = await test_client.post("/api/auth/login", json={
            "email": valid_account_data["email"],
            "password": "Wrong1!pass",
        })
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, test_client):
        response = await test_client.post("/api/auth/login", json={
            "email": "nobody@example.com",
            "password": "Valid1!pass",
        })
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, test_client, valid_account_data):
        first = await test_client.post("/api/auth/register", json=valid_account_data)
        assert first.status_code == 201

        duplicate = dict(valid_account_data, email=valid_account_data["email"].upper())
        second = await test_client.post("/api/auth/register", json=duplicate)
        assert second.status_code == 400
        assert second.json()["detail"] == "Email already in use"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("length,expected", [
        (19, 400),
        (20, 201),
        (60, 201),
        (61, 400),
    ])
    async def test_name_length_bounds(self, test_client, valid_account_data, length, expected):
        data = dict(valid_account_data, name="n" * length)
        response = await test_client.post("/api/auth/register", json=data)
        assert response.status_code == expected
        if expected == 400:
            assert "Name must be between 20 and 60 characters" in response.json()["detail"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("password", [
        "alllowercase1!",      # no uppercase
        "NoSpecial123",        # no special character
        "Sh0rt!",              # too short
        "WayTooLongPassw0rd!",  # too long
        "Spa ce!Upper",        # character outside the allowed set
    ])
    async def test_weak_passwords_rejected(self, test_client, valid_account_data, password):
        data = dict(valid_account_data, password=password)
        response = await test_client.post("/api/auth/register", json=data)
        assert response.status_code == 400
        assert "Password must be 8-16 characters" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_address_too_long(self, test_client, valid_account_data):
        data = dict(valid_account_data, address="a" * 401)
        response = await test_client.post("/api/auth/register", json=data)
        assert response.status_code == 400
        assert "Address must not exceed 400 characters" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_address_at_limit(self, test_client, valid_account_data):
        data = dict(valid_account_data, address="a" * 400)
        response = await test_client.post("/api/auth/register", json=data)
        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_invalid_email(self, test_client, valid_account_data):
        data = dict(valid_account_data, email="not_an_email")
        response = await test_client.post("/api/auth/register", json=data)
        assert response.status_code == 400
        assert "email" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_missing_fields(self, test_client):
        response = await test_client.post("/api/auth/register", json={"email": "a@example.com"})
        assert response.status_code == 400
        assert "Field required" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_register_and_login_are_audited(self, test_client, db_session, valid_account_data):
        await test_client.post("/api/auth/register", json=valid_account_data)
        await test_client.post("/api/auth/login", json={
            "email": valid_account_data["email"],
            "password": valid_account_data["password"],
        })

        res = await db_session.execute(select(Audit.action).order_by(Audit.id))
        assert res.scalars().all() == ["register", "login"]


@pytest.mark.auth
class TestAuthGate:

    @pytest.mark.asyncio
    async def test_me_returns_resolved_identity(self, test_client, normal_user, user_headers):
        response = await test_client.get("/api/auth/me", headers=user_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == normal_user.id
        assert data["email"] == normal_user.email
        assert data["role"] == "user"
        assert "passwordHash" not in data

    @pytest.mark.asyncio
    async def test_missing_token(self, test_client):
        response = await test_client.get("/api/auth/me")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_garbage_token(self, test_client):
        response = await test_client.get(
            "/api/auth/me",
            headers={"Authorization": "Bearer invalid_token"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_expired_token(self, test_client, normal_user):
        token = create_access_token(str(normal_user.id), normal_user.role, expires_minutes=-5)
        response = await test_client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_signed_with_other_secret(self, test_client, normal_user):
        from jose import jwt
        token = jwt.encode({"sub": str(normal_user.id), "role": "user"}, "another-secret", algorithm="HS256")
        response = await test_client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_for_missing_user(self, test_client, engine):
        token = create_access_token("9999", UserRole.ADMIN)
        response = await test_client.get(
            "/api/auth/me",
            headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
        assert "User not found" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_role_is_read_from_database_not_token(self, test_client, normal_user):
        # the token claims admin, the stored user is a normal user
        token = create_access_token(str(normal_user.id), UserRole.ADMIN)
        response = await test_client.get(
            "/api/admin/dashboard-stats",
            headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 403


@pytest.mark.auth
class TestChangePassword:

    @pytest.mark.asyncio
    async def test_change_password(self, test_client, normal_user, user_headers):
        response = await test_client.put(
            "/api/auth/change-password",
            json={"currentPassword": "Valid1!pass", "newPassword": "Fresh2@pass"},
            headers=user_headers,
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Password updated successfully"

        old_login = await test_client.post("/api/auth/login", json={
            "email": normal_user.email, "password": "Valid1!pass",
        })
        assert old_login.status_code == 401

        new_login = await test_client.post("/api/auth/login", json={
            "email": normal_user.email, "password": "Fresh2@pass",
        })
        assert new_login.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, test_client, user_headers):
        response = await test_client.put(
            "/api/auth/change-password",
            json={"currentPassword": "Wrong1!pass", "newPassword": "Fresh2@pass"},
            headers=user_headers,
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Current password is incorrect"

    @pytest.mark.asyncio
    async def test_weak_new_password(self, test_client, user_headers):
        response = await test_client.put(
            "/api/auth/change-password",
            json={"currentPassword": "Valid1!pass", "newPassword": "weakpass"},
            headers=user_headers,
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_requires_token(self, test_client):
        response = await test_client.put(
            "/api/auth/change-password",
            json={"currentPassword": "Valid1!pass", "newPassword": "Fresh2@pass"},
        )
        assert response.status_code == 401

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

User = get_user_model()


@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username="ama@example.com",
        email="ama@example.com",
        password="examplepass",
        first_name="Ama",
        last_name="Mensah",
    )


def test_register_creates_user_and_returns_tokens(db, client):
    payload = {
        "email": "New@Example.com",
        "password": "password123",
        "first_name": "Kofi",
        "last_name": "Boateng",
        "phone": "+233200000000",
    }
    response = client.post("/api/auth/register/", payload, format="json")

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["display_name"] == "Kofi Boateng"
    assert "access" in body and "refresh" in body
    assert User.objects.filter(email="new@example.com").exists()


def test_register_with_existing_email_is_rejected(db, client, user):
    payload = {
        "email": "ama@example.com",
        "password": "password123",
    }
    response = client.post("/api/auth/register/", payload, format="json")

    assert response.status_code == 400
    assert "email" in response.json()


def test_login_returns_tokens_and_user_payload(db, client, user):
    response = client.post(
        "/api/auth/login/",
        {"email": "ama@example.com", "password": "examplepass"},
        format="json",
    )

    assert response.status_code == 200
    data = response.json()
    assert set(data.keys()) == {"access", "refresh", "user"}
    assert data["user"]["email"] == "ama@example.com"


def test_refresh_issues_new_access_token(db, client, user):
    login_response = client.post(
        "/api/auth/login/",
        {"email": "ama@example.com", "password": "examplepass"},
        format="json",
    )

    refresh_token = login_response.json()["refresh"]
    refresh_response = client.post(
        "/api/auth/refresh/", {"refresh": refresh_token}, format="json"
    )

    assert refresh_response.status_code == 200
    assert "access" in refresh_response.json()


def test_me_endpoint_returns_authenticated_user(db, client, user):
    login_response = client.post(
        "/api/auth/login/",
        {"email": "ama@example.com", "password": "examplepass"},
        format="json",
    )
    access = login_response.json()["access"]

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    response = client.get("/api/auth/me/")

    assert response.status_code == 200
    assert response.json()["email"] == "ama@example.com"


def test_me_endpoint_requires_authentication(db, client):
    response = client.get("/api/auth/me/")
    assert response.status_code == 401


def test_me_patch_updates_user_profile(db, client, user):
    client.force_authenticate(user=user)
    payload = {
        "phone": "+233244000111",
        "email": "Updated@Example.com",
    }

    response = client.patch("/api/auth/me/", payload, format="json")

    assert response.status_code == 200
    assert response.json()["phone"] == "+233244000111"
    user.refresh_from_db()
    assert user.email == "updated@example.com"
    assert user.username == "updated@example.com"


def test_me_patch_rejects_duplicate_email(db, client, user):
    User.objects.create_user(
        username="taken@example.com",
        email="taken@example.com",
        password="password123",
    )
    client.force_authenticate(user=user)

    response = client.patch(
        "/api/auth/me/",
        {"email": "taken@example.com"},
        format="json",
    )

    assert response.status_code == 400
    assert "email" in response.json()


def test_login_with_wrong_password_is_rejected(db, client, user):
    response = client.post(
        "/api/auth/login/",
        {"email": "ama@example.com", "password": "not-the-password"},
        format="json",
    )

    assert response.status_code == 401
    assert "access" not in response.json()


def test_login_email_is_case_insensitive(db, client, user):
    response = client.post(
        "/api/auth/login/",
        {"email": "AMA@example.com", "password": "examplepass"},
        format="json",
    )

    assert response.status_code == 200
    user.refresh_from_db()
    assert user.last_login is not None


def test_me_exposes_checkout_contact_details(db, client, user):
    user.phone = "+233244000111"
    user.save(update_fields=["phone"])
    client.force_authenticate(user=user)

    body = client.get("/api/auth/me/").json()

    assert body["checkout"] == {
        "customer_name": "Ama Mensah",
        "customer_phone": "+233244000111",
        "customer_email": "ama@example.com",
    }
    assert body["booking_count"] == 0


def test_display_name_takes_precedence_for_checkout(db, user):
    user.display_name = "Auntie Ama"

    assert user.checkout_contact()["customer_name"] == "Auntie Ama"

"""
HTTP-level tests for the library API.
"""

import pytest


@pytest.mark.asyncio
class TestServiceEndpoints:
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "library-service"

    async def test_root(self, client):
        response = await client.get("/")

        assert response.status_code == 200

    async def test_correlation_id_echoed(self, client):
        response = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"


@pytest.mark.asyncio
class TestAuthApi:
    async def test_protected_endpoint_requires_token(self, client):
        response = await client.get("/api/book")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"].startswith("Bearer")
        detail = response.json()["detail"]
        assert set(detail) == {"error_code", "message", "details"}
        assert detail["error_code"] == "AUTHENTICATION_FAILED"

    async def test_invalid_token(self, client):
        response = await client.get("/api/book", headers={"Authorization": "Bearer nonsense"})

        assert response.status_code == 401

    async def test_login_and_me(self, client):
        # Act
        login = await client.post("/api/auth/login", json={"username": "user1", "password": "User@123"})

        # Assert
        assert login.status_code == 200
        token = login.json()["token"]
        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["username"] == "user1"

    async def test_login_wrong_password(self, client):
        response = await client.post("/api/auth/login", json={"username": "user1", "password": "bad"})

        assert response.status_code == 401
        assert response.json()["detail"]["error_code"] == "AUTHENTICATION_FAILED"

    async def test_register(self, client):
        response = await client.post(
            "/api/auth/register",
            json={
                "username": "apireader",
                "password": "Secret1",
                "email": "apireader@example.com",
                "full_name": "Api Reader",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["is_active"] is False
        assert body["user_type"] == "NormalUser"

    async def test_register_malformed_email(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"username": "apireader", "password": "Secret1", "email": "nope", "full_name": "Api Reader"},
        )

        assert response.status_code == 422

    async def test_refresh_and_logout(self, client):
        login = (await client.post("/api/auth/login", json={"username": "user1", "password": "User@123"})).json()

        refreshed = await client.post(
            "/api/auth/refresh-token",
            json={"token": login["token"], "refresh_token": login["refresh_token"]},
        )
        assert refreshed.status_code == 200
        pair = refreshed.json()

        logout = await client.post(
            "/api/auth/logout",
            json={"refresh_token": pair["refresh_token"]},
            headers={"Authorization": f"Bearer {pair['token']}"},
        )
        assert logout.status_code == 200
        assert logout.json()["success"] is True


@pytest.mark.asyncio
class TestAuthorization:
    async def test_normal_user_cannot_list_users(self, client, reader, auth_headers):
        response = await client.get("/api/admin/users", headers=auth_headers(reader))

        assert response.status_code == 403
        detail = response.json()["detail"]
        assert set(detail) == {"error_code", "message", "details"}
        assert detail["error_code"] == "PERMISSION_DENIED"

    async def test_admin_lists_users(self, client, admin, auth_headers):
        response = await client.get("/api/admin/users", headers=auth_headers(admin))

        assert response.status_code == 200
        body = response.json()
        assert body["total_count"] == 3
        assert {u["username"] for u in body["data"]} == {"admin", "librarian", "user1"}

    async def test_normal_user_cannot_create_book(self, client, reader, categories, auth_headers):
        response = await client.post(
            "/api/book",
            json={
                "title": "Dune",
                "author": "Frank Herbert",
                "category_id": categories["Fiction"].id,
                "isbn": "9780441013593",
                "total_copies": 1,
            },
            headers=auth_headers(reader),
        )

        assert response.status_code == 403


@pytest.mark.asyncio
class TestCatalogApi:
    async def test_book_list_paging_headers(self, client, reader, create_book, auth_headers):
        # Arrange
        for i in range(3):
            await create_book(title=f"Book {i}")

        # Act
        response = await client.get(
            "/api/book",
            params={"page_number": 2, "page_size": 2, "sort_by": "title"},
            headers=auth_headers(reader),
        )

        # Assert
        assert response.status_code == 200
        assert [b["title"] for b in response.json()] == ["Book 2"]
        assert response.headers["X-Total-Count"] == "3"
        assert response.headers["X-Page-Number"] == "2"
        assert response.headers["X-Page-Size"] == "2"

    async def test_page_size_too_large(self, client, reader, auth_headers):
        response = await client.get("/api/book", params={"page_size": 51}, headers=auth_headers(reader))

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error_code"] == "VALIDATION_ERROR"
        assert "page" in detail["details"]["errors"]

    async def test_page_number_too_large(self, client, reader, auth_headers):
        response = await client.get(
            "/api/book", params={"page_number": "99999999999999999999"}, headers=auth_headers(reader)
        )

        assert response.status_code == 400
        assert "page" in response.json()["detail"]["details"]["errors"]

    async def test_missing_book(self, client, reader, auth_headers):
        response = await client.get("/api/book/missing", headers=auth_headers(reader))

        assert response.status_code == 404
        detail = response.json()["detail"]
        assert set(detail) == {"error_code", "message", "details"}
        assert detail["error_code"] == "NOT_FOUND"

    async def test_category_crud(self, client, admin, auth_headers):
        headers = auth_headers(admin)

        created = await client.post(
            "/api/category", json={"category_name": "Poetry", "description": "Verse"}, headers=headers
        )
        assert created.status_code == 201
        category_id = created.json()["category_id"]

        duplicate = await client.post("/api/category", json={"category_name": "poetry"}, headers=headers)
        assert duplicate.status_code == 400

        count = await client.get("/api/category/count", headers=headers)
        assert count.json() == {"count": 7}

        deleted = await client.delete(f"/api/category/{category_id}", headers=headers)
        assert deleted.status_code == 200
        assert deleted.json()["message"] == "Category deleted successfully"


@pytest.mark.asyncio
class TestBorrowingApi:
    async def test_borrowing_flow(self, client, reader, librarian, create_book, auth_headers):
        # Arrange
        book = await create_book(total_copies=1)
        reader_headers = auth_headers(reader)
        librarian_headers = auth_headers(librarian)

        # Act: request, approve, extend, return
        created = await client.post(
            "/api/borrowing", json={"book_ids": [book.book_id]}, headers=reader_headers
        )
        assert created.status_code == 201
        request_id = created.json()["request_id"]

        forbidden = await client.put(
            f"/api/borrowing/{request_id}/status", json={"status": "Approved"}, headers=reader_headers
        )
        assert forbidden.status_code == 403

        approved = await client.put(
            f"/api/borrowing/{request_id}/status",
            json={"status": "Approved", "due_days": 7},
            headers=librarian_headers,
        )
        assert approved.status_code == 200
        detail = approved.json()["request_details"][0]

        unavailable = await client.get("/api/book/count/available", headers=reader_headers)
        assert unavailable.json() == {"count": 0}

        second = await client.post(
            "/api/borrowing", json={"book_ids": [book.book_id]}, headers=reader_headers
        )
        assert second.status_code == 409

        too_far = await client.put(
            f"/api/borrowing/detail/{detail['detail_id']}/extend",
            json={"new_due_date": "2999-01-01T00:00:00"},
            headers=reader_headers,
        )
        assert too_far.status_code == 400

        returned = await client.put(
            f"/api/borrowing/detail/{detail['detail_id']}/return",
            json={"notes": "Thanks"},
            headers=reader_headers,
        )

        # Assert
        assert returned.status_code == 200
        assert returned.json()["status"] == "Returned"
        available = await client.get("/api/book/count/available", headers=reader_headers)
        assert available.json() == {"count": 1}

    async def test_waiting_status_rejected(self, client, reader, librarian, create_book, create_request, auth_headers):
        book = await create_book()
        request = await create_request(reader, [book.book_id])

        response = await client.put(
            f"/api/borrowing/{request.request_id}/status",
            json={"status": "Waiting"},
            headers=auth_headers(librarian),
        )

        assert response.status_code == 400

    async def test_due_days_beyond_limit(self, client, reader, librarian, create_book, create_request, auth_headers):
        book = await create_book()
        request = await create_request(reader, [book.book_id])

        response = await client.put(
            f"/api/borrowing/{request.request_id}/status",
            json={"status": "Approved", "due_days": 999999999},
            headers=auth_headers(librarian),
        )

        assert response.status_code == 400
        assert "due_days" in response.json()["detail"]["details"]["errors"]

    async def test_reader_sees_only_own_requests(
        self, client, reader, create_user, create_book, create_request, auth_headers
    ):
        book = await create_book()
        request = await create_request(reader, [book.book_id])
        other = await create_user("otherreader")

        own = await client.get(f"/api/borrowing/user/{reader.id}", headers=auth_headers(reader))
        assert own.status_code == 200
        assert [r["request_id"] for r in own.json()] == [request.request_id]
        assert own.headers["X-Total-Count"] == "1"

        foreign = await client.get(f"/api/borrowing/{request.request_id}", headers=auth_headers(other))
        assert foreign.status_code == 403

    async def test_all_requests_for_staff(self, client, reader, librarian, create_book, create_request, auth_headers):
        book = await create_book()
        await create_request(reader, [book.book_id])

        response = await client.get("/api/borrowing/all", headers=auth_headers(librarian))

        assert response.status_code == 200
        body = response.json()
        assert body["total_count"] == 1
        assert len(body["results"]) == 1

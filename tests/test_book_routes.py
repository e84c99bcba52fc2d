"""HTTP tests for the /api/books endpoints.

Every test gets a fresh app (see conftest.py) whose store holds the two
sample books: 1 "1984" by George Orwell, 2 "The Hobbit" by J.R.R. Tolkien.
"""

from fastapi.testclient import TestClient


class TestListBooks:
    """GET /api/books"""

    def test_returns_seeded_books(self, client: TestClient) -> None:
        response = client.get("/api/books")

        assert response.status_code == 200
        assert response.json() == [
            {"id": 1, "title": "1984", "author": "George Orwell"},
            {"id": 2, "title": "The Hobbit", "author": "J.R.R. Tolkien"},
        ]

    def test_paginates(self, client: TestClient, store) -> None:
        for n in range(10):
            store.insert(title=f"Book {n}", author="Author")

        response = client.get("/api/books", params={"page": 2, "limit": 5})

        assert [b["id"] for b in response.json()] == [6, 7, 8, 9, 10]

    def test_non_numeric_params_use_defaults(self, client: TestClient, store) -> None:
        for n in range(12):
            store.insert(title=f"Book {n}", author="Author")

        response = client.get("/api/books", params={"page": "abc", "limit": "many"})

        assert response.status_code == 200
        assert [b["id"] for b in response.json()] == list(range(1, 11))

    def test_page_beyond_end_is_empty(self, client: TestClient) -> None:
        assert client.get("/api/books?page=3").json() == []


class TestSearchBooks:
    """GET /api/books/search"""

    def test_matches_title_case_insensitively(self, client: TestClient) -> None:
        response = client.get("/api/books/search", params={"title": "hobbit"})

        assert response.status_code == 200
        assert [b["title"] for b in response.json()] == ["The Hobbit"]

    def test_matches_author_substring(self, client: TestClient) -> None:
        response = client.get("/api/books/search", params={"author": "orw"})

        assert [b["id"] for b in response.json()] == [1]

    def test_without_criteria_returns_400(self, client: TestClient) -> None:
        response = client.get("/api/books/search")

        assert response.status_code == 400
        assert response.json() == {"error": "Please provide at least a title or author for search"}

    def test_no_match_returns_404(self, client: TestClient) -> None:
        response = client.get("/api/books/search", params={"title": "dune"})

        assert response.status_code == 404
        assert response.json() == {"error": "Books not found for search"}


class TestGetBook:
    """GET /api/books/{id}"""

    def test_returns_book(self, client: TestClient) -> None:
        response = client.get("/api/books/2")

        assert response.status_code == 200
        assert response.json()["title"] == "The Hobbit"

    def test_unknown_id_returns_404(self, client: TestClient) -> None:
        response = client.get("/api/books/99")

        assert response.status_code == 404
        assert response.json() == {"error": "Book not found"}

    def test_non_integer_id_returns_404(self, client: TestClient) -> None:
        assert client.get("/api/books/abc").status_code == 404


class TestCreateBook:
    """POST /api/books"""

    def test_requires_token(self, client: TestClient) -> None:
        response = client.post("/api/books", json={"title": "Dune", "author": "Frank Herbert"})

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized. No token provided."}

    def test_creates_book(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(
            "/api/books", json={"title": "Dune", "author": "Frank Herbert"}, headers=auth_headers
        )

        assert response.status_code == 201
        assert response.json() == {"id": 3, "title": "Dune", "author": "Frank Herbert"}
        assert client.get("/api/books/3").status_code == 200

    def test_rejects_explicit_id(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(
            "/api/books", json={"id": 10, "title": "Dune", "author": "Frank Herbert"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json() == {"error": "ID must not be provided when creating a book"}

    def test_rejects_missing_author(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post("/api/books", json={"title": "Dune"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Both title and author are required."}

    def test_rejects_duplicate(self, client: TestClient, auth_headers: dict) -> None:
        body = {"title": "Dune", "author": "Frank Herbert"}
        assert client.post("/api/books", json=body, headers=auth_headers).status_code == 201

        response = client.post(
            "/api/books", json={"title": "DUNE", "author": "frank herbert"}, headers=auth_headers
        )

        assert response.status_code == 409
        assert response.json() == {"error": "A book with the same title and author already exists"}

    def test_malformed_json_returns_400(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(
            "/api/books",
            content=b"{not json",
            headers={**auth_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request: JSON decode error"}

    def test_malformed_json_without_token_returns_401(self, client: TestClient) -> None:
        response = client.post(
            "/api/books", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized. No token provided."}

    def test_empty_body_returns_400(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post("/api/books", headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Both title and author are required."}

    def test_ids_increase_after_delete(
        self, client: TestClient, auth_headers: dict, admin_headers: dict
    ) -> None:
        assert client.delete("/api/books/2", headers=admin_headers).status_code == 204

        response = client.post(
            "/api/books", json={"title": "Dune", "author": "Frank Herbert"}, headers=auth_headers
        )

        assert response.json()["id"] == 3


class TestUpdateBook:
    """PUT /api/books/{id}"""

    def test_requires_token(self, client: TestClient) -> None:
        assert client.put("/api/books/1", json={"title": "x"}).status_code == 401

    def test_updates_fields(self, client: TestClient, auth_headers: dict) -> None:
        response = client.put("/api/books/1", json={"title": "Animal Farm"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"id": 1, "title": "Animal Farm", "author": "George Orwell"}

    def test_empty_title_keeps_existing(self, client: TestClient, auth_headers: dict) -> None:
        response = client.put(
            "/api/books/2", json={"title": "", "author": "Tolkien"}, headers=auth_headers
        )

        assert response.json() == {"id": 2, "title": "The Hobbit", "author": "Tolkien"}

    def test_matching_body_id_is_allowed(self, client: TestClient, auth_headers: dict) -> None:
        response = client.put("/api/books/1", json={"id": 1, "title": "x"}, headers=auth_headers)

        assert response.status_code == 200

    def test_changing_id_returns_400(self, client: TestClient, auth_headers: dict) -> None:
        response = client.put("/api/books/1", json={"id": 5, "title": "x"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Updating book ID is not allowed."}

    def test_unknown_id_returns_404(self, client: TestClient, auth_headers: dict) -> None:
        response = client.put("/api/books/99", json={"title": "x"}, headers=auth_headers)

        assert response.status_code == 404


class TestDeleteBooks:
    """DELETE /api/books/{id} and DELETE /api/books/reset"""

    def test_delete_requires_token(self, client: TestClient) -> None:
        assert client.delete("/api/books/1").status_code == 401

    def test_delete_requires_admin(self, client: TestClient, auth_headers: dict) -> None:
        response = client.delete("/api/books/1", headers=auth_headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden. Admin access required."}

    def test_admin_deletes_book(self, client: TestClient, admin_headers: dict) -> None:
        response = client.delete("/api/books/1", headers=admin_headers)

        assert response.status_code == 204
        assert response.content == b""
        assert client.get("/api/books/1").status_code == 404

    def test_delete_unknown_returns_404(self, client: TestClient, admin_headers: dict) -> None:
        assert client.delete("/api/books/99", headers=admin_headers).status_code == 404

    def test_reset_requires_admin(self, client: TestClient, auth_headers: dict) -> None:
        assert client.delete("/api/books/reset").status_code == 401
        assert client.delete("/api/books/reset", headers=auth_headers).status_code == 403

    def test_reset_empties_catalogue(self, client: TestClient, admin_headers: dict) -> None:
        response = client.delete("/api/books/reset", headers=admin_headers)

        assert response.status_code == 204
        assert client.get("/api/books").json() == []


def test_unknown_route_uses_error_shape(client: TestClient) -> None:
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert "error" in response.json()


def test_health_reports_book_count(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "books": 2}

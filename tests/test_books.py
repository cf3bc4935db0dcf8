"""Tests for book endpoints."""

import json

import pytest


def test_list_books_returns_seed(client):
    """Test listing the starter catalog."""
    response = client.get("/books")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    books = response.json()
    assert [b["title"] for b in books] == ["The Great Gatsby", "To Kill a Mockingbird", "1984"]
    book = books[0]
    assert book == {"id": 1, "title": "The Great Gatsby", "ratings": []}


def test_create_book_in_empty_catalog(empty_client):
    """Test creating the first book."""
    response = empty_client.post("/books", json={"title": "1984"})
    assert response.status_code == 201
    assert response.json() == {"id": 1, "title": "1984", "ratings": []}

    assert empty_client.get("/books").json() == [{"id": 1, "title": "1984", "ratings": []}]


def test_create_book_trims_title(client):
    response = client.post("/books", json={"title": "  New Book  "})
    assert response.status_code == 201
    assert response.json() == {"id": 4, "title": "New Book", "ratings": []}


@pytest.mark.parametrize("payload", [{}, {"title": ""}, {"title": "   "}, {"title": 42}])
def test_create_book_invalid_title(client, payload):
    """Test creating a book with a missing or blank title."""
    response = client.post("/books", json=payload)
    assert response.status_code == 400
    assert response.json() == {"error": "Title is required"}


def test_create_book_without_body(client):
    response = client.post("/books")
    assert response.status_code == 400
    assert response.json() == {"error": "Title is required"}


def test_create_book_duplicate_title(empty_client):
    """Test that titles are unique regardless of case."""
    assert empty_client.post("/books", json={"title": "Dune"}).status_code == 201

    response = empty_client.post("/books", json={"title": "dune"})
    assert response.status_code == 400
    assert response.json()["error"] == "Book with this title already exists"
    assert len(empty_client.get("/books").json()) == 1


def test_get_book(client):
    """Test getting a specific book."""
    response = client.get("/books/3")
    assert response.status_code == 200
    assert response.json()["title"] == "1984"


def test_get_book_not_found(client):
    """Test getting a non-existent book."""
    response = client.get("/books/999")
    assert response.status_code == 404
    assert response.json()["error"] == "Book not found"


def test_update_book(client):
    response = client.put("/books/1", json={"title": "The Great Gatsby (Annotated)"})
    assert response.status_code == 200
    assert response.json() == {"id": 1, "title": "The Great Gatsby (Annotated)", "ratings": []}
    assert client.get("/books/1").json()["title"] == "The Great Gatsby (Annotated)"


def test_update_book_duplicate_title(client):
    response = client.put("/books/1", json={"title": "1984"})
    assert response.status_code == 400
    assert client.get("/books/1").json()["title"] == "The Great Gatsby"


def test_update_book_blank_title(client):
    response = client.put("/books/1", json={"title": " "})
    assert response.status_code == 400
    assert response.json() == {"error": "Title is required"}


def test_update_book_not_found(client):
    response = client.put("/books/999", json={"title": "Anything"})
    assert response.status_code == 404


def test_delete_book(client):
    response = client.delete("/books/2")
    assert response.status_code == 204
    assert response.content == b""
    assert client.get("/books/2").status_code == 404


def test_delete_book_not_found(client):
    assert client.delete("/books/999").status_code == 404


def test_delete_then_create_reuses_max_id(client):
    assert client.delete("/books/3").status_code == 204

    response = client.post("/books", json={"title": "Brave New World"})
    assert response.json()["id"] == 3


def test_search_books(client):
    response = client.get("/books/search", params={"title": "KILL"})
    assert response.status_code == 200
    assert [b["title"] for b in response.json()] == ["To Kill a Mockingbird"]


def test_search_books_case_insensitive(client):
    lower = client.get("/books/search", params={"title": "the"}).json()
    upper = client.get("/books/search", params={"title": "THE"}).json()
    assert lower == upper
    assert [b["id"] for b in lower] == [1]


def test_search_books_no_match(client):
    response = client.get("/books/search", params={"title": "zzz"})
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.parametrize("params", [{}, {"title": ""}, {"title": "  "}])
def test_search_books_requires_title(client, params):
    response = client.get("/books/search", params=params)
    assert response.status_code == 400
    assert response.json() == {"error": "Title query parameter is required"}


def test_rate_book(client):
    response = client.post("/books/1/rate", json={"rating": 5})
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Rating added successfully"
    assert data["book"] == {"id": 1, "title": "The Great Gatsby", "ratings": [5]}

    # persisted
    assert client.get("/books/1").json()["ratings"] == [5]


@pytest.mark.parametrize("rating", [0, 6, 4.5, "5", "abc", None, True])
def test_rate_book_invalid_rating(client, rating):
    response = client.post("/books/1/rate", json={"rating": rating})
    assert response.status_code == 400
    assert response.json() == {"error": "Rating must be an integer between 1 and 5"}
    assert client.get("/books/1").json()["ratings"] == []


def test_rate_book_not_found(client):
    response = client.post("/books/999/rate", json={"rating": 3})
    assert response.status_code == 404
    assert response.json() == {"error": "Book not found"}


def test_rate_missing_book_with_bad_rating_is_not_found(client):
    response = client.post("/books/999/rate", json={"rating": 9})
    assert response.status_code == 404


def test_rate_book_accepts_integral_float(client):
    response = client.post("/books/1/rate", json={"rating": 5.0})
    assert response.status_code == 200
    assert response.json()["book"]["ratings"] == [5]


def test_create_book_accepts_long_title(empty_client):
    title = "x" * 2000
    response = empty_client.post("/books", json={"title": title})
    assert response.status_code == 201
    assert response.json()["title"] == title


def test_stats_empty_ratings(client):
    response = client.get("/books/stats")
    assert response.status_code == 200
    assert response.json() == {"totalBooks": 3, "totalRatings": 0, "averageRating": 0}


def test_stats_with_ratings(empty_client):
    first = empty_client.post("/books", json={"title": "First"}).json()
    second = empty_client.post("/books", json={"title": "Second"}).json()
    for book_id, rating in [(first["id"], 5), (first["id"], 4), (second["id"], 3)]:
        assert empty_client.post(f"/books/{book_id}/rate", json={"rating": rating}).status_code == 200

    response = empty_client.get("/books/stats")
    assert response.json() == {"totalBooks": 2, "totalRatings": 3, "averageRating": 4.0}


def test_data_file_holds_full_catalog(client, data_file):
    client.post("/books", json={"title": "Dune"})
    client.post("/books/4/rate", json={"rating": 2})

    stored = json.loads(data_file.read_text(encoding="utf-8"))
    assert stored[-1] == {"id": 4, "title": "Dune", "ratings": [2]}
    assert len(stored) == 4


def test_corrupt_data_file_lists_empty_but_rejects_writes(client, data_file):
    data_file.write_text("not json", encoding="utf-8")

    assert client.get("/books").json() == []

    response = client.post("/books", json={"title": "Dune"})
    assert response.status_code == 500
    assert data_file.read_text(encoding="utf-8") == "not json"


def test_corrupt_data_file_reads_as_empty_catalog(client, data_file):
    data_file.write_text("not json", encoding="utf-8")

    stats = client.get("/books/stats")
    assert stats.status_code == 200
    assert stats.json() == {"totalBooks": 0, "totalRatings": 0, "averageRating": 0}

    search = client.get("/books/search", params={"title": "a"})
    assert search.status_code == 200
    assert search.json() == []

    assert client.get("/books/1").status_code == 404


def test_invalid_book_id(client):
    response = client.get("/books/abc")
    assert response.status_code == 400
    assert response.json() == {"error": "Book ID must be an integer"}


def test_unknown_route_uses_error_body(client):
    response = client.get("/nope")
    assert response.status_code == 404
    assert "error" in response.json()

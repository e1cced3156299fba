"""HTTP tests for the product and review endpoints."""


def test_ping(client):
    response = client.get("/ping")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert "X-Request-ID" in response.headers


def test_submit_and_read_back(client, product):
    first = client.post(
        f"/api/products/{product.id}/reviews",
        json={"reviewerName": "Alice", "comment": "Great product overall", "rating": 5},
    )
    assert first.status_code == 201
    body = first.json()
    assert body["reviewerName"] == "Alice"
    assert body["productId"] == product.id
    assert body["helpfulCount"] == 0

    second = client.post(
        f"/api/products/{product.id}/reviews",
        json={"comment": "Sound is fine, fit is not", "rating": 3},
    )
    assert second.status_code == 201
    assert second.json()["reviewerName"] == "Anonymous"

    detail = client.get(f"/api/products/{product.id}").json()
    assert detail["reviewCount"] == 2
    assert detail["averageRating"] == 4.0
    assert detail["ratingBreakdown"] == {"1": 0, "2": 0, "3": 1, "4": 0, "5": 1}


def test_product_list_page_shape(client, product):
    response = client.get("/api/products", params={"category": "Electronics", "size": 5, "sort": "name,asc"})
    assert response.status_code == 200
    page = response.json()
    assert page["totalElements"] == 1
    assert page["totalPages"] == 1
    assert page["last"] is True
    assert page["size"] == 5
    assert "ratingBreakdown" not in page["content"][0]
    assert page["content"][0]["averageRating"] == 0.0


def test_review_listing_with_filter(client, product):
    for rating in (5, 2, 5):
        client.post(
            f"/api/products/{product.id}/reviews",
            json={"reviewerName": "Sam", "comment": "Honest review text here", "rating": rating},
        )

    page = client.get(f"/api/products/{product.id}/reviews", params={"rating": 5}).json()
    assert page["totalElements"] == 2
    assert {r["rating"] for r in page["content"]} == {5}


def test_validation_errors_are_400(client, product):
    url = f"/api/products/{product.id}/reviews"

    bad_rating = client.post(url, json={"comment": "Great product overall", "rating": 6})
    assert bad_rating.status_code == 400
    assert bad_rating.json()["error"] == "ValidationError"

    short_comment = client.post(url, json={"comment": "meh", "rating": 3})
    assert short_comment.status_code == 400

    missing_rating = client.post(url, json={"comment": "Great product overall"})
    assert missing_rating.status_code == 400

    bad_sort = client.get("/api/products", params={"sort": "secret,asc"})
    assert bad_sort.status_code == 400

    # nothing was stored
    assert client.get(f"/api/products/{product.id}").json()["reviewCount"] == 0


def test_not_found_is_404(client):
    response = client.get("/api/products/999")
    assert response.status_code == 404
    assert response.json()["message"] == "Product 999 not found"

    assert client.get("/api/products/999/reviews").status_code == 404
    assert client.post(
        "/api/products/999/reviews",
        json={"comment": "Great product overall", "rating": 5},
    ).status_code == 404
    assert client.put("/api/reviews/999/helpful").status_code == 404


def test_mark_helpful_on_both_paths(client, product):
    review = client.post(
        f"/api/products/{product.id}/reviews",
        json={"reviewerName": "Alice", "comment": "Great product overall", "rating": 5},
    ).json()

    response = client.put(f"/api/reviews/{review['id']}/helpful")
    assert response.status_code == 200
    assert response.json()["helpfulCount"] == 1

    response = client.put(f"/api/products/reviews/{review['id']}/helpful")
    assert response.json()["helpfulCount"] == 2


def test_storage_failure_is_500(client, product, monkeypatch):
    from sqlalchemy.exc import OperationalError
    from productreview.review_repository import ReviewRepository

    def unreachable(self, product_id):
        raise OperationalError("SELECT reviews", {}, Exception("disk I/O error"))

    monkeypatch.setattr(ReviewRepository, "find_by_product", unreachable)
    response = client.post(
        f"/api/products/{product.id}/reviews",
        json={"comment": "Great product overall", "rating": 5},
    )
    assert response.status_code == 500
    assert response.json()["error"] == "StorageError"
    monkeypatch.undo()

    reviews = client.get(f"/api/products/{product.id}/reviews").json()
    assert reviews["totalElements"] == 0

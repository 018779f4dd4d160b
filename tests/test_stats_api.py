def test_stats(client):
    client.post("/expenses", json={"amount": 100.50, "category": "Food", "description": "a", "date": "2024-01-10"})
    client.post("/expenses", json={"amount": 50.00, "category": "Transport", "description": "b", "date": "2024-01-15"})
    client.post("/expenses", json={"amount": 20.00, "category": "Food", "description": "c", "date": "2024-02-01"})

    response = client.get("/stats")

    assert response.status_code == 200

    data = response.json()
    assert data["monthly"] == [
        {"month": "2024-01", "total": 150.5, "count": 2},
        {"month": "2024-02", "total": 20.0, "count": 1},
    ]
    assert {"category": "Food", "total": 120.5, "count": 2} in data["categories"]
    assert len(data["categories"]) == 2


def test_stats_ignore_pagination(client):
    for _ in range(3):
        client.post("/expenses", json={"amount": 1, "category": "Other", "description": "x", "date": "2024-05-05"})

    client.get("/expenses", params={"page": 1, "limit": 1})
    data = client.get("/stats").json()

    assert data["monthly"] == [{"month": "2024-05", "total": 3.0, "count": 3}]


def test_categories(client):
    response = client.get("/categories")

    assert response.status_code == 200
    assert response.json() == [
        "Food",
        "Transport",
        "Entertainment",
        "Shopping",
        "Bills",
        "Healthcare",
        "Education",
        "Other",
    ]


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "timestamp" in data

# backend/tests/test_logs.py


def test_actions_are_logged_per_owner(client, make_category, other_headers):
    cat = make_category(name="Logged")
    client.put(f"/api/categories/{cat['id']}", json={"description": "changed"})

    resp = client.get("/api/logs", params={"resource": "categories"})
    assert resp.status_code == 200
    actions = [entry["action"] for entry in resp.json()["data"]]
    assert actions == ["CATEGORY_UPDATE", "CATEGORY_CREATE"]
    assert resp.json()["data"][1]["meta"] == {"id": cat["id"]}

    resp = client.get("/api/logs", params={"resource": "categories"}, headers=other_headers)
    assert resp.json()["count"] == 0


def test_paging(client, make_category):
    for _ in range(3):
        make_category()
    resp = client.get("/api/logs", params={"resource": "categories", "pageSize": 2})
    assert resp.json()["count"] == 3
    assert len(resp.json()["data"]) == 2

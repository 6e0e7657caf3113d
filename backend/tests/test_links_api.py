# backend/tests/test_links_api.py
from __future__ import annotations


def _setup(client) -> tuple[str, str]:
    pf = client.post("/api/portfolios", json={"name": "P"}).json()
    prog = client.post("/api/programs", json={"name": "Pr", "portfolioId": pf["id"]}).json()
    pj = client.post("/api/projects", json={"title": "J", "programId": prog["id"]}).json()
    pd = client.post("/api/products", json={"name": "App", "programId": prog["id"]}).json()
    return pj["id"], pd["id"]


def test_project_product_links(client):
    project_id, product_id = _setup(client)

    r = client.post("/api/project-products", json={"projectId": project_id, "productId": product_id})
    assert r.status_code == 201
    link = r.json()
    assert link["projectId"] == project_id

    r = client.post("/api/project-products", json={"projectId": project_id, "productId": product_id})
    assert r.status_code == 409

    r = client.get("/api/project-products", params={"projectId": project_id})
    assert [l["id"] for l in r.json()] == [link["id"]]
    assert client.get("/api/project-products", params={"productId": "other"}).json() == []

    assert client.delete(f"/api/project-products/{link['id']}").status_code == 204
    assert client.get("/api/project-products").json() == []


def test_assignments(client):
    project_id, _ = _setup(client)
    client.get("/api/auth/user", headers={"X-User-Id": "bob"})

    r = client.post("/api/assignments", json={"projectId": project_id, "userId": "bob", "role": "team_member"})
    assert r.status_code == 201
    a = r.json()
    assert a["userId"] == "bob"
    assert a["assignedAt"]

    r = client.get(f"/api/projects/{project_id}/assignments")
    assert [x["id"] for x in r.json()] == [a["id"]]

    r = client.post("/api/assignments", json={"projectId": project_id, "userId": "bob", "role": ""})
    assert r.status_code == 400

    assert client.delete(f"/api/assignments/{a['id']}").status_code == 204
    assert client.get(f"/api/projects/{project_id}/assignments").json() == []

    audit = client.get("/api/audit", params={"entityType": "assignment"}).json()
    assert {row["changeType"] for row in audit} == {"created", "deleted"}


def test_products_accept_put_and_patch(client):
    _, product_id = _setup(client)

    r = client.patch(f"/api/products/{product_id}", json={"status": "active"})
    assert r.status_code == 200
    assert r.json()["status"] == "active"
    assert r.json()["version"] == "1.0.0"

    r = client.put(f"/api/products/{product_id}", json={"version": "2.0.0"})
    assert r.status_code == 200
    assert r.json()["status"] == "active"
    assert r.json()["version"] == "2.0.0"

    audit = client.get("/api/audit", params={"entityId": product_id}).json()
    assert sorted(row["changeType"] for row in audit) == ["created", "status_changed", "updated"]

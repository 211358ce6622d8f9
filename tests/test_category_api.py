def _children(client, category_id):
    res = client.get(f"/api/categories/{category_id}")
    assert res.status_code == 200, res.text
    return [(c["name"], c["position"]) for c in res.json()["subcategories"]]


def test_create_root_and_children(client, make_category) -> None:
    root = make_category("Languages")
    python = make_category("Python", root["id"])
    rust = make_category("Rust", root["id"])

    assert root["position"] == 0
    assert root["path"] == str(root["id"])
    assert root["level"] == 0
    assert python["path"] == f"{root['id']}/{python['id']}"
    assert (python["position"], rust["position"]) == (0, 1)
    assert rust["level"] == 1


def test_create_returns_location_header(client) -> None:
    res = client.post("/api/categories", json={"name": "Tools"})

    assert res.status_code == 201
    assert res.headers["location"] == f"/api/categories/{res.json()['id']}"


def test_list_returns_nested_tree(client, make_category) -> None:
    root = make_category("Languages")
    python = make_category("Python", root["id"])
    make_category("Django", python["id"])
    make_category("Tools")

    res = client.get("/api/categories")

    assert res.status_code == 200
    tree = res.json()
    assert [(c["name"], c["position"]) for c in tree] == [("Languages", 0), ("Tools", 1)]
    assert tree[0]["subcategories"][0]["name"] == "Python"
    assert tree[0]["subcategories"][0]["subcategories"][0]["name"] == "Django"
    assert tree[0]["is_empty"] is False
    assert tree[1]["is_empty"] is True


def test_create_with_unknown_parent_is_rejected(client) -> None:
    res = client.post("/api/categories", json={"name": "Orphan", "parent_category_id": 999})

    assert res.status_code == 400
    assert res.json()["detail"] == "Parent category not found"


def test_create_with_blank_name_is_rejected(client) -> None:
    res = client.post("/api/categories", json={"name": "   "})

    assert res.status_code == 400


def test_get_missing_category(client) -> None:
    res = client.get("/api/categories/12345")

    assert res.status_code == 404
    assert res.json()["error"] == "CategoryNotFound"


def test_rearrange_reorders_siblings(client, make_category) -> None:
    root = make_category("Root")
    ids = {name: make_category(name, root["id"])["id"] for name in "ABCD"}

    res = client.patch(f"/api/categories/{ids['C']}/position", json={"new_position": 0})

    assert res.status_code == 204
    assert _children(client, root["id"]) == [("C", 0), ("A", 1), ("B", 2), ("D", 3)]


def test_rearrange_out_of_range_is_rejected(client, make_category) -> None:
    root = make_category("Root")
    a = make_category("A", root["id"])
    make_category("B", root["id"])

    for bad in (-1, 2):
        res = client.patch(f"/api/categories/{a['id']}/position", json={"new_position": bad})
        assert res.status_code == 400
        assert res.json()["error"] == "OutOfRange"
    assert _children(client, root["id"]) == [("A", 0), ("B", 1)]


def test_rearrange_root_is_rejected(client, make_category) -> None:
    root = make_category("Root")

    res = client.patch(f"/api/categories/{root['id']}/position", json={"new_position": 0})

    assert res.status_code == 409
    assert res.json()["detail"] == "Cannot rearrange root category"


def test_rename_updates_name(client, make_category) -> None:
    root = make_category("Root")
    child = make_category("Old", root["id"])

    res = client.put(f"/api/categories/{child['id']}", json={"name": "New"})

    assert res.status_code == 204
    body = client.get(f"/api/categories/{child['id']}").json()
    assert body["name"] == "New"
    assert body["path"] == child["path"]


def test_rename_with_whitespace_is_rejected(client, make_category) -> None:
    root = make_category("Root")

    res = client.put(f"/api/categories/{root['id']}", json={"name": "   "})

    assert res.status_code == 400
    assert client.get(f"/api/categories/{root['id']}").json()["name"] == "Root"


def test_delete_reindexes_siblings(client, make_category) -> None:
    root = make_category("Root")
    ids = {name: make_category(name, root["id"])["id"] for name in "ABC"}

    res = client.delete(f"/api/categories/{ids['B']}")

    assert res.status_code == 204
    assert _children(client, root["id"]) == [("A", 0), ("C", 1)]
    assert client.get(f"/api/categories/{ids['B']}").status_code == 404


def test_delete_non_empty_category_is_rejected(client, make_category) -> None:
    root = make_category("Root")
    a = make_category("A", root["id"])
    make_category("A1", a["id"])
    make_category("B", root["id"])

    res = client.delete(f"/api/categories/{a['id']}")

    assert res.status_code == 409
    assert res.json()["detail"] == "Cannot delete non-empty category"
    assert _children(client, root["id"]) == [("A", 0), ("B", 1)]


def test_delete_category_holding_artifact_is_rejected(client, make_category, make_artifact) -> None:
    root = make_category("Root")
    docs = make_category("Docs", root["id"])
    make_artifact(docs["id"])

    res = client.delete(f"/api/categories/{docs['id']}")

    assert res.status_code == 409
    body = client.get(f"/api/categories/{docs['id']}").json()
    assert body["artifacts_count"] == 1
    assert body["is_empty"] is False


def test_delete_root_reindexes_roots(client, make_category) -> None:
    first = make_category("First")
    make_category("Second")
    make_category("Third")

    assert client.delete(f"/api/categories/{first['id']}").status_code == 204

    roots = client.get("/api/categories").json()
    assert [(c["name"], c["position"]) for c in roots] == [("Second", 0), ("Third", 1)]

from conftest import auth_headers
from app.models.content_block import ContentBlock

def _my_page(client, user):
    return client.get("/pages/me", headers=auth_headers(user)).json()

def _save(client, user, page_id, blocks):
    return client.put(f"/pages/{page_id}/blocks", headers=auth_headers(user), json={"blocks": blocks})

# ========== SYNC DES BLOCKS ==========
def test_save_blocks_create_update_delete(client, alice):
    page = _my_page(client, alice)
    starter_id = page["content_blocks"][0]["id"]

    response = _save(client, alice, page["id"], [
        {"id": None, "type": "HEADER", "position": 0, "title": "Alice", "text_content": "Hi there"},
        {"id": starter_id, "type": "LINK", "position": 1, "title": "Blog", "url": "https://blog.example.com"},
        {"type": "TEXT", "position": 2, "title": "About", "text_content": "Some text"},
    ])
    assert response.status_code == 200
    data = response.json()
    assert (data["created"], data["updated"], data["deleted"]) == (2, 1, 0)
    assert [b["type"] for b in data["blocks"]] == ["HEADER", "LINK", "TEXT"]
    assert [b["position"] for b in data["blocks"]] == [0, 1, 2]
    assert data["blocks"][1]["id"] == starter_id
    assert data["blocks"][1]["title"] == "Blog"

    # suppression: on renvoie seulement le TEXT
    text_id = data["blocks"][2]["id"]
    response = _save(client, alice, page["id"], [
        {"id": text_id, "type": "TEXT", "position": 2, "title": "About", "text_content": "Some text"},
    ])
    data = response.json()
    assert (data["created"], data["updated"], data["deleted"]) == (0, 1, 2)
    assert len(data["blocks"]) == 1
    assert data["blocks"][0]["position"] == 0  # renumérotation

def test_save_blocks_empty_list_deletes_everything(client, alice):
    page = _my_page(client, alice)
    response = _save(client, alice, page["id"], [])
    assert response.status_code == 200
    assert response.json()["deleted"] == 1
    assert _my_page(client, alice)["content_blocks"] == []

def test_save_blocks_positions_follow_submitted_order(client, alice):
    page = _my_page(client, alice)
    response = _save(client, alice, page["id"], [
        {"type": "TEXT", "position": 7, "text_content": "last"},
        {"type": "TEXT", "position": 3, "text_content": "first"},
        {"type": "TEXT", "position": 5, "text_content": "middle"},
    ])
    blocks = response.json()["blocks"]
    assert [b["text_content"] for b in blocks] == ["first", "middle", "last"]
    assert [b["position"] for b in blocks] == [0, 1, 2]

def test_save_blocks_cleans_type_specific_fields(client, alice):
    page = _my_page(client, alice)
    response = _save(client, alice, page["id"], [
        {"type": "TEXT", "position": 0, "title": "", "url": "https://ignored", "icon": "Github", "text_content": "Body"},
        {"type": "LINK", "position": 1, "title": "Site", "url": "https://site", "icon": "Globe", "text_content": "ignored"},
    ])
    text, link = response.json()["blocks"]
    assert text["title"] is None
    assert text["url"] is None
    assert text["icon"] is None
    assert text["text_content"] == "Body"
    assert link["icon"] == "Globe"
    assert link["text_content"] is None

def test_save_blocks_foreign_block_id(client, alice, bob):
    alice_page = _my_page(client, alice)
    bob_page = _my_page(client, bob)
    bob_block_id = bob_page["content_blocks"][0]["id"]

    response = _save(client, alice, alice_page["id"], [
        {"id": bob_block_id, "type": "LINK", "position": 0, "title": "Stolen", "url": "https://x"},
    ])
    assert response.status_code == 404

    # rien n'a bougé
    assert _my_page(client, alice)["content_blocks"][0]["title"] == "My Website"
    assert _my_page(client, bob)["content_blocks"][0]["title"] == "My Website"

def test_save_blocks_duplicate_ids(client, alice):
    page = _my_page(client, alice)
    block_id = page["content_blocks"][0]["id"]
    response = _save(client, alice, page["id"], [
        {"id": block_id, "type": "LINK", "position": 0},
        {"id": block_id, "type": "LINK", "position": 1},
    ])
    assert response.status_code == 422

def test_save_blocks_invalid_type(client, alice):
    page = _my_page(client, alice)
    response = _save(client, alice, page["id"], [{"type": "VIDEO", "position": 0}])
    assert response.status_code == 422

def test_save_blocks_other_users_page(client, db, alice, bob):
    alice_page = _my_page(client, alice)
    response = _save(client, bob, alice_page["id"], [])
    assert response.status_code == 403
    assert db.query(ContentBlock).filter(ContentBlock.page_id == alice_page["id"]).count() == 1

# ========== CLICS ==========
def test_click_increments_link(client, db, alice):
    page = _my_page(client, alice)
    block_id = page["content_blocks"][0]["id"]

    for _ in range(3):
        response = client.post(f"/blocks/{block_id}/click")
        assert response.status_code == 200
        assert response.json() == {"success": True, "error": None}

    block = db.query(ContentBlock).filter(ContentBlock.id == block_id).first()
    assert block.clicks == 3

def test_click_on_text_block_is_soft_failure(client, db, alice):
    page = _my_page(client, alice)
    text_id = _save(client, alice, page["id"], [{"type": "TEXT", "position": 0, "text_content": "hi"}]).json()["blocks"][0]["id"]

    response = client.post(f"/blocks/{text_id}/click")
    assert response.status_code == 200
    assert response.json()["success"] is False
    assert db.query(ContentBlock).filter(ContentBlock.id == text_id).first().clicks == 0

def test_click_on_missing_block_is_soft_failure(client):
    response = client.post("/blocks/12345/click")
    assert response.status_code == 200
    assert response.json() == {"success": False, "error": "Not a link block or block not found."}

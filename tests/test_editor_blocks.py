import random
import pytest
from app.editor.blocks import (
    EditorBlock,
    LocalIdGenerator,
    Pending,
    Persisted,
    add_block,
    delete_block,
    normalize_positions,
    reorder_blocks,
    update_block_field,
)
from app.models.content_block import ContentType

def make_blocks(count):
    return [EditorBlock(ref=Persisted(i + 1), type=ContentType.LINK, position=i, title=f"Link {i + 1}") for i in range(count)]

def refs(blocks):
    return [block.ref for block in blocks]

def assert_contiguous(blocks):
    assert [block.position for block in blocks] == list(range(len(blocks)))

# ========== REORDER ==========
def test_reorder_moves_down():
    blocks = make_blocks(4)
    result = reorder_blocks(blocks, Persisted(1), Persisted(3))
    assert refs(result) == [Persisted(2), Persisted(3), Persisted(1), Persisted(4)]
    assert_contiguous(result)

def test_reorder_moves_up():
    blocks = make_blocks(4)
    result = reorder_blocks(blocks, Persisted(4), Persisted(1))
    assert refs(result) == [Persisted(4), Persisted(1), Persisted(2), Persisted(3)]
    assert_contiguous(result)

def test_reorder_to_last_position():
    blocks = make_blocks(3)
    result = reorder_blocks(blocks, Persisted(1), Persisted(3))
    assert refs(result) == [Persisted(2), Persisted(3), Persisted(1)]

def test_reorder_same_block_is_noop():
    blocks = make_blocks(3)
    assert reorder_blocks(blocks, Persisted(2), Persisted(2)) == blocks

def test_reorder_missing_block_is_noop():
    blocks = make_blocks(3)
    assert reorder_blocks(blocks, Persisted(99), Persisted(1)) == blocks
    assert reorder_blocks(blocks, Persisted(1), Pending("local-1")) == blocks

def test_reorder_empty_sequence():
    assert reorder_blocks([], Persisted(1), Persisted(2)) == []

def test_reorder_does_not_mutate_input():
    blocks = make_blocks(3)
    snapshot = list(blocks)
    reorder_blocks(blocks, Persisted(1), Persisted(3))
    assert blocks == snapshot

# ========== ADD / DELETE ==========
def test_add_link_appends():
    blocks = make_blocks(2)
    result = add_block(blocks, ContentType.LINK, Pending("local-1"))
    assert result[-1].ref == Pending("local-1")
    assert result[-1].position == 2
    assert result[-1].title == "New Link"
    assert result[-1].url == "https://"
    assert result[-1].is_pending

def test_add_text_to_empty():
    result = add_block([], ContentType.TEXT, Pending("local-1"))
    assert len(result) == 1
    assert result[0].position == 0
    assert result[0].text_content == "Start writing your text here..."

def test_add_header_inserts_first_and_shifts():
    blocks = make_blocks(3)
    result = add_block(blocks, ContentType.HEADER, Pending("local-1"))
    assert result[0].ref == Pending("local-1")
    assert result[0].position == 0
    assert result[0].type == ContentType.HEADER
    for before, after in zip(blocks, result[1:]):
        assert after.ref == before.ref
        assert after.position == before.position + 1

def test_add_block_accepts_string_type():
    result = add_block([], "TEXT", Pending("local-1"))
    assert result[0].type == ContentType.TEXT

def test_delete_renormalizes():
    blocks = make_blocks(4)
    result = delete_block(blocks, Persisted(2))
    assert refs(result) == [Persisted(1), Persisted(3), Persisted(4)]
    assert_contiguous(result)

def test_delete_only_block():
    assert delete_block(make_blocks(1), Persisted(1)) == []

def test_delete_missing_block():
    blocks = make_blocks(2)
    assert delete_block(blocks, Persisted(5)) == blocks

def test_normalize_positions():
    blocks = [EditorBlock(ref=Persisted(i), type=ContentType.TEXT, position=p) for i, p in enumerate([4, 4, 9])]
    assert_contiguous(normalize_positions(blocks))

# ========== UPDATE FIELD ==========
def test_update_block_field():
    blocks = make_blocks(2)
    result = update_block_field(blocks, Persisted(2), "url", "https://new")
    assert result[1].url == "https://new"
    assert result[0] == blocks[0]

def test_update_block_field_unknown_field():
    with pytest.raises(ValueError):
        update_block_field(make_blocks(1), Persisted(1), "clicks", 10)

# ========== IDS ==========
def test_local_id_generator():
    new_ref = LocalIdGenerator()
    assert new_ref() == Pending("local-1")
    assert new_ref() == Pending("local-2")

def test_payload_marks_pending_blocks_without_id():
    pending = add_block([], ContentType.LINK, Pending("local-1"))[0]
    persisted = make_blocks(1)[0]
    assert pending.to_payload()["id"] is None
    assert persisted.to_payload()["id"] == 1
    assert persisted.to_payload()["type"] == "LINK"

# ========== PROPRIÉTÉ: positions toujours 0..N-1 ==========
def test_random_operation_sequences_keep_positions_contiguous():
    rng = random.Random(1234)
    new_ref = LocalIdGenerator()
    for _ in range(200):
        blocks = make_blocks(rng.randint(0, 4))
        for _ in range(30):
            operation = rng.choice(["add", "delete", "reorder"])
            if operation == "add":
                blocks = add_block(blocks, rng.choice(list(ContentType)), new_ref())
            elif operation == "delete" and blocks:
                blocks = delete_block(blocks, rng.choice(blocks).ref)
            elif operation == "reorder" and blocks:
                blocks = reorder_blocks(blocks, rng.choice(blocks).ref, rng.choice(blocks).ref)
            assert_contiguous(blocks)
            assert len(set(refs(blocks))) == len(blocks)

from fzmatch.cache import CHUNK_SIZE, ChunkCache
from fzmatch.chunklist import Chunk, ChunkList, count_items
from fzmatch.item import Item


def make_list(cache=None):
    return ChunkList(cache or ChunkCache(), lambda data: Item(text=data))


def test_chunk_list():
    cl = make_list()

    snapshot, count, _ = cl.snapshot(0)
    assert snapshot == []
    assert count == 0

    assert cl.push("hello")
    assert cl.push("world")

    assert snapshot == []

    snapshot, count, _ = cl.snapshot(0)
    assert len(snapshot) == 1
    assert count == 2

    chunk1 = snapshot[0]
    assert chunk1.count == 2
    assert [item.text for item in chunk1.items] == ["hello", "world"]
    assert not chunk1.is_full()

    for i in range(CHUNK_SIZE * 2):
        cl.push(f"item {i}")

    assert len(snapshot) == 1

    snapshot, count, _ = cl.snapshot(0)
    assert len(snapshot) == 3
    assert snapshot[0].is_full()
    assert snapshot[1].is_full()
    assert not snapshot[2].is_full()
    assert count == CHUNK_SIZE * 2 + 2
    assert snapshot[2].count == 2

    cl.push("hello")
    cl.push("world")

    assert snapshot[-1].count == 2


def test_chunk_list_tail():
    cl = make_list()
    total = CHUNK_SIZE * 2 + CHUNK_SIZE // 2
    for i in range(total):
        cl.push(f"item {i}")

    snapshot, count, changed = cl.snapshot(0)
    assert (count, count_items(snapshot), changed) == (total, total, False)

    tail = CHUNK_SIZE + CHUNK_SIZE // 2
    snapshot, count, changed = cl.snapshot(tail)
    assert (count, count_items(snapshot), changed) == (tail, tail, True)

    snapshot, count, changed = cl.snapshot(tail)
    assert (count, count_items(snapshot), changed) == (tail, tail, False)

    snapshot, count, changed = cl.snapshot(0)
    assert (count, count_items(snapshot), changed) == (tail, tail, False)

    tail = CHUNK_SIZE // 2
    snapshot, count, changed = cl.snapshot(tail)
    assert (count, count_items(snapshot), changed) == (tail, tail, True)
    assert snapshot[0].items[0].text == f"item {total - tail}"
    assert snapshot[-1].items[-1].text == f"item {total - 1}"


def test_tail_trims_partial_chunk():
    cl = make_list()
    for i in range(CHUNK_SIZE * 2):
        cl.push(f"item {i}")
    snapshot, count, changed = cl.snapshot(CHUNK_SIZE + 10)
    assert changed
    assert count == CHUNK_SIZE + 10
    assert [chunk.count for chunk in snapshot] == [10, CHUNK_SIZE]
    assert snapshot[0].items[0].text == f"item {CHUNK_SIZE - 10}"


def test_tail_retires_cached_chunks():
    cache = ChunkCache()
    cl = make_list(cache)
    for i in range(CHUNK_SIZE * 2):
        cl.push(f"item {i}")
    chunks, _, _ = cl.snapshot(0)
    first = cl._chunks[0]
    cache.add(first, "foo", ["result"])
    assert cache.lookup(first, "foo") == ["result"]

    cl.snapshot(CHUNK_SIZE // 2)
    assert cache.lookup(first, "foo") is None


def test_rejected_items_are_not_added():
    cl = ChunkList(
        ChunkCache(), lambda data: None if data.startswith("#") else Item(text=data)
    )
    assert not cl.push("# header")
    assert cl.push("body")
    snapshot, count, _ = cl.snapshot(0)
    assert count == 1
    assert snapshot[0].items[0].text == "body"


def test_clear_empties_list():
    cl = make_list()
    cl.push("a")
    cl.clear()
    snapshot, count, changed = cl.snapshot(0)
    assert (snapshot, count, changed) == ([], 0, False)


def test_count_items_and_is_full():
    full = Chunk([Item(text=str(i)) for i in range(CHUNK_SIZE)])
    partial = Chunk([Item(text="x")])
    assert full.is_full()
    assert not partial.is_full()
    assert count_items([full, partial]) == CHUNK_SIZE + 1
    assert count_items([]) == 0
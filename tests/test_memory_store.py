"""Tests for the in-process object store."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from notestash.core import ObjectNotFoundError
from notestash.storage.base import ObjectStore
from notestash.storage.memory import InMemoryObjectStore


def test_satisfies_protocol() -> None:
    assert isinstance(InMemoryObjectStore(), ObjectStore)


def test_write_then_read_and_list() -> None:
    store = InMemoryObjectStore()
    with store.open_write("b", "a/1") as w:
        w.write(b"one")
    with store.open_write("other", "a/2") as w:
        w.write(b"two")
    with store.open_read("b", "a/1", offset=1) as r:
        assert r.read() == b"ne"
    assert list(store.list("b", "a/")) == ["a/1"]


def test_failed_write_leaves_no_object() -> None:
    store = InMemoryObjectStore()
    with pytest.raises(RuntimeError):
        with store.open_write("b", "k") as w:
            w.write(b"partial")
            raise RuntimeError("interrupted")
    with pytest.raises(ObjectNotFoundError):
        with store.open_read("b", "k"):
            pass


def test_close_while_writing(caplog: pytest.LogCaptureFixture) -> None:
    store = InMemoryObjectStore()

    def write(i: int) -> None:
        with store.open_write("b", f"k{i}") as w:
            w.write(b"x")

    with caplog.at_level(logging.DEBUG, logger="notestash.storage"):
        with ThreadPoolExecutor(max_workers=4) as pool:
            futures = [pool.submit(write, i) for i in range(50)]
            futures += [pool.submit(store.close) for _ in range(5)]
            for f in futures:
                f.result()
        store.close()
    assert len(list(store.list("b", ""))) == 50
    assert "Closed in-memory store (50 objects)" in caplog.text

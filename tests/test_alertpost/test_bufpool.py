"""Tests for BufferPool: reuse, reset, release on error."""

from __future__ import annotations

import pytest

from src.alertpost.bufpool import BufferPool


class TestBufferPool:
    def test_get_put_reuses_buffer(self) -> None:
        pool = BufferPool()
        buf = pool.get()
        pool.put(buf)
        assert pool.get() is buf

    def test_returned_buffer_is_empty(self) -> None:
        pool = BufferPool()
        buf = pool.get()
        buf.write(b"stale")
        pool.put(buf)
        again = pool.get()
        assert again.getvalue() == b""
        assert again.tell() == 0

    def test_outstanding_counts(self) -> None:
        pool = BufferPool()
        a = pool.get()
        b = pool.get()
        assert pool.outstanding == 2
        pool.put(a)
        pool.put(b)
        assert pool.outstanding == 0
        assert pool.idle == 2

    def test_idle_capped(self) -> None:
        pool = BufferPool(max_idle=1)
        a, b = pool.get(), pool.get()
        pool.put(a)
        pool.put(b)
        assert pool.idle == 1

    def test_borrow_releases(self) -> None:
        pool = BufferPool()
        with pool.borrow() as buf:
            buf.write(b"x")
            assert pool.outstanding == 1
        assert pool.outstanding == 0

    def test_borrow_releases_on_error(self) -> None:
        pool = BufferPool()
        with pytest.raises(RuntimeError):
            with pool.borrow():
                raise RuntimeError("boom")
        assert pool.outstanding == 0
        assert pool.idle == 1

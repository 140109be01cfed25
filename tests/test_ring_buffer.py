import pytest

from logpeek.services.ring_buffer import RingBuffer


class TestRingBuffer:
    def test_rejects_non_positive_capacity(self):
        with pytest.raises(ValueError):
            RingBuffer(0)

    def test_holds_items_in_push_order_until_full(self):
        buf = RingBuffer(3)
        buf.extend([1, 2])
        assert len(buf) == 2
        assert not buf.is_full()
        assert list(buf) == [1, 2]

    @pytest.mark.parametrize("pushes", [5, 6, 7, 30])
    def test_keeps_only_most_recent_capacity_items(self, pushes):
        buf = RingBuffer(5)
        buf.extend(range(pushes))
        assert len(buf) == 5
        assert buf.is_full()
        assert list(buf) == list(range(pushes - 5, pushes))

    def test_indexing_after_wraparound(self):
        buf = RingBuffer(3)
        buf.extend(range(5))
        assert buf[0] == 2
        assert buf[2] == 4
        assert buf[-1] == 4
        assert list(reversed(buf)) == [4, 3, 2]
        with pytest.raises(IndexError):
            buf[3]

    def test_capacity_one(self):
        buf = RingBuffer(1)
        buf.extend("abc")
        assert list(buf) == ["c"]

from logpeek.services.file_cache import FileCache
from logpeek.services.registry import ApplicationRegistry


class TestApplicationRegistry:
    def test_assigns_dense_handles_in_first_seen_order(self):
        registry = ApplicationRegistry()
        assert registry.resolve("api") == 0
        assert registry.resolve("worker") == 1
        assert registry.resolve("api") == 0
        assert registry.names() == ["api", "worker"]
        assert registry.name_of(1) == "worker"
        assert len(registry) == 2

    def test_handles_for_drops_unknown_names(self):
        registry = ApplicationRegistry()
        registry.resolve("a")
        registry.resolve("b")
        assert registry.handles_for(["b", "nope", "a", "b"]) == [0, 1]
        assert registry.handles_for(["nope"]) == []
        assert registry.handle_of("nope") is None


class TestFileCache:
    def test_unseen_file_is_processed_from_the_start(self):
        cache = FileCache()
        assert cache.should_process("/logs/a.log", 100)
        assert cache.lines_to_skip("/logs/a.log") == 0

    def test_only_strictly_newer_mtime_is_processed(self):
        cache = FileCache()
        cache.record("/logs/a.log", 100, 12)
        assert not cache.should_process("/logs/a.log", 99)
        assert not cache.should_process("/logs/a.log", 100)
        assert cache.should_process("/logs/a.log", 101)
        assert cache.lines_to_skip("/logs/a.log") == 12

    def test_seeded_entry_without_mtime_is_always_processed(self):
        cache = FileCache()
        cache.record("/logs/a.log", None, 5)
        assert cache.should_process("/logs/a.log", 0)
        assert cache.lines_to_skip("/logs/a.log") == 5

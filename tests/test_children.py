"""
Tests for child loggers and the child registry.
"""

import io
import threading

from fanlog import Fields, Logger
from fanlog.children import child_prefix


class Service:
    def __init__(self, name):
        self.name = name

    def __str__(self):
        return self.name


class TestChildCreation:
    """Test lookup-or-create semantics."""

    def test_same_key_returns_same_child(self, logger):
        """Test that a key maps to a single child."""
        assert logger.child("x") is logger.child("x")
        assert logger.child_count() == 1

    def test_removed_key_creates_new_child(self, logger):
        """Test that removing a key forgets its child."""
        first = logger.child("x")

        assert logger.remove_child("x") is True
        assert logger.remove_child("x") is False

        assert logger.child("x") is not first

    def test_concurrent_get_or_create(self, logger):
        """Test that racing threads agree on one child per key."""
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(logger.child("db"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 8
        assert all(child is results[0] for child in results)
        assert logger.child_count() == 1


class TestChildPrefix:
    """Test prefix inheritance."""

    def test_string_key_becomes_prefix(self, logger, stream):
        """Test that a child logs with its key as prefix."""
        logger.child("db").info("connected")

        assert stream.getvalue() == "[INFO] db: connected\n"

    def test_nested_children_extend_prefix(self, logger, stream):
        """Test that grandchildren append to the inherited prefix."""
        logger.set_prefix("app")

        logger.child("api").child("v1").warn("deprecated")

        assert stream.getvalue() == "[WARN] app api: v1: deprecated\n"

    def test_key_display_text(self):
        """Test which keys have display text."""
        assert child_prefix("name") == "name"
        assert child_prefix(Service("billing")) == "billing"
        assert child_prefix(42) == ""
        assert child_prefix(object()) == ""

    def test_existing_separator_kept(self, logger):
        """Test that a prefix already ending in ': ' is not doubled."""
        logger.set_child_prefix("jobs: ")
        logger.set_child_prefix("")

        assert logger.prefix == "jobs: "


class TestChildIsolation:
    """Test what children share with their parent."""

    def test_shares_printer(self, logger, stream):
        """Test that parent and child write to the same destinations."""
        child = logger.child("worker")
        extra = io.StringIO()

        child.add_output(extra)
        logger.info("from parent")

        assert logger.printer is child.printer
        assert extra.getvalue() == "[INFO] from parent\n"

    def test_independent_level_and_prefix(self, logger, stream):
        """Test that configuration changes do not leak between parent and child."""
        child = logger.child("quiet")
        child.set_level("error")
        child.set_prefix("renamed: ")

        logger.info("parent")
        child.info("hidden")

        assert logger.level > child.level
        assert logger.prefix == ""
        assert stream.getvalue() == "[INFO] parent\n"

    def test_independent_level_output(self, logger):
        """Test that per-level outputs are copied, not shared."""
        child = logger.child("c")
        child.set_level_output("info", io.StringIO())

        assert logger.get_level_output("info") is logger.printer

    def test_shares_handler_chain(self, logger):
        """Test that handlers registered before cloning apply to children."""
        seen = []
        logger.handle(lambda log: seen.append(log.message) or True)

        logger.child("c").info("from child", Fields(a=1))

        assert seen == ["from child"]

    def test_clone_has_no_children(self, logger):
        logger.child("a")

        assert logger.clone().child_count() == 0


class TestRegistryOrder:
    """Test ordering, listing and clearing."""

    def test_last_child_after_removal(self, logger):
        """Test that last_child falls back to the previous survivor."""
        logger.child("a")
        b = logger.child("b")
        logger.child("c")

        logger.remove_child("c")

        assert logger.last_child() is b

    def test_removal_in_the_middle_keeps_order(self, logger):
        a = logger.child("a")
        logger.child("b")
        c = logger.child("c")

        logger.remove_child("b")

        assert logger.list_child_keys() == ["a", "c"]
        assert logger._children.get_by_index(0) is a
        assert logger._children.get_by_index(1) is c
        assert logger.last_child() is c

    def test_clear(self, logger):
        """Test that clearing empties the registry."""
        logger.child("a")
        logger.child(Service("b"))

        logger.clear_children()

        assert logger.child_count() == 0
        assert logger.list_child_keys() == []
        assert logger.last_child() is None

    def test_empty_registry(self):
        logger = Logger(io.StringIO())

        assert logger.last_child() is None
        assert logger.child_count() == 0

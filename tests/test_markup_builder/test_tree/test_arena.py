"""Tests for node storage and exclusive access tracking."""

import pytest

from markup_builder.shared import TreeConfig
from markup_builder.tree import NodeArena, ReentrantAccessError


class TestNodeArena:
    """Test slot allocation and lookups."""

    def test_allocate_returns_sequential_slots(self) -> None:
        """Test each allocation gets the next slot index."""
        arena = NodeArena()

        assert arena.allocate("div") == 0
        assert arena.allocate("span", "text") == 1
        assert len(arena) == 2
        assert arena.record(1).tag == "span"
        assert arena.record(1).content == "text"

    def test_record_defaults(self) -> None:
        """Test a new record starts detached with flags off."""
        arena = NodeArena()
        record = arena.record(arena.allocate("p"))

        assert record.parent is None
        assert record.children == []
        assert record.attributes == {}
        assert not record.is_void_element
        assert not record.is_raw_text
        assert record.access_state == "idle"

    def test_record_out_of_range_raises(self) -> None:
        """Test looking up a missing slot raises IndexError."""
        arena = NodeArena()
        with pytest.raises(IndexError, match="No node at slot 3"):
            arena.record(3)
        with pytest.raises(IndexError):
            arena.record(-1)

    def test_uses_given_config(self) -> None:
        """Test the arena keeps its tree configuration."""
        config = TreeConfig(reattach_policy="reject")
        assert NodeArena(config).config is config
        assert NodeArena().config.reattach_policy == "move"

    def test_ancestors(self) -> None:
        """Test ancestors are yielded from parent up to the root."""
        arena = NodeArena()
        root, middle, leaf = (arena.allocate(tag) for tag in ("a", "b", "c"))
        arena.record(middle).parent = root
        arena.record(leaf).parent = middle

        assert list(arena.ancestors(leaf)) == [middle, root]
        assert list(arena.ancestors(root)) == []
        assert arena.is_ancestor(root, leaf)
        assert arena.is_ancestor(leaf, leaf)
        assert not arena.is_ancestor(leaf, root)

    def test_absorb_moves_records_and_shifts_links(self) -> None:
        """Test absorbing appends records and rewrites their slot links."""
        target = NodeArena()
        target.allocate("html")
        source = NodeArena(mergeable=True)
        parent, child = source.allocate("ul"), source.allocate("li")
        source.record(parent).children.append(child)
        source.record(child).parent = parent
        moved = source.record(child)

        offset = target.absorb(source)

        assert offset == 1
        assert len(target) == 3
        assert len(source) == 0
        assert source.merged_into == (target, 1)
        assert target.record(2) is moved
        assert target.record(1).children == [2]
        assert moved.parent == 1

    def test_absorb_refuses_busy_records(self) -> None:
        """Test an arena with a record in use cannot be moved."""
        target, source = NodeArena(), NodeArena(mergeable=True)
        index = source.allocate("p")
        with source.reading(index):
            with pytest.raises(ReentrantAccessError):
                target.absorb(source)
        assert len(source) == 1
        assert source.merged_into is None


class TestExclusiveAccess:
    """Test reading/writing guards."""

    def test_writing_marks_and_releases(self) -> None:
        """Test the writing state lasts only for the block."""
        arena = NodeArena()
        index = arena.allocate("div")

        with arena.writing(index) as (record,):
            assert record.writing
            assert record.access_state == "being modified"
        assert not arena.record(index).writing

    def test_nested_writing_same_record_raises(self) -> None:
        """Test re-entering write access on the same record fails immediately."""
        arena = NodeArena()
        index = arena.allocate("div")

        with arena.writing(index):
            with pytest.raises(ReentrantAccessError, match="already being modified"):
                with arena.writing(index):
                    pass
            # The outer hold survives the failed attempt
            assert arena.record(index).writing
        assert not arena.record(index).writing

    def test_duplicate_index_raises_and_releases(self) -> None:
        """Test listing the same record twice fails and leaves it idle."""
        arena = NodeArena()
        index = arena.allocate("div")

        with pytest.raises(ReentrantAccessError) as excinfo:
            with arena.writing(index, index):
                pass
        assert excinfo.value.index == index
        assert arena.record(index).access_state == "idle"

    def test_readers_nest(self) -> None:
        """Test several readers may hold the same record."""
        arena = NodeArena()
        index = arena.allocate("div")

        with arena.reading(index):
            with arena.reading(index) as record:
                assert record.readers == 2
        assert arena.record(index).readers == 0

    def test_write_while_reading_raises(self) -> None:
        """Test a writer cannot enter while a reader holds the record."""
        arena = NodeArena()
        index = arena.allocate("div")

        with arena.reading(index):
            with pytest.raises(ReentrantAccessError, match="being read"):
                with arena.writing(index):
                    pass

    def test_read_while_writing_raises(self) -> None:
        """Test a reader cannot enter while a writer holds the record."""
        arena = NodeArena()
        index = arena.allocate("div")

        with arena.writing(index):
            with pytest.raises(ReentrantAccessError):
                with arena.reading(index):
                    pass

    def test_release_after_exception_in_block(self) -> None:
        """Test holds are released when the block raises."""
        arena = NodeArena()
        first, second = arena.allocate("a"), arena.allocate("b")

        with pytest.raises(KeyError):
            with arena.writing(first, second):
                raise KeyError("boom")
        assert arena.record(first).access_state == "idle"
        assert arena.record(second).access_state == "idle"

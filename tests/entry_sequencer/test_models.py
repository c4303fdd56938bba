"""Tests for entries, placements and the entry constructors."""

from __future__ import annotations

import pytest

from entry_sequencer import (
    Entry,
    InvalidEntryError,
    Placement,
    PlacementKind,
    after,
    anywhere,
    before,
    between,
    entries_after,
    entries_anywhere,
    entries_before,
    entries_between,
)


class TestPlacement:
    """Test Placement shapes."""

    def test_kinds(self):
        """Test each constraint shape maps to its kind."""
        assert Placement().kind is PlacementKind.ANYWHERE
        assert Placement.of(after=["a"]).kind is PlacementKind.AFTER
        assert Placement.of(before=["b"]).kind is PlacementKind.BEFORE
        assert Placement.of(after=["a"], before=["b"]).kind is PlacementKind.BETWEEN

    def test_duplicate_constraints_collapse(self):
        """Test repeated constraint names collapse."""
        placement = Placement.of(after=["a", "a", "b"])
        assert placement.after == frozenset({"a", "b"})

    def test_bare_string_is_single_name(self):
        """A string must not be split into characters."""
        placement = Placement.of(before="loadEnv")
        assert placement.before == frozenset({"loadEnv"})

    def test_empty_constraint_name_rejected(self):
        """Test an empty constraint name is rejected."""
        with pytest.raises(InvalidEntryError):
            Placement.of(after=[""])


class TestConstructors:
    """Test anywhere/after/before/between."""

    def test_anywhere(self):
        """Test anywhere() builds an unconstrained entry."""
        entry = anywhere("init", "echo hi")
        assert entry.name == "init"
        assert entry.payload == "echo hi"
        assert entry.placement.kind is PlacementKind.ANYWHERE

    def test_after_and_before(self):
        """Test after() and before() set one side each."""
        assert after("b", 1, ["a"]).after == frozenset({"a"})
        assert before("a", 1, ["b"]).before == frozenset({"b"})

    def test_between(self):
        """Test between() sets both sides."""
        entry = between("mid", None, after=["start"], before=["end"])
        assert entry.after == frozenset({"start"})
        assert entry.before == frozenset({"end"})

    def test_empty_name_rejected(self):
        """Test an empty entry name is rejected."""
        with pytest.raises(InvalidEntryError, match="non-empty"):
            anywhere("", 1)

    def test_non_string_name_rejected(self):
        """Test a non-string entry name is rejected."""
        with pytest.raises(InvalidEntryError):
            Entry(42, "payload")  # type: ignore[arg-type]

    def test_names_are_case_sensitive(self):
        """Test names differing only in case are distinct."""
        assert anywhere("Init", 1) != anywhere("init", 1)

    def test_map_payload_keeps_placement(self):
        """Test map_payload() only touches the payload."""
        entry = after("b", 2, ["a"]).map_payload(lambda value: value * 10)
        assert entry.payload == 20
        assert entry.after == frozenset({"a"})


class TestDictConversion:
    """Test Entry.to_dict()/from_dict()."""

    def test_to_dict_sorts_constraints(self):
        """Test to_dict() emits sorted constraint lists."""
        entry = between("x", {"k": 1}, after=["c", "a"], before=["z"])
        assert entry.to_dict() == {
            "name": "x",
            "data": {"k": 1},
            "after": ["a", "c"],
            "before": ["z"],
        }

    def test_to_dict_omits_empty_constraints(self):
        """Test to_dict() leaves out empty constraints."""
        assert anywhere("x", None).to_dict() == {"name": "x", "data": None}

    def test_from_dict(self):
        """Test from_dict() accepts a bare string constraint."""
        entry = Entry.from_dict({"name": "x", "data": 3, "after": "y"})
        assert entry == after("x", 3, ["y"])

    def test_from_dict_missing_name(self):
        """Test from_dict() rejects a missing name."""
        with pytest.raises(InvalidEntryError):
            Entry.from_dict({"data": 3})


class TestChainedEntries:
    """Test entries_* constructors that chain a list of payloads."""

    def test_empty_list_yields_nothing(self):
        """Test chaining no payloads yields no entries."""
        assert entries_anywhere("path", []) == []

    def test_single_payload_carries_both_constraints(self):
        """Test a single payload carries both sides."""
        (entry,) = entries_between("path", ["p0"], after=["a"], before=["b"])
        assert entry.name == "path-0"
        assert entry.after == frozenset({"a"})
        assert entry.before == frozenset({"b"})

    def test_chain_links_each_entry_to_previous(self):
        """Test each chained entry follows the previous one."""
        chain = entries_between("path", ["p0", "p1", "p2"], after=["a"], before=["b"])
        assert [e.name for e in chain] == ["path-0", "path-1", "path-2"]
        assert chain[0].after == frozenset({"a"})
        assert chain[0].before == frozenset()
        assert chain[1].after == frozenset({"path-0"})
        assert chain[1].before == frozenset()
        assert chain[2].after == frozenset({"path-1"})
        assert chain[2].before == frozenset({"b"})

    def test_entries_after_and_before(self):
        """Test entries_after() and entries_before() anchor the right end."""
        after_chain = entries_after("x", [1, 2], ["a"])
        assert after_chain[0].after == frozenset({"a"})
        assert after_chain[1].before == frozenset()

        before_chain = entries_before("x", [1, 2], ["b"])
        assert before_chain[0].after == frozenset()
        assert before_chain[1].before == frozenset({"b"})

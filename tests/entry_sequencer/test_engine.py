"""End-to-end tests for resolve()."""

from __future__ import annotations

import random

import pytest

from entry_sequencer import (
    CycleDetectedError,
    Registry,
    UnknownReference,
    UnknownReferenceError,
    after,
    anywhere,
    before,
    build_graph,
    check,
    entries_after,
    new_registry,
    resolve,
    resolve_names,
)


@pytest.fixture
def shell_init() -> Registry:
    return Registry.from_entries(
        [
            anywhere("init", "autoload -U compinit"),
            before("loadEnv", "source ~/.env", ["setPrompt"]),
            after("setPrompt", "PS1='> '", ["loadEnv"]),
            anywhere("aliases", "alias ll='ls -l'"),
        ],
        source="shell",
    )


def _random_dag(seed: int, size: int = 40) -> Registry:
    rng = random.Random(seed)
    names = [f"e{index:02d}" for index in range(size)]
    rng.shuffle(names)
    registry = new_registry()
    for position, name in enumerate(names):
        earlier = names[:position]
        deps = rng.sample(earlier, k=min(len(earlier), rng.randint(0, 3)))
        registry.insert(name, position, after=deps)
    return registry


class TestResolve:
    """Test resolve() function."""

    def test_shell_init_scenario(self, shell_init: Registry):
        """Test the shell-init example resolves to the expected order."""
        ordered = resolve(shell_init)
        assert [name for name, _ in ordered] == ["aliases", "init", "loadEnv", "setPrompt"]
        assert ordered[2].payload == "source ~/.env"

    def test_single_anywhere_entry(self):
        """Test a lone unconstrained entry resolves to itself."""
        registry = new_registry().insert("only", {"k": "v"})
        assert resolve(registry) == [("only", {"k": "v"})]

    def test_empty_registry(self):
        """Test an empty registry resolves to nothing."""
        assert resolve(new_registry()) == []

    def test_registry_not_modified(self, shell_init: Registry):
        """Test resolve() leaves the registry untouched."""
        before_names = shell_init.names()
        resolve(shell_init)
        assert shell_init.names() == before_names

    def test_determinism(self, shell_init: Registry):
        """Test resolving twice gives identical output."""
        assert resolve(shell_init) == resolve(shell_init)

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_permutation_and_edges_respected(self, seed: int):
        """Test output is a permutation that honours every edge."""
        registry = _random_dag(seed)
        names = resolve_names(registry)

        assert sorted(names) == sorted(registry)
        position = {name: index for index, name in enumerate(names)}
        for source, target in build_graph(registry).edges():
            assert position[source] < position[target]

    def test_insertion_order_does_not_matter(self):
        """Test insertion order has no effect on the result."""
        entries = [anywhere("c", 3), after("a", 1, ["c"]), anywhere("b", 2)]
        forward = Registry.from_entries(entries)
        backward = Registry.from_entries(reversed(entries))
        assert resolve(forward) == resolve(backward) == [("b", 2), ("c", 3), ("a", 1)]

    def test_chained_entries(self):
        """Test chained entries stay in list order after their anchor."""
        registry = Registry.from_entries(
            [anywhere("base", 0), *entries_after("path", ["p0", "p1", "p2"], ["base"]), anywhere("a", 9)]
        )
        assert resolve_names(registry) == ["a", "base", "path-0", "path-1", "path-2"]

    def test_cycle(self):
        """Test a two-entry cycle raises CycleDetectedError naming both entries."""
        registry = new_registry().insert("A", 1, before=["B"]).insert("B", 2, before=["A"])

        with pytest.raises(CycleDetectedError) as exc_info:
            resolve(registry)

        assert {"A", "B"} <= set(exc_info.value.path)

    def test_unknown_reference(self):
        """Test a reference to a missing entry raises UnknownReferenceError."""
        registry = new_registry().insert("A", 1, after=["Z"])

        with pytest.raises(UnknownReferenceError) as exc_info:
            resolve(registry)

        assert exc_info.value.references == (UnknownReference("A", "Z"),)

    def test_unknown_reference_reported_before_cycle(self):
        """Test unknown references win over cycles."""
        registry = (
            new_registry()
            .insert("A", 1, before=["B"])
            .insert("B", 2, before=["A"], after=["ghost"])
        )
        with pytest.raises(UnknownReferenceError):
            resolve(registry)


class TestCheck:
    """Test check() function."""

    def test_clean(self, shell_init: Registry):
        """Test a valid registry yields no errors."""
        assert check(shell_init) == []

    def test_returns_errors(self):
        """Test errors are returned instead of raised."""
        registry = new_registry().insert("A", 1, before=["B"]).insert("B", 2, before=["A"])
        errors = check(registry)
        assert len(errors) == 1
        assert isinstance(errors[0], CycleDetectedError)

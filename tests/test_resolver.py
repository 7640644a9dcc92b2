# SPDX-License-Identifier: GPL-3.0-only

"""
tests.test_resolver
Tests selecting one version of a module from several selectors.

The repository serves versions 13, 12, 11, 10 and 9, newest first. Selector
shapes follow common dependency declarations:

* ``fixed(v)`` prefers exactly ``v`` and rejects anything below it
* ``range_(lo, hi)`` prefers ``[lo,hi]`` and rejects anything below ``lo``
* ``reject(v)`` prefers nothing and rejects ``v``
* ``strict(s)`` makes ``s`` strict on its preferred version

:license: GNU General Public License v3
"""


from types import SimpleNamespace

import pytest

from preoccupied.resolution import (
    ComponentState, ConflictUnresolvableError, Failed,
    ModuleComponentIdentifier, ModuleVersionNotFoundError,
    ModuleVersionRejectedError, Resolved, SelectorState,
    SelectorStateResolver, UnionSelector, Version, VersionConstraint,
    VersionListResolver, VersionSelectorScheme, all_rejects,
    resolve_selectors)


SCHEME = VersionSelectorScheme()

SERVED = ["9", "10", "11", "12", "13"]


def v(version):
    return Version.parse(str(version))


@pytest.fixture
def repository():
    return VersionListResolver(SERVED)


@pytest.fixture
def selectors(repository) -> SimpleNamespace:
    """
    Provide constructors for selector states backed by the repository.
    """

    def build(prefer="", reject=(), strictly=None):
        constraint = VersionConstraint(
            prefer=prefer, reject=tuple(reject), strictly=strictly)
        return SelectorState(constraint.resolve(SCHEME), repository)

    def fixed(version):
        return build(str(version), [f"(,{version})"])

    def range_(low, high):
        return build(f"[{low},{high}]", [f"(,{low})"])

    def reject(version):
        return build("", [str(version)])

    def strict(state):
        prefer = state.constraint.preferred_version
        return build(prefer, state.constraint.rejected_versions, strictly=prefer)

    return SimpleNamespace(**locals())


@pytest.fixture
def latest():
    return SelectorStateResolver("latest")


def test_single_range(selectors, latest):
    """
    A single range resolves to its newest version.
    """

    state = selectors.range_(10, 12)
    winner = latest.select_best([state])

    assert winner.version == v(12)
    assert not winner.is_rejected
    assert winner.selector_state is state
    assert state.dynamic_resolve_count == 1


def test_overlapping_ranges_share_candidate(selectors, latest, repository):
    """
    The second range accepts the first range's candidate, so it is never
    resolved itself.
    """

    first = selectors.range_(10, 12)
    second = selectors.range_(11, 13)

    winner = latest.select_best([first, second])
    assert winner.version == v(12)
    assert not winner.is_rejected
    assert first.dynamic_resolve_count == 1
    assert second.dynamic_resolve_count == 0
    assert second.cached is None


def test_fixed_and_range_share_fixed(selectors, latest):
    winner = latest.select_best([selectors.fixed(11), selectors.range_(10, 13)])
    assert winner.version == v(11)
    assert not winner.is_rejected


def test_range_then_fixed_propagates_back(selectors):
    """
    A later candidate is shared with earlier selectors that accept it.
    """

    wide = selectors.range_(10, 13)
    narrow = selectors.fixed(11)

    results = resolve_selectors([wide, narrow])
    assert results[wide].version == v(11)
    assert results[narrow].version == v(11)
    assert len(results.candidates()) == 1

    winner = SelectorStateResolver().select_best([wide.copy(), narrow.copy()])
    assert winner.version == v(11)


def test_disjoint_ranges_conflict(selectors, latest):
    """
    Disjoint ranges leave two candidates; the newest wins and is not
    rejected by either selector.
    """

    states = [selectors.build("[10,11]"), selectors.build("[12,13]")]
    results = resolve_selectors(states)
    assert [result.version for result, _ in results.candidates()] == [v(11), v(13)]

    winner = latest.select_best([s.copy() for s in states])
    assert winner.version == v(13)
    assert not winner.is_rejected


def test_disjoint_ranges_oldest(selectors):
    states = [selectors.build("[10,11]"), selectors.build("[12,13]")]
    winner = SelectorStateResolver("oldest").select_best(states)

    assert winner.version == v(11)
    assert not winner.is_rejected


def test_disjoint_range_below_rejections(selectors, latest):
    """
    A range lying wholly below another selector's rejections fails as
    rejected, and the remaining candidate wins.
    """

    low = selectors.range_(10, 11)
    high = selectors.range_(12, 13)

    results = resolve_selectors([low, high])
    assert isinstance(results[low].failure, ModuleVersionRejectedError)
    assert results[high].version == v(13)

    winner = latest.select_best([low.copy(), high.copy()])
    assert winner.version == v(13)
    assert not winner.is_rejected


def test_fixed_with_reject_only(selectors, latest):
    """
    An exact version rejected by another declaration wins, but rejected.
    """

    states = [selectors.build("12"), selectors.reject(12)]
    winner = latest.select_best(states)

    assert winner.version == v(12)
    assert winner.is_rejected
    assert isinstance(winner.failure, ModuleVersionRejectedError)
    assert winner.failure.rejected_version == "12"


def test_reject_only_is_resolved(selectors, latest):
    """
    Reject-only selectors are resolved like any other and fail to find a
    version.
    """

    fixed = selectors.fixed(12)
    rejecting = selectors.reject(11)

    results = resolve_selectors([fixed, rejecting])
    assert results[fixed].version == v(12)
    assert type(results[rejecting].failure) is ModuleVersionNotFoundError

    winner = latest.select_best([fixed.copy(), rejecting.copy()])
    assert winner.version == v(12)
    assert not winner.is_rejected


def test_range_entirely_rejected(selectors, latest, repository):
    """
    A range covered by the rejections fails without probing the repository.
    """

    state = selectors.build("[10,13]", ["[10,13]"])
    winner = latest.select_best([state])

    assert winner.is_rejected
    assert winner.version == v(13)
    error = winner.failure
    assert isinstance(error, ModuleVersionRejectedError)
    assert error.rejected_versions == ("13", "12", "11", "10")
    assert repository.probe_count == 0


def test_range_rejected_by_another_selector(selectors, latest, repository):
    states = [selectors.range_(10, 13), selectors.build("", ["[10,13]"])]
    winner = latest.select_best(states)

    assert winner.is_rejected
    assert isinstance(winner.failure, ModuleVersionRejectedError)


def test_strict_selectors(selectors, latest):
    strict = selectors.strict(selectors.fixed(11))
    winner = latest.select_best([strict, selectors.range_(10, 13)])
    assert winner.version == v(11)
    assert not winner.is_rejected

    winner = latest.select_best([
        selectors.range_(10, 13), selectors.strict(selectors.fixed(11))])
    assert winner.version == v(11)
    assert not winner.is_rejected


def test_strict_conflict_is_rejected(selectors, latest):
    states = [selectors.strict(selectors.fixed(11)), selectors.fixed(12)]
    winner = latest.select_best(states)

    assert winner.is_rejected
    assert winner.version == v(12)


def test_prefix_selectors(selectors, latest, repository):
    """
    Prefix selectors resolve against the listing and share candidates like
    any other selector.
    """

    winner = latest.select_best([selectors.build("12.+")])
    assert winner.version == v(12)
    assert not winner.is_rejected

    repository.add("12.1")
    ranged = selectors.range_(11, 13)
    prefixed = selectors.build("12.+")

    results = resolve_selectors([ranged, prefixed])
    assert results[ranged].version == v(13)
    assert results[prefixed].version == Version.parse("12.1")

    narrow = selectors.range_(12, "12.1")
    results = resolve_selectors([prefixed.copy(), narrow])
    assert len(results.candidates()) == 1
    assert results[narrow].version == Version.parse("12.1")


def test_metadata_selectors_do_not_share(selectors, latest):
    """
    A selector that needs metadata is always resolved on its own.
    """

    ranged = selectors.range_(10, 12)
    status = selectors.build("latest.release")

    results = resolve_selectors([ranged, status])
    assert results[ranged].version == v(12)
    assert results[status].version == v(13)
    assert status.dynamic_resolve_count == 1

    winner = latest.select_best([ranged.copy(), status.copy()])
    assert winner.version == v(13)


def test_missing_version(selectors, latest):
    winner = latest.select_best([selectors.fixed(20)])

    assert winner.is_rejected
    assert winner.version is None
    assert type(winner.failure) is ModuleVersionNotFoundError


def test_failures_do_not_abort(selectors, latest):
    states = [selectors.build("20"), selectors.range_(10, 12), selectors.build("21")]
    results = resolve_selectors(states)
    assert len(results.candidates()) == 3

    winner = latest.select_best([s.copy() for s in states])
    assert winner.version == v(12)
    assert not winner.is_rejected


def test_empty_selectors(latest):
    with pytest.raises(AssertionError):
        latest.select_best([])


class RaisingConflictResolver:
    def select(self, candidates):
        raise ConflictUnresolvableError("cannot choose", candidates)


class ForeignConflictResolver:
    def select(self, candidates):
        return ComponentState(candidates[0].result)


def test_conflict_failure_is_fatal(selectors):
    states = [selectors.range_(10, 11), selectors.range_(12, 13)]

    with pytest.raises(ConflictUnresolvableError) as error:
        SelectorStateResolver(RaisingConflictResolver()).select_best(states)
    assert len(error.value.candidates) == 2


def test_conflict_winner_must_be_candidate(selectors):
    states = [selectors.range_(10, 11), selectors.range_(12, 13)]

    with pytest.raises(ConflictUnresolvableError):
        SelectorStateResolver(ForeignConflictResolver()).select_best(states)


class BrokenConflictResolver:
    def select(self, candidates):
        raise RuntimeError("resolver is broken")


def test_conflict_resolver_errors_are_unresolvable(selectors):
    states = [selectors.build("[10,11]"), selectors.build("[12,13]")]

    with pytest.raises(ConflictUnresolvableError) as error:
        SelectorStateResolver(BrokenConflictResolver()).select_best(states)
    assert isinstance(error.value.__cause__, RuntimeError)
    assert len(error.value.candidates) == 2


def test_conflict_resolver_not_consulted_for_one_candidate(selectors):
    states = [selectors.range_(10, 12), selectors.range_(11, 13)]
    winner = SelectorStateResolver(RaisingConflictResolver()).select_best(states)
    assert winner.version == v(12)


class IgnoringRejects:
    """
    A misbehaving candidate resolver that always offers version 12.
    """

    def resolve(self, constraint, all_rejects):
        return Resolved(ModuleComponentIdentifier(
            group="org", module="module", version="12"))


def test_post_selection_reject(latest):
    """
    A winner accepted by any selector's rejections is marked rejected.
    """

    constraint = VersionConstraint.of("12", ["12"]).resolve(SCHEME)
    winner = latest.select_best([SelectorState(constraint, IgnoringRejects())])

    assert winner.version == v(12)
    assert winner.is_rejected
    assert winner.failure is None

    constraint = VersionConstraint.of("12", ["13"]).resolve(SCHEME)
    winner = latest.select_best([SelectorState(constraint, IgnoringRejects())])
    assert not winner.is_rejected


class CountingFactory:
    def __init__(self):
        self.built = []

    def build(self, result, selector_state):
        self.built.append((result, selector_state))
        return ComponentState(result, selector_state, rejected=not result.succeeded)


def test_custom_component_state_factory(selectors):
    factory = CountingFactory()
    resolver = SelectorStateResolver("latest", factory)

    first = selectors.range_(10, 11)
    second = selectors.range_(12, 13)
    winner = resolver.select_best([first, second])

    assert [owner for _, owner in factory.built] == [first, second]
    assert winner.selector_state is second


def test_all_rejects(selectors):
    states = [selectors.fixed(12), selectors.reject(9), selectors.build("13")]
    rejects = all_rejects(states)

    assert isinstance(rejects, UnionSelector)
    assert len(rejects) == 3
    assert rejects.accept("11")
    assert rejects.accept("9")
    assert not rejects.accept("12")
    assert not all_rejects([selectors.build("13")]).accept("13")


SCENARIOS = [
    ("fixed", 12),
    ("range_", 10, 12),
    ("range_", 11, 13),
    ("range_", 10, 11),
    ("range_", 12, 13),
    ("fixed", 11),
    ("fixed", 13),
    ("reject", 12),
    ("reject", 11),
]


def _states(selectors, picks):
    return [getattr(selectors, name)(*args) for name, *args in picks]


@pytest.mark.parametrize(
    "picks",
    [
        [SCENARIOS[i] for i in combo]
        for combo in [
            (0, 1), (1, 2), (3, 4), (5, 1), (1, 5), (0, 7), (2, 8),
            (3, 4, 8), (6, 2, 1), (0, 1, 2, 5), (7, 8), (4, 5, 6),
        ]
    ],
)
def test_result_properties(selectors, picks):
    """
    Every successful mapping is accepted by its selector and not rejected by
    any selector, and resolution is repeatable.
    """

    states = _states(selectors, picks)
    rejects = all_rejects(states)
    results = resolve_selectors(states)

    assert len(results) == len(states)
    for state, result in results.items():
        if result.succeeded:
            assert state.preferred_selector.accept(result.version)
            assert not rejects.accept(result.version)

    first = SelectorStateResolver().select_best([s.copy() for s in states])
    again_states = [s.copy() for s in states]
    again = SelectorStateResolver().select_best(again_states)

    assert first.version == again.version
    assert first.is_rejected == again.is_rejected
    assert type(first.failure) is type(again.failure)


@pytest.mark.parametrize(
    "picks",
    [
        [("range_", 10, 12), ("range_", 11, 13)],
        [("range_", 10, 13), ("fixed", 11)],
        [("fixed", 11), ("range_", 10, 13), ("range_", 9, 11)],
        [("range_", 9, 13), ("range_", 10, 12), ("fixed", 12)],
    ],
)
def test_common_version_gives_one_candidate(selectors, picks):
    """
    When the newest version acceptable to one selector is acceptable to all,
    a single candidate remains.
    """

    results = resolve_selectors(_states(selectors, picks))
    candidates = results.candidates()
    assert len(candidates) == 1
    assert candidates[0][0].succeeded


def test_repeatable_resolution_order():
    """
    Identical inputs make identical resolver calls and counts.
    """

    def run():
        repository = VersionListResolver(SERVED)
        states = [
            SelectorState(VersionConstraint.of(prefer, reject).resolve(SCHEME), repository)
            for prefer, reject in [
                ("[10,11]", ["(,10)"]),
                ("[12,13]", ["(,12)"]),
                ("[10,13]", []),
                ("13", []),
            ]
        ]
        winner = SelectorStateResolver().select_best(states)
        return (winner.version,
                [s.dynamic_resolve_count for s in states],
                repository.probe_count)

    assert run() == run()


def test_failed_results_are_distinct_candidates():
    errors = [ModuleVersionNotFoundError("20"), ModuleVersionNotFoundError("20")]
    assert Failed(errors[0]) != Failed(errors[1])
    assert Failed(errors[0]) == Failed(errors[0])


# The end.

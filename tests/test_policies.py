# SPDX-License-Identifier: GPL-3.0-only

"""
tests.test_policies
Unit tests covering snapshot version resolution policies.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import pytest

from preoccupied.memento.policies import (
    ResolveVersionExact,
    ResolveVersionGE,
    ResolveVersionLE,
    is_selector,
    lookup_policy,
    parse_version,
    resolver)


@pytest.fixture
def version_sequence():
    """
    Provide an ordered list of retained versions, with gaps left by
    eviction and truncation.
    """

    return [3, 4, 7, 9]


@pytest.mark.parametrize(
    "selector, expected, note",
    [
        (4, 4, "exact match"),
        ("4", 4, "exact match from string"),
        (6, 4, "nearest lower version"),
        (2, None, "no candidate less than selector"),
        (">4", 9, "greater-than selector"),
        ("<7", 4, "less-than selector"),
        ("==7", 7, "equal-to selector"),
        (">=3;<9", 7, "range selector"),
    ],
)
def test_resolve_version_le(
        version_sequence,
        selector,
        expected,
        note):
    """
    ResolveVersionLE scenarios for exact, range, and inequality selectors.
    """

    result = ResolveVersionLE().resolve(selector, version_sequence)
    assert result == expected, note


@pytest.mark.parametrize(
    "selector, expected, note",
    [
        (7, 7, "exact match"),
        (5, 7, "nearest higher version"),
        (10, None, "no candidate greater than selector"),
        (">4", 7, "greater-than selector"),
        ("<7", 3, "less-than selector"),
        ("!=3", 4, "not-equal selector"),
        (">=4;<9", 4, "range selector"),
    ],
)
def test_resolve_version_ge(
        version_sequence,
        selector,
        expected,
        note):
    """
    ResolveVersionGE scenarios for exact, range, and inequality selectors.
    """

    result = ResolveVersionGE().resolve(selector, version_sequence)
    assert result == expected, note


@pytest.mark.parametrize(
    "selector, expected, note",
    [
        (9, 9, "exact match"),
        (5, None, "selector between versions"),
        (">=3;<9", 7, "range selector"),
        (" >= 10 ; < 20 ", None, "range selector without candidates"),
    ],
)
def test_resolve_version_exact(
        version_sequence,
        selector,
        expected,
        note):
    """
    ResolveVersionExact scenarios covering exact and range selectors.
    """

    result = ResolveVersionExact().resolve(selector, version_sequence)
    assert result == expected, note


def test_resolve_empty_sequence():
    """
    Nothing resolves against an empty history.
    """

    for policy in (ResolveVersionExact(), ResolveVersionLE(), ResolveVersionGE()):
        assert policy.resolve(1, []) is None
        assert policy.resolve(">=1", []) is None


@pytest.mark.parametrize("selector", ["latest", "<=x", ">=1;bogus"])
def test_malformed_selector_raises(version_sequence, selector):
    """
    Selectors that are neither numbers nor comparisons are rejected.
    """

    with pytest.raises(ValueError):
        ResolveVersionExact().resolve(selector, version_sequence)


@pytest.mark.parametrize("value", [
    pytest.param(1.0, id="float"),
    pytest.param(None, id="none"),
    pytest.param(True, id="bool"),
    pytest.param([1], id="list"),
])
def test_non_selector_values_rejected(version_sequence, value):
    """
    Only ints and strings can name a version; anything else is a
    ValueError from the policies themselves.
    """

    assert not is_selector(value)
    with pytest.raises(ValueError):
        parse_version(value)
    for policy in (ResolveVersionExact(), ResolveVersionLE(), ResolveVersionGE()):
        with pytest.raises(ValueError):
            policy.resolve(value, version_sequence)

    assert is_selector(4)
    assert is_selector(" 4 ")
    assert parse_version(" 4 ") == 4


@pytest.mark.parametrize("name, expected", [
    pytest.param("le", ResolveVersionLE, id="le"),
    pytest.param("nearest_le", ResolveVersionLE, id="nearest_le"),
    pytest.param("ge", ResolveVersionGE, id="ge"),
    pytest.param("nearest_ge", ResolveVersionGE, id="nearest_ge"),
    pytest.param("exact", ResolveVersionExact, id="exact"),
    pytest.param("eq", ResolveVersionExact, id="eq"),
    pytest.param(" LE ", ResolveVersionLE, id="padded-upper"),
])
def test_lookup_policy(name, expected):
    """
    Policy names map onto their resolver classes.
    """

    assert isinstance(lookup_policy(name), expected)
    assert isinstance(resolver(name), expected)


def test_resolver_defaults_and_errors():
    """
    resolver() defaults to exact, passes instances through, and rejects
    unknown names.
    """

    assert isinstance(resolver(), ResolveVersionExact)

    policy = ResolveVersionGE()
    assert resolver(policy) is policy

    assert lookup_policy("sideways") is None
    with pytest.raises(ValueError):
        resolver("sideways")


# The end.

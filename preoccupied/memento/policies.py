# This library is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This library is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this library; if not, see <http://www.gnu.org/licenses/>.

"""
preoccupied.memento.policies

Resolution policies for locating a retained snapshot by version selector.

A selector is either a plain version number (``4`` or ``"4"``), a single
comparison (``"<=4"``), or a semicolon-delimited set of comparisons which must
all hold (``">=2;<5"``). The policy decides which of the retained versions
satisfies the selector.

Example:

```python
available = [3, 4, 7]

assert ResolveVersionExact().resolve(4, available) == 4
assert ResolveVersionExact().resolve(5, available) is None
assert ResolveVersionLE().resolve(5, available) == 4
assert ResolveVersionGE().resolve(5, available) == 7
assert ResolveVersionExact().resolve(">=3;<7", available) == 4
```

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import operator
import re
from typing import (
    Any, Callable, Dict, List, Optional, Protocol, Sequence, Union)


__all__ = (
    "ResolutionPolicy",
    "ResolveVersionExact",
    "ResolveVersionGE",
    "ResolveVersionLE",
    "Selector",
    "is_selector",
    "lookup_policy",
    "resolver",
)


Selector = Union[int, str]


matcher_like = re.compile(r"^\s*[<>=!]=?").match


_COMPARISON = re.compile(r"^\s*(<=|>=|==|!=|<|>)\s*(-?\d+)\s*$")


_OPERATORS: Dict[str, Callable[[int, int], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "==": operator.eq,
    "!=": operator.ne,
}


def parse_matchers(selector: str) -> List[Callable[[int], bool]]:
    """
    Convert a semicolon-delimited comparison selector into predicates.

    :raises ValueError: if any comparison is malformed
    """

    matchers = []
    for part in selector.split(";"):
        found = _COMPARISON.match(part)
        if found is None:
            raise ValueError(f"Invalid version selector: {selector!r}")
        op, bound = _OPERATORS[found.group(1)], int(found.group(2))
        matchers.append(lambda version, op=op, bound=bound: op(version, bound))
    return matchers


def is_selector(value: Any) -> bool:
    """
    True when `value` is of a type usable as a version selector. Booleans
    are rejected even though they are integers.
    """

    return isinstance(value, (int, str)) and not isinstance(value, bool)


def parse_version(selector: Selector) -> int:
    """
    Coerce a plain (non-comparison) selector into a version number.

    :raises ValueError: if the selector is not an integer
    """

    if not is_selector(selector):
        raise ValueError(f"Invalid version selector: {selector!r}")
    if isinstance(selector, int):
        return selector
    try:
        return int(selector.strip())
    except ValueError:
        raise ValueError(f"Invalid version selector: {selector!r}") from None


def _first_matching(
        selector: str,
        candidates: Sequence[int]) -> Optional[int]:

    matchers = parse_matchers(selector)
    for version in candidates:
        for matcher in matchers:
            if not matcher(version):
                break
        else:
            return version
    return None


class ResolutionPolicy(Protocol):
    """
    Protocol describing resolution behaviour for snapshot version selectors.
    """

    def resolve(
            self,
            selector: Selector,
            available: Sequence[int]) -> Optional[int]:
        """
        Return the selected version given a selector and the retained
        versions, or None when nothing qualifies.

        :param selector: The selector to resolve.
        :param available: The retained versions, in ascending order.
        :return: The selected version, or None.
        """

        ...


class ResolveVersionLE(ResolutionPolicy):
    """
    Resolve selectors toward the greatest retained version not exceeding the
    request.
    """

    def resolve(
            self,
            selector: Selector,
            available: Sequence[int]) -> Optional[int]:
        """
        Return the highest version less than or equal to the requested one.

        Comparison selectors return the highest version satisfying every
        comparison.
        """

        if isinstance(selector, str) and matcher_like(selector):
            return _first_matching(selector, list(reversed(available)))

        wanted = parse_version(selector)
        for version in reversed(available):
            if version <= wanted:
                return version
        return None


class ResolveVersionGE(ResolutionPolicy):
    """
    Resolve selectors toward the smallest retained version not less than the
    request.
    """

    def resolve(
            self,
            selector: Selector,
            available: Sequence[int]) -> Optional[int]:
        """
        Return the lowest version greater than or equal to the requested one.

        Comparison selectors return the lowest version satisfying every
        comparison.
        """

        if isinstance(selector, str) and matcher_like(selector):
            return _first_matching(selector, available)

        wanted = parse_version(selector)
        for version in available:
            if version >= wanted:
                return version
        return None


class ResolveVersionExact(ResolutionPolicy):
    """
    Resolve selectors that demand exact matches or bounded ranges.
    """

    def resolve(
            self,
            selector: Selector,
            available: Sequence[int]) -> Optional[int]:
        """
        Return the version equal to the request. Comparison selectors are
        evaluated from the highest version down, so the most recent
        satisfying snapshot wins.
        """

        if isinstance(selector, str) and matcher_like(selector):
            return _first_matching(selector, list(reversed(available)))

        wanted = parse_version(selector)
        return wanted if wanted in available else None


def lookup_policy(policy: str) -> Optional[ResolutionPolicy]:
    """
    Return a new policy for a name such as ``"le"`` or ``"nearest_ge"``,
    ignoring case and surrounding whitespace, or None for an unknown name.
    """

    name = policy.strip().lower()
    if name in ("nearest_le", "le"):
        return ResolveVersionLE()
    elif name in ("nearest_ge", "ge"):
        return ResolveVersionGE()
    elif name in ("exact", "eq"):
        return ResolveVersionExact()
    else:
        return None


def resolver(
        policy: Union[str, ResolutionPolicy, None] = None) -> ResolutionPolicy:
    """
    Return the resolver for the given policy. None selects the exact policy.

    :raises ValueError: if a policy name is not recognised
    """

    if policy is None:
        return ResolveVersionExact()
    elif isinstance(policy, str):
        found = lookup_policy(policy)
        if found is None:
            raise ValueError(f"Invalid policy: {policy}")
        return found
    return policy


# The end.

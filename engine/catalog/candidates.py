"""
CodeAtlas Name Candidacy.

Decides whether an identifier could name a capitalized declaration
(class, interface, enum, type alias). The predicate is pure and
takes its denylist as configuration.
Requires Python 3.11+.
"""

from typing import Callable, Iterable

NamePredicate = Callable[[str], bool]


def make_name_predicate(denylist: Iterable[str], min_length: int = 2) -> NamePredicate:
    """
    Build a total predicate over identifier text.

    A name is a candidate when it starts with an uppercase letter, is
    at least min_length characters long and is not denylisted.

    Args:
        denylist: Ambient and global names that never count
        min_length: Shortest accepted name (2 excludes ``T``-style generics)

    Returns:
        Predicate returning True for candidate names
    """
    denied = frozenset(denylist)

    def is_candidate(name: str) -> bool:
        if len(name) < min_length:
            return False
        if not name[:1].isupper():
            return False
        return name not in denied

    return is_candidate


def accept_any(name: str) -> bool:
    """Predicate for kinds whose names are not filtered (functions)."""
    return bool(name)

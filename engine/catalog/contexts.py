"""
CodeAtlas Reference Context Classification.

Fixed, ordered decision lists mapping the syntactic role of an
occurrence to a ReferenceContext. Every list ends in the REFERENCE
catch-all, so classification is total and deterministic.
Requires Python 3.11+.
"""

from typing import Callable

from catalog.models import ReferenceContext
from source_model.models import SyntaxKind, UsageSite

Rule = tuple[Callable[[UsageSite], bool], ReferenceContext]


def _parent_is(syntax: SyntaxKind) -> Callable[[UsageSite], bool]:
    return lambda site: site.syntax == syntax


def _called_member(site: UsageSite) -> bool:
    return (
        site.syntax == SyntaxKind.MEMBER_ACCESS
        and site.outer_syntax == SyntaxKind.CALL_EXPRESSION
    )


# Classes, interfaces, enums and type aliases
DECLARATION_RULES: tuple[Rule, ...] = (
    (_parent_is(SyntaxKind.NEW_EXPRESSION), ReferenceContext.INSTANTIATION),
    (_parent_is(SyntaxKind.CALL_EXPRESSION), ReferenceContext.METHOD_CALL),
    (_parent_is(SyntaxKind.TYPE_REFERENCE), ReferenceContext.TYPE_ANNOTATION),
    (_parent_is(SyntaxKind.EXTENDS_CLAUSE), ReferenceContext.INHERITANCE),
    (_parent_is(SyntaxKind.IMPLEMENTS_CLAUSE), ReferenceContext.IMPLEMENTATION),
    (_parent_is(SyntaxKind.VARIABLE_DECLARATION), ReferenceContext.VARIABLE_DECLARATION),
    (_parent_is(SyntaxKind.PARAMETER), ReferenceContext.PARAMETER),
    (_parent_is(SyntaxKind.PROPERTY_DECLARATION), ReferenceContext.PROPERTY),
    (_parent_is(SyntaxKind.MEMBER_ACCESS), ReferenceContext.PROPERTY_ACCESS),
)

# Methods, properties and constructors
MEMBER_RULES: tuple[Rule, ...] = (
    (_parent_is(SyntaxKind.NEW_EXPRESSION), ReferenceContext.INSTANTIATION),
    (_parent_is(SyntaxKind.CALL_EXPRESSION), ReferenceContext.METHOD_CALL),
    (_called_member, ReferenceContext.METHOD_CALL),
    (_parent_is(SyntaxKind.MEMBER_ACCESS), ReferenceContext.PROPERTY_ACCESS),
)

# Top-level functions
FUNCTION_RULES: tuple[Rule, ...] = (
    (_parent_is(SyntaxKind.CALL_EXPRESSION), ReferenceContext.FUNCTION_CALL),
    (_called_member, ReferenceContext.FUNCTION_CALL),
    (_parent_is(SyntaxKind.NEW_EXPRESSION), ReferenceContext.INSTANTIATION),
)


def classify(site: UsageSite, rules: tuple[Rule, ...]) -> ReferenceContext:
    """Return the context of the first matching rule, else REFERENCE."""
    for matches, context in rules:
        if matches(site):
            return context
    return ReferenceContext.REFERENCE


def classify_declaration_usage(site: UsageSite) -> ReferenceContext:
    return classify(site, DECLARATION_RULES)


def classify_member_usage(site: UsageSite) -> ReferenceContext:
    return classify(site, MEMBER_RULES)


def classify_function_usage(site: UsageSite) -> ReferenceContext:
    return classify(site, FUNCTION_RULES)

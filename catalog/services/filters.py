"""
In-memory predicate pipeline applied to a fetched page of articles.

Each criterion is a pass-through when absent.  Present criteria are
AND-combined and the input order is preserved.
"""
from collections.abc import Callable, Iterable

from catalog import categories
from catalog.schemas import ArticleSearch

Predicate = Callable[[object], bool]


def author_contains(fragment: str) -> Predicate:
    return lambda article: fragment in (article.author or "")


def title_contains(fragment: str) -> Predicate:
    return lambda article: fragment in (article.title or "")


def owned_by(user_id: int) -> Predicate:
    return lambda article: article.user_id == user_id


def shares_category(requested: Iterable[str]) -> Predicate:
    wanted = set(requested)
    return lambda article: not wanted.isdisjoint(categories.decode(article.category))


def build_predicates(criteria: ArticleSearch) -> list[Predicate]:
    """Return the predicates for every criterion present, in evaluation order."""
    predicates: list[Predicate] = []
    if criteria.author:
        predicates.append(author_contains(criteria.author))
    if criteria.title:
        predicates.append(title_contains(criteria.title))
    if criteria.user_id is not None:
        predicates.append(owned_by(criteria.user_id))
    if criteria.category:
        predicates.append(shares_category(criteria.category))
    return predicates


def apply_filters(articles: Iterable, criteria: ArticleSearch) -> list:
    predicates = build_predicates(criteria)
    return [a for a in articles if all(p(a) for p in predicates)]

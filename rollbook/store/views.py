"""
Pure filtering and sorting helpers used to derive displayed lists.
"""

from typing import Any, Callable, Iterable, List, TypeVar

from rollbook.models.consultation import Consultation
from rollbook.models.person import Person

T = TypeVar("T")

Predicate = Callable[[T], bool]


def show_all(_: Any) -> bool:
    """Default predicate: keep everything."""
    return True


def filter_entities(entities: Iterable[T], predicate: Predicate) -> List[T]:
    return [entity for entity in entities if predicate(entity)]


def sort_entities(entities: Iterable[T], key: Callable[[T], Any]) -> List[T]:
    return sorted(entities, key=key)


def in_group(group_id: str) -> Predicate:
    """Predicate selecting students of one group."""
    wanted = group_id.upper()

    def predicate(person: Person) -> bool:
        return person.group_id == wanted

    return predicate


def name_contains_any(keywords: Iterable[str]) -> Predicate:
    """Predicate selecting students whose name has any of the keywords as a whole word."""
    wanted = {keyword.lower() for keyword in keywords}

    def predicate(person: Person) -> bool:
        return any(word.lower() in wanted for word in person.name.split())

    return predicate


def consultation_start(consultation: Consultation):
    return consultation.start

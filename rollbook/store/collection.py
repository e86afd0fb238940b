"""
Identity-keyed, insertion-ordered entity collection.
"""

from typing import Callable, Dict, Generic, Hashable, Iterable, Iterator, List, Optional, TypeVar

from rollbook.core.exceptions import DuplicateEntityError, EntityNotFoundError

T = TypeVar("T")


class EntityCollection(Generic[T]):
    """
    Ordered container that rejects two entities with the same identity.

    The identity of an entity is computed by the ``identity`` projection
    (nusnetid for persons, group id for groups, the full slot for
    consultations). Lookups by identity are O(1); iteration follows
    insertion order, and replace() keeps the replaced entity's position.
    """

    def __init__(
        self,
        entity_name: str,
        identity: Callable[[T], Hashable],
        items: Iterable[T] = (),
    ):
        self._entity_name = entity_name
        self._identity = identity
        self._items: Dict[Hashable, T] = {}
        self.set_all(items)

    @property
    def entity_name(self) -> str:
        return self._entity_name

    def identity_of(self, entity: T) -> Hashable:
        return self._identity(entity)

    def contains(self, identity: Hashable) -> bool:
        return identity in self._items

    def find(self, identity: Hashable) -> Optional[T]:
        """Return the entity with this identity, or None."""
        return self._items.get(identity)

    def add(self, entity: T) -> None:
        key = self._identity(entity)
        if key in self._items:
            raise DuplicateEntityError(self._entity_name, key)
        self._items[key] = entity

    def replace(self, old: T, new: T) -> None:
        """
        Swap old for new in place.

        Raises:
            EntityNotFoundError: If old's identity is not stored.
            DuplicateEntityError: If new has a different identity that is
                already taken by another stored entity.
        """
        old_key = self._identity(old)
        new_key = self._identity(new)
        if old_key not in self._items:
            raise EntityNotFoundError(self._entity_name, old_key)
        if new_key == old_key:
            self._items[old_key] = new
            return
        if new_key in self._items:
            raise DuplicateEntityError(self._entity_name, new_key)
        self._items = {
            (new_key if key == old_key else key): (new if key == old_key else value)
            for key, value in self._items.items()
        }

    def remove(self, entity: T) -> None:
        key = self._identity(entity)
        if key not in self._items:
            raise EntityNotFoundError(self._entity_name, key)
        del self._items[key]

    def set_all(self, items: Iterable[T]) -> None:
        """Replace the whole contents; nothing changes if items has duplicates."""
        staged: Dict[Hashable, T] = {}
        for entity in items:
            key = self._identity(entity)
            if key in staged:
                raise DuplicateEntityError(self._entity_name, key)
            staged[key] = entity
        self._items = staged

    def as_list(self) -> List[T]:
        return list(self._items.values())

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityCollection):
            return NotImplemented
        return self.as_list() == other.as_list()

    def __repr__(self) -> str:
        return f"<EntityCollection({self._entity_name}, size={len(self)})>"

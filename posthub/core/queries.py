from __future__ import annotations

from typing import Awaitable, Callable, Iterable, Optional, Protocol, TypeVar, Union, runtime_checkable

from posthub.core.errors import NotFoundError


T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

Predicate = Callable[[T], bool]


@runtime_checkable
class Queryable(Protocol[T_co]):
    def first(self, predicate: Callable[..., bool]) -> Awaitable[Optional[T_co]]: ...


Source = Union[Queryable[T], Iterable[T]]


async def find_first(source: Source[T], predicate: Predicate[T]) -> Optional[T]:
    """Return the first entity of ``source`` matching ``predicate``, or None.

    Store tables are awaited; plain iterables (lists, generators) are scanned.
    When several entities match, which one is returned depends on the
    source's iteration order.
    """
    if isinstance(source, Queryable):
        return await source.first(predicate)
    for entity in source:
        if predicate(entity):
            return entity
    return None


async def get_or_raise(source: Source[T], predicate: Predicate[T], message: str) -> T:
    entity = await find_first(source, predicate)
    if entity is None:
        raise NotFoundError(message)
    return entity


async def get_resource_or_raise(
    source: Source[T],
    predicate: Predicate[T],
    resource_type: str,
    resource_id: int,
) -> T:
    entity = await find_first(source, predicate)
    if entity is None:
        raise NotFoundError.for_resource(resource_type, resource_id)
    return entity

"""Loading state of record attributes.

An association can be "not loaded": either it holds the NOT_LOADED sentinel,
or the record is a SQLAlchemy/SQLModel mapped instance whose attribute has
not been fetched yet. Unloaded attributes are never read through the normal
attribute path, since that would trigger a lazy load.
"""

from typing import Any, Final

from sqlalchemy import inspect
from sqlalchemy.orm import InstanceState


class NotLoaded:
    """Marker for an association that was not fetched from storage."""

    _instance: "NotLoaded | None" = None

    def __new__(cls) -> "NotLoaded":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_LOADED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "NotLoaded":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "NotLoaded":
        return self

    def __reduce__(self) -> str:
        return "NOT_LOADED"


NOT_LOADED: Final = NotLoaded()


def instance_state(record: Any) -> InstanceState[Any] | None:
    """Return the SQLAlchemy state of a mapped instance, None otherwise."""
    state: InstanceState[Any] | None = inspect(record, raiseerr=False)
    return state


def is_mapped(record: Any) -> bool:
    """Check whether record is an instance SQLAlchemy instruments."""
    return instance_state(record) is not None


def attribute_value(record: Any, name: str) -> Any:
    """Read an attribute without forcing it to load.

    Returns NOT_LOADED for attributes a mapped instance has not loaded, and
    None for attributes the record does not have at all.
    """
    state = instance_state(record)
    if state is not None and name in state.unloaded:
        return NOT_LOADED
    return getattr(record, name, None)

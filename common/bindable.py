from __future__ import annotations

"""
Minimal change-notification primitives for binding view-models to a UI.

    vm = CameraViewModel(...)
    vm.subscribe(lambda sender, name: print(name, "changed"))
    cams = ObservableList()
    cams.subscribe(lambda action, items: redraw_pins())
"""

from collections.abc import MutableSequence
from typing import Any, Callable, Generic, Iterable, List, TypeVar, overload


T = TypeVar("T")

PropertyChangedHandler = Callable[[Any, str], None]
CollectionChangedHandler = Callable[[str, List[Any]], None]


class BindableBase:
    """
    Base for objects whose mutable properties raise change notifications.

    Subclasses keep backing fields as `_<name>` and route setters through set_property().
    """

    def __init__(self) -> None:
        self._property_handlers: List[PropertyChangedHandler] = []

    def subscribe(self, handler: PropertyChangedHandler) -> None:
        self._property_handlers.append(handler)

    def unsubscribe(self, handler: PropertyChangedHandler) -> None:
        self._property_handlers.remove(handler)

    def set_property(self, name: str, value: Any) -> bool:
        """Store value in `_<name>`; notify only when it actually changed."""
        attr = f"_{name}"
        if attr in self.__dict__:
            current = self.__dict__[attr]
            if current is value or current == value:
                return False
        setattr(self, attr, value)
        self.on_property_changed(name)
        return True

    def on_property_changed(self, name: str) -> None:
        for handler in list(self._property_handlers):
            handler(self, name)


class ObservableList(MutableSequence, Generic[T]):
    """
    List that reports mutations as (action, items):
      - "add": items appended/inserted
      - "remove": items removed
      - "replace": new items written over an index/slice
      - "reset": contents cleared (one event, regardless of size)
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: List[T] = list(items)
        self._handlers: List[CollectionChangedHandler] = []

    # -------- subscription --------

    def subscribe(self, handler: CollectionChangedHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: CollectionChangedHandler) -> None:
        self._handlers.remove(handler)

    def _notify(self, action: str, items: List[T]) -> None:
        for handler in list(self._handlers):
            handler(action, items)

    # -------- MutableSequence --------

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> List[T]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __setitem__(self, index, value) -> None:
        self._items[index] = value
        self._notify("replace", list(value) if isinstance(index, slice) else [value])

    def __delitem__(self, index) -> None:
        removed = self._items[index]
        del self._items[index]
        self._notify("remove", removed if isinstance(index, slice) else [removed])

    def __len__(self) -> int:
        return len(self._items)

    def insert(self, index: int, value: T) -> None:
        self._items.insert(index, value)
        self._notify("add", [value])

    def clear(self) -> None:
        self._items.clear()
        self._notify("reset", [])

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ObservableList):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"ObservableList({self._items!r})"

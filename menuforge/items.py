"""Menu items: plain entries, sub-menus, adjustable values, toggles and apps."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Optional, Sequence, TypeVar

MAX_DISPLAY_CHAR = 21
"""Bytes per display line, including the terminating byte."""

MAX_DISPLAY_ITEM = 5
"""Number of lines shown on the display at once."""

T = TypeVar("T")


class Key(Enum):
    """Keys the navigator reacts to."""

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3
    NONE = 4


class ItemKind(Enum):
    NORMAL = "normal"
    CHANGEABLE = "changeable"
    TOGGLE = "toggle"


@dataclass
class Ref(Generic[T]):
    """A shared, mutable cell that a menu item reads and writes."""

    value: T


# data type -> (bit width, signed)
_INT_TYPES = {
    "uint8_t": (8, False),
    "uint16_t": (16, False),
    "uint32_t": (32, False),
    "uint64_t": (64, False),
    "int8_t": (8, True),
    "int16_t": (16, True),
    "int32_t": (32, True),
    "int64_t": (64, True),
}
_FLOAT_TYPES = ("float", "double")
DATA_TYPES = tuple(_INT_TYPES) + _FLOAT_TYPES


def _wrap(value: int, bits: int, signed: bool) -> int:
    value &= (1 << bits) - 1
    if signed and value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _to_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


class ChangeableValue:
    """A number that steps between a minimum and a maximum.

    Arithmetic follows the fixed-width type named by ``dtype``: 32- and 64-bit
    integers wrap around, narrower integers are compared exactly, and
    ``float`` keeps single precision.
    """

    def __init__(
        self,
        ref: Ref,
        minimum: float,
        maximum: float,
        step: float,
        on_change: Optional[Callable[[Any], None]] = None,
        dtype: str = "int32_t",
    ) -> None:
        if dtype not in DATA_TYPES:
            raise ValueError(f"unsupported data type: {dtype!r}")
        self.dtype = dtype
        self.ref = ref
        self.minimum = self._cast(minimum)
        self.maximum = self._cast(maximum)
        self.step = self._cast(step)
        self.on_change = on_change
        ref.value = self._cast(ref.value)

    def _cast(self, value: Any) -> Any:
        if self.dtype in _INT_TYPES:
            bits, signed = _INT_TYPES[self.dtype]
            return _wrap(int(value), bits, signed)
        if self.dtype == "float":
            return _to_float32(float(value))
        return float(value)

    def _arith(self, value: Any) -> Any:
        """Result of an addition or subtraction as the fixed-width type sees it."""
        if self.dtype in _INT_TYPES:
            bits, signed = _INT_TYPES[self.dtype]
            # narrower types are promoted to int before the comparison
            return _wrap(value, bits, signed) if bits >= 32 else value
        if self.dtype == "float":
            return _to_float32(value)
        return value

    def _store(self, value: Any) -> None:
        self.ref.value = self._cast(value)
        if self.on_change is not None:
            self.on_change(self.ref.value)

    def increment(self) -> None:
        total = self._arith(self.ref.value + self.step)
        if total <= self.maximum:
            self._store(total)

    def decrement(self) -> None:
        total = self._arith(self.ref.value - self.step)
        if total >= self.minimum:
            self._store(total)

    def display_value(self) -> str:
        """The value as shown on one display line."""
        value = self.ref.value
        if self.dtype in _INT_TYPES:
            text = str(int(value))
        elif self.dtype == "float":
            text = f"{value:.3f}"
        else:
            text = f"{value:.6f}"
        return text[: MAX_DISPLAY_CHAR - 1]


class MenuItem:
    """One entry of a menu tree."""

    def __init__(
        self,
        name: str,
        children: Optional[Sequence["MenuItem"]] = None,
        kind: ItemKind = ItemKind.NORMAL,
        app_func: Optional[Callable[[Any], None]] = None,
        app_args: Any = None,
    ) -> None:
        self.name = name
        self.parent: Optional[MenuItem] = None
        self.children: tuple[MenuItem, ...] = tuple(children or ())
        self.kind = kind
        self.is_locked = True
        self.saved_selected_index = 0
        self.saved_first_visible_item = 0
        self.changeable: Optional[ChangeableValue] = None
        self.toggle_state = False
        self.toggle_ref: Optional[Ref] = None
        self.on_toggle: Optional[Callable[[bool], None]] = None
        self.app_func: Optional[Callable[[Any], None]] = None
        self.app_args: Any = None

        if self.children:
            for child in self.children:
                child.parent = self
        elif kind is ItemKind.NORMAL:
            self.app_func = app_func
            self.app_args = app_args

    def __repr__(self) -> str:
        return f"MenuItem({self.name!r}, kind={self.kind.name}, children={len(self.children)})"

    def toggle(self) -> None:
        """Flip a toggle item's flag; other items are left alone."""
        if self.kind is not ItemKind.TOGGLE or self.toggle_ref is None:
            return
        self.toggle_ref.value = not self.toggle_ref.value
        self.toggle_state = self.toggle_ref.value
        if self.on_toggle is not None:
            self.on_toggle(self.toggle_ref.value)

    def increment(self) -> None:
        if self.changeable is not None:
            self.changeable.increment()

    def decrement(self) -> None:
        if self.changeable is not None:
            self.changeable.decrement()

    def value_str(self) -> str:
        """The value part of the item's display line, empty for plain items."""
        if self.kind is ItemKind.TOGGLE:
            return "ON " if self.toggle_state else "OFF"
        if self.kind is ItemKind.CHANGEABLE and self.changeable is not None:
            return self.changeable.display_value()
        return ""


def create_normal_item(name: str, children: Optional[Iterable[MenuItem]] = None) -> MenuItem:
    """A plain entry, which is a sub-menu when it has children."""
    return MenuItem(name, tuple(children) if children is not None else None, ItemKind.NORMAL)


def create_changeable_item(
    name: str,
    ref: Ref,
    minimum: float,
    maximum: float,
    step: float,
    on_change: Optional[Callable[[Any], None]] = None,
    dtype: Optional[str] = None,
) -> MenuItem:
    """An entry that adjusts ``ref`` between ``minimum`` and ``maximum``.

    Without ``dtype`` the item is ``double`` if any number given is a float,
    otherwise ``int32_t``.
    """
    if dtype is None:
        numbers = (ref.value, minimum, maximum, step)
        dtype = "double" if any(isinstance(n, float) for n in numbers) else "int32_t"
    item = MenuItem(name, None, ItemKind.CHANGEABLE)
    item.changeable = ChangeableValue(ref, minimum, maximum, step, on_change, dtype)
    return item


def create_toggle(
    name: str, ref: Ref, on_toggle: Optional[Callable[[bool], None]] = None
) -> MenuItem:
    """An entry that flips the boolean held in ``ref``."""
    item = MenuItem(name, None, ItemKind.TOGGLE)
    item.toggle_ref = ref
    item.toggle_state = bool(ref.value)
    item.on_toggle = on_toggle
    return item


def create_app(
    name: str, app_args: Any = None, app_func: Optional[Callable[[Any], None]] = None
) -> MenuItem:
    """An entry that runs ``app_func(app_args)`` when entered."""
    return MenuItem(name, None, ItemKind.NORMAL, app_func, app_args)
"""Editing model for the properties of a single menu item."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, FrozenSet, Optional

from .codegen import generate_code_preview
from .itemdata import (
    DATA_TYPES,
    DEFAULT_RANGE,
    ITEM_TYPES,
    STEP_RANGE,
    ItemData,
    ValueRange,
    value_range,
)
from .project import ROOT_NAME

Listener = Callable[[ItemData], None]

_TEXT_FIELDS = ("name", "var_name", "func_name", "args_name", "callback_code")
_EDITABLE = frozenset(
    _TEXT_FIELDS
    + (
        "type",
        "data_type",
        "initial_value",
        "min_value",
        "max_value",
        "step",
        "has_callback",
    )
)
# item types whose callback flag the editor fixes
_FORCED_CALLBACK = {"Normal": False, "Application": True}
_CALLBACK_TYPES = ("Changeable", "bool")


def _fit(value: Any, rng: ValueRange) -> float:
    return float(round(min(max(float(value), rng.minimum), rng.maximum), rng.decimals))


class ItemEditor:
    """Holds the values being edited for one item and keeps them consistent.

    The main menu cannot be edited. Numbers of changeable items stay within
    the range of their data type, the minimum never exceeds the maximum and
    the initial value stays between them. Every change is announced to the
    subscribed listeners with the resulting item.
    """

    def __init__(self, data: Optional[ItemData] = None) -> None:
        self._listeners: list[Listener] = []
        self._current = ItemData()
        self._is_root = False
        self._name = ""
        self._var_name = ""
        self._func_name = ""
        self._args_name = ""
        self._type = ITEM_TYPES[0]
        self._data_type = DATA_TYPES[0]
        self._range = DEFAULT_RANGE
        self._initial = 0.0
        self._min = 0.0
        self._max = 0.0
        self._step = 1.0
        self._callback_checked = False
        self._callback_code = ""
        if data is not None:
            self.set_item_data(data)

    # value handling -------------------------------------------------------

    def _set_initial(self, value: Any) -> None:
        self._initial = _fit(value, self._range)

    def _set_min(self, value: Any) -> None:
        self._min = _fit(value, self._range)
        if self._max < self._min:
            self._max = self._min
        if self._initial < self._min:
            self._initial = self._min

    def _set_max(self, value: Any) -> None:
        self._max = _fit(value, self._range)
        if self._min > self._max:
            self._min = self._max
        if self._initial > self._max:
            self._initial = self._max

    def _set_step(self, value: Any) -> None:
        self._step = _fit(value, STEP_RANGE)

    def _change_data_type(self, data_type: str) -> None:
        if data_type == self._data_type:
            return
        self._data_type = data_type
        self._range = value_range(data_type)
        self._min = _fit(self._min, self._range)
        self._max = _fit(self._max, self._range)
        self._initial = _fit(self._initial, self._range)
        if self._min > self._max:
            self._min = self._max
        self._initial = min(max(self._initial, self._min), self._max)

    def _enforce_callback(self) -> None:
        forced = _FORCED_CALLBACK.get(self._type)
        if forced is not None:
            self._callback_checked = forced

    def _emit(self) -> ItemData:
        data = self.item_data()
        self._current = data
        for listener in list(self._listeners):
            listener(data)
        return data

    # public interface -----------------------------------------------------

    @property
    def is_root(self) -> bool:
        return self._is_root

    @property
    def value_limits(self) -> ValueRange:
        """The range and precision currently applied to the three values."""
        return self._range

    @property
    def callback_editable(self) -> bool:
        """Whether the callback flag may be switched by the user."""
        return not self._is_root and self._type in _CALLBACK_TYPES

    @property
    def function_params(self) -> str:
        """Description of the parameters the callback code receives."""
        if self._type == "Application":
            return "void** args - 应用函数参数数组"
        if self._callback_checked and self._type == "Changeable":
            return f"const {self._data_type} value - 当前值"
        if self._callback_checked and self._type == "bool":
            return "const bool state - 当前状态"
        return ""

    @property
    def visible_sections(self) -> FrozenSet[str]:
        """Parts of the editor that apply to the current item type."""
        sections = set()
        if self._type in _CALLBACK_TYPES:
            sections.add("var_name")
        if self._type == "Application":
            sections.update(("app", "callback"))
        if self._type == "Changeable":
            sections.add("changeable")
        if self._type in _CALLBACK_TYPES and self._callback_checked:
            sections.add("callback")
        return frozenset(sections)

    def set_item_data(self, data: ItemData) -> ItemData:
        """Load ``data`` into the editor and announce the resulting item."""
        self._current = replace(data)
        self._is_root = data.is_root
        self._name = ROOT_NAME if data.is_root else data.name
        self._var_name = data.var_name
        self._func_name = data.func_name
        self._args_name = data.args_name
        if data.type in ITEM_TYPES:
            self._type = data.type
        if data.type == "Changeable":
            if data.data_type in DATA_TYPES:
                self._change_data_type(data.data_type)
            self._set_initial(data.initial_value)
            self._set_min(data.min_value)
            self._set_max(data.max_value)
            self._set_step(data.step)
        self._callback_checked = data.has_callback
        self._callback_code = data.callback_code
        self._enforce_callback()
        return self._emit()

    def item_data(self) -> ItemData:
        """The item as it currently stands in the editor."""
        data = replace(
            self._current,
            name=self._name,
            var_name=self._var_name,
            func_name=self._func_name,
            args_name=self._args_name,
            type=self._type,
            is_root=self._is_root,
        )
        if self._type == "Changeable":
            data.data_type = self._data_type
            data.initial_value = self._initial
            data.min_value = self._min
            data.max_value = self._max
            data.step = self._step
        data.has_callback = self._callback_checked or self._type == "Application"
        data.callback_code = self._callback_code
        return data

    def update(self, **kwargs: Any) -> ItemData:
        """Change some fields of the item and announce the result.

        Raises TypeError for unknown fields and ValueError for edits the
        editor does not allow.
        """
        unknown = set(kwargs) - _EDITABLE
        if unknown:
            raise TypeError(f"unknown item fields: {', '.join(sorted(unknown))}")
        if self._is_root and kwargs:
            raise ValueError("the main menu cannot be edited")
        item_type = kwargs.get("type", self._type)
        if item_type not in ITEM_TYPES:
            raise ValueError(f"unknown item type: {item_type!r}")
        if "data_type" in kwargs and kwargs["data_type"] not in DATA_TYPES:
            raise ValueError(f"unknown data type: {kwargs['data_type']!r}")
        if "has_callback" in kwargs:
            forced = _FORCED_CALLBACK.get(item_type)
            if forced is not None and bool(kwargs["has_callback"]) != forced:
                raise ValueError(f"the callback of {item_type} items cannot be changed")

        for name in _TEXT_FIELDS:
            if name in kwargs:
                setattr(self, f"_{name}", str(kwargs[name]))
        self._type = item_type
        if "data_type" in kwargs:
            self._change_data_type(kwargs["data_type"])
        if "initial_value" in kwargs:
            self._set_initial(kwargs["initial_value"])
        if "min_value" in kwargs:
            self._set_min(kwargs["min_value"])
        if "max_value" in kwargs:
            self._set_max(kwargs["max_value"])
        if "step" in kwargs:
            self._set_step(kwargs["step"])
        if "has_callback" in kwargs:
            self._callback_checked = bool(kwargs["has_callback"])
        self._enforce_callback()
        return self._emit()

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """Call ``callback`` with every modified item; returns an unsubscriber."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def code_preview(self) -> str:
        """Preview code of the item being edited."""
        return generate_code_preview(self.item_data())
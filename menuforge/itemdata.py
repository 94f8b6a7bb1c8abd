"""Description of a single menu item and its JSON form."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, NamedTuple

ITEM_TYPES = ("Normal", "Changeable", "bool", "Application")

DATA_TYPES = (
    "uint8_t",
    "uint16_t",
    "uint32_t",
    "uint64_t",
    "int8_t",
    "int16_t",
    "int32_t",
    "int64_t",
    "float",
    "double",
    "bool",
)


class ValueRange(NamedTuple):
    """Allowed bounds of a value and the number of decimals it keeps."""

    minimum: float
    maximum: float
    decimals: int


DEFAULT_RANGE = ValueRange(-9999999.0, 9999999.0, 0)
STEP_RANGE = ValueRange(0.0, 9999999.0, 2)

_RANGES = {
    "uint8_t": ValueRange(0.0, 255.0, 0),
    "uint16_t": ValueRange(0.0, 65535.0, 0),
    "uint32_t": ValueRange(0.0, 4294967295.0, 0),
    "uint64_t": ValueRange(0.0, 9223372036854775807.0, 0),
    "int8_t": ValueRange(-128.0, 127.0, 0),
    "int16_t": ValueRange(-32768.0, 32767.0, 0),
    "int32_t": ValueRange(-2147483648.0, 2147483647.0, 0),
    "int64_t": ValueRange(-9223372036854775807.0, 9223372036854775807.0, 0),
    "float": ValueRange(-9999999.0, 9999999.0, 6),
    "double": ValueRange(-9999999.0, 9999999.0, 6),
    "bool": ValueRange(0.0, 1.0, 0),
}


@dataclass
class ItemData:
    """Everything the builder knows about one menu entry."""

    name: str = ""
    type: str = "Normal"
    data_type: str = ""
    parent_name: str = ""
    var_name: str = ""
    func_name: str = ""
    args_name: str = ""
    initial_value: float = 0.0
    min_value: float = 0.0
    max_value: float = 0.0
    step: float = 1.0
    has_callback: bool = False
    callback_code: str = ""
    is_root: bool = False


def value_range(data_type: str) -> ValueRange:
    """Return the editable range of a changeable value of ``data_type``.

    Unknown types get the editor's default range.
    """
    return _RANGES.get(data_type, DEFAULT_RANGE)


def _fit(value: float, rng: ValueRange) -> float:
    return float(round(min(max(value, rng.minimum), rng.maximum), rng.decimals))


def clamp_values(data: ItemData) -> ItemData:
    """Return a copy whose numbers respect the data type and each other.

    Each value is held to the type's range and precision, the minimum never
    exceeds the maximum, and the initial value lies between them.
    """
    rng = value_range(data.data_type)
    minimum = _fit(data.min_value, rng)
    maximum = _fit(data.max_value, rng)
    initial = _fit(data.initial_value, rng)
    if minimum > maximum:
        minimum = maximum
    initial = min(max(initial, minimum), maximum)
    return replace(
        data,
        min_value=minimum,
        max_value=maximum,
        initial_value=initial,
        step=_fit(data.step, STEP_RANGE),
    )


# JSON key, attribute name, expected kind
_FIELDS = (
    ("parentName", "parent_name", str),
    ("varName", "var_name", str),
    ("dataType", "data_type", str),
    ("initialValue", "initial_value", float),
    ("minValue", "min_value", float),
    ("maxValue", "max_value", float),
    ("step", "step", float),
    ("hasCallback", "has_callback", bool),
    ("callbackCode", "callback_code", str),
    ("funcName", "func_name", str),
    ("argsName", "args_name", str),
)


def _coerce(value: Any, kind: type) -> Any:
    if kind is bool:
        return value if isinstance(value, bool) else False
    if kind is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        return 0.0
    return value if isinstance(value, str) else ""


def item_to_json(data: ItemData) -> dict[str, Any]:
    """Return the JSON object that stores ``data`` in a project file."""
    obj: dict[str, Any] = {"name": data.name, "type": data.type}
    for key, attr, _ in _FIELDS:
        obj[key] = getattr(data, attr)
    obj["isRoot"] = data.is_root
    return obj


def item_from_json(obj: Mapping[str, Any], default_root: bool = False) -> ItemData:
    """Build an item from its JSON object.

    Missing keys keep their defaults; a missing ``isRoot`` takes ``default_root``.
    """
    data = ItemData(
        name=_coerce(obj.get("name"), str),
        type=_coerce(obj.get("type"), str),
    )
    for key, attr, kind in _FIELDS:
        if key in obj:
            setattr(data, attr, _coerce(obj[key], kind))
    data.is_root = _coerce(obj["isRoot"], bool) if "isRoot" in obj else default_root
    return data
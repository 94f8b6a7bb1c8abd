import pytest

from menuforge.items import (
    MAX_DISPLAY_CHAR,
    ItemKind,
    Ref,
    create_app,
    create_changeable_item,
    create_normal_item,
    create_toggle,
)


def test_increment_within_bounds_and_callback():
    seen = []
    ref = Ref(0)
    item = create_changeable_item("KP", ref, 0, 100, 1, seen.append)
    item.increment()
    assert ref.value == 1
    assert seen == [ref.value]


def test_increment_stops_at_maximum():
    ref = Ref(100)
    item = create_changeable_item("KP", ref, 0, 100, 1)
    item.increment()
    assert ref.value == 100


def test_decrement_stops_at_minimum():
    seen = []
    ref = Ref(0)
    item = create_changeable_item("KP", ref, 0, 100, 1, seen.append)
    item.decrement()
    assert ref.value == 0
    assert seen == []


def test_round_trip_increment_decrement():
    ref = Ref(5)
    item = create_changeable_item("x", ref, 0, 10, 2)
    item.increment()
    item.decrement()
    assert ref.value == 5
    assert isinstance(ref.value, int)


def test_uint8_decrement_below_zero_is_refused():
    ref = Ref(0)
    item = create_changeable_item("x", ref, 0, 255, 1, dtype="uint8_t")
    item.decrement()
    assert ref.value == 0


def test_uint32_decrement_from_zero_wraps():
    ref = Ref(0)
    item = create_changeable_item("x", ref, 0, 4294967295, 1, dtype="uint32_t")
    item.decrement()
    assert ref.value == 4294967295


def test_double_display_format():
    ref = Ref(0.5)
    item = create_changeable_item("KI", ref, 0.0, 10.0, 0.1)
    assert item.changeable.dtype == "double"
    assert item.value_str() == "0.500000"


def test_float_display_has_three_decimals():
    ref = Ref(1.5)
    item = create_changeable_item("KI", ref, 0, 10, 0.1, dtype="float")
    assert item.value_str() == "1.500"


def test_display_value_is_truncated_to_line_width():
    ref = Ref(1e15)
    item = create_changeable_item("big", ref, 0.0, 2e15, 1.0)
    assert len(item.value_str()) == MAX_DISPLAY_CHAR - 1


def test_unknown_dtype_rejected():
    with pytest.raises(ValueError):
        create_changeable_item("x", Ref(0), 0, 1, 1, dtype="bool")


def test_toggle_flips_ref_and_calls_back():
    seen = []
    ref = Ref(False)
    item = create_toggle("Camera", ref, seen.append)
    assert item.value_str() == "OFF"
    item.toggle()
    assert ref.value is True
    assert seen == [True]
    assert item.value_str() == "ON "
    item.toggle()
    assert ref.value is False


def test_toggle_on_normal_item_does_nothing():
    item = create_normal_item("Version")
    item.toggle()
    assert item.toggle_state is False
    assert item.value_str() == ""


def test_increment_on_toggle_item_ignored():
    ref = Ref(True)
    item = create_toggle("MotorState", ref)
    item.increment()
    item.decrement()
    assert ref.value is True


def test_normal_item_links_children():
    kp = create_changeable_item("KP", Ref(0.0), 0, 100, 1, dtype="float")
    reset = create_app("Reset")
    pid = create_normal_item("PID", [kp, reset])
    assert pid.children == (kp, reset)
    assert kp.parent is pid and reset.parent is pid
    assert pid.parent is None
    assert pid.kind is ItemKind.NORMAL


def test_app_item_keeps_function_and_args():
    calls = []
    args = [1, 2]
    app = create_app("Task1", args, calls.append)
    assert app.app_args is args
    app.app_func(app.app_args)
    assert calls == [args]
    assert app.children == ()


def test_new_items_start_locked():
    item = create_toggle("Camera", Ref(False))
    assert item.is_locked is True
    assert item.kind is ItemKind.TOGGLE
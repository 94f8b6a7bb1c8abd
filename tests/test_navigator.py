import pytest

from menuforge.items import (
    MAX_DISPLAY_CHAR,
    MAX_DISPLAY_ITEM,
    Key,
    Ref,
    create_app,
    create_changeable_item,
    create_normal_item,
    create_toggle,
)
from menuforge.navigator import Navigator, key_from_code


def flat_menu(count):
    children = [create_normal_item(f"Item{i}") for i in range(count)]
    return create_normal_item("Main Menu", children), children


def test_empty_navigator_reports_no_menu():
    nav = Navigator(None)
    nav.handle_input(Key.DOWN)
    nav.refresh_display()
    assert nav.display_buffer() == b"No Menu Item"
    assert nav.display_lines()[0] == "No Menu Item"
    assert nav.selected_index == 0


def test_menu_without_children_reports_no_menu():
    nav = Navigator(create_normal_item("Main Menu"))
    assert nav.display_buffer() == b"No Menu Item"


def test_buffer_size_matches_display_geometry():
    root, _ = flat_menu(3)
    nav = Navigator(root)
    assert len(nav.display_buffer()) == MAX_DISPLAY_CHAR * MAX_DISPLAY_ITEM


def test_refresh_marks_selected_item():
    root, children = flat_menu(3)
    nav = Navigator(root)
    nav.refresh_display()
    lines = nav.display_lines()
    assert lines[0].startswith("->")
    assert lines[1].startswith("  ")
    assert all(child.name in line for child, line in zip(children, lines))


def test_down_and_up_move_selection_and_wrap():
    root, _ = flat_menu(3)
    nav = Navigator(root)
    nav.handle_input(Key.DOWN)
    assert nav.selected_index == 1
    nav.handle_input(Key.UP)
    nav.handle_input(Key.UP)
    assert nav.selected_index == len(root.children) - 1
    nav.handle_input(Key.DOWN)
    assert nav.selected_index == 0


def test_scrolling_to_second_page_clears_stale_lines():
    root, children = flat_menu(7)
    nav = Navigator(root)
    for _ in range(MAX_DISPLAY_ITEM):
        nav.handle_input(Key.DOWN)
    assert nav.selected_index == MAX_DISPLAY_ITEM
    assert nav.first_visible_item == MAX_DISPLAY_ITEM
    nav.refresh_display()
    lines = nav.display_lines()
    assert lines[0].startswith("->")
    assert children[MAX_DISPLAY_ITEM].name in lines[0]
    assert children[MAX_DISPLAY_ITEM + 1].name in lines[1]
    assert lines[2:] == ["", "", ""]


def test_up_from_top_jumps_to_last_page():
    root, children = flat_menu(7)
    nav = Navigator(root)
    nav.handle_input(Key.UP)
    assert nav.selected_index == len(children) - 1
    assert nav.first_visible_item == MAX_DISPLAY_ITEM
    nav.handle_input(Key.DOWN)
    assert nav.selected_index == 0
    assert nav.first_visible_item == 0


def test_enter_submenu_and_return_restores_selection():
    sub = create_normal_item("Sub", [create_normal_item("x"), create_normal_item("y")])
    root = create_normal_item("Main Menu", [create_normal_item("B"), sub])
    nav = Navigator(root)
    nav.handle_input(Key.DOWN)
    nav.handle_input(Key.RIGHT)
    assert nav.current_menu is sub
    assert nav.selected_index == 0
    nav.handle_input(Key.DOWN)
    nav.handle_input(Key.LEFT)
    assert nav.current_menu is root
    assert nav.selected_index == 1


def test_left_at_root_stays():
    root, _ = flat_menu(2)
    nav = Navigator(root)
    nav.handle_input(Key.LEFT)
    assert nav.current_menu is root


def test_right_on_plain_leaf_does_nothing():
    root, _ = flat_menu(2)
    nav = Navigator(root)
    nav.handle_input(Key.RIGHT)
    assert nav.current_menu is root
    assert nav.in_app_mode is False


def test_changeable_item_edit_cycle():
    ref = Ref(5)
    item = create_changeable_item("KP", ref, 0, 10, 1, dtype="int32_t")
    nav = Navigator(create_normal_item("Main Menu", [item, create_normal_item("Other")]))
    nav.handle_input(Key.RIGHT)
    assert item.is_locked is False
    nav.handle_input(Key.UP)
    assert ref.value == 6
    nav.handle_input(Key.DOWN)
    nav.handle_input(Key.DOWN)
    assert ref.value == 4
    assert nav.selected_index == 0
    nav.refresh_display()
    line = nav.display_lines()[0]
    assert line.startswith(">>")
    assert line.endswith(item.value_str())
    nav.handle_input(Key.LEFT)
    assert item.is_locked is True
    nav.refresh_display()
    assert nav.display_lines()[0].startswith("->")
    nav.handle_input(Key.DOWN)
    assert nav.selected_index == 1


def test_toggle_item_flips_when_unlocked():
    ref = Ref(False)
    item = create_toggle("Camera", ref)
    nav = Navigator(create_normal_item("Main Menu", [item]))
    nav.handle_input(Key.RIGHT)
    nav.handle_input(Key.DOWN)
    assert ref.value is True
    nav.refresh_display()
    assert nav.display_lines()[0].endswith("ON ")
    nav.handle_input(Key.UP)
    assert ref.value is False


def test_app_runs_and_left_leaves_app_mode():
    calls = []
    args = ["arg"]
    app = create_app("Run", args, calls.append)
    nav = Navigator(create_normal_item("Main Menu", [app, create_normal_item("x")]))
    nav.handle_input(Key.RIGHT)
    assert calls == [args]
    assert nav.in_app_mode is True
    nav.handle_input(Key.DOWN)
    assert nav.selected_index == 0
    nav.handle_input(Key.LEFT)
    assert nav.in_app_mode is False


def test_refresh_does_nothing_in_app_mode():
    root, _ = flat_menu(2)
    nav = Navigator(root)
    nav.in_app_mode = True
    nav.refresh_display()
    assert nav.display_lines() == [""] * MAX_DISPLAY_ITEM


def test_long_names_are_truncated():
    root = create_normal_item("Main Menu", [create_normal_item("N" * 40)])
    nav = Navigator(root)
    nav.refresh_display()
    assert len(nav.display_lines()[0].encode()) == MAX_DISPLAY_CHAR - 1


@pytest.mark.parametrize("key", list(Key))
def test_key_from_code_round_trip(key):
    assert key_from_code(key.value) is key


def test_key_from_code_unknown_is_none():
    assert key_from_code(99) is Key.NONE


def test_handle_input_accepts_numeric_codes():
    root, _ = flat_menu(3)
    nav = Navigator(root)
    nav.handle_input(Key.DOWN.value)
    assert nav.selected_index == 1


def test_write_display_buffer_places_text_on_line():
    root, _ = flat_menu(2)
    nav = Navigator(root)
    nav.refresh_display()
    nav.write_display_buffer("hello", 2)
    lines = nav.display_lines()
    assert lines[2] == "hello"
    assert lines[0] == ""


def test_write_display_buffer_rejects_overflow():
    root, _ = flat_menu(2)
    nav = Navigator(root)
    with pytest.raises(ValueError):
        nav.write_display_buffer("x" * (MAX_DISPLAY_CHAR + 1), MAX_DISPLAY_ITEM - 1)
    with pytest.raises(ValueError):
        nav.write_display_buffer("x", MAX_DISPLAY_ITEM)
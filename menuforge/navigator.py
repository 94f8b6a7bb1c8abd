"""Key-driven navigation through a menu tree and its text display buffer."""

from __future__ import annotations

from typing import Optional, Union

from .items import MAX_DISPLAY_CHAR, MAX_DISPLAY_ITEM, ItemKind, Key, MenuItem

BUFFER_SIZE = MAX_DISPLAY_CHAR * MAX_DISPLAY_ITEM
"""Size in bytes of the whole display buffer."""

NO_MENU_TEXT = "No Menu Item"

_ADJUSTABLE = (ItemKind.CHANGEABLE, ItemKind.TOGGLE)


def key_from_code(value: int) -> Key:
    """Map a numeric key code to a key; unknown codes become ``Key.NONE``."""
    try:
        return Key(int(value))
    except (ValueError, TypeError):
        return Key.NONE


class Navigator:
    """Walks a menu tree in response to keys and renders the visible page.

    The display is a fixed buffer of ``MAX_DISPLAY_ITEM`` lines of
    ``MAX_DISPLAY_CHAR`` bytes, each line a zero-terminated string.
    """

    def __init__(self, main_item: Optional[MenuItem] = None) -> None:
        self.current_menu = main_item
        self.in_app_mode = False
        self.selected_index = 0
        self.first_visible_item = 0
        self.app_saved_selected_index = 0
        self._buffer = bytearray(BUFFER_SIZE)

    def _clear(self) -> None:
        self._buffer[:] = bytes(BUFFER_SIZE)

    def _move_up(self, count: int) -> None:
        self.selected_index = count - 1 if self.selected_index == 0 else self.selected_index - 1
        if self.selected_index == count - 1:
            if count > MAX_DISPLAY_ITEM:
                self._clear()
            self.first_visible_item = self.selected_index - self.selected_index % MAX_DISPLAY_ITEM

    def _move_down(self, count: int) -> None:
        self.selected_index = (self.selected_index + 1) % count
        if self.selected_index == 0:
            if count > MAX_DISPLAY_ITEM:
                self._clear()
            self.first_visible_item = 0

    def _enter(self, item: MenuItem) -> None:
        menu = self.current_menu
        assert menu is not None
        self._clear()
        menu.saved_selected_index = self.selected_index
        menu.saved_first_visible_item = self.first_visible_item
        self.current_menu = item
        self.selected_index = 0
        self.first_visible_item = 0

    def _leave(self) -> None:
        menu = self.current_menu
        if menu is None or menu.parent is None:
            return
        self._clear()
        self.current_menu = menu.parent
        self.selected_index = self.current_menu.saved_selected_index
        self.first_visible_item = self.current_menu.saved_first_visible_item

    def handle_input(self, key: Union[Key, int]) -> None:
        """React to one key press."""
        if not isinstance(key, Key):
            key = key_from_code(key)
        menu = self.current_menu
        if menu is None or not menu.children:
            return

        if self.in_app_mode:
            if key is Key.LEFT:
                self.in_app_mode = False
            return

        count = len(menu.children)
        point = menu.children[self.selected_index]
        unlocked = point.kind in _ADJUSTABLE and not point.is_locked

        if key is Key.UP:
            if unlocked:
                if point.kind is ItemKind.CHANGEABLE:
                    point.increment()
                else:
                    point.toggle()
            else:
                self._move_up(count)
        elif key is Key.DOWN:
            if unlocked:
                if point.kind is ItemKind.CHANGEABLE:
                    point.decrement()
                else:
                    point.toggle()
            else:
                self._move_down(count)
        elif key is Key.RIGHT:
            if point.kind in _ADJUSTABLE:
                point.is_locked = False
            elif point.children:
                self._enter(point)
            elif point.app_func is not None:
                self._clear()
                self.in_app_mode = True
                self.app_saved_selected_index = self.selected_index
                point.app_func(point.app_args)
        elif key is Key.LEFT:
            if unlocked:
                point.is_locked = True
            else:
                self._leave()

        count = len(self.current_menu.children)
        if count > MAX_DISPLAY_ITEM:
            if self.selected_index >= self.first_visible_item + MAX_DISPLAY_ITEM:
                self._clear()
                self.first_visible_item += MAX_DISPLAY_ITEM
            elif self.selected_index < self.first_visible_item and self.selected_index != 0:
                self._clear()
                self.first_visible_item -= MAX_DISPLAY_ITEM

    def _put_line(self, line: int, text: str) -> None:
        data = text.encode("utf-8")[: MAX_DISPLAY_CHAR - 1]
        start = line * MAX_DISPLAY_CHAR
        self._buffer[start : start + len(data)] = data
        self._buffer[start + len(data)] = 0

    def refresh_display(self) -> None:
        """Render the visible page of the current menu into the buffer."""
        menu = self.current_menu
        if menu is None or self.in_app_mode:
            return
        count = len(menu.children)
        first = self.first_visible_item
        if count - first < MAX_DISPLAY_ITEM:
            rows = count % MAX_DISPLAY_ITEM
        else:
            rows = min(count, MAX_DISPLAY_ITEM)

        for line, item in enumerate(menu.children[first : first + rows]):
            selected = self.selected_index - first == line
            if item.kind is ItemKind.NORMAL:
                self._put_line(line, ("->" if selected else "  ") + item.name)
            else:
                if selected:
                    marker = "->" if item.is_locked else ">>"
                else:
                    marker = "  "
                self._put_line(line, f"{marker}{item.name}: {item.value_str()}")

    def _has_menu(self) -> bool:
        return self.current_menu is not None and bool(self.current_menu.children)

    def display_buffer(self) -> bytes:
        """The raw display buffer, or the no-menu message when there is no menu."""
        if not self._has_menu():
            return NO_MENU_TEXT.encode("ascii")
        return bytes(self._buffer)

    def display_lines(self) -> list[str]:
        """The text of each display line."""
        if not self._has_menu():
            return [NO_MENU_TEXT] + [""] * (MAX_DISPLAY_ITEM - 1)
        lines = []
        for line in range(MAX_DISPLAY_ITEM):
            start = line * MAX_DISPLAY_CHAR
            end = self._buffer.find(0, start)
            if end < 0:
                end = BUFFER_SIZE
            lines.append(self._buffer[start:end].decode("utf-8", errors="replace"))
        return lines

    def write_display_buffer(self, text: Union[str, bytes], first_line: int = 0) -> None:
        """Blank the display and write ``text`` starting at ``first_line``."""
        data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
        if not 0 <= first_line < MAX_DISPLAY_ITEM:
            raise ValueError(f"line out of range: {first_line}")
        start = first_line * MAX_DISPLAY_CHAR
        if start + len(data) > BUFFER_SIZE:
            raise ValueError("text does not fit in the display buffer")
        self._clear()
        self._buffer[start : start + len(data)] = data
"""A menu project: the editable item tree, undo history and project files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from os import PathLike
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Sequence, Union

from .codegen import generate_code_preview
from .itemdata import ItemData, item_from_json, item_to_json

ROOT_NAME = "Main Menu"
NEW_ITEM_NAME = "New Item"
PROJECT_SUFFIX = ".mProj"

_NO_SELECTION = "// 请选择一个菜单项来查看代码预览"
_ROOT_NOTE = "\n// 注意：这是主菜单项，将作为菜单系统的入口点。\n"
_CHILDREN_HINT = "// 在实际代码中，需要创建子项数组并传递给createNormalItem函数。\n"


class ProjectError(ValueError):
    """An operation that the project does not allow."""


@dataclass(eq=False)
class MenuNode:
    """One item of the menu tree together with its children."""

    data: ItemData
    children: list[MenuNode] = field(default_factory=list)
    parent: Optional[MenuNode] = field(default=None, repr=False)

    @property
    def name(self) -> str:
        return self.data.name

    @property
    def type(self) -> str:
        return self.data.type

    def add_child(self, node: MenuNode) -> MenuNode:
        node.parent = self
        self.children.append(node)
        return node

    def walk(self) -> Iterator[MenuNode]:
        """This node and all its descendants, parents before children."""
        yield self
        for child in self.children:
            yield from child.walk()


def tree_to_json(node: MenuNode) -> dict[str, Any]:
    """The JSON object of ``node`` and, under ``children``, its subtree."""
    obj = item_to_json(node.data)
    children = [tree_to_json(child) for child in node.children]
    if children:
        obj["children"] = children
    return obj


def tree_from_json(obj: Mapping[str, Any], parent: Optional[MenuNode] = None) -> MenuNode:
    """Rebuild a subtree from its JSON object, attaching it to ``parent``.

    An item without ``isRoot`` is the root exactly when it has no parent.
    """
    node = MenuNode(item_from_json(obj, default_root=parent is None))
    if parent is not None:
        parent.add_child(node)
    children = obj.get("children", [])
    if isinstance(children, list):
        for child in children:
            tree_from_json(child if isinstance(child, Mapping) else {}, node)
    return node


def _parse(menu_array: Sequence[Any]) -> Iterator[ItemData]:
    for obj in menu_array:
        if not isinstance(obj, Mapping):
            obj = {}
        data = item_from_json(obj, default_root=False)
        if data.type == "Changeable" and not data.data_type:
            data.data_type = "int"
        if data.type == "App" and not data.func_name:
            data.name = data.name.replace(" ", "")
            data.func_name = "on" + data.name
        yield data
        children = obj.get("children")
        if isinstance(children, list):
            yield from _parse(children)


def parse_menu_tree(menu_array: Sequence[Any]) -> list[ItemData]:
    """Flatten a JSON menu tree into items, parents before their children."""
    return list(_parse(menu_array))


class Project:
    """A named menu tree with undo and redo of its edits."""

    def __init__(self, name: str = "", root: Optional[MenuNode] = None) -> None:
        self.name = name
        self.root = root
        self._undo: list[tuple[str, str]] = []
        self._redo: list[tuple[str, str]] = []

    @classmethod
    def new(cls, name: str) -> Project:
        """A fresh project holding only the main menu."""
        if not name:
            raise ProjectError("project name must not be empty")
        root = MenuNode(ItemData(name=ROOT_NAME, type="Normal", is_root=True))
        project = cls(name, root)
        project._save_state()
        return project

    @classmethod
    def from_json(cls, obj: Mapping[str, Any]) -> Project:
        name = obj.get("projectName")
        menu = obj.get("menuTree")
        menu = menu if isinstance(menu, list) else []
        root = None
        if menu:
            root = tree_from_json(menu[0] if isinstance(menu[0], Mapping) else {})
        return cls(name if isinstance(name, str) else "", root)

    @property
    def has_active_project(self) -> bool:
        return bool(self.name)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def _tree_array(self) -> list[dict[str, Any]]:
        return [tree_to_json(self.root)] if self.root is not None else []

    def _snapshot(self) -> tuple[str, str]:
        return self.name, json.dumps(self._tree_array())

    def _restore(self, state: tuple[str, str]) -> None:
        self.name, text = state
        menu = json.loads(text)
        self.root = tree_from_json(menu[0]) if menu else None

    def _save_state(self) -> None:
        self._undo.append(self._snapshot())
        self._redo.clear()

    def _require_active(self) -> None:
        if not self.has_active_project:
            raise ProjectError("no active project")

    def add_item(self, parent: Optional[MenuNode] = None) -> MenuNode:
        """Add a new plain item under ``parent`` (the main menu by default)."""
        self._require_active()
        if parent is None:
            parent = self.root
        if parent is None:
            raise ProjectError("the menu tree is empty")
        self._save_state()
        node = MenuNode(
            ItemData(name=NEW_ITEM_NAME, type="Normal", parent_name=parent.data.name)
        )
        return parent.add_child(node)

    def remove_item(self, node: MenuNode) -> None:
        """Remove ``node`` and its subtree; the main menu cannot be removed."""
        self._require_active()
        if node.parent is None:
            raise ProjectError("the main menu cannot be removed")
        self._save_state()
        node.parent.children.remove(node)
        node.parent = None

    def update_item(self, node: MenuNode, data: ItemData) -> MenuNode:
        """Store ``data`` on ``node``, keeping its place in the tree.

        The main menu keeps its name and type. A change of name or type can
        be undone; children follow a renamed parent.
        """
        if node.parent is None:
            new = replace(data, name=ROOT_NAME, type=node.data.type, parent_name="", is_root=True)
        else:
            new = replace(data, parent_name=node.parent.data.name, is_root=False)
        if new.name != node.data.name or new.type != node.data.type:
            self._save_state()
        renamed = new.name != node.data.name
        node.data = new
        if renamed:
            for child in node.children:
                child.data.parent_name = new.name
        return node

    def undo(self) -> bool:
        """Go back one step; False when there is nothing to undo."""
        if not self._undo:
            return False
        self._redo.append(self._snapshot())
        self._restore(self._undo.pop())
        return True

    def redo(self) -> bool:
        """Repeat an undone step; False when there is nothing to redo."""
        if not self._redo:
            return False
        self._undo.append(self._snapshot())
        self._restore(self._redo.pop())
        return True

    def flatten(self) -> list[ItemData]:
        """Every item of the tree, in the order code generation expects."""
        return parse_menu_tree(self._tree_array())

    def code_preview(self, node: Optional[MenuNode]) -> str:
        """Preview code of one item with notes on its role in the tree."""
        if node is None:
            return _NO_SELECTION
        data = node.data
        code = generate_code_preview(data)
        if data.is_root:
            code += _ROOT_NOTE
        if data.type == "Normal" and node.children:
            code += f"\n// 注意：此菜单项包含{len(node.children)}个子项。\n"
            code += _CHILDREN_HINT
        return code

    def to_json(self) -> dict[str, Any]:
        return {"projectName": self.name, "menuTree": self._tree_array()}

    def save(self, path: Union[str, PathLike]) -> Path:
        """Write the project file to ``path``."""
        target = Path(path)
        text = json.dumps(self.to_json(), indent=4, ensure_ascii=False) + "\n"
        target.write_text(text, encoding="utf-8")
        return target


def load_project(path: Union[str, PathLike]) -> Project:
    """Read a project file; raises ProjectError when it is not valid JSON."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ProjectError(f"invalid project file: {exc}") from exc
    return Project.from_json(obj if isinstance(obj, Mapping) else {})
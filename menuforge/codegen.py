"""Generation of C++ source code that builds a menu with the navigator library."""

from __future__ import annotations

from os import PathLike
from typing import Iterable, Mapping, MutableSequence, MutableSet, Union

from .itemdata import ItemData

_EMULATOR_FOOTER = (
    "\n #ifdef __cplusplus\n \n extern \"C\" {\n #endif\n"
    " Navigator* getNavigator() \n { \n return new Navigator(mainMenu); \n }\n"
    " #ifdef __cplusplus \n }\n #endif\n\n"
)


def format_number(value: float) -> str:
    """Format a number the way it appears in generated code (``%g`` style)."""
    return f"{float(value):g}"


def _safe_name(name: str) -> str:
    return name.lower().replace(" ", "_")


def _app_func_name(item: ItemData) -> str:
    if item.func_name:
        return item.func_name
    return item.name.replace(" ", "").lower() + "App"


def generate_struct_code(items: Iterable[ItemData]) -> str:
    """The struct holding every variable the menu edits: toggles first."""
    items = list(items)
    lines = ["struct g_menu_variables_t\n{\n"]
    lines.extend(
        f"    bool {item.var_name} = false;\n" for item in items if item.type == "bool"
    )
    lines.extend(
        f"    {item.data_type} {item.var_name} = 0;\n"
        for item in items
        if item.type == "Changeable"
    )
    lines.append("} g_menu_vars;\n\n")
    return "".join(lines)


def generate_children_array_recursive(
    parent_name: str,
    children_map: Mapping[str, list[ItemData]],
    item_map: Mapping[str, ItemData],
    array_code_list: MutableSequence[str],
    generated_arrays: MutableSet[str],
) -> None:
    """Append the children array of ``parent_name`` to ``array_code_list``.

    Arrays of sub-menus are appended before the array that refers to them;
    an array already named in ``generated_arrays`` is not generated again.
    """
    if parent_name not in children_map:
        return
    array_name = _safe_name(parent_name) + "Children"
    if array_name in generated_arrays:
        return
    generated_arrays.add(array_name)

    parts = [f"menuItem* {array_name}[] = {{\n"]
    for child in children_map[parent_name]:
        if child.type == "Normal":
            if child.name in children_map:
                generate_children_array_recursive(
                    child.name, children_map, item_map, array_code_list, generated_arrays
                )
                child_array = _safe_name(child.name) + "Children"
                count = len(children_map[child.name])
                parts.append(
                    f'    menuItem::createNormalItem("{child.name}", {child_array}, {count}),\n'
                )
            else:
                parts.append(f'    menuItem::createNormalItem("{child.name}", nullptr, 0),\n')
        elif child.type == "Changeable":
            parts.append(
                f"    menuItem::createChangeableItem<{child.data_type}>"
                f'("{child.name}", g_menu_vars.{child.var_name}, '
                f"{format_number(child.min_value)}, {format_number(child.max_value)}, "
                f"{format_number(child.step)}, "
            )
            if child.has_callback and child.callback_code:
                parts.append(
                    f"[](const {child.data_type} value) {{\n"
                    f"        /* {child.callback_code} */\n    }}"
                )
            else:
                parts.append("nullptr")
            parts.append("),\n")
        elif child.type == "bool":
            parts.append(
                f'    menuItem::createToggle("{child.name}", &g_menu_vars.{child.var_name}, '
            )
            if child.has_callback and child.callback_code:
                parts.append(
                    f"[](const bool state) {{\n        /* {child.callback_code} */\n    }}"
                )
            else:
                parts.append("nullptr")
            parts.append("),\n")
        elif child.type == "Application":
            args = child.args_name or "nullptr"
            func = child.func_name or "nullptr"
            parts.append(f'    menuItem::createApp("{child.name}", {args}, {func}),\n')

    parts.append("};\n\n")
    array_code_list.append("".join(parts))


def generate_menu_code(items: Iterable[ItemData]) -> str:
    """Definitions of every children array and of ``mainMenu``."""
    items = list(items)
    children_map: dict[str, list[ItemData]] = {}
    item_map: dict[str, ItemData] = {}
    for item in items:
        item_map[item.name] = item
        if item.parent_name:
            children_map.setdefault(item.parent_name, []).append(item)

    array_code_list: list[str] = []
    generated_arrays: set[str] = set()
    main_code = []
    for item in items:
        if not item.is_root:
            continue
        generate_children_array_recursive(
            item.name, children_map, item_map, array_code_list, generated_arrays
        )
        count = len(children_map.get(item.name, ()))
        array = _safe_name(item.name) + "Children" if count else "nullptr"
        main_code.append(
            f'menuItem* mainMenu = menuItem::createNormalItem("{item.name}", {array}, {count});\n'
        )
    return "".join(array_code_list) + "\n" + "".join(main_code)


def generate_callback_code(items: Iterable[ItemData]) -> str:
    """Application functions followed by their argument pointer arrays."""
    apps = [item for item in items if item.type == "Application"]
    code = "".join(
        f"void {_app_func_name(item)}(void** args) {{\n    /* {item.callback_code} */\n}}\n\n"
        for item in apps
    )
    for item in apps:
        arg_name = item.args_name or _app_func_name(item) + "Args"
        if arg_name in code:
            continue
        code += f"// {item.func_name} 回调函数参数指针数组\n"
        code += f"void* {arg_name}[] = {{\n       nullptr // 请自行添加参数指针\n}};\n\n"
    return code


def generate_code_preview(item: ItemData) -> str:
    """Stand-alone code showing how a single item is declared and used."""
    parts = ["// 单项菜单代码预览\n\n"]

    if item.type == "Changeable":
        var = item.var_name or "g_" + _safe_name(item.name)
        parts.append("// 变量声明\n")
        parts.append(
            f"{item.data_type} {var} = {format_number(item.initial_value)}; // 设定初始值\n\n"
        )
    elif item.type == "bool":
        var = item.var_name or "g_" + _safe_name(item.name)
        parts.append("// 变量声明\n")
        parts.append(f"bool {var} = false; // 初始值为关闭状态\n\n")

    parts.append("// 菜单项定义\n")
    if item.type == "Normal":
        var = item.var_name or _safe_name(item.name) + "_menu"
        parts.append(
            f'menuItem* {var} = menuItem::createNormalItem("{item.name}", '
            f"{var}Children, {var}ChildrenCount);\n"
        )
    elif item.type == "Changeable":
        var = item.var_name or _safe_name(item.name)
        parts.append(
            f"menuItem* {var}_item = menuItem::createChangeableItem<{item.data_type}>"
            f'("{item.name}", {var}, {format_number(item.min_value)}, '
            f"{format_number(item.max_value)}, {format_number(item.step)}, "
        )
        if item.has_callback and item.callback_code:
            parts.append(
                f"[](const {item.data_type} value) {{\n     //Callback Func Zone\n"
                f"    /* {item.callback_code} */\n}}"
            )
        else:
            parts.append("nullptr")
        parts.append(");\n")
    elif item.type == "bool":
        var = item.var_name or _safe_name(item.name)
        parts.append(f'menuItem* {var}_item = menuItem::createToggle("{item.name}", &{var}, ')
        if item.has_callback and item.callback_code:
            parts.append(
                "[](const bool state) {\n       //Callback Func Zone\n"
                f"     /* {item.callback_code} */\n}}"
            )
        else:
            parts.append("nullptr")
        parts.append(");\n")
    elif item.type == "Application":
        var = item.var_name or _safe_name(item.name) + "_app"
        args = item.args_name or var + "_args"
        parts.append(f"// {item.func_name} 回调函数参数指针数组\n")
        parts.append(f"void* {item.args_name}[] = {{\n       // 请自行添加参数指针\n}};\n\n")
        parts.append(
            f'menuItem* {var}_item = menuItem::createApp("{item.name}", (void**){args}, '
        )
        if not item.callback_code and not item.func_name:
            parts.append("nullptr")
        else:
            parts.append(item.func_name or var)
        parts.append(");\n")

    parts.append("\n// 使用示例\n")
    if item.is_root:
        parts.append("Navigator* navigator = new Navigator(mainMenu);\n")
    elif item.type == "Normal":
        var = item.var_name or _safe_name(item.name) + "_menu"
        parts.append("// 添加到父菜单\n")
        parts.append(f"parentMenu->children_item_[childIndex] = {var};\n")
    else:
        var = item.var_name or _safe_name(item.name)
        parts.append("// 添加到父菜单\n")
        parts.append(f"parentMenuChildren[childIndex] = {var}_item;\n")

    return "".join(parts)


def save_code_to_file(path: Union[str, PathLike], code: str) -> None:
    """Write ``code`` to ``path`` as text; raises OSError when that fails."""
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(code)


def generate_emulator_source(items: Iterable[ItemData]) -> str:
    """Source of the preview library, exporting ``getNavigator``."""
    items = list(items)
    return "".join(
        [
            '#include "menu_navigator.h"\n',
            "#include <cstdint>\n\n",
            "using namespace Menu;\n\n",
            "// 生成的变量定义\n",
            generate_struct_code(items),
            "\n",
            "// 生成的回调函数和参数指针数组\n",
            generate_callback_code(items),
            "\n",
            "// 生成的菜单项定义\n",
            generate_menu_code(items),
            "\n",
            _EMULATOR_FOOTER,
        ]
    )


def generate_emulator_header() -> str:
    """Header of the preview library declaring ``getNavigator``."""
    return (
        "#ifndef GENERATED_CODE_H\n"
        "#define GENERATED_CODE_H\n\n"
        '#include "menu_navigator.h"\n\n'
        "#ifdef __cplusplus\n"
        'extern "C" {\n'
        "#endif\n\n"
        "Menu::Navigator* getNavigator();\n\n"
        "#ifdef __cplusplus\n"
        "}\n"
        "#endif\n\n"
        "#endif //GENERATED_CODE_H\n"
    )
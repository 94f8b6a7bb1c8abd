"""Generated header and source files for using a menu from C++ or C."""

from __future__ import annotations

import errno
from os import PathLike
from pathlib import Path
from typing import Iterable, Union

from .codegen import (
    generate_callback_code,
    generate_menu_code,
    generate_struct_code,
    save_code_to_file,
)
from .itemdata import ItemData

_PathArg = Union[str, PathLike]


def generate_cpp_header() -> str:
    """Header declaring the ``navigator`` object for C++ callers."""
    return (
        "#ifndef GENERATED_CODE_H\n"
        "#define GENERATED_CODE_H\n\n"
        '#include "menu_navigator.h"\n\n'
        "extern Menu::Navigator *navigator;\n\n"
        "#endif //GENERATED_CODE_H\n"
    )


def generate_c_header() -> str:
    """Header declaring ``getMainItem`` for C callers."""
    return (
        "#ifndef GENERATED_CODE_H\n"
        "#define GENERATED_CODE_H\n\n"
        "#ifdef __cplusplus\n"
        'extern "C" {\n'
        "#endif\n\n"
        "void* getMainItem();\n\n"
        "#ifdef __cplusplus\n"
        "}\n"
        "#endif\n"
        "#endif //GENERATED_CODE_H\n"
    )


def _menu_body(items: list[ItemData]) -> str:
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
        ]
    )


def generate_cpp_source(items: Iterable[ItemData]) -> str:
    """Source defining the menu and the ``navigator`` that walks it."""
    return (
        _menu_body(list(items))
        + "// 菜单导航器初始化\n"
        + "Navigator* navigator = new Navigator(mainMenu);\n"
    )


def generate_c_source(items: Iterable[ItemData]) -> str:
    """Source defining the menu and a C entry point returning its root."""
    return _menu_body(list(items)) + (
        "#ifdef __cplusplus\n"
        'extern "C" {\n'
        "#endif\n\n"
        "void* getMainItem()\n"
        "{\n"
        "return (void*)mainMenu;\n"
        "}\n\n"
        "#ifdef __cplusplus\n"
        "}\n"
        "#endif\n"
    )


def with_suffix(path: _PathArg, suffix: str) -> Path:
    """``path`` ending in ``suffix``, compared without regard to case."""
    text = str(path)
    if not text.lower().endswith(suffix.lower()):
        text += suffix
    return Path(text)


def _check_free(path: Path, overwrite: bool) -> None:
    if path.exists() and not overwrite:
        raise FileExistsError(errno.EEXIST, "file already exists", str(path))


def write_generated(
    header_path: _PathArg,
    source_path: _PathArg,
    header: str,
    source: str,
    overwrite: bool = False,
) -> tuple[Path, Path]:
    """Write the header (``.h``) and then the source (``.cpp``).

    An existing file is only replaced when ``overwrite`` is true; otherwise
    FileExistsError is raised before that file is written.
    """
    header_file = with_suffix(header_path, ".h")
    _check_free(header_file, overwrite)
    save_code_to_file(header_file, header)
    source_file = with_suffix(source_path, ".cpp")
    _check_free(source_file, overwrite)
    save_code_to_file(source_file, source)
    return header_file, source_file
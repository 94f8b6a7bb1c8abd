import pytest

from menuforge.codegen import generate_menu_code, generate_struct_code
from menuforge.export import (
    generate_c_header,
    generate_c_source,
    generate_cpp_header,
    generate_cpp_source,
    with_suffix,
    write_generated,
)
from menuforge.itemdata import ItemData

ITEMS = [
    ItemData(name="Main Menu", type="Normal", is_root=True),
    ItemData(name="Motor", type="bool", var_name="motor_state", parent_name="Main Menu"),
    ItemData(name="KP", type="Changeable", data_type="float", var_name="motor_kp",
             min_value=0.0, max_value=100.0, step=1.0, parent_name="Main Menu"),
]


def test_cpp_header_text():
    assert generate_cpp_header() == (
        "#ifndef GENERATED_CODE_H\n#define GENERATED_CODE_H\n\n"
        '#include "menu_navigator.h"\n\n'
        "extern Menu::Navigator *navigator;\n\n"
        "#endif //GENERATED_CODE_H\n"
    )


def test_c_header_declares_entry_point():
    header = generate_c_header()
    assert "void* getMainItem();\n" in header
    assert header.endswith("#endif\n#endif //GENERATED_CODE_H\n")


def test_cpp_source_layout():
    source = generate_cpp_source(ITEMS)
    assert source.startswith('#include "menu_navigator.h"\n#include <cstdint>\n\n')
    struct = generate_struct_code(ITEMS)
    menu = generate_menu_code(ITEMS)
    assert source.index(struct) < source.index(menu)
    assert source.endswith("Navigator* navigator = new Navigator(mainMenu);\n")


def test_c_source_exports_main_item():
    source = generate_c_source(ITEMS)
    assert "return (void*)mainMenu;" in source
    assert generate_menu_code(ITEMS) in source
    assert source.endswith("#ifdef __cplusplus\n}\n#endif\n")
    assert "new Navigator" not in source


@pytest.mark.parametrize(
    "path, suffix, expected",
    [
        ("out", ".h", "out.h"),
        ("OUT.H", ".h", "OUT.H"),
        ("code.cpp", ".cpp", "code.cpp"),
        ("a.hpp", ".h", "a.hpp.h"),
    ],
)
def test_with_suffix(path, suffix, expected):
    assert str(with_suffix(path, suffix)) == expected


def test_write_generated_round_trip(tmp_path):
    header, source = write_generated(
        tmp_path / "gen", tmp_path / "gen", generate_cpp_header(), generate_cpp_source(ITEMS)
    )
    assert header.name == "gen.h"
    assert source.name == "gen.cpp"
    assert header.read_text(encoding="utf-8") == generate_cpp_header()
    assert source.read_text(encoding="utf-8") == generate_cpp_source(ITEMS)


def test_write_generated_refuses_existing(tmp_path):
    existing = tmp_path / "gen.h"
    existing.write_text("old", encoding="utf-8")
    with pytest.raises(FileExistsError):
        write_generated(existing, tmp_path / "gen.cpp", "new", "src")
    assert existing.read_text(encoding="utf-8") == "old"
    assert not (tmp_path / "gen.cpp").exists()


def test_write_generated_overwrites_when_asked(tmp_path):
    existing = tmp_path / "gen.h"
    existing.write_text("old", encoding="utf-8")
    write_generated(existing, tmp_path / "gen.cpp", "new", "src", overwrite=True)
    assert existing.read_text(encoding="utf-8") == "new"
    assert (tmp_path / "gen.cpp").read_text(encoding="utf-8") == "src"
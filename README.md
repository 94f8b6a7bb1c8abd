# menuforge

menuforge helps you build hierarchical menus for small displays, such as the
OLED screens common on microcontroller boards. It is a library, and it lets you:

* describe a menu tree made of plain sub-menus, adjustable values, on/off
  toggles and application entries (`menuforge.project`, `menuforge.itemdata`);
* keep that tree in a JSON project file (`.mProj`), with undo and redo of edits;
* edit one item's properties with consistent values and ranges
  (`menuforge.editor.ItemEditor`);
* walk a menu with up/down/left/right keys on a simulated navigator that has a
  five-line, 21-byte-per-line text display (`menuforge.items`,
  `menuforge.navigator`);
* generate the C++ or C sources that build the same menu on the device
  (`menuforge.codegen`, `menuforge.export`).

menuforge needs only the Python standard library (Python 3.10 or later).

## Building a project

```python
from menuforge.project import Project, load_project
from menuforge.itemdata import ItemData

project = Project.new("robot")          # holds only "Main Menu"
pid = project.add_item()                # a "New Item" under the main menu
project.update_item(pid, ItemData(name="PID", type="Normal"))

kp = project.add_item(pid)
project.update_item(kp, ItemData(
    name="KP", type="Changeable", data_type="float",
    var_name="motor_kp", min_value=0, max_value=100, step=1,
))

project.undo()                          # returns False when nothing is left
project.redo()
project.save("robot.mProj")

project = load_project("robot.mProj")   # ProjectError on invalid JSON
```

`Project.add_item` and `Project.remove_item` raise `ProjectError` when no
project is active; the main menu cannot be removed and keeps its name.
`Project.code_preview(node)` returns preview code for a single item.

## Generating code

```python
from menuforge.export import generate_cpp_header, generate_cpp_source, write_generated

items = project.flatten()
write_generated(
    "generated_header.h",
    "generated_code.cpp",
    generate_cpp_header(),
    generate_cpp_source(items),
    overwrite=True,
)
```

`write_generated` adds the `.h` / `.cpp` suffix when it is missing and raises
`FileExistsError` for an existing file unless `overwrite` is true. For
firmware written in C, use `generate_c_header()` and `generate_c_source(items)`,
which expose `getMainItem()`. The building blocks (`generate_struct_code`,
`generate_callback_code`, `generate_menu_code`, `generate_code_preview`,
`generate_emulator_source`, `generate_emulator_header`) live in
`menuforge.codegen`.

## Navigating a menu

```python
from menuforge.items import Key, Ref, create_changeable_item, create_normal_item, create_toggle
from menuforge.navigator import Navigator

kp = Ref(0.0)
camera = Ref(False)
main = create_normal_item("Main Menu", [
    create_normal_item("PID", [create_changeable_item("KP", kp, 0.0, 100.0, 1.0)]),
    create_toggle("Camera", camera),
])

navigator = Navigator(main)
navigator.handle_input(Key.RIGHT)   # enter "PID"
navigator.handle_input(Key.RIGHT)   # unlock "KP"
navigator.handle_input(Key.UP)      # kp.value is now 1.0
navigator.refresh_display()
for line in navigator.display_lines():
    print(line)
```

`handle_input` also accepts the numeric key codes 0–4 (UP, DOWN, LEFT, RIGHT,
NONE); `key_from_code` maps any other code to `Key.NONE`.

| Kind          | Keys                                                               |
|---------------|--------------------------------------------------------------------|
| Normal        | RIGHT enters the sub-menu, LEFT returns to the parent              |
| Changeable    | RIGHT unlocks editing, UP/DOWN step the value, LEFT locks it again |
| Toggle        | RIGHT unlocks, UP/DOWN flip the state, LEFT locks                  |
| Application   | RIGHT runs the function and enters app mode, LEFT leaves it        |

A step that would take a changeable value past its minimum or maximum is
ignored.

## What menuforge does not do

menuforge has no command-line program and no graphical window. It does not
draw a pixel-level OLED screen, and it does not turn a project's item list
into a running navigator for you: to try a menu, build it with the
`menuforge.items` factory functions and drive it with `Navigator` as shown
above.
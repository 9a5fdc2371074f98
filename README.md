# slopekit

Building blocks for a downhill sledding game. It is plain Python and has no
third-party dependencies.

## Modules

- `slopekit.vectors` provides `Vector2`, `Vector3` and `Vector4`. Each has
  component-wise `+`, `-`, unary `-` and scalar `*`, plus `length()`.
  `norm()` scales the vector to unit length in place and returns the old
  length. Two helpers come with them: `dot_product(a, b)` and
  `cross_product(u, v)`.
- `slopekit.states` provides the `State` base class, with the hooks `enter`,
  `loop`, `keyb`, `mouse`, `motion`, `jaxis`, `jbutt`, `text_entered` and
  `exit`. By default these hooks only record input in `state.input`.
  `StateManager.run(entrance_state, poll_events)` calls `poll_events()` once
  per frame and hands each `Event` (kind: `EventKind`) to the current state.
  Between frames it switches to a state asked for with
  `request_enter_state`. It calls `loop` with the time step and stops after
  `request_quit` or a `CLOSED` event.
- `slopekit.spx` handles tagged lines such as `*[node] 3 [par] 0 [joint] neck`.
  - Readers: `sp_str`, `sp_int`, `sp_bool`, `sp_float`, `sp_vector2`,
    `sp_vector3`, `sp_vector4`, `sp_color`, `sp_color3`, `sp_array` and
    `sp_pos`.
  - Builders, which return new strings: `sp_add_*` and `sp_set_int`,
    `sp_set_float`, `sp_set_str`.
  - Conversions: `str_int`, `float_str` and the like.
  - `SPList` is a list of lines with `load(path)`, `save(path)` and
    `make_index(tag)`.
- `slopekit.translation`: `Translation` holds the 111 built-in English
  interface texts (`text(idx)`). `load_languages(directory)` reads
  `languages.lst`, and `load_translations(directory, langidx)` applies a
  `<lang>.lst` file. Helpers: `lang_idx`, `language` and
  `decode_utf8_lenient`.
- `slopekit.winsys`: `ScreenModes` lists ten resolutions, where entry 0 is
  the desktop mode. `resolution(idx, fullscreen)` and `res_name(idx)` read
  that list. `screen_scale(height, quad_scale)` gives the UI scale factor
  relative to 768 pixels.
- `slopekit.character`: `CharShape` is a tree of nodes with 4x4 transforms,
  materials and recorded edit actions. It offers:
  - `create_char_node`, `translate_node`, `rotate_node`, `scale_node`,
    `visible_node` and `material_node`
  - `refresh_node`, `reset_joints` and `adjust_joints`
- `slopekit.charfile`: `load_character(shape, path, with_actions)` and
  `save_character(shape, path)` read and write character shape files.
  Saving needs a shape that was loaded with actions.

Failures raise exceptions. A file that cannot be read or written raises
`OSError`, and a node with an unknown parent raises `ValueError`.

## Install

```
pip install .
pip install ".[test]"   # to run the tests
```

## Example

```python
from slopekit.spx import sp_int, sp_str, sp_vector3
from slopekit.vectors import Vector3, cross_product

line = "*[node] 3 [par] 0 [joint] neck [trans] 0 0.6 0"
print(sp_int(line, "node", -1))    # 3
print(sp_str(line, "joint"))       # neck
print(sp_vector3(line, "trans"))   # Vector3(x=0.0, y=0.6, z=0.0)

print(cross_product(Vector3(1, 0, 0), Vector3(0, 1, 0)))  # Vector3(x=0, y=0, z=1)
```

```python
from slopekit.character import CharShape
from slopekit.charfile import load_character, save_character
from slopekit.vectors import Vector3

shape = load_character(CharShape(), "shape.lst", True)
shape.adjust_joints(0.5, False, 0.0, 10.0, Vector3(), 0.0)
save_character(shape, "shape_out.lst")
```

## What it does not do

The package holds the data and logic only. It does not cover:

- opening a window or reading input devices
- rendering: there is no drawing of the character, shadows, textures or
  track marks
- physics, courses or a game loop beyond `StateManager`

Any events, clocks and resize handling come from the caller. It has no
command-line program.

## Tests

```
pytest
```
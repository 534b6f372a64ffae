# stepkit

This package contains a few small tools:

- **hello-cli** prints a greeting.
- **calc-cli** is a calculator. It has subcommands, a simple expression evaluator and an interactive mode.
- **A headless glTF viewer** (`stepkit.viewer`) loads `.gltf` and `.glb` data, merges the mesh geometry, keeps an orbit camera and builds model-view-projection matrices.

## Installation

```
pip install .
```

To install the test dependencies too:

```
pip install ".[test]"
```

## hello-cli

```
hello-cli                          # Hello, World!
hello-cli --name Alice             # Hello, Alice!
hello-cli -n Bob
hello-cli --name Charlie --count 3 # Hello, Charlie! (1) ... Hello, Charlie! (3)
hello-cli --name Dave --uppercase  # HELLO, DAVE!
hello-cli -n Eve -c 2 -u
hello-cli --version
hello-cli --help
```

`--count` takes an unsigned 32-bit number and defaults to 1. When the count is greater than 1, each line ends with its number. A count of 0 prints nothing.

You can get the same lines from Python with `stepkit.hello.greet(name, count, uppercase)`, which returns them as a list.

## calc-cli

```
calc-cli add 10 5           # 10 + 5 = 15       (alias: a)
calc-cli subtract 10 4      # 10 - 4 = 6        (alias: s)
calc-cli multiply 3 4       # 3 * 4 = 12        (alias: m)
calc-cli divide 10 2        # 10 / 2 = 5        (alias: d)
calc-cli power 2 3          # 2^3 = 8           (alias: p)
calc-cli square-root 16     # √16 = 4           (alias: sqrt)
calc-cli eval "2 + 3 * 4"   # 2 + 3 * 4 = 14    (alias: e)
calc-cli interactive        #                   (alias: i)
calc-cli --version
```

If you run `calc-cli` with no subcommand, it prints a few usage examples. When a calculation fails, for example on division by zero, an overflowing result, the square root of a negative number or a malformed expression, the command writes `Error: ...` to standard error and exits with status 1.

The evaluator understands numbers joined by `+`, `-`, `*` and `/`, and ignores spaces. Multiplication and division bind tighter than addition and subtraction. A leading `-` makes the number negative. Parentheses are not supported, and a minus sign after another operator (as in `2 * -3`) is rejected.

Interactive mode reads one line at a time. A line can be an expression such as `2 + 3` or `-5 + 3`, or it can be `sqrt 16`. Type `help` to list the available operations, and type `quit` or `exit` to leave. The mode also ends at end of input.

You can call the same functions from Python:

```python
from stepkit.calculator import evaluate_expression, divide, DivisionByZeroError

evaluate_expression("2 + 3 * 4")   # 14.0
try:
    divide(5, 0)
except DivisionByZeroError as exc:
    print(exc)                     # Division by zero
```

The module has these functions: `add`, `subtract`, `multiply`, `divide`, `power`, `square_root` and `evaluate_expression`. Errors derive from `CalcError`: `DivisionByZeroError`, `InvalidExpressionError` and `UnknownOperationError`. `run_interactive(stdin, stdout)` runs interactive mode on any pair of text streams.

## Headless glTF viewer

```python
from pathlib import Path
from stepkit.viewer import GltfViewer

viewer = GltfViewer(800, 600)
viewer.load_gltf(Path("model.glb").read_bytes())
viewer.rotate_camera(30, 10)
frame = viewer.render()
```

`render()` returns `None` when no geometry is loaded. Otherwise it returns a `Frame`. The frame holds the viewport, the clear colour, the mesh colour, a float32 MVP matrix, and the flat float32 vertex positions and uint16 triangle indices.

`load_gltf` merges every primitive of every mesh into one vertex and index list.

- Indices are kept in 16 bits. Larger 32-bit indices are clamped to 65535.
- A primitive without indices gets sequential ones.
- If the file has no meshes, or none of its meshes yields any geometry, the viewer loads a 2×2×2 test cube instead. You can also load the cube directly with `create_test_box()`.
- Data that cannot be read raises `stepkit.gltf.GltfError`, and the current geometry is left as it was.

`resize(width, height)` updates the viewport and the projection.

The lower-level pieces are also available:

- `stepkit.gltf.parse` reads glTF JSON or GLB bytes into a `Document` of `Mesh` and `Primitive` objects.
- `stepkit.gltf.extract_primitive_geometry` and `stepkit.gltf.merge_geometry` turn primitives into flat vertex and index arrays.
- `stepkit.camera` provides `look_at`, `perspective` and `OrbitCamera`. The camera's `mvp(model)` returns `projection @ view @ model`.

### What the viewer does not do

The viewer does not open a window or draw anything. `render()` only describes a frame; turning it into pixels is up to the caller.

Buffers must be embedded, either in the GLB binary chunk or as `data:` URIs. A file that refers to external buffer files is rejected.

The viewer reads only vertex positions and indices. It ignores materials, textures, normals and node transforms.
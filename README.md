# simuverse

Building blocks for GPU simulations that work without a graphics device:

- `simuverse.shader`: WGSL loading, recursive `#include` expansion and
  insertion of code snippets at `#insert_code_snippet` markers, plus the
  `simuverse-wgsl` command.
- `simuverse.camera`: cameras with perspective projection, projection matrices,
  screen rays and the camera uniform data; matrix helpers such as `look_at_rh`,
  `perspective`, `axis_angle_matrix`, `translation_matrix` and `transform_point`.
- `simuverse.light`: point and uniform lights and their shader layout.
- `simuverse.scene`: a `Scene` that keeps render objects keyed by `RenderID`,
  tracks their visibility and lists the draw calls of a frame.
- `simuverse.buffer`: CPU-side models of GPU buffers (`BufferObj`,
  `BufferHandler`, `BufferUsages`).
- `simuverse.matrix_helper`: projections that fit the [-1, 1] square to a
  viewport.
- `simuverse.settings`: parameter sets for noise textures (`NoiseSetting`),
  cloth (`PBDSetting`) and a CAD viewer (`CADSetting`, `CADAppType`,
  `RenderMode`).
- `simuverse.slice_hashmap`: `SliceHashMap`, a hash map whose entries live in
  one list for fast iteration.

## Installation

```
pip install simuverse
```

Python 3.10 or newer; the only dependency is NumPy.

## Preprocessing shaders

`simuverse-wgsl` reads shaders from `<base-dir>/../assets/wgsl`, inlines every
`#include` line (a comma-separated list of file names, quotes ignored), drops
lines that hold only a `//` comment and writes each result to
`<base-dir>/../assets/preprocessed-wgsl`, with `/` in the shader name replaced
by `_`. Without shader names it processes its built-in list of shaders.

```
simuverse-wgsl --base-dir . --output-dir out noise/sphere_tex present
```

It prints the path of each file written. A shader or include that cannot be
read stops the run with exit status 1.

From Python, `load_shader_source` reads `<base_dir>/wgsl/<name>.wgsl`, expands
its includes and, when given a snippet, puts it in place of every marker line:

```python
from simuverse.shader import ShaderPreprocessor, insert_code_snippet, load_shader_source

source = load_shader_source("assets", "field_setting", "return vec2<f32>(1.0, 0.0);")

preprocessor = ShaderPreprocessor("assets/wgsl", strip_comments=True, line_ending="\n")
expanded = preprocessor.expand('#include "noise/fn_perlin_noise.wgsl"\nfn main() {}\n')
```

With `base_dir=None` the root comes from the `SIMUVERSE_ROOT` environment
variable, or else an `assets` directory next to the package
(`application_root_dir()`).

## Cameras and lights

```python
import math
import numpy as np
from simuverse.camera import Camera, look_at_rh, transform_point
from simuverse.light import Light, LightType

view = look_at_rh((1.0, 1.0, 1.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
camera = Camera.perspective_camera(np.linalg.inv(view), math.pi / 4, 0.1, 10.0)
camera.position()        # array([1., 1., 1.])
camera.eye_direction()   # unit vector towards the origin
uv = transform_point(camera.projection(1.2), (-1.5, -1.4, -2.5))
ray = camera.ray((0.0, 0.0))

light = Light(position=(0.5, 2.0, 0.5), light_type=LightType.POINT)
light.light_info()       # structured array: position, color, type
```

## Scenes

Anything that implements `Rendered` (`render_id`, `vertex_buffer`,
`bind_group`, and optionally `pipeline`) can be added to a `Scene`:

```python
import numpy as np
from simuverse.buffer import BufferHandler, BufferUsages
from simuverse.scene import Rendered, RenderID, Scene, SceneDescriptor


class Points(Rendered):
    def __init__(self, positions):
        self._id = RenderID.gen_id()
        self._vertices = BufferHandler.from_array(
            np.asarray(positions, dtype=np.float32), BufferUsages.VERTEX
        )

    def render_id(self):
        return self._id

    def vertex_buffer(self):
        return self._vertices, None

    def bind_group(self):
        return None


scene = Scene(SceneDescriptor())
points = Points([(0, 0, 0), (1, 0, 0), (0, 1, 0)])
scene.add_object(points)
[call] = scene.draw_calls()
call.count          # 3 vertices, not indexed

scene.set_visibility(points, False)
scene.draw_calls()  # []

with scene.descriptor_mut() as desc:
    desc.backend_buffer.sample_count = 4   # depth and MSAA specs are rebuilt on exit
```

`Scene.camera_buffer()`, `lights_buffer()` (255 light slots) and
`scene_status_buffer()` give the uniform data a renderer would bind.

## Settings

```python
from simuverse.settings import NoiseSetting, RenderMode

noise = NoiseSetting()
noise.select_type(1)          # wood preset
noise.shows_gain()            # False
RenderMode.from_u32(7)        # RenderMode.SURFACE_AND_WIRE_FRAME
```

## Insertion-ordered map

```python
from simuverse.slice_hashmap import SliceHashMap

objects = SliceHashMap([("a", 1), ("b", 2)])
objects.insert("c", 3)
objects.remove("a")           # the last entry moves into the freed slot
list(objects.items())         # [('c', 3), ('b', 2)]
```

## What this package does not do

It does not open windows, talk to a GPU or draw anything: buffers are byte
arrays, and a scene produces a list of draw calls rather than rendering them.
It has no mesh types, no polygon or wireframe instances and no vertex layout
classes, so geometry for a scene has to be supplied through your own
`Rendered` objects. It ships no shader files; the shader functions read them
from a directory you provide.

## Running the tests

```
pip install simuverse[test]
pytest
```
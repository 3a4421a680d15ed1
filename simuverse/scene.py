"""Scene: studio configuration, render objects and the draw list built from them."""

from __future__ import annotations

import abc
import copy
import itertools
import threading
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, ClassVar

import numpy as np

from simuverse.buffer import BufferHandler, BufferUsages
from simuverse.camera import Camera
from simuverse.light import LIGHT_INFO_DTYPE, LIGHT_MAX, Light
from simuverse.slice_hashmap import SliceHashMap

DEPTH_FORMAT = "depth32float"
INDEX_SIZE = 4

SCENE_INFO_DTYPE = np.dtype(
    [
        ("background_color", "<f4", (4,)),
        ("resolution", "<u4", (2,)),
        ("time", "<f4"),
        ("num_of_lights", "<u4"),
    ]
)

_id_counter = itertools.count()
_id_lock = threading.Lock()


@dataclass(frozen=True, order=True)
class RenderID:
    """Unique key that maps a rendered object to its data in a scene."""

    value: int

    @classmethod
    def gen_id(cls) -> RenderID:
        """Generate a fresh, never repeated id."""
        with _id_lock:
            return cls(next(_id_counter))


@dataclass(frozen=True)
class Color:
    """An RGBA color."""

    r: float
    g: float
    b: float
    a: float

    BLACK: ClassVar[Color]


Color.BLACK = Color(0.0, 0.0, 0.0, 1.0)


@dataclass
class StudioConfig:
    """Camera, lights and background of a scene."""

    camera: Camera = field(default_factory=Camera)
    lights: list[Light] = field(default_factory=lambda: [Light()])
    background: Color = Color.BLACK


@dataclass
class BackendBufferConfig:
    """Depth test flag and MSAA sample count."""

    depth_test: bool = True
    sample_count: int = 1


@dataclass
class RenderTextureConfig:
    """Canvas size ``(width, height)`` and texture format."""

    canvas_size: tuple[int, int] = (1024, 768)
    format: str = "rgba8unorm"


@dataclass(frozen=True)
class _TextureSpec:
    """Size, sample count and format of a render-attachment texture."""

    width: int
    height: int
    sample_count: int
    format: str


@dataclass
class SceneDescriptor:
    """Full configuration of a scene."""

    studio: StudioConfig = field(default_factory=StudioConfig)
    backend_buffer: BackendBufferConfig = field(default_factory=BackendBufferConfig)
    render_texture: RenderTextureConfig = field(default_factory=RenderTextureConfig)

    def camera_buffer(self) -> BufferHandler:
        """Uniform buffer of the camera at the canvas aspect ratio."""
        width, height = self.render_texture.canvas_size
        return self.studio.camera.buffer(width / height)

    def lights_buffer(self) -> BufferHandler:
        """Uniform buffer of ``LIGHT_MAX`` light slots; unused slots are zero."""
        infos = np.zeros(LIGHT_MAX, dtype=LIGHT_INFO_DTYPE)
        for slot, light in zip(range(LIGHT_MAX), self.studio.lights):
            infos[slot] = light.light_info()
        return BufferHandler.from_array(infos, BufferUsages.UNIFORM, "lights_buffer")

    def backend_buffers(self) -> tuple[_TextureSpec | None, _TextureSpec | None]:
        """Depth texture (if depth testing) and multisample buffer (if MSAA)."""
        width, height = self.render_texture.canvas_size
        samples = self.backend_buffer.sample_count
        depth = (
            _TextureSpec(width, height, samples, DEPTH_FORMAT)
            if self.backend_buffer.depth_test
            else None
        )
        sampling = (
            _TextureSpec(width, height, samples, self.render_texture.format)
            if samples > 1
            else None
        )
        return depth, sampling


@dataclass(eq=False)
class RenderObject:
    """Buffers, bind group and pipeline a scene keeps for one object."""

    vertex_buffer: BufferHandler
    index_buffer: BufferHandler | None
    bind_group: Any
    pipeline: Any
    visible: bool = True


@dataclass(frozen=True, eq=False)
class DrawCall:
    """One draw of a visible object: indexed when an index buffer is present."""

    render_id: RenderID
    pipeline: Any
    bind_group: Any
    vertex_buffer: BufferHandler
    index_buffer: BufferHandler | None
    count: int

    @property
    def indexed(self) -> bool:
        return self.index_buffer is not None


class Rendered(abc.ABC):
    """An object that can be placed in a scene."""

    @abc.abstractmethod
    def render_id(self) -> RenderID:
        """The object's unique id."""

    @abc.abstractmethod
    def vertex_buffer(self) -> tuple[BufferHandler, BufferHandler | None]:
        """The vertex buffer and, if any, the index buffer."""

    @abc.abstractmethod
    def bind_group(self) -> Any:
        """The object's own bind group resources."""

    def pipeline(self, descriptor: SceneDescriptor) -> Any:
        """Pipeline configuration for ``descriptor``; none by default."""
        return None

    def render_object(self, scene: Scene) -> RenderObject:
        """Build the data the scene stores for this object."""
        vertex_buffer, index_buffer = self.vertex_buffer()
        return RenderObject(
            vertex_buffer=vertex_buffer,
            index_buffer=index_buffer,
            bind_group=self.bind_group(),
            pipeline=self.pipeline(scene.descriptor),
        )


class Scene:
    """Holds the descriptor and the render objects of everything drawn."""

    def __init__(self, descriptor: SceneDescriptor | None = None) -> None:
        self._descriptor = copy.deepcopy(descriptor) if descriptor is not None else SceneDescriptor()
        self._objects: SliceHashMap[RenderID, RenderObject] = SliceHashMap()
        self.bind_group: tuple[BufferHandler, BufferHandler, BufferHandler] | None = None
        self.forward_depth, self.sampling_buffer = self._descriptor.backend_buffers()
        self._clock = time.monotonic()

    @property
    def descriptor(self) -> SceneDescriptor:
        return self._descriptor

    def elapsed(self) -> float:
        """Seconds since the scene was created."""
        return time.monotonic() - self._clock

    @contextmanager
    def descriptor_mut(self) -> Iterator[SceneDescriptor]:
        """Edit the descriptor; backend buffers are rebuilt when the block exits."""
        try:
            yield self._descriptor
        finally:
            self.forward_depth, self.sampling_buffer = self._descriptor.backend_buffers()

    def studio_config_mut(self) -> StudioConfig:
        """The studio configuration, editable without rebuilding backend buffers."""
        return self._descriptor.studio

    def camera_buffer(self) -> BufferHandler:
        return self._descriptor.camera_buffer()

    def lights_buffer(self) -> BufferHandler:
        return self._descriptor.lights_buffer()

    def scene_status_buffer(self) -> BufferHandler:
        """Uniform buffer of background color, resolution, time and light count."""
        studio = self._descriptor.studio
        bk = studio.background
        info = np.zeros(1, dtype=SCENE_INFO_DTYPE)
        info["background_color"] = (bk.r, bk.g, bk.b, bk.a)
        info["resolution"] = self._descriptor.render_texture.canvas_size
        info["time"] = self.elapsed()
        info["num_of_lights"] = len(studio.lights)
        return BufferHandler.from_array(info, BufferUsages.UNIFORM, "scene_info")

    def add_object(self, obj: Rendered) -> bool:
        """Add ``obj``; return False if it replaced an object with the same id."""
        return self._objects.insert(obj.render_id(), obj.render_object(self)) is None

    def add_objects(self, objects: Iterable[Rendered]) -> bool:
        """Add objects in order, stopping at the first that replaces an existing one."""
        for obj in objects:
            if not self.add_object(obj):
                return False
        return True

    def set_visibility(self, obj: Rendered, visible: bool) -> bool:
        """Show or hide ``obj``; return False if it is not in the scene."""
        render_object = self._objects.get(obj.render_id())
        if render_object is None:
            return False
        render_object.visible = visible
        return True

    def remove_object(self, obj: Rendered) -> bool:
        """Remove ``obj``; return False if it is not in the scene."""
        key = obj.render_id()
        if key not in self._objects:
            return False
        self._objects.remove(key)
        return True

    def remove_objects(self, objects: Iterable[Rendered]) -> bool:
        """Remove objects in order, stopping at the first that is not in the scene."""
        for obj in objects:
            if not self.remove_object(obj):
                return False
        return True

    def clear_objects(self) -> None:
        self._objects.clear()

    def number_of_objects(self) -> int:
        return len(self._objects)

    def update_vertex_buffer(self, obj: Rendered) -> bool:
        """Refresh the stored buffers of ``obj``; False if it is not in the scene."""
        render_object = self._objects.get(obj.render_id())
        if render_object is None:
            return False
        render_object.vertex_buffer, render_object.index_buffer = obj.vertex_buffer()
        return True

    def update_bind_group(self, obj: Rendered) -> bool:
        """Refresh the stored bind group of ``obj``; False if it is not in the scene."""
        render_object = self._objects.get(obj.render_id())
        if render_object is None:
            return False
        render_object.bind_group = obj.bind_group()
        return True

    def _reset_bind_group(self) -> None:
        self.bind_group = (
            self.camera_buffer(),
            self.lights_buffer(),
            self.scene_status_buffer(),
        )

    def draw_calls(self) -> list[DrawCall]:
        """Rebuild the scene bind group and list the draws of visible objects."""
        self._reset_bind_group()
        calls = []
        for key, obj in self._objects.items():
            if not obj.visible:
                continue
            if obj.index_buffer is not None:
                count = obj.index_buffer.size // INDEX_SIZE
            else:
                count = obj.vertex_buffer.element_count()
            calls.append(
                DrawCall(
                    render_id=key,
                    pipeline=obj.pipeline,
                    bind_group=obj.bind_group,
                    vertex_buffer=obj.vertex_buffer,
                    index_buffer=obj.index_buffer,
                    count=count,
                )
            )
        return calls
"""CPU-side models of GPU buffers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

import numpy as np

COPY_BUFFER_ALIGNMENT = 4


class BufferUsages(enum.IntFlag):
    """How a buffer may be used."""

    MAP_READ = 1 << 0
    MAP_WRITE = 1 << 1
    COPY_SRC = 1 << 2
    COPY_DST = 1 << 3
    INDEX = 1 << 4
    VERTEX = 1 << 5
    UNIFORM = 1 << 6
    STORAGE = 1 << 7
    INDIRECT = 1 << 8
    QUERY_RESOLVE = 1 << 9


def _layout(data: Any) -> tuple[bytes, int]:
    """Return the raw bytes of ``data`` and the size of one element."""
    if isinstance(data, np.ndarray):
        arr = np.ascontiguousarray(data)
        if arr.ndim == 0:
            arr = arr.reshape(1)
        item = arr.itemsize * int(np.prod(arr.shape[1:]))
        return arr.tobytes(), item
    view = memoryview(data)
    return view.tobytes(), view.itemsize


@dataclass(eq=False)
class BufferObj:
    """A buffer together with the binding details its layout needs."""

    contents: bytearray
    size: int
    usage: BufferUsages
    label: str | None = None
    min_binding_size: int | None = None
    has_dynamic_offset: bool = False
    read_only: bool = False

    @classmethod
    def create_buffer(
        cls,
        data: Any,
        item_size: int | None = None,
        usage: BufferUsages = BufferUsages(0),
        label: str | None = None,
    ) -> BufferObj:
        """Create an initialised buffer; ``COPY_DST`` is always added."""
        raw, default_item = _layout(data)
        item = default_item if item_size is None else item_size
        if item < 0:
            raise ValueError("item size must not be negative")
        if item and len(raw) % item:
            raise ValueError(f"{len(raw)} bytes is not a whole number of {item}-byte items")
        return cls(
            contents=bytearray(raw),
            size=len(raw),
            usage=BufferUsages(usage) | BufferUsages.COPY_DST,
            label=label,
            min_binding_size=item or None,
        )

    @classmethod
    def create_storage_buffer(
        cls, data: Any, item_size: int | None = None, label: str | None = None
    ) -> BufferObj:
        return cls.create_buffer(data, item_size, BufferUsages.STORAGE, label)

    @classmethod
    def create_empty_storage_buffer(
        cls, size: int, can_read_back: bool = False, label: str | None = None
    ) -> BufferObj:
        usage = BufferUsages.STORAGE | BufferUsages.COPY_DST
        if can_read_back:
            usage |= BufferUsages.COPY_SRC
        return cls(contents=bytearray(size), size=size, usage=usage, label=label)

    @classmethod
    def create_empty_uniform_buffer(
        cls,
        size: int,
        min_binding_size: int,
        is_dynamic: bool = False,
        label: str | None = None,
    ) -> BufferObj:
        return cls(
            contents=bytearray(size),
            size=size,
            usage=BufferUsages.UNIFORM | BufferUsages.COPY_DST,
            label=label,
            min_binding_size=min_binding_size or None,
            has_dynamic_offset=is_dynamic,
            read_only=True,
        )

    @classmethod
    def create_uniform_buffer(cls, item: Any, label: str | None = None) -> BufferObj:
        """Create a uniform buffer holding exactly one item."""
        raw, _ = _layout(item)
        return cls.create_buffer(raw, len(raw), BufferUsages.UNIFORM, label)

    @classmethod
    def create_uniforms_buffer(
        cls, data: Any, item_size: int | None = None, label: str | None = None
    ) -> BufferObj:
        return cls.create_buffer(data, item_size, BufferUsages.UNIFORM, label)

    def write(self, offset: int, data: Any) -> None:
        """Overwrite bytes starting at ``offset``, as a queue write would."""
        raw, _ = _layout(data)
        if not self.usage & BufferUsages.COPY_DST:
            raise ValueError("buffer was not created with COPY_DST usage")
        if offset % COPY_BUFFER_ALIGNMENT or len(raw) % COPY_BUFFER_ALIGNMENT:
            raise ValueError("write offset and size must be multiples of 4")
        if offset < 0 or offset + len(raw) > self.size:
            raise ValueError("write exceeds buffer bounds")
        self.contents[offset:offset + len(raw)] = raw


@dataclass(frozen=True)
class BufferHandler:
    """An immutable buffer with its element stride."""

    contents: bytes
    size: int
    stride: int
    usage: BufferUsages = BufferUsages(0)
    label: str | None = field(default=None)

    @classmethod
    def from_array(
        cls, array: Any, usage: BufferUsages, label: str | None = None
    ) -> BufferHandler:
        """Create from an array; each element along the first axis is one item."""
        arr = np.ascontiguousarray(np.asarray(array))
        raw, stride = _layout(arr)
        count = 1 if arr.ndim == 0 else arr.shape[0]
        return cls(
            contents=raw,
            size=count * stride,
            stride=stride,
            usage=BufferUsages(usage),
            label=label,
        )

    def element_count(self) -> int:
        """Number of elements the buffer holds."""
        if not self.stride:
            return 0
        return self.size // self.stride
import numpy as np
import pytest

from simuverse.buffer import BufferHandler, BufferObj, BufferUsages


def test_create_buffer_from_rows():
    arr = np.arange(15, dtype=np.float32).reshape(5, 3)
    buf = BufferObj.create_buffer(arr, usage=BufferUsages.VERTEX | BufferUsages.STORAGE)
    assert buf.size == arr.nbytes
    assert bytes(buf.contents) == arr.tobytes()
    assert buf.min_binding_size == arr[0].nbytes
    assert buf.usage & BufferUsages.COPY_DST
    assert buf.usage & BufferUsages.VERTEX


def test_create_buffer_item_size_mismatch():
    with pytest.raises(ValueError):
        BufferObj.create_buffer(b"\x00" * 10, item_size=4, usage=BufferUsages.STORAGE)


def test_storage_buffer_usage():
    buf = BufferObj.create_storage_buffer(np.zeros(4, dtype=np.uint32), label="particles")
    assert buf.usage == BufferUsages.STORAGE | BufferUsages.COPY_DST
    assert buf.label == "particles"
    assert not buf.read_only


def test_empty_storage_buffer():
    buf = BufferObj.create_empty_storage_buffer(64)
    assert buf.size == 64
    assert bytes(buf.contents) == bytes(64)
    assert not buf.usage & BufferUsages.COPY_SRC
    assert buf.min_binding_size is None
    readable = BufferObj.create_empty_storage_buffer(64, can_read_back=True)
    assert readable.usage & BufferUsages.COPY_SRC


def test_empty_uniform_buffer():
    buf = BufferObj.create_empty_uniform_buffer(256, 0, is_dynamic=True)
    assert buf.min_binding_size is None
    assert buf.has_dynamic_offset
    assert buf.read_only
    sized = BufferObj.create_empty_uniform_buffer(256, 32)
    assert sized.min_binding_size == 32
    assert sized.usage == BufferUsages.UNIFORM | BufferUsages.COPY_DST


def test_uniform_buffer_single_item():
    item = np.array([1.0, 2.0, 3.0, 4.0], dtype=np.float32)
    buf = BufferObj.create_uniform_buffer(item)
    assert buf.size == item.nbytes
    assert buf.min_binding_size == item.nbytes
    assert buf.usage & BufferUsages.UNIFORM


def test_uniforms_buffer():
    data = np.ones((3, 4), dtype=np.float32)
    buf = BufferObj.create_uniforms_buffer(data)
    assert buf.size == data.nbytes
    assert buf.min_binding_size == data[0].nbytes


def test_write_round_trip():
    buf = BufferObj.create_empty_storage_buffer(16)
    payload = np.array([7, 9], dtype=np.uint32)
    buf.write(8, payload)
    assert np.frombuffer(bytes(buf.contents), dtype=np.uint32).tolist()[2:] == [7, 9]


def test_write_errors():
    buf = BufferObj.create_empty_storage_buffer(8)
    with pytest.raises(ValueError):
        buf.write(2, b"\x00" * 4)
    with pytest.raises(ValueError):
        buf.write(4, b"\x00" * 8)
    no_copy = BufferObj(contents=bytearray(8), size=8, usage=BufferUsages.UNIFORM)
    with pytest.raises(ValueError):
        no_copy.write(0, b"\x00" * 4)


def test_handler_matrix_rows():
    mat = np.eye(4, dtype=np.float32)
    handler = BufferHandler.from_array(mat, BufferUsages.UNIFORM, "matrix")
    assert handler.stride == mat[0].nbytes
    assert handler.size == mat.nbytes
    assert handler.element_count() == 4
    assert handler.contents == mat.tobytes()


def test_handler_indices():
    indices = np.arange(6, dtype=np.uint32)
    handler = BufferHandler.from_array(indices, BufferUsages.INDEX)
    assert handler.element_count() == len(indices)
    assert handler.usage == BufferUsages.INDEX


def test_handler_empty():
    handler = BufferHandler.from_array(np.zeros((0, 3), dtype=np.float32), BufferUsages.VERTEX)
    assert handler.size == 0
    assert handler.element_count() == 0
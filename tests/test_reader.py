import io
import struct

import pytest

from voxstruct import VoxSink, from_bytes, from_file, from_stream, read_vox_into
from voxstruct.exceptions import (
    DuplicateChunkException,
    MagicException,
    ModelCountMismatchException,
    TruncatedException,
    UnexpectedChunkException,
)


class RecordingSink(VoxSink):

    def __init__(self):
        self.calls = []

    def on_version(self, version):
        self.calls.append(('version', version))

    def on_palette(self, palette):
        self.calls.append(('palette', palette[1].value))

    def on_material(self, material_id, material):
        self.calls.append(('material', material_id))

    def on_model_count(self, count):
        self.calls.append(('count', count))

    def on_model_size(self, size):
        self.calls.append(('size', size.value))

    def on_voxel(self, voxel):
        self.calls.append(('voxel', voxel.value))


def _rgba(color=(1, 2, 3, 4)):
    return bytes(color) * 255


def _matl(material_id):
    return struct.pack('<IBfI', material_id, 0, 1.0, 0)


def test_read_single_model(make_vox, make_model):
    vox = from_bytes(make_vox(make_model((2, 3, 4), [(0, 0, 0, 1), (1, 2, 3, 255)])))

    assert vox.version == 150
    assert len(vox.models) == 1

    model = vox.models[0]

    assert model.size.value == (2, 3, 4)
    assert [_.value for _ in model.voxels] == [((0, 0, 0), 1), ((1, 2, 3), 255)]
    assert vox.palette.is_default()
    assert vox.materials.is_empty()


def test_read_sink_order(make_vox, make_model, make_chunk):
    """The palette and the materials are delivered before the models,
    whatever their position in the file."""
    data = make_vox(
        make_chunk(b'PACK', struct.pack('<I', 2)),
        make_model((1, 1, 1), [(0, 0, 0, 1)]),
        make_chunk(b'MATL', _matl(5)),
        make_model((2, 2, 2), [(1, 1, 1, 2), (-1, 0, 1, 3)]),
        make_chunk(b'RGBA', _rgba()),
        make_chunk(b'MATL', _matl(2)),
        version=200,
    )

    sink = RecordingSink()
    read_vox_into(data, sink, materials=True)

    assert sink.calls == [
        ('version', 200),
        ('palette', (1, 2, 3, 4)),
        ('material', 5),
        ('material', 2),
        ('count', 2),
        ('size', (1, 1, 1)),
        ('voxel', ((0, 0, 0), 1)),
        ('size', (2, 2, 2)),
        ('voxel', ((1, 1, 1), 2)),
        ('voxel', ((-1, 0, 1), 3)),
    ]


def test_read_skips_unknown_chunks(make_vox, make_model, make_chunk):
    unknown = make_chunk(b'nTRN', b'\xff' * 17, make_chunk(b'nSHP', b'\xee' * 3))

    with_unknown = from_bytes(make_vox(unknown, make_model((1, 2, 3), [(0, 1, 2, 7)]), make_chunk(b'LAYR', b'?')))
    without = from_bytes(make_vox(make_model((1, 2, 3), [(0, 1, 2, 7)])))

    assert with_unknown.models == without.models


def test_read_wide_size(make_vox, make_chunk):
    data = make_vox(
        make_chunk(b'SIZE', struct.pack('<iii', 10, 20, 30)),
        make_chunk(b'XYZI', struct.pack('<I', 0)),
    )

    vox = from_bytes(data)

    assert vox.models[0].size.value == (10, 20, 30)
    assert vox.models[0].voxels == []


def test_read_bad_magic(make_vox, make_model):
    data = b'RIFF' + make_vox(make_model((1, 1, 1), []))[4:]

    with pytest.raises(MagicException) as exc:
        from_bytes(data)

    assert exc.value.got == b'RIFF'


def test_read_not_main(make_chunk):
    data = b'VOX ' + struct.pack('<I', 150) + make_chunk(b'SIZE', b'\x01\x01\x01')

    with pytest.raises(UnexpectedChunkException) as exc:
        from_bytes(data)

    assert exc.value.frame.id == b'SIZE'


@pytest.mark.parametrize('chunk_id,content', [
    (b'PACK', struct.pack('<I', 1)),
    (b'RGBA', _rgba()),
])
def test_read_duplicate_chunk(make_vox, make_model, make_chunk, chunk_id, content):
    first = make_chunk(chunk_id, content)
    data = make_vox(first, make_model((1, 1, 1), []), make_chunk(chunk_id, content))

    with pytest.raises(DuplicateChunkException) as exc:
        from_bytes(data)

    # file header and the header of MAIN
    assert exc.value.first.offset == 8 + 12
    assert exc.value.second.offset == 8 + 12 + len(first) + 2 * 12 + 3 + 4


def test_read_count_mismatch(make_vox, make_model, make_chunk):
    data = make_vox(
        make_chunk(b'PACK', struct.pack('<I', 2)),
        make_model((1, 1, 1), [(0, 0, 0, 1)]),
    )

    sink = RecordingSink()

    with pytest.raises(ModelCountMismatchException) as exc:
        read_vox_into(data, sink)

    assert (exc.value.size_count, exc.value.xyzi_count, exc.value.model_count) == (1, 1, 2)
    # nothing about the models reached the sink
    assert [_ for _ in sink.calls if _[0] == 'count'] == []


def test_read_missing_xyzi(make_vox, make_chunk):
    with pytest.raises(ModelCountMismatchException) as exc:
        from_bytes(make_vox(make_chunk(b'SIZE', b'\x01\x01\x01')))

    assert (exc.value.size_count, exc.value.xyzi_count, exc.value.model_count) == (1, 0, 1)


def test_read_xyzi_overrun(make_vox, make_chunk):
    """The declared number of voxels can't go past the content of the chunk."""
    data = make_vox(
        make_chunk(b'SIZE', b'\x01\x01\x01'),
        make_chunk(b'XYZI', struct.pack('<I', 2) + b'\x00\x00\x00\x01'),
        make_chunk(b'LAYR', b'\x00' * 8),
    )

    with pytest.raises(TruncatedException):
        from_bytes(data)


def test_read_truncated_file(make_vox, make_model):
    data = make_vox(make_model((1, 1, 1), [(0, 0, 0, 1)]))

    with pytest.raises(TruncatedException):
        from_bytes(data[:-10])


def test_read_from_stream_and_file(tmp_path, make_vox, make_model):
    data = make_vox(make_model((3, 3, 3), [(1, 1, 1, 9)]))

    fileobj = io.BytesIO(data)
    vox = from_stream(fileobj)

    assert not fileobj.closed
    assert vox.models[0].voxels[0].color_index.value == 9

    path = tmp_path / 'model.vox'
    path.write_bytes(data)

    assert from_file(path).models == vox.models


def test_read_sink_must_receive_models(make_vox, make_model):
    class PaletteOnly(VoxSink):
        pass

    with pytest.raises(NotImplementedError):
        read_vox_into(make_vox(make_model((1, 1, 1), [])), PaletteOnly())


def _dict_matl(material_id, **properties):
    '''MATL with the dictionary layout used by recent MagicaVoxel versions.'''
    def string(value):
        return struct.pack('<I', len(value)) + value.encode()

    content = struct.pack('<II', material_id, len(properties))
    for key, value in properties.items():
        content += string(key) + string(value)

    return content


def test_read_skips_materials_by_default(make_vox, make_model, make_chunk):
    model = make_model((1, 1, 1), [(0, 0, 0, 1)])
    matl = make_chunk(b'MATL', _dict_matl(1, _type='_metal', _weight='0.5', _rough='0.1', _spec='0.3', _ior='0.3'))

    with_matl = from_bytes(make_vox(model, matl))
    without = from_bytes(make_vox(model))

    assert with_matl.models == without.models
    assert with_matl.materials.is_empty()

    sink = RecordingSink()
    read_vox_into(make_vox(make_chunk(b'MATL', _matl(3)), model), sink)

    assert [_ for _ in sink.calls if _[0] == 'material'] == []


def test_read_materials_skips_undecodable(make_vox, make_model, make_chunk):
    model = make_model((1, 1, 1), [(0, 0, 0, 1)])
    data = make_vox(
        make_chunk(b'MATL', _dict_matl(1, _type='_metal', _weight='0.5', _rough='0.1', _spec='0.3', _ior='0.3')),
        make_chunk(b'MATL', b'\x02\x00'),
        model,
        make_chunk(b'MATL', _matl(7)),
    )

    vox = from_bytes(data, materials=True)

    assert list(vox.materials) == [7]
    assert vox.models == from_bytes(make_vox(model)).models

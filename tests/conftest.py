import struct

import pytest


def build_chunk(chunk_id, content=b'', children=b''):
    return chunk_id + struct.pack('<II', len(content), len(children)) + content + children


def build_vox(*children, version=150):
    return b'VOX ' + struct.pack('<I', version) + build_chunk(b'MAIN', children=b''.join(children))


def build_model(size, voxels):
    xyzi = struct.pack('<I', len(voxels)) + b''.join(struct.pack('<bbbB', *_) for _ in voxels)

    return build_chunk(b'SIZE', struct.pack('<bbb', *size)) + build_chunk(b'XYZI', xyzi)


@pytest.fixture
def make_chunk():
    return build_chunk


@pytest.fixture
def make_vox():
    return build_vox


@pytest.fixture
def make_model():
    return build_model

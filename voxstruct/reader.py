'''
Decoding of a whole VOX file

    .--------------------.
    | "VOX " | version   |  FileHeader
    |--------------------|
    | MAIN               |
    |   PACK (optional)  |
    |   SIZE             |
    |   XYZI             |  one SIZE/XYZI couple per model
    |   ...              |
    |   RGBA (optional)  |
    |   MATL (optional)  |  decoded only on request
    '--------------------'

The children of MAIN are only located in a first pass (reading their
headers), then decoded in a fixed order so that the palette and the
materials (when requested) reach the sink before any model.
'''
import logging

from . import fields
from .chunks import read_header
from .data import VoxData
from .enum import ChunkId
from .exceptions import (
    DuplicateChunkException,
    ModelCountMismatchException,
    UnexpectedChunkException,
    VoxException,
)
from .material import read_material_chunk
from .palette import Palette
from .streams import Stream
from .types import FileHeader, Voxel, read_size


logger = logging.getLogger(__name__)


class MainChildren(object):
    '''The children of MAIN grouped by id, in the order they were found.

    MATL chunks are collected only when asked for, otherwise they are
    skipped as any other unknown chunk.'''

    def __init__(self, materials=False):
        self.pack = None
        self.rgba = None
        self.sizes = []
        self.xyzis = []
        self.materials = [] if materials else None

    def _set_singleton(self, name, frame):
        first = getattr(self, name)
        if first is not None:
            raise DuplicateChunkException(first, frame)

        setattr(self, name, frame)

    def add(self, frame):
        if frame.id == ChunkId.PACK.value:
            self._set_singleton('pack', frame)
        elif frame.id == ChunkId.RGBA.value:
            self._set_singleton('rgba', frame)
        elif frame.id == ChunkId.SIZE.value:
            self.sizes.append(frame)
        elif frame.id == ChunkId.XYZI.value:
            self.xyzis.append(frame)
        elif frame.id == ChunkId.MATL.value and self.materials is not None:
            self.materials.append(frame)
        else:
            logger.debug('skipping chunk %r', frame)


def _read_count(reader):
    field = fields.StructField('I')
    field.unpack(reader)

    return field.value


def _read_materials(frames, stream, sink):
    for frame in frames:
        try:
            material_id, material = read_material_chunk(frame.content(stream))
        except VoxException as e:
            # MagicaVoxel writes also a dictionary based layout we don't decode
            logger.warning('skipping material %r: %s', frame, e)
            continue

        sink.on_material(material_id, material)


def read_vox_into(source, sink, materials=False):
    '''Decode the VOX file from source (bytes, path or file object) calling
    the methods of sink as the content is found.

    With materials the MATL chunks are decoded too and passed to
    sink.on_material(), the ones that can't be decoded are skipped.'''
    stream = source if isinstance(source, Stream) else Stream(source)

    try:
        header = FileHeader.read(stream)
        logger.debug('version %d', header.version.value)
        sink.on_version(header.version.value)

        main = read_header(stream)
        if main.id != ChunkId.MAIN.value:
            raise UnexpectedChunkException(main, expected=ChunkId.MAIN.value)

        children = MainChildren(materials=materials)
        for child in main.children(stream):
            children.add(child)

        if children.rgba is not None:
            sink.on_palette(Palette.read(children.rgba.content(stream)))

        if children.materials:
            _read_materials(children.materials, stream, sink)

        count = 1 if children.pack is None else _read_count(children.pack.content(stream))

        if len(children.sizes) != count or len(children.xyzis) != count:
            raise ModelCountMismatchException(len(children.sizes), len(children.xyzis), count)

        sink.on_model_count(count)

        for size, xyzi in zip(children.sizes, children.xyzis):
            sink.on_model_size(read_size(size.content(stream)))

            reader = xyzi.content(stream)
            for _ in range(_read_count(reader)):
                sink.on_voxel(Voxel.read(reader))
    finally:
        if stream is not source:
            stream.close()


def from_stream(fileobj, materials=False) -> VoxData:
    '''Decode from an open seekable binary file, that is left open.'''
    vox = VoxData()
    read_vox_into(fileobj, vox, materials=materials)

    return vox


def from_bytes(data: bytes, materials=False) -> VoxData:
    vox = VoxData()
    read_vox_into(data, vox, materials=materials)

    return vox


def from_file(path, materials=False) -> VoxData:
    vox = VoxData()
    read_vox_into(path, vox, materials=materials)

    return vox

'''
Encoding of a whole VOX file.

The chunks are emitted in the order

    MAIN
      PACK          only with more than one model
      SIZE, XYZI    for each model
      RGBA          only if the palette is not the default one
      MATL          for each material, ascending id

and the lengths of MAIN are patched at the end by the ChunkWriter.
'''
import logging

from . import fields
from .chunks import ChunkWriter
from .enum import ChunkId
from .exceptions import NoModelsException, VoxException
from .material import MaterialId
from .streams import Stream
from .types import FileHeader


logger = logging.getLogger(__name__)


def _count_raw(count):
    return fields.StructField('I', default=count).raw


def _write_model(writer, index, model):
    try:
        with writer.chunk(ChunkId.SIZE):
            writer.write_content(model.size.raw)

        with writer.chunk(ChunkId.XYZI):
            writer.write_content(_count_raw(len(model.voxels)))
            for voxel in model.voxels:
                writer.write_content(voxel.raw)
    except VoxException as e:
        e.chain.append('models[%d]' % index)
        raise


def write_vox(sink, vox):
    '''Encode vox (anything with the attributes of a VoxData) into sink.'''
    stream = sink if isinstance(sink, Stream) else Stream(sink, 'w')

    FileHeader(b'VOX ', vox.version).pack(stream)

    writer = ChunkWriter(stream)
    with writer.chunk(ChunkId.MAIN):
        if not vox.models:
            raise NoModelsException()

        if len(vox.models) > 1:
            with writer.chunk(ChunkId.PACK):
                writer.write_content(_count_raw(len(vox.models)))

        for index, model in enumerate(vox.models):
            _write_model(writer, index, model)

        if not vox.palette.is_default():
            with writer.chunk(ChunkId.RGBA):
                writer.write_content(vox.palette.raw)
        else:
            logger.debug('default palette, no RGBA chunk')

        for material_id, material in vox.materials.items():
            with writer.chunk(ChunkId.MATL):
                writer.write_content(MaterialId(material_id).raw + material.raw)


def to_stream(fileobj, vox):
    '''Encode into an open seekable binary file, that is left open.'''
    write_vox(fileobj, vox)


def to_bytes(vox) -> bytes:
    stream = Stream(b'', 'w')
    write_vox(stream, vox)

    return stream.getvalue()


def to_file(path, vox):
    with Stream(path, 'w') as stream:
        write_vox(stream, vox)

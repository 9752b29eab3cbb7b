"""
# Voxstruct: MagicaVoxel VOX files.

A VOX file is a magic, a version and a tree of chunks rooted at MAIN; every
chunk declares the length of its content and of its children, so that the
reader can jump over what it doesn't understand.

The package is layered

 1. fields/core: fixed layout records that know how to unpack() themselves
    from a stream and how to produce their raw representation.

 2. chunks: the container engine, it locates the children of a chunk
    without reading them and writes nested chunks patching their lengths
    when they are closed.

 3. reader/writer: the assembly of the whole file, the decoded content is
    pushed to a VoxSink as soon as it's found.

The simplest use is

    vox = from_file('model.vox')
    vox.models[0].add((1, 2, 3), 79)
    to_file('model.vox', vox)
"""
from .data import VoxSink, VoxData
from .material import Material, MaterialPalette
from .palette import Color, Palette, DEFAULT_PALETTE
from .types import Model, Vector, Voxel
from .reader import read_vox_into, from_stream, from_bytes, from_file
from .writer import write_vox, to_stream, to_bytes, to_file

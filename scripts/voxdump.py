#!/usr/bin/env python3
'''
Print the chunk tree of a VOX file and a summary of its content

 $ voxdump.py model.vox palette.png

with the second argument the palette is saved as a PNG image too.
'''
import sys
import os
import logging

from voxstruct import from_file
from voxstruct.chunks import read_header
from voxstruct.streams import Stream
from voxstruct.types import FileHeader


logging.basicConfig(level=logging.INFO if 'DEBUG' not in os.environ else logging.DEBUG)
logger = logging.getLogger(__name__)


def usage(progname):
    print(f'usage: {progname} <vox file> [<palette png>]')
    sys.exit(1)


def dump_tree(path):
    with Stream(path) as stream:
        header = FileHeader.read(stream)
        print(f'''VOX Header:
  Magic:    {header.magic.value.decode()}
  Version:  {header.version.value}
''')
        print(' Offset     Content   Children  Id')

        main = read_header(stream)
        for depth, frame in main.walk(stream):
            print(f' 0x{frame.offset:08x} {frame.content_length:>9d} {frame.children_length:>9d}  {"  " * depth}{frame.id.decode(errors="replace")}')


def dump_summary(vox):
    print(f'''
Models: {len(vox.models)}''')
    for idx, model in enumerate(vox.models):
        print(f'  [{idx:02d}] size {tuple(model.size)} with {len(model.voxels)} voxels')

    print(f'Palette: {"default" if vox.palette.is_default() else "custom"}')
    print(f'Materials: {len(vox.materials)}')
    for material_id, material in vox.materials.items():
        print(f'  [{material_id:3d}] {material!r}')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    path = sys.argv[1]

    dump_tree(path)

    vox = from_file(path, materials=True)
    dump_summary(vox)

    if len(sys.argv) > 2:
        logger.info('saving palette to \'%s\'', sys.argv[2])
        vox.palette.to_image().save(sys.argv[2])

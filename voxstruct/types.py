'''
Basic records of the VOX format.
'''
from . import fields
from .core import Record


DEFAULT_VERSION = 150


class FileHeader(Record):
    magic   = fields.StringField(4, default=b'VOX ', is_magic=True)
    version = fields.StructField('I', default=DEFAULT_VERSION)


class Vector(Record):
    '''Signed point (or extent) in the voxel lattice.'''
    x = fields.StructField('b')
    y = fields.StructField('b')
    z = fields.StructField('b')

    def __iter__(self):
        return iter(self.value)


class WideVector(Record):
    '''The SIZE content as written by MagicaVoxel itself, with 32 bits per axis.'''
    x = fields.StructField('i')
    y = fields.StructField('i')
    z = fields.StructField('i')


class Voxel(Record):
    point       = Vector()
    color_index = fields.StructField('B')


class Model(object):
    '''The extent of a model and its voxels, in the order they are stored.'''

    def __init__(self, size=None, voxels=None):
        if size is None:
            size = Vector()
        elif not isinstance(size, Vector):
            size = Vector(*size)

        self.size = size
        self.voxels = list(voxels) if voxels is not None else []

    def __repr__(self):
        return '<%s(size=%r,voxels=%d)>' % (self.__class__.__name__, self.size.value, len(self.voxels))

    def __eq__(self, other):
        if not isinstance(other, Model):
            return NotImplemented

        return self.size == other.size and self.voxels == other.voxels

    def add(self, point, color_index):
        voxel = Voxel(point, color_index)
        self.voxels.append(voxel)

        return voxel


def read_size(reader):
    '''Read the extent of a model from the content of a SIZE chunk.

    The content is three signed bytes, but the one written by MagicaVoxel
    uses three 32 bits integers: it's recognized by its length.'''
    if reader.remaining >= WideVector.x.size * 3:
        wide = WideVector.read(reader)
        return Vector(*wide.value)

    return Vector.read(reader)

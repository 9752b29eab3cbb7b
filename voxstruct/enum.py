from enum import Enum, Flag


class ChunkId(Enum):
    '''Identifiers of the chunks we know how to interpret, any other
    identifier is passed through as raw bytes.'''
    MAIN = b'MAIN'
    PACK = b'PACK'
    SIZE = b'SIZE'
    XYZI = b'XYZI'
    RGBA = b'RGBA'
    MATL = b'MATL'


class MaterialType(Enum):
    DIFFUSE  = 0
    METAL    = 1
    GLASS    = 2
    EMISSIVE = 3


class MaterialFlags(Flag):
    '''Which optional properties follow the header of a material: each
    set bit (but TOTAL_POWER) adds a float, in bit order.'''
    NONE        = 0
    PLASTIC     = 1 << 0
    ROUGHNESS   = 1 << 1
    SPECULAR    = 1 << 2
    IOR         = 1 << 3
    ATTENUATION = 1 << 4
    POWER       = 1 << 5
    GLOW        = 1 << 6
    TOTAL_POWER = 1 << 7

'''
# Materials

A MATL chunk describes the shading of a palette entry:

    -------------------------------------------------------------------------------
    # Bytes  | Type       | Value
    -------------------------------------------------------------------------------
    4        | u32        | material id
    1        | u8         | type: diffuse, metal, glass, emissive
    4        | f32        | weight
    4        | u32        | flags
    4 x N    | f32        | one value per set flag (but the total power one)
    -------------------------------------------------------------------------------

the optional values follow the order of the bits: plastic, roughness,
specular, ior, attenuation, power, glow.
'''
from . import fields
from .core import Record
from .enum import MaterialType, MaterialFlags
from .exceptions import InvalidMaterialTypeException, VoxException


OPTIONAL_PROPERTIES = (
    ('plastic',     MaterialFlags.PLASTIC),
    ('roughness',   MaterialFlags.ROUGHNESS),
    ('specular',    MaterialFlags.SPECULAR),
    ('ior',         MaterialFlags.IOR),
    ('attenuation', MaterialFlags.ATTENUATION),
    ('power',       MaterialFlags.POWER),
    ('glow',        MaterialFlags.GLOW),
)


class MaterialTypeField(fields.StructField):
    '''The type is a single byte, any value outside the enum is an error.'''

    def __init__(self, **kw):
        super().__init__('B', enum=MaterialType, **kw)

    def _unpack_enum(self, value):
        try:
            return self.enum(value)
        except ValueError:
            raise InvalidMaterialTypeException(value)


class MaterialHeader(Record):
    type   = MaterialTypeField(default=MaterialType.DIFFUSE)
    weight = fields.StructField('f', default=0.0)
    flags  = fields.StructField('I')


class Material(object):

    def __init__(self, type=MaterialType.DIFFUSE, weight=0.0, plastic=None, roughness=None,
                 specular=None, ior=None, attenuation=None, power=None, glow=None,
                 is_total_power=False):
        self.type = MaterialType(type)
        self.weight = weight
        self.plastic = plastic
        self.roughness = roughness
        self.specular = specular
        self.ior = ior
        self.attenuation = attenuation
        self.power = power
        self.glow = glow
        self.is_total_power = is_total_power

    def _get_properties(self):
        return {name: getattr(self, name) for name, _ in OPTIONAL_PROPERTIES if getattr(self, name) is not None}

    def __repr__(self):
        properties = ','.join('%s=%r' % _ for _ in self._get_properties().items())
        return '<%s(%s,weight=%r%s%s)>' % (
            self.__class__.__name__,
            self.type.name.lower(),
            self.weight,
            ',' + properties if properties else '',
            ',total_power' if self.is_total_power else '',
        )

    def __eq__(self, other):
        if not isinstance(other, Material):
            return NotImplemented

        return (self.type, self.weight, self._get_properties(), self.is_total_power) == \
            (other.type, other.weight, other._get_properties(), other.is_total_power)

    @property
    def flags(self) -> MaterialFlags:
        flags = MaterialFlags.NONE
        for name, flag in OPTIONAL_PROPERTIES:
            if getattr(self, name) is not None:
                flags |= flag

        if self.is_total_power:
            flags |= MaterialFlags.TOTAL_POWER

        return flags

    @classmethod
    def read(cls, reader):
        header = MaterialHeader.read(reader)
        flags = header.flags.value

        properties = {}
        for name, flag in OPTIONAL_PROPERTIES:
            if not flags & flag.value:
                continue

            field = fields.StructField('f')
            try:
                field.unpack(reader)
            except VoxException as e:
                e.chain.append(name)
                raise

            properties[name] = field.value

        return cls(
            type=header.type.value,
            weight=header.weight.value,
            is_total_power=bool(flags & MaterialFlags.TOTAL_POWER.value),
            **properties,
        )

    @property
    def raw(self):
        value = MaterialHeader(self.type, self.weight, self.flags.value).raw

        for name, property_value in self._get_properties().items():
            field = fields.StructField('f', default=property_value)
            try:
                value += field.raw
            except VoxException as e:
                e.chain.append(name)
                raise

        return value


class MaterialId(Record):
    id = fields.StructField('I')


def read_material_chunk(reader):
    '''Decode the content of a MATL chunk as (material id, material).'''
    material_id = MaterialId.read(reader).id.value

    return material_id, Material.read(reader)


class MaterialPalette(object):
    '''The materials of a file indexed by their id.'''

    def __init__(self, materials=None):
        self.materials = dict(materials) if materials else {}

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.materials)

    def __len__(self):
        return len(self.materials)

    def __contains__(self, material_id):
        return material_id in self.materials

    def __getitem__(self, material_id):
        return self.materials[material_id]

    def __setitem__(self, material_id, material):
        self.materials[material_id] = material

    def __iter__(self):
        return iter(sorted(self.materials))

    def __eq__(self, other):
        if not isinstance(other, MaterialPalette):
            return NotImplemented

        return self.materials == other.materials

    def is_empty(self):
        return not self.materials

    def get(self, material_id, default=None):
        return self.materials.get(material_id, default)

    def insert(self, material_id, material):
        self.materials[material_id] = material

    def items(self):
        return [(_, self.materials[_]) for _ in self]

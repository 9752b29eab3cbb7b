"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable: fixed-width integers and floats, fixed-size byte arrays.

All of them read from and write to a Stream, the offset where the field
was found (or written) is recorded in the attribute with the same name.
"""
import copy
import logging
import struct

from .meta import FieldBase, Endianess
from .exceptions import (
    InvalidValueException,
    IntegerOverflowException,
    MagicException,
)


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, name=None, father=None, default=None, endianess=Endianess.LITTLE_ENDIAN):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = None
        self.endianess = endianess

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return copy.copy(self.default)

    def create(self, father):
        # don't drag the father of the prototype along with the copy
        instance = copy.deepcopy(self, {id(self.father): None})
        instance.father = father
        return instance

    def __str__(self):
        return str(self.value)

    def _get_value(self):
        return self._value

    def _set_value(self, value) -> None:
        self._value = value

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
    )

    def relayout(self, offset=0):
        self.offset = offset

        return self.size

    def pack(self, stream):
        self.offset = stream.tell()
        self.logger.debug('packing %s at offset %08x', self.name, self.offset)
        stream.write(self.raw)

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers and floats to/from bytes.

    The main advantage is the possibility to indicate via the "enum" argument some subclass
    of enum.Enum so to have directly a representation of the integer value of the field itself.
    """

    def __init__(self, format, default=0, enum=None, **kw):
        self.format = format
        self.enum = enum
        super().__init__(default=default, **kw)

    def _get_encoder(self):
        return hex if isinstance(self.value, int) else repr

    def __repr__(self):
        if not self.enum:
            return '<%s(%s)>' % (self.__class__.__name__, self._get_encoder()(self.value))

        return f'<{self.__class__.__name__}({self.value!r})>'

    def value_from_default(self):
        if not self.enum or isinstance(self.default, self.enum):
            return super().value_from_default()

        return self.enum(self.default)

    def get_format(self):
        return '%s%s' % ('<' if self.endianess == Endianess.LITTLE_ENDIAN else '>', self.format)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        value = self.value if not self.enum else self.value.value
        try:
            return struct.pack(self.get_format(), value)
        except (struct.error, OverflowError) as e:
            self.logger.debug(e)
            raise IntegerOverflowException(value, format=self.format)

    def _unpack_enum(self, value):
        try:
            return self.enum(value)
        except ValueError:
            raise InvalidValueException(value)

    def _unpack(self, raw):
        value = struct.unpack(self.get_format(), raw)[0]
        if self.enum:
            value = self._unpack_enum(value)

        return value

    def unpack(self, stream):
        self.offset = stream.tell()
        self.value = self._unpack(stream.read_exact(self.size))


class StringField(Field):
    """Represent a contiguous chunk of bytes of fixed length.

    With is_magic the value read must be equal to the default one."""

    def __init__(self, n=None, is_magic=False, **kw):
        if n is None and 'default' not in kw:
            raise ValueError("StringField must have 'n' or 'default' indicated!")

        self.length = n or len(kw['default'])
        self.is_magic = is_magic

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return self.length

    def value_from_default(self):
        return b'\x00' * self.length if not self.default else self.default

    def _set_value(self, value) -> None:
        if len(value) != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        super()._set_value(bytes(value))

    def _get_size(self):
        return self.length

    def _get_raw(self):
        return self.value

    def unpack(self, stream):
        self.offset = stream.tell()
        raw = stream.read_exact(self.length)

        if self.is_magic and raw != self.default:
            self.logger.warning('the magic doesn\'t correspond: %r', raw)
            raise MagicException(raw, expected=self.default)

        self.value = raw

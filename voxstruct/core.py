"""
Core module for the declaration of fixed layout records.

A Record is a sequence of fields (or other records) declared as class
attributes, the order of declaration is the order on disk:

    class Vector(Record):
        x = fields.StructField('b')
        y = fields.StructField('b')
        z = fields.StructField('b')

Each instance gets its own copy of the fields, created when accessed the
first time.
"""
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaRecord
from .exceptions import VoxException


class Record(Field, metaclass=MetaRecord):
    """
    Together with Field is the main class that defines a format: its main attributes
    are offset and size.

    The positional arguments of the constructor are the values of the fields,
    in declaration order.
    """

    def __init__(self, *values, **kwargs):
        super().__init__(**kwargs)

        if values:
            self.value = values

        self.relayout()

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%r' % (field_name, field.value))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented

        return self.value == other.value

    def __hash__(self):
        return hash((self.__class__.__name__, self.value))

    def init(self):
        for _, field in self.get_fields():
            field.init()

    def _get_value(self):
        return tuple(field.value for _, field in self.get_fields())

    def _set_value(self, value):
        if isinstance(value, Record):
            value = value.value

        value = tuple(value)
        names = self.get_ordered_fields_name()

        if len(value) != len(names):
            raise ValueError(f'{self.__class__.__name__} needs {len(names)} values, {len(value)} given')

        for name, element in zip(names, value):
            setattr(self, name, element)

    def _get_size(self):
        size = 0
        for _, field in self.get_fields():
            size += field.size

        return size

    def _get_raw(self):
        value = b''
        for field_name, field in self.get_fields():
            try:
                value += field.raw
            except VoxException as e:
                e.chain.append(field_name)
                raise

        return value

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def relayout(self, offset=0):
        '''Set the offsets of the fields as if the record was at the given offset.'''
        self.offset = offset

        size = 0
        for _, field in self.get_fields():
            size += field.relayout(offset=offset + size)

        return size

    def pack(self, stream):
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            try:
                field.pack(stream)
            except VoxException as e:
                e.chain.append(field_name)
                raise

    def unpack(self, stream):
        '''Decode the fields one after the other starting from the actual
        offset of the stream.

        If a field fails, the exception is propagated with the name of the field
        added to its chain so that the path to the failing field can be reconstructed.
        '''
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            self.logger.debug('unpacking %s.%s at %d', self.__class__.__name__, field_name, stream.tell())

            try:
                field.unpack(stream)
            except VoxException as e:
                e.chain.append(field_name)
                raise

    @classmethod
    def read(cls, stream):
        '''Build an instance unpacking it from the stream.'''
        instance = cls()
        instance.unpack(stream)

        return instance

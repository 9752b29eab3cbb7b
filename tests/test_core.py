import pytest

from voxstruct.core import Record
from voxstruct.exceptions import TruncatedException, IntegerOverflowException
from voxstruct.fields import StructField, StringField
from voxstruct.streams import Stream


def test_record():
    """Check that building a Record from fields behaves correctly."""
    class Dummy(Record):
        a = StructField('I', default=0xbad)
        b = StringField(0x10)
        c = StructField('I', default=0xdeadbeef)

    dummy = Dummy()

    assert dummy.a.size == 4
    assert dummy.a.raw == b'\xad\x0b\x00\x00'
    assert dummy.a.value == 0xbad
    assert dummy.a.offset == 0x00
    assert dummy.a.father == dummy

    assert dummy.b.size == 0x10
    assert dummy.b.raw == b'\x00' * 0x10
    assert dummy.b.offset == 0x04

    assert dummy.c.size == 0x4
    assert dummy.c.raw == b'\xef\xbe\xad\xde'
    assert dummy.c.offset == 0x14

    assert dummy.size == 0x18
    assert len(dummy.raw) == dummy.size
    assert dummy.raw == (
        b'\xad\x0b\x00\x00' +
        b'\x00' * 0x10 +
        b'\xef\xbe\xad\xde'
    )


def test_record_instances_are_independent():
    class Dummy(Record):
        a = StructField('I')

    first = Dummy()
    second = Dummy()

    first.a = 1

    assert first.a.value == 1
    assert second.a.value == 0
    assert Dummy.a.value == 0


def test_record_values():
    class Point(Record):
        x = StructField('b')
        y = StructField('b')

    point = Point(1, -1)

    assert point.value == (1, -1)
    assert point.raw == b'\x01\xff'
    assert point == Point(1, -1)
    assert point != Point(1, 1)
    assert repr(point) == '<Point(x=1,y=-1)>'

    with pytest.raises(ValueError):
        point.value = (1, 2, 3)


def test_record_nested():
    class Point(Record):
        x = StructField('b')
        y = StructField('b')

    class Segment(Record):
        start = Point()
        end   = Point()

    segment = Segment((1, 2), (3, 4))

    assert segment.size == 4
    assert segment.layout == {
        'start': (0, 2),
        'end': (2, 2),
    }
    assert segment.raw == b'\x01\x02\x03\x04'
    assert segment.end.y.value == 4

    other = Segment.read(Stream(b'\x05\x06\x07\x08'))

    assert other.value == ((5, 6), (7, 8))
    assert other.end.offset == 2


def test_record_inheritance():
    class Base(Record):
        a = StructField('B')

    class Child(Base):
        b = StructField('B')

    assert Child().get_ordered_fields_name() == ['a', 'b']
    assert Child(1, 2).raw == b'\x01\x02'


def test_record_unpack_error_chain():
    class Inner(Record):
        x = StructField('I')

    class Outer(Record):
        header = StructField('B')
        inner  = Inner()

    with pytest.raises(TruncatedException) as exc:
        Outer.read(Stream(b'\x01\x02\x03'))

    assert exc.value.chain == ['x', 'inner']
    assert str(exc.value).endswith('(at inner.x)')


def test_record_pack_error_chain():
    class Dummy(Record):
        a = StructField('B')
        b = StructField('B')

    dummy = Dummy(1, 256)

    with pytest.raises(IntegerOverflowException) as exc:
        dummy.pack(Stream(b'', 'w'))

    assert exc.value.chain == ['b']

import io
import os
import logging

from .exceptions import TruncatedException


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/path/file object to
    uniform its properties: it must be seekable since the chunks are
    traversed jumping back and forth.

    The file objects passed by the caller are only borrowed: close()
    closes only what the stream opened itself.'''
    def __init__(self, obj, flags='r'):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.flags = flags
        self.obj = os.fspath(obj) if isinstance(obj, os.PathLike) else obj
        self.owned = False
        self.history = []

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, self.init_file)

        init_method()

    def __getattr__(self, name):
        if name == 'obj':
            raise AttributeError(name)

        return getattr(self.obj, name)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self._type.__name__)

    def init_str(self):
        '''We think this is a path'''
        mode = 'wb' if 'w' in self.flags else 'rb'
        logger.debug('opening path \'%s\' with mode %s', self.obj, mode)
        self.obj = open(self.obj, mode)
        self.owned = True

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    init_bytearray = init_bytes
    init_memoryview = init_bytes

    def init_file(self):
        '''Some file-like object opened by the caller'''
        if not hasattr(self.obj, 'seek') or not self.obj.seekable():
            raise ValueError('\'%s\' is not a seekable stream' % self.obj.__class__.__name__)

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        self.obj.seek(offset)

    def tell(self):
        return self.obj.tell()

    def read_exact(self, n):
        '''Read exactly n bytes or fail.'''
        offset = self.obj.tell()
        data = self.obj.read(n)

        if len(data) != n:
            raise TruncatedException(offset, n, len(data))

        return data

    def write(self, data):
        return self.obj.write(data)

    def getvalue(self):
        return self.obj.getvalue()

    def close(self):
        if self.owned:
            self.obj.close()
            self.owned = False

    def save(self):
        self.history.append(self.obj.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.obj.seek(old_seek)


class BoundedStream(object):
    '''Read-only view over "length" bytes of a stream starting at "offset".

    It keeps its own position and seeks the underlying stream before every
    read, so it stays valid even if someone else moves the cursor of the
    stream in the meantime. Reading past the end is an error when done with
    read_exact().'''

    def __init__(self, stream, offset, length):
        self.stream = stream
        self.offset = offset
        self.length = length
        self.position = 0

    def __repr__(self):
        return '<%s(offset=0x%x,length=%d,position=%d)>' % (
            self.__class__.__name__, self.offset, self.length, self.position)

    @property
    def remaining(self):
        return self.length - self.position

    def tell(self):
        return self.position

    def seek(self, position):
        if not 0 <= position <= self.length:
            raise ValueError(f'position {position} outside of [0, {self.length}]')

        self.position = position

    def read(self, n=-1):
        n = self.remaining if n < 0 else min(n, self.remaining)
        if n == 0:
            return b''

        self.stream.seek(self.offset + self.position)
        data = self.stream.read(n)
        self.position += len(data)

        return data

    def read_exact(self, n):
        if n > self.remaining:
            raise TruncatedException(self.offset + self.position, n, self.remaining)

        offset = self.offset + self.position
        data = self.read(n)

        if len(data) != n:
            raise TruncatedException(offset, n, len(data))

        return data

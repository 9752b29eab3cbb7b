'''
# Chunks

A chunk is a self-describing record made of

    .-----------------------------------.
    | id               4 bytes          |
    | content length   u32              |
    | children length  u32              |
    | content          N bytes          |
    | children         M bytes          |
    '-----------------------------------'

where the children are chunks themselves. Since both lengths are declared
upfront it's possible to jump over a chunk (and all its descendants)
without reading it at all.

Reading is done via ChunkFrame: it's only a description of where the chunk
is in the stream, the content is read on demand via a BoundedStream.

Writing is done via ChunkWriter: the header is emitted with zeroed lengths,
the lengths are patched when the chunk is closed and so they are known.
'''
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from . import fields
from .core import Record
from .enum import ChunkId
from .streams import Stream, BoundedStream
from .exceptions import WriterStateException


logger = logging.getLogger(__name__)


class ChunkHeader(Record):
    id              = fields.StringField(4)
    content_length  = fields.StructField('I')
    children_length = fields.StructField('I')


class ChunkLengths(Record):
    content_length  = fields.StructField('I')
    children_length = fields.StructField('I')


HEADER_SIZE = ChunkHeader().size


class ChunkFrame(object):
    '''Where a chunk lives in the stream: "offset" is the offset of its header.'''

    def __init__(self, id: bytes, offset: int, content_length: int, children_length: int):
        self.id = id
        self.offset = offset
        self.content_length = content_length
        self.children_length = children_length

    def __repr__(self):
        return '<%s(id=%r,offset=0x%x,content=%d,children=%d)>' % (
            self.__class__.__name__,
            self.id,
            self.offset,
            self.content_length,
            self.children_length,
        )

    def __eq__(self, other):
        if not isinstance(other, ChunkFrame):
            return NotImplemented

        return (self.id, self.offset, self.content_length, self.children_length) == \
            (other.id, other.offset, other.content_length, other.children_length)

    @property
    def content_offset(self):
        return self.offset + HEADER_SIZE

    @property
    def children_offset(self):
        return self.content_offset + self.content_length

    @property
    def end(self):
        '''Offset of the next sibling.'''
        return self.children_offset + self.children_length

    @property
    def is_container(self):
        return self.children_length != 0

    def content(self, stream) -> BoundedStream:
        '''Return a reader limited to the content of this chunk.'''
        stream.seek(self.content_offset)
        return BoundedStream(stream, self.content_offset, self.content_length)

    def children(self, stream) -> Iterator["ChunkFrame"]:
        return iter_children(self, stream)

    def walk(self, stream, depth=0) -> Iterator[Tuple[int, "ChunkFrame"]]:
        '''Depth-first traversal of this chunk and all its descendants.'''
        yield depth, self

        for child in self.children(stream):
            if child.is_container:
                # the nested traversal moves the cursor, the outer generator re-seeks anyway
                yield from child.walk(stream, depth=depth + 1)
            else:
                yield depth + 1, child


def read_header(stream) -> ChunkFrame:
    '''Read the header of a chunk at the actual offset of the stream.'''
    offset = stream.tell()

    header = ChunkHeader.read(stream)

    frame = ChunkFrame(
        header.id.value,
        offset,
        header.content_length.value,
        header.children_length.value,
    )
    logger.debug('read header %r', frame)

    return frame


def iter_children(frame: ChunkFrame, stream) -> Iterator[ChunkFrame]:
    '''Generate the direct children of frame, lazily.

    Only the headers are read: the cursor is moved past the content and the
    children of each yielded chunk whatever the caller did with the stream.'''
    cursor = frame.children_offset
    end = frame.children_offset + frame.children_length

    while cursor < end:
        stream.seek(cursor)
        child = read_header(stream)

        yield child

        cursor = child.end

    stream.seek(cursor)


class PendingFrame(object):
    '''A chunk opened by the ChunkWriter whose lengths are still to be written.'''

    def __init__(self, id: bytes, offset: int):
        self.id = id
        self.offset = offset
        self.children_start: Optional[int] = None

    def __repr__(self):
        return '<%s(id=%r,offset=0x%x)>' % (self.__class__.__name__, self.id, self.offset)

    @property
    def lengths_offset(self):
        return self.offset + ChunkHeader.id.size

    @property
    def content_start(self):
        return self.offset + HEADER_SIZE

    @property
    def has_children(self):
        return self.children_start is not None


class ChunkWriter(object):
    '''Write nested chunks to a seekable stream.

    The chunks opened and not yet closed are kept in a stack: a chunk opened
    while another one is open becomes its child, and everything written to
    the parent before its first child is the parent's content.

        writer = ChunkWriter(stream)
        with writer.chunk(b'MAIN'):
            with writer.chunk(b'PACK'):
                writer.write_content(b'\\x02\\x00\\x00\\x00')
    '''

    def __init__(self, stream):
        self.stream = stream if isinstance(stream, Stream) else Stream(stream)
        self._stack: List[PendingFrame] = []

    @property
    def depth(self):
        return len(self._stack)

    def open(self, chunk_id: bytes) -> PendingFrame:
        if isinstance(chunk_id, ChunkId):
            chunk_id = chunk_id.value

        header = ChunkHeader(chunk_id, 0, 0)

        if self._stack and not self._stack[-1].has_children:
            self._stack[-1].children_start = self.stream.tell()

        frame = PendingFrame(chunk_id, self.stream.tell())

        header.pack(self.stream)

        self._stack.append(frame)
        logger.debug('opened %r at depth %d', frame, self.depth)

        return frame

    def write_content(self, data: bytes):
        if not self._stack:
            raise WriterStateException('no chunk is open')

        frame = self._stack[-1]
        if frame.has_children:
            raise WriterStateException(f'chunk {frame.id!r} has already children, no more content allowed')

        self.stream.write(data)

    def close(self, frame: Optional[PendingFrame] = None) -> PendingFrame:
        '''Close the innermost chunk and patch its header with the lengths.'''
        if not self._stack:
            raise WriterStateException('no chunk to close')

        if frame is not None and frame is not self._stack[-1]:
            if frame not in self._stack:
                raise WriterStateException(f'chunk {frame.id!r} is already closed')
            raise WriterStateException(f'chunk {frame.id!r} has unclosed children')

        frame = self._stack.pop()

        end = self.stream.tell()
        children_start = frame.children_start if frame.has_children else end

        content_length = children_start - frame.content_start
        children_length = end - children_start

        lengths = ChunkLengths(content_length, children_length).raw

        self.stream.save()
        self.stream.seek(frame.lengths_offset)
        self.stream.write(lengths)
        self.stream.restore()

        logger.debug('closed %r: content=%d children=%d', frame, content_length, children_length)

        return frame

    @contextmanager
    def chunk(self, chunk_id: bytes):
        '''Open a chunk for the duration of the block, whatever way the block exits.'''
        depth = self.depth
        frame = self.open(chunk_id)
        try:
            yield frame
        finally:
            while self.depth > depth:
                self.close()

class VoxException(Exception):
    '''Base class to extend in order to throw exception in voxstruct.

    It takes an argument that represents the chain of the layers that
    caused the exception (innermost first): every layer the exception
    crosses while unpacking appends its own name.
    '''

    def __init__(self, chain=None):
        self.chain = chain if chain is not None else []
        super().__init__()

    def describe(self):
        return self.__class__.__name__

    def __str__(self):
        msg = self.describe()
        if self.chain:
            msg += ' (at %s)' % '.'.join(reversed(self.chain))
        return msg


class UnpackException(VoxException):
    pass


class TruncatedException(UnpackException):
    '''The source ended (or a bounded content reader was overrun) before
    the requested amount of bytes was available.'''

    def __init__(self, offset, expected, got, chain=None):
        self.offset = offset
        self.expected = expected
        self.got = got
        super().__init__(chain=chain)

    def describe(self):
        return f'expected {self.expected} bytes at offset 0x{self.offset:x}, got {self.got}'


class MagicException(UnpackException):

    def __init__(self, got, expected=None, chain=None):
        self.got = got
        self.expected = expected
        super().__init__(chain=chain)

    def describe(self):
        return f'expected magic {self.expected!r}, but got {self.got!r}'


class UnexpectedChunkException(UnpackException):

    def __init__(self, frame, expected=None, chain=None):
        self.frame = frame
        self.expected = expected
        super().__init__(chain=chain)

    def describe(self):
        return f'expected chunk {self.expected!r}, but read {self.frame!r}'


class DuplicateChunkException(UnpackException):
    '''A chunk that can appear only once appeared twice.'''

    def __init__(self, first, second, chain=None):
        self.first = first
        self.second = second
        super().__init__(chain=chain)

    def describe(self):
        return 'found multiple %r chunks (at 0x%x and 0x%x)' % (
            self.first.id, self.first.offset, self.second.offset)


class ModelCountMismatchException(UnpackException):

    def __init__(self, size_count, xyzi_count, model_count, chain=None):
        self.size_count = size_count
        self.xyzi_count = xyzi_count
        self.model_count = model_count
        super().__init__(chain=chain)

    def describe(self):
        return (f'found {self.size_count} SIZE chunks, {self.xyzi_count} XYZI chunks, '
                f'and PACK said there are {self.model_count} models')


class InvalidValueException(UnpackException):

    def __init__(self, value, chain=None):
        self.value = value
        super().__init__(chain=chain)

    def describe(self):
        return f'invalid value {self.value!r}'


class InvalidMaterialTypeException(InvalidValueException):

    def describe(self):
        return f'invalid material type: {self.value}'


class PackException(VoxException):
    pass


class IntegerOverflowException(PackException):
    '''The value doesn't fit the on-disk width of its field.'''

    def __init__(self, value, format=None, chain=None):
        self.value = value
        self.format = format
        super().__init__(chain=chain)

    def describe(self):
        return f'value {self.value!r} does not fit format {self.format!r}'


class NoModelsException(PackException):

    def describe(self):
        return "can't write VOX file with no models"


class WriterStateException(PackException):
    '''The open/close discipline of the chunk writer was violated.'''

    def __init__(self, reason, chain=None):
        self.reason = reason
        super().__init__(chain=chain)

    def describe(self):
        return self.reason

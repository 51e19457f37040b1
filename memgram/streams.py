import io
import logging
import os

from .exceptions import OpenFileError, SeekError


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/file object to
    uniform its properties: there is a single cursor that the
    extraction moves forward, plus save()/restore() for peeking.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.obj = obj
        self.history = []
        # only what we opened here is closed by close()
        self._owned = False

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            raise OpenFileError('cannot use \'%s\' as a binary source' % self._type.__name__)

        init_method()

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.obj)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        if self._owned:
            self.obj.close()

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        path = self.obj
        try:
            self.obj = open(path, 'rb')
            self._owned = True
        except OSError as e:
            raise OpenFileError('Could not open file: %s, because: %s' % (path, e.strerror)) from e

    def init_PosixPath(self):
        self.obj = str(self.obj)
        self.init_str()

    init_WindowsPath = init_PosixPath

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)
        self._owned = True

    def init_bytearray(self):
        self.obj = io.BytesIO(bytes(self.obj))
        self._owned = True

    def init_BytesIO(self):
        pass

    def init_BufferedReader(self):
        pass

    @property
    def eof(self) -> int:
        '''Offset of the end of the stream'''
        current = self.obj.tell()
        end = self.obj.seek(0, os.SEEK_END)
        self.obj.seek(current)

        return end

    def tell(self) -> int:
        return self.obj.tell()

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        if offset < 0 or offset > self.eof:
            raise SeekError('Could not seek to offset: %d, file size is %d' % (offset, self.eof))

        self.obj.seek(offset)

        return self

    def read(self, size: int) -> bytes:
        return self.obj.read(size)

    # TODO: create contextmanager
    def save(self):
        self.history.append(self.obj.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.obj.seek(old_seek)

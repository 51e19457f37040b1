class MemgramException(Exception):
    '''Base class to extend in order to throw exception in memgram.

    It takes a single argument that is the human readable cause of
    the failure, the CLI reports it as it is.
    '''

    def __init__(self, cause):
        self.cause = cause
        super().__init__(cause)


class GrammarException(MemgramException):
    pass


class InvalidDirective(GrammarException):
    '''A variable size or multiply directive that cannot be resolved
    against the fields of the grammar.'''
    pass


class OpenFileError(MemgramException):
    pass


class SeekError(MemgramException):
    pass


class StructureTooLarge(MemgramException):
    pass


class UnsupportedSize(MemgramException):
    pass


class NullTerminatorNotFound(MemgramException):
    pass


class VariableSizeArithmeticError(MemgramException):
    '''Raised when the size computed for a variable field underflows
    or when the operation is a division by zero.'''
    pass


class MissingSourceField(MemgramException):
    pass


class FormatException(MemgramException):
    pass


class CStructException(MemgramException):
    pass


class ConfigException(MemgramException):
    pass

from enum import Enum, auto


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()


class DisplayFormat(Enum):
    '''How the raw data of a field is shown in the formatted table.

    The value is the tag used in the grammar file.'''
    HEXLE   = 'hexle'
    ASCII   = 'ascii'
    IPV4BE  = 'ipv4be'
    IPV4LE  = 'ipv4le'
    UTF16BE = 'utf16be'
    UTF16LE = 'utf16le'
    X86     = 'x86_32'
    UNKNOWN = ''

    @classmethod
    def from_tag(cls, tag: str) -> "DisplayFormat":
        try:
            return cls(tag.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class VariableOptions(Enum):
    NO_OPTIONS = auto()
    NULL_CHAR  = auto()


class ArithmeticOrder(Enum):
    '''Which side of the operator the source field value is on'''
    UNSET     = 0
    FORWARDS  = auto()  # source OP adjustment
    BACKWARDS = auto()  # adjustment OP source


class ArithmeticOperator(Enum):
    ADDITION       = '+'
    SUBTRACTION    = '-'
    MULTIPLICATION = '*'
    DIVISION       = '/'


class ExtractionPhase(Enum):
    '''Enum to state the actual phase of an extraction run'''
    INIT       = 0
    POSITIONED = auto()
    EXTRACTING = auto()
    DONE       = auto()
    FAILED     = auto()

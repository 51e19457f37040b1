"""Run configuration, it's passed explicitly to whoever needs it."""
from enum import Enum, auto
from pathlib import Path
from typing import Optional

from .exceptions import ConfigException


class RunOptions(Enum):
    DISPLAY_NORMAL          = auto()  # grammar + binary
    CSTRUCT_CONVERT_WRITE   = auto()  # C struct converted to a grammar file
    CSTRUCT_CONVERT_DISPLAY = auto()  # C struct used as grammar for a binary


class RunConfig(object):

    def __init__(self,
                 grammar_path: Optional[Path] = None,
                 binary_path: Optional[Path] = None,
                 cstruct_path: Optional[Path] = None,
                 output_path: Optional[Path] = None,
                 struct_offset: Optional[int] = None,
                 description: bool = False,
                 fmt_endian: bool = False,
                 hex_endian: bool = False):
        self.grammar_path = grammar_path
        self.binary_path = binary_path
        self.cstruct_path = cstruct_path
        self.output_path = output_path
        # None when not given on the command line
        self.struct_offset = struct_offset
        self.description = description
        self.fmt_endian = fmt_endian
        self.hex_endian = hex_endian

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, ','.join('%s=%r' % _ for _ in self.__dict__.items()))

    @property
    def offset(self) -> int:
        return self.struct_offset or 0

    def run_mode(self) -> RunOptions:
        if self.cstruct_path is None and self.grammar_path is not None and self.binary_path is not None:
            return RunOptions.DISPLAY_NORMAL
        elif self.output_path is not None and self.cstruct_path is not None \
                and self.struct_offset is None and self.binary_path is None:
            return RunOptions.CSTRUCT_CONVERT_WRITE
        elif self.binary_path is not None and self.cstruct_path is not None \
                and self.output_path is None and self.grammar_path is None:
            return RunOptions.CSTRUCT_CONVERT_DISPLAY

        raise ConfigException('Unsupported flag combination')

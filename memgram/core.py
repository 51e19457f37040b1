"""
Core module: the extraction of the fields of a grammar from a binary file.

The binary source is consumed with a single cursor that only moves forward,
starting from the offset of the structure; each field in declaration order
takes exactly its size in bytes. Before reading a variable field its size is
resolved, either from the value of a field already read or by scanning for
the end of a null terminated run.

Hitting the end of file behaves differently depending on the grammar:

 1. without variable size directives the structure is simply too large for
    the file and StructureTooLarge is raised
 2. with variable size directives the extraction stops and the fields read
    so far are returned
"""
import logging
from typing import Dict, List, Optional, Tuple

from .enum import ExtractionPhase, VariableOptions
from .exceptions import (
    MemgramException,
    MissingSourceField,
    NullTerminatorNotFound,
    StructureTooLarge,
)
from .grammar import Grammar, GrammarField
from .streams import Stream
from .variable import VariableSizeEntry


# how many bytes are looked at searching for the null terminator
NULL_CHAR_WINDOW = 512


FieldByteMap = Dict[str, bytes]


def find_null_char_size(data: bytes) -> Optional[int]:
    '''Returns the index of the first non-zero byte that follows a zero byte.'''
    prev_null = False
    for index, byte in enumerate(data):
        if byte == 0x00:
            prev_null = True
        elif prev_null:
            return index

    return None


class Extractor(object):
    '''Reads the fields of a grammar from a binary source.

    Other than the field byte map, it keeps in "records" the list of
    (field, offset, raw) in the order the fields were read, this is
    what the renderers use since multiplied fields share the same name.'''

    def __init__(self, grammar: Grammar, stream: Stream, offset: int = 0, entries: List[VariableSizeEntry] = None):
        self.logger = logging.getLogger(__name__)
        self.grammar = grammar
        self.stream = stream
        self.offset = offset
        self.entries = grammar.create_var_size_entry_vector() if entries is None else entries
        self.field_map: FieldByteMap = {}
        self.records: List[Tuple[GrammarField, int, bytes]] = []
        self._phase = ExtractionPhase.INIT

    @property
    def phase(self) -> ExtractionPhase:
        return self._phase

    @property
    def is_complete(self) -> bool:
        return len(self.records) == len(self.grammar.fields)

    def _entries_for(self, field: GrammarField) -> List[VariableSizeEntry]:
        return [_ for _ in self.entries if _.var_field_name == field.name]

    def resolve_null_char(self, field: GrammarField, eof: int) -> int:
        current_position = self.stream.tell()
        read_size = min(NULL_CHAR_WINDOW, eof - current_position)

        self.stream.save()
        data = self.stream.read(read_size)
        self.stream.restore()

        size = find_null_char_size(data)

        if size is None:
            raise NullTerminatorNotFound(
                'Could not find the end of null terminated field: %s in %d bytes at offset %#x' % (
                    field.name, read_size, current_position))

        return size

    def resolve_arithmetic(self, entry: VariableSizeEntry) -> int:
        try:
            raw_field_data = self.field_map[entry.source_field_name]
        except KeyError:
            raise MissingSourceField(
                'Source field name: %s, should appear before variable field name: %s' % (
                    entry.source_field_name, entry.var_field_name))

        entry.convert_field_size(raw_field_data, entry.endianess)

        return entry.calculate_variable_size()

    def resolve_size(self, field: GrammarField, eof: int):
        for entry in self._entries_for(field):
            if entry.variable_options == VariableOptions.NULL_CHAR:
                field.size = self.resolve_null_char(field, eof)
            else:
                field.size = self.resolve_arithmetic(entry)

            self.logger.debug('variable field \'%s\' resolved with size %d' % (field.name, field.size))

    def extract(self) -> FieldByteMap:
        try:
            self.stream.seek(self.offset)
            self._phase = ExtractionPhase.POSITIONED
            self._extract()
        except MemgramException:
            self._phase = ExtractionPhase.FAILED
            raise

        self._phase = ExtractionPhase.DONE

        return self.field_map

    def _extract(self):
        eof = self.stream.eof

        self._phase = ExtractionPhase.EXTRACTING
        for field in self.grammar.fields:
            if self.entries:
                self.resolve_size(field, eof)

            position = self.stream.tell()
            pos_after_read = position + field.size

            self.logger.debug('extracting \'%s\' at offset %#x' % (field.name, position))

            if pos_after_read > eof:
                if self.entries:
                    self.logger.warning('Reached EOF reading field \'%s\' at offset %#x' % (field.name, position))
                    return

                raise StructureTooLarge(
                    'Structure size after read: %d, will be larger than file size: %d after reading field: %s' % (
                        pos_after_read, eof, field.name))

            raw = self.stream.read(field.size)

            self.field_map[field.name] = raw
            self.records.append((field, position, raw))


def extract_fields(grammar: Grammar, binary_source, start_offset: int = 0,
                   entries: List[VariableSizeEntry] = None) -> FieldByteMap:
    '''Main entry point: returns the mapping field name -> raw bytes.

    The binary_source can be a path, some bytes, an open binary file or an
    already opened Stream: files and streams of the caller are left open.'''
    if isinstance(binary_source, Stream):
        return Extractor(grammar, binary_source, start_offset, entries=entries).extract()

    with Stream(binary_source) as stream:
        return Extractor(grammar, stream, start_offset, entries=entries).extract()

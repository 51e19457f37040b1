'''
Conversion of a C struct into the grammar format.

Only the basic C types are understood and their sizes are the usual ones
on x86 (a char is 1 byte, an int 4 bytes and so on), this is not always
the case!
'''
import logging
from pathlib import Path
from typing import List, Tuple

from .exceptions import CStructException, OpenFileError
from .grammar import Grammar


logger = logging.getLogger(__name__)


_sizes = {
    0x01: (
        'char', 'signed char', 'unsigned char',
    ),
    0x02: (
        'short', 'short int', 'signed short', 'signed short int', 'unsigned short', 'unsigned short int',
    ),
    0x04: (
        'float', 'int', 'signed', 'signed int', 'unsigned', 'unsigned int', 'long', 'long int',
        'signed long', 'signed long int', 'unsigned long', 'unsigned long int',
    ),
    0x08: (
        'double', 'long long', 'long long int', 'signed long long', 'signed long long int',
        'unsigned long long', 'unsigned long long int',
    ),
    0x10: (
        'long double',
    ),
}

C_TYPE_SIZES = {c_type: size for size, c_types in _sizes.items() for c_type in c_types}


def get_field_size(field_type: str) -> int:
    try:
        return C_TYPE_SIZES[field_type.lower()]
    except KeyError:
        raise CStructException('Type: %s, is not supported' % field_type.lower())


class CStruct(object):
    """Holds the parsed C struct fields and the converted grammar contents."""

    def __init__(self):
        self.name = ''
        # (C type, field name)
        self.fields: List[Tuple[str, str]] = []
        self.grammar_contents = ''

    def __repr__(self):
        return '<%s(%s,%s)>' % (self.__class__.__name__, self.name, self.fields)

    @classmethod
    def from_file(cls, path) -> "CStruct":
        try:
            contents = Path(path).read_text()
        except OSError as e:
            raise OpenFileError('Error opening file: %s, because: %s' % (path, e.strerror))

        return cls().parse(contents)

    def parse(self, contents: str) -> "CStruct":
        start = contents.find('struct ')
        if start < 0:
            raise CStructException('Invalid C struct: could not find \'struct\' keyword')
        start += len('struct ')

        brace = contents.find('{', start)
        if brace < 0:
            raise CStructException('Invalid C struct: could not find opening \'{\'')

        end = contents.find('};', brace)
        if end < 0:
            raise CStructException('Invalid C struct: could not find closing \'};\'')

        self.name = contents[start:brace].strip()

        c_type = []
        for word in contents[brace + 1:end].split():
            if word.endswith(';'):
                if not c_type:
                    raise CStructException('Type must be specified in C struct before field name: %s' % word)
                self.fields.append((' '.join(c_type), word[:-1]))
                c_type = []
            else:
                c_type.append(word)

        logger.debug('parsed C struct \'%s\' with %d fields' % (self.name, len(self.fields)))

        return self

    def build_grammar_contents(self) -> "CStruct":
        '''Builds the contents of the output grammar file line by line.'''
        lines = [
            '[metadata]',
            '\tname = \'%s\'' % self.name,
            '\tvariable_size_fields = [[\'\',\'\',\'\',\'\']]',
            '\tmultiply_fields = [[\'\',\'\']]',
        ]

        for c_type, name in self.fields:
            lines.extend([
                '',
                '[[fields]]',
                '\tname = \'%s\'' % name,
                '\tsize = 0x%02X' % get_field_size(c_type),
                '\tdata_type = \'%s\'' % c_type,
                '\tdisplay_format = \'hex\'',
                '\tdescription = \'N/A\'',
            ])

        self.grammar_contents = '\n'.join(lines) + '\n'

        return self

    def to_grammar(self) -> Grammar:
        if not self.grammar_contents:
            self.build_grammar_contents()

        return Grammar.from_toml(self.grammar_contents)

    def write_grammar_file(self, output_path) -> "CStruct":
        if not self.grammar_contents:
            self.build_grammar_contents()

        try:
            Path(output_path).write_text(self.grammar_contents)
        except OSError as e:
            raise OpenFileError('Could not write to file: %s, because %s' % (output_path, e.strerror))

        logger.info('converted C struct %s to grammar file %s' % (self.name, output_path))

        return self

"""
A grammar describes a binary structure as an ordered list of fields.

The grammar file is a TOML document like the following

    [metadata]
        name = 'example'
        variable_size_fields = [['length', '+', '4', 'payload']]
        multiply_fields = [['entry', '3']]

    [[fields]]
        name = 'length'
        size = 4
        data_type = 'int'
        display_format = 'hexle'
        description = 'length of the payload'

The two lists in the metadata are the directives: a variable size directive
tells how to derive at runtime the size of a field from the value of another
one (or from a null terminator), a multiply directive repeats a field a given
number of times. A list containing only empty strings means that no directive
is configured.
"""
import copy
import logging
import sys
from pathlib import Path
from typing import List, Tuple

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .enum import (
    ArithmeticOperator,
    ArithmeticOrder,
    DisplayFormat,
    VariableOptions,
)
from .exceptions import (
    GrammarException,
    InvalidDirective,
    OpenFileError,
)
from .variable import VariableSizeEntry


logger = logging.getLogger(__name__)


class GrammarField(object):
    """A single [[fields]] entry of the grammar file."""

    def __init__(self, name: str, size: int, data_type: str = '', display_format: str = '', description: str = ''):
        self.name = name
        self.size = size
        self.data_type = data_type
        self.display_format = display_format
        self.description = description
        self.display = DisplayFormat.from_tag(display_format)

    def __repr__(self):
        return '<%s(%s, size=%d, %s)>' % (self.__class__.__name__, self.name, self.size, self.display_format)

    def __eq__(self, other):
        if not isinstance(other, GrammarField):
            return NotImplemented

        return (self.name, self.size, self.data_type, self.display_format, self.description) == \
            (other.name, other.size, other.data_type, other.display_format, other.description)

    def clone(self) -> "GrammarField":
        return copy.copy(self)


class GrammarMetadata(object):
    """The [metadata] table of the grammar file."""

    def __init__(self, name: str = '', variable_size_fields=None, multiply_fields=None):
        self.name = name
        self.variable_size_fields: List[Tuple[str, str, str, str]] = variable_size_fields or [('', '', '', '')]
        self.multiply_fields: List[Tuple[str, str]] = multiply_fields or [('', '')]

    def has_variable_size_fields(self) -> bool:
        return any(self.variable_size_fields[0])

    def has_multiply_fields(self) -> bool:
        return any(self.multiply_fields[0])


class FieldMultiply(object):
    """Holds data needed to multiply a field."""

    def __init__(self):
        self.field_name = ''
        self.field_index = 0
        self.multiplier = 0


def get_var_arithmetic_operator(arithmetic_op_str: str) -> ArithmeticOperator:
    if len(arithmetic_op_str) != 1:
        raise InvalidDirective(
            'Invalid arithmetic operator length: %d for variable size fields: \'%s\', '
            'must be one of the following (+, -, *, /)' % (len(arithmetic_op_str), arithmetic_op_str))
    try:
        return ArithmeticOperator(arithmetic_op_str)
    except ValueError:
        raise InvalidDirective(
            'Invalid arithmetic operator for variable size fields: \'%s\', '
            'must be one of the following (+, -, *, /)' % arithmetic_op_str)


def get_var_adjustment(adjustment_str: str) -> int:
    try:
        adjustment = int(adjustment_str)
    except ValueError:
        raise InvalidDirective('Could not convert variable size adjustment: \'%s\' to an integer' % adjustment_str)

    if adjustment < 0:
        raise InvalidDirective('Variable size adjustment: %d must not be negative' % adjustment)

    return adjustment


def _directives(raw, arity: int, key: str) -> list:
    if not isinstance(raw, list):
        raise GrammarException('metadata.%s must be a list' % key)

    result = []
    for directive in raw:
        if not isinstance(directive, list) or len(directive) != arity or \
                not all(isinstance(_, str) for _ in directive):
            raise GrammarException('every entry of metadata.%s must be a list of %d strings, found %r' % (
                key, arity, directive))
        result.append(tuple(directive))

    return result


class Grammar(object):
    """Parent structure which holds the metadata and the fields of the grammar."""

    def __init__(self, metadata: GrammarMetadata = None, fields: List[GrammarField] = None):
        self.logger = logging.getLogger(__name__)
        self.metadata = metadata or GrammarMetadata()
        self.fields = fields or []

    def __repr__(self):
        return '<%s(%s,%s)>' % (self.__class__.__name__, self.metadata.name, ','.join(repr(_) for _ in self.fields))

    @classmethod
    def from_dict(cls, document: dict) -> "Grammar":
        metadata = document.get('metadata')
        if not isinstance(metadata, dict):
            raise GrammarException('the grammar has no [metadata] table')

        name = metadata.get('name')
        if not isinstance(name, str):
            raise GrammarException('metadata.name must be a string')

        raw_fields = document.get('fields', [])
        if not isinstance(raw_fields, list) or not all(isinstance(_, dict) for _ in raw_fields):
            raise GrammarException('fields must be an array of tables')

        fields = []
        for index, entry in enumerate(raw_fields):
            for key in ('name', 'size', 'data_type', 'display_format', 'description'):
                if key not in entry:
                    raise GrammarException('field number %d is missing key \'%s\'' % (index, key))
                if key != 'size' and not isinstance(entry[key], str):
                    raise GrammarException('key \'%s\' of field number %d must be a string' % (key, index))

            size = entry['size']
            if not isinstance(size, int) or isinstance(size, bool) or size < 0:
                raise GrammarException('field \'%s\' has an invalid size: %r' % (entry['name'], size))

            fields.append(GrammarField(
                entry['name'],
                size,
                entry['data_type'],
                entry['display_format'],
                entry['description'],
            ))

        return cls(
            metadata=GrammarMetadata(
                name=name,
                variable_size_fields=_directives(
                    metadata.get('variable_size_fields', [['', '', '', '']]), 4, 'variable_size_fields'),
                multiply_fields=_directives(
                    metadata.get('multiply_fields', [['', '']]), 2, 'multiply_fields'),
            ),
            fields=fields,
        )

    @classmethod
    def from_toml(cls, contents: str) -> "Grammar":
        '''Parses the contents of a grammar'''
        try:
            document = tomllib.loads(contents)
        except tomllib.TOMLDecodeError as e:
            raise GrammarException('Could not parse grammar file, because %s' % e)

        return cls.from_dict(document)

    @classmethod
    def from_file(cls, path) -> "Grammar":
        try:
            contents = Path(path).read_text()
        except OSError as e:
            raise OpenFileError('Error opening file: %s, because: %s' % (path, e.strerror))

        logger.debug('loaded grammar from \'%s\'' % path)

        return cls.from_toml(contents)

    def get_struct_size(self) -> int:
        '''Total size in bytes of all the fields'''
        size = 0
        for field in self.fields:
            size += field.size

        return size

    def post_parse(self) -> "Grammar":
        '''Further parses the grammar: here the fields are multiplied if requested'''
        self.multiply_fields()

        return self

    def multiply_fields(self):
        '''Copies a field in place the number of times indicated in the directive.'''
        if not self.metadata.has_multiply_fields():
            return

        for entry_0, entry_1 in self.metadata.multiply_fields:
            field_multiply = FieldMultiply()

            for index, field in enumerate(self.fields):
                if field.name == entry_0:
                    multiplier_str = entry_1
                elif field.name == entry_1:
                    multiplier_str = entry_0
                else:
                    continue

                field_multiply.field_name = field.name
                field_multiply.field_index = index

                try:
                    field_multiply.multiplier = int(multiplier_str)
                except ValueError:
                    raise InvalidDirective('Could not convert multiplier \'%s\' for field: %s to an integer' % (
                        multiplier_str, field.name))
                break

            if not field_multiply.field_name or field_multiply.multiplier == 0:
                raise InvalidDirective('Could not find multiply field name or multiplier is 0 in %r' % (
                    (entry_0, entry_1),))

            if field_multiply.multiplier < 0:
                raise InvalidDirective('Multiplier for field: %s must be positive' % field_multiply.field_name)

            self.logger.debug('multiplying field \'%s\' by %d' % (field_multiply.field_name, field_multiply.multiplier))

            original = self.fields[field_multiply.field_index]
            for _ in range(field_multiply.multiplier - 1):
                self.fields.insert(field_multiply.field_index, original.clone())

    def create_var_size_entry_vector(self) -> List[VariableSizeEntry]:
        '''Builds one VariableSizeEntry for each variable size directive.

        A directive is (source, operator, operand, target) where source and operand
        can swap places: the position of the field name decides the order of the
        arithmetic. When more fields match, the last one wins.'''
        if not self.metadata.has_variable_size_fields():
            return []

        entries = []

        for entry_0, entry_1, entry_2, entry_3 in self.metadata.variable_size_fields:
            entry = VariableSizeEntry()

            for index, field in enumerate(self.fields):
                if field.name == entry_0:
                    entry.set_source(field, index)

                    if entry_1 and entry_2:
                        entry.arithmetic_operator = get_var_arithmetic_operator(entry_1.strip())
                        entry.adjustment = get_var_adjustment(entry_2.strip())
                        entry.arithmetic_order = ArithmeticOrder.FORWARDS
                elif field.name == entry_2:
                    entry.set_source(field, index)

                    if entry_0 and entry_1:
                        entry.arithmetic_operator = get_var_arithmetic_operator(entry_1.strip())
                        entry.adjustment = get_var_adjustment(entry_0.strip())
                        entry.arithmetic_order = ArithmeticOrder.BACKWARDS
                elif field.name == entry_3:
                    entry.var_field_name = field.name
                    if entry_1.strip().lower() == 'null':
                        entry.variable_options = VariableOptions.NULL_CHAR

            if not entry.var_field_name:
                raise InvalidDirective(
                    'Variable field name: \'%s\', does not exist for variable size fields' % entry_3)

            if not entry.source_field_name and entry.variable_options != VariableOptions.NULL_CHAR:
                raise InvalidDirective('Source field name: \'%s\' does not exist as a field in grammar' % (
                    entry_2 if _is_integer(entry_0) else entry_0))

            self.logger.debug('variable size entry %r' % entry)

            entries.append(entry)

        return entries


def _is_integer(value: str) -> bool:
    try:
        int(value)
    except ValueError:
        return False

    return True


def resolve_multipliers(grammar: Grammar) -> None:
    grammar.post_parse()


def resolve_variable_entries(grammar: Grammar) -> List[VariableSizeEntry]:
    return grammar.create_var_size_entry_vector()


def load_grammar(path) -> Grammar:
    '''Reads, parses and multiplies the grammar stored at path.'''
    return Grammar.from_file(path).post_parse()

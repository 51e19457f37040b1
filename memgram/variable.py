'''
Resolution of the size of the variable fields.

A VariableSizeEntry is built from a variable size directive of the grammar
and, during the extraction, receives the decoded value of its source field:
from that value and the arithmetic configured in the directive the actual
size of the variable field is calculated.

The arithmetic is checked: a negative size or a division by zero raises
VariableSizeArithmeticError instead of producing a meaningless size.
'''
import logging

from bitstring import Bits

from .enum import (
    ArithmeticOperator,
    ArithmeticOrder,
    DisplayFormat,
    Endianess,
    VariableOptions,
)
from .exceptions import UnsupportedSize, VariableSizeArithmeticError


logger = logging.getLogger(__name__)

# only these widths can be used as source of a variable size
SUPPORTED_SIZES = (2, 4, 8, 16)


class VariableSizeEntry(object):
    """Holds all of the information relating to a variable size directive."""

    def __init__(self):
        self.source_field_name = ''
        self.source_field_index = 0
        self.source_field_display = DisplayFormat.UNKNOWN
        # the integer value of the data stored at the source field
        self.source_field_real_size = 0
        self.var_field_name = ''
        self.variable_options = VariableOptions.NO_OPTIONS
        self.arithmetic_order = ArithmeticOrder.UNSET
        self.arithmetic_operator = ArithmeticOperator.ADDITION
        self.adjustment = 0

    def __repr__(self):
        if self.variable_options == VariableOptions.NULL_CHAR:
            return '<%s(%s=null)>' % (self.__class__.__name__, self.var_field_name)

        return '<%s(%s=%s %s %s %d)>' % (
            self.__class__.__name__,
            self.var_field_name,
            self.source_field_name,
            self.arithmetic_order.name,
            self.arithmetic_operator.value,
            self.adjustment,
        )

    def set_source(self, field, index: int):
        self.source_field_name = field.name
        self.source_field_display = field.display
        self.source_field_index = index

    @property
    def endianess(self) -> Endianess:
        '''The byte order used to decode the source field'''
        return Endianess.LITTLE_ENDIAN if self.source_field_display == DisplayFormat.HEXLE else Endianess.BIG_ENDIAN

    def convert_field_size(self, raw_field_data: bytes, endianess: Endianess) -> int:
        '''Interprets the raw data as a signed integer and saves it as the real size of the source.'''
        if len(raw_field_data) not in SUPPORTED_SIZES:
            raise UnsupportedSize(
                'Could not convert raw field data of \'%s\' because unsupported variable field size: %d' % (
                    self.source_field_name, len(raw_field_data)))

        bits = Bits(raw_field_data)
        self.source_field_real_size = bits.intle if endianess == Endianess.LITTLE_ENDIAN else bits.intbe

        logger.debug('source field \'%s\' has value %d' % (self.source_field_name, self.source_field_real_size))

        return self.source_field_real_size

    def _apply(self, left: int, right: int) -> int:
        operator = self.arithmetic_operator

        if operator == ArithmeticOperator.ADDITION:
            return left + right
        elif operator == ArithmeticOperator.SUBTRACTION:
            return left - right
        elif operator == ArithmeticOperator.MULTIPLICATION:
            return left * right

        if right == 0:
            raise VariableSizeArithmeticError(
                'Division by zero calculating the size of variable field: %s' % self.var_field_name)

        return left // right

    def calculate_variable_size(self) -> int:
        '''Performs the arithmetic operation on the real size of the source yielding the size.'''
        if self.arithmetic_order == ArithmeticOrder.UNSET:
            size = self.source_field_real_size
        elif self.arithmetic_order == ArithmeticOrder.FORWARDS:
            size = self._apply(self.source_field_real_size, self.adjustment)
        else:
            size = self._apply(self.adjustment, self.source_field_real_size)

        if size < 0:
            raise VariableSizeArithmeticError(
                'Size of variable field: %s underflows to %d (%r)' % (self.var_field_name, size, self))

        return size

'''
Rendering of the extracted fields: the description table, the table with
the formatted data and the colorized hex view.

Consecutive fields alternate between green and magenta both in the tables
and in the hex view, so that the bytes can be matched with their row.
'''
from typing import List, Tuple

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .enum import DisplayFormat
from .formats import format_field, raw_hex_string
from .grammar import Grammar, GrammarField

STYLES = ('bold green', 'bold magenta')

ROW_WIDTH = 0x10

# x86 listings longer than this are cut in the table
MAX_CODE_LINES = 5


Record = Tuple[GrammarField, int, bytes]


def field_id(index: int) -> str:
    return '%03X' % index


def style_for(index: int) -> str:
    return STYLES[index % 2]


def _cells(*values: str) -> List[Text]:
    '''Grammar text is shown as it is, without rich markup'''
    return [Text(_) for _ in values]


def build_description_table(grammar: Grammar) -> Table:
    table = Table(title=grammar.metadata.name)
    table.add_column('ID')
    table.add_column('Field')
    table.add_column('Description')

    for index, field in enumerate(grammar.fields):
        table.add_row(*_cells(field_id(index), field.name, field.description), style=style_for(index))

    return table


def _formatted_data(field: GrammarField, raw: bytes, fmt_endian: bool) -> str:
    formatted = format_field(raw, field.display, reverse=fmt_endian)

    if field.display == DisplayFormat.X86:
        lines = formatted.splitlines()
        if len(lines) > MAX_CODE_LINES:
            formatted = '\n'.join(lines[:MAX_CODE_LINES] + ['...'])

    return formatted


def build_standard_table(grammar: Grammar, records: List[Record], fmt_endian: bool = False) -> Table:
    '''The records are the (field, offset, raw) read by the Extractor.'''
    table = Table(title=grammar.metadata.name)
    for column in ('ID', 'Field', 'Offset', 'Size', 'Data Type', 'Raw Data', 'Formatted Data'):
        table.add_column(column)

    for index, (field, offset, raw) in enumerate(records):
        table.add_row(
            *_cells(
                field_id(index),
                field.name,
                '%#X' % offset,
                '%#X' % len(raw),
                field.data_type,
                raw_hex_string(raw),
                _formatted_data(field, raw, fmt_endian),
            ),
            style=style_for(index),
        )

    return table


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte < 0x7f else '.'


def build_hex_view(records: List[Record], hex_endian: bool = False) -> Text:
    '''Hex dump of the extracted data, addressed from the offset of the first field.

    With hex_endian the bytes of every non ascii field are shown reversed.'''
    data = []
    for index, (field, _, raw) in enumerate(records):
        if hex_endian and field.display != DisplayFormat.ASCII:
            raw = raw[::-1]
        data.extend((byte, style_for(index)) for byte in raw)

    address = records[0][1] if records else 0

    text = Text()
    for row in range(0, len(data), ROW_WIDTH):
        chunk = data[row:row + ROW_WIDTH]

        text.append('%08x  ' % (address + row))
        for column, (byte, style) in enumerate(chunk):
            text.append('%02x' % byte, style=style)
            text.append('  ' if column == 7 else ' ')

        text.append('   ' * (ROW_WIDTH - len(chunk)) + (' ' if len(chunk) <= 7 else ''))
        text.append('|')
        for byte, style in chunk:
            text.append(_printable(byte), style=style)
        text.append('|\n')

    return text


def print_description_table(grammar: Grammar, console: Console = None):
    (console or Console()).print(build_description_table(grammar))


def print_standard_table(grammar: Grammar, records: List[Record], fmt_endian: bool = False, console: Console = None):
    (console or Console()).print(build_standard_table(grammar, records, fmt_endian=fmt_endian))


def print_hex_view(records: List[Record], hex_endian: bool = False, console: Console = None):
    (console or Console()).print(build_hex_view(records, hex_endian=hex_endian))

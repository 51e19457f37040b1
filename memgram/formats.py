"""
Conversion of the raw data of a field into the string shown in the
"Formatted Data" column, selected by the display format of the field.
"""
import ipaddress

from .code import format_x86
from .enum import DisplayFormat
from .exceptions import FormatException


# longer raw hex strings are truncated in the table
RAW_HEX_MAX_LENGTH = 25


def hex_string(raw: bytes) -> str:
    return raw.hex().upper()


def raw_hex_string(raw: bytes) -> str:
    value = hex_string(raw)
    if len(value) > RAW_HEX_MAX_LENGTH:
        value = value[:RAW_HEX_MAX_LENGTH] + '...'

    return value


def ipv4_string(raw: bytes) -> str:
    if len(raw) != 4:
        raise FormatException('Invalid IPv4 address %s, it must be 4 bytes long' % hex_string(raw))

    return str(ipaddress.IPv4Address(raw))


def utf16_string(raw: bytes, little_endian: bool) -> str:
    '''The string ends at the first NUL, a trailing odd byte is ignored.'''
    raw = raw[:len(raw) - len(raw) % 2]
    value = raw.decode('utf-16-le' if little_endian else 'utf-16-be', errors='replace')

    return value.split('\x00', 1)[0]


def ascii_string(raw: bytes) -> str:
    return raw.decode('latin1')


def format_field(raw: bytes, display: DisplayFormat, reverse: bool = False) -> str:
    '''Pure function from raw bytes and display format to the formatted string.

    reverse is used only by the formats without an endianess on their own.'''
    if display == DisplayFormat.HEXLE:
        return hex_string(raw[::-1])
    elif display == DisplayFormat.ASCII:
        return ascii_string(raw)
    elif display == DisplayFormat.IPV4BE:
        return ipv4_string(raw)
    elif display == DisplayFormat.IPV4LE:
        return ipv4_string(raw[::-1])
    elif display == DisplayFormat.UTF16BE:
        return utf16_string(raw, little_endian=False)
    elif display == DisplayFormat.UTF16LE:
        return utf16_string(raw, little_endian=True)
    elif display == DisplayFormat.X86:
        return format_x86(raw)

    return hex_string(raw[::-1]) if reverse else raw_hex_string(raw)

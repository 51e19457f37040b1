'''
This module helps to decode machine instructions

Some examples here: <https://www.capstone-engine.org/lang_python.html>.
'''
from capstone import Cs, CS_ARCH_X86, CS_MODE_16, CS_MODE_32, CS_MODE_64


_modes = {
    16: CS_MODE_16,
    32: CS_MODE_32,
    64: CS_MODE_64,
}


def disasm(code: bytes, bitness: int = 32, start: int = 0):
    md = Cs(CS_ARCH_X86, _modes[bitness])

    for _ in md.disasm(code, start):
        yield _


def format_x86(code: bytes, bitness: int = 32, start: int = 0) -> str:
    '''One instruction per line, in the usual "mnemonic operands" syntax.'''
    lines = []
    for instruction in disasm(code, bitness=bitness, start=start):
        lines.append(('%s %s' % (instruction.mnemonic, instruction.op_str)).strip())

    return '\n'.join(lines)

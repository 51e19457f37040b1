"""Click CLI for memgram."""
import logging
import os
import sys
from pathlib import Path

import click
from rich.console import Console

from .config import RunConfig, RunOptions
from .core import Extractor
from .cstruct import CStruct
from .display import print_description_table, print_hex_view, print_standard_table
from .exceptions import MemgramException
from .grammar import Grammar, load_grammar
from .streams import Stream


logger = logging.getLogger(__name__)

EXAMPLE = 'memgram -g ./grammars/coff_header.toml -b ./some.exe -s 132'


def display(grammar: Grammar, config: RunConfig, console: Console):
    if config.description:
        print_description_table(grammar, console=console)

    with Stream(config.binary_path) as stream:
        extractor = Extractor(grammar, stream, config.offset)
        extractor.extract()

    if not extractor.is_complete:
        logger.warning('only %d of %d fields were extracted' % (len(extractor.records), len(grammar.fields)))

    print_standard_table(grammar, extractor.records, fmt_endian=config.fmt_endian, console=console)
    print_hex_view(extractor.records, hex_endian=config.hex_endian, console=console)


def run(config: RunConfig, console: Console = None):
    console = console or Console()
    mode = config.run_mode()

    logger.debug('running %s with %r' % (mode.name, config))

    if mode == RunOptions.DISPLAY_NORMAL:
        display(load_grammar(config.grammar_path), config, console)
    elif mode == RunOptions.CSTRUCT_CONVERT_DISPLAY:
        display(CStruct.from_file(config.cstruct_path).to_grammar().post_parse(), config, console)
    else:
        cstruct = CStruct.from_file(config.cstruct_path).write_grammar_file(config.output_path)
        console.print('[+] Successfully converted C struct %s to grammar file %s' % (
            cstruct.name, config.output_path), markup=False)


_existing = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.command(context_settings={'help_option_names': ['-h', '--help']}, epilog='Example: %s' % EXAMPLE)
@click.option('-g', '--grammar', 'grammar_path', type=_existing, help='grammar file')
@click.option('-b', '--binary', 'binary_path', type=_existing, help='binary file')
@click.option('-c', '--cstruct', 'cstruct_path', type=_existing, help='C struct file to convert')
@click.option('-o', '--output', 'output_path', type=click.Path(dir_okay=False, path_type=Path),
              help='output grammar file of the C struct conversion')
@click.option('-s', '--offset', 'struct_offset', type=click.IntRange(min=0), default=None,
              help='offset of the structure into the binary file')
@click.option('-e', '--fmt-endian', is_flag=True, help='reverse the endianess of the hex formatted data')
@click.option('-E', '--hex-endian', is_flag=True, help='reverse the endianess of the fields in the hex view')
@click.option('-d', '--description', is_flag=True, help='print the description table')
def main(grammar_path, binary_path, cstruct_path, output_path, struct_offset, fmt_endian, hex_endian, description):
    """Display the fields of a binary structure described by a grammar."""
    logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.WARNING)

    config = RunConfig(
        grammar_path=grammar_path,
        binary_path=binary_path,
        cstruct_path=cstruct_path,
        output_path=output_path,
        struct_offset=struct_offset,
        description=description,
        fmt_endian=fmt_endian,
        hex_endian=hex_endian,
    )

    try:
        run(config)
    except MemgramException as e:
        click.echo('[-] Error: %s' % e.cause, err=True)
        sys.exit(1)

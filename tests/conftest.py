from pathlib import Path

import pytest

from memgram.grammar import Grammar, GrammarField, GrammarMetadata


@pytest.fixture
def test_root_dir():
    return Path(__file__).parent


@pytest.fixture
def binary_file(tmp_path):
    """Write the given bytes into a temporary file and return its path."""
    def _write(data: bytes, name='data.bin'):
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def make_grammar():
    """Build a Grammar from (name, size, display_format) triples."""
    def _make(fields, variable_size_fields=None, multiply_fields=None, name='test'):
        return Grammar(
            metadata=GrammarMetadata(
                name=name,
                variable_size_fields=variable_size_fields,
                multiply_fields=multiply_fields,
            ),
            fields=[GrammarField(_name, size, 'type', display, 'description of %s' % _name)
                    for _name, size, display in fields],
        )

    return _make

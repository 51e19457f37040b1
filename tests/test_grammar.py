import pytest

from memgram.enum import ArithmeticOperator, ArithmeticOrder, DisplayFormat, VariableOptions
from memgram.exceptions import GrammarException, InvalidDirective, OpenFileError
from memgram.grammar import Grammar, load_grammar, resolve_multipliers, resolve_variable_entries


GRAMMAR = '''
[metadata]
    name = 'header'
    variable_size_fields = [['length', '+', '4', 'payload']]
    multiply_fields = [['','']]

[[fields]]
    name = 'length'
    size = 0x04
    data_type = 'int'
    display_format = 'hexle'
    description = 'size of the payload'

[[fields]]
    name = 'payload'
    size = 0
    data_type = 'char[]'
    display_format = 'ascii'
    description = 'the payload'
'''


def test_from_toml():
    grammar = Grammar.from_toml(GRAMMAR)

    assert grammar.metadata.name == 'header'
    assert grammar.metadata.variable_size_fields == [('length', '+', '4', 'payload')]
    assert not grammar.metadata.has_multiply_fields()
    assert grammar.metadata.has_variable_size_fields()

    assert [_.name for _ in grammar.fields] == ['length', 'payload']
    assert grammar.fields[0].size == 4
    assert grammar.fields[0].display == DisplayFormat.HEXLE
    assert grammar.fields[1].display == DisplayFormat.ASCII
    assert grammar.fields[1].description == 'the payload'


def test_from_file(tmp_path):
    path = tmp_path / 'header.toml'
    path.write_text(GRAMMAR)

    grammar = load_grammar(path)

    assert grammar.get_struct_size() == 4


def test_from_file_missing(tmp_path):
    with pytest.raises(OpenFileError):
        Grammar.from_file(tmp_path / 'missing.toml')


def test_display_format_tags():
    assert DisplayFormat.from_tag('HEXLE') == DisplayFormat.HEXLE
    assert DisplayFormat.from_tag('x86_32') == DisplayFormat.X86
    assert DisplayFormat.from_tag('utf16be') == DisplayFormat.UTF16BE
    assert DisplayFormat.from_tag('hex') == DisplayFormat.UNKNOWN
    assert DisplayFormat.from_tag('') == DisplayFormat.UNKNOWN


def test_missing_directives_are_placeholders():
    grammar = Grammar.from_toml('''
[metadata]
    name = 'bare'

[[fields]]
    name = 'a'
    size = 1
    data_type = 'char'
    display_format = 'hex'
    description = ''
''')

    assert grammar.metadata.variable_size_fields == [('', '', '', '')]
    assert grammar.metadata.multiply_fields == [('', '')]
    assert grammar.create_var_size_entry_vector() == []


@pytest.mark.parametrize('contents', [
    'this is not toml',
    '[[fields]]\nname = "a"\n',
    '[metadata]\nname = "x"\n[[fields]]\nname = "a"\nsize = 1\n',
    '[metadata]\nname = "x"\nmultiply_fields = [["a"]]\n',
    '[metadata]\nname = "x"\nvariable_size_fields = [["a", "+", 1, "b"]]\n',
    '[metadata]\nname = "x"\n[[fields]]\nname = "a"\nsize = -1\ndata_type = ""\ndisplay_format = ""\ndescription = ""\n',
])
def test_malformed_grammar(contents):
    with pytest.raises(GrammarException):
        Grammar.from_toml(contents)


def test_get_struct_size(make_grammar):
    grammar = make_grammar([('a', 2, 'hex'), ('b', 4, 'hex'), ('c', 0x10, 'ascii')])

    assert grammar.get_struct_size() == 0x16


def test_multiply_fields(make_grammar):
    grammar = make_grammar(
        [('a', 2, 'hex'), ('b', 4, 'hexle'), ('c', 1, 'hex')],
        multiply_fields=[('b', '3')],
    )

    resolve_multipliers(grammar)

    assert [_.name for _ in grammar.fields] == ['a', 'b', 'b', 'b', 'c']
    assert grammar.fields[1] == grammar.fields[2] == grammar.fields[3]
    assert grammar.fields[1] is not grammar.fields[2]
    assert grammar.get_struct_size() == 2 + 3 * 4 + 1


def test_multiply_fields_count_first(make_grammar):
    grammar = make_grammar([('a', 2, 'hex'), ('b', 4, 'hex')], multiply_fields=[('2', 'a'), ('b', '2')])

    grammar.post_parse()

    assert [_.name for _ in grammar.fields] == ['a', 'a', 'b', 'b']


def test_multiply_by_one(make_grammar):
    grammar = make_grammar([('a', 2, 'hex'), ('b', 4, 'hex')], multiply_fields=[('a', '1')])

    grammar.post_parse()

    assert len(grammar.fields) == 2


def test_multiply_placeholder_is_skipped(make_grammar):
    grammar = make_grammar([('a', 2, 'hex')], multiply_fields=[('', '')])

    grammar.post_parse()

    assert len(grammar.fields) == 1


@pytest.mark.parametrize('directive', [
    ('a', '0'),
    ('a', 'three'),
    ('missing', '3'),
    ('a', ''),
    ('', '3'),
    ('a', '-2'),
])
def test_multiply_invalid(make_grammar, directive):
    """A directive with an empty part is not the placeholder: it must fail."""
    grammar = make_grammar([('a', 2, 'hex')], multiply_fields=[directive])

    with pytest.raises(InvalidDirective):
        grammar.post_parse()


def test_var_size_entry_forwards(make_grammar):
    grammar = make_grammar(
        [('length', 4, 'hexle'), ('payload', 0, 'hex')],
        variable_size_fields=[('length', ' * ', ' 2 ', 'payload')],
    )

    entries = resolve_variable_entries(grammar)

    assert len(entries) == 1
    entry = entries[0]
    assert entry.source_field_name == 'length'
    assert entry.source_field_index == 0
    assert entry.source_field_display == DisplayFormat.HEXLE
    assert entry.var_field_name == 'payload'
    assert entry.arithmetic_order == ArithmeticOrder.FORWARDS
    assert entry.arithmetic_operator == ArithmeticOperator.MULTIPLICATION
    assert entry.adjustment == 2
    assert entry.variable_options == VariableOptions.NO_OPTIONS


def test_var_size_entry_backwards(make_grammar):
    grammar = make_grammar(
        [('magic', 2, 'hex'), ('length', 4, 'hex'), ('payload', 0, 'hex')],
        variable_size_fields=[('16', '-', 'length', 'payload')],
    )

    entry, = grammar.create_var_size_entry_vector()

    assert entry.source_field_name == 'length'
    assert entry.source_field_index == 1
    assert entry.arithmetic_order == ArithmeticOrder.BACKWARDS
    assert entry.arithmetic_operator == ArithmeticOperator.SUBTRACTION
    assert entry.adjustment == 16


def test_var_size_entry_without_arithmetic(make_grammar):
    grammar = make_grammar(
        [('length', 2, 'hex'), ('payload', 0, 'hex')],
        variable_size_fields=[('length', '', '', 'payload')],
    )

    entry, = grammar.create_var_size_entry_vector()

    assert entry.arithmetic_order == ArithmeticOrder.UNSET


def test_var_size_entry_null_char(make_grammar):
    grammar = make_grammar(
        [('name', 0, 'ascii'), ('other', 0, 'ascii')],
        variable_size_fields=[('', ' NULL ', '', 'name'), ('', 'null', '', 'other')],
    )

    entries = grammar.create_var_size_entry_vector()

    assert [_.var_field_name for _ in entries] == ['name', 'other']
    assert all(_.variable_options == VariableOptions.NULL_CHAR for _ in entries)
    assert entries[0].source_field_name == ''


def test_var_size_entry_last_match_wins(make_grammar):
    """With the same name on more fields the last one is used as source."""
    grammar = make_grammar(
        [('length', 2, 'hex'), ('length', 4, 'hexle'), ('payload', 0, 'hex')],
        variable_size_fields=[('length', '+', '1', 'payload')],
    )

    entry, = grammar.create_var_size_entry_vector()

    assert entry.source_field_index == 1
    assert entry.source_field_display == DisplayFormat.HEXLE


@pytest.mark.parametrize('directive', [
    ('length', '+', '4', 'missing'),
    ('missing', '+', '4', 'payload'),
    ('4', '+', 'missing', 'payload'),
    ('length', '%', '4', 'payload'),
    ('length', '++', '4', 'payload'),
    ('length', '+', 'four', 'payload'),
    ('length', '+', '-4', 'payload'),
    ('', '', '', 'payload'),
])
def test_var_size_entry_invalid(make_grammar, directive):
    grammar = make_grammar(
        [('length', 4, 'hexle'), ('payload', 0, 'hex')],
        variable_size_fields=[directive],
    )

    with pytest.raises(InvalidDirective):
        grammar.create_var_size_entry_vector()


def test_multiply_fields_placeholder_direct(make_grammar):
    grammar = make_grammar([('a', 2, 'hex')], multiply_fields=[('', '')])

    grammar.multiply_fields()

    assert [_.name for _ in grammar.fields] == ['a']

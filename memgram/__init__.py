"""
# memgram, binary structures from a grammar.

A grammar is a declarative description of a binary structure: an ordered
list of fields, each one with a name, a size, a data type, a display format
and a description. Given a grammar, a binary file and the offset where the
structure starts, memgram extracts the raw data of each field and shows it
formatted in a table and in a colorized hex view.

The pipeline is

 1. parse: the grammar file is loaded and the multiply directives are applied
 2. resolve: the variable size directives become VariableSizeEntry instances
 3. extract: the fields are read in order from the binary file, the size of
    the variable ones is resolved just before reading them
 4. render: the raw data is formatted and printed

A C struct can be converted into a grammar with the basic types sizes.

An extraction run is in one of the following phases

 1. INIT
 2. POSITIONED
 3. EXTRACTING
 4. DONE
 5. FAILED

"""

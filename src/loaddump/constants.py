"""Wire format constants."""

SEQUENCE_LENGTH_SIZE = 8  # u64 element count before growable sequences
TAG_SIZE = 4  # u32 variant ordinal before tagged union payloads
TEXT_TERMINATOR = 0x00
MAX_TUPLE_ARITY = 12

DEFAULT_INT_SIZE = 4  # bare `int` annotations are i32
DEFAULT_FLOAT_SIZE = 8  # bare `float` annotations are f64

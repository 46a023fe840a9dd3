from textlines.core.buffer import INITIAL_BUFFER_SIZE
from textlines.core.reader import open_textfile

USABLE = INITIAL_BUFFER_SIZE - 2


def test_line_filling_first_chunk_needs_no_growth(write_file):
    line = b"a" * (USABLE - 1)
    with open_textfile(write_file("fit.txt", line + b"\ntail\n")) as tf:
        assert tf.next_line() == line
        assert tf.next_line() == b"tail"
        assert tf.next_line() is None
        assert tf.growth_count == 0
        assert tf.capacity == INITIAL_BUFFER_SIZE


def test_one_byte_more_grows_exactly_once(write_file):
    line = b"b" * USABLE
    with open_textfile(write_file("over.txt", line + b"\ntail\n")) as tf:
        assert tf.next_line() == line
        assert tf.growth_count == 1
        assert tf.capacity == 2 * INITIAL_BUFFER_SIZE
        assert tf.next_line() == b"tail"


def test_very_long_line_survives_repeated_growth(write_file):
    long_line = b"0123456789abcdef" * 6250
    data = b"head\n" + long_line + b"\r\nshort\n"
    with open_textfile(write_file("long.txt", data), initial_capacity=16) as tf:
        assert tf.next_line() == b"head"
        assert tf.next_line() == long_line
        assert tf.next_line() == b"short"
        assert tf.next_line() is None
        assert tf.growth_count > 1
        assert tf.capacity >= len(long_line)


def test_long_final_line_without_terminator(write_file):
    long_line = b"xyz" * 2000
    with open_textfile(write_file("tail.txt", long_line), initial_capacity=32) as tf:
        assert list(tf) == [long_line]


def test_pair_split_across_chunks_is_one_terminator(write_file):
    # capacity 8 loads 6 bytes at a time; the CR is the sixth byte
    with open_textfile(write_file("split.txt", b"abcde\r\nfg\n"), initial_capacity=8) as tf:
        assert list(tf) == [b"abcde", b"fg"]
        assert tf.growth_count == 0


def test_acorn_pair_split_across_chunks(write_file):
    with open_textfile(write_file("split.txt", b"abcde\n\rfg\n\r"), initial_capacity=8) as tf:
        assert list(tf) == [b"abcde", b"fg"]


def test_lone_terminator_at_chunk_edge(write_file):
    with open_textfile(write_file("edge.txt", b"abcde\rfg"), initial_capacity=8) as tf:
        assert list(tf) == [b"abcde", b"fg"]


def test_terminator_at_end_of_file_on_chunk_edge(write_file):
    with open_textfile(write_file("edge.txt", b"abcde\n"), initial_capacity=8) as tf:
        assert tf.next_line() == b"abcde"
        assert tf.next_line() is None

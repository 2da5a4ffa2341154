import re

import pytest

from bsetools.helpers import (
    EcpTable,
    chunk_list,
    is_floating,
    is_integer,
    parse_ecp_table,
    parse_fixed_matrix,
    parse_line_regex,
    parse_line_regex_dict,
    parse_matrix,
    parse_primitive_matrix,
    partition_lines,
    potential_am_list,
    prune_lines,
    read_all_floats,
    read_n_floats,
    read_n_integers,
    remove_block,
    remove_expected_line,
    replace_d,
)


def test_playground_line_regex():
    rex = re.compile(r"^(?P<sym>[A-Za-z]+)\s+(?P<name>\d+)((?:\s+)+)$")
    line = "H 1    "
    assert parse_line_regex(rex, line, "Test regex parsing") == ["H", "1", "    "]
    assert parse_line_regex_dict(rex, line, "Test regex parsing") == {"sym": "H", "name": "1"}


def test_parse_line_regex_unmatched_optional_group():
    assert parse_line_regex(r"^(\d+\s+)?(\w+)$", "abc") == ["", "abc"]


def test_parse_line_regex_no_match():
    with pytest.raises(ValueError, match="does not match"):
        parse_line_regex(r"^\d+$", "abc", "digits")


def test_is_floating():
    assert is_floating("1.5")
    assert is_floating("1.5D-03")
    assert is_floating("-2")
    assert not is_floating("abc")
    assert not is_floating("")


def test_is_integer():
    assert is_integer("42")
    assert is_integer("-3")
    assert not is_integer("1.0")
    assert not is_integer("99999999999")


def test_replace_d():
    assert replace_d("1.0D+02") == "1.0E+02"
    assert replace_d("1.0d-2") == "1.0e-2"


def test_potential_am_list():
    assert potential_am_list(3) == [3, 0, 1, 2]
    assert potential_am_list(0) == [0]


def test_chunk_list():
    assert chunk_list([1, 2, 3, 4, 5, 6], 2, 3) == [[1, 2, 3], [4, 5, 6]]
    with pytest.raises(ValueError):
        chunk_list([1, 2, 3], 2, 2)


def test_remove_expected_line():
    assert remove_expected_line(["a", "b", "c"], "b", 1) == ["a", "c"]
    assert remove_expected_line(["a", "b", "c"], "c", -1) == ["a", "b"]
    assert remove_expected_line(["a", "b"], "a") == ["b"]


@pytest.mark.parametrize(
    "lines, expected, position",
    [([], "a", 0), (["a"], "a", 3), (["a"], "a", -2), (["a", "b"], "x", 0)],
)
def test_remove_expected_line_errors(lines, expected, position):
    with pytest.raises(ValueError):
        remove_expected_line(lines, expected, position)


def _is_alpha_start(line):
    return line[:1].isalpha()


def test_partition_lines_basic():
    lines = ["A", "1", "2", "B", "3"]
    assert partition_lines(lines, _is_alpha_start) == [["A", "1", "2"], ["B", "3"]]
    assert partition_lines(lines, _is_alpha_start, include_match=False) == [["1", "2"], ["3"]]


def test_partition_lines_before():
    lines = ["c1", "A", "1", "c2", "B", "2"]
    blocks = partition_lines(lines, lambda x: x in ("A", "B"), before=1)
    assert blocks == [["c1", "A", "1"], ["c2", "B", "2"]]


def test_partition_lines_before_errors():
    with pytest.raises(ValueError):
        partition_lines(["A", "1"], lambda x: x == "A", before=1)
    with pytest.raises(ValueError):
        partition_lines(["c1", "c2", "A", "1"], lambda x: x == "A", before=1)


def test_partition_lines_min_after():
    lines = ["A", "B", "x", "A", "y"]
    blocks = partition_lines(lines, lambda x: x in ("A", "B"), min_after=1)
    assert blocks == [["A", "B", "x"], ["A", "y"]]


def test_partition_lines_limits():
    lines = ["A", "1", "B"]
    with pytest.raises(ValueError, match="minimum number of lines"):
        partition_lines(lines, _is_alpha_start, min_size=2)
    with pytest.raises(ValueError, match="at least"):
        partition_lines(lines, _is_alpha_start, min_blocks=3)
    with pytest.raises(ValueError, match="at most"):
        partition_lines(lines, _is_alpha_start, max_blocks=1)


def test_read_n_floats():
    lines = ["1.0 2.0", "3.0D0 4.0", "rest"]
    found, remaining = read_n_floats(lines, 4)
    assert found == ["1.0", "2.0", "3.0E0", "4.0"]
    assert remaining == ["rest"]


@pytest.mark.parametrize(
    "lines, n",
    [(["1.0 2.0", "3.0 4.0"], 3), (["1.0"], 2), (["1.0", "", "2.0"], 2), (["1.0 x"], 2)],
)
def test_read_n_floats_errors(lines, n):
    with pytest.raises(ValueError):
        read_n_floats(lines, n)


def test_read_all_floats():
    assert read_all_floats(["1.0 2.0", "3.0d1"]) == ["1.0", "2.0", "3.0e1"]
    with pytest.raises(ValueError):
        read_all_floats(["1.0 abc"])


def test_read_n_integers():
    found, remaining = read_n_integers(["1 2", "3", "tail"], 3)
    assert found == ["1", "2", "3"]
    assert remaining == ["tail"]
    with pytest.raises(ValueError):
        read_n_integers(["1 2.5"], 2)
    with pytest.raises(ValueError):
        read_n_integers(["1 2 3"], 2)


def test_parse_fixed_matrix():
    matrix, remaining = parse_fixed_matrix(["1.0 2.0", "3.0", "4.0", "x"], 2, 2)
    assert matrix == [["1.0", "2.0"], ["3.0", "4.0"]]
    assert remaining == ["x"]


def test_parse_matrix():
    assert parse_matrix(["1.0 2.0", "", "3.0 4.0"], 2, 2) == [["1.0", "2.0"], ["3.0", "4.0"]]


@pytest.mark.parametrize(
    "lines, rows, cols",
    [(["1.0 2.0", "3.0"], None, None), ([""], None, None), (["1.0"], 2, None), (["1.0"], None, 2), (["a"], None, None)],
)
def test_parse_matrix_errors(lines, rows, cols):
    with pytest.raises(ValueError):
        parse_matrix(lines, rows, cols)


def test_parse_primitive_matrix():
    exps, coefs = parse_primitive_matrix(["10.0 0.1 0.2", "1.0 0.3 0.4"], 2, 2)
    assert exps == ["10.0", "1.0"]
    assert coefs == [["0.1", "0.3"], ["0.2", "0.4"]]


@pytest.mark.parametrize(
    "lines, nprim, ngen, message",
    [
        (["10.0 0.1", "1.0 0.3"], 3, None, "primitives"),
        (["10.0 0.1", "1.0 0.3"], None, 2, "general contractions"),
        (["10.0 0.1", "1.0"], None, None, "Missing contraction"),
        (["10.0 0.1", "1.0 0.3 0.4"], None, None, "Inconsistent"),
        ([], None, None, "No exponents"),
        (["abc 0.1"], None, None, "exponents"),
    ],
)
def test_parse_primitive_matrix_errors(lines, nprim, ngen, message):
    with pytest.raises(ValueError, match=message):
        parse_primitive_matrix(lines, nprim, ngen)


def test_parse_ecp_table():
    table = parse_ecp_table(["2 1.5 0.3", "1 2.5D0 -0.1"], ["r_exp", "g_exp", "coeff"])
    assert table == EcpTable(r_exp=[2, 1], g_exp=["1.5", "2.5E0"], coeff=[["0.3", "-0.1"]])


def test_parse_ecp_table_column_order():
    table = parse_ecp_table(["0.3 2 1.5"], ["coeff", "r_exp", "g_exp"])
    assert table.r_exp == [2]
    assert table.g_exp == ["1.5"]
    assert table.coeff == [["0.3"]]


def test_parse_ecp_table_errors():
    with pytest.raises(ValueError):
        parse_ecp_table(["2 1.5"], ["r_exp", "g_exp", "coeff"])
    with pytest.raises(ValueError):
        parse_ecp_table(["2.5 1.5 0.3"], ["r_exp", "g_exp", "coeff"])
    with pytest.raises(ValueError):
        parse_ecp_table(["2 1.5 0.3"], ["r_exp", "g_exp"])


def test_prune_lines():
    lines = ["", "  ! comment", " a ", "", "b", "# other", ""]
    assert prune_lines(lines, "!#") == ["a", "b"]
    assert prune_lines(lines, "!#", prune_blank=False) == ["a", "", "b"]
    assert prune_lines(lines, "", prune_blank=False, strip_end_blanks=False) == [
        "", "! comment", "a", "", "b", "# other", "",
    ]
    assert prune_lines(["", ""], prune_blank=False) == []


def test_remove_block():
    lines = ["a", "BEGIN", "x", "y", "end", "b"]
    block, rest = remove_block(lines, r"^begin$", r"^end$")
    assert block == ["x", "y"]
    assert rest == ["a", "b"]


def test_remove_block_absent_and_unterminated():
    assert remove_block(["a", "b"], r"^begin$", r"^end$") == ([], ["a", "b"])
    with pytest.raises(ValueError, match="Cannot find end of block"):
        remove_block(["begin", "x"], r"^begin$", r"^end$")
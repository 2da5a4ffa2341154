"""Helper functions for parsing basis set files."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from itertools import islice
from typing import Callable, Sequence

FLOATING_RE = re.compile(r"[-+]?\d*\.\d*(?:[dDeE][-+]?\d+)?")
FLOATING_ONLY_RE = re.compile(r"^[-+]?\d*\.\d*(?:[dDeE][-+]?\d+)?$")
INTEGER_RE = re.compile(r"[-+]?\d+")
INTEGER_ONLY_RE = re.compile(r"^[-+]?\d+$")
BASIS_NAME_RE = re.compile(r"\d*[a-zA-Z][a-zA-Z0-9\-\+\*\(\)\[\]]*")
SPACES_RE = re.compile(r"\s+")

_INT_RE = re.compile(r"[-+]?[0-9]+")
_INT32_MIN, _INT32_MAX = -(2**31), 2**31 - 1

Pattern = "re.Pattern[str] | str"


def _compile(rex, flags: int = 0) -> re.Pattern:
    return rex if isinstance(rex, re.Pattern) else re.compile(rex, flags)


def _split(line: str, split_re) -> list[str]:
    splitter = _compile(split_re) if split_re is not None else SPACES_RE
    return [part for part in splitter.split(line.strip()) if part]


def is_floating(s: str) -> bool:
    """Test whether a string is a floating point number (d/D exponents allowed)."""
    if not s or s != s.strip() or "_" in s:
        return False
    try:
        float(replace_d(s))
    except ValueError:
        return False
    return True


def is_integer(s: str) -> bool:
    """Test whether a string is a 32-bit integer."""
    return _INT_RE.fullmatch(s) is not None and _INT32_MIN <= int(s) <= _INT32_MAX


def replace_d(s: str) -> str:
    """Replace Fortran-style 'd'/'D' exponent markers with 'e'/'E'."""
    return s.replace("d", "e").replace("D", "E")


def potential_am_list(max_am: int) -> list[int]:
    """Return the canonical ECP AM order: [max_am, 0, 1, ..., max_am-1]."""
    return [max_am, *range(max_am)]


def chunk_list(lst: Sequence, rows: int, cols: int) -> list[list]:
    """Turn a flat list into a rows x cols matrix."""
    if len(lst) != rows * cols:
        raise ValueError(f"Cannot partition {len(lst)} elements into a {rows}x{cols} matrix")
    if cols == 0:
        return []
    return [list(lst[start:start + cols]) for start in range(0, len(lst), cols)]


def remove_expected_line(lines: Sequence[str], expected: str, position: int = 0) -> list[str]:
    """Check that the line at position equals expected and return the lines without it."""
    if not lines:
        raise ValueError("No lines to test for expected line")
    if position >= len(lines) or -position > len(lines):
        raise ValueError(f"Not enough lines. Can't test line {position} when there are {len(lines)} lines")
    pos = position if position >= 0 else len(lines) + position
    if lines[pos] != expected:
        raise ValueError(f"Expected line '{expected}' at position {pos}, but found '{lines[pos]}'")
    return [*lines[:pos], *lines[pos + 1:]]


def _search(rex, line: str, description: str) -> re.Match:
    pattern = _compile(rex)
    match = pattern.search(line)
    if match is None:
        if description:
            raise ValueError(
                f"Regex '{description}' does not match line: '{line}'. Regex is '{pattern.pattern}'"
            )
        raise ValueError(f"Regex '{pattern.pattern}' does not match line: '{line}'")
    return match


def parse_line_regex(rex, line: str, description: str = "") -> list[str]:
    """Match a regex against a line and return all capture groups (unmatched as '')."""
    match = _search(rex, line, description)
    return [group if group is not None else "" for group in match.groups()]


def parse_line_regex_dict(rex, line: str, description: str = "") -> dict[str, str]:
    """Match a regex against a line and return its matched named groups."""
    match = _search(rex, line, description)
    return {name: value for name, value in match.groupdict().items() if value is not None}


def partition_lines(
    lines: Sequence[str],
    condition: Callable[[str], bool],
    before: int = 0,
    min_after: int | None = None,
    min_blocks: int | None = None,
    max_blocks: int | None = None,
    min_size: int = 1,
    include_match: bool = True,
) -> list[list[str]]:
    """Split lines into blocks, a new block starting at each line meeting the condition."""
    blocks: list[list[str]] = []
    current: list[str] = []
    remaining = iter(lines)
    for line in remaining:
        if condition(line):
            if current:
                blocks.append(current)
                current = []
            if include_match:
                current.append(line)
            if min_after is not None:
                current.extend(islice(remaining, min_after))
        else:
            current.append(line)
    if current:
        blocks.append(current)

    if before > 0:
        if len(blocks) <= 1:
            raise ValueError(f"Cannot partition lines with before = {before}: have {len(blocks)} blocks")
        if len(blocks[0]) != before:
            raise ValueError(
                f"Cannot partition lines with before = {before}: first block has {len(blocks[0])} lines"
            )
        for previous, following in zip(blocks, blocks[1:]):
            if len(previous) < before:
                raise ValueError(f"Cannot move {before} lines from a block of {len(previous)} lines")
            moved = previous[len(previous) - before:]
            del previous[len(previous) - before:]
            following[:0] = moved
        blocks.pop(0)

    if min_size > 0:
        for idx, block in enumerate(blocks):
            if len(block) < min_size:
                raise ValueError(f"Block {idx} does not have minimum number of lines ({min_size})")

    if min_blocks is not None and len(blocks) < min_blocks:
        raise ValueError(f"Found {len(blocks)} blocks, but need at least {min_blocks}")
    if max_blocks is not None and len(blocks) > max_blocks:
        raise ValueError(f"Found {len(blocks)} blocks, but need at most {max_blocks}")

    return blocks


def read_n_floats(lines: Sequence[str], n_numbers: int, split_re=None) -> tuple[list[str], list[str]]:
    """Read n floating point numbers that may span several lines; return them and the rest."""
    found: list[str] = []
    consumed = 0
    while len(found) < n_numbers:
        if consumed >= len(lines):
            raise ValueError(f"Wanted {n_numbers} numbers but ran out of lines after {len(found)}")
        line = lines[consumed]
        if not line.strip():
            raise ValueError(f"Wanted {n_numbers} numbers but found empty line after {len(found)}")
        found.extend(_split(replace_d(line), split_re))
        consumed += 1

    if len(found) > n_numbers:
        raise ValueError(f"Wanted {n_numbers} numbers, but found extra numbers: {found}")
    if not all(is_floating(x) for x in found):
        raise ValueError(f"Non-floating-point value found in numbers: {found}")
    return found, list(lines[consumed:])


def read_all_floats(lines: Sequence[str], split_re=None) -> list[str]:
    """Read every floating point number on every line."""
    found = [part for line in lines for part in _split(replace_d(line), split_re)]
    if not all(is_floating(x) for x in found):
        raise ValueError(f"Non-floating-point value found in numbers: {found}")
    return found


def read_n_integers(lines: Sequence[str], n_ints: int, split_re=None) -> tuple[list[str], list[str]]:
    """Read n integers that may span several lines; return them and the rest."""
    found: list[str] = []
    consumed = 0
    while len(found) < n_ints:
        if consumed >= len(lines):
            raise ValueError(f"Wanted {n_ints} integers but ran out of lines after {len(found)}")
        found.extend(_split(lines[consumed], split_re))
        consumed += 1

    if len(found) > n_ints:
        raise ValueError(f"Wanted {n_ints} integers, but found extra numbers: {found}")
    if not all(is_integer(x) for x in found):
        raise ValueError(f"Non-integer value found in numbers: {found}")
    return found, list(lines[consumed:])


def parse_fixed_matrix(
    lines: Sequence[str], rows: int, cols: int, split_re=None
) -> tuple[list[list[str]], list[str]]:
    """Read a rows x cols matrix whose rows may span lines; return it and the rest."""
    matrix = []
    remaining = list(lines)
    for _ in range(rows):
        row, remaining = read_n_floats(remaining, cols, split_re)
        matrix.append(row)
    return matrix, remaining


def parse_matrix(
    lines: Sequence[str], rows: int | None = None, cols: int | None = None, split_re=None
) -> list[list[str]]:
    """Parse a matrix of numbers, one row per non-blank line."""
    matrix = []
    for line in lines:
        row = _split(replace_d(line), split_re)
        if not all(is_floating(x) for x in row):
            raise ValueError(f"Non-floating-point value found in matrix: {row}")
        if row:
            matrix.append(row)

    if not matrix:
        raise ValueError("Empty matrix")
    ncols = len(matrix[0])
    for row in matrix:
        if len(row) != ncols:
            raise ValueError(f"Inconsistent number of columns: {len(row)} vs {ncols}")
    if rows is not None and len(matrix) != rows:
        raise ValueError(f"Inconsistent number of rows: {rows} vs {len(matrix)}")
    if cols is not None and ncols != cols:
        raise ValueError(f"Inconsistent number of columns: {cols} vs {ncols}")
    return matrix


def parse_primitive_matrix(
    lines: Sequence[str], nprim: int | None = None, ngen: int | None = None, split_re=None
) -> tuple[list[str], list[list[str]]]:
    """Parse a table whose first column holds exponents and the rest coefficients.

    Returns the exponents and the coefficients, one list per general contraction.
    """
    exponents: list[str] = []
    rows: list[list[str]] = []
    for line in lines:
        parts = _split(replace_d(line), split_re)
        if not parts:
            continue
        exponent, coefs = parts[0], parts[1:]
        if not is_floating(exponent):
            raise ValueError(f"Non-floating-point value found in exponents: {exponent}")
        if not all(is_floating(x) for x in coefs):
            raise ValueError(f"Non-floating-point value found in coefficients: {coefs}")
        exponents.append(exponent)
        rows.append(coefs)

    first_len = len(rows[0]) if rows else 0
    for number, coefs in enumerate(rows, start=1):
        if not coefs:
            raise ValueError(f"Missing contraction coefficients in row {number}")
        if len(coefs) != first_len:
            raise ValueError(f"Inconsistent number of coefficients: {len(coefs)} vs {first_len}")

    coefficients = [list(column) for column in zip(*rows)]
    if not exponents:
        raise ValueError("No exponents found")
    if not coefficients:
        raise ValueError("No coefficients found")

    if nprim is not None:
        if len(exponents) != nprim:
            raise ValueError(f"Inconsistent number of primitives in exponents: {nprim} vs {len(exponents)}")
        if len(coefficients[0]) != nprim:
            raise ValueError(
                f"Inconsistent number of primitives in coefficients: {nprim} vs {len(coefficients[0])}"
            )
    if ngen is not None and len(coefficients) != ngen:
        raise ValueError(f"Inconsistent number of general contractions: {ngen} vs {len(coefficients)}")

    return exponents, coefficients


@dataclass
class EcpTable:
    """Columns of a parsed ECP table."""

    r_exp: list[int] = field(default_factory=list)
    g_exp: list[str] = field(default_factory=list)
    coeff: list[list[str]] = field(default_factory=list)


def parse_ecp_table(lines: Sequence[str], order: Sequence[str], split_re=None) -> EcpTable:
    """Parse an ECP table with three columns in the given order of r_exp, g_exp, coeff."""
    if len(order) != 3:
        raise ValueError(f"ECP table requires exactly 3 columns, got {len(order)}")

    r_exp: list[str] = []
    g_exp: list[str] = []
    coeff: list[str] = []
    for line in lines:
        parts = _split(replace_d(line), split_re)
        if len(parts) != 3:
            raise ValueError(f"Expected 3 values in ECP table, found {len(parts)}")
        columns = dict(zip(order, parts))
        try:
            r_exp.append(columns["r_exp"])
            g_exp.append(columns["g_exp"])
            coeff.append(columns["coeff"])
        except KeyError as exc:
            raise ValueError(f"ECP table order is missing column {exc.args[0]}") from None

    if not all(is_integer(x) for x in r_exp):
        raise ValueError(f"Non-integer value found in r exponents: {r_exp}")
    if not all(is_floating(x) for x in g_exp):
        raise ValueError(f"Non-floating-point value found in g exponents: {g_exp}")
    if not all(is_floating(x) for x in coeff):
        raise ValueError(f"Non-floating-point value found in coefficients: {coeff}")

    return EcpTable(r_exp=[int(x) for x in r_exp], g_exp=g_exp, coeff=[coeff])


def prune_lines(
    lines: Sequence[str], skipchars: str = "", prune_blank: bool = True, strip_end_blanks: bool = True
) -> list[str]:
    """Strip lines and drop comment lines, blank lines and/or leading and trailing blanks."""
    processed = [line.strip() for line in lines]
    if skipchars:
        processed = [line for line in processed if not line or line[0] not in skipchars]
    if prune_blank:
        processed = [line for line in processed if line]
    if strip_end_blanks and not prune_blank:
        first = next((i for i, line in enumerate(processed) if line), len(processed))
        last = next((i for i in range(len(processed), 0, -1) if processed[i - 1]), first)
        processed = processed[first:last]
    return processed


def remove_block(lines: Sequence[str], start_re, end_re) -> tuple[list[str], list[str]]:
    """Remove the first block delimited by start/end regexes (case insensitive).

    Returns the lines inside the block (empty if none) and the lines without the block.
    """
    start_pattern = _compile(start_re, re.IGNORECASE)
    end_pattern = _compile(end_re, re.IGNORECASE)

    start = next((i for i, line in enumerate(lines) if start_pattern.search(line)), None)
    if start is None:
        return [], list(lines)

    end = next((i for i in range(start + 1, len(lines)) if end_pattern.search(lines[i])), None)
    if end is None:
        raise ValueError(
            f"Cannot find end of block. Looking for '{end_pattern.pattern}' to close '{start_pattern.pattern}'"
        )
    return list(lines[start + 1:end]), [*lines[:start], *lines[end + 1:]]
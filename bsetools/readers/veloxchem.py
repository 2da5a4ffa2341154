"""Reader for the VeloxChem basis set format."""

from __future__ import annotations

import hashlib
import re
import warnings
from typing import Sequence

from bsetools.helpers import parse_line_regex, parse_primitive_matrix, partition_lines, prune_lines
from bsetools.model import (
    BasisElement,
    ElectronShell,
    MinimalBasis,
    amchar_to_int,
    element_z_from_sym,
    function_type_from_am,
    whole_basis_types,
)

# The format uses the convention in which angular momentum 7 is J
_SHELL_BEGIN_RE = re.compile(r"^([SPDFGHIJKLMNOQRTUVWXYZABCE])\s+(\d+)\s+(\d+)$")


def _parse_element_lines(
    elements: dict[str, BasisElement], element_lines: Sequence[str], element_sym: str
) -> None:
    element_z = element_z_from_sym(element_sym)
    if element_z is None:
        raise ValueError(f"Unknown element symbol: {element_sym}")

    shell_blocks = partition_lines(
        element_lines, lambda x: _SHELL_BEGIN_RE.search(x) is not None, min_size=2, include_match=True
    )
    element = elements.setdefault(str(element_z), BasisElement())

    for shell_lines in shell_blocks:
        amchar, nprim, ncont_str = parse_line_regex(
            _SHELL_BEGIN_RE, shell_lines[0], "Shell: amchar, nprim, ncont"
        )
        ncont = int(ncont_str)
        if ncont != 1:
            warnings.warn(
                f"VeloxChem format expects ncont=1 for all shells, found ncont={ncont}", stacklevel=3
            )

        exponents, coefficients = parse_primitive_matrix(shell_lines[1:], int(nprim), ncont)
        shell_am = amchar_to_int(amchar, True)

        if element.electron_shells is None:
            element.electron_shells = []
        element.electron_shells.append(
            ElectronShell(
                function_type=function_type_from_am(shell_am, "gto", "spherical"),
                angular_momentum=shell_am,
                exponents=exponents,
                coefficients=coefficients,
            )
        )


def read_veloxchem(basis_str: str) -> MinimalBasis:
    """Read a basis set in VeloxChem format; the last line holds an MD5 checksum."""
    basis_lines = [line.strip() for line in basis_str.splitlines()]
    if not basis_lines:
        return MinimalBasis()

    expected_md5 = basis_lines.pop().strip()

    start = next((i for i, line in enumerate(basis_lines) if line.startswith("@BASIS_SET")), None)
    if start is None:
        raise ValueError("No @BASIS_SET line found in VeloxChem format")

    content = "\n".join(basis_lines[start:]) + "\n"
    computed_md5 = hashlib.md5(content.encode()).hexdigest()
    if computed_md5 != expected_md5:
        warnings.warn(
            f"VeloxChem MD5 checksum mismatch (computed: {computed_md5}, expected: {expected_md5})",
            stacklevel=2,
        )

    basis_lines = prune_lines(basis_lines, "!#", True, True)

    atom_starts = [
        (i, parts[1])
        for i, line in enumerate(basis_lines)
        if line.startswith("@ATOMBASIS") and len(parts := line.split()) >= 2
    ]
    ends = [i for i, line in enumerate(basis_lines) if line.startswith("@END")]
    if len(atom_starts) != len(ends):
        raise ValueError("Mismatched @ATOMBASIS and @END markers")

    basis = MinimalBasis()
    for (start_idx, element_sym), end_idx in zip(atom_starts, ends):
        if end_idx <= start_idx + 1:
            continue
        _parse_element_lines(basis.elements, basis_lines[start_idx + 1:end_idx], element_sym)

    basis.function_types = whole_basis_types(basis.elements)
    return basis
"""Reader for the RICDlib auxiliary basis library format."""

from __future__ import annotations

import re
import warnings
from typing import Sequence

from bsetools.helpers import FLOATING_RE, chunk_list, parse_line_regex, partition_lines, read_n_floats
from bsetools.model import (
    BasisElement,
    ElectronShell,
    MinimalBasis,
    element_z_from_sym,
    function_type_from_am,
    transpose_matrix,
    whole_basis_types,
)

_BASIS_NAME = r"\d*[a-zA-Z][a-zA-Z0-9\-\+\*\(\)\[\]]*"

_BASIS_HEAD_RE = re.compile(rf"^/([a-zA-Z]+).({_BASIS_NAME}|)....(aCD|acCD)-aux-basis.\s*$")
_CHARGE_LINE_RE = re.compile(rf"^\s*({FLOATING_RE.pattern})\s+(\d+)\s+(\d+)\s*$")
_DUMMY_LINE_RE = re.compile(r"^\s*Dummy reference line.\s*$")
_SHELL_START_RE = re.compile(r"^\s*(\d+)\s+(\d+)\s+(\d+)\s*$")

_HEAD_DESCRIPTION = "Symbol.Basis....a(c)CD-aux-basis."


def _parse_basis(elements: dict[str, BasisElement], basis_lines: Sequence[str]) -> None:
    if len(basis_lines) < 5:
        return

    element_sym, _name, _kind = parse_line_regex(_BASIS_HEAD_RE, basis_lines[0], _HEAD_DESCRIPTION)
    element_z = element_z_from_sym(element_sym)
    if element_z is None:
        raise ValueError(f"Unknown element symbol: {element_sym}")

    _charge, lmax_str, _nbasis = parse_line_regex(_CHARGE_LINE_RE, basis_lines[1], "charge, lmax, nbasis")
    lmax = int(lmax_str)

    for line in basis_lines[2:4]:
        if _DUMMY_LINE_RE.search(line) is None:
            warnings.warn(f"Expected dummy line, got: '{line}'", stacklevel=3)

    rest = list(basis_lines[4:])
    for am in range(lmax + 1):
        if not rest:
            break

        nprim, ncontr, amtype = (
            int(value) for value in parse_line_regex(_SHELL_START_RE, rest[0], "nprim, ncontr, amtype")
        )
        rest = rest[1:]

        # Empty shells are placeholders
        if nprim == 0 or ncontr == 0:
            continue

        exponents, rest = read_n_floats(rest, nprim)
        flat_coefficients, rest = read_n_floats(rest, nprim * ncontr)
        coefficients = transpose_matrix(chunk_list(flat_coefficients, nprim, ncontr))

        kind = "spherical" if amtype == 3 else "cartesian"
        element = elements.setdefault(str(element_z), BasisElement())
        if element.electron_shells is None:
            element.electron_shells = []
        element.electron_shells.append(
            ElectronShell(
                function_type=function_type_from_am([am], "gto", kind),
                angular_momentum=[am],
                exponents=list(exponents),
                coefficients=coefficients,
            )
        )


def read_ricdlib(basis_str: str) -> MinimalBasis:
    """Read a basis set in RICDlib format."""
    basis_lines = [line.strip() for line in basis_str.splitlines()]

    basis = MinimalBasis()
    if not basis_lines:
        return basis

    element_blocks = partition_lines(
        basis_lines, lambda x: _BASIS_HEAD_RE.search(x) is not None, min_size=5, include_match=True
    )

    found_names: list[str] = []
    for element_lines in element_blocks:
        if not element_lines:
            continue
        basis_name = parse_line_regex(_BASIS_HEAD_RE, element_lines[0], _HEAD_DESCRIPTION)[1]
        if basis_name and basis_name.lower() not in found_names:
            found_names.append(basis_name.lower())
        _parse_basis(basis.elements, element_lines)

    if len(found_names) > 1:
        warnings.warn(f"Multiple basis sets found in file: {', '.join(found_names)}", stacklevel=2)
    if found_names:
        basis.name = found_names[0]

    basis.function_types = whole_basis_types(basis.elements)
    return basis
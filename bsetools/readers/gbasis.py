"""Reader for the GBasis format (electron shells only)."""

from __future__ import annotations

import re
import warnings

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

_ELEMENT_ENTRY_RE = re.compile(r"^([a-zA-Z]{1,3}):(.*):(.*)$")
_SHELL_INFO_RE = re.compile(r"^([a-zA-Z])\s+(\d+)\s+(\d+)$")


def _starts_ascii_alpha(line: str) -> bool:
    first = line[:1]
    return first.isascii() and first.isalpha()


def read_gbasis(basis_str: str) -> MinimalBasis:
    """Read a basis set in GBasis format."""
    basis_lines = prune_lines([line.strip() for line in basis_str.splitlines()], "!#", True, True)

    basis = MinimalBasis()
    if not basis_lines:
        return basis

    sections = partition_lines(
        basis_lines, lambda x: _ELEMENT_ENTRY_RE.search(x) is not None, min_size=4, include_match=True
    )

    found_names: list[str] = []
    for element_lines in sections:
        if len(element_lines) < 4:
            continue

        element_sym, basis_name, _ = parse_line_regex(
            _ELEMENT_ENTRY_RE, element_lines[0], "Element entry: sym:basis:pattern"
        )
        element_z = element_z_from_sym(element_sym)
        if element_z is None:
            raise ValueError(f"Unknown element symbol: {element_sym}")
        if basis_name.lower() not in found_names:
            found_names.append(basis_name.lower())

        try:
            max_am = int(element_lines[1].strip())
        except ValueError:
            raise ValueError("Invalid max_am") from None

        shell_blocks = partition_lines(element_lines[2:], _starts_ascii_alpha, min_size=2, include_match=True)
        if max_am + 1 != len(shell_blocks):
            warnings.warn(
                f"Expected {max_am + 1} blocks for element {element_sym}, found {len(shell_blocks)}",
                stacklevel=2,
            )

        element = basis.elements.setdefault(str(element_z), BasisElement())
        for shell_lines in shell_blocks:
            amchar, nprim, ngen = parse_line_regex(_SHELL_INFO_RE, shell_lines[0], "Shell: AM, nprim, ngen")
            try:
                shell_am = amchar_to_int(amchar, False)
            except ValueError:
                raise ValueError(f"Unknown angular momentum: {amchar}") from None
            if len(shell_am) > 1:
                raise ValueError("Fused AM not supported by gbasis reader")

            exponents, coefficients = parse_primitive_matrix(shell_lines[1:], int(nprim), int(ngen))
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

    if len(found_names) > 1:
        warnings.warn(f"Multiple basis sets found in file: {', '.join(found_names)}", stacklevel=2)

    basis.function_types = whole_basis_types(basis.elements)
    if found_names:
        basis.name = found_names[0]
    return basis
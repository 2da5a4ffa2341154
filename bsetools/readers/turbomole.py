"""Reader for the TURBOMOLE basis set format."""

from __future__ import annotations

import re
from typing import Sequence

from bsetools.helpers import (
    FLOATING_RE,
    parse_ecp_table,
    parse_line_regex,
    parse_primitive_matrix,
    partition_lines,
    prune_lines,
)
from bsetools.model import (
    BasisElement,
    EcpPotential,
    ElectronShell,
    MinimalBasis,
    amchar_to_int,
    element_z_from_sym,
    function_type_from_am,
    whole_basis_types,
)

_SECTION_RE = re.compile(r"^\$(basis|ecp|cbas|jbas|jkbas)$")
_ELEMENT_RE = re.compile(r"^([a-zA-Z]{1,3})\s+(.*)$")
_SHELL_RE = re.compile(r"^(\d+) +([a-zA-Z])$")
_ECP_INFO_RE = re.compile(r"^ncore\s*=\s*(\d+)\s+lmax\s*=\s*(\d+)$", re.IGNORECASE)
_ECP_POT_AM_RE = re.compile(r"^([a-z])(-[a-z])?$")
_EXP_COEF_RE = re.compile(rf"^(\d+\s+)?({FLOATING_RE.pattern})\s+({FLOATING_RE.pattern})$")


def _lookup_z(sym: str) -> int:
    z = element_z_from_sym(sym)
    if z is None:
        raise ValueError(f"Unknown element symbol: {sym}")
    return z


def _amchar(amchar: str, what: str = "angular momentum") -> list[int]:
    try:
        return amchar_to_int(amchar, False)
    except ValueError:
        raise ValueError(f"Unknown {what}: {amchar}") from None


def _is_element_line(line: str) -> bool:
    return _ELEMENT_RE.search(line) is not None


def _starts_alpha(line: str) -> bool:
    return line[:1].isalpha()


def _strip_section(basis_lines: Sequence[str]) -> list[str]:
    """Drop the $ lines and the terminating * line of a section."""
    lines = prune_lines(basis_lines, "$", True, True)
    if not lines:
        raise ValueError("Empty basis lines")
    if lines[-1] != "*":
        raise ValueError("Missing terminating * line")
    return lines[:-1]


def _check_star_blocks(blocks: Sequence[Sequence[str]]) -> None:
    # A missing * makes partitioning eat part of the previous element, so check all first
    for block in blocks:
        if block[0] != "*":
            raise ValueError("Element line not preceded by *")
        if len(block) < 3 or block[2] != "*":
            raise ValueError("Element line not followed by *")
        for line in block[3:]:
            if line.startswith("*"):
                raise ValueError(f"Found line starting with * that probably doesn't belong: {line}")


def _parse_electron_lines(elements: dict[str, BasisElement], basis_lines: Sequence[str]) -> None:
    lines = _strip_section(basis_lines)

    # ECP-only basis sets may have an empty basis section
    if all(line in ("*", "") for line in lines):
        return

    element_blocks = partition_lines(lines, _is_element_line, before=1, min_size=4, include_match=True)
    _check_star_blocks(element_blocks)

    for element_lines in element_blocks:
        element_sym = parse_line_regex(_ELEMENT_RE, element_lines[1], "Element line")[0]
        element_z = _lookup_z(element_sym)
        element = elements.setdefault(str(element_z), BasisElement())

        shell_blocks = partition_lines(
            element_lines[3:], lambda x: _SHELL_RE.search(x) is not None, min_size=2, include_match=True
        )
        for sh_lines in shell_blocks:
            nprim_str, amchar = parse_line_regex(_SHELL_RE, sh_lines[0], "shell nprim, am")
            nprim = int(nprim_str)
            shell_am = _amchar(amchar)

            # Lines may carry an optional leading ordinal before exponent and coefficient
            rows = []
            for line in sh_lines[1:]:
                match = _EXP_COEF_RE.search(line)
                if match is None:
                    raise ValueError(
                        f"Line does not match format (expn, coeff) or (iexpn, expn, coeff): {line}"
                    )
                rows.append(f"{match.group(2)} {match.group(3)}")

            exponents, coefficients = parse_primitive_matrix(rows, nprim, 1)

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


def _parse_ecp_potential_lines(elements: dict[str, BasisElement], element_lines: Sequence[str]) -> None:
    element_sym = parse_line_regex(_ELEMENT_RE, element_lines[0], "Element line")[0]
    element_z = _lookup_z(element_sym)

    ncore_str, lmax_str = parse_line_regex(_ECP_INFO_RE, element_lines[1], "ECP ncore, lmax")
    max_am = int(lmax_str)

    element = elements.setdefault(str(element_z), BasisElement())
    element.ecp_electrons = int(ncore_str)

    potentials = partition_lines(element_lines[2:], _starts_alpha, min_size=2, include_match=True)

    found_max = False
    for pot_lines in potentials:
        amchar, base = parse_line_regex(_ECP_POT_AM_RE, pot_lines[0], "ECP potential am")
        pot_am = _amchar(amchar)

        if base:
            base_am = _amchar(base[1:], "base angular momentum")
            if base_am[0] != max_am:
                raise ValueError(f"Potential does not use max_am of {max_am}. Uses {base_am[0]}")
        else:
            if found_max:
                raise ValueError("Found multiple potentials with single AM")
            if pot_am[0] != max_am:
                raise ValueError(f"Potential with single AM {pot_am[0]} is not the same as lmax = {max_am}")
            found_max = True

        table = parse_ecp_table(pot_lines[1:], ["coeff", "r_exp", "g_exp"])
        if element.ecp_potentials is None:
            element.ecp_potentials = []
        element.ecp_potentials.append(
            EcpPotential(
                angular_momentum=pot_am,
                coefficients=table.coeff,
                r_exponents=table.r_exp,
                gaussian_exponents=table.g_exp,
            )
        )


def _parse_ecp_lines(elements: dict[str, BasisElement], basis_lines: Sequence[str]) -> None:
    lines = _strip_section(basis_lines)
    element_blocks = partition_lines(lines, _is_element_line, before=1, min_size=1, include_match=True)
    _check_star_blocks(element_blocks)

    for element_lines in element_blocks:
        _parse_ecp_potential_lines(elements, [element_lines[1], *element_lines[3:]])


def read_turbomole(basis_str: str) -> MinimalBasis:
    """Read a basis set in TURBOMOLE format."""
    basis_lines = prune_lines([line.strip() for line in basis_str.splitlines()], "#", True, True)

    if basis_lines:
        if not basis_lines[0].startswith("$"):
            raise ValueError(f"First line does not begin with $. Line: {basis_lines[0]}")
        if basis_lines[-1] != "$end":
            raise ValueError(f"Last line of basis is not $end. Line: {basis_lines[-1]}")

    basis = MinimalBasis()
    sections = partition_lines(
        basis_lines,
        lambda x: x.startswith("$") and x != "$end",
        min_blocks=1,
        max_blocks=2,
        min_size=1,
        include_match=True,
    )

    for section in sections:
        # A section made only of $ lines holds nothing
        if not section or all(line.startswith("$") for line in section):
            continue
        if section[0].lower() == "$ecp":
            _parse_ecp_lines(basis.elements, section)
        elif _SECTION_RE.search(section[0]):
            _parse_electron_lines(basis.elements, section)
        else:
            raise ValueError(f"Unknown section {section[0]}")

    basis.function_types = whole_basis_types(basis.elements)
    return basis
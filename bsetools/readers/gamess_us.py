"""Reader for the GAMESS US basis set format."""

from __future__ import annotations

import re
from typing import Sequence

from bsetools.helpers import FLOATING_RE, parse_line_regex, partition_lines, prune_lines, replace_d
from bsetools.model import (
    BasisElement,
    EcpPotential,
    ElectronShell,
    MinimalBasis,
    amchar_to_int,
    element_z_from_name,
    element_z_from_sym,
    function_type_from_am,
    whole_basis_types,
)

_FLOAT = FLOATING_RE.pattern

_ELEMENT_BLOCK_RE = re.compile(r"^\s*([A-Za-z]+)\s*$")
_SHELL_BLOCK_RE = re.compile(r"^\s*([SPDFGHIKLMN])\s+(\d+)\s*$")
_CONTRACTION_RE = re.compile(rf"^\s*(\d+)\s+({_FLOAT})\s+({_FLOAT})\s*$")
_ECP_BLOCK_RE = re.compile(r"^\s*([A-Za-z]+)-ECP\s+GEN\s+(\d+)\s+(\d+)\s*$")
_ECP_SHELL_RE = re.compile(r"^\s*(\d+)\s+-----\s+([A-Za-z])-([A-Za-z]+)\s+potential\s+-----\s*$")
_ECP_ENTRY_RE = re.compile(rf"^\s*({_FLOAT})\s+(\d)\s+({_FLOAT})\s*$")


def _matches(rex: re.Pattern, lines: Sequence[str], index: int) -> bool:
    return index < len(lines) and rex.search(lines[index]) is not None


def _line(lines: Sequence[str], index: int, what: str) -> str:
    if index >= len(lines):
        raise ValueError(f"Ran out of lines while reading {what}")
    return lines[index]


def _nonzero(value: str) -> bool:
    try:
        return float(value) != 0.0
    except ValueError:
        return False


def _amchar(amchar: str) -> list[int]:
    try:
        return amchar_to_int(amchar, True)
    except ValueError:
        raise ValueError(f"Unknown angular momentum: {amchar}") from None


def _parse_electron_lines(elements: dict[str, BasisElement], basis_lines: Sequence[str]) -> None:
    name = parse_line_regex(_ELEMENT_BLOCK_RE, basis_lines[0], "Element name")[0].lower()
    element_z = element_z_from_name(name)
    if element_z is None:
        raise ValueError(f"Unknown element name: {name}")

    iline = 1
    while _matches(_SHELL_BLOCK_RE, basis_lines, iline):
        am_char, nprim_str = parse_line_regex(_SHELL_BLOCK_RE, basis_lines[iline], "Shell AM, nprim")
        nprim = int(nprim_str)
        shell_am = _amchar(am_char)
        iline += 1

        exponents: list[str] = []
        coefficients: list[str] = []
        for _ in range(nprim):
            line = _line(basis_lines, iline, "contractions")
            _, expn, coeff = parse_line_regex(_CONTRACTION_RE, line, "Contraction line")
            expn, coeff = replace_d(expn), replace_d(coeff)
            # Primitives with a zero coefficient are dropped
            if _nonzero(coeff):
                exponents.append(expn)
                coefficients.append(coeff)
            iline += 1

        if exponents:
            element = elements.setdefault(str(element_z), BasisElement())
            if element.electron_shells is None:
                element.electron_shells = []
            element.electron_shells.append(
                ElectronShell(
                    function_type=function_type_from_am(shell_am, "gto", "spherical"),
                    angular_momentum=shell_am,
                    exponents=exponents,
                    coefficients=[coefficients],
                )
            )


def _parse_ecp_lines(elements: dict[str, BasisElement], basis_lines: Sequence[str]) -> None:
    iline = 0
    while _matches(_ECP_BLOCK_RE, basis_lines, iline):
        element_sym, nelec, _lmax = parse_line_regex(_ECP_BLOCK_RE, basis_lines[iline], "ECP block")
        element_z = element_z_from_sym(element_sym)
        if element_z is None:
            raise ValueError(f"Unknown element symbol: {element_sym}")

        element = elements.setdefault(str(element_z), BasisElement())
        element.ecp_electrons = int(nelec)
        iline += 1

        while _matches(_ECP_SHELL_RE, basis_lines, iline):
            nlines, am_char, _base = parse_line_regex(_ECP_SHELL_RE, basis_lines[iline], "ECP shell")
            pot_am = _amchar(am_char)
            iline += 1

            g_exp: list[str] = []
            r_exp: list[int] = []
            coeff: list[str] = []
            for _ in range(int(nlines)):
                line = _line(basis_lines, iline, "ECP entries")
                c, r, g = parse_line_regex(_ECP_ENTRY_RE, line, "ECP entry")
                c, g = replace_d(c), replace_d(g)
                if _nonzero(c):
                    g_exp.append(g)
                    r_exp.append(int(r))
                    coeff.append(c)
                iline += 1

            if coeff:
                if element.ecp_potentials is None:
                    element.ecp_potentials = []
                element.ecp_potentials.append(
                    EcpPotential(
                        angular_momentum=pot_am,
                        coefficients=[coeff],
                        r_exponents=r_exp,
                        gaussian_exponents=g_exp,
                    )
                )


def _is_element_header(line: str) -> bool:
    return _ELEMENT_BLOCK_RE.search(line) is not None and element_z_from_name(line.strip().lower()) is not None


def _is_ecp_header(line: str) -> bool:
    return _ECP_BLOCK_RE.search(line) is not None


def read_gamess_us(basis_str: str) -> MinimalBasis:
    """Read a basis set in GAMESS US format."""
    basis_lines = prune_lines([line.strip() for line in basis_str.splitlines()], "!#$", True, True)

    basis = MinimalBasis()
    if not basis_lines:
        return basis

    element_blocks = partition_lines(basis_lines, _is_element_header, min_size=2, include_match=True)
    ecp_blocks = partition_lines(basis_lines, _is_ecp_header, min_size=2, include_match=True)

    for element_lines in element_blocks:
        if any(_is_ecp_header(line) for line in element_lines):
            continue
        _parse_electron_lines(basis.elements, element_lines)

    for ecp_lines in ecp_blocks:
        _parse_ecp_lines(basis.elements, ecp_lines)

    basis.function_types = whole_basis_types(basis.elements)
    return basis
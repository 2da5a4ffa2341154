"""Reader for the Molpro basis set format."""

from __future__ import annotations

import re
from typing import Sequence

from bsetools.helpers import FLOATING_RE, potential_am_list, prune_lines, replace_d
from bsetools.model import (
    BasisElement,
    EcpPotential,
    ElectronShell,
    MinimalBasis,
    amchar_to_int,
    element_z_from_sym,
    whole_basis_types,
)

_FLOAT = FLOATING_RE.pattern

_ELEMENT_SHELL_RE = re.compile(rf"^\s*([spdfghikSPDFGHIK])\s*,?\s*(\w+)\s*(?:,?\s*({_FLOAT})\s*)+\s*$")
_CONTRACTION_RE = re.compile(rf"^\s*c\s*,?\s*(\d+)\.(\d+)\s*(?:,?\s*({_FLOAT})\s*)+\s*$")
_ECP_RE = re.compile(r"^\s*ECP\s*,\s*(\w+)\s*,\s*(\d+)\s*,\s*(\d+)\s*;\s*$")
_ECP_BLOCK_RE = re.compile(r"^\s*(\d+)\s*;")
_ECP_DATA_RE = re.compile(rf"^\s*(\d+)\s*,\s*({_FLOAT})\s*,\s*({_FLOAT})\s*;\s*")
_DIGITS_RE = re.compile(r"\d+")


def _lookup_z(sym: str) -> int:
    z = element_z_from_sym(sym)
    if z is None:
        raise ValueError(f"Unknown element symbol: {sym}")
    return z


def _to_index(text: str, what: str) -> int:
    if _DIGITS_RE.fullmatch(text) is None:
        raise ValueError(f"Invalid {what}: {text}")
    return int(text)


def _line(lines: Sequence[str], index: int, what: str) -> str:
    if index >= len(lines):
        raise ValueError(f"Ran out of lines while reading {what}")
    return lines[index]


def _element(elements: dict[str, BasisElement], z: int) -> BasisElement:
    return elements.setdefault(str(z), BasisElement())


def _read_shell(elements: dict[str, BasisElement], lines: Sequence[str], iline: int, func_type: str) -> int:
    line = lines[iline]
    match = _ELEMENT_SHELL_RE.search(line)
    if match is None:
        raise ValueError(f"Shell entry does not match regex: {line}")

    am_char, element_sym = match.group(1), match.group(2)
    try:
        shell_am = amchar_to_int(am_char, True)
    except ValueError:
        raise ValueError(f"Unknown angular momentum: {am_char}") from None
    element_z = _lookup_z(element_sym)

    # Repeated groups only keep their last capture, so split the line by hand
    exponents = [replace_d(part.strip()) for part in line.split(",")[2:]]
    nprim = len(exponents)
    if nprim == 0:
        raise ValueError("No exponents found for shell")

    coefficients: list[list[str]] = []
    current = iline + 1
    while current < len(lines) and _CONTRACTION_RE.search(lines[current]):
        contraction = lines[current]
        parts = contraction.split(",")
        if len(parts) < 2:
            raise ValueError(f"Invalid contraction line: {contraction}")

        range_str = parts[1].strip()
        bounds = range_str.split(".")
        if len(bounds) != 2:
            raise ValueError(f"Invalid range in contraction: {range_str}")
        start = _to_index(bounds[0], "start")
        end = _to_index(bounds[1], "end")

        cc = [replace_d(part.strip()) for part in parts[2:]]
        if len(cc) != end - start + 1:
            raise ValueError(
                f"Number of coefficients ({len(cc)}) does not match range ({start} to {end})"
            )

        padded = ["0.0"] * (start - 1) + cc + ["0.0"] * (nprim - end)
        if len(padded) != nprim:
            raise ValueError(f"Padded coefficients length {len(padded)} != nprim {nprim}")
        coefficients.append(padded)
        current += 1

    element = _element(elements, element_z)
    if element.electron_shells is None:
        element.electron_shells = []
    element.electron_shells.append(
        ElectronShell(
            function_type="gto" if shell_am[0] < 2 else func_type,
            angular_momentum=shell_am,
            exponents=exponents,
            coefficients=coefficients,
        )
    )
    return current


def _read_ecp(elements: dict[str, BasisElement], lines: Sequence[str], iline: int) -> int:
    match = _ECP_RE.search(lines[iline])
    if match is None:
        raise ValueError(f"ECP entry does not match regex: {lines[iline]}")

    element_sym, ncore, lmax_str = match.groups()
    lmax = int(lmax_str)
    element = _element(elements, _lookup_z(element_sym))
    element.ecp_electrons = int(ncore)

    current = iline + 1
    for ecp_l in potential_am_list(lmax):
        block_line = _line(lines, current, "ECP block")
        block = _ECP_BLOCK_RE.search(block_line)
        if block is None:
            raise ValueError(f"ECP block does not match regex: {block_line}")
        nterms = int(block.group(1))
        current += 1

        r_exp: list[int] = []
        g_exp: list[str] = []
        coeff: list[str] = []
        for _ in range(nterms):
            data_line = _line(lines, current, "ECP data")
            data = _ECP_DATA_RE.search(data_line)
            if data is None:
                raise ValueError(f"ECP data does not match regex: {data_line}")
            # The format stores the bare power of r; the r^-2 prefactor is added here
            r_exp.append(int(data.group(1)) + 2)
            g_exp.append(replace_d(data.group(2)))
            coeff.append(replace_d(data.group(3)))
            current += 1

        if element.ecp_potentials is None:
            element.ecp_potentials = []
        element.ecp_potentials.append(
            EcpPotential(
                angular_momentum=[ecp_l],
                coefficients=[coeff],
                r_exponents=r_exp,
                gaussian_exponents=g_exp,
            )
        )

    return current


def _parse_lines(lines: Sequence[str], elements: dict[str, BasisElement], func_type: str) -> None:
    iline = 0
    while iline < len(lines):
        if _ELEMENT_SHELL_RE.search(lines[iline]):
            iline = _read_shell(elements, lines, iline, func_type)
        elif _ECP_RE.search(lines[iline]):
            iline = _read_ecp(elements, lines, iline)
        else:
            iline += 1


def read_molpro(basis_str: str) -> MinimalBasis:
    """Read a basis set in Molpro format."""
    basis_lines = prune_lines([line.strip() for line in basis_str.splitlines()], "!*", True, True)

    basis = MinimalBasis()
    if not basis_lines:
        return basis

    func_type = "gto_spherical"
    for line in basis_lines:
        keyword = line.strip().lower()
        if keyword == "spherical":
            func_type = "gto_spherical"
        elif keyword == "cartesian":
            func_type = "gto_cartesian"

    _parse_lines(basis_lines, basis.elements, func_type)
    basis.function_types = whole_basis_types(basis.elements)
    return basis
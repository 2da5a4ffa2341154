"""Reader for the NWChem basis set format."""

from __future__ import annotations

import re
from typing import Sequence

from bsetools.helpers import parse_ecp_table, parse_line_regex, parse_primitive_matrix, partition_lines
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

_AM_LINE_RE = re.compile(r"^([A-Za-z]+)\s+([A-Za-z]+)$")
_NELEC_RE = re.compile(r"^([a-z]+)\s+nelec\s+(\d+)$", re.IGNORECASE)


def _lookup_z(sym: str) -> int:
    z = element_z_from_sym(sym)
    if z is None:
        raise ValueError(f"Unknown element symbol: {sym}")
    return z


def _amchar(amchar: str) -> list[int]:
    try:
        return amchar_to_int(amchar, False)
    except ValueError:
        raise ValueError(f"Unknown angular momentum: {amchar}") from None


def _starts_alpha(line: str) -> bool:
    return line[:1].isalpha()


def _without_end(lines: Sequence[str]) -> list[str]:
    return [line for line in lines if line.lower() != "end"]


def _parse_electron_lines(elements: dict[str, BasisElement], basis_lines: Sequence[str]) -> None:
    lines = _without_end(basis_lines)
    if not lines or not lines[0].lower().startswith("basis"):
        raise ValueError("Basis entry must start with 'basis'")

    am_type = "spherical" if "spherical" in lines[0].lower() else "cartesian"

    for shl_lines in partition_lines(lines[1:], _starts_alpha, min_size=2, include_match=True):
        sym, amchar = parse_line_regex(_AM_LINE_RE, shl_lines[0], "Element sym, shell am")
        element_z = _lookup_z(sym)
        shell_am = _amchar(amchar)

        # Only a fused shell tells us how many coefficient columns to expect
        ngen = len(shell_am) if len(shell_am) > 1 else None
        exponents, coefficients = parse_primitive_matrix(shl_lines[1:], None, ngen)

        element = elements.setdefault(str(element_z), BasisElement())
        if element.electron_shells is None:
            element.electron_shells = []
        element.electron_shells.append(
            ElectronShell(
                function_type=function_type_from_am(shell_am, "gto", am_type),
                angular_momentum=shell_am,
                exponents=exponents,
                coefficients=coefficients,
            )
        )


def _parse_ecp_lines(elements: dict[str, BasisElement], basis_lines: Sequence[str]) -> None:
    lines = _without_end(basis_lines)

    # Each block is either a potential or a single 'nelec' line
    for pot_lines in partition_lines(lines[1:], _starts_alpha, min_size=1, include_match=True):
        if len(pot_lines) == 1:
            sym, nelec = parse_line_regex(_NELEC_RE, pot_lines[0], "ECP: Element sym, nelec")
            element_z = _lookup_z(sym)
            elements.setdefault(str(element_z), BasisElement()).ecp_electrons = int(nelec)
            continue

        sym, amchar = parse_line_regex(_AM_LINE_RE, pot_lines[0], "ECP: Element sym, pot AM")
        element_z = _lookup_z(sym)
        pot_am = [] if amchar.lower() == "ul" else _amchar(amchar)
        table = parse_ecp_table(pot_lines[1:], ["r_exp", "g_exp", "coeff"])

        element = elements.setdefault(str(element_z), BasisElement())
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

    for key, element in elements.items():
        if element.ecp_potentials is None:
            continue
        # The 'ul' potential takes one more than the highest AM read
        max_am = max((am for pot in element.ecp_potentials for am in pot.angular_momentum), default=0)
        for pot in element.ecp_potentials:
            if not pot.angular_momentum:
                pot.angular_momentum = [max_am + 1]
        if element.ecp_electrons is None:
            raise ValueError(f"Number of ECP electrons not specified for element {key}")


def read_nwchem(basis_str: str) -> MinimalBasis:
    """Read a basis set in NWChem format."""
    lines = [line.strip() for line in basis_str.splitlines()]
    lines = [line for line in lines if line and not line.startswith("#")]

    basis = MinimalBasis()
    sections = partition_lines(
        lines,
        lambda x: x.lower() == "end",
        min_blocks=1,
        max_blocks=2,
        min_size=1,
        include_match=False,
    )
    for section in sections:
        if not section:
            continue
        head = section[0].lower()
        if head.startswith("basis"):
            _parse_electron_lines(basis.elements, section)
        elif head.startswith("ecp"):
            _parse_ecp_lines(basis.elements, section)
        else:
            raise ValueError(f"Unknown section in NWChem basis: {section[0]}")

    basis.function_types = whole_basis_types(basis.elements)
    return basis
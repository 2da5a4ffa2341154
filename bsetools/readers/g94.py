"""Reader for the Gaussian94 basis set format."""

from __future__ import annotations

import re
import sys
from typing import Sequence

from bsetools.helpers import (
    FLOATING_RE,
    is_integer,
    parse_ecp_table,
    parse_line_regex,
    parse_primitive_matrix,
    partition_lines,
    potential_am_list,
    prune_lines,
    replace_d,
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

_ELEMENT_RE = re.compile(r"^-?([A-Za-z]{1,3})(?:\s+0)?$")
_ECP_AM_NELEC_RE = re.compile(r"^\S+\s+(\d+)\s+(\d+)$")
_AM_LINE_RE = re.compile(rf"^([A-Za-z]+)\s+(\d+)((?:\s+{FLOATING_RE.pattern})+)$")
_EXPLICIT_AM_LINE_RE = re.compile(rf"^\s*L=(\d+)\s+(\d+)((?:\s+{FLOATING_RE.pattern})+)$")


def _element(elements: dict[str, BasisElement], z: int) -> BasisElement:
    return elements.setdefault(str(z), BasisElement())


def _lookup_z(sym: str) -> int:
    z = element_z_from_sym(sym)
    if z is None:
        raise ValueError(f"Unknown element symbol: {sym}")
    return z


def _scale_exponent(exponent: str, factor: float) -> str:
    try:
        value = float(exponent)
    except ValueError:
        raise ValueError(f"Invalid exponent: {exponent}") from None
    mantissa, power = f"{value * factor:.16E}".split("E")
    mantissa = mantissa.rstrip("0")
    if mantissa.endswith("."):
        mantissa += "0"
    return f"{mantissa}E{int(power)}"


def _shell_header(line: str) -> tuple[list[int], str, str]:
    if _AM_LINE_RE.search(line):
        amchar, nprim, scaling = parse_line_regex(_AM_LINE_RE, line, "Shell AM, nprim, scaling")
        try:
            shell_am = amchar_to_int(amchar, True)
        except ValueError:
            raise ValueError(f"Unknown angular momentum: {amchar}") from None
        return shell_am, nprim, scaling
    if _EXPLICIT_AM_LINE_RE.search(line):
        am, nprim, scaling = parse_line_regex(_EXPLICIT_AM_LINE_RE, line, "Shell AM, nprim, scaling")
        return [int(am)], nprim, scaling
    raise ValueError(f"Failed to parse shell block starting on line: {line}")


def _parse_electron_lines(elements: dict[str, BasisElement], basis_lines: Sequence[str]) -> None:
    if not basis_lines:
        raise ValueError("Empty basis lines")
    if basis_lines[-1] != "****":
        raise ValueError("Electron shell is missing terminating ****")

    tokens = basis_lines[0].split()
    if not tokens:
        raise ValueError(f"Invalid element line: {basis_lines[0]}")
    # A leading dash tells Gaussian to ignore elements absent from the molecule
    element_sym = tokens[0].lstrip("-")
    element_z = _lookup_z(element_sym)

    shell_blocks = partition_lines(
        basis_lines[1:-1], lambda x: x[:1].isalpha(), min_size=1, include_match=True
    )

    for sh_lines in shell_blocks:
        shell_am, nprim_str, scaling_str = _shell_header(sh_lines[0])
        func_type = function_type_from_am(shell_am, "gto", "spherical")

        scaling_factors = []
        for token in replace_d(scaling_str).split():
            try:
                scaling_factors.append(float(token))
            except ValueError:
                raise ValueError(f"Invalid scaling factor: {token}") from None
        scaling_factors = [x for x in scaling_factors if x != 0.0]
        if not scaling_factors:
            raise ValueError(f"No scaling factors given for element {element_sym}: Line: {sh_lines[0]}")
        if len(scaling_factors) > 1:
            raise NotImplementedError("Number of scaling factors > 1")

        scaling_factor = scaling_factors[0] ** 2
        has_scaling = abs(scaling_factor - 1.0) > sys.float_info.epsilon

        try:
            nprim = int(nprim_str)
        except ValueError:
            raise ValueError(f"Invalid nprim value: {nprim_str}") from None

        exponents, coefficients = parse_primitive_matrix(sh_lines[1:], nprim, len(shell_am))
        if has_scaling:
            exponents = [_scale_exponent(ex, scaling_factor) for ex in exponents]

        element = _element(elements, element_z)
        if element.electron_shells is None:
            element.electron_shells = []
        element.electron_shells.append(
            ElectronShell(
                function_type=func_type,
                angular_momentum=shell_am,
                exponents=exponents,
                coefficients=coefficients,
            )
        )


def _parse_ecp_lines(elements: dict[str, BasisElement], basis_lines: Sequence[str]) -> None:
    tokens = basis_lines[0].split()
    if not tokens:
        raise ValueError(f"Invalid element line: {basis_lines[0]}")
    element_sym = tokens[0]
    element_z = _lookup_z(element_sym)

    max_am_str, nelec_str = parse_line_regex(_ECP_AM_NELEC_RE, basis_lines[1], "ECP max_am, nelec")
    max_am = int(max_am_str)
    ecp_electrons = int(nelec_str)

    # Each potential starts at a line holding only an integer, preceded by a comment line
    ecp_blocks = partition_lines(basis_lines[2:], is_integer, before=1, min_size=1, include_match=True)

    element = _element(elements, element_z)
    if element.ecp_potentials is None:
        element.ecp_potentials = []

    for pot_lines in ecp_blocks:
        try:
            nlines = int(pot_lines[1])
        except ValueError:
            raise ValueError(f"Number of lines for potential is not an integer: {pot_lines[1]}") from None
        if nlines <= 0:
            raise ValueError("Number of lines for potential is <= 0")
        if len(pot_lines) != nlines + 2:
            raise ValueError(f"Number of lines is incorrect. Expected {nlines}, got {len(pot_lines) - 2}")

        table = parse_ecp_table(pot_lines[2:], ["r_exp", "g_exp", "coeff"])
        element.ecp_potentials.append(
            EcpPotential(
                angular_momentum=[],
                coefficients=table.coeff,
                r_exponents=table.r_exp,
                gaussian_exponents=table.g_exp,
            )
        )

    all_pot_am = potential_am_list(max_am)
    if len(all_pot_am) != len(element.ecp_potentials):
        raise ValueError(
            f"Found incorrect number of potentials for {element_sym}: "
            f"Expected {len(all_pot_am)}, got {len(element.ecp_potentials)}"
        )
    for pot, am in zip(element.ecp_potentials, all_pot_am):
        pot.angular_momentum = [am]

    element.ecp_electrons = ecp_electrons


def read_g94(basis_str: str) -> MinimalBasis:
    """Read a basis set in Gaussian94 format."""
    basis_lines = prune_lines([line.strip() for line in basis_str.splitlines()], "!", True, True)
    if not basis_lines:
        return MinimalBasis()

    basis = MinimalBasis()
    sections = partition_lines(
        basis_lines, lambda x: _ELEMENT_RE.search(x) is not None, min_size=3, include_match=True
    )
    for section in sections:
        # An ECP block has an integer-only line as its fourth line
        if len(section) > 3 and is_integer(section[3]):
            _parse_ecp_lines(basis.elements, section)
        else:
            _parse_electron_lines(basis.elements, section)

    basis.function_types = whole_basis_types(basis.elements)
    return basis
import pytest

from bsetools.readers.molpro import read_molpro

H_BASIS = """
! a comment
basis={
!
! HYDROGEN       (4s,1p) -> [2s,1p]
s, H , 13.0100000, 1.9620000, 0.4446000, 0.1220000
c, 1.3, 0.0196850, 0.1379770, 0.4781480
c, 4.4, 1.0000000
p, H , 0.7270000
c, 1.1, 1.0000000
}
"""

D_SHELL = """
basis={
d, O , 1.1850000
c, 1.1, 1.0000000
}
"""

ECP_BASIS = """
basis={
ECP, In, 28, 3;
1; ! ul potential
2, 1.0000000, 0.0000000;
2; ! s-ul potential
2, 5.0000000, 10.0000000;
2, 2.5000000, -1.5000000;
1; ! p-ul potential
2, 4.0000000, 3.0000000;
1; ! d-ul potential
2, 3.0000000, 2.0000000;
}
"""


def test_shells_are_read():
    basis = read_molpro(H_BASIS)
    shells = basis.elements["1"].electron_shells
    assert len(shells) == 2
    s_shell, p_shell = shells
    assert s_shell.angular_momentum == [0]
    assert s_shell.exponents == ["13.0100000", "1.9620000", "0.4446000", "0.1220000"]
    assert s_shell.coefficients == [
        ["0.0196850", "0.1379770", "0.4781480", "0.0"],
        ["0.0", "0.0", "0.0", "1.0000000"],
    ]
    assert p_shell.angular_momentum == [1]
    assert p_shell.coefficients == [["1.0000000"]]
    assert s_shell.function_type == "gto"
    assert basis.function_types == ["gto"]


def test_coefficients_have_nprim_entries():
    basis = read_molpro(H_BASIS)
    for shell in basis.elements["1"].electron_shells:
        assert all(len(c) == len(shell.exponents) for c in shell.coefficients)


def test_d_shell_is_spherical_by_default():
    basis = read_molpro(D_SHELL)
    assert basis.elements["8"].electron_shells[0].function_type == "gto_spherical"


def test_cartesian_keyword():
    basis = read_molpro("cartesian\n" + D_SHELL)
    assert basis.elements["8"].electron_shells[0].function_type == "gto_cartesian"
    assert basis.function_types == ["gto_cartesian"]


def test_fortran_exponents_are_converted():
    basis = read_molpro("s, H , 1.5D+01, 2.0D-01\nc, 1.2, 0.5D+00, 0.5D+00\n")
    shell = basis.elements["1"].electron_shells[0]
    assert shell.exponents == ["1.5E+01", "2.0E-01"]
    assert shell.coefficients == [["0.5E+00", "0.5E+00"]]


def test_ecp():
    basis = read_molpro(ECP_BASIS)
    element = basis.elements["49"]
    assert element.ecp_electrons == 28
    pots = element.ecp_potentials
    assert [p.angular_momentum for p in pots] == [[3], [0], [1], [2]]
    assert pots[0].r_exponents == [4]
    assert pots[0].gaussian_exponents == ["1.0000000"]
    assert pots[0].coefficients == [["0.0000000"]]
    assert pots[1].r_exponents == [4, 4]
    assert pots[1].coefficients == [["10.0000000", "-1.5000000"]]
    assert basis.function_types == ["scalar_ecp"]


def test_empty_input():
    basis = read_molpro("! only a comment\n\n")
    assert basis.elements == {}
    assert basis.name == "unknown_basis"


def test_coefficient_count_mismatch():
    with pytest.raises(ValueError, match="does not match range"):
        read_molpro("s, H , 1.0, 2.0\nc, 1.2, 0.5\n")


def test_unknown_element():
    with pytest.raises(ValueError, match="Unknown element symbol"):
        read_molpro("s, Xx , 1.0\nc, 1.1, 1.0\n")


def test_truncated_ecp():
    with pytest.raises(ValueError):
        read_molpro("ECP, In, 28, 1;\n1; ! ul\n2, 1.0, 2.0;\n")
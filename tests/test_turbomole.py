import pytest

from bsetools.readers.turbomole import read_turbomole

HYDROGEN = """$basis
*
h def2-SVP
*
   3  s
     13.0107010              0.19682158D-01
      1.9622572              0.13796524
      0.44453796             0.47831935
   1  s
      0.12194962             1.0000000
   1  p
      0.8000000              1.0000000
*
$end
"""

WITH_D = """$basis
*
o test
*
   1  s
      1.5000000              1.0000000
   1  d
      1 1.1850000            1.0000000
*
$end
"""

INDIUM_ECP = """$basis
*
$ecp
*
in def2-ecp
*
  ncore = 28   lmax = 3
#  coefficient   r^n          exponent
f
  -21.3952000     2      1.1000000
s-f
  120.0000000     2      2.0000000
   10.0000000     2      1.0000000
p-f
   50.0000000     2      1.5000000
d-f
   30.0000000     2      1.2000000
*
$end
"""


def test_reads_hydrogen_shells():
    basis = read_turbomole(HYDROGEN)
    assert set(basis.elements) == {"1"}
    shells = basis.elements["1"].electron_shells
    assert [sh.angular_momentum for sh in shells] == [[0], [0], [1]]
    assert shells[0].exponents == ["13.0107010", "1.9622572", "0.44453796"]
    assert shells[0].coefficients[0][0] == "0.19682158E-01"
    assert shells[0].coefficients[0][1:] == ["0.13796524", "0.47831935"]
    assert basis.function_types == ["gto"]


def test_each_shell_has_one_contraction_matching_exponents():
    basis = read_turbomole(HYDROGEN)
    for shell in basis.elements["1"].electron_shells:
        assert len(shell.coefficients) == 1
        assert len(shell.coefficients[0]) == len(shell.exponents)


def test_ordinal_column_is_dropped_and_d_is_spherical():
    basis = read_turbomole(WITH_D)
    shells = basis.elements["8"].electron_shells
    assert shells[1].angular_momentum == [2]
    assert shells[1].exponents == ["1.1850000"]
    assert shells[1].function_type == "gto_spherical"
    assert basis.function_types == ["gto", "gto_spherical"]


def test_reads_ecp():
    basis = read_turbomole(INDIUM_ECP)
    element = basis.elements["49"]
    assert element.ecp_electrons == 28
    assert element.electron_shells is None
    pots = element.ecp_potentials
    assert [p.angular_momentum for p in pots] == [[3], [0], [1], [2]]
    assert pots[0].coefficients == [["-21.3952000"]]
    assert pots[0].r_exponents == [2]
    assert pots[0].gaussian_exponents == ["1.1000000"]
    assert pots[1].gaussian_exponents == ["2.0000000", "1.0000000"]
    assert basis.function_types == ["scalar_ecp"]


def test_missing_end_raises():
    with pytest.raises(ValueError):
        read_turbomole(HYDROGEN.replace("$end", ""))


def test_first_line_must_start_with_dollar():
    with pytest.raises(ValueError):
        read_turbomole("basis\n" + HYDROGEN)


def test_missing_terminating_star_raises():
    text = HYDROGEN.replace("1.0000000\n*\n$end", "1.0000000\n$end")
    with pytest.raises(ValueError):
        read_turbomole(text)


def test_unknown_section_raises():
    with pytest.raises(ValueError):
        read_turbomole("$foo\nsomething\n$end\n")


def test_wrong_number_of_primitives_raises():
    text = HYDROGEN.replace("   1  p", "   2  p")
    with pytest.raises(ValueError):
        read_turbomole(text)


def test_base_am_must_match_lmax():
    text = INDIUM_ECP.replace("s-f", "s-d")
    with pytest.raises(ValueError):
        read_turbomole(text)


def test_multiple_single_am_potentials_raise():
    text = INDIUM_ECP.replace("p-f", "f")
    with pytest.raises(ValueError):
        read_turbomole(text)


def test_empty_input_raises():
    with pytest.raises(ValueError):
        read_turbomole("")
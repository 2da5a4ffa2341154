import pytest

from bsetools.model import element_z_from_sym
from bsetools.readers.nwchem import read_nwchem

BASIS = """#BASIS SET: sample
BASIS "ao basis" SPHERICAL PRINT
#BASIS SET: (3s) -> [1s]
H    S
      3.42525091             0.15432897
      0.62391373             0.53532814
O    P
      5.0                    0.1
O    D
      0.8                    1.0
END
"""

ECP = """ECP
Cu nelec 10
Cu ul
2      1.0      -2.0
Cu S
2      3.0       4.0
1      5.0       6.0
END
"""


def _key(sym):
    return str(element_z_from_sym(sym))


def test_reads_shells():
    basis = read_nwchem(BASIS)
    h_shell = basis.elements[_key("H")].electron_shells[0]
    assert h_shell.angular_momentum == [0]
    assert h_shell.exponents == ["3.42525091", "0.62391373"]
    assert h_shell.coefficients == [["0.15432897", "0.53532814"]]
    o_shells = basis.elements[_key("O")].electron_shells
    assert [s.angular_momentum for s in o_shells] == [[1], [2]]
    assert o_shells[1].function_type == "gto_spherical"
    assert basis.function_types == ["gto", "gto_spherical"]


def test_cartesian_when_not_spherical():
    text = BASIS.replace("SPHERICAL", "CARTESIAN")
    shell = read_nwchem(text).elements[_key("O")].electron_shells[1]
    assert shell.function_type == "gto_cartesian"


def test_fused_shell_columns():
    text = "BASIS \"ao basis\" PRINT\nC    SP\n  5.0  0.1  0.2\n  1.0  0.3  0.4\n  0.5  0.5  0.6\nEND\n"
    shell = read_nwchem(text).elements[_key("C")].electron_shells[0]
    assert shell.angular_momentum == [0, 1]
    assert shell.exponents == ["5.0", "1.0", "0.5"]
    assert shell.coefficients == [["0.1", "0.3", "0.5"], ["0.2", "0.4", "0.6"]]


def test_fused_shell_wrong_columns_raises():
    text = "BASIS \"ao basis\" PRINT\nC    SP\n  5.0  0.1\nEND\n"
    with pytest.raises(ValueError):
        read_nwchem(text)


def test_reads_ecp_and_sets_ul_am():
    basis = read_nwchem(ECP)
    element = basis.elements[_key("Cu")]
    assert element.ecp_electrons == 10
    pots = element.ecp_potentials
    assert pots[0].angular_momentum == [1]
    assert pots[1].angular_momentum == [0]
    assert pots[0].r_exponents == [2]
    assert pots[0].gaussian_exponents == ["1.0"]
    assert pots[0].coefficients == [["-2.0"]]
    assert pots[1].r_exponents == [2, 1]
    assert basis.function_types == ["scalar_ecp"]


def test_basis_and_ecp_sections():
    basis = read_nwchem(BASIS + ECP)
    assert {_key("H"), _key("O"), _key("Cu")} == set(basis.elements)
    assert "scalar_ecp" in basis.function_types


def test_missing_nelec_raises():
    with pytest.raises(ValueError):
        read_nwchem(ECP.replace("Cu nelec 10\n", ""))


def test_unknown_section_raises():
    with pytest.raises(ValueError):
        read_nwchem("FOO\nH S\n 1.0 1.0\nEND\n")


def test_too_many_sections_raises():
    with pytest.raises(ValueError):
        read_nwchem(BASIS + ECP + BASIS)


def test_empty_input_raises():
    with pytest.raises(ValueError):
        read_nwchem("# nothing here\n")


def test_unknown_element_raises():
    with pytest.raises(ValueError):
        read_nwchem("BASIS \"ao basis\" PRINT\nQq    S\n  1.0  1.0\nEND\n")


def test_roundtrip_consistency_of_exponents_and_coefficients():
    basis = read_nwchem(BASIS)
    for element in basis.elements.values():
        for shell in element.electron_shells:
            assert all(len(column) == len(shell.exponents) for column in shell.coefficients)
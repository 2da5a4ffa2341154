"""Data model for basis sets and references, plus element and angular momentum lookups."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

_SYMBOLS = (
    "H He Li Be B C N O F Ne Na Mg Al Si P S Cl Ar "
    "K Ca Sc Ti V Cr Mn Fe Co Ni Cu Zn Ga Ge As Se Br Kr "
    "Rb Sr Y Zr Nb Mo Tc Ru Rh Pd Ag Cd In Sn Sb Te I Xe "
    "Cs Ba La Ce Pr Nd Pm Sm Eu Gd Tb Dy Ho Er Tm Yb Lu Hf Ta W Re Os Ir Pt Au Hg Tl Pb Bi Po At Rn "
    "Fr Ra Ac Th Pa U Np Pu Am Cm Bk Cf Es Fm Md No Lr Rf Db Sg Bh Hs Mt Ds Rg Cn Nh Fl Mc Lv Ts Og"
).split()

_NAMES = (
    "hydrogen helium lithium beryllium boron carbon nitrogen oxygen fluorine neon "
    "sodium magnesium aluminum silicon phosphorus sulfur chlorine argon "
    "potassium calcium scandium titanium vanadium chromium manganese iron cobalt nickel "
    "copper zinc gallium germanium arsenic selenium bromine krypton "
    "rubidium strontium yttrium zirconium niobium molybdenum technetium ruthenium rhodium "
    "palladium silver cadmium indium tin antimony tellurium iodine xenon "
    "cesium barium lanthanum cerium praseodymium neodymium promethium samarium europium "
    "gadolinium terbium dysprosium holmium erbium thulium ytterbium lutetium hafnium "
    "tantalum tungsten rhenium osmium iridium platinum gold mercury thallium lead bismuth "
    "polonium astatine radon "
    "francium radium actinium thorium protactinium uranium neptunium plutonium americium "
    "curium berkelium californium einsteinium fermium mendelevium nobelium lawrencium "
    "rutherfordium dubnium seaborgium bohrium hassium meitnerium darmstadtium roentgenium "
    "copernicium nihonium flerovium moscovium livermorium tennessine oganesson"
).split()

_Z_BY_SYMBOL = {sym.lower(): z for z, sym in enumerate(_SYMBOLS, start=1)}
_Z_BY_NAME = {name: z for z, name in enumerate(_NAMES, start=1)}
_Z_BY_NAME.update({"aluminium": 13, "sulphur": 16, "caesium": 55})

_AMCHARS_HIK = "spdfghiklmnoqrtuvwxyzabce"
_AMCHARS_HIJ = "spdfghijklmnoqrtuvwxyzabce"


@dataclass
class ElectronShell:
    """A contracted shell of basis functions."""

    function_type: str
    angular_momentum: list[int]
    exponents: list[str]
    coefficients: list[list[str]]
    region: str = ""


@dataclass
class EcpPotential:
    """One angular momentum component of an effective core potential."""

    angular_momentum: list[int]
    coefficients: list[list[str]]
    r_exponents: list[int]
    gaussian_exponents: list[str]
    ecp_type: str = "scalar_ecp"


@dataclass
class BasisReference:
    """Description of a basis piece together with the keys of its citations."""

    reference_description: str
    reference_keys: list[str] = field(default_factory=list)


@dataclass
class BasisElement:
    """All basis data for one element."""

    electron_shells: list[ElectronShell] | None = None
    ecp_potentials: list[EcpPotential] | None = None
    ecp_electrons: int | None = None
    references: list[BasisReference] = field(default_factory=list)


@dataclass
class MinimalBasis:
    """A basis set holding only elements and the data needed to describe them."""

    elements: dict[str, BasisElement] = field(default_factory=dict)
    function_types: list[str] = field(default_factory=list)
    name: str = "unknown_basis"
    description: str = "no_description"
    schema_type: str = "minimal"
    schema_version: str = "0.1"


@dataclass
class ReferenceEntry:
    """A bibliographic entry; every field holds a list of strings."""

    entry_type: str
    fields: dict[str, list[str]] = field(default_factory=dict)

    def get_field(self, name: str) -> list[str]:
        """Return the values of a field, or an empty list if it is absent."""
        return list(self.fields.get(name, []))

    def get_field_opt(self, name: str) -> str | None:
        """Return a field's value as one string, or None if it is absent or empty."""
        values = self.fields.get(name)
        if not values:
            return None
        return "".join(values)

    def _as_dict(self) -> dict:
        return {"_entry_type": self.entry_type, **{k: list(v) for k, v in self.fields.items()}}


@dataclass
class ReferenceInfo:
    """A reference description with the resolved reference entries."""

    reference_description: str
    reference_data: dict[str, ReferenceEntry] = field(default_factory=dict)


@dataclass
class ElementReferences:
    """A group of elements sharing the same reference information."""

    reference_info: list[ReferenceInfo]
    elements: list[int]

    def to_dict(self) -> dict:
        """Return a plain structure suitable for JSON serialisation."""
        return {
            "reference_info": [
                {
                    "reference_description": info.reference_description,
                    "reference_data": [[key, entry._as_dict()] for key, entry in info.reference_data.items()],
                }
                for info in self.reference_info
            ],
            "elements": list(self.elements),
        }


def element_z_from_sym(sym: str) -> int | None:
    """Return the atomic number for an element symbol (case insensitive), or None."""
    return _Z_BY_SYMBOL.get(sym.strip().lower())


def element_z_from_name(name: str) -> int | None:
    """Return the atomic number for an element name (case insensitive), or None."""
    return _Z_BY_NAME.get(name.strip().lower())


def _element_sym_from_z(z: int) -> str:
    if not 1 <= z <= len(_SYMBOLS):
        raise ValueError(f"Unknown element Z: {z}")
    return _SYMBOLS[z - 1]


def amchar_to_int(amchar: str, hij: bool = False) -> list[int]:
    """Convert angular momentum letters (e.g. 'sp') into a list of integers."""
    table = _AMCHARS_HIJ if hij else _AMCHARS_HIK
    result = []
    for char in amchar.lower():
        position = table.find(char)
        if position < 0:
            raise ValueError(f"Angular momentum character {char!r} is not valid")
        result.append(position)
    return result


def function_type_from_am(shell_am: Sequence[int], base_type: str, spherical_type: str) -> str:
    """Return the function type for a shell; s and p shells carry no suffix."""
    if max(shell_am) <= 1:
        return base_type
    return f"{base_type}_{spherical_type}"


def whole_basis_types(elements: Mapping[str, BasisElement]) -> list[str]:
    """Return the sorted set of function and ECP types used by all elements."""
    types: set[str] = set()
    for element in elements.values():
        types.update(shell.function_type for shell in element.electron_shells or [])
        types.update(pot.ecp_type for pot in element.ecp_potentials or [])
    return sorted(types)


def transpose_matrix(matrix: Sequence[Sequence]) -> list[list]:
    """Transpose a rectangular matrix given as a list of rows."""
    return [list(column) for column in zip(*matrix)]


def compact_elements(elements: Iterable[int]) -> str:
    """Render atomic numbers as a compact string such as 'H-Li,C,N'."""
    numbers = sorted({int(z) for z in elements})
    ranges: list[tuple[int, int]] = []
    for z in numbers:
        if ranges and ranges[-1][1] == z - 1:
            ranges[-1] = (ranges[-1][0], z)
        else:
            ranges.append((z, z))

    parts = []
    for start, end in ranges:
        first = _element_sym_from_z(start)
        if start == end:
            parts.append(first)
        elif end == start + 1:
            parts.append(f"{first},{_element_sym_from_z(end)}")
        else:
            parts.append(f"{first}-{_element_sym_from_z(end)}")
    return ",".join(parts)
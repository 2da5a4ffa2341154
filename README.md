# bsetools

Readers for common quantum chemistry basis set file formats. The package also
has tools to group the literature references attached to a basis set and to
format them.

It uses only the Python standard library and needs Python 3.10 or later.

## Installation

```
pip install bsetools
```

## Reading basis set files

Each reader takes the text of a formatted basis set file and returns a
`bsetools.model.MinimalBasis`. In `basis.elements`, an element is keyed by its
atomic number written as a string (for example `"8"` for oxygen). The value is
a `BasisElement` with these fields:

- `electron_shells`: a list of `ElectronShell`, or `None`
- `ecp_potentials`: a list of `EcpPotential`, or `None`
- `ecp_electrons`: the number of electrons replaced by the ECP, or `None`

Exponents and coefficients are kept as strings, exactly as they appear in the
file. Fortran `D` exponents become `E`. Coefficients are stored as one list
per general contraction. `basis.function_types` holds the sorted set of
function and ECP types found.

```python
from bsetools.readers.read import read_formatted_basis_str, get_reader_formats

print(get_reader_formats())  # canonical name -> display name

with open("h2o.nw") as f:
    basis = read_formatted_basis_str(f.read(), "nwchem")

for z, element in basis.elements.items():
    for shell in element.electron_shells or []:
        print(z, shell.angular_momentum, shell.exponents)
```

### Supported formats

| Name        | Display         | Extension  | Aliases                           |
|-------------|-----------------|------------|-----------------------------------|
| `nwchem`    | NWChem          | `.nw`      | `nw`                              |
| `gaussian94`| Gaussian94      | `.gbs`     | `gaussian`, `g94`, `gbs`, `gau`   |
| `turbomole` | Turbomole       | `.tm`      | `tm`                              |
| `molpro`    | Molpro          | `.mpro`    | `mpro`                            |
| `gbasis`    | GBasis          | `.gbasis`  |                                   |
| `ricdlib`   | MolCAS RICDlib  | `.ricdlib` | `ricd`                            |
| `gamess_us` | GAMESS US       | `.bas`     |                                   |
| `veloxchem` | VeloxChem       | `.vlx`     | `vlx`                             |

Format names and aliases are not case sensitive. An unknown format raises
`ValueError`. There are two ways to look up a format:

- `get_reader_format_by_extension` maps a file extension, given without the
  dot, to a format name. It returns `None` if the extension is unknown.
- `get_reader_info` returns a `ReaderInfo` for a format.

`get_reader_formats_with_aliases` lists every format with its display name,
extension and other aliases.

```python
from bsetools.readers.read import get_reader_format_by_extension, get_reader_info

fmt = get_reader_format_by_extension("gbs")   # "gaussian94"
info = get_reader_info(fmt)
print(info.display, info.extension_without_dot(), info.is_alias("g94"))
```

You can also call a reader directly. Each reader is in its own module:

| Function         | Module                        |
|------------------|-------------------------------|
| `read_g94`       | `bsetools.readers.g94`        |
| `read_nwchem`    | `bsetools.readers.nwchem`     |
| `read_turbomole` | `bsetools.readers.turbomole`  |
| `read_gamess_us` | `bsetools.readers.gamess_us`  |
| `read_molpro`    | `bsetools.readers.molpro`     |
| `read_gbasis`    | `bsetools.readers.gbasis`     |
| `read_veloxchem` | `bsetools.readers.veloxchem`  |
| `read_ricdlib`   | `bsetools.readers.ricdlib`    |

Malformed input raises `ValueError`. The one exception is the Gaussian94
reader, which raises `NotImplementedError` when a shell gives more than one
non-zero scaling factor.

Some problems are reported as Python warnings (`warnings.warn`) and reading
goes on:

- The GBasis reader warns about an unexpected number of shell blocks.
- The GBasis and RICDlib readers warn when a file holds several basis set
  names.
- The RICDlib reader warns about missing dummy reference lines.
- The VeloxChem reader warns about a checksum mismatch and about shells with
  more than one contraction.

## References

References are described by these model classes:

- `ReferenceEntry` is an entry type, such as `article`, with fields. Each
  field holds a list of strings.
- `BasisReference` is attached to an element. It holds a description and a
  list of reference keys.

`bsetools.references.compact_references` groups the elements of a basis set
that have the same reference information. It takes the basis and a mapping
from key to `ReferenceEntry`, and returns a list of `ElementReferences`.

`bsetools.refconvert.convert_references` renders those groups in one of these
formats: `txt`, `bib`, `ris`, `endnote` or `json`. The `bib`, `ris` and
`endnote` outputs begin with a commented header. This header lists the element
groups and, when they appear in the mapping, the library citations
`pritchard2019a`, `feller1996a` and `schuchardt2007a`. Every unique reference
then follows once, sorted by key.

```python
from bsetools.model import BasisElement, BasisReference, MinimalBasis, ReferenceEntry
from bsetools.references import compact_references
from bsetools.refconvert import convert_references, get_reference_formats

all_ref_data = {
    "doe2000a": ReferenceEntry(
        "article",
        {
            "authors": ["J. Doe", "R. Roe"],
            "title": ["An example basis"],
            "journal": ["J. Example Chem."],
            "volume": ["1"],
            "pages": ["1-10"],
            "year": ["2000"],
        },
    )
}
element = BasisElement(references=[BasisReference("Example basis", ["doe2000a"])])
basis = MinimalBasis(elements={"1": element, "2": element})

groups = compact_references(basis, all_ref_data)
print(convert_references(groups, "bib", all_ref_data))
```

To format a single entry, use one of these functions:

- `write_bib`, `write_ris` or `write_endnote` from `bsetools.refconvert`
- `reference_text` from `bsetools.references`

`get_reference_formats` lists the output formats. For a given format,
`get_reference_format_extension` returns the recommended file extension.

## Lower-level parsing helpers

`bsetools.helpers` contains the line-oriented building blocks that the readers
use, for example `prune_lines`, `partition_lines`, `parse_line_regex`,
`read_n_floats`, `parse_matrix`, `parse_primitive_matrix` and
`parse_ecp_table`. `bsetools.model` provides these lookups:

- `element_z_from_sym`, `element_z_from_name`
- `amchar_to_int`, `function_type_from_am`
- `compact_elements`

## What the package does not do

- It has no command-line tool.
- It ships no basis set library and no reference database. You supply the
  file text and the reference entries.
- It only reads basis set files. It cannot write them back out in any format.
- The readers do not fill in references.
"""Lookup of basis set reader formats and dispatch to the matching reader."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from bsetools.model import MinimalBasis
from bsetools.readers.g94 import read_g94
from bsetools.readers.gamess_us import read_gamess_us
from bsetools.readers.gbasis import read_gbasis
from bsetools.readers.molpro import read_molpro
from bsetools.readers.nwchem import read_nwchem
from bsetools.readers.ricdlib import read_ricdlib
from bsetools.readers.turbomole import read_turbomole
from bsetools.readers.veloxchem import read_veloxchem


@dataclass(frozen=True)
class ReaderInfo:
    """Description of a readable basis set format."""

    name: str
    display: str
    extension: str
    aliases: tuple[str, ...]

    def extension_without_dot(self) -> str:
        """Return the file extension without its leading dot."""
        return self.extension.lstrip(".")

    def is_alias(self, name: str) -> bool:
        """Return whether ``name`` (case insensitive) names this format."""
        return name.lower() in (alias.lower() for alias in self.aliases)


@dataclass(frozen=True)
class _ReaderEntry:
    info: ReaderInfo
    function: Callable[[str], MinimalBasis]


_READER_ENTRIES = (
    _ReaderEntry(ReaderInfo("nwchem", "NWChem", ".nw", ("nwchem", "nw")), read_nwchem),
    _ReaderEntry(
        ReaderInfo("gaussian94", "Gaussian94", ".gbs", ("gaussian94", "gaussian", "g94", "gbs", "gau")),
        read_g94,
    ),
    _ReaderEntry(ReaderInfo("turbomole", "Turbomole", ".tm", ("turbomole", "tm")), read_turbomole),
    _ReaderEntry(ReaderInfo("molpro", "Molpro", ".mpro", ("molpro", "mpro")), read_molpro),
    _ReaderEntry(ReaderInfo("gbasis", "GBasis", ".gbasis", ("gbasis",)), read_gbasis),
    _ReaderEntry(ReaderInfo("ricdlib", "MolCAS RICDlib", ".ricdlib", ("ricdlib", "ricd")), read_ricdlib),
    _ReaderEntry(ReaderInfo("gamess_us", "GAMESS US", ".bas", ("gamess_us",)), read_gamess_us),
    _ReaderEntry(ReaderInfo("veloxchem", "VeloxChem", ".vlx", ("veloxchem", "vlx")), read_veloxchem),
)

_READER_MAP = {alias.lower(): entry for entry in _READER_ENTRIES for alias in entry.info.aliases}
_EXTENSION_MAP = {entry.info.extension_without_dot().lower(): entry.info.name for entry in _READER_ENTRIES}


def _entry(fmt: str) -> _ReaderEntry | None:
    return _READER_MAP.get(fmt.lower())


def get_reader_format_by_extension(ext: str) -> str | None:
    """Return the format name for a file extension (no dot, case insensitive), or None."""
    return _EXTENSION_MAP.get(ext.lower())


def get_reader_info(fmt: str) -> ReaderInfo | None:
    """Return information about a format given its name or an alias, or None."""
    entry = _entry(fmt)
    return entry.info if entry is not None else None


def get_reader_formats() -> dict[str, str]:
    """Return a map of reader format name to display name."""
    return {entry.info.name: entry.info.display for entry in _READER_ENTRIES}


def get_reader_formats_with_aliases() -> dict[str, tuple[str, str, list[str]]]:
    """Return a map of format name to (display name, extension, other aliases)."""
    return {
        entry.info.name: (
            entry.info.display,
            entry.info.extension,
            [alias for alias in entry.info.aliases if alias != entry.info.name],
        )
        for entry in _READER_ENTRIES
    }


def read_formatted_basis_str(basis_str: str, fmt: str) -> MinimalBasis:
    """Read a basis set from text in the given format."""
    entry = _entry(fmt)
    if entry is None:
        raise ValueError(f"Unknown reader format: {fmt}")
    return entry.function(basis_str)
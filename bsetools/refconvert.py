"""Conversion of basis set references to BibTeX, RIS, EndNote, text and JSON."""

from __future__ import annotations

import json
import textwrap
from dataclasses import dataclass
from typing import Mapping, Sequence

from bsetools.model import ElementReferences, ReferenceEntry, compact_elements
from bsetools.references import reference_text

LIB_REFS = ("pritchard2019a", "feller1996a", "schuchardt2007a")

LIB_REFS_DESC = (
    "If you downloaded data from the basis set\n"
    "exchange or used the basis set exchange python library, please cite:\n"
)


@dataclass(frozen=True)
class _ConverterFormat:
    display: str
    extension: str
    comment: str


_CONVERTERS = {
    "txt": _ConverterFormat("Plain Text", ".txt", ""),
    "bib": _ConverterFormat("BibTeX", ".bib", "%"),
    "ris": _ConverterFormat("RIS", ".RIS", "#"),
    "endnote": _ConverterFormat("EndNote", ".enw", "#"),
    "json": _ConverterFormat("JSON", ".json", ""),
}

_RIS_TYPES = {
    "article": "Journal Article",
    "misc": "Generic",
    "unpublished": "Unpublished",
    "incollection": "Book",
    "phdthesis": "Thesis",
    "dataset": "Dataset",
    "techreport": "Report",
}

_RIS_TAGS = {"year": "PY", "journal": "JO", "volume": "VL", "pages": "SP", "title": "T1", "doi": "DO"}

_ENDNOTE_TYPES = {
    "article": "Journal Article",
    "misc": "Generic",
    "unpublished": "Unpublished",
    "incollection": "Book",
    "phdthesis": "Thesis",
    "techreport": "Report",
    "dataset": "Data Set",
}

_ENDNOTE_TAGS = {"year": "%D", "journal": "%J", "volume": "%V", "pages": "%P", "title": "%T", "doi": "%R"}


def write_bib(key: str, ref_entry: ReferenceEntry) -> str:
    """Render a reference as a BibTeX entry."""
    lines = []
    for name, values in ref_entry.fields.items():
        if name == "authors":
            lines.append(f"    author = {{{' and '.join(values)}}}")
        elif name == "editors":
            lines.append(f"    editor = {{{' and '.join(values)}}}")
        elif values:
            lines.append(f"    {name} = {{{values[0]}}}")
    return f"@{ref_entry.entry_type}{{{key},\n" + ",\n".join(lines) + "\n}"


def _write_tagged(
    key: str,
    ref_entry: ReferenceEntry,
    types: Mapping[str, str],
    type_tag: str,
    author_tag: str,
    tags: Mapping[str, str],
    other_tag: str,
) -> str:
    out = [f"#{ref_entry.entry_type} {key}\n", f"{type_tag} {types.get(ref_entry.entry_type, 'Generic')} \n"]
    for name, values in ref_entry.fields.items():
        if name == "authors":
            out.extend(f"{author_tag} {author}\n" for author in values)
        elif not values:
            continue
        elif name in tags:
            out.append(f"{tags[name]} {values[0]}\n")
        else:
            out.append(f"{other_tag} {name}:{values[0]}\n")
    return "".join(out)


def write_ris(key: str, ref_entry: ReferenceEntry) -> str:
    """Render a reference in RIS tagged format."""
    return _write_tagged(key, ref_entry, _RIS_TYPES, "TY", "AU", _RIS_TAGS, "N1")


def write_endnote(key: str, ref_entry: ReferenceEntry) -> str:
    """Render a reference in EndNote (.enw) tagged format."""
    return _write_tagged(key, ref_entry, _ENDNOTE_TYPES, "%0", "%A", _ENDNOTE_TAGS, "%Z")


def get_library_citation(all_ref_data: Mapping[str, ReferenceEntry]) -> tuple[str, dict[str, ReferenceEntry]]:
    """Return the description and entries to cite when using the library data."""
    return LIB_REFS_DESC, {key: all_ref_data[key] for key in LIB_REFS if key in all_ref_data}


def get_reference_formats() -> dict[str, str]:
    """Return a map of reference format name to display name."""
    return {name: fmt.display for name, fmt in _CONVERTERS.items()}


def _lookup(fmt: str) -> tuple[str, _ConverterFormat]:
    name = fmt.lower()
    if name not in _CONVERTERS:
        raise ValueError(f"Unknown reference format '{name}'")
    return name, _CONVERTERS[name]


def get_reference_format_extension(fmt: str) -> str:
    """Return the recommended file extension for a reference format (case insensitive)."""
    return _lookup(fmt)[1].extension


_WRITERS = {"bib": write_bib, "ris": write_ris, "endnote": write_endnote, "txt": reference_text}


def convert_references(
    ref_data: Sequence[ElementReferences],
    fmt: str,
    all_ref_data: Mapping[str, ReferenceEntry],
) -> str:
    """Convert compacted basis set references into the given output format."""
    name, converter = _lookup(fmt)
    if name == "json":
        return json.dumps([group.to_dict() for group in ref_data], indent=2, ensure_ascii=False)

    writer = _WRITERS[name]
    comment = converter.comment
    comment_line = f"{comment * 80}\n" if comment else ""
    out: list[str] = []

    if comment:
        description, lib_citations = get_library_citation(all_ref_data)
        out.append(comment_line)
        out.append(textwrap.indent(description, f"{comment} "))
        out.append(comment_line)
        for key, entry in lib_citations.items():
            out.append(writer(key, entry))
            out.append("\n\n")
        out.append(comment_line)
        out.append(f"{comment} References for the basis set\n")
        out.append(comment_line)

    unique_refs: dict[str, ReferenceEntry] = {}
    for group in ref_data:
        if comment:
            out.append(f"{comment} {compact_elements(group.elements)}\n")
        for info in group.reference_info:
            if comment:
                out.append(f"{comment}     {info.reference_description}\n")
                if info.reference_data:
                    out.append(f"{comment}         {' '.join(info.reference_data)}\n{comment}\n")
                else:
                    out.append(f"{comment}         (...no reference...)\n{comment}\n")
            unique_refs.update(info.reference_data)

    out.append("\n\n")
    for key in sorted(unique_refs):
        out.append(writer(key, unique_refs[key]))
        out.append("\n\n")
    return "".join(out)
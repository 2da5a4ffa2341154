"""Grouping of basis set references by element and plain text formatting of entries."""

from __future__ import annotations

import textwrap
from typing import Mapping

from bsetools.model import ElementReferences, ReferenceEntry, ReferenceInfo

_INDENT = " " * 8
_WIDTH = 70


def _element_number(key: str) -> int:
    try:
        return int(key)
    except ValueError:
        return 0


def _same_references(group: ElementReferences, element_refs) -> bool:
    if len(group.reference_info) != len(element_refs):
        return False
    return all(
        info.reference_description == ref.reference_description
        and list(info.reference_data) == list(ref.reference_keys)
        for info, ref in zip(group.reference_info, element_refs)
    )


def compact_references(basis, ref_data: Mapping[str, ReferenceEntry]) -> list[ElementReferences]:
    """Group the elements of a basis set that share the same reference information.

    Elements are visited in order of atomic number; each group resolves its
    reference keys against ``ref_data``, dropping keys that are not present.
    """
    groups: list[ElementReferences] = []
    for key, element in sorted(basis.elements.items(), key=lambda item: _element_number(item[0])):
        z = _element_number(key)
        element_refs = element.references
        group = next((g for g in groups if _same_references(g, element_refs)), None)
        if group is not None:
            group.elements.append(z)
            continue
        info = [
            ReferenceInfo(
                reference_description=ref.reference_description,
                reference_data={k: ref_data[k] for k in ref.reference_keys if k in ref_data},
            )
            for ref in element_refs
        ]
        groups.append(ElementReferences(reference_info=info, elements=[z]))
    return groups


def _wrap(text: str) -> str:
    return "\n".join(textwrap.wrap(text, width=_WIDTH, subsequent_indent=_INDENT))


def _body(entry: ReferenceEntry) -> list[str]:
    authors = _wrap(", ".join(entry.get_field("authors")))

    def joined(name: str, sep: str = "") -> str:
        return sep.join(entry.get_field(name))

    title = _wrap(joined("title"))
    doi = entry.get_field_opt("doi")
    kind = entry.entry_type

    if kind == "unpublished":
        parts = [authors]
        opt_title = entry.get_field_opt("title")
        if opt_title is not None:
            parts.append(_wrap(opt_title))
        year = entry.get_field_opt("year")
        parts.append(f"{year}, unpublished" if year is not None else "unpublished")
        return parts

    if kind == "article":
        parts = [
            authors,
            title,
            f"{joined('journal')} {joined('volume')}, {joined('pages')} ({joined('year')})",
        ]
    elif kind == "incollection":
        parts = [authors, title, _wrap(f"in '{joined('booktitle')}'")]
        if entry.get_field("editors"):
            parts.append(_wrap(f"ed. {joined('editors', ', ')}"))
        series = entry.get_field_opt("series")
        if series is not None:
            parts.append(f"{series} {joined('volume')}, {joined('pages')} ({joined('year')})")
    elif kind == "phdthesis":
        thesis_type = entry.get_field_opt("type") or "Ph.D. Thesis"
        return [authors, title, f"{thesis_type}, {joined('school')}"]
    elif kind == "techreport":
        report_type = entry.get_field_opt("type") or "Technical Report"
        number = entry.get_field_opt("number")
        report = f" {report_type} {number}" if number is not None else f" {report_type}"
        parts = [authors, title, f"'{joined('institution')}'", f"{report}, {joined('year')}"]
    elif kind == "misc":
        parts = [authors, title]
        year = entry.get_field_opt("year")
        if year is not None:
            parts.append(year)
    elif kind == "dataset":
        parts = [authors, title, f"{joined('publisher')} ({joined('year')})"]
    else:
        return [authors, title]

    if doi is not None:
        parts.append(doi)
    return parts


def reference_text(key: str, ref_entry: ReferenceEntry) -> str:
    """Render a reference as plain text: the key, then indented details."""
    parts = _body(ref_entry)
    note = ref_entry.get_field_opt("note")
    if note is not None:
        parts.append(_wrap(note))
    text = "\n".join(parts)
    indented = "\n".join(f"    {line}" for line in text.splitlines())
    return f"{key}\n{indented}"
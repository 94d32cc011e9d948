"""Single-pass lexer for component insertion markers.

An insertion marker is an HTML comment naming a component file::

    <!-- components/buttons/button-primary.php -->

The grammar is strict: ``<!-- `` (one space), ``components/``, a path without
whitespace, at least one whitespace character, then ``-->``. Text that does
not fit the grammar (``<!-- components/ -->``, ``<!--components/x.php -->``)
is plain text and passes through untouched.

A resolved marker is replaced by a ``get_template_part()`` call. An
unresolved marker is dropped together with the whitespace around it; when a
newline follows it, the whitespace run collapses into a single newline.
"""

from __future__ import annotations

import posixpath
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

MARKER_OPEN = "<!-- components/"
MARKER_CLOSE = "-->"
COMPONENTS_PREFIX = "components"


@dataclass(frozen=True)
class IncludeDirective:
    """A ``get_template_part( slug, name )`` call."""

    slug: str
    name: str

    @property
    def namespace(self) -> str:
        """Slug relative to the components directory ('' for root parts)."""
        if self.slug == COMPONENTS_PREFIX:
            return ""
        prefix = COMPONENTS_PREFIX + "/"
        if self.slug.startswith(prefix):
            return self.slug[len(prefix):]
        return self.slug

    def render(self) -> str:
        return f"<?php get_template_part( '{self.slug}', '{self.name}' ); ?>"


@dataclass(frozen=True)
class Marker:
    """An insertion marker found in source text.

    Attributes:
        raw: The full marker text as it appears in the source.
        path: Path after ``components/`` (e.g. 'nav/nav-main.php').
    """

    raw: str
    path: str

    @property
    def component(self) -> str:
        """Library-relative component path, e.g. 'components/header.php'."""
        return f"{COMPONENTS_PREFIX}/{self.path}"

    def directive(self) -> IncludeDirective:
        """Compute the include directive that replaces this marker.

        A hyphen-free file name gives (directory, name). Otherwise the first
        hyphen segment extends the directory and the remaining segments,
        rejoined with hyphens, form the part name.
        """
        component = self.component
        directory = posixpath.dirname(component)
        template = posixpath.basename(component)
        if template.endswith(".php"):
            template = template[: -len(".php")]
        parts = template.split("-")
        if len(parts) == 1:
            return IncludeDirective(directory, parts[0])
        return IncludeDirective(f"{directory}/{parts[0]}", "-".join(parts[1:]))


Token = Union[str, Marker]


def _match_marker(text: str, start: int) -> tuple[Marker, int] | None:
    """Try to read a marker at ``start`` (which holds MARKER_OPEN)."""
    pos = start + len(MARKER_OPEN)
    length = len(text)

    path_end = pos
    while path_end < length and not text[path_end].isspace():
        path_end += 1
    if path_end == pos:
        return None

    ws_end = path_end
    while ws_end < length and text[ws_end].isspace():
        ws_end += 1
    if ws_end == path_end:
        return None

    if not text.startswith(MARKER_CLOSE, ws_end):
        return None

    end = ws_end + len(MARKER_CLOSE)
    return Marker(raw=text[start:end], path=text[pos:path_end]), end


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into plain-text strings and :class:`Marker` tokens."""
    tokens: list[Token] = []
    text_start = 0
    search_from = 0

    while True:
        start = text.find(MARKER_OPEN, search_from)
        if start == -1:
            break
        matched = _match_marker(text, start)
        if matched is None:
            search_from = start + 1
            continue
        marker, end = matched
        if start > text_start:
            tokens.append(text[text_start:start])
        tokens.append(marker)
        text_start = search_from = end

    if text_start < len(text):
        tokens.append(text[text_start:])
    return tokens


def find_markers(text: str) -> list[Marker]:
    """Return the markers of ``text`` in order of appearance."""
    return [token for token in tokenize(text) if isinstance(token, Marker)]


def _leading_whitespace(text: str) -> int:
    end = 0
    while end < len(text) and text[end].isspace():
        end += 1
    return end


def rewrite_markers(
    text: str,
    resolve: Callable[[Marker], IncludeDirective | None],
) -> str:
    """Replace or strip every marker of ``text``.

    Args:
        text: Source text
        resolve: Returns the directive for a marker, or None to strip it

    Returns:
        The rewritten text
    """
    out: list[str] = []
    # Output before this index is never eaten by a later strip.
    floor = 0
    after_strip = False

    for token in tokenize(text):
        if isinstance(token, str):
            if after_strip:
                whitespace = token[:_leading_whitespace(token)]
                newline = whitespace.rfind("\n")
                if newline != -1:
                    out.append("\n")
                    floor += 1
                    token = token[newline + 1:]
                after_strip = False
            out.append(token)
            continue

        after_strip = False
        directive = resolve(token)
        if directive is not None:
            out.append(directive.render())
            continue

        produced = "".join(out)
        kept = produced[:floor] + produced[floor:].rstrip()
        out = [kept]
        floor = len(kept)
        after_strip = True

    return "".join(out)

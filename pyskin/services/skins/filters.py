"""
Builtin filters
---------------
<% page.title | lowercase %>
<% page.body | strip_tags | truncate limit=80 clipping="..." %>
<% page.tags | join separator=", " | default "none" %>

Every filter receives the text produced so far (returned value plus
anything the macro or a previous filter wrote) and returns the new value.
Unknown filters pass the value through unchanged.

    lowercase uppercase capitalize titleize trim
    strip_tags escape_html escape_xml escape_url linebreak_to_html
    truncate{limit, clipping}  replace{old, new}  prefix  suffix
    default  join{separator}  format
"""

from __future__ import annotations

import html
import logging
import re
from urllib.parse import quote

from .registry import HandlerRegistry

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")
_LINEBREAK_RE = re.compile(r"\r\n|\r|\n")


def _param(tag, renderer, context, name: str, index: int | None = None, default=None):
    value = renderer.evaluate_parameter(tag.get_parameter(name, index), context, f"{tag.name}:{name}")
    return default if value is None else value


def _text(value) -> str:
    return value if isinstance(value, str) else str(value)


def _number(value):
    """Numeric strings become int or float; anything else is returned as is."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    for convert in (int, float):
        try:
            return convert(text)
        except ValueError:
            continue
    return value


def register(registry: HandlerRegistry) -> None:

    # ── Case ──────────────────────────────────────────────────────────────

    @registry.filter("lowercase")
    def lowercase_filter(ns, value, tag, renderer, context):
        return _text(value).lower()

    @registry.filter("uppercase")
    def uppercase_filter(ns, value, tag, renderer, context):
        return _text(value).upper()

    @registry.filter("capitalize")
    def capitalize_filter(ns, value, tag, renderer, context):
        text = _text(value)
        return text[:1].upper() + text[1:]

    @registry.filter("titleize")
    def titleize_filter(ns, value, tag, renderer, context):
        return " ".join(w[:1].upper() + w[1:].lower() for w in _text(value).split(" "))

    @registry.filter("trim")
    def trim_filter(ns, value, tag, renderer, context):
        return _text(value).strip()

    # ── Markup ────────────────────────────────────────────────────────────

    @registry.filter("strip_tags")
    def strip_tags_filter(ns, value, tag, renderer, context):
        return _TAG_RE.sub("", _text(value))

    @registry.filter("escape_html")
    def escape_html_filter(ns, value, tag, renderer, context):
        return html.escape(_text(value), quote=False)

    @registry.filter("escape_xml")
    def escape_xml_filter(ns, value, tag, renderer, context):
        return html.escape(_text(value), quote=True).replace("&#x27;", "&apos;")

    @registry.filter("escape_url")
    def escape_url_filter(ns, value, tag, renderer, context):
        return quote(_text(value), safe="")

    @registry.filter("linebreak_to_html")
    def linebreak_to_html_filter(ns, value, tag, renderer, context):
        return _LINEBREAK_RE.sub("<br />\n", _text(value))

    # ── Shaping ───────────────────────────────────────────────────────────

    @registry.filter("truncate")
    def truncate_filter(ns, value, tag, renderer, context):
        text = _text(value)
        limit = _number(_param(tag, renderer, context, "limit", 0, default=len(text)))
        try:
            limit = max(int(limit), 0)
        except (TypeError, ValueError, OverflowError):
            logger.warning("truncate: invalid limit %r in %s", limit, tag)
            return value
        clipping = _text(_param(tag, renderer, context, "clipping", 1, default=""))
        if len(text) <= limit:
            return text
        return text[:limit] + clipping

    @registry.filter("replace")
    def replace_filter(ns, value, tag, renderer, context):
        old = _param(tag, renderer, context, "old", 0)
        new = _param(tag, renderer, context, "new", 1, default="")
        if not old:
            return value
        return _text(value).replace(_text(old), _text(new))

    @registry.filter("prefix")
    def prefix_filter(ns, value, tag, renderer, context):
        if value == "":
            return value
        return _text(_param(tag, renderer, context, "text", 0, default="")) + _text(value)

    @registry.filter("suffix")
    def suffix_filter(ns, value, tag, renderer, context):
        if value == "":
            return value
        return _text(value) + _text(_param(tag, renderer, context, "text", 0, default=""))

    @registry.filter("default")
    def default_filter(ns, value, tag, renderer, context):
        if value == "":
            return _param(tag, renderer, context, "text", 0, default="")
        return value

    @registry.filter("join")
    def join_filter(ns, value, tag, renderer, context):
        separator = _text(_param(tag, renderer, context, "separator", 0, default=", "))
        if isinstance(value, (list, tuple, set)):
            return separator.join(_text(v) for v in value)
        return value

    @registry.filter("format")
    def format_filter(ns, value, tag, renderer, context):
        spec = _param(tag, renderer, context, "spec", 0)
        if spec is None or value == "":
            return value
        for candidate in (value, _number(value)):
            try:
                return format(candidate, _text(spec))
            except (TypeError, ValueError):
                continue
        logger.warning("format: cannot apply %r to %r", spec, value)
        return value

"""Link, image and reference definition rules."""
import re
from typing import Generator

from ..document import Document, InlineSpan, ReferenceDefinition, normalize_label
from ..models import Fix, RuleConfig, Violation
from .common import github_slug

HTML_ID_RE = re.compile(r'\b(?:id|name)\s*=\s*["\']?([^"\'\s>]+)["\']?', re.IGNORECASE)
IMG_TAG_RE = re.compile(r'<img\b[^>]*>', re.IGNORECASE)
ALT_ATTRIBUTE_RE = re.compile(r'\balt\s*=', re.IGNORECASE)
LINE_FRAGMENT_RE = re.compile(r'^L\d+(?:C\d+)?(?:-L\d+(?:C\d+)?)?$')

LINK_STYLES = ("autolink", "inline", "full", "collapsed", "shortcut")

NON_DESCRIPTIVE_TEXTS = {
    "click here", "click", "here", "link", "more", "read more", "learn more",
    "this", "this link", "page", "this page", "article", "this article",
    "go here", "go", "details", "more details", "info", "more info",
    "more information", "see here", "see more", "full article",
    "continue reading", "continue", "read", "edit", "source", "view",
    "view source", "download", "download here",
}


def _destination(doc: Document, span: InlineSpan):
    """Resolve the destination of a link or image, following references."""
    if span.is_reference:
        definition = doc.definitions.get(normalize_label(span.label or ""))
        return definition.destination if definition else None
    return span.destination


def no_empty_links(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD042 - links need a destination other than ``#``."""
    for span in doc.links():
        if span.style == "autolink":
            continue
        destination = _destination(doc, span)
        if destination is None or destination.strip() in ("", "#"):
            yield Violation(
                "MD042",
                f'No empty links [Context: "[{span.text}]"]',
                span.line,
                span.column_start,
                span.column_end,
            )


def no_alt_text(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD045 - images should have alternate text, including ``<img>`` elements."""
    for span in doc.images():
        if not span.text.strip():
            yield Violation(
                "MD045",
                "Images should have alternate text (alt text)",
                span.line,
                span.column_start,
                span.column_end,
            )
    for line in doc.lines:
        if not doc.is_prose(line.number) and line.number not in doc.html_lines:
            continue
        for match in IMG_TAG_RE.finditer(line.text):
            tag = match.group()
            if ALT_ATTRIBUTE_RE.search(tag) or 'aria-hidden="true"' in tag.lower():
                continue
            yield Violation(
                "MD045",
                "Images should have alternate text (alt text)",
                line.number,
                match.start(),
                match.end(),
            )


def _anchors(doc: Document) -> set[str]:
    anchors = {"top"}
    counts: dict[str, int] = {}
    for heading in doc.headings():
        slug = github_slug(heading.text)
        count = counts.get(slug, 0)
        counts[slug] = count + 1
        anchors.add(slug if count == 0 else f"{slug}-{count}")
    for line in doc.lines:
        if "=" not in line.text or line.number in doc.code_lines:
            continue
        anchors.update(m.group(1) for m in HTML_ID_RE.finditer(line.text))
    return anchors


def link_fragments(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD051 - link fragments should match a heading or an HTML anchor.

    Heading anchors are generated the way GitHub does, with ``-1``, ``-2``
    suffixes for repeated headings. Comparison ignores case, and GitHub
    line fragments such as ``#L20`` are accepted.
    """
    anchors = None
    for span in doc.links():
        destination = _destination(doc, span)
        if not destination or not destination.startswith("#"):
            continue
        fragment = destination[1:]
        if not fragment or LINE_FRAGMENT_RE.match(fragment):
            continue
        if anchors is None:
            anchors = {a.lower() for a in _anchors(doc)}
        if fragment.lower() in anchors:
            continue
        yield Violation(
            "MD051",
            f'Link fragments should be valid [Context: "#{fragment}"]',
            span.line,
            span.column_start,
            span.column_end,
        )


def reference_links_images(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD052 - reference links and images should use a defined label.

    Shortcut references are only checked with ``shortcut_syntax``, since
    ``[text]`` is often just bracketed prose.
    """
    shortcut_syntax = config.get_bool("shortcut_syntax", False)
    spans = doc.links(include_undefined=True) + doc.images(include_undefined=True)
    for span in sorted(spans, key=lambda s: (s.line, s.column_start)):
        if span.defined or not span.is_reference:
            continue
        if span.style == "shortcut" and not shortcut_syntax:
            continue
        yield Violation(
            "MD052",
            f'Reference links and images should use a label that is defined '
            f'[Missing link or image reference definition: "{normalize_label(span.label or "")}"]',
            span.line,
            span.column_start,
            span.column_end,
        )


def _ignored(label: str, patterns: list[str]) -> bool:
    for pattern in patterns:
        if pattern.lower() == label:
            return True
        if len(pattern) > 2 and pattern.startswith("/") and pattern.endswith("/"):
            try:
                if re.search(pattern[1:-1], label):
                    return True
            except re.error:
                continue
    return False


def link_image_reference_definitions(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD053 - reference definitions should be used, and defined once.

    The fix removes the definition line. ``ignored_definitions`` defaults
    to ``//``, the label commonly used for comments.
    """
    ignored = config.get_list("ignored_definitions", ["//"])
    used = {
        normalize_label(span.label or "")
        for span in doc.links(include_undefined=True) + doc.images(include_undefined=True)
        if span.is_reference
    }
    seen = set()
    for definition in doc.blocks_of(ReferenceDefinition):
        label = normalize_label(definition.label)
        text = doc.line_text(definition.start_line)
        if _ignored(label, ignored):
            continue
        if label in seen:
            reason = "Duplicate link or image reference definition"
        elif label not in used:
            reason = "Unused link or image reference definition"
        else:
            seen.add(label)
            continue
        seen.add(label)
        yield Violation(
            "MD053",
            f'Link and image reference definitions should be needed [{reason}: "{label}"]',
            definition.start_line,
            0,
            len(text),
            fix=Fix(0, len(text) + 1, ""),
        )


def link_image_style(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """
    MD054 - restrict which link and image styles may be used.

    Each style can be turned off by name, or via ``style: no_<name>``.
    With ``url_inline`` off, ``[https://x](https://x)`` is rewritten as an
    autolink.
    """
    allowed = {name: config.get_bool(name, True) for name in LINK_STYLES}
    url_inline = config.get_bool("url_inline", True)
    style = config.get_str("style", "all")
    if style.startswith("no_"):
        if style == "no_url_inline":
            url_inline = False
        elif style[3:] in allowed:
            allowed[style[3:]] = False

    for span in sorted(doc.links() + doc.images(), key=lambda s: (s.line, s.column_start)):
        if not allowed.get(span.style, True):
            yield Violation(
                "MD054",
                f"Link and image style [Disallowed: {span.style}]",
                span.line,
                span.column_start,
                span.column_end,
            )
        elif (
            not url_inline
            and span.style == "inline"
            and span.destination
            and span.text == span.destination
            and span.text_start > span.column_start
            and doc.line_text(span.line)[span.column_start] != "!"
            and allowed["autolink"]
        ):
            yield Violation(
                "MD054",
                "Link and image style [Disallowed: url_inline]",
                span.line,
                span.column_start,
                span.column_end,
                fix=Fix(span.column_start, span.column_end, f"<{span.destination}>"),
            )


def descriptive_link_text(doc: Document, config: RuleConfig) -> Generator[Violation, None, None]:
    """MD059 - link text should describe its target; generic phrases and raw URLs are flagged."""
    allowed = {t.lower() for t in config.get_list("allowed_texts")}
    for span in doc.links():
        if span.style == "autolink":
            continue
        text = " ".join(span.text.split())
        if not text or text.lower() in allowed:
            continue
        lowered = text.lower().rstrip(".!")
        if lowered in NON_DESCRIPTIVE_TEXTS or re.match(r'^https?://', lowered):
            yield Violation(
                "MD059",
                f'Link text should be descriptive [Context: "{text}"]',
                span.line,
                span.column_start,
                span.column_end,
            )

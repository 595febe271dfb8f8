"""Markdown lint rules, one generator function per rule."""
from . import blocks, code, headings, inline, links, lists, tables, whitespace

# Registry of all available rules
RULES = {
    # Headings
    "MD001": headings.heading_increment,
    "MD002": headings.first_heading_h1,
    "MD003": headings.heading_style,
    "MD018": headings.no_missing_space_atx,
    "MD019": headings.no_multiple_space_atx,
    "MD020": headings.no_missing_space_closed_atx,
    "MD021": headings.no_multiple_space_closed_atx,
    "MD022": headings.blanks_around_headings,
    "MD023": headings.heading_start_left,
    "MD024": headings.no_duplicate_heading,
    "MD025": headings.single_title,
    "MD026": headings.no_trailing_punctuation,
    "MD041": headings.first_line_heading,
    "MD043": headings.required_headings,

    # Lists
    "MD004": lists.ul_style,
    "MD005": lists.list_indent,
    "MD006": lists.ul_start_left,
    "MD007": lists.ul_indent,
    "MD029": lists.ol_prefix,
    "MD030": lists.list_marker_space,
    "MD032": lists.blanks_around_lists,

    # Whitespace
    "MD009": whitespace.no_trailing_spaces,
    "MD010": whitespace.no_hard_tabs,
    "MD012": whitespace.no_multiple_blanks,
    "MD013": whitespace.line_length,
    "MD047": whitespace.single_trailing_newline,

    # Code
    "MD014": code.commands_show_output,
    "MD031": code.blanks_around_fences,
    "MD040": code.fenced_code_language,
    "MD046": code.code_block_style,
    "MD048": code.code_fence_style,

    # Blockquotes, rules and paragraphs
    "MD027": blocks.no_multiple_space_blockquote,
    "MD028": blocks.no_blanks_blockquote,
    "MD035": blocks.hr_style,
    "MD036": blocks.no_emphasis_as_heading,

    # Inline
    "MD011": inline.no_reversed_links,
    "MD033": inline.no_inline_html,
    "MD034": inline.no_bare_urls,
    "MD037": inline.no_space_in_emphasis,
    "MD038": inline.no_space_in_code,
    "MD039": inline.no_space_in_links,
    "MD044": inline.proper_names,
    "MD049": inline.emphasis_style,
    "MD050": inline.strong_style,

    # Links and references
    "MD042": links.no_empty_links,
    "MD045": links.no_alt_text,
    "MD051": links.link_fragments,
    "MD052": links.reference_links_images,
    "MD053": links.link_image_reference_definitions,
    "MD054": links.link_image_style,
    "MD059": links.descriptive_link_text,

    # Tables
    "MD055": tables.table_pipe_style,
    "MD056": tables.table_column_count,
    "MD058": tables.blanks_around_tables,
    "MD060": tables.table_column_style,
}

# Rules that can attach a fix to their violations
FIXABLE_RULES = {
    "MD003", "MD004", "MD005", "MD006", "MD007", "MD009", "MD010", "MD011",
    "MD012", "MD014", "MD018", "MD019", "MD020", "MD021", "MD022", "MD023",
    "MD026", "MD027", "MD028", "MD029", "MD030", "MD031", "MD032", "MD034",
    "MD035", "MD037", "MD038", "MD039", "MD040", "MD044", "MD047", "MD048",
    "MD049", "MD050", "MD053", "MD054", "MD055", "MD056", "MD058",
}

__all__ = [
    "RULES", "FIXABLE_RULES",
    "blocks", "code", "headings", "inline", "links", "lists", "tables", "whitespace",
]

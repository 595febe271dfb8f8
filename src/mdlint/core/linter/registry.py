"""Rule metadata registry - IDs, names, aliases, defaults."""
from typing import Optional

from .models import RuleInfo

STYLE_CONSISTENT = "consistent"


def _info(rule_id: str, name: str, description: str, **kwargs) -> RuleInfo:
    return RuleInfo(rule_id, name, (name.replace("-", "_"),), description, **kwargs)


RULE_INFOS: tuple[RuleInfo, ...] = (
    _info("MD001", "heading-increment",
          "Heading levels should only increment by one level at a time"),
    _info("MD002", "first-heading-h1", "First heading should be a top-level heading",
          enabled_by_default=False, parameter="level"),
    _info("MD003", "heading-style", "Heading style should be consistent",
          parameter="style",
          choices=(STYLE_CONSISTENT, "atx", "atx_closed", "setext",
                   "setext_with_atx", "setext_with_atx_closed")),
    _info("MD004", "ul-style", "Unordered list style should be consistent",
          parameter="style",
          choices=(STYLE_CONSISTENT, "asterisk", "plus", "dash", "sublist")),
    _info("MD005", "list-indent",
          "Inconsistent indentation for list items at the same level"),
    _info("MD006", "ul-start-left",
          "Consider starting bulleted lists at the beginning of the line",
          enabled_by_default=False),
    _info("MD007", "ul-indent", "Unordered list indentation", parameter="indent"),
    _info("MD009", "no-trailing-spaces", "Trailing spaces", parameter="br_spaces"),
    _info("MD010", "no-hard-tabs", "Hard tabs", parameter="spaces_per_tab"),
    _info("MD011", "no-reversed-links", "Reversed link syntax"),
    _info("MD012", "no-multiple-blanks", "Multiple consecutive blank lines",
          parameter="maximum"),
    _info("MD013", "line-length", "Line length", parameter="line_length"),
    _info("MD014", "commands-show-output",
          "Dollar signs used before commands without showing output"),
    _info("MD018", "no-missing-space-atx", "No space after hash on atx style heading"),
    _info("MD019", "no-multiple-space-atx",
          "Multiple spaces after hash on atx style heading"),
    _info("MD020", "no-missing-space-closed-atx",
          "No space inside hashes on closed atx style heading"),
    _info("MD021", "no-multiple-space-closed-atx",
          "Multiple spaces inside hashes on closed atx style heading"),
    _info("MD022", "blanks-around-headings",
          "Headings should be surrounded by blank lines", parameter="lines_above"),
    _info("MD023", "heading-start-left",
          "Headings must start at the beginning of the line"),
    _info("MD024", "no-duplicate-heading", "Multiple headings with the same content"),
    _info("MD025", "single-title", "Multiple top-level headings in the same document",
          parameter="level"),
    _info("MD026", "no-trailing-punctuation", "Trailing punctuation in heading",
          parameter="punctuation"),
    _info("MD027", "no-multiple-space-blockquote",
          "Multiple spaces after blockquote symbol"),
    _info("MD028", "no-blanks-blockquote", "Blank line inside blockquote"),
    _info("MD029", "ol-prefix", "Ordered list item prefix",
          parameter="style", choices=("one_or_ordered", "one", "ordered", "zero")),
    _info("MD030", "list-marker-space", "Spaces after list markers",
          parameter="ul_single"),
    _info("MD031", "blanks-around-fences",
          "Fenced code blocks should be surrounded by blank lines"),
    _info("MD032", "blanks-around-lists", "Lists should be surrounded by blank lines"),
    _info("MD033", "no-inline-html", "Inline HTML", parameter="allowed_elements"),
    _info("MD034", "no-bare-urls", "Bare URL used"),
    _info("MD035", "hr-style", "Horizontal rule style", parameter="style"),
    _info("MD036", "no-emphasis-as-heading", "Emphasis used instead of a heading",
          parameter="punctuation"),
    _info("MD037", "no-space-in-emphasis", "Spaces inside emphasis markers"),
    _info("MD038", "no-space-in-code", "Spaces inside code span elements"),
    _info("MD039", "no-space-in-links", "Spaces inside link text"),
    _info("MD040", "fenced-code-language",
          "Fenced code blocks should have a language specified",
          parameter="allowed_languages"),
    _info("MD041", "first-line-heading",
          "First line in a file should be a top-level heading", parameter="level"),
    _info("MD042", "no-empty-links", "No empty links"),
    _info("MD043", "required-headings", "Required heading structure",
          enabled_by_default=False, parameter="headings"),
    _info("MD044", "proper-names", "Proper names should have the correct capitalization",
          enabled_by_default=False, parameter="names"),
    _info("MD045", "no-alt-text", "Images should have alternate text (alt text)"),
    _info("MD046", "code-block-style", "Code block style",
          parameter="style", choices=(STYLE_CONSISTENT, "fenced", "indented")),
    _info("MD047", "single-trailing-newline",
          "Files should end with a single newline character"),
    _info("MD048", "code-fence-style", "Code fence style",
          parameter="style", choices=(STYLE_CONSISTENT, "backtick", "tilde")),
    _info("MD049", "emphasis-style", "Emphasis style should be consistent",
          parameter="style", choices=(STYLE_CONSISTENT, "asterisk", "underscore")),
    _info("MD050", "strong-style", "Strong style should be consistent",
          parameter="style", choices=(STYLE_CONSISTENT, "asterisk", "underscore")),
    _info("MD051", "link-fragments", "Link fragments should be valid"),
    _info("MD052", "reference-links-images",
          "Reference links and images should use a label that is defined"),
    _info("MD053", "link-image-reference-definitions",
          "Link and image reference definitions should be needed",
          parameter="ignored_definitions"),
    _info("MD054", "link-image-style", "Link and image style",
          parameter="style",
          choices=("all", "no_autolink", "no_inline", "no_full", "no_collapsed",
                   "no_shortcut", "no_url_inline")),
    _info("MD055", "table-pipe-style", "Table pipe style",
          parameter="style",
          choices=(STYLE_CONSISTENT, "leading_and_trailing", "leading_only",
                   "trailing_only", "no_leading_or_trailing")),
    _info("MD056", "table-column-count", "Table column count"),
    _info("MD058", "blanks-around-tables", "Tables should be surrounded by blank lines"),
    _info("MD059", "descriptive-link-text", "Link text should be descriptive",
          parameter="allowed_texts"),
    _info("MD060", "table-column-style", "Table column style",
          parameter="style", choices=("any", "aligned", "compact", "tight")),
)

_BY_ID: dict[str, RuleInfo] = {info.id: info for info in RULE_INFOS}
_BY_KEY: dict[str, RuleInfo] = {}
for _rule in RULE_INFOS:
    _BY_KEY[_rule.name.replace("-", "_")] = _rule
    for _alias in _rule.aliases:
        _BY_KEY[_alias.lower().replace("-", "_")] = _rule


def get_rule_info(id_or_name: str) -> Optional[RuleInfo]:
    """
    Look up rule metadata by ID, kebab-case name or snake_case alias.

    Args:
        id_or_name: e.g. "MD009", "md009", "no-trailing-spaces", "no_trailing_spaces"

    Returns:
        RuleInfo, or None if no rule matches
    """
    if not id_or_name:
        return None
    key = id_or_name.strip()
    info = _BY_ID.get(key.upper())
    if info is not None:
        return info
    return _BY_KEY.get(key.lower().replace("-", "_"))


def resolve_rule_id(id_or_name: str) -> Optional[str]:
    info = get_rule_info(id_or_name)
    return info.id if info else None


def all_rules() -> list[RuleInfo]:
    return list(RULE_INFOS)

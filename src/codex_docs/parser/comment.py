import re

from codex_docs.models import Comment, Tag

UNDOCUMENT_COMMENT = Comment(kind="CommentBlock", value="* @_undocument")

_CODE_FENCE = re.compile(r"```[\s\S]*?```")
_BARE_TAG = re.compile(r"^[\t ]*(@\w+)$", re.MULTILINE)
_TAG_WITH_TEXT = re.compile(r"^[\t ]*(@\w+)[\t ](.*)", re.MULTILINE)

_SEPARATOR = "\\Z"
_TRUE = "\\TRUE"
_ESCAPED_AT = "\\ESCAPED_AT\\"


def get_comment_value(comment: Comment) -> str | None:
    """Return the comment text when it is a doc comment (``/** ... */``)."""
    if comment.kind != "CommentBlock":
        return None
    return comment.value if comment.value.startswith("*") else None


def parse_comment(comment: Comment) -> list[Tag]:
    """Split a doc comment into ordered tags.

    Leading text without a tag becomes ``@desc``; tags without text get an
    empty value. ``@`` inside fenced code blocks is not treated as a tag.
    """
    text = comment.value.replace("\r\n", "\n")
    text = re.sub(r"^[\t ]*", "", text, flags=re.MULTILINE)
    text = re.sub(r"^\*[\t ]?", "", text, count=1)
    text = re.sub(r"[\t ]\Z", "", text)
    text = re.sub(r"^\*[\t ]?", "", text, flags=re.MULTILINE)

    if not text.startswith("@"):
        text = f"@desc {text}"

    text = text.rstrip(" \t")
    text = _CODE_FENCE.sub(lambda match: match.group(0).replace("@", _ESCAPED_AT), text)
    text = _BARE_TAG.sub(lambda match: f"{match.group(1)} {_TRUE}", text)
    text = _TAG_WITH_TEXT.sub(lambda match: f"{_SEPARATOR}{match.group(1)}{_SEPARATOR}{match.group(2)}", text)

    lines = text.split(_SEPARATOR)
    tags: list[Tag] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("@"):
            tag_name = line
            next_line = lines[i + 1] if i + 1 < len(lines) else ""
            if next_line.startswith("@"):
                tag_value = ""
            else:
                tag_value = next_line
                i += 1
            tag_value = tag_value.replace(_TRUE, "", 1).replace(_ESCAPED_AT, "@")
            tag_value = re.sub(r"^\n", "", tag_value)
            tag_value = re.sub(r"\n+\Z", "", tag_value)
            tags.append(Tag(tag_name=tag_name, tag_value=tag_value))
        i += 1
    return tags


def parse_last_comment(comments: list[Comment]) -> list[Tag]:
    if not comments:
        return []
    return parse_comment(comments[-1])


def has_tag(tags: list[Tag], tag_name: str) -> bool:
    return any(tag.tag_name == tag_name for tag in tags)

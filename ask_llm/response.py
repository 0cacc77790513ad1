from dataclasses import dataclass
from typing import List, Optional, Sequence

from .errors import AmbiguousOrMissingCodeblock, TagNotFound

FENCE = "```"


def extract_codeblocks(text: str, extensions: Optional[Sequence[str]] = None) -> List[str]:
    """
    Extract the contents of fenced code blocks.

    Without extensions every fenced block is returned, with its first line
    (the language tag) dropped when the block spans several lines.

    With extensions, only blocks starting with one of them are returned, with
    the matched extension stripped. Longer extensions are tried first so that
    "python" wins over "py".

    Args:
        text: Free-form response text.
        extensions: Optional language tags to filter on (e.g. ["py", "python"]).

    Returns:
        List[str]: Trimmed block contents, in order of appearance.
    """
    # stable sort, longer first
    sorted_extensions = sorted(extensions, key=len, reverse=True) if extensions else None

    blocks = []
    for i, segment in enumerate(text.split(FENCE)):
        if i % 2 == 0:
            continue

        if not sorted_extensions:
            _, newline, rest = segment.partition("\n")
            blocks.append(rest.strip() if newline else segment.strip())
            continue

        for ext in sorted_extensions:
            if segment.startswith(ext):
                blocks.append(segment[len(ext):].strip())
                break

    return blocks


def extract_codeblock(text: str, extensions: Optional[Sequence[str]] = None) -> str:
    """
    Like extract_codeblocks(), but expects exactly one block.

    Raises:
        AmbiguousOrMissingCodeblock: If zero or more than one block was found.
    """
    blocks = extract_codeblocks(text, extensions)
    if len(blocks) != 1:
        raise AmbiguousOrMissingCodeblock(len(blocks))
    return blocks[0]


def extract_html_tag(text: str, tag_name: str) -> str:
    """
    Return the text between the first ``<tag_name>`` and the next ``</tag_name>``.

    Raises:
        TagNotFound: If either tag is missing.
    """
    opening_tag = f"<{tag_name}>"
    closing_tag = f"</{tag_name}>"

    _, found, from_start = text.partition(opening_tag)
    if not found:
        raise TagNotFound(tag_name, opening_tag)
    extracted, found, _ = from_start.partition(closing_tag)
    if not found:
        raise TagNotFound(tag_name, closing_tag)
    return extracted


@dataclass(frozen=True)
class Response:
    """
    Final result of one request.

    Attributes:
        text: Response text.
        cost_cents: Cost of the request. Exact for single-shot requests,
                    estimated from the word count for streamed ones.
    """
    text: str
    cost_cents: float

    def __str__(self) -> str:
        return f"Response: {self.text}\nCost (cents): {self.cost_cents}"

    def extract_codeblocks(self, extensions: Optional[Sequence[str]] = None) -> List[str]:
        return extract_codeblocks(self.text, extensions)

    def extract_codeblock(self, extensions: Optional[Sequence[str]] = None) -> str:
        return extract_codeblock(self.text, extensions)

    def extract_html_tag(self, tag_name: str) -> str:
        return extract_html_tag(self.text, tag_name)

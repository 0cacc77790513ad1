import pytest

from ask_llm.errors import AmbiguousOrMissingCodeblock, TagNotFound
from ask_llm.response import Response, extract_codeblock, extract_codeblocks, extract_html_tag


PY_RESPONSE = """Here you go:

```python
print("hello world")
```

Or shorter:

```py
print("hi")
```
"""


class TestExtractCodeblocks:

    def test_single_tagged_block(self):
        assert extract_codeblocks("```lang\ncontent\n```", ["lang"]) == ["content"]

    def test_no_filter_strips_language_line(self):
        assert extract_codeblocks(PY_RESPONSE) == ['print("hello world")', 'print("hi")']

    def test_no_filter_single_line_block(self):
        assert extract_codeblocks("Translation: ```Wie geht es dir?``` done") == ["Wie geht es dir?"]

    def test_empty_extensions_behaves_like_none(self):
        assert extract_codeblocks(PY_RESPONSE, []) == extract_codeblocks(PY_RESPONSE)

    def test_longest_extension_wins(self):
        """Unsorted ["py", "python"] must not strip only "py" from a python block."""
        blocks = extract_codeblocks(PY_RESPONSE, ["py", "python"])
        assert blocks == ['print("hello world")', 'print("hi")']
        assert not any(b.startswith("thon") for b in blocks)

    def test_non_matching_blocks_are_dropped(self):
        text = "```rust\nfn main() {}\n```\n```python\npass\n```"
        assert extract_codeblocks(text, ["python"]) == ["pass"]

    def test_no_fences(self):
        assert extract_codeblocks("plain text") == []

    def test_unterminated_fence(self):
        assert extract_codeblocks("```python\nx = 1") == ["x = 1"]


class TestExtractCodeblock:

    def test_exactly_one(self):
        assert extract_codeblock("before ```sh\nls -la\n``` after") == "ls -la"

    def test_none_found(self):
        with pytest.raises(AmbiguousOrMissingCodeblock) as exc_info:
            extract_codeblock("nothing here")
        assert exc_info.value.found == 0

    def test_several_found(self):
        with pytest.raises(AmbiguousOrMissingCodeblock) as exc_info:
            extract_codeblock(PY_RESPONSE)
        assert exc_info.value.found == 2

    def test_filter_narrows_to_one(self):
        text = "```rust\nfn main() {}\n```\n```python\npass\n```"
        assert extract_codeblock(text, ["rust"]) == "fn main() {}"


class TestExtractHtmlTag:

    def test_found(self):
        assert extract_html_tag("<a>hello</a>world", "a") == "hello"

    def test_first_occurrence(self):
        assert extract_html_tag("x<answer>42</answer><answer>43</answer>", "answer") == "42"

    def test_missing_closing_tag(self):
        with pytest.raises(TagNotFound) as exc_info:
            extract_html_tag("<a>hello", "a")
        assert exc_info.value.missing == "</a>"

    def test_missing_opening_tag(self):
        with pytest.raises(TagNotFound) as exc_info:
            extract_html_tag("hello</a>", "a")
        assert exc_info.value.missing == "<a>"

    def test_closing_before_opening(self):
        with pytest.raises(TagNotFound):
            extract_html_tag("</a>hello<a>", "a")


class TestResponse:

    def test_str(self):
        assert str(Response("hi", 0.5)) == "Response: hi\nCost (cents): 0.5"

    def test_methods_delegate(self):
        response = Response("<t>```js\nconsole.log(1)\n```</t>", 0.0)
        assert response.extract_codeblocks(["js"]) == ["console.log(1)"]
        assert response.extract_codeblock() == "console.log(1)"
        assert response.extract_html_tag("t") == "```js\nconsole.log(1)\n```"

"""Tests for interactive prompts and body compaction"""

import io

import pytest
from rich.console import Console

from quill.application.commands.interview import compact_json, read_body
from quill.shared.exceptions import ConfigurationError


@pytest.mark.unit
class TestCompactJson:
    """Tests for whitespace-only compaction"""

    def test_number_spelling_and_escapes_preserved(self):
        text = '{"price": 1.50, "n": 1e2, "s": "\\u00e9"}'
        assert compact_json(text) == b'{"price":1.50,"n":1e2,"s":"\\u00e9"}'

    def test_whitespace_inside_strings_kept(self):
        text = '{\n  "a b" :  " x\\t y ",\n  "list": [ 1 , 2 ]\n}'
        assert compact_json(text) == b'{"a b":" x\\t y ","list":[1,2]}'

    def test_escaped_quotes_and_backslashes(self):
        text = '{"q": "say \\"hi there\\"", "p": "C:\\\\ dir\\\\"}'
        assert compact_json(text) == b'{"q":"say \\"hi there\\"","p":"C:\\\\ dir\\\\"}'

    def test_duplicate_keys_and_order_kept(self):
        text = '{"b": 1, "a": 2, "b": 3}'
        assert compact_json(text) == b'{"b":1,"a":2,"b":3}'

    def test_non_ascii_encoded_as_utf8(self):
        assert compact_json('{"name": "café"}') == '{"name":"café"}'.encode("utf-8")

    @pytest.mark.parametrize("text", ["{not json", '{"a": 1', "NaN", '{"a": Infinity}'])
    def test_invalid_json(self, text):
        with pytest.raises(ConfigurationError):
            compact_json(text)


@pytest.mark.unit
class TestReadBody:
    """Tests for multi-line body entry"""

    def test_reads_until_blank_line(self):
        stdin = io.StringIO('{\n  "qty": 1.0\n}\n\n{"ignored": true}\n')
        body = read_body(Console(file=io.StringIO()), stdin)
        assert body == b'{"qty":1.0}'

    def test_blank_body_is_empty(self):
        assert read_body(Console(file=io.StringIO()), io.StringIO("\n")) == b""

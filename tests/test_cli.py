"""Tests for the command-line client."""

import io

from quickstream.client.cli import TerminalRenderer, _build_parser


class TestTerminalRenderer:
    def test_appends_only_new_text(self):
        out = io.StringIO()
        render = TerminalRenderer(out)
        for display in ("Hel", "Hello, wor", "Hello, world"):
            render(display)
        assert out.getvalue() == "Hello, world"

    def test_rewrites_when_text_changes_shape(self):
        out = io.StringIO()
        render = TerminalRenderer(out)
        render('say "')
        render("say hi")
        assert out.getvalue() == 'say "\nsay hi'


def test_parser_joins_query_words():
    args = _build_parser().parse_args(["--normal", "what", "is", "sse"])
    assert args.normal is True
    assert args.query == ["what", "is", "sse"]
    assert args.url.startswith("http://127.0.0.1:")

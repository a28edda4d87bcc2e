"""Tests for per-line tag balancing."""

from __future__ import annotations

from codelight.tag_balance import balance_lines


class TestBalanceLines:
    """Tests for balance_lines()."""

    def test_plain_lines_unchanged(self) -> None:
        lines = ["a = 1", "b = 2"]
        assert balance_lines(lines) == lines

    def test_self_contained_tags_unchanged(self) -> None:
        lines = ['<span class="k">def</span> f():', '    <span class="k">pass</span>']
        assert balance_lines(lines) == lines

    def test_span_across_three_lines(self) -> None:
        lines = ['x = <span class="s">"""a', "b", 'c"""</span>']
        assert balance_lines(lines) == [
            'x = <span class="s">"""a</span>',
            '<span class="s">b</span>',
            '<span class="s">c"""</span>',
        ]

    def test_nested_open_tags_close_innermost_first(self) -> None:
        lines = ['<b><span class="c">one', "two</span></b>"]
        assert balance_lines(lines) == [
            '<b><span class="c">one</span></b>',
            '<b><span class="c">two</span></b>',
        ]

    def test_void_and_self_closing_tags_ignored(self) -> None:
        lines = ["a<br>b<img src='x'/>", "c"]
        assert balance_lines(lines) == lines

    def test_stray_end_tag_left_alone(self) -> None:
        lines = ["a</span>", "b"]
        assert balance_lines(lines) == lines

    def test_comments_are_not_tags(self) -> None:
        lines = ["<!-- <span> -->", "b"]
        assert balance_lines(lines) == lines

    def test_length_preserved(self) -> None:
        lines = ['<span class="c">', "", "", "</span>"]
        assert len(balance_lines(lines)) == 4

    def test_empty_input(self) -> None:
        assert balance_lines([]) == []

    def test_gt_inside_quoted_attribute(self) -> None:
        lines = ['<span title="a>b" class="s">"""x', 'y"""</span>']
        assert balance_lines(lines) == [
            '<span title="a>b" class="s">"""x</span>',
            '<span title="a>b" class="s">y"""</span>',
        ]

    def test_gt_inside_single_quoted_attribute(self) -> None:
        lines = ["<span data-op='->'>x", "y</span>"]
        assert balance_lines(lines) == [
            "<span data-op='->'>x</span>",
            "<span data-op='->'>y</span>",
        ]


class TestMultiLineComments:
    """Tags inside comments that run across lines are not counted."""

    def test_tags_in_comment_continuation_ignored(self) -> None:
        lines = ["a <!-- start", "<span> still comment", "end --> b"]
        assert balance_lines(lines) == lines

    def test_tags_after_comment_end_counted(self) -> None:
        lines = ["<!-- x", '--> <span class="c">y', "z</span>"]
        assert balance_lines(lines) == [
            "<!-- x",
            '--> <span class="c">y</span>',
            '<span class="c">z</span>',
        ]

    def test_comment_opened_after_tag(self) -> None:
        lines = ['<span class="c">a <!-- <b>', "</b> -->b</span>"]
        assert balance_lines(lines) == [
            '<span class="c">a <!-- <b></span>',
            '<span class="c"></b> -->b</span>',
        ]

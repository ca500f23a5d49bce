from __future__ import annotations

import pytest

from htmlfield.content.cleanup import (
    encode_mb4,
    filter_style_declarations,
    remove_empty_tags,
    remove_inline_styles,
    remove_nbsp,
)


# --- Inline styles ---

def test_keeps_only_allowed_declarations():
    html = '<p style="color: red; font-size: 20px">t</p>'
    assert remove_inline_styles(html, {"color": True}) == '<p style="color: red">t</p>'


def test_drops_style_attribute_when_nothing_is_allowed():
    html = '<span class="x" style="font-size: 2em">t</span>'
    assert remove_inline_styles(html, {"color": True}) == '<span class="x">t</span>'


def test_removes_font_tags():
    html = '<p><font color="red">hot</font> take</p>'
    assert remove_inline_styles(html, {}) == "<p>hot take</p>"


def test_ignores_tags_outside_the_styled_list():
    html = '<li style="color: red">x</li>'
    assert remove_inline_styles(html, {}) == html


def test_filter_style_declarations_normalizes_spacing():
    assert filter_style_declarations("color:red ;  text-align :center;", {"color": True, "text-align": True}) == (
        "color: red; text-align: center"
    )


# --- Empty tags ---

def test_removes_empty_tags():
    assert remove_empty_tags("<p></p><p>x</p><span ></span>") == "<p>x</p>"


def test_empty_tag_removal_is_single_pass():
    assert remove_empty_tags("<div><p></p></div>") == "<div></div>"


def test_keeps_empty_tags_with_attributes_or_whitespace():
    html = '<p class="spacer"></p><p> </p><td></td>'
    assert remove_empty_tags(html) == html


# --- Non-breaking spaces ---

@pytest.mark.parametrize(
    "html, expected",
    [
        ("a&nbsp;b", "a b"),
        ("a&#160;b", "a b"),
        ("a\u00a0b", "a b"),
        ("a&nbsp;&nbsp; b", "a b"),
        ("<p>a    b</p>", "<p>a b</p>"),
    ],
)
def test_remove_nbsp(html, expected):
    assert remove_nbsp(html) == expected


# --- 4-byte characters ---

def test_encode_mb4():
    assert encode_mb4("hi \U0001F600 café") == "hi &#x1F600; café"

import pytest

from applauncher.discovery.sanitizer import FIELD_CODES, sanitize_command


def test_removes_placeholder_and_keeps_flags():
    assert sanitize_command("vlc %U --fullscreen") == "vlc --fullscreen"


def test_token_containing_a_code_is_dropped_whole():
    assert sanitize_command("app --file=%f --new") == "app --new"


@pytest.mark.parametrize("code", FIELD_CODES)
def test_every_field_code_is_removed(code):
    out = sanitize_command(f"prog a {code} b")
    assert out == "prog a b"
    assert code not in out


def test_order_of_remaining_tokens_is_preserved():
    command = "b %u a %F c --x %i d"
    assert sanitize_command(command).split() == ["b", "a", "c", "--x", "d"]


def test_whitespace_is_collapsed():
    assert sanitize_command("  foo \t bar\n  baz ") == "foo bar baz"


def test_only_placeholders_reduce_to_empty():
    assert sanitize_command("%U %f %k") == ""


@pytest.mark.parametrize(
    "command",
    ["firefox %u", "vlc %U --fullscreen", "plain", "", "env A=1 prog %F -x"],
)
def test_idempotent(command):
    once = sanitize_command(command)
    assert sanitize_command(once) == once


def test_other_percent_tokens_are_kept():
    assert sanitize_command("printf 50%") == "printf 50%"

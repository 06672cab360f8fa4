from nlshell.constants import INTENTS, RETRIEVAL_MODES
from nlshell.llm.payload import LLMResponse, LLMStatus
from nlshell.llm.parsers import (
    clean_command,
    extract_response_content,
    parse_label,
    parse_reply,
    strip_thinking,
)


def test_parse_reply_splits_content_and_tokens() -> None:
    content, tokens = parse_reply("ls -la\n42")

    assert content == "ls -la"
    assert tokens == 42


def test_parse_reply_single_line_has_zero_tokens() -> None:
    assert parse_reply("hello") == ("hello", 0)


def test_parse_reply_non_integer_last_line_keeps_everything() -> None:
    content, tokens = parse_reply("first line\nsecond line")

    assert content == "first line\nsecond line"
    assert tokens == 0


def test_strip_thinking_removes_multiline_blocks() -> None:
    raw = "<think>\nplanning\nmore planning\n</think>\nCOMMAND"

    assert strip_thinking(raw) == "COMMAND"


def test_parse_reply_ignores_thinking_block() -> None:
    content, tokens = parse_reply("<thinking>hmm</thinking>QUESTION\n7")

    assert content == "QUESTION"
    assert tokens == 7


def test_clean_command_handles_fences_and_backticks() -> None:
    assert clean_command("```bash\nls -la\n```") == "ls -la"
    assert clean_command("`pwd`") == "pwd"
    assert clean_command("\n\n$ df -h\n") == "df -h"
    assert clean_command("   ") == ""


def test_parse_label_normalizes_case_and_punctuation() -> None:
    assert parse_label(" command.\n", INTENTS) == "COMMAND"
    assert parse_label("'Web_Search'", RETRIEVAL_MODES) == "WEB_SEARCH"


def test_parse_label_rejects_unknown_text() -> None:
    assert parse_label("I think this is a command", INTENTS) is None
    assert parse_label("", INTENTS) is None


def test_extract_response_content_follows_array_paths() -> None:
    data = {"choices": [{"message": {"content": "hi"}}]}

    assert extract_response_content(data, ".choices[0].message.content") == "hi"
    assert extract_response_content(data, ".choices[3].message.content") is None
    assert extract_response_content({"response": "x"}, ".response") == "x"


def test_response_from_packed_text() -> None:
    response = LLMResponse.from_text("<think>x</think>ANALYZE\n12")
    empty = LLMResponse.from_text("<think>only thoughts</think>")

    assert (response.content, response.tokens, response.ok) == ("ANALYZE", 12, True)
    assert empty.status is LLMStatus.EMPTY

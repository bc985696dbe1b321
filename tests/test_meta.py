from commenttodo.meta import parse_comment_meta


def test_handle_and_due_in_parentheses():
    text, meta = parse_comment_meta("(@alice due:2025-09-01): implement X")
    assert text == "implement X"
    assert meta == {"assignee": "alice", "due": "2025-09-01"}


def test_plain_text_has_no_meta():
    res = parse_comment_meta("remove hack")
    assert res.text == "remove hack"
    assert res.meta is None


def test_comma_separated_pairs_with_spaces():
    text, meta = parse_comment_meta("(assignee: bob, due:2025-09-01) implement")
    assert text == "implement"
    assert meta == {"assignee": "bob", "due": "2025-09-01"}


def test_bare_name_becomes_assignee():
    text, meta = parse_comment_meta("(John Smith) - tidy up")
    assert text == "tidy up"
    assert meta == {"assignee": "John Smith"}


def test_pipe_separated_parts():
    _, meta = parse_comment_meta("(@carol | prio:high)")
    assert meta == {"assignee": "carol", "prio": "high"}


def test_parentheses_without_message():
    text, meta = parse_comment_meta("(@dave)")
    assert text == ""
    assert meta == {"assignee": "dave"}


def test_inline_pairs_before_message():
    text, meta = parse_comment_meta("assignee:alice,due:2025-09-01 write docs")
    assert text == "write docs"
    assert meta == {"assignee": "alice", "due": "2025-09-01"}


def test_value_keeps_colons_after_the_first():
    _, meta = parse_comment_meta("(at: 10:30) standup")
    assert meta == {"at": "10:30"}


def test_missing_value_is_dropped_not_an_error():
    # 壊れた記述でも例外にならず、読めた分だけ返す
    text, meta = parse_comment_meta("(due:) later")
    assert text == "later"
    assert meta is None


def test_colon_in_sentence_is_not_metadata():
    text, meta = parse_comment_meta("Note: this is fine")
    assert text == "Note: this is fine"
    assert meta is None


def test_empty_tail():
    assert parse_comment_meta("") == ("", None)

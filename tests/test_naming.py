import os

from dirqueue.core import naming


def test_unique_name_starts_at_sequence_zero(tmp_path):
    name = naming.unique_name(tmp_path, "msg", "eml", created=1700000000, pid=42)
    assert name == "msg-1700000000-42-0.eml"


def test_unique_name_defaults_to_current_pid(tmp_path):
    name = naming.unique_name(tmp_path, "msg", "eml", created=1700000000)
    assert name == f"msg-1700000000-{os.getpid()}-0.eml"


def test_unique_name_skips_existing_files(tmp_path):
    (tmp_path / "msg-1700000000-42-0.eml").touch()
    (tmp_path / "msg-1700000000-42-1.eml").touch()
    name = naming.unique_name(tmp_path, "msg", "eml", created=1700000000, pid=42)
    assert name == "msg-1700000000-42-2.eml"


def test_unique_name_does_not_create_file(tmp_path):
    naming.unique_name(tmp_path, "msg", "eml", created=1700000000, pid=42)
    assert list(tmp_path.iterdir()) == []


def test_pending_pattern_matches_queue_files():
    pattern = naming.pending_pattern("msg", "eml")
    assert pattern.match("msg-1700000000-42-0.eml")


def test_pending_pattern_rejects_probe_and_foreign_files():
    pattern = naming.pending_pattern("msg", "eml")
    assert not pattern.match("msg-1700000000-42-0.eml" + naming.PROBE_SUFFIX)
    assert not pattern.match("other-1700000000-42-0.eml")
    assert not pattern.match("msg-1700000000-42-0.txt")
    assert not pattern.match("msg.eml")


def test_pending_pattern_escapes_regex_characters():
    pattern = naming.pending_pattern("a.b", "e+l")
    assert pattern.match("a.b-1-2-0.e+l")
    assert not pattern.match("axb-1-2-0.e+l")
    assert not pattern.match("a.b-1-2-0.eel")


def test_candidate_names_skip_existing_and_continue(tmp_path):
    (tmp_path / "msg-1700000000-42-1.eml").touch()
    candidates = naming.candidate_names(tmp_path, "msg", "eml", created=1700000000, pid=42)
    assert [next(candidates) for _ in range(3)] == [
        "msg-1700000000-42-0.eml",
        "msg-1700000000-42-2.eml",
        "msg-1700000000-42-3.eml",
    ]


def test_temp_name_is_never_pending():
    pattern = naming.pending_pattern("msg", "eml")
    first = naming.temp_name("msg")
    assert first != naming.temp_name("msg")
    assert not pattern.match(first)
    assert first.endswith(naming.PROBE_SUFFIX)

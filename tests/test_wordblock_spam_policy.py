import os

from src.adapters.outbound.wordblock_spam_policy import WordblockSpamPolicy


def test_patterns_and_comments(tmp_path):
    path = tmp_path / "wordblock.conf"
    path.write_text("# comment\n\\bviagra\\b  # pills\n\ncasino\\d+\n[broken\n", encoding="utf-8")
    policy = WordblockSpamPolicy(path)

    assert policy.is_blocked("Buy VIAGRA now")
    assert policy.is_blocked("casino77")
    assert not policy.is_blocked("casino night")
    assert not policy.is_blocked("comment")


def test_disabled_policy_never_blocks(tmp_path):
    path = tmp_path / "wordblock.conf"
    path.write_text("spam\n", encoding="utf-8")

    assert not WordblockSpamPolicy(path, enabled=False).is_blocked("spam")


def test_missing_file_blocks_nothing(tmp_path):
    assert not WordblockSpamPolicy(tmp_path / "absent.conf").is_blocked("anything")


def test_reloads_when_file_changes(tmp_path):
    path = tmp_path / "wordblock.conf"
    path.write_text("alpha\n", encoding="utf-8")
    policy = WordblockSpamPolicy(path)
    assert policy.is_blocked("alpha")

    path.write_text("beta\n", encoding="utf-8")
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + 10))

    assert not policy.is_blocked("alpha")
    assert policy.is_blocked("beta")

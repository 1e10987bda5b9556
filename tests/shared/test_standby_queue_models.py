import pytest

from shared.models.standby_queue import QueueKey, Success, split_queue


def test_queue_key_layout():
    key = QueueKey("123", "456")

    assert key.message == "123.456"
    assert key.members == "123.456.queue"
    assert key.notification == "123.456.notification"


def test_queue_keys_do_not_collide():
    keys = {QueueKey("1", "23").members, QueueKey("12", "3").members}

    assert len(keys) == 2


@pytest.mark.parametrize("guild_id,channel_id", [("", "1"), ("1", ""), ("1.2", "3"), ("1", "2.3")])
def test_queue_key_rejects_invalid_parts(guild_id, channel_id):
    with pytest.raises(ValueError):
        QueueKey(guild_id, channel_id)


def test_split_queue():
    assert split_queue([]) == ([], [])
    assert split_queue(["a", "b"]) == (["a", "b"], [])
    assert split_queue(list("abcdefg")) == (list("abcde"), ["f", "g"])


def test_success_is_empty():
    assert Success(users=[], waitlist=[]).is_empty
    assert not Success(users=["a"], waitlist=[]).is_empty

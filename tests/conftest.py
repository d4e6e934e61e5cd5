import pytest

from ecp import config
from ecp.models import CommentRecord


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """
    Point the config file at a temp dir for every test so a developer's
    saved API URL or environment never leaks into results.
    """
    config_dir = tmp_path / ".config" / "ecp_comments"
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_FILE", config_dir / "config.json")
    monkeypatch.delenv(config.API_URL_ENV, raising=False)
    yield config_dir


def make_record(cid, created_at="0", parent_id=None, **overrides) -> CommentRecord:
    fields = {
        "id": str(cid),
        "parent_id": None if parent_id is None else str(parent_id),
        "author": "0x1111111111111111111111111111111111111111",
        "app": "0x2222222222222222222222222222222222222222",
        "channel_id": "0",
        "comment_type": "0",
        "content": f"Comment {cid}",
        "created_at": str(created_at),
    }
    fields.update(overrides)
    return CommentRecord(**fields)


@pytest.fixture
def record():
    return make_record

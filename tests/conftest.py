import pytest


@pytest.fixture
def log_path(tmp_path):
    path = tmp_path / "app.log"
    path.write_bytes(b"")
    return path

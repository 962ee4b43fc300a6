"""Shared fixtures: every test gets its own base directory with a backing file and web root."""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from getset.service import CommandService
from getset.storage import IniConfigStore


@pytest.fixture
def base_dir(tmp_path):
    (tmp_path / "config.txt").write_text("[main]\n")
    www = tmp_path / "www"
    www.mkdir()
    (www / "manual.html").write_text("<html>manual</html>")
    return tmp_path


@pytest.fixture
def store(base_dir):
    return IniConfigStore(str(base_dir / "config.txt")).load()


@pytest.fixture
def service(store):
    return CommandService(store)


@pytest.fixture
def client(base_dir):
    app = create_app({"base_dir": str(base_dir)})
    with TestClient(app) as c:
        yield c

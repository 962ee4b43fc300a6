import os

import pytest

import main
from getset.config import load_config, resolve_config
from getset.errors import StaticMountError, StoreLoadError


def write_config(tmp_path, **extra):
    lines = [f"{k}: {v}" for k, v in {"base_dir": ".", **extra}.items()]
    path = tmp_path / "getset.yaml"
    path.write_text("\n".join(lines) + "\n")
    return str(path)


def test_defaults(tmp_path):
    cfg = resolve_config({"base_dir": str(tmp_path)})
    assert cfg["host"] == "localhost"
    assert cfg["port"] == 8081
    assert cfg["config_path"] == os.path.join(str(tmp_path), "config.txt")
    assert cfg["www_path"] == os.path.join(str(tmp_path), "www")


def test_relative_base_dir_follows_config_file(tmp_path):
    (tmp_path / "configs").mkdir()
    path = tmp_path / "configs" / "node.yaml"
    path.write_text("base_dir: ..\nport: 9000\n")
    cfg = load_config(str(path))
    assert cfg["port"] == 9000
    assert cfg["config_path"] == os.path.join(str(tmp_path), "config.txt")


def test_create_app_without_store(tmp_path):
    (tmp_path / "www").mkdir()
    with pytest.raises(StoreLoadError):
        main.create_app({"base_dir": str(tmp_path)})


def test_create_app_without_web_root(tmp_path):
    (tmp_path / "config.txt").write_text("[main]\n")
    with pytest.raises(StaticMountError):
        main.create_app({"base_dir": str(tmp_path)})


def test_main_exits_2_when_store_is_unreadable(tmp_path, monkeypatch):
    (tmp_path / "www").mkdir()
    monkeypatch.setenv("CONFIG_PATH", write_config(tmp_path))
    with pytest.raises(SystemExit) as e:
        main.main()
    assert e.value.code == 2


def test_main_exits_1_when_web_root_is_missing(tmp_path, monkeypatch):
    (tmp_path / "config.txt").write_text("[main]\n")
    monkeypatch.setenv("CONFIG_PATH", write_config(tmp_path))
    with pytest.raises(SystemExit) as e:
        main.main()
    assert e.value.code == 1


def test_main_runs_uvicorn(base_dir, monkeypatch):
    calls = {}

    def fake_run(app, host, port, **kwargs):
        calls.update(app=app, host=host, port=port)

    monkeypatch.setattr(main.uvicorn, "run", fake_run)
    monkeypatch.setenv("CONFIG_PATH", write_config(base_dir, port=18081))
    main.main()
    assert calls["host"] == "localhost"
    assert calls["port"] == 18081
    assert calls["app"].state.service.store.path == os.path.join(str(base_dir), "config.txt")


def test_create_app_defaults_to_project_dir(base_dir, monkeypatch):
    monkeypatch.delenv("CONFIG_PATH", raising=False)
    monkeypatch.setattr(main, "BASE_DIR", str(base_dir))
    app = main.create_app()
    assert app.state.service.store.path == os.path.join(str(base_dir), "config.txt")


def test_project_dir_is_where_main_lives():
    assert main.BASE_DIR == os.path.dirname(os.path.abspath(main.__file__))
    assert os.path.exists(os.path.join(main.BASE_DIR, "config.txt"))
    assert os.path.isdir(os.path.join(main.BASE_DIR, "www"))

from __future__ import annotations

from pathlib import Path

from valkey_demo.config import load_settings
from valkey_demo.home import LOCAL_APP_DIR, resolve_app_dir, resolve_app_paths


def test_resolve_app_dir_local_mode_defaults_to_app() -> None:
    settings = load_settings({"HOME": "/home/someone"})
    assert resolve_app_dir(settings) == LOCAL_APP_DIR.resolve()


def test_resolve_app_dir_platform_mode_uses_home(tmp_path: Path) -> None:
    settings = load_settings({"VCAP_SERVICES": "{}", "HOME": str(tmp_path)})
    assert resolve_app_dir(settings) == tmp_path.resolve()


def test_resolve_app_dir_platform_mode_without_home_uses_cwd(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    settings = load_settings({"VCAP_SERVICES": "{}"})
    assert resolve_app_dir(settings) == tmp_path.resolve()


def test_resolve_app_dir_override_wins(tmp_path: Path) -> None:
    for env in (
        {"APP_DIR": str(tmp_path)},
        {"APP_DIR": str(tmp_path), "VCAP_SERVICES": "{}", "HOME": "/elsewhere"},
    ):
        assert resolve_app_dir(load_settings(env)) == tmp_path.resolve()


def test_resolve_app_paths_public_dir(tmp_path: Path) -> None:
    paths = resolve_app_paths(load_settings({"APP_DIR": str(tmp_path)}))
    assert paths.public_dir == tmp_path.resolve() / "public"

"""Tests for the hubboard config loader (.clusters.yaml) and timeout setting."""

from pathlib import Path

import pytest

from hubboard.config import (
    DEFAULT_TIMEOUT,
    TIMEOUT_ENV_VAR,
    ConfigError,
    find_config,
    load_hubs,
    resolve_timeout,
)
from hubboard.models import AuthMode

# --- find_config ---


class TestFindConfig:
    def test_finds_in_start_dir(self, tmp_path: Path):
        cfg = tmp_path / ".clusters.yaml"
        cfg.write_text("clusters: []\n", encoding="utf-8")
        assert find_config(tmp_path) == cfg.resolve()

    def test_finds_in_parent(self, tmp_path: Path):
        cfg = tmp_path / ".clusters.yaml"
        cfg.write_text("clusters: []\n", encoding="utf-8")
        child = tmp_path / "sub" / "deep"
        child.mkdir(parents=True)
        assert find_config(child) == cfg.resolve()

    def test_returns_none_when_missing(self, tmp_path: Path):
        assert find_config(tmp_path) is None

    def test_defaults_to_cwd(self, tmp_path: Path, monkeypatch):
        (tmp_path / ".clusters.yaml").write_text("clusters: []\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert find_config() == (tmp_path / ".clusters.yaml").resolve()

    def test_ignores_directories_named_config(self, tmp_path: Path):
        (tmp_path / ".clusters.yaml").mkdir()
        assert find_config(tmp_path) is None


# --- load_hubs ---


def write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / ".clusters.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadHubs:
    def test_both_auth_modes(self, tmp_path: Path):
        path = write(tmp_path, (
            "clusters:\n"
            "  - name: acm1\n"
            "    kubeconfig: /abs/kubeconfig-acm1.yaml\n"
            "  - name: acm2\n"
            "    api: https://api.hub2.domain.com:6443\n"
            "    username: admin\n"
            "    password: admin\n"
        ))
        hubs = load_hubs(path)
        assert [h.name for h in hubs] == ["acm1", "acm2"]
        assert hubs[0].auth_mode is AuthMode.KUBECONFIG
        assert hubs[0].kubeconfig == "/abs/kubeconfig-acm1.yaml"
        assert hubs[1].auth_mode is AuthMode.CREDENTIALS
        assert hubs[1].api == "https://api.hub2.domain.com:6443"
        assert hubs[1].username == "admin"

    def test_relative_kubeconfig_resolved_against_config_dir(self, tmp_path: Path):
        path = write(tmp_path, "clusters:\n  - kubeconfig: kc/acm1.yaml\n")
        [hub] = load_hubs(path)
        assert hub.kubeconfig == str((tmp_path / "kc" / "acm1.yaml").resolve())

    def test_home_kubeconfig_expanded(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        path = write(tmp_path, "clusters:\n  - kubeconfig: ~/kc.yaml\n")
        [hub] = load_hubs(path)
        assert hub.kubeconfig == str(tmp_path / "kc.yaml")

    def test_numeric_password_kept_as_string(self, tmp_path: Path):
        path = write(tmp_path, "clusters:\n  - api: https://x:6443\n    password: 12345\n")
        [hub] = load_hubs(path)
        assert hub.password == "12345"

    def test_entry_without_auth_is_kept(self, tmp_path: Path):
        path = write(tmp_path, "clusters:\n  - name: orphan\n  -\n")
        hubs = load_hubs(path)
        assert len(hubs) == 2
        assert all(h.auth_mode is None for h in hubs)

    def test_unknown_keys_ignored(self, tmp_path: Path):
        path = write(tmp_path, "clusters:\n  - name: a\n    kubeconfig: /k\n    color: red\n")
        assert load_hubs(path)[0].name == "a"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_hubs(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_hubs(write(tmp_path, "clusters: [\n"))

    def test_missing_clusters_key(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="'clusters' key"):
            load_hubs(write(tmp_path, "hubs: []\n"))

    def test_empty_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="'clusters' key"):
            load_hubs(write(tmp_path, ""))

    def test_clusters_not_a_list(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="must be a list"):
            load_hubs(write(tmp_path, "clusters:\n  acm1: /k\n"))

    @pytest.mark.parametrize("text", ["clusters: []\n", "clusters:\n"])
    def test_no_hubs(self, tmp_path: Path, text: str):
        with pytest.raises(ConfigError, match="No hub clusters defined in config file."):
            load_hubs(write(tmp_path, text))

    def test_bad_entries_kept_next_to_valid_hub(self, tmp_path: Path):
        path = write(tmp_path, (
            "clusters:\n"
            "  - name: acm1\n"
            "    kubeconfig: /k1\n"
            "  - acm2\n"
            "  - name: acm3\n"
            "    kubeconfig: [a, b]\n"
        ))
        hubs = load_hubs(path)
        assert len(hubs) == 3
        assert hubs[0].name == "acm1"
        assert hubs[0].auth_mode is AuthMode.KUBECONFIG
        assert hubs[1].name is None
        assert hubs[1].auth_mode is None
        assert hubs[2].name == "acm3"
        assert hubs[2].auth_mode is None

    def test_wrongly_typed_name_dropped(self, tmp_path: Path):
        [hub] = load_hubs(write(tmp_path, "clusters:\n  - name: [a, b]\n    kubeconfig: /k\n"))
        assert hub.name is None
        assert hub.auth_mode is None

    def test_bad_entry_is_logged(self, tmp_path: Path, caplog):
        with caplog.at_level("WARNING", logger="hubboard.config"):
            load_hubs(write(tmp_path, "clusters:\n  - name: a\n    kubeconfig: /k\n  - 42\n"))
        assert "index 1" in caplog.text


# --- resolve_timeout ---


class TestResolveTimeout:
    def test_default(self, monkeypatch):
        monkeypatch.delenv(TIMEOUT_ENV_VAR, raising=False)
        assert resolve_timeout() == DEFAULT_TIMEOUT == 3.0

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv(TIMEOUT_ENV_VAR, "5")
        assert resolve_timeout() == 5.0

    def test_explicit_wins(self, monkeypatch):
        monkeypatch.setenv(TIMEOUT_ENV_VAR, "5")
        assert resolve_timeout(1.5) == 1.5

    def test_blank_env_is_default(self, monkeypatch):
        monkeypatch.setenv(TIMEOUT_ENV_VAR, "  ")
        assert resolve_timeout() == DEFAULT_TIMEOUT

    @pytest.mark.parametrize("raw", ["abc", "0", "-2"])
    def test_bad_env(self, monkeypatch, raw: str):
        monkeypatch.setenv(TIMEOUT_ENV_VAR, raw)
        with pytest.raises(ConfigError, match=TIMEOUT_ENV_VAR):
            resolve_timeout()

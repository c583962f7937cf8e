from pathlib import Path

from annihilator.infrastructure.config import settings

def test_test_config_overrides_environment(monkeypatch):
    monkeypatch.setenv("ANNIHILATOR_FILE_PREFIX", "from_env_")
    assert settings.get_file_prefix() == "wp_cache_"

def test_environment_values_are_converted(monkeypatch):
    monkeypatch.setenv("ANNIHILATOR_TEST_FLAG", "true")
    monkeypatch.setenv("ANNIHILATOR_TEST_COUNT", "3")
    monkeypatch.setenv("ANNIHILATOR_TEST_RATIO", "0.5")
    monkeypatch.setenv("ANNIHILATOR_TEST_NAME", "posts")
    assert settings.get_config("annihilator_test_flag") is True
    assert settings.get_config("annihilator_test_count") == 3
    assert settings.get_config("annihilator_test_ratio") == 0.5
    assert settings.get_config("annihilator_test_name") == "posts"

def test_get_config_default():
    assert settings.get_config("annihilator_missing_key", "fallback") == "fallback"

def test_cache_dir_defaults_under_content_dir(content_dir: Path, monkeypatch):
    monkeypatch.delenv("ANNIHILATOR_CACHE_DIR", raising=False)
    monkeypatch.setattr(settings, "_config", {})
    settings.clear_test_config()
    settings.set_config_for_testing({'ANNIHILATOR_CONTENT_DIR': str(content_dir)})
    assert settings.get_cache_dir() == content_dir / "object-cache"
    assert settings.get_dropin_path() == content_dir / "object-cache.yaml"

def test_numeric_tenant_id_is_a_string():
    settings.set_config_for_testing({'ANNIHILATOR_TENANT_ID': 7})
    assert settings.get_tenant_id() == "7"

def test_empty_tenant_id_means_single_tenant():
    assert settings.get_tenant_id() is None

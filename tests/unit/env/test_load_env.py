import os

import pytest

from hostrelay.env import Env, load_env
from hostrelay.errors import EnvConfigError, ErrorCategory


@pytest.fixture(autouse=True)
def clear_hostrelay_environment(monkeypatch):
    for envar_name in Env.types_map():
        monkeypatch.delenv(envar_name, raising=False)


class TestLoadEnv:
    def test_defaults(self, tmp_path):
        env = load_env(Env, env_file=os.path.join(str(tmp_path), ".env"))

        assert env.HOSTRELAY_ROUTES_PATH == "config.json"
        assert env.HOSTRELAY_LISTEN_HOST == "0.0.0.0"
        assert env.HOSTRELAY_LISTEN_PORT == 25565
        assert env.HOSTRELAY_LOG_LEVEL == "info"
        assert env.HOSTRELAY_LOGS_DIRECTORY is None

    def test_reads_process_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOSTRELAY_LISTEN_PORT", "25570")
        monkeypatch.setenv("HOSTRELAY_LOG_LEVEL", "DEBUG")

        env = load_env(Env, env_file=os.path.join(str(tmp_path), ".env"))

        assert env.HOSTRELAY_LISTEN_PORT == 25570
        assert env.HOSTRELAY_LOG_LEVEL == "debug"

    def test_env_file_overrides_process_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOSTRELAY_LISTEN_PORT", "25570")

        env_file = os.path.join(str(tmp_path), ".env")
        with open(env_file, "w") as dotenv:
            dotenv.write("HOSTRELAY_LISTEN_PORT=25580\n")
            dotenv.write("HOSTRELAY_ROUTES_PATH=/etc/hostrelay/routes.json\n")
            dotenv.write("UNRELATED=1\n")

        env = load_env(Env, env_file=env_file)

        assert env.HOSTRELAY_LISTEN_PORT == 25580
        assert env.HOSTRELAY_ROUTES_PATH == "/etc/hostrelay/routes.json"

    def test_override_wins(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOSTRELAY_LISTEN_HOST", "10.0.0.1")

        env = load_env(
            Env,
            env_file=os.path.join(str(tmp_path), ".env"),
            override={"HOSTRELAY_LISTEN_HOST": "127.0.0.1"},
        )

        assert env.HOSTRELAY_LISTEN_HOST == "127.0.0.1"

    def test_invalid_port(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOSTRELAY_LISTEN_PORT", "70000")

        with pytest.raises(EnvConfigError) as err:
            load_env(Env, env_file=os.path.join(str(tmp_path), ".env"))

        assert err.value.category is ErrorCategory.CONFIGURATION
        assert err.value.context["names"] == ["HOSTRELAY_LISTEN_PORT"]

    def test_non_numeric_port(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOSTRELAY_LISTEN_PORT", "abc")

        with pytest.raises(EnvConfigError) as err:
            load_env(Env, env_file=os.path.join(str(tmp_path), ".env"))

        assert err.value.context["name"] == "HOSTRELAY_LISTEN_PORT"
        assert "abc" in err.value.message

    def test_invalid_log_level(self, tmp_path):
        with pytest.raises(EnvConfigError):
            load_env(
                Env,
                env_file=os.path.join(str(tmp_path), ".env"),
                override={"HOSTRELAY_LOG_LEVEL": "verbose"},
            )

    def test_logging_config(self):
        env = Env(HOSTRELAY_LOG_LEVEL="warn", HOSTRELAY_LOG_OUTPUT="stdout")

        assert env.get_logging_config() == {
            "log_level": "warn",
            "log_output": "stdout",
        }

import threading

import pytest
from asana_client.config import (
    BASE_URL,
    ClientConfig,
    ConfigStore,
    ReadWriteLock,
    first_non_empty,
    load_env_config,
    resolve_token,
)
from asana_client.errors import AsanaConfigError


def test_load_env_config_defaults_base_url(monkeypatch):
    monkeypatch.setenv("ASANA_PERSONAL_ACCESS_TOKEN", " tok ")
    monkeypatch.delenv("ASANA_BASE_URL", raising=False)
    assert load_env_config(use_dotenv=False) == ("tok", BASE_URL)


def test_load_env_config_reads_dotenv(monkeypatch, tmp_path):
    # set-then-delete so teardown also removes what load_dotenv writes
    monkeypatch.setenv("ASANA_PERSONAL_ACCESS_TOKEN", "placeholder")
    monkeypatch.delenv("ASANA_PERSONAL_ACCESS_TOKEN")
    (tmp_path / ".env").write_text("ASANA_PERSONAL_ACCESS_TOKEN=from-dotenv\n")
    monkeypatch.chdir(tmp_path)

    token, _ = load_env_config()

    assert token == "from-dotenv"


def test_first_non_empty_skips_blanks():
    assert first_non_empty(None, "", "  ", " b ", "c") == "b"
    assert first_non_empty() == ""


def test_resolve_token_error_names_variable(monkeypatch):
    monkeypatch.delenv("ASANA_PERSONAL_ACCESS_TOKEN", raising=False)
    with pytest.raises(AsanaConfigError, match="ASANA_PERSONAL_ACCESS_TOKEN"):
        resolve_token("", None)


def test_config_store_set_returns_new_snapshot():
    store = ConfigStore(ClientConfig(token="a"))
    before = store.get()
    after = store.set(timeout_seconds=3.0)

    assert before.timeout_seconds != 3.0
    assert after.timeout_seconds == 3.0
    assert store.get() is after
    assert after.token == "a"


def test_writer_waits_for_readers():
    lock = ReadWriteLock()
    order = []
    reading = threading.Event()
    release = threading.Event()

    def reader():
        with lock.read():
            reading.set()
            release.wait(timeout=5)
            order.append("read")

    def writer():
        reading.wait(timeout=5)
        with lock.write():
            order.append("write")

    threads = [threading.Thread(target=reader), threading.Thread(target=writer)]
    for t in threads:
        t.start()
    reading.wait(timeout=5)
    release.set()
    for t in threads:
        t.join(timeout=5)

    assert order == ["read", "write"]

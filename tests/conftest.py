from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a scratch data dir and drop stray ECUES_* overrides."""
    for key in (
        "ECUES_ATTENTION_SECONDS",
        "ECUES_TOAST_SECONDS",
        "ECUES_OUTPUT_DIR",
        "ECUES_LOG_LEVEL",
        "ECUES_HOSPITAL_CATALOG",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ECUES_DATA_DIR", str(tmp_path))

    from modules.tally import reset_service

    reset_service()
    yield
    reset_service()

"""
歷史記錄測試
"""

from pathlib import Path

import pytest

from stylizer.ui.history import PathHistory, SettingsHistory


class TestPathHistory:
    """PathHistory 測試"""

    @pytest.mark.unit
    def test_empty(self, tmp_path: Path) -> None:
        assert PathHistory(tmp_path).load("content") == []

    @pytest.mark.unit
    def test_save_and_load_per_kind(self, tmp_path: Path) -> None:
        content = tmp_path / "c.png"
        style = tmp_path / "s.png"
        content.touch()
        style.touch()

        history = PathHistory(tmp_path)
        history.save("content", content)
        history.save("style", style)

        assert history.load("content") == [content.resolve()]
        assert history.load("style") == [style.resolve()]

    @pytest.mark.unit
    def test_latest_first_and_deduplicated(self, tmp_path: Path) -> None:
        a = tmp_path / "a.png"
        b = tmp_path / "b.png"
        a.touch()
        b.touch()

        history = PathHistory(tmp_path)
        history.save("content", a)
        history.save("content", b)
        history.save("content", a)

        assert history.load("content") == [a.resolve(), b.resolve()]

    @pytest.mark.unit
    def test_max_entries(self, tmp_path: Path) -> None:
        history = PathHistory(tmp_path)
        for i in range(12):
            path = tmp_path / f"{i}.png"
            path.touch()
            history.save("content", path)

        loaded = history.load("content")
        assert len(loaded) == 10
        assert loaded[0].name == "11.png"

    @pytest.mark.unit
    def test_filters_missing(self, tmp_path: Path) -> None:
        path = tmp_path / "gone.png"
        path.touch()
        history = PathHistory(tmp_path)
        history.save("model", path)
        path.unlink()

        assert history.load("model") == []

    @pytest.mark.unit
    def test_corrupted_file(self, tmp_path: Path) -> None:
        (tmp_path / ".stylizer_history.json").write_text("{oops", encoding="utf-8")
        assert PathHistory(tmp_path).load("content") == []


class TestSettingsHistory:
    """SettingsHistory 測試"""

    @pytest.mark.unit
    def test_roundtrip(self, tmp_path: Path) -> None:
        history = SettingsHistory(tmp_path)
        assert history.load() is None

        history.save({"backend": "onnx", "device": "auto", "resolution": 512})
        assert history.load() == {"backend": "onnx", "device": "auto", "resolution": 512}

    @pytest.mark.unit
    def test_non_dict_ignored(self, tmp_path: Path) -> None:
        (tmp_path / ".stylizer_settings.json").write_text("[1, 2]", encoding="utf-8")
        assert SettingsHistory(tmp_path).load() is None

"""
歷史記錄模組

管理使用者曾經使用過的檔案路徑（內容圖、風格圖、模型）和後端設定，提供快速選擇功能
"""

import json
from pathlib import Path
from typing import Any


_HISTORY_FILE = ".stylizer_history.json"
_SETTINGS_FILE = ".stylizer_settings.json"
_MAX_ENTRIES = 10


class PathHistory:
    """
    路徑歷史管理

    依類別（content/style/model/folder）分別記錄，存於同一個 JSON 檔案
    """

    def __init__(self, base_dir: Path | None = None) -> None:
        """
        初始化路徑歷史

        Args:
            base_dir: 歷史檔案所在目錄，預設為目前工作目錄
        """
        root = base_dir or Path.cwd()
        self._history_file = root / _HISTORY_FILE

    def _read_all(self) -> dict[str, list[str]]:
        if not self._history_file.exists():
            return {}

        try:
            data = json.loads(self._history_file.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            return {}

        if not isinstance(data, dict):
            return {}

        return {
            str(k): [p for p in v if isinstance(p, str)]
            for k, v in data.items()
            if isinstance(v, list)
        }

    def load(self, kind: str) -> list[Path]:
        """
        讀取某類別的歷史路徑

        自動過濾已不存在的路徑

        Args:
            kind: 路徑類別

        Returns:
            有效的歷史路徑列表（最新在前）
        """
        paths = [Path(p) for p in self._read_all().get(kind, [])]
        return [p for p in paths if p.exists()]

    def save(self, kind: str, path: Path) -> None:
        """
        新增路徑到歷史

        去重並將最新路徑排在最前面，每類最多保留 10 條

        Args:
            kind: 路徑類別
            path: 要儲存的路徑
        """
        resolved = path.resolve()
        data = self._read_all()

        entries = [p for p in self.load(kind) if p.resolve() != resolved]
        entries.insert(0, resolved)
        data[kind] = [str(p) for p in entries[:_MAX_ENTRIES]]

        self._history_file.write_text(
            json.dumps(data, ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )


class SettingsHistory:
    """
    後端設定歷史管理

    負責讀寫後端設定到 JSON 檔案，用於記住上一次的設定
    """

    def __init__(self, base_dir: Path | None = None) -> None:
        """
        初始化設定歷史

        Args:
            base_dir: 設定檔案所在目錄，預設為目前工作目錄
        """
        root = base_dir or Path.cwd()
        self._settings_file = root / _SETTINGS_FILE

    def load(self) -> dict[str, Any] | None:
        """
        讀取上一次的設定

        Returns:
            設定字典，若無歷史則返回 None
        """
        if not self._settings_file.exists():
            return None

        try:
            data = json.loads(self._settings_file.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            return None

        if not isinstance(data, dict):
            return None

        return data

    def save(self, settings: dict[str, Any]) -> None:
        """
        儲存設定

        Args:
            settings: 設定字典
        """
        self._settings_file.write_text(
            json.dumps(settings, ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )

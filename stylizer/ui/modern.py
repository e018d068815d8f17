"""
現代化互動式使用者介面

使用 InquirerPy 提供美觀的 CLI 互動體驗
- 方向鍵選擇選項
- 記住最近使用的圖片與模型
- 取消任一步驟即返回 None
"""

from collections.abc import Callable
from pathlib import Path

from InquirerPy import inquirer
from InquirerPy.base.control import Choice
from InquirerPy.separator import Separator

from stylizer.backends.registry import BackendRegistry
from stylizer.data_model import (
    SUPPORTED_EXTENSIONS,
    BatchConfig,
    TransferConfig,
)
from stylizer.settings import AppSettings
from stylizer.ui.history import PathHistory, SettingsHistory


_CUSTOM = "__custom__"
_AUTO_DEVICE = "auto"
_MODEL_EXTENSIONS = frozenset({".onnx", ".pt", ".pth", ".ts"})


def _is_image_file(p: str) -> bool:
    path = Path(p).expanduser()
    return path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS


def _is_model_file(p: str) -> bool:
    path = Path(p).expanduser()
    return path.is_file() and path.suffix.lower() in _MODEL_EXTENSIONS


def _is_dir(p: str) -> bool:
    return Path(p).expanduser().is_dir()


class ModernUI:
    """
    現代化使用者介面

    操作流程：
    1. 選擇模式（單張/整個資料夾）
    2. 選擇內容圖片（或資料夾）
    3. 選擇風格圖片
    4. 選擇模型檔案
    5. 選擇後端、設備和解析度
    """

    def __init__(self, settings: AppSettings | None = None) -> None:
        """初始化 UI"""
        self._settings = settings or AppSettings()
        base_dir = self._settings.history_dir
        self._history = PathHistory(base_dir)
        self._settings_history = SettingsHistory(base_dir)

    def run(self) -> TransferConfig | BatchConfig | None:
        """
        執行互動式設定流程

        Returns:
            處理設定，若使用者取消則返回 None
        """
        self._show_welcome()

        mode = inquirer.select(
            message="選擇模式:",
            choices=[
                Choice(value="single", name="🖼️  單張圖片"),
                Choice(value="batch", name="📁 整個資料夾（同一風格）"),
            ],
            default="single",
            vi_mode=True,
        ).execute()
        if mode is None:
            return None

        if mode == "batch":
            content = self._select_path(
                "folder", "選擇內容圖片資料夾:", _is_dir, directories=True
            )
        else:
            content = self._select_path("content", "選擇內容圖片:", _is_image_file)
        if content is None:
            return None

        style = self._select_path("style", "選擇風格圖片:", _is_image_file)
        if style is None:
            return None

        model = self._select_model()
        if model is None:
            return None

        runtime = self._select_runtime()
        if runtime is None:
            return None

        backend_name, device, resolution = runtime
        common = {
            "style_path": style,
            "model_path": model,
            "backend_name": backend_name,
            "device": device,
            "resolution": resolution,
            "content_input": self._settings.content_input,
            "style_input": self._settings.style_input,
            "layout": self._settings.channel_layout,
        }
        if mode == "batch":
            return BatchConfig(input_folder=content, **common)
        return TransferConfig(content_path=content, **common)

    def _show_welcome(self) -> None:
        """顯示歡迎訊息"""
        print("\n" + "=" * 60)
        print("🎨  神經風格轉換工具  🎨".center(60))
        print("=" * 60)
        print("\n💡 提示：使用 ↑↓ 方向鍵選擇，Enter 確認，Ctrl-C 離開\n")

    def _select_path(
        self,
        kind: str,
        message: str,
        validate: Callable[[str], bool],
        directories: bool = False,
    ) -> Path | None:
        """
        從歷史記錄選擇路徑，或輸入新路徑

        Args:
            kind: 歷史記錄類別
            message: 提示訊息
            validate: 路徑驗證函數
            directories: 是否只接受資料夾

        Returns:
            路徑，若取消則返回 None
        """
        recent = self._history.load(kind)
        choices: list[Choice | Separator] = []

        if recent:
            choices.append(Separator("🕘 最近使用"))
            for path in recent[:5]:
                choices.append(Choice(value=path, name=f"  {path.name} ({path.parent})"))
            choices.append(Separator())

        choices.append(Choice(value=_CUSTOM, name="📝 輸入新路徑..."))

        selected = inquirer.select(
            message=message,
            choices=choices,
            vi_mode=True,
        ).execute()

        if selected is None:
            return None

        if selected == _CUSTOM:
            path_str = inquirer.filepath(
                message=message,
                default=str(Path.cwd()),
                validate=validate,
                invalid_message="路徑不存在或格式不支援",
                only_directories=directories,
            ).execute()

            if path_str is None:
                return self._select_path(kind, message, validate, directories)

            selected = Path(path_str).expanduser()

        self._history.save(kind, selected)
        return selected

    def _select_model(self) -> Path | None:
        """選擇模型檔案（設定中的預設模型優先列出）"""
        default_model = self._settings.model_path
        if default_model is not None and default_model.is_file():
            self._history.save("model", default_model)
        return self._select_path("model", "選擇模型檔案:", _is_model_file)

    def _select_runtime(self) -> tuple[str, str | None, int] | None:
        """
        選擇後端、設備和解析度

        Returns:
            (backend_name, device, resolution) 或 None
        """
        last = self._settings_history.load() or {}

        backends = BackendRegistry.list_backends()
        default_backend = str(last.get("backend", self._settings.default_backend))
        backend_name = inquirer.select(
            message="選擇推論後端:",
            choices=[
                Choice(value=b.name, name=f"  {b.name} - {b.description}")
                for b in backends
            ],
            default=default_backend,
            vi_mode=True,
        ).execute()
        if backend_name is None:
            return None

        devices = list(BackendRegistry.get(backend_name).get_available_devices())
        device = inquirer.select(
            message="選擇計算設備:",
            choices=[Choice(value=_AUTO_DEVICE, name="  auto（自動選擇）")]
            + [Choice(value=d, name=f"  {d}") for d in devices],
            default=_AUTO_DEVICE,
            vi_mode=True,
        ).execute()
        if device is None:
            return None

        resolution = inquirer.number(
            message="設定推論解析度（需與模型一致）:",
            min_allowed=1,
            max_allowed=4096,
            default=int(last.get("resolution", self._settings.resolution)),
        ).execute()
        if resolution is None:
            return None

        self._settings_history.save(
            {"backend": backend_name, "device": device, "resolution": int(resolution)}
        )
        return backend_name, None if device == _AUTO_DEVICE else device, int(resolution)

    def show_summary(self, config: TransferConfig | BatchConfig) -> None:
        """
        顯示處理摘要

        Args:
            config: 處理設定
        """
        print("\n" + "=" * 60)
        print("📋 處理設定摘要".center(60))
        print("=" * 60)
        if isinstance(config, BatchConfig):
            print(f"\n  📁 內容資料夾: {config.input_folder}")
        else:
            print(f"\n  🖼️  內容圖片: {config.content_path}")
        print(f"  🎨 風格圖片: {config.style_path}")
        print(f"  🧠 模型: {config.model_path}")
        print(f"  🔧 後端: {config.backend_name} ({config.device or _AUTO_DEVICE})")
        print(f"  📐 解析度: {config.resolution}x{config.resolution}")
        if isinstance(config, BatchConfig):
            print(f"  📂 輸出資料夾: {config.output_folder}")
        else:
            print(f"  📂 輸出: {config.output_path}")
        print("\n" + "=" * 60)
        print("\n⏳ 開始處理...\n")

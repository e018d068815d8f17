"""
核心資料模型

使用 Pydantic 進行資料驗證和序列化，確保資料完整性
"""

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ChannelLayout(StrEnum):
    """張量通道排列方式"""

    PLANAR = "planar"  # NCHW：先全部 R，再全部 G，最後全部 B
    INTERLEAVED = "interleaved"  # 每個像素依序 r, g, b


DimValue = int | str | None


class TensorInfo(BaseModel):
    """
    模型輸入/輸出張量資訊

    Attributes:
        name: 張量名稱
        shape: 形狀，動態維度以字串或 None 表示
    """

    model_config = ConfigDict(frozen=True)

    name: str
    shape: tuple[DimValue, ...] = Field(default_factory=tuple)

    @property
    def shape_text(self) -> str:
        """形狀字串，例如 (1, 3, 512, 512)"""
        dims = ", ".join("?" if d is None else str(d) for d in self.shape)
        return f"({dims})"


class ModelSignature(BaseModel):
    """
    模型結構（輸入與輸出）

    Attributes:
        inputs: 輸入張量列表
        outputs: 輸出張量列表
    """

    model_config = ConfigDict(frozen=True)

    inputs: tuple[TensorInfo, ...] = Field(default_factory=tuple)
    outputs: tuple[TensorInfo, ...] = Field(default_factory=tuple)

    @property
    def input_names(self) -> list[str]:
        """輸入名稱"""
        return [t.name for t in self.inputs]

    def describe(self) -> list[str]:
        """
        產生模型結構說明（逐行）

        Returns:
            日誌用的文字行
        """
        lines = ["=== Model Structure ==="]
        lines.append(f"Number of inputs: {len(self.inputs)}")
        for i, tensor in enumerate(self.inputs):
            lines.append(f"Input {i}: Name={tensor.name}, Shape={tensor.shape_text}")
        lines.append(f"Number of outputs: {len(self.outputs)}")
        for i, tensor in enumerate(self.outputs):
            lines.append(f"Output {i}: Name={tensor.name}")
        return lines


class BackendInfo(BaseModel):
    """
    後端資訊

    Attributes:
        name: 後端名稱
        description: 後端描述
        devices: 可用計算設備
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    devices: tuple[str, ...] = Field(default_factory=tuple)


class TransferConfig(BaseModel):
    """
    風格轉換設定

    Attributes:
        content_path: 內容圖片路徑
        style_path: 風格圖片路徑
        model_path: 模型檔案路徑
        backend_name: 推論後端名稱
        device: 計算設備，None 則自動選擇
        resolution: 推論解析度（正方形邊長）
        output_path: 輸出圖片路徑
        content_input: 內容圖片對應的模型輸入名稱
        style_input: 風格圖片對應的模型輸入名稱
        layout: 張量通道排列方式
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    content_path: Path
    style_path: Path
    model_path: Path
    backend_name: str = "onnx"
    device: str | None = None
    resolution: int = Field(default=512, ge=1)
    output_path: Path | None = None
    content_input: str = "0"
    style_input: str = "1"
    layout: ChannelLayout = ChannelLayout.PLANAR

    def model_post_init(self, __context: object) -> None:
        """Set default output path after initialization."""
        if self.output_path is None:
            default = self.content_path.with_name(
                f"{self.content_path.stem}_stylized.png"
            )
            object.__setattr__(self, "output_path", default)


class TransferResult(BaseModel):
    """
    單次風格轉換結果

    Attributes:
        output_path: 輸出圖片路徑
        output_shape: 模型輸出張量形狀
        value_min: 輸出最小值（夾取前）
        value_max: 輸出最大值（夾取前）
        first_pixel: 第一個輸出像素 (r, g, b)
        elapsed: 推論耗時（秒）
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    output_path: Path
    output_shape: tuple[int, ...]
    value_min: float
    value_max: float
    first_pixel: tuple[float, float, float]
    elapsed: float = Field(ge=0.0)

    @property
    def value_range(self) -> tuple[float, float]:
        """輸出數值範圍"""
        return self.value_min, self.value_max


class BatchConfig(BaseModel):
    """
    批次處理設定：以同一張風格圖處理整個資料夾

    Attributes:
        input_folder: 內容圖片資料夾
        style_path: 風格圖片路徑
        model_path: 模型檔案路徑
        backend_name: 推論後端名稱
        device: 計算設備
        resolution: 推論解析度
        output_folder: 輸出資料夾
        content_input: 內容輸入名稱
        style_input: 風格輸入名稱
        layout: 張量通道排列方式
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    input_folder: Path
    style_path: Path
    model_path: Path
    backend_name: str = "onnx"
    device: str | None = None
    resolution: int = Field(default=512, ge=1)
    output_folder: Path | None = None
    content_input: str = "0"
    style_input: str = "1"
    layout: ChannelLayout = ChannelLayout.PLANAR

    def model_post_init(self, __context: object) -> None:
        """Set default output folder after initialization."""
        if self.output_folder is None:
            object.__setattr__(self, "output_folder", self.input_folder / "output")


class BatchResult(BaseModel):
    """
    批次處理結果

    Attributes:
        total: 總圖片數
        success: 成功數
        failed: 失敗數
        output_folder: 輸出資料夾路徑
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    total: int = Field(ge=0)
    success: int = Field(ge=0)
    failed: int = Field(ge=0)
    output_folder: Path

    @property
    def success_rate(self) -> float:
        """成功率"""
        return self.success / self.total if self.total > 0 else 0.0

    @property
    def is_complete_success(self) -> bool:
        """是否全部成功"""
        return self.failed == 0


# 支援的圖片格式
SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
    {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".gif"}
)


def is_supported_image(path: Path) -> bool:
    """
    檢查檔案是否為支援的圖片格式

    Args:
        path: 檔案路徑

    Returns:
        是否為支援的圖片格式
    """
    return path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS

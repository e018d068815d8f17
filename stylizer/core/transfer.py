"""
風格轉換元件

持有一個推論後端，將內容圖與風格圖轉為張量、執行一次推論，
並將結果轉回圖片作為輸出目標

生命週期：
1. start()：載入模型、記錄模型結構
2. process_image()：單次轉換（錯誤記錄後提前返回）
3. close()：釋放後端與輸出圖片
"""

import logging
import time
from pathlib import Path
from types import TracebackType

import numpy as np
from PIL import Image, UnidentifiedImageError

from stylizer.data_model import ChannelLayout, TransferConfig, TransferResult

from . import tensor_codec
from .interfaces import BackendProtocol


logger = logging.getLogger(__name__)


class StyleTransfer:
    """
    風格轉換元件

    內容圖綁定到 content_input，風格圖綁定到 style_input，
    取模型第一個輸出作為結果
    """

    def __init__(
        self,
        backend: BackendProtocol,
        resolution: int = 512,
        content_input: str = "0",
        style_input: str = "1",
        layout: ChannelLayout = ChannelLayout.PLANAR,
    ):
        """
        初始化元件

        Args:
            backend: 推論後端
            resolution: 推論解析度（正方形邊長）
            content_input: 內容圖片對應的模型輸入名稱
            style_input: 風格圖片對應的模型輸入名稱
            layout: 張量通道排列方式
        """
        if resolution < 1:
            msg = f"Resolution must be positive, got {resolution}"
            raise ValueError(msg)

        self._backend = backend
        self.resolution = resolution
        self.content_input = content_input
        self.style_input = style_input
        self.layout = layout
        self.output: Image.Image | None = None
        self._last_output: np.ndarray | None = None

    @property
    def backend(self) -> BackendProtocol:
        """推論後端"""
        return self._backend

    def start(self) -> None:
        """載入模型並記錄模型結構"""
        self._backend.ensure_model_loaded()
        for line in self._backend.signature.describe():
            logger.info("%s", line)

    def texture_to_tensor(
        self, image: Image.Image | None, debug_name: str
    ) -> np.ndarray | None:
        """將圖片轉為輸入張量（None 時返回 None）"""
        return tensor_codec.image_to_tensor(
            image, resolution=self.resolution, layout=self.layout, debug_name=debug_name
        )

    def process_image(
        self,
        content: Image.Image | None,
        style: Image.Image | None,
    ) -> Image.Image | None:
        """
        執行一次風格轉換

        Args:
            content: 內容圖片
            style: 風格圖片

        Returns:
            輸出圖片，失敗時返回 None
        """
        logger.info("=== Starting Style Transfer ===")
        self._last_output = None

        if content is None or style is None:
            logger.error(
                "Content texture: %s, Style texture: %s",
                "exists" if content is not None else "null",
                "exists" if style is not None else "null",
            )
            return None

        content_tensor = self.texture_to_tensor(content, "Content")
        style_tensor = self.texture_to_tensor(style, "Style")

        if content_tensor is None or style_tensor is None:
            logger.error("Failed to create input tensors!")
            return None

        try:
            self._backend.ensure_model_loaded()
            inputs = {
                self.content_input: content_tensor,
                self.style_input: style_tensor,
            }

            logger.info("Executing model...")
            output = self._backend.run(inputs)
            logger.info("Output tensor shape: %s", output.shape)
            logger.info("Output tensor size: %d", output.size)

            value_min, value_max = tensor_codec.value_range(output)
            logger.info("Output value range: min=%f, max=%f", value_min, value_max)

            image = tensor_codec.tensor_to_image(output, self.resolution, self.layout)
            self.output = image
            self._last_output = output
            logger.info("Style transfer completed!")

            r, g, b = tensor_codec.first_pixel(output, self.resolution, self.layout)
            logger.info("First output pixel: R=%f, G=%f, B=%f", r, g, b)
        except Exception:
            logger.exception("Error during style transfer")
            return None
        else:
            return image

    def run(self, config: TransferConfig) -> TransferResult:
        """
        依設定處理檔案：讀取兩張圖片、轉換並存檔

        解析度、通道排列與輸入名稱以 config 為準，並沿用到之後的呼叫

        Args:
            config: 風格轉換設定

        Returns:
            轉換結果

        Raises:
            RuntimeError: 讀取圖片或轉換失敗
        """
        output_path = config.output_path
        if output_path is None:
            raise ValueError("Output path is not set")

        self.resolution = config.resolution
        self.layout = config.layout
        self.content_input = config.content_input
        self.style_input = config.style_input

        try:
            content = tensor_codec.load_image(config.content_path)
            style = tensor_codec.load_image(config.style_path)
        except (OSError, UnidentifiedImageError) as exc:
            msg = f"Style transfer failed: cannot read input image ({exc})"
            raise RuntimeError(msg) from exc

        start_time = time.perf_counter()
        image = self.process_image(content, style)
        elapsed = time.perf_counter() - start_time

        if image is None or self._last_output is None:
            msg = f"Style transfer failed: {config.content_path.name}"
            raise RuntimeError(msg)

        save_image(image, output_path)
        logger.info("Saved: %s", output_path)

        value_min, value_max = tensor_codec.value_range(self._last_output)
        return TransferResult(
            output_path=output_path,
            output_shape=tuple(int(d) for d in self._last_output.shape),
            value_min=value_min,
            value_max=value_max,
            first_pixel=tensor_codec.first_pixel(
                self._last_output, self.resolution, self.layout
            ),
            elapsed=elapsed,
        )

    def close(self) -> None:
        """釋放後端與輸出圖片（可重複呼叫）"""
        self._backend.close()
        self.output = None
        self._last_output = None

    def __enter__(self) -> "StyleTransfer":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


def save_image(image: Image.Image, output_path: Path) -> None:
    """儲存 PNG，必要時建立上層資料夾"""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(output_path, "PNG", optimize=True)

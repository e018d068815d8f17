"""
圖片與張量轉換模組

將任意尺寸的 RGB 圖片縮放到固定解析度，轉為 (1, 3, R, R) 的 float32 張量；
以及將模型輸出張量轉回圖片（數值夾取到 [0, 1]）
"""

import logging
from pathlib import Path

import numpy as np
from PIL import Image

from stylizer.data_model import ChannelLayout


logger = logging.getLogger(__name__)

CHANNELS = 3
PIXEL_MAX_VALUE = 255.0

ImageSource = str | Path | Image.Image | None


def load_image(source: ImageSource) -> Image.Image | None:
    """
    載入圖片並轉為 RGB

    Args:
        source: 檔案路徑、PIL 圖片或 None

    Returns:
        RGB 圖片，若來源為 None 則返回 None
    """
    if source is None:
        return None
    if isinstance(source, Image.Image):
        return source.convert("RGB")
    with Image.open(source) as img:
        return img.convert("RGB")


def _check_resolution(resolution: int) -> None:
    if resolution < 1:
        msg = f"Resolution must be positive, got {resolution}"
        raise ValueError(msg)


def pixels_to_tensor(pixels: np.ndarray, layout: ChannelLayout) -> np.ndarray:
    """
    將 (H, W, 3) 像素陣列打包為 (1, 3, H, W) 張量

    Args:
        pixels: float32 像素陣列，數值範圍 [0, 1]
        layout: 通道排列方式

    Returns:
        float32 張量
    """
    height, width, _ = pixels.shape
    if layout == ChannelLayout.PLANAR:
        planar = np.transpose(pixels, (2, 0, 1))
        return np.ascontiguousarray(planar[np.newaxis], dtype=np.float32)
    # interleaved：rgbrgb... 直接填入宣告為 1x3xHxW 的緩衝區
    flat = np.ascontiguousarray(pixels, dtype=np.float32).reshape(-1)
    return flat.reshape(1, CHANNELS, height, width)


def tensor_to_pixels(
    tensor: np.ndarray, resolution: int, layout: ChannelLayout
) -> np.ndarray:
    """
    將張量解包為 (R, R, 3) 像素陣列（未夾取）

    Args:
        tensor: 模型輸出張量（任意形狀）
        resolution: 輸出解析度
        layout: 通道排列方式

    Returns:
        float32 像素陣列

    Raises:
        ValueError: 張量元素數量不足
    """
    _check_resolution(resolution)
    needed = resolution * resolution * CHANNELS
    flat = np.asarray(tensor, dtype=np.float32).reshape(-1)
    if flat.size < needed:
        msg = (
            f"Output tensor has {flat.size} values, "
            f"need {needed} for {resolution}x{resolution}x{CHANNELS}"
        )
        raise ValueError(msg)

    flat = flat[:needed]
    if layout == ChannelLayout.PLANAR:
        planar = flat.reshape(CHANNELS, resolution, resolution)
        return np.transpose(planar, (1, 2, 0))
    return flat.reshape(resolution, resolution, CHANNELS)


def image_to_tensor(
    image: Image.Image | None,
    resolution: int = 512,
    layout: ChannelLayout = ChannelLayout.PLANAR,
    debug_name: str = "Input",
) -> np.ndarray | None:
    """
    將圖片轉為模型輸入張量

    Args:
        image: 來源圖片（None 時記錄錯誤並返回 None）
        resolution: 目標解析度（正方形邊長）
        layout: 通道排列方式
        debug_name: 日誌中使用的名稱

    Returns:
        形狀為 (1, 3, R, R) 的 float32 張量，或 None
    """
    if image is None:
        logger.error("%s texture is null!", debug_name)
        return None

    _check_resolution(resolution)
    logger.info("Converting %s texture: %dx%d", debug_name, *image.size)

    # 縮放到固定解析度（雙線性）
    resized = image.convert("RGB").resize(
        (resolution, resolution), resample=Image.Resampling.BILINEAR
    )
    pixels = np.asarray(resized, dtype=np.float32) / PIXEL_MAX_VALUE

    r, g, b = pixels[0, 0]
    logger.debug(
        "%s first pixel values: R=%.4f, G=%.4f, B=%.4f", debug_name, r, g, b
    )

    tensor = pixels_to_tensor(pixels, layout)
    logger.info("Created %s tensor with shape: %s", debug_name, tensor.shape)
    return tensor


def _clamp(values: np.ndarray) -> np.ndarray:
    return np.clip(np.nan_to_num(values, nan=0.0), 0.0, 1.0)


def tensor_to_image(
    tensor: np.ndarray,
    resolution: int = 512,
    layout: ChannelLayout = ChannelLayout.PLANAR,
) -> Image.Image:
    """
    將模型輸出張量轉為 RGB 圖片

    NaN 視為 0，數值先夾取到 [0, 1] 再量化為 8 位元

    Args:
        tensor: 模型輸出張量
        resolution: 輸出解析度
        layout: 通道排列方式

    Returns:
        R x R 的 RGB 圖片
    """
    pixels = _clamp(tensor_to_pixels(tensor, resolution, layout))
    arr = (pixels * PIXEL_MAX_VALUE + 0.5).astype(np.uint8)
    return Image.fromarray(arr, "RGB")


def value_range(tensor: np.ndarray) -> tuple[float, float]:
    """
    計算張量數值範圍

    Args:
        tensor: 任意張量

    Returns:
        (最小值, 最大值)
    """
    arr = np.asarray(tensor, dtype=np.float32)
    if arr.size == 0:
        msg = "Cannot compute value range of an empty tensor"
        raise ValueError(msg)
    return float(arr.min()), float(arr.max())


def first_pixel(
    tensor: np.ndarray,
    resolution: int = 512,
    layout: ChannelLayout = ChannelLayout.PLANAR,
) -> tuple[float, float, float]:
    """取得夾取後的第一個輸出像素 (r, g, b)"""
    pixels = tensor_to_pixels(tensor, resolution, layout)
    r, g, b = _clamp(pixels[0, 0])
    return float(r), float(g), float(b)

"""
批次風格轉換模組

以同一張風格圖處理資料夾中的所有內容圖片（序列處理）
"""

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from stylizer.data_model import BatchConfig, BatchResult, is_supported_image

from . import tensor_codec
from .progress import RichProgressBar
from .transfer import StyleTransfer, save_image


logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = "_stylized"


class StyleBatchProcessor:
    """
    批次處理器

    單張失敗只計入失敗數，不中斷整批
    """

    def __init__(self, transfer: StyleTransfer, show_progress: bool = True):
        """
        初始化處理器

        Args:
            transfer: 已設定好後端的風格轉換元件
            show_progress: 是否顯示 rich 進度條
        """
        self._transfer = transfer
        self._show_progress = show_progress

    def scan_images(self, folder: Path, exclude: Path | None = None) -> list[Path]:
        """
        掃描資料夾中的圖片檔案

        Args:
            folder: 資料夾路徑
            exclude: 要排除的檔案（例如位於同資料夾的風格圖）

        Returns:
            圖片檔案路徑列表（依名稱排序）
        """
        excluded = exclude.resolve() if exclude is not None else None
        return [
            f
            for f in sorted(folder.iterdir())
            if is_supported_image(f) and f.resolve() != excluded
        ]

    @staticmethod
    def output_path_for(image_path: Path, output_folder: Path) -> Path:
        """輸出檔案路徑"""
        return output_folder / f"{image_path.stem}{OUTPUT_SUFFIX}.png"

    def process_folder(self, config: BatchConfig) -> BatchResult:
        """
        處理資料夾中的所有圖片

        Args:
            config: 批次設定

        Returns:
            處理結果
        """
        output_folder = config.output_folder
        if output_folder is None:
            raise ValueError("Output folder is not set")

        output_folder.mkdir(parents=True, exist_ok=True)
        image_files = self.scan_images(config.input_folder, exclude=config.style_path)
        total = len(image_files)

        if total == 0:
            logger.warning("No images found in %s", config.input_folder)
            return BatchResult(total=0, success=0, failed=0, output_folder=output_folder)

        style = tensor_codec.load_image(config.style_path)
        self._transfer.start()

        success_count = 0
        if self._show_progress:
            with RichProgressBar(total=total) as bar:
                for image_path in image_files:
                    ok = self._process_one(image_path, style, output_folder)
                    bar.update(image_path.name, success=ok)
                    success_count += int(ok)
        else:
            for image_path in image_files:
                success_count += int(self._process_one(image_path, style, output_folder))

        logger.info("Batch finished: %d/%d succeeded", success_count, total)
        return BatchResult(
            total=total,
            success=success_count,
            failed=total - success_count,
            output_folder=output_folder,
        )

    def _process_one(
        self,
        image_path: Path,
        style: Image.Image | None,
        output_folder: Path,
    ) -> bool:
        """處理單張圖片並存檔"""
        try:
            content = tensor_codec.load_image(image_path)
        except (OSError, UnidentifiedImageError):
            logger.exception("Cannot read image: %s", image_path.name)
            return False

        image = self._transfer.process_image(content, style)
        if image is None:
            return False

        output_path = self.output_path_for(image_path, output_folder)
        try:
            save_image(image, output_path)
        except OSError:
            logger.exception("Cannot write image: %s", output_path)
            return False

        logger.debug("Saved: %s", output_path.name)
        return True

"""
應用程式服務層

提供依賴注入和業務邏輯編排
"""

import logging

from stylizer.backends import BackendRegistry, load_builtin_backends
from stylizer.core.interfaces import BackendProtocol
from stylizer.core.processor import StyleBatchProcessor
from stylizer.core.transfer import StyleTransfer
from stylizer.data_model import BatchConfig, BatchResult, TransferConfig, TransferResult
from stylizer.ui import ModernUI


logger = logging.getLogger(__name__)


class ApplicationService:
    """
    應用程式服務

    協調 UI、風格轉換元件和後端
    """

    def __init__(
        self,
        ui: ModernUI | None = None,
        backend_registry: type[BackendRegistry] = BackendRegistry,
        show_progress: bool = True,
    ):
        """
        初始化應用程式服務

        Args:
            ui: 使用者介面（僅互動模式需要）
            backend_registry: 後端註冊表（可注入以供測試）
            show_progress: 批次處理時是否顯示進度條
        """
        load_builtin_backends()
        self.ui = ui
        self.backend_registry = backend_registry
        self.show_progress = show_progress

    def run_interactive(self) -> int:
        """
        執行互動式主循環

        Returns:
            退出碼 (0: 成功, 1: 失敗, 130: 中斷)
        """
        ui = self.ui or ModernUI()
        try:
            while True:
                config = ui.run()
                if config is None:
                    print("\n👋 再見！")
                    return 0

                ui.show_summary(config)
                self.execute(config)
                print("🔄 返回主選單...\n")

        except KeyboardInterrupt:
            print("\n\n👋 已中斷操作，再見！")
            return 130

        except Exception:
            logger.exception("Application error")
            print("\n❌ 應用程式發生錯誤，請查看日誌\n")
            return 1

    def run(self, config: TransferConfig | BatchConfig) -> int:
        """
        執行一次處理（非互動）

        Returns:
            退出碼 (0: 成功, 1: 失敗, 130: 中斷)
        """
        try:
            result = self.execute(config)
        except KeyboardInterrupt:
            print("\n\n👋 已中斷操作")
            return 130
        except Exception:
            logger.exception("Style transfer failed")
            return 1

        if isinstance(result, BatchResult) and not result.is_complete_success:
            return 1
        return 0

    def execute(
        self, config: TransferConfig | BatchConfig
    ) -> TransferResult | BatchResult:
        """
        依設定類型執行單張或批次處理並顯示結果

        Args:
            config: 處理設定

        Returns:
            處理結果
        """
        backend = self._create_backend(config)
        transfer = StyleTransfer(
            backend,
            resolution=config.resolution,
            content_input=config.content_input,
            style_input=config.style_input,
            layout=config.layout,
        )

        try:
            if isinstance(config, BatchConfig):
                processor = StyleBatchProcessor(transfer, show_progress=self.show_progress)
                batch_result = processor.process_folder(config)
                self._display_batch_result(batch_result)
                return batch_result

            transfer.start()
            result = transfer.run(config)
            self._display_result(result)
            return result
        finally:
            transfer.close()

    def _create_backend(self, config: TransferConfig | BatchConfig) -> BackendProtocol:
        """
        建立後端實例（工廠模式）

        Args:
            config: 處理設定

        Returns:
            後端實例
        """
        return self.backend_registry.create(
            name=config.backend_name,
            model_path=config.model_path,
            device=config.device,
        )

    def _display_result(self, result: TransferResult) -> None:
        """顯示單張結果"""
        print("\n" + "=" * 60)
        print("✅ 風格轉換完成！".center(60))
        print("=" * 60)
        print(f"\n  📐 輸出張量: {result.output_shape}")
        print(f"  📈 數值範圍: {result.value_min:.4f} ~ {result.value_max:.4f}")
        print(f"  ⏱️  耗時: {result.elapsed:.2f} 秒")
        print(f"  📂 輸出: {result.output_path}")
        print("\n" + "=" * 60 + "\n")

    def _display_batch_result(self, result: BatchResult) -> None:
        """顯示批次結果"""
        print("\n" + "=" * 60)
        print("✅ 處理完成！".center(60))
        print("=" * 60)
        print(f"\n  📊 總計: {result.total} 張圖片")
        print(f"  ✅ 成功: {result.success} 張")
        if result.failed > 0:
            print(f"  ❌ 失敗: {result.failed} 張")
        print(f"  📂 輸出: {result.output_folder}")
        print("\n" + "=" * 60 + "\n")

"""
後端介面定義

定義推論後端必須實作的協定與共用基底類別
"""

from abc import ABC, abstractmethod
from pathlib import Path
from types import TracebackType
from typing import ClassVar, Protocol, runtime_checkable

import numpy as np

from stylizer.data_model import ModelSignature


@runtime_checkable
class BackendProtocol(Protocol):
    """推論後端協定"""

    name: ClassVar[str]
    description: ClassVar[str]

    @property
    def is_loaded(self) -> bool: ...

    @property
    def signature(self) -> ModelSignature: ...

    def load_model(self) -> None: ...

    def ensure_model_loaded(self) -> None: ...

    def run(self, inputs: dict[str, np.ndarray]) -> np.ndarray: ...

    def close(self) -> None: ...


class BaseBackend(ABC):
    """
    推論後端基底類別

    子類別負責載入模型與執行推論，基底類別提供：
    - 延遲載入（ensure_model_loaded）
    - 資源釋放（close，可重複呼叫）
    - context manager 支援
    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""

    def __init__(self, model_path: str | Path, device: str | None = None):
        """
        初始化後端

        Args:
            model_path: 模型檔案路徑
            device: 計算設備，None 則自動選擇
        """
        self.model_path = Path(model_path)
        self.requested_device = device
        self._signature: ModelSignature | None = None

    @property
    @abstractmethod
    def is_loaded(self) -> bool:
        """模型是否已載入"""

    @abstractmethod
    def load_model(self) -> None:
        """載入模型並建立執行環境"""

    @abstractmethod
    def _execute(self, inputs: dict[str, np.ndarray]) -> np.ndarray:
        """執行推論並返回第一個輸出"""

    @abstractmethod
    def _release(self) -> None:
        """釋放執行環境"""

    def ensure_model_loaded(self) -> None:
        """確保模型已載入"""
        if not self.is_loaded:
            self.load_model()

    @property
    def signature(self) -> ModelSignature:
        """模型輸入輸出結構"""
        if self._signature is None:
            raise RuntimeError("Model not loaded")
        return self._signature

    def _check_model_file(self) -> None:
        if not self.model_path.is_file():
            msg = f"Model file not found: {self.model_path}"
            raise FileNotFoundError(msg)

    def run(self, inputs: dict[str, np.ndarray]) -> np.ndarray:
        """
        以具名輸入執行一次推論

        Args:
            inputs: 輸入名稱到張量的對應

        Returns:
            第一個輸出張量

        Raises:
            RuntimeError: 模型尚未載入
            ValueError: 缺少模型宣告的輸入
        """
        if not self.is_loaded:
            raise RuntimeError("Model not loaded")

        declared = self.signature.input_names
        missing = [n for n in declared if n not in inputs]
        if declared and missing:
            msg = f"Missing model inputs: {missing} (declared: {declared})"
            raise ValueError(msg)

        return self._execute(inputs)

    def close(self) -> None:
        """釋放執行環境（可重複呼叫）"""
        if self.is_loaded:
            self._release()
        self._signature = None

    def __enter__(self) -> "BaseBackend":
        self.ensure_model_loaded()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @classmethod
    def get_available_devices(cls) -> list[str]:
        """取得此後端可用的計算設備"""
        return ["cpu"]

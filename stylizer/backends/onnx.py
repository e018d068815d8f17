"""
ONNX Runtime 推論後端

以 onnxruntime 執行雙輸入（內容 + 風格）風格轉換模型：
- 有 CUDA 執行提供者時優先使用 GPU，並保留 CPU 作為後備
- 模型輸入/輸出結構直接取自 InferenceSession
"""

import logging
from pathlib import Path
from typing import Any, ClassVar

import numpy as np
import onnxruntime as ort  # type: ignore[import-untyped]

from stylizer.core.interfaces import BaseBackend
from stylizer.data_model import ModelSignature, TensorInfo

from .registry import BackendRegistry


logger = logging.getLogger(__name__)

CPU_PROVIDER = "CPUExecutionProvider"
CUDA_PROVIDER = "CUDAExecutionProvider"

# 設備名稱對應的執行提供者（依優先順序）
_DEVICE_PROVIDERS: dict[str, list[str]] = {
    "cuda": [CUDA_PROVIDER, CPU_PROVIDER],
    "cpu": [CPU_PROVIDER],
}


def _tensor_info(node: Any) -> TensorInfo:
    shape = tuple(d if isinstance(d, int | str) else None for d in (node.shape or ()))
    return TensorInfo(name=node.name, shape=shape)


@BackendRegistry.register("onnx")
class OnnxBackend(BaseBackend):
    """
    ONNX Runtime 後端

    device=None 時，若 onnxruntime 支援 CUDA 則使用 GPU，否則使用 CPU
    """

    name: ClassVar[str] = "onnx"
    description: ClassVar[str] = "ONNX Runtime - .onnx 模型（CUDA / CPU）"

    def __init__(
        self,
        model_path: str | Path,
        device: str | None = None,
        intra_op_threads: int = 0,
    ):
        """
        初始化 ONNX 後端

        Args:
            model_path: .onnx 模型檔案路徑
            device: 計算設備（cuda/cpu），None 則自動選擇
            intra_op_threads: 運算子內執行緒數，0 表示由 onnxruntime 決定
        """
        super().__init__(model_path=model_path, device=device)
        if device is not None and device not in _DEVICE_PROVIDERS:
            msg = f"Unsupported device for onnx backend: {device!r}"
            raise ValueError(msg)

        self.device = device or ("cuda" if self._cuda_available() else "cpu")
        self.intra_op_threads = intra_op_threads
        self._session: Any = None

        logger.info("ONNX backend: device=%s, model=%s", self.device, self.model_path)

    @staticmethod
    def _cuda_available() -> bool:
        return CUDA_PROVIDER in ort.get_available_providers()

    @property
    def providers(self) -> list[str]:
        """實際請求的執行提供者"""
        available = set(ort.get_available_providers())
        wanted = _DEVICE_PROVIDERS[self.device]
        return [p for p in wanted if p in available] or [CPU_PROVIDER]

    @property
    def is_loaded(self) -> bool:
        return self._session is not None

    def load_model(self) -> None:
        """載入 ONNX 模型並建立 InferenceSession"""
        self._check_model_file()
        logger.info("Loading ONNX model: %s", self.model_path)

        options = ort.SessionOptions()
        if self.intra_op_threads > 0:
            options.intra_op_num_threads = self.intra_op_threads

        self._session = ort.InferenceSession(
            str(self.model_path),
            sess_options=options,
            providers=self.providers,
        )
        self._signature = ModelSignature(
            inputs=tuple(_tensor_info(n) for n in self._session.get_inputs()),
            outputs=tuple(_tensor_info(n) for n in self._session.get_outputs()),
        )
        logger.info(
            "ONNX model loaded with providers: %s",
            ", ".join(self._session.get_providers()),
        )

    def _execute(self, inputs: dict[str, np.ndarray]) -> np.ndarray:
        declared = self.signature.input_names
        feed = {name: inputs[name] for name in declared} if declared else inputs
        outputs = self._session.run(None, feed)
        return np.asarray(outputs[0], dtype=np.float32)

    def _release(self) -> None:
        self._session = None
        logger.debug("ONNX session released")

    @classmethod
    def get_available_devices(cls) -> list[str]:
        devices = ["cpu"]
        if CUDA_PROVIDER in ort.get_available_providers():
            devices.insert(0, "cuda")
        return devices

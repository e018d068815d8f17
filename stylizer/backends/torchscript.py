"""
TorchScript 推論後端

載入以 torch.jit.save 匯出的風格轉換模型，輸入依位置傳入 forward，
輸入名稱以位置編號表示（"0"、"1"、...）
"""

import logging
from pathlib import Path
from typing import Any, ClassVar

import numpy as np
import torch

from stylizer.core.interfaces import BaseBackend
from stylizer.data_model import ModelSignature, TensorInfo

from .registry import BackendRegistry


logger = logging.getLogger(__name__)

# 無法讀取 forward schema 時假設的輸入數量（內容 + 風格）
DEFAULT_INPUT_COUNT = 2


def _select_device(device: str | None) -> torch.device:
    """設備選擇（CUDA → MPS → CPU）"""
    if device is not None:
        return torch.device(device)
    if torch.cuda.is_available():
        return torch.device("cuda")
    if torch.backends.mps.is_available():
        return torch.device("mps")
    return torch.device("cpu")


@BackendRegistry.register("torchscript")
class TorchScriptBackend(BaseBackend):
    """TorchScript 後端"""

    name: ClassVar[str] = "torchscript"
    description: ClassVar[str] = "TorchScript - torch.jit 模型（CUDA / MPS / CPU）"

    def __init__(self, model_path: str | Path, device: str | None = None):
        """
        初始化 TorchScript 後端

        Args:
            model_path: .pt 模型檔案路徑
            device: 計算設備（cuda/mps/cpu），None 則自動選擇
        """
        super().__init__(model_path=model_path, device=device)
        self.device = _select_device(device)
        self._module: Any = None

        logger.info(
            "TorchScript backend: device=%s, model=%s", self.device, self.model_path
        )

    @property
    def is_loaded(self) -> bool:
        return self._module is not None

    def load_model(self) -> None:
        """載入 TorchScript 模型"""
        self._check_model_file()
        logger.info("Loading TorchScript model: %s", self.model_path)

        module = torch.jit.load(str(self.model_path), map_location=self.device)
        module.eval()
        self._module = module
        self._signature = self._read_signature(module)

        logger.info("TorchScript model loaded on %s", self.device)

    @staticmethod
    def _read_signature(module: Any) -> ModelSignature:
        """從 forward schema 讀取輸入數量與名稱"""
        arg_names: list[str] = []
        output_count = 1
        try:
            schema = module.forward.schema
            arg_names = [a.name for a in schema.arguments][1:]  # 略過 self
            output_count = max(1, len(schema.returns))
        except (AttributeError, RuntimeError):
            logger.debug("forward schema unavailable, assuming two inputs")

        count = len(arg_names) or DEFAULT_INPUT_COUNT
        if arg_names:
            logger.debug("TorchScript forward arguments: %s", ", ".join(arg_names))

        return ModelSignature(
            inputs=tuple(TensorInfo(name=str(i)) for i in range(count)),
            outputs=tuple(TensorInfo(name=str(i)) for i in range(output_count)),
        )

    def _execute(self, inputs: dict[str, np.ndarray]) -> np.ndarray:
        args = [
            torch.from_numpy(np.ascontiguousarray(inputs[name])).to(self.device)
            for name in self.signature.input_names
        ]
        with torch.no_grad():
            output = self._module(*args)

        if isinstance(output, tuple | list):
            output = output[0]
        return output.detach().to("cpu", dtype=torch.float32).numpy()

    def _release(self) -> None:
        self._module = None
        if self.device.type == "cuda":
            torch.cuda.empty_cache()
        logger.debug("TorchScript module released")

    @classmethod
    def get_available_devices(cls) -> list[str]:
        devices = []
        if torch.cuda.is_available():
            devices.append("cuda")
        if torch.backends.mps.is_available():
            devices.append("mps")
        devices.append("cpu")
        return devices

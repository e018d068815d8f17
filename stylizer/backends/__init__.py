"""
後端模組

提供各種推論後端的實作

注意：使用延遲導入避免循環依賴，並避免未使用的推論引擎被載入
"""

from typing import TYPE_CHECKING

from .registry import BackendRegistry


if TYPE_CHECKING:
    from .onnx import OnnxBackend
    from .torchscript import TorchScriptBackend


def load_builtin_backends() -> None:
    """匯入內建後端以觸發註冊"""
    from . import onnx, torchscript  # noqa: F401


def __getattr__(name: str) -> type:
    """延遲導入後端類別，避免循環依賴"""
    if name == "OnnxBackend":
        from .onnx import OnnxBackend

        return OnnxBackend
    if name == "TorchScriptBackend":
        from .torchscript import TorchScriptBackend

        return TorchScriptBackend
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "BackendRegistry",
    "OnnxBackend",
    "TorchScriptBackend",
    "load_builtin_backends",
]

"""
Pytest 配置和共用 fixtures
"""

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import ClassVar

import numpy as np
import pytest
import torch
from PIL import Image, ImageDraw

from stylizer.backends import load_builtin_backends
from stylizer.backends.registry import BackendRegistry
from stylizer.core.interfaces import BaseBackend
from stylizer.data_model import ModelSignature, TensorInfo


ExecuteFunc = Callable[[dict[str, np.ndarray]], np.ndarray]


def _blend(inputs: dict[str, np.ndarray]) -> np.ndarray:
    return 0.5 * inputs["0"] + 0.5 * inputs["1"]


class FakeBackend(BaseBackend):
    """以 numpy 函數代替推論引擎的測試後端"""

    name: ClassVar[str] = "fake"
    description: ClassVar[str] = "測試用後端"

    def __init__(
        self,
        model_path: str | Path = "fake.onnx",
        device: str | None = None,
        fn: ExecuteFunc | None = None,
        input_names: tuple[str, ...] = ("0", "1"),
    ):
        super().__init__(model_path=model_path, device=device)
        self.fn = fn or _blend
        self.input_names = input_names
        self._loaded = False
        self.load_count = 0
        self.release_count = 0
        self.calls: list[dict[str, np.ndarray]] = []

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load_model(self) -> None:
        self._loaded = True
        self.load_count += 1
        self._signature = ModelSignature(
            inputs=tuple(
                TensorInfo(name=n, shape=(1, 3, "height", "width"))
                for n in self.input_names
            ),
            outputs=(TensorInfo(name="output"),),
        )

    def _execute(self, inputs: dict[str, np.ndarray]) -> np.ndarray:
        self.calls.append(inputs)
        return self.fn(inputs)

    def _release(self) -> None:
        self._loaded = False
        self.release_count += 1


class BlendModule(torch.nn.Module):
    """內容與風格各半混合"""

    def forward(self, content: torch.Tensor, style: torch.Tensor) -> torch.Tensor:
        return content * 0.5 + style * 0.5


@pytest.fixture
def make_backend() -> Callable[..., FakeBackend]:
    """建立 FakeBackend 的工廠"""
    return FakeBackend


@pytest.fixture
def fake_backend() -> FakeBackend:
    """預設的混合測試後端"""
    return FakeBackend()


@pytest.fixture
def registry_snapshot() -> Iterator[None]:
    """測試後還原後端註冊表（先載入內建後端，避免還原時遺失）"""
    load_builtin_backends()
    saved = dict(BackendRegistry._backends)
    yield
    BackendRegistry._backends.clear()
    BackendRegistry._backends.update(saved)


@pytest.fixture
def registered_fake(registry_snapshot: None) -> type[FakeBackend]:
    """將 FakeBackend 註冊為 "fake" """
    BackendRegistry.register("fake")(FakeBackend)
    return FakeBackend


@pytest.fixture(scope="session")
def test_images_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """創建測試圖片目錄"""
    return tmp_path_factory.mktemp("images")


@pytest.fixture(scope="session")
def content_image_path(test_images_dir: Path) -> Path:
    """
    生成內容測試圖片（非正方形，帶漸層與幾何圖形）
    """
    img_path = test_images_dir / "content.png"
    width, height = 96, 64
    x = np.linspace(0, 255, width, dtype=np.float32)
    y = np.linspace(0, 255, height, dtype=np.float32)
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, :, 0] = x[np.newaxis, :].astype(np.uint8)
    arr[:, :, 1] = y[:, np.newaxis].astype(np.uint8)
    arr[:, :, 2] = 128

    img = Image.fromarray(arr, "RGB")
    draw = ImageDraw.Draw(img)
    draw.ellipse([(30, 16), (66, 48)], fill=(255, 220, 177))
    img.save(img_path)
    return img_path


@pytest.fixture(scope="session")
def style_image_path(test_images_dir: Path) -> Path:
    """
    生成風格測試圖片（斜向條紋）
    """
    img_path = test_images_dir / "style.png"
    img = Image.new("RGB", (48, 48), color=(20, 40, 120))
    draw = ImageDraw.Draw(img)
    for i in range(-48, 48, 8):
        draw.line([(i, 0), (i + 48, 48)], fill=(240, 200, 30), width=3)
    img.save(img_path)
    return img_path


@pytest.fixture(scope="session")
def torchscript_model_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """以 torch.jit.script 匯出的雙輸入混合模型"""
    path = tmp_path_factory.mktemp("models") / "blend.pt"
    torch.jit.script(BlendModule()).save(str(path))
    return path


def solid_image(color: tuple[int, int, int], size: tuple[int, int] = (8, 8)) -> Image.Image:
    """純色圖片"""
    return Image.new("RGB", size, color=color)


@pytest.fixture
def red_image() -> Image.Image:
    return solid_image((255, 0, 0))


@pytest.fixture
def blue_image() -> Image.Image:
    return solid_image((0, 0, 255))

"""
後端註冊表

以裝飾器註冊推論後端，並以名稱建立實例（工廠模式）
"""

from collections.abc import Callable
from typing import Any, ClassVar, TypeVar

from stylizer.core.interfaces import BaseBackend
from stylizer.data_model import BackendInfo


BackendT = TypeVar("BackendT", bound=type[BaseBackend])


class BackendRegistry:
    """推論後端註冊表"""

    _backends: ClassVar[dict[str, type[BaseBackend]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[BackendT], BackendT]:
        """
        註冊後端的類別裝飾器

        Args:
            name: 後端名稱

        Returns:
            裝飾器
        """

        def decorator(backend_class: BackendT) -> BackendT:
            cls._backends[name] = backend_class
            return backend_class

        return decorator

    @classmethod
    def has_backend(cls, name: str) -> bool:
        """是否已註冊"""
        return name in cls._backends

    @classmethod
    def get(cls, name: str) -> type[BaseBackend]:
        """
        取得後端類別

        Raises:
            ValueError: 未知的後端名稱
        """
        try:
            return cls._backends[name]
        except KeyError:
            available = ", ".join(sorted(cls._backends)) or "(none)"
            msg = f"Unknown backend: {name!r}. Available: {available}"
            raise ValueError(msg) from None

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> BaseBackend:
        """
        建立後端實例

        Args:
            name: 後端名稱
            **kwargs: 傳給後端建構子的參數

        Returns:
            後端實例
        """
        return cls.get(name)(**kwargs)

    @classmethod
    def list_backends(cls) -> list[BackendInfo]:
        """列出所有已註冊後端"""
        return [
            BackendInfo(
                name=name,
                description=backend_class.description,
                devices=tuple(backend_class.get_available_devices()),
            )
            for name, backend_class in sorted(cls._backends.items())
        ]

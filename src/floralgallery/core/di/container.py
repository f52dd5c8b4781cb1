"""
轻量依赖注入容器，用于把工作流与具体的存储/账本实现解耦。

Interfaces are usually ``Protocol`` ports; a factory may legitimately produce
``None`` (no ledger when the contract address is not configured).
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Tuple, Type, TypeVar

T = TypeVar("T")

_Registration = Tuple[Callable[[], Any], bool]


class Container:
    _instance: "Container" | None = None

    def __init__(self) -> None:
        self._registrations: Dict[Any, _Registration] = {}
        self._singletons: Dict[Any, Any] = {}

    @classmethod
    def instance(cls) -> "Container":
        """进程级默认容器"""
        if cls._instance is None:
            cls._instance = Container()
        return cls._instance

    def register(self, interface: Type[T], factory: Callable[[], T], singleton: bool = False) -> None:
        """注册依赖工厂；重新注册会丢弃已缓存的单例。"""
        self._registrations[interface] = (factory, singleton)
        self._singletons.pop(interface, None)

    def register_instance(self, interface: Type[T], instance: T) -> None:
        self._registrations[interface] = (lambda: instance, True)
        self._singletons[interface] = instance

    def is_registered(self, interface: Type[Any]) -> bool:
        return interface in self._registrations

    def resolve(self, interface: Type[T]) -> T:
        """获取依赖实例。"""
        if interface in self._singletons:
            return self._singletons[interface]

        registration = self._registrations.get(interface)
        if registration is None:
            raise ValueError(f"No factory registered for {interface}")

        factory, singleton = registration
        instance = factory()
        if singleton:
            self._singletons[interface] = instance
        return instance

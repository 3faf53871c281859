from typing import Any, Callable, Generator

import pytest
from coreason_define import DefineSettings, Sandbox
from coreason_define.scheduler import TickScheduler
from coreason_define.vfs import VirtualFileSystem


@pytest.fixture
def sandbox() -> Generator[Sandbox, None, None]:
    sb = Sandbox(DefineSettings())
    yield sb
    sb.destroy()


@pytest.fixture
def scheduler() -> TickScheduler:
    return TickScheduler()


@pytest.fixture
def vfs(scheduler: TickScheduler) -> VirtualFileSystem:
    return VirtualFileSystem(scheduler)


@pytest.fixture
def exporting() -> Callable[..., Callable[..., None]]:
    """Builds a module body that copies fixed values into its exports."""

    def build(**values: Any) -> Callable[..., None]:
        def body(exports: dict[str, Any], require: Any, module: Any, filename: str, dirname: str) -> None:
            exports.update(values)

        return body

    return build


"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(small_session, memory_sink):
        assert small_session.space.size == 16
"""

from __future__ import annotations

import pytest

from shimgen.config import PaperFormat, PrintSpec, RuntimeConfig, load_print_spec
from shimgen.core import validate_space
from shimgen.models import GenerationSession, Margins, PermutationSpace, PrintOptions
from shimgen.pipeline import MemoryOutputSink
from shimgen.render import RecordingRenderer


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """运行期配置（默认值，不读环境文件）"""
    return RuntimeConfig()


@pytest.fixture(scope="session")
def print_spec() -> PrintSpec:
    """随包发布的打印规范"""
    return load_print_spec()


@pytest.fixture
def grid_spec() -> PrintSpec:
    """
    测试用纸张：x=2,y=3 的理论最大件为 16.5 x 64.25，
    零边距零间距、rows=2 时恰好排成 2x2 网格
    """
    return PrintSpec(
        schema_version="1.0",
        paper_formats={"grid": PaperFormat(width=33.0, height=128.5)},
        units={"mm": 1.0},
    )


@pytest.fixture
def grid_options() -> PrintOptions:
    """配合 grid_spec 的打印选项（每页4件）"""
    return PrintOptions(
        format="grid",
        margins=Margins(top=0, bottom=0, left=0, right=0),
        padding=0,
        cols=1,
        rows=2,
    )


# ============================================================================
# 会话 Fixtures
# ============================================================================

@pytest.fixture
def tiny_space() -> PermutationSpace:
    """x=2, y=1, seed=0：4件，c=53"""
    return validate_space(2, 1, 0)


@pytest.fixture
def small_space() -> PermutationSpace:
    """x=2, y=3, seed=0：16件"""
    return validate_space(2, 3, 0)


@pytest.fixture
def small_session(small_space: PermutationSpace) -> GenerationSession:
    return GenerationSession(space=small_space)


# ============================================================================
# 输出 Fixtures
# ============================================================================

@pytest.fixture
def memory_sink() -> MemoryOutputSink:
    return MemoryOutputSink()


@pytest.fixture
def recorders() -> list[RecordingRenderer]:
    """录制渲染器工厂创建的全部实例"""
    return []


@pytest.fixture
def recording_factory(recorders: list[RecordingRenderer]):
    def factory(page_width: float, page_height: float) -> RecordingRenderer:
        renderer = RecordingRenderer(page_width, page_height)
        recorders.append(renderer)
        return renderer

    return factory

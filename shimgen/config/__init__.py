"""
配置层 - 加载运行期配置与打印规范

职责：
- 加载 config/shimgen_runtime.yaml（运行期参数，可被环境变量覆盖）
- 加载 shimgen/config/print_spec.yaml（纸张尺寸/长度单位）
- 提供类型安全的配置访问接口
"""

from .runtime_config import RuntimeConfig, configure_logging, get_config, reload_config
from .spec_loader import PaperFormat, PrintSpec, SpecLoader, load_print_spec

__all__ = [
    "SpecLoader",
    "PrintSpec",
    "PaperFormat",
    "load_print_spec",
    "RuntimeConfig",
    "configure_logging",
    "get_config",
    "reload_config",
]

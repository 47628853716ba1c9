"""
楔片组合件生成系统 - 核心模块

模块结构：
- config/     运行期配置与打印规范加载
- models/     数据模型定义
- core/       核心算法（序列号排列/几何构建/网格排版）
- render/     绘制后端（PDF/SVG/录制/ZIP）
- pipeline/   分页导出引擎与任务管理
- api.py      对外调用接口
"""

__version__ = "0.1.0"

"""
数据模型单元测试
"""

import pytest
from pydantic import ValidationError

from shimgen.interfaces import SerialNumberError
from shimgen.models import (
    BBox,
    ExportJob,
    ExportProgress,
    GenerationSession,
    JobStatus,
    JobType,
    PermutationSpace,
    Point,
    Selection,
    SerialNumber,
)


class TestSerialNumber:
    """序列号值对象测试"""

    def test_parse(self):
        sn = SerialNumber.parse("+CAB")
        assert sn.upward
        assert sn.counts == (3, 1, 2)
        assert sn.slot_count == 3
        assert str(sn) == "+CAB"

    def test_downward(self):
        assert not SerialNumber.parse("-Z").upward

    @pytest.mark.parametrize("text", ["", "+", "AB", "+ab", "+A-"])
    def test_parse_invalid(self, text: str):
        assert not SerialNumber.is_valid(text)
        with pytest.raises(SerialNumberError):
            SerialNumber.parse(text)


class TestBBox:
    """边界框测试"""

    def test_from_points(self):
        box = BBox.from_points([Point(x=1, y=5), Point(x=-2, y=3), Point(x=4, y=0)])
        assert (box.xmin, box.ymin, box.xmax, box.ymax) == (-2, 0, 4, 5)
        assert box.width == 6
        assert box.height == 5

    def test_contains(self):
        box = BBox(xmin=0, ymin=0, xmax=1, ymax=1)
        assert box.contains(Point(x=1, y=0))
        assert not box.contains(Point(x=1.1, y=0))


class TestSession:
    """生成会话测试"""

    def test_space_properties(self):
        space = PermutationSpace(x=3, y=2, seed=7, increment=83)
        assert space.half_size == 9
        assert space.size == 18
        assert space.multiplier == 7
        assert space.label == "3-2-7"

    def test_defaults_to_full_space(self, small_space):
        session = GenerationSession(space=small_space)
        assert session.piece_count == 16
        assert session.selection.count == 16

    def test_piece_count_clamped(self, small_space):
        assert GenerationSession(space=small_space, piece_count=100).piece_count == 16
        assert GenerationSession(space=small_space, piece_count=5).selection.total == 5

    def test_selection_mismatch(self, small_space):
        with pytest.raises(ValidationError):
            GenerationSession(space=small_space, selection=Selection(3))


class TestExportJob:
    """导出任务模型测试"""

    @pytest.fixture
    def job(self) -> ExportJob:
        return ExportJob(job_id="test-job", job_type=JobType.DOCUMENTS)

    def test_mark_running(self, job: ExportJob):
        job.mark_running()
        assert job.status == JobStatus.RUNNING
        assert job.is_active
        assert job.started_at is not None

    def test_mark_succeeded(self, job: ExportJob):
        job.mark_running()
        job.mark_succeeded()
        assert job.status == JobStatus.SUCCEEDED
        assert not job.is_active

    def test_mark_failed(self, job: ExportJob):
        job.mark_running()
        job.mark_failed("Test error")
        assert job.status == JobStatus.FAILED
        assert "Test error" in job.errors

    def test_mark_cancelled(self, job: ExportJob):
        job.mark_cancelled()
        assert job.status == JobStatus.CANCELLED
        assert job.finished_at is not None

    def test_add_flag(self, job: ExportJob):
        job.add_flag("序列号非法:+")
        job.add_flag("序列号非法:+")  # 重复添加
        assert job.flags == ["序列号非法:+"]


class TestExportProgress:
    """进度测试"""

    def test_percent(self):
        assert ExportProgress(items_done=5, items_total=20).percent == 25.0
        assert ExportProgress().percent == 100.0

    def test_as_tuple(self):
        progress = ExportProgress(items_done=1, items_total=2, page=None, document=1, documents_total=3)
        assert progress.as_tuple() == (1, 2, None, None, 1, 3)

"""
文档导出器单元测试

grid_spec + grid_options 下每页 2x2 = 4 件；small_session 共 16 件。
"""

from __future__ import annotations

import pytest

from shimgen.core.permutation import PermutationEngine
from shimgen.interfaces import ExportError, IOutputSink
from shimgen.models import (
    DocumentLimits,
    GenerationSession,
    JobStatus,
    Margins,
    PrintOptions,
    Selection,
    SelectionMode,
)
from shimgen.pipeline import (
    DirectoryOutputSink,
    DocumentExporter,
    MemoryOutputSink,
    StepStatus,
    run_sync,
)


def make_exporter(
    session,
    options,
    spec,
    sink,
    factory,
    config,
    limits=None,
    chunk_size=None,
    on_progress=None,
    on_finish=None,
) -> DocumentExporter:
    return DocumentExporter(
        session,
        options,
        limits or DocumentLimits(max_items=16, max_items_per_document=1000, max_pages_per_document=100),
        sink,
        on_progress,
        on_finish,
        renderer_factory=factory,
        print_spec=spec,
        chunk_size=chunk_size,
        config=config,
    )


class TestPagination:
    """换页与换文档"""

    def test_grid(self, small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config):
        exporter = make_exporter(small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config)
        run_sync(exporter)
        assert (exporter.grid.cols, exporter.grid.rows) == (2, 2)
        assert exporter.grid.scale == pytest.approx(1.0)

    def test_items_per_document_split(
        self, small_session, grid_options, grid_spec, memory_sink, recording_factory, recorders, runtime_config
    ):
        limits = DocumentLimits(max_items=16, max_items_per_document=6, max_pages_per_document=100)
        exporter = make_exporter(
            small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config, limits
        )
        result = run_sync(exporter)

        assert result.status == JobStatus.SUCCEEDED
        assert result.items_exported == 16
        assert memory_sink.filenames == ["2-3-0.1-2.pdf", "2-3-0.3-4.pdf", "2-3-0.5-5.pdf"]
        assert all(t == "application/pdf" for t in memory_sink.media_types.values())
        assert [r.count("rect") for r in recorders] == [6, 6, 4]
        assert [r.page_count for r in recorders] == [2, 2, 1]
        assert all(r.finalized for r in recorders)

    def test_page_limit_split(
        self, small_session, grid_options, grid_spec, memory_sink, recording_factory, recorders, runtime_config
    ):
        limits = DocumentLimits(max_items=16, max_items_per_document=1000, max_pages_per_document=3)
        exporter = make_exporter(
            small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config, limits
        )
        run_sync(exporter)
        assert memory_sink.filenames == ["2-3-0.1-3.pdf", "2-3-0.4-4.pdf"]
        assert [r.count("rect") for r in recorders] == [12, 4]

    def test_max_items_mid_page(
        self, small_session, grid_options, grid_spec, memory_sink, recording_factory, recorders, runtime_config
    ):
        """总件数上限在页中截止：关闭当前文档，正常完成"""
        limits = DocumentLimits(max_items=5, max_items_per_document=1000, max_pages_per_document=100)
        exporter = make_exporter(
            small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config, limits
        )
        result = run_sync(exporter)
        assert result.status == JobStatus.SUCCEEDED
        assert result.items_exported == 5
        assert memory_sink.filenames == ["2-3-0.1-2.pdf"]
        assert recorders[0].count("rect") == 5
        assert recorders[0].page_count == 2

    def test_polygons_per_piece(
        self, small_session, grid_options, grid_spec, memory_sink, recording_factory, recorders, runtime_config
    ):
        engine = PermutationEngine(small_session.space)
        expected = sum(
            sum(ord(ch) - 64 for ch in engine.serial_number(i)[1:]) for i in range(16)
        )
        run_sync(make_exporter(small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config))
        assert sum(r.count("polygon") for r in recorders) == expected

    def test_real_pdf(self, tiny_space, tmp_path, runtime_config):
        """默认渲染器输出有效PDF"""
        session = GenerationSession(space=tiny_space)
        exporter = DocumentExporter(session, PrintOptions(), sink=DirectoryOutputSink(tmp_path), config=runtime_config)
        result = run_sync(exporter)
        path = tmp_path / "2-1-0.1-1.pdf"
        assert result.outputs == [str(path)]
        assert path.read_bytes().startswith(b"%PDF")


class TestText:
    """标签与页眉页脚"""

    def test_labels_follow_selection(
        self, small_space, grid_options, grid_spec, memory_sink, recording_factory, recorders, runtime_config
    ):
        """ONLY 模式按索引升序导出"""
        session = GenerationSession(
            space=small_space, selection=Selection(16, SelectionMode.ONLY, [11, 3, 7])
        )
        options = grid_options.model_copy(update={"label_position": "top"})
        run_sync(make_exporter(session, options, grid_spec, memory_sink, recording_factory, runtime_config))

        engine = PermutationEngine(small_space)
        assert recorders[0].texts() == [engine.serial_number(i) for i in (3, 7, 11)]
        assert memory_sink.filenames == ["2-3-0.1-1.pdf"]

    def test_label_positions(
        self, small_session, grid_options, grid_spec, memory_sink, recording_factory, recorders, runtime_config
    ):
        options = grid_options.model_copy(update={"label_position": "bottom"})
        limits = DocumentLimits(max_items=1)
        run_sync(
            make_exporter(small_session, options, grid_spec, memory_sink, recording_factory, runtime_config, limits)
        )
        _, x, y, _ = [op for op in recorders[0].ops if op[0] == "text"][0]
        font_height = runtime_config.export.font_size_pt / grid_spec.points_per_unit("mm")
        assert x == pytest.approx(0.0)
        assert y == pytest.approx(64.25 + font_height)

    def test_headers_and_footers(
        self, small_session, grid_options, grid_spec, memory_sink, recording_factory, recorders, runtime_config
    ):
        options = grid_options.model_copy(
            update={"seed_position": "header", "page_number_position": "footer"}
        )
        limits = DocumentLimits(max_items=8)
        run_sync(
            make_exporter(small_session, options, grid_spec, memory_sink, recording_factory, runtime_config, limits)
        )
        assert recorders[0].texts() == ["2-3-0", "1/2", "2-3-0", "2/2"]


class TestDoubleSided:
    """双面打印：镜像按文档内页码奇偶"""

    @pytest.fixture
    def mirrored_options(self, grid_options):
        # 右边距 5 时每页恰好 1 件
        return grid_options.model_copy(
            update={
                "sides": "double",
                "rows": 1,
                "label_position": "top",
                "margins": Margins(top=0, bottom=0, left=0, right=5),
            }
        )

    def test_each_document_starts_on_odd_page(
        self, small_session, mirrored_options, grid_spec, memory_sink, recording_factory, recorders, runtime_config
    ):
        limits = DocumentLimits(max_items=16, max_items_per_document=1000, max_pages_per_document=3)
        exporter = make_exporter(
            small_session, mirrored_options, grid_spec, memory_sink, recording_factory, runtime_config, limits
        )
        run_sync(exporter)

        assert exporter.grid.per_page == 1
        label_xs = [[op[1] for op in r.ops if op[0] == "text"] for r in recorders]
        assert label_xs == [pytest.approx([0.0, 5.0, 0.0])] * 5 + [pytest.approx([0.0])]

    def test_file_names_keep_running_page_numbers(
        self, small_session, mirrored_options, grid_spec, memory_sink, recording_factory, runtime_config
    ):
        limits = DocumentLimits(max_items=16, max_items_per_document=1000, max_pages_per_document=3)
        run_sync(
            make_exporter(
                small_session, mirrored_options, grid_spec, memory_sink, recording_factory, runtime_config, limits
            )
        )
        assert memory_sink.filenames == [
            "2-3-0.1-3.pdf",
            "2-3-0.4-6.pdf",
            "2-3-0.7-9.pdf",
            "2-3-0.10-12.pdf",
            "2-3-0.13-15.pdf",
            "2-3-0.16-16.pdf",
        ]

    def test_seed_label_mirrors_per_document(
        self, small_session, mirrored_options, grid_spec, memory_sink, recording_factory, recorders, runtime_config
    ):
        """页眉种子标签贴左边距，随文档内奇偶镜像"""
        options = mirrored_options.model_copy(
            update={"label_position": "none", "seed_position": "header"}
        )
        limits = DocumentLimits(max_items=4, max_items_per_document=1000, max_pages_per_document=3)
        run_sync(make_exporter(small_session, options, grid_spec, memory_sink, recording_factory, runtime_config, limits))

        assert recorders[0].texts() == ["2-3-0"] * 3
        assert [op[1] for op in recorders[0].ops if op[0] == "text"] == pytest.approx([0.0, 5.0, 0.0])
        assert [op[1] for op in recorders[1].ops if op[0] == "text"] == pytest.approx([0.0])


class TestStepping:
    """分块步进/进度/取消/完成回调"""

    def test_progress_after_each_chunk(
        self, small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config
    ):
        calls = []
        exporter = make_exporter(
            small_session,
            grid_options,
            grid_spec,
            memory_sink,
            recording_factory,
            runtime_config,
            chunk_size=4,
            on_progress=lambda *args: calls.append(args),
        )
        statuses = []
        while True:
            statuses.append(exporter.step())
            if statuses[-1] is StepStatus.DONE:
                break

        assert statuses == [StepStatus.MORE_WORK] * 3 + [StepStatus.DONE]
        assert calls == [
            (4, 16, 1, 4, 1, 1),
            (8, 16, 2, 4, 1, 1),
            (12, 16, 3, 4, 1, 1),
            (16, 16, 4, 4, 1, 1),
        ]

    def test_progress_on_each_document(
        self, small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config
    ):
        calls = []
        limits = DocumentLimits(max_items=16, max_items_per_document=4)
        exporter = make_exporter(
            small_session,
            grid_options,
            grid_spec,
            memory_sink,
            recording_factory,
            runtime_config,
            limits,
            chunk_size=100,
            on_progress=lambda *args: calls.append(args),
        )
        run_sync(exporter)
        # 单块完成：只有每个文档保存时的回调
        assert [c[4] for c in calls] == [1, 2, 3, 4]
        assert all(c[5] == 4 for c in calls)
        assert calls[-1][:2] == (16, 16)

    def test_finish_called_once(
        self, small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config
    ):
        results = []
        exporter = make_exporter(
            small_session,
            grid_options,
            grid_spec,
            memory_sink,
            recording_factory,
            runtime_config,
            chunk_size=3,
            on_finish=results.append,
        )
        run_sync(exporter)
        assert exporter.step() is StepStatus.DONE
        assert len(results) == 1
        assert results[0].status == JobStatus.SUCCEEDED
        assert results[0].outputs == ["2-3-0.1-4.pdf"]

    def test_cancel_at_chunk_boundary(
        self, small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config
    ):
        results = []
        exporter = make_exporter(
            small_session,
            grid_options,
            grid_spec,
            memory_sink,
            recording_factory,
            runtime_config,
            chunk_size=4,
            on_finish=results.append,
        )
        assert exporter.step() is StepStatus.MORE_WORK
        exporter.cancel()
        assert exporter.step() is StepStatus.DONE

        assert exporter.status == JobStatus.CANCELLED
        assert memory_sink.files == {}
        assert len(results) == 1
        assert results[0].status == JobStatus.CANCELLED
        assert results[0].items_exported == 4

    def test_cancel_keeps_saved_documents(
        self, small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config
    ):
        limits = DocumentLimits(max_items=16, max_items_per_document=4)
        exporter = make_exporter(
            small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config, limits, chunk_size=6
        )
        exporter.step()
        exporter.cancel()
        exporter.step()
        # 第一个文档已交给输出接收器，第二个未完成的被丢弃
        assert memory_sink.filenames == ["2-3-0.1-1.pdf"]

    def test_empty_selection(
        self, small_space, grid_options, grid_spec, memory_sink, recording_factory, runtime_config
    ):
        session = GenerationSession(space=small_space, selection=Selection(16, SelectionMode.ONLY))
        exporter = make_exporter(session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config)
        result = run_sync(exporter)
        assert result.status == JobStatus.SUCCEEDED
        assert result.outputs == []
        assert result.progress.documents_total == 0

    def test_invalid_pieces_flagged(
        self, small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config, monkeypatch
    ):
        monkeypatch.setattr("shimgen.pipeline.task.compute_piece", lambda sn, options: None)
        exporter = make_exporter(small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config)
        result = run_sync(exporter)
        assert result.status == JobStatus.SUCCEEDED
        assert result.items_exported == 0
        assert len(result.flags) == 16
        assert memory_sink.files == {}


class FailingSink(IOutputSink):
    def save(self, filename: str, data: bytes, media_type: str) -> str:
        raise ExportError(f"磁盘已满: {filename}")


class TestFailure:
    """失败时标记、回调并重新抛出"""

    def test_sink_failure(self, small_session, grid_options, grid_spec, recording_factory, runtime_config):
        results = []
        exporter = make_exporter(
            small_session,
            grid_options,
            grid_spec,
            FailingSink(),
            recording_factory,
            runtime_config,
            on_finish=results.append,
        )
        with pytest.raises(ExportError):
            run_sync(exporter)
        assert exporter.status == JobStatus.FAILED
        assert len(results) == 1
        assert results[0].status == JobStatus.FAILED
        assert "磁盘已满" in results[0].errors[0]
        assert exporter.step() is StepStatus.DONE

    def test_finish_callback_error(self, small_session, grid_options, grid_spec, memory_sink, recording_factory, runtime_config):
        """完成回调抛出时不再以失败状态重复回调"""
        statuses = []

        def on_finish(result):
            statuses.append(result.status)
            raise RuntimeError("回调出错")

        exporter = make_exporter(
            small_session,
            grid_options,
            grid_spec,
            memory_sink,
            recording_factory,
            runtime_config,
            on_finish=on_finish,
        )
        with pytest.raises(RuntimeError):
            run_sync(exporter)
        assert statuses == [JobStatus.SUCCEEDED]
        assert exporter.status == JobStatus.SUCCEEDED
        assert exporter.result.status == JobStatus.SUCCEEDED
        assert exporter.step() is StepStatus.DONE
        assert statuses == [JobStatus.SUCCEEDED]

    def test_missing_sink(self, small_session):
        with pytest.raises(ValueError):
            DocumentExporter(small_session)

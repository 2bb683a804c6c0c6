"""
Tests for the Stressor Dispatcher.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from chaoscli.errors import IOFailure, UnrecoverableError
from chaoscli.stress import dispatcher
from chaoscli.stress.config import (
    BurnConfig,
    ChurnConfig,
    ExitConfig,
    RunMode,
    SpikeConfig,
    WaitConfig,
)
from chaoscli.stress.cpu import DeadlineWorkerPool
from chaoscli.stress.outcome import FALLBACK_EXIT_CODE, ExitOutcome, StressorKind

DRY = RunMode(dry_run=True)
VERBOSE = RunMode(verbose=True)


class TestRouting:
    """Each config reaches its component."""

    def test_wait(self):
        assert dispatcher.run(WaitConfig(0, 7)).code == 7

    def test_exit(self):
        assert dispatcher.run(ExitConfig(3)).code == 3

    def test_spike(self):
        outcome = dispatcher.run(SpikeConfig(8, 0))
        assert outcome.ok
        assert outcome.details["chunks"] == 1

    def test_churn(self, churn_dir):
        outcome = dispatcher.run(ChurnConfig(2, 32))
        assert outcome.ok
        assert outcome.details["iterations_completed"] == 2

    def test_burn(self):
        with patch("chaoscli.stress.dispatcher.burn", return_value=ExitOutcome.success()) as burn:
            dispatcher.run(BurnConfig(2, 3))
        burn.assert_called_once_with(2, 3, dry_run=False)

    def test_component_outcome_returned_unchanged(self):
        expected = ExitOutcome.from_error(IOFailure("/x", 1, "denied"))
        with patch("chaoscli.stress.dispatcher.churn", return_value=expected):
            assert dispatcher.run(ChurnConfig(1, 1)) is expected


class TestDryRun:
    """Dry-run purity across every stressor kind."""

    @pytest.mark.parametrize(
        "config",
        [
            WaitConfig(60_000, 5, mode=DRY),
            BurnConfig(60, 4, mode=DRY),
            SpikeConfig(4096, 60, mode=DRY),
            ChurnConfig(1000, 1024 * 1024, mode=DRY),
            ExitConfig(42, mode=DRY),
        ],
        ids=lambda c: c.kind.value,
    )
    def test_zero_code_no_side_effects(self, config, churn_dir):
        with patch("time.sleep") as sleep, patch.object(DeadlineWorkerPool, "run") as pool_run:
            outcome = dispatcher.run(config)

        assert outcome.code == 0
        assert outcome.message.startswith("Dry-run")
        sleep.assert_not_called()
        pool_run.assert_not_called()
        assert list(churn_dir.iterdir()) == []

    def test_dry_run_goes_through_component(self):
        dry = ExitOutcome.success("Dry-run: nothing allocated.")
        with patch("chaoscli.stress.dispatcher.spike", return_value=dry) as spike:
            outcome = dispatcher.run(SpikeConfig(64, 5, mode=DRY))

        assert outcome is dry
        assert spike.call_args.kwargs["dry_run"] is True


class TestProgress:
    """Progress reporting only in verbose mode."""

    def test_verbose_spike_reports_megabytes(self):
        lines: list[str] = []
        dispatcher.run(SpikeConfig(16, 0, mode=VERBOSE), reporter=lines.append)
        assert lines == ["Allocated 8MB", "Allocated 16MB"]

    def test_verbose_churn_reports_iterations(self):
        lines: list[str] = []
        dispatcher.run(ChurnConfig(2, 8, mode=VERBOSE), reporter=lines.append)
        assert lines == ["Iteration 1/2", "Iteration 2/2"]

    def test_quiet_mode_ignores_reporter(self):
        lines: list[str] = []
        dispatcher.run(SpikeConfig(8, 0), reporter=lines.append)
        assert lines == []


class TestFallback:
    """Unanticipated errors become the fixed fallback outcome."""

    def test_unexpected_exception(self):
        with patch("chaoscli.stress.dispatcher.spike", side_effect=KeyError("bad")):
            outcome = dispatcher.run(SpikeConfig(1, 0))

        assert outcome.code == FALLBACK_EXIT_CODE
        assert outcome.error.code == "UNRECOVERABLE"
        assert outcome.error.context.stressor == "mem-spike"
        assert outcome.details == {"stressor": "mem-spike"}

    def test_worker_spawn_failure(self):
        with patch.object(DeadlineWorkerPool, "run", side_effect=UnrecoverableError("no fork")):
            outcome = dispatcher.run(BurnConfig(1, 2))

        assert outcome.code == FALLBACK_EXIT_CODE
        assert "no fork" in outcome.message

    @pytest.mark.parametrize(
        "error",
        [UnrecoverableError("no fork"), KeyError("bad")],
        ids=["unrecoverable", "unexpected"],
    )
    def test_fallback_logged_with_traceback(self, error, caplog):
        with patch.object(DeadlineWorkerPool, "run", side_effect=error):
            with caplog.at_level("ERROR", logger="chaoscli.stress"):
                outcome = dispatcher.run(BurnConfig(1, 2))

        assert outcome.code == FALLBACK_EXIT_CODE
        records = [r for r in caplog.records if r.levelname == "ERROR"]
        assert len(records) == 1
        assert records[0].exc_info is not None
        assert records[0].exc_info[1] is error

    def test_fallback_code_distinct_from_component_codes(self):
        from chaoscli.errors import ConfigurationError, ResourceExhaustionError, WorkerFailure

        component_codes = {
            ConfigurationError.exit_code,
            ResourceExhaustionError.exit_code,
            IOFailure.exit_code,
            WorkerFailure.exit_code,
        }
        assert FALLBACK_EXIT_CODE not in component_codes
        assert len(component_codes) == 4


class TestPreview:
    """Tests for preview() and list_stressors()."""

    def test_preview_headline(self):
        assert dispatcher.preview(WaitConfig(2000)) == "Timeout: wait 2000ms, then exit 0"
        assert dispatcher.preview(SpikeConfig(256)) == "Memory spike: allocate ~256MB, hold 5s"

    def test_list_covers_every_kind(self):
        names = [s["name"] for s in dispatcher.list_stressors()]
        assert names == [kind.value for kind in StressorKind]
        assert all(s["description"] for s in dispatcher.list_stressors())

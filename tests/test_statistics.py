"""Property-based tests for run statistics bookkeeping."""

from pathlib import Path

import pytest
from hypothesis import given, strategies as st

from retro_sorter.models import ArchiveOutcome, ArchiveResult, GameRecord, RunStatistics, SkipReason


@st.composite
def archive_result_strategy(draw: st.DrawFn) -> ArchiveResult:
    """Generate results across every outcome and skip reason."""
    archive = Path(f"{draw(st.integers(min_value=0, max_value=999))}.zip")
    outcome = draw(st.sampled_from(list(ArchiveOutcome)))
    if outcome is ArchiveOutcome.PROCESSED:
        return ArchiveResult.processed(
            archive, GameRecord(name="N", genre="G"), Path("out/G/N"), draw(st.integers(min_value=0, max_value=50))
        )
    if outcome is ArchiveOutcome.SKIPPED:
        return ArchiveResult.skipped(archive, draw(st.sampled_from(list(SkipReason))))
    return ArchiveResult.failed(archive, "boom")


@given(st.lists(archive_result_strategy(), max_size=50))
def test_totals_always_balance(results: list[ArchiveResult]) -> None:
    stats = RunStatistics()
    for result in results:
        stats.record(result)

        assert stats.total == stats.processed + stats.skipped + stats.errors
        assert sum(stats.skip_reasons.values()) == stats.skipped

    assert stats.total == len(results)
    assert stats.files_moved == sum(r.files_moved for r in results if r.outcome is ArchiveOutcome.PROCESSED)


def test_skip_reasons_counted_separately() -> None:
    stats = RunStatistics()
    stats.record(ArchiveResult.skipped(Path("a.zip"), SkipReason.WRONG_LANGUAGE))
    stats.record(ArchiveResult.skipped(Path("b.zip"), SkipReason.WRONG_LANGUAGE))
    stats.record(ArchiveResult.skipped(Path("c.zip"), SkipReason.NO_DESCRIPTOR))

    assert stats.skipped == 3
    assert stats.skipped_for(SkipReason.WRONG_LANGUAGE) == 2
    assert stats.skipped_for(SkipReason.NO_DESCRIPTOR) == 1
    assert stats.skipped_for(SkipReason.UNPARSEABLE) == 0


def test_skipped_result_without_reason_is_rejected() -> None:
    stats = RunStatistics()
    with pytest.raises(ValueError):
        stats.record(ArchiveResult(archive=Path("a.zip"), outcome=ArchiveOutcome.SKIPPED))
    assert stats.total == 0

"""Unit tests for commit aggregation."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from commitlens.extraction import CommitAggregator, LineRecordNormalizer
from commitlens.extraction.aggregator import hour_fraction
from commitlens.models import LineRecord, Settings


def make_record(commit_id, hour, minute=0, author="Jack", language="py", line=1):
    return LineRecord(
        commit_id=commit_id,
        author=author,
        file=f"{commit_id}.{language}",
        line_number=line,
        language=language,
        datetime=datetime(2024, 3, 4, hour, minute, tzinfo=timezone.utc),
    )


def test_scenario_commits(commits):
    """Test the two-commit scenario."""
    assert [c.id for c in commits] == ["a1", "b2"]

    a1, b2 = commits
    assert a1.total_lines == 2
    assert a1.hour_fraction == 8.0
    assert b2.total_lines == 1
    assert b2.hour_fraction == 20.0


def test_first_encounter_order():
    """Test that commits keep the order their ids first appear in."""
    records = [make_record("c", 1), make_record("a", 2), make_record("c", 3, line=2), make_record("b", 4)]

    commits = CommitAggregator().aggregate(records)

    assert [c.id for c in commits] == ["c", "a", "b"]


def test_first_record_is_representative():
    """Test that author and timestamp come from the first record."""
    records = [make_record("x", 9, 30, author="First"), make_record("x", 23, author="Second", line=2)]

    commit = CommitAggregator().aggregate(records)[0]

    assert commit.author == "First"
    assert commit.datetime.hour == 9
    assert commit.hour_fraction == 9.5


def test_total_lines_match_record_count():
    """Test that every record is owned by exactly one commit."""
    records = [make_record(cid, h, line=i + 1) for i, (cid, h) in enumerate(
        [("a", 1), ("b", 2), ("a", 3), ("c", 4), ("b", 5), ("a", 6)]
    )]

    commits = CommitAggregator().aggregate(records)

    assert sum(c.total_lines for c in commits) == len(records)
    owned = [r for c in commits for r in c.lines]
    assert len(owned) == len(records)
    assert set(owned) == set(records)
    assert all(r.commit_id == c.id for c in commits for r in c.lines)


def test_hour_fraction_bounds():
    """Test that hour fractions stay within a day."""
    records = [make_record(f"c{h}{m}", h, m) for h in (0, 12, 23) for m in (0, 59)]

    commits = CommitAggregator().aggregate(records)

    assert all(0 <= c.hour_fraction < 24 for c in commits)
    assert commits[-1].hour_fraction == pytest.approx(23 + 59 / 60)


def test_hour_fraction_uses_local_wall_clock():
    """Test that the commit's own offset decides its time of day."""
    pacific = timezone(timedelta(hours=-8))
    record = LineRecord(commit_id="p", line_number=1, datetime=datetime(2024, 1, 1, 22, 15, tzinfo=pacific))

    assert CommitAggregator().aggregate([record])[0].hour_fraction == 22.25


def test_commit_url():
    """Test that the link is the base URL followed by the id."""
    commit = CommitAggregator("https://example.com/repo/commit/").aggregate([make_record("abc", 1)])[0]

    assert commit.url == "https://example.com/repo/commit/abc"


def test_default_url_matches_settings():
    """Test that the aggregator and the settings share one default base URL."""
    commit = CommitAggregator().aggregate([make_record("abc", 1)])[0]

    assert commit.url == Settings.model_fields["repository_url"].default + "abc"


def test_empty_input():
    """Test that no records give no commits."""
    assert CommitAggregator().aggregate([]) == []


def test_commit_is_immutable(commits):
    """Test that commits cannot be modified after construction."""
    with pytest.raises(ValidationError):
        commits[0].total_lines = 99

    assert isinstance(commits[0].lines, tuple)


def test_lines_excluded_from_dump(commits):
    """Test that serialized commits do not embed their line records."""
    data = commits[0].model_dump()

    assert "line_records" not in data
    assert data["id"] == "a1"


def test_describe(commits):
    """Test the commit detail fields."""
    details = commits[0].describe()

    assert details["commit"] == "a1"
    assert details["date"] == "Monday, January 1, 2024"
    assert details["time"] == "8:00 AM"
    assert details["author"] == "Jack"
    assert details["lines"] == "2"
    assert details["url"].endswith("/a1")


def test_describe_unknown_author():
    """Test the author placeholder and PM times."""
    record = make_record("z", 20, 5, author="")
    details = CommitAggregator().aggregate([record])[0].describe()

    assert details["author"] == "Unknown"
    assert details["time"] == "8:05 PM"


def test_hour_fraction_helper():
    """Test the hour fraction formula."""
    assert hour_fraction(8, 30) == 8.5
    assert hour_fraction(0, 0) == 0.0


def test_aggregates_normalized_rows(scenario_rows):
    """Test normalizer and aggregator together, with one malformed row."""
    scenario_rows.append(dict(scenario_rows[0], line="oops"))
    result = LineRecordNormalizer().normalize(scenario_rows)

    commits = CommitAggregator().aggregate(result.records)

    assert result.malformed_rows == 1
    assert sum(c.total_lines for c in commits) == len(result.records) == 3

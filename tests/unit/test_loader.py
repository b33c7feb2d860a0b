"""Unit tests for dataset loading."""

import pytest

from commitlens.exceptions import EmptyDatasetError
from commitlens.extraction import build_dataset, load_dataset, load_dataset_async, read_csv
from commitlens.models import Settings


class TestReadCsv:
    """Tests for read_csv."""

    def test_reads_header_and_rows(self, scenario_csv):
        """Test reading the scenario file."""
        header, rows = read_csv(scenario_csv)

        assert header[0] == "commit"
        assert len(rows) == 3
        assert rows[2]["type"] == "css"

    def test_byte_order_mark_is_stripped(self, scenario_csv):
        """Test a file exported with a leading UTF-8 BOM."""
        scenario_csv.write_bytes(b"\xef\xbb\xbf" + scenario_csv.read_bytes())

        header, _ = read_csv(scenario_csv)
        dataset = load_dataset(scenario_csv)

        assert header[0] == "commit"
        assert [c.id for c in dataset.commits] == ["a1", "b2"]

    def test_undecodable_bytes_do_not_abort(self, scenario_csv):
        """Test that an invalid UTF-8 byte only affects its own row."""
        scenario_csv.write_bytes(scenario_csv.read_bytes().replace(b"Ana", b"An\xff"))

        dataset = load_dataset(scenario_csv)

        assert [c.id for c in dataset.commits] == ["a1", "b2"]
        assert dataset.commits[1].author == "An\ufffd"

    def test_missing_file(self, tmp_path):
        """Test that a missing file is reported."""
        with pytest.raises(ValueError, match="does not exist"):
            read_csv(tmp_path / "nope.csv")


class TestLoadDataset:
    """Tests for load_dataset."""

    def test_scenario(self, scenario_csv):
        """Test loading the scenario into commits."""
        dataset = load_dataset(scenario_csv)

        assert [c.id for c in dataset.commits] == ["a1", "b2"]
        assert len(dataset.records) == 3
        assert dataset.columns.has_file and dataset.columns.has_language
        assert dataset.normalization.rows_skipped == 0

    def test_repository_url_from_settings(self, scenario_csv):
        """Test that commit links use the configured base URL."""
        dataset = load_dataset(scenario_csv, Settings(repository_url="https://example.com/c/"))

        assert dataset.commits[0].url == "https://example.com/c/a1"

    def test_explicit_commit_key(self, tmp_path, csv_writer, scenario_rows):
        """Test grouping by a configured column."""
        header = ["sha", "author", "datetime", "line", "depth", "length"]
        rows = [dict(row, sha=row["commit"]) for row in scenario_rows]
        path = csv_writer(tmp_path / "loc.csv", rows, header)

        dataset = load_dataset(path, Settings(commit_key="sha"))

        assert dataset.columns.commit_key == "sha"
        assert [c.id for c in dataset.commits] == ["a1", "b2"]
        assert not dataset.columns.has_language

    def test_empty_dataset(self, tmp_path, csv_writer):
        """Test a header-only file."""
        path = csv_writer(tmp_path / "empty.csv", [])

        dataset = load_dataset(path)

        assert dataset.is_empty
        assert dataset.records == []

    def test_empty_dataset_required(self, tmp_path, csv_writer):
        """Test that required data raises on an empty file."""
        path = csv_writer(tmp_path / "empty.csv", [])

        with pytest.raises(EmptyDatasetError):
            load_dataset(path, require_data=True)

    def test_bad_rows_are_counted(self, tmp_path, csv_writer, scenario_rows):
        """Test that unusable rows are skipped and counted."""
        scenario_rows.append(dict(scenario_rows[0], line="x"))
        scenario_rows.append(dict(scenario_rows[0], datetime="never", date="", time=""))
        path = csv_writer(tmp_path / "loc.csv", scenario_rows)

        dataset = load_dataset(path)

        assert dataset.normalization.malformed_rows == 1
        assert dataset.normalization.invalid_timestamps == 1
        assert dataset.commits[0].total_lines == 2

    @pytest.mark.asyncio
    async def test_async_load(self, scenario_csv):
        """Test loading off the event loop."""
        dataset = await load_dataset_async(scenario_csv)

        assert len(dataset.commits) == 2


class TestFindCommit:
    """Tests for Dataset.find_commit."""

    @pytest.fixture
    def dataset(self, scenario_rows):
        header = list(scenario_rows[0])
        return build_dataset(header, scenario_rows)

    def test_full_id(self, dataset):
        """Test lookup by the full id."""
        assert dataset.find_commit("b2").author == "Ana"

    def test_unique_prefix(self, dataset):
        """Test lookup by a prefix matching one commit."""
        assert dataset.find_commit("a").id == "a1"

    def test_ambiguous_or_unknown(self, dataset):
        """Test prefixes that match several or no commits."""
        assert dataset.find_commit("") is None
        assert dataset.find_commit("zz") is None

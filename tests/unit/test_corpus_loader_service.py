"""
Unit tests for CorpusLoaderService.

Tests transcript parsing, directory loading, malformed-file handling and
the corpus snapshot.
"""

import pytest

from sotu_cluster.exceptions import EmptyCorpus, MalformedDocument
from sotu_cluster.services.corpus_loader_service import CorpusLoaderService


@pytest.fixture
def loader(config):
    return CorpusLoaderService(config)


class TestParseDocument:
    """Tests for parsing a single transcript."""

    def test_headers_and_body_are_split(self, loader):
        """First two kept lines are headers, the rest is joined body."""
        text = "Header One\nHeader Two\n\nFirst line.\nx\nSecond line.\n"

        doc = loader.parse_document("1990_bush.txt", text)

        assert doc.header_lines == ("Header One", "Header Two")
        assert doc.content == "First line. Second line."
        assert doc.year == 1990

    def test_char_content_excludes_separators(self, loader):
        """char_content sums body line lengths without joining spaces."""
        doc = loader.parse_document("a.txt", "H1\nH2\nFirst line.\nSecond line.\n")

        assert doc.char_content == len("First line.") + len("Second line.")

    def test_single_character_lines_are_dropped(self, loader):
        """Lines of one character never count as headers or body."""
        doc = loader.parse_document("a.txt", "x\nH1\ny\nH2\nBody text\nz\n")

        assert doc.header_lines == ("H1", "H2")
        assert doc.content == "Body text"

    def test_missing_header_raises(self, loader):
        """A file with fewer than two usable lines is malformed."""
        with pytest.raises(MalformedDocument) as exc_info:
            loader.parse_document("short.txt", "Only one line\n")

        assert exc_info.value.file_name == "short.txt"

    def test_missing_body_raises(self, loader):
        """A file with headers but no body is malformed."""
        with pytest.raises(MalformedDocument):
            loader.parse_document("empty.txt", "H1\nH2\n\n")

    def test_crlf_line_endings(self, loader):
        """Windows line endings do not leak into content."""
        doc = loader.parse_document("a.txt", "H1\r\nH2\r\nBody\r\nMore\r\n")

        assert doc.content == "Body More"


class TestExtractYear:
    """Tests for year extraction from file names."""

    @pytest.mark.parametrize("file_name,expected", [
        ("1945_truman.txt", 1945),
        ("su_19_2001.txt", 2001),
        ("obama2013.txt", 2013),
        ("no_year.txt", None),
    ])
    def test_first_four_digit_group(self, loader, file_name, expected):
        assert loader.extract_year(file_name) == expected


class TestLoadCorpus:
    """Tests for loading a directory of transcripts."""

    def test_loads_in_sorted_order(self, loader, transcript_dir, topic_texts):
        """Documents follow the sorted file listing."""
        corpus = loader.load_corpus(transcript_dir)

        assert corpus.file_names == tuple(sorted(topic_texts))
        assert corpus["econ_1991.txt"].year == 1991

    def test_malformed_files_are_skipped_and_reported(self, loader, transcript_dir):
        """Skipping is the default; the report names each skipped file."""
        (transcript_dir / "broken.txt").write_text("Just a title\n", encoding="utf-8")

        corpus = loader.load_corpus(transcript_dir)

        assert "broken.txt" not in corpus.file_names
        assert len(corpus) == 6
        skipped = dict(loader.last_report.skipped)
        assert "broken.txt" in skipped

    def test_malformed_file_fails_when_skipping_disabled(self, config, transcript_dir):
        """skip_malformed=False turns a bad file into a hard error."""
        config.corpus.skip_malformed = False
        (transcript_dir / "broken.txt").write_text("Just a title\n", encoding="utf-8")

        with pytest.raises(MalformedDocument):
            CorpusLoaderService(config).load_corpus(transcript_dir)

    def test_missing_year_is_reported(self, loader, tmp_path, write_transcript):
        write_transcript(tmp_path, "untitled.txt", ["Some body text"])

        corpus = loader.load_corpus(tmp_path)

        assert corpus["untitled.txt"].year is None
        assert loader.last_report.missing_year == ["untitled.txt"]

    def test_missing_directory_raises(self, loader, tmp_path):
        with pytest.raises(FileNotFoundError):
            loader.load_corpus(tmp_path / "does_not_exist")

    def test_empty_directory_raises(self, loader, tmp_path):
        with pytest.raises(EmptyCorpus):
            loader.load_corpus(tmp_path)

    def test_only_malformed_files_raises(self, loader, tmp_path):
        (tmp_path / "a.txt").write_text("", encoding="utf-8")

        with pytest.raises(EmptyCorpus):
            loader.load_corpus(tmp_path)

    def test_latin1_fallback(self, loader, tmp_path):
        """Files that are not valid UTF-8 are decoded as latin1."""
        (tmp_path / "1850_taylor.txt").write_bytes(b"H1\nH2\nCaf\xe9 society\n")

        corpus = loader.load_corpus(tmp_path)

        assert corpus["1850_taylor.txt"].content == "Café society"

    def test_byte_order_mark_is_stripped(self, loader, tmp_path):
        (tmp_path / "a.txt").write_bytes("\ufeffH1\nH2\nBody\n".encode("utf-8"))

        corpus = loader.load_corpus(tmp_path)

        assert corpus["a.txt"].header_lines[0] == "H1"


class TestSnapshot:
    """Tests for the parsed-corpus snapshot."""

    def test_snapshot_round_trip(self, loader, transcript_dir, tmp_path):
        corpus = loader.load_corpus(transcript_dir)
        path = loader.save_snapshot(corpus, tmp_path / "cache" / "sotu_df.pkl")

        restored = loader.load_snapshot(path)

        assert restored == corpus

    def test_load_or_build_prefers_snapshot(self, loader, transcript_dir, tmp_path):
        """Once a snapshot exists the directory is not read again."""
        snapshot = tmp_path / "sotu_df.pkl"
        first = loader.load_or_build(transcript_dir, snapshot)
        assert snapshot.is_file()

        for path in transcript_dir.iterdir():
            path.unlink()
        transcript_dir.rmdir()

        second = loader.load_or_build(transcript_dir, snapshot)
        assert second == first


class TestSummaries:
    """Tests for the exploratory summary tables."""

    def test_content_length_summary_is_longest_first(self, loader, tmp_path, write_transcript):
        write_transcript(tmp_path, "1990_a.txt", ["short"])
        write_transcript(tmp_path, "1991_b.txt", ["a much longer body line"])
        write_transcript(tmp_path, "1992_c.txt", ["medium body"])

        summary = loader.content_length_summary(loader.load_corpus(tmp_path))

        assert list(summary["file_name"]) == ["1991_b.txt", "1992_c.txt", "1990_a.txt"]
        assert list(summary.columns) == ["file_name", "year", "char_content"]

    def test_content_by_year_puts_missing_years_last(self, loader, tmp_path, write_transcript):
        write_transcript(tmp_path, "2001_a.txt", ["body"])
        write_transcript(tmp_path, "1999_b.txt", ["body"])
        write_transcript(tmp_path, "aaa.txt", ["body"])

        by_year = loader.content_by_year(loader.load_corpus(tmp_path))

        assert list(by_year["file_name"]) == ["1999_b.txt", "2001_a.txt", "aaa.txt"]

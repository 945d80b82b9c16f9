# sotu_cluster/services/corpus_loader_service.py
"""
Service for loading address transcripts from a directory into a Corpus.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union
import re

import pandas as pd

from ..config import AppConfig
from ..domain.document import Corpus, Document
from ..exceptions import EmptyCorpus, MalformedDocument
from ..logging_config import get_logger

logger = get_logger('corpus_loader_service')

PathLike = Union[str, Path]


@dataclass
class LoadReport:
    """Outcome of the most recent directory load."""
    directory: str
    loaded: List[str] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)  # (file_name, reason)
    missing_year: List[str] = field(default_factory=list)


class CorpusLoaderService:
    """
    Reads transcript files and builds the corpus.

    File format:
    - The first two non-blank lines are metadata headers
    - Every following line longer than one character is body text
    - The file name carries the address year as a four-digit substring

    Malformed files are skipped and reported by default; set
    config.corpus.skip_malformed = False to fail the whole load instead.
    """

    def __init__(self, config: AppConfig):
        """
        Initialize the loader.

        Args:
            config: Application configuration
        """
        self.config = config
        self._year_pattern = re.compile(config.corpus.year_pattern)
        self.last_report: Optional[LoadReport] = None

    def extract_year(self, file_name: str) -> Optional[int]:
        """
        Parse the first four-digit group in a file name.

        Args:
            file_name: Name of the transcript file

        Returns:
            Year as int, or None when the name has no four-digit group
        """
        match = self._year_pattern.search(file_name)
        return int(match.group(0)) if match else None

    def parse_document(self, file_name: str, text: str) -> Document:
        """
        Parse the text of one transcript file.

        Args:
            file_name: Name of the file (becomes the document key)
            text: Full decoded file text

        Returns:
            Document with headers, joined body and year

        Raises:
            MalformedDocument: If the file has fewer than two header lines
                or no body lines after them
        """
        header_count = self.config.corpus.header_line_count
        min_length = self.config.corpus.min_line_length

        lines = [line for line in text.splitlines() if len(line) >= min_length]

        if len(lines) < header_count:
            raise MalformedDocument(
                file_name,
                f"expected {header_count} header lines, found {len(lines)}"
            )

        headers = tuple(lines[:header_count])
        body = lines[header_count:]
        if not body:
            raise MalformedDocument(file_name, "no body lines after the headers")

        year = self.extract_year(file_name)
        if year is None:
            logger.debug(f"No year found in file name: {file_name}")

        return Document(
            file_name=file_name,
            header_lines=headers,
            content=" ".join(body),
            char_content=sum(len(line) for line in body),
            year=year,
        )

    def _read_text(self, path: Path) -> str:
        """Decode a file with the default encoding, falling back if needed."""
        raw = path.read_bytes()
        try:
            return raw.decode(self.config.corpus.default_encoding)
        except UnicodeDecodeError:
            logger.warning(
                f"{path.name} is not valid {self.config.corpus.default_encoding}, "
                f"decoding as {self.config.corpus.fallback_encoding}"
            )
            return raw.decode(self.config.corpus.fallback_encoding)

    def load_corpus(self, directory: PathLike) -> Corpus:
        """
        Load every regular file in a directory, in sorted name order.

        Args:
            directory: Directory holding the transcript files

        Returns:
            Corpus with one document per well-formed file

        Raises:
            FileNotFoundError: If the directory does not exist
            MalformedDocument: If a file is malformed and skipping is disabled
            EmptyCorpus: If no document could be loaded
        """
        root = Path(directory)
        if not root.is_dir():
            raise FileNotFoundError(f"Corpus directory not found: {root}")

        report = LoadReport(directory=str(root))
        self.last_report = report

        paths = sorted(p for p in root.iterdir() if p.is_file())
        logger.info(f"Loading {len(paths)} files from {root}")

        documents = []
        for path in paths:
            try:
                doc = self.parse_document(path.name, self._read_text(path))
            except MalformedDocument as e:
                if not self.config.corpus.skip_malformed:
                    raise
                logger.warning(f"SKIPPED {e.file_name}: {e.reason}")
                report.skipped.append((e.file_name, e.reason))
                continue

            documents.append(doc)
            report.loaded.append(doc.file_name)
            if doc.year is None:
                report.missing_year.append(doc.file_name)

        if not documents:
            raise EmptyCorpus(f"No loadable documents in {root}")

        logger.info(
            f"Loaded {len(documents)} documents "
            f"({len(report.skipped)} skipped, {len(report.missing_year)} without year)"
        )
        return Corpus(tuple(documents))

    # === Snapshot ===

    def save_snapshot(self, corpus: Corpus, path: PathLike) -> Path:
        """
        Persist the parsed corpus so later runs can skip re-parsing.

        Args:
            corpus: Corpus to store
            path: Target pickle file

        Returns:
            Path written
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        corpus.to_frame().to_pickle(target)
        logger.info(f"Saved corpus snapshot ({len(corpus)} documents) to {target}")
        return target

    def load_snapshot(self, path: PathLike) -> Corpus:
        """Read a corpus snapshot written by save_snapshot()."""
        df = pd.read_pickle(Path(path))
        corpus = Corpus.from_frame(df)
        logger.info(f"Loaded corpus snapshot ({len(corpus)} documents) from {path}")
        return corpus

    def load_or_build(self, directory: PathLike, snapshot_path: Optional[PathLike] = None) -> Corpus:
        """
        Reuse a snapshot when it exists, otherwise parse the directory.

        A freshly parsed corpus is written to snapshot_path when one is given.
        """
        if snapshot_path is not None and Path(snapshot_path).is_file():
            return self.load_snapshot(snapshot_path)

        corpus = self.load_corpus(directory)
        if snapshot_path is not None:
            self.save_snapshot(corpus, snapshot_path)
        return corpus

    # === Exploratory summaries ===

    def content_length_summary(self, corpus: Corpus) -> pd.DataFrame:
        """Documents ordered by body length, longest first."""
        df = corpus.to_frame()[['file_name', 'year', 'char_content']]
        return df.sort_values(
            by=['char_content', 'file_name'],
            ascending=[False, True],
            kind='mergesort',
        ).reset_index(drop=True)

    def content_by_year(self, corpus: Corpus) -> pd.DataFrame:
        """Body length per document in year order; documents without a year last."""
        df = corpus.to_frame()[['file_name', 'year', 'char_content']]
        return df.sort_values(
            by=['year', 'file_name'],
            na_position='last',
            kind='mergesort',
        ).reset_index(drop=True)

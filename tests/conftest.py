"""
Pytest configuration and fixtures for SOTU Cluster.
"""

from pathlib import Path
from typing import Dict, Optional, Sequence

import pytest

from sotu_cluster.config import load_config
from sotu_cluster.domain.document import Corpus, Document


DEFAULT_HEADERS = ("State of the Union Address", "The President")


def _write_transcript(
    directory: Path,
    file_name: str,
    body_lines: Sequence[str],
    headers: Sequence[str] = DEFAULT_HEADERS
) -> Path:
    """Write a transcript file: headers, a blank line, then the body."""
    path = directory / file_name
    path.write_text("\n".join([*headers, "", *body_lines]) + "\n", encoding="utf-8")
    return path


def _build_corpus(texts: Dict[str, str], years: Optional[Dict[str, int]] = None) -> Corpus:
    """Build a corpus in memory from file name -> content."""
    years = years or {}
    return Corpus(tuple(
        Document(
            file_name=name,
            header_lines=DEFAULT_HEADERS,
            content=text,
            char_content=len(text),
            year=years.get(name),
        )
        for name, text in texts.items()
    ))


# Two topics with disjoint vocabularies, three addresses each
ECONOMY_TEXTS = {
    "econ_1990.txt": "The economy needs jobs, growth and lower taxes for families. Budget balance.",
    "econ_1991.txt": "Our economy creates jobs and growth; taxes fall while families prosper. Budget balance.",
    "econ_1992.txt": "Jobs and growth in the economy, fair taxes for working families. Budget balance.",
}
DEFENSE_TEXTS = {
    "war_2001.txt": "Our military defends freedom; troops abroad and allies stand with the treaty.",
    "war_2002.txt": "The military and our troops keep allies safe under the treaty, defending freedom.",
    "war_2003.txt": "Troops of the military, allies of freedom, honor the treaty and its defense.",
}


@pytest.fixture
def config():
    """Load default config for tests."""
    return load_config()


@pytest.fixture
def small_config(config):
    """Config sized for six-document corpora."""
    config.hierarchical.linkage = "average"
    config.hierarchical.cut_k = 2
    config.kmeans.k = 2
    return config


@pytest.fixture
def topic_texts():
    """Six addresses in two clearly separated topics."""
    return {**ECONOMY_TEXTS, **DEFENSE_TEXTS}


@pytest.fixture
def topic_corpus(topic_texts):
    return _build_corpus(topic_texts)


@pytest.fixture
def transcript_dir(tmp_path, topic_texts):
    """Directory of transcript files for the topic corpus."""
    data_dir = tmp_path / "sotu"
    data_dir.mkdir()
    for name, text in topic_texts.items():
        _write_transcript(data_dir, name, [text])
    return data_dir


@pytest.fixture
def write_transcript():
    """Helper to write a transcript file."""
    return _write_transcript


@pytest.fixture
def build_corpus():
    """Helper to build an in-memory corpus."""
    return _build_corpus

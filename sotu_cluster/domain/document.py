# sotu_cluster/domain/document.py
"""
Domain models for a single address transcript and the ordered corpus.
"""
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

import pandas as pd


CORPUS_COLUMNS = ['file_name', 'head1', 'head2', 'char_content', 'content', 'year']


@dataclass(frozen=True)
class Document:
    """
    Represents one transcript file.

    Attributes:
        file_name: Name of the source file, unique within a corpus
        header_lines: The two metadata lines at the top of the file
        content: Body lines joined with a single space
        char_content: Total characters of the body lines (separators excluded)
        year: Four-digit year parsed from the file name, if any
    """
    file_name: str
    header_lines: Tuple[str, str]
    content: str
    char_content: int
    year: Optional[int] = None

    def __post_init__(self):
        if not self.file_name:
            raise ValueError("Document file_name cannot be empty")


@dataclass(frozen=True)
class Corpus:
    """
    Ordered, immutable collection of documents.

    Order is the sorted file listing order of the source directory and is
    carried through every matrix built from the corpus.
    """
    documents: Tuple[Document, ...]

    def __post_init__(self):
        seen = set()
        for doc in self.documents:
            if doc.file_name in seen:
                raise ValueError(f"Duplicate document file_name: {doc.file_name}")
            seen.add(doc.file_name)

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    def __getitem__(self, file_name: str) -> Document:
        for doc in self.documents:
            if doc.file_name == file_name:
                return doc
        raise KeyError(file_name)

    @property
    def file_names(self) -> Tuple[str, ...]:
        return tuple(doc.file_name for doc in self.documents)

    def contents(self) -> Dict[str, str]:
        """Map file name to body content, in corpus order."""
        return {doc.file_name: doc.content for doc in self.documents}

    def to_frame(self) -> pd.DataFrame:
        """Tabular view of the corpus, one row per document."""
        rows = [
            {
                'file_name': doc.file_name,
                'head1': doc.header_lines[0],
                'head2': doc.header_lines[1],
                'char_content': doc.char_content,
                'content': doc.content,
                'year': doc.year,
            }
            for doc in self.documents
        ]
        df = pd.DataFrame(rows, columns=CORPUS_COLUMNS)
        df['year'] = df['year'].astype('Int64')
        return df

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> 'Corpus':
        """Rebuild a corpus from the frame produced by to_frame()."""
        missing = set(CORPUS_COLUMNS) - set(df.columns)
        if missing:
            raise ValueError(f"Corpus frame is missing columns: {sorted(missing)}")

        documents = []
        for row in df.itertuples(index=False):
            year = None if pd.isna(row.year) else int(row.year)
            documents.append(Document(
                file_name=str(row.file_name),
                header_lines=(str(row.head1), str(row.head2)),
                content=str(row.content),
                char_content=int(row.char_content),
                year=year,
            ))
        return cls(tuple(documents))

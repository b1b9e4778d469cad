"""Statement extraction domain service."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from statex.domain.entities import Document, ExtractionResult
from statex.domain.errors import DomainError, UnrecognizedDocumentError
from statex.domain.parser import DocumentType

logger = logging.getLogger(__name__)


class ExtractionService:
    """Service for classifying statements and extracting their transactions.

    Extractors provide a label, bank identifiers and document types (see
    statex.extractors.base.Extractor). Their document types are sealed when
    the service is created, so one service can parse documents from several
    threads at once.
    """

    def __init__(self, extractors: Sequence[Any]):
        """Initialize extraction service.

        Args:
            extractors: Extractors in priority order
        """
        self.extractors = tuple(extractors)
        for extractor in self.extractors:
            for document_type in extractor.document_types:
                document_type.seal()

    def classify(self, document: Document) -> tuple[Any, DocumentType]:
        """Select the extractor and document type for a document.

        The first registered match wins. Further matches point to
        overlapping extractor definitions and are logged.

        Raises:
            UnrecognizedDocumentError: If no document type matches
        """
        text = document.text
        candidates = [
            (extractor, document_type)
            for extractor in self.extractors
            if extractor.identifies(text)
            for document_type in extractor.document_types
            if document_type.matches(text)
        ]
        if not candidates:
            raise UnrecognizedDocumentError(document.source)

        extractor, document_type = candidates[0]
        if len(candidates) > 1:
            logger.warning(
                "%s matches %d document types, using %s / %s",
                document.source or "Document",
                len(candidates),
                extractor.label,
                document_type.name,
            )
        logger.debug("Classified %s as %s / %s", document.source, extractor.label, document_type.name)
        return extractor, document_type

    def extract(self, source: Union[str, Document]) -> ExtractionResult:
        """Extract all items of one statement.

        Args:
            source: Statement text or Document

        Returns:
            ExtractionResult with items in block order, then line order

        Raises:
            UnrecognizedDocumentError: If no extractor supports the statement
            MissingContextError: If the statement lacks document context a rule needs
        """
        document = source if isinstance(source, Document) else Document.from_text(source)
        extractor, document_type = self.classify(document)
        items = document_type.parse(document)
        failed = sum(1 for item in items if item.failed)
        logger.info(
            "Extracted %d item(s) from %s, %d failed",
            len(items),
            document.source or "document",
            failed,
        )
        return ExtractionResult(
            extractor=extractor.label,
            document_type=document_type.name,
            items=tuple(items),
            source=document.source,
        )

    def extract_file(self, path: Union[str, Path]) -> ExtractionResult:
        """Extract a statement from a UTF-8 text file.

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        text_path = Path(path)
        if not text_path.exists():
            raise FileNotFoundError(f"Statement file not found: {path}")
        text = text_path.read_text(encoding="utf-8-sig")
        return self.extract(Document.from_text(text, source=str(path)))

    def extract_many(
        self, sources: Sequence[Union[str, Document]], max_workers: Optional[int] = None
    ) -> list[Union[ExtractionResult, DomainError]]:
        """Extract several statements concurrently.

        Returns one entry per source, in the order given: the result, or the
        error that stopped that statement.
        """

        def run(source: Union[str, Document]) -> Union[ExtractionResult, DomainError]:
            try:
                return self.extract(source)
            except DomainError as e:
                logger.error("%s", e)
                return e

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(run, sources))

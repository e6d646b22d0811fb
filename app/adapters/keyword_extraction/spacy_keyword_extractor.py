import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional

import spacy

from ...core.ports.keyword_extractor import KeywordExtractor
from ...core.domain.exceptions import KeywordExtractionError

logger = logging.getLogger(__name__)


class SpacyKeywordExtractor(KeywordExtractor):
    """
    spaCy implementation of the keyword extractor.

    Salience order: head nouns of noun chunks first, then their modifiers,
    then any other content words in query order. Without a dependency
    parser (blank pipeline) content words are returned in query order.
    """

    CONTENT_POS = {"NOUN", "PROPN", "ADJ", "VERB", "NUM"}

    def __init__(
            self,
            spacy_model: str = "en_core_web_sm",
            max_terms: int = 5,
            nlp: Optional[Any] = None,
    ):
        if nlp is not None:
            self.nlp = nlp
        else:
            try:
                self.nlp = spacy.load(spacy_model, disable=["ner"])
            except OSError:
                logger.warning(
                    f"spaCy model {spacy_model!r} not available, using blank English pipeline"
                )
                self.nlp = spacy.blank("en")

        self.max_terms = max_terms
        # One Language object is shared across requests
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1)

    async def extract_keywords(self, query: str) -> List[str]:
        if not query or not query.strip():
            return [query]

        loop = asyncio.get_running_loop()
        try:
            keywords = await loop.run_in_executor(self._executor, self._extract_sync, query)
        except Exception as e:
            logger.error(f"Keyword extraction error: {e}")
            raise KeywordExtractionError(f"Keyword extraction failed: {str(e)}") from e

        return keywords or [query]

    def _extract_sync(self, query: str) -> List[str]:
        with self._lock:
            doc = self.nlp(query)

        keywords: List[str] = []
        seen = set()

        def add(token) -> None:
            term = token.text.strip().lower()
            if term and term not in seen:
                seen.add(term)
                keywords.append(term)

        if doc.has_annotation("DEP"):
            chunks = list(doc.noun_chunks)
            for chunk in chunks:
                if self._is_content(chunk.root):
                    add(chunk.root)
            for chunk in chunks:
                for token in chunk:
                    if token.i != chunk.root.i and self._is_content(token):
                        add(token)
            for token in doc:
                if token.pos_ in self.CONTENT_POS and self._is_content(token):
                    add(token)
        else:
            for token in doc:
                if self._is_content(token):
                    add(token)

        if self.max_terms:
            keywords = keywords[:self.max_terms]
        logger.debug(f"Extracted keywords {keywords} from {query!r}")
        return keywords

    @staticmethod
    def _is_content(token) -> bool:
        if token.is_stop or token.is_punct or token.is_space:
            return False
        return token.is_alpha or token.like_num

    def close(self) -> None:
        self._executor.shutdown(wait=True)

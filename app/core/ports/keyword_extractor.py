from abc import ABC, abstractmethod
from typing import List


class KeywordExtractor(ABC):
    """Port for keyword/phrase extraction from raw queries"""

    @abstractmethod
    async def extract_keywords(self, query: str) -> List[str]:
        """
        Extract keywords from a query, most salient first.

        Args:
            query: Raw user query

        Returns:
            Ordered keywords; never empty on success (falls back to [query])
        """
        pass

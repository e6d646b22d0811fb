from typing import List

from ...core.ports.keyword_extractor import KeywordExtractor


class PassthroughKeywordExtractor(KeywordExtractor):
    """Uses the whole query as its only keyword"""

    async def extract_keywords(self, query: str) -> List[str]:
        return [' '.join(query.split()) or query]

from typing import Dict, List, Sequence
import structlog

from ..models.post import Post

logger = structlog.get_logger()

class SymbolRouter:
    """Groups posts by the tracked symbols their text or tags mention"""

    def __init__(self, symbols: Sequence[str]):
        cleaned = [symbol.strip() for symbol in symbols]
        if not cleaned:
            raise ValueError("SymbolRouter requires at least one symbol")
        if any(not symbol for symbol in cleaned):
            raise ValueError("Symbol names must not be blank")

        self._symbols = tuple(cleaned)
        self._needles = {symbol: symbol.casefold() for symbol in self._symbols}

    @property
    def symbols(self) -> List[str]:
        return list(self._symbols)

    def matches(self, post: Post, symbol: str) -> bool:
        """True if the post's text or any of its tags contains the symbol, ignoring case"""
        needle = self._needles.get(symbol) or symbol.casefold()
        if isinstance(post.text, str) and needle in post.text.casefold():
            return True
        return any(isinstance(tag, str) and needle in tag.casefold() for tag in post.tags)

    def route(self, posts: Sequence[Post]) -> Dict[str, List[Post]]:
        """
        Assign posts to symbols.

        A post may land in several groups. Posts matching no symbol are
        dropped. Only symbols with at least one match appear in the result,
        in registry order.

        Args:
            posts: Batch of posts

        Returns:
            Mapping of symbol -> matched posts (batch order preserved)
        """
        groups: Dict[str, List[Post]] = {}
        unmatched = 0

        for post in posts:
            matched = False
            for symbol in self._symbols:
                if self.matches(post, symbol):
                    groups.setdefault(symbol, []).append(post)
                    matched = True
            if not matched:
                unmatched += 1

        ordered = {symbol: groups[symbol] for symbol in self._symbols if symbol in groups}

        logger.debug("Posts routed",
                     post_count=len(posts),
                     unmatched=unmatched,
                     groups={symbol: len(group) for symbol, group in ordered.items()})
        return ordered

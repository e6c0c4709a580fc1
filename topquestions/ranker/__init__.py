"""Top-K ranking of search results."""

from topquestions.ranker.constants import TOP_K
from topquestions.ranker.merger import TopKMerger, rank_key


__all__ = ["TOP_K", "TopKMerger", "rank_key"]

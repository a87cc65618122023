"""
analyzer — porównanie artykułu referencyjnego (Wikipedia) z kandydatem (Grokipedia).

Publiczne API:
  prepare_analyzer_source(article)                                 -> AnalyzerSource
  analyze(topic, reference, candidate, content_hash=None)         -> AnalysisPayload
  analyze_async(topic, reference, candidate, classifier, ...)     -> AnalysisPayload
  analyze_articles(topic, reference_article, candidate_article)   -> AnalysisPayload
  compute_content_hash(reference_text, candidate_text)            -> str
  probe_cached_analysis(path, expected_hash, ttl_hours)           -> CacheProbe
"""

from .analyzer import analyze, analyze_articles, analyze_async, compare_sentences
from .bias import ZeroShotClassifier, detect_bias_events, detect_bias_keyword
from .cache import CacheProbe, CacheStatus, probe_cached_analysis
from .content_hash import compute_content_hash
from .source import AnalyzerSource, ArticleContent, prepare_analyzer_source

__all__ = [
    "analyze",
    "analyze_async",
    "analyze_articles",
    "compare_sentences",
    "ZeroShotClassifier",
    "detect_bias_events",
    "detect_bias_keyword",
    "CacheProbe",
    "CacheStatus",
    "probe_cached_analysis",
    "compute_content_hash",
    "AnalyzerSource",
    "ArticleContent",
    "prepare_analyzer_source",
]

"""
data_model — struktury danych modelu wikidrift.

Użycie:
  from data_model import StructuredArticle, AnalysisPayload, Topic, ...

Moduły:
  common   — enumy (SourceKind, ParseMode, MediaType, DiscrepancyType, ...)
             i aliasy identyfikatorów
  article  — StructuredArticle, Lead, Section, Paragraph, Sentence,
             Reference, Media, Claim + (de)serializacja snapshotu
  analysis — AnalysisPayload i jego rekordy składowe
  topics   — Topic + katalog topics.json
  schema   — JSON Schema snapshotu artykułu
  errors   — SnapshotError, TopicError

Mapowanie na pliki:
  data/{wiki,grok}/<topic>.parsed.json → StructuredArticle
  analysis/<topic>.json                → AnalysisPayload
  topics.json                          → list[Topic]
"""

from .common import (
    ClaimId,
    CitationId,
    MediaId,
    SectionId,
    SourceKind,
    ParseMode,
    Side,
    MediaType,
    MediaOrigin,
    ReferenceKind,
    DiscrepancyType,
    DiscrepancyCategory,
    BiasCategoryId,
    ConfidenceLabel,
    HighlightTag,
)
from .article import (
    ArticleMetadata,
    ExternalCitation,
    TextRange,
    Sentence,
    Paragraph,
    Lead,
    Section,
    MediaUsage,
    Media,
    NormalizedReference,
    Reference,
    Entity,
    TimeValue,
    NumberValue,
    Claim,
    Revision,
    StructuredArticle,
    is_empty_article,
    article_to_dict,
    article_from_dict,
)
from .analysis import (
    Evidence,
    DiscrepancyRecord,
    RewordedPair,
    SectionRef,
    SectionAlignment,
    ClaimAlignment,
    NumericDiscrepancy,
    EntityDiscrepancy,
    BiasMetrics,
    ConfidenceSummary,
    HighlightSnippet,
    Highlights,
    SimilarityRatio,
    AnalysisStats,
    CitationDiff,
    AnalysisWindow,
    AnalysisMeta,
    AnalysisPayload,
    payload_to_dict,
)
from .topics import (
    Topic,
    load_topics,
    write_topics,
    select_topics,
    parse_topic_payload,
)
from .schema import ARTICLE_SCHEMA, validate_article_dict
from .errors import SnapshotError, TopicError

__all__ = [
    # common
    "ClaimId",
    "CitationId",
    "MediaId",
    "SectionId",
    "SourceKind",
    "ParseMode",
    "Side",
    "MediaType",
    "MediaOrigin",
    "ReferenceKind",
    "DiscrepancyType",
    "DiscrepancyCategory",
    "BiasCategoryId",
    "ConfidenceLabel",
    "HighlightTag",
    # article
    "ArticleMetadata",
    "ExternalCitation",
    "TextRange",
    "Sentence",
    "Paragraph",
    "Lead",
    "Section",
    "MediaUsage",
    "Media",
    "NormalizedReference",
    "Reference",
    "Entity",
    "TimeValue",
    "NumberValue",
    "Claim",
    "Revision",
    "StructuredArticle",
    "is_empty_article",
    "article_to_dict",
    "article_from_dict",
    # analysis
    "Evidence",
    "DiscrepancyRecord",
    "RewordedPair",
    "SectionRef",
    "SectionAlignment",
    "ClaimAlignment",
    "NumericDiscrepancy",
    "EntityDiscrepancy",
    "BiasMetrics",
    "ConfidenceSummary",
    "HighlightSnippet",
    "Highlights",
    "SimilarityRatio",
    "AnalysisStats",
    "CitationDiff",
    "AnalysisWindow",
    "AnalysisMeta",
    "AnalysisPayload",
    "payload_to_dict",
    # topics
    "Topic",
    "load_topics",
    "write_topics",
    "select_topics",
    "parse_topic_payload",
    # schema
    "ARTICLE_SCHEMA",
    "validate_article_dict",
    # errors
    "SnapshotError",
    "TopicError",
]

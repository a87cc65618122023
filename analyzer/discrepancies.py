"""
analyzer/discrepancies.py — rozbieżności liczbowe, encji i błędy faktograficzne.

Wejściem są pary claimów z align_claims(); pary z brakującą stroną są
pomijane. Liczby porównywane są tylko po pierwszej wartości każdego
claimu, bez przeliczania jednostek.
"""

from __future__ import annotations

from data_model.analysis import (
    ClaimAlignment,
    DiscrepancyRecord,
    EntityDiscrepancy,
    Evidence,
    NumericDiscrepancy,
)
from data_model.article import Claim
from data_model.common import DiscrepancyCategory, DiscrepancyType

from .config import (
    ENTITY_ERROR_MIN_DIFF,
    NUMERIC_ERROR_THRESHOLD,
    NUMERIC_REPORT_THRESHOLD,
    SEMANTIC_DIVERGENCE_MAX,
)


def relative_difference(a: float, b: float) -> float:
    if a == 0 and b == 0:
        return 0.0
    if a == 0 or b == 0:
        return 1.0
    return abs(a - b) / max(abs(a), abs(b))


def _entity_labels(claim: Claim) -> list[str]:
    labels = (e.label.strip().lower() for e in claim.entities)
    return list(dict.fromkeys(label for label in labels if label))


# ---------------------------------------------------------------------------
# Detektory
# ---------------------------------------------------------------------------

def detect_numeric_discrepancies(alignments: list[ClaimAlignment]) -> list[NumericDiscrepancy]:
    results: list[NumericDiscrepancy] = []
    for record in alignments:
        if record.reference is None or record.candidate is None:
            continue
        if not record.reference.numbers or not record.candidate.numbers:
            continue
        ref_value = record.reference.numbers[0]
        cand_value = record.candidate.numbers[0]
        # obie jednostki znane i różne → porównanie niemożliwe
        if ref_value.unit and cand_value.unit and ref_value.unit != cand_value.unit:
            continue
        delta = relative_difference(ref_value.value, cand_value.value)
        if delta < NUMERIC_REPORT_THRESHOLD:
            continue
        results.append(NumericDiscrepancy(
            reference_claim_id=record.reference.claim_id,
            candidate_claim_id=record.candidate.claim_id,
            reference_value=ref_value,
            candidate_value=cand_value,
            relative_difference=round(delta, 3),
            description=f"Numeric discrepancy detected ({ref_value.raw} vs {cand_value.raw}).",
        ))
    return results


def detect_entity_discrepancies(alignments: list[ClaimAlignment]) -> list[EntityDiscrepancy]:
    results: list[EntityDiscrepancy] = []
    for record in alignments:
        if record.reference is None or record.candidate is None:
            continue
        ref_labels = _entity_labels(record.reference)
        cand_labels = _entity_labels(record.candidate)
        if set(ref_labels) == set(cand_labels):
            continue
        results.append(EntityDiscrepancy(
            reference_claim_id=record.reference.claim_id,
            candidate_claim_id=record.candidate.claim_id,
            reference_entities=ref_labels,
            candidate_entities=cand_labels,
            description="Entity mismatch between reference and candidate claims.",
        ))
    return results


def detect_factual_errors(
    alignments: list[ClaimAlignment],
    numeric: list[NumericDiscrepancy],
    entities: list[EntityDiscrepancy],
) -> list[DiscrepancyRecord]:
    """
    Eskalacja do factual_error:
      - różnica liczbowa ≥ 0.2                        (severity 5)
      - ≥ 2 encje dodane/usunięte w parze claimów     (severity 3)
      - para claimów z podobieństwem w (0, 0.3)       (severity 3)
    """
    errors: list[DiscrepancyRecord] = []

    for item in numeric:
        if item.relative_difference < NUMERIC_ERROR_THRESHOLD:
            continue
        errors.append(DiscrepancyRecord(
            type=DiscrepancyType.FACTUAL_ERROR,
            description=f"Significant numeric discrepancy: {item.description}",
            evidence=Evidence(reference=item.reference_value.raw, candidate=item.candidate_value.raw),
            severity=5,
            category=DiscrepancyCategory.FACTUAL,
            tags=["numeric_mismatch"],
        ))

    for item in entities:
        missing = [e for e in item.reference_entities if e not in item.candidate_entities]
        extra = [e for e in item.candidate_entities if e not in item.reference_entities]
        if len(missing) + len(extra) < ENTITY_ERROR_MIN_DIFF:
            continue
        errors.append(DiscrepancyRecord(
            type=DiscrepancyType.FACTUAL_ERROR,
            description=(
                f"Entity discrepancy: reference mentions [{', '.join(missing)}], "
                f"candidate adds [{', '.join(extra)}]"
            ),
            evidence=Evidence(reference=", ".join(missing), candidate=", ".join(extra)),
            severity=3,
            category=DiscrepancyCategory.FACTUAL,
            tags=["entity_mismatch"],
        ))

    for record in alignments:
        if record.reference is None or record.candidate is None:
            continue
        if 0 < record.similarity < SEMANTIC_DIVERGENCE_MAX:
            errors.append(DiscrepancyRecord(
                type=DiscrepancyType.FACTUAL_ERROR,
                description="Claims are semantically divergent despite topic alignment.",
                evidence=Evidence(reference=record.reference.text, candidate=record.candidate.text),
                severity=3,
                category=DiscrepancyCategory.FACTUAL,
                tags=["semantic_divergence"],
            ))

    return errors

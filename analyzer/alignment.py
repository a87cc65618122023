"""
analyzer/alignment.py — zachłanne parowanie sekcji i claimów.

Dla każdego elementu referencji wybierany jest najbardziej podobny,
jeszcze nieużyty element kandydata (remisy → pierwszy napotkany).
Para powstaje gdy podobieństwo ≥ progu; w przeciwnym razie element
zostaje bez pary z similarity = 0. Nieużyte elementy kandydata
dopisywane są na końcu, również z similarity = 0.
"""

from __future__ import annotations

from data_model.analysis import ClaimAlignment, SectionAlignment, SectionRef
from data_model.article import StructuredArticle

from .config import CLAIM_ALIGN_THRESHOLD, SECTION_ALIGN_THRESHOLD
from .similarity import approx_similarity


def _norm(value: str) -> str:
    return value.strip().lower()


def align_sections(reference: StructuredArticle, candidate: StructuredArticle) -> list[SectionAlignment]:
    results: list[SectionAlignment] = []
    used: set[str] = set()
    for section in reference.sections:
        best: tuple[float, int] | None = None
        for idx, cand in enumerate(candidate.sections):
            if not cand.heading or cand.section_id in used:
                continue
            similarity = approx_similarity(_norm(section.heading), _norm(cand.heading))
            if best is None or similarity > best[0]:
                best = (similarity, idx)

        ref = SectionRef(section_id=section.section_id, heading=section.heading)
        if best is not None and best[0] >= SECTION_ALIGN_THRESHOLD:
            match = candidate.sections[best[1]]
            used.add(match.section_id)
            results.append(SectionAlignment(
                reference=ref,
                candidate=SectionRef(section_id=match.section_id, heading=match.heading),
                similarity=round(best[0], 3),
            ))
        else:
            results.append(SectionAlignment(reference=ref, candidate=None, similarity=0.0))

    for cand in candidate.sections:
        if cand.section_id not in used:
            results.append(SectionAlignment(
                reference=None,
                candidate=SectionRef(section_id=cand.section_id, heading=cand.heading),
                similarity=0.0,
            ))
    return results


def align_claims(reference: StructuredArticle, candidate: StructuredArticle) -> list[ClaimAlignment]:
    results: list[ClaimAlignment] = []
    used: set[str] = set()
    for claim in reference.claims:
        best: tuple[float, int] | None = None
        for idx, cand in enumerate(candidate.claims):
            if cand.claim_id in used:
                continue
            similarity = approx_similarity(_norm(claim.text), _norm(cand.text))
            if best is None or similarity > best[0]:
                best = (similarity, idx)

        if best is not None and best[0] >= CLAIM_ALIGN_THRESHOLD:
            match = candidate.claims[best[1]]
            used.add(match.claim_id)
            results.append(ClaimAlignment(reference=claim, candidate=match, similarity=round(best[0], 3)))
        else:
            results.append(ClaimAlignment(reference=claim, candidate=None, similarity=0.0))

    for cand in candidate.claims:
        if cand.claim_id not in used:
            results.append(ClaimAlignment(reference=None, candidate=cand, similarity=0.0))
    return results

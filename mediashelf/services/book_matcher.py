"""
Selection du meilleur candidat livre parmi les resultats fournisseur.

Hardcover renvoie souvent des guides de lecture, des resumes ou des
coffrets avant l'edition recherchee. Le rapprochement filtre ces
candidats et departage les autres par recouvrement de mots du titre.
"""

import re
from typing import Optional

from mediashelf.core.ports.api_clients import BookMetadata

SUPPLEMENTARY_KEYWORDS = (
    "annotation",
    "study guide",
    "summary",
    "analysis",
    "companion",
    "notes",
    "overview",
    "recap",
)

COLLECTION_KEYWORDS = (
    "trilogy",
    "collection",
    "boxset",
    "box set",
    "omnibus",
    "complete",
    "series bundle",
)

STOPWORDS = frozenset({"the", "and", "book", "vol", "part"})

COLLECTION_PENALTY = 5
# Au-dela de ce ratio, un titre de coffret est considere comme l'edition cherchee
COLLECTION_EXEMPT_RATIO = 0.7

TOKEN_SPLIT_PATTERN = re.compile(r"[^a-z0-9]+")


def tokenize(title: str) -> list[str]:
    """Mots significatifs d'un titre (minuscules, > 2 caracteres, hors mots vides)."""
    return [
        token
        for token in TOKEN_SPLIT_PATTERN.split(title.lower())
        if len(token) > 2 and token not in STOPWORDS
    ]


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def _author_matches(candidate: BookMetadata, author_hint: str) -> bool:
    hint = author_hint.strip().lower()
    for name in candidate.authors:
        name = name.strip().lower()
        # Un nom vide serait contenu dans n'importe quel indice
        if name and (hint in name or name in hint):
            return True
    return False


def score_candidate(candidate: BookMetadata, search_tokens: list[str]) -> int:
    """
    Score = mots du titre recherche presents dans le candidat - penalite coffret.

    La penalite ne s'applique pas si le ratio de recouvrement atteint 0.7.
    """
    candidate_tokens = set(tokenize(candidate.title))
    overlap = sum(1 for token in search_tokens if token in candidate_tokens)
    ratio = overlap / len(search_tokens) if search_tokens else 0.0

    penalty = 0
    if _contains_any(candidate.title, COLLECTION_KEYWORDS) and ratio < COLLECTION_EXEMPT_RATIO:
        penalty = COLLECTION_PENALTY
    return overlap - penalty


def select_best_candidate(
    candidates: list[BookMetadata],
    title: str,
    author_hint: Optional[str] = None,
) -> Optional[BookMetadata]:
    """
    Choisit le candidat a retenir pour un titre et un auteur.

    Sans indice d'auteur ou avec un seul candidat, le premier candidat est
    retenu tel quel. Sinon les candidats supplementaires (guides, resumes)
    et ceux d'un autre auteur sont ecartes, puis le meilleur score gagne ;
    a egalite, l'ordre du fournisseur est conserve.

    Returns:
        Le candidat retenu, ou None si aucun ne survit au filtrage
    """
    if not candidates:
        return None
    if not author_hint or not author_hint.strip() or len(candidates) == 1:
        return candidates[0]

    survivors = [
        candidate
        for candidate in candidates
        if not _contains_any(candidate.title, SUPPLEMENTARY_KEYWORDS)
        and _author_matches(candidate, author_hint)
    ]
    if not survivors:
        return None

    search_tokens = tokenize(title)
    best, best_score = survivors[0], score_candidate(survivors[0], search_tokens)
    for candidate in survivors[1:]:
        score = score_candidate(candidate, search_tokens)
        if score > best_score:
            best, best_score = candidate, score
    return best

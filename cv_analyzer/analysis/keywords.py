from __future__ import annotations

from dataclasses import dataclass

from .matching import contains_keyword


@dataclass(frozen=True)
class KeywordScore:
    total: int
    matched: int
    missing: tuple[str, ...]
    score: float


def score_keywords(text: str, keywords: tuple[str, ...] | list[str]) -> KeywordScore:
    missing: list[str] = []
    matched = 0
    for keyword in keywords:
        if contains_keyword(text, keyword):
            matched += 1
        else:
            missing.append(keyword)

    total = len(keywords)
    score = (matched / total) * 100 if total else 0.0
    return KeywordScore(total=total, matched=matched, missing=tuple(missing), score=score)

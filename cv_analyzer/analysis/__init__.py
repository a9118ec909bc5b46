from .annotate import annotate
from .keywords import KeywordScore, score_keywords
from .matching import normalize_text
from .rating import ATS_PASS_THRESHOLD, CompositeRating, format_score, rate
from .rubric import Rubric, SectionSpec, get_default_rubric, load_rubric
from .structure import StructureScore, score_structure

__all__ = [
    "ATS_PASS_THRESHOLD",
    "CompositeRating",
    "KeywordScore",
    "Rubric",
    "SectionSpec",
    "StructureScore",
    "annotate",
    "format_score",
    "get_default_rubric",
    "load_rubric",
    "normalize_text",
    "rate",
    "score_keywords",
    "score_structure",
]

from __future__ import annotations

"""
Pattern tables that classify handoff lines as clinical signals.

Design intent:
- Flag critical lab values with explicit numeric threshold ranges.
- Keep vocabularies fixed and case-insensitive; matching is substring, not word-boundary.
"""

import re
from typing import Sequence

# Each number alternative must consume the whole value, hence the trailing lookahead.
_END = r"(?![\d.]*\d)"
_SEP = r"\s*[:\-]?\s*"

_CRITICAL_LAB_RULES: list[tuple[str, str]] = [
    # K < 3.0 or >= 5.6
    (r"K|Potassium", r"(?:[0-2](?:\.\d+)?|5\.[6-9]\d*|[6-9](?:\.\d+)?|\d{2,}(?:\.\d+)?)"),
    # Na <= 119 or >= 160
    (r"Na|Sodium", r"(?:\d{1,2}(?:\.\d+)?|1[01]\d(?:\.\d+)?|1[6-9]\d(?:\.\d+)?|[2-9]\d{2}(?:\.\d+)?)"),
    # Hgb < 6.0
    (r"Hgb|Hemoglobin", r"(?:[0-5](?:\.\d+)?)"),
    # Lactate >= 4.0
    (r"Lactate", r"(?:[4-9](?:\.\d+)?|\d{2,}(?:\.\d+)?)"),
    # INR >= 5.0
    (r"INR", r"(?:[5-9](?:\.\d+)?|\d{2,}(?:\.\d+)?)"),
    # pH < 6.0 or 7.00-7.29
    (r"pH", r"(?:[0-5]\.\d+|7\.[0-2]\d?)"),
]

CRITICAL_LAB_RE = re.compile(
    "|".join(rf"\b(?:{label}){_SEP}{value}{_END}" for label, value in _CRITICAL_LAB_RULES),
    re.IGNORECASE,
)

VITALS_RE = re.compile(
    r"\b(T: ?\d{2,3}(\.\d)?°?C?|BP: ?\d{2,3}/\d{2,3}|HR: ?\d{2,3}|RR: ?\d{1,2}|SpO2: ?\d{2,3}%?)",
    re.IGNORECASE,
)
MEDS_RE = re.compile(
    r"\b\d+(\.\d+)?\s*(mg|mcg|g|units|L|ml)\b|\b(PO|IV|IM|SC|BID|TID|Q\d+H|PRN)\b",
    re.IGNORECASE,
)
LABS_RE = re.compile(
    r"\b(WBC|Hgb|Hct|Plt|Na|K|Cl|HCO3|BUN|Cr|Glu|Ca|Mg|Phos|AST|ALT|Alk Phos|T Bili|Albumin"
    r"|Troponin|BNP|Lactate|INR|PTT|ABG|pH)\b",
    re.IGNORECASE,
)
RISK_SCORE_RE = re.compile(r"\b(HEART|TIMI|CHA2DS2-VASc|HAS-BLED)\s*Score:\s*\d+\b", re.IGNORECASE)

STATUS_KEYWORDS: tuple[str, ...] = (
    "Discharge",
    "DNR",
    "DNI",
    "Full Code",
    "Comfort Care",
    "Hospice",
)

CLINICAL_PROBLEM_KEYWORDS: tuple[str, ...] = (
    "Sepsis", "AKI", "CHF exacerbation", "Pneumonia", "UTI", "Diverticulitis",
    "ACS", "STEMI", "NSTEMI", "PE", "DVT", "GI Bleed", "CVA", "TIA", "Hyperkalemia",
    "Hyponatremia", "Anemia", "ARDS", "COPD exacerbation", "Asthma exacerbation",
    "Delirium", "Alcohol Withdrawal", "Diabetic Ketoacidosis", "Hyperglycemia",
    "Hypoglycemia", "Hypertension", "Hypotension", "Atrial Fibrillation", "CKD",
    "Cirrhosis", "Pancreatitis", "Cholecystitis", "Appendicitis", "SBO", "Ileus",
)

# Lightweight scan used by the background worker, independent of section parsing.
_WORKER_KEYWORD_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(sepsis|pneumonia|uti|chf|copd|aki|ckd|dm|htn|cad|afib|dvt|pe)\b", re.IGNORECASE),
    re.compile(r"\b(critical|unstable|deteriorating|improving|stable)\b", re.IGNORECASE),
)

_ASSESSMENT_LABEL_RE = re.compile(r"\*\*Assessment:\*\*", re.IGNORECASE)


def is_critical_line(line: str) -> bool:
    return CRITICAL_LAB_RE.search(line or "") is not None


def find_critical_labs(lines: Sequence[str]) -> list[str]:
    found: list[str] = []
    for line in lines:
        match = CRITICAL_LAB_RE.search(line or "")
        if match is None:
            continue
        found.append(match.group(0) or line[:20])
    return found


def detect_status_badges(lines: Sequence[str]) -> list[str]:
    lowered = [(line or "").lower() for line in lines]
    return [
        keyword
        for keyword in STATUS_KEYWORDS
        if any(keyword.lower() in line for line in lowered)
    ]


def extract_clinical_keywords(text: str) -> list[str]:
    haystack = (text or "").lower()
    return [keyword for keyword in CLINICAL_PROBLEM_KEYWORDS if keyword.lower() in haystack]


def is_assessment_or_problem_line(line: str) -> bool:
    return line.startswith("#") or _ASSESSMENT_LABEL_RE.match(line) is not None


def detect_clinical_keywords(lines: Sequence[str]) -> list[str]:
    heading_text = "\n".join(line for line in lines if is_assessment_or_problem_line(line))
    return extract_clinical_keywords(heading_text)


def find_risk_scores(lines: Sequence[str]) -> list[str]:
    scores: list[str] = []
    for line in lines:
        scores.extend(match.group(0) for match in RISK_SCORE_RE.finditer(line or ""))
    return scores


def scan_keywords(content: str) -> list[str]:
    seen: set[str] = set()
    keywords: list[str] = []
    for pattern in _WORKER_KEYWORD_PATTERNS:
        for match in pattern.finditer(content or ""):
            word = match.group(0).lower()
            if word in seen:
                continue
            seen.add(word)
            keywords.append(word)
    return keywords

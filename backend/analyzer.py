"""Heuristic on-page SEO analyzer over raw HTML source.

Each check is an independent rule returning a RuleOutcome. Rules run in a
fixed order (title, description, headings, images, links, regional
keywords, structured data); the score starts at 100, every deduction is
summed, and the result is clamped at 0. No DOM parsing, no network.
"""

import re
from dataclasses import dataclass, field
from typing import Callable

from config import REGION
from models import AnalysisIssue, AnalysisResult

TITLE_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.I)
META_DESCRIPTION_RE = re.compile(r'<meta\s+name="description"\s+content="([^"]+)"', re.I)
H1_RE = re.compile(r"<h1[^>]*>([^<]+)</h1>", re.I)
IMG_RE = re.compile(r"<img[^>]+>", re.I)
INTERNAL_LINK_RE = re.compile(r'href="/[^"]*"')
REGIONAL_TERMS_RE = re.compile("|".join(re.escape(term) for term in REGION["terms"]), re.I)

TITLE_MIN, TITLE_MAX = 30, 60
DESCRIPTION_MIN, DESCRIPTION_MAX = 120, 160
MIN_INTERNAL_LINKS = 3
MAX_ALT_DEDUCTION = 10


@dataclass
class RuleOutcome:
    deduction: int = 0
    issues: list[AnalysisIssue] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def issue(self, severity: str, message: str, deduction: int = 0) -> None:
        self.issues.append({"severity": severity, "message": message})
        self.deduction += deduction


def check_title(content: str) -> RuleOutcome:
    outcome = RuleOutcome()
    match = TITLE_RE.search(content)
    if match is None:
        outcome.issue("error", "Missing title tag", 20)
        return outcome

    title = match.group(1)
    if len(title) < TITLE_MIN:
        outcome.issue("warning", f"Title is too short (< {TITLE_MIN} characters)", 5)
    if len(title) > TITLE_MAX:
        outcome.issue("warning", f"Title is too long (> {TITLE_MAX} characters)", 5)
    if REGION["keyword"].lower() not in title.lower():
        outcome.recommendations.append(
            f'Consider including "{REGION["name"]}" in the title for local SEO'
        )
    return outcome


def check_meta_description(content: str) -> RuleOutcome:
    outcome = RuleOutcome()
    match = META_DESCRIPTION_RE.search(content)
    if match is None:
        outcome.issue("error", "Missing meta description", 15)
        return outcome

    description = match.group(1)
    if len(description) < DESCRIPTION_MIN:
        outcome.issue("warning", f"Meta description is too short (< {DESCRIPTION_MIN} characters)", 3)
    if len(description) > DESCRIPTION_MAX:
        outcome.issue("warning", f"Meta description is too long (> {DESCRIPTION_MAX} characters)", 3)
    return outcome


def check_headings(content: str) -> RuleOutcome:
    outcome = RuleOutcome()
    h1_count = len(H1_RE.findall(content))
    if h1_count == 0:
        outcome.issue("error", "Missing H1 tag", 10)
    elif h1_count > 1:
        outcome.issue("warning", "Multiple H1 tags found", 5)
    return outcome


def check_image_alt(content: str) -> RuleOutcome:
    outcome = RuleOutcome()
    missing = sum(1 for tag in IMG_RE.findall(content) if "alt=" not in tag)
    if missing:
        outcome.issue("warning", f"{missing} images missing alt text", min(missing * 2, MAX_ALT_DEDUCTION))
    return outcome


def check_internal_links(content: str) -> RuleOutcome:
    outcome = RuleOutcome()
    if len(INTERNAL_LINK_RE.findall(content)) < MIN_INTERNAL_LINKS:
        outcome.recommendations.append("Add more internal links to improve site navigation and SEO")
    return outcome


def check_regional_keywords(content: str) -> RuleOutcome:
    outcome = RuleOutcome()
    if REGIONAL_TERMS_RE.search(content) is None:
        outcome.recommendations.append(f"Include {REGION['name']}-specific keywords and location terms")
    return outcome


def check_structured_data(content: str) -> RuleOutcome:
    outcome = RuleOutcome()
    if "application/ld+json" not in content:
        outcome.issue("warning", "No structured data found", 5)
        outcome.recommendations.append("Add structured data markup for better search engine understanding")
    return outcome


RULES: list[Callable[[str], RuleOutcome]] = [
    check_title,
    check_meta_description,
    check_headings,
    check_image_alt,
    check_internal_links,
    check_regional_keywords,
    check_structured_data,
]


def analyze_page(url: str, content: str) -> AnalysisResult:
    """Run every rule over `content` and return score, issues and recommendations."""
    issues: list[AnalysisIssue] = []
    recommendations: list[str] = []
    deductions = 0

    for rule in RULES:
        outcome = rule(content)
        deductions += outcome.deduction
        issues.extend(outcome.issues)
        recommendations.extend(outcome.recommendations)

    return {
        "score": max(0, min(100, 100 - deductions)),
        "issues": issues,
        "recommendations": recommendations,
    }

"""Heading patterns and metadata keyword sets shared by the pipeline stages."""

import re

from reading_units.models import ContentFeature

# Chapter headings: "第三章", "第 12 章", "Chapter 4", "Part IV". Anchored at the start.
STRONG_HEADING_PATTERN: re.Pattern[str] = re.compile(
    r"^(第\s*[一二三四五六七八九十百千零〇两0-9]+\s*章|Chapter\s+\d+|Part\s+[IVX0-9]+)"
)

# Section headings: "1.2", "1.2.3", "§3".
WEAK_HEADING_PATTERN: re.Pattern[str] = re.compile(r"^(\d+\.\d+|§\s*\d+)")

# Leading dot-separated section number, e.g. "1.2.3 Scope" -> "1.2.3".
SECTION_NUMBER_PATTERN: re.Pattern[str] = re.compile(r"^([0-9]+(?:\.[0-9]+)*)")

# Checked in this order; the first matching set wins.
CONTENT_KEYWORDS: dict[ContentFeature, tuple[str, ...]] = {
    ContentFeature.COPYRIGHT: (
        "ISBN",
        "All rights reserved",
        "Copyright",
        "版权",
        "出版社",
        "印刷",
        "发行",
        "CIP",
        "©",
        "版权所有",
    ),
    ContentFeature.TOC: ("目录", "导航", "Contents", "TOC", "Table of Contents"),
    ContentFeature.PREFACE: (
        "序",
        "序言",
        "前言",
        "致谢",
        "鸣谢",
        "导读",
        "引言",
        "Preface",
        "Foreword",
        "Introduction",
        "Acknowledgments",
        "Summary",
    ),
}


def is_strong_heading(text: str | None) -> bool:
    return bool(text) and STRONG_HEADING_PATTERN.match(text) is not None


def classify_content(text: str | None) -> ContentFeature:
    """Classify heading text by case-insensitive keyword containment."""
    if not text:
        return ContentFeature.BODY

    lowered = text.lower()
    for feature, keywords in CONTENT_KEYWORDS.items():
        if any(keyword.lower() in lowered for keyword in keywords):
            return feature
    return ContentFeature.BODY

"""Reconciles the extractions of several documents into one patient record.

Documents are processed in the order given; every "first seen" tie-break
means "lowest index in that sequence".

Identity fields (name, date of birth, sex) are decided by majority vote
over the documents that report them. Collection dates are not voted on:
separate dates are separate lab visits, so readings are grouped per date
and the identity carries the most recent one.
"""

import re
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import replace

from labmatch.consolidation.models import (
    NO_DATE,
    ConfidenceTier,
    ConsolidatedIdentity,
    ConsolidationResult,
)
from labmatch.extraction.models import ExtractedReading, SourceDocument
from labmatch.extraction.validator import parse_date
from labmatch.logging.logger import Log
from labmatch.normalization.name_resolver import NameResolver
from labmatch.normalization.text import TextFolder
from labmatch.ranges.parser import parse_numeric

_WHITESPACE_RE = re.compile(r"\s+")


class Consolidator:
    def __init__(self, resolver: NameResolver | None = None, folder: TextFolder | None = None) -> None:
        self._resolver = resolver
        self._folder = folder or TextFolder()

    def consolidate(self, documents: Sequence[SourceDocument]) -> ConsolidationResult:
        discrepancies: list[str] = []

        name = self._vote(
            "Name",
            [doc.patient.name for doc in documents],
            key=lambda value: _collapse(value).casefold(),
            discrepancies=discrepancies,
        )
        date_of_birth = self._vote(
            "Date of birth",
            [parse_date(doc.patient.date_of_birth) for doc in documents],
            key=str,
            discrepancies=discrepancies,
        )
        sex = self._vote(
            "Sex",
            [doc.patient.sex for doc in documents],
            key=lambda value: value.strip().casefold(),
            discrepancies=discrepancies,
        )

        reading_groups = self._group_readings(documents)
        visit_dates = [key for key in reading_groups if key != NO_DATE]
        document_dates = [parse_date(doc.patient.collection_date) for doc in documents]
        all_dates = [d for d in document_dates if d is not None] + visit_dates

        identity = ConsolidatedIdentity(
            name=_collapse(name).title() if name else None,
            date_of_birth=date_of_birth,
            sex=sex.strip().lower() if sex else None,
            collection_date=max(all_dates) if all_dates else None,
        )
        confidence = _tier(len(discrepancies))
        Log.info(
            f"Consolidated {len(documents)} documents: {len(reading_groups)} reading groups, "
            f"{len(discrepancies)} discrepancies, confidence {confidence.value}"
        )
        if confidence is ConfidenceTier.LOW:
            Log.warning(f"Low consolidation confidence: {'; '.join(discrepancies)}")
        return ConsolidationResult(
            identity=identity,
            reading_groups=reading_groups,
            discrepancies=tuple(discrepancies),
            confidence=confidence,
        )

    @staticmethod
    def _vote(
        label: str,
        values: Sequence[str | None],
        *,
        key: Callable[[str], str],
        discrepancies: list[str],
    ) -> str | None:
        """Most common value (by *key*); ties go to the first seen.

        Returns the first-seen original spelling of the winning key and
        records a discrepancy when more than one key was observed.
        """
        counts: Counter[str] = Counter()
        first_seen: dict[str, str] = {}
        for value in values:
            if value is None or not value.strip():
                continue
            normalized = key(value)
            counts[normalized] += 1
            first_seen.setdefault(normalized, value)
        if not counts:
            return None
        # Counter preserves insertion order, and max keeps the first maximum.
        winner = max(counts, key=lambda normalized: counts[normalized])
        chosen = first_seen[winner]
        if len(counts) > 1:
            shown = _collapse(chosen).title() if label == "Name" else chosen
            discrepancies.append(f'{label}: found {len(counts)} variants, using "{shown}"')
        return chosen

    def _group_readings(
        self,
        documents: Sequence[SourceDocument],
    ) -> dict[str, tuple[ExtractedReading, ...]]:
        groups: dict[str, dict[str, ExtractedReading]] = {}
        for document in documents:
            document_date = parse_date(document.patient.collection_date)
            for reading in document.readings:
                reading_date = parse_date(reading.collection_date) or document_date
                bucket = groups.setdefault(reading_date or NO_DATE, {})
                dated = replace(reading, collection_date=reading_date)
                key = self._reading_key(reading.name)
                current = bucket.get(key)
                if current is None or (_is_numeric(dated) and not _is_numeric(current)):
                    bucket[key] = dated

        ordered = sorted(key for key in groups if key != NO_DATE)
        if NO_DATE in groups:
            ordered.append(NO_DATE)
        return {key: tuple(groups[key].values()) for key in ordered}

    def _reading_key(self, name: str) -> str:
        if self._resolver is not None:
            name = self._resolver.resolve(name).canonical_name
        return self._folder.fold(name)


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def _is_numeric(reading: ExtractedReading) -> bool:
    return parse_numeric(reading.value) is not None


def _tier(discrepancy_count: int) -> ConfidenceTier:
    if discrepancy_count == 0:
        return ConfidenceTier.HIGH
    if discrepancy_count <= 2:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW

"""Certification lifecycle: checkout metadata, post-payment creation, daily re-audit.

Storage is an external collaborator reached through ``CertificationStore``.
A certification's live scores only change through
``CertificationRecord.record_audit``, which also yields the history row.
"""
from __future__ import annotations

import json
import logging
import threading
import time
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Protocol

from .errors import DuplicateCertification, PersistenceError
from .models import (
    AnalysisResult,
    AuditHistoryEntry,
    AuditScores,
    CategoryScores,
    CertificationOrder,
    CertificationOutcome,
    CertificationRecord,
    Metrics,
    ReauditResult,
    ReauditSummary,
    RecentAnalysis,
    history_entry,
)
from .scoring import feed_color, overall_score, score_label
from .urls import clean_domain

logger = logging.getLogger(__name__)

AnalyzeFn = Callable[[str], AnalysisResult]


class CertificationStore(Protocol):
    def get_by_domain(self, domain: str) -> CertificationRecord | None: ...

    def list_active(self) -> list[CertificationRecord]: ...

    def create(self, record: CertificationRecord, first_entry: AuditHistoryEntry) -> None:
        """Raises DuplicateCertification when the domain is already stored."""
        ...

    def save_audit(self, record: CertificationRecord, entry: AuditHistoryEntry) -> None: ...

    def history(self, website_id: str, limit: int = 30) -> list[AuditHistoryEntry]: ...


class InMemoryCertificationStore:
    """Process-local store; domain is the unique key."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: dict[str, CertificationRecord] = {}
        self._history: dict[str, list[AuditHistoryEntry]] = {}

    def get_by_domain(self, domain: str) -> CertificationRecord | None:
        with self._lock:
            record = self._records.get(domain)
            return record.model_copy(deep=True) if record else None

    def list_active(self) -> list[CertificationRecord]:
        with self._lock:
            active = [r.model_copy(deep=True) for r in self._records.values() if r.is_active]
        active.sort(key=lambda r: r.certified_date, reverse=True)
        return active

    def create(self, record: CertificationRecord, first_entry: AuditHistoryEntry) -> None:
        with self._lock:
            if record.domain in self._records:
                raise DuplicateCertification(f"Domain already certified: {record.domain}")
            self._records[record.domain] = record.model_copy(deep=True)
            self._history[record.id] = [first_entry]

    def save_audit(self, record: CertificationRecord, entry: AuditHistoryEntry) -> None:
        with self._lock:
            if record.domain not in self._records:
                raise PersistenceError(f"Unknown certification: {record.domain}")
            self._records[record.domain] = record.model_copy(deep=True)
            self._history.setdefault(record.id, []).append(entry)

    def history(self, website_id: str, limit: int = 30) -> list[AuditHistoryEntry]:
        with self._lock:
            entries = list(self._history.get(website_id, []))
        entries.sort(key=lambda e: e.audited_at)
        return entries[:limit]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def get_active_certification(store: CertificationStore, domain: str) -> CertificationRecord | None:
    record = store.get_by_domain(clean_domain(domain))
    if record is None or not record.is_active:
        return None
    return record


def build_checkout_metadata(
    email: str,
    domain: str,
    url: str,
    scores: CategoryScores,
    metrics: Metrics | None = None,
) -> dict[str, str]:
    """String-valued metadata attached to the payment session.

    These scores are informational only: certification uses a fresh analysis
    run after payment completes.
    """
    return {
        "email": email,
        "domain": clean_domain(domain),
        "url": url,
        "current_score": str(
            overall_score(scores.performance, scores.seo, scores.accessibility, scores.best_practices)
        ),
        "performance_score": str(scores.performance),
        "seo_score": str(scores.seo),
        "accessibility_score": str(scores.accessibility),
        "best_practices_score": str(scores.best_practices),
        "metrics": json.dumps(metrics.model_dump() if metrics else {}),
    }


def new_certification(
    order: CertificationOrder,
    url: str,
    result: AnalysisResult,
    now: datetime,
) -> tuple[CertificationRecord, AuditHistoryEntry]:
    scores = AuditScores.from_result(result)
    record = CertificationRecord(
        id=str(uuid.uuid4()),
        user_email=order.email,
        domain=clean_domain(order.domain),
        url=url,
        current_score=scores.overall,
        performance_score=scores.performance,
        seo_score=scores.seo,
        accessibility_score=scores.accessibility,
        best_practices_score=scores.best_practices,
        website_quality_score=scores.website_quality,
        trust_security_score=scores.trust_security,
        website_quality=result.website_quality,
        trust_security=result.trust_security,
        metrics=result.metrics.model_dump(),
        certified_date=now,
        last_audit_date=now,
    )
    return record, history_entry(record.id, scores, now)


def certify_after_payment(
    order: CertificationOrder,
    store: CertificationStore,
    analyze_fn: AnalyzeFn,
    now: Callable[[], datetime] = _now,
) -> CertificationOutcome:
    domain = clean_domain(order.domain)
    url = order.url or f"https://{domain}"

    if store.get_by_domain(domain) is not None:
        logger.info("Domain already certified: %s", domain)
        return CertificationOutcome(status="already_certified", domain=domain)

    # Fresh post-payment analysis; the checkout-time scores are not reused.
    result = analyze_fn(url)
    record, entry = new_certification(order, url, result, now())
    try:
        store.create(record, entry)
    except DuplicateCertification:
        # lost a race with a concurrent webhook for the same domain
        logger.info("Domain already certified: %s", domain)
        return CertificationOutcome(status="already_certified", domain=domain)
    except PersistenceError:
        logger.error("Error creating certification for %s", domain)
        raise
    except Exception as e:
        logger.error("Error creating certification for %s: %s", domain, e)
        raise PersistenceError() from e

    logger.info("Certification created: %s (score %d)", domain, record.current_score)
    return CertificationOutcome(status="certified", domain=domain, certification=record)


def reaudit_site(
    record: CertificationRecord,
    store: CertificationStore,
    analyze_fn: AnalyzeFn,
    now: Callable[[], datetime] = _now,
) -> AuditHistoryEntry:
    result = analyze_fn(record.url)
    entry = record.record_audit(AuditScores.from_result(result), now())
    try:
        store.save_audit(record, entry)
    except PersistenceError:
        raise
    except Exception as e:
        raise PersistenceError() from e
    return entry


def reaudit_all(
    store: CertificationStore,
    analyze_fn: AnalyzeFn,
    pause_s: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
    now: Callable[[], datetime] = _now,
) -> ReauditSummary:
    """Re-audit every active certification, one site at a time.

    A failing site is recorded and skipped; it never stops the batch.
    """
    sites = store.list_active()
    logger.info("Starting audit for %d websites", len(sites))

    results: list[ReauditResult] = []
    for i, record in enumerate(sites):
        if i > 0 and pause_s > 0:
            sleep(pause_s)
        try:
            entry = reaudit_site(record, store, analyze_fn, now)
        except Exception as e:
            logger.exception("Error auditing %s", record.domain)
            message = getattr(e, "message", None) or str(e) or type(e).__name__
            results.append(ReauditResult(domain=record.domain, success=False, error=message))
            continue
        logger.info("Audited %s: %d", record.domain, entry.score)
        results.append(ReauditResult(domain=record.domain, success=True, score=entry.score))

    audited = sum(1 for r in results if r.success)
    return ReauditSummary(audited=audited, failed=len(results) - audited, results=results)


def relative_time(then: datetime, now: datetime) -> str:
    diff_mins = int((now - then).total_seconds() // 60)
    diff_hours = diff_mins // 60
    diff_days = diff_hours // 24
    if diff_mins < 1:
        return "just now"
    if diff_mins < 60:
        return f"{diff_mins}m ago"
    if diff_hours < 24:
        return f"{diff_hours}h ago"
    if diff_days < 7:
        return f"{diff_days}d ago"
    return f"{then.strftime('%b')} {then.day}"


def recent_certifications(
    store: CertificationStore,
    now: datetime | None = None,
    limit: int = 5,
) -> list[RecentAnalysis]:
    now = now or _now()
    return [
        RecentAnalysis(
            domain=r.domain,
            score=r.current_score,
            label=score_label(r.current_score),
            time=relative_time(r.certified_date, now),
            color=feed_color(r.current_score),
        )
        for r in store.list_active()[:limit]
    ]

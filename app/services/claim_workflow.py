"""
Claim and case workflow rules.

Claims move through one canonical set of stages (see ``ClaimStatus``): the
intake board stages shown on the triage dashboard and the handling pipeline
stages used once a claim is being worked. ``CLAIM_TRANSITIONS`` lists the
expected next stages for each stage. Whether an off-table move is rejected or
just logged is decided by the caller (``ENFORCE_CLAIM_TRANSITIONS``).

Cases follow a fixed, ordered checklist of steps and are moved one step
forwards or backwards at a time.
"""

import logging
from collections import Counter
from typing import Dict, FrozenSet, Iterable, List, NamedTuple, Optional

from app.db.models.case import CaseStatus
from app.db.models.claim import ClaimStatus

logger = logging.getLogger(__name__)

# Stages a claim may be created in; also the columns of the triage dashboard
INTAKE_STAGES: List[ClaimStatus] = [
    ClaimStatus.PENDING_TRIAGE,
    ClaimStatus.PENDING_FINANCIAL,
    ClaimStatus.PENDING_LIVE_CLAIMS,
    ClaimStatus.PENDING_OS_DOCS,
    ClaimStatus.PENDING_PAYMENT_PACK_REVIEW,
    ClaimStatus.PENDING_SENT_TO_TP,
    ClaimStatus.PENDING_SENT_TO_SOLS,
    ClaimStatus.PENDING_ISSUED,
]

HANDLING_STAGES: List[ClaimStatus] = [
    ClaimStatus.PENDING_TRIAGE,
    ClaimStatus.ACCEPTED,
    ClaimStatus.REJECTED,
    ClaimStatus.IN_PROGRESS_SERVICES,
    ClaimStatus.IN_PROGRESS_REPAIRS,
    ClaimStatus.PENDING_OFFBOARDING,
    ClaimStatus.PENDING_OFFBOARDING_NONCOOPERATIVE,
    ClaimStatus.PAYMENT_PACK_PREPARATION,
    ClaimStatus.AWAITING_FINAL_PAYMENT,
    ClaimStatus.CLOSED,
]

_S = ClaimStatus

CLAIM_TRANSITIONS: Dict[ClaimStatus, FrozenSet[ClaimStatus]] = {
    _S.PENDING_TRIAGE: frozenset({_S.ACCEPTED, _S.REJECTED, _S.PENDING_FINANCIAL}),
    _S.PENDING_FINANCIAL: frozenset({_S.PENDING_LIVE_CLAIMS, _S.REJECTED}),
    _S.PENDING_LIVE_CLAIMS: frozenset({_S.PENDING_OS_DOCS, _S.REJECTED}),
    _S.PENDING_OS_DOCS: frozenset({
        _S.PENDING_PAYMENT_PACK_REVIEW,
        _S.PENDING_OFFBOARDING,
        _S.PENDING_OFFBOARDING_NONCOOPERATIVE,
    }),
    _S.PENDING_PAYMENT_PACK_REVIEW: frozenset({_S.PENDING_SENT_TO_TP, _S.PAYMENT_PACK_PREPARATION}),
    _S.PENDING_SENT_TO_TP: frozenset({_S.PENDING_SENT_TO_SOLS, _S.AWAITING_FINAL_PAYMENT}),
    _S.PENDING_SENT_TO_SOLS: frozenset({_S.PENDING_ISSUED}),
    _S.PENDING_ISSUED: frozenset({_S.AWAITING_FINAL_PAYMENT, _S.CLOSED}),
    _S.ACCEPTED: frozenset({_S.IN_PROGRESS_SERVICES, _S.IN_PROGRESS_REPAIRS, _S.PENDING_FINANCIAL}),
    _S.REJECTED: frozenset({_S.PENDING_TRIAGE}),
    _S.IN_PROGRESS_SERVICES: frozenset({
        _S.IN_PROGRESS_REPAIRS,
        _S.PENDING_OFFBOARDING,
        _S.PENDING_OFFBOARDING_NONCOOPERATIVE,
    }),
    _S.IN_PROGRESS_REPAIRS: frozenset({
        _S.IN_PROGRESS_SERVICES,
        _S.PENDING_OFFBOARDING,
        _S.PENDING_OFFBOARDING_NONCOOPERATIVE,
    }),
    _S.PENDING_OFFBOARDING: frozenset({_S.PAYMENT_PACK_PREPARATION, _S.PENDING_OFFBOARDING_NONCOOPERATIVE}),
    _S.PENDING_OFFBOARDING_NONCOOPERATIVE: frozenset({_S.PAYMENT_PACK_PREPARATION, _S.PENDING_OFFBOARDING}),
    _S.PAYMENT_PACK_PREPARATION: frozenset({_S.AWAITING_FINAL_PAYMENT, _S.PENDING_PAYMENT_PACK_REVIEW}),
    _S.AWAITING_FINAL_PAYMENT: frozenset({_S.CLOSED}),
    _S.CLOSED: frozenset(),
}


class InvalidStatusTransition(Exception):
    """Raised when a status move is not allowed from the current status."""

    def __init__(self, current, requested, message: Optional[str] = None):
        self.current = current
        self.requested = requested
        super().__init__(message or f"Cannot move from {current.value} to {requested.value}")


def allowed_transitions(status: ClaimStatus) -> List[ClaimStatus]:
    """Next stages for ``status``, in declaration order."""
    targets = CLAIM_TRANSITIONS.get(status, frozenset())
    return [s for s in ClaimStatus if s in targets]


def is_allowed_transition(current: ClaimStatus, requested: ClaimStatus) -> bool:
    if current == requested:
        return True
    return requested in CLAIM_TRANSITIONS.get(current, frozenset())


def check_transition(current: ClaimStatus, requested: ClaimStatus, enforce: bool = False) -> bool:
    """
    Validate a claim status move.

    Returns whether the move is on the transition table. Off-table moves
    raise ``InvalidStatusTransition`` when ``enforce`` is set and are only
    logged otherwise.
    """
    if is_allowed_transition(current, requested):
        return True
    if enforce:
        raise InvalidStatusTransition(current, requested)
    logger.warning(f"Claim status moved off the workflow: {current.value} -> {requested.value}")
    return False


def summarize_statuses(statuses: Iterable[ClaimStatus]) -> dict:
    """
    Count claims per status for the dashboard.

    Every intake stage is always present (zero when empty); other stages
    appear only when at least one claim sits in them.
    """
    counts = Counter(ClaimStatus(s) for s in statuses)
    status_counts = {stage.value: 0 for stage in INTAKE_STAGES}
    for status in ClaimStatus:
        if counts[status] or status.value in status_counts:
            status_counts[status.value] = counts[status]
    return {"statusCounts": status_counts, "total": sum(counts.values())}


class CaseStep(NamedTuple):
    number: str
    label: str
    status: CaseStatus


CASE_STEPS: List[CaseStep] = [
    CaseStep("1", "Initial Assessment", CaseStatus.INITIAL_ASSESSMENT),
    CaseStep("2", "Accident Images", CaseStatus.ACCIDENT_IMAGES),
    CaseStep("3", "Client ID & Proof of Address", CaseStatus.CLIENT_ID_PROOF_OF_ADDRESS),
    CaseStep("3.1", "Client Vehicle Documents", CaseStatus.CLIENT_VEHICLE_DOCUMENTS),
    CaseStep("3.2", "Authorisation & Mitigation Statement", CaseStatus.AUTHORISATION_MITIGATION_STATEMENT),
    CaseStep("3.3", "Isagi Check", CaseStatus.ISAGI_CHECK),
    CaseStep("3.4", "3 Months Bank Statements Prior To accident date", CaseStatus.THREE_MONTHS_BANK_STATEMENTS),
    CaseStep("4", "AskMID Search", CaseStatus.ASKMID_SEARCH),
    CaseStep("5", "DVLA Licence Check", CaseStatus.DVLA_LICENCE_CHECK),
    CaseStep("6", "Hire Vehicle Documents", CaseStatus.HIRE_VEHICLE_DOCUMENTS),
    CaseStep("7", "HSR Agreements", CaseStatus.HSR_AGREEMENTS),
    CaseStep("8", "Permission Letter", CaseStatus.PERMISSION_LETTER),
    CaseStep("9", "Stripe Details", CaseStatus.STRIPE_DETAILS),
    CaseStep("10", "Damage checklist", CaseStatus.DAMAGE_CHECKLIST),
    CaseStep("11", "Client Questionnaires", CaseStatus.CLIENT_QUESTIONNAIRES),
    CaseStep("12", "Offboarding", CaseStatus.OFFBOARDING),
    CaseStep("13", "BHR Report", CaseStatus.BHR_REPORT),
    CaseStep("14", "Canford Law Setup", CaseStatus.CANFORD_LAW_SETUP),
    CaseStep("15", "Non Co-Operative Client", CaseStatus.NON_CO_OPERATIVE_CLIENT),
]

_CASE_ORDER = [step.status for step in CASE_STEPS]


def case_step(status: CaseStatus) -> CaseStep:
    return CASE_STEPS[_CASE_ORDER.index(status)]


def case_status_label(status: CaseStatus) -> str:
    step = case_step(status)
    return f"{step.number}. {step.label}"


def next_case_status(status: CaseStatus) -> Optional[CaseStatus]:
    index = _CASE_ORDER.index(status)
    if index == len(_CASE_ORDER) - 1:
        return None
    return _CASE_ORDER[index + 1]


def previous_case_status(status: CaseStatus) -> Optional[CaseStatus]:
    index = _CASE_ORDER.index(status)
    if index == 0:
        return None
    return _CASE_ORDER[index - 1]

"""
models.py
=========
Shared data models for The Case of the Missing Revenue.

Contains:
  - Enumerations for every closed vocabulary the rules engine uses.
  - Frozen scenario entities (Hypothesis, Evidence, GameAction, rule tables)
    and the Scenario container with identifier-keyed lookups.
  - Mutable play-state dataclasses (Step, Attempt, GameSession).
  - Pydantic result schemas returned to the presentation layer.

Keeping these in one module guarantees a single source of truth for data
shapes used across validity.py, scoring.py, feedback.py, timeline.py and
game_engine.py.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Set, Tuple

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Vocabularies
# ---------------------------------------------------------------------------

class EvidenceType(str, Enum):
    FACTUAL    = "factual"
    MISLEADING = "misleading"
    DECISIVE   = "decisive"
    SUPPORTING = "supporting"
    TRAP       = "trap"


class ActionKind(str, Enum):
    """Investigative actions consume the step budget; decisions never do."""
    INVESTIGATE = "investigate"
    DECISION    = "decision"


class StepKind(str, Enum):
    INVESTIGATE = "investigate"
    REJECT      = "reject_hypothesis"
    DECLARE     = "declare_solution"
    END         = "end_investigation"


class HypothesisStatus(str, Enum):
    ACTIVE   = "active"
    REJECTED = "rejected"


class AttemptStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    SUCCESS     = "success"
    FAILED      = "failed"
    NO_DECISION = "no_decision"


class Screen(str, Enum):
    WELCOME  = "welcome"
    INTRO    = "intro"
    GAMEPLAY = "gameplay"
    FAILURE  = "failure"
    GAMEOVER = "gameover"
    SUCCESS  = "success"


class CaseOutcome(str, Enum):
    CORRECT     = "correct"
    INCORRECT   = "incorrect"
    NO_DECISION = "no_decision"


class EvidenceStrength(str, Enum):
    STRONG  = "strong"
    WEAK    = "weak"
    INVALID = "invalid"
    NOISE   = "noise"
    NONE    = "none"


class EliminationQuality(str, Enum):
    BOTH_CORRECT = "both_correct"
    ONE_CORRECT  = "one_correct"
    NONE         = "none"
    HAS_WRONG    = "has_wrong"


class NoiseQuality(str, Enum):
    CLEAN        = "clean"
    OVERWEIGHTED = "overweighted"
    USED_NOISE   = "used_noise"


class ThinkingLevel(str, Enum):
    SOUND        = "sound"
    WEAK         = "weak"
    UNACCEPTABLE = "unacceptable"


# ---------------------------------------------------------------------------
# Scenario entities (read-only)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Hypothesis:
    """
    A candidate explanation for the case's central problem.

    The scenario holds every hypothesis in ACTIVE status; the engine keeps
    its own working copies and swaps in REJECTED copies as the player
    eliminates them.
    """

    id:     str
    text:   str
    status: HypothesisStatus = HypothesisStatus.ACTIVE


@dataclass(frozen=True)
class Evidence:
    """
    A discrete fact discoverable through an investigative action.

    Attributes:
        id:     Short identifier (e.g. "E3") used as a key everywhere.
        text:   Display text shown when the evidence is found.
        type:   Classification tag; drives the noise card and authoring checks.
        source: ID of the action that yields this evidence.
    """

    id:     str
    text:   str
    type:   EvidenceType
    source: str


@dataclass(frozen=True)
class Character:
    id:     str
    name:   str
    role:   str
    avatar: str


@dataclass(frozen=True)
class GameAction:
    """
    Something the player can do on the gameplay screen.

    Attributes:
        id:           Stable identifier.
        label:        Button / menu label.
        icon:         Display glyph.
        kind:         INVESTIGATE actions cost a step; DECISION actions are
                      dispatched through reject/declare instead.
        yields:       Evidence IDs revealed by this action (zero or more).
        character_id: Who the player talks to, if anyone.
        dialogue:     Lines spoken (or read) when the action is performed.
    """

    id:           str
    label:        str
    icon:         str
    kind:         ActionKind = ActionKind.INVESTIGATE
    yields:       Tuple[str, ...] = ()
    character_id: Optional[str] = None
    dialogue:     Tuple[str, ...] = ()


@dataclass(frozen=True)
class RejectionRule:
    """
    Which evidence may legally reject a hypothesis.

    Attributes:
        valid:   Evidence that logically disproves the hypothesis.
        trap:    Evidence thematically linked to the hypothesis that does
                 NOT disprove it. A single trap item poisons a submission.
        bonuses: (evidence combination, points) tiers paid at scoring time
                 for a valid rejection; the richest combination fully
                 contained in the citation wins.
    """

    valid:   FrozenSet[str] = frozenset()
    trap:    FrozenSet[str] = frozenset()
    bonuses: Tuple[Tuple[FrozenSet[str], int], ...] = ()

    @property
    def ideal(self) -> FrozenSet[str]:
        """Evidence in the highest-paying bonus tier."""
        if not self.bonuses:
            return frozenset()
        top = max(points for _, points in self.bonuses)
        return frozenset().union(*(combo for combo, points in self.bonuses if points == top))


@dataclass(frozen=True)
class DeclarationRule:
    """
    How cited evidence is classified when a hypothesis is declared.

    ``bonuses`` pairs a required evidence combination with the points it is
    worth; the richest combination fully contained in the citation wins.
    """

    strong:  FrozenSet[str] = frozenset()
    weak:    FrozenSet[str] = frozenset()
    noise:   FrozenSet[str] = frozenset()
    invalid: FrozenSet[str] = frozenset()
    bonuses: Tuple[Tuple[FrozenSet[str], int], ...] = ()


@dataclass(frozen=True)
class Scenario:
    """
    Immutable case definition consumed by the rules engine.

    Lookup tables keyed by identifier are built once in ``__post_init__``;
    the engine never scans the tuples. Integrity problems in the data are
    authoring defects and raise ValueError here, at load time.
    """

    id:                 str
    title:              str
    domain:             str
    problem:            str
    correct_hypothesis: str
    hypotheses:         Tuple[Hypothesis, ...]
    evidence:           Tuple[Evidence, ...]
    actions:            Tuple[GameAction, ...]
    characters:         Tuple[Character, ...] = ()
    rejection_rules:    Mapping[str, RejectionRule] = field(default_factory=dict)
    declaration_rules:  Mapping[str, DeclarationRule] = field(default_factory=dict)
    trap_messages:      Mapping[Tuple[str, str], str] = field(default_factory=dict)
    wrong_declare_message: str = ""

    # Derived lookups, filled in by __post_init__.
    hypothesis_index:   Mapping[str, Hypothesis] = field(init=False, repr=False, compare=False)
    evidence_index:     Mapping[str, Evidence] = field(init=False, repr=False, compare=False)
    action_index:       Mapping[str, GameAction] = field(init=False, repr=False, compare=False)
    character_index:    Mapping[str, Character] = field(init=False, repr=False, compare=False)
    evidence_order:     Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        def index(items, kind: str) -> Mapping:
            table = {}
            for item in items:
                if item.id in table:
                    raise ValueError(f"Duplicate {kind} id {item.id!r} in scenario {self.id!r}")
                table[item.id] = item
            return MappingProxyType(table)

        object.__setattr__(self, "hypothesis_index", index(self.hypotheses, "hypothesis"))
        object.__setattr__(self, "evidence_index", index(self.evidence, "evidence"))
        object.__setattr__(self, "action_index", index(self.actions, "action"))
        object.__setattr__(self, "character_index", index(self.characters, "character"))
        object.__setattr__(
            self, "evidence_order", MappingProxyType({e.id: i for i, e in enumerate(self.evidence)})
        )
        object.__setattr__(self, "rejection_rules", MappingProxyType(dict(self.rejection_rules)))
        object.__setattr__(self, "declaration_rules", MappingProxyType(dict(self.declaration_rules)))
        object.__setattr__(self, "trap_messages", MappingProxyType(dict(self.trap_messages)))
        self._check_integrity()

    def _check_integrity(self) -> None:
        if self.correct_hypothesis not in self.hypothesis_index:
            raise ValueError(f"Ground truth {self.correct_hypothesis!r} is not a known hypothesis")

        for action in self.actions:
            self._require_evidence(action.yields, f"action {action.id!r}")
            if action.character_id and action.character_id not in self.character_index:
                raise ValueError(f"Action {action.id!r} references unknown character {action.character_id!r}")
        for ev in self.evidence:
            if ev.source not in self.action_index:
                raise ValueError(f"Evidence {ev.id!r} has unknown source action {ev.source!r}")

        for hid, rule in self.rejection_rules.items():
            self._require_hypothesis(hid, "rejection rule")
            if hid == self.correct_hypothesis and rule.valid:
                raise ValueError("The ground-truth hypothesis cannot have valid rejection evidence")
            for combo, _ in rule.bonuses:
                if not combo <= rule.valid:
                    raise ValueError(f"Rejection bonus evidence for {hid!r} must be valid evidence")
            self._require_evidence(rule.valid | rule.trap, f"rejection rule {hid!r}")

        for hid, rule in self.declaration_rules.items():
            self._require_hypothesis(hid, "declaration rule")
            self._require_evidence(
                rule.strong | rule.weak | rule.noise | rule.invalid, f"declaration rule {hid!r}"
            )
            for combo, _ in rule.bonuses:
                self._require_evidence(combo, f"declaration bonus for {hid!r}")

        for hid, eid in self.trap_messages:
            self._require_hypothesis(hid, "trap message")
            self._require_evidence((eid,), f"trap message {hid}_{eid}")

    def _require_hypothesis(self, hid: str, where: str) -> None:
        if hid not in self.hypothesis_index:
            raise ValueError(f"Unknown hypothesis {hid!r} in {where}")

    def _require_evidence(self, ids, where: str) -> None:
        unknown = [eid for eid in ids if eid not in self.evidence_index]
        if unknown:
            raise ValueError(f"Unknown evidence {sorted(unknown)} in {where}")

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def is_ground_truth(self, hypothesis_id: str) -> bool:
        return hypothesis_id == self.correct_hypothesis

    def competing_hypotheses(self) -> List[str]:
        """IDs of every hypothesis except the ground truth, in scenario order."""
        return [h.id for h in self.hypotheses if h.id != self.correct_hypothesis]

    def ordered_evidence(self, evidence_ids) -> List[str]:
        """Deduplicate known evidence IDs and sort them into scenario order."""
        known = {eid for eid in evidence_ids if eid in self.evidence_index}
        return sorted(known, key=self.evidence_order.__getitem__)


# ---------------------------------------------------------------------------
# Play state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Step:
    """
    One recorded event within an attempt. Steps are only ever appended.

    Attributes:
        step_number:   1-based position in the attempt's log.
        kind:          What sort of event this was.
        action_id:     Investigative action ID, or the decision name.
        hypothesis_id: Target hypothesis for reject / declare steps.
        evidence_ids:  Evidence cited for reject / declare steps.
        discovered:    Evidence newly found by an investigative step.
        valid:         Outcome flag for reject / declare steps.
        is_trap:       True when a rejection was poisoned by trap evidence.
        result:        Short machine-readable outcome ("correct", ...).
        timestamp:     Wall-clock seconds when the step was recorded.
    """

    step_number:   int
    kind:          StepKind
    action_id:     str
    hypothesis_id: Optional[str] = None
    evidence_ids:  Tuple[str, ...] = ()
    discovered:    Tuple[str, ...] = ()
    valid:         Optional[bool] = None
    is_trap:       bool = False
    result:        Optional[str] = None
    timestamp:     float = field(default_factory=time.time)


@dataclass(frozen=True)
class FinalDecision:
    hypothesis_id: str
    evidence_ids:  Tuple[str, ...]
    outcome:       CaseOutcome
    justification: EvidenceStrength

    @property
    def correct(self) -> bool:
        return self.outcome == CaseOutcome.CORRECT


@dataclass
class Attempt:
    """
    One bounded playthrough.

    Mutated by the engine while ``status`` is IN_PROGRESS and left untouched
    afterwards. ``discovered_evidence`` and ``rejected_hypotheses`` keep
    discovery order so timelines and reports read naturally.
    """

    attempt_number:      int
    steps:               List[Step] = field(default_factory=list)
    discovered_evidence: List[str]  = field(default_factory=list)
    rejected_hypotheses: List[str]  = field(default_factory=list)
    reasoning_mistakes:  int = 0
    final_decision:      Optional[FinalDecision] = None
    status:              AttemptStatus = AttemptStatus.IN_PROGRESS

    # ------------------------------------------------------------------
    # Mutation helpers
    # ------------------------------------------------------------------

    def append_step(self, kind: StepKind, action_id: str, **details) -> Step:
        """Record a new step at the end of the log and return it."""
        step = Step(step_number=len(self.steps) + 1, kind=kind, action_id=action_id, **details)
        self.steps.append(step)
        return step

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    @property
    def in_progress(self) -> bool:
        return self.status == AttemptStatus.IN_PROGRESS

    @property
    def steps_used(self) -> int:
        """Investigative steps consumed from the budget."""
        return sum(1 for s in self.steps if s.kind == StepKind.INVESTIGATE)

    def rejection_steps(self, hypothesis_id: Optional[str] = None) -> List[Step]:
        return [
            s for s in self.steps
            if s.kind == StepKind.REJECT
            and (hypothesis_id is None or s.hypothesis_id == hypothesis_id)
        ]

    def declaration_step(self) -> Optional[Step]:
        for s in reversed(self.steps):
            if s.kind == StepKind.DECLARE:
                return s
        return None


@dataclass
class GameSession:
    """
    Umbrella over every attempt in one continuous play session.

    Attributes:
        session_id:          Random UUID string.
        start_time:          Wall-clock seconds when the session began.
        current_attempt:     1-based ordinal, always within [1, max_attempts].
        max_attempts:        Copied from GameConfig at session start.
        max_steps:           Copied from GameConfig at session start.
        attempts:            Every attempt started so far, in order.
        discovered_evidence: Union of evidence found across all attempts.
    """

    session_id:          str = field(default_factory=lambda: str(uuid.uuid4()))
    start_time:          float = field(default_factory=time.time)
    current_attempt:     int = 1
    max_attempts:        int = 3
    max_steps:           int = 6
    attempts:            List[Attempt] = field(default_factory=list)
    discovered_evidence: Set[str] = field(default_factory=set)

    @property
    def active_attempt(self) -> Optional[Attempt]:
        """The attempt for the current ordinal, if it has been started."""
        idx = self.current_attempt - 1
        if 0 <= idx < len(self.attempts):
            return self.attempts[idx]
        return None

    @property
    def attempts_exhausted(self) -> bool:
        return self.current_attempt >= self.max_attempts


# ---------------------------------------------------------------------------
# Result schemas (returned to the presentation layer)
# ---------------------------------------------------------------------------

class RejectionCheck(BaseModel):
    """Verdict of the validity model on a rejection submission."""

    valid:   bool
    is_trap: bool = False
    message: str = ""


class DeclarationEvaluation(BaseModel):
    """Verdict of the validity model on a final declaration."""

    outcome:       CaseOutcome
    justification: EvidenceStrength


class ActionResult(BaseModel):
    success:                 bool
    discovered_evidence_ids: List[str] = Field(default_factory=list)
    message:                 str = ""
    character_id:            Optional[str] = None
    dialogue:                List[str] = Field(default_factory=list)


class RejectionResult(BaseModel):
    success: bool
    message: str
    is_trap: bool = False


class DeclarationResult(BaseModel):
    success:       bool
    outcome:       Optional[CaseOutcome] = None
    justification: Optional[EvidenceStrength] = None
    message:       str = ""


class TimelineItem(BaseModel):
    step:        int
    description: str
    outcome:     str
    is_positive: bool


class EvaluationCard(BaseModel):
    level: str
    text:  str


class Evaluation(BaseModel):
    """Diagnostic breakdown of a finished attempt."""

    outcome:        CaseOutcome
    evidence_level: EvidenceStrength
    elimination:    EliminationQuality
    noise:          NoiseQuality
    thinking:       ThinkingLevel
    cards:          Dict[str, EvaluationCard]


class GameResult(BaseModel):
    score:          int
    max_score:      int
    rank:           str
    rank_icon:      str
    feedback_text:  str
    timeline:       List[TimelineItem]
    attempts_used:  int
    outcome:        CaseOutcome
    outcome_title:  str
    thinking:       ThinkingLevel
    thinking_title: str
    cards:          Dict[str, EvaluationCard]

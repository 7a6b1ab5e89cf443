"""
Criterion catalogue and behavioral signals.

Signals turn game metrics into a single value graded by one band table
(planning organization combines two tables). Criteria list the signals that
inform them; a criterion with no signal has no instrumented proxy and is
always reported as `none`.

Adding or adjusting a criterion is a change to `CRITERIA` only.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple

from core.data_models import GameMetricsBundle
from core.enums import Domain, EvidenceLevel
from .levels import ThresholdBands, max_evidence

NOT_MEASURED_NOTE = "Not measured by the current games."


def grade_planning_organization(
    bundle: GameMetricsBundle,
    bands: Mapping[str, ThresholdBands]
) -> EvidenceLevel:
    """
    Grade Tower-of-London planning.

    A plan without excess moves is reflective rather than disorganized, so
    latency alone never produces evidence. With excess moves, the higher of
    the move-count and latency grades is used.
    """
    tol = bundle.tower_of_london
    if tol is None or tol.excess_moves <= 0:
        return EvidenceLevel.NONE
    return max_evidence([
        bands['excess_moves'].grade(tol.excess_moves),
        bands['plan_latency'].grade(tol.plan_latency),
    ])


@dataclass(frozen=True)
class EvidenceSignal:
    """A graded behavioral signal derived from the game metrics."""
    name: str
    description: str
    extract: Optional[Callable[[GameMetricsBundle], float]] = None
    bands_key: Optional[str] = None
    grader: Optional[Callable[[GameMetricsBundle, Mapping[str, ThresholdBands]], EvidenceLevel]] = None

    def evaluate(
        self,
        bundle: GameMetricsBundle,
        bands: Mapping[str, ThresholdBands]
    ) -> EvidenceLevel:
        if self.grader is not None:
            return self.grader(bundle, bands)
        return bands[self.bands_key].grade(self.extract(bundle))


SIGNALS: Mapping[str, EvidenceSignal] = MappingProxyType({
    'commission': EvidenceSignal(
        name='commission',
        description="Mean commission rate (Go/No-Go, Stop-Signal)",
        extract=lambda b: (b.go_no_go.commission_rate + b.stop_signal.commission_rate) / 2,
        bands_key='commission_rate',
    ),
    'omission': EvidenceSignal(
        name='omission',
        description="Mean omission rate (Go/No-Go, Stop-Signal)",
        extract=lambda b: (b.go_no_go.omission_rate + b.stop_signal.omission_rate) / 2,
        bands_key='omission_rate',
    ),
    'rt_variability': EvidenceSignal(
        name='rt_variability',
        description="Highest RT coefficient of variation (Go/No-Go, Stop-Signal)",
        extract=lambda b: max(b.go_no_go.cv_rt, b.stop_signal.cv_rt),
        bands_key='rt_cv',
    ),
    'vigilance': EvidenceSignal(
        name='vigilance',
        description="Go/No-Go vigilance decrement",
        extract=lambda b: b.go_no_go.vigilance_decrement,
        bands_key='vigilance_decrement',
    ),
    'stop_failure': EvidenceSignal(
        name='stop_failure',
        description="Stop-Signal stop-failure rate",
        extract=lambda b: b.stop_signal.stop_failure_rate,
        bands_key='stop_failure_rate',
    ),
    'fast_guess': EvidenceSignal(
        name='fast_guess',
        description="Go/No-Go fast-guess rate",
        extract=lambda b: b.go_no_go.fast_guess_rate,
        bands_key='fast_guess_rate',
    ),
    'planning_organization': EvidenceSignal(
        name='planning_organization',
        description="Tower-of-London excess moves / planning latency",
        grader=grade_planning_organization,
    ),
})


@dataclass(frozen=True)
class CriterionTemplate:
    """Fixed part of a criterion; evidence is computed per scoring call."""
    id: str
    domain: Domain
    label: str
    measured_by: Tuple[str, ...] = ()
    signals: Tuple[str, ...] = ()
    note: Optional[str] = None


_IN = Domain.INATTENTION
_HI = Domain.HYPERACTIVITY_IMPULSIVITY

CRITERIA: Tuple[CriterionTemplate, ...] = (
    CriterionTemplate(
        'A1-1', _IN, "Makes careless mistakes / fails to attend to details",
        measured_by=("Commissions (Go/No-Go)", "Commissions (Stop-Signal)"),
        signals=('commission',),
        note="Commission errors suggest lapses in response control and attention to detail.",
    ),
    CriterionTemplate(
        'A1-2', _IN, "Difficulty sustaining attention",
        measured_by=("RT coefficient of variation", "Vigilance decrement"),
        signals=('rt_variability', 'vigilance'),
    ),
    CriterionTemplate(
        'A1-3', _IN, "Does not seem to listen when spoken to directly",
        measured_by=("Omissions (Go/No-Go, Stop-Signal)",),
        signals=('omission',),
        note="High omission rates may reflect attentional disengagement.",
    ),
    CriterionTemplate(
        'A1-4', _IN, "Does not follow through on instructions / fails to finish tasks",
        measured_by=("Vigilance decrement", "Late omissions"),
        signals=('vigilance',),
    ),
    CriterionTemplate(
        'A1-5', _IN, "Difficulty organizing tasks and activities",
        measured_by=("Tower of London: excess moves / planning latency",),
        signals=('planning_organization',),
    ),
    CriterionTemplate(
        'A1-6', _IN, "Avoids tasks that require sustained mental effort",
        measured_by=("Vigilance decrement",),
        signals=('vigilance',),
    ),
    CriterionTemplate('A1-7', _IN, "Loses things necessary for tasks", note=NOT_MEASURED_NOTE),
    CriterionTemplate(
        'A1-8', _IN, "Easily distracted by extraneous stimuli",
        measured_by=("RT coefficient of variation", "p95 RT"),
        signals=('rt_variability',),
    ),
    CriterionTemplate('A1-9', _IN, "Forgetful in daily activities", note=NOT_MEASURED_NOTE),
    CriterionTemplate('A2-1', _HI, "Fidgets with hands or feet", note=NOT_MEASURED_NOTE),
    CriterionTemplate('A2-2', _HI, "Leaves seat when remaining seated is expected", note=NOT_MEASURED_NOTE),
    CriterionTemplate('A2-3', _HI, "Runs about or climbs inappropriately", note=NOT_MEASURED_NOTE),
    CriterionTemplate('A2-4', _HI, "Unable to play quietly", note=NOT_MEASURED_NOTE),
    CriterionTemplate(
        'A2-5', _HI, "\"On the go\", acting as if driven by a motor",
        measured_by=("Elevated RT coefficient of variation (hint)", "Fast guesses"),
        signals=('rt_variability', 'fast_guess'),
    ),
    CriterionTemplate('A2-6', _HI, "Talks excessively", note=NOT_MEASURED_NOTE),
    CriterionTemplate(
        'A2-7', _HI, "Blurts out answers before questions are completed",
        measured_by=("Commissions (Go/No-Go)", "Stop failures (Stop-Signal)"),
        signals=('commission', 'stop_failure'),
    ),
    CriterionTemplate(
        'A2-8', _HI, "Difficulty waiting for their turn",
        measured_by=("Stop failures (Stop-Signal)",),
        signals=('stop_failure',),
    ),
    CriterionTemplate('A2-9', _HI, "Interrupts or intrudes on others", note=NOT_MEASURED_NOTE),
)

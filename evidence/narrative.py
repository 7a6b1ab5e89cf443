"""
Plain-language summary of a subject's game results.

Produces a short, deterministic, non-diagnostic narrative for reports:
sustained attention, response consistency, inhibitory control and planning,
followed by a preliminary conclusion. The cutoffs here are reporting
heuristics and are independent of the evidence band tables.
"""

import logging
from typing import List, Optional

from core.data_models import GameMetricsBundle

logger = logging.getLogger(__name__)

OMISSION_FLAG = 0.10
COMMISSION_FLAG = 0.15
RT_CV_FLAG = 0.30
STOP_FAILURE_FLAG = 0.40
SSRT_FLAG_S = 0.350
IMPULSIVE_PLAN_LATENCY_S = 2.0
LOW_PLANNING_SCORE = 0.6
FRENETIC_MOVEMENT_FLAG = 0.2


def _pct(value: float) -> str:
    return f"{value * 100:.0f}%"


def generate_clinical_summary(
    bundle: GameMetricsBundle,
    subject_name: Optional[str] = None
) -> str:
    """
    Generate a human-readable summary of the game results.

    Args:
        bundle: Per-game metrics
        subject_name: Name used in the introduction (default: "the student")

    Returns:
        Multi-line summary text
    """
    gng = bundle.go_no_go
    sst = bundle.stop_signal
    lines: List[str] = []

    lines.append(
        f"The cognitive profile of {subject_name or 'the student'} shows the following "
        f"findings from the attention, inhibition and planning tasks:"
    )
    lines.append("")

    # Sustained attention (Go/No-Go)
    inattention = gng.omission_rate > OMISSION_FLAG
    gng_impulsivity = gng.commission_rate > COMMISSION_FLAG
    variability = gng.cv_rt > RT_CV_FLAG

    if inattention:
        lines.append(
            f"• SUSTAINED ATTENTION: Indicators of inattention are present. An omission rate "
            f"of {_pct(gng.omission_rate)} suggests difficulty keeping focus on monotonous tasks."
        )
    else:
        lines.append(
            "• SUSTAINED ATTENTION: Performance within the expected range. Good detection of "
            "target stimuli."
        )

    if variability:
        lines.append(
            f"• CONSISTENCY: Response-time variability is high (CV={gng.cv_rt:.2f}), which is "
            f"commonly associated with fluctuating attention."
        )

    # Inhibitory control (Stop-Signal, Go/No-Go)
    stop_failure = sst.stop_failure_rate > STOP_FAILURE_FLAG
    slow_ssrt = sst.ssrt > SSRT_FLAG_S

    if stop_failure or gng_impulsivity:
        lines.append("• INHIBITORY CONTROL: Difficulties inhibiting impulses were detected.")
        if gng_impulsivity:
            lines.append(
                f"  - In fast-response tasks, tends to respond prematurely "
                f"(commissions: {_pct(gng.commission_rate)})."
            )
        if stop_failure:
            lines.append(
                f"  - Has difficulty stopping an action already initiated "
                f"(stop failures: {_pct(sst.stop_failure_rate)})."
            )
        if slow_ssrt:
            lines.append(
                f"  - A stop-signal reaction time of {sst.ssrt * 1000:.0f}ms suggests a slower "
                f"than average inhibition process."
            )
    else:
        lines.append(
            "• INHIBITORY CONTROL: Adequate stopping and inhibition. Controls impulses effectively."
        )

    # Planning (Tower of London)
    tol = bundle.tower_of_london
    if tol is not None:
        if tol.plan_latency < IMPULSIVE_PLAN_LATENCY_S:
            lines.append(
                f"• PLANNING AND EXECUTIVE FUNCTION: Impulsive solving style. Starts moving "
                f"quickly ({tol.plan_latency:.1f}s) without an adequate reflection period."
            )

        # Efficiency is only discussed when the game reported a planning score
        if tol.planning_score is not None:
            if tol.planning_score < LOW_PLANNING_SCORE:
                lines.append(
                    f"  - Problem-solving efficiency is reduced (score: {_pct(tol.planning_score)}), "
                    f"requiring more moves than necessary."
                )
            else:
                lines.append(
                    "• PLANNING: Good executive performance. Able to sequence logical steps and "
                    "reach goals efficiently."
                )

        if tol.frenetic_movement_rate > FRENETIC_MOVEMENT_FLAG:
            lines.append(
                f"• MOTOR ACTIVITY: Elevated non-functional cursor movement "
                f"({_pct(tol.frenetic_movement_rate)}), which may correlate with motor restlessness."
            )

    lines.append("")
    if inattention or gng_impulsivity or stop_failure or variability:
        lines.append(
            "PRELIMINARY CONCLUSION: Results suggest a profile compatible with executive-function "
            "difficulties. A clinical evaluation is recommended to rule out ADHD, especially in "
            "the areas of attention and inhibition."
        )
    else:
        lines.append(
            "PRELIMINARY CONCLUSION: Overall performance is balanced, with no significant "
            "indicators of attention deficit or impulsivity in this assessment."
        )

    logger.debug(f"Generated clinical summary ({len(lines)} lines)")
    return "\n".join(lines)

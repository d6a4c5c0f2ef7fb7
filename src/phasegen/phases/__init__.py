"""phases: component sampling, assembly, uniqueness and rerolls."""

from phasegen.phases.assemble import (
    build_phase,
    generate_single_phase,
    trace_single_phase,
)
from phasegen.phases.component import sample_phase_component
from phasegen.phases.duplicates import is_duplicate, phases_equal, vary_phase
from phasegen.phases.phase_set import (
    apply_reroll,
    build_phases,
    generate_phase_set,
    generate_phase_set_from_seed,
)
from phasegen.phases.reroll import phase_from_token, reroll_phase

__all__ = [
    "apply_reroll",
    "build_phase",
    "build_phases",
    "generate_phase_set",
    "generate_phase_set_from_seed",
    "generate_single_phase",
    "is_duplicate",
    "phase_from_token",
    "phases_equal",
    "reroll_phase",
    "sample_phase_component",
    "trace_single_phase",
    "vary_phase",
]

"""Hosting/visiting quota model.

Decides, for every team, how many regular residency blocks it hosts and how
many it visits so that its projected game tally lands as close as possible to
the games-per-team target. The season orchestrator then realises the quotas
block by block (see :mod:`residency_scheduler.season`).

Model
-----
Sets and parameters:
    T              teams
    base[t]        games already scheduled for t (e.g. by the apex residency)
    G              games-per-team target
    gh, gv         games a host / each visitor plays in one regular block
    V              visitors per regular block
    O[t]           candidate (h, v) pairs for t: every pair whose projected
                   tally base[t] + gh*h + gv*v is within the deviation cap of
                   G, plus (0, 0)
    dev[t,h,v]     |base[t] + gh*h + gv*v - G|, a constant per option

Decision variables:
    choose[t,h,v] ∈ {0,1}    team t plays h host blocks and v visits
    hosting[t]  ∈ Z+         sum_O h * choose[t,h,v]
    visiting[t] ∈ Z+         sum_O v * choose[t,h,v]
    deviation[t] ≥ 0         sum_O dev[t,h,v] * choose[t,h,v]
    max_deviation ≥ 0

Objective (minimise):
    |T| * max_deviation + sum_t deviation[t]

Constraints:
    sum_O choose[t,h,v] = 1
    max_deviation ≥ deviation[t]
    sum_t visiting[t] = V * sum_t hosting[t]
    visiting[t] ≤ sum_{u != t} hosting[u]

Choosing whole options keeps the LP relaxation tight: its bound on
max_deviation is already the best deviation each team can reach on its own,
so CBC stops as soon as it finds a balanced integer choice.

A second model (:func:`assign_block_visitors`) then gives every hosted block
exactly V visitors so that each team meets its visiting quota.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import pulp

from residency_scheduler.errors import QuotaPlanningError

logger = logging.getLogger(__name__)


# ============================================================================
# Data structures
# ============================================================================


@dataclass(frozen=True, slots=True)
class QuotaInputData:
    """Everything the quota model needs."""

    team_ids: Sequence[int]
    base_tally: Mapping[int, int]
    games_per_team: int
    host_games: int
    visitor_games: int
    visitors_per_block: int = 2
    # Widest |projected - target| an option may have; defaults to host_games + visitor_games.
    deviation_cap: int | None = None

    def __post_init__(self) -> None:
        if len(self.team_ids) < self.visitors_per_block + 1:
            raise ValueError("QuotaInputData needs at least visitors_per_block + 1 teams")
        if len(set(self.team_ids)) != len(self.team_ids):
            raise ValueError("QuotaInputData.team_ids must be unique")
        if self.games_per_team < 0:
            raise ValueError("QuotaInputData.games_per_team must be >= 0")
        if self.host_games < 1 or self.visitor_games < 1:
            raise ValueError("QuotaInputData.host_games and visitor_games must be >= 1")
        if self.visitors_per_block < 2:
            raise ValueError("QuotaInputData.visitors_per_block must be >= 2")
        if self.deviation_cap is not None and self.deviation_cap < 0:
            raise ValueError("QuotaInputData.deviation_cap must be >= 0")

    def base(self, team_id: int) -> int:
        return int(self.base_tally.get(team_id, 0))

    @property
    def quota_upper_bound(self) -> int:
        """No team ever needs more than this many blocks of either kind."""

        return self.games_per_team // min(self.host_games, self.visitor_games) + 1

    @property
    def option_deviation_cap(self) -> int:
        if self.deviation_cap is not None:
            return self.deviation_cap
        return self.host_games + self.visitor_games

    def projected(self, team_id: int, hosting: int, visiting: int) -> int:
        return self.base(team_id) + self.host_games * hosting + self.visitor_games * visiting

    def deviation_of(self, team_id: int, hosting: int, visiting: int) -> int:
        return abs(self.projected(team_id, hosting, visiting) - self.games_per_team)

    def options(self, team_id: int) -> List[Tuple[int, int]]:
        """Candidate (hosting, visiting) pairs for ``team_id``; always includes (0, 0)."""

        ub = self.quota_upper_bound
        cap = self.option_deviation_cap
        return [
            (h, v)
            for h in range(ub + 1)
            for v in range(ub + 1)
            if (h, v) == (0, 0) or self.deviation_of(team_id, h, v) <= cap
        ]


@dataclass(slots=True)
class QuotaDecisionVariables:
    """Container for the quota model's PuLP variables."""

    choose: Dict[int, Dict[Tuple[int, int], pulp.LpVariable]] = field(default_factory=dict)
    hosting: Dict[int, pulp.LpVariable] = field(default_factory=dict)
    visiting: Dict[int, pulp.LpVariable] = field(default_factory=dict)
    deviation: Dict[int, pulp.LpVariable] = field(default_factory=dict)
    max_deviation: Optional[pulp.LpVariable] = None


@dataclass(frozen=True, slots=True)
class QuotaPlan:
    """Solved quotas plus the projected tally they imply.

    ``proven_optimal`` is False when CBC stopped on its time limit with an
    incumbent: the quotas are valid but a better balance may exist.
    """

    status: str
    hosting: Mapping[int, int]
    visiting: Mapping[int, int]
    projected_tally: Mapping[int, int]
    games_per_team: int = 0
    proven_optimal: bool = True

    @property
    def total_blocks(self) -> int:
        return sum(self.hosting.values())

    @property
    def total_visits(self) -> int:
        return sum(self.visiting.values())

    @property
    def max_deviation(self) -> int:
        return max((abs(p - self.games_per_team) for p in self.projected_tally.values()), default=0)


# ============================================================================
# Top-level orchestrator
# ============================================================================


def formulate_quota_problem(data: QuotaInputData) -> tuple[pulp.LpProblem, QuotaDecisionVariables]:
    """Create the PuLP problem for ``data``."""

    problem = pulp.LpProblem(name="residency_quotas", sense=pulp.LpMinimize)

    decision_variables = create_decision_variables(problem, data)
    add_objective(problem, data, decision_variables)
    add_constraints(problem, data, decision_variables)

    return problem, decision_variables


def create_decision_variables(problem: pulp.LpProblem, data: QuotaInputData) -> QuotaDecisionVariables:
    _ = problem

    ub = data.quota_upper_bound
    return QuotaDecisionVariables(
        choose={
            t: {(h, v): pulp.LpVariable(f"choose_{t}_{h}_{v}", cat=pulp.LpBinary) for (h, v) in data.options(t)}
            for t in data.team_ids
        },
        hosting={
            t: pulp.LpVariable(f"hosting_{t}", lowBound=0, upBound=ub, cat=pulp.LpInteger) for t in data.team_ids
        },
        visiting={
            t: pulp.LpVariable(f"visiting_{t}", lowBound=0, upBound=ub, cat=pulp.LpInteger) for t in data.team_ids
        },
        deviation={t: pulp.LpVariable(f"deviation_{t}", lowBound=0, cat=pulp.LpContinuous) for t in data.team_ids},
        max_deviation=pulp.LpVariable("max_deviation", lowBound=0, cat=pulp.LpContinuous),
    )


def add_objective(
    problem: pulp.LpProblem,
    data: QuotaInputData,
    decision_variables: QuotaDecisionVariables,
) -> None:
    """Minimax first, total deviation second."""

    problem += len(data.team_ids) * decision_variables.max_deviation + pulp.lpSum(
        decision_variables.deviation.values()
    )


def add_constraints(
    problem: pulp.LpProblem,
    data: QuotaInputData,
    decision_variables: QuotaDecisionVariables,
) -> None:
    _add_option_constraints(problem, data, decision_variables)
    _add_max_deviation_constraints(problem, data, decision_variables)
    _add_visitor_balance_constraint(problem, data, decision_variables)
    _add_visit_availability_constraints(problem, data, decision_variables)


def _add_option_constraints(
    problem: pulp.LpProblem,
    data: QuotaInputData,
    decision_variables: QuotaDecisionVariables,
) -> None:
    """Each team picks exactly one option; hosting, visiting and deviation follow from it."""

    dv = decision_variables
    for t in data.team_ids:
        choose = dv.choose[t]
        problem += pulp.lpSum(choose.values()) == 1, f"choose_one_{t}"
        problem += dv.hosting[t] == pulp.lpSum(h * x for (h, _v), x in choose.items()), f"hosting_link_{t}"
        problem += dv.visiting[t] == pulp.lpSum(v * x for (_h, v), x in choose.items()), f"visiting_link_{t}"
        problem += (
            dv.deviation[t] == pulp.lpSum(data.deviation_of(t, h, v) * x for (h, v), x in choose.items()),
            f"deviation_link_{t}",
        )


def _add_max_deviation_constraints(
    problem: pulp.LpProblem,
    data: QuotaInputData,
    decision_variables: QuotaDecisionVariables,
) -> None:
    dv = decision_variables
    for t in data.team_ids:
        problem += dv.max_deviation >= dv.deviation[t], f"max_deviation_{t}"


def _add_visitor_balance_constraint(
    problem: pulp.LpProblem,
    data: QuotaInputData,
    decision_variables: QuotaDecisionVariables,
) -> None:
    """Every block hosted needs exactly ``visitors_per_block`` visits."""

    dv = decision_variables
    problem += (
        pulp.lpSum(dv.visiting.values()) == data.visitors_per_block * pulp.lpSum(dv.hosting.values()),
        "visitor_balance",
    )


def _add_visit_availability_constraints(
    problem: pulp.LpProblem,
    data: QuotaInputData,
    decision_variables: QuotaDecisionVariables,
) -> None:
    """A team visits each block hosted by someone else at most once."""

    dv = decision_variables
    for t in data.team_ids:
        others = [dv.hosting[u] for u in data.team_ids if u != t]
        problem += dv.visiting[t] <= pulp.lpSum(others), f"visit_availability_{t}"


# ============================================================================
# Solve
# ============================================================================


def _build_cbc_solver(
    *,
    time_limit_seconds: int | None,
    enable_solver_output: bool,
    gap_rel: float | None = None,
) -> pulp.LpSolver:
    """Create a CBC (COIN-OR) solver instance for PuLP."""

    options: Dict[str, object] = {"msg": enable_solver_output}
    if time_limit_seconds is not None:
        options["timeLimit"] = time_limit_seconds
    if gap_rel is not None:
        options["gapRel"] = gap_rel

    return pulp.PULP_CBC_CMD(**options)


def _int_value(v: pulp.LpVariable) -> int:
    val = pulp.value(v)
    return int(round(float(val))) if val is not None else 0


def plan_residency_quotas(
    team_ids: Sequence[int],
    base_tally: Mapping[int, int],
    games_per_team: int,
    *,
    host_games: int,
    visitor_games: int,
    visitors_per_block: int = 2,
    time_limit_seconds: int | None = None,
    gap_rel: float | None = None,
    enable_solver_output: bool = False,
) -> QuotaPlan:
    """Solve the quota model and return per-team hosting/visiting counts.

    Raises
    ------
    QuotaPlanningError
        If the inputs are invalid or the solver does not return a solution.
    """

    try:
        data = QuotaInputData(
            team_ids=tuple(team_ids),
            base_tally=dict(base_tally),
            games_per_team=games_per_team,
            host_games=host_games,
            visitor_games=visitor_games,
            visitors_per_block=visitors_per_block,
        )
    except ValueError as e:
        raise QuotaPlanningError(f"Cannot plan quotas: {e}") from e

    problem, dv = formulate_quota_problem(data)
    logger.debug(
        "Quota problem built: variables=%d constraints=%d", len(problem.variables()), len(problem.constraints)
    )

    solver = _build_cbc_solver(
        time_limit_seconds=time_limit_seconds,
        enable_solver_output=enable_solver_output,
        gap_rel=gap_rel,
    )
    try:
        status_code = problem.solve(solver)
    except pulp.PulpSolverError as e:
        raise QuotaPlanningError(f"Quota solver failed: {e}") from e

    status = pulp.LpStatus[status_code]
    if status != "Optimal":
        raise QuotaPlanningError(f"Quota model finished with status {status}")

    # CBC reports "Optimal" when it stops on the time limit with an incumbent.
    proven_optimal = problem.sol_status == pulp.LpSolutionOptimal
    if not proven_optimal:
        logger.info(
            "Quota solver stopped at its limit (time_limit=%ss); using the best plan found, which may not be optimal",
            time_limit_seconds,
        )

    hosting = {t: _int_value(dv.hosting[t]) for t in data.team_ids}
    visiting = {t: _int_value(dv.visiting[t]) for t in data.team_ids}
    projected = {t: data.projected(t, hosting[t], visiting[t]) for t in data.team_ids}

    plan = QuotaPlan(
        status=status,
        hosting=hosting,
        visiting=visiting,
        projected_tally=projected,
        games_per_team=games_per_team,
        proven_optimal=proven_optimal,
    )
    logger.info(
        "Quota plan: status=%s proven_optimal=%s blocks=%d visits=%d max_deviation=%d",
        status,
        proven_optimal,
        plan.total_blocks,
        plan.total_visits,
        plan.max_deviation,
    )
    return plan

# ============================================================================
# Visitor assignment
# ============================================================================


def assign_block_visitors(
    block_hosts: Sequence[int],
    visiting: Mapping[int, int],
    *,
    visitors_per_block: int = 2,
    weights: Optional[Mapping[tuple[int, int], float]] = None,
    time_limit_seconds: int | None = None,
    enable_solver_output: bool = False,
) -> list[tuple[int, ...]]:
    """Assign visitors to an ordered list of regular blocks.

    ``block_hosts[b]`` is the host of block ``b``. Every block receives exactly
    ``visitors_per_block`` distinct visitors other than its host, and team
    ``t`` visits exactly ``visiting[t]`` blocks. Among the feasible
    assignments, the one with the smallest total ``weights[(b, t)]`` wins, so
    random weights give a random valid assignment.

    Returns
    -------
    list of tuple
        Visitor ids per block, in ``visiting`` key order.

    Raises
    ------
    QuotaPlanningError
        If the quotas cannot be realised (or the solver fails).
    """

    team_ids = list(visiting)
    weights = weights or {}

    if not block_hosts:
        if any(int(v) > 0 for v in visiting.values()):
            raise QuotaPlanningError("Visiting quotas are positive but there are no blocks to visit")
        return []

    for t in team_ids:
        available = sum(1 for host in block_hosts if host != t)
        if int(visiting[t]) > available:
            raise QuotaPlanningError(
                f"Team {t} must visit {visiting[t]} block(s) but only {available} are hosted by other teams"
            )

    problem = pulp.LpProblem(name="residency_visitor_assignment", sense=pulp.LpMinimize)
    x = {
        (b, t): pulp.LpVariable(f"visit_{b}_{t}", cat=pulp.LpBinary)
        for b, host in enumerate(block_hosts)
        for t in team_ids
        if t != host
    }

    problem += pulp.lpSum(float(weights.get(key, 0.0)) * var for key, var in x.items())

    for b, host in enumerate(block_hosts):
        problem += (
            pulp.lpSum(x[(b, t)] for t in team_ids if t != host) == visitors_per_block,
            f"block_visitors_{b}",
        )
    for t in team_ids:
        terms = [var for (b, u), var in x.items() if u == t]
        if terms:
            problem += pulp.lpSum(terms) == int(visiting[t]), f"team_visits_{t}"

    solver = _build_cbc_solver(time_limit_seconds=time_limit_seconds, enable_solver_output=enable_solver_output)
    try:
        status_code = problem.solve(solver)
    except pulp.PulpSolverError as e:
        raise QuotaPlanningError(f"Visitor assignment solver failed: {e}") from e

    status = pulp.LpStatus[status_code]
    if status != "Optimal":
        raise QuotaPlanningError(f"Visitor assignment finished with status {status}")

    assignment: list[tuple[int, ...]] = []
    for b, host in enumerate(block_hosts):
        assignment.append(tuple(t for t in team_ids if t != host and _int_value(x[(b, t)]) == 1))

    logger.debug("Visitor assignment: blocks=%d status=%s", len(assignment), status)
    return assignment

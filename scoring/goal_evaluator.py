"""Goal and goal-group completion.

Goal trees are stored flat (every goal and group carries a nullable
``parent_group_id``). ``GoalTree`` rebuilds them as an arena keyed by id plus a
children-by-parent index, then evaluates post-order: children first, then the
group's logical operator.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Literal

from core.enums.logical_operator import LogicalOperator
from core.enums.submission_status import SubmissionStatus
from core.models.goal import Goal, GoalGroup, TeamGoalProgress
from core.models.results import GoalNodeEvaluation, GoalProgress

logger = logging.getLogger(__name__)

NodeKind = Literal["goal", "group"]
NodeRef = tuple[NodeKind, str]


def evaluate_goal(target_value: float, current_value: float = 0.0) -> GoalProgress:
    """Evaluate one goal against a team's accumulated progress.

    A non-positive target is a configuration anomaly; the goal is reported as
    incomplete at 0% instead of failing the whole board.
    """
    if target_value <= 0:
        logger.warning("Goal target %s is not positive; treating goal as incomplete", target_value)
        return GoalProgress(is_complete=False, current_value=current_value, target_value=target_value, percentage=0.0)

    percentage = min(100.0, 100.0 * current_value / target_value)
    return GoalProgress(
        is_complete=current_value >= target_value,
        current_value=current_value,
        target_value=target_value,
        percentage=max(0.0, percentage),
    )


def progress_by_goal(progress_rows: Iterable[TeamGoalProgress], team_id: str) -> dict[str, float]:
    """Index one team's progress rows by goal id."""
    return {row.goal_id: row.current_value for row in progress_rows if row.team_id == team_id}


class GoalTree:
    """An arena of goals and groups for one tile with a children-by-parent index."""

    def __init__(self, groups: Iterable[GoalGroup], goals: Iterable[Goal]) -> None:
        self._groups: dict[str, GoalGroup] = {}
        self._goals: dict[str, Goal] = {}
        self._children: dict[str | None, list[NodeRef]] = defaultdict(list)

        # (order_index, groups before goals, input position)
        sort_keys: dict[NodeRef, tuple[int, int, int]] = {}
        for position, group in enumerate(groups):
            self._groups[group.id] = group
            ref: NodeRef = ("group", group.id)
            self._children[group.parent_group_id].append(ref)
            sort_keys[ref] = (group.order_index, 0, position)
        for position, goal in enumerate(goals):
            self._goals[goal.id] = goal
            ref = ("goal", goal.id)
            self._children[goal.parent_group_id].append(ref)
            sort_keys[ref] = (goal.order_index, 1, position)

        for siblings in self._children.values():
            siblings.sort(key=lambda node: sort_keys[node])

        unreachable = self.unreachable_group_ids()
        orphaned = self.orphaned_goal_ids()
        if unreachable or orphaned:
            logger.warning(
                "Goal groups %s and goals %s are not reachable from a root (cycle or missing parent)",
                unreachable,
                orphaned,
            )

    @classmethod
    def for_tile(cls, groups: Iterable[GoalGroup], goals: Iterable[Goal], tile_id: str) -> GoalTree:
        return cls(
            [group for group in groups if group.tile_id == tile_id],
            [goal for goal in goals if goal.tile_id == tile_id],
        )

    def roots(self) -> list[NodeRef]:
        return list(self._children.get(None, []))

    def children_of(self, group_id: str) -> list[NodeRef]:
        return list(self._children.get(group_id, []))

    def unreachable_group_ids(self) -> list[str]:
        """Groups whose ancestor chain never reaches the root level."""
        unreachable = []
        for group_id in self._groups:
            seen: set[str] = set()
            current: str | None = group_id
            while current is not None and current in self._groups and current not in seen:
                seen.add(current)
                current = self._groups[current].parent_group_id
            if current is not None:
                unreachable.append(group_id)
        return sorted(unreachable)

    def orphaned_goal_ids(self) -> list[str]:
        """Goals whose parent group is not part of this tree."""
        return sorted(
            goal.id
            for goal in self._goals.values()
            if goal.parent_group_id is not None and goal.parent_group_id not in self._groups
        )

    def evaluate(self, progress: Mapping[str, float]) -> list[GoalNodeEvaluation]:
        """Evaluate every root item for one team.

        Args:
            progress: Team progress keyed by goal id; missing goals count as 0

        Returns:
            Evaluated root nodes in presentation order
        """
        return [self._evaluate_node(ref, progress, frozenset()) for ref in self.roots()]

    def _evaluate_node(
        self, ref: NodeRef, progress: Mapping[str, float], path: frozenset[str]
    ) -> GoalNodeEvaluation:
        kind, node_id = ref
        if kind == "goal":
            goal = self._goals[node_id]
            result = evaluate_goal(goal.target_value, progress.get(node_id, 0.0))
            return GoalNodeEvaluation(
                node_type="goal",
                id=node_id,
                is_complete=result.is_complete,
                completed_count=1 if result.is_complete else 0,
                total_count=1,
                percentage=result.percentage,
            )

        group = self._groups[node_id]
        if node_id in path:
            logger.warning("Goal group %s is its own ancestor; treating it as incomplete", node_id)
            return GoalNodeEvaluation(
                node_type="group", id=node_id, is_complete=False, operator=group.logical_operator
            )

        child_path = path | {node_id}
        children = [self._evaluate_node(child, progress, child_path) for child in self.children_of(node_id)]
        completed_children = sum(1 for child in children if child.is_complete)

        min_required = None
        if group.logical_operator == LogicalOperator.AND:
            is_complete = bool(children) and completed_children == len(children)
        else:
            min_required = group.required_for_or
            is_complete = bool(children) and completed_children >= min_required

        completed_leaves = sum(child.completed_count for child in children)
        total_leaves = sum(child.total_count for child in children)
        return GoalNodeEvaluation(
            node_type="group",
            id=node_id,
            is_complete=is_complete,
            operator=group.logical_operator,
            min_required=min_required,
            completed_count=completed_leaves,
            total_count=total_leaves,
            percentage=100.0 * completed_leaves / total_leaves if total_leaves else 0.0,
            children=children,
        )


def evaluate_tile_completion(tree: GoalTree, progress: Mapping[str, float]) -> bool:
    """A tile is complete when it has root items and all of them are complete."""
    roots = tree.evaluate(progress)
    return bool(roots) and all(node.is_complete for node in roots)


def goal_tree_with_progress(
    groups: Iterable[GoalGroup],
    goals: Iterable[Goal],
    progress_rows: Iterable[TeamGoalProgress],
    tile_id: str,
    team_id: str,
) -> list[GoalNodeEvaluation]:
    tree = GoalTree.for_tile(groups, goals, tile_id)
    return tree.evaluate(progress_by_goal(progress_rows, team_id))


class AutoCompletionAction(str, Enum):
    """What to do with a team's tile submission once its goal tree is evaluated."""

    NONE = "none"
    ALREADY_APPROVED = "already_approved"
    APPROVE_EXISTING = "approve_existing"
    CREATE_APPROVED = "create_approved"


def auto_completion_action(is_complete: bool, existing_status: SubmissionStatus | None) -> AutoCompletionAction:
    if not is_complete:
        return AutoCompletionAction.NONE
    if existing_status == SubmissionStatus.APPROVED:
        return AutoCompletionAction.ALREADY_APPROVED
    if existing_status is not None:
        return AutoCompletionAction.APPROVE_EXISTING
    return AutoCompletionAction.CREATE_APPROVED


def would_create_cycle(groups: Iterable[GoalGroup], group_id: str, target_parent_id: str | None) -> bool:
    """Check whether moving ``group_id`` under ``target_parent_id`` makes a group its own ancestor."""
    parents = {group.id: group.parent_group_id for group in groups}
    seen: set[str] = set()
    current = target_parent_id
    while current is not None:
        if current == group_id:
            return True
        if current in seen:
            # the existing parent chain already loops
            return True
        seen.add(current)
        current = parents.get(current)
    return False

import itertools
import logging

import pytest

from core.enums.logical_operator import LogicalOperator
from core.enums.submission_status import SubmissionStatus
from core.models.goal import Goal, GoalGroup, TeamGoalProgress
from scoring.goal_evaluator import (
    AutoCompletionAction,
    GoalTree,
    auto_completion_action,
    evaluate_goal,
    evaluate_tile_completion,
    goal_tree_with_progress,
    would_create_cycle,
)

TILE = "tile-1"


def goal(goal_id, parent=None, target=10, order=0):
    return Goal(id=goal_id, tile_id=TILE, parent_group_id=parent, target_value=target, order_index=order)


def group(group_id, parent=None, operator=LogicalOperator.AND, order=0, min_required=None):
    return GoalGroup(
        id=group_id,
        tile_id=TILE,
        parent_group_id=parent,
        logical_operator=operator,
        order_index=order,
        min_required_goals=min_required,
    )


def test_goal_complete_at_target():
    result = evaluate_goal(10, 10)
    assert result.is_complete
    assert result.percentage == 100


def test_goal_percentage_capped():
    result = evaluate_goal(10, 25)
    assert result.is_complete
    assert result.percentage == 100


def test_goal_partial_progress():
    result = evaluate_goal(8, 2)
    assert not result.is_complete
    assert result.percentage == 25


def test_non_positive_target_is_incomplete(caplog):
    with caplog.at_level(logging.WARNING):
        result = evaluate_goal(0, 5)
    assert not result.is_complete
    assert result.percentage == 0
    assert "not positive" in caplog.text


def test_nested_and_requires_every_leaf():
    groups = [group("root"), group("mid", parent="root"), group("inner", parent="mid")]
    goals = [
        goal("g1", parent="root"),
        goal("g2", parent="mid"),
        goal("g3", parent="inner"),
        goal("g4", parent="inner", order=1),
    ]
    tree = GoalTree(groups, goals)

    all_done = {"g1": 10, "g2": 10, "g3": 10, "g4": 10}
    [root] = tree.evaluate(all_done)
    assert root.is_complete
    assert (root.completed_count, root.total_count) == (4, 4)

    one_short = {**all_done, "g4": 9}
    [root] = tree.evaluate(one_short)
    assert not root.is_complete
    assert (root.completed_count, root.total_count) == (3, 4)
    mid = next(child for child in root.children if child.id == "mid")
    assert not mid.is_complete


@pytest.mark.parametrize(
    "completed",
    [combo for k in range(4) for combo in itertools.combinations(["a", "b", "c"], k)],
)
def test_or_with_minimum_two(completed):
    tree = GoalTree(
        [group("any", operator=LogicalOperator.OR, min_required=2)],
        [goal("a", parent="any"), goal("b", parent="any"), goal("c", parent="any")],
    )
    progress = {goal_id: 10 for goal_id in completed}
    [node] = tree.evaluate(progress)
    assert node.is_complete == (len(completed) >= 2)
    assert node.min_required == 2


@pytest.mark.parametrize("min_required", [None, 0, -3])
def test_or_minimum_defaults_to_one(min_required):
    tree = GoalTree(
        [group("any", operator=LogicalOperator.OR, min_required=min_required)],
        [goal("a", parent="any"), goal("b", parent="any")],
    )
    [node] = tree.evaluate({"b": 10})
    assert node.is_complete
    assert node.min_required == 1


@pytest.mark.parametrize("operator", [LogicalOperator.AND, LogicalOperator.OR])
def test_empty_group_is_never_complete(operator):
    tree = GoalTree([group("empty", operator=operator)], [])
    [node] = tree.evaluate({})
    assert not node.is_complete
    assert node.total_count == 0
    assert node.percentage == 0


def test_siblings_ordered_by_order_index_then_groups_first():
    tree = GoalTree(
        [group("grp-late", order=2), group("grp-early", order=1)],
        [goal("goal-early", order=1), goal("goal-first", order=0)],
    )
    assert [node_id for _, node_id in tree.roots()] == ["goal-first", "grp-early", "goal-early", "grp-late"]


def test_tile_completion_is_and_over_roots():
    tree = GoalTree([], [goal("a"), goal("b", order=1)])
    assert evaluate_tile_completion(tree, {"a": 10, "b": 10})
    assert not evaluate_tile_completion(tree, {"a": 10})


def test_tile_without_goals_is_not_complete():
    assert not evaluate_tile_completion(GoalTree([], []), {})


def test_goal_tree_with_progress_filters_tile_and_team():
    goals = [goal("a"), Goal(id="other", tile_id="tile-2", target_value=1)]
    progress = [
        TeamGoalProgress(team_id="t1", goal_id="a", current_value=10),
        TeamGoalProgress(team_id="t2", goal_id="a", current_value=1),
    ]
    [node] = goal_tree_with_progress([], goals, progress, TILE, "t1")
    assert node.id == "a"
    assert node.is_complete
    [node] = goal_tree_with_progress([], goals, progress, TILE, "t2")
    assert not node.is_complete


def test_cyclic_groups_are_reported_and_not_evaluated(caplog):
    groups = [group("x", parent="y"), group("y", parent="x")]
    with caplog.at_level(logging.WARNING):
        tree = GoalTree(groups, [goal("g", parent="x")])
    assert tree.unreachable_group_ids() == ["x", "y"]
    assert "not reachable" in caplog.text
    assert tree.evaluate({"g": 10}) == []


def test_goals_under_missing_group_are_reported(caplog):
    with caplog.at_level(logging.WARNING):
        tree = GoalTree([group("root")], [goal("kept", parent="root"), goal("stray", parent="deleted")])
    assert tree.orphaned_goal_ids() == ["stray"]
    assert tree.unreachable_group_ids() == []
    assert "stray" in caplog.text
    [root] = tree.evaluate({"kept": 10, "stray": 10})
    assert [child.id for child in root.children] == ["kept"]


def test_well_formed_tree_logs_nothing(caplog):
    with caplog.at_level(logging.WARNING):
        tree = GoalTree([group("root")], [goal("a", parent="root"), goal("b")])
    assert tree.orphaned_goal_ids() == []
    assert caplog.text == ""


def test_self_ancestor_guard_stops_recursion(caplog):
    tree = GoalTree([group("root"), group("loop", parent="root")], [goal("g", parent="loop")])
    # Point a child back at an ancestor through the private index to force a loop
    tree._children["loop"].append(("group", "root"))
    with caplog.at_level(logging.WARNING):
        [root] = tree.evaluate({"g": 10})
    assert not root.is_complete
    assert "own ancestor" in caplog.text


@pytest.mark.parametrize(
    "is_complete, existing, expected",
    [
        (False, None, AutoCompletionAction.NONE),
        (False, SubmissionStatus.PENDING, AutoCompletionAction.NONE),
        (True, SubmissionStatus.APPROVED, AutoCompletionAction.ALREADY_APPROVED),
        (True, SubmissionStatus.PENDING, AutoCompletionAction.APPROVE_EXISTING),
        (True, SubmissionStatus.DECLINED, AutoCompletionAction.APPROVE_EXISTING),
        (True, None, AutoCompletionAction.CREATE_APPROVED),
    ],
)
def test_auto_completion_action(is_complete, existing, expected):
    assert auto_completion_action(is_complete, existing) == expected


def test_would_create_cycle():
    groups = [group("a"), group("b", parent="a"), group("c", parent="b")]
    assert would_create_cycle(groups, "a", "c")
    assert would_create_cycle(groups, "b", "b")
    assert not would_create_cycle(groups, "c", "a")
    assert not would_create_cycle(groups, "c", None)

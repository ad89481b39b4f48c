"""Tests for problem generation and the generator's self-adjustment."""

import random

import pytest

from numberquest.config import Settings
from numberquest.problems.generator import ProblemGenerator, generate_distractors
from numberquest.problems.models import ProblemKind


def test_defaults_to_level_one(rng):
    generator = ProblemGenerator(rng=rng)
    assert generator.difficulty == 1


def test_initial_difficulty_is_clamped(rng):
    assert ProblemGenerator(initial_difficulty=42, rng=rng).difficulty == 10
    assert ProblemGenerator(initial_difficulty=-1, rng=rng).difficulty == 1


def test_level_one_stays_small(rng):
    generator = ProblemGenerator(initial_difficulty=1, rng=rng)
    for problem in generator.generate_problems(200):
        assert 1 <= problem.first_operand <= 5
        assert 1 <= problem.second_operand <= 3
        assert problem.kind is ProblemKind.ADDITION
        assert problem.difficulty.level == 1
        assert problem.time_limit == 15.0


@pytest.mark.parametrize("level", range(1, 11))
def test_problem_invariants_at_every_level(level, rng):
    generator = ProblemGenerator(initial_difficulty=level, rng=rng)
    for problem in generator.generate_problems(100):
        assert problem.correct_answer == problem.kind.apply(
            problem.first_operand, problem.second_operand
        )
        assert problem.correct_answer >= 0
        assert len(problem.distractors) == problem.difficulty.number_of_distractors
        assert len(set(problem.distractors)) == len(problem.distractors)
        assert problem.correct_answer not in problem.distractors
        assert all(d >= 0 for d in problem.distractors)
        assert problem.time_limit == problem.difficulty.time_limit


def test_subtraction_never_goes_negative(rng):
    settings = Settings(addition_weight=0.0, multiplication_weight=0.0)
    generator = ProblemGenerator(initial_difficulty=6, rng=rng, settings=settings)
    for problem in generator.generate_problems(200):
        assert problem.kind is ProblemKind.SUBTRACTION
        assert problem.first_operand >= problem.second_operand
        assert problem.second_operand <= 15


def test_multiplication_operands_are_capped(rng):
    settings = Settings(addition_weight=0.0, subtraction_weight=0.0)
    generator = ProblemGenerator(initial_difficulty=10, rng=rng, settings=settings)
    for problem in generator.generate_problems(200):
        assert problem.kind is ProblemKind.MULTIPLICATION
        assert problem.first_operand <= 12
        assert problem.second_operand <= 10


def test_operations_unlock_with_difficulty(rng):
    kinds_at = {
        level: {p.kind for p in ProblemGenerator(level, rng=rng).generate_problems(300)}
        for level in (1, 2, 5)
    }
    assert kinds_at[1] == {ProblemKind.ADDITION}
    assert ProblemKind.SUBTRACTION in kinds_at[2]
    assert ProblemKind.MULTIPLICATION not in kinds_at[2]
    assert kinds_at[5] == set(ProblemKind)


@pytest.mark.parametrize(
    "draw, expected",
    [
        (0.0, ProblemKind.ADDITION),
        (0.69, ProblemKind.ADDITION),
        (0.75, ProblemKind.SUBTRACTION),
        (0.95, ProblemKind.MULTIPLICATION),
    ],
)
def test_weighted_selection_walks_cumulative_weights(draw, expected, fixed_rng):
    generator = ProblemGenerator(initial_difficulty=5, rng=fixed_rng(draw))
    assert generator.generate_problem().kind is expected


def test_selection_falls_back_to_addition_past_the_last_weight(fixed_rng):
    # A draw equal to the total misses every cumulative bound
    settings = Settings(addition_weight=0.0)
    generator = ProblemGenerator(initial_difficulty=5, rng=fixed_rng(1.0), settings=settings)
    assert generator.generate_problem().kind is ProblemKind.ADDITION


def test_zero_weights_fall_back_to_addition(fixed_rng):
    settings = Settings(addition_weight=0.0, subtraction_weight=0.0, multiplication_weight=0.0)
    generator = ProblemGenerator(initial_difficulty=5, rng=fixed_rng(0.5), settings=settings)
    assert generator.generate_problem().kind is ProblemKind.ADDITION


def test_recent_operand_pairs_are_avoided(rng):
    generator = ProblemGenerator(initial_difficulty=10, rng=rng)
    problems = generator.generate_problems(11)
    keys = [p.key for p in problems]
    assert len(set(keys)) == len(keys)


def test_recent_keys_are_bounded(rng):
    generator = ProblemGenerator(initial_difficulty=3, rng=rng)
    problems = generator.generate_problems(25)
    assert generator.recent_keys == [p.key for p in problems[-10:]]


def test_retry_cap_accepts_repeat(fixed_rng):
    # Every draw lands on 1 + 1, so the search must give up and repeat
    generator = ProblemGenerator(initial_difficulty=1, rng=fixed_rng(0.0, pin_ranges=True))
    first = generator.generate_problem()
    second = generator.generate_problem()
    assert first.key == second.key == "1+1"
    assert second.distractors == (3, 0)


def test_generate_problems_count(rng):
    generator = ProblemGenerator(rng=rng)
    assert len(generator.generate_problems(5)) == 5
    assert generator.generate_problems(0) == []
    assert generator.generate_problems(-3) == []


def test_problem_ids_are_unique(rng):
    problems = ProblemGenerator(initial_difficulty=4, rng=rng).generate_problems(50)
    assert len({p.id for p in problems}) == 50


class TestDistractors:
    @pytest.mark.parametrize("kind", list(ProblemKind))
    @pytest.mark.parametrize("answer", [0, 1, 2, 7, 100])
    @pytest.mark.parametrize("count", [2, 3, 4])
    def test_unique_and_wrong(self, kind, answer, count):
        rng = random.Random(answer * 31 + count)
        distractors = generate_distractors(answer, count, kind, rng)
        assert len(distractors) == count
        assert len(set(distractors)) == count
        assert answer not in distractors
        assert all(d >= 0 for d in distractors)


class TestSelfAdjustment:
    def test_needs_five_results(self, rng, observe):
        generator = ProblemGenerator(initial_difficulty=3, rng=rng)
        for _ in range(4):
            assert generator.update_difficulty(observe(True, 1.0)) == 3

    def test_fast_and_accurate_moves_up(self, rng, observe):
        generator = ProblemGenerator(initial_difficulty=3, rng=rng)
        for _ in range(5):
            generator.update_difficulty(observe(True, 2.0))
        assert generator.difficulty == 4

    def test_accurate_but_slow_holds(self, rng, observe):
        generator = ProblemGenerator(initial_difficulty=3, rng=rng)
        # 70% of the 12 second limit is 8.4
        for _ in range(5):
            generator.update_difficulty(observe(True, 9.0))
        assert generator.difficulty == 3

    def test_inaccurate_moves_down(self, rng, observe):
        generator = ProblemGenerator(initial_difficulty=3, rng=rng)
        for _ in range(5):
            generator.update_difficulty(observe(False, 2.0))
        assert generator.difficulty == 2

    def test_too_slow_moves_down(self, rng, observe):
        generator = ProblemGenerator(initial_difficulty=5, rng=rng)
        for _ in range(5):
            generator.update_difficulty(observe(True, 11.0))
        assert generator.difficulty == 4

    def test_bounded_at_both_ends(self, rng, observe):
        top = ProblemGenerator(initial_difficulty=10, rng=rng)
        bottom = ProblemGenerator(initial_difficulty=1, rng=rng)
        for _ in range(5):
            top.update_difficulty(observe(True, 1.0))
            bottom.update_difficulty(observe(False, 1.0))
        assert top.difficulty == 10
        assert bottom.difficulty == 1

    def test_window_is_bounded(self, rng, observe):
        generator = ProblemGenerator(initial_difficulty=5, rng=rng)
        for _ in range(30):
            generator.update_difficulty(observe(True, 5.0))
        assert len(generator.performance_window) == 20


def test_set_difficulty_clamps(rng):
    generator = ProblemGenerator(rng=rng)
    generator.set_difficulty(7)
    assert generator.difficulty == 7
    assert generator.current_difficulty.max_first_operand == 75
    generator.set_difficulty(15)
    assert generator.difficulty == 10


def test_reset_matches_fresh_generator(rng, observe):
    generator = ProblemGenerator(initial_difficulty=6, rng=rng)
    generator.generate_problems(5)
    generator.update_difficulty(observe())

    generator.reset()

    assert generator.difficulty == 1
    assert generator.recent_keys == []
    assert generator.performance_window == []
    assert generator.generate_problem().difficulty.level == 1

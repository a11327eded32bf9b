"""Battle orchestration -- the state machine behind a single fight.

``BattleManager`` owns the enemy, the turn controller and the battle log;
it borrows the hero's stat block and mutates it in place.  Phases::

    waiting -> player-turn -> enemy-turn -> player-turn ...
                     |              |
                     v              v
                  victory         defeat

A player answer either finishes the enemy (victory, in the same call) or
hands over to the enemy.  The enemy's reply is *scheduled* rather than
run inline so a front end can animate the hit first; while it is
pending the battle sits in ``enemy-turn`` and rejects answers.  Each
resolution is reported exactly once through ``on_enemy_turn_resolved``.

Calls made in the wrong phase, or after the battle has ended, never
raise: they return a result with ``accepted=False`` and change nothing.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Mapping

from math_dungeon.sim.config import BattleSettings
from math_dungeon.sim.core.battle_state import (
    BattleLog,
    BattlePhase,
    BattleResult,
    EnemyTurnResult,
)
from math_dungeon.sim.core.entities import StatBlock
from math_dungeon.sim.core.rng import GameRNG
from math_dungeon.sim.core.turns import TurnController, TurnSide
from math_dungeon.sim.difficulty import DifficultyProfile, get_difficulty_profile
from math_dungeon.sim.enemies import create_enemy, enemy_tier
from math_dungeon.sim.errors import ProblemGenerationError
from math_dungeon.sim.mechanics.damage import (
    apply_damage,
    calculate_damage,
    cap_boss_damage,
    floor_scaled,
    scale_damage,
)
from math_dungeon.sim.persistence import Leaderboard, LeaderboardEntry, StatStore
from math_dungeon.sim.problems import (
    AnswerValidator,
    Problem,
    ProblemGenerator,
    StandardAnswerValidator,
    TopicProblemGenerator,
    Unit,
)
from math_dungeon.sim.scheduler import (
    ImmediateScheduler,
    ScheduledTask,
    TimerScheduler,
    TurnScheduler,
)

logger = logging.getLogger(__name__)

EXP_PER_ENEMY_LEVEL = 10
GOLD_PER_ENEMY_LEVEL = 15

DEFAULT_UNIT = Unit(name="Number Sense", topics=["arithmetic"], difficulty=1)


class BattleManager:
    """Runs one battle between the hero and a freshly built enemy.

    Parameters
    ----------
    hero:
        The hero's stat block.  Mutated in place; the caller must not
        touch it elsewhere while the battle is running.
    grade:
        School grade the battle is set in (1 and up).
    unit:
        The curriculum unit, as a :class:`Unit` or a plain dict.
    difficulty:
        Difficulty profile key (``easy``, ``medium``, ``hard``, ``nightmare``).
    problem_generator, answer_validator:
        The problem/answer boundary.  Default to the reference
        :class:`TopicProblemGenerator` and :class:`StandardAnswerValidator`.
    rng:
        Random source for damage rolls.
    scheduler:
        Runs the deferred enemy turn.  Defaults to immediate resolution
        when ``settings.enemy_turn_delay`` is 0 and to a timer otherwise.
    store:
        Where the hero is saved on victory.  ``None`` skips saving.
    leaderboard:
        Optional; receives an entry on victory.
    settings:
        Delay and store keys; defaults to :class:`BattleSettings`.
    profiles:
        Difficulty table; defaults to ``settings.difficulty_profiles()``.
    on_enemy_turn_resolved:
        Called once after every enemy turn with its result.
    """

    def __init__(
        self,
        hero: StatBlock,
        grade: int,
        unit: Unit | Mapping[str, Any] | None = None,
        difficulty: str = "medium",
        *,
        problem_generator: ProblemGenerator | None = None,
        answer_validator: AnswerValidator | None = None,
        rng: GameRNG | None = None,
        scheduler: TurnScheduler | None = None,
        store: StatStore | None = None,
        leaderboard: Leaderboard | None = None,
        settings: BattleSettings | None = None,
        profiles: Mapping[str, DifficultyProfile] | None = None,
        on_enemy_turn_resolved: Callable[[EnemyTurnResult], None] | None = None,
    ) -> None:
        self._settings = settings or BattleSettings()
        if profiles is None:
            profiles = self._settings.difficulty_profiles()
        self._profile = get_difficulty_profile(difficulty, profiles)

        self._hero = hero
        self._grade = max(1, grade)
        if unit is None:
            unit = DEFAULT_UNIT
        self._unit = unit if isinstance(unit, Unit) else Unit.model_validate(unit)

        self._rng = rng or GameRNG()
        self._generator = problem_generator or TopicProblemGenerator(
            self._rng.fork("problems")
        )
        self._validator = answer_validator or StandardAnswerValidator()
        if scheduler is None:
            if self._settings.enemy_turn_delay == 0:
                scheduler = ImmediateScheduler()
            else:
                scheduler = TimerScheduler()
        self._scheduler = scheduler
        self._store = store
        self._leaderboard = leaderboard
        self._on_enemy_turn_resolved = on_enemy_turn_resolved

        self._lock = threading.RLock()
        self._phase = BattlePhase.WAITING
        self._turns = TurnController()
        self._log = BattleLog()
        self._enemy: StatBlock | None = None
        self._tier: int | None = None
        self._current_problem: Problem | None = None
        self._pending: ScheduledTask | None = None
        self._unannounced: EnemyTurnResult | None = None
        self._closed = False

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> BattlePhase:
        return self._phase

    def get_battle_state(self) -> BattlePhase:
        return self._phase

    @property
    def profile(self) -> DifficultyProfile:
        return self._profile

    @property
    def grade(self) -> int:
        return self._grade

    @property
    def unit(self) -> Unit:
        return self._unit

    @property
    def tier(self) -> int | None:
        """Enemy tier, once the battle has started."""
        return self._tier

    @property
    def hero(self) -> StatBlock:
        """The live hero stat block (the object passed in)."""
        return self._hero

    @property
    def turn_count(self) -> int:
        return self._turns.turn_count

    @property
    def current_problem(self) -> Problem | None:
        return self._current_problem

    def get_current_problem(self) -> Problem | None:
        return self._current_problem

    def get_hero_stats(self) -> StatBlock:
        """Snapshot of the hero; mutating it does not affect the battle."""
        return self._hero.model_copy()

    def get_enemy_stats(self) -> StatBlock | None:
        return self._enemy.model_copy() if self._enemy is not None else None

    @property
    def battle_log(self) -> list[str]:
        return self._log.entries

    def get_battle_log(self) -> list[str]:
        return self._log.entries

    @property
    def is_closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def start_battle(self) -> bool:
        """Build the enemy, fetch the first problem and hand the player the turn.

        Returns ``False`` without doing anything unless the battle is
        still ``waiting``.  Raises :class:`ProblemGenerationError` (and
        stays ``waiting``) if no first problem can be produced.
        """
        with self._lock:
            if self._closed or self._phase is not BattlePhase.WAITING:
                logger.debug("start_battle ignored in phase %s", self._phase.value)
                return False

            tier = enemy_tier(self._grade, self._unit, self._profile)
            enemy = create_enemy(self._grade, tier, self._profile)
            problem = self._next_problem()

            self._enemy = enemy
            self._tier = tier
            self._current_problem = problem
            self._log = BattleLog()
            self._turns.reset()
            self._turns.start_turn(TurnSide.PLAYER)
            self._phase = BattlePhase.PLAYER_TURN

            self._log.append(
                f"A wild {enemy.name} (Lv. {enemy.level}) appears! "
                f"Difficulty: {self._profile.key.upper()}"
            )
            logger.info(
                "Battle started: %s lv%d (%d HP) vs %s lv%d, grade %d, tier %d, %s",
                enemy.name, enemy.level, enemy.max_hp, self._hero.name,
                self._hero.level, self._grade, tier, self._profile.key,
            )
            return True

    def submit_answer(self, raw_answer: str | None) -> BattleResult:
        """Resolve the player's attack for *raw_answer*.

        Any non-matching answer, including an empty one, is simply wrong.
        With an immediate scheduler the enemy replies inside this call, so
        a :class:`ProblemGenerationError` from that reply surfaces here;
        the battle stays in ``enemy-turn`` and :meth:`enemy_turn` retries.
        """
        with self._lock:
            if self._closed or self._phase is not BattlePhase.PLAYER_TURN:
                logger.debug("Answer ignored in phase %s", self._phase.value)
                return self._inert_result()

            hero, enemy, profile = self._hero, self._require_enemy(), self._profile
            problem = self._current_problem
            if problem is None:
                raise RuntimeError("Player turn has no current problem")

            correct = self._validator.validate(problem, raw_answer)
            rolled = calculate_damage(hero, enemy, correct, self._rng)
            multiplier = profile.player_damage_multiplier
            if not correct:
                multiplier *= profile.wrong_answer_penalty
            damage = scale_damage(rolled, multiplier)
            enemy_alive = apply_damage(enemy, damage)
            logger.debug(
                "Player hit: correct=%s rolled=%d x%.3f -> %d, enemy hp %d",
                correct, rolled, multiplier, damage, enemy.current_hp,
            )

            if correct:
                self._log.append(f"Correct! You strike {enemy.name} for {damage} damage.")
            else:
                self._log.append(
                    f"Wrong! The answer was {problem.answer}. "
                    f"You strike {enemy.name} for {damage} damage."
                )

            if not enemy_alive:
                return self._claim_victory(correct, damage)

            self._turns.end_turn()
            self._turns.start_turn(TurnSide.ENEMY)
            self._phase = BattlePhase.ENEMY_TURN
            enemy_hp = enemy.current_hp

            task = self._scheduler.schedule(
                self._run_scheduled_enemy_turn, self._settings.enemy_turn_delay,
            )
            self._pending = None if task.done else task
            return BattleResult(
                correct=correct,
                damage=damage,
                enemy_hp=enemy_hp,
                phase=self._phase,
            )

    def enemy_turn(self) -> EnemyTurnResult:
        """Resolve the enemy's reply now.

        Only has an effect in ``enemy-turn``; a scheduled resolution that
        has not run yet is cancelled.  If the previous resolution could
        not fetch the next problem, only that step is attempted again and
        the attack that already landed is the result reported.
        """
        with self._lock:
            if self._closed or self._phase is not BattlePhase.ENEMY_TURN:
                logger.debug("enemy_turn ignored in phase %s", self._phase.value)
                return self._inert_enemy_result()

            if self._pending is not None:
                self._pending.cancel()
                self._pending = None

            if self._unannounced is not None:
                result = self._begin_player_turn(self._unannounced)
            else:
                result = self._resolve_enemy_attack()

        if self._on_enemy_turn_resolved is not None:
            self._on_enemy_turn_resolved(result)
        return result

    def close(self) -> None:
        """Abandon the battle (e.g. the player fled).

        Cancels a pending enemy turn; every later call is a no-op.
        """
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
            self._closed = True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run_scheduled_enemy_turn(self) -> None:
        with self._lock:
            # Only the task now running is done; a newer pending one is not.
            if self._pending is not None and self._pending.done:
                self._pending = None
        self.enemy_turn()

    def _resolve_enemy_attack(self) -> EnemyTurnResult:
        hero, enemy = self._hero, self._require_enemy()

        nominal = calculate_damage(enemy, hero, True, self._rng)
        damage = cap_boss_damage(nominal, hero.level, hero.max_hp)
        hero_alive = apply_damage(hero, damage)
        self._log.append(f"{enemy.name} attacks for {damage} damage!")
        logger.debug(
            "Enemy hit: nominal=%d capped=%d, hero hp %d/%d",
            nominal, damage, hero.current_hp, hero.max_hp,
        )

        self._turns.end_turn()
        result = EnemyTurnResult(
            nominal_damage=nominal, damage=damage, hero_hp=hero.current_hp,
        )

        if not hero_alive:
            self._phase = BattlePhase.DEFEAT
            self._current_problem = None
            self._log.append(f"Defeat! {hero.name} has fallen to {enemy.name}.")
            logger.info(
                "Battle lost to %s after %d turns", enemy.name, self._turns.turn_count,
            )
            return result.model_copy(update={"defeat": True, "phase": BattlePhase.DEFEAT})

        return self._begin_player_turn(result)

    def _begin_player_turn(self, result: EnemyTurnResult) -> EnemyTurnResult:
        self._unannounced = result
        self._current_problem = self._next_problem()
        self._unannounced = None
        self._turns.start_turn(TurnSide.PLAYER)
        self._phase = BattlePhase.PLAYER_TURN
        return result.model_copy(update={"phase": BattlePhase.PLAYER_TURN})

    def _claim_victory(self, correct: bool, damage: int) -> BattleResult:
        hero, enemy, profile = self._hero, self._require_enemy(), self._profile

        self._turns.end_turn()
        self._phase = BattlePhase.VICTORY
        self._current_problem = None

        exp = floor_scaled(enemy.level * EXP_PER_ENEMY_LEVEL, profile.experience_multiplier)
        gold = floor_scaled(enemy.level * GOLD_PER_ENEMY_LEVEL, profile.experience_multiplier)
        hero.add_gold(gold)
        leveled_up = hero.add_experience(exp)

        self._log.append(f"Victory! {enemy.name} is defeated. +{exp} EXP, +{gold} gold.")
        if leveled_up:
            self._log.append(f"Level up! {hero.name} is now level {hero.level}.")

        if self._store is not None:
            hero.save(self._store, self._settings.hero_save_key)
        if self._leaderboard is not None:
            self._leaderboard.add_entry(
                LeaderboardEntry(player_name=hero.name, score=exp + gold, level=hero.level)
            )

        logger.info(
            "Battle won against %s in %d turns (+%d exp, +%d gold%s)",
            enemy.name, self._turns.turn_count, exp, gold,
            ", level up" if leveled_up else "",
        )
        return BattleResult(
            correct=correct,
            damage=damage,
            enemy_hp=enemy.current_hp,
            victory=True,
            leveled_up=leveled_up,
            exp_gained=exp,
            gold_gained=gold,
            phase=BattlePhase.VICTORY,
        )

    def _require_enemy(self) -> StatBlock:
        if self._enemy is None:
            raise RuntimeError("Battle has not started; there is no enemy")
        return self._enemy

    def _next_problem(self) -> Problem:
        problem = self._generator.generate(self._grade, self._unit)
        if problem is None:
            raise ProblemGenerationError(
                f"No problem available for grade {self._grade}, unit {self._unit.name!r}"
            )
        return problem

    def _inert_result(self) -> BattleResult:
        return BattleResult(
            accepted=False,
            enemy_hp=self._enemy.current_hp if self._enemy is not None else 0,
            phase=self._phase,
        )

    def _inert_enemy_result(self) -> EnemyTurnResult:
        return EnemyTurnResult(
            accepted=False, hero_hp=self._hero.current_hp, phase=self._phase,
        )

    def __repr__(self) -> str:
        return (
            f"BattleManager(phase={self._phase.value}, grade={self._grade}, "
            f"difficulty={self._profile.key}, turn={self._turns.turn_count})"
        )

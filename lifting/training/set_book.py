"""Ordered, set-number-addressed view of a workout's sets.

Sets are held per exercise in a dict keyed by set_number, so adding or
removing a set never shifts the position of any other set.
"""

from collections.abc import Iterable, Iterator

from lifting.db.models import WorkoutSet
from lifting.training.errors import ValidationError


class SetBook:
    """A workout's sets grouped by exercise and keyed by set number."""

    def __init__(self, sets: Iterable[WorkoutSet] = ()) -> None:
        self._by_exercise: dict[str, dict[int, WorkoutSet]] = {}
        for workout_set in sets:
            self.add(workout_set)

    def add(self, workout_set: WorkoutSet) -> None:
        by_number = self._by_exercise.setdefault(workout_set.exercise_id, {})
        if workout_set.set_number in by_number:
            raise ValidationError(
                f"Set {workout_set.set_number} already exists for exercise {workout_set.exercise_id}"
            )
        by_number[workout_set.set_number] = workout_set

    def remove(self, workout_set: WorkoutSet) -> None:
        by_number = self._by_exercise.get(workout_set.exercise_id, {})
        by_number.pop(workout_set.set_number, None)
        if not by_number:
            self._by_exercise.pop(workout_set.exercise_id, None)

    def get(self, exercise_id: str, set_number: int) -> WorkoutSet | None:
        return self._by_exercise.get(exercise_id, {}).get(set_number)

    def exercise_ids(self) -> list[str]:
        return list(self._by_exercise)

    def for_exercise(self, exercise_id: str) -> list[WorkoutSet]:
        """Sets for one exercise ordered by set number."""
        by_number = self._by_exercise.get(exercise_id, {})
        return [by_number[number] for number in sorted(by_number)]

    def count(self, exercise_id: str) -> int:
        return len(self._by_exercise.get(exercise_id, {}))

    def next_set_number(self, exercise_id: str) -> int:
        by_number = self._by_exercise.get(exercise_id, {})
        return max(by_number, default=0) + 1

    def last_pending(self, exercise_id: str) -> WorkoutSet | None:
        """Highest-numbered pending set for an exercise, if any."""
        for workout_set in reversed(self.for_exercise(exercise_id)):
            if workout_set.status == "pending":
                return workout_set
        return None

    def __iter__(self) -> Iterator[WorkoutSet]:
        for exercise_id in self._by_exercise:
            yield from self.for_exercise(exercise_id)

    def __len__(self) -> int:
        return sum(len(by_number) for by_number in self._by_exercise.values())

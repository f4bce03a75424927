"""In-memory observable habit list.

Stands in for the UI framework's state store: it holds the current habits
(normalized) and notifies subscribers when the notification-relevant part
of the list changes. Updates that leave those fields untouched are not
broadcast.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging

from habit_reminders.features.reminders.models import Habit, habits_equal, normalize_habit

logger = logging.getLogger(__name__)

Listener = Callable[[list[Habit]], None]


class ReminderStateStore:
    def __init__(self, habits: Sequence[Habit] = ()) -> None:
        self._habits: list[Habit] = [normalize_habit(h) for h in habits]
        self._listeners: list[Listener] = []

    @property
    def habits(self) -> list[Habit]:
        return list(self._habits)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_habits(self, habits: Sequence[Habit]) -> bool:
        """Replace the habit list.

        Returns:
            True when the change was broadcast to subscribers.
        """
        normalized = [normalize_habit(h) for h in habits]
        if habits_equal(self._habits, normalized):
            return False
        self._habits = normalized
        self._emit()
        return True

    def upsert(self, habit: Habit) -> bool:
        """Add a habit or replace the one with the same id."""
        habits = list(self._habits)
        for index, existing in enumerate(habits):
            if existing.id == habit.id:
                habits[index] = habit
                break
        else:
            habits.append(habit)
        return self.set_habits(habits)

    def remove(self, habit_id: str) -> bool:
        return self.set_habits([h for h in self._habits if h.id != habit_id])

    def _emit(self) -> None:
        snapshot = self.habits
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Habit state listener failed")

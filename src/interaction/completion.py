# src/interaction/completion.py
"""
External completion override backed by quest progress.

The goal is considered externally satisfied as soon as the quest it serves
leaves the state the profile expects (e.g. it was completed through other
means, or abandoned). This is checked before anything else every tick.
"""

from __future__ import annotations

from contracts.collaborators import QuestProgress
from goals.schema import QuestCompleteRequirement, QuestGate, QuestInLogRequirement


def progress_requirements_met(quests: QuestProgress, gate: QuestGate) -> bool:
    """
    True while the quest is still in the state the goal expects.

    A gate with quest_id 0 has no requirements and is always met.
    """
    if gate.quest_id == 0:
        return True

    in_log = quests.is_in_log(gate.quest_id)
    if gate.in_log is QuestInLogRequirement.IN_LOG and not in_log:
        return False
    if gate.in_log is QuestInLogRequirement.NOT_IN_LOG and in_log:
        return False

    if gate.complete is QuestCompleteRequirement.ANY:
        return True
    complete = quests.is_complete(gate.quest_id)
    if gate.complete is QuestCompleteRequirement.COMPLETE:
        return complete
    return not complete


class CompletionEvaluator:
    """Answers "is the goal already done from the outside?"."""

    def __init__(self, quests: QuestProgress, gate: QuestGate) -> None:
        self._quests = quests
        self._gate = gate

    @property
    def gate(self) -> QuestGate:
        return self._gate

    def is_satisfied(self) -> bool:
        return not progress_requirements_met(self._quests, self._gate)

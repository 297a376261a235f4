from typing import Optional

from .config import UNDO_CONFIG
from .types import RedoFunc, UndoFunc
from podmix.utils.logger import logger


class UndoAction:
    __slots__ = ('description', 'undo_func', 'redo_func')

    def __init__(self, description: str, undo_func: UndoFunc, redo_func: RedoFunc):
        self.description = description
        self.undo_func = undo_func
        self.redo_func = redo_func


class UndoManager:
    def __init__(self, max_depth: int = UNDO_CONFIG.max_depth):
        self.undo_stack: list[UndoAction] = []
        self.redo_stack: list[UndoAction] = []
        self.max_depth = max_depth

    def __len__(self) -> int:
        return len(self.undo_stack)

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    @property
    def undo_description(self) -> Optional[str]:
        return self.undo_stack[-1].description if self.undo_stack else None

    @property
    def redo_description(self) -> Optional[str]:
        return self.redo_stack[-1].description if self.redo_stack else None

    def push_action(self, description, undo_func, redo_func):
        action = UndoAction(description, undo_func, redo_func)
        self.undo_stack.append(action)
        if len(self.undo_stack) > self.max_depth:
            self.undo_stack.pop(0)
        self.redo_stack.clear()
        logger.debug(f"Undo action pushed: {description}")

    def undo(self):
        if not self.undo_stack:
            logger.debug("Nothing to undo")
            return False

        action = self.undo_stack.pop()
        action.undo_func()
        self.redo_stack.append(action)
        logger.info(f"Undo: {action.description}")
        return True

    def redo(self):
        if not self.redo_stack:
            logger.debug("Nothing to redo")
            return False

        action = self.redo_stack.pop()
        action.redo_func()
        self.undo_stack.append(action)
        logger.info(f"Redo: {action.description}")
        return True

    def clear(self):
        self.undo_stack.clear()
        self.redo_stack.clear()
        logger.debug("Undo/Redo stacks cleared")

"""
Command queue for server mutations.

Each mutation is applied to the store optimistically, then sent to the
server as a Command that ends CONFIRMED or FAILED. A failure is recorded
on the command and reported to listeners; depending on the policy the
optimistic change is reverted or kept for a later retry.
"""
import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional

from client.api_client import ApiError, NoConnectionError
from client.state import AppState, StateRestored, Store

logger = logging.getLogger("habit_tracker.client.commands")


class CommandStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class ReconcilePolicy(str, Enum):
    REVERT = "revert"  # restore the state from before the command
    RETRY = "retry"    # keep the optimistic state until retry() succeeds


@dataclass
class Command:
    id: int
    description: str
    send: Callable[[], Any]
    action: Any = None
    confirm: Optional[Callable[[Any], Iterable]] = None
    status: CommandStatus = CommandStatus.PENDING
    snapshot: Optional[AppState] = None
    result: Any = None
    error: Optional[Exception] = None
    attempts: int = 0


class CommandQueue:
    """Runs commands against the server and reconciles the store"""

    def __init__(self, store: Store, policy: ReconcilePolicy = ReconcilePolicy.REVERT):
        self.store = store
        self.policy = policy
        self.commands: List[Command] = []
        self._ids = itertools.count(1)
        self._listeners: List[Callable[[Command], None]] = []

    def subscribe(self, listener: Callable[[Command], None]) -> None:
        """Listener is called whenever a command is confirmed or fails"""
        self._listeners.append(listener)

    def submit(self, description: str, send: Callable[[], Any], action=None,
               confirm: Optional[Callable[[Any], Iterable]] = None) -> Command:
        """
        Apply `action` locally, then call `send`.

        Args:
            description: Human readable label
            send: Performs the server request and returns its result
            action: Optimistic store action (None to wait for the server)
            confirm: Maps the server result to follow-up actions

        Returns:
            The command, already CONFIRMED or FAILED
        """
        command = Command(
            id=next(self._ids),
            description=description,
            send=send,
            action=action,
            confirm=confirm,
        )
        self.commands.append(command)
        self._apply_optimistic(command)
        return self._execute(command)

    def retry(self, command_id: int) -> Command:
        """Re-send a failed command"""
        command = self.get(command_id)
        if command is None or command.status is not CommandStatus.FAILED:
            raise ValueError(f"Command {command_id} is not a failed command")

        if self.policy is ReconcilePolicy.REVERT:
            # The optimistic change was rolled back, apply it again
            self._apply_optimistic(command)
        command.status = CommandStatus.PENDING
        command.error = None
        return self._execute(command)

    def get(self, command_id: int) -> Optional[Command]:
        return next((c for c in self.commands if c.id == command_id), None)

    def pending(self) -> List[Command]:
        return [c for c in self.commands if c.status is CommandStatus.PENDING]

    def failed(self) -> List[Command]:
        return [c for c in self.commands if c.status is CommandStatus.FAILED]

    def _apply_optimistic(self, command: Command) -> None:
        command.snapshot = self.store.state
        if command.action is not None:
            self.store.dispatch(command.action)

    def _execute(self, command: Command) -> Command:
        command.attempts += 1
        try:
            command.result = command.send()
        except (ApiError, NoConnectionError) as e:
            command.status = CommandStatus.FAILED
            command.error = e
            logger.warning(f"Command {command.id} ({command.description}) failed: {e}")
            if self.policy is ReconcilePolicy.REVERT and command.action is not None:
                self.store.dispatch(StateRestored(command.snapshot))
            self._notify(command)
            return command

        command.status = CommandStatus.CONFIRMED
        if command.confirm is not None:
            for follow_up in command.confirm(command.result) or ():
                self.store.dispatch(follow_up)
        self._notify(command)
        return command

    def _notify(self, command: Command) -> None:
        for listener in list(self._listeners):
            listener(command)

"""CI runner registration on projects."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Optional

from .exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from .hierarchy.models import Project

logger = logging.getLogger(__name__)

# Runner ids are server-wide, not per project.
_runner_ids = itertools.count(1)


@dataclass
class Runner:
    id: int
    name: str
    description: str
    active: bool
    locked: bool
    is_shared: bool
    ip_address: str = "0.0.0.0"
    online: bool = True


@dataclass(frozen=True)
class RunnerRef:
    """Non-owning link from a project to a runner enabled on it."""

    runner_id: int


class RunnerCollection:
    def __init__(self, project: Project) -> None:
        self._project = project
        self._runners: list[Runner] = []

    def add(self, runner: Runner) -> Runner:
        self._runners.append(runner)
        return runner

    def get(self, runner_id: int) -> Optional[Runner]:
        return next((r for r in self._runners if r.id == runner_id), None)

    def __iter__(self) -> Iterator[Runner]:
        return iter(list(self._runners))

    def __len__(self) -> int:
        return len(self._runners)


def register_runner(
    project: Project,
    name: str,
    description: str,
    active: bool,
    locked: bool,
    is_shared: bool,
) -> Runner:
    """Register a runner on ``project``; an active runner is also enabled there."""
    if not name:
        raise InvalidArgumentError("Runner name must not be empty")
    runner = Runner(
        id=next(_runner_ids),
        name=name,
        description=description,
        active=active,
        locked=locked,
        is_shared=is_shared,
    )
    project.registered_runners.add(runner)
    if active:
        project.enabled_runners.append(RunnerRef(runner.id))
    logger.debug("Registered runner %d (%s) active=%s", runner.id, name, active)
    return runner


__all__ = [
    "Runner",
    "RunnerCollection",
    "RunnerRef",
    "register_runner",
]

"""
The base classes for the units of work of an upgrade pass, and the single loop
that runs them in order.

Every step is idempotent: it inspects the live state and performs at most one
write. A step that writes (or fails) ends the pass, since anything after it may
have been computed from state the write just invalidated.
"""

# Standard
from dataclasses import dataclass
from typing import Callable, List, Optional
import abc
import re

# First Party
import alog

# Local
from ..session import Session

log = alog.use_channel("STEP")

# Type definition for the predicate gating a step
STEP_CONDITION = Callable[[Session], bool]


## Data models #################################################################


@dataclass
class MigrationOutcome:
    """MigrationOutcome is the result of running a single step"""

    # Whether the step wrote to the cluster
    mutated: bool = False
    # The error raised by the step, if any. Nothing can be assumed about
    # partial writes when this is set.
    error: Optional[Exception] = None

    @property
    def stop(self) -> bool:
        """Whether the pass must end here"""
        return self.mutated or self.error is not None


## Steps #######################################################################


class MigrationStep(abc.ABC):
    """A named unit of migration work"""

    def __init__(
        self,
        name: Optional[str] = None,
        condition: Optional[STEP_CONDITION] = None,
    ):
        """
        Args:
            name:  Optional[str]
                Name used in logs. Defaults to the snake_case class name.
            condition:  Optional[STEP_CONDITION]
                Predicate on the session; the step is skipped when it returns
                False
        """
        self.name = name or re.sub(
            r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])",
            "_",
            self.__class__.__name__,
        ).lower()
        self._condition = condition

    def __str__(self):
        return f"MigrationStep({self.name})"

    def __repr__(self):
        return str(self)

    def enabled(self, session: Session) -> bool:
        return self._condition is None or bool(self._condition(session))

    @abc.abstractmethod
    def migrate(self, session: Session) -> bool:
        """Perform the migration

        Args:
            session:  Session
                The session for the current pass

        Returns:
            mutated:  bool
                True if exactly one write was made to the cluster
        """

    def run(self, session: Session) -> MigrationOutcome:
        """Run the step, capturing any error on the outcome"""
        log.debug("Running %s", self)
        try:
            mutated = self.migrate(session)
        except Exception as err:  # pylint: disable=broad-except
            log.warning("Error in %s: %s", self, err, exc_info=True)
            return MigrationOutcome(error=err)
        log.debug2("%s mutated: %s", self, mutated)
        return MigrationOutcome(mutated=bool(mutated))


class StepGroup(MigrationStep):
    """A step composed of ordered sub-steps"""

    def __init__(
        self,
        name: str,
        steps: Optional[List[MigrationStep]] = None,
        condition: Optional[STEP_CONDITION] = None,
    ):
        super().__init__(name=name, condition=condition)
        self.steps = steps or []

    def __str__(self):
        return f"StepGroup({self.name})"

    def children(self, session: Session) -> List[MigrationStep]:
        """The sub-steps to run for this session, in order"""
        return self.steps

    def migrate(self, session: Session) -> bool:
        outcome = self.run(session)
        if outcome.error is not None:
            raise outcome.error
        return outcome.mutated

    def run(self, session: Session) -> MigrationOutcome:
        return run_steps(self.children(session), session)


def run_steps(steps: List[MigrationStep], session: Session) -> MigrationOutcome:
    """Run steps strictly in order and stop at the first one that mutated the
    cluster or failed. That step's outcome is returned unchanged.
    """
    for step in steps:
        if not step.enabled(session):
            log.debug("Skipping disabled %s", step)
            continue
        outcome = step.run(session)
        if outcome.stop:
            log.debug2("Stopping after %s: %s", step, outcome)
            return outcome
    return MigrationOutcome()

import abc
from typing import List, NamedTuple, Tuple
from .model import JobRecord


CommandResult = NamedTuple('CommandResult', [
    ('exit_code', int), ('stdout', str), ('stderr', str)
])


class CommandRunnerInterface(abc.ABC):
    """ Executes a command given as an argument list, locally or on some other host """

    @abc.abstractmethod
    def exec(self, argv: List[str]) -> CommandResult:
        pass


class SchedulerInterface(abc.ABC):
    """ Job metadata lookup, the part of the scheduler API the tunnel needs """

    @abc.abstractmethod
    def get_job_records(self, job_id: int) -> List[JobRecord]:
        """
        :raises SchedulerError: when the scheduler could not be asked at all
        :return: All records matching the id, an empty list when there is no such job
        """
        pass

    @abc.abstractmethod
    def expand_hostlist(self, compact: str) -> List[str]:
        pass


class HookContextInterface(abc.ABC):
    """ What a lifecycle hook knows about where and for which job it was called """

    @abc.abstractmethod
    def get_job_and_step(self) -> Tuple[int, int]:
        """
        :raises HookContextError:
        """
        pass

    @abc.abstractmethod
    def is_remote(self) -> bool:
        pass

    def __str__(self):
        return '%s<remote=%s>' % (self.__class__.__name__, str(self.is_remote()))

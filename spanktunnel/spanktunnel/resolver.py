
from .interfaces import SchedulerInterface
from .model import JobContext
from .exceptions import JobNotFoundError, NoAllocationError, SchedulerError, HostlistError
from .logger import Logger


class JobContextResolver(object):
    """
    Finds out where the job landed. Called once per job, on the submission side
    """

    _scheduler: SchedulerInterface

    def __init__(self, scheduler: SchedulerInterface):
        self._scheduler = scheduler

    def resolve(self, job_id: int, step_id: int) -> JobContext:
        """
        :raises JobNotFoundError: no record, more than one record, or the scheduler could not be asked
        :raises NoAllocationError: the job has no nodes allocated (yet)
        """

        try:
            records = self._scheduler.get_job_records(job_id)
        except SchedulerError as e:
            raise JobNotFoundError('Unable to get job infos for job %i: %s' % (job_id, str(e)))

        if len(records) != 1:
            raise JobNotFoundError('Job infos are invalid, got %i records for job %i' % (len(records), job_id))

        record = records[0]

        if not record.node_list:
            raise NoAllocationError('Job %i has no allocated nodes defined' % job_id)

        try:
            nodes = self._scheduler.expand_hostlist(record.node_list)
        except HostlistError as e:
            raise NoAllocationError('Cannot read allocated nodes of job %i: %s' % (job_id, str(e)))

        if not nodes:
            raise NoAllocationError('Job %i has no allocated nodes defined' % job_id)

        context = JobContext(
            job_id=job_id,
            step_id=step_id,
            allocated_nodes=tuple(nodes),
            user_id=record.user_id
        )

        Logger.debug('Resolved %s' % str(context))

        return context

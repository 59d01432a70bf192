
import os
from typing import Mapping, Optional, Tuple
from .interfaces import HookContextInterface
from .exceptions import HookContextError


class EnvironmentHookContext(HookContextInterface):
    """
    Hook context read from the environment Slurm sets up for prologs, srun and job steps

    SLURMD_NODENAME is only present on the execution side, that's where the remote context is recognized from
    """

    _environ: Mapping[str, str]
    _job_id: Optional[int]
    _step_id: Optional[int]
    _remote: Optional[bool]

    def __init__(self, environ: Mapping[str, str] = None, job_id: int = None, step_id: int = None,
                 remote: bool = None):
        self._environ = environ if environ is not None else os.environ
        self._job_id = job_id
        self._step_id = step_id
        self._remote = remote

    def get_job_and_step(self) -> Tuple[int, int]:
        job_id = self._job_id if self._job_id is not None else self._read_id('SLURM_JOB_ID', 'SLURM_JOBID')
        step_id = self._step_id if self._step_id is not None else self._read_id('SLURM_STEP_ID', 'SLURM_STEPID')

        return job_id, step_id

    def is_remote(self) -> bool:
        if self._remote is not None:
            return self._remote

        return bool(self._environ.get('SLURMD_NODENAME'))

    def _read_id(self, *names: str) -> int:
        for name in names:
            value = self._environ.get(name)

            if value is None:
                continue

            if not value.isdigit():
                raise HookContextError('%s="%s" is not a valid id' % (name, value))

            return int(value)

        raise HookContextError('None of %s is set in the environment' % ', '.join(names))

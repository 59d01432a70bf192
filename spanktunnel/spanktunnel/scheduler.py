
import re
import subprocess
from typing import List, Dict
from .interfaces import SchedulerInterface, CommandRunnerInterface, CommandResult
from .model import JobRecord
from .exceptions import SchedulerError
from .network.hostlist import expand_hostlist
from .logger import Logger

# fields printed after NodeList that carry arbitrary user text
FREE_TEXT_KEYS = ['Comment', 'AdminComment', 'SystemComment', 'Command', 'WorkDir', 'StdErr', 'StdIn', 'StdOut']


class LocalCommandRunner(CommandRunnerInterface):
    """
    Runs scheduler commands on this host
    """

    _timeout: int

    def __init__(self, timeout: int = 20):
        self._timeout = timeout

    def exec(self, argv: List[str]) -> CommandResult:
        Logger.debug('Local cmd: %s' % ' '.join(argv))

        try:
            proc = subprocess.run(argv, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                                  stdin=subprocess.DEVNULL, timeout=self._timeout)
        except subprocess.TimeoutExpired:
            raise SchedulerError('"%s" did not finish in %i seconds' % (' '.join(argv), self._timeout))
        except OSError as e:
            raise SchedulerError('Cannot execute "%s": %s' % (' '.join(argv), str(e)))

        return CommandResult(
            exit_code=proc.returncode,
            stdout=proc.stdout.decode('utf-8', errors='replace'),
            stderr=proc.stderr.decode('utf-8', errors='replace')
        )


class ScontrolScheduler(SchedulerInterface):
    """
    Job metadata from `scontrol show job --oneliner`, one job record per output line
    """

    _runner: CommandRunnerInterface
    _scontrol: str

    def __init__(self, runner: CommandRunnerInterface, scontrol: str = 'scontrol'):
        self._runner = runner
        self._scontrol = scontrol

    def get_job_records(self, job_id: int) -> List[JobRecord]:
        result = self._runner.exec([self._scontrol, 'show', 'job', str(job_id), '--oneliner'])

        if result.exit_code != 0:
            if 'Invalid job id' in result.stderr:
                Logger.debug('scontrol does not know job %i' % job_id)
                return []

            raise SchedulerError('scontrol failed for job %i (exit code %i): %s' % (
                job_id, result.exit_code, result.stderr.strip()))

        records = []

        for line in result.stdout.split("\n"):
            if not line.strip():
                continue

            records.append(self._parse_record(self.parse_key_values(line)))

        return records

    def expand_hostlist(self, compact: str) -> List[str]:
        return expand_hostlist(compact)

    @staticmethod
    def parse_key_values(line: str) -> Dict[str, str]:
        """
        Splits `JobId=100 UserId=alice(1000) NodeList=node[1-2]` into a dictionary

        User-controlled text may contain words looking like "NodeList=...", so the first occurrence of a key wins,
        a job name is skipped up to the UserId that always follows it, and the parsing ends at the first
        free-text field
        """

        values = {}
        in_job_name = False

        for part in line.split():
            if '=' not in part:
                continue

            key, value = part.split('=', 1)

            if in_job_name and key != 'UserId':
                continue

            in_job_name = False

            if key in FREE_TEXT_KEYS:
                break

            if key == 'JobName':
                in_job_name = True

            values.setdefault(key, value)

        return values

    @staticmethod
    def _parse_record(values: Dict[str, str]) -> JobRecord:
        if 'JobId' not in values or not values['JobId'].isdigit():
            raise SchedulerError('scontrol returned a job record without a JobId: %s' % str(values))

        # UserId=alice(1000), only the number is reliable
        user = values.get('UserId', '')
        uid_match = re.search(r'\(([0-9]+)\)', user) or re.fullmatch(r'([0-9]+)', user)

        if not uid_match:
            raise SchedulerError('Cannot read the owner of job %s from "UserId=%s"' % (
                values['JobId'], user))

        node_list = values.get('NodeList', '')

        if node_list == '(null)':
            node_list = ''

        return JobRecord(
            job_id=int(values['JobId']),
            user_id=int(uid_match.group(1)),
            node_list=node_list
        )


import os
import unittest
from unittest_data_provider import data_provider

from ..spanktunnel.manager.sysprocess import DetachedProcessManager
from ..spanktunnel.exceptions import SpawnFailedError
from ..spanktunnel.logger import setup_dummy_logger


def outputs():
    return [
        ['echo 54321', '54321'],
        ['printf "  \\n\\t 54321 and more"', '54321'],
        ['printf "54321"', '54321'],
        ['printf "%0300d\\n" 7', '0' * 255],
        ['exit 0', ''],
        ['printf "   \\n"', '']
    ]


class DetachedProcessManagerTest(unittest.TestCase):
    def setUp(self) -> None:
        setup_dummy_logger()

    @data_provider(outputs)
    def test_read_token(self, script: str, expected: str):
        manager = DetachedProcessManager()
        proc = manager.spawn(['/bin/sh', '-c', script])

        self.assertEqual(expected, manager.read_token(proc, timeout=10))
        assert proc.stdout.closed

        proc.wait(timeout=10)

    def test_read_token_gives_up_after_timeout_without_killing(self):
        """
        Scenario: The helper does not print anything in time
        Expectation: Empty token, pipe closed, process still running

        :return:
        """

        manager = DetachedProcessManager()
        proc = manager.spawn(['/bin/sh', '-c', 'exec sleep 3'])

        self.assertEqual('', manager.read_token(proc, timeout=0.2))
        assert proc.stdout.closed
        assert manager.is_alive(proc.pid)

        proc.kill()
        proc.wait(timeout=10)

    def test_spawn_of_missing_program_fails(self):
        with self.assertRaises(SpawnFailedError):
            DetachedProcessManager.spawn(['/non-existing/stunnel', '-i', '1.0', '-r'])

    def test_spawn_without_capture(self):
        proc = DetachedProcessManager.spawn(['/bin/sh', '-c', 'exit 0'], capture_output=False)

        assert proc.stdout is None
        self.assertEqual(0, proc.wait(timeout=10))

    def test_find_processes_by_signature(self):
        manager = DetachedProcessManager()
        proc = manager.spawn(['/bin/sh', '-c', 'sleep 3; exit 0 # -i 987654.3'], capture_output=False)

        try:
            found = manager.find_processes_by_signature('-i 987654.3', program='/bin/sh')

            self.assertEqual([proc.pid], [process.pid for process in found])
            self.assertEqual([], manager.find_processes_by_signature('-i 987654.4'))
            assert os.getpid() not in [process.pid for process in manager.find_processes_by_signature('')]
        finally:
            proc.kill()
            proc.wait(timeout=10)

    def test_signature_matches_whole_tag_only(self):
        """
        Scenario: Helpers of steps 1 and 10 of the same job are running
        Expectation: Looking up step 1 finds only the step 1 helper

        :return:
        """

        manager = DetachedProcessManager()
        step_one = manager.spawn(['/bin/sh', '-c', 'sleep 3; exit 0 # -i 987654.1 -r'], capture_output=False)
        step_ten = manager.spawn(['/bin/sh', '-c', 'sleep 3; exit 0 # -i 987654.10'], capture_output=False)

        try:
            self.assertEqual([step_one.pid], [process.pid for process in
                                              manager.find_processes_by_signature('-i 987654.1', program='/bin/sh')])
            self.assertEqual([step_ten.pid], [process.pid for process in
                                              manager.find_processes_by_signature('-i 987654.10', program='/bin/sh')])
        finally:
            for proc in [step_one, step_ten]:
                proc.kill()
                proc.wait(timeout=10)

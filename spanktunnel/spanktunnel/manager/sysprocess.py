
import os
import re
import time
import selectors
import subprocess
import psutil
from typing import List
from ..exceptions import SpawnFailedError
from ..logger import Logger


class DetachedProcessManager:
    """
    Spawns helper processes that outlive the hook which started them.
    Nothing here waits for, restarts or kills a spawned process
    """

    """
    System process helper methods
    """

    @staticmethod
    def spawn(cmd: List[str], capture_output: bool = True) -> subprocess.Popen:
        Logger.debug('Spawning %s' % ' '.join(cmd))

        try:
            return subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE if capture_output else subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True
            )
        except (OSError, ValueError) as e:
            raise SpawnFailedError('Unable to exec "%s": %s' % (cmd[0] if cmd else '', str(e)))

    @staticmethod
    def read_token(proc: subprocess.Popen, timeout: float, limit: int = 255) -> str:
        """
        Reads the first whitespace-delimited word the process writes to stdout, at most `limit` bytes of it

        Gives up when the process closes its stdout or the timeout passes. The pipe is closed in every case,
        the process itself is left running

        :return: The word, or an empty string when nothing complete was read
        """

        complete = re.compile(rb'\s*(\S+)\s')
        truncated = re.compile(rb'\s*(\S{%i})' % limit)
        partial = re.compile(rb'\s*(\S+)')

        selector = selectors.DefaultSelector()
        selector.register(proc.stdout, selectors.EVENT_READ)
        deadline = time.monotonic() + timeout
        buffer = b''
        token = b''

        try:
            while True:
                match = complete.match(buffer) or truncated.match(buffer)

                if match:
                    token = match.group(1)[:limit]
                    break

                remaining = deadline - time.monotonic()

                if remaining <= 0 or not selector.select(remaining):
                    Logger.debug('No complete output from pid=%i within %.1fs' % (proc.pid, timeout))
                    break

                chunk = os.read(proc.stdout.fileno(), 256)

                if not chunk:
                    # the writer went away, what is already there is all we get
                    match = partial.match(buffer)
                    token = match.group(1)[:limit] if match else b''
                    break

                buffer += chunk
        finally:
            selector.close()
            proc.stdout.close()

        return token.decode('utf-8', errors='replace')

    @staticmethod
    def is_alive(pid: int) -> bool:
        try:
            return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False

    @staticmethod
    def find_processes_by_signature(signature: str, program: str = '') -> List[psutil.Process]:
        """ Processes whose command line contains the signature as whole words, ex. "-i 100.1" but not "-i 100.10" """

        pattern = re.compile(r'(^|\s)' + re.escape(signature) + r'(\s|$)')
        found = []

        for proc in psutil.process_iter(['pid', 'cmdline']):
            if proc.info['pid'] == os.getpid():
                continue

            cmdline = " ".join(proc.info['cmdline'] or [])

            if pattern.search(cmdline) and program in cmdline:
                found.append(proc)

        return found


import re
from typing import List
from ..exceptions import HostlistError


class HostlistParser(object):
    """
    Compact Slurm hostlist parser

    Expands `node[01-03,07],gpu5,rack[1-2]-n[1-2]` into an ordered list of hostnames, keeping the order
    in which the scheduler listed them. It does the same job as `scontrol show hostnames`, without a process
    spawned for every job.
    """

    _hosts: List[str]

    def __init__(self, hostlist: str):
        self._hosts = []
        self._parse(hostlist.strip())

    def _parse(self, hostlist: str):
        if not hostlist or hostlist == '(null)':
            return

        for item in self._split_top_level(hostlist):
            self._hosts += self._expand_item(item)

    @staticmethod
    def _split_top_level(hostlist: str) -> List[str]:
        """ Commas inside brackets belong to ranges, only the ones outside separate the hosts """

        items = []
        depth = 0
        current = ''

        for char in hostlist:
            if char == '[':
                depth += 1

                if depth > 1:
                    raise HostlistError('Nested brackets are not allowed in hostlist "%s"' % hostlist)

            elif char == ']':
                depth -= 1

                if depth < 0:
                    raise HostlistError('Unbalanced "]" in hostlist "%s"' % hostlist)

            if char == ',' and depth == 0:
                items.append(current)
                current = ''
                continue

            current += char

        if depth != 0:
            raise HostlistError('Unbalanced "[" in hostlist "%s"' % hostlist)

        items.append(current)

        if '' in [item.strip() for item in items]:
            raise HostlistError('Empty host name in hostlist "%s"' % hostlist)

        return [item.strip() for item in items]

    def _expand_item(self, item: str) -> List[str]:
        match = re.search(r'\[([^\]]*)\]', item)

        if not match:
            return [item]

        prefix = item[:match.start()]
        suffix = item[match.end():]
        expanded = []

        for value in self._expand_ranges(match.group(1), item):
            # following bracket groups are expanded for each value of the first one
            expanded += self._expand_item(prefix + value + suffix)

        return expanded

    @staticmethod
    def _expand_ranges(ranges: str, item: str) -> List[str]:
        values = []

        for part in ranges.split(','):
            match = re.fullmatch(r'\s*([0-9]+)(?:-([0-9]+))?\s*', part)

            if not match:
                raise HostlistError('Cannot parse range "%s" in "%s"' % (part, item))

            start_raw, end_raw = match.group(1), match.group(2)

            if end_raw is None:
                values.append(start_raw)
                continue

            start, end = int(start_raw), int(end_raw)

            if end < start:
                raise HostlistError('Range "%s" in "%s" is descending' % (part, item))

            width = len(start_raw) if start_raw.startswith('0') else 0

            for number in range(start, end + 1):
                values.append(str(number).zfill(width))

        return values

    @property
    def hosts(self) -> List[str]:
        """
        Hostnames in the scheduler-assigned order

        `node[01-02],gpu5` gives ['node01', 'node02', 'gpu5']

        :return:
        """

        return list(self._hosts)


def expand_hostlist(hostlist: str) -> List[str]:
    return HostlistParser(hostlist).hosts

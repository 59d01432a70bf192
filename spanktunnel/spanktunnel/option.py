
import re
from typing import Optional, Union
from .model import PortForwarding, TunnelSpec
from .exceptions import InvalidFormatError
from .logger import Logger

OPTION_NAME = 'tunnel'
OPTION_ARG_INFO = '<submit port:exec port[,submit port:exec port,...]>'
OPTION_USAGE = 'Forward exec host port to submit host port via ssh -L'

MIN_PORT = 1
MAX_PORT = 65535


def parse_port(raw: str, value: str) -> int:
    if not re.fullmatch(r"[0-9]+", raw):
        raise InvalidFormatError('Bad value for --%s: "%s", "%s" is not a port number' % (OPTION_NAME, value, raw))

    port = int(raw)

    if port < MIN_PORT or port > MAX_PORT:
        raise InvalidFormatError('Bad value for --%s: "%s", port %i is out of the %i-%i range' % (
            OPTION_NAME, value, port, MIN_PORT, MAX_PORT))

    return port


def parse_tunnel_option(value: Optional[str]) -> TunnelSpec:
    """
    Parses "submit port:exec port[,submit port:exec port,...]"

    :raises InvalidFormatError:
    :param value:
    :return:
    """

    if value is None or not value.strip():
        raise InvalidFormatError('--%s requires at least one %s pair' % (OPTION_NAME, OPTION_ARG_INFO))

    forwardings = []

    for entry in value.split(','):
        parts = entry.strip().split(':')

        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise InvalidFormatError('Bad value for --%s: "%s", expected a submit port:exec port pair, got "%s"' % (
                OPTION_NAME, value, entry))

        forwardings.append(PortForwarding(
            submit_port=parse_port(parts[0], value),
            exec_port=parse_port(parts[1], value)
        ))

    return TunnelSpec(forwardings)


class TunnelOption(object):
    """
    Holds the --tunnel value between option parsing and the job setup
    """

    spec: Union[TunnelSpec, None]

    def __init__(self):
        self.spec = None

    def process(self, value: Optional[str]) -> TunnelSpec:
        try:
            self.spec = parse_tunnel_option(value)
        except InvalidFormatError as e:
            Logger.error(str(e))
            raise

        Logger.debug('Requested forwarding of %s' % str(self.spec))

        return self.spec

    @property
    def is_set(self) -> bool:
        return self.spec is not None and len(self.spec) > 0

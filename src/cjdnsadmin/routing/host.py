"""
A host discovered in the routing table, with reachability probes.
"""
import logging
import time
from typing import Dict, Optional

from ..admin.exceptions import ProtocolError

try:
    from scapy.layers.inet import TCP
    from scapy.layers.inet6 import IPv6
    from scapy.sendrecv import sr1
    SCAPY_AVAILABLE = True
except ImportError:
    SCAPY_AVAILABLE = False

logger = logging.getLogger(__name__)

TCP_SYN_ACK = 0x12
TCP_RST = 0x04


class Host:
    """An address on the cjdns network."""

    def __init__(self, address: str, session=None):
        self.address = address
        self.session = session

    def __repr__(self):
        return f"Host({self.address!r})"

    def __eq__(self, other):
        return isinstance(other, Host) and other.address == self.address

    def __hash__(self):
        return hash(self.address)

    def ping_cjdns(self, timeout: float = 1) -> Optional[Dict[str, float]]:
        """
        Router-level ping through RouterModule_pingNode.

        Returns {'time': ms} or None if the host did not answer.
        """
        if self.session is None:
            raise RuntimeError("host has no admin session to ping through")

        try:
            response = self.session.ping_node(self.address, int(timeout * 1000))
        except ProtocolError as e:
            logger.debug("cjdns ping to %s failed: %s", self.address, e)
            return None

        if response.get("result") != "pong":
            return None
        return {"time": response.get("ms")}

    def ping_tcp(self, port: int = 7, timeout: float = 5) -> Optional[Dict[str, float]]:
        """
        TCP SYN probe (port 7 by default).

        A SYN-ACK or a RST both mean the host is up. Sending raw packets
        needs the privileges scapy needs.

        Returns {'time': ms} or None if nothing came back.
        """
        if not SCAPY_AVAILABLE:
            raise RuntimeError("Scapy not available. Install with: pip install scapy")

        start = time.time()
        reply = sr1(IPv6(dst=self.address) / TCP(dport=port, flags="S"),
                    timeout=timeout, verbose=0)
        elapsed = (time.time() - start) * 1000

        if reply is None or not reply.haslayer(TCP):
            return None

        flags = int(reply[TCP].flags)
        if flags & TCP_SYN_ACK == TCP_SYN_ACK or flags & TCP_RST:
            return {"time": elapsed}
        return None

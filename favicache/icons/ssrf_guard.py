"""Guard that keeps outbound icon requests away from internal or blacklisted hosts."""

import asyncio
import ipaddress
import logging
import re
import socket
from typing import Optional

logger = logging.getLogger(__name__)

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

# Well-known NAT64 prefix: the low 32 bits embed the IPv4 address being reached.
NAT64_NETWORK: ipaddress.IPv6Network = ipaddress.IPv6Network("64:ff9b::/96")


def is_global_address(ip: IPAddress) -> bool:
    """Check whether an address is routable on the public internet."""
    if isinstance(ip, ipaddress.IPv6Address):
        if ip.ipv4_mapped is not None:
            ip = ip.ipv4_mapped
        elif ip in NAT64_NETWORK:
            ip = ipaddress.IPv4Address(int(ip) & 0xFFFFFFFF)

    if (
        ip.is_loopback
        or ip.is_link_local
        or ip.is_private
        or ip.is_multicast
        or ip.is_unspecified
        or ip.is_reserved
    ):
        return False

    return ip.is_global


class SsrfGuard:
    """Decide whether a host may be contacted.

    A host is blocked when it resolves to any non-global address (if that check is
    enabled) or when it matches the configured blacklist pattern. The guard has to
    be consulted for every host derived from untrusted input, including redirect
    targets and icon links found in fetched pages.

    The check happens before the request and the HTTP client resolves the host again
    when connecting, so a DNS record that changes in between is not caught.
    """

    blacklist_non_global_ips: bool
    blacklist_pattern: Optional[re.Pattern]

    def __init__(
        self, blacklist_non_global_ips: bool = True, blacklist_regex: Optional[str] = None
    ) -> None:
        self.blacklist_non_global_ips = blacklist_non_global_ips
        self.blacklist_pattern = re.compile(blacklist_regex) if blacklist_regex else None

    async def resolve_addresses(self, host: str) -> list[IPAddress]:
        """Resolve a host to its addresses. IP literals are returned as is.

        Raises:
            - `OSError` (including `socket.gaierror`) if the host can't be resolved.
        """
        try:
            return [ipaddress.ip_address(host.strip("[]"))]
        except ValueError:
            pass

        loop = asyncio.get_running_loop()
        infos = await loop.getaddrinfo(host, 0, type=socket.SOCK_STREAM)
        # The scope id of link-local IPv6 addresses (`fe80::1%eth0`) is not needed here.
        return [ipaddress.ip_address(str(info[4][0]).split("%", 1)[0]) for info in infos]

    async def _has_non_global_address(self, host: str) -> bool:
        try:
            addresses = await self.resolve_addresses(host)
        except (OSError, UnicodeError) as e:
            # Resolution failures don't block, the request itself will fail later.
            logger.debug(f"Could not resolve {host}: {e}")
            return False

        for ip in addresses:
            if not is_global_address(ip):
                logger.warning(
                    f"IP {ip} for domain '{host}' is not a global IP!",
                    extra={"host": host, "ip": str(ip)},
                )
                return True
        return False

    async def is_blocked(self, host: str) -> bool:
        """Return True if requests to `host` must not be made."""
        if not host:
            return True

        if self.blacklist_non_global_ips and await self._has_non_global_address(host):
            return True

        if self.blacklist_pattern is not None and self.blacklist_pattern.search(host):
            logger.warning(
                f"Blacklisted domain: {host!r} matched {self.blacklist_pattern.pattern!r}",
                extra={"host": host, "pattern": self.blacklist_pattern.pattern},
            )
            return True

        return False

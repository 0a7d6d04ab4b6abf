"""SrvResolver backed by dnspython."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import dns.exception
import dns.rdatatype
import dns.resolver

from .errors import ResolutionError
from .records import LookupResult
from .resolver import SrvResolver

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


def _resolver(
    timeout_seconds: float,
    cache_lookups: bool,
    nameservers: Optional[Sequence[str]],
) -> dns.resolver.Resolver:
    r = dns.resolver.Resolver(configure=not nameservers)
    if nameservers:
        r.nameservers = list(nameservers)
    r.lifetime = timeout_seconds
    r.timeout = timeout_seconds
    if cache_lookups:
        r.cache = dns.resolver.Cache()
    return r


class DnsPythonSrvResolver(SrvResolver):
    """Resolve SRV records with dnspython.

    Brief:
      - NXDOMAIN and NoAnswer are "no records": an empty list is returned.
      - Every other failure (timeouts, unreachable nameservers, ...) raises
        ResolutionError chained to the dnspython exception.

    Inputs:
      - timeout_seconds: Positive total lifetime of one lookup.
      - cache_lookups: Keep answers in dnspython's in-process cache for their TTL.
      - nameservers: Optional explicit nameserver addresses; system
        configuration is used when omitted.
      - dns_resolver: Optional pre-built dns.resolver.Resolver (tests).

    Outputs:
      - SrvResolver answering synchronously.

    Example:
      >>> r = DnsPythonSrvResolver(timeout_seconds=2.0)
      >>> r.resolve("_xmpp-server._tcp.example.com")  # doctest: +SKIP
      [LookupResult(host='xmpp.example.com.', port=5269, priority=5, weight=0, ttl=900)]
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        *,
        cache_lookups: bool = False,
        nameservers: Optional[Sequence[str]] = None,
        dns_resolver: Optional[dns.resolver.Resolver] = None,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError(f"timeout must be positive, got {timeout_seconds}")
        self.timeout_seconds = float(timeout_seconds)
        self._resolver = dns_resolver or _resolver(
            self.timeout_seconds, cache_lookups, nameservers
        )

    def resolve(self, fqdn: str) -> List[LookupResult]:
        try:
            answer = self._resolver.resolve(
                fqdn, dns.rdatatype.SRV, raise_on_no_answer=True
            )
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer) as exc:
            logger.warning("No results returned for query '%s': %s", fqdn, exc)
            return []
        except dns.exception.DNSException as exc:
            raise ResolutionError(
                f"Lookup of '{fqdn}' failed: {exc}", fqdn=fqdn
            ) from exc

        ttl = int(answer.rrset.ttl) if answer.rrset is not None else 0
        results: List[LookupResult] = []
        for rdata in answer:
            if rdata.rdtype != dns.rdatatype.SRV:
                continue
            results.append(
                LookupResult(
                    host=rdata.target.to_text(),
                    port=int(rdata.port),
                    priority=int(rdata.priority),
                    weight=int(rdata.weight),
                    ttl=ttl,
                )
            )
        return results

"""DNS utility functions for SUBPACE.

This module provides utility functions for DNS operations, including domain
validation, name server address parsing, and the dnspython-backed resolver
client used by the scheduler. The resolver client never raises for a failed
lookup; every failure is reported as one of the LookupFailure cases.
"""

import ipaddress
import logging
import re
from typing import Optional, Tuple

import dns.exception
import dns.resolver
from dns.asyncresolver import Resolver

from subpace.core.exceptions import ConfigurationError, ValidationError
from subpace.core.interfaces import LookupFailure, LookupOutcome, ResolverClient

DEFAULT_DNS_PORT = 53

# Letters, digits, hyphens and underscores; no hyphen at either end
LABEL_PATTERN = re.compile(r'^[a-zA-Z0-9_]([a-zA-Z0-9\-_]{0,61}[a-zA-Z0-9_])?$')


class DNSUtils:
    """DNS utility functions for domain validation and resolver setup.

    Attributes:
        logger: Logger instance for this class
    """

    def __init__(self):
        """Initialize DNS utilities."""
        self.logger = logging.getLogger('subpace.dns_utils')

    def validate_domain(self, domain: str) -> bool:
        """Validate if a string is a valid domain name.

        Single-label names, numeric and punycode (xn--) top-level labels and
        one trailing dot are accepted.

        Args:
            domain: Domain name to validate

        Returns:
            True if domain is valid

        Raises:
            ValidationError: If domain is invalid
        """
        if not domain or not isinstance(domain, str):
            raise ValidationError("Domain must be a non-empty string")

        # A single trailing dot marks a fully qualified name
        name = domain[:-1] if domain.endswith('.') else domain
        if not name or len(name) > 253:
            raise ValidationError(f"Invalid domain format: {domain}")

        if not all(LABEL_PATTERN.match(label) for label in name.split('.')):
            raise ValidationError(f"Invalid domain format: {domain}")

        return True

    def parse_nameserver(self, value: str) -> Tuple[str, int]:
        """Parse a name server address.

        Accepted forms are "1.1.1.1", "1.1.1.1:53", "2606:4700::1111" and
        "[2606:4700::1111]:53". The port defaults to 53.

        Args:
            value: Name server address as given on the command line

        Returns:
            Tuple (address, port)

        Raises:
            ConfigurationError: If the address or port is invalid
        """
        if not value or not isinstance(value, str):
            raise ConfigurationError("Name server address must be a non-empty string")

        host, port_text = value, None
        if value.startswith('['):
            match = re.match(r'^\[([^\]]+)\](?::(\d+))?$', value)
            if not match:
                raise ConfigurationError(f"Invalid name server address: {value}")
            host, port_text = match.group(1), match.group(2)
        elif value.count(':') == 1:
            host, port_text = value.split(':')

        try:
            address = ipaddress.ip_address(host)
        except ValueError as e:
            raise ConfigurationError(f"Invalid name server address: {value}") from e

        port = DEFAULT_DNS_PORT
        if port_text is not None:
            if not port_text.isdigit() or not 0 < int(port_text) < 65536:
                raise ConfigurationError(f"Invalid name server port: {value}")
            port = int(port_text)

        return str(address), port


class DNSPythonResolver(ResolverClient):
    """Resolver client backed by dnspython's asynchronous resolver.

    Looks up both A and AAAA records for each name. Without an explicit name
    server the system resolver configuration is used.

    Attributes:
        timeout: Total time allowed for one lookup, in seconds
        nameserver: Optional (address, port) of the name server to query
        tcp: Whether to query over TCP instead of UDP
        resolver: dnspython asynchronous resolver instance
    """

    def __init__(self, nameserver: Optional[Tuple[str, int]] = None,
                 timeout: float = 5.0, tcp: bool = False):
        """Initialize the resolver client.

        Args:
            nameserver: Optional (address, port) of the name server to query
            timeout: Total time allowed for one lookup, in seconds
            tcp: Query over TCP instead of UDP

        Raises:
            ConfigurationError: If no name server is given and the system
                resolver configuration cannot be read
        """
        self.timeout = timeout
        self.nameserver = nameserver
        self.tcp = tcp
        self.logger = logging.getLogger('subpace.dns_utils')

        try:
            self.resolver = Resolver(configure=nameserver is None)
        except dns.resolver.NoResolverConfiguration as e:
            raise ConfigurationError("No system resolver configuration found; use --ns") from e

        if nameserver is not None:
            address, port = nameserver
            # The port applies to name servers assigned after it
            self.resolver.port = port
            self.resolver.nameservers = [address]
        self.resolver.timeout = timeout
        self.resolver.lifetime = timeout

    async def lookup(self, name: str) -> LookupOutcome:
        """Resolve a name to its IP addresses.

        Args:
            name: Name to resolve (e.g., www.example.com)

        Returns:
            LookupOutcome with the addresses found or the failure case
        """
        try:
            answer = await self.resolver.resolve_name(name, tcp=self.tcp)
            addresses = list(answer.addresses())
        except dns.exception.Timeout as e:
            self.logger.debug(f"Timeout resolving {name}")
            return LookupOutcome.failed(LookupFailure.TIMEOUT, e)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer) as e:
            self.logger.debug(f"No records for {name}")
            return LookupOutcome.failed(LookupFailure.NO_RECORDS_FOUND, e)
        except Exception as e:
            self.logger.debug(f"Error resolving {name}: {e}")
            return LookupOutcome.failed(LookupFailure.OTHER, e)

        if not addresses:
            return LookupOutcome.failed(LookupFailure.NO_RECORDS_FOUND)
        return LookupOutcome.success(addresses)


def build_resolver(nameserver: Optional[str] = None, timeout: float = 5.0,
                   tcp: bool = False) -> DNSPythonResolver:
    """Create the resolver client for a scan.

    Args:
        nameserver: Optional name server address as given on the command line
        timeout: Total time allowed for one lookup, in seconds
        tcp: Query over TCP instead of UDP

    Returns:
        Configured resolver client

    Raises:
        ConfigurationError: If the name server address is invalid or no
            resolver configuration is available
    """
    parsed = DNSUtils().parse_nameserver(nameserver) if nameserver else None
    return DNSPythonResolver(nameserver=parsed, timeout=timeout, tcp=tcp)

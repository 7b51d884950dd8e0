"""
Unit tests for DNS utilities.
"""
import asyncio
import pytest
from unittest.mock import patch, MagicMock, AsyncMock
import dns.exception
import dns.resolver
from dns.resolver import NXDOMAIN, NoAnswer, NoNameservers, LifetimeTimeout

from subpace.core.exceptions import ConfigurationError, ValidationError
from subpace.core.interfaces import LookupFailure
from subpace.utils.dns_utils import DNSPythonResolver, DNSUtils, build_resolver


class TestDNSUtils:
    """Test DNS utility functions."""

    def test_validate_domain_valid(self):
        """Test domain validation with valid domains."""
        dns_utils = DNSUtils()
        
        assert dns_utils.validate_domain("example.com") is True
        assert dns_utils.validate_domain("sub.example.com") is True
        assert dns_utils.validate_domain("sub-domain.example.com") is True
        assert dns_utils.validate_domain("example.co.uk") is True
        assert dns_utils.validate_domain("example.xn--p1ai") is True
        assert dns_utils.validate_domain("xn--p1ai") is True
        assert dns_utils.validate_domain("example.com.") is True
        assert dns_utils.validate_domain("localhost") is True
        assert dns_utils.validate_domain("example.123") is True

    @pytest.mark.parametrize("domain", [
        "", None, ".", "invalid..", ".com", "example..com", "-example.com",
        "example-.com", "example.com..", "not a domain", "a" * 64 + ".com"
    ])
    def test_validate_domain_invalid(self, domain):
        """Test domain validation with invalid domains."""
        with pytest.raises(ValidationError):
            DNSUtils().validate_domain(domain)

    @pytest.mark.parametrize("value, expected", [
        ("1.1.1.1", ("1.1.1.1", 53)),
        ("1.1.1.1:53", ("1.1.1.1", 53)),
        ("8.8.4.4:5353", ("8.8.4.4", 5353)),
        ("2606:4700::1111", ("2606:4700::1111", 53)),
        ("[2606:4700::1111]:853", ("2606:4700::1111", 853)),
        ("[::1]", ("::1", 53)),
    ])
    def test_parse_nameserver(self, value, expected):
        """Test accepted name server address forms."""
        assert DNSUtils().parse_nameserver(value) == expected

    @pytest.mark.parametrize("value", [
        "", "dns.google", "1.1.1", "1.1.1.1:", "1.1.1.1:dns", "1.1.1.1:0",
        "1.1.1.1:70000", "[::1", "[::1]:x", "300.1.1.1:53"
    ])
    def test_parse_nameserver_invalid(self, value):
        """Test invalid name server addresses are configuration errors."""
        with pytest.raises(ConfigurationError):
            DNSUtils().parse_nameserver(value)


class TestDNSPythonResolver:
    """Test the dnspython resolver client."""

    @patch('subpace.utils.dns_utils.Resolver')
    def test_system_configuration(self, mock_resolver):
        """Test the system configuration is used without a name server."""
        DNSPythonResolver(timeout=2.0)

        mock_resolver.assert_called_once_with(configure=True)
        instance = mock_resolver.return_value
        assert instance.timeout == 2.0
        assert instance.lifetime == 2.0

    @patch('subpace.utils.dns_utils.Resolver')
    def test_custom_nameserver(self, mock_resolver):
        """Test an explicit name server replaces the system configuration."""
        DNSPythonResolver(nameserver=("1.1.1.1", 5353))

        mock_resolver.assert_called_once_with(configure=False)
        instance = mock_resolver.return_value
        assert instance.nameservers == ["1.1.1.1"]
        assert instance.port == 5353

    @patch('subpace.utils.dns_utils.Resolver')
    def test_missing_system_configuration(self, mock_resolver):
        """Test a missing resolv.conf is a configuration error."""
        mock_resolver.side_effect = dns.resolver.NoResolverConfiguration()

        with pytest.raises(ConfigurationError):
            DNSPythonResolver()

    @patch('subpace.utils.dns_utils.Resolver')
    def test_lookup_success(self, mock_resolver):
        """Test a successful lookup returns the addresses."""
        mock_answer = MagicMock()
        mock_answer.addresses.return_value = iter(["93.184.216.34", "2606:2800:220:1::"])
        mock_resolver.return_value.resolve_name = AsyncMock(return_value=mock_answer)

        client = DNSPythonResolver()
        outcome = asyncio.run(client.lookup("www.example.com"))

        assert outcome.ok is True
        assert outcome.records == ["93.184.216.34", "2606:2800:220:1::"]
        mock_resolver.return_value.resolve_name.assert_awaited_once_with("www.example.com", tcp=False)

    @patch('subpace.utils.dns_utils.Resolver')
    def test_lookup_over_tcp(self, mock_resolver):
        """Test the TCP flag is passed to every lookup."""
        mock_answer = MagicMock()
        mock_answer.addresses.return_value = iter(["93.184.216.34"])
        mock_resolver.return_value.resolve_name = AsyncMock(return_value=mock_answer)

        client = DNSPythonResolver(nameserver=("1.1.1.1", 53), tcp=True)
        asyncio.run(client.lookup("www.example.com"))

        mock_resolver.return_value.resolve_name.assert_awaited_once_with("www.example.com", tcp=True)

    @pytest.mark.parametrize("error, failure", [
        (LifetimeTimeout(timeout=5.0, errors={}), LookupFailure.TIMEOUT),
        (dns.exception.Timeout(), LookupFailure.TIMEOUT),
        (NXDOMAIN(), LookupFailure.NO_RECORDS_FOUND),
        (NoAnswer(), LookupFailure.NO_RECORDS_FOUND),
        (NoNameservers(), LookupFailure.OTHER),
        (OSError("network unreachable"), LookupFailure.OTHER),
    ])
    @patch('subpace.utils.dns_utils.Resolver')
    def test_lookup_failures(self, mock_resolver, error, failure):
        """Test resolver exceptions map to the closed set of failures."""
        mock_resolver.return_value.resolve_name = AsyncMock(side_effect=error)

        client = DNSPythonResolver()
        outcome = asyncio.run(client.lookup("nonexistent.example.com"))

        assert outcome.failure is failure
        assert outcome.error is error
        assert outcome.ok is False

    @patch('subpace.utils.dns_utils.Resolver')
    def test_lookup_empty_answer(self, mock_resolver):
        """Test an answer without addresses counts as no records."""
        mock_answer = MagicMock()
        mock_answer.addresses.return_value = iter([])
        mock_resolver.return_value.resolve_name = AsyncMock(return_value=mock_answer)

        outcome = asyncio.run(DNSPythonResolver().lookup("www.example.com"))

        assert outcome.failure is LookupFailure.NO_RECORDS_FOUND


class TestBuildResolver:
    """Test resolver construction from command-line values."""

    @patch('subpace.utils.dns_utils.Resolver')
    def test_build_with_nameserver(self, mock_resolver):
        """Test the name server string is parsed."""
        client = build_resolver("9.9.9.9:53", timeout=3.0, tcp=True)

        assert client.nameserver == ("9.9.9.9", 53)
        assert client.timeout == 3.0
        assert client.tcp is True

    @patch('subpace.utils.dns_utils.Resolver')
    def test_build_without_nameserver(self, mock_resolver):
        """Test the system configuration is used by default."""
        client = build_resolver()

        assert client.nameserver is None
        mock_resolver.assert_called_once_with(configure=True)

    def test_build_invalid_nameserver(self):
        """Test an invalid name server is rejected before any query."""
        with pytest.raises(ConfigurationError):
            build_resolver("not-an-address")

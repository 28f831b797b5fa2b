"""Tests for mqttopts.transport module."""

import pytest
from mqttopts.transport import TransportOptions, ClientAuth, TimeUnit, is_int
from mqttopts.tls import PemKeyCertOptions, PemTrustOptions, JksOptions
from mqttopts.errors import InvalidArgument, FrozenOptionsError


class TestTransportDefaults:
    """Test default transport values."""

    def test_default_values(self):
        """Check all default values are correct."""
        t = TransportOptions()

        assert t.host == '0.0.0.0'
        assert t.port == 0
        assert t.client_auth == ClientAuth.NONE
        assert t.ssl is False
        assert t.sni is False
        assert t.receive_buffer_size == -1
        assert t.enabled_secure_transport_protocols == ('TLSv1.2', 'TLSv1.3')
        assert t.proxy_protocol_timeout == 10
        assert t.proxy_protocol_timeout_unit == TimeUnit.SECONDS


class TestTransportValidation:
    """Test transport setter validation."""

    @pytest.mark.parametrize('port', [0, 1, 1883, 65535])
    def test_port_in_range(self, port):
        """Ports 0-65535 are accepted."""
        assert TransportOptions().set_port(port).port == port

    @pytest.mark.parametrize('port', [-1, 65536])
    def test_port_out_of_range(self, port):
        """Ports outside 0-65535 are rejected."""
        with pytest.raises(InvalidArgument, match='port must be in range 0-65535'):
            TransportOptions().set_port(port)

    def test_host_must_be_non_empty(self):
        """An empty host is rejected."""
        with pytest.raises(InvalidArgument, match='host must be a non-empty string'):
            TransportOptions().set_host('')

    def test_client_auth(self):
        """Only the ClientAuth names are accepted."""
        t = TransportOptions().set_client_auth(ClientAuth.REQUEST)
        assert t.client_auth == 'REQUEST'
        with pytest.raises(InvalidArgument, match='client_auth must be one of'):
            t.set_client_auth('ALWAYS')
        assert t.client_auth == 'REQUEST'

    @pytest.mark.parametrize('size', [1, 65536, -1])
    def test_receive_buffer_size_valid(self, size):
        """Positive sizes and -1 are accepted."""
        assert TransportOptions().set_receive_buffer_size(size).receive_buffer_size == size

    @pytest.mark.parametrize('size', [0, -2])
    def test_receive_buffer_size_invalid(self, size):
        """Zero and negative sizes other than -1 are rejected."""
        with pytest.raises(InvalidArgument, match='receive_buffer_size must be > 0'):
            TransportOptions().set_receive_buffer_size(size)

    def test_proxy_protocol_timeout(self):
        """The proxy protocol timeout must be >= 0."""
        assert TransportOptions().set_proxy_protocol_timeout(0).proxy_protocol_timeout == 0
        with pytest.raises(InvalidArgument, match='proxy_protocol_timeout must be >= 0'):
            TransportOptions().set_proxy_protocol_timeout(-1)

    def test_proxy_protocol_timeout_unit(self):
        """Only TimeUnit names are accepted."""
        with pytest.raises(InvalidArgument, match='proxy_protocol_timeout_unit must be one of'):
            TransportOptions().set_proxy_protocol_timeout_unit('FORTNIGHTS')

    def test_crl_none_rejected(self):
        """None CRL paths and values are rejected."""
        with pytest.raises(InvalidArgument, match='crl_path must not be None'):
            TransportOptions().add_crl_path(None)
        with pytest.raises(InvalidArgument, match='crl_value must not be None'):
            TransportOptions().add_crl_value(None)

    @pytest.mark.parametrize('path', [42, b'/etc/x.crl'])
    def test_crl_path_must_be_string(self, path):
        """CRL paths are text, so records and JSON can hold them."""
        t = TransportOptions()
        with pytest.raises(InvalidArgument, match='crl_path must be a string'):
            t.add_crl_path(path)
        assert t.crl_paths == ()

    def test_crl_value_must_be_bytes(self):
        """CRL values are raw bytes."""
        with pytest.raises(InvalidArgument, match='crl_value must be bytes'):
            TransportOptions().add_crl_value('MIIBCg==')

    def test_key_cert_type_checked(self):
        """Trust-only material cannot be used as key material."""
        with pytest.raises(InvalidArgument, match='unsupported key cert options'):
            TransportOptions().set_key_cert_options(PemTrustOptions(['ca.pem']))

    def test_trust_type_checked(self):
        """Key-only material cannot be used as trust material."""
        with pytest.raises(InvalidArgument, match='unsupported trust options'):
            TransportOptions().set_trust_options(PemKeyCertOptions(['a.crt'], ['a.key']))

    def test_stores_usable_on_both_sides(self):
        """JKS stores are accepted as key and trust material."""
        t = (TransportOptions()
             .set_key_cert_options(JksOptions('k.jks', 'pw'))
             .set_trust_options(JksOptions('t.jks', 'pw')))
        assert t.key_cert_options.path == 'k.jks'
        assert t.trust_options.path == 't.jks'

    def test_clear_key_cert_options(self):
        """None clears key material."""
        t = TransportOptions().set_key_cert_options(JksOptions('k.jks'))
        assert t.set_key_cert_options(None).key_cert_options is None


class TestOrderedSets:
    """Test cipher suite and protocol sets."""

    def test_insertion_order_and_duplicates(self):
        """Sets keep insertion order and drop duplicates."""
        t = (TransportOptions()
             .add_enabled_cipher_suite('B')
             .add_enabled_cipher_suite('A')
             .add_enabled_cipher_suite('B'))
        assert t.enabled_cipher_suites == ('B', 'A')

    def test_remove_missing_is_noop(self):
        """Removing an absent entry does nothing."""
        t = TransportOptions().remove_enabled_cipher_suite('X')
        assert t.enabled_cipher_suites == ()

    def test_protocols(self):
        """Protocols can be added and removed."""
        t = (TransportOptions()
             .remove_enabled_secure_transport_protocol('TLSv1.2')
             .add_enabled_secure_transport_protocol('TLSv1.2'))
        assert t.enabled_secure_transport_protocols == ('TLSv1.3', 'TLSv1.2')


class TestTimeUnit:
    """Test TimeUnit conversion."""

    def test_all_units(self):
        """ALL lists every unit name."""
        assert TimeUnit.ALL == ('NANOSECONDS', 'MICROSECONDS', 'MILLISECONDS',
                                'SECONDS', 'MINUTES', 'HOURS', 'DAYS')

    def test_to_seconds(self):
        """Values are converted to seconds."""
        assert TimeUnit.to_seconds(500, TimeUnit.MILLISECONDS) == pytest.approx(0.5)
        assert TimeUnit.to_seconds(2, TimeUnit.MINUTES) == 120

    def test_proxy_protocol_timeout_seconds(self):
        """The configured proxy timeout converts to seconds."""
        t = TransportOptions().set_proxy_protocol_timeout(3).set_proxy_protocol_timeout_unit(TimeUnit.HOURS)
        assert t.proxy_protocol_timeout_seconds() == 10800


class TestTransportCopyAndFreeze:
    """Test copy(), freeze() and equality."""

    def test_copy(self):
        """Copies are equal and independent."""
        t = TransportOptions().set_host('mqtt.local').add_crl_path('a.crl')
        c = t.copy()
        assert c == t
        c.add_crl_path('b.crl')
        assert t.crl_paths == ('a.crl',)

    def test_freeze(self):
        """Frozen transports reject setters."""
        t = TransportOptions().freeze()
        assert t.is_frozen is True
        with pytest.raises(FrozenOptionsError, match='transport options are frozen'):
            t.set_port(1)

    def test_copy_of_frozen_is_mutable(self):
        """Copies are never frozen."""
        assert TransportOptions().freeze().copy().is_frozen is False

    def test_frozen_tls_material_unchanged(self):
        """TLS material read from a frozen transport is a copy."""
        t = TransportOptions().set_key_cert_options(PemKeyCertOptions(['a.crt'], ['a.key']))
        t.set_trust_options(PemTrustOptions(['ca.pem'])).freeze()

        t.key_cert_options.add_cert_path('b.crt')
        t.trust_options.add_cert_path('ca2.pem')

        assert t.key_cert_options.cert_paths == ['a.crt']
        assert t.trust_options.cert_paths == ['ca.pem']
        assert TransportOptions.from_record(t.to_record()) == t

    def test_repr(self):
        """repr shows the listener address."""
        assert repr(TransportOptions().set_port(1883)) == \
            "TransportOptions(host='0.0.0.0', port=1883, ssl=False, receive_buffer_size=-1)"


class TestIsInt:
    """Test the is_int helper."""

    def test_ints(self):
        """Plain ints are ints."""
        assert is_int(0)
        assert is_int(-5)

    def test_not_ints(self):
        """Bools, floats and strings are not."""
        assert not is_int(True)
        assert not is_int(1.0)
        assert not is_int('1')

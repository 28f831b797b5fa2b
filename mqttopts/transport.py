"""
Generic TCP/TLS server options.

TransportOptions holds the socket level settings an MQTT listener is
bound with: address, TLS material, buffer sizes and proxy protocol
handling. ServerOptions composes one of these and forwards to it.
"""

from .errors import InvalidArgument, FrozenOptionsError
from .logging import get_logger
from .tls import KEY_CERT_KEYS, TRUST_KEYS

_log = get_logger('mqttopts.transport')

DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 0
DEFAULT_RECEIVE_BUFFER_SIZE = -1  # unset, OS default applies
DEFAULT_SSL = False
DEFAULT_SNI = False
DEFAULT_USE_PROXY_PROTOCOL = False
DEFAULT_PROXY_PROTOCOL_TIMEOUT = 10
DEFAULT_ENABLED_SECURE_TRANSPORT_PROTOCOLS = ('TLSv1.2', 'TLSv1.3')


class ClientAuth:
    """TLS client certificate policy."""
    NONE = 'NONE'
    REQUEST = 'REQUEST'
    REQUIRED = 'REQUIRED'

    ALL = (NONE, REQUEST, REQUIRED)


class TimeUnit:
    """Units accepted for the proxy protocol header timeout."""
    NANOSECONDS = 'NANOSECONDS'
    MICROSECONDS = 'MICROSECONDS'
    MILLISECONDS = 'MILLISECONDS'
    SECONDS = 'SECONDS'
    MINUTES = 'MINUTES'
    HOURS = 'HOURS'
    DAYS = 'DAYS'

    _SECONDS_PER = {
        NANOSECONDS: 1e-9,
        MICROSECONDS: 1e-6,
        MILLISECONDS: 1e-3,
        SECONDS: 1,
        MINUTES: 60,
        HOURS: 3600,
        DAYS: 86400,
    }

    ALL = tuple(_SECONDS_PER)

    @staticmethod
    def to_seconds(value, unit):
        """Convert value expressed in unit to seconds (float)."""
        return value * TimeUnit._SECONDS_PER[unit]


DEFAULT_CLIENT_AUTH = ClientAuth.NONE
DEFAULT_PROXY_PROTOCOL_TIMEOUT_UNIT = TimeUnit.SECONDS


def is_int(value):
    """True for ints, False for bools and everything else."""
    return isinstance(value, int) and not isinstance(value, bool)


def _reject(message, field, value):
    _log.debug('rejected %s=%r: %s', field, value, message)
    raise InvalidArgument(message, field, value)


def _require_int(field, value):
    if not is_int(value):
        _reject('%s must be an integer, got %r' % (field, value), field, value)


def _require_bool(field, value):
    if not isinstance(value, bool):
        _reject('%s must be a boolean, got %r' % (field, value), field, value)


class TransportOptions:
    """TCP/TLS listener options with validated fluent setters."""

    __slots__ = (
        '_host', '_port', '_client_auth', '_ssl', '_sni',
        '_key_cert_options', '_trust_options',
        '_enabled_cipher_suites', '_enabled_secure_transport_protocols',
        '_crl_paths', '_crl_values',
        '_receive_buffer_size',
        '_use_proxy_protocol', '_proxy_protocol_timeout', '_proxy_protocol_timeout_unit',
        '_frozen',
    )

    def __init__(self):
        self._host = DEFAULT_HOST
        self._port = DEFAULT_PORT
        self._client_auth = DEFAULT_CLIENT_AUTH
        self._ssl = DEFAULT_SSL
        self._sni = DEFAULT_SNI
        self._key_cert_options = None
        self._trust_options = None
        # dicts keep insertion order and drop duplicates
        self._enabled_cipher_suites = {}
        self._enabled_secure_transport_protocols = dict.fromkeys(
            DEFAULT_ENABLED_SECURE_TRANSPORT_PROTOCOLS)
        self._crl_paths = []
        self._crl_values = []
        self._receive_buffer_size = DEFAULT_RECEIVE_BUFFER_SIZE
        self._use_proxy_protocol = DEFAULT_USE_PROXY_PROTOCOL
        self._proxy_protocol_timeout = DEFAULT_PROXY_PROTOCOL_TIMEOUT
        self._proxy_protocol_timeout_unit = DEFAULT_PROXY_PROTOCOL_TIMEOUT_UNIT
        self._frozen = False

    def _check_frozen(self):
        if self._frozen:
            raise FrozenOptionsError('transport options are frozen')

    # Read accessors

    @property
    def host(self):
        return self._host

    @property
    def port(self):
        return self._port

    @property
    def client_auth(self):
        return self._client_auth

    @property
    def ssl(self):
        return self._ssl

    @property
    def sni(self):
        return self._sni

    @property
    def key_cert_options(self):
        """A copy of the key material, or None."""
        options = self._key_cert_options
        return options.copy() if options is not None else None

    @property
    def trust_options(self):
        """A copy of the trust material, or None."""
        options = self._trust_options
        return options.copy() if options is not None else None

    @property
    def enabled_cipher_suites(self):
        return tuple(self._enabled_cipher_suites)

    @property
    def enabled_secure_transport_protocols(self):
        return tuple(self._enabled_secure_transport_protocols)

    @property
    def crl_paths(self):
        return tuple(self._crl_paths)

    @property
    def crl_values(self):
        return tuple(self._crl_values)

    @property
    def receive_buffer_size(self):
        return self._receive_buffer_size

    @property
    def use_proxy_protocol(self):
        return self._use_proxy_protocol

    @property
    def proxy_protocol_timeout(self):
        return self._proxy_protocol_timeout

    @property
    def proxy_protocol_timeout_unit(self):
        return self._proxy_protocol_timeout_unit

    @property
    def is_frozen(self):
        return self._frozen

    # Mutators

    def set_host(self, host):
        self._check_frozen()
        if not isinstance(host, str) or not host:
            _reject('host must be a non-empty string, got %r' % (host,), 'host', host)
        self._host = host
        return self

    def set_port(self, port):
        self._check_frozen()
        _require_int('port', port)
        if not (0 <= port <= 65535):
            _reject('port must be in range 0-65535, got %d' % port, 'port', port)
        self._port = port
        return self

    def set_client_auth(self, client_auth):
        self._check_frozen()
        if client_auth not in ClientAuth.ALL:
            _reject('client_auth must be one of %s, got %r' % (ClientAuth.ALL, client_auth),
                    'client_auth', client_auth)
        self._client_auth = client_auth
        return self

    def set_ssl(self, ssl):
        self._check_frozen()
        _require_bool('ssl', ssl)
        self._ssl = ssl
        return self

    def set_sni(self, sni):
        self._check_frozen()
        _require_bool('sni', sni)
        self._sni = sni
        return self

    def set_key_cert_options(self, options):
        """Set key material (PemKeyCertOptions, JksOptions, PfxOptions or None)."""
        self._check_frozen()
        if options is not None and type(options) not in KEY_CERT_KEYS.values():
            _reject('unsupported key cert options %r' % (options,), 'key_cert_options', options)
        self._key_cert_options = options.copy() if options is not None else None
        return self

    def set_trust_options(self, options):
        """Set trust material (PemTrustOptions, JksOptions, PfxOptions or None)."""
        self._check_frozen()
        if options is not None and type(options) not in TRUST_KEYS.values():
            _reject('unsupported trust options %r' % (options,), 'trust_options', options)
        self._trust_options = options.copy() if options is not None else None
        return self

    def add_enabled_cipher_suite(self, suite):
        self._check_frozen()
        if not isinstance(suite, str):
            _reject('cipher suite must be a string, got %r' % (suite,), 'enabled_cipher_suites', suite)
        self._enabled_cipher_suites[suite] = None
        return self

    def remove_enabled_cipher_suite(self, suite):
        self._check_frozen()
        self._enabled_cipher_suites.pop(suite, None)
        return self

    def add_enabled_secure_transport_protocol(self, protocol):
        self._check_frozen()
        if not isinstance(protocol, str):
            _reject('protocol must be a string, got %r' % (protocol,),
                    'enabled_secure_transport_protocols', protocol)
        self._enabled_secure_transport_protocols[protocol] = None
        return self

    def remove_enabled_secure_transport_protocol(self, protocol):
        self._check_frozen()
        self._enabled_secure_transport_protocols.pop(protocol, None)
        return self

    def add_crl_path(self, crl_path):
        self._check_frozen()
        if crl_path is None:
            _reject('crl_path must not be None', 'crl_paths', crl_path)
        if not isinstance(crl_path, str):
            _reject('crl_path must be a string, got %r' % (crl_path,), 'crl_paths', crl_path)
        self._crl_paths.append(crl_path)
        return self

    def add_crl_value(self, crl_value):
        self._check_frozen()
        if crl_value is None:
            _reject('crl_value must not be None', 'crl_values', crl_value)
        if not isinstance(crl_value, (bytes, bytearray)):
            _reject('crl_value must be bytes, got %r' % type(crl_value).__name__,
                    'crl_values', crl_value)
        self._crl_values.append(bytes(crl_value))
        return self

    def set_receive_buffer_size(self, receive_buffer_size):
        self._check_frozen()
        _require_int('receive_buffer_size', receive_buffer_size)
        if receive_buffer_size <= 0 and receive_buffer_size != DEFAULT_RECEIVE_BUFFER_SIZE:
            _reject('receive_buffer_size must be > 0, got %d' % receive_buffer_size,
                    'receive_buffer_size', receive_buffer_size)
        self._receive_buffer_size = receive_buffer_size
        return self

    def set_use_proxy_protocol(self, use_proxy_protocol):
        self._check_frozen()
        _require_bool('use_proxy_protocol', use_proxy_protocol)
        self._use_proxy_protocol = use_proxy_protocol
        return self

    def set_proxy_protocol_timeout(self, timeout):
        self._check_frozen()
        _require_int('proxy_protocol_timeout', timeout)
        if timeout < 0:
            _reject('proxy_protocol_timeout must be >= 0, got %d' % timeout,
                    'proxy_protocol_timeout', timeout)
        self._proxy_protocol_timeout = timeout
        return self

    def set_proxy_protocol_timeout_unit(self, unit):
        self._check_frozen()
        if unit not in TimeUnit.ALL:
            _reject('proxy_protocol_timeout_unit must be one of %s, got %r' % (TimeUnit.ALL, unit),
                    'proxy_protocol_timeout_unit', unit)
        self._proxy_protocol_timeout_unit = unit
        return self

    def proxy_protocol_timeout_seconds(self):
        """Proxy protocol header timeout converted to seconds."""
        return TimeUnit.to_seconds(self._proxy_protocol_timeout, self._proxy_protocol_timeout_unit)

    # Copy, freeze, records

    def copy(self):
        """Return an unfrozen field-by-field copy."""
        other = TransportOptions()
        other._host = self._host
        other._port = self._port
        other._client_auth = self._client_auth
        other._ssl = self._ssl
        other._sni = self._sni
        other._key_cert_options = self._key_cert_options.copy() if self._key_cert_options else None
        other._trust_options = self._trust_options.copy() if self._trust_options else None
        other._enabled_cipher_suites = dict(self._enabled_cipher_suites)
        other._enabled_secure_transport_protocols = dict(self._enabled_secure_transport_protocols)
        other._crl_paths = list(self._crl_paths)
        other._crl_values = list(self._crl_values)
        other._receive_buffer_size = self._receive_buffer_size
        other._use_proxy_protocol = self._use_proxy_protocol
        other._proxy_protocol_timeout = self._proxy_protocol_timeout
        other._proxy_protocol_timeout_unit = self._proxy_protocol_timeout_unit
        return other

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self.copy()

    def freeze(self):
        """Make these options read-only. Returns self."""
        self._frozen = True
        return self

    def to_record(self):
        from .converter import transport_to_record
        return transport_to_record(self)

    @classmethod
    def from_record(cls, record):
        from .converter import transport_from_record
        return transport_from_record(record)

    def _values(self):
        return (
            self._host, self._port, self._client_auth, self._ssl, self._sni,
            self._key_cert_options, self._trust_options,
            list(self._enabled_cipher_suites), list(self._enabled_secure_transport_protocols),
            self._crl_paths, self._crl_values, self._receive_buffer_size,
            self._use_proxy_protocol, self._proxy_protocol_timeout,
            self._proxy_protocol_timeout_unit,
        )

    def __eq__(self, other):
        if not isinstance(other, TransportOptions):
            return NotImplemented
        return self._values() == other._values()

    __hash__ = None

    def __repr__(self):
        return 'TransportOptions(host=%r, port=%d, ssl=%r, receive_buffer_size=%d)' % (
            self._host, self._port, self._ssl, self._receive_buffer_size)

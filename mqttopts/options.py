"""
MQTT Server Options

Configuration value object for an MQTT server listening on TCP, with
optional web-socket transport. Protocol limits and web-socket settings
live here; socket level settings are held by a composed
TransportOptions and reached through forwarding setters.

The receive buffer of the socket must be able to hold a whole MQTT
message: when both sizes are positive, receive_buffer_size must be
>= max_message_size. Every mutation path that touches either size
checks this before committing.
"""

from .errors import InvalidArgument, FrozenOptionsError
from .logging import get_logger
from .transport import TransportOptions, is_int

_log = get_logger('mqttopts.options')

DEFAULT_PORT = 1883       # plain MQTT
DEFAULT_TLS_PORT = 8883   # MQTT over TLS

DEFAULT_MAX_MESSAGE_SIZE = 8092
DEFAULT_AUTO_CLIENT_ID = True
DEFAULT_MAX_CLIENT_ID_LENGTH = 23
DEFAULT_TIMEOUT_ON_CONNECT = 90
DEFAULT_USE_WEB_SOCKET = False
DEFAULT_WEB_SOCKET_MAX_FRAME_SIZE = 65536
DEFAULT_PER_FRAME_WEB_SOCKET_COMPRESSION_SUPPORTED = True
DEFAULT_PER_MESSAGE_WEB_SOCKET_COMPRESSION_SUPPORTED = True
DEFAULT_WEB_SOCKET_COMPRESSION_LEVEL = 6
DEFAULT_WEB_SOCKET_ALLOW_SERVER_NO_CONTEXT = False
DEFAULT_WEB_SOCKET_PREFERRED_CLIENT_NO_CONTEXT = False

MIN_WEB_SOCKET_COMPRESSION_LEVEL = 0
MAX_WEB_SOCKET_COMPRESSION_LEVEL = 9

# Sub-protocols offered during the web-socket handshake
MQTT_SUBPROTOCOL_CSV_LIST = 'mqtt, mqttv3.1, mqttv3.1.1'

BUFFER_TOO_SMALL = "Receiver buffer size can't be lower than max message size"


def web_socket_subprotocols():
    """Return the web-socket sub-protocol names as a tuple."""
    return tuple(p.strip() for p in MQTT_SUBPROTOCOL_CSV_LIST.split(','))


def _reject(message, field, value):
    _log.debug('rejected %s=%r: %s', field, value, message)
    raise InvalidArgument(message, field, value)


def _require_int(field, value):
    if not is_int(value):
        _reject('%s must be an integer, got %r' % (field, value), field, value)


def _require_bool(field, value):
    if not isinstance(value, bool):
        _reject('%s must be a boolean, got %r' % (field, value), field, value)


def _check_sizes(max_message_size, receive_buffer_size, field='receive_buffer_size'):
    """Raise InvalidArgument if the receive buffer cannot hold a max size message.

    field names the value being set, for the error raised.
    """
    if max_message_size > 0 and receive_buffer_size > 0:
        if receive_buffer_size < max_message_size:
            _log.debug('size conflict: max_message_size=%d receive_buffer_size=%d',
                       max_message_size, receive_buffer_size)
            raise InvalidArgument(
                '%s (receive_buffer_size=%d, max_message_size=%d)'
                % (BUFFER_TOO_SMALL, receive_buffer_size, max_message_size),
                field, max_message_size if field == 'max_message_size' else receive_buffer_size)


class ServerOptions:
    """Options for an MQTT server.

    Setters validate their argument and return self so calls can be
    chained::

        opts = ServerOptions().set_receive_buffer_size(16384).set_max_message_size(16384)

    A setter that raises leaves the previous value in place. Once the
    options are handed to a server they can be frozen with freeze().
    """

    __slots__ = (
        '_transport',
        '_max_message_size', '_auto_client_id', '_max_client_id_length',
        '_timeout_on_connect',
        '_use_web_socket', '_web_socket_max_frame_size',
        '_per_frame_web_socket_compression_supported',
        '_per_message_web_socket_compression_supported',
        '_web_socket_compression_level',
        '_web_socket_allow_server_no_context',
        '_web_socket_preferred_client_no_context',
        '_frozen',
    )

    def __init__(self, **kwargs):
        """Initialize with defaults, override with snake_case kwargs.

        Unknown kwargs are ignored. Overridden values are checked once
        all of them are applied.

        Raises:
            ConfigurationError: If a kwarg is invalid or the sizes conflict.
        """
        self._transport = TransportOptions().set_port(DEFAULT_PORT)
        self._frozen = False

        # Protocol limits
        self._max_message_size = DEFAULT_MAX_MESSAGE_SIZE
        self._auto_client_id = DEFAULT_AUTO_CLIENT_ID
        self._max_client_id_length = DEFAULT_MAX_CLIENT_ID_LENGTH
        self._timeout_on_connect = DEFAULT_TIMEOUT_ON_CONNECT

        # Web-socket transport
        self._use_web_socket = DEFAULT_USE_WEB_SOCKET
        self._web_socket_max_frame_size = DEFAULT_WEB_SOCKET_MAX_FRAME_SIZE
        self._per_frame_web_socket_compression_supported = \
            DEFAULT_PER_FRAME_WEB_SOCKET_COMPRESSION_SUPPORTED
        self._per_message_web_socket_compression_supported = \
            DEFAULT_PER_MESSAGE_WEB_SOCKET_COMPRESSION_SUPPORTED
        self._web_socket_compression_level = DEFAULT_WEB_SOCKET_COMPRESSION_LEVEL
        self._web_socket_allow_server_no_context = DEFAULT_WEB_SOCKET_ALLOW_SERVER_NO_CONTEXT
        self._web_socket_preferred_client_no_context = \
            DEFAULT_WEB_SOCKET_PREFERRED_CLIENT_NO_CONTEXT

        if kwargs:
            from .converter import overlay_keywords
            overlay_keywords(self, kwargs)

    # Construction

    @classmethod
    def from_record(cls, record):
        """Build options from a camelCase record, ignoring unknown keys.

        Raises:
            ConfigurationError: If a value is invalid or the sizes conflict.
        """
        from .converter import server_from_record
        return server_from_record(record)

    @classmethod
    def from_json(cls, text):
        from .converter import from_json
        return from_json(text)

    @classmethod
    def from_options(cls, other):
        """Copy constructor.

        Raises:
            InvalidArgument: If other is not ServerOptions.
        """
        if not isinstance(other, ServerOptions):
            _reject('can only copy ServerOptions, got %s' % type(other).__name__, 'other', other)
        return other._copy_into(cls())

    def copy(self):
        """Return an unfrozen field-by-field copy of these options."""
        return self._copy_into(type(self)())

    def _copy_into(self, other):
        other._transport = self._transport.copy()
        other._max_message_size = self._max_message_size
        other._auto_client_id = self._auto_client_id
        other._max_client_id_length = self._max_client_id_length
        other._timeout_on_connect = self._timeout_on_connect
        other._use_web_socket = self._use_web_socket
        other._web_socket_max_frame_size = self._web_socket_max_frame_size
        other._per_frame_web_socket_compression_supported = \
            self._per_frame_web_socket_compression_supported
        other._per_message_web_socket_compression_supported = \
            self._per_message_web_socket_compression_supported
        other._web_socket_compression_level = self._web_socket_compression_level
        other._web_socket_allow_server_no_context = self._web_socket_allow_server_no_context
        other._web_socket_preferred_client_no_context = \
            self._web_socket_preferred_client_no_context
        return other

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self.copy()

    # Validation and freezing

    def _check_frozen(self):
        if self._frozen:
            raise FrozenOptionsError('server options are frozen')

    def validate(self):
        """Check the receive buffer / max message size rule.

        Raises:
            InvalidArgument: If the receive buffer is smaller than max_message_size.
        """
        _check_sizes(self._max_message_size, self._transport.receive_buffer_size)

    def _apply_sizes(self, max_message_size=None, receive_buffer_size=None):
        """Assign the coupled sizes with local checks only; caller runs validate()."""
        if max_message_size is not None:
            _require_int('max_message_size', max_message_size)
            if max_message_size <= 0:
                _reject('max_message_size must be > 0, got %d' % max_message_size,
                        'max_message_size', max_message_size)
        if receive_buffer_size is not None:
            self._transport.set_receive_buffer_size(receive_buffer_size)
        if max_message_size is not None:
            self._max_message_size = max_message_size

    def freeze(self):
        """Make these options and their transport read-only. Returns self."""
        self.validate()
        self._transport.freeze()
        self._frozen = True
        _log.debug('options frozen: %r', self)
        return self

    @property
    def is_frozen(self):
        return self._frozen

    # Records

    def to_record(self):
        """Return every field, transport fields included, keyed by camelCase name."""
        from .converter import server_to_record
        return server_to_record(self)

    def to_json(self, **kwargs):
        from .converter import to_json
        return to_json(self, **kwargs)

    # MQTT protocol limits

    @property
    def max_message_size(self):
        """Max message size (variable header + payload) in bytes."""
        return self._max_message_size

    def set_max_message_size(self, max_message_size):
        self._check_frozen()
        _require_int('max_message_size', max_message_size)
        if max_message_size <= 0:
            _reject('max_message_size must be > 0, got %d' % max_message_size,
                    'max_message_size', max_message_size)
        _check_sizes(max_message_size, self._transport.receive_buffer_size, 'max_message_size')
        self._max_message_size = max_message_size
        return self

    @property
    def auto_client_id(self):
        """Generate a client identifier when a client connects with a zero-length one."""
        return self._auto_client_id

    def set_auto_client_id(self, auto_client_id):
        self._check_frozen()
        _require_bool('auto_client_id', auto_client_id)
        self._auto_client_id = auto_client_id
        return self

    @property
    def max_client_id_length(self):
        return self._max_client_id_length

    def set_max_client_id_length(self, max_client_id_length):
        self._check_frozen()
        _require_int('max_client_id_length', max_client_id_length)
        if max_client_id_length <= 0:
            _reject('max_client_id_length must be > 0, got %d' % max_client_id_length,
                    'max_client_id_length', max_client_id_length)
        self._max_client_id_length = max_client_id_length
        return self

    @property
    def timeout_on_connect(self):
        """Seconds to wait for CONNECT after accept; <= 0 disables the timeout."""
        return self._timeout_on_connect

    def set_timeout_on_connect(self, timeout_on_connect):
        self._check_frozen()
        _require_int('timeout_on_connect', timeout_on_connect)
        self._timeout_on_connect = timeout_on_connect
        return self

    # Web-socket transport

    @property
    def use_web_socket(self):
        return self._use_web_socket

    def set_use_web_socket(self, use_web_socket):
        self._check_frozen()
        _require_bool('use_web_socket', use_web_socket)
        self._use_web_socket = use_web_socket
        return self

    @property
    def web_socket_max_frame_size(self):
        return self._web_socket_max_frame_size

    def set_web_socket_max_frame_size(self, web_socket_max_frame_size):
        self._check_frozen()
        _require_int('web_socket_max_frame_size', web_socket_max_frame_size)
        if web_socket_max_frame_size <= 0:
            _reject('web_socket_max_frame_size must be > 0, got %d' % web_socket_max_frame_size,
                    'web_socket_max_frame_size', web_socket_max_frame_size)
        self._web_socket_max_frame_size = web_socket_max_frame_size
        return self

    @property
    def per_frame_web_socket_compression_supported(self):
        return self._per_frame_web_socket_compression_supported

    def set_per_frame_web_socket_compression_supported(self, supported):
        self._check_frozen()
        _require_bool('per_frame_web_socket_compression_supported', supported)
        self._per_frame_web_socket_compression_supported = supported
        return self

    @property
    def per_message_web_socket_compression_supported(self):
        return self._per_message_web_socket_compression_supported

    def set_per_message_web_socket_compression_supported(self, supported):
        self._check_frozen()
        _require_bool('per_message_web_socket_compression_supported', supported)
        self._per_message_web_socket_compression_supported = supported
        return self

    @property
    def web_socket_compression_level(self):
        """Deflate level used for web-socket compression (0-9)."""
        return self._web_socket_compression_level

    def set_web_socket_compression_level(self, compression_level):
        self._check_frozen()
        _require_int('web_socket_compression_level', compression_level)
        if not (MIN_WEB_SOCKET_COMPRESSION_LEVEL <= compression_level
                <= MAX_WEB_SOCKET_COMPRESSION_LEVEL):
            _reject('web_socket_compression_level must be in range %d-%d, got %d'
                    % (MIN_WEB_SOCKET_COMPRESSION_LEVEL, MAX_WEB_SOCKET_COMPRESSION_LEVEL,
                       compression_level),
                    'web_socket_compression_level', compression_level)
        self._web_socket_compression_level = compression_level
        return self

    @property
    def web_socket_allow_server_no_context(self):
        return self._web_socket_allow_server_no_context

    def set_web_socket_allow_server_no_context(self, accept):
        self._check_frozen()
        _require_bool('web_socket_allow_server_no_context', accept)
        self._web_socket_allow_server_no_context = accept
        return self

    @property
    def web_socket_preferred_client_no_context(self):
        return self._web_socket_preferred_client_no_context

    def set_web_socket_preferred_client_no_context(self, accept):
        self._check_frozen()
        _require_bool('web_socket_preferred_client_no_context', accept)
        self._web_socket_preferred_client_no_context = accept
        return self

    # Transport (forwarded)

    @property
    def transport(self):
        """A copy of the composed TransportOptions."""
        return self._transport.copy()

    @property
    def receive_buffer_size(self):
        return self._transport.receive_buffer_size

    def set_receive_buffer_size(self, receive_buffer_size):
        self._check_frozen()
        _require_int('receive_buffer_size', receive_buffer_size)
        _check_sizes(self._max_message_size, receive_buffer_size)
        self._transport.set_receive_buffer_size(receive_buffer_size)
        return self

    @property
    def host(self):
        return self._transport.host

    def set_host(self, host):
        self._check_frozen()
        self._transport.set_host(host)
        return self

    @property
    def port(self):
        return self._transport.port

    def set_port(self, port):
        self._check_frozen()
        self._transport.set_port(port)
        return self

    @property
    def client_auth(self):
        return self._transport.client_auth

    def set_client_auth(self, client_auth):
        self._check_frozen()
        self._transport.set_client_auth(client_auth)
        return self

    @property
    def ssl(self):
        return self._transport.ssl

    def set_ssl(self, ssl):
        self._check_frozen()
        self._transport.set_ssl(ssl)
        return self

    @property
    def sni(self):
        return self._transport.sni

    def set_sni(self, sni):
        self._check_frozen()
        self._transport.set_sni(sni)
        return self

    @property
    def key_cert_options(self):
        return self._transport.key_cert_options

    def set_key_cert_options(self, options):
        self._check_frozen()
        self._transport.set_key_cert_options(options)
        return self

    @property
    def trust_options(self):
        return self._transport.trust_options

    def set_trust_options(self, options):
        self._check_frozen()
        self._transport.set_trust_options(options)
        return self

    @property
    def enabled_cipher_suites(self):
        return self._transport.enabled_cipher_suites

    def add_enabled_cipher_suite(self, suite):
        self._check_frozen()
        self._transport.add_enabled_cipher_suite(suite)
        return self

    def remove_enabled_cipher_suite(self, suite):
        self._check_frozen()
        self._transport.remove_enabled_cipher_suite(suite)
        return self

    @property
    def enabled_secure_transport_protocols(self):
        return self._transport.enabled_secure_transport_protocols

    def add_enabled_secure_transport_protocol(self, protocol):
        self._check_frozen()
        self._transport.add_enabled_secure_transport_protocol(protocol)
        return self

    def remove_enabled_secure_transport_protocol(self, protocol):
        self._check_frozen()
        self._transport.remove_enabled_secure_transport_protocol(protocol)
        return self

    @property
    def crl_paths(self):
        return self._transport.crl_paths

    def add_crl_path(self, crl_path):
        self._check_frozen()
        self._transport.add_crl_path(crl_path)
        return self

    @property
    def crl_values(self):
        return self._transport.crl_values

    def add_crl_value(self, crl_value):
        self._check_frozen()
        self._transport.add_crl_value(crl_value)
        return self

    @property
    def use_proxy_protocol(self):
        return self._transport.use_proxy_protocol

    def set_use_proxy_protocol(self, use_proxy_protocol):
        self._check_frozen()
        self._transport.set_use_proxy_protocol(use_proxy_protocol)
        return self

    @property
    def proxy_protocol_timeout(self):
        return self._transport.proxy_protocol_timeout

    def set_proxy_protocol_timeout(self, timeout):
        self._check_frozen()
        self._transport.set_proxy_protocol_timeout(timeout)
        return self

    @property
    def proxy_protocol_timeout_unit(self):
        return self._transport.proxy_protocol_timeout_unit

    def set_proxy_protocol_timeout_unit(self, unit):
        self._check_frozen()
        self._transport.set_proxy_protocol_timeout_unit(unit)
        return self

    # Comparison

    def _values(self):
        return (
            self._max_message_size, self._auto_client_id, self._max_client_id_length,
            self._timeout_on_connect, self._use_web_socket, self._web_socket_max_frame_size,
            self._per_frame_web_socket_compression_supported,
            self._per_message_web_socket_compression_supported,
            self._web_socket_compression_level,
            self._web_socket_allow_server_no_context,
            self._web_socket_preferred_client_no_context,
        )

    def __eq__(self, other):
        if not isinstance(other, ServerOptions):
            return NotImplemented
        return self._values() == other._values() and self._transport == other._transport

    __hash__ = None

    def __repr__(self):
        defaults = ServerOptions().to_record()
        changed = []
        for key, value in self.to_record().items():
            if defaults.get(key) == value:
                continue
            if isinstance(value, dict) and 'password' in value:
                value = dict(value, password='***')
            changed.append('%s=%r' % (key, value))
        return 'ServerOptions(%s)' % ', '.join(changed)

"""
Record conversion for server and transport options.

A record is a plain dict keyed by lowerCamelCase field names, holding
only JSON compatible values (CRL values are base64 text). Unknown keys
are ignored and every key is optional: absent keys keep their default.
"""

import base64
import binascii
import json

from .errors import InvalidArgument, ConfigurationError
from .logging import get_logger
from .options import ServerOptions
from .tls import key_cert_from_record, trust_from_record, key_cert_record_key, trust_record_key
from .transport import TransportOptions, is_int

_log = get_logger('mqttopts.converter')

INT = 'int'
BOOL = 'bool'
STR = 'str'
STR_SET = 'str_set'
STR_LIST = 'str_list'
BYTES_LIST = 'bytes_list'

# (record key, attribute, kind); setters are set_<attribute>
TRANSPORT_FIELDS = (
    ('host', 'host', STR),
    ('port', 'port', INT),
    ('clientAuth', 'client_auth', STR),
    ('ssl', 'ssl', BOOL),
    ('sni', 'sni', BOOL),
    ('receiveBufferSize', 'receive_buffer_size', INT),
    ('enabledCipherSuites', 'enabled_cipher_suites', STR_SET),
    ('enabledSecureTransportProtocols', 'enabled_secure_transport_protocols', STR_SET),
    ('crlPaths', 'crl_paths', STR_LIST),
    ('crlValues', 'crl_values', BYTES_LIST),
    ('useProxyProtocol', 'use_proxy_protocol', BOOL),
    ('proxyProtocolTimeout', 'proxy_protocol_timeout', INT),
    ('proxyProtocolTimeoutUnit', 'proxy_protocol_timeout_unit', STR),
)

SERVER_FIELDS = (
    ('maxMessageSize', 'max_message_size', INT),
    ('autoClientId', 'auto_client_id', BOOL),
    ('maxClientIdLength', 'max_client_id_length', INT),
    ('timeoutOnConnect', 'timeout_on_connect', INT),
    ('useWebSocket', 'use_web_socket', BOOL),
    ('webSocketMaxFrameSize', 'web_socket_max_frame_size', INT),
    ('perFrameWebSocketCompressionSupported', 'per_frame_web_socket_compression_supported', BOOL),
    ('perMessageWebSocketCompressionSupported', 'per_message_web_socket_compression_supported', BOOL),
    ('webSocketCompressionLevel', 'web_socket_compression_level', INT),
    ('webSocketAllowServerNoContext', 'web_socket_allow_server_no_context', BOOL),
    ('webSocketPreferredClientNoContext', 'web_socket_preferred_client_no_context', BOOL),
)

# Keys that are applied after every other key and then cross checked
_COUPLED = ('maxMessageSize', 'receiveBufferSize')

_ATTR_TO_KEY = dict((attr, key) for key, attr, _ in TRANSPORT_FIELDS + SERVER_FIELDS)


def _fail(key, value, reason):
    _log.debug('record rejected at %s=%r: %s', key, value, reason)
    raise ConfigurationError('invalid value for %s: %s' % (key, reason), (key,), (value,))


def _check_kind(key, kind, value):
    if kind == INT:
        ok = is_int(value)
    elif kind == BOOL:
        ok = isinstance(value, bool)
    elif kind == STR:
        ok = isinstance(value, str)
    elif kind in (STR_SET, STR_LIST):
        ok = isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)
    else:
        ok = isinstance(value, (list, tuple)) and all(
            isinstance(v, (str, bytes, bytearray)) for v in value)
    if not ok:
        _fail(key, value, 'expected %s, got %s' % (kind, type(value).__name__))


def _decode_bytes(key, value):
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    try:
        return base64.b64decode(value.encode('ascii'), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        _fail(key, value, 'not valid base64 (%s)' % e)


def _apply(target, key, attr, kind, value):
    """Apply one record value through the target's public mutators."""
    _check_kind(key, kind, value)
    try:
        if kind == STR_SET:
            singular = attr[:-1]
            for current in getattr(target, attr):
                getattr(target, 'remove_' + singular)(current)
            for item in value:
                getattr(target, 'add_' + singular)(item)
        elif kind == STR_LIST:
            for item in value:
                target.add_crl_path(item)
        elif kind == BYTES_LIST:
            for item in value:
                target.add_crl_value(_decode_bytes(key, item))
        else:
            getattr(target, 'set_' + attr)(value)
    except InvalidArgument as e:
        raise ConfigurationError('invalid value for %s: %s' % (key, e.message),
                                 (key,), (value,)) from e


def _apply_tls(target, record):
    try:
        key, options = key_cert_from_record(record)
        if options is not None:
            target.set_key_cert_options(options)
        key, options = trust_from_record(record)
        if options is not None:
            target.set_trust_options(options)
    except InvalidArgument as e:
        raise ConfigurationError(e.message, (e.field,), (e.value,)) from e


def _require_record(record):
    if not isinstance(record, dict):
        raise ConfigurationError('record must be a dict, got %s' % type(record).__name__)


def transport_to_record(options):
    """Return the record for a TransportOptions (or anything exposing its fields)."""
    record = {}
    for key, attr, kind in TRANSPORT_FIELDS:
        value = getattr(options, attr)
        if kind == BYTES_LIST:
            value = [base64.b64encode(v).decode('ascii') for v in value]
        elif kind in (STR_SET, STR_LIST):
            value = list(value)
        record[key] = value
    if options.key_cert_options is not None:
        record[key_cert_record_key(options.key_cert_options)] = options.key_cert_options.to_record()
    if options.trust_options is not None:
        record[trust_record_key(options.trust_options)] = options.trust_options.to_record()
    return record


def transport_from_record(record):
    """Build TransportOptions from a record.

    Raises:
        ConfigurationError: If a recognized key holds an invalid value.
    """
    _require_record(record)
    options = TransportOptions()
    for key, attr, kind in TRANSPORT_FIELDS:
        if key in record:
            _apply(options, key, attr, kind, record[key])
    _apply_tls(options, record)
    return options


def server_to_record(options):
    """Return the record for ServerOptions, transport keys first."""
    record = transport_to_record(options)
    for key, attr, _ in SERVER_FIELDS:
        record[key] = getattr(options, attr)
    return record


def _overlay(options, record):
    """Overlay a record onto ServerOptions, then cross check the coupled sizes once."""
    for key, attr, kind in TRANSPORT_FIELDS + SERVER_FIELDS:
        if key in record and key not in _COUPLED:
            _apply(options, key, attr, kind, record[key])
    _apply_tls(options, record)

    sizes = {}
    for key in _COUPLED:
        if key in record:
            value = record[key]
            _check_kind(key, INT, value)
            sizes[key] = value
    try:
        options._apply_sizes(sizes.get('maxMessageSize'), sizes.get('receiveBufferSize'))
    except InvalidArgument as e:
        key = _ATTR_TO_KEY.get(e.field, e.field)
        raise ConfigurationError('invalid value for %s: %s' % (key, e.message),
                                 (key,), (e.value,)) from e

    try:
        options.validate()
    except InvalidArgument as e:
        raise ConfigurationError(
            'maxMessageSize and receiveBufferSize conflict: %s' % e.message,
            _COUPLED, (options.max_message_size, options.receive_buffer_size)) from e
    return options


def server_from_record(record):
    """Build ServerOptions from a record.

    Starts from defaults, overlays every recognized key and checks the
    receive buffer / max message size rule once at the end.

    Raises:
        ConfigurationError: If a value is invalid or the sizes conflict.
    """
    _require_record(record)
    return _overlay(ServerOptions(), record)


def overlay_keywords(options, kwargs):
    """Overlay snake_case keyword arguments onto freshly built ServerOptions.

    Unknown names are ignored. key_cert_options and trust_options take
    option objects rather than records.
    """
    record = {}
    for name, value in kwargs.items():
        if name in _ATTR_TO_KEY:
            record[_ATTR_TO_KEY[name]] = value
        elif name in ('key_cert_options', 'trust_options'):
            try:
                getattr(options, 'set_' + name)(value)
            except InvalidArgument as e:
                raise ConfigurationError(e.message, (name,), (value,)) from e
        else:
            _log.debug('ignoring unknown option %s', name)
    return _overlay(options, record)


def to_json(options, **kwargs):
    """Serialize ServerOptions as JSON text; kwargs go to json.dumps."""
    return json.dumps(server_to_record(options), **kwargs)


def from_json(text):
    """Parse JSON text into ServerOptions.

    Raises:
        ConfigurationError: If the text is not JSON or the record is invalid.
    """
    try:
        record = json.loads(text)
    except ValueError as e:
        raise ConfigurationError('invalid JSON: %s' % e) from e
    return server_from_record(record)

"""
mqttopts - Validated options for MQTT servers

Protocol limits, web-socket transport settings and TCP/TLS listener
settings in one value object, with record and JSON conversion.
"""

__version__ = '1.0.0'

from .options import (
    ServerOptions, web_socket_subprotocols,
    DEFAULT_PORT, DEFAULT_TLS_PORT, MQTT_SUBPROTOCOL_CSV_LIST,
)
from .transport import TransportOptions, ClientAuth, TimeUnit
from .tls import PemKeyCertOptions, PemTrustOptions, JksOptions, PfxOptions
from .errors import OptionsError, InvalidArgument, ConfigurationError, FrozenOptionsError
from .converter import to_json, from_json

# Convenience aliases
MqttServerOptions = ServerOptions
BaseTransportOptions = TransportOptions

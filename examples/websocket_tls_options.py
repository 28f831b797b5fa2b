"""
Web-socket over TLS Example
===========================

Options for MQTT over secure web-sockets, saved to JSON and loaded back
the way a deployment tool would.

This example demonstrates:
- TLS port and PEM key material
- Web-socket framing and compression settings
- JSON round trip
"""

from mqttopts import (
    ServerOptions, PemKeyCertOptions, ClientAuth, DEFAULT_TLS_PORT,
    web_socket_subprotocols,
)

opts = (ServerOptions()
        .set_port(DEFAULT_TLS_PORT)
        .set_ssl(True)
        .set_client_auth(ClientAuth.REQUEST)
        .set_key_cert_options(PemKeyCertOptions(['server.crt'], ['server.key']))
        .set_use_web_socket(True)
        .set_web_socket_max_frame_size(131072)
        .set_web_socket_compression_level(3))

text = opts.to_json(indent=2, sort_keys=True)
print(text)

loaded = ServerOptions.from_json(text)
assert loaded == opts
print('[mqttopts] sub-protocols: %s' % ', '.join(web_socket_subprotocols()))

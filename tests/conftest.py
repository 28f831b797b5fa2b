"""
pytest configuration and fixtures for mqttopts tests.
"""

import pytest
from mqttopts.options import ServerOptions
from mqttopts.transport import ClientAuth, TimeUnit
from mqttopts.tls import PemKeyCertOptions, JksOptions


@pytest.fixture
def server_options():
    """Provide ServerOptions with defaults."""
    return ServerOptions()


@pytest.fixture
def full_options():
    """Provide ServerOptions with every field moved off its default."""
    return (ServerOptions()
            .set_host('127.0.0.1')
            .set_port(8883)
            .set_client_auth(ClientAuth.REQUIRED)
            .set_ssl(True)
            .set_sni(True)
            .set_key_cert_options(PemKeyCertOptions(['server.crt'], ['server.key']))
            .set_trust_options(JksOptions('truststore.jks', 'changeit'))
            .add_enabled_cipher_suite('TLS_AES_128_GCM_SHA256')
            .remove_enabled_secure_transport_protocol('TLSv1.2')
            .add_crl_path('/etc/mqtt/revoked.crl')
            .add_crl_value(b'\x30\x82\x01\x0a')
            .set_receive_buffer_size(32768)
            .set_max_message_size(16384)
            .set_use_proxy_protocol(True)
            .set_proxy_protocol_timeout(500)
            .set_proxy_protocol_timeout_unit(TimeUnit.MILLISECONDS)
            .set_auto_client_id(False)
            .set_max_client_id_length(64)
            .set_timeout_on_connect(0)
            .set_use_web_socket(True)
            .set_web_socket_max_frame_size(131072)
            .set_per_frame_web_socket_compression_supported(False)
            .set_per_message_web_socket_compression_supported(False)
            .set_web_socket_compression_level(9)
            .set_web_socket_allow_server_no_context(True)
            .set_web_socket_preferred_client_no_context(True))

"""
Basic Server Options Example
============================

Build options for a plain MQTT listener, check them and hand a frozen
copy to the server.

This example demonstrates:
- Defaults (port 1883, 8092 byte messages)
- Chained setters
- The receive buffer / max message size rule
"""

from mqttopts import ServerOptions, InvalidArgument

opts = (ServerOptions()
        .set_host('0.0.0.0')
        .set_receive_buffer_size(65536)
        .set_max_message_size(32768)
        .set_max_client_id_length(64))

# A message size the receive buffer cannot hold is refused
try:
    opts.set_max_message_size(131072)
except InvalidArgument as e:
    print('[mqttopts] refused: %s' % e.message)

print('[mqttopts] max message size still %d' % opts.max_message_size)

frozen = opts.copy().freeze()
print('[mqttopts] handing to server: %r' % frozen)

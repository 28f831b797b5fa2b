"""
Key and trust material for TLS-enabled MQTT listeners.

Only file locations and store passwords are held here; nothing is read
from disk. Record keys follow the server option naming scheme:
pemKeyCertOptions / keyStoreOptions / pfxKeyCertOptions for key
material and pemTrustOptions / trustStoreOptions / pfxTrustOptions for
trust material.
"""

from .errors import InvalidArgument


def _str_list(values, name):
    if values is None:
        return []
    if isinstance(values, str) or not isinstance(values, (list, tuple)):
        raise InvalidArgument('%s must be a list of strings' % name, name, values)
    for v in values:
        if not isinstance(v, str):
            raise InvalidArgument('%s must be a list of strings' % name, name, values)
    return list(values)


def _opt_str(value, name):
    if value is not None and not isinstance(value, str):
        raise InvalidArgument('%s must be a string' % name, name, value)
    return value


def _path(value, name):
    if not isinstance(value, str):
        raise InvalidArgument('%s must be a string, got %r' % (name, value), name, value)
    return value


class PemKeyCertOptions:
    """PEM certificate chain and private key file pairs."""
    __slots__ = ('cert_paths', 'key_paths')

    KIND = 'pem'

    def __init__(self, cert_paths=None, key_paths=None):
        self.cert_paths = _str_list(cert_paths, 'certPaths')
        self.key_paths = _str_list(key_paths, 'keyPaths')
        if len(self.cert_paths) != len(self.key_paths):
            raise InvalidArgument('certPaths and keyPaths must have the same length',
                                  'keyPaths', self.key_paths)

    def add_cert_path(self, path):
        self.cert_paths.append(_path(path, 'certPath'))
        return self

    def add_key_path(self, path):
        self.key_paths.append(_path(path, 'keyPath'))
        return self

    def copy(self):
        return PemKeyCertOptions(self.cert_paths, self.key_paths)

    def to_record(self):
        return {'certPaths': list(self.cert_paths), 'keyPaths': list(self.key_paths)}

    @classmethod
    def from_record(cls, record):
        return cls(record.get('certPaths'), record.get('keyPaths'))

    def __eq__(self, other):
        if not isinstance(other, PemKeyCertOptions):
            return NotImplemented
        return self.cert_paths == other.cert_paths and self.key_paths == other.key_paths

    def __repr__(self):
        return 'PemKeyCertOptions(cert_paths=%r, key_paths=%r)' % (self.cert_paths, self.key_paths)


class PemTrustOptions:
    """PEM encoded CA certificates trusted for client authentication."""
    __slots__ = ('cert_paths',)

    KIND = 'pem'

    def __init__(self, cert_paths=None):
        self.cert_paths = _str_list(cert_paths, 'certPaths')

    def add_cert_path(self, path):
        self.cert_paths.append(_path(path, 'certPath'))
        return self

    def copy(self):
        return PemTrustOptions(self.cert_paths)

    def to_record(self):
        return {'certPaths': list(self.cert_paths)}

    @classmethod
    def from_record(cls, record):
        return cls(record.get('certPaths'))

    def __eq__(self, other):
        if not isinstance(other, PemTrustOptions):
            return NotImplemented
        return self.cert_paths == other.cert_paths

    def __repr__(self):
        return 'PemTrustOptions(cert_paths=%r)' % (self.cert_paths,)


class _StoreOptions:
    """Password protected key store at a path."""
    __slots__ = ('path', 'password')

    KIND = None

    def __init__(self, path=None, password=None):
        self.path = _opt_str(path, 'path')
        self.password = _opt_str(password, 'password')

    def copy(self):
        return type(self)(self.path, self.password)

    def to_record(self):
        record = {}
        if self.path is not None:
            record['path'] = self.path
        if self.password is not None:
            record['password'] = self.password
        return record

    @classmethod
    def from_record(cls, record):
        return cls(record.get('path'), record.get('password'))

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.path == other.path and self.password == other.password

    def __repr__(self):
        # Password is never printed
        return '%s(path=%r)' % (type(self).__name__, self.path)


class JksOptions(_StoreOptions):
    """Java KeyStore file, usable for key or trust material."""
    __slots__ = ()

    KIND = 'jks'


class PfxOptions(_StoreOptions):
    """PKCS#12 file, usable for key or trust material."""
    __slots__ = ()

    KIND = 'pfx'


# record key -> class, for each side
KEY_CERT_KEYS = {
    'pemKeyCertOptions': PemKeyCertOptions,
    'keyStoreOptions': JksOptions,
    'pfxKeyCertOptions': PfxOptions,
}

TRUST_KEYS = {
    'pemTrustOptions': PemTrustOptions,
    'trustStoreOptions': JksOptions,
    'pfxTrustOptions': PfxOptions,
}


def _record_key(options, table):
    for key, cls in table.items():
        if type(options) is cls:
            return key
    raise InvalidArgument('unsupported options type %s' % type(options).__name__,
                          None, options)


def key_cert_record_key(options):
    """Return the record key under which key material is stored."""
    return _record_key(options, KEY_CERT_KEYS)


def trust_record_key(options):
    """Return the record key under which trust material is stored."""
    return _record_key(options, TRUST_KEYS)


def _from_record(record, table, what):
    found = [k for k in table if k in record]
    if not found:
        return None, None
    if len(found) > 1:
        raise InvalidArgument('only one %s may be given, got %s' % (what, ', '.join(found)),
                              found[0], found)
    key = found[0]
    value = record[key]
    if not isinstance(value, dict):
        raise InvalidArgument('%s must be an object' % key, key, value)
    return key, table[key].from_record(value)


def key_cert_from_record(record):
    """Build key material from whichever key cert entry the record holds.

    Returns:
        (record_key, options) tuple, or (None, None) when absent
    """
    return _from_record(record, KEY_CERT_KEYS, 'key cert options')


def trust_from_record(record):
    """Build trust material from whichever trust entry the record holds.

    Returns:
        (record_key, options) tuple, or (None, None) when absent
    """
    return _from_record(record, TRUST_KEYS, 'trust options')
